# netswitch/contracts/models.py
"""
Read-only views over host multisite data.

All entities are snapshots recomputed per HTTP request; nothing here is
persisted by this package.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Network:
    """A network (row of ``wp_site``).

    Attributes:
        id: Network id.
        domain: Primary domain, without scheme.
        path: Path prefix, always ending with ``/``.
        display_name: Custom ``site_name`` option, or ``domain`` if unset.
    """

    id: int
    domain: str
    path: str = "/"
    display_name: str = ""

    @property
    def address(self) -> str:
        return f"{self.domain}{self.path}"


@dataclass(frozen=True)
class Site:
    """A site (row of ``wp_blogs``) within a network."""

    blog_id: int
    network_id: int
    domain: str
    path: str = "/"


@dataclass(frozen=True)
class NetworkSummary:
    network: Network
    site_count: int
    is_current: bool = False


@dataclass(frozen=True)
class CurrentContext:
    """Who is asking and from which network, computed once per request."""

    current_network_id: int | None
    user_id: int | None
    can_manage_network: bool
    color_scheme: str = "fresh"


@dataclass(frozen=True)
class RequestInfo:
    """Transport facts about the incoming HTTP request."""

    is_secure: bool = False
    in_admin: bool = False
