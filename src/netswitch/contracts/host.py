# netswitch/contracts/host.py
"""
Host collaborator contracts.

The switcher never talks to WordPress storage directly. Everything it
needs from the host platform goes through :class:`MultisiteHost`, and
everything it offers to the host goes through :class:`ExtensionPoints`.
Adapters live in :mod:`netswitch.hosts`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol

from netswitch.contracts.models import Network, Site


@dataclass(frozen=True)
class HostEnvironment:
    """Facts checked once at activation time."""

    multisite: bool
    multi_network: bool
    version: str


class MultisiteHost(ABC):
    """Read-only view of a multisite installation.

    Implementations must return ``None`` (or an empty result) for unknown
    ids instead of raising.
    """

    @abstractmethod
    async def environment(self) -> HostEnvironment: ...

    # -- networks ------------------------------------------------------------

    @abstractmethod
    async def get_networks(
        self, *, number: int = 100, orderby: str = "domain"
    ) -> list[Network]: ...

    @abstractmethod
    async def get_network(self, network_id: int) -> Network | None: ...

    @abstractmethod
    async def get_network_by_path(self, domain: str, path: str = "/") -> Network | None:
        """Network whose domain matches and whose path is the longest prefix of ``path``."""
        ...

    @abstractmethod
    async def get_network_option(
        self, network_id: int, key: str, default: Any = None
    ) -> Any: ...

    # -- sites ---------------------------------------------------------------

    @abstractmethod
    async def count_sites(self, network_id: int, *, limit: int = 1000) -> int: ...

    @abstractmethod
    async def get_sites(self, network_id: int, *, number: int = 100) -> list[Site]: ...

    @abstractmethod
    async def get_site_url(self, blog_id: int) -> str | None: ...

    @abstractmethod
    async def get_site_icon_url(self, blog_id: int) -> str | None: ...

    @abstractmethod
    async def get_theme_favicon_url(self, blog_id: int) -> str | None: ...

    # -- users ---------------------------------------------------------------

    @abstractmethod
    async def user_exists(self, user_id: int) -> bool: ...

    @abstractmethod
    async def is_super_admin(self, user_id: int) -> bool: ...

    @abstractmethod
    async def user_can(self, user_id: int, capability: str) -> bool: ...

    @abstractmethod
    async def is_user_member_of_blog(self, user_id: int, blog_id: int) -> bool: ...

    @abstractmethod
    async def get_user_meta(self, user_id: int, key: str) -> str | None: ...

    @abstractmethod
    async def count_super_admins(self) -> int: ...

    async def close(self) -> None:
        """Release connections. Default: nothing to release."""
        return None


Callback = Callable[..., Any | Awaitable[Any]]


class ExtensionPoints(Protocol):
    """Named extension points the hosting web-admin framework exposes."""

    def add_action(self, name: str, callback: Callback, priority: int = 10) -> None: ...

    def has_action(self, name: str) -> bool: ...

    async def do_action(self, name: str, *args: Any) -> None: ...
