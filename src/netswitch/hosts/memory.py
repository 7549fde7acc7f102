# netswitch/hosts/memory.py
"""
In-memory multisite host, seeded from YAML.

Expected structure::

    host:
      version: "6.8"
      multisite: true
      multi_network: true
    networks:
      - id: 1
        domain: a.example.com
        path: /
        options:
          site_name: "Network A"
    sites:
      - blog_id: 1
        network_id: 1
        domain: a.example.com
        path: /
        url: https://a.example.com/
        icon: https://a.example.com/icon.png
    users:
      - id: 1
        login: admin
        super_admin: true
        capabilities: [manage_network]
        blogs: [1]
        meta:
          admin_color: midnight

Later files override earlier ones entry by entry (networks by ``id``,
sites by ``blog_id``, users by ``id``).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from netswitch.contracts.host import HostEnvironment, MultisiteHost
from netswitch.contracts.models import Network, Site
from netswitch.core.loader import load_yaml_files, substitute_env_vars

logger = logging.getLogger(__name__)


@dataclass
class UserRecord:
    id: int
    login: str
    super_admin: bool = False
    capabilities: set[str] = field(default_factory=set)
    blogs: set[int] = field(default_factory=set)
    meta: dict[str, str] = field(default_factory=dict)


@dataclass
class SiteRecord:
    site: Site
    url: str | None = None
    icon: str | None = None
    theme_favicon: str | None = None


class InMemoryMultisiteHost(MultisiteHost):
    def __init__(
        self,
        *,
        networks: Iterable[Network] = (),
        sites: Iterable[SiteRecord] = (),
        users: Iterable[UserRecord] = (),
        network_options: dict[int, dict[str, Any]] | None = None,
        environment: HostEnvironment | None = None,
    ) -> None:
        self.networks: dict[int, Network] = {n.id: n for n in networks}
        self.sites: dict[int, SiteRecord] = {s.site.blog_id: s for s in sites}
        self.users: dict[int, UserRecord] = {u.id: u for u in users}
        self.network_options: dict[int, dict[str, Any]] = network_options or {}
        self._environment = environment or HostEnvironment(
            multisite=True, multi_network=True, version="6.8"
        )

    async def environment(self) -> HostEnvironment:
        return self._environment

    # -- networks ------------------------------------------------------------

    async def get_networks(
        self, *, number: int = 100, orderby: str = "domain"
    ) -> list[Network]:
        if orderby == "domain":
            ordered = sorted(self.networks.values(), key=lambda n: (n.domain, n.path, n.id))
        else:
            ordered = sorted(self.networks.values(), key=lambda n: n.id)
        return ordered[:number]

    async def get_network(self, network_id: int) -> Network | None:
        return self.networks.get(network_id)

    async def get_network_by_path(self, domain: str, path: str = "/") -> Network | None:
        domain = domain.lower()
        candidates = [
            n
            for n in self.networks.values()
            if n.domain.lower() == domain and path.startswith(n.path)
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda n: len(n.path))

    async def get_network_option(
        self, network_id: int, key: str, default: Any = None
    ) -> Any:
        return self.network_options.get(network_id, {}).get(key, default)

    # -- sites ---------------------------------------------------------------

    def _network_sites(self, network_id: int) -> list[Site]:
        return sorted(
            (r.site for r in self.sites.values() if r.site.network_id == network_id),
            key=lambda s: s.blog_id,
        )

    async def count_sites(self, network_id: int, *, limit: int = 1000) -> int:
        return min(len(self._network_sites(network_id)), limit)

    async def get_sites(self, network_id: int, *, number: int = 100) -> list[Site]:
        return self._network_sites(network_id)[:number]

    async def get_site_url(self, blog_id: int) -> str | None:
        record = self.sites.get(blog_id)
        if record is None:
            return None
        return record.url or f"http://{record.site.domain}{record.site.path}"

    async def get_site_icon_url(self, blog_id: int) -> str | None:
        record = self.sites.get(blog_id)
        return record.icon if record else None

    async def get_theme_favicon_url(self, blog_id: int) -> str | None:
        record = self.sites.get(blog_id)
        return record.theme_favicon if record else None

    # -- users ---------------------------------------------------------------

    async def user_exists(self, user_id: int) -> bool:
        return user_id in self.users

    async def is_super_admin(self, user_id: int) -> bool:
        user = self.users.get(user_id)
        return bool(user and user.super_admin)

    async def user_can(self, user_id: int, capability: str) -> bool:
        user = self.users.get(user_id)
        if user is None:
            return False
        return user.super_admin or capability in user.capabilities

    async def is_user_member_of_blog(self, user_id: int, blog_id: int) -> bool:
        user = self.users.get(user_id)
        return bool(user and blog_id in user.blogs)

    async def get_user_meta(self, user_id: int, key: str) -> str | None:
        user = self.users.get(user_id)
        return user.meta.get(key) if user else None

    async def count_super_admins(self) -> int:
        return sum(1 for u in self.users.values() if u.super_admin)


# -- construction from config ------------------------------------------------


def _merge_by(key: str, docs: list[dict[str, Any]], section: str) -> list[dict[str, Any]]:
    merged: dict[Any, dict[str, Any]] = {}
    for data in docs:
        for entry in data.get(section) or []:
            if key not in entry:
                raise ValueError(f"{section} entry missing required '{key}': {entry}")
            merged[entry[key]] = {**merged.get(entry[key], {}), **entry}
    return list(merged.values())


def host_from_config(docs: list[dict[str, Any]]) -> InMemoryMultisiteHost:
    docs = [substitute_env_vars(d) for d in docs]

    host_cfg: dict[str, Any] = {}
    for data in docs:
        host_cfg.update(data.get("host") or {})

    networks: list[Network] = []
    options: dict[int, dict[str, Any]] = {}
    for raw in _merge_by("id", docs, "networks"):
        network = Network(
            id=int(raw["id"]),
            domain=str(raw["domain"]),
            path=str(raw.get("path", "/")),
        )
        networks.append(network)
        options[network.id] = dict(raw.get("options") or {})

    sites = [
        SiteRecord(
            site=Site(
                blog_id=int(raw["blog_id"]),
                network_id=int(raw["network_id"]),
                domain=str(raw["domain"]),
                path=str(raw.get("path", "/")),
            ),
            url=raw.get("url"),
            icon=raw.get("icon"),
            theme_favicon=raw.get("theme_favicon"),
        )
        for raw in _merge_by("blog_id", docs, "sites")
    ]

    users = [
        UserRecord(
            id=int(raw["id"]),
            login=str(raw.get("login", f"user{raw['id']}")),
            super_admin=bool(raw.get("super_admin", False)),
            capabilities=set(raw.get("capabilities") or []),
            blogs={int(b) for b in raw.get("blogs") or []},
            meta={k: str(v) for k, v in (raw.get("meta") or {}).items()},
        )
        for raw in _merge_by("id", docs, "users")
    ]

    environment = HostEnvironment(
        multisite=bool(host_cfg.get("multisite", True)),
        multi_network=bool(host_cfg.get("multi_network", True)),
        version=str(host_cfg.get("version", "6.8")),
    )

    logger.info(
        "In-memory host: %d network(s), %d site(s), %d user(s)",
        len(networks),
        len(sites),
        len(users),
    )
    return InMemoryMultisiteHost(
        networks=networks,
        sites=sites,
        users=users,
        network_options=options,
        environment=environment,
    )


def load_memory_host(patterns: Iterable[str]) -> InMemoryMultisiteHost:
    return host_from_config(load_yaml_files(patterns))
