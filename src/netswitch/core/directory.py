# netswitch/core/directory.py
"""
Network directory – the read side every renderer and handler shares.

One :class:`NetworkDirectory` is built per request. It memoizes the
network list for the lifetime of that request and keeps derived values
(site counts, favicons, super-admin total) in the shared object cache.
Unknown networks produce empty results, never exceptions.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from netswitch.contracts.host import MultisiteHost
from netswitch.contracts.models import Network, NetworkSummary
from netswitch.core.cache import ObjectCache
from netswitch.core.config import Settings

logger = logging.getLogger(__name__)

SITE_COUNT_KEY = "wpmn_network_sites_count_{}"
FAVICON_KEY = "wpmn_network_favicon_{}"
SUPER_ADMIN_COUNT_KEY = "wpmn_super_admin_count"


def build_switch_url(
    network: Network,
    *,
    secure: bool,
    in_admin: bool,
    admin_path: str = "wp-admin/",
) -> str:
    """URL that lands on ``network``, in its admin area when ``in_admin``."""
    scheme = "https" if secure else "http"
    url = f"{scheme}://{network.domain}{network.path}"
    if in_admin:
        url += admin_path
    return url


def build_network_admin_url(
    network: Network, *, secure: bool, admin_path: str = "wp-admin/"
) -> str:
    scheme = "https" if secure else "http"
    return f"{scheme}://{network.domain}{network.path}{admin_path}network/"


class NetworkDirectory:
    def __init__(
        self,
        host: MultisiteHost,
        cache: ObjectCache,
        settings: Settings,
    ) -> None:
        self.host = host
        self.cache = cache
        self.settings = settings
        self._networks: list[Network] | None = None

    # -- networks ------------------------------------------------------------

    async def list_networks(self) -> list[Network]:
        """Up to ``networks_limit`` networks ordered by domain, memoized per request."""
        if self._networks is not None:
            return self._networks

        raw = await self.host.get_networks(
            number=self.settings.networks_limit, orderby="domain"
        )
        self._networks = [await self._with_display_name(n) for n in raw]
        return self._networks

    async def get_network(self, network_id: int) -> Network | None:
        if self._networks is not None:
            for network in self._networks:
                if network.id == network_id:
                    return network

        network = await self.host.get_network(network_id)
        if network is None:
            return None
        return await self._with_display_name(network)

    async def get_current_network(self, domain: str, path: str = "/") -> Network | None:
        """Resolve the network serving ``domain``/``path``.

        Falls back to ``default_network_id`` when no network matches.
        """
        network = await self.host.get_network_by_path(domain, path)
        if network is None:
            return await self.get_network(self.settings.default_network_id)
        return await self._with_display_name(network)

    async def get_display_name(self, network_id: int) -> str:
        network = await self.get_network(network_id)
        return network.display_name if network else ""

    async def _with_display_name(self, network: Network) -> Network:
        site_name = await self.host.get_network_option(network.id, "site_name")
        return replace(network, display_name=site_name or network.domain)

    # -- derived, cached across requests -------------------------------------

    async def get_site_count(self, network_id: int) -> int:
        async def compute() -> int:
            return await self.host.count_sites(
                network_id, limit=self.settings.site_count_limit
            )

        return int(
            await self.cache.remember(
                SITE_COUNT_KEY.format(network_id), self.settings.cache_ttl, compute
            )
        )

    async def get_favicon(self, network_id: int) -> str | None:
        """Site icon of the primary site, else theme favicon, else the default logo."""
        key = FAVICON_KEY.format(network_id)
        cached = await self.cache.get(key)
        if cached is not None:
            return cached

        if await self.host.get_network(network_id) is None:
            return None

        url = None
        sites = await self.host.get_sites(network_id, number=1)
        if sites:
            primary = sites[0]
            url = await self.host.get_site_icon_url(primary.blog_id)
            if not url:
                url = await self.host.get_theme_favicon_url(primary.blog_id)
        if not url:
            url = self.settings.default_logo_url

        await self.cache.set(key, url, self.settings.cache_ttl)
        return url

    async def count_super_admins(self) -> int:
        return int(
            await self.cache.remember(
                SUPER_ADMIN_COUNT_KEY,
                self.settings.cache_ttl,
                self.host.count_super_admins,
            )
        )

    async def summaries(self, current_network_id: int | None) -> list[NetworkSummary]:
        return [
            NetworkSummary(
                network=network,
                site_count=await self.get_site_count(network.id),
                is_current=network.id == current_network_id,
            )
            for network in await self.list_networks()
        ]

    # -- access --------------------------------------------------------------

    async def user_can_access_network(self, user_id: int | None, network_id: int) -> bool:
        """Super admins reach every network; others need a site membership in it."""
        if not user_id or not await self.host.user_exists(user_id):
            return False
        if await self.host.is_super_admin(user_id):
            return True

        sites = await self.host.get_sites(
            network_id, number=self.settings.access_sites_limit
        )
        for site in sites:
            if await self.host.is_user_member_of_blog(user_id, site.blog_id):
                return True
        return False
