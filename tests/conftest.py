# tests/conftest.py
from __future__ import annotations

from typing import Awaitable, Callable

import pytest

from netswitch.contracts.models import CurrentContext, Network, RequestInfo, Site
from netswitch.core.cache import MemoryObjectCache
from netswitch.core.config import Settings
from netswitch.core.context import SwitcherContext
from netswitch.core.directory import NetworkDirectory
from netswitch.core.i18n import Translator
from netswitch.core.nonce import NonceService
from netswitch.hosts.memory import InMemoryMultisiteHost, SiteRecord, UserRecord

SUPER_ADMIN = 1
MEMBER = 2  # member of the first site of network 2 only
OUTSIDER = 3
CAP_MANAGER = 4  # holds manage_network without being a super admin

_DOMAINS = {1: "a.example.com", 2: "c.example.com", 3: "b.example.com"}


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def build_host(network_count: int = 3, sites_per_network: int = 2) -> InMemoryMultisiteHost:
    """Networks 1..n; ids 1-3 use a/c/b.example.com, the rest netN.example.com."""
    networks = [
        Network(id=i, domain=_DOMAINS.get(i, f"net{i}.example.com"), path="/")
        for i in range(1, network_count + 1)
    ]

    sites: list[SiteRecord] = []
    blog_id = 0
    for network in networks:
        for n in range(sites_per_network):
            blog_id += 1
            sites.append(
                SiteRecord(
                    site=Site(
                        blog_id=blog_id,
                        network_id=network.id,
                        domain=network.domain,
                        path="/" if n == 0 else f"/site{n}/",
                    )
                )
            )

    first_blog_of_2 = next((s.site.blog_id for s in sites if s.site.network_id == 2), None)
    users = [
        UserRecord(
            id=SUPER_ADMIN,
            login="admin",
            super_admin=True,
            blogs={s.site.blog_id for s in sites},
            meta={"admin_color": "midnight"},
        ),
        UserRecord(
            id=MEMBER,
            login="editor",
            capabilities={"edit_posts"},
            blogs={first_blog_of_2} if first_blog_of_2 else set(),
        ),
        UserRecord(id=OUTSIDER, login="visitor"),
        UserRecord(id=CAP_MANAGER, login="netops", capabilities={"manage_network"}),
    ]

    return InMemoryMultisiteHost(
        networks=networks,
        sites=sites,
        users=users,
        network_options={1: {"site_name": "Main Network"}},
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(nonce_secret="test-secret", log_json=False, host_config_paths=[])


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryObjectCache:
    return MemoryObjectCache(clock=clock)


@pytest.fixture
def nonces(clock: FakeClock) -> NonceService:
    return NonceService("test-secret", 86400, clock=clock)


@pytest.fixture
def translator() -> Translator:
    return Translator("wp-multinetwork-switcher")


@pytest.fixture
def host() -> InMemoryMultisiteHost:
    return build_host()


CtxFactory = Callable[..., Awaitable[SwitcherContext]]


@pytest.fixture
def make_ctx(settings, cache, nonces, translator) -> CtxFactory:
    """Build a SwitcherContext the way the HTTP dependency does."""

    async def _make(
        host: InMemoryMultisiteHost,
        *,
        user_id: int | None = SUPER_ADMIN,
        domain: str = "a.example.com",
        secure: bool = True,
        in_admin: bool = True,
    ) -> SwitcherContext:
        directory = NetworkDirectory(host, cache, settings)
        current = await directory.get_current_network(domain, "/")
        can_manage = bool(user_id) and await host.user_can(user_id, "manage_network")
        color = (await host.get_user_meta(user_id, "admin_color") if user_id else None)
        return SwitcherContext(
            current=CurrentContext(
                current_network_id=current.id if current else None,
                user_id=user_id,
                can_manage_network=can_manage,
                color_scheme=color or "fresh",
            ),
            request=RequestInfo(is_secure=secure, in_admin=in_admin),
            current_network=current,
            directory=directory,
            nonces=nonces,
            translator=translator,
            settings=settings,
        )

    return _make
