# netswitch/main.py
"""
Network switcher application factory.

Creates a FastAPI application that plays the host web-admin framework:
it owns the hook registry, fires extension points from its routes, and
runs the plugin's activation checks and startup routine in the lifespan.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import cast

from fastapi import FastAPI

from netswitch.api.admin import router as admin_router
from netswitch.api.ajax import router as ajax_router
from netswitch.api.discovery import router as discovery_router
from netswitch.contracts.host import MultisiteHost
from netswitch.core.activation import activate, deactivate
from netswitch.core.cache import ObjectCache, get_object_cache
from netswitch.core.config import Settings, settings as default_settings
from netswitch.core.errors import EnvironmentUnsupported
from netswitch.core.hooks import HookRegistry
from netswitch.core.i18n import Translator
from netswitch.core.infrastructure import Infrastructure
from netswitch.core.logging import configure_logging
from netswitch.core.nonce import NonceService
from netswitch.hosts import create_host
from netswitch.plugin import NetworkSwitcherPlugin

logger = logging.getLogger(__name__)


# -- Lifespan ------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Activation checks, then the plugin startup routine."""
    infra = cast(Infrastructure, app.state.infra)

    try:
        await activate(
            infra.host,
            infra.translator,
            min_version=infra.settings.min_host_version,
        )
    except EnvironmentUnsupported as exc:
        logger.error("%s: %s", exc.title, exc.message)
        await infra.host.close()
        raise

    infra.environment = await infra.host.environment()
    NetworkSwitcherPlugin().register(infra.hooks, infra.environment)

    yield

    await deactivate(infra.cache)
    await infra.host.close()


# -- Application factory -------------------------------------------------------


def create_app(
    settings: Settings | None = None,
    *,
    host: MultisiteHost | None = None,
    cache: ObjectCache | None = None,
) -> FastAPI:
    """Build and wire the switcher application."""
    settings = settings if settings is not None else default_settings
    configure_logging(settings.log_level, json=settings.log_json)
    logger.info("Creating switcher application (env=%s)", settings.app_env)

    infra = Infrastructure(
        settings=settings,
        host=host if host is not None else create_host(settings),
        cache=cache if cache is not None else get_object_cache(),
        hooks=HookRegistry(),
        nonces=NonceService(settings.nonce_secret, settings.nonce_lifetime),
        translator=Translator(
            settings.text_domain,
            languages_dir=settings.languages_dir,
            locale=settings.locale,
        ),
    )

    app = FastAPI(
        title="WP Multi-Network Switcher",
        version=NetworkSwitcherPlugin.version,
        description="Network switcher for WordPress multi-network installations",
        lifespan=lifespan,
    )
    app.state.infra = infra

    app.include_router(discovery_router)
    app.include_router(admin_router)
    app.include_router(ajax_router)

    logger.info("Switcher application ready (host=%s)", type(infra.host).__name__)
    return app
