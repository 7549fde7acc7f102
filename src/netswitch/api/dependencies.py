# netswitch/api/dependencies.py
"""
FastAPI dependencies for request-scoped services.

Provides:
- ``get_infra``: the application-scoped :class:`Infrastructure`.
- ``get_user_id``: id of the user authenticated upstream, or ``None``.
- ``get_switcher_ctx``: a :class:`SwitcherContext` for the current request.
"""
from __future__ import annotations

import logging

from fastapi import Depends, Request

from netswitch.contracts.models import CurrentContext, RequestInfo
from netswitch.core.ajax import intval
from netswitch.core.assets import DEFAULT_SCHEME
from netswitch.core.context import SwitcherContext
from netswitch.core.infrastructure import Infrastructure

logger = logging.getLogger(__name__)


def get_infra(request: Request) -> Infrastructure:
    return request.app.state.infra


def get_user_id(
    request: Request, infra: Infrastructure = Depends(get_infra)
) -> int | None:
    user_id = intval(request.headers.get(infra.settings.user_header))
    return user_id if user_id > 0 else None


def request_info(request: Request, admin_path: str) -> RequestInfo:
    forwarded = request.headers.get("x-forwarded-proto", "").split(",")[0].strip()
    is_secure = request.url.scheme == "https" or forwarded.lower() == "https"
    in_admin = f"/{admin_path}" in request.url.path
    return RequestInfo(is_secure=is_secure, in_admin=in_admin)


async def get_switcher_ctx(
    request: Request,
    infra: Infrastructure = Depends(get_infra),
    user_id: int | None = Depends(get_user_id),
) -> SwitcherContext:
    """Main context dependency. Use as: Depends(get_switcher_ctx)"""
    host = infra.host
    directory = infra.directory()

    current_network = await directory.get_current_network(
        request.url.hostname or "", request.url.path
    )

    can_manage = False
    color_scheme = DEFAULT_SCHEME
    if user_id is not None:
        can_manage = await host.user_can(user_id, "manage_network")
        color_scheme = await host.get_user_meta(user_id, "admin_color") or DEFAULT_SCHEME

    return SwitcherContext(
        current=CurrentContext(
            current_network_id=current_network.id if current_network else None,
            user_id=user_id,
            can_manage_network=can_manage,
            color_scheme=color_scheme,
        ),
        request=request_info(request, infra.settings.admin_path),
        current_network=current_network,
        directory=directory,
        nonces=infra.nonces,
        translator=infra.translator,
        settings=infra.settings,
        session=request.cookies.get("wordpress_logged_in", ""),
        admin_bar_showing=user_id is not None,
    )
