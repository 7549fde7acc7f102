# netswitch/core/ajax.py
"""
``switch_network`` and ``get_network_info`` AJAX handlers.

Both check, in order: the anti-forgery token, that the network exists,
and that the caller may reach it (``manage_network`` or per-network
access). Failures become ``{"success": false, "data": {"message": ...}}``
envelopes; nothing here redirects.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Awaitable, Callable, Mapping

from pydantic import BaseModel

from netswitch.contracts.models import Network
from netswitch.contracts.views import AjaxEnvelope, NetworkInfo, SwitchResult
from netswitch.core.context import SwitcherContext
from netswitch.core.errors import (
    AuthenticationFailed,
    AuthorizationDenied,
    NotFound,
    SwitcherError,
)

logger = logging.getLogger(__name__)

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")

AjaxHandler = Callable[[Mapping[str, Any], SwitcherContext], Awaitable[BaseModel]]


def intval(value: Any) -> int:
    """Coerce a form value the way PHP ``intval`` does (garbage -> 0)."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    match = _INT_PREFIX.match(str(value or ""))
    return int(match.group(1)) if match else 0


async def _authorize(form: Mapping[str, Any], ctx: SwitcherContext) -> Network:
    if not ctx.verify_nonce(form.get("nonce")):
        raise AuthenticationFailed(ctx.gettext("Invalid nonce."))

    network_id = intval(form.get("network_id"))
    network = await ctx.directory.get_network(network_id) if network_id > 0 else None

    if ctx.current.can_manage_network:
        if network is None:
            raise NotFound(ctx.gettext("Network does not exist."))
        return network

    if network is None:
        raise AuthorizationDenied(ctx.gettext("Insufficient permissions."))

    if not await ctx.directory.user_can_access_network(ctx.current.user_id, network.id):
        raise AuthorizationDenied(ctx.gettext("Access denied to this network."))
    return network


async def switch_network(form: Mapping[str, Any], ctx: SwitcherContext) -> SwitchResult:
    network = await _authorize(form, ctx)
    url = ctx.switch_url(network)
    logger.info(
        "User %s switching to network %d (%s)",
        ctx.current.user_id,
        network.id,
        url,
    )
    return SwitchResult(redirect_url=url)


async def get_network_info(form: Mapping[str, Any], ctx: SwitcherContext) -> NetworkInfo:
    network = await _authorize(form, ctx)
    return NetworkInfo(
        id=network.id,
        domain=network.domain,
        path=network.path,
        site_name=network.display_name,
        site_count=await ctx.directory.get_site_count(network.id),
    )


def ajax_endpoint(handler: AjaxHandler) -> Callable[..., Awaitable[AjaxEnvelope]]:
    """Wrap ``handler`` so every outcome is an :class:`AjaxEnvelope`."""

    async def endpoint(form: Mapping[str, Any], ctx: SwitcherContext) -> AjaxEnvelope:
        try:
            result = await handler(form, ctx)
        except SwitcherError as exc:
            logger.warning(
                "%s rejected (%s): %s",
                handler.__name__,
                type(exc).__name__,
                exc.message,
            )
            return AjaxEnvelope.fail(exc.message)
        except Exception:
            logger.exception("%s failed", handler.__name__)
            return AjaxEnvelope.fail(
                ctx.gettext("Error switching network. Please try again.")
            )
        return AjaxEnvelope.ok(result)

    endpoint.__name__ = handler.__name__
    endpoint.__qualname__ = handler.__qualname__
    return endpoint
