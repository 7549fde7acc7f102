# netswitch/api/ajax.py
"""
``admin-ajax.php`` dispatcher.

Looks up ``wp_ajax_<action>`` in the hook registry and returns the
handler's JSON envelope. Unknown actions and anonymous callers get the
bare ``0`` response WordPress sends.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from netswitch.api.dependencies import get_infra, get_switcher_ctx
from netswitch.core.context import SwitcherContext
from netswitch.core.infrastructure import Infrastructure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wp-admin", tags=["ajax"])


def _invoked_from_admin(request: Request, context: str | None, admin_path: str) -> bool:
    """Where the switch was clicked: explicit ``context`` field, else the Referer."""
    if context in ("admin", "front"):
        return context == "admin"
    referer = request.headers.get("referer")
    if not referer:
        return True
    return urlparse(referer).path.startswith(f"/{admin_path}")


@router.post("/admin-ajax.php")
async def admin_ajax(
    request: Request,
    ctx: SwitcherContext = Depends(get_switcher_ctx),
    infra: Infrastructure = Depends(get_infra),
) -> Response:
    form = await request.form()
    action = str(form.get("action") or request.query_params.get("action") or "")
    hook = f"wp_ajax_{action}"

    if not action or ctx.current.user_id is None or not infra.hooks.has_action(hook):
        logger.debug("Unhandled AJAX action '%s'", action)
        return PlainTextResponse("0", status_code=400)

    context = form.get("context")
    ctx.request = replace(
        ctx.request,
        in_admin=_invoked_from_admin(
            request,
            context if isinstance(context, str) else None,
            infra.settings.admin_path,
        ),
    )

    envelope = await infra.hooks.dispatch(hook, dict(form), ctx)
    return JSONResponse(envelope.model_dump())
