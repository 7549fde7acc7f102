# netswitch/api/admin.py
"""
Admin surfaces: admin-bar nodes, dashboard widgets and the switcher assets.

Each route fires the matching extension point and returns whatever the
registered callbacks contributed.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Literal

from fastapi import APIRouter, Depends, Query, Response

from netswitch.api.dependencies import get_infra, get_switcher_ctx
from netswitch.contracts.views import DashboardWidget, MenuNode
from netswitch.core.admin_bar import AdminBar
from netswitch.core.assets import AssetQueue
from netswitch.core.context import SwitcherContext
from netswitch.core.dashboard import Dashboard
from netswitch.core.infrastructure import Infrastructure

router = APIRouter(prefix="/wp-admin", tags=["admin"])


@router.get("/admin-bar", response_model=list[MenuNode])
async def admin_bar(
    context: Literal["admin", "front"] = Query(default="admin"),
    ctx: SwitcherContext = Depends(get_switcher_ctx),
    infra: Infrastructure = Depends(get_infra),
) -> list[MenuNode]:
    # Links follow the page the bar is drawn on.
    ctx.request = replace(ctx.request, in_admin=context == "admin")
    bar = AdminBar()
    await infra.hooks.do_action("admin_bar_menu", bar, ctx)
    return bar.nodes()


@router.get("/dashboard-widgets", response_model=list[DashboardWidget])
async def dashboard_widgets(
    screen: str = Query(default="dashboard"),
    ctx: SwitcherContext = Depends(get_switcher_ctx),
    infra: Infrastructure = Depends(get_infra),
) -> list[DashboardWidget]:
    dashboard = Dashboard(screen)
    hook = "wp_network_dashboard_setup" if screen == "dashboard-network" else "wp_dashboard_setup"
    await infra.hooks.do_action(hook, dashboard, ctx)
    return dashboard.widgets()


async def _assets(
    ctx: SwitcherContext, infra: Infrastructure, context: str
) -> AssetQueue:
    in_admin = context == "admin"
    ctx.request = replace(ctx.request, in_admin=in_admin)
    queue = AssetQueue()
    hook = "admin_enqueue_scripts" if in_admin else "wp_enqueue_scripts"
    await infra.hooks.do_action(hook, queue, ctx)
    return queue


@router.get("/assets/network-switcher.css")
async def switcher_css(
    context: Literal["admin", "front"] = Query(default="admin"),
    ctx: SwitcherContext = Depends(get_switcher_ctx),
    infra: Infrastructure = Depends(get_infra),
) -> Response:
    css = (await _assets(ctx, infra, context)).css()
    if not css:
        return Response(status_code=204)
    return Response(content=css, media_type="text/css")


@router.get("/assets/network-switcher.js")
async def switcher_js(
    context: Literal["admin", "front"] = Query(default="admin"),
    ctx: SwitcherContext = Depends(get_switcher_ctx),
    infra: Infrastructure = Depends(get_infra),
) -> Response:
    js = (await _assets(ctx, infra, context)).js()
    if not js:
        return Response(status_code=204)
    return Response(content=js, media_type="application/javascript")
