# netswitch/core/dashboard.py
"""
Dashboard widget: network statistics, current-network card and a
quick-switch grid.
"""
from __future__ import annotations

import logging

from netswitch.contracts.models import NetworkSummary
from netswitch.contracts.views import (
    DashboardStats,
    DashboardWidget,
    DashboardWidgetView,
    NetworkCard,
)
from netswitch.core.context import SwitcherContext
from netswitch.core.directory import build_network_admin_url

logger = logging.getLogger(__name__)

WIDGET_ID = "wpmn_network_overview"
DASHBOARD_SCREENS = frozenset({"dashboard", "dashboard-network"})

# The overflow counter subtracts one more than the grid shows.
OVERFLOW_THRESHOLD = 6


class Dashboard:
    """Widgets registered for one dashboard screen."""

    def __init__(self, screen: str) -> None:
        self.screen = screen
        self._widgets: dict[str, DashboardWidget] = {}

    def add_widget(self, widget: DashboardWidget) -> None:
        self._widgets[widget.id] = widget

    def widgets(self) -> list[DashboardWidget]:
        return list(self._widgets.values())

    def __contains__(self, widget_id: str) -> bool:
        return widget_id in self._widgets


async def _card(ctx: SwitcherContext, summary: NetworkSummary) -> NetworkCard:
    network = summary.network
    return NetworkCard(
        id=network.id,
        name=network.display_name,
        domain=network.domain,
        path=network.path,
        site_count=summary.site_count,
        favicon=await ctx.directory.get_favicon(network.id),
        switch_url=None if summary.is_current else ctx.switch_url(network),
        is_current=summary.is_current,
    )


async def build_dashboard_view(ctx: SwitcherContext) -> DashboardWidgetView | None:
    """Widget view model, or ``None`` when the widget should not show."""
    if not ctx.current.can_manage_network or ctx.current_network is None:
        return None

    current_id = ctx.current_network.id
    summaries = await ctx.directory.summaries(current_id)
    if len(summaries) <= 1:
        return None

    stats = DashboardStats(
        total_networks=len(summaries),
        total_sites=sum(s.site_count for s in summaries),
        total_super_admins=await ctx.directory.count_super_admins(),
    )

    # The current network may sit beyond the listing limit.
    current_card = await _card(
        ctx,
        NetworkSummary(
            network=ctx.current_network,
            site_count=await ctx.directory.get_site_count(current_id),
            is_current=True,
        ),
    )

    limit = ctx.settings.quick_switch_limit
    grid = [await _card(ctx, s) for s in summaries[:limit]]

    total = len(summaries)
    overflow = total - OVERFLOW_THRESHOLD if total > OVERFLOW_THRESHOLD else 0
    label = ctx.gettext("+%d more networks") % overflow if overflow else None

    return DashboardWidgetView(
        stats=stats,
        current=current_card,
        quick_switch=grid,
        overflow_count=overflow,
        overflow_label=label,
        manage_url=build_network_admin_url(
            ctx.current_network,
            secure=ctx.request.is_secure,
            admin_path=ctx.settings.admin_path,
        ),
    )


async def register_dashboard_widget(dashboard: Dashboard, ctx: SwitcherContext) -> None:
    """``wp_dashboard_setup`` / ``wp_network_dashboard_setup`` callback."""
    if dashboard.screen not in DASHBOARD_SCREENS:
        return

    view = await build_dashboard_view(ctx)
    if view is None:
        return

    dashboard.add_widget(
        DashboardWidget(
            id=WIDGET_ID,
            title=ctx.gettext("Network Overview"),
            view=view,
        )
    )
