# netswitch/core/admin_bar.py
"""
Admin-bar switcher menu.

Builds a flat, parent-linked node list (the shape ``WP_Admin_Bar`` uses):

* root ``wp-multinetwork-switcher`` with the current network,
* one ``network-<id>`` child per network,
* a trailing ``network-admin-all`` link.

Nothing is emitted unless the user can manage networks, the current
network resolves, and there is more than one network.
"""
from __future__ import annotations

import logging
from typing import Iterator

from netswitch.contracts.views import MenuNode
from netswitch.core.context import SwitcherContext
from netswitch.core.directory import build_network_admin_url

logger = logging.getLogger(__name__)

ROOT_ID = "wp-multinetwork-switcher"
MANAGE_ALL_ID = "network-admin-all"


def network_node_id(network_id: int) -> str:
    return f"network-{network_id}"


class AdminBar:
    """Ordered collection of admin-bar nodes."""

    def __init__(self) -> None:
        self._nodes: dict[str, MenuNode] = {}

    def add_menu(self, node: MenuNode) -> None:
        if node.parent is not None and node.parent not in self._nodes:
            raise KeyError(f"Parent node '{node.parent}' does not exist")
        self._nodes[node.id] = node

    def get_node(self, node_id: str) -> MenuNode | None:
        return self._nodes.get(node_id)

    def children(self, parent_id: str) -> list[MenuNode]:
        return [n for n in self._nodes.values() if n.parent == parent_id]

    def nodes(self) -> list[MenuNode]:
        return list(self._nodes.values())

    def __iter__(self) -> Iterator[MenuNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)


async def build_switcher_menu(ctx: SwitcherContext) -> list[MenuNode]:
    """Return the switcher nodes for this request, or ``[]`` when suppressed."""
    if not ctx.current.can_manage_network:
        return []

    current = ctx.current_network
    if current is None:
        logger.debug("Current network unresolvable, switcher menu suppressed")
        return []

    summaries = await ctx.directory.summaries(current.id)
    if len(summaries) <= 1:
        return []

    current_count = await ctx.directory.get_site_count(current.id)
    nodes = [
        MenuNode(
            id=ROOT_ID,
            title=current.display_name,
            href="#",
            icon="admin-site-alt3",
            badge=f"({current_count})",
            meta={
                "class": ROOT_ID,
                "title": ctx.gettext("Current Network: %s") % current.domain,
            },
        )
    ]

    nonce = ctx.create_nonce()
    for summary in summaries:
        network = summary.network
        meta = {
            "class": "current-network" if summary.is_current else "switch-network",
            "data-network-id": network.id,
            "title": ctx.gettext("Network: %s%s (%d sites)")
            % (network.domain, network.path, summary.site_count),
        }
        if not summary.is_current:
            meta["data-nonce"] = nonce

        nodes.append(
            MenuNode(
                id=network_node_id(network.id),
                parent=ROOT_ID,
                title=network.display_name,
                href="#" if summary.is_current else ctx.switch_url(network),
                icon="yes" if summary.is_current else None,
                badge=ctx.ngettext("%d site", "%d sites", summary.site_count)
                % summary.site_count,
                subtitle=network.domain + (network.path if network.path != "/" else ""),
                meta=meta,
            )
        )

    nodes.append(
        MenuNode(
            id=MANAGE_ALL_ID,
            parent=ROOT_ID,
            title=ctx.gettext("Manage All Networks"),
            href=build_network_admin_url(
                current,
                secure=ctx.request.is_secure,
                admin_path=ctx.settings.admin_path,
            ),
            icon="admin-tools",
            meta={"class": "network-admin-link"},
        )
    )
    return nodes


async def add_switcher_to_admin_bar(bar: AdminBar, ctx: SwitcherContext) -> None:
    """``admin_bar_menu`` callback."""
    for node in await build_switcher_menu(ctx):
        bar.add_menu(node)
