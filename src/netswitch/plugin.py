# netswitch/plugin.py
"""
Switcher startup routine.

``NetworkSwitcherPlugin.register`` is the only place callbacks get
attached to extension points. It attaches nothing on a single-network
host.
"""
from __future__ import annotations

import logging
from typing import ClassVar

from netswitch.contracts.host import ExtensionPoints, HostEnvironment
from netswitch.core import ajax
from netswitch.core.admin_bar import add_switcher_to_admin_bar
from netswitch.core.assets import enqueue_switcher_assets
from netswitch.core.dashboard import register_dashboard_widget

logger = logging.getLogger(__name__)


class NetworkSwitcherPlugin:
    name: ClassVar[str] = "wp-multinetwork-switcher"
    version: ClassVar[str] = "1.0.2"

    AJAX_ACTIONS: ClassVar[dict[str, ajax.AjaxHandler]] = {
        "switch_network": ajax.switch_network,
        "get_network_info": ajax.get_network_info,
    }

    def register(self, hooks: ExtensionPoints, env: HostEnvironment) -> bool:
        """Attach callbacks. Returns ``False`` when the host is not multi-network."""
        if not (env.multisite and env.multi_network):
            logger.info("Host is not multi-network; %s stays idle", self.name)
            return False

        hooks.add_action("admin_bar_menu", add_switcher_to_admin_bar, 100)
        hooks.add_action("wp_dashboard_setup", register_dashboard_widget)
        hooks.add_action("wp_network_dashboard_setup", register_dashboard_widget)
        hooks.add_action("admin_enqueue_scripts", enqueue_switcher_assets)
        hooks.add_action("wp_enqueue_scripts", enqueue_switcher_assets)

        for action, handler in self.AJAX_ACTIONS.items():
            hooks.add_action(f"wp_ajax_{action}", ajax.ajax_endpoint(handler))

        logger.info("%s %s registered", self.name, self.version)
        return True
