"""Public contracts for the network switcher."""
from netswitch.contracts.host import ExtensionPoints, HostEnvironment, MultisiteHost
from netswitch.contracts.models import (
    CurrentContext,
    Network,
    NetworkSummary,
    RequestInfo,
    Site,
)
from netswitch.contracts.views import (
    AjaxEnvelope,
    DashboardStats,
    DashboardWidget,
    DashboardWidgetView,
    MenuNode,
    NetworkCard,
    NetworkInfo,
    SwitchResult,
)

__all__ = [
    "ExtensionPoints", "HostEnvironment", "MultisiteHost",
    "CurrentContext", "Network", "NetworkSummary", "RequestInfo", "Site",
    "AjaxEnvelope", "DashboardStats", "DashboardWidget", "DashboardWidgetView",
    "MenuNode", "NetworkCard", "NetworkInfo", "SwitchResult",
]
