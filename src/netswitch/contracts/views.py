# netswitch/contracts/views.py
"""
View models handed to the template layer and serialized by the API.

The core builds these; it never builds markup.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class MenuNode(BaseModel):
    """One admin-bar node, shaped like ``WP_Admin_Bar::add_menu`` args."""

    id: str
    parent: str | None = None
    title: str
    href: str = "#"
    icon: str | None = None
    badge: str | None = None
    subtitle: str | None = None
    meta: dict[str, Any] = Field(default_factory=dict)


class DashboardStats(BaseModel):
    total_networks: int
    total_sites: int
    total_super_admins: int


class NetworkCard(BaseModel):
    id: int
    name: str
    domain: str
    path: str
    site_count: int
    favicon: str | None = None
    switch_url: str | None = None
    is_current: bool = False

    @property
    def address(self) -> str:
        return f"{self.domain}{self.path}"


class DashboardWidgetView(BaseModel):
    stats: DashboardStats
    current: NetworkCard | None = None
    quick_switch: list[NetworkCard] = Field(default_factory=list)
    overflow_count: int = 0
    overflow_label: str | None = None
    manage_url: str | None = None


class DashboardWidget(BaseModel):
    """A widget registered on a dashboard screen."""

    id: str
    title: str
    view: DashboardWidgetView


class SwitchResult(BaseModel):
    redirect_url: str


class NetworkInfo(BaseModel):
    id: int
    domain: str
    path: str
    site_name: str
    site_count: int


class AjaxEnvelope(BaseModel):
    """``wp_send_json_success`` / ``wp_send_json_error`` body."""

    success: bool
    data: Any = None

    @classmethod
    def ok(cls, data: BaseModel | dict[str, Any]) -> AjaxEnvelope:
        payload = data.model_dump() if isinstance(data, BaseModel) else data
        return cls(success=True, data=payload)

    @classmethod
    def fail(cls, message: str) -> AjaxEnvelope:
        return cls(success=False, data={"message": message})
