# netswitch/core/assets.py
"""
Inline CSS/JS for the switcher, rendered from Jinja2 templates.

The stylesheet follows the viewer's admin color scheme; the script gets
the AJAX URL and its localized strings injected.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field

from jinja2 import Environment, PackageLoader, StrictUndefined

from netswitch.core.context import SwitcherContext

logger = logging.getLogger(__name__)

DEFAULT_SCHEME = "fresh"


@dataclass(frozen=True)
class ColorPalette:
    primary: str
    secondary: str
    hover: str
    background: str


COLOR_SCHEMES: dict[str, ColorPalette] = {
    "fresh": ColorPalette("#0073aa", "#72aee6", "#005a87", "rgba(240, 245, 250, 0.1)"),
    "light": ColorPalette("#0073aa", "#72aee6", "#005a87", "rgba(240, 245, 250, 0.1)"),
    "blue": ColorPalette("#096484", "#4796b3", "#07526c", "rgba(70, 150, 179, 0.1)"),
    "midnight": ColorPalette("#e14d43", "#77a6b9", "#dd382d", "rgba(119, 166, 185, 0.1)"),
    "sunrise": ColorPalette("#d1864a", "#c8b03c", "#b77729", "rgba(200, 176, 60, 0.1)"),
    "ectoplasm": ColorPalette("#a3b745", "#c8d035", "#8b9a3e", "rgba(200, 208, 53, 0.1)"),
    "ocean": ColorPalette("#627c83", "#9ebaa0", "#576e74", "rgba(158, 186, 160, 0.1)"),
    "coffee": ColorPalette("#c7a589", "#9ea476", "#b79570", "rgba(158, 164, 118, 0.1)"),
}


def resolve_palette(scheme: str | None) -> ColorPalette:
    return COLOR_SCHEMES.get(scheme or DEFAULT_SCHEME, COLOR_SCHEMES[DEFAULT_SCHEME])


def _js_string(value: str) -> str:
    # Safe inside a <script> block as well as a standalone file.
    return json.dumps(value).replace("</", "<\\/")


def _create_jinja_env() -> Environment:
    env = Environment(
        loader=PackageLoader("netswitch", "templates"),
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["js_string"] = _js_string
    return env


_jinja_env = _create_jinja_env()


def render_css(palette: ColorPalette) -> str:
    return _jinja_env.get_template("switcher.css.j2").render(colors=asdict(palette))


def render_js(
    *,
    ajax_url: str,
    switching_text: str,
    error_text: str,
    aria_label: str,
) -> str:
    return _jinja_env.get_template("switcher.js.j2").render(
        ajax_url=ajax_url,
        switching_text=switching_text,
        error_text=error_text,
        aria_label=aria_label,
    )


@dataclass
class AssetQueue:
    """Inline payloads attached to script/style handles for one response."""

    styles: dict[str, list[str]] = field(default_factory=dict)
    scripts: dict[str, list[str]] = field(default_factory=dict)

    def add_inline_style(self, handle: str, css: str) -> None:
        self.styles.setdefault(handle, []).append(css)

    def add_inline_script(self, handle: str, js: str) -> None:
        self.scripts.setdefault(handle, []).append(js)

    def css(self) -> str:
        return "\n".join(chunk for chunks in self.styles.values() for chunk in chunks)

    def js(self) -> str:
        return "\n".join(chunk for chunks in self.scripts.values() for chunk in chunks)


def enqueue_switcher_assets(queue: AssetQueue, ctx: SwitcherContext) -> None:
    """``admin_enqueue_scripts`` / ``wp_enqueue_scripts`` callback."""
    if not ctx.admin_bar_showing or not ctx.current.can_manage_network:
        return

    palette = resolve_palette(ctx.current.color_scheme)
    queue.add_inline_style("admin-bar", render_css(palette))

    scheme = "https" if ctx.request.is_secure else "http"
    network = ctx.current_network
    base = f"{scheme}://{network.domain}{network.path}" if network else "/"
    queue.add_inline_script(
        "jquery",
        render_js(
            ajax_url=f"{base}{ctx.settings.admin_path}admin-ajax.php",
            switching_text=ctx.gettext("Switching..."),
            error_text=ctx.gettext("Error switching network. Please try again."),
            aria_label=ctx.gettext("Network Switcher"),
        ),
    )
