# netswitch/core/activation.py
"""
Activation and deactivation checks.

Activation refuses to proceed on a host that is not running multiple
networks or is older than the minimum supported version.
"""
from __future__ import annotations

import logging
import re

from netswitch.contracts.host import MultisiteHost
from netswitch.core.cache import ObjectCache
from netswitch.core.errors import EnvironmentUnsupported
from netswitch.core.i18n import Translator

logger = logging.getLogger(__name__)

DEFAULT_MIN_VERSION = "5.0"


def version_tuple(version: str) -> tuple[int, ...]:
    """``"6.4.2-beta1"`` -> ``(6, 4, 2)``; non-numeric parts are dropped."""
    parts: list[int] = []
    for chunk in re.split(r"[.\-+]", version.strip()):
        if not chunk.isdigit():
            break
        parts.append(int(chunk))
    return tuple(parts)


def version_at_least(version: str, minimum: str) -> bool:
    have, want = version_tuple(version), version_tuple(minimum)
    width = max(len(have), len(want))
    return have + (0,) * (width - len(have)) >= want + (0,) * (width - len(want))


async def activate(
    host: MultisiteHost,
    translator: Translator,
    *,
    min_version: str = DEFAULT_MIN_VERSION,
) -> None:
    """Raise :class:`EnvironmentUnsupported` unless the host can run the switcher."""
    env = await host.environment()
    title = translator.gettext("Plugin Activation Error")

    if not env.multisite or not env.multi_network:
        raise EnvironmentUnsupported(
            translator.gettext("This plugin requires WordPress Multisite to be enabled."),
            title=title,
        )

    if not version_at_least(env.version, min_version):
        # Catalogs carry the literal 5.0 message id.
        message = translator.gettext("This plugin requires WordPress 5.0 or higher.")
        if min_version != DEFAULT_MIN_VERSION:
            message = message.replace(DEFAULT_MIN_VERSION, min_version)
        raise EnvironmentUnsupported(message, title=title)

    logger.info("Activation checks passed (host version %s)", env.version)


async def deactivate(cache: ObjectCache) -> None:
    await cache.flush()
    logger.info("Object cache flushed on deactivation")
