# netswitch/core/infrastructure.py
from __future__ import annotations

from dataclasses import dataclass

from netswitch.contracts.host import HostEnvironment, MultisiteHost
from netswitch.core.cache import ObjectCache
from netswitch.core.config import Settings
from netswitch.core.directory import NetworkDirectory
from netswitch.core.hooks import HookRegistry
from netswitch.core.i18n import Translator
from netswitch.core.nonce import NonceService


@dataclass
class Infrastructure:
    """Application-scoped services, built once by ``create_app``."""

    settings: Settings
    host: MultisiteHost
    cache: ObjectCache
    hooks: HookRegistry
    nonces: NonceService
    translator: Translator
    environment: HostEnvironment | None = None

    def directory(self) -> NetworkDirectory:
        """A fresh request-scoped directory (its network memo dies with the request)."""
        return NetworkDirectory(self.host, self.cache, self.settings)
