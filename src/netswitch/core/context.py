# netswitch/core/context.py
"""
SwitcherContext – per-request context handed to every hook callback.

Carries request-scoped data (principal, current network, transport facts)
while giving access to the application-scoped services (directory,
nonces, translations).
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from netswitch.contracts.models import CurrentContext, Network, RequestInfo
from netswitch.core.config import Settings
from netswitch.core.directory import NetworkDirectory, build_switch_url
from netswitch.core.i18n import Translator
from netswitch.core.nonce import NETWORK_SWITCH_ACTION, NonceService


@dataclass
class SwitcherContext:
    """Request context for hook callbacks.

    Attributes:
        current: Principal and current-network facts.
        request: Transport facts (TLS, admin area).
        current_network: Resolved current network, ``None`` if unresolvable.
        directory: Request-scoped :class:`NetworkDirectory`.
        nonces: Token service shared by the application.
        translator: Catalog for the configured locale.
        session: Session token mixed into nonces.
    """

    current: CurrentContext
    request: RequestInfo
    current_network: Network | None
    directory: NetworkDirectory
    nonces: NonceService
    translator: Translator
    settings: Settings
    session: str = ""
    admin_bar_showing: bool = True
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def gettext(self, message: str) -> str:
        return self.translator.gettext(message)

    def ngettext(self, singular: str, plural: str, n: int) -> str:
        return self.translator.ngettext(singular, plural, n)

    def create_nonce(self, action: str = NETWORK_SWITCH_ACTION) -> str:
        return self.nonces.create(action, self.current.user_id, self.session)

    def verify_nonce(self, nonce: str | None, action: str = NETWORK_SWITCH_ACTION) -> bool:
        return self.nonces.verify(nonce, action, self.current.user_id, self.session) > 0

    def switch_url(self, network: Network) -> str:
        return build_switch_url(
            network,
            secure=self.request.is_secure,
            in_admin=self.request.in_admin,
            admin_path=self.settings.admin_path,
        )
