# netswitch/core/nonce.py
"""
WordPress-style anti-forgery tokens.

A nonce is an HMAC over ``tick|action|user_id|session`` truncated to ten
hex characters. A tick is half the configured lifetime, and a nonce is
accepted during the tick it was issued in and the one after it.
"""
from __future__ import annotations

import hashlib
import hmac
import math
import time
from typing import Callable

NETWORK_SWITCH_ACTION = "network_switch"


class NonceService:
    def __init__(
        self,
        secret: str,
        lifetime: int = 86400,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if lifetime < 2:
            raise ValueError("nonce lifetime must be at least 2 seconds")
        self._secret = secret.encode("utf-8")
        self._lifetime = lifetime
        self._clock = clock

    def tick(self) -> int:
        return math.ceil(self._clock() / (self._lifetime / 2))

    def _hash(self, tick: int, action: str, user_id: int | None, session: str) -> str:
        message = f"{tick}|{action}|{user_id or 0}|{session}".encode("utf-8")
        digest = hmac.new(self._secret, message, hashlib.md5).hexdigest()
        return digest[-12:-2]

    def create(self, action: str, user_id: int | None, session: str = "") -> str:
        return self._hash(self.tick(), action, user_id, session)

    def verify(
        self, nonce: str | None, action: str, user_id: int | None, session: str = ""
    ) -> int:
        """Return 1 for the current tick, 2 for the previous one, 0 if invalid."""
        if not nonce or not isinstance(nonce, str):
            return 0
        given = nonce.encode("utf-8")
        tick = self.tick()
        for age, candidate in enumerate((tick, tick - 1), start=1):
            expected = self._hash(candidate, action, user_id, session)
            if hmac.compare_digest(expected.encode("utf-8"), given):
                return age
        return 0
