# netswitch/core/cache.py
"""
Short-lived object cache shared across requests.

Only counts, favicon URLs and the super-admin total go in here. Entries
expire after their TTL; concurrent recomputation of the same key is
harmless (last write wins).
"""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class ObjectCache(ABC):

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` on a miss or expiry."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int = 0) -> None:
        """Store ``value``. ``ttl <= 0`` means no expiry."""

    @abstractmethod
    async def delete(self, key: str) -> None: ...

    @abstractmethod
    async def flush(self) -> None: ...

    async def remember(
        self, key: str, ttl: int, compute: Callable[[], Awaitable[Any]]
    ) -> Any:
        value = await self.get(key)
        if value is None:
            logger.debug("Cache miss for %s", key)
            value = await compute()
            await self.set(key, value, ttl)
        return value


class MemoryObjectCache(ObjectCache):
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[Any, float | None]] = {}

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: Any, ttl: int = 0) -> None:
        expires_at = self._clock() + ttl if ttl > 0 else None
        self._entries[key] = (value, expires_at)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def flush(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def get_object_cache(cache_type: str = "memory") -> ObjectCache:
    if cache_type == "memory":
        return MemoryObjectCache()
    raise ValueError(f"object cache '{cache_type}' not supported")
