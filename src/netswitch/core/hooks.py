# netswitch/core/hooks.py
"""
Hook registry – named extension points with prioritized callbacks.

This is the host-framework side of :class:`~netswitch.contracts.host.ExtensionPoints`:
the HTTP layer fires the points, plugins register callbacks on them at
startup.
"""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Iterator

from netswitch.contracts.host import Callback

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Registration:
    priority: int
    order: int
    callback: Callback


class HookRegistry:
    """Callbacks per extension point, run in (priority, registration) order."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[_Registration]] = {}
        self._counter = 0

    def add_action(self, name: str, callback: Callback, priority: int = 10) -> None:
        self._counter += 1
        regs = self._hooks.setdefault(name, [])
        regs.append(_Registration(priority=priority, order=self._counter, callback=callback))
        regs.sort(key=lambda r: (r.priority, r.order))
        logger.debug(
            "Hooked %s on '%s' (priority %d)",
            getattr(callback, "__qualname__", repr(callback)),
            name,
            priority,
        )

    def has_action(self, name: str) -> bool:
        return bool(self._hooks.get(name))

    def callbacks(self, name: str) -> list[Callback]:
        return [r.callback for r in self._hooks.get(name, [])]

    async def do_action(self, name: str, *args: Any) -> None:
        """Run every callback on ``name``; return values are discarded."""
        for callback in self.callbacks(name):
            await _call(callback, *args)

    async def dispatch(self, name: str, *args: Any) -> Any:
        """Run the first callback on ``name`` and return its result.

        Raises:
            KeyError: If nothing is hooked on ``name``.
        """
        regs = self._hooks.get(name)
        if not regs:
            raise KeyError(f"No callback registered for '{name}'")
        return await _call(regs[0].callback, *args)

    def __iter__(self) -> Iterator[str]:
        return iter(self._hooks)

    def __len__(self) -> int:
        return len(self._hooks)

    def __contains__(self, name: str) -> bool:
        return self.has_action(name)


async def _call(callback: Callback, *args: Any) -> Any:
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
