"""Debounced value propagation.

Used by the autocomplete prompt so that a lookup runs once the query has
been stable for a while instead of on every keystroke.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Generic, Optional, TypeVar

from .cell import State
from .emitter import Unsubscribe

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NOTHING = object()


class Debouncer(Generic[T]):
    """Propagates values into an internal cell after ``delay`` seconds of quiet.

    Each ``set`` resets the pending timer. Timers live on the running asyncio
    loop; a delay of zero or less propagates synchronously.
    """

    def __init__(self, initial_value: T, delay: float):
        self._state: State[T] = State(initial_value)
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending: Any = _NOTHING

    def set(self, value: T) -> None:
        """Schedule ``value`` for propagation, replacing any pending one."""
        self.cancel()
        if self.delay <= 0:
            self._state.set(value)
            return
        loop = asyncio.get_running_loop()
        self._pending = value
        self._handle = loop.call_later(self.delay, self._fire)

    def subscribe(self, handler: Callable[[T], Any]) -> Unsubscribe:
        """Subscribe to propagated values (called immediately with the current one)."""
        return self._state.subscribe(handler)

    def get(self) -> T:
        return self._state.get()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def flush(self) -> None:
        """Propagate a pending value now instead of waiting for the timer."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._fire()

    def cancel(self) -> None:
        """Drop the pending value, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending = _NOTHING

    def _fire(self) -> None:
        value = self._pending
        self._handle = None
        self._pending = _NOTHING
        if value is _NOTHING:
            return
        logger.debug(f"Debounced value settled: {value!r}")
        self._state.set(value)
