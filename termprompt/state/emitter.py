"""Named-event publish/subscribe used by the state cell.

A synchronous, in-process cousin of an event bus: handlers registered for an
event name are called in registration order whenever the event is emitted.
"""

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Unsubscribe = Callable[[], None]


class EventEmitter:
    """Synchronous named-event emitter.

    A handler that raises does not stop delivery to the handlers after it;
    the failure is logged and emission continues.
    """

    def __init__(self):
        self._handlers: dict[str, list[Callable[..., Any]]] = defaultdict(list)

    def on(self, name: str, handler: Callable[..., Any]) -> Unsubscribe:
        """Register a handler for an event name.

        Args:
            name: Event name (e.g. "change")
            handler: Callable invoked with the emitted arguments

        Returns:
            Function removing exactly this registration. Calling it more
            than once is a no-op.
        """
        self._handlers[name].append(handler)
        removed = False

        def unsubscribe() -> None:
            nonlocal removed
            if removed:
                return
            removed = True
            self._remove(name, handler)

        return unsubscribe

    def once(self, name: str, handler: Callable[..., Any]) -> Unsubscribe:
        """Register a handler that is removed after its first call."""
        unsubscribe: Unsubscribe

        def wrapper(*args: Any) -> None:
            unsubscribe()
            handler(*args)

        unsubscribe = self.on(name, wrapper)
        return unsubscribe

    def off(self, name: str, handler: Callable[..., Any]) -> None:
        """Remove every registration of a handler for an event name."""
        if name in self._handlers:
            self._handlers[name] = [h for h in self._handlers[name] if h is not handler]

    def emit(self, name: str, *args: Any) -> None:
        """Call each handler registered for ``name`` with ``args``."""
        # Snapshot so handlers may unsubscribe while being notified
        for handler in list(self._handlers.get(name, ())):
            try:
                handler(*args)
            except Exception:
                logger.exception(f"Handler {getattr(handler, '__name__', handler)!r} failed for {name}")

    def listener_count(self, name: str) -> int:
        return len(self._handlers.get(name, ()))

    def _remove(self, name: str, handler: Callable[..., Any]) -> None:
        handlers = self._handlers.get(name)
        if not handlers:
            return
        # Drop a single registration; the same callable may be registered twice
        for i, registered in enumerate(handlers):
            if registered is handler:
                del handlers[i]
                break
