"""Observable value holder."""

from collections.abc import Callable
from typing import Any, Generic, TypeVar, Union

from .emitter import EventEmitter, Unsubscribe

T = TypeVar("T")

Updater = Callable[[T], T]


def same_value(current: Any, candidate: Any) -> bool:
    """Return True when setting ``candidate`` over ``current`` changes nothing.

    Identity, or equality between values of the same type. ``1`` and ``True``
    compare equal in Python but are different values here.
    """
    if current is candidate:
        return True
    if type(current) is not type(candidate):
        return False
    return bool(current == candidate)


class State(Generic[T]):
    """Holds one value and notifies subscribers synchronously on change.

    New subscribers are called immediately with the current value before
    they receive any change notification.
    """

    def __init__(self, initial_value: T):
        self._value = initial_value
        self._emitter = EventEmitter()

    def get(self) -> T:
        return self._value

    def set(self, value: Union[T, Updater]) -> None:
        """Store a new value, or apply an updater to the previous one.

        Subscribers are notified in subscription order only when the value
        actually changes.
        """
        next_value = value(self._value) if callable(value) else value
        if same_value(self._value, next_value):
            return
        self._value = next_value
        self._emitter.emit("change", next_value)

    def update(self, **changes: Any) -> None:
        """Shorthand for copying a pydantic model value with ``changes``."""
        self.set(lambda current: current.model_copy(update=changes))

    def subscribe(self, handler: Callable[[T], Any]) -> Unsubscribe:
        """Register ``handler``, call it with the current value, return unsubscribe."""
        handler(self._value)
        return self._emitter.on("change", handler)

    @property
    def subscriber_count(self) -> int:
        return self._emitter.listener_count("change")

    def __repr__(self) -> str:
        return f"State({self._value!r})"
