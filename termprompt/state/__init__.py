"""Reactive state primitives: emitter, observable cell, debounce, cancellation."""

from .emitter import EventEmitter
from .cell import State, same_value
from .debounce import Debouncer
from .cancel import CancellationToken
from .hooks import AsyncResult, AsyncState, PreviousTracker, Toggle

__all__ = [
    "EventEmitter",
    "State",
    "same_value",
    "Debouncer",
    "CancellationToken",
    "AsyncResult",
    "AsyncState",
    "PreviousTracker",
    "Toggle",
]
