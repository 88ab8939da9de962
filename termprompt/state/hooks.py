"""Small stateful helpers built on the state cell."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .cell import State
from .emitter import Unsubscribe

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Toggle:
    """Boolean cell with a flip operation."""

    def __init__(self, initial_value: bool = False):
        self._state = State(initial_value)

    def get(self) -> bool:
        return self._state.get()

    def toggle(self) -> None:
        self._state.set(lambda value: not value)

    def set(self, value: bool) -> None:
        self._state.set(value)

    def subscribe(self, handler: Callable[[bool], Any]) -> Unsubscribe:
        return self._state.subscribe(handler)


class PreviousTracker(Generic[T]):
    """Remembers the value that was current before the latest ``set``."""

    def __init__(self, initial_value: T):
        self._previous: Optional[T] = None
        self._current: T = initial_value
        self._state: State[tuple] = State((None, initial_value))

    def get(self) -> Optional[T]:
        return self._previous

    @property
    def current(self) -> T:
        return self._current

    def set(self, value: T) -> None:
        self._previous, self._current = self._current, value
        self._state.set((self._previous, self._current))

    def subscribe(self, handler: Callable[[Optional[T]], Any]) -> Unsubscribe:
        return self._state.subscribe(lambda pair: handler(pair[0]))


class AsyncResult(BaseModel):
    """Snapshot of an asynchronous call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: Literal["idle", "pending", "success", "error"] = Field(default="idle")
    value: Any = Field(default=None, description="Last successful result")
    error: Optional[BaseException] = Field(default=None, description="Last failure")


class AsyncState(Generic[T]):
    """Tracks the lifecycle of an async function in a state cell.

    ``execute`` re-raises failures after recording them.
    """

    def __init__(self, func: Callable[..., Awaitable[T]]):
        self._func = func
        self._state: State[AsyncResult] = State(AsyncResult())

    @property
    def state(self) -> AsyncResult:
        return self._state.get()

    async def execute(self, *args: Any, **kwargs: Any) -> T:
        self._state.set(AsyncResult(status="pending"))
        try:
            result = await self._func(*args, **kwargs)
        except Exception as e:
            self._state.set(AsyncResult(status="error", error=e))
            raise
        self._state.set(AsyncResult(status="success", value=result))
        return result

    def subscribe(self, handler: Callable[[AsyncResult], Any]) -> Unsubscribe:
        return self._state.subscribe(handler)
