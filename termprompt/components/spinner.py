"""Animated spinner with the standard named frame sets."""

import asyncio
import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from rich.console import RenderableType
from rich.spinner import SPINNERS as RICH_SPINNERS
from rich.text import Text

from ..state import State
from ..state.emitter import Unsubscribe
from ..theme import ThemeOverride, resolve_theme

logger = logging.getLogger(__name__)

DEFAULT_SPINNER = "dots"
DEFAULT_SPEED = 0.15

SPINNERS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    name: tuple(spec["frames"]) for name, spec in RICH_SPINNERS.items()
})


def spinner_frames(name: str) -> tuple[str, ...]:
    """Frames of the named spinner, falling back to ``dots``."""
    frames = SPINNERS.get(name)
    if frames is None:
        logger.debug(f"Unknown spinner {name!r}, using {DEFAULT_SPINNER!r}")
        return SPINNERS[DEFAULT_SPINNER]
    return frames


class Spinner:
    """Cycles through a frame set on a fixed interval and renders ``glyph label``.

    Usable as an async context manager, which runs the interval task for the
    duration of the block::

        async with Spinner(label="Loading") as spinner:
            ...
    """

    def __init__(self, type: str = DEFAULT_SPINNER, label: str = "", speed: float = DEFAULT_SPEED,
                 color: Optional[str] = None, theme: ThemeOverride = None):
        self.type = type if type in SPINNERS else DEFAULT_SPINNER
        self.frames = spinner_frames(type)
        self.label = label
        self.speed = speed
        self.theme = resolve_theme(theme)
        self.color = color or self.theme.colors.primary
        self.frame: State[int] = State(0)
        self._task: Optional[asyncio.Task] = None

    @property
    def glyph(self) -> str:
        return self.frames[self.frame.get()]

    def advance(self) -> int:
        """Move to the next frame, wrapping around."""
        self.frame.set(lambda frame: (frame + 1) % len(self.frames))
        return self.frame.get()

    def subscribe(self, handler: Callable[[int], Any]) -> Unsubscribe:
        return self.frame.subscribe(handler)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self.speed)
            self.advance()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._tick())

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def __aenter__(self) -> "Spinner":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.stop()

    def render(self) -> Text:
        line = Text(self.glyph, style=self.color)
        if self.label:
            line.append(f" {self.label}")
        return line

    def __rich__(self) -> RenderableType:
        return self.render()
