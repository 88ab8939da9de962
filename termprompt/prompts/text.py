"""Single-line text input with a movable cursor."""

import logging
from typing import Callable, Optional, Union

from rich.console import RenderableType
from rich.text import Text

from ..keys import KeyEvent
from .base import BasePrompt, RenderContext
from .models import TextResult

logger = logging.getLogger(__name__)

Mask = Union[str, Callable[[str], str], None]


class TextPrompt(BasePrompt[str]):
    """Free text entry.

    Keys: printable characters insert at the cursor, Backspace deletes
    before it, Delete deletes under it, Left/Right/Home/End move it,
    Ctrl+U clears the line.
    """

    result_class = TextResult

    def __init__(self, message: str, *, default_value: str = "", placeholder: str = "",
                 mask: Mask = None, **kwargs):
        kwargs.setdefault("initial_value", default_value)
        super().__init__(message, **kwargs)
        if self.value is None:
            self.state.update(value="")
        self.placeholder = placeholder
        self.mask = mask
        self.cursor = len(self.value)

    def handle_input(self, key: KeyEvent) -> None:
        text = self.value or ""
        if key.is_("backspace"):
            if self.cursor > 0:
                self._edit(text[:self.cursor - 1] + text[self.cursor:], self.cursor - 1)
        elif key.is_("delete"):
            if self.cursor < len(text):
                self._edit(text[:self.cursor] + text[self.cursor + 1:], self.cursor)
        elif key.is_("left"):
            self._move(self.cursor - 1)
        elif key.is_("right"):
            self._move(self.cursor + 1)
        elif key.is_("home") or (key.ctrl and key.char == "a"):
            self._move(0)
        elif key.is_("end") or (key.ctrl and key.char == "e"):
            self._move(len(text))
        elif key.ctrl and key.char == "u":
            self._edit("", 0)
        elif key.is_printable:
            self._edit(text[:self.cursor] + key.char + text[self.cursor:], self.cursor + len(key.char))

    def insert(self, chunk: str) -> None:
        """Type ``chunk`` at the cursor."""
        text = self.value or ""
        self._edit(text[:self.cursor] + chunk + text[self.cursor:], self.cursor + len(chunk))

    def _edit(self, text: str, cursor: int) -> None:
        self.cursor = max(0, min(cursor, len(text)))
        self.set_value(text)
        self.invalidate()

    def _move(self, cursor: int) -> None:
        moved = max(0, min(cursor, len(self.value or "")))
        if moved != self.cursor:
            self.cursor = moved
            self.invalidate()

    def masked(self, text: str) -> str:
        if not self.mask or not text:
            return text
        if callable(self.mask):
            return self.mask(text)
        return self.mask * len(text)

    def format_value(self, value: Optional[str]) -> str:
        return self.masked(value or "")

    def render_content(self, ctx: RenderContext) -> RenderableType:
        shown = self.masked(ctx.value or "")
        if not shown and not ctx.focused:
            return Text(self.placeholder, style=ctx.theme.colors.muted)
        line = Text(shown[:self.cursor])
        if ctx.focused:
            line.append(shown[self.cursor:self.cursor + 1] or " ", style="reverse")
            line.append(shown[self.cursor + 1:])
            if not shown and self.placeholder:
                line.append(self.placeholder, style=ctx.theme.colors.muted)
        else:
            line.append(shown[self.cursor:])
        return line
