"""Horizontal progress bar."""

import math
from typing import Optional

from rich.console import RenderableType
from rich.text import Text

from ..theme import ThemeOverride, resolve_theme


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class ProgressBar:
    """Fixed-width bar for a 0-100 percentage.

    The filled glyph count is ``width * clamp(percent, 0, 100) / 100``
    rounded half up; the rest of the width is empty glyphs.
    """

    def __init__(self, percent: float = 0, *, width: int = 50, character: str = "█",
                 empty_character: str = " ", color: Optional[str] = None,
                 empty_color: Optional[str] = None, show_percentage: bool = True,
                 show_value: bool = False, total: float = 100, value: Optional[float] = None,
                 prefix: str = "", suffix: str = "", theme: ThemeOverride = None):
        self.percent = percent
        self.width = width
        self.character = character
        self.empty_character = empty_character
        self.theme = resolve_theme(theme)
        self.color = color or self.theme.colors.success
        self.empty_color = empty_color or self.theme.colors.muted
        self.show_percentage = show_percentage
        self.show_value = show_value
        self.total = total
        self.value = value
        self.prefix = prefix
        self.suffix = suffix

    @property
    def clamped(self) -> float:
        return min(100.0, max(0.0, float(self.percent)))

    @property
    def filled_count(self) -> int:
        return round_half_up(self.width * self.clamped / 100)

    @property
    def empty_count(self) -> int:
        return self.width - self.filled_count

    @property
    def shown_value(self) -> float:
        if self.value is not None:
            return self.value
        return round_half_up(self.percent / 100 * self.total)

    def render(self) -> Text:
        line = Text()
        if self.prefix:
            line.append(f"{self.prefix} ")
        line.append(self.character * self.filled_count, style=self.color)
        line.append(self.empty_character * self.empty_count, style=self.empty_color)
        if self.show_percentage:
            line.append(f" {round_half_up(self.percent)}%")
        if self.show_value:
            line.append(f" {_number(self.shown_value)}/{_number(self.total)}")
        if self.suffix:
            line.append(f" {self.suffix}")
        return line

    def __rich__(self) -> RenderableType:
        return self.render()


def _number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
