"""Single choice from a paginated option list."""

import logging
from typing import Any, Iterable, Optional

from rich.console import Group, RenderableType
from rich.text import Text

from ..keys import KeyEvent
from ..theme import Theme
from .base import BasePrompt, RenderContext
from .models import OptionLike, SelectOption, SelectResult, to_options
from .navigation import ListNavigator

logger = logging.getLogger(__name__)

POINTER = "❯ "
NAVIGATION_HINT = "Use arrow keys to navigate, Enter to select"


def find_index(options: list[SelectOption], value: Any) -> int:
    for i, option in enumerate(options):
        if option.value == value:
            return i
    return -1


def option_line(option: SelectOption, marker: str, highlighted: bool, focused: bool, theme: Theme) -> Text:
    colors = theme.colors
    if highlighted and focused:
        style = f"{theme.typography.selected} {colors.text.inverted} on {colors.primary}"
    else:
        style = colors.text.primary
    line = Text(marker, style=style)
    line.append(option.label, style=style)
    if option.hint:
        line.append(f" ({option.hint})", style=colors.text.secondary)
    return line


class SelectPrompt(BasePrompt[Any]):
    """Pick one option. Disabled options are hidden and never highlighted.

    The session value is the highlighted option's value, so moving the
    highlight counts as an edit and clears any shown error.
    """

    result_class = SelectResult

    def __init__(self, message: str, options: Iterable[OptionLike], *,
                 initial_value: Any = None, limit: int = 5, **kwargs):
        self.options = to_options(options)
        self.enabled = [option for option in self.options if not option.disabled]
        start = max(0, find_index(self.enabled, initial_value)) if initial_value is not None else 0
        self.navigator: ListNavigator[SelectOption] = ListNavigator(self.enabled, limit=limit, index=start)
        current = self.navigator.current
        super().__init__(message, initial_value=current.value if current else None, **kwargs)

    @property
    def limit(self) -> int:
        return self.navigator.limit

    @property
    def highlighted(self) -> Optional[SelectOption]:
        return self.navigator.current

    @property
    def selected_index(self) -> int:
        return self.navigator.index

    @property
    def scroll_offset(self) -> int:
        return self.navigator.offset

    def handle_input(self, key: KeyEvent) -> None:
        if self.navigator.navigate(key.name):
            self._sync_highlight()

    def _sync_highlight(self) -> None:
        current = self.navigator.current
        self.set_value(current.value if current else None)
        self.invalidate()

    def submission_value(self) -> Any:
        current = self.navigator.current
        return current.value if current else None

    def make_result(self, value: Any, cancelled: bool = False) -> SelectResult:
        if cancelled:
            return SelectResult(cancelled=True)
        current = self.navigator.current
        return SelectResult(value=value, label=current.label if current else None)

    def format_value(self, value: Any) -> str:
        if isinstance(self.result, SelectResult) and self.result.label:
            return self.result.label
        return super().format_value(value)

    def render_content(self, ctx: RenderContext) -> RenderableType:
        colors = ctx.theme.colors
        if not self.enabled:
            return Text("No options available", style=colors.muted)
        rows: list[RenderableType] = []
        for index, option in self.navigator.visible():
            highlighted = index == self.navigator.index
            rows.append(option_line(option, POINTER if highlighted else "  ", highlighted, ctx.focused, ctx.theme))
        if self.navigator.has_more:
            rows.append(Text(NAVIGATION_HINT, style=colors.text.secondary))
        return Group(*rows)
