"""Several choices from a paginated option list."""

import logging
from typing import Any, Iterable, Optional

from rich.console import Group, RenderableType
from rich.text import Text

from ..keys import KeyEvent
from .base import BasePrompt, RenderContext, ValidationOutcome
from .models import MultiSelectResult, OptionLike, SelectOption, to_options
from .navigation import ListNavigator
from .select import option_line

logger = logging.getLogger(__name__)

CHECKED = "◉ "
UNCHECKED = "◯ "
NONE_SELECTED_MESSAGE = "At least one option must be selected"


def _plural(count: int) -> str:
    return f"{count} option{'s' if count > 1 else ''}"


class MultiSelectPrompt(BasePrompt[tuple]):
    """Toggle options with Space, Left or Right; submit with Enter.

    The session value is the tuple of selected values in the order they
    were picked. Adding beyond ``max_selected`` is ignored; submitting with
    fewer than ``min_selected`` or more than ``max_selected`` is refused.
    """

    result_class = MultiSelectResult
    required_message = NONE_SELECTED_MESSAGE

    def __init__(self, message: str, options: Iterable[OptionLike], *,
                 initial_value: Optional[Iterable[Any]] = None,
                 min_selected: Optional[int] = None,
                 max_selected: Optional[int] = None,
                 limit: int = 5, **kwargs):
        if min_selected is not None and max_selected is not None and min_selected > max_selected:
            raise ValueError(f"min_selected ({min_selected}) exceeds max_selected ({max_selected})")
        self.options = to_options(options)
        self.enabled = [option for option in self.options if not option.disabled]
        self.min_selected = min_selected
        self.max_selected = max_selected
        self.navigator: ListNavigator[SelectOption] = ListNavigator(self.enabled, limit=limit)
        enabled_values = [option.value for option in self.enabled]
        selected = tuple(value for value in (initial_value or ()) if value in enabled_values)
        super().__init__(message, initial_value=selected, **kwargs)

    @property
    def selected(self) -> tuple:
        return self.value or ()

    @property
    def selected_index(self) -> int:
        return self.navigator.index

    @property
    def scroll_offset(self) -> int:
        return self.navigator.offset

    def is_selected(self, option: SelectOption) -> bool:
        return option.value in self.selected

    def handle_input(self, key: KeyEvent) -> None:
        if key.name in ("space", "left", "right"):
            current = self.navigator.current
            if current is not None:
                self.toggle(current)
        elif self.navigator.navigate(key.name):
            self.invalidate()

    def toggle(self, option: SelectOption) -> bool:
        """Flip membership of ``option``; returns False if the change was rejected."""
        if option.disabled:
            return False
        selected = self.selected
        if option.value in selected:
            self.set_value(tuple(value for value in selected if value != option.value))
            return True
        if self.max_selected is not None and len(selected) >= self.max_selected:
            logger.debug(f"Ignoring selection of {option.label!r}: limit of {self.max_selected} reached")
            return False
        self.set_value(selected + (option.value,))
        return True

    def selection_error(self, selected: tuple) -> ValidationOutcome:
        count = len(selected)
        if self.required and count == 0:
            return NONE_SELECTED_MESSAGE
        if self.min_selected is not None and count < self.min_selected:
            return f"Select at least {_plural(self.min_selected)}"
        if self.max_selected is not None and count > self.max_selected:
            return f"Select at most {_plural(self.max_selected)}"
        return None

    async def check_value(self, value: Any) -> ValidationOutcome:
        return self.selection_error(tuple(value or ()))

    def make_result(self, value: Any, cancelled: bool = False) -> MultiSelectResult:
        if cancelled:
            return MultiSelectResult(cancelled=True)
        values = list(value or ())
        return MultiSelectResult(value=values, labels=[self._label_for(v) for v in values])

    def _label_for(self, value: Any) -> str:
        for option in self.options:
            if option.value == value:
                return option.label
        return str(value)

    def format_value(self, value: Any) -> str:
        return ", ".join(self._label_for(v) for v in (value or ()))

    def render_content(self, ctx: RenderContext) -> RenderableType:
        colors = ctx.theme.colors
        if not self.enabled:
            return Text("No options available", style=colors.muted)
        rows: list[RenderableType] = []
        for index, option in self.navigator.visible():
            marker = CHECKED if self.is_selected(option) else UNCHECKED
            rows.append(option_line(option, marker, index == self.navigator.index, ctx.focused, ctx.theme))

        hint = Text(style=colors.text.secondary)
        if self.navigator.has_more:
            hint.append("↑/↓ to navigate, ")
        hint.append("Space/←/→ to toggle, Enter to submit, Esc to cancel")
        problem = self.selection_error(self.selected)
        if problem:
            hint.append(f" ({problem})", style=colors.error)
        rows.append(hint)

        if self.selected:
            rows.append(Text(f"Selected: {self.format_value(self.selected)}"))
        return Group(*rows)
