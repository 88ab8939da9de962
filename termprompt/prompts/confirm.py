"""Yes/no question."""

from rich.console import RenderableType
from rich.text import Text

from ..keys import KeyEvent
from .base import BasePrompt, RenderContext
from .models import ConfirmResult


class ConfirmPrompt(BasePrompt[bool]):
    """Answer with y/n, or flip the answer with the arrow keys, Tab or Space."""

    result_class = ConfirmResult

    def __init__(self, message: str, *, initial_value: bool = False, **kwargs):
        super().__init__(message, initial_value=bool(initial_value), **kwargs)

    def display_message(self) -> str:
        return f"{self.message} {'(Y/n)' if self.value else '(y/N)'}"

    def handle_input(self, key: KeyEvent) -> None:
        if key.char in ("y", "Y") and key.is_printable:
            self.set_value(True)
        elif key.char in ("n", "N") and key.is_printable:
            self.set_value(False)
        elif key.name in ("left", "right", "tab", "space"):
            self.set_value(not self.value)

    def format_value(self, value) -> str:
        return "" if value is None else ("Yes" if value else "No")

    def render_content(self, ctx: RenderContext) -> RenderableType:
        colors = ctx.theme.colors
        yes_style = colors.success if ctx.value else colors.muted
        no_style = colors.muted if ctx.value else colors.error
        if ctx.focused:
            if ctx.value:
                yes_style += " reverse"
            else:
                no_style += " reverse"
        line = Text()
        line.append("Yes", style=yes_style)
        line.append(" / ")
        line.append("No", style=no_style)
        return line
