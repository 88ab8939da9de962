"""On/off switch with custom labels."""

from rich.console import RenderableType
from rich.text import Text

from ..keys import KeyEvent
from .base import BasePrompt, RenderContext
from .models import ToggleResult


class TogglePrompt(BasePrompt[bool]):
    result_class = ToggleResult

    def __init__(self, message: str, *, initial_value: bool = False,
                 active: str = "Yes", inactive: str = "No", **kwargs):
        super().__init__(message, initial_value=bool(initial_value), **kwargs)
        self.active = active
        self.inactive = inactive

    def handle_input(self, key: KeyEvent) -> None:
        if key.name in ("left", "right", "space"):
            self.set_value(not self.value)

    def format_value(self, value) -> str:
        if value is None:
            return ""
        return self.active if value else self.inactive

    def render_content(self, ctx: RenderContext) -> RenderableType:
        colors = ctx.theme.colors
        style = colors.success if ctx.value else colors.text.secondary
        if ctx.focused:
            style += " bold"
        line = Text(f"[ {self.active if ctx.value else self.inactive} ]", style=style)
        if ctx.focused:
            line.append("  ←/→ or Space to toggle, Enter to confirm", style=colors.text.secondary)
        return line
