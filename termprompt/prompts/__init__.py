"""Interactive prompt variants built on the base prompt engine."""

from .models import (
    AutocompleteResult,
    ConfirmResult,
    MultiSelectResult,
    PasswordResult,
    PromptResult,
    PromptState,
    PromptStatus,
    SelectOption,
    SelectResult,
    TextResult,
    ToggleResult,
)
from .base import BasePrompt, RenderContext
from .navigation import ListNavigator
from .text import TextPrompt
from .password import PasswordPrompt
from .confirm import ConfirmPrompt
from .toggle import TogglePrompt
from .select import SelectPrompt
from .multiselect import MultiSelectPrompt
from .autocomplete import AutocompletePrompt

__all__ = [
    "BasePrompt",
    "RenderContext",
    "ListNavigator",
    "TextPrompt",
    "PasswordPrompt",
    "ConfirmPrompt",
    "TogglePrompt",
    "SelectPrompt",
    "MultiSelectPrompt",
    "AutocompletePrompt",
    "PromptResult",
    "PromptState",
    "PromptStatus",
    "SelectOption",
    "TextResult",
    "PasswordResult",
    "ConfirmResult",
    "ToggleResult",
    "SelectResult",
    "MultiSelectResult",
    "AutocompleteResult",
]
