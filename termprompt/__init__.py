"""termprompt: interactive terminal prompts, rendering primitives and a task runner."""

__version__ = "0.1.0"

from .theme import DEFAULT_THEME, Theme, resolve_theme
from .keys import Key, KeyEvent
from .prompts import (
    AutocompletePrompt,
    ConfirmPrompt,
    MultiSelectPrompt,
    PasswordPrompt,
    SelectOption,
    SelectPrompt,
    TextPrompt,
    TogglePrompt,
)
from .components import ProgressBar, Spinner, Table
from .tasks import RunResult, TaskRunner, TaskSpec, run_tasks
from .terminal import TerminalSession
from .config import ConfigError, Settings, load_settings

__all__ = [
    "__version__",
    "DEFAULT_THEME",
    "Theme",
    "resolve_theme",
    "Key",
    "KeyEvent",
    "TextPrompt",
    "PasswordPrompt",
    "ConfirmPrompt",
    "TogglePrompt",
    "SelectPrompt",
    "MultiSelectPrompt",
    "AutocompletePrompt",
    "SelectOption",
    "ProgressBar",
    "Spinner",
    "Table",
    "RunResult",
    "TaskRunner",
    "TaskSpec",
    "run_tasks",
    "TerminalSession",
    "ConfigError",
    "Settings",
    "load_settings",
]
