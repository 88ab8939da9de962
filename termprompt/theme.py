"""Theme tokens for prompts and rendering primitives.

The default theme is an immutable constant. Every prompt and component
resolves its own theme by deep-merging a partial override over it, so no
instance ever mutates shared styling.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class _Tokens(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TextColors(_Tokens):
    primary: str = "default"
    secondary: str = "#8E8E93"
    inverted: str = "#FFFFFF"
    disabled: str = "#8E8E93"
    error: str = "#FF3B30"
    success: str = "#34C759"


class BackgroundColors(_Tokens):
    default: str = "default"
    selected: str = "#F2F2F7"
    hover: str = "#F2F2F7"
    active: str = "#E5E5EA"
    disabled: str = "#F2F2F7"
    error: str = "#FFE5E5"
    success: str = "#E5F9E5"
    warning: str = "#FFF4E5"
    info: str = "#E5F5FF"


class BorderColors(_Tokens):
    default: str = "#C7C7CC"
    focus: str = "#007AFF"
    error: str = "#FF3B30"
    success: str = "#34C759"
    warning: str = "#FF9500"
    info: str = "#5AC8FA"


class Colors(_Tokens):
    primary: str = "#007AFF"
    success: str = "#34C759"
    warning: str = "#FF9500"
    error: str = "#FF3B30"
    info: str = "#5AC8FA"
    muted: str = "#8E8E93"
    text: TextColors = Field(default_factory=TextColors)
    background: BackgroundColors = Field(default_factory=BackgroundColors)
    border: BorderColors = Field(default_factory=BorderColors)


class Spacing(_Tokens):
    """Spacing in terminal cells."""

    xs: int = 0
    sm: int = 1
    md: int = 1
    lg: int = 2
    xl: int = 3


class Typography(_Tokens):
    """Rich style strings for the recurring text roles."""

    message: str = "bold"
    hint: str = "italic"
    selected: str = "bold"
    header: str = "bold"


class Theme(_Tokens):
    colors: Colors = Field(default_factory=Colors)
    spacing: Spacing = Field(default_factory=Spacing)
    typography: Typography = Field(default_factory=Typography)
    border_style: str = Field(default="rounded", description="rich box name for prompt frames")


DEFAULT_THEME = Theme()

ThemeOverride = Union[Theme, Mapping[str, Any], None]


def _deep_merge(base: dict, override: Mapping[str, Any]) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_theme(override: ThemeOverride = None, base: Optional[Theme] = None) -> Theme:
    """Merge a partial override over ``base`` (the default theme).

    Args:
        override: A full ``Theme``, a nested mapping of token overrides,
            or None
        base: Theme to merge over; defaults to ``DEFAULT_THEME``

    Returns:
        A new frozen Theme.

    Raises:
        pydantic.ValidationError: If the override names unknown tokens
    """
    base = base or DEFAULT_THEME
    if override is None:
        return base
    if isinstance(override, Theme):
        return override
    merged = _deep_merge(base.model_dump(), override)
    return Theme.model_validate(merged)
