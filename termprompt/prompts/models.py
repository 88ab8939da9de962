"""Data models shared by the prompt variants."""

from enum import Enum
from typing import Any, Generic, Iterable, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PromptStatus(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    VALIDATING = "validating"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (PromptStatus.SUBMITTED, PromptStatus.CANCELLED)


class PromptState(BaseModel):
    """Session state of one mounted prompt."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any = Field(default=None, description="Current value, type depends on the variant")
    error: Optional[str] = Field(default=None, description="Validation error shown inline")
    submitting: bool = Field(default=False, description="A submission is being validated")
    focused: bool = Field(default=True)
    status: PromptStatus = Field(default=PromptStatus.IDLE)


class SelectOption(BaseModel):
    """One entry of a select, multi-select or autocomplete list."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any
    label: str
    hint: Optional[str] = None
    disabled: bool = False


OptionLike = Union[SelectOption, dict, str]


def to_option(option: OptionLike) -> SelectOption:
    """Coerce a dict, a bare string or an option into a ``SelectOption``."""
    if isinstance(option, SelectOption):
        return option
    if isinstance(option, str):
        return SelectOption(value=option, label=option)
    data = dict(option)
    if "label" not in data and "value" in data:
        data["label"] = str(data["value"])
    return SelectOption.model_validate(data)


def to_options(options: Iterable[OptionLike]) -> list[SelectOption]:
    return [to_option(option) for option in options]


# Tagged results, one per prompt kind

class PromptResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return not self.cancelled


class TextResult(PromptResult):
    kind: Literal["text"] = "text"
    value: Optional[str] = None


class PasswordResult(PromptResult):
    kind: Literal["password"] = "password"
    value: Optional[str] = Field(default=None, repr=False)


class ConfirmResult(PromptResult):
    kind: Literal["confirm"] = "confirm"
    value: Optional[bool] = None


class ToggleResult(PromptResult):
    kind: Literal["toggle"] = "toggle"
    value: Optional[bool] = None


class SelectResult(PromptResult, Generic[T]):
    kind: Literal["select"] = "select"
    value: Optional[T] = None
    label: Optional[str] = None


class MultiSelectResult(PromptResult, Generic[T]):
    kind: Literal["multiselect"] = "multiselect"
    value: list[T] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)


class AutocompleteResult(PromptResult, Generic[T]):
    kind: Literal["autocomplete"] = "autocomplete"
    value: Optional[T] = None
    from_query: bool = Field(default=False, description="Value is the free-typed query, not an option")
