"""Masked text entry with an optional confirmation step."""

import logging
from typing import Literal, Optional

from .base import ValidationOutcome
from .models import PasswordResult, PromptStatus
from .text import TextPrompt

logger = logging.getLogger(__name__)

MISMATCH_MESSAGE = "Passwords do not match"


class PasswordPrompt(TextPrompt):
    """Password entry. Required by default.

    With ``confirm=True`` the first accepted entry is stored and the prompt
    asks for it again; the prompt only submits when both entries match.
    """

    result_class = PasswordResult
    required_message = "Password is required"

    def __init__(self, message: str, *, mask: str = "•", confirm: bool = False,
                 confirm_message: str = "Confirm password", required: bool = True, **kwargs):
        kwargs.pop("placeholder", None)
        super().__init__(message, mask=mask, required=required, **kwargs)
        self.confirm = confirm
        self.confirm_message = confirm_message
        self.step: Literal["password", "confirm"] = "password"
        self._first_entry: Optional[str] = None

    def display_message(self) -> str:
        return self.message if self.step == "password" else self.confirm_message

    async def check_value(self, value) -> ValidationOutcome:
        if self.step == "confirm" and value != self._first_entry:
            return MISMATCH_MESSAGE
        return None

    async def _run_checks(self, value) -> ValidationOutcome:
        if self.step == "confirm":
            # The first entry already passed the custom validator
            return await self.check_value(value)
        return await super()._run_checks(value)

    def accept(self, value: str) -> bool:
        if self.confirm and self.step == "password":
            self._first_entry = value
            self.step = "confirm"
            self.cursor = 0
            self._edit_generation += 1
            self.state.update(value="", error=None, status=PromptStatus.EDITING)
            logger.debug("Password entered, asking for confirmation")
            return False
        return super().accept(value)
