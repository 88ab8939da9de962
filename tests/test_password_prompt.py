"""Tests for the password prompt."""

import io
import pytest

from rich.console import Console

from termprompt.keys import Key, KeyEvent, keys_from_text
from termprompt.prompts import PasswordPrompt, PasswordResult, PromptStatus


def type_text(prompt, text):
    for key in keys_from_text(text):
        prompt.handle_key(key)


async def press_enter(prompt):
    prompt.handle_key(Key.RETURN)
    await prompt.drain()


class TestPasswordPrompt:
    """Test cases for PasswordPrompt."""

    @pytest.mark.asyncio
    async def test_required_by_default(self):
        prompt = PasswordPrompt("Password")
        prompt.mount()

        await press_enter(prompt)

        assert prompt.error == "Password is required"

    @pytest.mark.asyncio
    async def test_value_is_masked_when_rendered(self):
        """The typed characters never reach the screen."""
        prompt = PasswordPrompt("Password")
        prompt.mount()
        type_text(prompt, "hunter2")

        console = Console(file=io.StringIO(), width=60, color_system=None)
        console.print(prompt)
        output = console.file.getvalue()

        assert "hunter2" not in output
        assert "•••••••" in output

    @pytest.mark.asyncio
    async def test_confirmation_flow(self):
        """The second entry must match the first before the prompt submits."""
        prompt = PasswordPrompt("Password", confirm=True)
        prompt.mount()

        type_text(prompt, "s3cret")
        await press_enter(prompt)
        assert prompt.step == "confirm"
        assert prompt.value == ""
        assert prompt.status is PromptStatus.EDITING
        assert prompt.display_message() == "Confirm password"

        type_text(prompt, "other")
        await press_enter(prompt)
        assert prompt.error == "Passwords do not match"

        prompt.handle_key(KeyEvent.control("u"))
        type_text(prompt, "s3cret")
        await press_enter(prompt)

        assert prompt.status is PromptStatus.SUBMITTED
        assert prompt.result == PasswordResult(value="s3cret")
        assert "s3cret" not in repr(prompt.result)

    @pytest.mark.asyncio
    async def test_validator_runs_on_first_entry(self):
        prompt = PasswordPrompt("Password", confirm=True,
                                validate=lambda v: "Use 8+ characters" if len(v) < 8 else None)
        prompt.mount()

        type_text(prompt, "short")
        await press_enter(prompt)

        assert prompt.error == "Use 8+ characters"
        assert prompt.step == "password"

    @pytest.mark.asyncio
    async def test_escape_in_confirm_step_cancels(self):
        prompt = PasswordPrompt("Password", confirm=True)
        prompt.mount()
        type_text(prompt, "s3cret")
        await press_enter(prompt)

        prompt.handle_key(Key.ESCAPE)

        assert prompt.result.cancelled
