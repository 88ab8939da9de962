"""Tests for running prompts against piped terminal input."""

import asyncio
import io

import pytest
from prompt_toolkit.input import create_pipe_input
from rich.console import Console

from termprompt.prompts import PromptStatus, SelectPrompt, TextPrompt
from termprompt.terminal import TerminalSession


def make_console() -> Console:
    return Console(file=io.StringIO(), width=80, color_system=None)


class TestTerminalSession:
    """Test cases for TerminalSession."""

    @pytest.mark.asyncio
    async def test_typed_text_is_submitted(self):
        console = make_console()
        prompt = TextPrompt("Name")

        with create_pipe_input() as inp:
            inp.send_text("abc\r")
            result = await asyncio.wait_for(TerminalSession(console, inp).run(prompt), timeout=5)

        assert result.value == "abc"
        assert not result.cancelled
        assert not prompt.mounted
        assert "✔ Name · abc" in console.file.getvalue()

    @pytest.mark.asyncio
    async def test_lone_escape_cancels(self):
        console = make_console()
        prompt = TextPrompt("Name")

        with create_pipe_input() as inp:
            inp.send_text("\x1b")
            result = await asyncio.wait_for(
                TerminalSession(console, inp, escape_timeout=0.01).run(prompt), timeout=5
            )

        assert result.cancelled
        assert prompt.status is PromptStatus.CANCELLED
        assert "✖ Name" in console.file.getvalue()

    @pytest.mark.asyncio
    async def test_alt_key_does_not_cancel(self):
        console = make_console()
        prompt = TextPrompt("Name")

        with create_pipe_input() as inp:
            inp.send_text("ab\x1bbc\r")
            result = await asyncio.wait_for(TerminalSession(console, inp).run(prompt), timeout=5)

        assert not result.cancelled
        assert result.value == "abc"

    @pytest.mark.asyncio
    async def test_arrow_keys_reach_the_prompt(self):
        console = make_console()
        prompt = SelectPrompt("Pick", [{"value": "a", "label": "A"}, {"value": "b", "label": "B"}])

        with create_pipe_input() as inp:
            inp.send_text("\x1b[B\r")
            result = await asyncio.wait_for(TerminalSession(console, inp).run(prompt), timeout=5)

        assert result.value == "b"

    @pytest.mark.asyncio
    async def test_summary_can_be_suppressed(self):
        console = make_console()

        with create_pipe_input() as inp:
            inp.send_text("x\r")
            await asyncio.wait_for(
                TerminalSession(console, inp, show_summary=False).run(TextPrompt("Quiet")), timeout=5
            )

        assert console.file.getvalue() == ""
