"""Tests for the multi-select prompt."""

import io
import pytest

from rich.console import Console

from termprompt.keys import Key
from termprompt.prompts import MultiSelectPrompt, MultiSelectResult, PromptStatus

TOPPINGS = [
    {"value": "cheese", "label": "Cheese"},
    {"value": "ham", "label": "Ham"},
    {"value": "olives", "label": "Olives"},
    {"value": "basil", "label": "Basil"},
]


async def press_enter(prompt):
    prompt.handle_key(Key.RETURN)
    await prompt.drain()


class TestMultiSelectPrompt:
    """Test cases for MultiSelectPrompt."""

    @pytest.mark.asyncio
    async def test_selection_order_is_kept(self):
        """Values are submitted in the order they were picked."""
        prompt = MultiSelectPrompt("Toppings", TOPPINGS)
        prompt.mount()

        prompt.handle_key(Key.DOWN)
        prompt.handle_key(Key.SPACE)
        prompt.handle_key(Key.UP)
        prompt.handle_key(Key.RIGHT)
        await press_enter(prompt)

        assert prompt.result == MultiSelectResult(value=["ham", "cheese"], labels=["Ham", "Cheese"])

    @pytest.mark.asyncio
    async def test_toggle_removes_selection(self):
        prompt = MultiSelectPrompt("Toppings", TOPPINGS)
        prompt.mount()

        prompt.handle_key(Key.SPACE)
        prompt.handle_key(Key.LEFT)

        assert prompt.selected == ()

    @pytest.mark.asyncio
    async def test_selecting_past_maximum_is_rejected(self):
        """A selection beyond max_selected leaves the set unchanged."""
        prompt = MultiSelectPrompt("Toppings", TOPPINGS, max_selected=2)
        prompt.mount()

        for _ in range(3):
            prompt.handle_key(Key.SPACE)
            prompt.handle_key(Key.DOWN)
        before = prompt.selected
        prompt.handle_key(Key.SPACE)

        assert before == ("cheese", "ham")
        assert prompt.selected == before

    @pytest.mark.asyncio
    async def test_minimum_is_enforced(self):
        prompt = MultiSelectPrompt("Toppings", TOPPINGS, min_selected=2)
        prompt.mount()

        prompt.handle_key(Key.SPACE)
        await press_enter(prompt)

        assert prompt.error == "Select at least 2 options"
        assert prompt.status is PromptStatus.EDITING

        prompt.handle_key(Key.DOWN)
        prompt.handle_key(Key.SPACE)
        await press_enter(prompt)
        assert prompt.status is PromptStatus.SUBMITTED

    @pytest.mark.asyncio
    async def test_required_needs_one_selection(self):
        prompt = MultiSelectPrompt("Toppings", TOPPINGS, required=True)
        prompt.mount()

        await press_enter(prompt)

        assert prompt.error == "At least one option must be selected"

    @pytest.mark.asyncio
    async def test_initial_selection_and_render(self):
        prompt = MultiSelectPrompt("Toppings", TOPPINGS, initial_value=["olives", "nope"])
        prompt.mount()

        console = Console(file=io.StringIO(), width=80, color_system=None)
        console.print(prompt)
        output = console.file.getvalue()

        assert prompt.selected == ("olives",)
        assert "◉ Olives" in output
        assert "◯ Cheese" in output
        assert "Selected: Olives" in output

    def test_inconsistent_bounds(self):
        with pytest.raises(ValueError):
            MultiSelectPrompt("Toppings", TOPPINGS, min_selected=3, max_selected=1)

    @pytest.mark.asyncio
    async def test_too_many_preselected_blocks_submit(self):
        """Preselected values beyond max_selected must be reduced before submitting."""
        prompt = MultiSelectPrompt("Toppings", TOPPINGS, initial_value=["cheese", "ham", "olives"], max_selected=2)
        prompt.mount()

        await press_enter(prompt)

        assert prompt.error == "Select at most 2 options"
        assert prompt.status is PromptStatus.EDITING
        assert prompt.result is None

        prompt.handle_key(Key.SPACE)
        await press_enter(prompt)

        assert prompt.result == MultiSelectResult(value=["ham", "olives"], labels=["Ham", "Olives"])
