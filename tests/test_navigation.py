"""Tests for list navigation and scroll offset bookkeeping."""

import random
import pytest

from termprompt.prompts import ListNavigator

NAVIGATION_KEYS = ["up", "down", "pageup", "pagedown", "home", "end"]


def assert_window(nav: ListNavigator):
    assert nav.offset <= nav.index <= nav.offset + nav.limit - 1
    assert 0 <= nav.offset <= max(0, nav.count - nav.limit)
    assert 0 <= nav.index <= max(0, nav.count - 1)


class TestListNavigator:
    """Test cases for ListNavigator."""

    def test_scrolls_to_keep_highlight_visible(self):
        """Moving below the page scrolls the window down by one."""
        nav = ListNavigator(list("abcdefg"), limit=3)
        for _ in range(3):
            nav.down()

        assert nav.index == 3
        assert nav.offset == 1
        assert [i for i, _ in nav.visible()] == [1, 2, 3]

    def test_page_moves_and_clamping(self):
        """Page moves jump by the limit and clamp at both ends."""
        nav = ListNavigator(list(range(12)), limit=5)

        nav.page_down()
        assert nav.index == 5
        nav.page_down()
        nav.page_down()
        assert nav.index == 11
        assert nav.offset == 7

        nav.page_up()
        assert nav.index == 6
        nav.home()
        assert (nav.index, nav.offset) == (0, 0)

    def test_invariants_hold_after_any_key_sequence(self):
        """The highlight stays inside the window for random key sequences."""
        rng = random.Random(7)
        for count in (0, 1, 3, 5, 9, 20):
            for limit in (1, 3, 5):
                nav = ListNavigator(list(range(count)), limit=limit)
                for _ in range(60):
                    assert nav.navigate(rng.choice(NAVIGATION_KEYS))
                    assert_window(nav)

    def test_empty_list(self):
        """An empty list has no current item."""
        nav = ListNavigator([], limit=5)
        nav.down()
        assert nav.current is None
        assert nav.visible() == []

    def test_initial_index_is_clamped(self):
        """A start index past the end lands on the last item."""
        nav = ListNavigator(list("abcdef"), limit=2, index=40)
        assert nav.current == "f"
        assert nav.offset == 4

    def test_unknown_key_is_not_navigation(self):
        """navigate reports keys it does not handle."""
        nav = ListNavigator(list("ab"))
        assert not nav.navigate("tab")
        assert not nav.navigate(None)

    def test_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            ListNavigator([1], limit=0)
