"""Tests for key decoding from prompt_toolkit key presses."""

from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys

from termprompt.keys import Key, KeyEvent, decode_key_press, decode_key_presses, keys_from_text


class TestDecodeKeyPress:
    """Test cases for decode_key_press."""

    def test_named_keys(self):
        assert decode_key_press(KeyPress(Keys.Up)) == Key.UP
        assert decode_key_press(KeyPress(Keys.ControlM)) == Key.RETURN
        assert decode_key_press(KeyPress(Keys.Escape)) == Key.ESCAPE
        assert decode_key_press(KeyPress(Keys.ControlH)) == Key.BACKSPACE
        assert decode_key_press(KeyPress(Keys.PageDown)) == Key.PAGE_DOWN

    def test_modified_arrows(self):
        event = decode_key_press(KeyPress(Keys.ShiftLeft))
        assert event.name == "left"
        assert event.shift

    def test_characters(self):
        assert decode_key_press(KeyPress("x")) == KeyEvent(char="x")
        assert decode_key_press(KeyPress(" ")) == Key.SPACE
        assert decode_key_press(KeyPress("x")).is_printable

    def test_control_letters(self):
        event = decode_key_press(KeyPress(Keys.ControlC))
        assert event == Key.CTRL_C
        assert not event.is_printable

    def test_ignored_presses(self):
        assert decode_key_press(KeyPress(Keys.CPRResponse, "\x1b[1;1R")) is None

    def test_bracketed_paste_expands_to_characters(self):
        events = list(decode_key_presses([KeyPress(Keys.BracketedPaste, "hi\nyo"), KeyPress(Keys.Tab)]))
        assert events == keys_from_text("hiyo") + [Key.TAB]

    def test_escape_then_character_is_alt_key(self):
        events = list(decode_key_presses([KeyPress(Keys.Escape), KeyPress("b"), KeyPress("c")]))

        assert events == [KeyEvent(char="b", meta=True), KeyEvent(char="c")]
        assert not events[0].is_printable

    def test_lone_and_repeated_escape_stay_escape(self):
        assert list(decode_key_presses([KeyPress(Keys.Escape)])) == [Key.ESCAPE]
        assert list(decode_key_presses([KeyPress(Keys.Escape), KeyPress(Keys.Up)])) == [Key.ESCAPE, Key.UP]
