"""Key events delivered to prompts, and decoding from prompt_toolkit key presses."""

from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Optional

from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys

CONTROL_KEYS = frozenset({
    "up", "down", "left", "right", "return", "escape", "tab", "backspace",
    "delete", "home", "end", "pageup", "pagedown", "space",
})


@dataclass(frozen=True)
class KeyEvent:
    """A single key press: a named control key or a printable character."""

    name: Optional[str] = None
    char: str = ""
    ctrl: bool = False
    meta: bool = False
    shift: bool = False

    @property
    def is_printable(self) -> bool:
        return bool(self.char) and not self.ctrl and not self.meta and self.name in (None, "space")

    def is_(self, name: str) -> bool:
        return self.name == name

    @classmethod
    def character(cls, char: str) -> "KeyEvent":
        if char == " ":
            return cls(name="space", char=" ")
        return cls(char=char)

    @classmethod
    def control(cls, letter: str) -> "KeyEvent":
        return cls(char=letter, ctrl=True)


class Key:
    """Ready-made control key events."""

    UP = KeyEvent(name="up")
    DOWN = KeyEvent(name="down")
    LEFT = KeyEvent(name="left")
    RIGHT = KeyEvent(name="right")
    RETURN = KeyEvent(name="return")
    ESCAPE = KeyEvent(name="escape")
    TAB = KeyEvent(name="tab")
    BACKSPACE = KeyEvent(name="backspace")
    DELETE = KeyEvent(name="delete")
    HOME = KeyEvent(name="home")
    END = KeyEvent(name="end")
    PAGE_UP = KeyEvent(name="pageup")
    PAGE_DOWN = KeyEvent(name="pagedown")
    SPACE = KeyEvent(name="space", char=" ")
    CTRL_C = KeyEvent(char="c", ctrl=True)


def keys_from_text(text: str) -> list[KeyEvent]:
    """Turn typed text into one key event per character."""
    return [KeyEvent.character(ch) for ch in text]


_NAMED = {
    Keys.Up: Key.UP,
    Keys.Down: Key.DOWN,
    Keys.Left: Key.LEFT,
    Keys.Right: Key.RIGHT,
    Keys.ControlM: Key.RETURN,
    Keys.ControlJ: Key.RETURN,
    Keys.Escape: Key.ESCAPE,
    Keys.ControlI: Key.TAB,
    Keys.BackTab: KeyEvent(name="tab", shift=True),
    Keys.ControlH: Key.BACKSPACE,
    Keys.Delete: Key.DELETE,
    Keys.Home: Key.HOME,
    Keys.End: Key.END,
    Keys.PageUp: Key.PAGE_UP,
    Keys.PageDown: Key.PAGE_DOWN,
    Keys.ShiftUp: KeyEvent(name="up", shift=True),
    Keys.ShiftDown: KeyEvent(name="down", shift=True),
    Keys.ShiftLeft: KeyEvent(name="left", shift=True),
    Keys.ShiftRight: KeyEvent(name="right", shift=True),
    Keys.ControlUp: KeyEvent(name="up", ctrl=True),
    Keys.ControlDown: KeyEvent(name="down", ctrl=True),
    Keys.ControlLeft: KeyEvent(name="left", ctrl=True),
    Keys.ControlRight: KeyEvent(name="right", ctrl=True),
}

_IGNORED = frozenset({
    Keys.CPRResponse, Keys.Vt100MouseEvent, Keys.WindowsMouseEvent,
    Keys.Ignore, Keys.ScrollUp, Keys.ScrollDown,
})


def decode_key_press(press: KeyPress) -> Optional[KeyEvent]:
    """Map a prompt_toolkit ``KeyPress`` to a ``KeyEvent``.

    Returns None for presses that carry no meaning for prompts (mouse
    reports, cursor position responses).
    """
    key = press.key
    if key in _IGNORED:
        return None
    if key in _NAMED:
        return _NAMED[key]
    if isinstance(key, Keys):
        name = key.value
        if name.startswith("c-") and len(name) == 3:
            return KeyEvent.control(name[-1])
        return None
    if len(key) == 1:
        return KeyEvent.character(key)
    return None


def decode_key_presses(presses: Iterable[KeyPress]) -> Iterator[KeyEvent]:
    """Decode a batch of key presses.

    Bracketed paste expands into characters. An Escape immediately followed
    by a printable key in the same batch is that key with Alt held, which is
    how terminals send Alt+key.
    """
    pending = list(presses)
    index = 0
    while index < len(pending):
        press = pending[index]
        index += 1
        if press.key == Keys.BracketedPaste:
            yield from keys_from_text(press.data.replace("\r", "").replace("\n", ""))
            continue
        if press.key == Keys.Escape and index < len(pending):
            following = decode_key_press(pending[index])
            if following is not None and following.is_printable:
                index += 1
                yield replace(following, meta=True)
                continue
        event = decode_key_press(press)
        if event is not None:
            yield event
