"""Cursor and scroll management over a paginated list of enabled options."""

from typing import Generic, Optional, Sequence, TypeVar

T = TypeVar("T")


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class ListNavigator(Generic[T]):
    """Highlighted index plus scroll offset over ``items`` with a page size.

    After every move the offset is recomputed so the highlighted index stays
    inside ``[offset, offset + limit - 1]`` and the offset itself stays in
    ``[0, max(0, len(items) - limit)]``.
    """

    def __init__(self, items: Sequence[T], limit: int = 5, index: int = 0):
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        self.items = list(items)
        self.limit = limit
        self.index = 0
        self.offset = 0
        self.move_to(index)

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def current(self) -> Optional[T]:
        if not self.items:
            return None
        return self.items[self.index]

    @property
    def max_offset(self) -> int:
        return max(0, self.count - self.limit)

    def visible(self) -> list[tuple[int, T]]:
        """Items of the current page with their absolute indexes."""
        end = self.offset + self.limit
        return list(enumerate(self.items[self.offset:end], start=self.offset))

    @property
    def has_more(self) -> bool:
        return self.count > self.limit

    def move_to(self, index: int) -> int:
        """Highlight ``index`` (clamped) and return the resulting index."""
        self.index = clamp(index, 0, max(0, self.count - 1))
        self._scroll()
        return self.index

    def move_by(self, delta: int) -> int:
        return self.move_to(self.index + delta)

    def up(self) -> int:
        return self.move_by(-1)

    def down(self) -> int:
        return self.move_by(1)

    def page_up(self) -> int:
        return self.move_by(-self.limit)

    def page_down(self) -> int:
        return self.move_by(self.limit)

    def home(self) -> int:
        return self.move_to(0)

    def end(self) -> int:
        return self.move_to(self.count - 1)

    def navigate(self, key_name: Optional[str]) -> bool:
        """Apply a navigation key by name; return False if it is not one."""
        moves = {
            "up": self.up,
            "down": self.down,
            "pageup": self.page_up,
            "pagedown": self.page_down,
            "home": self.home,
            "end": self.end,
        }
        move = moves.get(key_name or "")
        if move is None:
            return False
        move()
        return True

    def replace(self, items: Sequence[T], index: int = 0) -> None:
        self.items = list(items)
        self.offset = 0
        self.move_to(index)

    def _scroll(self) -> None:
        if self.index < self.offset:
            self.offset = self.index
        elif self.index >= self.offset + self.limit:
            self.offset = self.index - self.limit + 1
        self.offset = clamp(self.offset, 0, self.max_offset)
