"""Text table with fractional column widths and truncating cells."""

import io
import logging
from typing import Any, Optional, Sequence

from rich import box
from rich.cells import cell_len, set_cell_size
from rich.console import Console, RenderableType
from rich.table import Column
from rich.table import Table as RichTable
from rich.text import Text

from ..theme import ThemeOverride, resolve_theme

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 80
ELLIPSIS = "..."


def truncate(text: str, width: int) -> str:
    """Cut ``text`` to ``width`` cells, ending in ``...`` when shortened."""
    if cell_len(text) <= width:
        return text
    if width <= len(ELLIPSIS):
        return ELLIPSIS[:width]
    return set_cell_size(text, width - len(ELLIPSIS)) + ELLIPSIS


class Table:
    """Grid of cells, first row treated as the header by default.

    Column widths come from ``column_widths`` (fractions of the table width)
    or an even split; the table width is ``max_width`` or 80 cells. Each
    column takes ``int(weight * width) - 1`` cells including its border, so
    the drawn table never exceeds the table width. Borderless tables have no
    column separators.
    """

    def __init__(self, data: Sequence[Sequence[Any]], *, border: bool = True, header: bool = True,
                 padding: int = 1, column_widths: Optional[Sequence[float]] = None,
                 max_width: Optional[int] = None, header_style: Optional[str] = None,
                 theme: ThemeOverride = None):
        if column_widths is not None and any(weight < 0 for weight in column_widths):
            raise ValueError("column widths must not be negative")
        self.rows = [["" if cell is None else str(cell) for cell in row] for row in data]
        self.border = border
        self.header = header
        self.padding = max(0, padding)
        self.max_width = max_width
        self.theme = resolve_theme(theme)
        self.header_style = header_style or self.theme.typography.header
        self.column_count = max((len(row) for row in self.rows), default=0)
        self.column_widths = list(column_widths) if column_widths else self._even_split()

    def _even_split(self) -> list[float]:
        count = self.column_count or 1
        return [1 / count] * count

    @property
    def width(self) -> int:
        return self.max_width or DEFAULT_WIDTH

    def content_widths(self) -> list[int]:
        """Usable text width of each column after borders and padding."""
        widths = []
        for weight in self.column_widths[:self.column_count]:
            outer = int(weight * self.width)
            widths.append(max(1, outer - 2 - 2 * self.padding))
        # Columns without a weight get the narrowest width
        while len(widths) < self.column_count:
            widths.append(1)
        return widths

    def build(self) -> Optional[RichTable]:
        """The rich table for the current data, or None when there are no rows."""
        if not self.rows:
            return None
        widths = self.content_widths()
        columns = [Column(width=width, no_wrap=True, overflow="ellipsis") for width in widths]
        grid = RichTable(
            *columns,
            box=box.SQUARE if self.border else None,
            show_header=self.header,
            padding=(0, self.padding),
            header_style=self.header_style,
            border_style=self.theme.colors.border.default,
        )

        def cells(row: list[str]) -> list[Text]:
            padded = row + [""] * (len(widths) - len(row))
            return [Text(truncate(cell, width)) for cell, width in zip(padded, widths)]

        body = self.rows
        if self.header:
            for column, cell in zip(grid.columns, cells(self.rows[0])):
                column.header = cell
            body = self.rows[1:]
        for row in body:
            grid.add_row(*cells(row))
        return grid

    def __str__(self) -> str:
        grid = self.build()
        if grid is None:
            return ""
        console = Console(file=io.StringIO(), width=self.width, color_system=None, legacy_windows=False)
        console.print(grid)
        return "\n".join(line.rstrip() for line in console.file.getvalue().splitlines())

    def __rich__(self) -> RenderableType:
        grid = self.build()
        return Text("") if grid is None else grid
