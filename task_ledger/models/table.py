from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

"""Position-addressed in-memory worksheet.

A Table mirrors what the ledger code needs from a spreadsheet tab: 1-based row
and column addressing, "last row" / "last column" extents, appending a row at
the bottom and deleting a row (which shifts every later row up by one).
Cells are plain Python values; an empty cell is None.
"""

__all__ = [
    "Table",
]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class Table:
    """Ordered rows of cells for a single worksheet."""

    def __init__(self, name: str, rows: Iterable[Sequence[Any]] | None = None) -> None:
        self.name = name
        self._rows: list[list[Any]] = [list(r) for r in (rows or [])]
        # A sheet's last row is the last one holding a value
        while self._rows and all(_is_blank(v) for v in self._rows[-1]):
            self._rows.pop()

    def __len__(self) -> int:
        return self.last_row

    def __repr__(self) -> str:  # pragma: no cover (debug aid)
        return f"Table(name={self.name!r}, rows={self.last_row}, cols={self.last_column})"

    @property
    def last_row(self) -> int:
        return len(self._rows)

    @property
    def last_column(self) -> int:
        """Width of the table: index of the rightmost non-empty cell in any row."""
        width = 0
        for row in self._rows:
            for i in range(len(row), width, -1):
                if not _is_blank(row[i - 1]):
                    width = i
                    break
        return width

    def _check_row(self, row: int) -> None:
        if row < 1 or row > self.last_row:
            raise IndexError(f"row {row} out of range 1..{self.last_row} in '{self.name}'")

    def row(self, row: int) -> list[Any]:
        """Return a copy of ``row`` (1-based), right-padded to last_column."""
        self._check_row(row)
        values = list(self._rows[row - 1])
        width = self.last_column
        if len(values) < width:
            values.extend([None] * (width - len(values)))
        return values[:width] if width else values

    def rows(self, start: int = 1, end: int | None = None) -> list[list[Any]]:
        """Return padded copies of rows ``start``..``end`` inclusive."""
        end = self.last_row if end is None else end
        return [self.row(r) for r in range(start, end + 1)]

    def append_row(self, values: Sequence[Any]) -> int:
        """Append ``values`` as the new last row and return its position."""
        self._rows.append(list(values))
        return self.last_row

    def delete_row(self, row: int) -> None:
        """Remove ``row``; every row below it moves up one position."""
        self._check_row(row)
        del self._rows[row - 1]

    def get_cell(self, row: int, column: int) -> Any:
        self._check_row(row)
        cells = self._rows[row - 1]
        return cells[column - 1] if column <= len(cells) else None

    def set_cell(self, row: int, column: int, value: Any) -> None:
        """Set a 1-based cell, growing the table with empty cells/rows as needed."""
        if row < 1 or column < 1:
            raise IndexError(f"invalid cell ({row}, {column}) in '{self.name}'")
        while len(self._rows) < row:
            self._rows.append([])
        cells = self._rows[row - 1]
        if len(cells) < column:
            cells.extend([None] * (column - len(cells)))
        cells[column - 1] = value
