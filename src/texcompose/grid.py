"""Fixed-size row/column store backing bulk-rendered tables."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from texcompose.diagnostics import Diagnostic, DiagnosticCode, record
from texcompose.errors import RowCursorOutOfRangeError

logger = logging.getLogger(__name__)


class CellGrid:
    """A ``rows x cols`` mapping from (row, col) to text, unset cells are ``None``.

    Writes beyond the declared row count are rejected; writes with more values
    than ``cols`` are truncated with a diagnostic.
    """

    def __init__(self, rows: int, cols: int, diagnostics: list[Diagnostic] | None = None):
        if rows < 0 or cols < 1:
            raise ValueError(f"Invalid grid size {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.diagnostics = diagnostics if diagnostics is not None else []
        self._cells: list[list[str | None]] = [[None] * cols for _ in range(rows)]

    def load(self, values: Sequence[Sequence[str | None]]) -> None:
        """Copy up to ``rows`` rows of *values* into the grid.

        Short rows leave trailing cells unset; long rows are truncated. Never
        raises on shape.
        """
        if len(values) > self.rows:
            record(
                self.diagnostics,
                DiagnosticCode.ROW_COUNT_EXCEEDED,
                f"Got {len(values)} rows for a table of {self.rows}; "
                f"keeping the first {self.rows}",
                logger,
            )
        for i, row in enumerate(values[: self.rows]):
            self._cells[i] = [None] * self.cols
            self._write(i, row)

    def set_row(self, index: int, values: Sequence[str | None]) -> None:
        """Assign *values* to row *index*, leaving cells beyond ``len(values)`` untouched."""
        if index < 0 or index >= self.rows:
            raise RowCursorOutOfRangeError(index, self.rows)
        self._write(index, values)

    def _write(self, index: int, values: Sequence[str | None]) -> None:
        if len(values) > self.cols:
            record(
                self.diagnostics,
                DiagnosticCode.COLUMN_COUNT_EXCEEDED,
                f"Row {index} has {len(values)} values for a table of {self.cols} "
                f"columns; keeping the first {self.cols}",
                logger,
            )
        for j, cell in enumerate(values[: self.cols]):
            self._cells[index][j] = cell

    def get(self, row: int, col: int) -> str | None:
        if row < 0 or row >= self.rows:
            raise RowCursorOutOfRangeError(row, self.rows)
        if col < 0 or col >= self.cols:
            raise IndexError(f"Column {col} is outside the table column size ({self.cols})")
        return self._cells[row][col]

    def is_row_set(self, row: int) -> bool:
        """True if any cell of *row* has been written."""
        return any(cell is not None for cell in self._cells[row])

    def rows_iter(self) -> Iterator[list[str | None]]:
        """Yield a copy of every row, set or not, in order."""
        for row in self._cells:
            yield list(row)
