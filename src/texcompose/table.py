"""Table models: column metadata, body content and render flags.

Two explicit construction modes share one rendering core:

- :class:`GridTable`: the body is generated from a :class:`CellGrid` that
  callers fill in bulk (``load``) or row by row (``set_row``).
- :class:`ManualTable`: the body is written by the caller through emission
  primitives (cells, rules, ``\\multicolumn`` and ``\\multirow`` blocks),
  which is what cross-tabulations need.

Whether a table is rendered as a single-page ``tabular`` or a multi-page
``longtable`` depends only on its declared row count versus
``TableSettings.pagination_threshold``.

Usage::

    from texcompose.table import GridTable

    table = GridTable("Quarterly revenue", rows=4, cols=3, headers=["Region", "Q1", "Q2"])
    table.align_columns(["l", "r", "r"])
    table.load([["North", "10", "12"], ["South", "8", "9"]])
    latex = table.to_latex()
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, Field

from texcompose import markup
from texcompose.columns import CENTER, SEPARATOR, ColumnSpec, columns_range
from texcompose.diagnostics import Diagnostic, DiagnosticCode, record
from texcompose.errors import (
    DuplicateColumnError,
    InvalidSpanError,
    SpanContentMismatchError,
    SpanTooWideError,
    TableIdAlreadyAssignedError,
)
from texcompose.grid import CellGrid
from texcompose.spans import SpanPlan, plan_span

logger = logging.getLogger(__name__)

DEFAULT_PAGINATION_THRESHOLD = 32


class PaginationMode(str, Enum):
    SINGLE_PAGE = "tabular"
    MULTI_PAGE = "longtable"


class TableMode(str, Enum):
    GRID = "grid"
    MANUAL = "manual"


class TableSettings(BaseModel):
    """Rendering knobs for one table."""

    pagination_threshold: int = Field(default=DEFAULT_PAGINATION_THRESHOLD, ge=0)
    shade_color: str = "gray!35"
    float_placement: str = "h!b!p!"
    require_columns_for_paginated: bool = True
    continuation_note: str | None = "Continued on next page"


class Table:
    """State shared by both construction modes."""

    mode: ClassVar[TableMode]

    def __init__(
        self,
        caption: str,
        rows: int,
        cols: int,
        *,
        headers: Sequence[str] | None = None,
        alignment: str | None = None,
        landscape: bool = False,
        horizontal_rules: bool = False,
        row_shading: bool = False,
        settings: TableSettings | None = None,
    ):
        if rows < 0 or cols < 1:
            raise ValueError(f"Invalid table size {rows}x{cols}")
        self.caption = caption
        self.rows = rows
        self.cols = cols
        self.headers: list[str] | None = list(headers) if headers else None
        self.alignment = alignment
        self.landscape = landscape
        self.horizontal_rules = horizontal_rules
        self.row_shading = row_shading
        self.settings = settings or TableSettings()
        self.columns: list[ColumnSpec] = []
        self.diagnostics: list[Diagnostic] = []
        self._id: str | None = None

    # ── identity ────────────────────────────────────────────────────────

    @property
    def id(self) -> str | None:
        """Label assigned by the owning document when the table is appended."""
        return self._id

    def assign_id(self, table_id: str) -> None:
        if self._id is not None:
            raise TableIdAlreadyAssignedError(self._id, table_id)
        self._id = table_id

    # ── pagination ──────────────────────────────────────────────────────

    @property
    def pagination_mode(self) -> PaginationMode:
        if self.rows > self.settings.pagination_threshold:
            return PaginationMode.MULTI_PAGE
        return PaginationMode.SINGLE_PAGE

    @property
    def is_paginated(self) -> bool:
        return self.pagination_mode is PaginationMode.MULTI_PAGE

    # ── columns ─────────────────────────────────────────────────────────

    def add_column(self, spec: ColumnSpec) -> ColumnSpec:
        if any(c.index == spec.index for c in self.columns):
            raise DuplicateColumnError(spec.index)
        self.columns.append(spec)
        return spec

    def add_columns(self, begin: int, end: int, alignment: str = CENTER) -> list[ColumnSpec]:
        """Add default column specs for indices ``begin`` .. ``end - 1``."""
        return [self.add_column(spec) for spec in columns_range(begin, end, alignment)]

    def align_columns(self, alignment: str | Sequence[str]) -> str:
        """Build the raw alignment string with a rule on every column boundary.

        A single token (``"c"``) applies to every column; a sequence gives one
        token per column. Missing tokens default to centered, extra tokens are
        dropped; both cases are recorded as diagnostics.
        """
        if isinstance(alignment, str):
            tokens = [alignment] * self.cols
        else:
            tokens = list(alignment)
            if len(tokens) > self.cols:
                record(
                    self.diagnostics,
                    DiagnosticCode.ALIGNMENT_COUNT_MISMATCH,
                    f"Got {len(tokens)} alignments for {self.cols} columns; "
                    f"only the first {self.cols} are used",
                    logger,
                )
            elif len(tokens) < self.cols:
                record(
                    self.diagnostics,
                    DiagnosticCode.ALIGNMENT_COUNT_MISMATCH,
                    f"Got {len(tokens)} alignments for {self.cols} columns; "
                    "the rest will be centered",
                    logger,
                )
                tokens += [CENTER] * (self.cols - len(tokens))
        self.alignment = SEPARATOR + "".join(f"{t}{SEPARATOR}" for t in tokens[: self.cols])
        return self.alignment

    def header_labels(self) -> list[str] | None:
        """Explicit headers, else the column labels when any column has one."""
        if self.headers:
            return self.headers
        if any(c.label for c in self.columns):
            return [c.label or "" for c in self.columns]
        return None

    def to_latex(self) -> str:
        """Serialize the table; see :class:`texcompose.render.TableRenderer`."""
        from texcompose.render import TableRenderer

        return TableRenderer(self).render()


class GridTable(Table):
    """Table whose body is generated from a fixed-size cell grid."""

    mode = TableMode.GRID

    def __init__(self, caption: str, rows: int, cols: int, **kwargs):
        super().__init__(caption, rows, cols, **kwargs)
        self.grid = CellGrid(rows, cols, diagnostics=self.diagnostics)

    def load(self, values: Sequence[Sequence[str | None]]) -> None:
        self.grid.load(values)

    def set_row(self, index: int, values: Sequence[str | None]) -> None:
        self.grid.set_row(index, values)

    def get(self, row: int, col: int) -> str | None:
        return self.grid.get(row, col)


class ManualTable(Table):
    """Table whose body is written directly by the caller.

    The emission primitives mirror the markup they produce; nothing written
    here is reordered or validated beyond span bounds.
    """

    mode = TableMode.MANUAL

    def __init__(self, caption: str, rows: int, cols: int, **kwargs):
        super().__init__(caption, rows, cols, **kwargs)
        self._body: list[str] = []

    @property
    def body(self) -> str:
        return "".join(self._body)

    def insert(self, text: str) -> None:
        """Append *text* verbatim, without a newline."""
        self._body.append(text)

    def add(self, text: str) -> None:
        """Append *text* followed by a newline."""
        self._body.append(text + "\n")

    def add_cells(self, cells: Sequence[str | None]) -> None:
        self.insert(markup.join_cells(cells))

    def end_column(self) -> None:
        self.insert(markup.COLUMN_SEPARATOR)

    def end_row(self) -> None:
        self.add(f" {markup.ROW_END} ")

    def add_rule(self) -> None:
        self.add(markup.HLINE)

    def add_partial_rule(self, start: int, end: int | None = None) -> None:
        """Rule from column *start* to *end* (default: the last column), 1-based."""
        self.add(markup.cline(start, self.cols if end is None else end))

    def _check_span(self, span: int) -> None:
        if span > self.cols:
            raise SpanTooWideError(span, self.cols)
        if span < 1:
            raise InvalidSpanError(f'Invalid argument value for "span": {span}', span, 1)

    def add_multicolumn(self, span: int, alignment: str = CENTER, text: str = "") -> None:
        """Merged cell with rules on both sides, e.g. a group header."""
        self._check_span(span)
        self.insert(markup.multicolumn(span, f"{SEPARATOR}{alignment}{SEPARATOR}", text))

    def add_blank_multicolumn(self, span: int, right_separator: bool = False) -> None:
        """Empty merged cell, e.g. the top-left corner of a cross-tabulation."""
        self._check_span(span)
        self.insert(markup.multicolumn(span, CENTER + (SEPARATOR if right_separator else "")))

    def add_column_multicolumn(self, spec: ColumnSpec) -> None:
        """Merged cell described by a column spec (span, colors, label)."""
        self.insert(spec.multicolumn(self.cols))

    def add_multirow_block(
        self,
        levels: Sequence[int],
        content: Sequence[Sequence[str | None]],
    ) -> SpanPlan:
        """Emit a hierarchical row-span block and return its plan.

        *levels* are the group cardinalities, outermost first; *content* holds
        one row per leaf row. See :mod:`texcompose.spans`.
        """
        plan = plan_span(levels, self.rows)
        if len(content) < plan.leaf_rows:
            raise SpanContentMismatchError(plan.leaf_rows, len(content))
        self.insert(markup.multirow_block(plan, content, self.cols, self.horizontal_rules))
        return plan
