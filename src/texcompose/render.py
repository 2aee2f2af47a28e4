"""Table serialization.

:class:`TableRenderer` walks a table through a fixed sequence of emission
steps. Each renderer is single-use: build a new one per serialization.

    UNINITIALIZED -> OPENED -> [HEADER_EMITTED] -> BODY_EMITTED -> CLOSED

The environment is chosen once, on ``open()``: ``tabular`` inside a
``table`` float for tables up to ``TableSettings.pagination_threshold`` rows,
``longtable`` beyond it.
"""

from __future__ import annotations

import logging
from enum import Enum

from texcompose import markup
from texcompose.columns import alignment_preamble
from texcompose.errors import MissingColumnMetadataError, RendererStateError
from texcompose.table import GridTable, ManualTable, PaginationMode, Table

logger = logging.getLogger(__name__)


class RenderState(str, Enum):
    UNINITIALIZED = "uninitialized"
    OPENED = "opened"
    HEADER_EMITTED = "header_emitted"
    BODY_EMITTED = "body_emitted"
    CLOSED = "closed"


class TableRenderer:
    """Serialize one :class:`~texcompose.table.Table` into LaTeX."""

    def __init__(self, table: Table):
        self.table = table
        self.state = RenderState.UNINITIALIZED
        self.mode: PaginationMode | None = None
        self._lines: list[str] = []

    @property
    def text(self) -> str:
        return "\n".join(self._lines) + "\n" if self._lines else ""

    def _expect(self, step: str, *states: RenderState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise RendererStateError(
                f"Cannot {step} a table renderer in state {self.state.value!r} "
                f"(expected {allowed})"
            )

    # ── alignment ───────────────────────────────────────────────────────

    def column_alignment(self) -> str:
        """Alignment preamble: column specs, else the raw string, else ``|c|c|...|``."""
        table = self.table
        if table.columns:
            indices = sorted(c.index for c in table.columns)
            if indices != list(range(table.cols)):
                missing = sorted(set(range(table.cols)) - set(indices))
                extra = [i for i in indices if i >= table.cols]
                raise MissingColumnMetadataError(
                    f"Table {table.caption!r} declares {table.cols} columns but has "
                    f"{len(indices)} column specs (missing {missing}, out of range {extra})"
                )
            return alignment_preamble(sorted(table.columns, key=lambda c: c.index))
        if table.is_paginated and table.settings.require_columns_for_paginated:
            raise MissingColumnMetadataError(
                f"Table {table.caption!r} has {table.rows} rows and is rendered as a "
                "longtable; define its column specs before rendering"
            )
        if table.alignment:
            return table.alignment
        return "|" + "c|" * table.cols

    # ── steps ───────────────────────────────────────────────────────────

    def open(self) -> None:
        self._expect("open", RenderState.UNINITIALIZED)
        table = self.table
        self.mode = table.pagination_mode
        alignment = self.column_alignment()
        logger.debug(
            "Opening %s for %r (%d x %d)", self.mode.value, table.caption, table.rows, table.cols
        )

        if self.mode is PaginationMode.SINGLE_PAGE:
            self._lines.append(markup.begin("table", option=table.settings.float_placement))
        if table.row_shading:
            self._lines.append(markup.row_colors(table.settings.shade_color))
        self._lines.append(markup.begin(self.mode.value, argument=alignment))

        # Manual bodies place their own rules.
        if isinstance(table, GridTable):
            self._lines.append(markup.HLINE)
        self.state = RenderState.OPENED

    def emit_header(self) -> None:
        self._expect("emit the header of", RenderState.OPENED)
        table = self.table
        labels = table.header_labels()
        if isinstance(table, ManualTable) or not labels:
            return

        self._lines.append(
            markup.join_cells([markup.bold(label) for label in labels])
            + f"{markup.ROW_END} {markup.HLINE}"
        )
        if table.horizontal_rules:
            self._lines.append(markup.HLINE)

        if self.mode is PaginationMode.MULTI_PAGE:
            self._lines.append("\\endhead")
            note = table.settings.continuation_note
            if note:
                self._lines += [
                    markup.HLINE,
                    markup.multicolumn(table.cols, "|c|", note) + markup.ROW_END,
                    markup.HLINE,
                    "\\endfoot",
                    "\\endlastfoot",
                ]
        self.state = RenderState.HEADER_EMITTED

    def emit_body(self) -> None:
        self._expect("emit the body of", RenderState.OPENED, RenderState.HEADER_EMITTED)
        table = self.table
        if isinstance(table, ManualTable):
            body = table.body.rstrip("\n")
            if body:
                self._lines.append(body)
        elif isinstance(table, GridTable):
            row_end = markup.ROW_END
            if table.horizontal_rules:
                row_end += f" {markup.HLINE}"
            for i, row in enumerate(table.grid.rows_iter()):
                if not table.grid.is_row_set(i):
                    continue
                self._lines.append(markup.join_cells(row) + row_end)
        else:
            raise TypeError(f"Unsupported table type: {type(table).__name__}")
        self.state = RenderState.BODY_EMITTED

    def close(self) -> None:
        self._expect("close", RenderState.BODY_EMITTED)
        table = self.table
        self._lines.append(markup.HLINE)
        label = markup.label(table.id) if table.id is not None else ""

        if self.mode is PaginationMode.MULTI_PAGE:
            self._lines.append(markup.caption(table.caption) + label + markup.ROW_END)
            self._lines.append(markup.end(PaginationMode.MULTI_PAGE.value))
        else:
            self._lines.append(markup.end(PaginationMode.SINGLE_PAGE.value))
            self._lines.append(markup.caption(table.caption))
            if label:
                self._lines.append(label)
            self._lines.append(markup.end("table"))
        self.state = RenderState.CLOSED

    def render(self) -> str:
        """Run every step in order and return the table markup."""
        self.open()
        self.emit_header()
        self.emit_body()
        self.close()
        return self.text
