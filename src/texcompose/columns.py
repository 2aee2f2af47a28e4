"""Per-column metadata and the alignment fragments derived from it.

A :class:`ColumnSpec` describes one column of a table: where it sits, how its
content is aligned, whether vertical rules surround it, and optional colors.
The same object doubles as the description of a merged header cell
(``\\multicolumn``) when ``span`` is set.

Usage::

    from texcompose.columns import ColumnSpec, RIGHT, columns_range

    cols = [ColumnSpec(index=0, label="Region"), *columns_range(1, 4, RIGHT)]
    "".join(c.column_alignment_fragment(is_last=i == len(cols) - 1)
            for i, c in enumerate(cols))
    # -> '|c|r|r|r|'
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from texcompose.errors import SpanTooNarrowError, SpanTooWideError

LEFT = "l"
CENTER = "c"
RIGHT = "r"

SEPARATOR = "|"


class ColumnSpec(BaseModel):
    """Metadata for one table column.

    ``alignment`` of length one (``l``, ``c``, ``r``) is a *simple* alignment
    and gets separators and color directives composed around it. Anything
    longer (e.g. ``p{3cm}`` or ``>{\\bfseries}l``) is a *raw directive* and is
    emitted verbatim.
    """

    model_config = ConfigDict(validate_assignment=True)

    index: int = Field(ge=0)
    alignment: str = Field(default=CENTER, min_length=1)
    has_left_separator: bool = True
    has_right_separator: bool | None = None
    background_color: str | None = None
    foreground_color: str | None = None
    label: str | None = None
    span: int | None = Field(default=None, ge=1)
    max_width: str | None = None

    @property
    def is_simple(self) -> bool:
        """True when the alignment is a single-character token."""
        return len(self.alignment) == 1

    def alignment_token(self) -> str:
        """Return the bare column type, widening to ``p{...}`` when ``max_width`` is set."""
        if self.is_simple and self.max_width:
            return f"p{{{self.max_width}}}"
        return self.alignment

    def column_alignment_fragment(self, is_last: bool = False) -> str:
        """Return this column's piece of a tabular alignment preamble.

        Composed as: optional leading ``|``, optional
        ``>{\\columncolor{...}}``, the alignment token, then a trailing ``|``
        when this is the last column (or ``has_right_separator`` is set).
        """
        if not self.is_simple:
            return self.alignment

        parts: list[str] = []
        if self.has_left_separator:
            parts.append(SEPARATOR)
        if self.background_color is not None:
            parts.append(f">{{\\columncolor{{{self.background_color}}}}}")
        parts.append(self.alignment_token())

        right = is_last if self.has_right_separator is None else self.has_right_separator
        if right:
            parts.append(SEPARATOR)
        return "".join(parts)

    def multicolumn(self, declared_columns: int) -> str:
        """Return a ``\\multicolumn`` directive spanning ``span`` columns.

        Raises:
            SpanTooWideError: ``span`` exceeds *declared_columns*.
            SpanTooNarrowError: ``span`` is unset or smaller than 2.
        """
        if self.span is not None and self.span > declared_columns:
            raise SpanTooWideError(self.span, declared_columns)
        if self.span is None or self.span < 2:
            raise SpanTooNarrowError(self.span)

        fmt = self.alignment
        if self.background_color is not None:
            fmt = f">{{\\columncolor{{{self.background_color}}}}}{fmt}"

        text = self.label or ""
        if self.foreground_color is not None:
            text = f"\\color{{{self.foreground_color}}}\\textsf{{{text}}}"

        return f"\\multicolumn{{{self.span}}}{{{fmt}}}{{{text}}}"


def columns_range(begin: int, end: int, alignment: str = CENTER) -> list[ColumnSpec]:
    """Build default column specs for indices ``begin`` .. ``end - 1``."""
    return [ColumnSpec(index=i, alignment=alignment) for i in range(begin, end)]


def alignment_preamble(columns: list[ColumnSpec]) -> str:
    """Concatenate the fragments of *columns*, closing the last one."""
    last = len(columns) - 1
    return "".join(c.column_alignment_fragment(is_last=i == last) for i, c in enumerate(columns))
