"""LaTeX directive builders shared by the table models and the renderer.

Pure string helpers: no state, no validation beyond what the directive itself
needs. Callers are responsible for escaping cell text (see
:mod:`texcompose.escape`).
"""

from __future__ import annotations

from collections.abc import Sequence

from texcompose.spans import SpanPlan

COLUMN_SEPARATOR = " & "
ROW_END = "\\\\"
HLINE = "\\hline"


def cell_text(value: object) -> str:
    """Render an unset cell as empty text and any other value with ``str()``."""
    return "" if value is None else str(value)


def join_cells(cells: Sequence[object]) -> str:
    """Join cells with the column separator; no separator after the last cell."""
    return COLUMN_SEPARATOR.join(cell_text(c) for c in cells)


def bold(text: str) -> str:
    return f"\\textbf{{{text}}}"


def cline(start: int, end: int) -> str:
    """Partial rule from column *start* to column *end* (1-based, inclusive)."""
    return f"\\cline{{{start}-{end}}}"


def begin(environment: str, argument: str | None = None, option: str | None = None) -> str:
    text = f"\\begin{{{environment}}}"
    if option:
        text += f"[{option}]"
    if argument is not None:
        text += f"{{{argument}}}"
    return text


def end(environment: str) -> str:
    return f"\\end{{{environment}}}"


def caption(text: str) -> str:
    return f"\\caption{{{text}}}"


def label(identifier: str) -> str:
    return f"\\label{{{identifier}}}"


def row_colors(shade_color: str) -> str:
    """Alternate row shading starting from the second row (xcolor ``table`` option)."""
    return f"\\rowcolors{{2}}{{{shade_color}}}{{}}"


def multicolumn(span: int, fmt: str, text: str = "") -> str:
    return f"\\multicolumn{{{span}}}{{{fmt}}}{{{text}}}"


def multirow_block(
    plan: SpanPlan,
    content: Sequence[Sequence[str | None]],
    cols: int,
    horizontal_rules: bool,
) -> str:
    """Render a row-span block planned by :func:`texcompose.spans.plan_span`.

    The first leaf row carries the ``\\multirow`` label (``content[0][0]``)
    spanning every leaf row. Later rows leave the first column empty, even
    if their ``[i][0]`` cell holds a value. A partial rule follows the first
    row always and later rows only when *horizontal_rules* is set.
    """

    def cells(i: int) -> list[str]:
        row = list(content[i][:cols])
        row += [None] * (cols - len(row))
        return [cell_text(c) for c in row]

    first = cells(0)
    lines = [
        f"\\multirow{{{plan.leaf_rows}}}{{*}}{{{first[0]}}}"
        + "".join(f"{COLUMN_SEPARATOR}{c}" for c in first[1:])
        + f"{ROW_END} {cline(plan.first_boundary, cols)}"
    ]
    for i, boundary in enumerate(plan.boundaries, start=1):
        line = "".join(f"  & {c}" for c in cells(i)[1:]) + ROW_END
        if horizontal_rules:
            line += f" {cline(boundary, cols)}"
        lines.append(line)
    return "\n".join(lines) + "\n"
