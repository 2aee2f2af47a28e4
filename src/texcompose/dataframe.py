"""Build grid tables from pandas DataFrames.

Requires ``pandas`` to be installed. Install with::

    pip install texcompose[pandas]

Usage::

    import pandas as pd
    from texcompose.dataframe import table_from_dataframe

    df = pd.DataFrame({"region": ["North", "South"], "revenue": [10.5, 8.25]})
    table = table_from_dataframe(df, "Revenue by region", float_format="{:.1f}")
    table.to_latex()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from texcompose.columns import LEFT, RIGHT, ColumnSpec
from texcompose.escape import escape
from texcompose.table import GridTable

if TYPE_CHECKING:
    import pandas as pd


def _format_value(value: Any, missing: bool, float_format: str | None) -> str:
    if missing:
        return ""
    if float_format and isinstance(value, float):
        return float_format.format(value)
    return str(value)


def table_from_dataframe(
    df: pd.DataFrame,
    caption: str = "",
    *,
    index: bool = False,
    escape_text: bool = True,
    float_format: str | None = None,
    **table_kwargs: Any,
) -> GridTable:
    """Create a :class:`GridTable` holding the contents of *df*.

    Column labels become the header row. Numeric columns are right-aligned,
    everything else is left-aligned. Missing values render as empty cells.

    Args:
        df: Source frame.
        caption: Table caption.
        index: If True, prepend the frame's index as the first column.
        escape_text: Escape LaTeX special characters in labels and cells.
        float_format: ``str.format`` pattern applied to float cells, e.g. ``"{:.2f}"``.
        **table_kwargs: Forwarded to :class:`GridTable` (``landscape``,
            ``horizontal_rules``, ``row_shading``, ``settings``).

    Raises:
        ImportError: If pandas is not installed.
    """
    try:
        import pandas as pd
    except ImportError as e:
        raise ImportError(
            "pandas is required for DataFrame import. "
            "Install it with: pip install pandas "
            "or: pip install texcompose[pandas]"
        ) from e

    if index:
        df = df.reset_index()

    text = escape if escape_text else str
    table = GridTable(caption, rows=len(df), cols=len(df.columns), **table_kwargs)
    for i, (name, dtype) in enumerate(df.dtypes.items()):
        numeric = pd.api.types.is_numeric_dtype(dtype) and not pd.api.types.is_bool_dtype(dtype)
        table.add_column(
            ColumnSpec(index=i, alignment=RIGHT if numeric else LEFT, label=text(str(name)))
        )

    table.load(
        [
            [
                text(_format_value(v, pd.api.types.is_scalar(v) and pd.isna(v), float_format))
                for v in row
            ]
            for row in df.itertuples(index=False, name=None)
        ]
    )
    return table
