"""Hierarchical row-span planning for cross-tabulated tables.

A row span is described by its level cardinalities, outermost first:
``[3, 2]`` means 3 groups of 2 leaf rows, 6 leaf rows in total. The block is
emitted as one ``\\multirow`` label in the first column followed by one line
per leaf row, and after every leaf row a partial rule (``\\cline{k-n}``)
separates it from the next.

Where that rule starts depends on which level "rolled over" at that row, like
the digits of an odometer: the leaf rows are the least significant digit and
the outermost level the most significant. A row that only advances the
innermost level gets the narrowest rule (starting at the leaf column);
a carry into level ``k`` (counted from the innermost, 0-based) moves the rule
start ``k`` columns to the left; a carry out of the outermost level closes the
whole block with a full-width rule.

For ``[3, 2]`` (block label in column 1, group labels in column 2, leaf
rows from column 3)::

    row 0  first row of the block (the \\multirow line)
    row 1  end of group 1      -> \\cline{2-n}
    row 2  inside group 2      -> \\cline{3-n}
    row 3  end of group 2      -> \\cline{2-n}
    row 4  inside group 3      -> \\cline{3-n}
    row 5  end of the block    -> \\cline{1-n}
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from math import prod

from texcompose.errors import InvalidSpanCardinalityError, SpanExceedsTableSizeError

logger = logging.getLogger(__name__)

# Rule start column (1-based) of a rule spanning the whole row.
FULL_ROW_BOUNDARY = 1


@dataclass
class SpanPlan:
    """Result of planning one row-span block.

    Attributes:
        levels: Level cardinalities, outermost first.
        leaf_rows: Number of flattened leaf rows (product of ``levels``).
        first_boundary: Rule start column after the first leaf row.
        boundaries: Rule start column after each non-first leaf row.
    """

    levels: list[int]
    leaf_rows: int
    first_boundary: int
    boundaries: list[int] = field(default_factory=list)

    @property
    def depth(self) -> int:
        return len(self.levels)


def leaf_row_count(levels: Sequence[int]) -> int:
    """Validate *levels* and return the number of leaf rows they flatten to.

    Raises:
        InvalidSpanCardinalityError: A level is zero or negative (or the
            sequence is empty).
    """
    if not levels:
        raise InvalidSpanCardinalityError(0, 0)
    for i, cardinality in enumerate(levels):
        if cardinality <= 0:
            raise InvalidSpanCardinalityError(i, cardinality)
    return prod(levels)


def _tick(countdown: list[int], levels: Sequence[int]) -> int:
    """Advance the odometer by one leaf row and return the rule start column."""
    depth = len(levels)
    # k counts levels from the innermost one, cursor indexes the level list.
    for k in range(depth):
        cursor = depth - 1 - k
        countdown[cursor] -= 1
        if countdown[cursor] > 0:
            return depth + 1 - k
        countdown[cursor] = levels[cursor]
    return FULL_ROW_BOUNDARY


def plan_span(levels: Sequence[int], table_rows: int) -> SpanPlan:
    """Plan the rule placement for a row-span block.

    Raises:
        InvalidSpanCardinalityError: Any level cardinality is not positive.
        SpanExceedsTableSizeError: The leaf rows do not fit in *table_rows*.
    """
    leaf_rows = leaf_row_count(levels)
    if leaf_rows > table_rows:
        raise SpanExceedsTableSizeError(leaf_rows, table_rows)
    logger.debug("One row that spans %d rows", leaf_rows)

    levels = list(levels)
    countdown = list(levels)
    ticks = [_tick(countdown, levels) for _ in range(leaf_rows)]
    return SpanPlan(
        levels=levels,
        leaf_rows=leaf_rows,
        first_boundary=ticks[0],
        boundaries=ticks[1:],
    )


def plan_boundaries(levels: Sequence[int], table_rows: int) -> list[int]:
    """Return the rule start column after each non-first leaf row."""
    return plan_span(levels, table_rows).boundaries
