"""Exception hierarchy for structurally invalid tables and documents.

Every fatal input error derives from :class:`TableCompositionError` and is
raised synchronously; soft conditions (oversized input arrays and the like)
are reported through :mod:`texcompose.diagnostics` instead.
"""

from __future__ import annotations


class TableCompositionError(Exception):
    """Base class for errors that make a table or document unrenderable."""


# ─── Span errors ─────────────────────────────────────────────────────────────


class InvalidSpanError(TableCompositionError):
    """Raised when a merged-cell directive has an unusable column span."""

    def __init__(self, message: str, span: int | None, limit: int):
        super().__init__(message)
        self.span = span
        self.limit = limit


class SpanTooWideError(InvalidSpanError):
    """The span exceeds the table's declared column count."""

    def __init__(self, span: int, limit: int):
        super().__init__(
            f'Invalid argument value for "span": {span} cannot exceed {limit} columns',
            span,
            limit,
        )


class SpanTooNarrowError(InvalidSpanError):
    """A column-spec driven merge needs a span of at least two columns."""

    def __init__(self, span: int | None):
        super().__init__(
            f'Invalid argument value for "span": {span} must be greater than 1',
            span,
            2,
        )


class InvalidSpanCardinalityError(TableCompositionError):
    """A level of a row-span specification is zero or negative."""

    def __init__(self, level: int, cardinality: int):
        super().__init__(
            "The cardinality for each level of the row span should be greater "
            f"than zero; found {cardinality} at level {level}"
        )
        self.level = level
        self.cardinality = cardinality


class SpanExceedsTableSizeError(TableCompositionError):
    """The flattened leaf-row count of a row span does not fit the table."""

    def __init__(self, leaf_rows: int, table_rows: int):
        super().__init__(
            f"Row span covers {leaf_rows} rows, more than the table row size ({table_rows})"
        )
        self.leaf_rows = leaf_rows
        self.table_rows = table_rows


class SpanContentMismatchError(TableCompositionError):
    """Fewer content rows were supplied than the row span flattens to."""

    def __init__(self, leaf_rows: int, content_rows: int):
        super().__init__(
            f"Row span needs {leaf_rows} content rows, got {content_rows}"
        )
        self.leaf_rows = leaf_rows
        self.content_rows = content_rows


# ─── Grid / column errors ────────────────────────────────────────────────────


class RowCursorOutOfRangeError(TableCompositionError):
    """A row write addressed a row outside the declared table size."""

    def __init__(self, row: int, rows: int):
        super().__init__(f"Row cursor {row} is outside the table row size ({rows})")
        self.row = row
        self.rows = rows


class MissingColumnMetadataError(TableCompositionError):
    """Column specs are required for this table but none were defined."""


class DuplicateColumnError(TableCompositionError):
    """Two column specs share the same index within one table."""

    def __init__(self, index: int):
        super().__init__(f"A column with index {index} is already defined")
        self.index = index


# ─── Lifecycle errors ────────────────────────────────────────────────────────


class TableIdAlreadyAssignedError(TableCompositionError):
    """A table or figure was given an id twice (e.g. appended twice)."""

    def __init__(self, current: str, requested: str):
        super().__init__(f"Id already assigned ({current}); refusing to reassign to {requested}")
        self.current = current
        self.requested = requested


class RendererStateError(TableCompositionError):
    """A renderer step was invoked out of order."""


class CompilerError(Exception):
    """The external LaTeX compiler could not be located or started."""
