"""texcompose: Compose LaTeX documents and cross-tabulated tables from Python data."""

from texcompose.columns import CENTER, LEFT, RIGHT, ColumnSpec, columns_range
from texcompose.compiler import CompileResult, CompilerConfig, LatexCompiler
from texcompose.diagnostics import Diagnostic, DiagnosticCode
from texcompose.document import AppendResult, DocumentAssembler, DocumentSettings, IdSequence
from texcompose.errors import (
    CompilerError,
    DuplicateColumnError,
    InvalidSpanCardinalityError,
    InvalidSpanError,
    MissingColumnMetadataError,
    RendererStateError,
    RowCursorOutOfRangeError,
    SpanContentMismatchError,
    SpanExceedsTableSizeError,
    SpanTooNarrowError,
    SpanTooWideError,
    TableCompositionError,
    TableIdAlreadyAssignedError,
)
from texcompose.escape import escape, escape_cells
from texcompose.figures import Figure
from texcompose.grid import CellGrid
from texcompose.render import RenderState, TableRenderer
from texcompose.spans import SpanPlan, leaf_row_count, plan_boundaries, plan_span
from texcompose.table import (
    GridTable,
    ManualTable,
    PaginationMode,
    Table,
    TableMode,
    TableSettings,
)

# Optional integrations (lazy imports to avoid optional dependency issues)
def table_from_dataframe(*args, **kwargs):
    """Build a GridTable from a pandas DataFrame. Requires: pip install texcompose[pandas]"""
    from texcompose.dataframe import table_from_dataframe as _build
    return _build(*args, **kwargs)


__all__ = [
    # Table model
    "CENTER",
    "LEFT",
    "RIGHT",
    "CellGrid",
    "ColumnSpec",
    "GridTable",
    "ManualTable",
    "PaginationMode",
    "Table",
    "TableMode",
    "TableSettings",
    "columns_range",
    # Rendering
    "RenderState",
    "SpanPlan",
    "TableRenderer",
    "escape",
    "escape_cells",
    "leaf_row_count",
    "plan_boundaries",
    "plan_span",
    # Documents
    "AppendResult",
    "DocumentAssembler",
    "DocumentSettings",
    "Figure",
    "IdSequence",
    # Compiler
    "CompileResult",
    "CompilerConfig",
    "LatexCompiler",
    # Diagnostics and errors
    "CompilerError",
    "Diagnostic",
    "DiagnosticCode",
    "DuplicateColumnError",
    "InvalidSpanCardinalityError",
    "InvalidSpanError",
    "MissingColumnMetadataError",
    "RendererStateError",
    "RowCursorOutOfRangeError",
    "SpanContentMismatchError",
    "SpanExceedsTableSizeError",
    "SpanTooNarrowError",
    "SpanTooWideError",
    "TableCompositionError",
    "TableIdAlreadyAssignedError",
    # Optional integrations
    "table_from_dataframe",
]
