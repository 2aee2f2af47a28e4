"""Structured diagnostics for soft, recoverable conditions.

Oversized inputs are truncated rather than rejected, and a failed element is
skipped rather than aborting a whole document. Each such event is appended to
the owning object's ``diagnostics`` list and logged, so callers that need
strict output can treat any recorded diagnostic as build-breaking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum


class DiagnosticCode(str, Enum):
    ROW_COUNT_EXCEEDED = "RowCountExceeded"
    COLUMN_COUNT_EXCEEDED = "ColumnCountExceeded"
    ALIGNMENT_COUNT_MISMATCH = "AlignmentCountMismatch"
    TABLE_SKIPPED = "TableSkipped"
    FIGURE_SKIPPED = "FigureSkipped"


@dataclass
class Diagnostic:
    """A single soft-failure finding.

    Attributes:
        code: Machine-readable category.
        message: Human-readable description.
        severity: ``"warning"`` or ``"error"``.
    """

    code: DiagnosticCode
    message: str
    severity: str = "warning"


def record(
    diagnostics: list[Diagnostic],
    code: DiagnosticCode,
    message: str,
    logger: logging.Logger,
    *,
    severity: str = "warning",
) -> Diagnostic:
    """Append a diagnostic to *diagnostics* and log it at the matching level."""
    diag = Diagnostic(code=code, message=message, severity=severity)
    diagnostics.append(diag)
    level = logging.ERROR if severity == "error" else logging.WARNING
    logger.log(level, "%s: %s", code.value, message)
    return diag
