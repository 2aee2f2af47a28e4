"""LaTeX special-character escaping.

Applied to raw user text before it is placed into table cells, captions or
labels. Every special character is prefixed with a backslash; everything else
passes through unchanged.

Escaping is NOT idempotent (the backslash itself is special), so callers must
escape a given piece of raw text exactly once.
"""

from __future__ import annotations

from collections.abc import Iterable

ESCAPE_MARKER = "\\"

SPECIAL_CHARACTERS = frozenset("\\#$%^&_{}~")

# Character-level replacements via str.translate
_TRANSLATE = str.maketrans({ch: ESCAPE_MARKER + ch for ch in SPECIAL_CHARACTERS})


def escape(text: str) -> str:
    """Return *text* with every LaTeX special character prefixed by ``\\``.

    Handles ``\\ # $ % ^ & _ { } ~``. The empty string maps to itself.
    """
    return text.translate(_TRANSLATE)


def escape_cells(values: Iterable[str | None]) -> list[str | None]:
    """Escape each cell of a row, leaving unset (``None``) cells alone."""
    return [None if v is None else escape(v) for v in values]
