"""Tests for texcompose.columns — column specs and alignment fragments."""

import pytest
from pydantic import ValidationError

from texcompose.columns import (
    CENTER,
    LEFT,
    RIGHT,
    ColumnSpec,
    alignment_preamble,
    columns_range,
)
from texcompose.errors import InvalidSpanError, SpanTooNarrowError, SpanTooWideError


# ---------------------------------------------------------------------------
# Alignment fragments
# ---------------------------------------------------------------------------


class TestColumnAlignmentFragment:
    def test_default_is_centered_with_left_rule(self):
        assert ColumnSpec(index=0).column_alignment_fragment() == "|c"

    def test_last_column_closes_rule(self):
        assert ColumnSpec(index=3, alignment=RIGHT).column_alignment_fragment(is_last=True) == "|r|"

    def test_no_left_separator(self):
        spec = ColumnSpec(index=0, alignment=LEFT, has_left_separator=False)
        assert spec.column_alignment_fragment() == "l"

    def test_explicit_right_separator(self):
        spec = ColumnSpec(index=0, has_right_separator=True)
        assert spec.column_alignment_fragment() == "|c|"

    def test_right_separator_suppressed_on_last(self):
        spec = ColumnSpec(index=0, has_right_separator=False)
        assert spec.column_alignment_fragment(is_last=True) == "|c"

    def test_background_color(self):
        spec = ColumnSpec(index=0, alignment=LEFT, background_color="yellow")
        assert spec.column_alignment_fragment() == "|>{\\columncolor{yellow}}l"

    def test_raw_directive_verbatim(self):
        spec = ColumnSpec(index=0, alignment="p{3cm}", background_color="red")
        assert spec.column_alignment_fragment(is_last=True) == "p{3cm}"

    def test_max_width_widens_simple_alignment(self):
        spec = ColumnSpec(index=0, alignment=LEFT, max_width="4cm")
        assert spec.column_alignment_fragment(is_last=True) == "|p{4cm}|"

    def test_is_simple(self):
        assert ColumnSpec(index=0, alignment="r").is_simple
        assert not ColumnSpec(index=0, alignment="p{2cm}").is_simple


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestColumnSpecValidation:
    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            ColumnSpec(index=-1)

    def test_empty_alignment_rejected(self):
        with pytest.raises(ValidationError):
            ColumnSpec(index=0, alignment="")

    def test_zero_span_rejected(self):
        with pytest.raises(ValidationError):
            ColumnSpec(index=0, span=0)

    def test_assignment_is_validated(self):
        spec = ColumnSpec(index=0)
        spec.index = 5
        assert spec.index == 5
        with pytest.raises(ValidationError):
            spec.index = -2


# ---------------------------------------------------------------------------
# Merged cells
# ---------------------------------------------------------------------------


class TestMulticolumn:
    def test_basic(self):
        spec = ColumnSpec(index=0, alignment="|c|", span=3, label="2024")
        assert spec.multicolumn(4) == "\\multicolumn{3}{|c|}{2024}"

    def test_background_prefix(self):
        spec = ColumnSpec(index=0, span=2, label="Q", background_color="gray")
        assert spec.multicolumn(4) == "\\multicolumn{2}{>{\\columncolor{gray}}c}{Q}"

    def test_foreground_wraps_label(self):
        spec = ColumnSpec(index=0, span=2, label="Q", foreground_color="blue")
        assert spec.multicolumn(2) == "\\multicolumn{2}{c}{\\color{blue}\\textsf{Q}}"

    def test_too_wide(self):
        spec = ColumnSpec(index=0, span=5)
        with pytest.raises(SpanTooWideError) as exc_info:
            spec.multicolumn(4)
        assert exc_info.value.span == 5
        assert exc_info.value.limit == 4

    def test_span_of_one_too_narrow(self):
        with pytest.raises(SpanTooNarrowError):
            ColumnSpec(index=0, span=1).multicolumn(4)

    def test_unset_span_too_narrow(self):
        with pytest.raises(SpanTooNarrowError):
            ColumnSpec(index=0).multicolumn(4)

    def test_errors_share_base(self):
        with pytest.raises(InvalidSpanError):
            ColumnSpec(index=0, span=9).multicolumn(2)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestColumnsRange:
    def test_indices_end_exclusive(self):
        specs = columns_range(2, 5, RIGHT)
        assert [s.index for s in specs] == [2, 3, 4]
        assert {s.alignment for s in specs} == {RIGHT}

    def test_default_centered(self):
        assert columns_range(0, 1)[0].alignment == CENTER

    def test_empty_range(self):
        assert columns_range(3, 3) == []

    def test_alignment_preamble(self):
        specs = [ColumnSpec(index=0, alignment=LEFT), *columns_range(1, 3, RIGHT)]
        assert alignment_preamble(specs) == "|l|r|r|"
