"""Tests for texcompose.render — table serialization."""

import pytest

from texcompose.columns import LEFT, RIGHT, ColumnSpec, columns_range
from texcompose.errors import MissingColumnMetadataError, RendererStateError
from texcompose.render import RenderState, TableRenderer
from texcompose.table import GridTable, ManualTable, PaginationMode, TableSettings


def _paginated(rows=33, cols=2, **kwargs):
    table = GridTable("Big", rows=rows, cols=cols, headers=["K", "V"], **kwargs)
    table.add_columns(0, cols)
    table.load([[f"k{i}", f"v{i}"] for i in range(rows)])
    return table


# ---------------------------------------------------------------------------
# End-to-end, single page
# ---------------------------------------------------------------------------


class TestSinglePage:
    def test_four_by_four(self):
        table = GridTable("Results", rows=4, cols=4, headers=["A", "B", "C", "D"])
        table.align_columns(["l", "l", "r", "r"])
        table.load([["x", "y", "1", "2"]])

        assert table.to_latex() == (
            "\\begin{table}[h!b!p!]\n"
            "\\begin{tabular}{|l|l|r|r|}\n"
            "\\hline\n"
            "\\textbf{A} & \\textbf{B} & \\textbf{C} & \\textbf{D}\\\\ \\hline\n"
            "x & y & 1 & 2\\\\\n"
            "\\hline\n"
            "\\end{tabular}\n"
            "\\caption{Results}\n"
            "\\end{table}\n"
        )

    def test_no_trailing_separator(self):
        table = GridTable("t", rows=2, cols=3, headers=["a", "b", "c"])
        table.load([["1", "2", "3"], ["4", "5", "6"]])
        for line in table.to_latex().splitlines():
            assert not line.rstrip().endswith("&")
            assert "& \\\\" not in line

    def test_label_after_caption(self):
        table = GridTable("Results", rows=1, cols=1)
        table.assign_id("TableId-0")
        table.load([["x"]])
        lines = table.to_latex().splitlines()
        assert lines[-3:] == ["\\caption{Results}", "\\label{TableId-0}", "\\end{table}"]

    def test_unset_rows_skipped(self):
        table = GridTable("t", rows=4, cols=2)
        table.set_row(2, ["a", "b"])
        body = [line for line in table.to_latex().splitlines() if line.endswith("\\\\")]
        assert body == ["a & b\\\\"]

    def test_partially_set_row_renders_empty_cells(self):
        table = GridTable("t", rows=1, cols=3)
        table.set_row(0, ["a"])
        assert "a &  & \\\\" in table.to_latex()

    def test_horizontal_rules(self):
        table = GridTable("t", rows=2, cols=2, headers=["A", "B"], horizontal_rules=True)
        table.load([["1", "2"], ["3", "4"]])
        lines = table.to_latex().splitlines()
        header_at = lines.index("\\textbf{A} & \\textbf{B}\\\\ \\hline")
        assert lines[header_at + 1] == "\\hline"
        assert "1 & 2\\\\ \\hline" in lines
        assert "3 & 4\\\\ \\hline" in lines

    def test_row_shading(self):
        table = GridTable("t", rows=1, cols=1, row_shading=True)
        table.load([["x"]])
        lines = table.to_latex().splitlines()
        assert lines[1] == "\\rowcolors{2}{gray!35}{}"
        assert lines[2].startswith("\\begin{tabular}")

    def test_custom_shade_and_placement(self):
        settings = TableSettings(shade_color="blue!10", float_placement="ht")
        table = GridTable("t", rows=1, cols=1, row_shading=True, settings=settings)
        lines = table.to_latex().splitlines()
        assert lines[0] == "\\begin{table}[ht]"
        assert lines[1] == "\\rowcolors{2}{blue!10}{}"

    def test_no_headers(self):
        table = GridTable("t", rows=1, cols=2)
        table.load([["a", "b"]])
        assert "\\textbf" not in table.to_latex()

    def test_column_labels_as_headers(self):
        table = GridTable("t", rows=1, cols=2)
        table.add_column(ColumnSpec(index=0, alignment=LEFT, label="Name"))
        table.add_column(ColumnSpec(index=1, alignment=RIGHT, label="Qty"))
        table.load([["a", "1"]])
        latex = table.to_latex()
        assert "\\begin{tabular}{|l|r|}" in latex
        assert "\\textbf{Name} & \\textbf{Qty}\\\\ \\hline" in latex


# ---------------------------------------------------------------------------
# Alignment selection
# ---------------------------------------------------------------------------


class TestColumnAlignment:
    def test_default_centered(self):
        assert TableRenderer(GridTable("t", rows=1, cols=3)).column_alignment() == "|c|c|c|"

    def test_raw_string(self):
        table = GridTable("t", rows=1, cols=2, alignment="|p{3cm}|r|")
        assert TableRenderer(table).column_alignment() == "|p{3cm}|r|"

    def test_column_specs_win_over_raw(self):
        table = GridTable("t", rows=1, cols=2, alignment="|l|l|")
        table.add_columns(0, 2, RIGHT)
        assert TableRenderer(table).column_alignment() == "|r|r|"

    def test_column_specs_sorted_by_index(self):
        table = GridTable("t", rows=1, cols=2)
        table.add_column(ColumnSpec(index=1, alignment=RIGHT))
        table.add_column(ColumnSpec(index=0, alignment=LEFT))
        assert TableRenderer(table).column_alignment() == "|l|r|"

    def test_fewer_specs_than_columns(self):
        table = GridTable("t", rows=1, cols=3)
        table.add_columns(0, 2)
        with pytest.raises(MissingColumnMetadataError, match=r"missing \[2\]"):
            TableRenderer(table).column_alignment()

    def test_spec_index_out_of_range(self):
        table = GridTable("t", rows=1, cols=2)
        table.add_column(ColumnSpec(index=0))
        table.add_column(ColumnSpec(index=2))
        with pytest.raises(MissingColumnMetadataError, match=r"out of range \[2\]"):
            TableRenderer(table).column_alignment()

    def test_more_specs_than_columns(self):
        table = GridTable("t", rows=1, cols=2)
        table.add_columns(0, 3)
        with pytest.raises(MissingColumnMetadataError):
            TableRenderer(table).render()

    def test_mismatch_renders_nothing(self):
        table = GridTable("t", rows=1, cols=3)
        table.add_columns(0, 2)
        table.load([["a", "b", "c"]])
        with pytest.raises(MissingColumnMetadataError):
            table.to_latex()


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


class TestPaginated:
    def test_thirty_two_rows_single_page(self):
        latex = _paginated(rows=32).to_latex()
        assert "\\begin{tabular}" in latex
        assert "longtable" not in latex

    def test_thirty_three_rows_longtable(self):
        latex = _paginated(rows=33).to_latex()
        assert "\\begin{longtable}{|c|c|}" in latex
        assert "\\end{longtable}" in latex
        assert "\\begin{table}" not in latex
        assert "tabular" not in latex

    def test_header_repeats_with_continuation_foot(self):
        lines = _paginated().to_latex().splitlines()
        head = lines.index("\\endhead")
        assert lines[head - 1] == "\\textbf{K} & \\textbf{V}\\\\ \\hline"
        assert lines[head + 1 : head + 6] == [
            "\\hline",
            "\\multicolumn{2}{|c|}{Continued on next page}\\\\",
            "\\hline",
            "\\endfoot",
            "\\endlastfoot",
        ]

    def test_no_continuation_note(self):
        latex = _paginated(settings=TableSettings(continuation_note=None)).to_latex()
        assert "\\endhead" in latex
        assert "\\endfoot" not in latex

    def test_caption_and_label_close(self):
        table = _paginated()
        table.assign_id("TableId-4")
        lines = table.to_latex().splitlines()
        assert lines[-3:] == [
            "\\hline",
            "\\caption{Big}\\label{TableId-4}\\\\",
            "\\end{longtable}",
        ]

    def test_all_rows_rendered(self):
        body = [line for line in _paginated().to_latex().splitlines() if line.startswith("k")]
        assert len(body) == 33

    def test_missing_column_specs(self):
        table = GridTable("Big", rows=40, cols=2)
        with pytest.raises(MissingColumnMetadataError):
            table.to_latex()

    def test_column_specs_optional_when_configured(self):
        settings = TableSettings(require_columns_for_paginated=False)
        table = GridTable("Big", rows=40, cols=2, alignment="|l|r|", settings=settings)
        assert "\\begin{longtable}{|l|r|}" in table.to_latex()

    def test_shading_precedes_longtable(self):
        lines = _paginated(row_shading=True).to_latex().splitlines()
        assert lines[0] == "\\rowcolors{2}{gray!35}{}"
        assert lines[1] == "\\begin{longtable}{|c|c|}"


# ---------------------------------------------------------------------------
# Manual mode
# ---------------------------------------------------------------------------


class TestManualMode:
    def test_body_emitted_verbatim(self):
        table = ManualTable("Cross", rows=6, cols=4)
        table.add_rule()
        table.add_blank_multicolumn(2, right_separator=True)
        table.end_column()
        table.add_multicolumn(2, text="2024")
        table.end_row()
        table.add_rule()

        assert table.to_latex() == (
            "\\begin{table}[h!b!p!]\n"
            "\\begin{tabular}{|c|c|c|c|}\n"
            "\\hline\n"
            "\\multicolumn{2}{c|}{} & \\multicolumn{2}{|c|}{2024} \\\\ \n"
            "\\hline\n"
            "\\hline\n"
            "\\end{tabular}\n"
            "\\caption{Cross}\n"
            "\\end{table}\n"
        )

    def test_headers_not_generated(self):
        table = ManualTable("t", rows=1, cols=2, headers=["A", "B"])
        table.add_cells(["x", "y"])
        table.end_row()
        assert "\\textbf" not in table.to_latex()

    def test_empty_body(self):
        lines = ManualTable("t", rows=1, cols=1).to_latex().splitlines()
        assert lines == [
            "\\begin{table}[h!b!p!]",
            "\\begin{tabular}{|c|}",
            "\\hline",
            "\\end{tabular}",
            "\\caption{t}",
            "\\end{table}",
        ]

    def test_cross_tabulation(self):
        table = ManualTable("Cross", rows=6, cols=4, horizontal_rules=True)
        table.add_rule()
        table.add_multirow_block(
            [3, 2], [[f"L{i}", f"G{i}", f"a{i}", f"v{i}"] for i in range(6)]
        )
        lines = table.to_latex().splitlines()
        assert lines[3] == "\\multirow{6}{*}{L0} & G0 & a0 & v0\\\\ \\cline{3-4}"
        assert lines[8] == "  & G5  & a5  & v5\\\\ \\cline{1-4}"
        assert lines[9] == "\\hline"


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class TestRendererState:
    def test_render_walks_all_states(self):
        renderer = TableRenderer(GridTable("t", rows=1, cols=1))
        assert renderer.state is RenderState.UNINITIALIZED
        renderer.render()
        assert renderer.state is RenderState.CLOSED
        assert renderer.mode is PaginationMode.SINGLE_PAGE

    def test_header_state_only_with_labels(self):
        renderer = TableRenderer(GridTable("t", rows=1, cols=1, headers=["A"]))
        renderer.open()
        renderer.emit_header()
        assert renderer.state is RenderState.HEADER_EMITTED

    def test_header_skipped_without_labels(self):
        renderer = TableRenderer(GridTable("t", rows=1, cols=1))
        renderer.open()
        renderer.emit_header()
        assert renderer.state is RenderState.OPENED

    def test_close_before_body(self):
        renderer = TableRenderer(GridTable("t", rows=1, cols=1))
        renderer.open()
        with pytest.raises(RendererStateError):
            renderer.close()

    def test_body_before_open(self):
        with pytest.raises(RendererStateError):
            TableRenderer(GridTable("t", rows=1, cols=1)).emit_body()

    def test_single_use(self):
        renderer = TableRenderer(GridTable("t", rows=1, cols=1))
        renderer.render()
        with pytest.raises(RendererStateError):
            renderer.render()

    def test_header_after_body(self):
        renderer = TableRenderer(GridTable("t", rows=1, cols=1, headers=["A"]))
        renderer.open()
        renderer.emit_body()
        with pytest.raises(RendererStateError):
            renderer.emit_header()

    def test_columns_range_helper_renders(self):
        table = GridTable("t", rows=1, cols=3)
        for spec in columns_range(0, 3, RIGHT):
            table.add_column(spec)
        assert "{|r|r|r|}" in TableRenderer(table).render()
