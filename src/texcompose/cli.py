"""Click CLI for texcompose: table, document."""

from __future__ import annotations

import csv
import logging
import sys
from pathlib import Path

import click

from texcompose.columns import CENTER, ColumnSpec
from texcompose.compiler import CompilerConfig, LatexCompiler
from texcompose.document import DocumentAssembler
from texcompose.errors import CompilerError, TableCompositionError
from texcompose.escape import escape, escape_cells
from texcompose.table import GridTable, TableSettings


def _read_csv(path: Path, header: bool, escape_text: bool) -> tuple[list[str] | None, list[list[str]]]:
    with open(path, newline="", encoding="utf-8") as f:
        rows = [row for row in csv.reader(f) if row]
    headers = rows.pop(0) if header and rows else None
    if escape_text:
        headers = escape_cells(headers) if headers else headers
        rows = [escape_cells(row) for row in rows]
    return headers, rows


def _build_table(
    path: Path,
    *,
    caption: str | None,
    header: bool,
    align: str | None,
    rules: bool,
    shading: bool,
    escape_text: bool,
    threshold: int,
) -> GridTable:
    headers, rows = _read_csv(path, header, escape_text)
    cols = max([len(headers or [])] + [len(r) for r in rows] + [1])
    if caption is None:
        caption = escape(path.stem) if escape_text else path.stem

    table = GridTable(
        caption,
        rows=len(rows),
        cols=cols,
        horizontal_rules=rules,
        row_shading=shading,
        settings=TableSettings(pagination_threshold=threshold),
    )
    tokens = _alignment_tokens(align)
    if len(tokens) == 1:
        tokens *= cols
    tokens += [CENTER] * (cols - len(tokens))
    for i, token in enumerate(tokens[:cols]):
        label = headers[i] if headers and i < len(headers) else None
        table.add_column(ColumnSpec(index=i, alignment=token, label=label))
    table.load(rows)
    return table


def _alignment_tokens(align: str | None) -> list[str]:
    """One token per character (``lrr``), or comma-separated (``l,p{3cm},r``)."""
    if not align:
        return [CENTER]
    if "," in align or "{" in align:
        return [token.strip() or CENTER for token in align.split(",")]
    return list(align)


def _emit(text: str, output: str | None) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"Wrote {output}", err=True)
    else:
        click.echo(text, nl=False)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
def main(verbose: bool) -> None:
    """texcompose: build LaTeX tables and documents from CSV data."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


_table_options = [
    click.option("--header/--no-header", default=True, help="First CSV row holds column labels"),
    click.option(
        "--align",
        default=None,
        help="Column alignments, e.g. 'lrr' or 'l,p{3cm},r' (default: centered)",
    ),
    click.option("--rules", is_flag=True, help="Rule after every row"),
    click.option("--shading", is_flag=True, help="Alternate row shading"),
    click.option("--escape/--no-escape", "escape_text", default=True, help="Escape LaTeX specials"),
    click.option("--threshold", default=32, show_default=True, help="Rows above which longtable is used"),
]


def table_options(func):
    for option in reversed(_table_options):
        func = option(func)
    return func


@main.command()
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--caption", default=None, help="Table caption (default: file name)")
@table_options
@click.option("--output", "-o", default=None, help="Output .tex file (default: stdout)")
def table(
    csv_path: Path,
    caption: str | None,
    header: bool,
    align: str | None,
    rules: bool,
    shading: bool,
    escape_text: bool,
    threshold: int,
    output: str | None,
) -> None:
    """Render one CSV file as a LaTeX table."""
    try:
        tbl = _build_table(
            csv_path,
            caption=caption,
            header=header,
            align=align,
            rules=rules,
            shading=shading,
            escape_text=escape_text,
            threshold=threshold,
        )
        text = tbl.to_latex()
    except TableCompositionError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    _emit(text, output)


@main.command()
@click.argument(
    "csv_paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--title", required=True, help="Document title")
@click.option("--author", default="", help="Document author")
@table_options
@click.option("--output", "-o", default=None, help="Output .tex file (default: stdout)")
@click.option("--compile", "compile_pdf", is_flag=True, help="Run the LaTeX compiler")
@click.option("--workdir", default=None, help="Compiler working directory")
@click.option("--command", default="pdflatex", show_default=True, help="LaTeX compiler command")
def document(
    csv_paths: tuple[Path, ...],
    title: str,
    author: str,
    header: bool,
    align: str | None,
    rules: bool,
    shading: bool,
    escape_text: bool,
    threshold: int,
    output: str | None,
    compile_pdf: bool,
    workdir: str | None,
    command: str,
) -> None:
    """Build a document with one section and table per CSV file."""
    doc = DocumentAssembler(title, author)
    for path in csv_paths:
        doc.add_section(escape(path.stem) if escape_text else path.stem)
        tbl = _build_table(
            path,
            caption=None,
            header=header,
            align=align,
            rules=rules,
            shading=shading,
            escape_text=escape_text,
            threshold=threshold,
        )
        result = doc.append_table(tbl)
        if not result.ok:
            click.echo(f"Skipped {path.name}: {result.error}", err=True)

    if not compile_pdf:
        _emit(doc.to_latex(), output)
        return

    config = CompilerConfig(command=command, working_dir=Path(workdir) if workdir else None)
    try:
        compiled = LatexCompiler(config).compile(doc, filename=Path(output).name if output else None)
    except CompilerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not compiled.ok:
        click.echo(f"Compilation failed ({compiled.tex_path}):", err=True)
        click.echo(compiled.log_tail, err=True)
        sys.exit(1)
    click.echo(str(compiled.pdf_path))


if __name__ == "__main__":
    main()
