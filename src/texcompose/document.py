"""Whole-document assembly: body buffer, numbering, preamble.

A :class:`DocumentAssembler` owns the ordered body text of one document and
the counters that name its floats (``TableId-0``, ``FigureId-0``, ...). Ids
are assigned when an element is appended, before it is rendered, so an
element can only be referenced (``\\ref{TableId-0}``) after it was appended.

A table or figure that fails to render is logged, recorded as a diagnostic
and left out; the rest of the document is still assembled.

Usage::

    from texcompose.document import DocumentAssembler
    from texcompose.table import GridTable

    doc = DocumentAssembler("Monthly report", author="Finance")
    doc.add_section("Revenue")
    result = doc.append_table(GridTable("Revenue by region", rows=3, cols=2))
    print(result.element_id)  # TableId-0
    latex = doc.to_latex()
"""

from __future__ import annotations

import datetime
import logging
import threading
from dataclasses import dataclass

from pydantic import BaseModel, Field

from texcompose import markup
from texcompose.diagnostics import Diagnostic, DiagnosticCode, record
from texcompose.figures import Figure
from texcompose.table import Table

logger = logging.getLogger(__name__)

TABLE_ID_PREFIX = "TableId-"
FIGURE_ID_PREFIX = "FigureId-"

DEFAULT_PACKAGES: dict[str, str | None] = {
    "fancyhdr": None,
    "makeidx": None,
    "lscape": None,
    "amsmath,amssymb,amsfonts": None,
    "array": None,
    "multicol": None,
    "multirow": None,
    "longtable": None,
    "graphicx": None,
    "xcolor": "table",
}

LINK_COLORS = {
    "rltred": "0.75,0,0",
    "rltgreen": "0,0.5,0",
    "rltblue": "0,0,0.75",
}


class IdSequence:
    """Thread-safe generator of ``<prefix><n>`` ids, starting at ``start``.

    One sequence per document is the default; pass a shared instance to
    several documents when ids must be unique across them.
    """

    def __init__(self, prefix: str, start: int = 0):
        self.prefix = prefix
        self._next = start
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            n = self._next
            self._next += 1
        return f"{self.prefix}{n}"


class DocumentSettings(BaseModel):
    """Document class, packages and page chrome."""

    document_class: str = "article"
    class_options: list[str] = Field(default_factory=lambda: ["11pt", "a4paper"])
    packages: dict[str, str | None] = Field(default_factory=lambda: dict(DEFAULT_PACKAGES))
    hyperref: bool = True
    subject: str = ""
    keywords: str = ""
    left_header: str = ""
    center_header: str = ""
    right_header: str = ""
    center_footer: str = ""
    # None -> today's date
    date: str | None = None
    table_of_contents: bool = True
    # xelatex: \setmainfont via fontspec, family -> font file for \DeclareTruetypeFont
    main_font: str | None = None
    truetype_fonts: dict[str, str] = Field(default_factory=dict)
    preamble_extra: list[str] = Field(default_factory=list)


@dataclass
class AppendResult:
    """Outcome of appending a table or figure.

    ``element_id`` is always the id that was consumed, even when rendering
    failed and the element was skipped.
    """

    element_id: str
    ok: bool
    error: Exception | None = None


class DocumentAssembler:
    """Ordered, append-only LaTeX body plus the chrome around it."""

    def __init__(
        self,
        title: str,
        author: str = "",
        *,
        settings: DocumentSettings | None = None,
        table_ids: IdSequence | None = None,
        figure_ids: IdSequence | None = None,
    ):
        self.title = title
        self.author = author
        self.settings = settings or DocumentSettings()
        self.table_ids = table_ids or IdSequence(TABLE_ID_PREFIX)
        self.figure_ids = figure_ids or IdSequence(FIGURE_ID_PREFIX)
        self.diagnostics: list[Diagnostic] = []
        self.tables: list[str] = []
        self.figures: list[str] = []
        self._body: list[str] = []
        logger.debug("Creating a LaTeX document with title: %s", title)

    @property
    def body(self) -> str:
        return "".join(self._body)

    # ── raw text and sectioning ─────────────────────────────────────────

    def add(self, latex: str) -> None:
        """Append *latex* followed by a newline."""
        self._body.append(latex + "\n")

    def insert(self, latex: str) -> None:
        """Append *latex* verbatim."""
        self._body.append(latex)

    def add_chapter(self, title: str, numbered: bool = True) -> None:
        self.add(_heading("chapter", title, numbered))

    def add_section(self, title: str, numbered: bool = True) -> None:
        self.add(_heading("section", title, numbered))

    def add_subsection(self, title: str, numbered: bool = True) -> None:
        self.add(_heading("subsection", title, numbered))

    def new_page(self) -> None:
        self.add("\\newpage")

    def new_line(self) -> None:
        self.add("\\newline")

    def add_index_entry(self, entry: str) -> None:
        self.insert(f"\\index{{{entry}}}")

    def use_package(self, name: str, options: str | None = None) -> None:
        self.settings.packages[name] = options

    # ── floats ──────────────────────────────────────────────────────────

    def append_table(self, table: Table) -> AppendResult:
        """Assign the next table id, render *table* and append it.

        Rendering errors are not raised: the table is skipped and a
        ``TableSkipped`` diagnostic is recorded.
        """
        table_id = self.table_ids.next()
        logger.debug("Adding table: %s", table_id)
        try:
            table.assign_id(table_id)
            latex = table.to_latex()
        except Exception as exc:
            record(
                self.diagnostics,
                DiagnosticCode.TABLE_SKIPPED,
                f"Failed to add table {table_id} ({table.caption!r}): {exc}",
                logger,
                severity="error",
            )
            return AppendResult(table_id, ok=False, error=exc)

        self._append_float(latex, table.landscape)
        self.tables.append(table_id)
        return AppendResult(table_id, ok=True)

    def append_figure(self, figure: Figure) -> AppendResult:
        """Assign the next figure id, render *figure* and append it."""
        figure_id = self.figure_ids.next()
        logger.debug("Adding figure: %s", figure_id)
        try:
            figure.assign_id(figure_id)
            latex = figure.to_latex()
        except Exception as exc:
            record(
                self.diagnostics,
                DiagnosticCode.FIGURE_SKIPPED,
                f"Failed to add figure {figure_id} ({figure.path}): {exc}",
                logger,
                severity="error",
            )
            return AppendResult(figure_id, ok=False, error=exc)

        self._append_float(latex, figure.landscape)
        self.figures.append(figure_id)
        return AppendResult(figure_id, ok=True)

    def _append_float(self, latex: str, landscape: bool) -> None:
        if landscape:
            self.add(markup.begin("landscape"))
        self.insert(latex)
        if landscape:
            self.add(markup.end("landscape"))

    # ── serialization ───────────────────────────────────────────────────

    @property
    def date(self) -> str:
        return self.settings.date or datetime.date.today().isoformat()

    def _hyperref(self) -> str:
        options = [
            "colorlinks=true",
            "urlcolor=rltblue",
            "filecolor=rltgreen",
            "linkcolor=rltred",
            f"pdftitle={{{self.title}}}",
            f"pdfauthor={{{self.author}}}",
            f"pdfsubject={{{self.settings.subject}}}",
            f"pdfkeywords={{{self.settings.keywords}}}",
            "pagebackref",
            "bookmarksopen=true",
        ]
        return "\\usepackage[" + ",\n            ".join(options) + "]{hyperref}"

    def preamble(self) -> str:
        """Everything before ``\\begin{document}``."""
        s = self.settings
        lines = [f"\\documentclass[{','.join(s.class_options)}]{{{s.document_class}}}"]
        packages = dict(s.packages)
        if s.main_font:
            packages.setdefault("fontspec", None)
        for name, options in packages.items():
            opt = f"[{options}]" if options else ""
            lines.append(f"\\usepackage{opt}{{{name}}}")
        lines += [f"\\definecolor{{{n}}}{{rgb}}{{{rgb}}}" for n, rgb in LINK_COLORS.items()]
        if s.hyperref:
            lines.append(self._hyperref())
        lines += [
            "%",
            "\\pagestyle{fancy}",
            f"\\lhead{{{s.left_header}}}",
            f"\\chead{{{s.center_header}}}",
            f"\\rhead{{\\bfseries {s.right_header}}}",
            f"\\lfoot{{Created by: {self.author}}}",
            f"\\cfoot{{{s.center_footer}}}",
            "\\rfoot{\\thepage}",
            "\\renewcommand{\\headrulewidth}{0.4pt}",
            "\\renewcommand{\\footrulewidth}{0.4pt}",
        ]
        if s.main_font:
            lines.append(f"\\setmainfont{{{s.main_font}}}")
        lines += [
            f"\\DeclareTruetypeFont{{{family}}}{{{font}}}"
            for family, font in s.truetype_fonts.items()
        ]
        lines += s.preamble_extra
        lines += [
            "%",
            f"\\title{{{self.title}}}",
            f"\\author{{{self.author}}}",
            f"\\date{{{self.date}}}",
        ]
        return "\n".join(lines) + "\n"

    def title_block(self) -> str:
        return "\n".join(
            [
                "\\thispagestyle{plain}",
                "\\noindent",
                "\\begin{tabular*}{0.95\\textwidth}{@{\\extracolsep{\\fill}} ll}",
                "  \\hline \\\\",
                f"  {markup.bold('Title')} & {self.title} \\\\",
                f"  {markup.bold('Author')} & {self.author} \\\\",
                f"  Created on & {self.date} \\\\",
                "  \\hline",
                "\\end{tabular*}",
            ]
        ) + "\n"

    def to_latex(self) -> str:
        """The complete document source."""
        parts = [self.preamble(), "\\makeindex\n", "\\begin{document}\n", self.title_block()]
        if self.settings.table_of_contents:
            parts.append("\\tableofcontents\n")
        if self.figures:
            parts.append("\\listoffigures\n")
        if self.tables:
            parts.append("\\listoftables\n")
        parts.append(self.body)
        parts.append("\\end{document}\n")
        return "".join(parts)


def _heading(command: str, title: str, numbered: bool) -> str:
    return f"\\{command}{'' if numbered else '*'}{{{title}}}"
