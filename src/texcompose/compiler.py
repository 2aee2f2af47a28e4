"""Write documents to disk and run the LaTeX compiler on them.

The compiler is run twice by default so that cross references, the table of
contents and the lists of figures/tables resolve. Each run is bounded by
``CompilerConfig.timeout`` and can be cut short from another thread with
:meth:`LatexCompiler.terminate`.
"""

from __future__ import annotations

import datetime
import logging
import os
import re
import shutil
import subprocess
import threading
from dataclasses import dataclass, field
from pathlib import Path

from texcompose.document import DocumentAssembler
from texcompose.errors import CompilerError

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "TEXCOMPOSE_HOME"
LOG_TAIL_LINES = 40

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]+")


def default_working_dir() -> Path:
    """``$TEXCOMPOSE_HOME/<date>``, falling back to ``~/texcompose/<date>``."""
    home = os.environ.get(HOME_ENV_VAR)
    root = Path(home) if home else Path.home() / "texcompose"
    return root / datetime.date.today().isoformat()


def document_filename(title: str) -> str:
    """File name for a document title, e.g. ``"Q3 report"`` -> ``"Q3_report.tex"``."""
    stem = _UNSAFE_FILENAME.sub("_", title).strip("_") or "document"
    return f"{stem}.tex"


@dataclass
class CompilerConfig:
    command: str = "pdflatex"
    # Directory holding the command; None -> look it up on PATH
    command_dir: Path | None = None
    working_dir: Path | None = None
    runs: int = 2
    timeout: float | None = 300.0
    extra_args: list[str] = field(default_factory=list)


@dataclass
class CompileResult:
    """Outcome of compiling one document.

    Attributes:
        tex_path: The ``.tex`` file that was compiled.
        pdf_path: The produced PDF, or None when compilation failed.
        returncode: Exit status of the last run (None if it never finished).
        runs: Number of compiler runs that were started.
        log_tail: Last lines of the compiler's console output.
        timed_out: The last run exceeded the timeout and was killed.
        terminated: :meth:`LatexCompiler.terminate` stopped the compilation.
    """

    tex_path: Path
    pdf_path: Path | None
    returncode: int | None
    runs: int
    log_tail: str = ""
    timed_out: bool = False
    terminated: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and self.pdf_path is not None


class LatexCompiler:
    """Saves :class:`DocumentAssembler` output and compiles it."""

    def __init__(self, config: CompilerConfig | None = None):
        self.config = config or CompilerConfig()
        self.working_dir = Path(self.config.working_dir or default_working_dir())
        self._process: subprocess.Popen | None = None
        self._terminated = False
        self._lock = threading.Lock()
        logger.info("Compiler working directory: %s", self.working_dir)

    def resolve_command(self) -> str:
        """Absolute path of the compiler executable.

        Raises:
            CompilerError: The command is not installed (or not found in
                ``command_dir``).
        """
        if self.config.command_dir is not None:
            candidate = Path(self.config.command_dir) / self.config.command
            if candidate.is_file() and os.access(candidate, os.X_OK):
                return str(candidate)
            raise CompilerError(f"LaTeX compiler not found at {candidate}")

        found = shutil.which(self.config.command)
        if found is None:
            raise CompilerError(
                f"LaTeX compiler {self.config.command!r} not found on PATH; "
                "install a TeX distribution or set command_dir"
            )
        return found

    def save(self, document: DocumentAssembler, filename: str | None = None) -> Path:
        """Write the full document source into the working directory."""
        self.working_dir.mkdir(parents=True, exist_ok=True)
        path = self.working_dir / (filename or document_filename(document.title))
        path.write_text(document.to_latex(), encoding="utf-8")
        logger.info("Wrote %s", path)
        return path

    def compile(self, document: DocumentAssembler, filename: str | None = None) -> CompileResult:
        """Save *document* and run the compiler on it ``config.runs`` times.

        A non-zero exit or a timeout stops further runs and is reported in the
        result, not raised.
        """
        executable = self.resolve_command()
        with self._lock:
            self._terminated = False
        tex_path = self.save(document, filename)
        args = [
            executable,
            "-halt-on-error",
            "-interaction=nonstopmode",
            *self.config.extra_args,
            tex_path.name,
        ]
        logger.debug("Compiler command: %s", args)

        runs = 0
        returncode: int | None = None
        output = ""
        timed_out = False
        for _ in range(self.config.runs):
            if self._terminated:
                break
            runs += 1
            returncode, output, timed_out = self._run(args)
            if returncode != 0:
                logger.warning(
                    "%s exited with %s on run %d for %s",
                    self.config.command,
                    returncode,
                    runs,
                    tex_path.name,
                )
                break

        pdf_path = tex_path.with_suffix(".pdf")
        return CompileResult(
            tex_path=tex_path,
            pdf_path=pdf_path if returncode == 0 and pdf_path.exists() else None,
            returncode=returncode,
            runs=runs,
            log_tail="\n".join(output.splitlines()[-LOG_TAIL_LINES:]),
            timed_out=timed_out,
            terminated=self._terminated,
        )

    def _run(self, args: list[str]) -> tuple[int | None, str, bool]:
        with self._lock:
            self._process = subprocess.Popen(
                args,
                cwd=self.working_dir,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        process = self._process
        try:
            output, _ = process.communicate(timeout=self.config.timeout)
            return process.returncode, output or "", False
        except subprocess.TimeoutExpired:
            logger.error("%s timed out after %ss", self.config.command, self.config.timeout)
            process.kill()
            output, _ = process.communicate()
            return None, output or "", True
        finally:
            with self._lock:
                self._process = None

    def terminate(self) -> None:
        """Stop the running compiler process and skip any remaining runs."""
        with self._lock:
            self._terminated = True
            if self._process is not None and self._process.poll() is None:
                logger.info("Terminating %s", self.config.command)
                self._process.terminate()
