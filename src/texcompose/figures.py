"""Image figures placed through ``\\includegraphics``."""

from __future__ import annotations

from dataclasses import dataclass, field

from texcompose import markup
from texcompose.errors import TableIdAlreadyAssignedError

FIGURE_PLACEMENT = "!htpb"


@dataclass
class Figure:
    """An image file with optional size/rotation options and a caption.

    Option values are passed through as LaTeX lengths or numbers
    (``"0.8\\\\textwidth"``, ``"90"``, ``"0.5"``).
    """

    path: str
    caption: str = ""
    width: str | None = None
    height: str | None = None
    angle: str | None = None
    scale: str | None = None
    landscape: bool = False
    _id: str | None = field(default=None, init=False, repr=False)

    @property
    def id(self) -> str | None:
        return self._id

    def assign_id(self, figure_id: str) -> None:
        if self._id is not None:
            raise TableIdAlreadyAssignedError(self._id, figure_id)
        self._id = figure_id

    def options(self) -> str:
        """Comma-separated ``key=value`` options, in width/height/angle/scale order."""
        pairs = [
            ("width", self.width),
            ("height", self.height),
            ("angle", self.angle),
            ("scale", self.scale),
        ]
        return ",".join(f"{key}={value}" for key, value in pairs if value is not None)

    def include_graphics(self) -> str:
        return f"\\includegraphics[{self.options()}]{{{self.path}}}"

    def to_latex(self) -> str:
        """The ``figure`` float: image, caption and (once assigned) label."""
        lines = [
            markup.begin("figure", option=FIGURE_PLACEMENT),
            self.include_graphics(),
            markup.caption(self.caption),
        ]
        if self._id is not None:
            lines.append(markup.label(self._id))
        lines.append(markup.end("figure"))
        return "\n".join(lines) + "\n"
