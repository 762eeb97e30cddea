"""Data models projected from a single Istanbul HTML report page.

Every record here is derived fresh on each parse call and never mutated
afterwards; the parsers build them, the view emitters consume them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from covview.errors import MalformedReportError

if TYPE_CHECKING:
    from collections.abc import Iterable

_CLASS_UNCOVERED = "cline-no"
_CLASS_COVERED = "cline-yes"


class CoverageClass(Enum):
    """Coverage marker attached to a line's annotation indicator."""

    COVERED = "covered"
    UNCOVERED = "uncovered"
    UNKNOWN = "unknown"

    @classmethod
    def from_css(cls, classes: Iterable[str]) -> CoverageClass:
        """Map the CSS classes of an annotation span to a coverage class."""
        names = set(classes)
        if _CLASS_UNCOVERED in names:
            return cls.UNCOVERED
        if _CLASS_COVERED in names:
            return cls.COVERED
        return cls.UNKNOWN


class ColorBucket(Enum):
    """Color band for a coverage percentage."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"

    @property
    def style(self) -> str:
        """Rich color name used when painting a cell in this bucket."""
        return self.value


@dataclass(frozen=True)
class LineAnnotation:
    """One coverage indicator from a per-file report's annotation column."""

    coverage_class: CoverageClass
    """Whether the line was executed."""

    text: str = ""
    """Indicator text with non-breaking spaces removed (e.g. ``"3x"``)."""


UNKNOWN_ANNOTATION = LineAnnotation(CoverageClass.UNKNOWN, "")


@dataclass(frozen=True)
class UncoveredSpan:
    """Half-open character range ``[start, end)`` within one source line."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            msg = f"Invalid uncovered span [{self.start}, {self.end})"
            raise MalformedReportError(msg)

    @property
    def length(self) -> int:
        """Number of characters in the span."""
        return self.end - self.start


@dataclass(frozen=True)
class FileCoverageLine:
    """A fully reconstructed source line of a per-file report."""

    line_number: int
    """1-based line number."""

    raw_text: str
    """Visible line text with extraction artifacts removed."""

    uncovered_span: UncoveredSpan | None = None
    """Characters of ``raw_text`` to paint as uncovered, if any."""

    def __post_init__(self) -> None:
        span = self.uncovered_span
        if span is not None and span.end > len(self.raw_text):
            msg = (
                f"Line {self.line_number}: span [{span.start}, {span.end}) "
                f"exceeds line length {len(self.raw_text)}"
            )
            raise MalformedReportError(msg)

    @property
    def uncovered_text(self) -> str:
        """Return the painted fragment, or an empty string."""
        if self.uncovered_span is None:
            return ""
        return self.raw_text[self.uncovered_span.start : self.uncovered_span.end]


@dataclass(frozen=True)
class SummaryRow:
    """One file or directory listed in a summary report."""

    identifier: str
    """Report-relative identifier; directories end with ``/``."""

    stats: tuple[str, ...]
    """Cell texts in page column order (percentage, fraction, ...)."""

    @property
    def is_directory(self) -> bool:
        return self.identifier.endswith("/")


@dataclass(frozen=True)
class ReportMeta:
    """Title and aggregate statistics of a report page."""

    title: str
    category_summary: str = ""


@dataclass(frozen=True)
class SummaryReport:
    """Result of parsing a summary-style report page."""

    meta: ReportMeta
    rows: tuple[SummaryRow, ...] = ()


@dataclass(frozen=True)
class FileReport:
    """Result of parsing a per-file report page."""

    filename: str
    lines: tuple[FileCoverageLine, ...] = ()
    annotations: tuple[LineAnnotation, ...] = field(default=())

    @property
    def uncovered_lines(self) -> list[FileCoverageLine]:
        """Return the lines that carry an uncovered span."""
        return [line for line in self.lines if line.uncovered_span is not None]

    def annotation_for(self, line_number: int) -> LineAnnotation:
        """Return the annotation of a 1-based line, padding with UNKNOWN."""
        index = line_number - 1
        if 0 <= index < len(self.annotations):
            return self.annotations[index]
        return UNKNOWN_ANNOTATION
