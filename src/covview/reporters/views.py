"""Render instructions for summary tables and annotated source views.

Nothing here draws anything: the functions turn parsed reports into
plain records that a renderer (terminal, JSON, an editor) materializes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from covview.errors import ConfigError, FormatError, MalformedReportError
from covview.models.report import UNKNOWN_ANNOTATION, CoverageClass
from covview.utils.percent import (
    HIGH_THRESHOLD,
    MEDIUM_THRESHOLD,
    center,
    color_bucket,
    is_percentage_string,
    parse_percentage,
    percentage_of,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from covview.models.report import (
        ColorBucket,
        FileCoverageLine,
        FileReport,
        LineAnnotation,
        ReportMeta,
        SummaryReport,
        SummaryRow,
    )

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS: tuple[str, ...] = (
    "File",
    "Statements Covered",
    "Statements",
    "Branches Covered",
    "Branches",
    "Functions Covered",
    "Functions",
    "Lines Covered",
    "Lines",
)

PaintTarget = Literal["margin", "code"]


# ── Records ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class TableView:
    """Abstract table: a header plus rows of cell text."""

    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()
    title: str = ""
    caption: str = ""


@dataclass(frozen=True)
class PaintRange:
    """Style to apply over ``[start, end)`` of a line's margin or code."""

    start: int
    end: int
    style: str
    target: PaintTarget = "code"


@dataclass(frozen=True)
class SourceLine:
    """One line of an annotated source view."""

    number: int
    text: str
    margin: str
    paint_ranges: tuple[PaintRange, ...] = ()


@dataclass(frozen=True)
class SourceView:
    """Abstract annotated source listing for one file."""

    filename: str
    lines: tuple[SourceLine, ...] = ()
    margin_width: int = 1


@dataclass(frozen=True)
class ViewStyles:
    """Rich style strings used when emitting paint ranges."""

    uncovered_style: str = "white on red"
    uncovered_margin_style: str = "red"
    covered_margin_style: str = "green on black"

    def margin_style(self, coverage_class: CoverageClass) -> str | None:
        """Return the margin style for a line's coverage class."""
        if coverage_class is CoverageClass.UNCOVERED:
            return self.uncovered_margin_style
        if coverage_class is CoverageClass.COVERED:
            return self.covered_margin_style
        return None


@dataclass(frozen=True)
class Thresholds:
    """Lower bounds of the green and yellow color buckets."""

    high: float = HIGH_THRESHOLD
    medium: float = MEDIUM_THRESHOLD


# ── Tables ───────────────────────────────────────────────────────


def build_table(
    columns: Sequence[str],
    rows: Sequence[Sequence[str]],
    *,
    title: str = "",
    caption: str = "",
) -> TableView:
    """Build a generic :class:`TableView`.

    Raises:
        ConfigError: If *columns* is empty.
        MalformedReportError: If a row's width differs from the header.
    """
    if not columns:
        msg = "A table needs at least one column"
        raise ConfigError(msg)

    width = len(columns)
    for index, row in enumerate(rows):
        if len(row) != width:
            msg = f"Row {index} has {len(row)} cells, expected {width}"
            raise MalformedReportError(msg)

    return TableView(
        columns=tuple(columns),
        rows=tuple(tuple(row) for row in rows),
        title=title,
        caption=caption,
    )


def build_summary_table(meta: ReportMeta, rows: Sequence[SummaryRow]) -> TableView:
    """Build the fixed nine-column summary table."""
    return build_table(
        SUMMARY_COLUMNS,
        [(row.identifier, *row.stats) for row in rows],
        title=meta.title,
        caption=meta.category_summary,
    )


def build_summary_view(report: SummaryReport) -> TableView:
    return build_summary_table(report.meta, report.rows)


def color_annotate_cell(
    value: str,
    *,
    thresholds: Thresholds | None = None,
) -> ColorBucket | None:
    """Return the color bucket of a percentage cell, or None for other cells.

    Istanbul writes ``Unknown%`` for 0/0 totals; such cells stay uncolored.
    """
    cell = value.strip()
    if not is_percentage_string(cell):
        return None
    try:
        pct = parse_percentage(cell)
    except FormatError:
        logger.debug("Leaving non-numeric percentage cell uncolored: %r", cell)
        return None
    limits = thresholds or Thresholds()
    return color_bucket(pct, high=limits.high, medium=limits.medium)


# ── Source views ─────────────────────────────────────────────────


def build_source_view(
    filename: str,
    lines: Sequence[FileCoverageLine],
    annotations: Sequence[LineAnnotation],
    styles: ViewStyles | None = None,
) -> SourceView:
    """Build the annotated source view of one file.

    Each line gets a margin holding its annotation text, centered in a
    column one wider than the longest annotation, plus a paint range for
    its uncovered span when it has one.
    """
    styles = styles or ViewStyles()
    margin_width = max((len(a.text) for a in annotations), default=0) + 1

    source_lines: list[SourceLine] = []
    for index, line in enumerate(lines):
        annotation = annotations[index] if index < len(annotations) else UNKNOWN_ANNOTATION
        ranges: list[PaintRange] = []

        margin_style = styles.margin_style(annotation.coverage_class)
        if margin_style:
            ranges.append(PaintRange(0, margin_width, margin_style, "margin"))

        span = line.uncovered_span
        if span is not None:
            ranges.append(PaintRange(span.start, span.end, styles.uncovered_style, "code"))

        source_lines.append(
            SourceLine(
                number=line.line_number,
                text=line.raw_text,
                margin=center(annotation.text, margin_width),
                paint_ranges=tuple(ranges),
            )
        )

    return SourceView(filename=filename, lines=tuple(source_lines), margin_width=margin_width)


def build_file_view(report: FileReport, styles: ViewStyles | None = None) -> SourceView:
    return build_source_view(report.filename, report.lines, report.annotations, styles)


@dataclass(frozen=True)
class UncoveredListing:
    """Uncovered fragments of one file, for compact listings."""

    filename: str
    fragments: tuple[tuple[int, str], ...] = field(default=())
    total_lines: int = 0
    uncovered_share: str = "0%"
    """Share of the file's lines holding an uncovered fragment."""


def build_uncovered_listing(report: FileReport) -> UncoveredListing:
    """List ``(line_number, fragment)`` for every line with an uncovered span."""
    return UncoveredListing(
        filename=report.filename,
        fragments=tuple(
            (line.line_number, line.uncovered_text) for line in report.uncovered_lines
        ),
        total_lines=len(report.lines),
        uncovered_share=percentage_of(len(report.uncovered_lines), len(report.lines)),
    )
