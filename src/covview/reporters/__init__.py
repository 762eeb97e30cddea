"""Render-instruction builders and the renderers that consume them."""

from covview.reporters.json_reporter import JSONReporter
from covview.reporters.terminal import CoverageReporter, reporter
from covview.reporters.views import (
    SUMMARY_COLUMNS,
    PaintRange,
    SourceLine,
    SourceView,
    TableView,
    Thresholds,
    UncoveredListing,
    ViewStyles,
    build_file_view,
    build_source_view,
    build_summary_table,
    build_summary_view,
    build_table,
    build_uncovered_listing,
    color_annotate_cell,
)

__all__ = [
    "SUMMARY_COLUMNS",
    "CoverageReporter",
    "JSONReporter",
    "PaintRange",
    "SourceLine",
    "SourceView",
    "TableView",
    "Thresholds",
    "UncoveredListing",
    "ViewStyles",
    "build_file_view",
    "build_source_view",
    "build_summary_table",
    "build_summary_view",
    "build_table",
    "build_uncovered_listing",
    "color_annotate_cell",
    "reporter",
]
