"""Report page parsing: classification and routing to the two parsers."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from covview.parsing.dom import DEFAULT_SEPARATOR, parse_html
from covview.parsing.file_report import parse_file
from covview.parsing.summary import has_summary_marker, parse_summary

if TYPE_CHECKING:
    from bs4 import Tag

    from covview.models.report import FileReport, SummaryReport


class ReportKind(Enum):
    """Kind of Istanbul report page."""

    SUMMARY = "summary"
    FILE = "file"


def classify_report(doc: Tag) -> ReportKind:
    """Return SUMMARY when *doc* has the summary marker, FILE otherwise."""
    return ReportKind.SUMMARY if has_summary_marker(doc) else ReportKind.FILE


def parse_report(doc: Tag, *, separator: str = DEFAULT_SEPARATOR) -> SummaryReport | FileReport:
    """Classify *doc* and parse it with the matching parser."""
    if classify_report(doc) is ReportKind.SUMMARY:
        return parse_summary(doc)
    return parse_file(doc, separator=separator)


__all__ = [
    "ReportKind",
    "classify_report",
    "parse_file",
    "parse_html",
    "parse_report",
    "parse_summary",
]
