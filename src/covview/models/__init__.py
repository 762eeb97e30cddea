"""covview data models."""

from covview.models.report import (
    UNKNOWN_ANNOTATION,
    ColorBucket,
    CoverageClass,
    FileCoverageLine,
    FileReport,
    LineAnnotation,
    ReportMeta,
    SummaryReport,
    SummaryRow,
    UncoveredSpan,
)

__all__ = [
    "UNKNOWN_ANNOTATION",
    "ColorBucket",
    "CoverageClass",
    "FileCoverageLine",
    "FileReport",
    "LineAnnotation",
    "ReportMeta",
    "SummaryReport",
    "SummaryRow",
    "UncoveredSpan",
]
