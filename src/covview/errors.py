"""Error taxonomy shared by the report parsers, formatters and renderers."""

from __future__ import annotations


class CovviewError(Exception):
    """Base class for every error raised by covview."""


class MalformedReportError(CovviewError):
    """Raised when a report page violates a structural expectation.

    Examples: a missing heading or results table, too few body cells,
    inconsistent line counts, or a full-text extraction that is shorter
    than its display-text counterpart.
    """


class FormatError(CovviewError, ValueError):
    """Raised when a value expected to be a percentage string is not one."""


class ConfigError(CovviewError):
    """Raised when caller-supplied rendering configuration is invalid."""
