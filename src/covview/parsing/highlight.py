"""Recover the uncovered fragment of a source line from two text extractions.

Istanbul wraps every uncovered fragment of a line in an inline decoration
element. :func:`covview.parsing.dom.full_text` keeps the decoration text,
:func:`covview.parsing.dom.display_text` drops it, so the difference
between the two renderings of the same line delimits the fragment without
parsing the decoration markup itself.

Four shapes are distinguished:

- ``NONE``: both renderings are equal.
- ``WHOLE_LINE``: nothing but whitespace survives in the display text.
- ``TRAILING``: the display text is a prefix of the full text.
- ``INTERIOR``: the fragment sits at the start or in the middle of the line.

At most one contiguous fragment per line is recovered. Several disjoint
fragments on one line are reported as a single outer span.
"""

from __future__ import annotations

import logging
from enum import Enum

from covview.errors import MalformedReportError
from covview.models.report import CoverageClass, FileCoverageLine, UncoveredSpan
from covview.parsing.dom import DEFAULT_SEPARATOR

logger = logging.getLogger(__name__)


class SpanShape(Enum):
    """Shape of the divergence between full and display text."""

    NONE = "none"
    WHOLE_LINE = "whole_line"
    TRAILING = "trailing"
    INTERIOR = "interior"


def classify_deviation(full: str, display: str) -> SpanShape:
    """Classify how *display* diverges from *full*.

    Raises:
        MalformedReportError: If *full* is shorter than *display*.
    """
    if len(full) < len(display):
        msg = (
            f"Full text is shorter than display text ({len(full)} < {len(display)}): "
            f"{full!r} vs {display!r}"
        )
        raise MalformedReportError(msg)
    if full == display:
        return SpanShape.NONE
    if not display.strip():
        return SpanShape.WHOLE_LINE
    if full.startswith(display):
        return SpanShape.TRAILING
    return SpanShape.INTERIOR


def _common_prefix_length(a: str, b: str) -> int:
    limit = min(len(a), len(b))
    index = 0
    while index < limit and a[index] == b[index]:
        index += 1
    return index


def _common_suffix_length(a: str, b: str) -> int:
    return _common_prefix_length(a[::-1], b[::-1])


def locate_deviation(full: str, display: str) -> tuple[int, int] | None:
    """Return the raw ``(start, end)`` of the divergent region of *full*.

    Offsets index into *full* before the separator correction applied by
    :func:`reconstruct_line`. Returns ``None`` when there is no divergence.
    """
    shape = classify_deviation(full, display)
    trimmed_end = len(full.rstrip())
    if shape is SpanShape.NONE:
        return None
    if shape is SpanShape.WHOLE_LINE:
        return 0, trimmed_end
    if shape is SpanShape.TRAILING:
        start, end = len(display), trimmed_end
    else:
        start = _common_prefix_length(full, display)
        end = trimmed_end - _common_suffix_length(full, display)
    return start, max(start, end)


def _separator_at(full: str, candidates: tuple[int, ...], separator: str) -> int | None:
    """Return the first candidate index holding *separator*."""
    for index in candidates:
        if 0 <= index < len(full) and full[index] == separator:
            return index
    return None


def _drop(full: str, drops: set[int]) -> str:
    return "".join(ch for index, ch in enumerate(full) if index not in drops)


def _shift(position: int, drops: set[int]) -> int:
    return position - sum(1 for index in drops if index < position)


def _correct_boundaries(
    full: str,
    start: int,
    end: int,
    shape: SpanShape,
    separator: str,
) -> tuple[str, int, int]:
    """Remove the incidental separator on each side of ``[start, end)``."""
    drops: set[int] = set()

    if start > 0:
        inside = (start,) if start < end else ()
        left = _separator_at(full, (*inside, start - 1), separator)
        if left is not None:
            drops.add(left)

    # A trailing fragment closes the line, so only interior ones have a right edge.
    if shape is SpanShape.INTERIOR:
        inside = (end - 1,) if end - 1 >= start and end - 1 not in drops else ()
        right = _separator_at(full, (*inside, end), separator)
        if right is not None and right not in drops:
            drops.add(right)

    return _drop(full, drops), _shift(start, drops), _shift(end, drops)


def _correct_indentation(full: str, display: str, separator: str) -> str:
    """Drop the separator between a line's indentation and its decoration."""
    cut = len(display)
    if display and full.startswith(display) and full[cut : cut + 1] == separator:
        return full[:cut] + full[cut + 1 :]
    return full


def reconstruct_line(
    line_number: int,
    full: str,
    display: str,
    coverage_class: CoverageClass = CoverageClass.UNKNOWN,
    *,
    separator: str = DEFAULT_SEPARATOR,
) -> FileCoverageLine:
    """Rebuild one source line and its uncovered span.

    The returned ``raw_text`` has the extraction separators removed, and the
    span indexes into it. Only lines annotated ``UNCOVERED`` carry a span:
    the annotation decides whether a line participates, the text diff only
    decides where.

    Raises:
        MalformedReportError: If *full* is shorter than *display*.
    """
    shape = classify_deviation(full, display)

    if shape is SpanShape.NONE:
        return FileCoverageLine(line_number=line_number, raw_text=full)

    if shape is SpanShape.WHOLE_LINE:
        raw_text = _correct_indentation(full, display, separator)
        start, end = 0, len(raw_text.rstrip())
    else:
        located = locate_deviation(full, display)
        if located is None:
            return FileCoverageLine(line_number=line_number, raw_text=full)
        raw_text, start, end = _correct_boundaries(full, *located, shape, separator)

    logger.debug(
        "Line %d: %s deviation [%d, %d) class=%s",
        line_number,
        shape.value,
        start,
        end,
        coverage_class.value,
    )

    span = None
    if coverage_class is CoverageClass.UNCOVERED and end > start:
        span = UncoveredSpan(start, end)
    return FileCoverageLine(line_number=line_number, raw_text=raw_text, uncovered_span=span)
