"""Percentage formatting, parsing and color thresholds."""

from __future__ import annotations

import math

from covview.errors import FormatError
from covview.models.report import ColorBucket

HIGH_THRESHOLD = 80.0
MEDIUM_THRESHOLD = 60.0

_MAX_PERCENTAGE = 100.0
_PERCENT_SIGN = "%"


def format_percentage(value: float) -> str:
    """Render *value* with up to four significant digits and a ``%`` suffix."""
    if value == 0:
        return "0%"
    return f"{value:.4g}{_PERCENT_SIGN}"


def percentage_of(covered: float, total: float) -> str:
    """Return ``covered / total`` as a formatted percentage.

    Either operand being zero yields ``"0%"``; equal operands yield
    ``"100%"`` without going through float division.
    """
    if covered == 0 or total == 0:
        return format_percentage(0)
    if covered == total:
        return format_percentage(100)
    return format_percentage(100 * covered / total)


def is_percentage_string(value: str) -> bool:
    """Return True if *value* ends with a percent sign."""
    return value.endswith(_PERCENT_SIGN)


def parse_percentage(value: str) -> float:
    """Parse ``"80%"`` (or ``"80"``) into ``80.0``.

    Raises:
        FormatError: If the remainder is not a number in ``[0, 100]``.
    """
    stripped = value.strip()
    number = stripped.removesuffix(_PERCENT_SIGN).strip()
    try:
        parsed = float(number)
    except ValueError as e:
        msg = f"Not a percentage: {value!r}"
        raise FormatError(msg) from e
    if not math.isfinite(parsed) or not 0.0 <= parsed <= _MAX_PERCENTAGE:
        msg = f"Percentage out of range: {value!r}"
        raise FormatError(msg)
    return parsed


def parse_fraction(value: str) -> tuple[int, int]:
    """Parse a ``"covered/total"`` cell such as ``"4/5"``.

    Raises:
        FormatError: If *value* is not two integers separated by ``/``.
    """
    covered, sep, total = value.strip().partition("/")
    if not sep:
        msg = f"Not a fraction: {value!r}"
        raise FormatError(msg)
    try:
        return int(covered), int(total)
    except ValueError as e:
        msg = f"Not a fraction: {value!r}"
        raise FormatError(msg) from e


def center(value: str, width: int) -> str:
    """Pad *value* with spaces to *width*, extra space going to the right."""
    deficit = width - len(value)
    if deficit <= 0:
        return value
    left = deficit // 2
    return " " * left + value + " " * (deficit - left)


def color_bucket(
    pct: float,
    *,
    high: float = HIGH_THRESHOLD,
    medium: float = MEDIUM_THRESHOLD,
) -> ColorBucket:
    """Return the color band for a percentage (lower bounds inclusive)."""
    if pct >= high:
        return ColorBucket.GREEN
    if pct >= medium:
        return ColorBucket.YELLOW
    return ColorBucket.RED
