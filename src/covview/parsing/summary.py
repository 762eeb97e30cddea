"""Parser for Istanbul summary pages (``index.html`` of a report directory).

Page layout consumed::

    <h1><a href="../index.html">All files</a> src/util</h1>
    <div class='fl pad1y space-right2'>
        <span class="strong">80% </span>
        <span class="quiet">Statements</span>
        <span class='fraction'>40/50</span>
    </div>
    ...
    <table class="coverage-summary">
      <thead><tr><th>File</th><th></th><th>Statements</th>...</tr></thead>
      <tbody><tr>
        <td class="file high"><a href="math.js.html">math.js</a></td>
        <td class="pic high">...</td>
        <td class="pct high">80%</td>
        <td class="abs high">4/5</td>
        ...
      </tr></tbody>
    </table>
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from covview.errors import MalformedReportError
from covview.models.report import ReportMeta, SummaryReport, SummaryRow
from covview.parsing.dom import (
    all_by_class,
    all_by_tag,
    attr,
    child_elements,
    first_by_tag,
    text,
)

if TYPE_CHECKING:
    from bs4 import Tag

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────────

SUMMARY_MARKER_CLASS = "coverage-summary"
STAT_BLOCK_CLASS = "pad1y"
ALL_FILES = "All files"

_DIRECTORY_SUFFIX = "index.html"
_FILE_SUFFIX = ".html"
_LEADING_CELLS = 2
_STAT_SPANS = 3


# ── Shared helpers ───────────────────────────────────────────────


def has_summary_marker(doc: Tag) -> bool:
    """Return True if *doc* contains the summary results table marker."""
    return bool(all_by_class(doc, SUMMARY_MARKER_CLASS))


def extract_title(doc: Tag, *, directory: bool = False) -> str:
    """Return the page heading with breadcrumb ``/`` separators removed.

    ``"All files"`` is returned verbatim; any other heading gets a trailing
    ``/`` when *directory* is set.

    Raises:
        MalformedReportError: If the page has no ``h1`` heading.
    """
    heading = first_by_tag(doc, "h1")
    if heading is None:
        msg = "Report page has no heading"
        raise MalformedReportError(msg)

    title = " ".join(token for token in text(heading).split() if token != "/")
    if title == ALL_FILES:
        return title
    if directory:
        return f"{title}/"
    return title


def identifier_from_href(href: str) -> str:
    """Turn a row link target into a report identifier.

    ``"src/util/index.html"`` becomes ``"src/util/"`` and ``"math.js.html"``
    becomes ``"math.js"``.
    """
    if href.endswith(_DIRECTORY_SUFFIX):
        return href[: -len(_DIRECTORY_SUFFIX)]
    if href.endswith(_FILE_SUFFIX):
        return href[: -len(_FILE_SUFFIX)]
    return href


# ── Parsing ──────────────────────────────────────────────────────


def parse_category_summary(doc: Tag) -> str:
    """Join every aggregate stat block as ``"80% Statements (40/50)"``.

    Raises:
        MalformedReportError: If a stat block lacks its three label spans.
    """
    categories: list[str] = []
    for block in all_by_class(doc, STAT_BLOCK_CLASS):
        spans = all_by_tag(block, "span")
        if len(spans) < _STAT_SPANS:
            msg = f"Stat block has {len(spans)} label spans, expected {_STAT_SPANS}"
            raise MalformedReportError(msg)
        value, label, fraction = (text(span) for span in spans[:_STAT_SPANS])
        categories.append(f"{value} {label} ({fraction})")
    return ", ".join(categories)


def _header_stat_count(table: Tag) -> int | None:
    head = first_by_tag(table, "thead")
    if head is None:
        return None
    headers = all_by_tag(head, "th")
    return max(len(headers) - _LEADING_CELLS, 0)


def _parse_row(row: Tag) -> SummaryRow:
    cells = child_elements(row, "td")
    if len(cells) < _LEADING_CELLS:
        msg = f"Summary row has {len(cells)} cells, expected at least {_LEADING_CELLS}"
        raise MalformedReportError(msg)

    href = attr(first_by_tag(cells[0], "a"), "href")
    if href:
        identifier = identifier_from_href(href)
    else:
        identifier = attr(cells[0], "data-value") or text(cells[0])

    return SummaryRow(
        identifier=identifier,
        stats=tuple(text(cell) for cell in cells[_LEADING_CELLS:]),
    )


def parse_rows(table: Tag) -> list[SummaryRow]:
    """Extract one :class:`SummaryRow` per body row of the results table.

    Raises:
        MalformedReportError: If rows disagree on their number of stat cells.
    """
    body = first_by_tag(table, "tbody")
    if body is None:
        body = table
    rows = [_parse_row(tr) for tr in all_by_tag(body, "tr") if child_elements(tr, "td")]

    expected = _header_stat_count(table)
    for row in rows:
        if expected is None:
            expected = len(row.stats)
        if len(row.stats) != expected:
            msg = (
                f"Row {row.identifier!r} has {len(row.stats)} stat cells, "
                f"expected {expected}"
            )
            raise MalformedReportError(msg)
    return rows


def parse_summary(doc: Tag) -> SummaryReport:
    """Parse a summary report page.

    Raises:
        MalformedReportError: If the heading or results table is missing.
    """
    tables = all_by_class(doc, SUMMARY_MARKER_CLASS)
    title = extract_title(doc, directory=bool(tables))
    if not tables:
        msg = f"Summary report {title!r} has no results table"
        raise MalformedReportError(msg)

    meta = ReportMeta(title=title, category_summary=parse_category_summary(doc))
    rows = parse_rows(tables[0])
    logger.debug("Parsed summary %r: %d rows", title, len(rows))
    return SummaryReport(meta=meta, rows=tuple(rows))
