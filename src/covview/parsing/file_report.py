"""Parser for Istanbul per-file pages (``<file>.html``).

The report body is a single table row with three cells: line numbers,
one coverage indicator span per line, and the source inside a ``pre``
block whose uncovered fragments are wrapped in decoration spans::

    <table class="coverage"><tr>
      <td class="line-count quiet">1\\n2</td>
      <td class="line-coverage quiet">
        <span class="cline-any cline-yes">1x</span>
        <span class="cline-any cline-no">&nbsp;</span></td>
      <td class="text"><pre class="prettyprint lang-js">function f() {
    <span class="cstat-no" title="statement not covered" >return 1;</span></pre></td>
    </tr></table>
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from covview.errors import MalformedReportError
from covview.models.report import (
    UNKNOWN_ANNOTATION,
    CoverageClass,
    FileReport,
    LineAnnotation,
)
from covview.parsing.dom import (
    DEFAULT_SEPARATOR,
    attr,
    child_elements,
    display_text,
    first_by_tag,
    full_text,
)
from covview.parsing.highlight import reconstruct_line
from covview.parsing.summary import extract_title

if TYPE_CHECKING:
    from bs4 import Tag

logger = logging.getLogger(__name__)

REPORT_BODY_CLASS = "coverage"
_NBSP = "\xa0"
_BODY_CELLS = 3


def _body_cells(doc: Tag) -> list[Tag]:
    body = doc.find("table", class_=REPORT_BODY_CLASS)
    row = first_by_tag(body, "tr") if body is not None else None
    return child_elements(row, "td")


def parse_annotations(cell: Tag) -> list[LineAnnotation]:
    """Read one :class:`LineAnnotation` per indicator span of *cell*."""
    annotations: list[LineAnnotation] = []
    for span in child_elements(cell, "span"):
        classes = (attr(span, "class") or "").split()
        label = span.get_text().replace(_NBSP, "").strip()
        annotations.append(LineAnnotation(CoverageClass.from_css(classes), label))
    return annotations


def _is_blank(line: str) -> bool:
    return not line.strip()


def split_code_lines(code: Tag, separator: str = DEFAULT_SEPARATOR) -> list[tuple[str, str]]:
    """Split both text extractions of *code* into ``(full, display)`` pairs.

    Raises:
        MalformedReportError: If the two extractions disagree on line count by
            more than one trailing blank line.
    """
    full_lines = full_text(code, separator).split("\n")
    display_lines = display_text(code).split("\n")

    difference = len(full_lines) - len(display_lines)
    if abs(difference) > 1:
        msg = (
            f"Full and display text disagree on line count "
            f"({len(full_lines)} vs {len(display_lines)})"
        )
        raise MalformedReportError(msg)
    if difference:
        longer = full_lines if difference > 0 else display_lines
        if not _is_blank(longer[-1]):
            msg = "Extra line in one text extraction is not blank"
            raise MalformedReportError(msg)
        longer.pop()

    return list(zip(full_lines, display_lines, strict=True))


def parse_file(doc: Tag, *, separator: str = DEFAULT_SEPARATOR) -> FileReport:
    """Parse a per-file report page into reconstructed source lines.

    Raises:
        MalformedReportError: If the heading is missing, the body has fewer
            than three cells, line counts are inconsistent, or there are more
            annotations than source lines.
    """
    filename = extract_title(doc)
    cells = _body_cells(doc)
    if len(cells) < _BODY_CELLS:
        msg = f"Report for {filename!r} has {len(cells)} body cells, expected {_BODY_CELLS}"
        raise MalformedReportError(msg)

    annotations = parse_annotations(cells[1])
    code = first_by_tag(cells[2], "pre")
    if code is None:
        code = cells[2]
    pairs = split_code_lines(code, separator)

    # The layout ends the code block with a newline that is not a source line.
    if len(pairs) > len(annotations) and all(_is_blank(part) for part in pairs[-1]):
        pairs.pop()

    if len(annotations) > len(pairs):
        msg = (
            f"Report for {filename!r} has {len(annotations)} line annotations "
            f"but only {len(pairs)} source lines"
        )
        raise MalformedReportError(msg)

    padded = annotations + [UNKNOWN_ANNOTATION] * (len(pairs) - len(annotations))
    lines = [
        reconstruct_line(
            number,
            full,
            display,
            annotation.coverage_class,
            separator=separator,
        )
        for number, ((full, display), annotation) in enumerate(
            zip(pairs, padded, strict=True), start=1
        )
    ]
    logger.debug(
        "Parsed %r: %d lines, %d uncovered spans",
        filename,
        len(lines),
        sum(1 for line in lines if line.uncovered_span is not None),
    )
    return FileReport(filename=filename, lines=tuple(lines), annotations=tuple(padded))
