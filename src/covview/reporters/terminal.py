"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from covview.errors import ConfigError, FormatError
from covview.reporters.views import color_annotate_cell
from covview.utils.percent import is_percentage_string, parse_fraction, parse_percentage

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from covview.models.report import ColorBucket
    from covview.reporters.views import (
        SourceView,
        TableView,
        Thresholds,
        UncoveredListing,
    )

    CellColorer = Callable[[str], ColorBucket | None]

console = Console()

_NUMERIC = 0
_TEXT = 1


def _sort_key(value: str) -> tuple[int, float | str]:
    """Order percentages and fractions numerically, everything else as text."""
    cell = value.strip()
    if is_percentage_string(cell):
        try:
            return _NUMERIC, parse_percentage(cell)
        except FormatError:
            return _TEXT, cell.lower()
    try:
        covered, total = parse_fraction(cell)
    except FormatError:
        return _TEXT, cell.lower()
    return _NUMERIC, covered / total if total else 1.0


def resolve_column(columns: Sequence[str], name: str) -> int:
    """Return the index of column *name* (case-insensitive) or a 1-based number.

    Raises:
        ConfigError: If no column matches.
    """
    wanted = name.strip().lower()
    for index, column in enumerate(columns):
        if column.lower() == wanted:
            return index
    if wanted.isdigit() and 1 <= int(wanted) <= len(columns):
        return int(wanted) - 1
    msg = f"Unknown column {name!r}; expected one of: {', '.join(columns)}"
    raise ConfigError(msg)


def sort_rows(
    rows: Sequence[Sequence[str]],
    column_index: int,
    *,
    descending: bool = False,
) -> list[tuple[str, ...]]:
    """Return *rows* ordered by one column, stable for equal keys."""
    return sorted(
        (tuple(row) for row in rows),
        key=lambda row: _sort_key(row[column_index]),
        reverse=descending,
    )


class CoverageReporter:
    """Rich terminal output for coverage summary tables and source views."""

    def __init__(self) -> None:
        """Initialize the coverage reporter."""
        self.console = console

    def print_header(self, title: str) -> None:
        """Print a bold header."""
        self.console.print(f"\n[bold cyan]{escape(title)}[/bold cyan]\n")

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(f"[dim]{message}[/dim]")

    # ── Summary tables ─────────────────────────────────────────────

    def build_summary_table(
        self,
        view: TableView,
        *,
        sort_by: str | None = None,
        descending: bool = False,
        thresholds: Thresholds | None = None,
        color_cell: CellColorer | None = None,
    ) -> Table:
        """Materialize *view* as a rich Table.

        Rows are re-sorted first when *sort_by* names a column, then every
        cell is passed through the color callback, so colors always follow
        the cells they belong to.
        """

        def _default_colorer(value: str) -> ColorBucket | None:
            return color_annotate_cell(value, thresholds=thresholds)

        colorer = color_cell or _default_colorer
        rows: Sequence[Sequence[str]] = view.rows
        if sort_by:
            rows = sort_rows(rows, resolve_column(view.columns, sort_by), descending=descending)

        table = Table(
            title=escape(view.title) or None,
            title_style="bold cyan",
            caption=view.caption or None,
        )
        for index, column in enumerate(view.columns):
            if index == 0:
                table.add_column(column, style="bold")
            else:
                table.add_column(column, justify="right")

        for row in rows:
            cells: list[Text] = []
            for value in row:
                bucket = colorer(value)
                cells.append(Text(value, style=bucket.style if bucket else ""))
            table.add_row(*cells)
        return table

    def print_summary(
        self,
        view: TableView,
        *,
        sort_by: str | None = None,
        descending: bool = False,
        thresholds: Thresholds | None = None,
        color_cell: CellColorer | None = None,
    ) -> None:
        """Print a coverage summary table."""
        self.console.print(
            self.build_summary_table(
                view,
                sort_by=sort_by,
                descending=descending,
                thresholds=thresholds,
                color_cell=color_cell,
            )
        )

    # ── Source views ───────────────────────────────────────────────

    def build_source_lines(self, view: SourceView, *, line_numbers: bool = True) -> list[Text]:
        """Return one styled Text per source line: margin, then code."""
        number_width = len(str(len(view.lines)))
        rendered: list[Text] = []
        for line in view.lines:
            margin = Text(line.margin)
            code = Text(line.text)
            for paint in line.paint_ranges:
                target = margin if paint.target == "margin" else code
                target.stylize(paint.style, paint.start, paint.end)

            parts: list[Text | str | tuple[str, str]] = []
            if line_numbers:
                parts.append((f"{line.number:>{number_width}} ", "dim"))
            parts.extend([margin, " ", code])
            rendered.append(Text.assemble(*parts))
        return rendered

    def print_source(self, view: SourceView, *, line_numbers: bool = True) -> None:
        """Print an annotated source view with its margin gutter."""
        self.print_header(view.filename)
        for text in self.build_source_lines(view, line_numbers=line_numbers):
            self.console.print(text, soft_wrap=True)

    def print_uncovered(self, listing: UncoveredListing) -> None:
        """Print a table of uncovered fragments for one file."""
        if not listing.fragments:
            self.print_success(f"{listing.filename}: no uncovered fragments")
            return

        caption = None
        if listing.total_lines:
            caption = (
                f"{len(listing.fragments)} of {listing.total_lines} lines uncovered "
                f"({listing.uncovered_share})"
            )
        table = Table(title=escape(listing.filename), title_style="bold cyan", caption=caption)
        table.add_column("Line", justify="right", style="bold")
        table.add_column("Uncovered", style="red")
        for number, fragment in listing.fragments:
            table.add_row(str(number), Text(fragment))
        self.console.print(table)


reporter = CoverageReporter()
