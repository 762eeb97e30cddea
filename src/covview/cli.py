"""covview CLI — top-level command group."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn

import click
import yaml
from rich.console import Console
from rich.markup import escape

from covview import __version__
from covview.config import load_config, validate_config
from covview.errors import ConfigError, CovviewError, MalformedReportError
from covview.parsing import ReportKind, classify_report, parse_file, parse_summary
from covview.reporters.json_reporter import JSONReporter
from covview.reporters.terminal import reporter
from covview.reporters.views import (
    build_file_view,
    build_summary_view,
    build_uncovered_listing,
)
from covview.utils.report_files import ViewContext, find_report_root

if TYPE_CHECKING:
    from collections.abc import Callable

    from bs4 import BeautifulSoup

    from covview.config import CovviewConfig
    from covview.reporters.json_reporter import View

logger = logging.getLogger(__name__)
console = Console()

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@dataclass
class _RenderOptions:
    sort_by: str | None = None
    descending: bool = False
    as_json: bool = False
    output: str | None = None


def _fail(page: str, error: CovviewError) -> NoReturn:
    """Report *error* as one message naming the offending page, then abort."""
    logger.debug("Rendering %s failed", page, exc_info=True)
    reporter.print_error(escape(f"{page}: {error}"))
    raise click.Abort from error


def _open_context(path: str, identifier: str) -> tuple[CovviewConfig, ViewContext]:
    config = load_config(path)
    errors = validate_config(config)
    if errors:
        raise ConfigError("; ".join(errors))
    report_root = find_report_root(Path(path), config.report.directory)
    return config, ViewContext(report_root, identifier)


def _load_page(context: ViewContext, expected: ReportKind | None) -> BeautifulSoup:
    doc = context.load()
    kind = classify_report(doc)
    if expected is not None and kind is not expected:
        msg = f"Expected a {expected.value} report page, found a {kind.value} report page"
        raise MalformedReportError(msg)
    return doc


def _navigate(context: ViewContext, *, row: int | None, up: bool) -> ViewContext:
    """Move to the enclosing summary and/or one of the rows a summary lists."""
    if up:
        context = context.parent()
    if row is None:
        return context

    rows = parse_summary(_load_page(context, ReportKind.SUMMARY)).rows
    if not 1 <= row <= len(rows):
        msg = f"Row {row} is out of range; the page lists {len(rows)} row(s)"
        raise ConfigError(msg)
    target = context.child(rows[row - 1].identifier)
    logger.debug("Row %d of %s is %s", row, context.page_name, target.page_name)
    return target


def _emit(view: View, options: _RenderOptions, draw: Callable[[], None]) -> None:
    if options.output:
        written = JSONReporter().generate(Path(options.output), view)
        reporter.print_success(f"Wrote {written}")
    elif options.as_json:
        click.echo(JSONReporter().generate_string(view))
    else:
        draw()


def _render(
    path: str,
    identifier: str,
    expected: ReportKind | None,
    options: _RenderOptions,
    *,
    row: int | None = None,
    up: bool = False,
) -> None:
    context: ViewContext | None = None
    try:
        config, context = _open_context(path, identifier)
        context = _navigate(context, row=row, up=up)
        doc = _load_page(context, expected)

        if classify_report(doc) is ReportKind.SUMMARY:
            table_view = build_summary_view(parse_summary(doc))
            _emit(
                table_view,
                options,
                lambda: reporter.print_summary(
                    table_view,
                    sort_by=options.sort_by,
                    descending=options.descending,
                    thresholds=config.thresholds.to_thresholds(),
                ),
            )
        else:
            report = parse_file(doc, separator=config.view.separator)
            source_view = build_file_view(report, config.view.to_styles())
            _emit(source_view, options, lambda: reporter.print_source(source_view))
    except CovviewError as e:
        _fail(context.page_name if context else identifier or "/", e)


def _path_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--path",
        default=".",
        type=click.Path(exists=True, file_okay=False, resolve_path=True),
        help="Project root directory.",
    )(func)


def _render_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.option(
        "--output",
        "-o",
        type=click.Path(dir_okay=False),
        default=None,
        help="Write the view as JSON to this file instead of printing it.",
    )(func)
    func = click.option(
        "--json-output",
        "as_json",
        is_flag=True,
        help="Print the view as JSON instead of a rendered table or listing.",
    )(func)
    func = click.option("--desc", "descending", is_flag=True, help="Sort in descending order.")(
        func
    )
    return click.option(
        "--sort",
        "sort_by",
        default=None,
        help="Summary column to sort by (name or 1-based number).",
    )(func)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="covview")
@click.pass_context
def cli(ctx: click.Context, *, verbose: bool) -> None:
    """covview — browse Istanbul HTML coverage reports in the terminal."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=_LOG_FORMAT)


@cli.command()
@click.argument("identifier", default="")
@_path_option
@_render_options
@click.option(
    "--row",
    type=click.IntRange(min=1),
    default=None,
    help="Open the page of this summary row (1-based, in page order).",
)
@click.option("--up", is_flag=True, help="Open the enclosing directory summary first.")
def show(
    identifier: str,
    path: str,
    sort_by: str | None,
    row: int | None,
    *,
    up: bool,
    descending: bool,
    as_json: bool,
    output: str | None,
) -> None:
    """Render any report page: a summary table or an annotated source file.

    IDENTIFIER is relative to the report root; leave it empty for the root
    summary, end it with '/' for a directory.

    Example:
      covview show
      covview show src/util/ --sort Lines
      covview show src/util/math.js
      covview show src/util/ --row 1
      covview show src/util/math.js --up
    """
    options = _RenderOptions(sort_by, descending, as_json, output)
    _render(path, identifier, None, options, row=row, up=up)


@cli.command()
@click.argument("identifier", default="")
@_path_option
@_render_options
def summary(
    identifier: str,
    path: str,
    sort_by: str | None,
    *,
    descending: bool,
    as_json: bool,
    output: str | None,
) -> None:
    """Render a directory summary table."""
    options = _RenderOptions(sort_by, descending, as_json, output)
    _render(path, identifier, ReportKind.SUMMARY, options)


@cli.command("file")
@click.argument("identifier")
@_path_option
@_render_options
def file_command(
    identifier: str,
    path: str,
    sort_by: str | None,
    *,
    descending: bool,
    as_json: bool,
    output: str | None,
) -> None:
    """Render one file's source with uncovered fragments highlighted."""
    options = _RenderOptions(sort_by, descending, as_json, output)
    _render(path, identifier, ReportKind.FILE, options)


@cli.command()
@click.argument("identifier")
@_path_option
@click.option("--json-output", "as_json", is_flag=True, help="Output as JSON.")
def uncovered(identifier: str, path: str, *, as_json: bool) -> None:
    """List only the uncovered fragments of one file, line by line."""
    context: ViewContext | None = None
    try:
        config, context = _open_context(path, identifier)
        doc = _load_page(context, ReportKind.FILE)
        listing = build_uncovered_listing(parse_file(doc, separator=config.view.separator))
    except CovviewError as e:
        _fail(context.page_name if context else identifier, e)

    if as_json:
        click.echo(JSONReporter().generate_string(listing))
    else:
        reporter.print_uncovered(listing)


@cli.group("config")
def config_group() -> None:
    """Inspect `.covview.yml` configuration."""


@config_group.command("show")
@_path_option
@click.option("--json-output", "as_json", is_flag=True, help="Output as JSON instead of YAML.")
def config_show(path: str, *, as_json: bool) -> None:
    """Display the resolved configuration."""
    config_dict = asdict(load_config(path))
    config_dict.pop("raw", None)

    if as_json:
        click.echo(json.dumps(config_dict, indent=2))
    else:
        console.print()
        console.print("[bold cyan]Configuration:[/bold cyan]")
        console.print()
        click.echo(yaml.safe_dump(config_dict, sort_keys=False, default_flow_style=False))


@config_group.command("validate")
@_path_option
def config_validate(path: str) -> None:
    """Validate `.covview.yml` and list every problem found."""
    errors = validate_config(load_config(path))

    if not errors:
        reporter.print_success("Configuration is valid!")
        return

    reporter.print_error(f"Found {len(errors)} configuration error(s):")
    console.print()
    for idx, error in enumerate(errors, start=1):
        console.print(f"  {idx}. [red]{escape(error)}[/red]")
    console.print()
    raise click.Abort
