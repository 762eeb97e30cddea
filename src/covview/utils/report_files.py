"""Locate and load report pages for report identifiers.

An identifier names a page relative to the report root: ``""`` is the
root summary, ``"src/util/"`` a directory summary and ``"src/util/math.js"``
a per-file page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from covview.errors import ConfigError, MalformedReportError
from covview.parsing.dom import parse_html

if TYPE_CHECKING:
    from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Istanbul's default output directories (lcov reporter first, then html).
DEFAULT_REPORT_DIRS = ("coverage/lcov-report", "coverage")

_INDEX_PAGE = "index.html"
_PAGE_SUFFIX = ".html"


def is_directory_identifier(identifier: str) -> bool:
    return not identifier or identifier.endswith("/")


def resolve_report_path(report_root: Path, identifier: str) -> Path:
    """Return the page for *identifier* under *report_root*.

    Raises:
        ConfigError: If the identifier points outside the report root.
    """
    ident = identifier.strip()
    relative = ident.lstrip("/")
    if is_directory_identifier(ident):
        path = report_root / relative / _INDEX_PAGE
    else:
        path = report_root / f"{relative}{_PAGE_SUFFIX}"

    root = report_root.resolve()
    if not path.resolve().is_relative_to(root):
        msg = f"Identifier {identifier!r} points outside the report root {report_root}"
        raise ConfigError(msg)
    return path


def find_report_root(project_root: Path, configured: str = "") -> Path:
    """Return the first report directory under *project_root* with an index page.

    The configured directory is tried before Istanbul's defaults. When none
    has an index page the configured (or first default) directory is
    returned, so the caller reports the missing page.
    """
    candidates = [c for c in (configured, *DEFAULT_REPORT_DIRS) if c]
    for candidate in candidates:
        root = project_root / candidate
        if (root / _INDEX_PAGE).is_file():
            logger.debug("Using report root %s", root)
            return root

    logger.warning("No coverage report index found under %s", project_root)
    return project_root / candidates[0]


def load_report(path: Path) -> BeautifulSoup:
    """Read and parse one report page.

    Raises:
        MalformedReportError: If the page does not exist or cannot be read.
    """
    if not path.is_file():
        msg = f"Report page not found: {path}"
        raise MalformedReportError(msg)
    try:
        markup = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read report page {path}: {e}"
        raise MalformedReportError(msg) from e
    logger.debug("Loaded report page %s (%d bytes)", path, len(markup))
    return parse_html(markup)


@dataclass(frozen=True)
class ViewContext:
    """The report page currently being viewed.

    Summary rows name pages relative to the summary's own directory;
    :meth:`child` turns such a row identifier into a new context.
    """

    report_root: Path
    identifier: str = ""

    @property
    def path(self) -> Path:
        return resolve_report_path(self.report_root, self.identifier)

    @property
    def is_directory(self) -> bool:
        return is_directory_identifier(self.identifier)

    @property
    def directory(self) -> str:
        """Identifier of the directory holding the current page."""
        if self.is_directory:
            return self.identifier
        head, sep, _ = self.identifier.rpartition("/")
        return f"{head}{sep}"

    @property
    def page_name(self) -> str:
        """Human-readable name of the current page, used in error messages."""
        return self.identifier or "/"

    def child(self, row_identifier: str) -> ViewContext:
        """Return the context for a summary row listed on this page."""
        return ViewContext(self.report_root, f"{self.directory}{row_identifier}")

    def parent(self) -> ViewContext:
        """Return the enclosing directory summary (the root is its own parent)."""
        if not self.is_directory:
            return ViewContext(self.report_root, self.directory)
        head, sep, _ = self.identifier.rstrip("/").rpartition("/")
        return ViewContext(self.report_root, f"{head}{sep}")

    def load(self) -> BeautifulSoup:
        return load_report(self.path)
