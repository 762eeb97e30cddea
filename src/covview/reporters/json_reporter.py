"""JSON reporter — serializes render instructions for downstream tooling.

Editors and other renderers that do not embed covview consume the same
tables and source views the terminal reporter draws, as JSON.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from covview import __version__
from covview.reporters.views import SourceView, TableView, UncoveredListing

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

View = TableView | SourceView | UncoveredListing


def _view_kind(view: View) -> str:
    if isinstance(view, TableView):
        return "summary"
    if isinstance(view, SourceView):
        return "file"
    return "uncovered"


class JSONReporter:
    """Generate JSON documents from table and source views."""

    def generate(self, output_path: Path, view: View) -> Path:
        """Write a JSON report file.

        Args:
            output_path: Path to write the JSON file.
            view: The view to serialize.

        Returns:
            The path to the generated JSON file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.generate_string(view), encoding="utf-8")
        logger.info("JSON report written to %s", output_path)
        return output_path

    def generate_string(self, view: View) -> str:
        """Return the JSON document for *view* as a string."""
        return json.dumps(_build_report(view), indent=2, ensure_ascii=False)


def _build_report(view: View) -> dict[str, Any]:
    """Build the JSON report structure."""
    return {
        "tool": "covview",
        "version": __version__,
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "kind": _view_kind(view),
        "view": asdict(view),
    }
