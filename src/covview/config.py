"""Configuration parsing from ``.covview.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from rich.errors import StyleSyntaxError
from rich.style import Style

from covview.parsing.dom import DEFAULT_SEPARATOR
from covview.reporters.views import Thresholds, ViewStyles
from covview.utils.percent import HIGH_THRESHOLD, MEDIUM_THRESHOLD

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".covview.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")
_MAX_PERCENTAGE = 100.0


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    return section if isinstance(section, dict) else {}


@dataclass
class ReportConfig:
    """Where the Istanbul HTML report lives."""

    directory: str = "coverage/lcov-report"
    """Report directory relative to the project root."""


@dataclass
class ThresholdConfig:
    """Color bucket thresholds for percentage cells."""

    high: float = HIGH_THRESHOLD
    """Percentages at or above this are green (default: 80%)."""

    medium: float = MEDIUM_THRESHOLD
    """Percentages at or above this are yellow, below it red (default: 60%)."""

    def to_thresholds(self) -> Thresholds:
        return Thresholds(high=self.high, medium=self.medium)


@dataclass
class ViewConfig:
    """Source view styling."""

    uncovered_style: str = "white on red"
    """Style painted over uncovered fragments."""

    uncovered_margin_style: str = "red"
    """Margin style of lines annotated as not executed."""

    covered_margin_style: str = "green on black"
    """Margin style of lines annotated as executed."""

    separator: str = DEFAULT_SEPARATOR
    """Incidental character placed around decorations by full-text extraction."""

    def to_styles(self) -> ViewStyles:
        return ViewStyles(
            uncovered_style=self.uncovered_style,
            uncovered_margin_style=self.uncovered_margin_style,
            covered_margin_style=self.covered_margin_style,
        )


@dataclass
class CovviewConfig:
    """Complete covview configuration from ``.covview.yml``."""

    root: str
    """Project root directory."""

    report: ReportConfig = field(default_factory=ReportConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    view: ViewConfig = field(default_factory=ViewConfig)

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML for extension/debugging."""


def load_config(root: str | Path) -> CovviewConfig:
    """Load and parse ``.covview.yml``.

    Falls back to defaults and the ``COVVIEW_REPORT_DIR`` environment
    variable when the file is missing or incomplete.
    """
    root_path = Path(root).resolve()
    config_file = root_path / CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        else:
            logger.warning("Ignoring %s: top level is not a mapping", config_file)

    report_raw = _section(raw, "report")
    report = ReportConfig(
        directory=str(
            report_raw.get(
                "directory",
                os.environ.get("COVVIEW_REPORT_DIR", ReportConfig.directory),
            )
        ),
    )

    thresholds_raw = _section(raw, "thresholds")
    thresholds = ThresholdConfig(
        high=float(thresholds_raw.get("high", HIGH_THRESHOLD)),
        medium=float(thresholds_raw.get("medium", MEDIUM_THRESHOLD)),
    )

    view_raw = _section(raw, "view")
    defaults = ViewConfig()
    view = ViewConfig(
        uncovered_style=str(view_raw.get("uncovered_style", defaults.uncovered_style)),
        uncovered_margin_style=str(
            view_raw.get("uncovered_margin_style", defaults.uncovered_margin_style)
        ),
        covered_margin_style=str(
            view_raw.get("covered_margin_style", defaults.covered_margin_style)
        ),
        separator=str(view_raw.get("separator", defaults.separator)),
    )

    return CovviewConfig(
        root=str(root_path),
        report=report,
        thresholds=thresholds,
        view=view,
        raw=raw,
    )


def _validate_thresholds(thresholds: ThresholdConfig) -> list[str]:
    """Validate color bucket thresholds."""
    errors: list[str] = []

    if not 0.0 <= thresholds.high <= _MAX_PERCENTAGE:
        errors.append(f"thresholds.high must be between 0 and 100 (got: {thresholds.high})")

    if not 0.0 <= thresholds.medium <= _MAX_PERCENTAGE:
        errors.append(f"thresholds.medium must be between 0 and 100 (got: {thresholds.medium})")

    if thresholds.medium > thresholds.high:
        errors.append(
            f"thresholds.medium must not exceed thresholds.high "
            f"(got: {thresholds.medium} > {thresholds.high})"
        )

    return errors


def _validate_view(view: ViewConfig) -> list[str]:
    """Validate source view styles."""
    errors: list[str] = []

    for name in ("uncovered_style", "uncovered_margin_style", "covered_margin_style"):
        value = getattr(view, name)
        try:
            Style.parse(value)
        except StyleSyntaxError as e:
            errors.append(f"view.{name} is not a valid style: {value!r} ({e})")

    if len(view.separator) != 1:
        errors.append(f"view.separator must be a single character (got: {view.separator!r})")

    return errors


def validate_config(config: CovviewConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    if not config.report.directory.strip():
        errors.append("report.directory must not be empty")

    errors.extend(_validate_thresholds(config.thresholds))
    errors.extend(_validate_view(config.view))
    return errors
