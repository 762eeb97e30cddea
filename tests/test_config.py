"""Tests for config.py — .covview.yml parsing and validation."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from covview.config import (
    CovviewConfig,
    ReportConfig,
    ThresholdConfig,
    ViewConfig,
    _resolve_dict,
    _resolve_env_vars,
    load_config,
    validate_config,
)
from covview.reporters.views import Thresholds, ViewStyles

if TYPE_CHECKING:
    import pytest


def _write_covview_yml(root: Path, data: Any) -> None:
    """Write .covview.yml with given data."""
    (root / ".covview.yml").write_text(yaml.dump(data), encoding="utf-8")


# ── _resolve_env_vars / _resolve_dict ─────────────────────────────────


class TestResolveEnvVars:
    def test_resolves_existing_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_VAR", "hello")
        assert _resolve_env_vars("${MY_VAR}") == "hello"

    def test_missing_var_returns_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MISSING_VAR", raising=False)
        assert _resolve_env_vars("${MISSING_VAR}") == ""

    def test_no_vars_unchanged(self) -> None:
        assert _resolve_env_vars("plain text") == "plain text"


class TestResolveDict:
    def test_resolves_nested_dicts(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INNER", "resolved")
        result = _resolve_dict({"outer": {"inner": "${INNER}"}})
        assert result["outer"]["inner"] == "resolved"

    def test_resolves_list_items(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ITEM", "x")
        assert _resolve_dict({"items": ["${ITEM}", 42]})["items"] == ["x", 42]

    def test_passes_non_string_values(self) -> None:
        assert _resolve_dict({"n": 80, "flag": True}) == {"n": 80, "flag": True}


# ── load_config ──────────────────────────────────────────────────


class TestLoadConfig:
    def test_defaults_without_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("COVVIEW_REPORT_DIR", raising=False)
        config = load_config(tmp_path)

        assert config.root == str(tmp_path.resolve())
        assert config.report == ReportConfig()
        assert config.thresholds == ThresholdConfig(high=80.0, medium=60.0)
        assert config.view == ViewConfig()
        assert config.raw == {}

    def test_reads_all_sections(self, tmp_path: Path) -> None:
        _write_covview_yml(
            tmp_path,
            {
                "report": {"directory": "build/coverage"},
                "thresholds": {"high": 90, "medium": 75},
                "view": {
                    "uncovered_style": "bold red",
                    "uncovered_margin_style": "magenta",
                    "covered_margin_style": "green",
                    "separator": "|",
                },
            },
        )
        config = load_config(tmp_path)

        assert config.report.directory == "build/coverage"
        assert config.thresholds == ThresholdConfig(high=90.0, medium=75.0)
        assert config.view.uncovered_style == "bold red"
        assert config.view.separator == "|"
        assert config.raw["thresholds"]["high"] == 90

    def test_partial_section_keeps_defaults(self, tmp_path: Path) -> None:
        _write_covview_yml(tmp_path, {"thresholds": {"high": 95}})
        config = load_config(tmp_path)
        assert config.thresholds == ThresholdConfig(high=95.0, medium=60.0)

    def test_env_var_default_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("COVVIEW_REPORT_DIR", "out/html")
        assert load_config(tmp_path).report.directory == "out/html"

    def test_file_overrides_env_var(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("COVVIEW_REPORT_DIR", "out/html")
        _write_covview_yml(tmp_path, {"report": {"directory": "reports"}})
        assert load_config(tmp_path).report.directory == "reports"

    def test_placeholder_resolved(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CI_REPORTS", "ci")
        _write_covview_yml(tmp_path, {"report": {"directory": "${CI_REPORTS}/coverage"}})
        assert load_config(tmp_path).report.directory == "ci/coverage"

    def test_non_mapping_file_ignored(self, tmp_path: Path) -> None:
        _write_covview_yml(tmp_path, ["not", "a", "mapping"])
        config = load_config(tmp_path)
        assert config.raw == {}
        assert config.thresholds.high == 80.0

    def test_non_mapping_section_ignored(self, tmp_path: Path) -> None:
        _write_covview_yml(tmp_path, {"view": "plain"})
        assert load_config(tmp_path).view == ViewConfig()

    def test_accepts_string_root(self, tmp_path: Path) -> None:
        assert isinstance(load_config(str(tmp_path)), CovviewConfig)


class TestConversions:
    def test_to_thresholds(self) -> None:
        assert ThresholdConfig(high=90, medium=70).to_thresholds() == Thresholds(90, 70)

    def test_to_styles(self) -> None:
        styles = ViewConfig(uncovered_style="bold red").to_styles()
        assert styles == ViewStyles(uncovered_style="bold red")


# ── validate_config ──────────────────────────────────────────────


class TestValidateConfig:
    def _config(self, **overrides: Any) -> CovviewConfig:
        return CovviewConfig(root="/tmp/project", **overrides)

    def test_defaults_valid(self) -> None:
        assert validate_config(self._config()) == []

    def test_empty_directory(self) -> None:
        errors = validate_config(self._config(report=ReportConfig(directory="  ")))
        assert errors == ["report.directory must not be empty"]

    def test_thresholds_out_of_range(self) -> None:
        errors = validate_config(self._config(thresholds=ThresholdConfig(high=120, medium=-5)))
        assert any("thresholds.high" in e for e in errors)
        assert any("thresholds.medium" in e for e in errors)

    def test_medium_above_high(self) -> None:
        errors = validate_config(self._config(thresholds=ThresholdConfig(high=50, medium=70)))
        assert errors == [
            "thresholds.medium must not exceed thresholds.high (got: 70 > 50)",
        ]

    def test_invalid_style(self) -> None:
        view = ViewConfig(uncovered_style="bogus-colour")
        errors = validate_config(self._config(view=view))
        assert len(errors) == 1
        assert errors[0].startswith("view.uncovered_style is not a valid style")

    def test_separator_must_be_single_character(self) -> None:
        errors = validate_config(self._config(view=ViewConfig(separator="")))
        assert errors == ["view.separator must be a single character (got: '')"]

    def test_collects_every_error(self) -> None:
        config = self._config(
            report=ReportConfig(directory=""),
            thresholds=ThresholdConfig(high=50, medium=70),
            view=ViewConfig(separator="--"),
        )
        assert len(validate_config(config)) == 3
