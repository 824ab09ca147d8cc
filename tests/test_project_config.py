"""Tests for exprcalc.yaml loading and result diagnostics."""

from __future__ import annotations

import math
from pathlib import Path

import pytest
import yaml

from exprcalc.diagnostics import ResultStatus, classify_result, format_result, result_warning
from exprcalc.project import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG,
    load_project_config,
    write_default_config,
)


class TestLoadProjectConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        assert load_project_config(tmp_path) == DEFAULT_CONFIG

    def test_overrides_and_unknown_keys(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(
            yaml.safe_dump({"precision": 3, "large_result_threshold": 100, "owner": "ops"})
        )
        cfg = load_project_config(tmp_path)
        assert cfg["precision"] == 3
        assert cfg["large_result_threshold"] == 100.0
        assert cfg["owner"] == "ops"
        assert cfg["logging_enabled"] is True

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        assert load_project_config(tmp_path) == DEFAULT_CONFIG

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_project_config(tmp_path)

    @pytest.mark.parametrize(
        "text",
        ["precision: null\n", "large_result_threshold: null\n", "precision: many\n"],
    )
    def test_bad_numeric_setting_rejected(self, tmp_path: Path, text: str) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(text)
        with pytest.raises(ValueError, match="Invalid numeric setting"):
            load_project_config(tmp_path)


class TestWriteDefaultConfig:
    def test_round_trip(self, tmp_path: Path) -> None:
        path = write_default_config(tmp_path / "proj")
        assert path.exists()
        cfg = load_project_config(tmp_path / "proj")
        assert cfg["precision"] == 10
        assert cfg["large_result_threshold"] == 1e12

    def test_refuses_to_overwrite(self, tmp_path: Path) -> None:
        write_default_config(tmp_path)
        with pytest.raises(FileExistsError):
            write_default_config(tmp_path)


class TestDiagnostics:
    @pytest.mark.parametrize(
        "value, status",
        [
            (1.5, ResultStatus.ok),
            (math.nan, ResultStatus.nan),
            (math.inf, ResultStatus.infinite),
            (-math.inf, ResultStatus.infinite),
            (2e12, ResultStatus.large),
            (-2e12, ResultStatus.large),
            (1e12, ResultStatus.ok),
        ],
    )
    def test_classify(self, value: float, status: ResultStatus) -> None:
        assert classify_result(value) == status

    def test_custom_threshold(self) -> None:
        assert classify_result(101.0, large_threshold=100.0) == ResultStatus.large

    def test_warnings(self) -> None:
        assert result_warning(ResultStatus.ok) is None
        assert result_warning(ResultStatus.nan) == "Answer is not a number!"
        assert result_warning(ResultStatus.infinite) == "Answer is infinity!"
        assert "singularity" in result_warning(ResultStatus.large)

    def test_format_result(self) -> None:
        assert format_result(14.0) == "14.0000000000"
        assert format_result(math.pi, 4) == "3.1416"
        assert format_result(-0.5, 2) == "-0.50"
