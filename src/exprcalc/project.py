"""Project configuration: ``exprcalc.yaml`` merged over defaults."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "exprcalc.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "precision": 10,
    "large_result_threshold": 1e12,
    "logging_enabled": True,
    "logging_fsync": False,
    "logging_tail_bytes": None,
}

DEFAULT_CONFIG_TEXT = """\
# exprcalc project configuration
precision: 10
large_result_threshold: 1.0e+12
logging_enabled: true
# logging_fsync: false
# logging_tail_bytes: 2097152
"""


def load_project_config(project_dir: Path) -> dict[str, Any]:
    """Load project configuration from ``exprcalc.yaml``, with defaults.

    Args:
        project_dir: Directory that may contain ``exprcalc.yaml``.

    Returns:
        Merged configuration dict. Keys not in the defaults are kept.

    Raises:
        ValueError: If the file exists but is not a valid YAML mapping, or
            a numeric setting cannot be converted.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = project_dir / CONFIG_FILENAME
    if config_path.exists():
        try:
            user_config = yaml.safe_load(config_path.read_text()) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc
        if not isinstance(user_config, dict):
            raise ValueError(f"{config_path} must contain a mapping")
        config.update(user_config)
    try:
        config["precision"] = int(config["precision"])
        config["large_result_threshold"] = float(config["large_result_threshold"])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid numeric setting in {config_path}: {exc}") from exc
    return config


def write_default_config(project_dir: Path) -> Path:
    """Write a default ``exprcalc.yaml`` into *project_dir*.

    Raises:
        FileExistsError: If a config file is already present.
    """
    project_dir.mkdir(parents=True, exist_ok=True)
    config_path = project_dir / CONFIG_FILENAME
    if config_path.exists():
        raise FileExistsError(f"Config already exists: {config_path}")
    config_path.write_text(DEFAULT_CONFIG_TEXT)
    return config_path
