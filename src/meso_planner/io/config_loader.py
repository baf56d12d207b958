"""
YAML → CLI defaults loader.

Built-in defaults can be overridden from ~/.meso-planner/config.yaml:

    days_per_week: 5
    session_minutes: 45
    lagging_areas: [arms, calves]
    profile_path: ~/training/profile.json

Usage:
    from meso_planner.io.config_loader import load_cli_config
    cfg = load_cli_config()
    days = cfg["days_per_week"]

If the user file has parse errors a warning is issued and the built-in
defaults are used.
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from .catalog_loader import _deep_merge

DEFAULT_CLI_CONFIG: dict[str, Any] = {
    "days_per_week": 4,
    "session_minutes": 60,
    "lagging_areas": [],
    "profile_path": None,
}


def get_config_dir() -> Path:
    """Return ~/.meso-planner (may not exist)."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".meso-planner"


def get_user_config_path() -> Path | None:
    """Return ~/.meso-planner/config.yaml if it exists, else None."""
    p = get_config_dir() / "config.yaml"
    return p if p.exists() else None


def get_default_profile_path() -> Path:
    return get_config_dir() / "profile.json"


def load_cli_config(path: Path | None = None) -> dict[str, Any]:
    """
    Load CLI defaults, merging the user file over the built-in values.

    Args:
        path: Config file (default: ~/.meso-planner/config.yaml if present)

    Returns:
        Merged dict; always contains every key of DEFAULT_CLI_CONFIG
    """
    config = _deep_merge({}, DEFAULT_CLI_CONFIG)
    if path is None:
        path = get_user_config_path()
    if path is None:
        return config

    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"meso-planner: ignoring {path} ({exc})", stacklevel=2)
        return config
    if data is None:
        return config
    if not isinstance(data, dict):
        warnings.warn(f"meso-planner: ignoring {path} (expected a mapping)", stacklevel=2)
        return config

    unknown = sorted(set(data) - set(DEFAULT_CLI_CONFIG))
    if unknown:
        warnings.warn(f"meso-planner: unknown config keys in {path}: {unknown}", stacklevel=2)
    return _deep_merge(config, {k: v for k, v in data.items() if k in DEFAULT_CLI_CONFIG})
