"""
YAML → typed config loader.

Loads model data from model.yaml (bundled with the package) and merges
user overrides from ~/.lift-scheduler/model.yaml when present.

Usage:
    from lift_scheduler.core.engine.config_loader import load_model_config
    cfg = load_model_config()
    chest = cfg.get("muscles", {}).get("chest", {})

A user override file with parse errors is reported with a warning and
ignored; the bundled file is always required.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

USER_CONFIG_DIRNAME = ".lift-scheduler"

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML mapping.

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If the file is not valid YAML
    """
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    return data if isinstance(data, dict) else {}


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def load_user_override(path: Path | None) -> dict[str, Any]:
    """Load a user override file, warning (not failing) on a broken file."""
    if path is None:
        return {}
    try:
        return load_yaml_file(path)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(
            f"lift-scheduler: ignoring user override {path} ({exc})",
            stacklevel=3,
        )
        return {}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_user_config_dir() -> Path:
    """Return ~/.lift-scheduler (whether or not it exists)."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / USER_CONFIG_DIRNAME


def get_bundled_data_path(filename: str) -> Path:
    """Return the path of a data file shipped inside the lift_scheduler package."""
    ref = importlib.resources.files("lift_scheduler").joinpath(filename)
    with importlib.resources.as_file(ref) as p:
        return p


def get_user_yaml_path(filename: str) -> Path | None:
    """Return ~/.lift-scheduler/<filename> if it exists, else None."""
    p = get_user_config_dir() / filename
    return p if p.exists() else None


def load_model_config() -> dict[str, Any]:
    """
    Load and merge model configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/lift_scheduler/model.yaml
    2. User override at ~/.lift-scheduler/model.yaml

    Returns:
        Merged dict of config sections.
    """
    config = load_yaml_file(get_bundled_data_path("model.yaml"))
    user_cfg = load_user_override(get_user_yaml_path("model.yaml"))
    if user_cfg:
        config = deep_merge(config, user_cfg)
    return config
