"""Configuration bootstrapping for the signal hub."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

DEFAULTS: dict[str, Any] = {
    "dispatcher": {
        "thread_name": "signal-dispatcher",
        "daemon": True,
        "log_handler_failures": True,
    },
    "logging": {"level": "INFO"},
}

LOG_LEVEL_ENV = "SIGSLOT_LOG_LEVEL"


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def default_root() -> Path:
    return Path(__file__).resolve().parents[1]


def load_effective_config(root: Path | None = None) -> dict[str, Any]:
    """Merge built-in defaults, config/default.yaml, config/local.yaml and env."""
    config_dir = (root or default_root()) / "config"
    merged = merge_dicts(DEFAULTS, load_yaml(config_dir / "default.yaml"))
    merged = merge_dicts(merged, load_yaml(config_dir / "local.yaml"))
    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        merged = merge_dicts(merged, {"logging": {"level": env_level}})
    return merged


def configure_logging(config: dict[str, Any]) -> None:
    """Apply the configured root log level. Only entry points call this."""
    level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
