"""Stored default settings."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from focus_timer.models import AppConfig

log = logging.getLogger(__name__)

_CONFIG_DIR = Path.home() / ".config" / "focus-timer"
_CONFIG_FILE = _CONFIG_DIR / "config.json"


def config_path() -> Path:
    return _CONFIG_FILE


def load_config() -> AppConfig:
    """Load config from disk, returning defaults if none exists."""
    if _CONFIG_FILE.exists():
        try:
            data = json.loads(_CONFIG_FILE.read_text())
            return AppConfig(**data)
        except (json.JSONDecodeError, TypeError, ValidationError) as exc:
            log.warning("Ignoring unreadable config %s: %s", _CONFIG_FILE, exc)
    return AppConfig()


def save_config(config: AppConfig) -> Path:
    """Write config to disk. Returns the config file path."""
    _CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    _CONFIG_FILE.write_text(config.model_dump_json(indent=2))
    return _CONFIG_FILE


def update_config(**changes: Any) -> AppConfig:
    """Apply the non-None changes to the stored config and save it."""
    current = load_config()
    data = current.model_dump()
    data.update({k: v for k, v in changes.items() if v is not None})
    config = AppConfig(**data)
    save_config(config)
    return config


def reset_config() -> AppConfig:
    """Restore the built-in defaults."""
    config = AppConfig()
    save_config(config)
    return config
