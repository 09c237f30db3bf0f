"""
YAML → typed settings loader.

Loads defaults from defaults.yaml (bundled with the package) and merges
user overrides from ~/.scheda/config.yaml.

Usage:
    from scheda.io.config_loader import load_settings
    settings = load_settings()
    store = CsvWorkbook(settings.workbook_dir)

SCHEDA_HOME replaces ~/.scheda as the base directory. If the user
override file cannot be parsed, a warning is logged and it is ignored.
"""

from __future__ import annotations

import importlib.resources
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..core.config import CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; return {} (with a warning) on parse errors."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring config file %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    workbook_dir: Path
    cache_path: Path
    cache_ttl_seconds: int = CACHE_TTL_SECONDS
    strict_context: bool = False


def get_base_dir() -> Path:
    """Return $SCHEDA_HOME, or ~/.scheda."""
    env = os.environ.get("SCHEDA_HOME")
    if env:
        return Path(env).expanduser()
    return Path(os.environ.get("HOME", "~")).expanduser() / ".scheda"


def get_user_yaml_path() -> Path | None:
    """Return <base>/config.yaml if it exists, else None."""
    p = get_base_dir() / "config.yaml"
    return p if p.exists() else None


def load_bundled_config() -> dict[str, Any]:
    """Parse the defaults.yaml shipped with the package."""
    text = importlib.resources.files("scheda").joinpath("defaults.yaml").read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


def load_config() -> dict[str, Any]:
    """
    Load and merge configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/scheda/defaults.yaml
    2. User override at <base>/config.yaml

    Returns:
        Merged dict of config sections
    """
    config = load_bundled_config()
    user = get_user_yaml_path()
    if user is not None:
        config = _deep_merge(config, _load_yaml_file(user))
    return config


def settings_from_config(config: dict[str, Any], base_dir: Path) -> Settings:
    """Build Settings from a merged config dict; relative paths use *base_dir*."""
    workbook = config.get("workbook", {}) or {}
    pointer = config.get("session_pointer", {}) or {}
    schedule = config.get("schedule", {}) or {}

    workbook_dir = base_dir / Path(str(workbook.get("dir", "workbook"))).expanduser()
    cache_path = base_dir / Path(str(workbook.get("cache_file", "cache.json"))).expanduser()

    return Settings(
        workbook_dir=workbook_dir,
        cache_path=cache_path,
        cache_ttl_seconds=int(pointer.get("ttl_seconds", CACHE_TTL_SECONDS)),
        strict_context=bool(schedule.get("strict_context", False)),
    )


def load_settings() -> Settings:
    """Load settings from the bundled defaults and the user override."""
    return settings_from_config(load_config(), get_base_dir())
