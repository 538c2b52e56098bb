"""Layered configuration: YAML < .env < CLI args."""

from __future__ import annotations

import os
from datetime import tzinfo
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from campus_engine.errors import ConfigurationError
from campus_engine.normalize.dates import DEFAULT_TIMEZONE, get_timezone

DEFAULT_CONFIG_PATH = Path("config/default.yaml")

# Environment variable -> nested config key
ENV_MAPPINGS: dict[str, tuple[str, ...]] = {
    "CAMPUS_ENGINE_TIMEZONE": ("timezone",),
    "CAMPUS_ENGINE_DATA_DIR": ("data_dir",),
    "CAMPUS_ENGINE_LOG_LEVEL": ("logging", "level"),
}


def load_config(
    config_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Load configuration with layered precedence.

    Priority (highest to lowest):
    1. CLI argument overrides
    2. Environment variables (.env)
    3. YAML config file

    Args:
        config_path: Path to YAML config file. Defaults to config/default.yaml
        cli_overrides: Dict of CLI argument overrides (e.g. {"timezone": "UTC"})

    Returns:
        Merged configuration dict.
    """
    # 1. Load YAML defaults
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}

    # 2. Load .env and apply environment variable overrides
    load_dotenv()
    for env_var, key_path in ENV_MAPPINGS.items():
        value = os.environ.get(env_var)
        if value:
            _set_nested(config, key_path, value)

    # 3. Apply CLI overrides (only non-None values)
    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def _set_nested(d: dict, keys: tuple[str, ...], value: Any) -> None:
    """Set a value in a nested dict using a tuple of keys."""
    for key in keys[:-1]:
        d = d.setdefault(key, {})
    d[keys[-1]] = value


def resolve_timezone(config: dict[str, Any]) -> tzinfo:
    """Return the institutional time zone named by ``timezone``.

    Raises:
        ConfigurationError: If the zone name is unknown.
    """
    name = config.get("timezone") or DEFAULT_TIMEZONE
    try:
        return get_timezone(name)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def source_path(config: dict[str, Any], name: str) -> Path | None:
    """Resolve ``sources.<name>`` against ``data_dir``; None when unset."""
    relative = (config.get("sources") or {}).get(name)
    if not relative:
        return None
    return Path(config.get("data_dir", ".")) / relative
