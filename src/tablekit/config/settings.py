"""
Runtime settings.

Precedence (lowest to highest):
  1. Model defaults
  2. YAML file named by ``TABLEKIT_CONFIG``
  3. ``TABLEKIT_*`` environment variables
  4. ``configure(...)`` overrides

Example ``tablekit.yml``::

    check_types: true
    strict_passthrough: false
    log_level: INFO
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_ENV_VAR = "TABLEKIT_CONFIG"

# env var -> model field
_ENV_FIELDS: Dict[str, str] = {
    "TABLEKIT_CHECK_TYPES": "check_types",
    "TABLEKIT_STRICT_PASSTHROUGH": "strict_passthrough",
    "TABLEKIT_LOG_LEVEL": "log_level",
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class TablekitConfig(BaseModel):
    """Effective tablekit settings."""

    check_types: bool = Field(
        True,
        description="Check every cell/column value against its declared column type.",
    )
    strict_passthrough: bool = Field(
        False,
        description=(
            "Verify that sources without a declared capability already have the "
            "requested shape instead of trusting them."
        ),
    )
    log_level: str = Field("WARNING", description="Level used by configure_logging().")

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level == "WARN":
            level = "WARNING"
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}")
        return level


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read raw settings from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a mapping of settings
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {p} must contain a mapping, got {type(data).__name__}")
    unknown = set(data) - set(TablekitConfig.model_fields)
    if unknown:
        raise ValueError(f"Unknown settings in {p}: {', '.join(sorted(unknown))}")
    return data


def resolve_effective_config(
    config_path: Optional[Union[str, Path]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> TablekitConfig:
    """
    Build the effective config from file and environment.

    Args:
        config_path: YAML file to read. Defaults to ``$TABLEKIT_CONFIG`` if set.
        environ: Environment mapping (defaults to ``os.environ``)
    """
    env = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    path = config_path or env.get(CONFIG_ENV_VAR)
    if path:
        values.update(load_config(path))

    for var, field_name in _ENV_FIELDS.items():
        raw = env.get(var)
        if raw is not None and raw.strip() != "":
            values[field_name] = raw.strip()

    return TablekitConfig.model_validate(values)


_active: Optional[TablekitConfig] = None


def get_settings() -> TablekitConfig:
    """Return the active settings, resolving them on first use."""
    global _active
    if _active is None:
        _active = resolve_effective_config()
    return _active


def configure(**overrides: Any) -> TablekitConfig:
    """
    Override individual settings for the rest of the process.

    Example:
        tablekit.configure(check_types=False)
    """
    global _active
    merged = get_settings().model_dump()
    merged.update(overrides)
    _active = TablekitConfig.model_validate(merged)
    return _active


def reset_settings() -> None:
    """Forget overrides; the next ``get_settings()`` re-reads file and environment."""
    global _active
    _active = None
