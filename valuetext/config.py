"""Configuration models and loaders for valuetext.

This module defines the configuration schema used by the command line and
how values are loaded from YAML plus environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .options import FormatOptions

DEFAULT_CONFIG_PATH = "valuetext.yaml"
_TRUE_VALUES = {"1", "true", "yes", "on"}


class LoggingConfig(BaseModel):
    """Logging-related configuration."""

    model_config = ConfigDict(populate_by_name=True)

    level: str = "WARNING"
    json_logs: bool = Field(default=False, alias="json")


class ValueTextConfig(BaseModel):
    """Top-level configuration."""

    model_config = ConfigDict(extra="forbid")

    options: FormatOptions = Field(default_factory=FormatOptions)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "ValueTextConfig":
        """Validate a raw mapping, treating explicit YAML nulls as defaults."""
        cleaned = {key: value for key, value in data.items() if value is not None}
        return cls.model_validate(cleaned)


def _load_yaml(path: str | None) -> dict[str, Any]:
    """Load a YAML file into a dictionary.

    Missing files are treated as empty config so defaults and environment
    variables still apply.
    """
    if not path:
        return {}
    cfg_path = Path(path)
    if not cfg_path.exists():
        return {}
    with cfg_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be object: {path}")
    return data


def _override_from_env(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides on top of file configuration."""
    env_map = {
        "options.null_string": "VALUETEXT_NULL_STRING",
        "options.max_collection_items": "VALUETEXT_MAX_COLLECTION_ITEMS",
        "options.max_nesting_depth": "VALUETEXT_MAX_NESTING_DEPTH",
        "options.show_collection_count": "VALUETEXT_SHOW_COLLECTION_COUNT",
        "options.show_array_dimensions": "VALUETEXT_SHOW_ARRAY_DIMENSIONS",
        "options.collection_separator": "VALUETEXT_COLLECTION_SEPARATOR",
        "logging.level": "VALUETEXT_LOG_LEVEL",
        "logging.json_logs": "VALUETEXT_LOG_JSON",
    }

    out = dict(data)
    options = dict(out.get("options") or {})
    logging_cfg = dict(out.get("logging") or {})

    for key, env_name in env_map.items():
        value = os.getenv(env_name)
        if value is None:
            continue

        section, field = key.split(".", 1)
        if field in {"max_collection_items", "max_nesting_depth"}:
            options[field] = int(value)
        elif field in {"show_collection_count", "show_array_dimensions"}:
            options[field] = value.strip().lower() in _TRUE_VALUES
        elif field == "json_logs":
            logging_cfg["json"] = value.strip().lower() in _TRUE_VALUES
        elif section == "logging":
            logging_cfg[field] = value
        else:
            options[field] = value

    out["options"] = options
    out["logging"] = logging_cfg
    return out


def load_config(path: str | None = None) -> ValueTextConfig:
    """Load, merge, and validate configuration."""
    final_path = path or os.getenv("VALUETEXT_CONFIG") or DEFAULT_CONFIG_PATH
    raw = _load_yaml(final_path)
    raw = _override_from_env(raw)
    return ValueTextConfig.from_mapping(raw)
