"""Formatting options and format providers.

`FormatOptions` controls how `render` turns values into text and which
`FormatProvider` `parse` uses to read them back. Both models are frozen so
one instance can be shared across threads and calls.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_DEPTH_SENTINEL = "<max nesting depth reached>"
DEFAULT_MAX_COLLECTION_ITEMS = 100
DEFAULT_MAX_NESTING_DEPTH = 10


class FormatProvider(BaseModel):
    """Explicit number/date conventions used when parsing text."""

    model_config = ConfigDict(frozen=True)

    name: str = "invariant"
    decimal_separator: str = "."
    group_separator: str = ","
    true_literals: tuple[str, ...] = ("true",)
    false_literals: tuple[str, ...] = ("false",)
    date_time_formats: tuple[str, ...] = (
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%d %H:%M:%S.%f",
        "%Y-%m-%d %H:%M:%S %z",
        "%Y-%m-%d %H:%M:%S.%f %z",
        "%Y-%m-%d",
        "%m/%d/%Y %H:%M:%S",
        "%m/%d/%Y",
    )
    date_formats: tuple[str, ...] = ("%Y-%m-%d", "%m/%d/%Y")
    time_formats: tuple[str, ...] = ("%H:%M:%S", "%H:%M:%S.%f", "%H:%M")

    @field_validator("decimal_separator")
    @classmethod
    def _validate_decimal_separator(cls, value: str) -> str:
        if not value:
            raise ValueError("decimal_separator must not be empty")
        return value

    @field_validator("true_literals", "false_literals")
    @classmethod
    def _normalize_literals(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Compare boolean literals case-insensitively."""
        return tuple(item.strip().lower() for item in value if item and item.strip())


INVARIANT = FormatProvider()


class FormatOptions(BaseModel):
    """Immutable configuration for one render or parse call."""

    model_config = ConfigDict(frozen=True)

    null_string: str = "<null>"
    date_time_format: str = "%Y-%m-%d %H:%M:%S"
    date_time_offset_format: str = "%Y-%m-%d %H:%M:%S %:z"
    date_format: str = "%Y-%m-%d"
    time_format: str = "%H:%M:%S"
    time_span_format: str | None = None
    decimal_format: str | None = None
    double_format: str | None = None
    float_format: str | None = None
    max_collection_items: int = DEFAULT_MAX_COLLECTION_ITEMS
    show_collection_count: bool = True
    collection_separator: str = ", "
    dictionary_key_value_separator: str = ": "
    show_array_dimensions: bool = False
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    provider: FormatProvider = Field(default=INVARIANT)

    @field_validator("time_span_format", "decimal_format", "double_format", "float_format", mode="before")
    @classmethod
    def _empty_format_is_unset(cls, value: Any) -> Any:
        """Treat an empty format string like a missing one."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("max_collection_items", "max_nesting_depth")
    @classmethod
    def _validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("limits must be >= 0")
        return value

    @field_validator("provider", mode="before")
    @classmethod
    def _named_provider(cls, value: Any) -> Any:
        """Allow `provider: invariant` (or null) in YAML configuration."""
        if value is None:
            return INVARIANT
        if isinstance(value, str):
            if value.strip().lower() != INVARIANT.name:
                raise ValueError(f"Unknown provider name: {value}")
            return INVARIANT
        return value


DEFAULT_OPTIONS = FormatOptions()
