"""Exception types raised by valuetext."""

from __future__ import annotations


class ValueTextError(Exception):
    """Base class for all valuetext errors."""


class NullArgumentError(ValueTextError, TypeError):
    """Raised when a required argument is None."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Argument '{name}' must not be None")
        self.name = name


class ParseFailure(ValueTextError, ValueError):
    """Raised when text cannot be parsed as the requested type."""

    def __init__(self, text: str, target: str) -> None:
        super().__init__(f"Cannot parse {text!r} as {target}")
        self.text = text
        self.target = target


class ConversionFailure(ValueTextError):
    """Raised when a declared text converter fails."""
