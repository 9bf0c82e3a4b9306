"""Per-type text conversion hooks.

A type opts into custom text conversion either by declaring a converter
with the `text_converter` class decorator or by being registered with
`register_converter` (useful for types you do not own). Lookups walk the
MRO once per type and are cached until the registry changes.
"""

from __future__ import annotations

import functools
import logging
import threading
from typing import Any, Callable, TypeVar

from .errors import ConversionFailure

LOG = logging.getLogger(__name__)

_T = TypeVar("_T", bound=type)

CONVERTER_ATTRIBUTE = "__text_converter__"


class TextConverter:
    """Capability-based converter between a type and other types (mainly `str`).

    Subclasses override the capability checks together with the matching
    conversion method. The base implementation converts nothing.
    """

    def can_convert_to(self, target_type: type) -> bool:
        return False

    def convert_to(self, value: Any, target_type: type) -> Any:
        raise ConversionFailure(f"{type(self).__name__} cannot convert to {target_type.__name__}")

    def can_convert_from(self, source_type: type) -> bool:
        return False

    def convert_from(self, value: Any) -> Any:
        raise ConversionFailure(f"{type(self).__name__} cannot convert from {type(value).__name__}")


_REGISTRY: dict[type, TextConverter] = {}
_REGISTRY_LOCK = threading.Lock()


def _as_instance(converter: TextConverter | type[TextConverter]) -> TextConverter:
    if isinstance(converter, type):
        return converter()
    return converter


def text_converter(converter: TextConverter | type[TextConverter]) -> Callable[[_T], _T]:
    """Class decorator that declares the converter for the decorated type."""

    def decorate(cls: _T) -> _T:
        setattr(cls, CONVERTER_ATTRIBUTE, converter)
        resolve_converter.cache_clear()
        return cls

    return decorate


def register_converter(target: type, converter: TextConverter | type[TextConverter] | None) -> None:
    """Register (or with None, remove) the converter for `target`."""
    with _REGISTRY_LOCK:
        if converter is None:
            _REGISTRY.pop(target, None)
        else:
            _REGISTRY[target] = _as_instance(converter)
        resolve_converter.cache_clear()


@functools.lru_cache(maxsize=1024)
def resolve_converter(value_type: type) -> TextConverter | None:
    """Return the converter declared for `value_type` or one of its bases."""
    for cls in getattr(value_type, "__mro__", (value_type,)):
        registered = _REGISTRY.get(cls)
        if registered is not None:
            return registered
        declared = cls.__dict__.get(CONVERTER_ATTRIBUTE)
        if declared is not None:
            try:
                return _as_instance(declared)
            except Exception as exc:
                LOG.debug("Cannot instantiate text converter for %s: %s", cls.__name__, exc)
                return None
    return None


def _convert_to_text(converter: TextConverter, value: Any) -> str | None:
    try:
        if not converter.can_convert_to(str):
            return None
        result = converter.convert_to(value, str)
        if result is None:
            return None
        return result if isinstance(result, str) else str(result)
    except ConversionFailure:
        raise
    except Exception as exc:
        raise ConversionFailure(f"{type(converter).__name__} failed: {exc}") from exc


def try_convert(value: Any) -> str | None:
    """Convert `value` to text through its declared converter.

    Returns None when no converter is declared, when it cannot target `str`,
    or when it fails.
    """
    try:
        converter = resolve_converter(type(value))
    except TypeError:
        return None
    if converter is None:
        return None
    try:
        return _convert_to_text(converter, value)
    except ConversionFailure as exc:
        LOG.debug("Text conversion for %s absorbed: %s", type(value).__name__, exc)
        return None


def convert_from_text(converter: TextConverter, text: str) -> Any:
    """Parse `text` through `converter`, raising ConversionFailure when unsupported."""
    if not converter.can_convert_from(str):
        raise ConversionFailure(f"{type(converter).__name__} cannot convert from str")
    try:
        return converter.convert_from(text)
    except ConversionFailure:
        raise
    except Exception as exc:
        raise ConversionFailure(f"{type(converter).__name__} failed: {exc}") from exc
