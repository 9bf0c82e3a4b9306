"""Parsing of invariant text back into typed values.

`parse` favors availability: text that cannot be read as the requested type
yields that type's default value instead of an exception. Only a missing
argument (None) is treated as a programming error. `probe_parse` answers
whether `parse` would succeed without falling back.
"""

from __future__ import annotations

import logging
import re
import types
import typing
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum, Flag
from fractions import Fraction
from typing import Any, Callable, TypeVar, overload
from uuid import UUID

import numpy as np

from .converters import convert_from_text, resolve_converter
from .errors import ConversionFailure, NullArgumentError, ParseFailure
from .options import DEFAULT_OPTIONS, INVARIANT, FormatOptions, FormatProvider
from .timespan import parse_timedelta

LOG = logging.getLogger(__name__)

_T = TypeVar("_T")

_INTEGER_RE = re.compile(r"^[+-]?[0-9]+$")
_REAL_RE = re.compile(
    r"^[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)$",
    re.IGNORECASE,
)
_FLAG_SPLIT_RE = re.compile(r"\s*[|,]\s*")

_UNION_TYPES: tuple[Any, ...] = (typing.Union, getattr(types, "UnionType", typing.Union))


def _unwrap_optional(target: Any) -> tuple[Any, bool]:
    """Return ``(T, True)`` for ``Optional[T]`` / ``T | None``, else ``(target, False)``."""
    if typing.get_origin(target) in _UNION_TYPES:
        args = [arg for arg in typing.get_args(target) if arg is not type(None)]
        if len(args) == 1 and len(typing.get_args(target)) == 2:
            return args[0], True
    return target, False


def _is_subclass(target: Any, base: type | tuple[type, ...]) -> bool:
    return isinstance(target, type) and issubclass(target, base)


def _normalize_real(text: str, provider: FormatProvider) -> str:
    value = text.strip()
    if provider.group_separator:
        value = value.replace(provider.group_separator, "")
    if provider.decimal_separator != ".":
        value = value.replace(provider.decimal_separator, ".")
    if not _REAL_RE.match(value):
        raise ParseFailure(text, "real number")
    return value


def _parse_int(text: str) -> int:
    value = text.strip()
    if not _INTEGER_RE.match(value):
        raise ParseFailure(text, "int")
    return int(value)


def _parse_numpy_int(text: str, target: type) -> Any:
    value = _parse_int(text)
    bounds = np.iinfo(target)
    if value < bounds.min or value > bounds.max:
        raise ParseFailure(text, target.__name__)
    return target(value)


def _parse_bool(text: str, provider: FormatProvider) -> bool:
    value = text.strip().lower()
    if value in provider.true_literals:
        return True
    if value in provider.false_literals:
        return False
    raise ParseFailure(text, "bool")


def _parse_enum(text: str, target: type[Enum]) -> Enum:
    value = text.strip()
    members = target.__members__
    if value in members:
        return members[value]
    folded = {name.lower(): member for name, member in members.items()}
    if value.lower() in folded:
        return folded[value.lower()]
    if issubclass(target, Flag) and _FLAG_SPLIT_RE.search(value):
        result = target(0)
        for part in _FLAG_SPLIT_RE.split(value):
            result |= _parse_enum(part, target)
        return result
    if _INTEGER_RE.match(value):
        return target(int(value))
    raise ParseFailure(text, target.__name__)


def _strptime_any(text: str, formats: tuple[str, ...]) -> datetime | None:
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _parse_datetime(text: str, provider: FormatProvider) -> datetime:
    value = text.strip()
    parsed = _strptime_any(value, provider.date_time_formats)
    if parsed is not None:
        return parsed
    return datetime.fromisoformat(value)


def _parse_date(text: str, provider: FormatProvider) -> date:
    value = text.strip()
    parsed = _strptime_any(value, provider.date_formats)
    if parsed is not None:
        return parsed.date()
    return date.fromisoformat(value)


def _parse_time(text: str, provider: FormatProvider) -> time:
    value = text.strip()
    parsed = _strptime_any(value, provider.time_formats)
    if parsed is not None:
        return parsed.time()
    return time.fromisoformat(value)


def _parse_complex(text: str) -> complex:
    return complex(text.strip().replace(" ", ""))


def _resolve_parser(target: Any, provider: FormatProvider) -> Callable[[str], Any]:
    """Return the text parser for `target`; raise ParseFailure when unsupported."""
    if not isinstance(target, type):
        raise ParseFailure(str(target), "supported type")
    if _is_subclass(target, Enum):
        return lambda text: _parse_enum(text, target)
    if issubclass(target, str):
        return target
    if issubclass(target, (bool, np.bool_)):
        return lambda text: target(_parse_bool(text, provider))
    if issubclass(target, np.integer):
        return lambda text: _parse_numpy_int(text, target)
    if issubclass(target, int):
        return lambda text: target(_parse_int(text))
    if issubclass(target, np.complexfloating) or issubclass(target, complex):
        return lambda text: target(_parse_complex(text))
    if issubclass(target, (float, np.floating)):
        return lambda text: target(_normalize_real(text, provider))
    if issubclass(target, Decimal):
        return lambda text: target(_normalize_real(text, provider))
    if issubclass(target, Fraction):
        return lambda text: target(text.strip())
    if issubclass(target, datetime):
        return lambda text: _parse_datetime(text, provider)
    if issubclass(target, date):
        return lambda text: _parse_date(text, provider)
    if issubclass(target, time):
        return lambda text: _parse_time(text, provider)
    if issubclass(target, timedelta):
        return parse_timedelta
    if issubclass(target, UUID):
        return lambda text: target(text.strip())
    raise ParseFailure(target.__name__, "supported type")


def _parse_strict(text: str, target: Any, provider: FormatProvider) -> Any:
    inner, optional = _unwrap_optional(target)
    if optional:
        if not text.strip():
            return None
        return _parse_strict(text, inner, provider)

    if isinstance(target, type):
        converter = resolve_converter(target)
        if converter is not None and converter.can_convert_from(str):
            try:
                return convert_from_text(converter, text)
            except ConversionFailure as exc:
                raise ParseFailure(text, target.__name__) from exc

    parser = _resolve_parser(target, provider)
    try:
        return parser(text)
    except ParseFailure:
        raise
    except (ValueError, TypeError, ArithmeticError, InvalidOperation) as exc:
        raise ParseFailure(text, getattr(target, "__name__", str(target))) from exc


def default_value(target: Any) -> Any:
    """Return the zero/default value used when text cannot be parsed as `target`."""
    _, optional = _unwrap_optional(target)
    if optional or not isinstance(target, type):
        return None
    if issubclass(target, Enum):
        try:
            return target(0)
        except ValueError:
            return next(iter(target), None)
    if issubclass(target, (bool, np.bool_)):
        return target(False)
    if issubclass(target, str):
        return target("")
    if issubclass(target, (int, float, complex, Decimal, Fraction, np.number)):
        return target(0)
    if issubclass(target, datetime):
        return datetime.min
    if issubclass(target, date):
        return date.min
    if issubclass(target, time):
        return time.min
    if issubclass(target, timedelta):
        return timedelta(0)
    if issubclass(target, UUID):
        return UUID(int=0)
    try:
        return target()
    except Exception:
        return None


@overload
def parse(text: str, target_type: type[_T], options: FormatOptions | None = None) -> _T: ...


@overload
def parse(text: str, target_type: Any, options: FormatOptions | None = None) -> Any: ...


def parse(text: str, target_type: Any, options: FormatOptions | None = None) -> Any:
    """Parse `text` as `target_type` using the options' format provider.

    Raises NullArgumentError when `text` or `target_type` is None. Text that
    cannot be parsed yields `default_value(target_type)`.
    """
    if text is None:
        raise NullArgumentError("text")
    if target_type is None:
        raise NullArgumentError("target_type")
    provider = (options if options is not None else DEFAULT_OPTIONS).provider
    try:
        return _parse_strict(text, target_type, provider)
    except ParseFailure as exc:
        LOG.debug("Falling back to default value: %s", exc)
        return default_value(target_type)


def probe_parse(text: str | None, target_type: Any, provider: FormatProvider | None = None) -> bool:
    """Return true when `text` parses as `target_type` without falling back."""
    if not text or target_type is None:
        return False
    try:
        _parse_strict(text, target_type, provider if provider is not None else INVARIANT)
    except ParseFailure:
        return False
    return True
