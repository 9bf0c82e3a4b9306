"""Locale-invariant rendering of arbitrary runtime values.

`render` is total: whatever it is given, it returns text and never raises.
Each value is classified once (see `valuetext.kinds`) and dispatched to the
matching renderer. Nested collections recurse back into `render` with an
increased depth so self-referential structures stop at the depth sentinel.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Callable, Iterable

import numpy as np

from .converters import try_convert
from .errors import NullArgumentError
from .kinds import ValueKind, classify
from .options import DEFAULT_OPTIONS, MAX_DEPTH_SENTINEL, FormatOptions
from .sequences import render_array, render_mapping, render_sequence
from .timespan import format_timedelta

LOG = logging.getLogger(__name__)

_STANDARD_NUMERIC_RE = re.compile(r"^(?P<code>[FfNnEeGgPp])(?P<digits>\d{1,2})?$")
_DIGIT_PATTERN_RE = re.compile(r"^(?P<group>#*,[#,]*)?[#0]*0(?:\.(?P<decimals>[0#]+))?$")
_DEFAULT_PRECISION = {"f": 2, "n": 2, "p": 2, "e": 6}
_SINGLE_PRECISION_TYPES = (np.float16, np.float32)


def _numeric_spec(fmt: str) -> str:
    """Translate standard numeric codes (``F2``, ``N0``, ``E3``...) to a format spec.

    Digit patterns such as ``0.00`` and ``#,##0.0`` become fixed-point specs.
    Anything else is assumed to already be a Python format spec.
    """
    pattern = _DIGIT_PATTERN_RE.match(fmt)
    if pattern:
        group = "," if pattern.group("group") else ""
        return f"{group}.{len(pattern.group('decimals') or '')}f"
    match = _STANDARD_NUMERIC_RE.match(fmt)
    if not match:
        return fmt
    code = match.group("code")
    digits = match.group("digits")
    lowered = code.lower()
    precision = int(digits) if digits is not None else _DEFAULT_PRECISION.get(lowered)
    prefix = f".{precision}" if precision is not None else ""
    if lowered == "f":
        return f"{prefix}f"
    if lowered == "n":
        return f",{prefix}f"
    if lowered == "p":
        return f"{prefix}%"
    if lowered == "e":
        return f"{prefix}{code}"
    return f"{prefix}g"


def _format_with(value: Any, fmt: str | None, natural: Callable[[Any], str]) -> str:
    if not fmt:
        return natural(value)
    try:
        return format(value, _numeric_spec(fmt))
    except (TypeError, ValueError) as exc:
        LOG.debug("Format %r not applicable to %s: %s", fmt, type(value).__name__, exc)
        return natural(value)


def _natural_decimal(value: Decimal) -> str:
    return format(value, "f")


def _format_primitive(value: Any, options: FormatOptions) -> str:
    if isinstance(value, Decimal):
        return _format_with(value, options.decimal_format, _natural_decimal)
    if isinstance(value, _SINGLE_PRECISION_TYPES):
        return _format_with(value, options.float_format, str)
    if isinstance(value, (float, complex, np.inexact)):
        return _format_with(value, options.double_format, str)
    return str(value)


def _format_offset(value: datetime) -> str:
    offset = value.utcoffset()
    if offset is None:
        return ""
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(offset) // timedelta(minutes=1)
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


_DATE_TOKENS = {
    "yyyy": "%Y",
    "yy": "%y",
    "MMMM": "%B",
    "MMM": "%b",
    "MM": "%m",
    "dddd": "%A",
    "ddd": "%a",
    "dd": "%d",
    "HH": "%H",
    "hh": "%I",
    "mm": "%M",
    "ss": "%S",
    "ffffff": "%f",
    "tt": "%p",
    "zzz": "%:z",
}
_DATE_TOKEN_RE = re.compile("'[^']*'|" + "|".join(sorted(_DATE_TOKENS, key=len, reverse=True)))


def _strftime_pattern(fmt: str) -> str:
    """Translate ``yyyy-MM-dd HH:mm:ss`` style patterns to strftime directives.

    Patterns that already contain ``%`` are used unchanged. Quoted text is
    copied literally.
    """
    if "%" in fmt:
        return fmt

    def replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token.startswith("'"):
            return token[1:-1]
        return _DATE_TOKENS[token]

    return _DATE_TOKEN_RE.sub(replace, fmt)


def _strftime(value: date | time, fmt: str) -> str:
    fmt = _strftime_pattern(fmt)
    if "%:z" in fmt:
        offset = _format_offset(value) if isinstance(value, datetime) else ""
        fmt = fmt.replace("%:z", offset)
    return value.strftime(fmt)


def _format_temporal(value: Any, options: FormatOptions) -> str:
    if isinstance(value, timedelta):
        try:
            return format_timedelta(value, options.time_span_format)
        except (KeyError, IndexError, ValueError) as exc:
            LOG.debug("Time span format %r failed: %s", options.time_span_format, exc)
            return format_timedelta(value)
    if isinstance(value, datetime):
        if value.utcoffset() is not None:
            return _strftime(value, options.date_time_offset_format)
        return _strftime(value, options.date_time_format)
    if isinstance(value, date):
        return _strftime(value, options.date_format)
    return _strftime(value, options.time_format)


def _describe(value: Any) -> str:
    """Last-resort self-description; empty text when none is usable."""
    try:
        text = str(value)
    except Exception as exc:
        LOG.debug("str() failed for %s: %s", type(value).__name__, exc)
        return ""
    return text if isinstance(text, str) else ""


def _render_convertible(value: Any, options: FormatOptions, depth: int) -> str:
    text = try_convert(value)
    if text is None:
        return _describe(value)
    return text


def _render_enumerated(value: Any, options: FormatOptions, depth: int) -> str:
    name = value.name
    return name if name else _describe(value)


def _render_nullable(value: Any, options: FormatOptions, depth: int) -> str:
    if value is np.ma.masked:
        return options.null_string
    return render(value[()], options, depth)


_RENDERERS: dict[ValueKind, Callable[[Any, FormatOptions, int], str]] = {
    ValueKind.NULL: lambda value, options, depth: options.null_string,
    ValueKind.TEXT: lambda value, options, depth: str.__str__(value),
    ValueKind.BOOLEAN: lambda value, options, depth: "True" if value else "False",
    ValueKind.CONVERTIBLE: _render_convertible,
    ValueKind.PRIMITIVE: lambda value, options, depth: _format_primitive(value, options),
    ValueKind.TEMPORAL: lambda value, options, depth: _format_temporal(value, options),
    ValueKind.ENUMERATED: _render_enumerated,
    ValueKind.NULLABLE: _render_nullable,
    ValueKind.ARRAY: lambda value, options, depth: render_array(value, options, depth, render),
    ValueKind.MAP: lambda value, options, depth: render_mapping(value, options, depth, render),
    ValueKind.SEQUENCE: lambda value, options, depth: render_sequence(value, options, depth, render),
    ValueKind.OPAQUE: lambda value, options, depth: _describe(value),
}


def render(value: Any, options: FormatOptions | None = None, depth: int = 0) -> str:
    """Render `value` as locale-invariant text.

    Never raises. Once `depth` reaches ``options.max_nesting_depth`` the
    result is ``"<max nesting depth reached>"`` without looking at `value`.
    """
    if options is None:
        options = DEFAULT_OPTIONS
    if depth >= options.max_nesting_depth:
        return MAX_DEPTH_SENTINEL
    try:
        kind = classify(value)
    except Exception as exc:
        LOG.debug("Cannot classify %s: %s", type(value).__name__, exc)
        kind = ValueKind.OPAQUE
    try:
        return _RENDERERS[kind](value, options, depth)
    except RecursionError:
        return MAX_DEPTH_SENTINEL
    except Exception as exc:
        LOG.debug("Rendering %s as %s failed: %s", type(value).__name__, kind.value, exc)
        return _describe(value)


def safe_to_string(value: Any, default: str = "", options: FormatOptions | None = None) -> str:
    """Render `value`, using `default` for None and for unusable output."""
    default = default if default is not None else ""
    base = options if options is not None else DEFAULT_OPTIONS
    text = render(value, base.model_copy(update={"null_string": default}))
    return text or default


def join_values(
    separator: str,
    items: Iterable[Any],
    converter: Callable[[Any], str] | None = None,
    options: FormatOptions | None = None,
) -> str:
    """Join `items` with `separator`, rendering each with `converter` or `safe_to_string`."""
    if separator is None:
        raise NullArgumentError("separator")
    if items is None:
        raise NullArgumentError("items")
    if converter is None:
        return separator.join(safe_to_string(item, options=options) for item in items)
    return separator.join(converter(item) for item in items)
