"""Text codec for `datetime.timedelta` durations.

Three named styles are understood:

- ``c`` (constant): ``[-][d.]hh:mm:ss[.ffffff]``
- ``g`` (general short): ``[-][d:]h:mm:ss[.ffffff]``
- ``G`` (general long): ``[-]d:hh:mm:ss.ffffff``

Any other style string is treated as a ``str.format`` template with the fields
``sign``, ``days``, ``hours``, ``minutes``, ``seconds``, ``microseconds`` and
``total_seconds``.
"""

from __future__ import annotations

import re
from datetime import timedelta
from enum import Enum

from .errors import ParseFailure

_MICROS_PER_SECOND = 1_000_000
_MICROS_PER_DAY = 86_400 * _MICROS_PER_SECOND

_CONSTANT_RE = re.compile(
    r"^(?P<sign>-)?(?:(?P<days>\d+)\.)?(?P<hours>\d{1,2}):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2})(?:\.(?P<fraction>\d{1,7}))?)?$"
)
_GENERAL_RE = re.compile(
    r"^(?P<sign>-)?(?:(?P<days>\d+):)?(?P<hours>\d{1,2}):(?P<minutes>\d{1,2}):(?P<seconds>\d{1,2})"
    r"(?:\.(?P<fraction>\d{1,7}))?$"
)
_DAYS_RE = re.compile(r"^(?P<sign>-)?(?P<days>\d+)$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")


class TimeSpanComponent(str, Enum):
    """Unit assumed for a bare integer when parsing a duration."""

    NONE = "none"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"


def _split(value: timedelta) -> tuple[str, int, int, int, int, int]:
    total = value // timedelta(microseconds=1)
    sign = "-" if total < 0 else ""
    days, rest = divmod(abs(total), _MICROS_PER_DAY)
    seconds_total, micros = divmod(rest, _MICROS_PER_SECOND)
    hours, rest_seconds = divmod(seconds_total, 3600)
    minutes, seconds = divmod(rest_seconds, 60)
    return sign, days, hours, minutes, seconds, micros


def format_timedelta(value: timedelta, style: str | None = None) -> str:
    """Render a duration in one of the supported styles (default ``c``)."""
    sign, days, hours, minutes, seconds, micros = _split(value)
    style = style or "c"
    if style == "c":
        head = f"{sign}{days}." if days else sign
        tail = f".{micros:06d}" if micros else ""
        return f"{head}{hours:02d}:{minutes:02d}:{seconds:02d}{tail}"
    if style == "g":
        head = f"{sign}{days}:" if days else sign
        tail = f".{micros:06d}".rstrip("0") if micros else ""
        return f"{head}{hours}:{minutes:02d}:{seconds:02d}{tail}"
    if style == "G":
        return f"{sign}{days}:{hours:02d}:{minutes:02d}:{seconds:02d}.{micros:06d}"
    return style.format(
        sign=sign,
        days=days,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        microseconds=micros,
        total_seconds=value.total_seconds(),
    )


def _from_match(match: re.Match[str], text: str) -> timedelta:
    parts = match.groupdict()
    hours = int(parts.get("hours") or 0)
    minutes = int(parts.get("minutes") or 0)
    seconds = int(parts.get("seconds") or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ParseFailure(text, "timedelta")
    fraction = parts.get("fraction") or ""
    micros = int(fraction[:6].ljust(6, "0")) if fraction else 0
    result = timedelta(
        days=int(parts.get("days") or 0),
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        microseconds=micros,
    )
    return -result if parts.get("sign") else result


def parse_timedelta(text: str, component: TimeSpanComponent = TimeSpanComponent.NONE) -> timedelta:
    """Parse a duration written in the ``c`` or ``g`` style.

    With a `component` other than ``NONE``, a bare integer is read in that
    unit instead of as a day count.
    """
    value = (text or "").strip()
    if not value:
        raise ParseFailure(text, "timedelta")
    if len(value) > 1 and value[0] == "+":
        value = value[1:]

    if component is not TimeSpanComponent.NONE:
        if not _INTEGER_RE.match(value):
            raise ParseFailure(text, "timedelta")
        return timedelta(**{component.value: int(value)})

    for pattern in (_DAYS_RE, _CONSTANT_RE, _GENERAL_RE):
        match = pattern.match(value)
        if match:
            try:
                return _from_match(match, text)
            except OverflowError as exc:
                raise ParseFailure(text, "timedelta") from exc
    raise ParseFailure(text, "timedelta")
