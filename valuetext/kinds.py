"""Classification of runtime values into render kinds."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, time, timedelta
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any
from uuid import UUID

import numpy as np

from .converters import resolve_converter

_PRIMITIVE_TYPES = (int, float, complex, Decimal, Fraction, np.number, UUID)
_TEMPORAL_TYPES = (date, time, timedelta)


class ValueKind(str, Enum):
    """Tag computed once per value before dispatching to a renderer."""

    NULL = "null"
    TEXT = "text"
    BOOLEAN = "boolean"
    CONVERTIBLE = "convertible"
    PRIMITIVE = "primitive"
    TEMPORAL = "temporal"
    ENUMERATED = "enumerated"
    NULLABLE = "nullable"
    ARRAY = "array"
    MAP = "map"
    SEQUENCE = "sequence"
    OPAQUE = "opaque"


def is_nullable_wrapper(value: Any) -> bool:
    """Return true for numpy's masked constant and zero-dimensional arrays."""
    if value is np.ma.masked:
        return True
    return isinstance(value, np.ndarray) and value.ndim == 0


def classify(value: Any) -> ValueKind:
    """Return the render kind for `value`."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, (bool, np.bool_)):
        return ValueKind.BOOLEAN
    if resolve_converter(type(value)) is not None:
        return ValueKind.CONVERTIBLE
    # IntEnum/StrEnum members are also ints/strs; the symbolic name wins.
    if isinstance(value, Enum):
        return ValueKind.ENUMERATED
    if isinstance(value, _PRIMITIVE_TYPES):
        return ValueKind.PRIMITIVE
    if isinstance(value, _TEMPORAL_TYPES):
        return ValueKind.TEMPORAL
    if is_nullable_wrapper(value):
        return ValueKind.NULLABLE
    if isinstance(value, np.ndarray) and value.ndim > 1:
        return ValueKind.ARRAY
    if isinstance(value, Mapping):
        return ValueKind.MAP
    if isinstance(value, Iterable):
        return ValueKind.SEQUENCE
    return ValueKind.OPAQUE
