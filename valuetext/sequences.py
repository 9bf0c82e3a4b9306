"""Rendering of sequences, mappings and multi-dimensional arrays.

Element rendering is delegated back to the caller through `render_item`, so
this module only decides layout, truncation and depth bookkeeping.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sized
from itertools import islice
from typing import Any, Callable

import numpy as np

from .options import MAX_DEPTH_SENTINEL, FormatOptions

RenderItem = Callable[[Any, FormatOptions, int], str]

TRUNCATION_MARKER = "..."
UNSIZED_SCAN_LIMIT = 10_000


def _count_suffix(total: int, options: FormatOptions, exact: bool = True) -> str:
    if not options.show_collection_count:
        return ""
    return f" ({total} items)" if exact else f" ({total}+ items)"


def _take(items: Iterable[Any], limit: int) -> tuple[list[Any], int, bool]:
    """Return up to `limit` leading items, the item count and whether it is exact.

    Iterables without a usable length are read at most
    ``max(limit, UNSIZED_SCAN_LIMIT)`` items deep; past that the count is a
    lower bound.
    """
    if isinstance(items, Sized):
        try:
            total = len(items)
        except (TypeError, OverflowError):
            total = None
        if total is not None:
            return list(islice(iter(items), limit)), total, True
    bound = max(limit, UNSIZED_SCAN_LIMIT)
    head: list[Any] = []
    total = 0
    for item in islice(items, bound + 1):
        if total < limit:
            head.append(item)
        total += 1
    if total > bound:
        return head, bound, False
    return head, total, True


def render_sequence(items: Iterable[Any], options: FormatOptions, depth: int, render_item: RenderItem) -> str:
    """Render an iterable as ``[a, b, ...] (N items)``."""
    limit = options.max_collection_items
    head, total, exact = _take(items, limit)
    if total == 0:
        return "[]"
    parts = [render_item(item, options, depth + 1) for item in head]
    if total > limit or not exact:
        parts.append(TRUNCATION_MARKER)
    return "[" + options.collection_separator.join(parts) + "]" + _count_suffix(total, options, exact)


def render_mapping(mapping: Mapping[Any, Any], options: FormatOptions, depth: int, render_item: RenderItem) -> str:
    """Render a mapping as ``{k: v, ...} (N items)``."""
    total = len(mapping)
    if total == 0:
        return "{}"
    limit = options.max_collection_items
    kv_sep = options.dictionary_key_value_separator
    parts = [
        f"{render_item(key, options, depth + 1)}{kv_sep}{render_item(value, options, depth + 1)}"
        for key, value in islice(mapping.items(), limit)
    ]
    if total > limit:
        parts.append(TRUNCATION_MARKER)
    return "{" + options.collection_separator.join(parts) + "}" + _count_suffix(total, options)


def _render_rank(array: np.ndarray, options: FormatOptions, depth: int, render_item: RenderItem) -> str:
    limit = options.max_collection_items
    length = array.shape[0]
    if array.ndim == 1:
        parts = [render_item(array[index], options, depth) for index in range(min(length, limit))]
    else:
        # Each rank transition consumes one depth unit.
        if depth + 1 >= options.max_nesting_depth:
            return MAX_DEPTH_SENTINEL
        parts = [_render_rank(array[index], options, depth + 1, render_item) for index in range(min(length, limit))]
    if length > limit:
        parts.append(TRUNCATION_MARKER)
    return "[" + options.collection_separator.join(parts) + "]"


def array_dimensions(array: np.ndarray) -> str:
    """Describe an array shape, e.g. ``2D 2×3, 6 items``."""
    dims = "×".join(str(size) for size in array.shape)
    return f"{array.ndim}D {dims}, {array.size} items"


def render_array(array: np.ndarray, options: FormatOptions, depth: int, render_item: RenderItem) -> str:
    """Render a multi-dimensional array rank by rank."""
    body = _render_rank(array, options, depth, render_item)
    if options.show_array_dimensions and body != MAX_DEPTH_SENTINEL:
        body = f"{body} ({array_dimensions(array)})"
    return body
