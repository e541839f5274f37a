"""Filter AST evaluator and ordering helpers for documents held in memory."""

from __future__ import annotations

import datetime
import math
from collections.abc import Mapping, Sequence
from typing import Any

from ..document.escape import unescape_field_path
from ..document.paths import PATH_MISSING, get_path
from .ast import (
    AllFilter,
    AndFilter,
    EqFilter,
    ExistsFilter,
    Filter,
    GteFilter,
    GtFilter,
    InFilter,
    LteFilter,
    LtFilter,
    NeFilter,
    NinFilter,
    NotFilter,
    OrFilter,
    SizeFilter,
    TrueFilter,
)


def resolve(document: Mapping[str, Any], path: str) -> Any:
    """Resolve an escaped field path, returning ``PATH_MISSING`` on a miss."""
    return get_path(document, unescape_field_path(path))


def matches(document: Mapping[str, Any], query: Filter) -> bool:
    """Return whether ``document`` satisfies ``query``."""

    if isinstance(query, TrueFilter):
        return True
    if isinstance(query, AndFilter):
        return all(matches(document, child) for child in query.args)
    if isinstance(query, OrFilter):
        return any(matches(document, child) for child in query.args)
    if isinstance(query, NotFilter):
        return not matches(document, query.arg)

    actual = resolve(document, query.path)
    if isinstance(query, ExistsFilter):
        return actual is not PATH_MISSING
    if isinstance(query, EqFilter):
        return _matches_value(actual, query.value)
    if isinstance(query, NeFilter):
        return not _matches_value(actual, query.value)
    if isinstance(query, InFilter):
        return any(_matches_value(actual, value) for value in query.values)
    if isinstance(query, NinFilter):
        return not any(_matches_value(actual, value) for value in query.values)
    if isinstance(query, AllFilter):
        return isinstance(actual, list) and all(
            any(_equal(item, value) for item in actual) for value in query.values
        )
    if isinstance(query, SizeFilter):
        return isinstance(actual, list) and len(actual) == query.size
    if isinstance(query, LtFilter):
        return _compare(actual, query.value, lambda cmp: cmp < 0)
    if isinstance(query, LteFilter):
        return _compare(actual, query.value, lambda cmp: cmp <= 0)
    if isinstance(query, GtFilter):
        return _compare(actual, query.value, lambda cmp: cmp > 0)
    if isinstance(query, GteFilter):
        return _compare(actual, query.value, lambda cmp: cmp >= 0)

    return False


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) and _is_number(right):
        return left == right
    if type(left) is not type(right) and not (
        isinstance(left, Mapping) and isinstance(right, Mapping)
    ):
        return False
    return left == right


def _matches_value(actual: Any, expected: Any) -> bool:
    if actual is PATH_MISSING:
        return False
    if _equal(actual, expected):
        return True
    if isinstance(actual, list) and not isinstance(expected, list):
        return any(_equal(item, expected) for item in actual)
    return False


def _ordered(left: Any, right: Any) -> int | None:
    if _is_number(left) and _is_number(right):
        pass
    elif isinstance(left, str) and isinstance(right, str):
        pass
    elif isinstance(left, datetime.datetime) and isinstance(right, datetime.datetime):
        pass
    elif isinstance(left, bool) and isinstance(right, bool):
        pass
    else:
        return None
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def _compare(actual: Any, expected: Any, accept) -> bool:
    if actual is PATH_MISSING:
        return False
    cmp = _ordered(actual, expected)
    if cmp is None:
        return False
    return accept(cmp)


_TYPE_RANK = {
    "null": 0,
    "number": 1,
    "string": 2,
    "object": 3,
    "array": 4,
    "boolean": 5,
    "date": 6,
}


def sort_key(value: Any) -> tuple[int, Any]:
    """Total ordering key across mixed JSON types (missing sorts with null)."""
    if value is PATH_MISSING or value is None:
        return (_TYPE_RANK["null"], 0)
    if isinstance(value, bool):
        return (_TYPE_RANK["boolean"], value)
    if _is_number(value):
        return (_TYPE_RANK["number"], value)
    if isinstance(value, str):
        return (_TYPE_RANK["string"], value)
    if isinstance(value, datetime.datetime):
        return (_TYPE_RANK["date"], value.timestamp())
    if isinstance(value, Mapping):
        return (_TYPE_RANK["object"], repr(sorted(value.items(), key=repr)))
    if isinstance(value, list | tuple):
        return (_TYPE_RANK["array"], [sort_key(item) for item in value])
    return (_TYPE_RANK["string"], str(value))


def cosine_similarity(left: Sequence[float], right: Sequence[float]) -> float:
    """Cosine similarity rescaled to ``[0, 1]``, as reported by the Data API."""
    if len(left) != len(right):
        raise ValueError(
            f"vector dimensions differ: {len(left)} != {len(right)}"
        )
    dot = sum(a * b for a, b in zip(left, right))
    norm = math.sqrt(sum(a * a for a in left)) * math.sqrt(sum(b * b for b in right))
    if norm == 0:
        return 0.0
    return (1.0 + dot / norm) / 2.0


__all__ = [
    "cosine_similarity",
    "matches",
    "resolve",
    "sort_key",
]
