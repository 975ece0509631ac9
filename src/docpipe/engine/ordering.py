"""Total ordering across heterogeneous document values.

Values compare by type class first, then by value within the class:
null < numbers < strings < documents < arrays < booleans < datetimes.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from datetime import date, datetime, time, timezone
from typing import Any

_NULL, _NUMBER, _STRING, _DOCUMENT, _ARRAY, _BOOL, _DATE, _OTHER = range(8)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def type_rank(value: Any) -> int:
    if value is None:
        return _NULL
    if isinstance(value, bool):
        return _BOOL
    if is_number(value):
        return _NUMBER
    if isinstance(value, str):
        return _STRING
    if isinstance(value, Mapping):
        return _DOCUMENT
    if isinstance(value, (list, tuple)):
        return _ARRAY
    if isinstance(value, (datetime, date)):
        return _DATE
    return _OTHER


def _timestamp(value: date) -> float:
    # naive datetimes are taken as UTC
    if not isinstance(value, datetime):
        value = datetime.combine(value, time())
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _compare_sequences(a: Sequence, b: Sequence, item_cmp: Callable[[Any, Any], int]) -> int:
    for x, y in zip(a, b):
        c = item_cmp(x, y)
        if c:
            return c
    return _cmp(len(a), len(b))


def _compare_items(x: tuple[str, Any], y: tuple[str, Any]) -> int:
    return _cmp(x[0], y[0]) or compare(x[1], y[1])


def compare(a: Any, b: Any) -> int:
    """Three-way comparison: negative, zero or positive."""
    rank_a, rank_b = type_rank(a), type_rank(b)
    if rank_a != rank_b:
        return _cmp(rank_a, rank_b)
    if rank_a == _NULL:
        return 0
    if rank_a == _DOCUMENT:
        return _compare_sequences(list(a.items()), list(b.items()), _compare_items)
    if rank_a == _ARRAY:
        return _compare_sequences(a, b, compare)
    if rank_a == _DATE:
        return _cmp(_timestamp(a), _timestamp(b))
    if rank_a == _OTHER:
        return _cmp(repr(a), repr(b))
    return _cmp(a, b)


def same_class(a: Any, b: Any) -> bool:
    return type_rank(a) == type_rank(b)
