"""Field resolution over semi-structured documents.

Absence is a first-class value: ``resolve`` returns ``MISSING`` (not None)
when a path does not exist, so an explicit ``null`` stays distinguishable.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class _Missing:
    """Sentinel type for a field path that resolves to nothing."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Missing:
        return self

    def __deepcopy__(self, memo: dict) -> _Missing:
        return self


MISSING: Any = _Missing()


def is_missing(value: Any) -> bool:
    return value is MISSING


def resolve(doc: Any, path: str) -> Any:
    """Value at dotted ``path``; digit segments index into arrays (``tags.1``)."""
    current = doc
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return MISSING
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                return MISSING
            current = current[index]
        else:
            return MISSING
    return current


def assign(doc: Any, path: str, value: Any) -> Any:
    """Copy of ``doc`` with ``path`` set to ``value``.

    Only the containers along the path are copied; ``doc`` is left untouched.
    A digit segment on an array writes that element, padding with None past
    the end. Any other non-mapping intermediate is replaced by a new mapping.
    """
    head, _, rest = path.partition(".")
    out: Any
    if isinstance(doc, list) and head.isdigit():
        index = int(head)
        out = list(doc)
        out.extend([None] * (index + 1 - len(out)))
        key: Any = index
    else:
        out = dict(doc) if isinstance(doc, Mapping) else {}
        key = head
    if rest:
        child = out[key] if isinstance(out, list) else out.get(key)
        value = assign(child if isinstance(child, (Mapping, list)) else {}, rest, value)
    out[key] = value
    return out
