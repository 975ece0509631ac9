"""Stage evaluators: one pure function per stage kind.

Each evaluator takes a stage model and an input document sequence and
returns a new list. Input documents are never mutated; stages that change a
document build a copy with ``fields.assign``.
"""

from __future__ import annotations

import functools
import warnings
from collections.abc import Callable, Hashable
from typing import Any

from docpipe.core.exceptions import EvaluationWarning
from docpipe.core.types import Collection, Document
from docpipe.engine.expressions import evaluate
from docpipe.engine.fields import MISSING, assign, resolve
from docpipe.engine.ordering import compare, is_number
from docpipe.engine.predicates import matches
from docpipe.models import accumulators as acc
from docpipe.models import stages as st


def apply_match(stage: st.Match, docs: Collection) -> list[Document]:
    return [doc for doc in docs if matches(doc, stage.clauses)]


# ---------------------------------------------------------------------------
# Group
# ---------------------------------------------------------------------------

def group_identity(value: Any) -> Hashable:
    """Hashable identity for a group key; 1 and 1.0 share a group, True does not."""
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, dict):
        return ("doc", tuple((k, group_identity(v)) for k, v in value.items()))
    if isinstance(value, list):
        return ("array", tuple(group_identity(v) for v in value))
    try:
        hash(value)
    except TypeError:
        return ("repr", repr(value))
    return value


def _group_key(key: Any, doc: Document) -> Any:
    if isinstance(key, dict):
        parts = {name: evaluate(expr, doc) for name, expr in key.items()}
        return {name: v for name, v in parts.items() if v is not MISSING}
    value = evaluate(key, doc)
    return None if value is MISSING else value


def _numeric_or_fallback(value: Any, fallback: float | None, label: str) -> Any:
    """The value when numeric, else ``fallback`` (which may be None to exclude)."""
    if is_number(value):
        return value
    if value is not MISSING and value is not None:
        warnings.warn(
            f"{label}: non-numeric value {value!r} treated as missing",
            EvaluationWarning,
            stacklevel=4,
        )
    return fallback


def _sum(accumulator: acc.Sum, docs: list[Document]) -> Any:
    total = 0
    for doc in docs:
        value = _numeric_or_fallback(evaluate(accumulator.of, doc), 0, "$sum")
        total += value
    return total


def _avg(accumulator: acc.Avg, docs: list[Document]) -> Any:
    values = []
    for doc in docs:
        value = _numeric_or_fallback(evaluate(accumulator.of, doc), accumulator.fallback, "$avg")
        if value is not None:
            values.append(value)
    if not values:
        return None
    return sum(values) / len(values)


def _push(accumulator: acc.Push, docs: list[Document]) -> list[Any]:
    values = (evaluate(accumulator.of, doc) for doc in docs)
    return [v for v in values if v is not MISSING]


def _add_to_set(accumulator: acc.AddToSet, docs: list[Document]) -> list[Any]:
    seen: dict[Hashable, Any] = {}
    for doc in docs:
        value = evaluate(accumulator.of, doc)
        if value is not MISSING:
            seen.setdefault(group_identity(value), value)
    return list(seen.values())


def _extreme(accumulator: acc.Min | acc.Max, docs: list[Document]) -> Any:
    sign = -1 if isinstance(accumulator, acc.Min) else 1
    best = None
    for doc in docs:
        value = evaluate(accumulator.of, doc)
        if value is MISSING or value is None:
            continue
        if best is None or compare(value, best) * sign > 0:
            best = value
    return best


_ACCUMULATORS: dict[type, Callable[[Any, list[Document]], Any]] = {
    acc.Sum: _sum,
    acc.Avg: _avg,
    acc.Push: _push,
    acc.AddToSet: _add_to_set,
    acc.Min: _extreme,
    acc.Max: _extreme,
}


def apply_group(stage: st.Group, docs: Collection) -> list[Document]:
    buckets: dict[Hashable, tuple[Any, list[Document]]] = {}
    for doc in docs:
        key = _group_key(stage.key, doc)
        bucket = buckets.setdefault(group_identity(key), (key, []))
        bucket[1].append(doc)

    results = []
    for key, members in buckets.values():
        out: Document = {"_id": key}
        for name, accumulator in stage.accumulators.items():
            out[name] = _ACCUMULATORS[type(accumulator)](accumulator, members)
        results.append(out)
    return results


# ---------------------------------------------------------------------------
# Sort / Limit / Count
# ---------------------------------------------------------------------------

def _sort_comparator(keys: list[st.SortKey]) -> Callable[[Document, Document], int]:
    def cmp(a: Document, b: Document) -> int:
        for key in keys:
            va, vb = resolve(a, key.path), resolve(b, key.path)
            if va is MISSING or vb is MISSING:
                # absent sorts first in either direction
                c = int(vb is MISSING) - int(va is MISSING)
            else:
                c = compare(va, vb) * int(key.direction)
            if c:
                return c
        return 0

    return cmp


def apply_sort(stage: st.Sort, docs: Collection) -> list[Document]:
    # sorted() is stable: ties keep their input order
    return sorted(docs, key=functools.cmp_to_key(_sort_comparator(stage.keys)))


def apply_limit(stage: st.Limit, docs: Collection) -> list[Document]:
    if stage.n <= 0:
        return []
    return list(docs[: stage.n])


def apply_count(stage: st.Count, docs: Collection) -> list[Document]:
    return [{stage.field: len(docs)}]


# ---------------------------------------------------------------------------
# Reshaping
# ---------------------------------------------------------------------------

def apply_project(stage: st.Project, docs: Collection) -> list[Document]:
    results = []
    for doc in docs:
        out: Document = {}
        for path in stage.fields:
            value = resolve(doc, path)
            if value is not MISSING:
                out = assign(out, path, value)
        results.append(out)
    return results


def apply_unwind(stage: st.Unwind, docs: Collection) -> list[Document]:
    results = []
    for doc in docs:
        value = resolve(doc, stage.path)
        if isinstance(value, list):
            results.extend(assign(doc, stage.path, element) for element in value)
        elif value is not MISSING and value is not None:
            results.append(doc)
    return results


def apply_add_fields(stage: st.AddFields, docs: Collection) -> list[Document]:
    results = []
    for doc in docs:
        out = doc
        for path, expr in stage.fields.items():
            value = evaluate(expr, doc)
            if value is not MISSING:
                out = assign(out, path, value)
        results.append(out)
    return results


STAGE_EVALUATORS: dict[type, Callable[[Any, Collection], list[Document]]] = {
    st.Match: apply_match,
    st.Group: apply_group,
    st.Sort: apply_sort,
    st.Limit: apply_limit,
    st.Count: apply_count,
    st.Project: apply_project,
    st.Unwind: apply_unwind,
    st.AddFields: apply_add_fields,
}
