"""Typed builders for writing pipelines in Python.

    pipeline(
        group("favoriteFruit", count=sum_(1)),
        sort(count=-1),
        limit(5),
    )

Strings given where a field is expected are paths (a leading ``$`` is
accepted and dropped); numbers and other values become constants.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from docpipe.models import accumulators as acc
from docpipe.models import predicates as pred
from docpipe.models import stages as st
from docpipe.models.expressions import Constant, DatePart, DateUnit, FieldRef, IfNull, Size
from docpipe.models.literals import parse_condition
from docpipe.models.pipeline import Pipeline

_PREDICATE_TYPES = (pred.Eq, pred.Ne, pred.All, pred.In, pred.Regex, pred.Compare, pred.Exists)


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

def field(path: str) -> FieldRef:
    return FieldRef(path=path.removeprefix("$"))


def lit(value: Any) -> Constant:
    return Constant(value=value)


def _expr(value: Any):
    if isinstance(value, BaseModel):
        return value
    if isinstance(value, str):
        return field(value)
    return lit(value)


def size(of: Any) -> Size:
    return Size(of=_expr(of))


def if_null(expr: Any, default: Any) -> IfNull:
    default = default if isinstance(default, BaseModel) else lit(default)
    return IfNull(expr=_expr(expr), default=default)


def year(of: Any) -> DatePart:
    return DatePart(unit=DateUnit.YEAR, of=_expr(of))


def month(of: Any) -> DatePart:
    return DatePart(unit=DateUnit.MONTH, of=_expr(of))


def day_of_month(of: Any) -> DatePart:
    return DatePart(unit=DateUnit.DAY_OF_MONTH, of=_expr(of))


# ---------------------------------------------------------------------------
# Accumulators
# ---------------------------------------------------------------------------

def sum_(of: Any = 1) -> acc.Sum:
    return acc.Sum(of=_expr(of))


def avg(of: Any, fallback: float | None = None) -> acc.Avg:
    return acc.Avg(of=_expr(of), fallback=fallback)


def push(of: Any) -> acc.Push:
    return acc.Push(of=_expr(of))


def add_to_set(of: Any) -> acc.AddToSet:
    return acc.AddToSet(of=_expr(of))


def min_(of: Any) -> acc.Min:
    return acc.Min(of=_expr(of))


def max_(of: Any) -> acc.Max:
    return acc.Max(of=_expr(of))


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def all_(values: list[Any]) -> pred.All:
    return pred.All(values=list(values))


def in_(values: list[Any]) -> pred.In:
    return pred.In(values=list(values))


def regex(pattern: str, options: str = "") -> pred.Regex:
    return pred.Regex(pattern=pattern, options=options)


def ne(value: Any) -> pred.Ne:
    return pred.Ne(value=value)


def gt(value: Any) -> pred.Compare:
    return pred.Compare(op="gt", value=value)


def gte(value: Any) -> pred.Compare:
    return pred.Compare(op="gte", value=value)


def lt(value: Any) -> pred.Compare:
    return pred.Compare(op="lt", value=value)


def lte(value: Any) -> pred.Compare:
    return pred.Compare(op="lte", value=value)


def exists(value: bool = True) -> pred.Exists:
    return pred.Exists(value=value)


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def match(conditions: Mapping[str, Any] | None = None, **kwargs: Any) -> st.Match:
    """``match({"company.location.country": "USA"}, isActive=True)``.

    Values may be predicate models, Mongo operator documents
    (``{"$all": [...]}``) or plain values for equality.
    """
    clauses = []
    for path, value in {**(conditions or {}), **kwargs}.items():
        if isinstance(value, _PREDICATE_TYPES):
            clauses.append(pred.FieldCondition(path=path, predicate=value))
        else:
            clauses.extend(parse_condition(path, value))
    return st.Match(clauses=clauses)


def group(key: Any = None, **accumulators: Any) -> st.Group:
    """Group by a field path, an expression, a mapping (compound key) or ``None``."""
    if isinstance(key, Mapping):
        group_key = {name: _expr(v) for name, v in key.items()}
    else:
        group_key = _expr(key)
    return st.Group(key=group_key, accumulators=accumulators)


def sort(*keys: tuple[str, int], **kwargs: int) -> st.Sort:
    """``sort(("company.title", 1), count=-1)``; positional keys come first."""
    pairs = [*keys, *kwargs.items()]
    return st.Sort(keys=[st.SortKey(path=p, direction=d) for p, d in pairs])


def limit(n: int) -> st.Limit:
    return st.Limit(n=n)


def count(name: str = "count") -> st.Count:
    return st.Count(field=name)


def project(*fields: str) -> st.Project:
    return st.Project(fields=list(fields))


def unwind(path: str) -> st.Unwind:
    return st.Unwind(path=path.removeprefix("$"))


def add_fields(fields: Mapping[str, Any] | None = None, **kwargs: Any) -> st.AddFields:
    merged = {**(fields or {}), **kwargs}
    return st.AddFields(
        fields={path: v if isinstance(v, BaseModel) else lit(v) for path, v in merged.items()}
    )


def pipeline(*stages: Any, name: str = "", description: str = "") -> Pipeline:
    return Pipeline(name=name, description=description, stages=list(stages))
