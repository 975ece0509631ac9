"""Parse Mongo-shell style pipeline literals into typed stage models.

Accepts the declarative form used in playground scripts::

    [
        {"$match": {"isActive": True}},
        {"$group": {"_id": "$favoriteFruit", "count": {"$sum": 1}}},
        {"$sort": {"count": -1}},
        {"$limit": 5},
    ]

Anything structurally wrong raises ConfigurationError before execution.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from docpipe.core.exceptions import ConfigurationError
from docpipe.core.types import StageLiteral
from docpipe.models import accumulators as acc
from docpipe.models import predicates as pred
from docpipe.models import stages as st
from docpipe.models.expressions import Constant, DatePart, DateUnit, FieldRef, IfNull, Size
from docpipe.models.pipeline import Pipeline

_DATE_OPERATORS = {
    "$year": DateUnit.YEAR,
    "$month": DateUnit.MONTH,
    "$dayOfMonth": DateUnit.DAY_OF_MONTH,
}

_ACCUMULATORS = {
    "$sum": acc.Sum,
    "$avg": acc.Avg,
    "$push": acc.Push,
    "$addToSet": acc.AddToSet,
    "$min": acc.Min,
    "$max": acc.Max,
}

_COMPARISONS = {"$gt": "gt", "$gte": "gte", "$lt": "lt", "$lte": "lte"}


def _is_operator_doc(value: Any) -> bool:
    return isinstance(value, Mapping) and bool(value) and all(
        isinstance(k, str) and k.startswith("$") for k in value
    )


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

def parse_expression(value: Any):
    """``"$a.b"`` is a field reference, ``{"$op": ...}`` an operator, anything else a constant."""
    if isinstance(value, str) and value.startswith("$"):
        if value.startswith("$$"):
            raise ConfigurationError(f"variables are not supported: {value!r}")
        return FieldRef(path=value[1:])
    if not _is_operator_doc(value):
        return Constant(value=value)
    if len(value) != 1:
        raise ConfigurationError(f"expression must have exactly one operator: {dict(value)!r}")

    op, arg = next(iter(value.items()))
    if op == "$literal":
        return Constant(value=arg)
    if op == "$size":
        return Size(of=parse_expression(arg))
    if op == "$ifNull":
        if not isinstance(arg, Sequence) or isinstance(arg, str) or len(arg) != 2:
            raise ConfigurationError("$ifNull takes [expression, replacement]")
        return IfNull(expr=parse_expression(arg[0]), default=parse_expression(arg[1]))
    if op in _DATE_OPERATORS:
        if isinstance(arg, Mapping) and "date" in arg:
            arg = arg["date"]
        return DatePart(unit=_DATE_OPERATORS[op], of=parse_expression(arg))
    raise ConfigurationError(f"unsupported expression operator {op!r}")


# ---------------------------------------------------------------------------
# Match conditions
# ---------------------------------------------------------------------------

def parse_condition(path: str, spec: Any) -> list[pred.FieldCondition]:
    """Turn ``{path: spec}`` from a $match document into field conditions."""
    if path.startswith("$"):
        raise ConfigurationError(f"unsupported query operator {path!r}")
    if not _is_operator_doc(spec):
        return [pred.FieldCondition(path=path, predicate=pred.Eq(value=spec))]

    ops = dict(spec)
    options = ops.pop("$options", "")
    if options and "$regex" not in ops:
        raise ConfigurationError("$options requires $regex")

    conditions = []
    for op, arg in ops.items():
        if op == "$eq":
            predicate = pred.Eq(value=arg)
        elif op == "$ne":
            predicate = pred.Ne(value=arg)
        elif op in ("$all", "$in"):
            if not isinstance(arg, list):
                raise ConfigurationError(f"{op} requires a list, got {type(arg).__name__}")
            predicate = pred.All(values=arg) if op == "$all" else pred.In(values=arg)
        elif op == "$regex":
            predicate = pred.Regex(pattern=arg, options=options)
        elif op in _COMPARISONS:
            predicate = pred.Compare(op=_COMPARISONS[op], value=arg)
        elif op == "$exists":
            predicate = pred.Exists(value=bool(arg))
        else:
            raise ConfigurationError(f"unsupported query operator {op!r} on {path!r}")
        conditions.append(pred.FieldCondition(path=path, predicate=predicate))
    return conditions


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def _parse_match(spec: Any) -> st.Match:
    if not isinstance(spec, Mapping):
        raise ConfigurationError("$match requires a document")
    clauses = []
    for path, condition in spec.items():
        clauses.extend(parse_condition(path, condition))
    return st.Match(clauses=clauses)


def _parse_group(spec: Any) -> st.Group:
    if not isinstance(spec, Mapping) or "_id" not in spec:
        raise ConfigurationError("$group requires a document with an _id")
    raw_key = spec["_id"]
    if isinstance(raw_key, Mapping) and raw_key and not _is_operator_doc(raw_key):
        key = {name: parse_expression(v) for name, v in raw_key.items()}
    else:
        key = parse_expression(raw_key)

    accumulators = {}
    for name, acc_spec in spec.items():
        if name == "_id":
            continue
        if not _is_operator_doc(acc_spec) or len(acc_spec) != 1:
            raise ConfigurationError(f"group field {name!r} must be a single accumulator")
        op, arg = next(iter(acc_spec.items()))
        if op not in _ACCUMULATORS:
            raise ConfigurationError(f"unsupported accumulator {op!r} for {name!r}")
        accumulators[name] = _ACCUMULATORS[op](of=parse_expression(arg))
    return st.Group(key=key, accumulators=accumulators)


def _parse_sort(spec: Any) -> st.Sort:
    if not isinstance(spec, Mapping):
        raise ConfigurationError("$sort requires a document")
    return st.Sort(keys=[st.SortKey(path=p, direction=d) for p, d in spec.items()])


def _parse_limit(spec: Any) -> st.Limit:
    if isinstance(spec, bool) or not isinstance(spec, int):
        raise ConfigurationError(f"$limit requires an integer, got {spec!r}")
    return st.Limit(n=spec)


def _parse_count(spec: Any) -> st.Count:
    if not isinstance(spec, str):
        raise ConfigurationError("$count requires a field name")
    return st.Count(field=spec)


def _parse_project(spec: Any) -> st.Project:
    if not isinstance(spec, Mapping):
        raise ConfigurationError("$project requires a document")
    fields = []
    for path, flag in spec.items():
        if flag is True or (type(flag) is int and flag == 1):
            fields.append(path)
        elif path == "_id" and (flag is False or (type(flag) is int and flag == 0)):
            continue
        else:
            raise ConfigurationError(f"$project supports inclusion only; got {path!r}: {flag!r}")
    return st.Project(fields=fields)


def _parse_unwind(spec: Any) -> st.Unwind:
    if isinstance(spec, Mapping):
        if spec.get("preserveNullAndEmptyArrays"):
            raise ConfigurationError("preserveNullAndEmptyArrays is not supported")
        spec = spec.get("path")
    if not isinstance(spec, str) or not spec.startswith("$"):
        raise ConfigurationError(f"$unwind requires a '$field' path, got {spec!r}")
    return st.Unwind(path=spec[1:])


def _parse_add_fields(spec: Any) -> st.AddFields:
    if not isinstance(spec, Mapping):
        raise ConfigurationError("$addFields requires a document")
    return st.AddFields(fields={path: parse_expression(v) for path, v in spec.items()})


_STAGE_PARSERS = {
    "$match": _parse_match,
    "$group": _parse_group,
    "$sort": _parse_sort,
    "$limit": _parse_limit,
    "$count": _parse_count,
    "$project": _parse_project,
    "$unwind": _parse_unwind,
    "$addFields": _parse_add_fields,
    "$set": _parse_add_fields,
}


def parse_stage(literal: StageLiteral):
    """Parse one ``{"$stage": spec}`` document."""
    if not isinstance(literal, Mapping) or len(literal) != 1:
        raise ConfigurationError("each stage must be a document with exactly one key")
    name, spec = next(iter(literal.items()))
    parser = _STAGE_PARSERS.get(name)
    if parser is None:
        raise ConfigurationError(f"unknown stage {name!r}")
    return parser(spec)


def parse_pipeline(
    literals: Sequence[StageLiteral], name: str = "", description: str = ""
) -> Pipeline:
    """Parse a list of stage documents, tagging errors with the stage index."""
    if isinstance(literals, (str, bytes, Mapping)) or not isinstance(literals, Sequence):
        raise ConfigurationError("a pipeline must be a list of stage documents")
    stages = []
    for index, literal in enumerate(literals):
        try:
            stages.append(parse_stage(literal))
        except ConfigurationError as exc:
            kind = next(iter(literal), None) if isinstance(literal, Mapping) else None
            raise ConfigurationError(str(exc), stage_index=index, stage_kind=kind) from exc
    return Pipeline(name=name, description=description, stages=stages)
