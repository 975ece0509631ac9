"""Evaluate Match predicates against resolved field values."""

from __future__ import annotations

import re
from typing import Any

from docpipe.core.exceptions import ConfigurationError
from docpipe.core.types import Document
from docpipe.engine.fields import MISSING, resolve
from docpipe.engine.ordering import compare, same_class
from docpipe.models import predicates as pred


def _scalar_equals(value: Any, target: Any) -> bool:
    # True must not equal 1
    if isinstance(value, bool) or isinstance(target, bool):
        return type(value) is type(target) and value == target
    return value == target


def _equals(value: Any, target: Any) -> bool:
    if value is MISSING:
        return False
    if _scalar_equals(value, target):
        return True
    return isinstance(value, list) and any(_scalar_equals(v, target) for v in value)


def _candidates(value: Any) -> list[Any]:
    """The value itself plus, for arrays, each element."""
    if isinstance(value, list):
        return [value, *value]
    return [value]


def _regex(value: Any, predicate: pred.Regex) -> bool:
    pattern = re.compile(predicate.pattern, predicate.flags)
    return any(isinstance(v, str) and pattern.match(v) for v in _candidates(value))


def _compare(value: Any, predicate: pred.Compare) -> bool:
    target = predicate.value
    for v in _candidates(value):
        if v is MISSING or not same_class(v, target):
            continue
        c = compare(v, target)
        if (
            (predicate.op == "gt" and c > 0)
            or (predicate.op == "gte" and c >= 0)
            or (predicate.op == "lt" and c < 0)
            or (predicate.op == "lte" and c <= 0)
        ):
            return True
    return False


def evaluate_predicate(predicate: Any, value: Any) -> bool:
    """Whether ``value`` (possibly MISSING) satisfies ``predicate``."""
    if isinstance(predicate, pred.Eq):
        return _equals(value, predicate.value)
    if isinstance(predicate, pred.Ne):
        return not _equals(value, predicate.value)
    if isinstance(predicate, pred.All):
        if not isinstance(value, list) or not predicate.values:
            return False
        return all(any(_scalar_equals(v, want) for v in value) for want in predicate.values)
    if isinstance(predicate, pred.In):
        return any(_equals(value, want) for want in predicate.values)
    if isinstance(predicate, pred.Regex):
        return value is not MISSING and _regex(value, predicate)
    if isinstance(predicate, pred.Compare):
        return value is not MISSING and _compare(value, predicate)
    if isinstance(predicate, pred.Exists):
        return (value is not MISSING) == predicate.value
    raise ConfigurationError(f"unsupported predicate {type(predicate).__name__}")


def matches(doc: Document, clauses: list[pred.FieldCondition]) -> bool:
    """All clauses hold for ``doc``."""
    return all(evaluate_predicate(c.predicate, resolve(doc, c.path)) for c in clauses)
