"""Evaluate expression models against a document."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from docpipe.core.exceptions import ConfigurationError
from docpipe.core.types import Document
from docpipe.engine.fields import MISSING, resolve
from docpipe.models.expressions import Constant, DatePart, DateUnit, FieldRef, IfNull, Size


def _date_part(unit: DateUnit, value: Any) -> Any:
    if not isinstance(value, (datetime, date)):
        return None
    if unit is DateUnit.YEAR:
        return value.year
    if unit is DateUnit.MONTH:
        return value.month
    return value.day


def evaluate(expr: Any, doc: Document) -> Any:
    """Value of ``expr`` for ``doc``; may be ``MISSING`` for field references."""
    if isinstance(expr, FieldRef):
        return resolve(doc, expr.path)
    if isinstance(expr, Constant):
        return expr.value
    if isinstance(expr, Size):
        value = evaluate(expr.of, doc)
        return len(value) if isinstance(value, list) else 0
    if isinstance(expr, IfNull):
        value = evaluate(expr.expr, doc)
        if value is MISSING or value is None:
            return evaluate(expr.default, doc)
        return value
    if isinstance(expr, DatePart):
        return _date_part(expr.unit, evaluate(expr.of, doc))
    raise ConfigurationError(f"unsupported expression {type(expr).__name__}")
