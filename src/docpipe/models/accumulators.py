"""Per-group accumulator models used by the Group stage."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field

from docpipe.models.base import SpecModel
from docpipe.models.expressions import Expression


class Sum(SpecModel):
    """Running total. ``Sum(of=Constant(value=1))`` counts documents."""

    op: Literal["sum"] = "sum"
    of: Expression


class Avg(SpecModel):
    """Arithmetic mean of numeric values.

    ``fallback=None`` excludes absent values from both numerator and divisor;
    a number substitutes for them instead.
    """

    op: Literal["avg"] = "avg"
    of: Expression
    fallback: float | None = None


class Push(SpecModel):
    """Values in arrival order; absent values are skipped."""

    op: Literal["push"] = "push"
    of: Expression


class AddToSet(SpecModel):
    op: Literal["addToSet"] = "addToSet"
    of: Expression


class Min(SpecModel):
    op: Literal["min"] = "min"
    of: Expression


class Max(SpecModel):
    op: Literal["max"] = "max"
    of: Expression


Accumulator = Annotated[
    Union[Sum, Avg, Push, AddToSet, Min, Max],
    Field(discriminator="op"),
]
