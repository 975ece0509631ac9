"""Expression models evaluated against a single document."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import Field, field_validator

from docpipe.models.base import SpecModel, check_path


class DateUnit(StrEnum):
    YEAR = "year"
    MONTH = "month"
    DAY_OF_MONTH = "dayOfMonth"


class FieldRef(SpecModel):
    """Value at a dotted field path (``"$age"`` in literal form)."""

    kind: Literal["field"] = "field"
    path: str

    @field_validator("path")
    @classmethod
    def _valid_path(cls, v: str) -> str:
        return check_path(v)


class Constant(SpecModel):
    """A literal value, returned as-is."""

    kind: Literal["literal"] = "literal"
    value: Any = None


class Size(SpecModel):
    """Length of an array value; 0 when absent or not an array."""

    kind: Literal["size"] = "size"
    of: Expression


class IfNull(SpecModel):
    """``expr`` unless it is absent or null, else ``default``."""

    kind: Literal["ifNull"] = "ifNull"
    expr: Expression
    default: Expression


class DatePart(SpecModel):
    """A calendar component of a datetime value."""

    kind: Literal["datePart"] = "datePart"
    unit: DateUnit
    of: Expression


Expression = Annotated[
    Union[FieldRef, Constant, Size, IfNull, DatePart],
    Field(discriminator="kind"),
]

Size.model_rebuild()
IfNull.model_rebuild()
DatePart.model_rebuild()
