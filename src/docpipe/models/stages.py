"""Stage models: one immutable specification per pipeline step kind."""

from __future__ import annotations

from enum import IntEnum
from typing import Annotated, Literal, Union

from pydantic import Field, field_validator

from docpipe.models.accumulators import Accumulator
from docpipe.models.base import SpecModel, check_output_name, check_path
from docpipe.models.expressions import Expression
from docpipe.models.predicates import FieldCondition


class SortDirection(IntEnum):
    ASCENDING = 1
    DESCENDING = -1


class SortKey(SpecModel):
    path: str
    direction: SortDirection = SortDirection.ASCENDING

    @field_validator("path")
    @classmethod
    def _valid_path(cls, v: str) -> str:
        return check_path(v)


class Match(SpecModel):
    """Keep documents satisfying every clause. No clauses keeps everything."""

    kind: Literal["match"] = "match"
    clauses: list[FieldCondition] = Field(default_factory=list)


class Group(SpecModel):
    """Partition by ``key`` and compute named accumulators per partition.

    ``key`` is an expression, or a mapping of names to expressions for a
    compound ``_id``. ``Constant(value=None)`` puts everything in one group.
    """

    kind: Literal["group"] = "group"
    key: Union[Expression, dict[str, Expression]]
    accumulators: dict[str, Accumulator] = Field(default_factory=dict)

    @field_validator("accumulators")
    @classmethod
    def _valid_names(cls, v: dict[str, Accumulator]) -> dict[str, Accumulator]:
        for name in v:
            check_output_name(name)
            if name == "_id":
                raise ValueError("'_id' is reserved for the group key")
        return v

    @field_validator("key")
    @classmethod
    def _valid_compound_key(cls, v):
        if isinstance(v, dict):
            if not v:
                raise ValueError("compound group key must name at least one field")
            for name in v:
                check_output_name(name)
        return v


class Sort(SpecModel):
    """Stable multi-key sort; the first key is primary."""

    kind: Literal["sort"] = "sort"
    keys: list[SortKey] = Field(min_length=1)


class Limit(SpecModel):
    kind: Literal["limit"] = "limit"
    n: int


class Count(SpecModel):
    """Collapse the input into ``{field: <number of documents>}``."""

    kind: Literal["count"] = "count"
    field: str

    @field_validator("field")
    @classmethod
    def _valid_name(cls, v: str) -> str:
        return check_output_name(v)


class Project(SpecModel):
    """Keep only the listed field paths."""

    kind: Literal["project"] = "project"
    fields: list[str] = Field(min_length=1)

    @field_validator("fields")
    @classmethod
    def _valid_paths(cls, v: list[str]) -> list[str]:
        return [check_path(p) for p in v]


class Unwind(SpecModel):
    """Emit one document per element of the array at ``path``."""

    kind: Literal["unwind"] = "unwind"
    path: str

    @field_validator("path")
    @classmethod
    def _valid_path(cls, v: str) -> str:
        return check_path(v)


class AddFields(SpecModel):
    """Set (or overwrite) field paths to evaluated expressions."""

    kind: Literal["addFields"] = "addFields"
    fields: dict[str, Expression] = Field(min_length=1)

    @field_validator("fields")
    @classmethod
    def _valid_paths(cls, v: dict[str, Expression]) -> dict[str, Expression]:
        for path in v:
            check_path(path)
        return v


Stage = Annotated[
    Union[Match, Group, Sort, Limit, Count, Project, Unwind, AddFields],
    Field(discriminator="kind"),
]
