"""Match predicates: one condition on one field path."""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal, Union

from pydantic import Field, field_validator, model_validator

from docpipe.models.base import SpecModel, check_path

REGEX_OPTION_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}


class Eq(SpecModel):
    """Equality; an array field matches when it contains the value."""

    op: Literal["eq"] = "eq"
    value: Any = None


class Ne(SpecModel):
    op: Literal["ne"] = "ne"
    value: Any = None


class All(SpecModel):
    """Array field contains every listed value."""

    op: Literal["all"] = "all"
    values: list[Any]


class In(SpecModel):
    op: Literal["in"] = "in"
    values: list[Any]


class Regex(SpecModel):
    """String field matches ``pattern`` from its first character."""

    op: Literal["regex"] = "regex"
    pattern: str
    options: str = ""

    @field_validator("options")
    @classmethod
    def _known_options(cls, v: str) -> str:
        unknown = set(v) - set(REGEX_OPTION_FLAGS)
        if unknown:
            raise ValueError(f"unsupported regex options: {''.join(sorted(unknown))}")
        return v

    @model_validator(mode="after")
    def _compiles(self) -> Regex:
        try:
            re.compile(self.pattern, self.flags)
        except re.error as exc:
            raise ValueError(f"invalid regex {self.pattern!r}: {exc}") from exc
        return self

    @property
    def flags(self) -> int:
        flags = 0
        for opt in self.options:
            flags |= REGEX_OPTION_FLAGS[opt]
        return flags


class Compare(SpecModel):
    """Ordered comparison against a value of the same type class."""

    op: Literal["gt", "gte", "lt", "lte"]
    value: Any


class Exists(SpecModel):
    op: Literal["exists"] = "exists"
    value: bool = True


Predicate = Annotated[
    Union[Eq, Ne, All, In, Regex, Compare, Exists],
    Field(discriminator="op"),
]


class FieldCondition(SpecModel):
    """``predicate`` applied to the value at ``path``."""

    path: str
    predicate: Predicate

    @field_validator("path")
    @classmethod
    def _valid_path(cls, v: str) -> str:
        return check_path(v)
