"""Shared base for immutable specification models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ValidationError

from docpipe.core.exceptions import ConfigurationError


def describe_validation_error(model_name: str, exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into a single readable line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return f"invalid {model_name}: " + "; ".join(parts)


class SpecModel(BaseModel):
    """Frozen model that reports invalid parameters as ConfigurationError."""

    model_config = {"frozen": True, "extra": "forbid"}

    def __init__(self, /, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigurationError(describe_validation_error(type(self).__name__, exc)) from exc


def check_path(path: str) -> str:
    """Validate a dotted field path such as ``company.location.country``."""
    if not path:
        raise ValueError("field path must not be empty")
    if path.startswith("$"):
        raise ValueError(f"field path {path!r} must not start with '$'")
    if any(segment == "" for segment in path.split(".")):
        raise ValueError(f"field path {path!r} has an empty segment")
    return path


def check_output_name(name: str) -> str:
    """Validate a field name produced by a stage (count, group, addFields)."""
    if not name:
        raise ValueError("output field name must not be empty")
    if name.startswith("$"):
        raise ValueError(f"output field name {name!r} must not start with '$'")
    if "." in name:
        raise ValueError(f"output field name {name!r} must not contain '.'")
    return name
