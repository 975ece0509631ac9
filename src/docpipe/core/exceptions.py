"""docpipe exception hierarchy."""

from __future__ import annotations


class DocPipeError(Exception):
    """Base exception for all docpipe errors."""


class ConfigurationError(DocPipeError):
    """A stage or expression specification is structurally invalid."""

    def __init__(
        self, message: str, stage_index: int | None = None, stage_kind: str | None = None
    ) -> None:
        self.stage_index = stage_index
        self.stage_kind = stage_kind
        if stage_index is not None:
            label = f"stage {stage_index}" + (f" ({stage_kind})" if stage_kind else "")
            message = f"{label}: {message}"
        super().__init__(message)


class CollectionNotFoundError(DocPipeError):
    """No collection with the requested name exists in the source."""

    def __init__(self, name: str, location: str = "") -> None:
        self.name = name
        self.location = location
        where = f" in {location}" if location else ""
        super().__init__(f"Collection {name!r} not found{where}")


class CollectionLoadError(DocPipeError):
    """A collection exists but could not be read or decoded."""


class QueryNotFoundError(DocPipeError):
    """Unknown query name in the playground catalogue."""


class EvaluationWarning(UserWarning):
    """A value was replaced by a stage's documented fallback during evaluation."""
