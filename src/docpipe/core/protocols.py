"""Protocol interfaces for docpipe abstractions.

Collection sources and stage evaluators are plugged in structurally: no
inheritance required, easy to check with isinstance().
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from docpipe.core.types import Collection, Document


# ---------------------------------------------------------------------------
# Collection sources
# ---------------------------------------------------------------------------

@runtime_checkable
class ICollectionSource(Protocol):
    """Loads a named collection of documents."""

    def load(self, name: str) -> list[Document]: ...

    def names(self) -> list[str]: ...


# ---------------------------------------------------------------------------
# Stage evaluation
# ---------------------------------------------------------------------------

@runtime_checkable
class IStageEvaluator(Protocol):
    """Transforms an input document sequence into an output sequence."""

    def __call__(self, stage: Any, docs: Collection) -> list[Document]: ...
