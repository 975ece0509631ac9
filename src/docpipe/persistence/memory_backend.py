"""Dict-backed in-memory collection source for tests and embedding."""

from __future__ import annotations

import copy

from docpipe.core.exceptions import CollectionNotFoundError
from docpipe.core.types import Collection, Document


class MemoryCollectionSource:
    """Dict-backed ICollectionSource."""

    def __init__(self, collections: dict[str, Collection] | None = None) -> None:
        self._collections: dict[str, list[Document]] = {}
        for name, docs in (collections or {}).items():
            self.put(name, docs)

    def put(self, name: str, docs: Collection) -> None:
        self._collections[name] = copy.deepcopy(list(docs))

    def load(self, name: str) -> list[Document]:
        if name not in self._collections:
            raise CollectionNotFoundError(name, "memory")
        return copy.deepcopy(self._collections[name])

    def names(self) -> list[str]:
        return sorted(self._collections)
