"""Local-directory collection source reading ``<name>.json`` / ``<name>.jsonl``."""

from __future__ import annotations

from pathlib import Path

from docpipe.core.exceptions import CollectionLoadError, CollectionNotFoundError
from docpipe.core.types import Document
from docpipe.persistence.extjson import parse_collection

SUFFIXES = (".json", ".jsonl")


class JsonFileCollectionSource:
    """ICollectionSource backed by JSON files in a directory."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def _path_for(self, name: str) -> Path:
        for suffix in SUFFIXES:
            candidate = self._directory / f"{name}{suffix}"
            if candidate.is_file():
                return candidate
        raise CollectionNotFoundError(name, str(self._directory))

    def load(self, name: str) -> list[Document]:
        path = self._path_for(name)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CollectionLoadError(f"Failed to read {path}: {exc}") from exc
        return parse_collection(text, str(path), lines=path.suffix == ".jsonl")

    def names(self) -> list[str]:
        if not self._directory.is_dir():
            return []
        return sorted(
            {p.stem for p in self._directory.iterdir() if p.is_file() and p.suffix in SUFFIXES}
        )
