"""Pluggable collection sources behind the ICollectionSource protocol."""

from __future__ import annotations

from docpipe.core.config import AppSettings
from docpipe.core.protocols import ICollectionSource
from docpipe.persistence.file_backend import JsonFileCollectionSource
from docpipe.persistence.memory_backend import MemoryCollectionSource
from docpipe.persistence.s3_backend import S3CollectionSource


def create_source(settings: AppSettings | None = None) -> ICollectionSource:
    """Create the collection source selected by application settings."""
    if settings is None:
        settings = AppSettings()

    storage = settings.storage
    if storage.backend == "s3":
        return S3CollectionSource(
            bucket=storage.bucket,
            prefix=storage.prefix,
            region=storage.region,
            endpoint_url=storage.endpoint_url,
        )
    return JsonFileCollectionSource(storage.data_dir)


__all__ = [
    "JsonFileCollectionSource",
    "MemoryCollectionSource",
    "S3CollectionSource",
    "create_source",
]
