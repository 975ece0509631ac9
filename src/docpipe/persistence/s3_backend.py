"""S3 collection source implementing ICollectionSource."""

from __future__ import annotations

import boto3
from botocore.exceptions import ClientError

from docpipe.core.exceptions import CollectionLoadError, CollectionNotFoundError
from docpipe.core.types import Document
from docpipe.persistence.extjson import parse_collection
from docpipe.persistence.file_backend import SUFFIXES


class S3CollectionSource:
    """ICollectionSource reading ``<prefix><name>.json(l)`` objects from S3."""

    def __init__(self, bucket: str, prefix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._bucket = bucket
        self._prefix = prefix
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("s3", **kwargs)

    def _read(self, key: str) -> bytes | None:
        """Object body, or None when the key does not exist."""
        try:
            resp = self._client.get_object(Bucket=self._bucket, Key=key)
            return resp["Body"].read()
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                return None
            raise CollectionLoadError(f"S3 read failed for {key!r}: {exc}") from exc

    def load(self, name: str) -> list[Document]:
        for suffix in SUFFIXES:
            key = f"{self._prefix}{name}{suffix}"
            body = self._read(key)
            if body is None:
                continue
            try:
                text = body.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise CollectionLoadError(f"s3://{self._bucket}/{key} is not UTF-8") from exc
            return parse_collection(text, f"s3://{self._bucket}/{key}", lines=suffix == ".jsonl")
        raise CollectionNotFoundError(name, f"s3://{self._bucket}/{self._prefix}")

    def names(self) -> list[str]:
        try:
            found: set[str] = set()
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self._bucket, Prefix=self._prefix):
                for obj in page.get("Contents", []):
                    rest = obj["Key"][len(self._prefix):]
                    for suffix in SUFFIXES:
                        if rest.endswith(suffix) and "/" not in rest:
                            found.add(rest[: -len(suffix)])
            return sorted(found)
        except ClientError as exc:
            raise CollectionLoadError(
                f"S3 list failed for prefix={self._prefix!r}: {exc}"
            ) from exc
