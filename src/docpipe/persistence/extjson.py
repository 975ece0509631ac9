"""MongoDB extended-JSON codec for collection files.

Exports from ``mongoexport``/Compass wrap typed values, e.g.
``{"$date": "2016-05-02T06:14:55Z"}`` or ``{"$oid": "..."}``. ``decode``
unwraps them into plain Python values; ``default`` is a ``json.dumps`` hook
for writing results back out.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from datetime import date, datetime, timezone
from typing import Any

from docpipe.core.exceptions import CollectionLoadError
from docpipe.core.types import Document


def _parse_date(raw: Any) -> datetime:
    if isinstance(raw, dict) and "$numberLong" in raw:
        raw = int(raw["$numberLong"])
    if isinstance(raw, (int, float)):
        return datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
    if isinstance(raw, str):
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    raise ValueError(f"unsupported $date value {raw!r}")


_WRAPPERS = {
    "$date": _parse_date,
    "$oid": str,
    "$numberInt": int,
    "$numberLong": int,
    "$numberDouble": float,
}


def decode(value: Any) -> Any:
    """Recursively unwrap extended-JSON type wrappers."""
    if isinstance(value, dict):
        if len(value) == 1:
            tag, raw = next(iter(value.items()))
            if tag in _WRAPPERS:
                return _WRAPPERS[tag](raw)
        return {k: decode(v) for k, v in value.items()}
    if isinstance(value, list):
        return [decode(v) for v in value]
    return value


def default(value: Any) -> Any:
    """``json.dumps`` hook: datetimes become ISO-8601 strings."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _iter_jsonl(text: str, origin: str) -> Iterator[Any]:
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            yield json.loads(line)
        except json.JSONDecodeError as exc:
            raise CollectionLoadError(f"{origin}:{lineno}: invalid JSON: {exc.msg}") from exc


def parse_collection(text: str, origin: str, lines: bool = False) -> list[Document]:
    """Decode a JSON array (or JSON Lines when ``lines``) of documents."""
    if lines:
        raw = list(_iter_jsonl(text, origin))
    else:
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CollectionLoadError(f"{origin}: invalid JSON: {exc.msg}") from exc
        if not isinstance(raw, list):
            raise CollectionLoadError(f"{origin}: expected a JSON array of documents")

    docs = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise CollectionLoadError(f"{origin}: item {index} is not a document")
        try:
            docs.append(decode(item))
        except (ValueError, TypeError, OverflowError) as exc:
            raise CollectionLoadError(f"{origin}: item {index}: {exc}") from exc
    return docs
