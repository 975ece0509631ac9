"""Type aliases used across docpipe."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

Document = dict[str, Any]
Collection = Sequence[Document]
StageLiteral = dict[str, Any]
