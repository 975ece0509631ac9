"""docpipe: declarative aggregation pipelines over in-memory document collections."""

from __future__ import annotations

from docpipe.core.exceptions import ConfigurationError, DocPipeError, EvaluationWarning
from docpipe.engine.executor import PipelineExecutor, execute
from docpipe.engine.fields import MISSING, resolve
from docpipe.models.literals import parse_pipeline
from docpipe.models.pipeline import Pipeline

__all__ = [
    "MISSING",
    "ConfigurationError",
    "DocPipeError",
    "EvaluationWarning",
    "Pipeline",
    "PipelineExecutor",
    "execute",
    "parse_pipeline",
    "resolve",
]
