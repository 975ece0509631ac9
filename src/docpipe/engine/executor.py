"""PipelineExecutor service: threads a collection through an ordered pipeline."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from docpipe.core.config import ExecutorConfig
from docpipe.core.exceptions import ConfigurationError
from docpipe.core.protocols import IStageEvaluator
from docpipe.core.types import Collection, Document
from docpipe.engine.stages import STAGE_EVALUATORS
from docpipe.models.literals import parse_pipeline
from docpipe.models.pipeline import Pipeline

logger = logging.getLogger(__name__)


class PipelineExecutor:
    """Executes pipelines against caller-supplied collections.

    Holds configuration only; every call works on its own in-flight list, so
    one executor can serve concurrent callers.
    """

    def __init__(
        self,
        config: ExecutorConfig | None = None,
        evaluators: Mapping[type, IStageEvaluator] | None = None,
    ) -> None:
        self._config = config or ExecutorConfig()
        self._evaluators = dict(evaluators if evaluators is not None else STAGE_EVALUATORS)

    def plan(self, pipeline: Any) -> list[tuple[Any, IStageEvaluator]]:
        """Resolve every stage to its evaluator before any document is read."""
        stages = self._coerce(pipeline)
        planned = []
        for index, stage in enumerate(stages):
            evaluator = self._evaluators.get(type(stage))
            if evaluator is None:
                raise ConfigurationError(
                    f"unsupported stage type {type(stage).__name__}",
                    stage_index=index,
                    stage_kind=getattr(stage, "kind", None),
                )
            planned.append((stage, evaluator))
        return planned

    def execute(self, collection: Collection, pipeline: Any) -> list[Document]:
        """Run ``pipeline`` over ``collection`` and return the final documents.

        ``pipeline`` may be a Pipeline, a list of stage models, or a list of
        Mongo-style stage literals. Raises ConfigurationError before any stage
        runs if the pipeline is invalid.
        """
        planned = self.plan(pipeline)
        level = logging.INFO if self._config.trace_stages else logging.DEBUG

        docs: list[Document] = list(collection)
        for index, (stage, evaluator) in enumerate(planned):
            before = len(docs)
            docs = evaluator(stage, docs)
            kind = getattr(stage, "kind", type(stage).__name__)
            logger.log(level, "stage %d (%s): %d -> %d documents", index, kind, before, len(docs))

        if self._config.copy_output:
            docs = copy.deepcopy(docs)
        return docs

    @staticmethod
    def _coerce(pipeline: Any) -> list[Any]:
        if isinstance(pipeline, Pipeline):
            return list(pipeline.stages)
        if isinstance(pipeline, (str, bytes, Mapping)) or not isinstance(pipeline, Sequence):
            raise ConfigurationError(
                f"pipeline must be a Pipeline or a list of stages, got {type(pipeline).__name__}"
            )
        if pipeline and all(isinstance(s, Mapping) for s in pipeline):
            return list(parse_pipeline(pipeline).stages)
        return list(pipeline)


def execute(collection: Collection, pipeline: Any, config: ExecutorConfig | None = None) -> list[Document]:
    """Run ``pipeline`` over ``collection`` with a default executor."""
    return PipelineExecutor(config).execute(collection, pipeline)
