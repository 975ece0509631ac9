"""Pipeline model: an ordered, reusable sequence of stages."""

from __future__ import annotations

from pydantic import Field

from docpipe.models.base import SpecModel
from docpipe.models.stages import Stage


class Pipeline(SpecModel):
    """Stages executed left to right; output of stage i feeds stage i+1."""

    name: str = ""
    description: str = ""
    stages: list[Stage] = Field(default_factory=list)

    def then(self, *stages: Stage) -> Pipeline:
        """Return a new pipeline with ``stages`` appended."""
        return Pipeline(
            name=self.name,
            description=self.description,
            stages=[*self.stages, *stages],
        )

    @property
    def stage_kinds(self) -> list[str]:
        return [stage.kind for stage in self.stages]
