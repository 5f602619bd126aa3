"""Coverage and score breakdown adapters."""

from typing import Any

from hackjudge.adapters.base import ArtifactAdapter
from hackjudge.models.schemas import CoverageSummary, ScoreBreakdown

BREAKDOWN_FILENAME = "score-breakdown.json"


class CoverageAdapter(ArtifactAdapter[CoverageSummary]):
    """Reads coverage-summary.json."""

    @property
    def filename(self) -> str:
        return "coverage-summary.json"

    def parse(self, data: Any) -> CoverageSummary:
        return CoverageSummary.model_validate(data)


class BreakdownAdapter(ArtifactAdapter[ScoreBreakdown]):
    """Reads a previously persisted score-breakdown.json."""

    @property
    def filename(self) -> str:
        return BREAKDOWN_FILENAME

    def parse(self, data: Any) -> ScoreBreakdown:
        return ScoreBreakdown.model_validate(data)
