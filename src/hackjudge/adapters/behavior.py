"""Team behavior and AI attribution adapters."""

from typing import Any

from hackjudge.adapters.base import ArtifactAdapter
from hackjudge.models.schemas import AIAttributionSummary, TeamBehaviorSummary


class TeamBehaviorAdapter(ArtifactAdapter[TeamBehaviorSummary]):
    """Reads team-analysis.json."""

    @property
    def filename(self) -> str:
        return "team-analysis.json"

    def parse(self, data: Any) -> TeamBehaviorSummary:
        return TeamBehaviorSummary.model_validate(data)


class AIAttributionAdapter(ArtifactAdapter[AIAttributionSummary]):
    """Reads ai-analysis.json."""

    @property
    def filename(self) -> str:
        return "ai-analysis.json"

    def parse(self, data: Any) -> AIAttributionSummary:
        return AIAttributionSummary.model_validate(data)
