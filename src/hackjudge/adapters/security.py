"""Security scan adapters."""

from typing import Any

from pydantic import TypeAdapter

from hackjudge.adapters.base import ArtifactAdapter
from hackjudge.models.schemas import SecuritySummary, TrivyTarget

_TARGETS = TypeAdapter(list[TrivyTarget])


class SecurityAdapter(ArtifactAdapter[SecuritySummary]):
    """Reads security-summary.json (severity counts)."""

    @property
    def filename(self) -> str:
        return "security-summary.json"

    def parse(self, data: Any) -> SecuritySummary:
        return SecuritySummary.model_validate(data)


class TrivyAdapter(ArtifactAdapter[list[TrivyTarget]]):
    """Reads trivy-results.json (raw findings per target).

    Accepts either a bare list of targets or Trivy's full JSON report, whose
    targets live under "Results".
    """

    @property
    def filename(self) -> str:
        return "trivy-results.json"

    def parse(self, data: Any) -> list[TrivyTarget]:
        if isinstance(data, dict):
            data = data.get("Results") or []
        return _TARGETS.validate_python(data)
