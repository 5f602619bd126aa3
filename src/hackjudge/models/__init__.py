"""Data models and schemas."""

from hackjudge.models.schemas import (
    AnalysisBundle,
    Component,
    ScoreBreakdown,
    TeamRecord,
)

__all__ = ["AnalysisBundle", "Component", "ScoreBreakdown", "TeamRecord"]
