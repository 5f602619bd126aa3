"""Collaborator artifact adapters."""

from hackjudge.adapters.base import ArtifactAdapter, ReportsDirectoryNotFoundError, load_json_file
from hackjudge.adapters.behavior import AIAttributionAdapter, TeamBehaviorAdapter
from hackjudge.adapters.coverage import BreakdownAdapter, CoverageAdapter
from hackjudge.adapters.quality import QualityAdapter, parse_quality_payload
from hackjudge.adapters.security import SecurityAdapter, TrivyAdapter

__all__ = [
    "AIAttributionAdapter",
    "ArtifactAdapter",
    "BreakdownAdapter",
    "CoverageAdapter",
    "QualityAdapter",
    "ReportsDirectoryNotFoundError",
    "SecurityAdapter",
    "TeamBehaviorAdapter",
    "TrivyAdapter",
    "load_json_file",
    "parse_quality_payload",
]
