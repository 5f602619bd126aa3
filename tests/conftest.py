"""
Test fixtures shared across all hackjudge tests.
"""

import json
from datetime import datetime, timezone

import pytest

from hackjudge.analyzers.pipeline import team_pr_dir
from hackjudge.analyzers.scorer import Scorer
from hackjudge.models.schemas import ScoreBreakdown


@pytest.fixture
def quality_payload():
    """SonarCloud results where the same issues appear in several sources."""
    return {
        "summary": {
            "bugs": "2",
            "vulnerabilities": 1,
            "code_smells": "7",
            "coverage": "64.5",
            "quality_gate_status": "FAILED",
            "sonar_project_url": "https://sonarcloud.io/project/overview?id=demo",
        },
        "detailed_reports": {
            "bugs": {
                "by_file": {
                    "src/app.js": [
                        {"line": 10, "severity": "MAJOR", "type": "BUG", "message": "Null dereference",
                         "rule": "js:S2259", "effort": "10min"},
                    ],
                    "src/a.js": [
                        {"line": 3, "severity": "BLOCKER", "type": "BUG", "message": "Infinite loop"},
                    ],
                },
                "issues": [
                    # Duplicate of the by_file entry above
                    {"file": "src/app.js", "line": 10, "severity": "MAJOR", "type": "BUG",
                     "message": "Null dereference"},
                ],
            },
            "vulnerabilities": {
                "issues": [
                    {"file": "server.js", "line": "42", "severity": "CRITICAL", "type": "VULNERABILITY",
                     "message": "Hardcoded credentials", "creation_date": "2024-03-01T10:00:00+0000"},
                ],
            },
            "code_smells": {
                "by_file": {
                    "src/util.js": [
                        {"line": 5, "severity": "MINOR", "type": "CODE_SMELL", "message": "Unused variable"},
                    ],
                },
            },
        },
        "files_affected": {
            "most_affected_files": [
                {
                    "file": "src/util.js",
                    "issue_count": 2,
                    "issues": [
                        # Duplicate
                        {"line": 5, "severity": "MINOR", "type": "CODE_SMELL", "message": "Unused variable"},
                        {"line": 9, "severity": "INFO", "type": "CODE_SMELL", "message": "TODO comment"},
                        {"line": 1, "severity": "INFO", "type": "SECURITY_HOTSPOT", "message": "Review this"},
                    ],
                },
            ],
        },
        "total_issues": 10,
    }


@pytest.fixture
def breakdown() -> ScoreBreakdown:
    """Breakdown for scores 80/70/90/60/50/100 (overall 75, grade C)."""
    return Scorer().compute_breakdown(
        {"test": 80, "sonar": 70, "security": 90, "frontend": 60, "team": 50, "ai": 100}
    )


@pytest.fixture
def fixed_time():
    return datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def write_artifacts(tmp_path):
    """Factory writing collaborator artifacts into a team/PR directory under tmp_path."""

    def _write(team: str, pr: int, artifacts: dict | None = None):
        pr_dir = team_pr_dir(tmp_path, team, pr)
        pr_dir.mkdir(parents=True, exist_ok=True)
        for filename, content in (artifacts or {}).items():
            path = pr_dir / filename
            if isinstance(content, str):
                path.write_text(content)
            else:
                path.write_text(json.dumps(content))
        return pr_dir

    return _write


@pytest.fixture
def security_summary():
    return {
        "summary": {"totalIssues": 3, "highSeverity": 1, "mediumSeverity": "1", "lowSeverity": 1, "score": 70},
        "details": "npm audit and Trivy scan",
        "toolsUsed": ["trivy", "npm-audit"],
    }


@pytest.fixture
def coverage_summary():
    return {
        "total": {
            "lines": {"total": 200, "covered": 150, "skipped": 0, "pct": 75},
            "branches": {"total": 40, "covered": 20, "skipped": 0, "pct": 50},
        },
        "testFiles": 4,
        "hasTests": True,
    }
