"""Pydantic models for judge artifacts."""

import json
import logging
import re
from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


def _lenient_int(value: Any) -> int:
    """Coerce collaborator counts ("3", 3.0, None, "N/A") to int."""
    if value is None or isinstance(value, bool):
        return int(bool(value))
    if isinstance(value, int):
        return value
    try:
        number = value if isinstance(value, float) else float(str(value).strip())
        return int(number)
    except (ValueError, OverflowError):
        # NaN, infinities and non-numeric text
        return 0


def _lenient_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(str(value).strip())
    except ValueError:
        return 0.0


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


LenientInt = Annotated[int, BeforeValidator(_lenient_int)]
LenientFloat = Annotated[float, BeforeValidator(_lenient_float)]


class Component(str, Enum):
    """The six scored components of a submission."""

    TEST = "test"
    SONAR = "sonar"
    SECURITY = "security"
    FRONTEND = "frontend"
    TEAM = "team"
    AI = "ai"


class Severity(str, Enum):
    """SonarCloud issue severities, most severe first."""

    BLOCKER = "BLOCKER"
    CRITICAL = "CRITICAL"
    MAJOR = "MAJOR"
    MINOR = "MINOR"
    INFO = "INFO"


class IssueCategory(str, Enum):
    """Issue buckets used by SonarCloud detailed reports."""

    VULNERABILITIES = "vulnerabilities"
    BUGS = "bugs"
    CODE_SMELLS = "code_smells"


class ArtifactModel(BaseModel):
    """Base for models parsed from collaborator JSON (camelCase aliases allowed)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# --- Scoring Models ---


class ScoreBreakdown(BaseModel):
    """Persisted result of score aggregation."""

    model_config = ConfigDict(frozen=True)

    overall_score: int = Field(ge=0, le=100)
    grade: str  # A, B, C, D, F
    component_scores: dict[str, int]
    weights: dict[str, int]
    weighted_contributions: dict[str, int]
    calculation_timestamp: datetime

    @field_validator("weights", mode="before")
    @classmethod
    def _normalize_weight_keys(cls, value: Any) -> Any:
        # Older breakdowns keyed weights as TEST_WEIGHT, SONAR_WEIGHT, ...
        if isinstance(value, dict):
            return {re.sub(r"_WEIGHT$", "", str(k)).lower(): v for k, v in value.items()}
        return value

    def score(self, component: Component) -> int:
        """Sanitized score of a single component (0 when absent)."""
        return self.component_scores.get(component.value, 0)


# --- Security Models ---


class SecurityCounts(ArtifactModel):
    """Severity counts reported by the security scan."""

    total_issues: LenientInt = Field(default=0, alias="totalIssues")
    high_severity: LenientInt = Field(default=0, alias="highSeverity")
    medium_severity: LenientInt = Field(default=0, alias="mediumSeverity")
    low_severity: LenientInt = Field(default=0, alias="lowSeverity")
    score: LenientInt | None = None

    @property
    def total(self) -> int:
        return max(self.total_issues, self.high_severity + self.medium_severity + self.low_severity)


class SecuritySummary(ArtifactModel):
    """Output of the security scan collaborator."""

    summary: SecurityCounts = Field(default_factory=SecurityCounts)
    details: str = ""
    tools_used: list[str] = Field(default_factory=list, alias="toolsUsed")


class Vulnerability(ArtifactModel):
    """Single Trivy finding."""

    vulnerability_id: str = Field(default="UNKNOWN", alias="VulnerabilityID")
    severity: str = Field(default="UNKNOWN", alias="Severity")
    pkg_name: str = Field(default="", alias="PkgName")
    installed_version: str = Field(default="", alias="InstalledVersion")
    fixed_version: str | None = Field(default=None, alias="FixedVersion")
    title: str = Field(default="", alias="Title")
    description: str = Field(default="", alias="Description")
    references: Annotated[list[str], BeforeValidator(_none_to_list)] = Field(
        default_factory=list, alias="References"
    )
    cvss: dict[str, dict[str, Any]] = Field(default_factory=dict, alias="CVSS")

    @property
    def cvss_score(self) -> float | None:
        """Prefer the NVD v3 score, then Red Hat's."""
        for source in ("nvd", "redhat"):
            score = self.cvss.get(source, {}).get("V3Score")
            if score is not None:
                return score
        return None


class TrivyTarget(ArtifactModel):
    """Scanned target (lockfile, image layer) with its findings."""

    target: str = Field(default="", alias="Target")
    vulnerabilities: Annotated[list[Vulnerability], BeforeValidator(_none_to_list)] = Field(
        default_factory=list, alias="Vulnerabilities"
    )


# --- Code Quality Models ---


class QualityIssue(ArtifactModel):
    """A SonarCloud issue as found in any of the detailed report sources."""

    file: str | None = None
    line: int | None = None
    severity: str = "UNKNOWN"
    type: str = "UNKNOWN"
    message: str | None = None
    rule: str | None = None
    effort: str | None = None
    creation_date: str | None = None

    @field_validator("severity", "type", mode="before")
    @classmethod
    def _default_unknown(cls, value: Any) -> Any:
        return value or "UNKNOWN"

    @field_validator("line", mode="before")
    @classmethod
    def _coerce_line(cls, value: Any) -> Any:
        if value in (None, "", "?"):
            return None
        return _lenient_int(value) or None


def _drop_invalid_issues(value: Any) -> Any:
    if not isinstance(value, list):
        return []
    kept = [item for item in value if isinstance(item, dict)]
    if len(kept) != len(value):
        logger.warning(f"Skipped {len(value) - len(kept)} malformed issue entries")
    return kept


IssueList = Annotated[list[QualityIssue], BeforeValidator(_drop_invalid_issues)]


class CategoryReport(ArtifactModel):
    """Detailed report for one issue category."""

    total_count: LenientInt = 0
    by_severity: dict[str, int] = Field(default_factory=dict)
    by_file: dict[str, IssueList] = Field(default_factory=dict)
    issues: IssueList = Field(default_factory=list)


class AffectedFile(ArtifactModel):
    """Entry of the "most affected files" list."""

    file: str
    issue_count: LenientInt = 0
    issues: IssueList = Field(default_factory=list)


class FilesAffected(ArtifactModel):
    most_affected_files: Annotated[list[AffectedFile], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )


class QualityCounts(ArtifactModel):
    """Headline SonarCloud measures."""

    bugs: LenientInt = 0
    vulnerabilities: LenientInt = 0
    code_smells: LenientInt = 0
    coverage: LenientFloat = 0.0
    quality_gate_status: str = "UNKNOWN"
    sonar_project_url: str | None = None

    @field_validator("quality_gate_status", mode="before")
    @classmethod
    def _gate_level(cls, value: Any) -> Any:
        # The measures API reports gate details as an embedded JSON document
        if isinstance(value, str) and value.lstrip().startswith("{"):
            try:
                return str(json.loads(value).get("level", "UNKNOWN"))
            except (ValueError, AttributeError):
                return "UNKNOWN"
        return value or "UNKNOWN"


class DetailedIssues(ArtifactModel):
    """Pre-formatted markdown issue lists, one string per category."""

    bugs: str = ""
    vulnerabilities: str = ""
    code_smells: str = ""


class QualitySummary(ArtifactModel):
    """Output of the SonarCloud collaborator."""

    summary: QualityCounts = Field(default_factory=QualityCounts)
    detailed_issues: DetailedIssues | None = None
    detailed_reports: dict[str, CategoryReport] = Field(default_factory=dict)
    files_affected: FilesAffected | None = None
    total_issues: LenientInt | None = None

    @property
    def gate_failed(self) -> bool:
        return self.summary.quality_gate_status.upper() in ("FAILED", "ERROR")


# --- Team & AI Models ---


class TeamCounts(ArtifactModel):
    total_commits: LenientInt = Field(default=0, alias="totalCommits")
    total_authors: LenientInt = Field(default=0, alias="totalAuthors")
    message_quality: LenientInt = Field(default=0, alias="messageQuality")


class BreakdownEntry(ArtifactModel):
    score: LenientInt = 0
    max_score: LenientInt = Field(default=0, alias="maxScore")
    description: str = ""


class TeamBehaviorSummary(ArtifactModel):
    """Output of the git-log team behavior collaborator."""

    summary: TeamCounts = Field(default_factory=TeamCounts)
    breakdown: dict[str, BreakdownEntry] = Field(default_factory=dict)


class AICounts(ArtifactModel):
    has_attribution: bool = Field(default=False, alias="hasAttribution")
    estimated_ai_percentage: LenientInt = Field(default=0, alias="estimatedAiPercentage")
    ai_commits: LenientInt = Field(default=0, alias="aiCommits")


class AIPatterns(ArtifactModel):
    total_code_files: LenientInt = Field(default=0, alias="totalCodeFiles")


class AIAttributionSummary(ArtifactModel):
    """Output of the AI-usage heuristic collaborator."""

    summary: AICounts = Field(default_factory=AICounts)
    patterns: AIPatterns = Field(default_factory=AIPatterns)
    recommendations: Annotated[list[str], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )


# --- Coverage Models ---


class CoverageMetric(ArtifactModel):
    total: LenientInt = 0
    covered: LenientInt = 0
    skipped: LenientInt = 0
    pct: LenientFloat = 0.0


class CoverageSummary(ArtifactModel):
    """Output of the test coverage collaborator (istanbul json-summary shape)."""

    total: dict[str, CoverageMetric] = Field(default_factory=dict)
    test_files: LenientInt = Field(default=0, alias="testFiles")
    has_tests: bool = Field(default=False, alias="hasTests")


# --- Bundle & Index Models ---


class AnalysisBundle(BaseModel):
    """Everything known about one team's PR run."""

    team_name: str
    pr_number: str | None = None
    repository: str | None = None  # owner/repo used for source links

    breakdown: ScoreBreakdown | None = None
    security: SecuritySummary | None = None
    vulnerabilities: list[TrivyTarget] | None = None
    quality: QualitySummary | None = None
    team: TeamBehaviorSummary | None = None
    ai: AIAttributionSummary | None = None
    coverage: CoverageSummary | None = None


class TeamRecord(BaseModel):
    """One card on the cross-team index."""

    team_name: str
    pr_number: str
    overall_score: int = 0
    grade: str = "N/A"
    component_scores: dict[str, int] = Field(default_factory=dict)
    report_path: str
    last_modified: datetime
    calculated_at: datetime | None = None


class PRContext(BaseModel):
    """Pull request details extracted from the CI event."""

    pr_number: str
    team_name: str
    head_sha: str | None = None
    head_repo: str | None = None
    base_repo: str | None = None

    @property
    def is_fork(self) -> bool:
        return bool(self.head_repo and self.base_repo and self.head_repo != self.base_repo)
