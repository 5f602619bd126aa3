"""Merging of SonarCloud issue sources into one de-duplicated set."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from hackjudge.models.schemas import IssueCategory, QualityIssue, QualitySummary, Severity

logger = logging.getLogger(__name__)

SEVERITY_RANK = {severity.value: rank for rank, severity in enumerate(Severity)}
UNKNOWN_SEVERITY_RANK = len(SEVERITY_RANK)

# Issue type -> category, for sources that are not already grouped by category
TYPE_CATEGORIES = {
    "BUG": IssueCategory.BUGS,
    "VULNERABILITY": IssueCategory.VULNERABILITIES,
    "CODE_SMELL": IssueCategory.CODE_SMELLS,
}

IssueKey = tuple[str, int | None, str, str]


@dataclass(frozen=True)
class MergedIssue:
    """An issue attributed to a category, ready for rendering."""

    category: IssueCategory
    file: str
    line: int | None
    severity: str
    type: str
    message: str
    rule: str | None = None
    effort: str | None = None
    creation_date: str | None = None

    @property
    def key(self) -> IssueKey:
        return (self.file, self.line, self.type, self.message)

    @property
    def severity_rank(self) -> int:
        return SEVERITY_RANK.get(self.severity.upper(), UNKNOWN_SEVERITY_RANK)


class IssueSet:
    """Insertion-ordered set of issues keyed by (file, line, type, message).

    Sources are added in priority order; an issue whose key is already
    present is ignored, so earlier sources win.
    """

    def __init__(self) -> None:
        self._issues: dict[IssueKey, MergedIssue] = {}

    def __len__(self) -> int:
        return len(self._issues)

    def __iter__(self):
        return iter(self._issues.values())

    def add(self, category: IssueCategory, issue: QualityIssue, file: str | None = None) -> bool:
        """Add an issue unless an identical one is already present.

        Args:
            category: Category the issue belongs to.
            issue: Issue as parsed from the collaborator payload.
            file: File name when the source groups issues by file.

        Returns:
            True if the issue was added.
        """
        path = file or issue.file
        if not path or not issue.message:
            logger.warning(f"Skipping {category.value} issue with missing file or message: {issue!r}")
            return False

        merged = MergedIssue(
            category=category,
            file=path,
            line=issue.line,
            severity=issue.severity.upper(),
            type=issue.type,
            message=issue.message,
            rule=issue.rule,
            effort=issue.effort,
            creation_date=issue.creation_date,
        )
        if merged.key in self._issues:
            return False
        self._issues[merged.key] = merged
        return True

    def in_category(self, category: IssueCategory) -> list[MergedIssue]:
        """Issues of one category, most severe first, then by file name."""
        issues = [issue for issue in self._issues.values() if issue.category == category]
        return sorted(issues, key=lambda issue: (issue.severity_rank, issue.file))

    def count(self, category: IssueCategory) -> int:
        return sum(1 for issue in self._issues.values() if issue.category == category)


def merge_quality_issues(quality: QualitySummary) -> IssueSet:
    """Collect every issue from a quality summary exactly once.

    Sources, in priority order:
    1. detailed_reports.<category>.by_file (complete data, grouped by file)
    2. detailed_reports.<category>.issues (flat, possibly limited list)
    3. files_affected.most_affected_files (supplementary, categorized by type)

    Args:
        quality: Parsed quality summary.

    Returns:
        IssueSet holding the de-duplicated issues.
    """
    merged = IssueSet()

    for category in IssueCategory:
        report = quality.detailed_reports.get(category.value)
        if report is None:
            continue
        for filename, file_issues in report.by_file.items():
            for issue in file_issues:
                merged.add(category, issue, file=filename)

    for category in IssueCategory:
        report = quality.detailed_reports.get(category.value)
        if report is None:
            continue
        for issue in report.issues:
            merged.add(category, issue)

    if quality.files_affected:
        for affected in quality.files_affected.most_affected_files:
            for issue in affected.issues:
                category = TYPE_CATEGORIES.get(issue.type.upper())
                if category is None:
                    logger.debug(f"Ignoring {affected.file} issue of unknown type {issue.type}")
                    continue
                merged.add(category, issue, file=affected.file)

    logger.info(
        f"Total SonarCloud issues found: {len(merged)} "
        f"({merged.count(IssueCategory.VULNERABILITIES)} vulnerabilities, "
        f"{merged.count(IssueCategory.BUGS)} bugs, "
        f"{merged.count(IssueCategory.CODE_SMELLS)} code smells)"
    )
    return merged


def reported_total(quality: QualitySummary) -> int:
    """Total issue count as reported by SonarCloud itself."""
    if quality.total_issues:
        return quality.total_issues
    counts = quality.summary
    return counts.bugs + counts.vulnerabilities + counts.code_smells
