"""Report generation pipeline over the reports directory."""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from hackjudge.adapters import (
    AIAttributionAdapter,
    BreakdownAdapter,
    CoverageAdapter,
    QualityAdapter,
    ReportsDirectoryNotFoundError,
    SecurityAdapter,
    TeamBehaviorAdapter,
    TrivyAdapter,
)
from hackjudge.adapters.coverage import BREAKDOWN_FILENAME
from hackjudge.models.schemas import AnalysisBundle, TeamRecord
from hackjudge.reports.index_page import render_index
from hackjudge.reports.team_report import render_team_report

logger = logging.getLogger(__name__)

TEAMS_DIR = "teams"
INDEX_FILENAME = "index.html"

_PR_DIR_PATTERN = re.compile(r"^pr-(\d+)$")


def team_slug(team_name: str) -> str:
    """Team name made safe for use as a path component."""
    slug = re.sub(r"[^A-Za-z0-9._-]", "-", team_name.strip()).strip(".")
    return slug or "unknown-team"


def report_filename(team_name: str) -> str:
    return f"hackathon-report-{team_slug(team_name)}.html"


def team_pr_dir(reports_root: Path, team_name: str, pr_number: str | int) -> Path:
    """Directory holding one PR run's artifacts: <root>/teams/<team>/pr-<n>."""
    return reports_root / TEAMS_DIR / team_slug(team_name) / f"pr-{pr_number}"


def _pr_dirs(team_dir: Path) -> list[tuple[int, Path]]:
    """Numbered pr-<n> directories of a team, in ascending PR order."""
    found = []
    for child in team_dir.iterdir():
        match = _PR_DIR_PATTERN.match(child.name)
        if match and child.is_dir():
            found.append((int(match.group(1)), child))
    return sorted(found)


def find_latest_pr_dir(team_dir: Path) -> Path | None:
    """The pr-<n> directory with the highest n, or None if there is none."""
    if not team_dir.is_dir():
        return None
    dirs = _pr_dirs(team_dir)
    return dirs[-1][1] if dirs else None


def load_bundle(
    pr_dir: Path,
    team_name: str,
    pr_number: str | None = None,
    repository: str | None = None,
) -> AnalysisBundle:
    """Read every collaborator artifact present in a PR directory.

    Args:
        pr_dir: Team/PR directory.
        team_name: Team the artifacts belong to.
        pr_number: PR number. Derived from the directory name when omitted.
        repository: owner/repo used for source links.

    Returns:
        AnalysisBundle with None for each missing or malformed artifact.
    """
    if pr_number is None:
        match = _PR_DIR_PATTERN.match(pr_dir.name)
        pr_number = match.group(1) if match else None

    return AnalysisBundle(
        team_name=team_name,
        pr_number=pr_number,
        repository=repository,
        breakdown=BreakdownAdapter().load(pr_dir),
        security=SecurityAdapter().load(pr_dir),
        vulnerabilities=TrivyAdapter().load(pr_dir),
        quality=QualityAdapter().load(pr_dir),
        team=TeamBehaviorAdapter().load(pr_dir),
        ai=AIAttributionAdapter().load(pr_dir),
        coverage=CoverageAdapter().load(pr_dir),
    )


class ReportPipeline:
    """Renders team dashboards and the cross-team index.

    Pipeline stages:
    1. Locate each team's latest PR directory
    2. Load collaborator artifacts into a bundle
    3. Render and save the team dashboard next to the artifacts
    4. Scan all PR directories and render index.html
    """

    def __init__(
        self,
        reports_root: Path,
        repository: str | None = None,
        branch: str = "HEAD",
    ) -> None:
        """Initialize the pipeline.

        Args:
            reports_root: Root of the reports tree (contains teams/).
            repository: owner/repo used for source links in team reports.
            branch: Branch used for source links.
        """
        self.reports_root = reports_root
        self.repository = repository
        self.branch = branch

    @property
    def teams_dir(self) -> Path:
        return self.reports_root / TEAMS_DIR

    def _require_teams_dir(self) -> None:
        if not self.teams_dir.is_dir():
            raise ReportsDirectoryNotFoundError(self.teams_dir)

    def write_team_report(self, team_name: str, pr_number: str | int | None = None) -> Path | None:
        """Render the dashboard for one team's PR.

        Args:
            team_name: Team to render.
            pr_number: PR to render. Defaults to the team's latest PR.

        Returns:
            Path to the written HTML file, or None if the team has no PR directory.

        Raises:
            ReportsDirectoryNotFoundError: If the teams directory is missing.
            OSError: If the report can't be written.
        """
        self._require_teams_dir()

        if pr_number is None:
            pr_dir = find_latest_pr_dir(self.teams_dir / team_slug(team_name))
        else:
            pr_dir = team_pr_dir(self.reports_root, team_name, pr_number)
            if not pr_dir.is_dir():
                pr_dir = None
        if pr_dir is None:
            logger.warning(f"No PR reports found for team {team_name}")
            return None

        logger.info(f"Using {pr_dir.name} for team {team_name}")
        bundle = load_bundle(pr_dir, team_name, repository=self.repository)
        html = render_team_report(team_name, bundle, branch=self.branch)

        filepath = pr_dir / report_filename(team_name)
        filepath.write_text(html, encoding="utf-8")
        logger.info(f"HTML report generated: {filepath}")
        return filepath

    def write_team_reports(self) -> list[Path]:
        """Render the latest-PR dashboard of every team.

        Returns:
            Paths of the written reports.

        Raises:
            ReportsDirectoryNotFoundError: If the teams directory is missing.
        """
        self._require_teams_dir()

        written = []
        for team_dir in sorted(p for p in self.teams_dir.iterdir() if p.is_dir()):
            logger.info(f"Processing team: {team_dir.name}")
            path = self.write_team_report(team_dir.name)
            if path is not None:
                written.append(path)
        return written

    def scan_team_records(self) -> list[TeamRecord]:
        """Collect one record per PR that has both a breakdown and a report.

        Records come back in discovery order (team name, then PR number).
        PR directories missing either file, or whose breakdown doesn't
        validate, are skipped.

        Returns:
            List of TeamRecord, unsorted by score.
        """
        if not self.teams_dir.is_dir():
            logger.info(f"Reports directory does not exist: {self.teams_dir}")
            return []

        records = []
        for team_dir in sorted(p for p in self.teams_dir.iterdir() if p.is_dir()):
            for pr_number, pr_dir in _pr_dirs(team_dir):
                report_path = pr_dir / report_filename(team_dir.name)
                if not report_path.exists() or not (pr_dir / BREAKDOWN_FILENAME).exists():
                    continue

                breakdown = BreakdownAdapter().load(pr_dir)
                if breakdown is None:
                    logger.warning(f"Skipping {team_dir.name}/{pr_dir.name}: unreadable score breakdown")
                    continue

                records.append(
                    TeamRecord(
                        team_name=team_dir.name,
                        pr_number=str(pr_number),
                        overall_score=breakdown.overall_score,
                        grade=breakdown.grade,
                        component_scores=breakdown.component_scores,
                        report_path=report_path.relative_to(self.reports_root).as_posix(),
                        last_modified=datetime.fromtimestamp(report_path.stat().st_mtime, tz=timezone.utc),
                        calculated_at=breakdown.calculation_timestamp,
                    )
                )

        logger.info(f"Found {len(records)} team reports")
        return records

    def write_index(self) -> Path:
        """Render index.html at the reports root.

        Returns:
            Path to the written index.

        Raises:
            ReportsDirectoryNotFoundError: If the reports root is missing.
            OSError: If the index can't be written.
        """
        if not self.reports_root.is_dir():
            raise ReportsDirectoryNotFoundError(self.reports_root)

        records = self.scan_team_records()
        filepath = self.reports_root / INDEX_FILENAME
        filepath.write_text(render_index(records), encoding="utf-8")
        logger.info(f"Index generated with {len(records)} teams: {filepath}")
        return filepath
