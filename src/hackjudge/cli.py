"""CLI entry point for hackjudge."""

import asyncio
import json
import logging
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from hackjudge.adapters import (
    BreakdownAdapter,
    CoverageAdapter,
    QualityAdapter,
    ReportsDirectoryNotFoundError,
    SecurityAdapter,
    parse_quality_payload,
)
from hackjudge.analyzers.pipeline import ReportPipeline, report_filename, team_pr_dir
from hackjudge.analyzers.scorer import Scorer
from hackjudge.config import Settings, append_outputs
from hackjudge.models.schemas import Component, ScoreBreakdown
from hackjudge.publishing import GitHubPublisher, PublishError, load_pr_context
from hackjudge.reports.comment import CommentContext, CommentLinks, render_comment
from hackjudge.reports.html import COMPONENTS
from hackjudge.reports.job_summary import render_job_summary

app = typer.Typer(help="Hackathon judge: scores and reports for team pull requests.")

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Hackathon judge: scores and reports for team pull requests."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _score_bar(score: float, width: int = 20) -> str:
    """Create a visual score bar."""
    filled = int(score / 100 * width)
    empty = width - filled
    color = "green" if score >= 80 else "yellow" if score >= 60 else "red"
    return f"[{color}]{'█' * filled}[/{color}][dim]{'░' * empty}[/dim]"


def _print_breakdown(breakdown: ScoreBreakdown) -> None:
    score_color = "green" if breakdown.overall_score >= 80 else "yellow" if breakdown.overall_score >= 60 else "red"
    console.print(
        Panel(
            f"[bold][{score_color}]{breakdown.overall_score}[/{score_color}][/bold] / 100  "
            f"Grade: [bold]{breakdown.grade}[/bold]",
            title="Overall Score",
            expand=False,
        )
    )

    table = Table(title="Score Breakdown", show_header=True)
    table.add_column("Component", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Weight", justify="right", style="dim")
    table.add_column("Points", justify="right")
    table.add_column("Bar", width=20)

    for component, label, _, _ in COMPONENTS:
        score = breakdown.score(component)
        color = "green" if score >= 80 else "yellow" if score >= 60 else "red"
        table.add_row(
            label,
            f"[{color}]{score}[/{color}]",
            f"{breakdown.weights.get(component.value, 0)}%",
            str(breakdown.weighted_contributions.get(component.value, 0)),
            _score_bar(score),
        )

    console.print(table)


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]{message}[/red]")
    return typer.Exit(1)


def _reports_dir(option: Path | None, settings: Settings) -> Path:
    return option if option is not None else settings.reports_dir


@app.command()
def score(
    test: str = typer.Option("0", "--test", envvar="TEST_SCORE", help="Tests & coverage score"),
    sonar: str = typer.Option("0", "--sonar", envvar="SONAR_SCORE", help="Code quality score"),
    security: str = typer.Option("0", "--security", envvar="SECURITY_SCORE", help="Security score"),
    frontend: str = typer.Option("0", "--frontend", envvar="FRONTEND_SCORE", help="Frontend UX score"),
    team_score: str = typer.Option("0", "--team-score", envvar="TEAM_SCORE", help="Team collaboration score"),
    ai: str = typer.Option("0", "--ai", envvar="AI_SCORE", help="AI attribution score"),
    team: str | None = typer.Option(None, "--team", "-t", envvar="TEAM_NAME", help="Team name"),
    pr: str | None = typer.Option(None, "--pr", "-p", envvar="PR_NUMBER", help="Pull request number"),
    reports_dir: Path | None = typer.Option(None, "--reports-dir", "-d", help="Reports root directory"),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", "-o", help="Write score-breakdown.json here instead of the team/PR directory"
    ),
) -> None:
    """Combine the six component scores into an overall score and grade."""
    settings = Settings.from_env()
    scorer = Scorer()
    breakdown = scorer.compute_breakdown({
        Component.TEST.value: test,
        Component.SONAR.value: sonar,
        Component.SECURITY.value: security,
        Component.FRONTEND.value: frontend,
        Component.TEAM.value: team_score,
        Component.AI.value: ai,
    })

    if output_dir is None:
        if team and pr:
            output_dir = team_pr_dir(_reports_dir(reports_dir, settings), team, pr)
        else:
            output_dir = Path(".")

    try:
        path = scorer.save_breakdown(breakdown, output_dir)
        if settings.output_file:
            append_outputs(settings.output_file, {
                "overall_score": breakdown.overall_score,
                "grade": breakdown.grade,
                "breakdown": json.dumps(breakdown.model_dump(mode="json")),
            })
    except OSError as e:
        raise _fail(f"Error saving score breakdown: {e}")

    _print_breakdown(breakdown)
    console.print(f"\n[dim]Saved to {path}[/dim]")


@app.command()
def report(
    team: str | None = typer.Option(None, "--team", "-t", envvar="TEAM_NAME", help="Team to render (default: all)"),
    pr: str | None = typer.Option(None, "--pr", "-p", help="PR to render (default: latest)"),
    reports_dir: Path | None = typer.Option(None, "--reports-dir", "-d", help="Reports root directory"),
    repository: str | None = typer.Option(None, "--repository", help="owner/repo for source links"),
    branch: str | None = typer.Option(None, "--branch", help="Branch for source links"),
) -> None:
    """Render the HTML dashboard for one team or every team."""
    settings = Settings.from_env()
    pipeline = ReportPipeline(
        _reports_dir(reports_dir, settings),
        repository=repository or settings.repository,
        branch=branch or settings.branch,
    )

    try:
        if team:
            path = pipeline.write_team_report(team, pr)
            written = [path] if path else []
        else:
            written = pipeline.write_team_reports()
    except (ReportsDirectoryNotFoundError, OSError) as e:
        raise _fail(f"Error generating reports: {e}")

    if not written:
        raise _fail("No team reports found")
    for path in written:
        console.print(f"[green]HTML report generated: {path}[/green]")


@app.command()
def index(
    reports_dir: Path | None = typer.Option(None, "--reports-dir", "-d", help="Reports root directory"),
) -> None:
    """Render the cross-team index.html."""
    settings = Settings.from_env()
    pipeline = ReportPipeline(_reports_dir(reports_dir, settings))

    try:
        path = pipeline.write_index()
    except (ReportsDirectoryNotFoundError, OSError) as e:
        raise _fail(f"Error generating index: {e}")

    console.print(f"[green]Index generated: {path}[/green]")


def _load_breakdown(pr_dir: Path) -> ScoreBreakdown:
    breakdown = BreakdownAdapter().load(pr_dir)
    if breakdown is None:
        raise _fail(f"No score breakdown in {pr_dir}; run 'hackjudge score' first")
    return breakdown


@app.command()
def comment(
    team: str = typer.Option(..., "--team", "-t", envvar="TEAM_NAME", help="Team name"),
    pr: str = typer.Option(..., "--pr", "-p", envvar="PR_NUMBER", help="Pull request number"),
    reports_dir: Path | None = typer.Option(None, "--reports-dir", "-d", help="Reports root directory"),
    stack: str = typer.Option("Not detected", "--stack", envvar="DETECTED_STACK", help="Detected technology stack"),
    sonar_results: str | None = typer.Option(
        None, "--sonar-results", envvar="SONAR_ANALYSIS_RESULTS", help="Inline SonarCloud results JSON"
    ),
    report_url: str | None = typer.Option(None, "--report-url", envvar="REPORT_URL", help="Persisted report URL"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the comment to a file"),
    post: bool = typer.Option(False, "--post/--dry-run", help="Post the comment to the pull request"),
) -> None:
    """Render the PR comment and optionally post it."""
    settings = Settings.from_env()
    pr_dir = team_pr_dir(_reports_dir(reports_dir, settings), team, pr)
    breakdown = _load_breakdown(pr_dir)

    quality = parse_quality_payload(sonar_results) if sonar_results else None
    if quality is None:
        quality = QualityAdapter().load(pr_dir)
    security = SecurityAdapter().load(pr_dir)
    coverage = CoverageAdapter().load(pr_dir)

    context = CommentContext(team_name=team, stack=stack, pr_number=pr)
    if security is not None:
        context.high_severity = security.summary.high_severity
        context.medium_severity = security.summary.medium_severity
        context.low_severity = security.summary.low_severity
    if coverage is not None:
        context.test_files = coverage.test_files
        if "lines" in coverage.total:
            context.coverage = coverage.total["lines"].pct
    if quality is not None:
        counts = quality.summary
        context.quality = quality
        context.bugs = counts.bugs
        context.code_smells = counts.code_smells
        context.vulnerabilities = counts.vulnerabilities
        context.sonar_status = counts.quality_gate_status
        context.sonar_url = counts.sonar_project_url or "#"

    dashboard_url = settings.run_url if (pr_dir / report_filename(team)).exists() else None
    body = render_comment(breakdown, context, CommentLinks(report_url=report_url, dashboard_url=dashboard_url))

    if output:
        try:
            output.write_text(body, encoding="utf-8")
        except OSError as e:
            raise _fail(f"Error writing comment: {e}")
        console.print(f"[green]Comment written to {output}[/green]")

    if not post:
        if not output:
            console.print(body, markup=False, highlight=False)
        return

    if not settings.repository:
        raise _fail("GITHUB_REPOSITORY is required to post a comment")
    publisher = GitHubPublisher(settings.repository, token=settings.github_token)
    try:
        url = asyncio.run(publisher.post_comment(pr, body))
    except PublishError as e:
        raise _fail(f"Error posting comment: {e}")
    console.print(f"[green]Posted analysis comment to PR #{pr}[/green]" + (f" ({url})" if url else ""))


@app.command()
def summary(
    team: str = typer.Option(..., "--team", "-t", envvar="TEAM_NAME", help="Team name"),
    pr: str = typer.Option(..., "--pr", "-p", envvar="PR_NUMBER", help="Pull request number"),
    reports_dir: Path | None = typer.Option(None, "--reports-dir", "-d", help="Reports root directory"),
    stack: str = typer.Option("Unknown", "--stack", envvar="DETECTED_STACK", help="Detected technology stack"),
    language: str = typer.Option("Unknown", "--language", envvar="DETECTED_LANGUAGE", help="Detected language"),
    sonar_url: str = typer.Option("#", "--sonar-url", envvar="SONAR_URL", help="SonarCloud project URL"),
) -> None:
    """Write the CI job summary (or print it outside Actions)."""
    settings = Settings.from_env()
    pr_dir = team_pr_dir(_reports_dir(reports_dir, settings), team, pr)
    breakdown = _load_breakdown(pr_dir)

    text = render_job_summary(
        team,
        breakdown,
        stack=stack,
        language=language,
        sonar_url=sonar_url,
        artifacts_url=settings.run_url,
    )

    if settings.step_summary_file is None:
        console.print(text, markup=False, highlight=False)
        return

    try:
        with settings.step_summary_file.open("a", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise _fail(f"Error creating job summary: {e}")
    console.print("[green]Job summary created[/green]")


@app.command("pr-info")
def pr_info(
    event_path: Path | None = typer.Option(None, "--event-path", envvar="GITHUB_EVENT_PATH", help="Event payload"),
    event_name: str | None = typer.Option(None, "--event-name", envvar="GITHUB_EVENT_NAME", help="Event name"),
    pr_number: str | None = typer.Option(None, "--pr-number", envvar="INPUT_PR_NUMBER", help="Manual PR number"),
    actor: str | None = typer.Option(None, "--actor", envvar="GITHUB_ACTOR", help="Triggering user"),
    sha: str | None = typer.Option(None, "--sha", envvar="GITHUB_SHA", help="Commit SHA"),
) -> None:
    """Extract PR number, team name and head details from the CI event."""
    settings = Settings.from_env()
    context = load_pr_context(
        event_path,
        event_name,
        repository=settings.repository,
        manual_pr_number=pr_number,
        actor=actor,
        sha=sha,
    )

    table = Table(title="Pull Request", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value", style="cyan")
    table.add_row("PR Number", context.pr_number)
    table.add_row("Team Name", context.team_name)
    table.add_row("Head SHA", context.head_sha or "-")
    table.add_row("Head Repo", context.head_repo or "-")
    table.add_row("Is Fork", str(context.is_fork).lower())
    console.print(table)

    if settings.output_file:
        try:
            append_outputs(settings.output_file, {
                "pr_number": context.pr_number,
                "team_name": context.team_name,
                "head_sha": context.head_sha or "",
                "fork_repo": context.head_repo or "",
                "is_fork": str(context.is_fork).lower(),
            })
        except OSError as e:
            raise _fail(f"Error writing outputs: {e}")


@app.command()
def version() -> None:
    """Show version information."""
    from hackjudge import __version__

    console.print(f"hackjudge v{__version__}")


if __name__ == "__main__":
    app()
