"""Markdown summary for the CI job page."""

from datetime import datetime, timezone

from hackjudge.models.schemas import Component, ScoreBreakdown

SUMMARY_LABELS = [
    (Component.TEST, "Tests & Coverage"),
    (Component.SONAR, "Code Quality (SonarCloud)"),
    (Component.SECURITY, "Security"),
    (Component.FRONTEND, "Frontend UX"),
    (Component.TEAM, "Team Collaboration"),
    (Component.AI, "AI Attribution"),
]


def render_job_summary(
    team_name: str,
    breakdown: ScoreBreakdown,
    stack: str = "Unknown",
    language: str = "Unknown",
    sonar_url: str = "#",
    artifacts_url: str | None = None,
    generated_at: datetime | None = None,
) -> str:
    """Render the block appended to $GITHUB_STEP_SUMMARY."""
    generated_at = generated_at or datetime.now(timezone.utc)

    lines = [
        "## 🏆 Hackathon Analysis Complete",
        "",
        f"**Team:** {team_name}  ",
        f"**Final Score:** {breakdown.overall_score}/100 (Grade {breakdown.grade})  ",
        f"**Stack:** {stack} ({language})",
        "",
        "### 📊 Score Breakdown",
    ]
    lines += [f"- **{label}:** {breakdown.score(component)}/100" for component, label in SUMMARY_LABELS]
    lines += ["", "### 🔗 Resources", f"- [SonarCloud Report]({sonar_url})"]
    if artifacts_url:
        lines.append(f"- [Analysis Artifacts]({artifacts_url})")
    lines += [
        "",
        "### 📈 Analysis Summary",
        f"Generated on: {generated_at.isoformat()}  ",
        "Analysis completed with scoring across all evaluation criteria.",
        "",
    ]
    return "\n".join(lines)
