"""Markdown body of the PR analysis comment."""

import logging
import math
from datetime import datetime, timezone

from pydantic import BaseModel

from hackjudge.models.schemas import Component, QualitySummary, ScoreBreakdown
from hackjudge.reports.html import COMPONENTS

logger = logging.getLogger(__name__)

TOO_MANY_ISSUES = "Too many issues - check SonarCloud report"
MAX_CODE_SMELLS = 5
COVERAGE_TARGET = 80
PASSING_COMPONENT_SCORE = 70


class CommentContext(BaseModel):
    """PR and collaborator details shown alongside the scores."""

    team_name: str = "Unknown Team"
    stack: str = "Not detected"
    pr_number: str = "0"
    high_severity: int = 0
    medium_severity: int = 0
    low_severity: int = 0
    coverage: float = 0.0
    test_files: int = 0
    bugs: int = 0
    code_smells: int = 0
    vulnerabilities: int = 0
    sonar_status: str = "UNKNOWN"
    sonar_url: str = "#"
    quality: QualitySummary | None = None

    @property
    def total_vulnerabilities(self) -> int:
        return self.high_severity + self.medium_severity + self.low_severity

    @property
    def gate_failed(self) -> bool:
        return self.sonar_status.upper() in ("FAILED", "ERROR")


class CommentLinks(BaseModel):
    """Optional links listed under Quick Links."""

    report_url: str | None = None
    dashboard_url: str | None = None


def progress_bar(score: int) -> str:
    """Ten-character bar, one filled block per full 10 points."""
    filled = min(max(math.floor(score / 10), 0), 10)
    return "█" * filled + "░" * (10 - filled)


def grade_emoji(score: int) -> str:
    if score >= 90:
        return "🏆"
    if score >= 80:
        return "🥇"
    if score >= 70:
        return "🥈"
    if score >= 60:
        return "🥉"
    return "🔧"


def status_emoji(score: int) -> str:
    if score >= 80:
        return "✅"
    if score >= 60:
        return "⚠️"
    return "❌"


def _has_text(value: str) -> bool:
    return bool(value and value.strip() and value != TOO_MANY_ISSUES)


def format_detailed_issues(quality: QualitySummary | None, sonar_url: str = "#") -> str:
    """Pre-formatted SonarCloud issue lists, falling back to counts per category.

    Returns an empty string when the payload has no detailed issues at all.
    """
    if quality is None or quality.detailed_issues is None:
        return ""

    details = quality.detailed_issues
    counts = quality.summary
    parts = []

    if _has_text(details.bugs):
        parts.append(f"\n### 🐛 Bugs Found\n\n{details.bugs}\n")
    elif counts.bugs > 0:
        parts.append(
            f"\n### 🐛 Bugs Found\n**{counts.bugs}** bugs detected. "
            f"Check the [SonarCloud report]({sonar_url}) for details.\n"
        )

    if _has_text(details.vulnerabilities):
        parts.append(f"\n### 🔒 Security Vulnerabilities\n\n{details.vulnerabilities}\n")
    elif counts.vulnerabilities > 0:
        parts.append(
            f"\n### 🔒 Security Vulnerabilities\n**{counts.vulnerabilities}** vulnerabilities detected. "
            f"Check the [SonarCloud report]({sonar_url}) for details.\n"
        )

    if _has_text(details.code_smells):
        smells = [smell for smell in details.code_smells.split("---") if smell.strip()]
        text = f"\n### 👃 Code Smells (showing first {MAX_CODE_SMELLS})\n\n" + "---".join(smells[:MAX_CODE_SMELLS])
        if len(smells) > MAX_CODE_SMELLS:
            text += (
                f"\n\n*... and {len(smells) - MAX_CODE_SMELLS} more code smell issues. "
                f"Check the [SonarCloud report]({sonar_url}) for complete details.*\n"
            )
        parts.append(text + "\n")
    elif counts.code_smells > 0:
        parts.append(
            f"\n### 👃 Code Smells\n**{counts.code_smells}** code smells detected. "
            f"Check the [SonarCloud report]({sonar_url}) for details.\n"
        )

    return "".join(parts)


def action_items(breakdown: ScoreBreakdown, context: CommentContext) -> list[str]:
    """Prioritized improvement suggestions; empty when nothing needs attention."""
    items = []

    if context.total_vulnerabilities > 0:
        items.append(
            f"**🔒 Security:** Fix {context.total_vulnerabilities} vulnerabilities "
            f"({context.high_severity} high, {context.medium_severity} medium, {context.low_severity} low)"
        )

    if context.test_files == 0:
        items.append("**🧪 Testing:** Create test files and achieve basic test coverage")
    elif context.coverage < COVERAGE_TARGET:
        items.append(f"**🧪 Testing:** Increase coverage from {context.coverage:.1f}% to {COVERAGE_TARGET}%+")

    if context.bugs > 0 or context.code_smells > 5 or context.gate_failed:
        items.append(
            f"**🔧 Code Quality:** Address {context.bugs} bugs and {context.code_smells} code smells"
        )

    if breakdown.score(Component.FRONTEND) < PASSING_COMPONENT_SCORE:
        items.append("**🎨 Frontend:** Improve user experience and UI/UX design")

    if breakdown.score(Component.TEAM) < PASSING_COMPONENT_SCORE:
        items.append("**👥 Collaboration:** Improve commit practices and team coordination")

    return items


def render_comment(
    breakdown: ScoreBreakdown,
    context: CommentContext,
    links: CommentLinks | None = None,
    generated_at: datetime | None = None,
) -> str:
    """Render the markdown comment posted on a team's pull request.

    Args:
        breakdown: Score breakdown for the PR.
        context: Team, stack and collaborator details.
        links: Report and dashboard URLs, listed when present.
        generated_at: Date shown in the footer. Defaults to now.

    Returns:
        Markdown text.
    """
    links = links or CommentLinks()
    generated_at = generated_at or datetime.now(timezone.utc)
    overall = breakdown.overall_score

    lines = [
        "# 🏆 Hackathon Code Analysis Results",
        "",
        f"**👥 Team:** {context.team_name}",
        f"**🛠️ Technology Stack:** {context.stack}",
        f"**📊 Overall Score:** {grade_emoji(overall)} **{overall}/100** (Grade {breakdown.grade})",
        "",
        "## 📈 Detailed Score Breakdown",
        "",
        "| Category | Score | Progress | Weight |",
        "|----------|-------|----------|---------|",
    ]
    for component, label, _, _ in COMPONENTS:
        score = breakdown.score(component)
        weight = breakdown.weights.get(component.value, 0)
        lines.append(f"| {status_emoji(score)} **{label}** | {score}/100 | `{progress_bar(score)}` | {weight}% |")

    lines += ["", "## 🔗 Quick Links"]
    if links.report_url:
        lines.append(
            f"- 💾 **[Persistent Analysis Report]({links.report_url})** - Stored analysis results for team tracking"
        )
    if links.dashboard_url:
        lines.append(
            f"- 🎨 **[Interactive HTML Dashboard]({links.dashboard_url})** - Visual report (download from artifacts)"
        )
    lines += ["", "## 🔧 Code Quality Analysis"]

    detailed = format_detailed_issues(context.quality, context.sonar_url)
    if detailed:
        lines.append(detailed)
    else:
        if context.sonar_status.upper() != "UNKNOWN":
            gate = "❌ FAILED" if context.gate_failed else "✅ PASSED"
            lines.append(f"**🚦 Quality Gate:** {gate}")
            lines.append(
                f"**📋 Issues Summary:** {context.bugs} Bugs | {context.code_smells} Code Smells | "
                f"{context.vulnerabilities} Vulnerabilities"
            )
        else:
            lines.append("⏳ **SonarCloud analysis is pending or unavailable.**")
        lines.append("")

    lines += ["## 🎯 Priority Action Items", ""]
    items = action_items(breakdown, context)
    if items:
        lines += [f"- {item}" for item in items]
    elif overall >= 85:
        lines.append("🏆 **Excellent work!** Your code meets high standards.")
    else:
        lines.append("📝 **Good progress!** Continue improving your code quality.")

    lines += [
        "",
        "---",
        "",
        '<div align="center">',
        "",
        "**🤖 Automated Analysis Report**",
        f"📅 Generated on {generated_at:%Y-%m-%d} | 🔄 PR #{context.pr_number} | ⚡ Powered by GitHub Actions",
        "",
        "*Need help improving your score? Check the [analysis links](#-quick-links) above for detailed reports.*",
        "",
        "</div>",
    ]

    logger.debug(f"Rendered comment for PR #{context.pr_number} with {len(items)} action items")
    return "\n".join(lines)
