"""Per-team HTML dashboard."""

import logging
import re
from datetime import datetime, timezone

from hackjudge.analyzers.issues import MergedIssue, merge_quality_issues, reported_total
from hackjudge.models.schemas import (
    AIAttributionSummary,
    AnalysisBundle,
    CoverageSummary,
    IssueCategory,
    QualitySummary,
    ScoreBreakdown,
    SecuritySummary,
    TeamBehaviorSummary,
    TrivyTarget,
    Vulnerability,
)
from hackjudge.reports.html import (
    COMPONENTS,
    esc,
    format_timestamp,
    grade_for_score,
    grade_style,
    page,
    safe_url,
    source_link,
)

logger = logging.getLogger(__name__)

NO_SCORE_DATA = "No score data available"
NO_QUALITY_DATA = "No SonarCloud data available"
NO_SECURITY_DATA = "No security data available"
NO_TEAM_DATA = "No team data available"
NO_AI_DATA = "No AI analysis data available"
NO_COVERAGE_DATA = "No coverage data available"

ISSUE_SEVERITY_STYLES = {
    "BLOCKER": ("#d73527", "🚨"),
    "CRITICAL": ("#ff6b35", "❌"),
    "MAJOR": ("#ff9500", "⚠️"),
    "MINOR": ("#f7c52d", "💡"),
    "INFO": ("#28a745", "ℹ️"),
}
VULN_SEVERITY_STYLES = {
    "CRITICAL": ("#d73527", "🚨"),
    "HIGH": ("#ff6b35", "❌"),
    "MEDIUM": ("#ff9500", "⚠️"),
    "LOW": ("#f7c52d", "💡"),
}
DEFAULT_SEVERITY_STYLE = ("#6c757d", "•")

ISSUE_SECTIONS = [
    (IssueCategory.VULNERABILITIES, "🔓", "Security Vulnerabilities"),
    (IssueCategory.BUGS, "🐛", "Bugs"),
    (IssueCategory.CODE_SMELLS, "💭", "Code Smells"),
]

COVERAGE_METRICS = ["lines", "statements", "functions", "branches"]

STYLES = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            min-height: 100vh;
            padding: 20px;
            color: #333;
        }
        .container { max-width: 1200px; margin: 0 auto; background: white; border-radius: 20px;
            box-shadow: 0 20px 40px rgba(0,0,0,0.1); overflow: hidden; }
        .header { background: linear-gradient(135deg, #2c3e50 0%, #34495e 100%); color: white;
            padding: 30px; text-align: center; }
        .header h1 { font-size: 2.5rem; margin-bottom: 10px; }
        .header .subtitle { font-size: 1.2rem; opacity: 0.9; }
        .overall-score { background: linear-gradient(135deg, #f093fb 0%, #f5576c 100%); color: white;
            padding: 40px; text-align: center; }
        .score-circle { width: 150px; height: 150px; border-radius: 50%; display: flex; align-items: center;
            justify-content: center; margin: 0 auto 20px; box-shadow: 0 10px 30px rgba(0,0,0,0.2); }
        .score-circle .score { font-size: 3rem; font-weight: bold; }
        .grade-info { font-size: 1.5rem; margin-bottom: 10px; }
        .main-content { padding: 40px; display: grid; grid-template-columns: repeat(auto-fit, minmax(400px, 1fr));
            gap: 30px; }
        .section { background: #f8f9fa; border-radius: 15px; padding: 30px; box-shadow: 0 5px 15px rgba(0,0,0,0.08); }
        .section h2 { color: #2c3e50; margin-bottom: 20px; font-size: 1.5rem; border-bottom: 3px solid #3498db;
            padding-bottom: 10px; }
        .no-data { color: #888; font-style: italic; }
        .score-item { margin-bottom: 20px; background: white; border-radius: 10px; padding: 15px; }
        .score-header { display: flex; align-items: center; margin-bottom: 10px; }
        .score-icon { font-size: 1.5rem; margin-right: 10px; }
        .score-label { flex: 1; font-weight: 600; }
        .score-weight { color: #666; font-size: 0.9rem; }
        .score-bar { height: 8px; background: #e0e0e0; border-radius: 4px; overflow: hidden; margin-bottom: 5px; }
        .score-fill { height: 100%; border-radius: 4px; transition: width 1s ease-in-out; }
        .score-value { text-align: right; font-weight: bold; color: #2c3e50; }
        .metrics-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(100px, 1fr)); gap: 15px;
            margin-bottom: 20px; }
        .metric-card { background: white; border-radius: 10px; padding: 20px; text-align: center;
            box-shadow: 0 2px 8px rgba(0,0,0,0.1); }
        .metric-icon { font-size: 2rem; margin-bottom: 10px; }
        .metric-value { font-size: 1.5rem; font-weight: bold; color: #2c3e50; margin-bottom: 5px; }
        .metric-label { color: #666; font-size: 0.9rem; }
        .sonar-link { text-align: center; margin-top: 20px; }
        .sonar-link a, .file-link, .ref-link { color: #3498db; text-decoration: none; }
        .success-state { text-align: center; color: #27ae60; }
        .success-icon { font-size: 4rem; margin-bottom: 20px; }
        .issue-summary { display: flex; gap: 10px; margin-bottom: 15px; }
        .issue-count { padding: 6px 12px; border-radius: 6px; color: white; font-weight: bold; }
        .issue-count.high { background: #d73527; }
        .issue-count.medium { background: #ff9500; }
        .issue-count.low { background: #f7c52d; }
        .notice-success { margin-top: 20px; padding: 15px; background: #d4edda; border-radius: 8px; color: #155724; }
        .breakdown-item, .ai-stat { display: flex; align-items: center; padding: 10px 0; border-bottom: 1px solid #eee; }
        .breakdown-label, .ai-stat-label { flex: 1; font-weight: 600; }
        .breakdown-score { margin: 0 15px; font-weight: bold; color: #3498db; }
        .breakdown-desc { color: #666; font-size: 0.9rem; }
        .panel { background: white; border-radius: 10px; padding: 20px; margin-bottom: 20px; }
        .ai-good { background: #d4edda; color: #155724; padding: 15px; border-radius: 8px; margin-bottom: 15px; }
        .ai-warning { background: #fff3cd; color: #856404; padding: 15px; border-radius: 8px; margin-bottom: 15px; }
        .panel ul { padding-left: 20px; }
        .coverage-table { width: 100%; border-collapse: collapse; }
        .coverage-table th, .coverage-table td { padding: 8px; border-bottom: 1px solid #eee; text-align: left; }
        .detailed-issues, .trivy-details { margin-top: 30px; }
        .issue-type-section, .trivy-target { margin-bottom: 25px; }
        .issue-type-section h5, .trivy-target h5 { color: #2c3e50; margin-bottom: 15px; padding-bottom: 8px;
            border-bottom: 2px solid #e0e0e0; }
        .issues-list, .vulnerabilities-list { display: grid; gap: 15px; }
        .issue-item, .vulnerability-item { background: white; border-radius: 8px; padding: 15px;
            border-left: 4px solid #3498db; box-shadow: 0 2px 8px rgba(0,0,0,0.1); }
        .vulnerability-item { border-left-color: #dc3545; }
        .issue-header, .vuln-header { display: flex; align-items: center; gap: 10px; margin-bottom: 10px;
            flex-wrap: wrap; }
        .severity-badge { padding: 4px 8px; border-radius: 4px; color: white; font-size: 0.8rem; font-weight: bold; }
        .file-link, .vuln-id, .vuln-package { font-family: monospace; font-size: 0.9rem; }
        .issue-message, .vuln-title { color: #2c3e50; margin-bottom: 10px; font-weight: 500; }
        .vuln-description { color: #666; margin-bottom: 10px; line-height: 1.4; }
        .issue-meta, .vuln-links { display: flex; gap: 15px; font-size: 0.8rem; flex-wrap: wrap; }
        .meta-tag { background: #f8f9fa; padding: 2px 6px; border-radius: 3px; color: #666; }
        .cvss-score { background: #ffc107; padding: 2px 6px; border-radius: 3px; font-size: 0.8rem; font-weight: bold; }
        .issues-summary { background: #e3f2fd; padding: 15px; border-radius: 8px; margin-top: 20px; text-align: center; }
        .footer { background: #2c3e50; color: white; padding: 20px; text-align: center; font-size: 0.9rem; }
        .timestamp { margin-top: 10px; font-size: 0.8rem; }
        @media (max-width: 768px) {
            .main-content { grid-template-columns: 1fr; padding: 20px; }
            .header h1 { font-size: 2rem; }
        }"""

SCRIPT = """        document.addEventListener('DOMContentLoaded', function() {
            document.querySelectorAll('.score-fill').forEach(function(bar) {
                const width = bar.style.width;
                bar.style.width = '0%';
                setTimeout(function() { bar.style.width = width; }, 500);
            });
        });"""


def _no_data(message: str) -> str:
    return f'<p class="no-data">{esc(message)}</p>'


def _section(title: str, content: str) -> str:
    return f"""
            <section class="section">
                <h2>{title}</h2>
                {content}
            </section>"""


def _humanize_key(key: str) -> str:
    """commitActivity / commit_activity -> Commit Activity."""
    words = re.sub(r"([A-Z])", r" \1", key).replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def _format_date(value: str) -> str:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return value[:10]


# --- Score breakdown ---


def _score_chart(breakdown: ScoreBreakdown | None) -> str:
    if breakdown is None:
        return _no_data(NO_SCORE_DATA)

    items = []
    for component, label, _, icon in COMPONENTS:
        score = breakdown.score(component)
        weight = breakdown.weights.get(component.value, 0)
        color = grade_style(grade_for_score(score)).color
        items.append(f"""
                <div class="score-item">
                    <div class="score-header">
                        <span class="score-icon">{icon}</span>
                        <span class="score-label">{esc(label)}</span>
                        <span class="score-weight">({weight}%)</span>
                    </div>
                    <div class="score-bar">
                        <div class="score-fill" style="width: {score}%; background-color: {color}"></div>
                    </div>
                    <div class="score-value">{score}/100</div>
                </div>""")
    return "".join(items)


# --- Code quality ---


def _issue_item(issue: MergedIssue, repository: str | None, branch: str) -> str:
    color, icon = ISSUE_SEVERITY_STYLES.get(issue.severity, DEFAULT_SEVERITY_STYLE)
    line = issue.line or 1
    created = (
        f'<span class="meta-tag">Created: {esc(_format_date(issue.creation_date))}</span>'
        if issue.creation_date
        else ""
    )
    return f"""
                        <div class="issue-item">
                            <div class="issue-header">
                                <span class="severity-badge" style="background-color: {color}">{icon} {esc(issue.severity)}</span>
                                <a href="{source_link(repository, branch, issue.file, line)}" target="_blank" class="file-link">📁 {esc(issue.file)}:{line}</a>
                            </div>
                            <div class="issue-message">{esc(issue.message)}</div>
                            <div class="issue-meta">
                                <span class="meta-tag">Rule: {esc(issue.rule or "Unknown rule")}</span>
                                <span class="meta-tag">Effort: {esc(issue.effort or "Unknown effort")}</span>
                                {created}
                            </div>
                        </div>"""


def _detailed_issues(quality: QualitySummary, repository: str | None, branch: str) -> str:
    merged = merge_quality_issues(quality)

    parts = ['<div class="detailed-issues">', "<h4>🔍 Detailed SonarCloud Issues</h4>"]
    for category, icon, label in ISSUE_SECTIONS:
        issues = merged.in_category(category)
        if not issues:
            continue
        rendered = "".join(_issue_item(issue, repository, branch) for issue in issues)
        parts.append(f"""
                <div class="issue-type-section">
                    <h5>{icon} {label} ({len(issues)})</h5>
                    <div class="issues-list">{rendered}
                    </div>
                </div>""")

    total = len(merged)
    api_total = reported_total(quality)
    if total != api_total:
        reconciliation = (
            f"<p><strong>🔍 SonarCloud API Total: {api_total} issues</strong></p>"
            f"<p><em>Note: Extracted {total} detailed issues from SonarCloud data structure.</em></p>"
        )
    else:
        reconciliation = f"<p><em>✅ All {total} SonarCloud issues extracted and categorized.</em></p>"
    parts.append(f"""
                <div class="issues-summary">
                    <p><strong>📊 Total Issues Found: {total}</strong></p>
                    {reconciliation}
                </div>""")
    parts.append("</div>")
    return "\n".join(parts)


def _quality_details(quality: QualitySummary | None, repository: str | None, branch: str) -> str:
    if quality is None:
        return _no_data(NO_QUALITY_DATA)

    counts = quality.summary
    content = f"""
                <div class="metrics-grid">
                    <div class="metric-card"><div class="metric-icon">🐛</div><div class="metric-value">{counts.bugs}</div><div class="metric-label">Bugs</div></div>
                    <div class="metric-card"><div class="metric-icon">⚠️</div><div class="metric-value">{counts.vulnerabilities}</div><div class="metric-label">Vulnerabilities</div></div>
                    <div class="metric-card"><div class="metric-icon">💭</div><div class="metric-value">{counts.code_smells}</div><div class="metric-label">Code Smells</div></div>
                    <div class="metric-card"><div class="metric-icon">📊</div><div class="metric-value">{counts.coverage:.1f}%</div><div class="metric-label">Coverage</div></div>
                </div>
                <div class="sonar-link">
                    <a href="{safe_url(counts.sonar_project_url)}" target="_blank">View in SonarCloud 🔗</a>
                </div>"""

    if quality.detailed_reports or quality.files_affected:
        content += _detailed_issues(quality, repository, branch)
    return content


# --- Security ---


def _vulnerability_item(vuln: Vulnerability) -> str:
    color, icon = VULN_SEVERITY_STYLES.get(vuln.severity.upper(), DEFAULT_SEVERITY_STYLE)
    cvss = vuln.cvss_score if vuln.cvss_score is not None else "N/A"
    references = " ".join(
        f'<a href="{safe_url(ref)}" target="_blank" class="ref-link">🔗 Reference</a>'
        for ref in vuln.references
    )
    return f"""
                        <div class="vulnerability-item">
                            <div class="vuln-header">
                                <span class="severity-badge" style="background-color: {color}">{icon} {esc(vuln.severity)}</span>
                                <span class="vuln-id">{esc(vuln.vulnerability_id)}</span>
                                <span class="cvss-score">CVSS: {esc(cvss)}</span>
                            </div>
                            <div class="vuln-package">📦 Package: <strong>{esc(vuln.pkg_name)}</strong>
                                ({esc(vuln.installed_version)} → {esc(vuln.fixed_version or "No fix available")})</div>
                            <div class="vuln-title">{esc(vuln.title)}</div>
                            <div class="vuln-description">{esc(vuln.description)}</div>
                            <div class="vuln-links">{references}</div>
                        </div>"""


def _trivy_details(targets: list[TrivyTarget]) -> str:
    parts = ['<div class="trivy-details">', "<h4>🛡️ Security Vulnerabilities (Trivy)</h4>"]
    for target in targets:
        rendered = "".join(_vulnerability_item(vuln) for vuln in target.vulnerabilities)
        parts.append(f"""
                <div class="trivy-target">
                    <h5>📦 {esc(target.target)}</h5>
                    <div class="vulnerabilities-list">{rendered}
                    </div>
                </div>""")
    parts.append("</div>")
    return "\n".join(parts)


def _security_details(security: SecuritySummary | None, targets: list[TrivyTarget] | None) -> str:
    if security is None and targets is None:
        return _no_data(NO_SECURITY_DATA)

    findings = [target for target in targets or [] if target.vulnerabilities]
    counts = security.summary if security else None

    if (counts is None or counts.total == 0) and not findings:
        score = (
            f'<div class="metric-value">Score: {counts.score}/100</div>'
            if counts is not None and counts.score is not None
            else ""
        )
        return f"""
                <div class="success-state">
                    <div class="success-icon">🛡️</div>
                    <h3>Excellent Security!</h3>
                    <p>No security vulnerabilities detected</p>
                    {score}
                </div>"""

    content = ""
    if counts is not None:
        content += f"""
                <div class="issue-summary">
                    <div class="issue-count high">High: {counts.high_severity}</div>
                    <div class="issue-count medium">Medium: {counts.medium_severity}</div>
                    <div class="issue-count low">Low: {counts.low_severity}</div>
                </div>
                <p class="security-details">{esc(security.details or "See security scan for details")}</p>"""

    if findings:
        content += _trivy_details(findings)
    else:
        content += """
                <div class="notice-success">
                    <p><strong>🛡️ No security vulnerabilities found by Trivy scanner!</strong></p>
                </div>"""
    return content


# --- Team, AI, coverage ---


def _team_details(team: TeamBehaviorSummary | None) -> str:
    if team is None:
        return _no_data(NO_TEAM_DATA)

    counts = team.summary
    rows = "".join(
        f"""
                    <div class="breakdown-item">
                        <span class="breakdown-label">{esc(_humanize_key(key))}:</span>
                        <span class="breakdown-score">{entry.score}/{entry.max_score}</span>
                        <span class="breakdown-desc">{esc(entry.description)}</span>
                    </div>"""
        for key, entry in team.breakdown.items()
    )
    return f"""
                <div class="metrics-grid">
                    <div class="metric-card"><div class="metric-icon">📊</div><div class="metric-value">{counts.total_commits}</div><div class="metric-label">Total Commits</div></div>
                    <div class="metric-card"><div class="metric-icon">👥</div><div class="metric-value">{counts.total_authors}</div><div class="metric-label">Contributors</div></div>
                    <div class="metric-card"><div class="metric-icon">💬</div><div class="metric-value">{counts.message_quality}%</div><div class="metric-label">Message Quality</div></div>
                </div>
                <div class="panel">
                    <h4>Detailed Breakdown:</h4>{rows}
                </div>"""


def _ai_details(ai: AIAttributionSummary | None) -> str:
    if ai is None:
        return _no_data(NO_AI_DATA)

    counts = ai.summary
    if counts.has_attribution:
        status = '<div class="ai-good">✅ <strong>AI Attribution:</strong> Properly Attributed</div>'
    else:
        status = '<div class="ai-warning">⚠️ <strong>AI Attribution:</strong> Missing Attribution</div>'
    recommendations = "".join(f"<li>{esc(rec)}</li>" for rec in ai.recommendations)
    return f"""
                <div class="panel">
                    {status}
                    <div class="ai-stat"><span class="ai-stat-label">Estimated AI Usage:</span><span>{counts.estimated_ai_percentage}%</span></div>
                    <div class="ai-stat"><span class="ai-stat-label">AI-related Commits:</span><span>{counts.ai_commits}</span></div>
                    <div class="ai-stat"><span class="ai-stat-label">Code Files Analyzed:</span><span>{ai.patterns.total_code_files}</span></div>
                </div>
                <div class="panel">
                    <h4>Recommendations:</h4>
                    <ul>{recommendations}</ul>
                </div>"""


def _coverage_details(coverage: CoverageSummary | None) -> str:
    if coverage is None:
        return _no_data(NO_COVERAGE_DATA)

    rows = "".join(
        f"<tr><td>{name.title()}</td><td>{coverage.total[name].covered}/{coverage.total[name].total}</td>"
        f"<td>{coverage.total[name].pct:.1f}%</td></tr>"
        for name in COVERAGE_METRICS
        if name in coverage.total
    )
    table = (
        f'<table class="coverage-table"><tr><th>Metric</th><th>Covered</th><th>%</th></tr>{rows}</table>'
        if rows
        else "<p>Coverage data available - see detailed analysis for metrics.</p>"
    )
    return f"""
                <div class="panel">
                    <p><strong>Test files:</strong> {coverage.test_files}</p>
                    {table}
                </div>"""


def render_team_report(
    team_name: str,
    bundle: AnalysisBundle,
    branch: str = "HEAD",
    generated_at: datetime | None = None,
) -> str:
    """Render the self-contained HTML dashboard for one team's PR.

    Every section renders independently; a missing collaborator summary
    becomes a placeholder sentence rather than an error.

    Args:
        team_name: Team identifier shown in the header.
        bundle: Artifacts for the team's PR.
        branch: Branch used for source links.
        generated_at: Render time shown in the footer. Defaults to now.

    Returns:
        The HTML document.
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    breakdown = bundle.breakdown

    if breakdown is not None:
        style = grade_style(breakdown.grade)
        overall = str(breakdown.overall_score)
    else:
        style = grade_style(None)
        overall = "–"

    sections = "".join([
        _section("📊 Score Breakdown", _score_chart(breakdown)),
        _section("⚡ Code Quality &amp; Issues", _quality_details(bundle.quality, bundle.repository, branch)),
        _section("🔒 Security Analysis &amp; Vulnerabilities", _security_details(bundle.security, bundle.vulnerabilities)),
        _section("👥 Team Collaboration", _team_details(bundle.team)),
        _section("🤖 AI Attribution Analysis", _ai_details(bundle.ai)),
        _section("🧪 Test Coverage", _coverage_details(bundle.coverage)),
    ])

    body = f"""    <div class="container">
        <header class="header">
            <h1>🏆 Hackathon Judge Report</h1>
            <div class="subtitle">Team: {esc(team_name)} | PR #{esc(bundle.pr_number or "N/A")}</div>
        </header>
        <section class="overall-score">
            <div class="score-circle" style="background: {style.color}">
                <div class="score">{overall}</div>
            </div>
            <div class="grade-info">Grade: {esc(style.grade)} - {esc(style.description)}</div>
            <div>Overall Score: {overall}/100</div>
        </section>
        <main class="main-content">{sections}
        </main>
        <footer class="footer">
            <div>Generated by Hackathon Judge</div>
            <div class="timestamp">Report generated: {format_timestamp(generated_at)}</div>
        </footer>
    </div>"""

    logger.debug(f"Rendered report for {team_name}")
    return page(f"Hackathon Judge Report - {team_name}", STYLES, body, SCRIPT)
