"""Cross-team index dashboard."""

import logging
from datetime import datetime, timezone

from hackjudge.models.schemas import TeamRecord
from hackjudge.reports.html import COMPONENTS, esc, format_timestamp, grade_style, page

logger = logging.getLogger(__name__)

PASSING_SCORE = 70

STYLES = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            min-height: 100vh;
            color: #333;
        }
        .container { max-width: 1200px; margin: 0 auto; padding: 20px; }
        .header { text-align: center; color: white; margin-bottom: 40px; }
        .header h1 { font-size: 3em; margin-bottom: 10px; text-shadow: 2px 2px 4px rgba(0,0,0,0.3); }
        .header p { font-size: 1.2em; opacity: 0.9; }
        .stats-overview { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px;
            margin-bottom: 40px; }
        .stat-card { background: white; padding: 20px; border-radius: 15px; text-align: center;
            box-shadow: 0 8px 32px rgba(0,0,0,0.1); }
        .stat-value { font-size: 2.5em; font-weight: bold; color: #667eea; margin-bottom: 5px; }
        .stat-label { color: #666; font-size: 0.9em; text-transform: uppercase; letter-spacing: 1px; }
        .teams-grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(350px, 1fr)); gap: 25px; }
        .team-card { background: white; border-radius: 20px; padding: 25px; box-shadow: 0 10px 40px rgba(0,0,0,0.1);
            transition: all 0.3s ease; border: 2px solid transparent; }
        .team-card:hover { transform: translateY(-5px); border-color: #667eea; }
        .team-header { margin-bottom: 20px; }
        .team-header h3 { font-size: 1.5em; margin-bottom: 5px; }
        .pr-number { color: #666; font-size: 0.9em; }
        .overall-score { text-align: center; padding: 15px; border-radius: 15px; margin-bottom: 15px; }
        .score-value { font-size: 2.2em; font-weight: bold; display: block; }
        .score-grade { font-size: 1.1em; margin-top: 5px; opacity: 0.8; }
        .components-grid { display: grid; grid-template-columns: repeat(3, 1fr); gap: 10px; margin-bottom: 20px; }
        .component { text-align: center; padding: 8px; border-radius: 8px; background: #f8f9fa; }
        .component-icon { font-size: 1.2em; margin-bottom: 3px; }
        .component-score { font-weight: bold; font-size: 0.9em; }
        .component-label { font-size: 0.7em; color: #666; margin-top: 2px; }
        .view-report-btn { display: block; width: 100%; padding: 12px; background: linear-gradient(135deg, #667eea, #764ba2);
            color: white; text-decoration: none; border-radius: 10px; text-align: center; font-weight: 500; }
        .last-updated { text-align: center; color: #999; font-size: 0.8em; margin-top: 10px; }
        .timestamp { text-align: center; color: white; margin-top: 40px; opacity: 0.8; font-size: 0.9em; }
        .no-reports { text-align: center; background: white; padding: 60px; border-radius: 20px;
            box-shadow: 0 10px 40px rgba(0,0,0,0.1); }
        .no-reports h2 { color: #666; margin-bottom: 15px; }
        .no-reports p { color: #999; }
        @media (max-width: 768px) {
            .header h1 { font-size: 2em; }
            .teams-grid { grid-template-columns: 1fr; }
            .components-grid { grid-template-columns: repeat(2, 1fr); }
        }"""


def sort_records(records: list[TeamRecord]) -> list[TeamRecord]:
    """Highest overall score first; ties keep discovery order."""
    return sorted(records, key=lambda record: record.overall_score, reverse=True)


def summarize(records: list[TeamRecord]) -> tuple[int, float, int]:
    """Team count, mean overall score and count scoring 70+."""
    total = len(records)
    if total == 0:
        return 0, 0.0, 0
    mean = sum(record.overall_score for record in records) / total
    passing = sum(1 for record in records if record.overall_score >= PASSING_SCORE)
    return total, mean, passing


def _team_card(record: TeamRecord) -> str:
    style = grade_style(record.grade)
    components = "".join(
        f"""
                        <div class="component">
                            <div class="component-icon">{icon}</div>
                            <div class="component-score">{record.component_scores.get(component.value, 0)}</div>
                            <div class="component-label">{esc(short_label)}</div>
                        </div>"""
        for component, _, short_label, icon in COMPONENTS
    )
    return f"""
                <div class="team-card">
                    <div class="team-header">
                        <h3>{esc(record.team_name)}</h3>
                        <div class="pr-number">PR #{esc(record.pr_number)}</div>
                    </div>
                    <div class="overall-score" style="background-color: {style.background}; color: {style.color}">
                        <span class="score-value">{record.overall_score}</span>
                        <div class="score-grade">Grade: {esc(record.grade)}</div>
                    </div>
                    <div class="components-grid">{components}
                    </div>
                    <a href="{esc(record.report_path)}" class="view-report-btn">📊 View Detailed Report</a>
                    <div class="last-updated">Updated: {format_timestamp(record.last_modified)}</div>
                </div>"""


def render_index(records: list[TeamRecord], generated_at: datetime | None = None) -> str:
    """Render the cross-team dashboard.

    Args:
        records: One record per analyzed PR directory, in discovery order.
        generated_at: Render time shown at the bottom. Defaults to now.

    Returns:
        The HTML document.
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    ordered = sort_records(records)
    total, mean, passing = summarize(ordered)

    if ordered:
        cards = "".join(_team_card(record) for record in ordered)
        teams = f"""
        <div class="teams-grid">{cards}
        </div>"""
    else:
        teams = """
        <div class="no-reports">
            <h2>📝 No Reports Yet</h2>
            <p>Team reports will appear here after their pull requests are analyzed.</p>
        </div>"""

    body = f"""    <div class="container">
        <div class="header">
            <h1>🏆 Hackathon Judge</h1>
            <p>Team Performance Dashboard</p>
        </div>
        <div class="stats-overview">
            <div class="stat-card">
                <div class="stat-value">{total}</div>
                <div class="stat-label">Teams Analyzed</div>
            </div>
            <div class="stat-card">
                <div class="stat-value">{mean:.1f}</div>
                <div class="stat-label">Average Score</div>
            </div>
            <div class="stat-card">
                <div class="stat-value">{passing}</div>
                <div class="stat-label">Teams Scoring 70+</div>
            </div>
        </div>{teams}
        <div class="timestamp">Last updated: {format_timestamp(generated_at)}</div>
    </div>"""

    logger.debug(f"Rendered index with {total} teams")
    return page("Hackathon Judge - Team Reports", STYLES, body)
