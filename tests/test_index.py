"""
Tests for the cross-team index dashboard.
"""

from datetime import datetime, timezone

from hackjudge.models.schemas import TeamRecord
from hackjudge.reports.index_page import render_index, sort_records, summarize

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _record(name, score, grade="C"):
    return TeamRecord(
        team_name=name,
        pr_number="1",
        overall_score=score,
        grade=grade,
        component_scores={"test": score},
        report_path=f"teams/{name}/pr-1/hackathon-report-{name}.html",
        last_modified=NOW,
    )


def test_sort_is_descending_and_stable():
    records = [_record("a", 55), _record("b", 90), _record("c", 90), _record("d", 70)]
    assert [r.team_name for r in sort_records(records)] == ["b", "c", "d", "a"]


def test_summary_stats():
    records = [_record("a", 55), _record("b", 90), _record("c", 90), _record("d", 70)]
    total, mean, passing = summarize(records)
    assert total == 4
    assert mean == 76.25
    assert passing == 3


def test_empty_index_shows_empty_state():
    html = render_index([], generated_at=NOW)
    assert "No Reports Yet" in html
    assert '<div class="stat-value">0</div>' in html
    assert '<div class="stat-value">0.0</div>' in html


def test_cards_link_to_reports_in_score_order():
    html = render_index([_record("low", 40, "F"), _record("high", 95, "A")], generated_at=NOW)
    assert 'href="teams/high/pr-1/hackathon-report-high.html"' in html
    assert html.index("teams/high/") < html.index("teams/low/")
    assert "Grade: A" in html
    assert '<div class="stat-value">67.5</div>' in html


def test_team_names_are_escaped():
    html = render_index([_record("<img src=x>", 80)], generated_at=NOW)
    assert "<img src=x>" not in html
    assert "&lt;img src=x&gt;" in html
