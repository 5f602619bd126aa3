"""
Tests for the PR comment and CI job summary markdown.
"""

import json

from hackjudge.adapters import parse_quality_payload
from hackjudge.analyzers.scorer import Scorer
from hackjudge.models.schemas import QualitySummary
from hackjudge.reports.comment import (
    TOO_MANY_ISSUES,
    CommentContext,
    CommentLinks,
    action_items,
    format_detailed_issues,
    progress_bar,
    render_comment,
)
from hackjudge.reports.job_summary import render_job_summary


def _all(value):
    return Scorer().compute_breakdown(
        {name: value for name in ("test", "sonar", "security", "frontend", "team", "ai")}
    )


def test_progress_bar():
    assert progress_bar(0) == "░" * 10
    assert progress_bar(75) == "█" * 7 + "░" * 3
    assert progress_bar(100) == "█" * 10
    assert len(progress_bar(59)) == 10


def test_comment_table_and_header(breakdown, fixed_time):
    context = CommentContext(team_name="alpha", stack="React", pr_number="12", test_files=3, coverage=90)
    body = render_comment(breakdown, context, generated_at=fixed_time)
    assert "**👥 Team:** alpha" in body
    assert "**🛠️ Technology Stack:** React" in body
    assert "**75/100** (Grade C)" in body
    assert "| ✅ **Tests & Coverage** | 80/100 | `████████░░` | 25% |" in body
    assert "| ❌ **Team Collaboration** | 50/100 | `█████░░░░░` | 10% |" in body
    assert "📅 Generated on 2024-05-01 | 🔄 PR #12" in body


def test_quick_links_only_when_provided(breakdown):
    body = render_comment(breakdown, CommentContext())
    assert "Persistent Analysis Report" not in body
    body = render_comment(
        breakdown,
        CommentContext(),
        CommentLinks(report_url="https://example.com/r", dashboard_url="https://example.com/d"),
    )
    assert "[Persistent Analysis Report](https://example.com/r)" in body
    assert "[Interactive HTML Dashboard](https://example.com/d)" in body


def test_pending_notice_without_quality_data(breakdown):
    body = render_comment(breakdown, CommentContext())
    assert "SonarCloud analysis is pending or unavailable" in body


def test_gate_fallback_line(breakdown):
    context = CommentContext(sonar_status="ERROR", bugs=2, code_smells=3, vulnerabilities=1)
    body = render_comment(breakdown, context)
    assert "**🚦 Quality Gate:** ❌ FAILED" in body
    assert "2 Bugs | 3 Code Smells | 1 Vulnerabilities" in body


def test_too_many_issues_sentinel_counts_as_empty():
    quality = QualitySummary.model_validate({
        "summary": {"bugs": 0, "code_smells": 0},
        "detailed_issues": {"bugs": TOO_MANY_ISSUES, "code_smells": TOO_MANY_ISSUES, "vulnerabilities": ""},
    })
    assert format_detailed_issues(quality) == ""


def test_sentinel_falls_back_to_counts():
    quality = QualitySummary.model_validate({
        "summary": {"bugs": 4},
        "detailed_issues": {"bugs": TOO_MANY_ISSUES},
    })
    text = format_detailed_issues(quality, "https://sonar.example")
    assert "**4** bugs detected" in text
    assert "(https://sonar.example)" in text


def test_code_smells_limited_to_five():
    smells = "---".join(f"\n- smell {i}\n" for i in range(8))
    quality = QualitySummary.model_validate({"detailed_issues": {"code_smells": smells}})
    text = format_detailed_issues(quality)
    assert "smell 4" in text
    assert "smell 5" not in text
    assert "... and 3 more code smell issues" in text


def test_truncated_payload_is_repaired(breakdown):
    full = json.dumps({"summary": {"bugs": 1}, "detailed_issues": {"bugs": "- null check"}})
    quality = parse_quality_payload(full[:-2])
    assert quality is not None
    assert quality.detailed_issues.bugs == "- null check"

    body = render_comment(breakdown, CommentContext(quality=quality, sonar_status="OK"))
    assert "### 🐛 Bugs Found" in body
    assert "- null check" in body


def test_unrecoverable_payload_falls_back_to_counts(breakdown):
    quality = parse_quality_payload('{"summary": {"bugs": [1, 2')
    assert quality is None

    context = CommentContext(quality=quality, sonar_status="OK", bugs=1)
    body = render_comment(breakdown, context)
    assert "**🚦 Quality Gate:** ✅ PASSED" in body
    assert "1 Bugs" in body


def test_empty_payloads_are_none():
    assert parse_quality_payload(None) is None
    assert parse_quality_payload("{}") is None


def test_action_items_priority(breakdown):
    context = CommentContext(
        high_severity=1, medium_severity=2, low_severity=0, test_files=0, bugs=1, code_smells=0,
    )
    items = action_items(breakdown, context)
    assert items[0].startswith("**🔒 Security:** Fix 3 vulnerabilities (1 high, 2 medium, 0 low)")
    assert items[1] == "**🧪 Testing:** Create test files and achieve basic test coverage"
    assert items[2].startswith("**🔧 Code Quality:**")
    # frontend 60 and team 50 are both below 70
    assert items[3].startswith("**🎨 Frontend:**")
    assert items[4].startswith("**👥 Collaboration:**")


def test_low_coverage_item():
    items = action_items(_all(90), CommentContext(test_files=2, coverage=55.25))
    assert items == ["**🧪 Testing:** Increase coverage from 55.2% to 80%+"]


def test_positive_message_when_nothing_to_do():
    context = CommentContext(test_files=5, coverage=95)
    assert "Excellent work" in render_comment(_all(90), context)
    assert "Good progress" in render_comment(_all(80), context)


def test_job_summary(breakdown, fixed_time):
    text = render_job_summary(
        "alpha",
        breakdown,
        stack="React",
        language="JavaScript",
        artifacts_url="https://github.com/org/repo/actions/runs/1",
        generated_at=fixed_time,
    )
    assert "**Final Score:** 75/100 (Grade C)" in text
    assert "**Stack:** React (JavaScript)" in text
    assert "- **Code Quality (SonarCloud):** 70/100" in text
    assert "[Analysis Artifacts](https://github.com/org/repo/actions/runs/1)" in text
