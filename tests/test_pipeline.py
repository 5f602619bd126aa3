"""
Tests for the reports directory pipeline: bundle loading, team reports and index scanning.
"""

import pytest

from hackjudge.adapters import ReportsDirectoryNotFoundError
from hackjudge.analyzers.pipeline import (
    ReportPipeline,
    find_latest_pr_dir,
    load_bundle,
    report_filename,
    team_pr_dir,
    team_slug,
)


def test_team_pr_dir_layout(tmp_path):
    assert team_pr_dir(tmp_path, "alpha", 3) == tmp_path / "teams" / "alpha" / "pr-3"


def test_team_slug_strips_path_separators():
    assert team_slug("../evil/team") == "-evil-team"
    assert report_filename("a b") == "hackathon-report-a-b.html"


def test_latest_pr_is_numeric_max(write_artifacts, tmp_path):
    write_artifacts("alpha", 9)
    write_artifacts("alpha", 10)
    write_artifacts("alpha", 2)
    (tmp_path / "teams" / "alpha" / "pr-notes").mkdir()
    assert find_latest_pr_dir(tmp_path / "teams" / "alpha").name == "pr-10"


def test_latest_pr_none_without_pr_dirs(tmp_path):
    (tmp_path / "teams" / "alpha").mkdir(parents=True)
    assert find_latest_pr_dir(tmp_path / "teams" / "alpha") is None


def test_load_bundle_treats_missing_and_malformed_as_none(write_artifacts, security_summary, coverage_summary):
    pr_dir = write_artifacts("alpha", 4, {
        "security-summary.json": security_summary,
        "coverage-summary.json": coverage_summary,
        "team-analysis.json": "{not json",
        "ai-analysis.json": [1, 2, 3],
    })
    bundle = load_bundle(pr_dir, "alpha", repository="org/repo")
    assert bundle.pr_number == "4"
    assert bundle.security.summary.medium_severity == 1
    assert bundle.coverage.total["lines"].pct == 75.0
    assert bundle.team is None
    assert bundle.ai is None
    assert bundle.breakdown is None
    assert bundle.quality is None


def test_trivy_full_report_shape(write_artifacts):
    pr_dir = write_artifacts("alpha", 1, {
        "trivy-results.json": {
            "Results": [
                {"Target": "package-lock.json", "Vulnerabilities": [{"VulnerabilityID": "CVE-1", "Severity": "LOW"}]},
                {"Target": "Dockerfile", "Vulnerabilities": None},
            ]
        }
    })
    targets = load_bundle(pr_dir, "alpha").vulnerabilities
    assert [t.target for t in targets] == ["package-lock.json", "Dockerfile"]
    assert targets[1].vulnerabilities == []


def test_write_team_report_uses_latest_pr(write_artifacts, tmp_path, breakdown):
    write_artifacts("alpha", 1)
    write_artifacts("alpha", 2, {"score-breakdown.json": breakdown.model_dump(mode="json")})

    path = ReportPipeline(tmp_path, repository="org/repo").write_team_report("alpha")

    assert path == tmp_path / "teams" / "alpha" / "pr-2" / "hackathon-report-alpha.html"
    html = path.read_text()
    assert "PR #2" in html
    assert "Grade: C - Good" in html


def test_write_team_reports_covers_every_team(write_artifacts, tmp_path):
    write_artifacts("alpha", 1)
    write_artifacts("beta", 5)
    (tmp_path / "teams" / "gamma").mkdir()

    written = ReportPipeline(tmp_path).write_team_reports()

    assert sorted(p.name for p in written) == ["hackathon-report-alpha.html", "hackathon-report-beta.html"]


def test_missing_teams_dir_raises(tmp_path):
    with pytest.raises(ReportsDirectoryNotFoundError):
        ReportPipeline(tmp_path).write_team_reports()


def test_missing_reports_root_raises(tmp_path):
    with pytest.raises(ReportsDirectoryNotFoundError):
        ReportPipeline(tmp_path / "nope").write_index()


def test_scan_skips_incomplete_pr_dirs(write_artifacts, tmp_path, breakdown):
    data = breakdown.model_dump(mode="json")
    write_artifacts("alpha", 1, {"score-breakdown.json": data, "hackathon-report-alpha.html": "<html></html>"})
    write_artifacts("beta", 1, {"score-breakdown.json": data})
    write_artifacts("gamma", 1, {"hackathon-report-gamma.html": "<html></html>"})
    write_artifacts("delta", 1, {"score-breakdown.json": "{bad", "hackathon-report-delta.html": "<html></html>"})

    records = ReportPipeline(tmp_path).scan_team_records()

    assert [r.team_name for r in records] == ["alpha"]
    assert records[0].report_path == "teams/alpha/pr-1/hackathon-report-alpha.html"
    assert records[0].overall_score == 75
    assert records[0].grade == "C"


def test_write_index(write_artifacts, tmp_path, breakdown):
    data = breakdown.model_dump(mode="json")
    write_artifacts("alpha", 1, {"score-breakdown.json": data, "hackathon-report-alpha.html": "<html></html>"})

    path = ReportPipeline(tmp_path).write_index()

    assert path == tmp_path / "index.html"
    html = path.read_text()
    assert 'href="teams/alpha/pr-1/hackathon-report-alpha.html"' in html
    assert "Teams Analyzed" in html


def test_infinite_counts_do_not_break_loading(write_artifacts, security_summary):
    pr_dir = write_artifacts("alpha", 6, {
        "sonar-analysis-results.json": '{"summary": {"bugs": 1e400, "code_smells": "Infinity", "vulnerabilities": "nan"}}',
        "security-summary.json": security_summary,
    })
    bundle = load_bundle(pr_dir, "alpha")
    assert bundle.quality.summary.bugs == 0
    assert bundle.quality.summary.code_smells == 0
    assert bundle.quality.summary.vulnerabilities == 0
    assert bundle.security.summary.high_severity == 1


def test_oversized_integer_literal_is_treated_as_malformed(write_artifacts, security_summary):
    pr_dir = write_artifacts("alpha", 7, {
        "sonar-analysis-results.json": '{"summary": {"bugs": ' + "9" * 5000 + "}}",
        "security-summary.json": security_summary,
    })
    bundle = load_bundle(pr_dir, "alpha")
    assert bundle.quality is None
    assert bundle.security.summary.high_severity == 1
