"""
Tests for the score aggregator: sanitation, weighting, rounding and grading.
"""

import json

import pytest

from hackjudge.adapters import BreakdownAdapter
from hackjudge.analyzers.scorer import Scorer, safe_int


def _uniform(value):
    return {name: value for name in ("test", "sonar", "security", "frontend", "team", "ai")}


def test_default_weights_sum_to_100():
    assert sum(Scorer.WEIGHTS.values()) == 100


def test_mixed_scores_give_75_grade_c(breakdown):
    assert breakdown.overall_score == 75
    assert breakdown.grade == "C"
    assert breakdown.weighted_contributions == {
        "test": 20, "sonar": 21, "security": 18, "frontend": 6, "team": 5, "ai": 5,
    }


def test_all_zero_is_f():
    result = Scorer().compute_breakdown(_uniform(0))
    assert result.overall_score == 0
    assert result.grade == "F"


def test_all_hundred_is_a():
    result = Scorer().compute_breakdown(_uniform(100))
    assert result.overall_score == 100
    assert result.grade == "A"


@pytest.mark.parametrize(
    "value,grade",
    [(90, "A"), (89, "B"), (80, "B"), (79, "C"), (70, "C"), (69, "D"), (60, "D"), (59, "F")],
)
def test_grade_boundaries(value, grade):
    result = Scorer().compute_breakdown(_uniform(value))
    assert result.overall_score == value
    assert result.grade == grade


def test_rounds_half_up():
    # 2 * 25 / 100 = 0.5
    result = Scorer().compute_breakdown({"test": 2})
    assert result.overall_score == 1
    assert result.weighted_contributions["test"] == 1


def test_missing_components_count_as_zero():
    result = Scorer().compute_breakdown({"sonar": 100})
    assert result.component_scores["test"] == 0
    assert result.overall_score == 30


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("85%", 85), ("-5", 5), ("abc", 0), (None, 0), ("", 0), ("150", 100), (42, 42), (" 7 ", 7),
        ("0085", 85), ("000", 0), ("9" * 5000, 100), ("0" * 5000 + "42", 42),
    ],
)
def test_safe_int_sanitizes(raw, expected):
    assert safe_int(raw) == expected


def test_malformed_scores_never_raise():
    result = Scorer().compute_breakdown({"test": "N/A", "sonar": "abc", "security": None})
    assert result.overall_score == 0
    assert all(0 <= v <= 100 for v in result.component_scores.values())


def test_idempotent_except_timestamp():
    scores = {"test": "85%", "sonar": 77, "security": "60", "frontend": 90, "team": 45, "ai": 10}
    first = Scorer().compute_breakdown(scores)
    second = Scorer().compute_breakdown(scores)
    assert first.model_dump(exclude={"calculation_timestamp"}) == second.model_dump(
        exclude={"calculation_timestamp"}
    )


def test_rejects_weights_not_summing_to_100():
    with pytest.raises(ValueError):
        Scorer({"test": 50, "sonar": 30, "security": 20, "frontend": 10, "team": 10, "ai": 5})


def test_rejects_incomplete_weights():
    with pytest.raises(ValueError):
        Scorer({"test": 50, "sonar": 50})


def test_save_breakdown_round_trips(tmp_path, breakdown):
    path = Scorer().save_breakdown(breakdown, tmp_path / "teams" / "alpha" / "pr-1")
    assert path.name == "score-breakdown.json"
    assert json.loads(path.read_text())["overall_score"] == 75
    assert BreakdownAdapter().load(path.parent) == breakdown


def test_legacy_weight_keys_are_normalized(tmp_path, breakdown):
    data = breakdown.model_dump(mode="json")
    data["weights"] = {"TEST_WEIGHT": 25, "SONAR_WEIGHT": 30}
    (tmp_path / "score-breakdown.json").write_text(json.dumps(data))
    loaded = BreakdownAdapter().load(tmp_path)
    assert loaded.weights == {"test": 25, "sonar": 30}
