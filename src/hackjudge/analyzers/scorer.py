"""Score aggregator for hackathon submissions."""

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from hackjudge.adapters.coverage import BREAKDOWN_FILENAME
from hackjudge.models.schemas import Component, ScoreBreakdown

logger = logging.getLogger(__name__)


def safe_int(value: Any) -> int:
    """Coerce a raw score to an integer in [0, 100].

    Non-digit characters are stripped before parsing, so "85%" becomes 85 and
    "-5" becomes 5. Missing or non-numeric input becomes 0.
    """
    digits = re.sub(r"[^0-9]", "", "" if value is None else str(value)).lstrip("0")
    if not digits:
        return 0
    # Anything past three significant digits is over the cap
    if len(digits) > 3:
        return 100
    return min(int(digits), 100)


def _round_half_up(numerator: int, denominator: int = 100) -> int:
    """Integer division rounding .5 upward (non-negative inputs)."""
    return (numerator + denominator // 2) // denominator


class Scorer:
    """Combines the six component scores into an overall score and grade.

    Scoring weights (total 100%):
    - Tests & Coverage: 25%
    - Code Quality (SonarCloud): 30%
    - Security: 20%
    - Frontend UX: 10%
    - Team Collaboration: 10%
    - AI Attribution: 5%
    """

    # Score weights
    WEIGHTS = {
        Component.TEST.value: 25,
        Component.SONAR.value: 30,
        Component.SECURITY.value: 20,
        Component.FRONTEND.value: 10,
        Component.TEAM.value: 10,
        Component.AI.value: 5,
    }

    def __init__(self, weights: Mapping[str, int] | None = None) -> None:
        """Initialize the scorer.

        Args:
            weights: Optional per-component weights. Must cover all six
                components and sum to 100. Defaults to WEIGHTS.

        Raises:
            ValueError: If the weights are incomplete or do not sum to 100.
        """
        weights = dict(weights) if weights is not None else dict(self.WEIGHTS)
        missing = [c.value for c in Component if c.value not in weights]
        if missing:
            raise ValueError(f"Missing weights for: {', '.join(missing)}")
        if sum(weights.values()) != 100:
            raise ValueError(f"Weights must sum to 100, got {sum(weights.values())}")
        self.weights = weights

    def compute_breakdown(self, scores: Mapping[str, Any]) -> ScoreBreakdown:
        """Calculate the weighted overall score.

        Args:
            scores: Raw component scores keyed by component name. Values may be
                ints, strings or missing; they are sanitized with safe_int.

        Returns:
            ScoreBreakdown with overall score, grade and per-component
            contributions. Contributions are rounded individually and may not
            add up exactly to the overall score.
        """
        component_scores = {c.value: safe_int(scores.get(c.value)) for c in Component}
        logger.debug(f"Validated scores: {component_scores}")

        weighted_sum = sum(component_scores[name] * self.weights[name] for name in component_scores)
        overall = _round_half_up(weighted_sum)

        return ScoreBreakdown(
            overall_score=overall,
            grade=self._score_to_grade(overall),
            component_scores=component_scores,
            weights=dict(self.weights),
            weighted_contributions={
                name: _round_half_up(value * self.weights[name])
                for name, value in component_scores.items()
            },
            calculation_timestamp=datetime.now(timezone.utc),
        )

    def _score_to_grade(self, score: float) -> str:
        """Convert numeric score to letter grade."""
        if score >= 90:
            return "A"
        elif score >= 80:
            return "B"
        elif score >= 70:
            return "C"
        elif score >= 60:
            return "D"
        else:
            return "F"

    def save_breakdown(self, breakdown: ScoreBreakdown, pr_dir: Path) -> Path:
        """Save breakdown to disk.

        Args:
            breakdown: The breakdown to save.
            pr_dir: Team/PR directory the artifact belongs to.

        Returns:
            Path to saved file.
        """
        pr_dir.mkdir(parents=True, exist_ok=True)

        filepath = pr_dir / BREAKDOWN_FILENAME
        data = breakdown.model_dump(mode="json")
        filepath.write_text(json.dumps(data, indent=2))

        logger.info(f"Final score calculated: {breakdown.overall_score}/100 (Grade {breakdown.grade})")
        for name, points in breakdown.weighted_contributions.items():
            logger.debug(f"  {name}: {points} points")

        return filepath
