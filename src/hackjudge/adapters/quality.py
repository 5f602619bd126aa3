"""SonarCloud quality summary adapter."""

import json
import logging
from typing import Any

from pydantic import ValidationError

from hackjudge.adapters.base import ArtifactAdapter
from hackjudge.models.schemas import QualitySummary

logger = logging.getLogger(__name__)

# Closing braces tried, one at a time, on a truncated payload
MAX_REPAIR_BRACES = 4


class QualityAdapter(ArtifactAdapter[QualitySummary]):
    """Reads sonar-analysis-results.json."""

    @property
    def filename(self) -> str:
        return "sonar-analysis-results.json"

    def parse(self, data: Any) -> QualitySummary:
        return QualitySummary.model_validate(data)


def parse_quality_payload(text: str | None) -> QualitySummary | None:
    """Parse a quality summary passed inline, e.g. through a CI output variable.

    CI output variables can cut long documents short. When the text does not
    end with a closing brace or bracket, up to MAX_REPAIR_BRACES closing
    braces are appended in turn until the document parses.

    Args:
        text: Raw JSON text, possibly truncated.

    Returns:
        QualitySummary, or None if the payload is empty or unrecoverable.
    """
    if not text or len(text.strip()) <= 2:
        return None

    stripped = text.strip()
    candidates = [stripped]
    if not stripped.endswith(("}", "]")):
        logger.warning("Quality analysis payload appears to be truncated")
        candidates = [stripped + "}" * n for n in range(1, MAX_REPAIR_BRACES + 1)]

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        try:
            return QualitySummary.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Quality analysis payload has unexpected shape: {e.error_count()} errors")
            return None

    logger.warning(f"Could not parse quality analysis payload: {stripped[:200]}")
    return None
