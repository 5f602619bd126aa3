"""Abstract base class for collaborator artifact adapters."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ArtifactAdapter(ABC, Generic[T]):
    """Base class for collaborator artifact adapters.

    Each adapter reads one JSON document written by an external analyzer
    into a PR directory and normalizes it into a typed model. A missing or
    unreadable artifact is reported as None, never raised.
    """

    @property
    @abstractmethod
    def filename(self) -> str:
        """Return the artifact file name inside a PR directory."""
        ...

    @abstractmethod
    def parse(self, data: Any) -> T:
        """Normalize decoded JSON into the adapter's model.

        Args:
            data: Decoded JSON document.

        Returns:
            The typed summary.

        Raises:
            ValidationError: If the document doesn't have the expected shape.
        """
        ...

    def load(self, pr_dir: Path) -> T | None:
        """Load and validate the artifact from a PR directory.

        Args:
            pr_dir: Team/PR directory.

        Returns:
            Parsed summary, or None if the file is absent or malformed.
        """
        path = pr_dir / self.filename
        data = load_json_file(path)
        if data is None:
            return None
        try:
            return self.parse(data)
        except ValidationError as e:
            logger.warning(f"Could not validate {path}: {e.error_count()} errors")
            logger.debug(str(e))
            return None


def load_json_file(path: Path) -> Any | None:
    """Read a JSON document, treating absence and parse failures as no data.

    Args:
        path: File to read.

    Returns:
        Decoded JSON, or None if the file doesn't exist or can't be parsed.
    """
    if not path.exists():
        logger.debug(f"No artifact at {path}")
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        # ValueError covers JSONDecodeError, UnicodeDecodeError and oversized int literals
        logger.warning(f"Could not load {path}: {e}")
        return None


class ReportsDirectoryNotFoundError(Exception):
    """Raised when the reports directory structure is missing."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Reports directory not found: {path}")
