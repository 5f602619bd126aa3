"""Environment-driven settings."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass
class Settings:
    """Runtime settings, mostly provided by the GitHub Actions environment."""

    reports_dir: Path = Path("reports")
    branch: str = "HEAD"
    github_token: str | None = None
    repository: str | None = None
    run_id: str | None = None
    server_url: str = "https://github.com"
    output_file: Path | None = None
    step_summary_file: Path | None = None

    @property
    def run_url(self) -> str | None:
        """Link to the current workflow run, where artifacts can be downloaded."""
        if not self.repository or not self.run_id:
            return None
        return f"{self.server_url}/{self.repository}/actions/runs/{self.run_id}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, dotenv: bool = True) -> Settings:
        """Build settings from environment variables.

        Args:
            environ: Variables to read. Defaults to os.environ.
            dotenv: Load a .env file into os.environ first.
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        def path(name: str) -> Path | None:
            value = environ.get(name)
            return Path(value) if value else None

        return cls(
            reports_dir=path("HACKJUDGE_REPORTS_DIR") or Path("reports"),
            branch=environ.get("HACKJUDGE_BRANCH") or "HEAD",
            github_token=environ.get("GITHUB_TOKEN") or None,
            repository=environ.get("GITHUB_REPOSITORY") or None,
            run_id=environ.get("GITHUB_RUN_ID") or None,
            server_url=(environ.get("GITHUB_SERVER_URL") or "https://github.com").rstrip("/"),
            output_file=path("GITHUB_OUTPUT"),
            step_summary_file=path("GITHUB_STEP_SUMMARY"),
        )


def append_outputs(path: Path, outputs: Mapping[str, object]) -> None:
    """Append name=value lines to a $GITHUB_OUTPUT file."""
    with path.open("a", encoding="utf-8") as f:
        for name, value in outputs.items():
            f.write(f"{name}={value}\n")
