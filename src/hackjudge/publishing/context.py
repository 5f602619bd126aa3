"""Pull request context from the GitHub Actions event payload."""

import logging
from pathlib import Path

from hackjudge.adapters.base import load_json_file
from hackjudge.models.schemas import PRContext

logger = logging.getLogger(__name__)


def load_pr_context(
    event_path: Path | None,
    event_name: str | None,
    repository: str | None = None,
    manual_pr_number: str | None = None,
    actor: str | None = None,
    sha: str | None = None,
) -> PRContext:
    """Work out which PR and team a run is for.

    For pull_request events the PR number, author login (the team name),
    head SHA and head repository come from the event payload. Any other
    event (e.g. workflow_dispatch) falls back to the manual inputs.

    Args:
        event_path: Path of the event payload ($GITHUB_EVENT_PATH).
        event_name: Triggering event ($GITHUB_EVENT_NAME).
        repository: Base repository as owner/repo ($GITHUB_REPOSITORY).
        manual_pr_number: PR number supplied to a manual run.
        actor: User that triggered the run ($GITHUB_ACTOR).
        sha: Commit of the run ($GITHUB_SHA).

    Returns:
        PRContext for the run.
    """
    payload = load_json_file(event_path) if event_path else None
    pull_request = payload.get("pull_request") if isinstance(payload, dict) else None

    if event_name == "pull_request" and isinstance(pull_request, dict):
        head = pull_request.get("head") or {}
        context = PRContext(
            pr_number=str(pull_request.get("number", "")),
            team_name=(pull_request.get("user") or {}).get("login") or "unknown-team",
            head_sha=head.get("sha"),
            head_repo=(head.get("repo") or {}).get("full_name"),
            base_repo=repository,
        )
    else:
        if event_name == "pull_request":
            logger.warning("pull_request event without a pull_request payload; using manual inputs")
        context = PRContext(
            pr_number=manual_pr_number or "manual",
            team_name=actor or "manual-run",
            head_sha=sha,
            head_repo=repository,
            base_repo=repository,
        )

    logger.info(f"PR #{context.pr_number} by {context.team_name} (fork: {context.is_fork})")
    return context
