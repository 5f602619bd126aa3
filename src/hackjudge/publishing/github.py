"""GitHub comment publisher."""

import logging
import os

import httpx

logger = logging.getLogger(__name__)


class PublishError(Exception):
    """Raised when GitHub rejects or fails a publish request."""


class GitHubPublisher:
    """Posts analysis comments on pull requests through the GitHub REST API.

    Requires a token with permission to comment on the repository's pull
    requests. Set GITHUB_TOKEN or pass token to the constructor.
    """

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        repository: str,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            repository: Target repository as owner/repo.
            token: GitHub token. If not provided, uses GITHUB_TOKEN env var.
            client: Optional httpx client. If not provided, one is created per request.
            base_url: API root, for GitHub Enterprise.

        Raises:
            ValueError: If repository is not of the form owner/repo.
        """
        owner, _, repo = repository.partition("/")
        if not owner or not repo or "/" in repo:
            raise ValueError(f"Repository must be owner/repo, got {repository!r}")
        self.owner = owner
        self.repo = repo
        self._token = token or os.environ.get("GITHUB_TOKEN")
        self._client = client
        self.base_url = (base_url or self.BASE_URL).rstrip("/")

    def _headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=30.0, headers=self._headers())

    async def post_comment(self, pr_number: int | str, body: str) -> str | None:
        """Post a comment on a pull request.

        Args:
            pr_number: Pull request number.
            body: Markdown comment body.

        Returns:
            HTML URL of the created comment, if GitHub returned one.

        Raises:
            PublishError: If the request fails or GitHub answers with an error status.
        """
        client = await self._get_client()
        url = f"{self.base_url}/repos/{self.owner}/{self.repo}/issues/{pr_number}/comments"

        try:
            response = await client.post(url, json={"body": body}, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PublishError(
                f"GitHub returned {e.response.status_code} posting comment to PR #{pr_number}"
            ) from e
        except httpx.HTTPError as e:
            raise PublishError(f"Could not post comment to PR #{pr_number}: {e}") from e
        finally:
            if self._client is None:
                await client.aclose()

        logger.info(f"Posted analysis comment to PR #{pr_number}")
        return response.json().get("html_url") if response.content else None
