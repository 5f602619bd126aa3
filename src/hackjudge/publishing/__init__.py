"""Publishing results back to GitHub."""

from hackjudge.publishing.context import load_pr_context
from hackjudge.publishing.github import GitHubPublisher, PublishError

__all__ = ["GitHubPublisher", "PublishError", "load_pr_context"]
