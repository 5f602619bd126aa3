"""
Tests for the GitHub comment publisher and PR context extraction.
"""

import asyncio
import json

import httpx
import pytest

from hackjudge.publishing import GitHubPublisher, PublishError, load_pr_context


def _publisher(handler, token="t0ken"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GitHubPublisher("org/repo", token=token, client=client)


def test_post_comment_sends_body_and_auth():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"html_url": "https://github.com/org/repo/pull/5#issuecomment-1"})

    url = asyncio.run(_publisher(handler).post_comment(5, "hello"))

    assert url == "https://github.com/org/repo/pull/5#issuecomment-1"
    assert seen["method"] == "POST"
    assert seen["url"] == "https://api.github.com/repos/org/repo/issues/5/comments"
    assert seen["auth"] == "Bearer t0ken"
    assert seen["body"] == {"body": "hello"}


def test_post_comment_raises_on_error_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "Resource not accessible by integration"})

    with pytest.raises(PublishError, match="403"):
        asyncio.run(_publisher(handler).post_comment(5, "hello"))


def test_post_comment_raises_on_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PublishError):
        asyncio.run(_publisher(handler).post_comment(5, "hello"))


def test_rejects_malformed_repository():
    with pytest.raises(ValueError):
        GitHubPublisher("not-a-repo", token="x")


def test_pr_context_from_pull_request_event(tmp_path):
    event = tmp_path / "event.json"
    event.write_text(json.dumps({
        "pull_request": {
            "number": 42,
            "user": {"login": "team-rocket"},
            "head": {"sha": "abc123", "repo": {"full_name": "team-rocket/hackathon"}},
        }
    }))

    context = load_pr_context(event, "pull_request", repository="org/hackathon")

    assert context.pr_number == "42"
    assert context.team_name == "team-rocket"
    assert context.head_sha == "abc123"
    assert context.head_repo == "team-rocket/hackathon"
    assert context.is_fork is True


def test_pr_context_manual_fallback():
    context = load_pr_context(None, "workflow_dispatch", repository="org/hackathon", actor="judge", sha="def")
    assert context.pr_number == "manual"
    assert context.team_name == "judge"
    assert context.head_repo == "org/hackathon"
    assert context.is_fork is False
