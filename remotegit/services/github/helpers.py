"""
GitHub API helper utilities.

Provides rate limit parsing, error response mapping for REST and GraphQL
calls, and normalization of raw payloads into client types.
"""

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from remotegit.core.exceptions import AuthenticationError, AuthenticationErrorReason
from remotegit.services.github.exceptions import (
    GitHubAPIError,
    RequestClientError,
    RequestNotFoundError,
    RequestRateLimitError,
)
from remotegit.services.github.types import GitHubCommit, GitHubCommitFile, GitHubIdentity

logger = logging.getLogger(__name__)

PROVIDER_ID = "github"


class RateLimitInfo:
    """Rate limit information from GitHub API response."""

    def __init__(self, response: httpx.Response) -> None:
        self.remaining = response.headers.get("X-RateLimit-Remaining")
        self.reset = response.headers.get("X-RateLimit-Reset")

    @property
    def reset_timestamp(self) -> int | None:
        """Get reset timestamp as integer, or None if not available."""
        try:
            return int(self.reset) if self.reset else None
        except ValueError:
            return None

    @property
    def is_exhausted(self) -> bool:
        """Check if rate limit is exhausted."""
        return self.remaining is not None and self.remaining == "0"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("message", ""))
    return ""


def handle_error_response(response: httpx.Response, resource: str) -> None:
    """
    Map a non-success GitHub response to a typed exception.

    Args:
        response: The HTTP response from GitHub API
        resource: What was requested, for error context (e.g. "owner/repo")

    Raises:
        RequestNotFoundError: 404, 410 and 422
        AuthenticationError: 401 (unauthorized) or a non rate-limit 403 (forbidden)
        RequestRateLimitError: 403 or 429 with an exhausted rate limit
        RequestClientError: Any other 4xx
        GitHubAPIError: 5xx and anything else unexpected
    """
    status = response.status_code
    if 200 <= status < 300:
        return

    rate_info = RateLimitInfo(response)

    if status in (404, 410, 422):
        raise RequestNotFoundError(f"Repository or resource not found: {resource}", status)
    elif status == 401:
        raise AuthenticationError(PROVIDER_ID, AuthenticationErrorReason.UNAUTHORIZED)
    elif status in (403, 429):
        message = _error_message(response)
        if rate_info.is_exhausted or "rate limit" in message.lower():
            raise RequestRateLimitError(
                "GitHub API rate limit exceeded",
                status,
                rate_limit_reset=rate_info.reset_timestamp,
            )
        if status == 403:
            raise AuthenticationError(PROVIDER_ID, AuthenticationErrorReason.FORBIDDEN)
        raise RequestClientError(f"GitHub API error: {status}", status)
    elif 400 <= status < 500:
        raise RequestClientError(f"GitHub API error: {status} {_error_message(response)}".rstrip(), status)

    logger.error(f"GitHub request for {resource} failed: {status}")
    raise GitHubAPIError(f"GitHub API error: {status}", status)


def handle_graphql_errors(
    errors: list[dict[str, Any]],
    response: httpx.Response,
    resource: str,
) -> None:
    """
    Map the first GraphQL error to a typed exception.

    GraphQL requests answer 200 even when the query fails; the error type is
    carried in the body instead.
    """
    if not errors:
        return

    error = errors[0]
    error_type = error.get("type")
    message = error.get("message") or "GitHub GraphQL error"

    if error_type == "NOT_FOUND":
        raise RequestNotFoundError(message, 404)
    elif error_type == "FORBIDDEN":
        raise AuthenticationError(PROVIDER_ID, AuthenticationErrorReason.FORBIDDEN)
    elif error_type == "RATE_LIMITED":
        raise RequestRateLimitError(
            message,
            403,
            rate_limit_reset=RateLimitInfo(response).reset_timestamp,
        )

    logger.error(f"GitHub GraphQL request for {resource} failed: {message}")
    raise GitHubAPIError(message, response.status_code)


def parse_github_date(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp as returned by GitHub (`2024-01-02T03:04:05Z`)."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparseable GitHub date: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_graphql_commit(node: dict[str, Any]) -> GitHubCommit:
    """Convert a GraphQL `Commit` node to GitHubCommit."""
    author = node.get("author") or {}
    committer = node.get("committer") or {}
    parents = (node.get("parents") or {}).get("nodes") or []

    return GitHubCommit(
        oid=node["oid"],
        message=node.get("message") or "",
        parents=[p["oid"] for p in parents],
        author=GitHubIdentity(
            name=author.get("name") or "",
            email=author.get("email"),
            date=author.get("date"),
            avatar_url=author.get("avatarUrl"),
        ),
        committer=GitHubIdentity(
            name=committer.get("name") or "",
            email=committer.get("email"),
            date=committer.get("date"),
        ),
        additions=node.get("additions"),
        deletions=node.get("deletions"),
        changed_files=node.get("changedFiles"),
    )


def normalize_rest_file(data: dict[str, Any]) -> GitHubCommitFile:
    return GitHubCommitFile(
        filename=data.get("filename") or "",
        status=data.get("status") or "modified",
        additions=data.get("additions") or 0,
        deletions=data.get("deletions") or 0,
        changes=data.get("changes") or 0,
        previous_filename=data.get("previous_filename"),
        sha=data.get("sha"),
    )


def normalize_rest_commit(data: dict[str, Any], include_files: bool = False) -> GitHubCommit:
    """Convert a REST commit payload (commits, compare or search endpoints) to GitHubCommit."""
    commit = data.get("commit") or {}
    commit_author = commit.get("author") or {}
    commit_committer = commit.get("committer") or {}
    user = data.get("author") or {}
    stats = data.get("stats") or {}
    files = data.get("files")

    return GitHubCommit(
        oid=data["sha"],
        message=commit.get("message") or "",
        parents=[p["sha"] for p in data.get("parents") or []],
        author=GitHubIdentity(
            name=commit_author.get("name") or "",
            email=commit_author.get("email"),
            date=commit_author.get("date"),
            avatar_url=user.get("avatar_url"),
        ),
        committer=GitHubIdentity(
            name=commit_committer.get("name") or "",
            email=commit_committer.get("email"),
            date=commit_committer.get("date") or commit_author.get("date"),
        ),
        additions=stats.get("additions"),
        deletions=stats.get("deletions"),
        changed_files=len(files) if files is not None else None,
        files=[normalize_rest_file(f) for f in files] if include_files and files is not None else None,
    )
