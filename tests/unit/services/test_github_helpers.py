"""Unit tests for GitHub HTTP client and helpers.

Tests the shared HTTP client singleton, rate limit parsing, error response
mapping and payload normalization.
"""

from __future__ import annotations

import httpx
import pytest

from remotegit.core.exceptions import AuthenticationError, AuthenticationErrorReason
from remotegit.services.github.exceptions import (
    GitHubAPIError,
    RequestClientError,
    RequestNotFoundError,
    RequestRateLimitError,
)
from remotegit.services.github.helpers import (
    RateLimitInfo,
    handle_error_response,
    handle_graphql_errors,
    normalize_graphql_commit,
    normalize_rest_commit,
    parse_github_date,
)
from remotegit.services.github.http_client import get_github_client


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_response(
    status_code: int = 200,
    json_data: object = None,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """Build a fake httpx.Response."""
    return httpx.Response(
        status_code=status_code,
        json=json_data,
        headers=headers or {},
    )


# ═══════════════════════════════════════════════════════════════════════════
# RateLimitInfo
# ═══════════════════════════════════════════════════════════════════════════


class TestRateLimitInfo:
    """Tests for rate limit header parsing."""

    def test_extracts_remaining_and_reset(self):
        resp = _make_response(
            headers={
                "X-RateLimit-Remaining": "42",
                "X-RateLimit-Reset": "1700000000",
            }
        )
        info = RateLimitInfo(resp)

        assert info.remaining == "42"
        assert info.reset_timestamp == 1700000000
        assert info.is_exhausted is False

    def test_detects_exhausted(self):
        resp = _make_response(headers={"X-RateLimit-Remaining": "0"})
        assert RateLimitInfo(resp).is_exhausted is True

    def test_missing_headers(self):
        info = RateLimitInfo(_make_response(headers={}))

        assert info.remaining is None
        assert info.reset_timestamp is None
        assert info.is_exhausted is False


# ═══════════════════════════════════════════════════════════════════════════
# handle_error_response
# ═══════════════════════════════════════════════════════════════════════════


class TestHandleErrorResponse:
    """Tests for centralized GitHub API error mapping."""

    def test_200_does_nothing(self):
        handle_error_response(_make_response(status_code=200), "octo/repo")

    @pytest.mark.parametrize("status", [404, 410, 422])
    def test_not_found_family(self, status):
        with pytest.raises(RequestNotFoundError, match="not found"):
            handle_error_response(_make_response(status_code=status), "octo/repo")

    def test_401_is_unauthorized(self):
        with pytest.raises(AuthenticationError) as exc_info:
            handle_error_response(_make_response(status_code=401), "octo/repo")

        assert exc_info.value.reason == AuthenticationErrorReason.UNAUTHORIZED

    def test_403_with_rate_limit_exhausted(self):
        resp = _make_response(
            status_code=403,
            headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"},
        )
        with pytest.raises(RequestRateLimitError, match="rate limit") as exc_info:
            handle_error_response(resp, "octo/repo")

        assert exc_info.value.rate_limit_reset == 1700000000

    def test_403_with_rate_limit_message(self):
        resp = _make_response(
            status_code=403,
            json_data={"message": "You have exceeded a secondary rate limit"},
            headers={"X-RateLimit-Remaining": "12"},
        )
        with pytest.raises(RequestRateLimitError):
            handle_error_response(resp, "octo/repo")

    def test_403_without_rate_limit_is_forbidden(self):
        resp = _make_response(status_code=403, headers={"X-RateLimit-Remaining": "50"})
        with pytest.raises(AuthenticationError) as exc_info:
            handle_error_response(resp, "octo/repo")

        assert exc_info.value.reason == AuthenticationErrorReason.FORBIDDEN

    def test_other_4xx_is_client_error(self):
        with pytest.raises(RequestClientError):
            handle_error_response(_make_response(status_code=409, json_data={"message": "conflict"}), "octo/repo")

    def test_500_raises_generic_error(self):
        with pytest.raises(GitHubAPIError, match="500") as exc_info:
            handle_error_response(_make_response(status_code=500), "octo/repo")

        assert not isinstance(exc_info.value, RequestClientError)
        assert exc_info.value.status_code == 500


class TestHandleGraphqlErrors:
    """GraphQL reports failures in the body of a 200 response."""

    def test_no_errors(self):
        handle_graphql_errors([], _make_response(), "octo/repo")

    def test_not_found(self):
        with pytest.raises(RequestNotFoundError):
            handle_graphql_errors([{"type": "NOT_FOUND", "message": "Could not resolve"}], _make_response(), "octo/repo")

    def test_rate_limited(self):
        resp = _make_response(headers={"X-RateLimit-Reset": "1700000000"})
        with pytest.raises(RequestRateLimitError) as exc_info:
            handle_graphql_errors([{"type": "RATE_LIMITED", "message": "slow down"}], resp, "octo/repo")

        assert exc_info.value.rate_limit_reset == 1700000000

    def test_unknown_type(self):
        with pytest.raises(GitHubAPIError, match="Something broke"):
            handle_graphql_errors([{"message": "Something broke"}], _make_response(), "octo/repo")


# ═══════════════════════════════════════════════════════════════════════════
# Normalization
# ═══════════════════════════════════════════════════════════════════════════


class TestNormalization:
    def test_parse_github_date(self):
        parsed = parse_github_date("2024-01-02T03:04:05Z")

        assert parsed is not None
        assert parsed.year == 2024
        assert parsed.utcoffset() is not None
        assert parse_github_date(None) is None
        assert parse_github_date("not a date") is None

    def test_graphql_commit(self):
        commit = normalize_graphql_commit(
            {
                "oid": "a" * 40,
                "message": "Subject\n\nBody",
                "parents": {"nodes": [{"oid": "b" * 40}]},
                "author": {"name": "Ada", "email": "ada@example.com", "date": "2024-01-02T03:04:05Z", "avatarUrl": "https://avatars/ada"},
                "committer": {"name": "GitHub", "email": "noreply@github.com", "date": "2024-01-03T00:00:00Z"},
                "additions": 4,
                "deletions": 2,
                "changedFiles": 1,
            }
        )

        assert commit.oid == "a" * 40
        assert commit.parents == ["b" * 40]
        assert commit.author.avatar_url == "https://avatars/ada"
        assert commit.committer.name == "GitHub"
        assert commit.changed_files == 1

    def test_rest_commit_with_files(self):
        commit = normalize_rest_commit(
            {
                "sha": "c" * 40,
                "commit": {
                    "message": "Add file",
                    "author": {"name": "Ada", "email": "ada@example.com", "date": "2024-01-02T03:04:05Z"},
                    "committer": {"name": "Ada", "email": "ada@example.com", "date": "2024-01-02T03:04:05Z"},
                },
                "parents": [{"sha": "d" * 40}],
                "stats": {"additions": 10, "deletions": 0},
                "files": [{"filename": "a.py", "status": "added", "additions": 10, "deletions": 0, "changes": 10}],
            },
            include_files=True,
        )

        assert commit.parents == ["d" * 40]
        assert commit.changed_files == 1
        assert commit.files is not None
        assert commit.files[0].filename == "a.py"
        assert commit.files[0].status == "added"


# ═══════════════════════════════════════════════════════════════════════════
# HTTP Client Singleton
# ═══════════════════════════════════════════════════════════════════════════


class TestGitHubHttpClient:
    """Tests for the shared HTTP client singleton."""

    def test_client_returns_async_client(self):
        import remotegit.services.github.http_client as mod

        original = mod._client
        mod._client = None

        try:
            client = get_github_client()
            assert isinstance(client, httpx.AsyncClient)
            assert client.timeout.connect == 5.0
            assert client.timeout.pool == 30.0
        finally:
            mod._client = original

    def test_returns_same_instance(self):
        """Repeated calls return the same singleton client."""
        import remotegit.services.github.http_client as mod

        original = mod._client
        mod._client = None

        try:
            a = get_github_client()
            b = get_github_client()
            assert a is b
        finally:
            mod._client = original
