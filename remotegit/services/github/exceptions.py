"""Exceptions for the GitHub API client."""


class GitHubAPIError(Exception):
    """Error from GitHub API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        rate_limit_reset: int | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.rate_limit_reset = rate_limit_reset  # Unix timestamp when rate limit resets
        super().__init__(message)


class RequestNotFoundError(GitHubAPIError):
    """The requested object does not exist (404, 410, 422 or a GraphQL NOT_FOUND)."""

    def __init__(self, message: str = "Resource not found", status_code: int | None = 404):
        super().__init__(message, status_code)


class RequestRateLimitError(GitHubAPIError):
    """The API rate limit is exhausted; `rate_limit_reset` says when it refills."""

    def __init__(
        self,
        message: str = "GitHub API rate limit exceeded",
        status_code: int | None = 403,
        rate_limit_reset: int | None = None,
    ):
        super().__init__(message, status_code, rate_limit_reset=rate_limit_reset)


class RequestClientError(GitHubAPIError):
    """Any other 4xx rejection of the request."""
