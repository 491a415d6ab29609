"""
GitHub service package.

Re-exports the public client types.
Usage: `from remotegit.services.github import GitHubReadOperations`

Module structure:
- read_operations.py: All read-only API operations
- helpers.py: Rate limit handling, error mapping and payload normalization
- http_client.py: Shared connection-pooled HTTP client
- types.py: Data types and response models
- exceptions.py: Custom exceptions
- constants.py: GraphQL documents and API limits
"""

from remotegit.services.github.exceptions import (
    GitHubAPIError,
    RequestClientError,
    RequestNotFoundError,
    RequestRateLimitError,
)
from remotegit.services.github.helpers import RateLimitInfo, handle_error_response
from remotegit.services.github.http_client import close_github_client
from remotegit.services.github.read_operations import GitHubReadOperations
from remotegit.services.github.types import (
    GitHubBlame,
    GitHubBlameRange,
    GitHubBranch,
    GitHubCommit,
    GitHubCommitFile,
    GitHubCommitPage,
    GitHubComparison,
    GitHubContributor,
    GitHubIdentity,
    GitHubSearchCommitSha,
    GitHubSearchShaPage,
    GitHubTag,
    GitHubViewer,
)

__all__ = [
    # Client
    "GitHubReadOperations",
    # HTTP client lifecycle
    "close_github_client",
    # Utilities
    "handle_error_response",
    "RateLimitInfo",
    # Exceptions
    "GitHubAPIError",
    "RequestClientError",
    "RequestNotFoundError",
    "RequestRateLimitError",
    # Types
    "GitHubBlame",
    "GitHubBlameRange",
    "GitHubBranch",
    "GitHubCommit",
    "GitHubCommitFile",
    "GitHubCommitPage",
    "GitHubComparison",
    "GitHubContributor",
    "GitHubIdentity",
    "GitHubSearchCommitSha",
    "GitHubSearchShaPage",
    "GitHubTag",
    "GitHubViewer",
]
