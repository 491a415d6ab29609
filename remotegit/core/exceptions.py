"""Errors shared across the provider.

Identity-critical paths (session acquisition, repository context resolution)
raise these; data reads catch them and degrade to empty results.
"""

from enum import Enum


class AuthenticationErrorReason(str, Enum):
    USER_DID_NOT_CONSENT = "user_did_not_consent"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"


class AuthenticationError(Exception):
    """Raised when a session cannot be obtained or a token is rejected."""

    def __init__(
        self,
        provider_id: str,
        reason: AuthenticationErrorReason | None = None,
        original: Exception | None = None,
    ):
        self.provider_id = provider_id
        self.reason = reason
        self.original = original

        if reason == AuthenticationErrorReason.USER_DID_NOT_CONSENT:
            message = f"Unable to get required authentication session for '{provider_id}' because the user did not consent"
        elif reason == AuthenticationErrorReason.UNAUTHORIZED:
            message = f"Unable to get required authentication session for '{provider_id}' because it is invalid or expired"
        elif reason == AuthenticationErrorReason.FORBIDDEN:
            message = f"Unable to get required authentication session for '{provider_id}' because access is forbidden"
        else:
            message = f"Unable to get required authentication session for '{provider_id}'"
            if original is not None:
                message = f"{message}: {original}"
        super().__init__(message)


class OpenVirtualRepositoryErrorReason(str, Enum):
    NOT_A_GITHUB_REPOSITORY = "not_a_github_repository"
    REMOTEHUB_API_NOT_FOUND = "remotehub_api_not_found"
    GITHUB_AUTHENTICATION_DENIED = "github_authentication_denied"
    GITHUB_AUTHENTICATION_NOT_FOUND = "github_authentication_not_found"


class OpenVirtualRepositoryError(Exception):
    """Raised when a repository path cannot be opened as a remote-backed repository."""

    def __init__(
        self,
        repo_path: str,
        reason: OpenVirtualRepositoryErrorReason | None = None,
        original: Exception | None = None,
    ):
        self.repo_path = repo_path
        self.reason = reason
        self.original = original

        if reason == OpenVirtualRepositoryErrorReason.NOT_A_GITHUB_REPOSITORY:
            detail = "Only GitHub repositories are supported"
        elif reason == OpenVirtualRepositoryErrorReason.REMOTEHUB_API_NOT_FOUND:
            detail = "Unable to access the workspace provider bridge"
        elif reason == OpenVirtualRepositoryErrorReason.GITHUB_AUTHENTICATION_DENIED:
            detail = "GitHub authentication is required"
        elif reason == OpenVirtualRepositoryErrorReason.GITHUB_AUTHENTICATION_NOT_FOUND:
            detail = "No GitHub authentication session was found"
        else:
            detail = str(original) if original is not None else "Unknown error"
        super().__init__(f"Unable to open {repo_path}: {detail}")


class ExtensionNotFoundError(Exception):
    """Raised when the workspace provider bridge is not installed or not active."""

    def __init__(self, extension_id: str, extension_name: str):
        self.extension_id = extension_id
        self.extension_name = extension_name
        super().__init__(f"Unable to find the {extension_name} extension ({extension_id})")


class CancellationError(Exception):
    """Raised when an in-flight operation is cancelled by its caller."""

    def __init__(self, original: BaseException | None = None):
        self.original = original
        super().__init__("Operation cancelled")


class GitSearchError(Exception):
    """Raised when a commit search fails."""

    def __init__(self, original: Exception):
        self.original = original
        super().__init__(f"Unable to search commits: {original}")
