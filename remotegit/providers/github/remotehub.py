"""
Interfaces to the host: the authentication provider and the workspace bridge.

The bridge ("remote hub") owns the virtual workspace: it knows which GitHub
repository and revision a repository path points at. The provider only reads
from it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class HeadType(str, Enum):
    BRANCH = "branch"
    REMOTE_BRANCH = "remote_branch"
    TAG = "tag"
    COMMIT = "commit"


class RepositoryRefType(str, Enum):
    BRANCH = "branch"
    TAG = "tag"
    COMMIT = "commit"
    PULL_REQUEST = "pull_request"
    TREE = "tree"


@dataclass
class RepositoryRef:
    owner: str
    name: str


@dataclass
class Revision:
    """What the workspace is checked out at.

    For REMOTE_BRANCH heads, `name` is `owner:branch`.
    """

    type: HeadType
    name: str
    revision: str


@dataclass
class ProviderInfo:
    id: str
    name: str = ""


@dataclass
class RepositoryMetadata:
    """Repository identity reported by the workspace bridge."""

    provider: ProviderInfo
    repo: RepositoryRef
    revision: Revision
    # How the workspace was opened; a pull request workspace may sit on a fork's branch
    ref_type: RepositoryRefType | None = None

    async def get_revision(self) -> Revision:
        return self.revision


@dataclass
class AuthenticationSessionAccount:
    id: str
    label: str


@dataclass
class AuthenticationSession:
    id: str
    access_token: str
    account: AuthenticationSessionAccount
    scopes: list[str] = field(default_factory=list)


class AuthenticationProvider(Protocol):
    async def get_session(
        self,
        provider_id: str,
        scopes: list[str],
        *,
        create_if_needed: bool = False,
        force_new_session: bool = False,
    ) -> AuthenticationSession | None:
        """Return a session, prompting the user only when `create_if_needed` or `force_new_session`.

        Raises an exception whose message contains "User did not consent" when
        the user declines.
        """
        ...


class RemoteHubApi(Protocol):
    async def get_metadata(self, uri: str) -> RepositoryMetadata | None: ...

    def get_provider(self, uri: str) -> ProviderInfo | None: ...

    async def load_workspace_contents(self, uri: str) -> bool: ...

    def get_provider_root_uri(self, uri: str) -> str: ...

    def get_virtual_workspace_uri(self, uri: str) -> str | None: ...


class Storage(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    async def store(self, key: str, value: Any) -> None: ...

    async def delete(self, key: str) -> None: ...
