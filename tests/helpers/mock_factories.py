"""Mock object factories for unit tests.

Creates host bridge fakes, sessions and GitHub client payloads that match the
real shapes. Provider tests bypass context resolution by seeding a resolved
RepositoryContext whose `api` is an AsyncMock.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from remotegit.config import Settings
from remotegit.git.models import PagedResult, PagingInfo
from remotegit.providers.github.provider import GitHubGitProvider, RepositoryContext
from remotegit.providers.github.remotehub import (
    AuthenticationSession,
    AuthenticationSessionAccount,
    HeadType,
    ProviderInfo,
    RepositoryMetadata,
    RepositoryRef,
    RepositoryRefType,
    Revision,
)
from remotegit.services.github.types import (
    GitHubBlame,
    GitHubBlameRange,
    GitHubBranch,
    GitHubCommit,
    GitHubCommitPage,
    GitHubIdentity,
    GitHubTag,
)

REPO_PATH = "vscode-vfs://github/octo/repo"
OWNER = "octo"
REPO = "repo"
VIEWER = "Octo Cat"

SHA_A = "a" * 40
SHA_B = "b" * 40
SHA_C = "c" * 40
SHA_D = "d" * 40
SHA_E = "e" * 40


def make_settings(**overrides: object) -> Settings:
    return Settings(**overrides)  # type: ignore[arg-type]


def make_session(label: str = VIEWER, token: str = "ghp_test_token_12345") -> AuthenticationSession:
    return AuthenticationSession(
        id="session-1",
        access_token=token,
        account=AuthenticationSessionAccount(id="account-1", label=label),
        scopes=["repo", "read:user", "user:email"],
    )


def make_metadata(
    owner: str = OWNER,
    name: str = REPO,
    head_type: HeadType = HeadType.BRANCH,
    head_name: str = "main",
    revision: str = SHA_A,
    provider_id: str = "github",
    ref_type: RepositoryRefType | None = None,
) -> RepositoryMetadata:
    return RepositoryMetadata(
        provider=ProviderInfo(id=provider_id, name="GitHub"),
        repo=RepositoryRef(owner=owner, name=name),
        revision=Revision(type=head_type, name=head_name, revision=revision),
        ref_type=ref_type,
    )


def make_remotehub(metadata: RepositoryMetadata | None = None) -> MagicMock:
    remotehub = MagicMock()
    remotehub.get_metadata = AsyncMock(return_value=metadata or make_metadata())
    remotehub.get_provider = MagicMock(return_value=ProviderInfo(id="github", name="GitHub"))
    remotehub.load_workspace_contents = AsyncMock(return_value=True)
    remotehub.get_provider_root_uri = MagicMock(return_value=REPO_PATH)
    remotehub.get_virtual_workspace_uri = MagicMock(return_value=REPO_PATH)
    return remotehub


def make_authentication(session: AuthenticationSession | None = None) -> MagicMock:
    authentication = MagicMock()
    authentication.get_session = AsyncMock(return_value=session or make_session())
    return authentication


def make_provider(
    remotehub: MagicMock | None = None,
    authentication: MagicMock | None = None,
    **kwargs: object,
) -> GitHubGitProvider:
    remotehub = remotehub or make_remotehub()
    return GitHubGitProvider(
        authentication or make_authentication(),
        AsyncMock(return_value=remotehub),
        **kwargs,  # type: ignore[arg-type]
    )


def seed_context(
    provider: GitHubGitProvider,
    api: AsyncMock | None = None,
    metadata: RepositoryMetadata | None = None,
    session: AuthenticationSession | None = None,
    repo_path: str = REPO_PATH,
) -> AsyncMock:
    """Store a resolved context for `repo_path` and return its mocked api.

    Must be called from a running event loop.
    """
    api = api or AsyncMock()
    context = RepositoryContext(
        api=api,
        metadata=metadata or make_metadata(),
        remotehub=make_remotehub(metadata),
        session=session or make_session(),
    )
    provider.cache.contexts.set_result(repo_path, context)
    return api


# ---------------------------------------------------------------------------
# GitHub client payloads
# ---------------------------------------------------------------------------


def make_identity(
    name: str = "Ada Lovelace",
    email: str | None = "ada@example.com",
    date: str = "2024-01-02T03:04:05Z",
    avatar_url: str | None = None,
) -> GitHubIdentity:
    return GitHubIdentity(name=name, email=email, date=date, avatar_url=avatar_url)


def make_github_commit(
    oid: str = SHA_A,
    message: str = "Fix the thing\n\nLonger description",
    parents: list[str] | None = None,
    author: str = "Ada Lovelace",
    committer: str | None = None,
    email: str | None = "ada@example.com",
    date: str = "2024-01-02T03:04:05Z",
    **overrides: object,
) -> GitHubCommit:
    commit = GitHubCommit(
        oid=oid,
        message=message,
        parents=parents if parents is not None else [],
        author=make_identity(author, email, date, overrides.pop("avatar_url", None)),  # type: ignore[arg-type]
        committer=make_identity(committer or author, email, date),
        additions=overrides.pop("additions", 3),  # type: ignore[arg-type]
        deletions=overrides.pop("deletions", 1),  # type: ignore[arg-type]
        changed_files=overrides.pop("changed_files", 1),  # type: ignore[arg-type]
    )
    for key, value in overrides.items():
        setattr(commit, key, value)
    return commit


def make_commit_page(
    commits: list[GitHubCommit],
    cursor: str | None = None,
    more: bool = False,
    viewer: str | None = None,
) -> GitHubCommitPage:
    return GitHubCommitPage(
        values=commits,
        paging=PagingInfo(cursor=cursor, more=more) if cursor is not None else None,
        viewer=viewer,
    )


def make_branch_page(
    branches: list[tuple[str, str]],
    cursor: str | None = None,
    more: bool = False,
) -> PagedResult[GitHubBranch]:
    return PagedResult(
        values=[
            GitHubBranch(
                name=name,
                oid=oid,
                authored_date="2024-01-01T00:00:00Z",
                committed_date="2024-01-02T00:00:00Z",
            )
            for name, oid in branches
        ],
        paging=PagingInfo(cursor=cursor, more=more),
    )


def make_tag_page(tags: list[tuple[str, str]], more: bool = False, cursor: str | None = None) -> PagedResult[GitHubTag]:
    return PagedResult(
        values=[
            GitHubTag(
                name=name,
                oid=oid,
                message=None,
                authored_date="2024-01-01T00:00:00Z",
                committed_date="2024-01-02T00:00:00Z",
            )
            for name, oid in tags
        ],
        paging=PagingInfo(cursor=cursor, more=more),
    )


def make_blame(ranges: list[tuple[int, int, GitHubCommit]], viewer: str | None = None) -> GitHubBlame:
    return GitHubBlame(
        ranges=[GitHubBlameRange(starting_line=s, ending_line=e, commit=c) for s, e, c in ranges],
        viewer=viewer,
    )
