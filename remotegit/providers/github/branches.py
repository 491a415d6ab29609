"""
Branches of a remote-backed repository.

GitHub only knows one set of branches, but consumers expect local branches
tracking remote ones. Every GitHub branch is therefore surfaced twice: as a
local branch tracking `origin/<name>`, and as the remote branch itself.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from remotegit.git.cache import GitCache
from remotegit.git.models import GitBranch, GitTrackingState, PagedResult
from remotegit.git.revision import strip_origin
from remotegit.providers.github.remotehub import HeadType, Revision
from remotegit.services.github.helpers import parse_github_date
from remotegit.services.github.read_operations import BranchCommitMode
from remotegit.services.github.types import GitHubBranch

if TYPE_CHECKING:
    from remotegit.providers.github.provider import GitHubGitProvider

logger = logging.getLogger(__name__)

REMOTE_NAME = "origin"


def get_current_branch_name(revision: Revision) -> str | None:
    """Branch name the workspace is on; remote branch heads are `owner:branch`."""
    if revision.type == HeadType.BRANCH:
        return revision.name
    if revision.type == HeadType.REMOTE_BRANCH:
        _, sep, name = revision.name.partition(":")
        return name if sep else revision.name
    return None


def to_branch_pair(
    repo_path: str,
    branch: GitHubBranch,
    current: bool,
    date: datetime | None,
) -> tuple[GitBranch, GitBranch]:
    """Return the local branch and the `origin/` remote branch for one GitHub branch."""
    local = GitBranch(
        repo_path=repo_path,
        name=branch.name,
        sha=branch.oid,
        remote=False,
        current=current,
        date=date,
        upstream=GitTrackingState(name=f"{REMOTE_NAME}/{branch.name}", missing=False, ahead=0, behind=0),
    )
    remote = GitBranch(
        repo_path=repo_path,
        name=f"{REMOTE_NAME}/{branch.name}",
        sha=branch.oid,
        remote=True,
        current=False,
        date=date,
    )
    return local, remote


def sort_branches(branches: list[GitBranch]) -> list[GitBranch]:
    """Current branch first, then local before remote, newest first, then by name."""
    return sorted(
        branches,
        key=lambda b: (
            not b.current,
            b.remote,
            -(b.date.timestamp() if b.date is not None else 0),
            b.name,
        ),
    )


class BranchesSubProvider:
    def __init__(self, provider: "GitHubGitProvider", cache: GitCache) -> None:
        self.provider = provider
        self._cache = cache

    async def get_branch(self, repo_path: str, name: str | None = None) -> GitBranch | None:
        """
        Return the named branch, or the current one.

        Without a name, a workspace checked out at a tag or commit yields a
        detached pseudo-branch at that revision.
        """
        if name is not None:
            result = await self.get_branches(repo_path, filter=lambda b: b.name == name)
            return result.values[0] if result.values else None

        future = self._cache.branch.get_or_create(repo_path, lambda: self._load_current_branch(repo_path))
        return await future

    async def _load_current_branch(self, repo_path: str) -> GitBranch | None:
        result = await self.get_branches(repo_path, filter=lambda b: b.current)
        if result.values:
            return result.values[0]

        try:
            context = await self.provider.ensure_repository_context(repo_path)
            revision = await context.metadata.get_revision()
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get current branch for {repo_path}")
            return None

        if revision.type in (HeadType.TAG, HeadType.COMMIT):
            return GitBranch(
                repo_path=repo_path,
                name=revision.name,
                sha=revision.revision,
                remote=False,
                current=True,
                date=None,
                detached=True,
            )
        return None

    async def get_branches(
        self,
        repo_path: str,
        filter: Callable[[GitBranch], bool] | None = None,
        cursor: str | None = None,
        sort: bool = False,
    ) -> PagedResult[GitBranch]:
        """
        Return branches, two per GitHub branch.

        Without a cursor every page is loaded and the result cached; with a
        cursor only that page is loaded and nothing is cached. Failures are
        logged and yield an empty result.
        """
        if cursor is None:
            future = self._cache.branches.get_or_create(repo_path, lambda: self._load(repo_path, None))
        else:
            future = None

        try:
            result = await future if future is not None else await self._load(repo_path, cursor)
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get branches for {repo_path}")
            return PagedResult()

        values = result.values
        if filter is not None:
            values = [b for b in values if filter(b)]
        if sort:
            values = sort_branches(values)
        return PagedResult(values=values, paging=result.paging)

    async def _load(self, repo_path: str, cursor: str | None) -> PagedResult[GitBranch]:
        context = await self.provider.ensure_repository_context(repo_path)
        owner, name = context.metadata.repo.owner, context.metadata.repo.name

        current_branch = get_current_branch_name(await context.metadata.get_revision())
        author_date = self.provider.settings.commit_ordering == "author-date"
        load_all = cursor is None

        branches: list[GitBranch] = []
        while True:
            page = await context.api.get_branches(owner, name, cursor=cursor)
            for branch in page.values:
                date = parse_github_date(branch.authored_date if author_date else branch.committed_date)
                branches.extend(to_branch_pair(repo_path, branch, branch.name == current_branch, date))

            if page.paging is None or not page.paging.more or not load_all:
                logger.debug(f"Loaded {len(branches)} branches for {repo_path}")
                return PagedResult(values=branches, paging=page.paging)

            cursor = page.paging.cursor

    async def get_branches_with_commits(
        self,
        repo_path: str,
        shas: list[str],
        branch: str | None = None,
        commit_date: datetime | None = None,
        mode: BranchCommitMode = "contains",
    ) -> list[str]:
        """
        Names of the branches that contain (or, in `points-at` mode, end at) any of `shas`.

        GitHub can only answer this for commits of a known date, so without
        `commit_date` nothing is found. Failures are logged and yield no branches.
        """
        if commit_date is None:
            return []

        try:
            context = await self.provider.ensure_repository_context(repo_path)
            return await context.api.get_branches_with_commits(
                context.metadata.repo.owner,
                context.metadata.repo.name,
                [strip_origin(sha) for sha in shas],
                commit_date,
                mode=mode,
                branch=branch,
            )
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get branches with commits for {repo_path}")
            return []
