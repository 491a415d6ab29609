"""
Contributors of a remote-backed repository.

Without stats, contributors come from GitHub's contributors list. With stats
they are aggregated from commit history, every page of it, so each one
carries its commits, first and latest commit dates and line counts.

The authenticated viewer is flagged as the current contributor, matched by
the "You" display name or by name, email or login.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from remotegit.core.cancellation import CancellationToken
from remotegit.core.exceptions import CancellationError
from remotegit.git.cache import GitCache
from remotegit.git.models import (
    GitCommit,
    GitContribution,
    GitContributor,
    GitContributorsResult,
    GitContributorsStats,
    GitContributorStats,
    GitLog,
    GitUser,
)
from remotegit.providers.github.converters import YOU
from remotegit.services.github.types import GitHubContributor

if TYPE_CHECKING:
    from remotegit.providers.github.provider import GitHubGitProvider

logger = logging.getLogger(__name__)


def is_user_match(
    user: GitUser | None,
    name: str | None,
    email: str | None = None,
    username: str | None = None,
) -> bool:
    """Whether `name`, `email` or `username` belongs to `user`; emails compare case-insensitively."""
    if user is None:
        return False
    if name and user.name and name == user.name:
        return True
    if email and user.email and email.lower() == user.email.lower():
        return True
    return bool(username and user.username and username == user.username)


def _cache_key(ref: str | None, path: str | None, since: str | None, stats: bool) -> str:
    key = ref or "HEAD"
    if path:
        key += f":pathspec={path}"
    if since:
        key += f":since={since}"
    if stats:
        key += ":stats"
    return key


def _contribution(commit: GitCommit) -> GitContribution:
    stats = commit.stats
    return GitContribution(
        sha=commit.sha,
        date=commit.date,
        message=commit.message,
        files=stats.files if stats is not None else None,
        additions=stats.additions if stats is not None else None,
        deletions=stats.deletions if stats is not None else None,
    )


def aggregate_contributors(
    repo_path: str,
    commits: Iterable[GitCommit],
    contributors: dict[str, GitContributor],
    current_user: GitUser | None,
) -> None:
    """Fold `commits` into `contributors`, keyed by author name and email."""
    for commit in commits:
        author = commit.author
        key = f"{author.name}|{author.email or ''}"
        contribution = _contribution(commit)

        contributor = contributors.get(key)
        if contributor is None:
            current = author.name == YOU or is_user_match(current_user, author.name, author.email)
            viewer = current_user if current else None
            contributor = GitContributor(
                repo_path=repo_path,
                name=(viewer.name if viewer is not None else None) or author.name,
                email=author.email,
                current=current,
                contribution_count=0,
                contributions=[],
                first_commit_date=commit.date,
                latest_commit_date=commit.date,
                stats=GitContributorStats(),
                username=viewer.username if viewer is not None else None,
                avatar_url=author.avatar_url,
            )
            contributors[key] = contributor

        contributor.contribution_count += 1
        contributor.contributions.append(contribution)  # type: ignore[union-attr]
        if contributor.first_commit_date is None or commit.date < contributor.first_commit_date:
            contributor.first_commit_date = commit.date
        if contributor.latest_commit_date is None or commit.date > contributor.latest_commit_date:
            contributor.latest_commit_date = commit.date
        if contributor.stats is not None:
            contributor.stats.files += contribution.files or 0
            contributor.stats.additions += contribution.additions or 0
            contributor.stats.deletions += contribution.deletions or 0


def contributor_from_github(
    repo_path: str,
    contributor: GitHubContributor,
    current_user: GitUser | None,
) -> GitContributor:
    return GitContributor(
        repo_path=repo_path,
        name=contributor.name or contributor.login or "",
        email=contributor.email,
        current=is_user_match(current_user, contributor.name, contributor.email, contributor.login),
        contribution_count=contributor.contributions,
        username=contributor.login,
        avatar_url=contributor.avatar_url,
        id=contributor.node_id,
    )


class ContributorsSubProvider:
    def __init__(self, provider: "GitHubGitProvider", cache: GitCache) -> None:
        self.provider = provider
        self._cache = cache

    async def get_contributors(
        self,
        repo_path: str,
        ref: str | None = None,
        path: str | None = None,
        since: str | None = None,
        stats: bool = False,
        cancellation: CancellationToken | None = None,
    ) -> GitContributorsResult:
        """
        Return the contributors reachable from `ref` (default HEAD).

        With `stats`, history (scoped to `path` and `since` when given) is
        walked page by page and the contributors built from it; otherwise
        GitHub's contributors list is used. Results are cached per repository
        and options. A cancelled walk returns what it gathered, flagged
        `cancelled`, and is not cached; failures are logged and yield no
        contributors.
        """
        key = (repo_path, _cache_key(ref, path, since, stats))
        future = self._cache.contributors.get_or_create(
            key, lambda: self._load(repo_path, ref, path, since, stats, cancellation)
        )

        try:
            result = await future
        except CancellationError:
            return GitContributorsResult(contributors=[], cancelled=True)
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get contributors for {repo_path}")
            return GitContributorsResult(contributors=[])

        if result.cancelled:
            self._cache.contributors.delete(key)
        return result

    async def _load(
        self,
        repo_path: str,
        ref: str | None,
        path: str | None,
        since: str | None,
        stats: bool,
        cancellation: CancellationToken | None,
    ) -> GitContributorsResult:
        current_user = await self.provider.get_current_user(repo_path)

        if stats:
            if path:
                log = await self.provider.commits.get_log_for_file(repo_path, path, ref=ref, since=since)
            else:
                log = await self.provider.commits.get_log(repo_path, ref=ref, since=since)
            if log is not None:
                return await self._aggregate(repo_path, log, current_user, cancellation)

        return GitContributorsResult(contributors=await self._load_lite(repo_path, current_user))

    async def _aggregate(
        self,
        repo_path: str,
        log: GitLog,
        current_user: GitUser | None,
        cancellation: CancellationToken | None,
    ) -> GitContributorsResult:
        contributors: dict[str, GitContributor] = {}
        aggregate_contributors(repo_path, log.commits.values(), contributors, current_user)

        while log.has_more:
            if cancellation is not None and cancellation.is_cancellation_requested:
                logger.debug(f"Contributors of {repo_path} cancelled after {log.count} commits")
                return GitContributorsResult(contributors=list(contributors.values()), cancelled=True)

            next_log = await log.more()
            if next_log is log:
                break
            log = next_log
            aggregate_contributors(repo_path, log.new_commits().values(), contributors, current_user)

        logger.debug(f"Aggregated {len(contributors)} contributors from {log.count} commits in {repo_path}")
        return GitContributorsResult(contributors=list(contributors.values()))

    async def _load_lite(self, repo_path: str, current_user: GitUser | None) -> list[GitContributor]:
        context = await self.provider.ensure_repository_context(repo_path)
        contributors = await context.api.get_contributors(context.metadata.repo.owner, context.metadata.repo.name)
        return [
            contributor_from_github(repo_path, c, current_user) for c in contributors if c.type == "User"
        ]

    async def get_contributors_lite(self, repo_path: str) -> list[GitContributor]:
        """GitHub's contributors list, uncached and without per-commit detail."""
        try:
            current_user = await self.provider.get_current_user(repo_path)
            return await self._load_lite(repo_path, current_user)
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get contributors for {repo_path}")
            return []

    async def get_contributors_stats(self, repo_path: str) -> GitContributorsStats | None:
        """Contributor count and per-contributor commit counts, largest first."""
        try:
            context = await self.provider.ensure_repository_context(repo_path)
            contributors = await context.api.get_contributors(
                context.metadata.repo.owner, context.metadata.repo.name
            )
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get contributor stats for {repo_path}")
            return None

        counts = sorted((c.contributions for c in contributors), reverse=True)
        return GitContributorsStats(count=len(counts), contributions=counts)
