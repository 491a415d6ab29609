"""
Commits, logs and file logs of a remote-backed repository.

Logs are paged with GitHub's opaque history cursors. Each GitLog carries a
`more` continuation which fetches the page after `ending_cursor` and returns a
new, merged log; the previous log is left untouched.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING

from remotegit.git.cache import CachedItem, GitCache, TrackedDocument
from remotegit.git.models import GitCommit, GitFileChange, GitLog, GitUser
from remotegit.git.revision import (
    DELETED_OR_MISSING,
    create_revision_range,
    is_uncommitted,
    strip_origin,
)
from remotegit.providers.github.converters import commit_from_github

if TYPE_CHECKING:
    from remotegit.providers.github.provider import GitHubGitProvider

logger = logging.getLogger(__name__)

# Fetches one page after `cursor`; None when the fetch failed
PageFetcher = Callable[[int, str | None], Awaitable[GitLog | None]]


class CommitsSubProvider:
    def __init__(self, provider: "GitHubGitProvider", cache: GitCache) -> None:
        self.provider = provider
        self._cache = cache

    # ─────────────────────────────────────────────────────────────────────
    # Single commits
    # ─────────────────────────────────────────────────────────────────────

    async def get_commit(self, repo_path: str, ref: str) -> GitCommit | None:
        try:
            context = await self.provider.ensure_repository_context(repo_path)
            commit = await context.api.get_commit(
                context.metadata.repo.owner, context.metadata.repo.name, strip_origin(ref)
            )
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get commit {ref} in {repo_path}")
            return None

        if commit is None:
            return None
        return commit_from_github(repo_path, commit, commit.viewer or context.session.account.label)

    async def get_commit_count(self, repo_path: str, ref: str) -> int | None:
        try:
            context = await self.provider.ensure_repository_context(repo_path)
            return await context.api.get_commit_count(
                context.metadata.repo.owner, context.metadata.repo.name, strip_origin(ref)
            )
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to count commits for {ref} in {repo_path}")
            return None

    async def get_commit_for_file(
        self,
        repo_path: str,
        path: str,
        ref: str | None = None,
    ) -> GitCommit | None:
        """Newest commit at or before `ref` (default HEAD) that touched `path`."""
        try:
            context = await self.provider.ensure_repository_context(repo_path)
            relative_path = self.provider.get_relative_path(path, repo_path)
            if not ref or ref == "HEAD":
                ref = (await context.metadata.get_revision()).revision

            commit = await context.api.get_commit_for_file(
                context.metadata.repo.owner,
                context.metadata.repo.name,
                strip_origin(ref),
                relative_path,
            )
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get commit for {path} at {ref}")
            return None

        if commit is None:
            return None
        return commit_from_github(
            repo_path, commit, commit.viewer or context.session.account.label, path=relative_path
        )

    async def get_file_status_for_commit(self, repo_path: str, path: str, ref: str) -> GitFileChange | None:
        if ref == DELETED_OR_MISSING or is_uncommitted(ref):
            return None

        commit = await self.get_commit_for_file(repo_path, path, ref)
        if commit is None:
            return None
        return commit.file

    async def has_commit_been_pushed(self, repo_path: str, ref: str) -> bool:
        # Every commit a remote-backed repository knows about lives on the remote
        return True

    async def is_ancestor_of(self, repo_path: str, ref1: str, ref2: str) -> bool:
        """Whether `ref1` is reachable from `ref2`."""
        try:
            context = await self.provider.ensure_repository_context(repo_path)
            comparison = await context.api.get_comparison(
                context.metadata.repo.owner,
                context.metadata.repo.name,
                create_revision_range(strip_origin(ref1), strip_origin(ref2), "..."),
            )
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to compare {ref1} and {ref2}")
            return False

        if comparison is None:
            return False
        return comparison.status in ("identical", "behind")

    # ─────────────────────────────────────────────────────────────────────
    # Log
    # ─────────────────────────────────────────────────────────────────────

    async def get_log(
        self,
        repo_path: str,
        ref: str | None = None,
        limit: int | None = None,
        cursor: str | None = None,
        since: str | datetime | None = None,
        authors: list[GitUser] | None = None,
        all: bool = False,
    ) -> GitLog | None:
        """
        Return one page of history reachable from `ref` (default HEAD).

        `all` is accepted for interface parity; GitHub history is always
        scoped to one ref. Failures are logged and return None.
        """
        limit = self.provider.get_paging_limit(limit)

        try:
            context = await self.provider.ensure_repository_context(repo_path)
            if not ref or ref == "HEAD":
                ref = (await context.metadata.get_revision()).revision

            page = await context.api.get_commits(
                context.metadata.repo.owner,
                context.metadata.repo.name,
                strip_origin(ref),
                after=cursor,
                authors=authors,
                limit=limit,
                since=since,
            )
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get log for {ref or 'HEAD'} in {repo_path}")
            return None

        viewer = page.viewer or context.session.account.label
        commits: dict[str, GitCommit] = {}
        for commit in page.values:
            if commit.oid not in commits:
                commits[commit.oid] = commit_from_github(repo_path, commit, viewer)

        log = GitLog(
            repo_path=repo_path,
            commits=commits,
            limit=limit,
            has_more=page.paging.more if page.paging is not None else False,
            sha=ref,
            ending_cursor=page.paging.cursor if page.paging is not None else None,
        )
        if log.has_more:
            log._more = self._more_fn(
                log,
                lambda n, after: self.get_log(
                    repo_path, ref=ref, limit=n, cursor=after, since=since, authors=authors, all=all
                ),
            )
        return log

    async def get_log_refs_only(
        self,
        repo_path: str,
        ref: str | None = None,
        limit: int | None = None,
        since: str | datetime | None = None,
        authors: list[GitUser] | None = None,
    ) -> set[str] | None:
        log = await self.get_log(repo_path, ref=ref, limit=limit, since=since, authors=authors)
        if log is None:
            return None
        return set(log.commits)

    def _more_fn(
        self,
        log: GitLog,
        fetch: PageFetcher,
    ) -> Callable[[int | None, str | None], Awaitable[GitLog]]:
        async def more(limit: int | None, until: str | None) -> GitLog:
            if until and until in log.commits:
                return log

            more_limit = self.provider.get_paging_limit(limit)
            more_log = await fetch(more_limit, log.ending_cursor)
            # Nothing more could be fetched, so assume we have everything
            if more_log is None:
                return replace(log, has_more=False, paged_commits={}, _more=None)

            paged = {sha: c for sha, c in more_log.commits.items() if sha not in log.commits}
            merged = GitLog(
                repo_path=log.repo_path,
                commits={**log.commits, **paged},
                limit=(log.limit or 0) + more_limit if until is None else None,
                has_more=more_log.has_more if until is None else True,
                sha=log.sha,
                starting_cursor=next(reversed(log.commits), None),
                ending_cursor=more_log.ending_cursor,
                paged_commits=paged,
            )
            if merged.has_more:
                merged._more = self._more_fn(merged, fetch)
            return merged

        return more

    # ─────────────────────────────────────────────────────────────────────
    # File log
    # ─────────────────────────────────────────────────────────────────────

    async def get_log_for_file(
        self,
        repo_path: str,
        path: str,
        ref: str | None = None,
        limit: int | None = None,
        cursor: str | None = None,
        since: str | None = None,
    ) -> GitLog | None:
        """
        Return one page of the history of a single file.

        First pages are cached on the tracked document; a request for a ref
        is served from the cached log of the whole file when that log is
        complete and contains the ref.

        Raises:
            ValueError: When `path` is the repository itself
        """
        relative_path = self.provider.get_relative_path(path, repo_path)
        if not relative_path:
            raise ValueError(f"File name cannot match the repository path; path={path}")

        limit = self.provider.get_paging_limit(limit)
        suffix = f":n{limit}" + (f":since={since}" if since else "")
        key = f"log:{ref}{suffix}" if ref else f"log{suffix}"

        use_cache = cursor is None
        document = self._cache.documents.get_or_add(repo_path, relative_path)

        if use_cache:
            cached = document.get_log(key)
            if cached is not None:
                logger.debug(f"Cache hit: '{key}'")
                return await cached.item

            if ref:
                partial = await self._get_partial_log_for_file(document, f"log{suffix}", ref, limit)
                if partial is not None:
                    logger.debug(f"Cache hit: ~'{key}'")
                    return partial

            logger.debug(f"Cache miss: '{key}'")

        future = asyncio.ensure_future(
            self._get_log_for_file_core(
                repo_path, relative_path, document, key, use_cache, ref, limit, cursor, since
            )
        )
        if use_cache:
            logger.debug(f"Cache add: '{key}'")
            document.set_log(key, CachedItem(future))
        return await future

    async def _get_partial_log_for_file(
        self,
        document: TrackedDocument,
        whole_key: str,
        ref: str,
        limit: int,
    ) -> GitLog | None:
        cached = document.get_log(whole_key)
        if cached is None:
            return None

        log = await cached.item
        if log is None or log.has_more or ref not in log.commits:
            return None

        shas = list(log.commits)
        start = shas.index(ref)
        commits = {sha: log.commits[sha] for sha in shas[start:start + limit]}
        return replace(log, commits=commits, limit=limit, paged_commits=None, _more=None)

    async def _get_log_for_file_core(
        self,
        repo_path: str,
        relative_path: str,
        document: TrackedDocument,
        key: str,
        use_cache: bool,
        ref: str | None,
        limit: int,
        cursor: str | None,
        since: str | None,
    ) -> GitLog | None:
        try:
            context = await self.provider.ensure_repository_context(repo_path)
            resolved = ref
            if not resolved or resolved == "HEAD":
                resolved = (await context.metadata.get_revision()).revision

            page = await context.api.get_commits(
                context.metadata.repo.owner,
                context.metadata.repo.name,
                strip_origin(resolved),
                after=cursor,
                limit=limit,
                path=relative_path,
                since=since,
            )
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get log for {relative_path} in {repo_path}")
            if not use_cache:
                return None

            # Remember the failure until the document is reset
            empty = GitLog(repo_path=repo_path, commits={}, limit=limit, has_more=False, sha=ref)
            future: asyncio.Future[GitLog] = asyncio.get_running_loop().create_future()
            future.set_result(empty)
            logger.debug(f"Cache replace (with empty result): '{key}'")
            document.set_log(key, CachedItem(future, error_message=str(ex)))
            return empty

        viewer = page.viewer or context.session.account.label
        commits: dict[str, GitCommit] = {}
        for commit in page.values:
            if commit.oid not in commits:
                commits[commit.oid] = commit_from_github(repo_path, commit, viewer, path=relative_path)

        log = GitLog(
            repo_path=repo_path,
            commits=commits,
            limit=limit,
            has_more=page.paging.more if page.paging is not None else False,
            sha=resolved,
            ending_cursor=page.paging.cursor if page.paging is not None else None,
        )
        if log.has_more:
            log._more = self._more_fn(
                log,
                lambda n, after: self.get_log_for_file(
                    repo_path, relative_path, ref=ref, limit=n, cursor=after, since=since
                ),
            )
        return log
