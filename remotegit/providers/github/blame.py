"""
Blame for files of a remote-backed repository.

GitHub returns blame as ranges of lines per commit. They are expanded into
per-line entries; GitHub does not report original line numbers, so the
current line number is used for both.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

from remotegit.git.cache import CachedItem, GitCache, TrackedDocument
from remotegit.git.models import (
    GitBlame,
    GitBlameAuthor,
    GitBlameLine,
    GitCommit,
    GitCommitLine,
)
from remotegit.git.revision import strip_origin
from remotegit.providers.github.converters import commit_from_github, display_name
from remotegit.services.github.types import GitHubBlame, GitHubBlameRange

if TYPE_CHECKING:
    from remotegit.providers.github.provider import GitHubGitProvider, RepositoryContext

logger = logging.getLogger(__name__)


def _range_lines(blame_range: GitHubBlameRange) -> list[GitCommitLine]:
    sha = blame_range.commit.oid
    return [
        GitCommitLine(sha=sha, previous_sha=None, original_line=i, line=i)
        for i in range(blame_range.starting_line, blame_range.ending_line + 1)
    ]


def _sort_authors(authors: dict[str, GitBlameAuthor]) -> dict[str, GitBlameAuthor]:
    return dict(sorted(authors.items(), key=lambda item: item[1].line_count, reverse=True))


def get_blame_range(blame: GitBlame, start: int, end: int) -> GitBlame:
    """
    Slice a blame to the 0-based, inclusive line range `start..end`.

    Only commits owning a line in the slice are kept, with their lines
    filtered to the slice, and author counts are recomputed from it.
    """
    if not blame.lines:
        return blame
    if start == 0 and end == len(blame.lines) - 1:
        return blame

    lines = blame.lines[start:end + 1]
    shas = {line.sha for line in lines}
    start_line, end_line = start + 1, end + 1

    authors: dict[str, GitBlameAuthor] = {}
    commits: dict[str, GitCommit] = {}
    for commit in blame.commits.values():
        if commit.sha not in shas:
            continue

        commit = commit.with_lines(
            tuple(line for line in commit.lines if start_line <= line.line <= end_line)
        )
        commits[commit.sha] = commit

        author = authors.get(commit.author.name)
        if author is None:
            author = authors[commit.author.name] = GitBlameAuthor(name=commit.author.name, line_count=0)
        author.line_count += len(commit.lines)

    return GitBlame(
        repo_path=blame.repo_path,
        authors=_sort_authors(authors),
        commits=commits,
        lines=lines,
    )


class BlameSubProvider:
    def __init__(self, provider: "GitHubGitProvider", cache: GitCache) -> None:
        self.provider = provider
        self._cache = cache

    async def get_blame(
        self,
        repo_path: str,
        path: str,
        sha: str | None = None,
        dirty: bool = False,
    ) -> GitBlame | None:
        """
        Whole-file blame at `sha` (default HEAD), cached on the tracked document.

        Dirty documents have no remote blame and return None. A failed fetch
        is cached as an empty blame until the document is reset.
        """
        if dirty:
            return None

        key = f"blame:{sha}" if sha else "blame"
        relative_path = self.provider.get_relative_path(path, repo_path)
        document = self._cache.documents.get_or_add(repo_path, relative_path)

        cached = document.get_blame(key)
        if cached is not None:
            logger.debug(f"Cache hit: '{key}'")
            return await cached.item

        logger.debug(f"Cache miss: '{key}'")
        future = asyncio.ensure_future(self._get_blame_core(repo_path, relative_path, sha, document, key))
        logger.debug(f"Cache add: '{key}'")
        document.set_blame(key, CachedItem(future))
        return await future

    async def _get_blame_core(
        self,
        repo_path: str,
        relative_path: str,
        sha: str | None,
        document: TrackedDocument,
        key: str,
    ) -> GitBlame:
        try:
            context = await self.provider.ensure_repository_context(repo_path)
            blame = await self._fetch(context, relative_path, sha)
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get blame for {relative_path} in {repo_path}")

            empty = GitBlame(repo_path=repo_path, authors={}, commits={}, lines=[])
            future: asyncio.Future[GitBlame] = asyncio.get_running_loop().create_future()
            future.set_result(empty)
            logger.debug(f"Cache replace (with empty result): '{key}'")
            document.set_blame(key, CachedItem(future, error_message=str(ex)))
            return empty

        viewer = blame.viewer or context.session.account.label
        authors: dict[str, GitBlameAuthor] = {}
        commits: dict[str, GitCommit] = {}
        commit_lines: dict[str, list[GitCommitLine]] = {}
        lines: list[GitCommitLine] = []

        for blame_range in sorted(blame.ranges, key=lambda r: r.starting_line):
            author_name = display_name(blame_range.commit.author.name, viewer)
            author = authors.get(author_name)
            if author is None:
                author = authors[author_name] = GitBlameAuthor(name=author_name, line_count=0)
            author.line_count += blame_range.ending_line - blame_range.starting_line + 1

            oid = blame_range.commit.oid
            if oid not in commits:
                commits[oid] = commit_from_github(repo_path, blame_range.commit, viewer, path=relative_path)
                commit_lines[oid] = []

            range_lines = _range_lines(blame_range)
            commit_lines[oid].extend(range_lines)
            lines.extend(range_lines)

        return GitBlame(
            repo_path=repo_path,
            authors=_sort_authors(authors),
            commits={oid: c.with_lines(tuple(commit_lines[oid])) for oid, c in commits.items()},
            lines=lines,
        )

    async def _fetch(self, context: "RepositoryContext", relative_path: str, sha: str | None) -> GitHubBlame:
        ref = sha
        if not ref or ref == "HEAD":
            ref = (await context.metadata.get_revision()).revision
        return await context.api.get_blame(
            context.metadata.repo.owner,
            context.metadata.repo.name,
            strip_origin(ref),
            relative_path,
        )

    async def get_blame_for_line(
        self,
        repo_path: str,
        path: str,
        line: int,
        sha: str | None = None,
        dirty: bool = False,
        force_single_line: bool = False,
    ) -> GitBlameLine | None:
        """
        Blame for the 0-based `line`.

        By default the whole-file blame is used; `force_single_line` queries
        the remote directly and only answers for a line that starts a range.
        """
        if dirty:
            return None

        if not force_single_line:
            blame = await self.get_blame(repo_path, path, sha)
            if blame is None:
                return None

            if line < len(blame.lines):
                blame_line = blame.lines[line]
            elif line == len(blame.lines) and blame.lines:
                blame_line = blame.lines[line - 1]
            else:
                return None

            commit = blame.commits.get(blame_line.sha)
            if commit is None:
                return None
            return GitBlameLine(
                author=GitBlameAuthor(name=commit.author.name, line_count=len(commit.lines)),
                commit=commit,
                line=blame_line,
            )

        relative_path = self.provider.get_relative_path(path, repo_path)
        try:
            context = await self.provider.ensure_repository_context(repo_path)
            blame = await self._fetch(context, relative_path, sha)
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get blame for {relative_path}:{line + 1}")
            return None

        blame_range = next((r for r in blame.ranges if r.starting_line == line + 1), None)
        if blame_range is None:
            return None

        viewer = blame.viewer or context.session.account.label
        range_lines = _range_lines(blame_range)
        commit = commit_from_github(
            repo_path, blame_range.commit, viewer, path=relative_path, lines=tuple(range_lines)
        )
        return GitBlameLine(
            author=GitBlameAuthor(name=commit.author.name, line_count=len(range_lines)),
            commit=commit,
            line=range_lines[0],
        )

    async def get_blame_for_range(
        self,
        repo_path: str,
        path: str,
        start: int,
        end: int,
        sha: str | None = None,
    ) -> GitBlame | None:
        blame = await self.get_blame(repo_path, path, sha)
        if blame is None:
            return None
        return get_blame_range(blame, start, end)
