"""Comparisons between refs of a remote-backed repository."""

import logging
from typing import TYPE_CHECKING

from remotegit.git.cache import GitCache
from remotegit.git.models import GitDiffShortStat, GitFileChange, LeftRightCommitCount
from remotegit.git.revision import (
    create_revision_range,
    get_revision_range_parts,
    is_revision_range,
    strip_origin,
)
from remotegit.providers.github.converters import file_change_from_github

if TYPE_CHECKING:
    from remotegit.providers.github.provider import GitHubGitProvider

logger = logging.getLogger(__name__)


class DiffSubProvider:
    def __init__(self, provider: "GitHubGitProvider", cache: GitCache) -> None:
        self.provider = provider
        self._cache = cache

    async def get_changed_files_count(self, repo_path: str, ref: str | None = None) -> GitDiffShortStat | None:
        # Working tree changes are not visible remotely, so a ref is required
        if not ref:
            return None

        commit = await self.provider.commits.get_commit(repo_path, ref)
        if commit is None or commit.stats is None:
            return None

        return GitDiffShortStat(
            files_changed=commit.stats.files or 0,
            additions=commit.stats.additions or 0,
            deletions=commit.stats.deletions or 0,
        )

    async def get_diff_status(
        self,
        repo_path: str,
        ref1: str,
        ref2: str | None = None,
    ) -> list[GitFileChange] | None:
        """
        Files changed between two refs, or within a range.

        GitHub only compares `base...head`. A `a..b` range is answered with
        the union of both directions, without per-file stats since they would
        not be correct for files changed on both sides.
        """
        if is_revision_range(ref1):
            range_ = ref1
            if not is_revision_range(ref1, "qualified"):
                parts = get_revision_range_parts(ref1)
                left, right, notation = parts if parts is not None else (None, None, "...")
                range_ = create_revision_range(left or "HEAD", right or "HEAD", notation)
        else:
            range_ = create_revision_range(ref1 or "HEAD", ref2 or "HEAD", "...")

        reverse_range = None
        if is_revision_range(range_, "qualified-double-dot"):
            left, right, _ = get_revision_range_parts(range_)  # type: ignore[misc]
            range_ = create_revision_range(left, right, "...")
            reverse_range = create_revision_range(right, left, "...")

        try:
            context = await self.provider.ensure_repository_context(repo_path)
            owner, name = context.metadata.repo.owner, context.metadata.repo.name

            comparison = await context.api.get_comparison(owner, name, strip_origin(range_))
            files = list(comparison.files) if comparison is not None else None

            if reverse_range is not None:
                reverse = await context.api.get_comparison(owner, name, strip_origin(reverse_range))
                if reverse is not None:
                    seen = {f.filename for f in files or []}
                    files = (files or []) + [f for f in reverse.files if f.filename not in seen]
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get diff status for {range_} in {repo_path}")
            return None

        if files is None:
            return None

        changes = [file_change_from_github(repo_path, f) for f in files]
        if reverse_range is not None:
            changes = [
                GitFileChange(
                    repo_path=c.repo_path,
                    path=c.path,
                    status=c.status,
                    original_path=c.original_path,
                    sha=c.sha,
                )
                for c in changes
            ]
        return changes

    async def get_left_right_commit_count(self, repo_path: str, range_: str) -> LeftRightCommitCount | None:
        """Commits only on the left (behind) and only on the right (ahead) of a range."""
        try:
            context = await self.provider.ensure_repository_context(repo_path)
            comparison = await context.api.get_comparison(
                context.metadata.repo.owner, context.metadata.repo.name, strip_origin(range_)
            )
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to count commits for {range_} in {repo_path}")
            return None

        if comparison is None:
            return None
        return LeftRightCommitCount(left=comparison.behind_by, right=comparison.ahead_by)

    async def get_diff_for_file(self, repo_path: str, path: str, ref1: str | None, ref2: str | None = None) -> None:
        # File contents are not available through the remote API
        return None

    async def get_diff_for_line(self, repo_path: str, path: str, line: int, ref1: str | None, ref2: str | None = None) -> None:
        return None
