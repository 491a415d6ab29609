"""Reference resolution against the remote repository."""

import asyncio
import logging
from typing import TYPE_CHECKING

from remotegit.git.cache import GitCache
from remotegit.git.revision import (
    DELETED_OR_MISSING,
    is_revision_range,
    is_sha,
    is_sha_like,
    is_uncommitted,
    strip_origin,
)

if TYPE_CHECKING:
    from remotegit.providers.github.provider import GitHubGitProvider, RepositoryContext

logger = logging.getLogger(__name__)


class RevisionSubProvider:
    def __init__(self, provider: "GitHubGitProvider", cache: GitCache) -> None:
        self.provider = provider
        self._cache = cache

    async def resolve_reference(self, repo_path: str, ref: str, path: str | None = None) -> str:
        """
        Resolve `ref` to a commit sha.

        Returns `ref` unchanged when it needs no resolution (empty, sentinels,
        full shas, ranges and non sha-like names without a path). With a path,
        returns the newest commit touching it, or DELETED_OR_MISSING when the
        path does not exist at `ref`.
        """
        if not ref or ref == DELETED_OR_MISSING or (path is None and is_sha(ref)):
            return ref
        if path is not None and is_uncommitted(ref):
            return ref
        if is_revision_range(ref):
            return ref
        if path is None and (not is_sha_like(ref) or ref.endswith("^3")):
            # Stash untracked-files parents have no remote counterpart
            return ref

        try:
            context = await self.provider.ensure_repository_context(repo_path)
            relative_path = self.provider.get_relative_path(path, repo_path) if path else None
            resolved = await context.api.resolve_reference(
                context.metadata.repo.owner,
                context.metadata.repo.name,
                strip_origin(ref),
                relative_path,
            )
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to resolve {ref} in {repo_path}")
            resolved = None

        if resolved is not None:
            return resolved
        return DELETED_OR_MISSING if path else ref

    async def resolve_reference_core(
        self,
        repo_path: str,
        context: "RepositoryContext",
        ref: str | None = None,
    ) -> str | None:
        """
        Resolve a ref using what is already known locally: HEAD, shas, then
        branch and tag tips. Ranges are not resolvable.
        """
        if ref is None or ref == "HEAD":
            revision = await context.metadata.get_revision()
            return revision.revision

        if is_sha(ref):
            return ref
        if is_revision_range(ref):
            return None

        branches, tags = await asyncio.gather(
            self.provider.branches.get_branches(repo_path, filter=lambda b: b.name == ref),
            self.provider.tags.get_tags(repo_path, filter=lambda t: t.name == ref),
        )
        if branches.values:
            return branches.values[0].sha
        if tags.values:
            return tags.values[0].sha
        return None
