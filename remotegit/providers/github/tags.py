"""Tags of a remote-backed repository."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from remotegit.git.cache import GitCache
from remotegit.git.models import GitTag, PagedResult
from remotegit.services.github.helpers import parse_github_date

if TYPE_CHECKING:
    from remotegit.providers.github.provider import GitHubGitProvider

logger = logging.getLogger(__name__)


def sort_tags(tags: list[GitTag]) -> list[GitTag]:
    """Newest first, then by name."""
    return sorted(
        tags,
        key=lambda t: (-(t.date.timestamp() if t.date is not None else 0), t.name),
    )


class TagsSubProvider:
    def __init__(self, provider: "GitHubGitProvider", cache: GitCache) -> None:
        self.provider = provider
        self._cache = cache

    async def get_tags(
        self,
        repo_path: str,
        filter: Callable[[GitTag], bool] | None = None,
        cursor: str | None = None,
        sort: bool = False,
    ) -> PagedResult[GitTag]:
        """
        Return tags; annotated tags point at the commit they tag.

        Without a cursor every page is loaded and the result cached. Failures
        are logged and yield an empty result.
        """
        if cursor is None:
            future = self._cache.tags.get_or_create(repo_path, lambda: self._load(repo_path, None))
        else:
            future = None

        try:
            result = await future if future is not None else await self._load(repo_path, cursor)
        except Exception as ex:
            self.provider.handle_request_error(ex, f"Unable to get tags for {repo_path}")
            return PagedResult()

        values = result.values
        if filter is not None:
            values = [t for t in values if filter(t)]
        if sort:
            values = sort_tags(values)
        return PagedResult(values=values, paging=result.paging)

    async def _load(self, repo_path: str, cursor: str | None) -> PagedResult[GitTag]:
        context = await self.provider.ensure_repository_context(repo_path)
        owner, name = context.metadata.repo.owner, context.metadata.repo.name
        load_all = cursor is None

        tags: list[GitTag] = []
        while True:
            page = await context.api.get_tags(owner, name, cursor=cursor)
            for tag in page.values:
                tags.append(
                    GitTag(
                        repo_path=repo_path,
                        name=tag.name,
                        sha=tag.oid,
                        message=tag.message or "",
                        commit_date=parse_github_date(tag.committed_date or tag.tagger_date),
                        date=parse_github_date(tag.authored_date or tag.tagger_date),
                    )
                )

            if page.paging is None or not page.paging.more or not load_all:
                logger.debug(f"Loaded {len(tags)} tags for {repo_path}")
                return PagedResult(values=tags, paging=page.paging)

            cursor = page.paging.cursor
