"""Commit search for a remote-backed repository, via GitHub commit search."""

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Literal

from remotegit.core.cancellation import CancellationToken
from remotegit.core.exceptions import CancellationError, GitSearchError
from remotegit.git.cache import GitCache
from remotegit.git.models import GitSearch, GitSearchResultData, GitUser, PagingInfo, SearchQuery
from remotegit.git.search import get_query_args, get_search_query_comparison_key, parse_search_query
from remotegit.services.github.helpers import parse_github_date

if TYPE_CHECKING:
    from remotegit.providers.github.provider import GitHubGitProvider

logger = logging.getLogger(__name__)

SearchOrdering = Literal["date", "author-date", "topo"]


def _timestamp(value: str | None) -> float:
    date = parse_github_date(value)
    return date.timestamp() if date is not None else 0.0


class SearchSubProvider:
    def __init__(self, provider: "GitHubGitProvider", cache: GitCache) -> None:
        self.provider = provider
        self._cache = cache

    async def search_commits(
        self,
        repo_path: str,
        search: SearchQuery,
        limit: int | None = None,
        ordering: SearchOrdering | None = None,
        cancellation: CancellationToken | None = None,
        on_progress: Callable[[GitSearch], None] | None = None,
    ) -> GitSearch:
        """
        Search the repository's commits.

        `commit:` values are looked up directly. Otherwise the query is sent
        to GitHub commit search and every page is collected until results
        run out or `cancellation` fires; `on_progress` receives each page's
        new results as they arrive.

        Raises:
            GitSearchError: When the search fails
        """
        return await self._search_core(
            repo_path,
            search,
            None,
            {},
            limit,
            ordering or self.provider.settings.graph_commit_ordering,
            cancellation,
            on_progress,
        )

    async def _search_core(
        self,
        repo_path: str,
        search: SearchQuery,
        cursor: str | None,
        results: dict[str, GitSearchResultData],
        limit: int | None,
        ordering: SearchOrdering | None,
        cancellation: CancellationToken | None,
        on_progress: Callable[[GitSearch], None] | None,
    ) -> GitSearch:
        comparison_key = get_search_query_comparison_key(search)

        try:
            operations = parse_search_query(search)

            values = operations.get("commit:")
            if values:
                return await self._get_commits(repo_path, search, comparison_key, values, results, ordering)

            current_user: GitUser | None = None
            if any("@me" in value for value in operations.get("author:", [])):
                current_user = await self.provider.get_current_user(repo_path)

            query_args = get_query_args(operations, current_user, search.match_regex)
            if not query_args:
                return GitSearch(repo_path=repo_path, query=search, comparison_key=comparison_key, results=results)

            context = await self.provider.ensure_repository_context(repo_path)
            query = f"repo:{context.metadata.repo.owner}/{context.metadata.repo.name}+{'+'.join(query_args).strip()}"
            page_limit = self.provider.get_paging_limit(
                limit if limit is not None else self.provider.settings.max_search_items
            )
            sort = "committer-date" if ordering == "date" else "author-date" if ordering == "author-date" else None

            has_more = True
            while has_more and not (cancellation is not None and cancellation.is_cancellation_requested):
                try:
                    page = await context.api.search_commit_shas(
                        query, cursor=cursor, limit=page_limit, sort=sort, cancellation=cancellation
                    )
                except CancellationError:
                    logger.debug(f"Search cancelled for {repo_path}")
                    break
                if page is None:
                    has_more = False
                    break

                incremental: dict[str, GitSearchResultData] = {}
                for commit in page.values:
                    data = GitSearchResultData(
                        i=len(results),
                        date=_timestamp(commit.author_date if ordering == "author-date" else commit.committer_date),
                    )
                    results[commit.sha] = data
                    incremental[commit.sha] = data

                has_more = page.paging.more if page.paging is not None else False
                cursor = page.paging.cursor if page.paging is not None else None

                if incremental and on_progress is not None:
                    on_progress(
                        GitSearch(
                            repo_path=repo_path,
                            query=search,
                            comparison_key=comparison_key,
                            results=incremental,
                            paging=PagingInfo(cursor=cursor, more=has_more),
                        )
                    )
        except GitSearchError:
            raise
        except Exception as ex:
            logger.error(f"Unable to search commits in {repo_path}: {ex}")
            raise GitSearchError(ex) from ex

        logger.debug(f"Search found {len(results)} commits in {repo_path} (more={has_more})")
        result = GitSearch(
            repo_path=repo_path,
            query=search,
            comparison_key=comparison_key,
            results=results,
            paging=PagingInfo(cursor=cursor, more=has_more) if has_more else None,
        )
        if has_more:
            next_cursor = cursor

            async def more(more_limit: int | None) -> GitSearch:
                return await self._search_core(
                    repo_path, search, next_cursor, dict(results), more_limit or limit, ordering, None, None
                )

            result._more = more
        return result

    async def _get_commits(
        self,
        repo_path: str,
        search: SearchQuery,
        comparison_key: str,
        values: list[str],
        results: dict[str, GitSearchResultData],
        ordering: SearchOrdering | None,
    ) -> GitSearch:
        commits = await asyncio.gather(
            *(self.provider.commits.get_commit(repo_path, v.replace('"', "")) for v in values),
            return_exceptions=True,
        )

        i = 0
        for commit in commits:
            if commit is None or isinstance(commit, BaseException):
                continue
            date = commit.author.date if ordering == "author-date" else commit.committer.date
            results[commit.sha] = GitSearchResultData(
                i=i,
                date=date.timestamp(),
                files=[f.path for f in commit.files] if commit.files is not None else None,
            )
            i += 1

        return GitSearch(repo_path=repo_path, query=search, comparison_key=comparison_key, results=results)
