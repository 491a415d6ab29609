"""
GitHub API read operations.

Provides one read-only method per git concept, over GraphQL v4 where it can
and REST v3 where GraphQL has no equivalent (single commits with files,
comparisons and commit search):
- Branches and tags, and the branches holding given commits
- Contributors
- Commit history, single commits and commit counts
- Comparisons between refs
- Blame ranges
- Commit search
- Reference resolution
- Viewer, default branch and visibility

An `origin/` prefix on a ref or range is dropped before it reaches GitHub.
Not-found responses become None or an empty page; every other failure is
raised as a typed exception for the caller to interpret. Nothing here retries.
"""

import logging
from datetime import datetime
from typing import Any, Literal
from urllib.parse import quote, urlencode

import httpx

from remotegit.config import settings
from remotegit.core.cancellation import CancellationToken, run_cancellable
from remotegit.git.models import GitUser, PagedResult, PagingInfo
from remotegit.git.revision import (
    create_revision_range,
    get_revision_range_parts,
    is_revision_range,
    is_sha,
    strip_origin,
)
from remotegit.services.github.constants import (
    GET_BLAME_QUERY,
    GET_BRANCH_WITH_COMMITS_QUERY,
    GET_BRANCHES_QUERY,
    GET_BRANCHES_WITH_COMMITS_QUERY,
    GET_COMMIT_COUNT_QUERY,
    GET_COMMIT_QUERY,
    GET_COMMITS_QUERY,
    GET_CURRENT_USER_QUERY,
    GET_DEFAULT_BRANCH_QUERY,
    GET_REPOSITORY_VISIBILITY_QUERY,
    GET_TAGS_QUERY,
    MAX_PAGE_SIZE,
    RESOLVE_REFERENCE_FOR_PATH_QUERY,
    RESOLVE_REFERENCE_QUERY,
)
from remotegit.services.github.exceptions import GitHubAPIError, RequestNotFoundError
from remotegit.services.github.helpers import (
    handle_error_response,
    handle_graphql_errors,
    normalize_graphql_commit,
    normalize_rest_commit,
    normalize_rest_file,
)
from remotegit.services.github.http_client import get_github_client
from remotegit.services.github.types import (
    GitHubBlame,
    GitHubBlameRange,
    GitHubBranch,
    GitHubCommit,
    GitHubCommitPage,
    GitHubComparison,
    GitHubContributor,
    GitHubSearchCommitSha,
    GitHubSearchShaPage,
    GitHubTag,
    GitHubViewer,
)

logger = logging.getLogger(__name__)

SearchSort = Literal["author-date", "committer-date"]
BranchCommitMode = Literal["contains", "points-at"]


def _page_size(limit: int | None) -> int:
    return min(MAX_PAGE_SIZE, limit or MAX_PAGE_SIZE)


def _parse_search_cursor(cursor: str | None, limit: int | None) -> tuple[int, int, int]:
    """Split a search cursor `"page page_size previous_count"`; no cursor means the first page."""
    if cursor is None:
        return 1, _page_size(limit), 0
    page, page_size, previous_count = cursor.split(" ", 2)
    return int(page), int(page_size), int(previous_count)


def _to_timestamp(value: str | datetime | None) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return value.isoformat()


def _branch_has_commit(node: dict[str, Any], shas: set[str], mode: BranchCommitMode) -> bool:
    target = node.get("target") or {}
    if mode == "points-at":
        return target.get("oid") in shas
    history = (target.get("history") or {}).get("nodes") or []
    return any(commit.get("oid") in shas for commit in history)


def _build_authors_filter(authors: list[GitUser] | None) -> dict[str, Any] | None:
    if not authors:
        return None
    if len(authors) == 1:
        author = authors[0]
        author_filter: dict[str, Any] = {}
        if author.id:
            author_filter["id"] = author.id
        if author.email:
            author_filter["emails"] = [author.email]
        return author_filter or None
    emails = [a.email for a in authors if a.email]
    return {"emails": emails} if emails else None


class GitHubReadOperations:
    """
    Read-only operations for the GitHub API.

    Uses a shared HTTP client singleton for connection pooling. One instance is
    bound to one access token.
    """

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        graphql_url: str | None = None,
        api_version: str | None = None,
    ):
        self.token = token
        self.base_url = base_url or settings.github_api_url
        self.graphql_url = graphql_url or settings.github_graphql_url
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": api_version or settings.github_api_version,
        }

    # ─────────────────────────────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────────────────────────────

    async def _graphql(
        self,
        query: str,
        variables: dict[str, Any],
        resource: str,
        cancellation: CancellationToken | None = None,
    ) -> dict[str, Any] | None:
        client = get_github_client()
        payload = {
            "query": query,
            "variables": {k: v for k, v in variables.items() if v is not None},
        }
        try:
            response = await run_cancellable(
                client.post(self.graphql_url, headers=self._headers, json=payload),
                cancellation,
            )
        except (httpx.TimeoutException, httpx.RequestError) as ex:
            raise GitHubAPIError(f"GitHub request failed: {ex}") from ex

        handle_error_response(response, resource)

        body = response.json()
        handle_graphql_errors(body.get("errors") or [], response, resource)
        data: dict[str, Any] | None = body.get("data")
        return data

    async def _get(
        self,
        path: str,
        resource: str,
        params: dict[str, Any] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Any:
        client = get_github_client()
        try:
            response = await run_cancellable(
                client.get(
                    f"{self.base_url}{path}",
                    headers=self._headers,
                    params={k: v for k, v in (params or {}).items() if v is not None},
                ),
                cancellation,
            )
        except (httpx.TimeoutException, httpx.RequestError) as ex:
            raise GitHubAPIError(f"GitHub request failed: {ex}") from ex

        handle_error_response(response, resource)
        # Empty repositories answer list endpoints with 204 No Content
        if response.status_code == 204:
            return None
        return response.json()

    # ─────────────────────────────────────────────────────────────────────
    # Refs
    # ─────────────────────────────────────────────────────────────────────

    async def get_branches(
        self,
        owner: str,
        repo: str,
        cursor: str | None = None,
        limit: int | None = None,
        query: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> PagedResult[GitHubBranch]:
        """
        Fetch one page of branches (`refs/heads/*`).

        Returns:
            PagedResult of GitHubBranch with the cursor for the next page
        """
        try:
            data = await self._graphql(
                GET_BRANCHES_QUERY,
                {
                    "owner": owner,
                    "repo": repo,
                    "branchQuery": query,
                    "cursor": cursor,
                    "limit": _page_size(limit),
                },
                f"{owner}/{repo}",
                cancellation,
            )
        except RequestNotFoundError:
            return PagedResult()

        refs = ((data or {}).get("repository") or {}).get("refs")
        if refs is None:
            return PagedResult()

        branches = []
        for node in refs.get("nodes") or []:
            target = node.get("target") or {}
            branches.append(
                GitHubBranch(
                    name=node["name"],
                    oid=target.get("oid", ""),
                    authored_date=target.get("authoredDate"),
                    committed_date=target.get("committedDate"),
                )
            )

        page_info = refs.get("pageInfo") or {}
        return PagedResult(
            values=branches,
            paging=PagingInfo(cursor=page_info.get("endCursor"), more=bool(page_info.get("hasNextPage"))),
        )

    async def get_tags(
        self,
        owner: str,
        repo: str,
        cursor: str | None = None,
        limit: int | None = None,
        query: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> PagedResult[GitHubTag]:
        """
        Fetch one page of tags (`refs/tags/*`), newest commit first.

        Annotated tags are peeled to the commit they point at.
        """
        try:
            data = await self._graphql(
                GET_TAGS_QUERY,
                {
                    "owner": owner,
                    "repo": repo,
                    "tagQuery": query,
                    "cursor": cursor,
                    "limit": _page_size(limit),
                },
                f"{owner}/{repo}",
                cancellation,
            )
        except RequestNotFoundError:
            return PagedResult()

        refs = ((data or {}).get("repository") or {}).get("refs")
        if refs is None:
            return PagedResult()

        tags = []
        for node in refs.get("nodes") or []:
            target = node.get("target") or {}
            peeled = target.get("target")
            if peeled is not None:
                tags.append(
                    GitHubTag(
                        name=node["name"],
                        oid=peeled.get("oid") or target.get("oid", ""),
                        message=target.get("message"),
                        authored_date=peeled.get("authoredDate"),
                        committed_date=peeled.get("committedDate"),
                        tagger_date=(target.get("tagger") or {}).get("date"),
                        annotated=True,
                    )
                )
            else:
                tags.append(
                    GitHubTag(
                        name=node["name"],
                        oid=target.get("oid", ""),
                        message=target.get("message"),
                        authored_date=target.get("authoredDate"),
                        committed_date=target.get("committedDate"),
                    )
                )

        page_info = refs.get("pageInfo") or {}
        return PagedResult(
            values=tags,
            paging=PagingInfo(cursor=page_info.get("endCursor"), more=bool(page_info.get("hasNextPage"))),
        )

    async def get_branches_with_commits(
        self,
        owner: str,
        repo: str,
        shas: list[str],
        commit_date: str | datetime,
        mode: BranchCommitMode = "contains",
        branch: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> list[str]:
        """
        Find the branches holding any of `shas`.

        GitHub cannot ask which branches contain a commit, so each branch's
        history is searched at `commit_date`, which must be the commit date
        of the shas. In `points-at` mode only branch tips count.

        Args:
            branch: Only consider this branch

        Returns:
            Matching branch names, in GitHub's order
        """
        wanted = {strip_origin(sha) for sha in shas}
        timestamp = _to_timestamp(commit_date)
        resource = f"{owner}/{repo}"

        if branch:
            try:
                data = await self._graphql(
                    GET_BRANCH_WITH_COMMITS_QUERY,
                    {
                        "owner": owner,
                        "repo": repo,
                        "ref": f"refs/heads/{strip_origin(branch)}",
                        "since": timestamp,
                        "until": timestamp,
                    },
                    resource,
                    cancellation,
                )
            except RequestNotFoundError:
                return []
            node = ((data or {}).get("repository") or {}).get("ref")
            return [node["name"]] if node and _branch_has_commit(node, wanted, mode) else []

        names: list[str] = []
        cursor = None
        while True:
            try:
                data = await self._graphql(
                    GET_BRANCHES_WITH_COMMITS_QUERY,
                    {
                        "owner": owner,
                        "repo": repo,
                        "since": timestamp,
                        "until": timestamp,
                        "cursor": cursor,
                        "limit": MAX_PAGE_SIZE,
                    },
                    resource,
                    cancellation,
                )
            except RequestNotFoundError:
                return names

            refs = ((data or {}).get("repository") or {}).get("refs")
            if refs is None:
                return names
            names.extend(
                node["name"] for node in refs.get("nodes") or [] if _branch_has_commit(node, wanted, mode)
            )

            page_info = refs.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                return names
            cursor = page_info.get("endCursor")

    # ─────────────────────────────────────────────────────────────────────
    # Contributors
    # ─────────────────────────────────────────────────────────────────────

    async def get_contributors(
        self,
        owner: str,
        repo: str,
        cancellation: CancellationToken | None = None,
    ) -> list[GitHubContributor]:
        """
        Fetch the repository's contributors, most commits first.

        Only the first page is read; GitHub caps it at 100 entries.
        """
        try:
            data = await self._get(
                f"/repos/{owner}/{repo}/contributors",
                f"{owner}/{repo}",
                params={"per_page": MAX_PAGE_SIZE},
                cancellation=cancellation,
            )
        except RequestNotFoundError:
            return []

        return [
            GitHubContributor(
                login=item.get("login"),
                contributions=item.get("contributions", 0),
                type=item.get("type", "User"),
                name=item.get("name"),
                email=item.get("email"),
                avatar_url=item.get("avatar_url"),
                node_id=item.get("node_id"),
            )
            for item in data or []
        ]

    async def get_default_branch_name(
        self,
        owner: str,
        repo: str,
        cancellation: CancellationToken | None = None,
    ) -> str | None:
        try:
            data = await self._graphql(
                GET_DEFAULT_BRANCH_QUERY,
                {"owner": owner, "repo": repo},
                f"{owner}/{repo}",
                cancellation,
            )
        except RequestNotFoundError:
            return None

        ref = ((data or {}).get("repository") or {}).get("defaultBranchRef") or {}
        return ref.get("name")

    async def resolve_reference(
        self,
        owner: str,
        repo: str,
        ref: str,
        path: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> str | None:
        """
        Resolve a ref expression (`main`, `abc123^`, `v1.0~2`) to a commit sha.

        With `path`, resolves to the newest commit at or before `ref` that
        touched the path.
        """
        ref = strip_origin(ref)
        try:
            if not path:
                data = await self._graphql(
                    RESOLVE_REFERENCE_QUERY,
                    {"owner": owner, "repo": repo, "ref": ref},
                    f"{owner}/{repo}",
                    cancellation,
                )
                obj = ((data or {}).get("repository") or {}).get("object") or {}
                return obj.get("oid")

            data = await self._graphql(
                RESOLVE_REFERENCE_FOR_PATH_QUERY,
                {"owner": owner, "repo": repo, "ref": ref, "path": path},
                f"{owner}/{repo}",
                cancellation,
            )
        except RequestNotFoundError:
            return None

        obj = ((data or {}).get("repository") or {}).get("object") or {}
        nodes = (obj.get("history") or {}).get("nodes") or []
        return nodes[0]["oid"] if nodes else None

    # ─────────────────────────────────────────────────────────────────────
    # Commits
    # ─────────────────────────────────────────────────────────────────────

    async def get_commit(
        self,
        owner: str,
        repo: str,
        ref: str,
        cancellation: CancellationToken | None = None,
    ) -> GitHubCommit | None:
        """Fetch a single commit including its changed files."""
        ref = strip_origin(ref)
        try:
            data = await self._get(
                f"/repos/{owner}/{repo}/commits/{ref}",
                f"{owner}/{repo}",
                cancellation=cancellation,
            )
        except RequestNotFoundError:
            return None

        if not data:
            return None
        return normalize_rest_commit(data, include_files=True)

    async def get_commit_for_file(
        self,
        owner: str,
        repo: str,
        ref: str,
        path: str,
        cancellation: CancellationToken | None = None,
    ) -> GitHubCommit | None:
        """Fetch the newest commit at or before `ref` that touched `path`."""
        ref = strip_origin(ref)
        if is_sha(ref):
            return await self.get_commit(owner, repo, ref, cancellation)

        page = await self.get_commits(owner, repo, ref, limit=1, path=path, cancellation=cancellation)
        if not page.values:
            return None

        commit = await self.get_commit(owner, repo, page.values[0].oid, cancellation) or page.values[0]
        commit.viewer = page.viewer
        return commit

    async def get_commits(
        self,
        owner: str,
        repo: str,
        ref: str,
        after: str | None = None,
        authors: list[GitUser] | None = None,
        limit: int | None = None,
        path: str | None = None,
        since: str | datetime | None = None,
        until: str | datetime | None = None,
        cancellation: CancellationToken | None = None,
    ) -> GitHubCommitPage:
        """
        Fetch one page of history reachable from `ref`.

        A revision range is served by the compare endpoint (oldest last), and a
        single unscoped commit by a cheaper single-object query.
        """
        ref = strip_origin(ref)
        if limit == 1 and path is None:
            return await self._get_commit_single(owner, repo, ref, cancellation)

        if is_revision_range(ref):
            return await self._get_commits_range(owner, repo, ref, cancellation)

        try:
            data = await self._graphql(
                GET_COMMITS_QUERY,
                {
                    "owner": owner,
                    "repo": repo,
                    "ref": ref,
                    "after": after,
                    "path": path,
                    "author": _build_authors_filter(authors),
                    "limit": _page_size(limit),
                    "since": _to_timestamp(since),
                    "until": _to_timestamp(until),
                },
                f"{owner}/{repo}",
                cancellation,
            )
        except RequestNotFoundError:
            return GitHubCommitPage()

        data = data or {}
        obj = (data.get("repository") or {}).get("object") or {}
        history = obj.get("history")
        if history is None:
            return GitHubCommitPage()

        page_info = history.get("pageInfo") or {}
        end_cursor = page_info.get("endCursor")
        return GitHubCommitPage(
            values=[normalize_graphql_commit(n) for n in history.get("nodes") or []],
            paging=PagingInfo(cursor=end_cursor, more=bool(page_info.get("hasNextPage")))
            if end_cursor is not None
            else None,
            viewer=(data.get("viewer") or {}).get("name"),
        )

    async def _get_commit_single(
        self,
        owner: str,
        repo: str,
        ref: str,
        cancellation: CancellationToken | None = None,
    ) -> GitHubCommitPage:
        try:
            data = await self._graphql(
                GET_COMMIT_QUERY,
                {"owner": owner, "repo": repo, "ref": ref},
                f"{owner}/{repo}",
                cancellation,
            )
        except RequestNotFoundError:
            return GitHubCommitPage()

        data = data or {}
        node = (data.get("repository") or {}).get("object")
        if not node:
            return GitHubCommitPage()
        return GitHubCommitPage(
            values=[normalize_graphql_commit(node)],
            viewer=(data.get("viewer") or {}).get("name"),
        )

    async def _get_commits_range(
        self,
        owner: str,
        repo: str,
        range_: str,
        cancellation: CancellationToken | None = None,
    ) -> GitHubCommitPage:
        comparison = await self.get_comparison(owner, repo, range_, cancellation)
        if comparison is None:
            return GitHubCommitPage()
        # Compare lists oldest first; history is newest first
        return GitHubCommitPage(values=list(reversed(comparison.commits)))

    async def get_commit_count(
        self,
        owner: str,
        repo: str,
        ref: str,
        cancellation: CancellationToken | None = None,
    ) -> int | None:
        ref = strip_origin(ref)
        try:
            data = await self._graphql(
                GET_COMMIT_COUNT_QUERY,
                {"owner": owner, "repo": repo, "ref": ref},
                f"{owner}/{repo}",
                cancellation,
            )
        except RequestNotFoundError:
            return None

        obj = ((data or {}).get("repository") or {}).get("object") or {}
        return (obj.get("history") or {}).get("totalCount")

    async def get_comparison(
        self,
        owner: str,
        repo: str,
        range_: str,
        cancellation: CancellationToken | None = None,
    ) -> GitHubComparison | None:
        """
        Compare two refs.

        GitHub only understands `base...head`, so `..` ranges and ranges with a
        missing side are rewritten with HEAD for the missing side.
        """
        range_ = strip_origin(range_)
        if not is_revision_range(range_, "qualified-triple-dot"):
            parts = get_revision_range_parts(range_)
            left, right = (parts[0], parts[1]) if parts is not None else (None, None)
            range_ = create_revision_range(left or "HEAD", right or "HEAD", "...")

        try:
            data = await self._get(
                f"/repos/{owner}/{repo}/compare/{range_}",
                f"{owner}/{repo}",
                cancellation=cancellation,
            )
        except RequestNotFoundError:
            return None

        if not data:
            return None

        return GitHubComparison(
            status=data.get("status", ""),
            ahead_by=data.get("ahead_by", 0),
            behind_by=data.get("behind_by", 0),
            total_commits=data.get("total_commits", 0),
            commits=[normalize_rest_commit(c) for c in data.get("commits") or []],
            files=[normalize_rest_file(f) for f in data.get("files") or []],
        )

    # ─────────────────────────────────────────────────────────────────────
    # Blame
    # ─────────────────────────────────────────────────────────────────────

    async def get_blame(
        self,
        owner: str,
        repo: str,
        ref: str,
        path: str,
        cancellation: CancellationToken | None = None,
    ) -> GitHubBlame:
        """
        Fetch blame ranges for a file at `ref`.

        Returns:
            GitHubBlame with the ranges in file order and the viewer's name
        """
        ref = strip_origin(ref)
        try:
            data = await self._graphql(
                GET_BLAME_QUERY,
                {"owner": owner, "repo": repo, "ref": ref, "path": path},
                f"{owner}/{repo}",
                cancellation,
            )
        except RequestNotFoundError:
            return GitHubBlame()

        if data is None:
            return GitHubBlame()

        viewer = (data.get("viewer") or {}).get("name")
        obj = (data.get("repository") or {}).get("object") or {}
        ranges = (obj.get("blame") or {}).get("ranges") or []

        return GitHubBlame(
            ranges=[
                GitHubBlameRange(
                    starting_line=r["startingLine"],
                    ending_line=r["endingLine"],
                    commit=normalize_graphql_commit(r["commit"]),
                )
                for r in ranges
            ],
            viewer=viewer,
        )

    # ─────────────────────────────────────────────────────────────────────
    # Search
    # ─────────────────────────────────────────────────────────────────────

    async def _search(
        self,
        query: str,
        cursor: str | None,
        limit: int | None,
        sort: SearchSort | None,
        order: Literal["asc", "desc"] | None,
        cancellation: CancellationToken | None,
    ) -> tuple[dict[str, Any] | None, int, int, int]:
        page, page_size, previous_count = _parse_search_cursor(cursor, limit)

        # `+` separates qualifiers and must reach GitHub unencoded
        q = "+".join(quote(part, safe="") for part in query.split("+"))
        params = urlencode(
            {
                k: v
                for k, v in {"sort": sort, "order": order, "per_page": page_size, "page": page}.items()
                if v is not None
            }
        )

        client = get_github_client()
        try:
            response = await run_cancellable(
                client.get(f"{self.base_url}/search/commits?q={q}&{params}", headers=self._headers),
                cancellation,
            )
        except (httpx.TimeoutException, httpx.RequestError) as ex:
            raise GitHubAPIError(f"GitHub request failed: {ex}") from ex

        try:
            handle_error_response(response, "search/commits")
        except RequestNotFoundError:
            return None, page, page_size, previous_count

        return response.json(), page, page_size, previous_count

    @staticmethod
    def _search_paging(
        data: dict[str, Any],
        page: int,
        page_size: int,
        previous_count: int,
    ) -> PagingInfo:
        count = previous_count + len(data.get("items") or [])
        has_more = bool(data.get("incomplete_results")) or data.get("total_count", 0) > count
        return PagingInfo(
            cursor=f"{page + 1} {page_size} {count}" if has_more else None,
            more=has_more,
        )

    async def search_commit_shas(
        self,
        query: str,
        cursor: str | None = None,
        limit: int | None = None,
        sort: SearchSort | None = None,
        order: Literal["asc", "desc"] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> GitHubSearchShaPage | None:
        """
        Search commits with GitHub search syntax (`repo:o/r+author:x`).

        Returns:
            One page of shas with their dates, or None when nothing matched
        """
        data, page, page_size, previous_count = await self._search(
            query, cursor, limit, sort, order, cancellation
        )
        if not data or not data.get("items"):
            return None

        values = []
        for item in data["items"]:
            commit = item.get("commit") or {}
            author_date = (commit.get("author") or {}).get("date")
            values.append(
                GitHubSearchCommitSha(
                    sha=item["sha"],
                    author_date=author_date,
                    committer_date=(commit.get("committer") or {}).get("date") or author_date,
                )
            )

        return GitHubSearchShaPage(
            values=values,
            paging=self._search_paging(data, page, page_size, previous_count),
            total_count=data.get("total_count", 0),
        )

    # ─────────────────────────────────────────────────────────────────────
    # Repository
    # ─────────────────────────────────────────────────────────────────────

    async def get_current_user(
        self,
        owner: str,
        repo: str,
        cancellation: CancellationToken | None = None,
    ) -> GitHubViewer | None:
        try:
            data = await self._graphql(
                GET_CURRENT_USER_QUERY,
                {"owner": owner, "repo": repo},
                f"{owner}/{repo}",
                cancellation,
            )
        except RequestNotFoundError:
            return None

        viewer = (data or {}).get("viewer")
        if viewer is None:
            return None
        return GitHubViewer(
            name=viewer.get("name"),
            email=viewer.get("email"),
            login=viewer.get("login"),
            id=viewer.get("id"),
        )

    async def get_repository_visibility(
        self,
        owner: str,
        repo: str,
        cancellation: CancellationToken | None = None,
    ) -> Literal["public", "private"] | None:
        try:
            data = await self._graphql(
                GET_REPOSITORY_VISIBILITY_QUERY,
                {"owner": owner, "repo": repo},
                f"{owner}/{repo}",
                cancellation,
            )
        except RequestNotFoundError:
            return None

        visibility = ((data or {}).get("repository") or {}).get("visibility")
        if visibility is None:
            return None
        return "public" if visibility == "PUBLIC" else "private"
