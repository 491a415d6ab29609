"""
Commit graph rows for a remote-backed repository.

The graph is built from one page of the log, decorated with the current
branch, remote branch tips and tags. Paging continues the underlying log and
only emits rows for the commits the new page added.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from remotegit.git.cache import GitCache
from remotegit.git.models import (
    GitBranch,
    GitGraph,
    GitGraphRow,
    GitGraphRowHead,
    GitGraphRowRemoteHead,
    GitGraphRowStats,
    GitGraphRowTag,
    GitLog,
    GitRemote,
    GitUser,
    PagingInfo,
)
from remotegit.git.revision import is_uncommitted
from remotegit.providers.github.converters import YOU

if TYPE_CHECKING:
    from remotegit.providers.github.provider import GitHubGitProvider

logger = logging.getLogger(__name__)


def _settled(result: Any, what: str) -> Any:
    if isinstance(result, BaseException):
        logger.warning(f"Graph {what} unavailable: {result}")
        return None
    return result


@dataclass
class GraphState:
    """Maps carried from one graph page to the next."""

    head_branch: GitBranch | None
    remote: GitRemote | None
    current_user: GitUser | None
    branches: dict[str, GitBranch] = field(default_factory=dict)
    branch_tips: dict[str, list[str]] = field(default_factory=dict)
    tag_tips: dict[str, list[str]] = field(default_factory=dict)
    remotes: dict[str, GitRemote] = field(default_factory=dict)
    avatars: dict[str, str] = field(default_factory=dict)
    ids: set[str] = field(default_factory=set)
    row_stats: dict[str, GitGraphRowStats] = field(default_factory=dict)


class GraphSubProvider:
    def __init__(self, provider: "GitHubGitProvider", cache: GitCache) -> None:
        self.provider = provider
        self._cache = cache

    async def get_commits_for_graph(
        self,
        repo_path: str,
        limit: int | None = None,
        ref: str | None = None,
    ) -> GitGraph:
        """
        Build graph rows for the history of `ref` (default HEAD).

        The log, head branch, remote branches, remotes, tags and current user
        are loaded concurrently; any part that fails is left out.
        """
        limit = limit if limit is not None else self.provider.settings.graph_default_item_limit
        log_ref = "HEAD" if not ref or is_uncommitted(ref) else ref

        results = await asyncio.gather(
            self.provider.commits.get_log(repo_path, log_ref, limit=limit, all=True),
            self.provider.branches.get_branch(repo_path),
            self.provider.branches.get_branches(repo_path, filter=lambda b: b.remote),
            self.provider.remotes.get_remotes(repo_path),
            self.provider.tags.get_tags(repo_path),
            self.provider.get_current_user(repo_path),
            return_exceptions=True,
        )
        log = _settled(results[0], "log")
        head_branch = _settled(results[1], "head branch")
        branches = _settled(results[2], "branches")
        remotes = _settled(results[3], "remotes")
        tags = _settled(results[4], "tags")
        current_user = _settled(results[5], "current user")

        remote = remotes[0] if remotes else None
        state = GraphState(head_branch=head_branch, remote=remote, current_user=current_user)
        if remote is not None:
            state.remotes[remote.name] = remote

        if head_branch is not None:
            state.branches[head_branch.name] = head_branch
            if head_branch.sha is not None:
                state.branch_tips[head_branch.sha] = [head_branch.name]

        for branch in branches.values if branches is not None else []:
            state.branches[branch.name] = branch
            if branch.sha is not None:
                state.branch_tips.setdefault(branch.sha, []).append(branch.name)

        for tag in tags.values if tags is not None else []:
            if tag.sha is not None:
                state.tag_tips.setdefault(tag.sha, []).append(tag.name)

        return self._build(repo_path, log, state)

    def _build(self, repo_path: str, log: GitLog | None, state: GraphState) -> GitGraph:
        downstreams: dict[str, list[str]] = {}
        graph = GitGraph(
            repo_path=repo_path,
            rows=[],
            avatars=state.avatars,
            downstreams=downstreams,
            ids=state.ids,
            row_stats=state.row_stats,
            branches=state.branches,
            remotes=state.remotes,
        )
        if log is None:
            return graph

        head_branch = state.head_branch
        remote = state.remote

        for commit in log.new_commits().values():
            state.ids.add(commit.sha)

            heads: list[GitGraphRowHead] = []
            remote_heads: list[GitGraphRowRemoteHead] = []
            is_head = head_branch is not None and commit.sha == head_branch.sha

            if is_head and head_branch is not None:
                upstream = head_branch.upstream
                heads.append(
                    GitGraphRowHead(
                        name=head_branch.name,
                        id=head_branch.id,
                        is_current_head=True,
                        upstream={"name": upstream.name, "id": f"{repo_path}|remotes/{upstream.name}"}
                        if upstream is not None
                        else None,
                        context={"type": "branch", "current": True, "tracking": upstream is not None},
                    )
                )
                if upstream is not None and remote is not None:
                    remote_heads.append(
                        GitGraphRowRemoteHead(
                            name=head_branch.name,
                            owner=remote.name,
                            url=remote.url,
                            current=True,
                            context={"type": "branch", "remote": True, "id": f"{repo_path}|remotes/{head_branch.name}"},
                        )
                    )
                    downstreams.setdefault(upstream.name, []).append(head_branch.name)
            elif remote is not None:
                for name in state.branch_tips.get(commit.sha, []):
                    remote_heads.append(
                        GitGraphRowRemoteHead(
                            name=name.split("/", 1)[1] if "/" in name else name,
                            owner=remote.name,
                            url=remote.url,
                            context={"type": "branch", "remote": True, "id": f"{repo_path}|remotes/{name}"},
                        )
                    )

            tags = [
                # Annotation is not looked up
                GitGraphRowTag(name=name, annotated=True, context={"type": "tag", "id": f"{repo_path}|tags/{name}"})
                for name in state.tag_tips.get(commit.sha, [])
            ]

            email = commit.author.email or ""
            if email and commit.author.avatar_url and email not in state.avatars:
                state.avatars[email] = commit.author.avatar_url

            is_current_user = commit.author.name == YOU
            author_name = (
                state.current_user.name
                if is_current_user and state.current_user is not None and state.current_user.name
                else commit.author.name
            )

            graph.rows.append(
                GitGraphRow(
                    sha=commit.sha,
                    parents=list(commit.parents),
                    author=commit.author.name,
                    email=email,
                    date=commit.committer.date.timestamp(),
                    message=commit.message or commit.summary,
                    type="merge-node" if commit.is_merge else "commit-node",
                    heads=heads,
                    remotes=remote_heads,
                    tags=tags,
                    contexts={
                        "row": {"type": "commit", "sha": commit.sha, "head": is_head},
                        "avatar": {
                            "type": "contributor",
                            "name": author_name,
                            "email": commit.author.email,
                            "current": is_current_user,
                        },
                    },
                )
            )

            if commit.stats is not None:
                state.row_stats[commit.sha] = GitGraphRowStats(
                    files=commit.stats.files or 0,
                    additions=commit.stats.additions or 0,
                    deletions=commit.stats.deletions or 0,
                )

        graph.id = next(iter(log.commits), None)
        graph.paging = PagingInfo(cursor=log.ending_cursor, more=log.has_more)

        async def more(limit: int | None) -> GitGraph:
            more_log = await log.more(limit)
            return self._build(repo_path, more_log, state)

        graph._more = more
        logger.debug(f"Built {len(graph.rows)} graph rows for {repo_path} (more={log.has_more})")
        return graph
