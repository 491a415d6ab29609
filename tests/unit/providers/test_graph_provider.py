"""Unit tests for commit graph rows and graph paging."""

from __future__ import annotations

import pytest

from remotegit.git.revision import UNCOMMITTED
from remotegit.services.github.types import GitHubViewer
from tests.helpers.mock_factories import (
    REPO_PATH,
    SHA_A,
    SHA_B,
    SHA_C,
    SHA_D,
    VIEWER,
    make_branch_page,
    make_commit_page,
    make_github_commit,
    make_provider,
    make_tag_page,
    seed_context,
)


def _seed_graph(provider, pages):
    """main at A (current), feature-x at C, tag v1.0 at B."""
    api = seed_context(provider)
    api.get_branches.return_value = make_branch_page([("main", SHA_A), ("feature-x", SHA_C)])
    api.get_tags.return_value = make_tag_page([("v1.0", SHA_B)])
    api.get_current_user.return_value = GitHubViewer(
        name="Octo Cat (work)", email="octo@example.com", login="octocat", id="U_1"
    )
    api.get_commits.side_effect = pages
    return api


def _first_page():
    return make_commit_page(
        [
            make_github_commit(SHA_A, parents=[SHA_B, SHA_D], author=VIEWER, avatar_url="https://avatars/octo"),
            make_github_commit(SHA_B, parents=[SHA_C]),
        ],
        cursor="c1",
        more=True,
    )


def _second_page():
    return make_commit_page(
        [
            make_github_commit(SHA_B, parents=[SHA_C]),
            make_github_commit(SHA_C, parents=[SHA_D]),
            make_github_commit(SHA_D),
        ]
    )


# ═══════════════════════════════════════════════════════════════════════════
# First page
# ═══════════════════════════════════════════════════════════════════════════


class TestGraph:
    @pytest.mark.anyio
    async def test_rows_in_log_order(self):
        provider = make_provider()
        _seed_graph(provider, [_first_page()])

        graph = await provider.graph.get_commits_for_graph(REPO_PATH)

        assert [row.sha for row in graph.rows] == [SHA_A, SHA_B]
        assert graph.id == SHA_A
        assert graph.ids == {SHA_A, SHA_B}
        assert graph.paging is not None
        assert graph.paging.cursor == "c1"
        assert graph.has_more is True

    @pytest.mark.anyio
    async def test_head_row_decorations(self):
        provider = make_provider()
        _seed_graph(provider, [_first_page()])

        graph = await provider.graph.get_commits_for_graph(REPO_PATH)
        head_row = graph.rows[0]

        assert head_row.type == "merge-node"
        assert head_row.parents == [SHA_B, SHA_D]
        assert len(head_row.heads) == 1
        head = head_row.heads[0]
        assert head.name == "main"
        assert head.is_current_head is True
        assert head.id == f"{REPO_PATH}|heads/main"
        assert head.upstream == {"name": "origin/main", "id": f"{REPO_PATH}|remotes/origin/main"}

        assert len(head_row.remotes) == 1
        remote_head = head_row.remotes[0]
        assert remote_head.name == "main"
        assert remote_head.owner == "origin"
        assert remote_head.current is True
        assert graph.downstreams == {"origin/main": ["main"]}

    @pytest.mark.anyio
    async def test_tags_authors_and_stats(self):
        provider = make_provider()
        _seed_graph(provider, [_first_page()])

        graph = await provider.graph.get_commits_for_graph(REPO_PATH)
        head_row, tagged_row = graph.rows

        assert [t.name for t in tagged_row.tags] == ["v1.0"]
        assert tagged_row.tags[0].annotated is True
        assert tagged_row.type == "commit-node"

        assert head_row.author == "You"
        assert head_row.contexts is not None
        assert head_row.contexts["avatar"]["current"] is True
        assert head_row.contexts["avatar"]["name"] == "Octo Cat (work)"
        assert tagged_row.contexts is not None
        assert tagged_row.contexts["avatar"]["current"] is False

        assert graph.avatars == {"ada@example.com": "https://avatars/octo"}
        stats = graph.row_stats[SHA_A]
        assert (stats.files, stats.additions, stats.deletions) == (1, 3, 1)
        assert isinstance(head_row.date, float)

    @pytest.mark.anyio
    async def test_branches_and_remotes_exposed(self):
        provider = make_provider()
        _seed_graph(provider, [_first_page()])

        graph = await provider.graph.get_commits_for_graph(REPO_PATH)

        assert set(graph.branches) == {"main", "origin/main", "origin/feature-x"}
        assert list(graph.remotes) == ["origin"]

    @pytest.mark.anyio
    async def test_uncommitted_ref_uses_head(self):
        provider = make_provider()
        api = _seed_graph(provider, [_first_page()])

        await provider.graph.get_commits_for_graph(REPO_PATH, ref=UNCOMMITTED)

        assert api.get_commits.call_args.args[2] == SHA_A

    @pytest.mark.anyio
    async def test_failed_log_gives_empty_graph(self):
        provider = make_provider()
        _seed_graph(provider, [RuntimeError("boom")])

        graph = await provider.graph.get_commits_for_graph(REPO_PATH)

        assert graph.rows == []
        assert graph.paging is None
        assert graph.has_more is False

    @pytest.mark.anyio
    async def test_failed_tags_leave_rows_untagged(self):
        provider = make_provider()
        api = _seed_graph(provider, [_first_page()])
        api.get_tags.side_effect = RuntimeError("boom")

        graph = await provider.graph.get_commits_for_graph(REPO_PATH)

        assert [row.sha for row in graph.rows] == [SHA_A, SHA_B]
        assert all(row.tags == [] for row in graph.rows)


# ═══════════════════════════════════════════════════════════════════════════
# Paging
# ═══════════════════════════════════════════════════════════════════════════


class TestGraphPaging:
    @pytest.mark.anyio
    async def test_more_emits_only_new_rows(self):
        provider = make_provider()
        api = _seed_graph(provider, [_first_page(), _second_page()])

        graph = await provider.graph.get_commits_for_graph(REPO_PATH)
        page2 = await graph.more(2)

        assert [row.sha for row in page2.rows] == [SHA_C, SHA_D]
        assert page2.ids == {SHA_A, SHA_B, SHA_C, SHA_D}
        assert page2.has_more is False
        assert api.get_commits.call_args.kwargs["after"] == "c1"

    @pytest.mark.anyio
    async def test_remote_branch_tip_on_later_page(self):
        provider = make_provider()
        _seed_graph(provider, [_first_page(), _second_page()])

        graph = await provider.graph.get_commits_for_graph(REPO_PATH)
        page2 = await graph.more()

        feature_row = page2.rows[0]
        assert feature_row.sha == SHA_C
        assert feature_row.heads == []
        assert [(r.name, r.owner, r.url) for r in feature_row.remotes] == [
            ("feature-x", "origin", "https://github.com/octo/repo.git")
        ]

    @pytest.mark.anyio
    async def test_failed_more_emits_nothing(self):
        provider = make_provider()
        _seed_graph(provider, [_first_page(), RuntimeError("boom")])

        graph = await provider.graph.get_commits_for_graph(REPO_PATH)
        page2 = await graph.more()

        assert page2.rows == []
        assert page2.has_more is False
