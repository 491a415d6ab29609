"""Unit tests for the per-repository and per-document caches."""

from __future__ import annotations

import pytest

from remotegit.git.cache import CacheCategory, CachedItem, DocumentTracker, GitCache
from remotegit.git.models import GitContributorsResult, GitUser, PagedResult

REPO_X = "vscode-vfs://github/octo/x"
REPO_Y = "vscode-vfs://github/octo/y"


def _seed(cache: GitCache, repo_path: str) -> None:
    cache.branches.set_result(repo_path, PagedResult())
    cache.tags.set_result(repo_path, PagedResult())
    cache.branch.set_result(repo_path, None)
    cache.contexts.set_result(repo_path, object())
    cache.current_user.set_result(repo_path, GitUser(name="Ada", email=None))
    cache.contributors.set_result((repo_path, "HEAD"), GitContributorsResult(contributors=[]))
    cache.contributors.set_result((repo_path, "HEAD:stats"), GitContributorsResult(contributors=[]))


class TestGitCacheInvalidation:
    @pytest.mark.anyio
    async def test_scoped_reset_keeps_other_categories(self):
        cache = GitCache(10)
        _seed(cache, REPO_X)

        cache.on_cache_reset(REPO_X, ["tags"])

        assert REPO_X not in cache.tags
        assert REPO_X in cache.branches
        assert REPO_X in cache.contexts

    @pytest.mark.anyio
    async def test_scoped_reset_keeps_other_repositories(self):
        cache = GitCache(10)
        _seed(cache, REPO_X)
        _seed(cache, REPO_Y)

        cache.invalidate(REPO_X)

        assert REPO_X not in cache.branches
        assert REPO_X not in cache.current_user
        assert REPO_Y in cache.branches
        assert REPO_Y in cache.current_user

    @pytest.mark.anyio
    async def test_global_reset_with_categories(self):
        cache = GitCache(10)
        _seed(cache, REPO_X)
        _seed(cache, REPO_Y)

        cache.on_cache_reset(None, [CacheCategory.BRANCHES])

        assert len(cache.branches) == 0
        assert len(cache.tags) == 2

    @pytest.mark.anyio
    async def test_repository_changed_keeps_context(self):
        cache = GitCache(10)
        _seed(cache, REPO_X)
        document = cache.documents.get_or_add(REPO_X, "a.py")
        document.set_blame("blame", CachedItem(cache.contexts.get(REPO_X)))  # type: ignore[arg-type]

        cache.on_repository_changed(REPO_X)

        assert REPO_X not in cache.branch
        assert REPO_X not in cache.branches
        assert REPO_X not in cache.tags
        assert REPO_X not in cache.current_user
        assert REPO_X in cache.contexts
        assert len(cache.contributors) == 0
        assert document.get_blame("blame") is None

    @pytest.mark.anyio
    @pytest.mark.parametrize("category", ["current-user", "current_user", "repo-info"])
    async def test_current_user_reset_spellings(self, category):
        cache = GitCache(10)
        _seed(cache, REPO_X)

        cache.on_cache_reset(REPO_X, [category])

        assert REPO_X not in cache.current_user
        assert REPO_X in cache.tags

    @pytest.mark.anyio
    async def test_contributors_reset_only_for_repository(self):
        cache = GitCache(10)
        _seed(cache, REPO_X)
        _seed(cache, REPO_Y)

        cache.invalidate(REPO_X, CacheCategory.CONTRIBUTORS)

        assert sorted(cache.contributors) == [(REPO_Y, "HEAD"), (REPO_Y, "HEAD:stats")]
        assert REPO_X in cache.branches

    @pytest.mark.anyio
    async def test_invalidate_all_clears_documents(self):
        cache = GitCache(10)
        cache.documents.get_or_add(REPO_X, "a.py")

        cache.invalidate_all()

        assert len(cache.documents) == 0


class TestDocumentTracker:
    def test_get_or_add_returns_same_document(self):
        tracker = DocumentTracker(10)
        first = tracker.get_or_add(REPO_X, "a.py")

        assert tracker.get_or_add(REPO_X, "a.py") is first
        assert tracker.get(REPO_X, "b.py") is None

    def test_bounded_by_lru(self):
        tracker = DocumentTracker(2)
        tracker.get_or_add(REPO_X, "a.py")
        tracker.get_or_add(REPO_X, "b.py")
        tracker.get(REPO_X, "a.py")
        tracker.get_or_add(REPO_X, "c.py")

        assert len(tracker) == 2
        assert tracker.get(REPO_X, "b.py") is None
        assert tracker.get(REPO_X, "a.py") is not None

    def test_remove(self):
        tracker = DocumentTracker(10)
        tracker.get_or_add(REPO_X, "a.py")
        tracker.remove(REPO_X, "a.py")

        assert tracker.get(REPO_X, "a.py") is None
