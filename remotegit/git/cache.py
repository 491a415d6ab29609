"""
Per-repository and per-document caches for remote-backed repositories.

GitCache holds single-flight futures per repository path, grouped in
categories that can be reset independently:
- branch: the current (or detached) branch
- branches / tags: every page, loaded once
- current-user: the viewer, with None recorded as known-absent
- contributors: contributor lists, keyed by repository path and options
- context: resolved repository contexts

DocumentTracker holds blame and file-log futures for individual files. It is
bounded with an LRU policy since every file opened adds an entry.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from cachetools import LRUCache  # type: ignore[import-untyped]

from remotegit.config import settings
from remotegit.core.promise_cache import PromiseMap
from remotegit.git.models import GitBranch, GitContributorsResult, GitTag, GitUser, PagedResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheCategory(str, Enum):
    BRANCH = "branch"
    BRANCHES = "branches"
    TAGS = "tags"
    CURRENT_USER = "current-user"
    CONTRIBUTORS = "contributors"
    CONTEXT = "context"


# Alternate spellings accepted by reset signals
_CATEGORY_ALIASES = {
    "current_user": CacheCategory.CURRENT_USER,
    "repo-info": CacheCategory.CURRENT_USER,
}


# Categories reset whenever a repository reports a change
REPOSITORY_CHANGE_CATEGORIES = (
    CacheCategory.BRANCH,
    CacheCategory.BRANCHES,
    CacheCategory.TAGS,
    CacheCategory.CURRENT_USER,
    CacheCategory.CONTRIBUTORS,
)


class GitCache:
    """Category caches keyed by repository path."""

    def __init__(self, tracked_documents_max: int | None = None) -> None:
        self.branch: PromiseMap[str, GitBranch | None] = PromiseMap("branch")
        self.branches: PromiseMap[str, PagedResult[GitBranch]] = PromiseMap("branches")
        self.tags: PromiseMap[str, PagedResult[GitTag]] = PromiseMap("tags")
        self.contexts: PromiseMap[str, Any] = PromiseMap("context")
        # A settled None means looked up and absent; failed lookups evict themselves
        self.current_user: PromiseMap[str, GitUser | None] = PromiseMap("current-user")
        self.contributors: PromiseMap[tuple[str, str], GitContributorsResult] = PromiseMap(
            "contributors"
        )
        self.documents = DocumentTracker(
            tracked_documents_max
            if tracked_documents_max is not None
            else settings.tracked_documents_max
        )

    def _resolve(self, categories: Iterable[CacheCategory | str] | None) -> list[CacheCategory]:
        if not categories:
            return list(CacheCategory)
        return [_CATEGORY_ALIASES.get(c) or CacheCategory(c) for c in categories]

    def invalidate(self, repo_path: str, *categories: CacheCategory | str) -> None:
        """Drop the given categories (all when none given) for one repository."""
        for category in self._resolve(categories):
            if category == CacheCategory.CONTRIBUTORS:
                for key in self.contributors:
                    if key[0] == repo_path:
                        self.contributors.delete(key)
            else:
                self._map(category).delete(repo_path)
        logger.debug(f"Invalidated {repo_path}: {[c.value for c in self._resolve(categories)]}")

    def invalidate_all(self, *categories: CacheCategory | str) -> None:
        """Drop the given categories (all when none given) for every repository."""
        for category in self._resolve(categories):
            self._map(category).clear()
        if not categories:
            self.documents.clear()
        logger.debug(f"Invalidated all repositories: {[c.value for c in self._resolve(categories)]}")

    def on_cache_reset(
        self,
        repo_path: str | None = None,
        types: Iterable[CacheCategory | str] | None = None,
    ) -> None:
        """Apply a reset signal, optionally scoped to a repository and categories."""
        categories = tuple(types) if types else ()
        if repo_path is None:
            self.invalidate_all(*categories)
        else:
            self.invalidate(repo_path, *categories)
            if not categories:
                self.documents.reset(repo_path)

    def on_repository_changed(self, repo_path: str) -> None:
        self.invalidate(repo_path, *REPOSITORY_CHANGE_CATEGORIES)
        self.documents.reset(repo_path)

    def _map(self, category: CacheCategory) -> PromiseMap[Any, Any]:
        if category == CacheCategory.BRANCH:
            return self.branch
        if category == CacheCategory.BRANCHES:
            return self.branches
        if category == CacheCategory.TAGS:
            return self.tags
        if category == CacheCategory.CURRENT_USER:
            return self.current_user
        if category == CacheCategory.CONTRIBUTORS:
            return self.contributors
        return self.contexts


# ---------------------------------------------------------------------------
# Tracked documents
# ---------------------------------------------------------------------------


@dataclass
class CachedItem(Generic[T]):
    """A cached future plus the error that produced it, when it is a negative entry."""

    item: asyncio.Future[T]
    error_message: str | None = None


class TrackedDocument:
    """Blame and log futures for one file, keyed by strings like `blame:{sha}`."""

    def __init__(self, repo_path: str, path: str) -> None:
        self.repo_path = repo_path
        self.path = path
        self.dirty = False
        self._blame: dict[str, CachedItem[Any]] = {}
        self._log: dict[str, CachedItem[Any]] = {}

    def get_blame(self, key: str) -> CachedItem[Any] | None:
        return self._blame.get(key)

    def set_blame(self, key: str, value: CachedItem[Any]) -> None:
        self._blame[key] = value

    def get_log(self, key: str) -> CachedItem[Any] | None:
        return self._log.get(key)

    def set_log(self, key: str, value: CachedItem[Any]) -> None:
        self._log[key] = value

    def reset(self) -> None:
        self._blame.clear()
        self._log.clear()


class DocumentTracker:
    """LRU-bounded map of tracked documents keyed by `(repo_path, path)`."""

    def __init__(self, maxsize: int) -> None:
        self._documents: LRUCache[tuple[str, str], TrackedDocument] = LRUCache(maxsize=maxsize)

    def __len__(self) -> int:
        return len(self._documents)

    def get(self, repo_path: str, path: str) -> TrackedDocument | None:
        return self._documents.get((repo_path, path))

    def get_or_add(self, repo_path: str, path: str) -> TrackedDocument:
        key = (repo_path, path)
        document = self._documents.get(key)
        if document is None:
            document = TrackedDocument(repo_path, path)
            self._documents[key] = document
            logger.debug(f"Tracking document: {repo_path} {path}")
        return document

    def remove(self, repo_path: str, path: str) -> None:
        self._documents.pop((repo_path, path), None)

    def reset(self, repo_path: str) -> None:
        for key in list(self._documents.keys()):
            if key[0] == repo_path:
                self._documents[key].reset()

    def clear(self) -> None:
        self._documents.clear()
