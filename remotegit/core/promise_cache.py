"""
Single-flight caches of in-flight results.

Entries are asyncio futures rather than resolved values, so concurrent callers
asking for the same key share one round-trip. A future that fails or is
cancelled evicts itself, so the next caller retries.

Usage:
    branches: PromiseMap[str, PagedResult[GitBranch]] = PromiseMap("branches")
    result = await branches.get_or_create(repo_path, lambda: load(repo_path))
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable, Iterator
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


class PromiseMap(Generic[K, T]):
    """Key to future map with an explicit invalidation API."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[K, asyncio.Future[T]] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._entries))

    def get(self, key: K) -> asyncio.Future[T] | None:
        return self._entries.get(key)

    def set(self, key: K, future: asyncio.Future[T]) -> None:
        self._entries[key] = future
        future.add_done_callback(lambda f: self._evict_failed(key, f))

    def set_result(self, key: K, value: T) -> None:
        """Store an already-resolved value."""
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        future.set_result(value)
        self._entries[key] = future

    def delete(self, key: K) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def get_or_create(
        self,
        key: K,
        factory: Callable[[], Awaitable[T]],
    ) -> asyncio.Future[T]:
        """
        Return the pending or settled future for `key`, starting `factory` on a miss.

        The returned future is shared; callers should not cancel it.
        """
        existing = self._entries.get(key)
        if existing is not None:
            logger.debug(f"Cache HIT: {self.name} {key}")
            return existing

        logger.debug(f"Cache MISS: {self.name} {key}")
        future = asyncio.ensure_future(factory())
        self.set(key, future)
        return future

    def _evict_failed(self, key: K, future: asyncio.Future[T]) -> None:
        if not future.cancelled() and future.exception() is None:
            return
        if self._entries.get(key) is future:
            del self._entries[key]
            logger.debug(f"Evicted failed entry: {self.name} {key}")
