"""Unit tests for the single-flight PromiseMap."""

from __future__ import annotations

import asyncio

import pytest

from remotegit.core.promise_cache import PromiseMap


class TestGetOrCreate:
    """Concurrent callers share one in-flight factory call."""

    @pytest.mark.anyio
    async def test_concurrent_callers_share_one_call(self):
        cache: PromiseMap[str, int] = PromiseMap("test")
        calls = 0
        release = asyncio.Event()

        async def factory() -> int:
            nonlocal calls
            calls += 1
            await release.wait()
            return 42

        first = cache.get_or_create("key", factory)
        second = cache.get_or_create("key", factory)
        release.set()

        assert await first == 42
        assert await second == 42
        assert first is second
        assert calls == 1

    @pytest.mark.anyio
    async def test_settled_value_is_reused(self):
        cache: PromiseMap[str, int] = PromiseMap("test")

        async def factory() -> int:
            return 1

        await cache.get_or_create("key", factory)

        async def other() -> int:
            return 2

        assert await cache.get_or_create("key", other) == 1

    @pytest.mark.anyio
    async def test_failure_evicts_entry(self):
        cache: PromiseMap[str, int] = PromiseMap("test")

        async def failing() -> int:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await cache.get_or_create("key", failing)
        await asyncio.sleep(0)

        assert "key" not in cache

        async def working() -> int:
            return 7

        assert await cache.get_or_create("key", working) == 7


class TestInvalidation:
    """Explicit delete and clear."""

    @pytest.mark.anyio
    async def test_delete_and_clear(self):
        cache: PromiseMap[str, int] = PromiseMap("test")
        cache.set_result("a", 1)
        cache.set_result("b", 2)

        assert cache.delete("a") is True
        assert cache.delete("a") is False
        assert list(cache) == ["b"]

        cache.clear()
        assert len(cache) == 0

    @pytest.mark.anyio
    async def test_set_result_is_awaitable(self):
        cache: PromiseMap[str, str] = PromiseMap("test")
        cache.set_result("a", "value")

        future = cache.get("a")
        assert future is not None
        assert await future == "value"
