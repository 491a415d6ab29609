"""Unit tests for cooperative cancellation of remote calls."""

from __future__ import annotations

import asyncio

import pytest

from remotegit.core.cancellation import CancellationToken, run_cancellable
from remotegit.core.exceptions import CancellationError


class TestCancellationToken:
    def test_starts_uncancelled(self):
        token = CancellationToken()
        assert token.is_cancellation_requested is False
        token.raise_if_cancelled()

    def test_cancel_sets_flag(self):
        token = CancellationToken()
        token.cancel()

        assert token.is_cancellation_requested is True
        with pytest.raises(CancellationError):
            token.raise_if_cancelled()


class TestRunCancellable:
    """run_cancellable races the awaitable against the token."""

    @pytest.mark.anyio
    async def test_without_token_returns_result(self):
        async def work() -> int:
            return 5

        assert await run_cancellable(work()) == 5

    @pytest.mark.anyio
    async def test_completes_before_cancel(self):
        async def work() -> str:
            return "done"

        assert await run_cancellable(work(), CancellationToken()) == "done"

    @pytest.mark.anyio
    async def test_already_cancelled_raises(self):
        token = CancellationToken()
        token.cancel()

        async def work() -> str:
            return "never"

        with pytest.raises(CancellationError):
            await run_cancellable(work(), token)

    @pytest.mark.anyio
    async def test_cancel_in_flight_cancels_task(self):
        token = CancellationToken()
        started = asyncio.Event()
        cancelled = False

        async def work() -> str:
            nonlocal cancelled
            started.set()
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled = True
                raise
            return "late"

        async def cancel_soon() -> None:
            await started.wait()
            token.cancel()

        asyncio.ensure_future(cancel_soon())
        with pytest.raises(CancellationError):
            await run_cancellable(work(), token)

        assert cancelled is True
