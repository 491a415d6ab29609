"""
Cooperative cancellation for remote calls.

A CancellationToken is handed down from the caller to the API client. When the
token fires, the in-flight request task is cancelled and CancellationError is
raised in the caller's frame.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from remotegit.core.exceptions import CancellationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation signal."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancellationError()


async def run_cancellable(
    awaitable: Awaitable[T],
    cancellation: CancellationToken | None = None,
) -> T:
    """
    Await `awaitable`, aborting it if `cancellation` fires first.

    Raises:
        CancellationError: If the token was already cancelled or fires before
            the awaitable completes
    """
    task = asyncio.ensure_future(awaitable)
    if cancellation is None:
        return await task

    if cancellation.is_cancellation_requested:
        task.cancel()
        raise CancellationError()

    waiter = asyncio.ensure_future(cancellation.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()

    if task in done:
        return task.result()

    task.cancel()
    try:
        await task
    except asyncio.CancelledError as ex:
        logger.debug("Cancelled in-flight request")
        raise CancellationError(ex) from ex
    # The request finished while being cancelled; honour the cancellation anyway
    raise CancellationError()
