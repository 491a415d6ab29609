"""
Pending repository discovery.

When a repository is discovered before the workspace bridge has registered a
provider for it, the uri is queued and polled until the bridge catches up:

    IDLE --add()--> POLLING --every uri has a provider--> IDLE (fires on_did_change)
                       ^  |
                       +--+ some uri still unregistered, or the check failed

The scheduler is injected so the polling can be driven by tests.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Protocol

from remotegit.config import settings
from remotegit.providers.github.remotehub import RemoteHubApi

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class DiscoveryState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"


class PendingDiscovery:
    """Polls the bridge for queued uris until every one has a registered provider."""

    def __init__(
        self,
        get_remotehub: Callable[[], Awaitable[RemoteHubApi]],
        on_did_change: Callable[[], None],
        interval: float | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self._get_remotehub = get_remotehub
        self._on_did_change = on_did_change
        self._interval = interval if interval is not None else settings.pending_discovery_interval
        self._scheduler = scheduler
        # Insertion-ordered set of uris
        self._pending: dict[str, None] = {}
        self._timer: TimerHandle | None = None
        self._task: asyncio.Future[None] | None = None

    @property
    def state(self) -> DiscoveryState:
        return DiscoveryState.POLLING if self._timer is not None else DiscoveryState.IDLE

    @property
    def pending(self) -> list[str]:
        return list(self._pending)

    def add(self, uri: str) -> None:
        self._pending[uri] = None
        self._schedule()

    def _schedule(self) -> None:
        if self._timer is not None or not self._pending:
            return
        scheduler = self._scheduler or asyncio.get_running_loop()
        self._timer = scheduler.call_later(self._interval, self._on_timer)

    def _on_timer(self) -> None:
        self._task = asyncio.ensure_future(self.poll())

    async def poll(self) -> None:
        """Check every queued uri once; reschedules while any is still unregistered."""
        try:
            remotehub = await self._get_remotehub()

            for uri in list(self._pending):
                if remotehub.get_provider(uri) is None:
                    logger.debug(f"No provider registered yet for {uri}; polling again")
                    self._timer = None
                    self._schedule()
                    return
                del self._pending[uri]

            self._timer = None
            logger.info("Pending repositories are ready; notifying")
            self._on_did_change()

            if self._pending:
                self._schedule()
        except Exception:
            logger.exception("Pending repository discovery failed; polling again")
            self._timer = None
            self._schedule()

    def dispose(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending.clear()
