"""Process-wide refresh loop.

Runs one aggregation cycle immediately, then one per interval. At most one
cycle is in flight and at most one timer is pending at any time.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .config import FETCH_ERROR_MESSAGE, REFRESH_INTERVAL_SECONDS
from .errors import MetricsError
from .models import Snapshot
from .state import DashboardState

logger = logging.getLogger(__name__)

SnapshotFetcher = Callable[[], Awaitable[Snapshot]]


class RefreshLoop:
    def __init__(
        self,
        fetch: SnapshotFetcher,
        state: DashboardState,
        interval: float = REFRESH_INTERVAL_SECONDS,
    ) -> None:
        self._fetch = fetch
        self._state = state
        self._interval = interval
        self._task: Optional[asyncio.Task] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._running = False
        self.cycle_count = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def timer_pending(self) -> bool:
        return self._timer is not None

    def start(self) -> asyncio.Task:
        """Start polling with an immediate cycle."""
        if self._running:
            return self.trigger()
        self._running = True
        logger.info("Refresh loop started (interval=%ss)", self._interval)
        return self.trigger()

    def trigger(self) -> asyncio.Task:
        """Run a cycle now, or hand back the one already in flight."""
        if not self._running:
            raise RuntimeError("Refresh loop is not running")
        if self._task is not None and not self._task.done():
            logger.debug("Refresh cycle already in flight, not starting another")
            return self._task
        self._cancel_timer()
        self._task = asyncio.get_running_loop().create_task(self._run_cycle())
        return self._task

    def stop(self) -> None:
        """Cancel the pending timer; an in-flight cycle finishes but is discarded."""
        self._running = False
        self._cancel_timer()
        logger.info("Refresh loop stopped")

    async def _run_cycle(self) -> None:
        self.cycle_count += 1
        cycle = self.cycle_count
        snapshot: Optional[Snapshot] = None
        try:
            snapshot = await self._fetch()
        except MetricsError as exc:
            logger.warning("Refresh cycle %d failed: %s", cycle, exc)
        except Exception:
            logger.exception("Refresh cycle %d failed unexpectedly", cycle)

        if not self._running:
            logger.debug("Discarding refresh cycle %d after stop", cycle)
            return

        if snapshot is None:
            self._state.publish_failed(FETCH_ERROR_MESSAGE)
        else:
            self._state.publish_ready(snapshot)
        self._schedule_next()

    def _schedule_next(self) -> None:
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().call_later(self._interval, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        if self._running:
            self.trigger()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


__all__ = ["RefreshLoop", "SnapshotFetcher"]
