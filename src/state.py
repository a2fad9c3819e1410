from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from .models import Snapshot

logger = logging.getLogger(__name__)


class RefreshStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class RefreshState:
    """Outcome of the latest refresh cycle.

    A failed state still carries the last good snapshot so the view can fall
    back to it until the next successful cycle.
    """

    status: RefreshStatus
    snapshot: Optional[Snapshot] = None
    error: Optional[str] = None

    @classmethod
    def loading(cls) -> "RefreshState":
        return cls(RefreshStatus.LOADING)

    @classmethod
    def ready(cls, snapshot: Snapshot) -> "RefreshState":
        return cls(RefreshStatus.READY, snapshot=snapshot)

    @classmethod
    def failed(cls, reason: str, snapshot: Optional[Snapshot] = None) -> "RefreshState":
        return cls(RefreshStatus.FAILED, snapshot=snapshot, error=reason)


Listener = Callable[[RefreshState], None]


class DashboardState:
    """Owned dashboard state with a single writer and any number of readers."""

    def __init__(self) -> None:
        self._current = RefreshState.loading()
        self._listeners: List[Listener] = []

    @property
    def current(self) -> RefreshState:
        return self._current

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self._current.snapshot

    def publish_ready(self, snapshot: Snapshot) -> None:
        self._publish(RefreshState.ready(snapshot))

    def publish_failed(self, reason: str) -> None:
        self._publish(RefreshState.failed(reason, snapshot=self.snapshot))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: RefreshState) -> None:
        self._current = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Dashboard listener failed")


__all__ = ["DashboardState", "Listener", "RefreshState", "RefreshStatus"]
