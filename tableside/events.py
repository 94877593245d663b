"""Snapshot subscription used by the dashboards instead of ad-hoc polling."""

from __future__ import annotations

import logging
import threading
from typing import Callable
from uuid import uuid4

from tableside.models import Snapshot

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[Snapshot], None]
Unsubscribe = Callable[[], None]


class SnapshotBus:
    """Delivers every published snapshot, whole, to each subscriber in registration order."""

    def __init__(self) -> None:
        self._subscribers: dict[str, SnapshotCallback] = {}
        self._lock = threading.RLock()

    def subscribe(self, callback: SnapshotCallback) -> Unsubscribe:
        subscription_id = uuid4().hex
        with self._lock:
            self._subscribers[subscription_id] = callback

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(subscription_id, None)

        return unsubscribe

    def publish(self, snapshot: Snapshot) -> None:
        with self._lock:
            callbacks = list(self._subscribers.values())
        for callback in callbacks:
            try:
                callback(snapshot)
            except Exception:
                # A failing view must not break the writer or the other views.
                logger.exception("subscriber_failed version=%s", snapshot.version)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)
