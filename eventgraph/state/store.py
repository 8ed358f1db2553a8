"""
Snapshot Store

Single-writer, multi-reader holder of the current GraphSnapshot.

PUBLICATION RULE (last-triggered wins):
- ``next_generation()`` hands out a ticket when a reload is triggered
- ``publish()`` accepts a snapshot only if its generation is newer than
  the published one; a slower, older reload finishing late is discarded
- the swap is a single reference assignment under a lock, so readers see
  either the old snapshot or the new one, never a mix
- observers are notified one publish at a time, in generation order; a
  snapshot already superseded when its turn comes is not announced
"""

from __future__ import annotations
from typing import Callable, List, Optional
import logging
import threading

from .snapshot import GraphSnapshot

logger = logging.getLogger(__name__)

SnapshotObserver = Callable[[GraphSnapshot], None]


class SnapshotStore:

    def __init__(self, initial: Optional[GraphSnapshot] = None):
        self._lock = threading.Lock()
        self._notify_lock = threading.RLock()
        self._current = initial or GraphSnapshot.empty()
        self._issued = self._current.generation
        self._observers: List[SnapshotObserver] = []

    @property
    def current(self) -> GraphSnapshot:
        """The published snapshot; safe to hold while newer ones are published."""
        return self._current

    @property
    def generation(self) -> int:
        return self._current.generation

    def next_generation(self) -> int:
        """Ticket for a newly triggered reload (monotonically increasing)."""
        with self._lock:
            self._issued += 1
            return self._issued

    def publish(self, snapshot: GraphSnapshot) -> bool:
        """Swap in ``snapshot`` unless a newer generation is already published."""
        with self._lock:
            if snapshot.generation <= self._current.generation:
                logger.info(
                    "Discarding stale snapshot generation %d (published: %d)",
                    snapshot.generation, self._current.generation
                )
                return False
            self._current = snapshot
            self._issued = max(self._issued, snapshot.generation)

        logger.info(
            "Published snapshot generation %d: %d events, %d outcomes, %d edges",
            snapshot.generation, snapshot.event_count,
            snapshot.outcome_count, snapshot.edge_count
        )
        self._notify(snapshot)
        return True

    def _notify(self, snapshot: GraphSnapshot):
        with self._notify_lock:
            with self._lock:
                if snapshot is not self._current:
                    logger.debug(
                        "Skipping notification for superseded generation %d",
                        snapshot.generation
                    )
                    return
                observers = list(self._observers)
            for observer in observers:
                observer(snapshot)

    def subscribe(self, observer: SnapshotObserver) -> Callable[[], None]:
        """Call ``observer`` after every accepted publish; returns an unsubscribe."""
        with self._lock:
            self._observers.append(observer)

        def unsubscribe():
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe
