"""
Reload Pipeline

files -> loaders -> outcome index -> graph builder -> GraphSnapshot -> store

Loading runs on a background worker so a caller (UI thread, CLI) is not
blocked by file I/O. Graph construction is pure CPU work done in the same
job. There is no cancellation: overlapping reloads both run to completion
and the store keeps the one triggered last.
"""

from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional
import logging

from ..core.graph_builder import GraphBuilder
from ..core.outcome_index import build_outcome_index
from ..ingestion.config import StorageConfig
from ..ingestion.loader import EventLoader, OutcomeLoader
from .snapshot import GraphSnapshot
from .store import SnapshotStore

logger = logging.getLogger(__name__)


class ReloadPipeline:
    """Builds snapshots from a content root and publishes them to a store."""

    def __init__(
        self,
        config: StorageConfig,
        store: Optional[SnapshotStore] = None,
        builder: Optional[GraphBuilder] = None,
        max_workers: int = 2
    ):
        self._config = config
        self._store = store or SnapshotStore()
        self._builder = builder or GraphBuilder()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="eventgraph-reload"
        )

    @property
    def store(self) -> SnapshotStore:
        return self._store

    @property
    def config(self) -> StorageConfig:
        return self._config

    def build_snapshot(self, generation: int) -> GraphSnapshot:
        """Load every record and derive the edge list (no publication)."""
        events = EventLoader(self._config).load_all_events()
        outcomes = OutcomeLoader(self._config).load_all_outcomes()

        index = build_outcome_index(events.records)
        edges = self._builder.build_edges(events.records, index)

        return GraphSnapshot.create(
            generation=generation,
            events=events.records,
            outcomes=outcomes.records,
            edges=edges,
            report=events.report.merge(outcomes.report)
        )

    def reload(self) -> Future:
        """
        Trigger a reload on the background worker.

        The generation is taken now, at trigger time. The future resolves
        to the built snapshot whether or not the store accepted it.
        """
        generation = self._store.next_generation()
        logger.debug("Reload %d scheduled", generation)
        return self._executor.submit(self._run, generation)

    def reload_sync(self) -> GraphSnapshot:
        """Reload in the calling thread and return the current snapshot."""
        self._run(self._store.next_generation())
        return self._store.current

    def _run(self, generation: int) -> GraphSnapshot:
        try:
            snapshot = self.build_snapshot(generation)
        except Exception:
            logger.exception("Reload %d failed", generation)
            raise
        self._store.publish(snapshot)
        return snapshot

    def close(self, wait: bool = True):
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> ReloadPipeline:
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
