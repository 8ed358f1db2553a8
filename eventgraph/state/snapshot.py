"""
Graph Snapshot

The derived state handed to readers: events, outcomes and edges from
one reload, frozen together.

INVARIANTS:
- A snapshot is never modified after creation; a reload builds a new one
- Events, outcomes and edges always come from the same reload
- ``fingerprint`` is a sha256 over the ordered edge list, so identical
  inputs give identical fingerprints
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence, Tuple
import hashlib
import logging

from ..contracts.base import LoadReport
from ..contracts.records import DependencyEdge, EventRecord, OutcomeRecord
from ..core.filter import GraphFilter
from ..core.graph_builder import incoming_edges, outgoing_edges
from ..core.topology import DependencyTopology

logger = logging.getLogger(__name__)


def compute_fingerprint(edges: Iterable[DependencyEdge]) -> str:
    digest = hashlib.sha256()
    for edge in edges:
        digest.update(edge.signature().encode('utf-8'))
        digest.update(b"\n")
    return digest.hexdigest()


def _warn_duplicates(kind: str, records) -> None:
    seen = set()
    for record in records:
        if record.id in seen:
            logger.warning("Duplicate %s id %r; the id view keeps the last one", kind, record.id)
        seen.add(record.id)


@dataclass(frozen=True, eq=False)
class GraphSnapshot:
    """
    Immutable result of one reload.

    ``event_list`` keeps load order (layouts and edge construction depend
    on it); ``events`` / ``outcomes`` are read-only id-keyed views. A
    duplicate id keeps its last record in the views; the counts follow
    the lists.
    """
    generation: int
    event_list: Tuple[EventRecord, ...]
    outcome_list: Tuple[OutcomeRecord, ...]
    edges: Tuple[DependencyEdge, ...]
    events: Mapping[str, EventRecord]
    outcomes: Mapping[str, OutcomeRecord]
    fingerprint: str
    report: LoadReport
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        generation: int,
        events: Sequence[EventRecord],
        outcomes: Sequence[OutcomeRecord],
        edges: Sequence[DependencyEdge],
        report: Optional[LoadReport] = None
    ) -> GraphSnapshot:
        edge_tuple = tuple(edges)
        _warn_duplicates("event", events)
        _warn_duplicates("outcome", outcomes)
        return GraphSnapshot(
            generation=generation,
            event_list=tuple(events),
            outcome_list=tuple(outcomes),
            edges=edge_tuple,
            events=MappingProxyType({event.id: event for event in events}),
            outcomes=MappingProxyType({outcome.id: outcome for outcome in outcomes}),
            fingerprint=compute_fingerprint(edge_tuple),
            report=report or LoadReport(root="")
        )

    @staticmethod
    def empty() -> GraphSnapshot:
        return GraphSnapshot.create(generation=0, events=(), outcomes=(), edges=())

    @property
    def event_count(self) -> int:
        return len(self.event_list)

    @property
    def outcome_count(self) -> int:
        return len(self.outcome_list)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def incoming(self, event_id: str) -> Tuple[DependencyEdge, ...]:
        return incoming_edges(event_id, self.edges)

    def outgoing(self, event_id: str) -> Tuple[DependencyEdge, ...]:
        return outgoing_edges(event_id, self.edges)

    def filtered_events(self, graph_filter: GraphFilter) -> Tuple[EventRecord, ...]:
        return graph_filter.apply(self.event_list)

    def topology(self) -> DependencyTopology:
        return DependencyTopology.build(self.events.keys(), self.edges)
