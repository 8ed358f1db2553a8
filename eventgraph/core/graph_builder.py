"""
Graph Builder
=============

Derives typed dependency edges from event records.

ALGORITHM (per consumer event, in this order):
1. REQUIRED      - each outcome of the AND list, each producer
2. REQUIRED_ANY  - each OR group, each outcome in it, each producer
3. FORBIDDEN     - each forbidden outcome, each producer

OR groups fan out to one edge per (outcome, producer) pair, not one
edge per group. Self-edges are skipped. An outcome nobody produces
yields no edge. PRODUCES edges are only derived on demand for an
outcome-centric view (see ``outcome_view``).

All methods are pure: no state is kept between calls.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import logging

from ..contracts.records import DependencyEdge, EdgeKind, EventRecord
from .outcome_index import OutcomeIndex, build_outcome_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutcomeView:
    """Everything that touches one outcome."""
    outcome_id: str
    producers: Tuple[EventRecord, ...]
    consumers: Tuple[EventRecord, ...]
    blocked: Tuple[EventRecord, ...]

    @property
    def is_dangling(self) -> bool:
        """Referenced by some event but produced by none."""
        return not self.producers and bool(self.consumers or self.blocked)

    def produces_edges(self) -> Tuple[DependencyEdge, ...]:
        """
        PRODUCES edges: each producer to each gated event (consumers first,
        then blocked events), self pairs skipped.
        """
        gated = self.consumers + self.blocked
        return tuple(
            DependencyEdge(
                from_event_id=producer.id,
                to_event_id=target.id,
                outcome_id=self.outcome_id,
                kind=EdgeKind.PRODUCES
            )
            for producer in self.producers
            for target in gated
            if producer.id != target.id
        )


class GraphBuilder:
    """Builds edges and answers read-only outcome queries."""

    def build_edges(
        self,
        events: Sequence[EventRecord],
        outcome_index: Optional[OutcomeIndex] = None
    ) -> Tuple[DependencyEdge, ...]:
        """
        Edge list for ``events``; deterministic for a given input order.

        ``outcome_index`` defaults to the index built from ``events``.
        """
        if outcome_index is None:
            outcome_index = build_outcome_index(events)

        edges: List[DependencyEdge] = []
        for consumer in events:
            for outcome_id in consumer.required_outcomes:
                self._link(edges, outcome_index, consumer, outcome_id, EdgeKind.REQUIRED)

            for group in consumer.required_outcomes_any:
                for outcome_id in group:
                    self._link(edges, outcome_index, consumer, outcome_id, EdgeKind.REQUIRED_ANY)

            for outcome_id in consumer.forbidden_outcomes:
                self._link(edges, outcome_index, consumer, outcome_id, EdgeKind.FORBIDDEN)

        logger.info("Built %d edges", len(edges))
        return tuple(edges)

    @staticmethod
    def _link(
        edges: List[DependencyEdge],
        outcome_index: OutcomeIndex,
        consumer: EventRecord,
        outcome_id: str,
        kind: EdgeKind
    ):
        for producer_id in outcome_index.get(outcome_id, ()):
            if producer_id != consumer.id:
                edges.append(DependencyEdge(
                    from_event_id=producer_id,
                    to_event_id=consumer.id,
                    outcome_id=outcome_id,
                    kind=kind
                ))

    # -------------------------------------------------------------------------
    # Read-only queries
    # -------------------------------------------------------------------------

    def producers_of(
        self,
        outcome_id: str,
        events: Sequence[EventRecord]
    ) -> Tuple[EventRecord, ...]:
        return tuple(
            event for event in events
            if outcome_id in event.all_produced_outcomes()
        )

    def consumers_of(
        self,
        outcome_id: str,
        events: Sequence[EventRecord]
    ) -> Tuple[EventRecord, ...]:
        """Events requiring the outcome through the AND list or any OR group."""
        return tuple(
            event for event in events
            if outcome_id in event.required_outcomes
            or any(outcome_id in group for group in event.required_outcomes_any)
        )

    def blocked_by(
        self,
        outcome_id: str,
        events: Sequence[EventRecord]
    ) -> Tuple[EventRecord, ...]:
        return tuple(
            event for event in events
            if outcome_id in event.forbidden_outcomes
        )

    def outcome_view(
        self,
        outcome_id: str,
        events: Sequence[EventRecord]
    ) -> OutcomeView:
        return OutcomeView(
            outcome_id=outcome_id,
            producers=self.producers_of(outcome_id, events),
            consumers=self.consumers_of(outcome_id, events),
            blocked=self.blocked_by(outcome_id, events)
        )


def incoming_edges(event_id: str, edges: Sequence[DependencyEdge]) -> Tuple[DependencyEdge, ...]:
    """Edges whose consumer is ``event_id``."""
    return tuple(edge for edge in edges if edge.to_event_id == event_id)


def outgoing_edges(event_id: str, edges: Sequence[DependencyEdge]) -> Tuple[DependencyEdge, ...]:
    """Edges whose producer is ``event_id``."""
    return tuple(edge for edge in edges if edge.from_event_id == event_id)
