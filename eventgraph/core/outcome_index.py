"""
Outcome Index
=============

Producer map: outcome id -> ids of the events that produce it.

Built in event order, labels flattened in label order. No deduplication:
an event listing the same outcome under two labels is recorded twice.
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from ..contracts.records import EventRecord

OutcomeIndex = Mapping[str, Tuple[str, ...]]


def build_outcome_index(events: Iterable[EventRecord]) -> OutcomeIndex:
    """Read-only mapping from outcome id to producing event ids."""
    producers: Dict[str, List[str]] = {}
    for event in events:
        for outcome_id in event.all_produced_outcomes():
            producers.setdefault(outcome_id, []).append(event.id)

    return MappingProxyType({
        outcome_id: tuple(event_ids)
        for outcome_id, event_ids in producers.items()
    })
