"""
Graph Filter

Selects the events handed to a layout. Pure predicate over EventRecord;
filtering never changes the snapshot, only the view of it.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, Tuple

from ..contracts.records import (
    DEFAULT_DISPLAY_YEAR, EventCategory, EventRecord, EventTier
)

# Assumed end year for an event with no year bounds.
DEFAULT_END_YEAR = 1100


@dataclass(frozen=True)
class GraphFilter:
    """
    Year window, classification and text filters.

    ``required_outcomes`` is a timeline preset: an event passes when it
    requires (AND or OR) or produces at least one of those outcomes.
    """
    year_range: Tuple[int, int] = (DEFAULT_DISPLAY_YEAR, DEFAULT_END_YEAR)
    categories: FrozenSet[EventCategory] = field(default_factory=lambda: frozenset(EventCategory))
    tiers: FrozenSet[EventTier] = field(default_factory=lambda: frozenset(EventTier))
    historicity_range: Tuple[int, int] = (0, 100)
    required_outcomes: FrozenSet[str] = field(default_factory=frozenset)
    search_query: str = ""

    def __post_init__(self):
        if self.year_range[0] > self.year_range[1]:
            raise ValueError("year_range start must be before or equal to end")
        if self.historicity_range[0] > self.historicity_range[1]:
            raise ValueError("historicity_range start must be before or equal to end")

    @property
    def min_year(self) -> int:
        return self.year_range[0]

    def matches(self, event: EventRecord) -> bool:
        # Overlap of the event's window with the filter window
        start = event.min_year if event.min_year is not None else (
            event.max_year if event.max_year is not None else DEFAULT_DISPLAY_YEAR
        )
        end = event.max_year if event.max_year is not None else (
            event.min_year if event.min_year is not None else DEFAULT_END_YEAR
        )
        if end < self.year_range[0] or start > self.year_range[1]:
            return False

        if event.category not in self.categories:
            return False
        if event.tier not in self.tiers:
            return False

        low, high = self.historicity_range
        if not low <= event.historicity_score <= high:
            return False

        if self.required_outcomes:
            requires = set(event.all_required_outcomes())
            produces = set(event.all_produced_outcomes())
            if not (requires | produces) & self.required_outcomes:
                return False

        query = self.search_query.strip().lower()
        if query and query not in event.id.lower() and query not in event.title.lower():
            return False

        return True

    def apply(self, events: Iterable[EventRecord]) -> Tuple[EventRecord, ...]:
        """Matching events, input order preserved."""
        return tuple(event for event in events if self.matches(event))

    def with_preset(self, *outcome_ids: str) -> GraphFilter:
        return replace(self, required_outcomes=frozenset(outcome_ids))


ALL_EVENTS = GraphFilter()


def timeline_preset(outcome_id: str, base: GraphFilter = ALL_EVENTS) -> GraphFilter:
    """Filter showing the events gated on, or producing, one outcome."""
    return base.with_preset(outcome_id)
