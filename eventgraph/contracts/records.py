"""
Record Contracts

Immutable value types for parsed content records and the edges derived
from them.

INVARIANTS:
- Records are snapshots of one parse pass; a reload creates new ones
- DependencyEdge never connects an event to itself
- Edge tuples are neither deduplicated nor guaranteed acyclic
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


# Start year used for display when an event has no year bounds at all.
DEFAULT_DISPLAY_YEAR = 1025


# =============================================================================
# ENUMS
# =============================================================================

class EventCategory(Enum):
    """Storage grouping of an event; also the lane it is drawn in."""
    CRISIS = "crisis"
    SITUATION = "situation"
    OPPORTUNITY = "opportunity"
    NARRATIVE = "narrative"
    RETIREMENT = "retirement"


class EventTier(Enum):
    """Narrative weight of an event."""
    MINOR = "minor"
    MAJOR = "major"
    GREAT = "great"

    @classmethod
    def from_string(cls, value: str) -> Optional[EventTier]:
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class EdgeKind(Enum):
    """
    How a consumer event relates to the producer of an outcome.

    PRODUCES is never materialized by the edge builder; it classifies
    edges derived on demand for an outcome-centric view.
    """
    REQUIRED = "required"          # AND gate
    REQUIRED_ANY = "required_any"  # one disjunct of an OR group
    FORBIDDEN = "forbidden"        # consumer is blocked by the outcome
    PRODUCES = "produces"


# =============================================================================
# RECORDS
# =============================================================================

@dataclass(frozen=True)
class EventRecord:
    """
    A discrete occurrence with a validity window, a classification and
    outcome gating/production rules.

    ``produced_outcomes`` keeps label order: each entry is
    ``(result_label, outcome_ids)``.
    """
    id: str
    title: str
    category: EventCategory = EventCategory.SITUATION
    tier: EventTier = EventTier.MINOR
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    historicity_score: int = 100
    location: Optional[str] = None
    required_outcomes: Tuple[str, ...] = ()
    required_outcomes_any: Tuple[Tuple[str, ...], ...] = ()
    forbidden_outcomes: Tuple[str, ...] = ()
    produced_outcomes: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()
    source_path: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if not self.id:
            raise ValueError("EventRecord id must be a non-empty string")

    @property
    def year_range(self) -> Optional[Tuple[int, int]]:
        """Inclusive (start, end) years, or None when both bounds are unknown."""
        if self.min_year is None and self.max_year is None:
            return None
        start = self.min_year if self.min_year is not None else self.max_year
        end = self.max_year if self.max_year is not None else self.min_year
        return (start, end)

    @property
    def display_year(self) -> int:
        if self.min_year is not None:
            return self.min_year
        if self.max_year is not None:
            return self.max_year
        return DEFAULT_DISPLAY_YEAR

    def produced_by_label(self) -> Dict[str, Tuple[str, ...]]:
        """Copy of the label -> outcomes mapping."""
        return dict(self.produced_outcomes)

    def all_produced_outcomes(self) -> Tuple[str, ...]:
        """Every produced outcome, labels flattened in order (duplicates kept)."""
        return tuple(
            outcome_id
            for _, outcome_ids in self.produced_outcomes
            for outcome_id in outcome_ids
        )

    def all_required_outcomes(self) -> Tuple[str, ...]:
        """AND list followed by the flattened OR groups."""
        flattened = tuple(
            outcome_id
            for group in self.required_outcomes_any
            for outcome_id in group
        )
        return self.required_outcomes + flattened


@dataclass(frozen=True)
class OutcomeRecord:
    """A named world-state flag that events produce, require or forbid."""
    id: str
    name: str
    historicity_score: int = 50
    historical_impact_score: int = 50
    category: str = "unknown"
    description: Optional[str] = None
    source_path: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if not self.id:
            raise ValueError("OutcomeRecord id must be a non-empty string")


@dataclass(frozen=True)
class DependencyEdge:
    """Directed relation producer -> consumer, mediated by one outcome."""
    from_event_id: str
    to_event_id: str
    outcome_id: str
    kind: EdgeKind

    def __post_init__(self):
        if self.from_event_id == self.to_event_id:
            raise ValueError(
                f"Self-edge on {self.from_event_id!r} via {self.outcome_id!r}"
            )

    def signature(self) -> str:
        """Stable text form used for fingerprints."""
        return f"{self.from_event_id}|{self.to_event_id}|{self.outcome_id}|{self.kind.value}"
