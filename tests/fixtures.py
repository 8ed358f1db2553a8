"""
Content Fixtures

Explicit record files and in-memory events for graph tests.

RULES:
======
1. All fixtures are EXPLICIT, not random
2. Record texts mirror the layout of real content files
3. Builders return frozen records; tests never mutate them
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Tuple

from eventgraph.contracts.records import EventCategory, EventRecord, EventTier


# =============================================================================
# RECORD TEXTS
# =============================================================================

CRISIS_EVENT = '''\
[event]
id = "revolt_of_maniakes"
title = "The Revolt of Maniakes"
tier = "major"
historicity_score = 85
location = "Sicily"

[event.conditions]
min_year = 1042
max_year = 1043
required_outcomes = ["maniakes_recalled"]
forbidden_outcomes = ["maniakes_dead"]
required_outcomes_any = [["emperor_weak"], ["army_unpaid", "army_mutinous"]]

[[event.options]]
label = "Negotiate"

[[event.options.results]]
label = "success"
outcomes = { set = ["maniakes_pardoned"], clear = ["maniakes_recalled"] }

[[event.options.results]]
label = "failure"
outcomes = { set = ["maniakes_takes_throne", "civil_war"], clear = [] }
'''

MULTILINE_ANY_EVENT = '''\
[event]
id = "schism_council"
title = "Council on the Schism"

[event.conditions]
required_outcomes_any = [
    ["legate_insulted"],
    ["patriarch_defiant", "pope_defiant"]
]
'''

SINGLE_LINE_ANY_EVENT = '''\
[event]
id = "schism_council"
title = "Council on the Schism"

[event.conditions]
required_outcomes_any = [["legate_insulted"], ["patriarch_defiant", "pope_defiant"]]
'''

NARRATIVE_EVENT = '''\
[event]
id = "coronation_1042"
title = "A New Coronation"
year = 1042

[[event.options]]
label = "Attend"

[event.options.effects]
outcomes = { set = ["zoe_restored"] }
'''

OUTCOME_RECORD = '''\
[outcome]
id = "maniakes_takes_throne"
name = "Maniakes Takes the Throne"
historicity_score = 10
historical_impact_score = 95
player_description = """The general marches on the capital."""

[metadata]
id = "ignored"
'''


# =============================================================================
# BUILDERS
# =============================================================================

def make_event(
    event_id: str,
    title: Optional[str] = None,
    category: EventCategory = EventCategory.SITUATION,
    tier: EventTier = EventTier.MINOR,
    min_year: Optional[int] = None,
    max_year: Optional[int] = None,
    requires: Sequence[str] = (),
    requires_any: Sequence[Sequence[str]] = (),
    forbids: Sequence[str] = (),
    produces: Optional[Dict[str, Sequence[str]]] = None,
    historicity_score: int = 100,
) -> EventRecord:
    """Factory for in-memory events."""
    return EventRecord(
        id=event_id,
        title=title or event_id.replace("_", " ").title(),
        category=category,
        tier=tier,
        min_year=min_year,
        max_year=max_year,
        historicity_score=historicity_score,
        required_outcomes=tuple(requires),
        required_outcomes_any=tuple(tuple(group) for group in requires_any),
        forbidden_outcomes=tuple(forbids),
        produced_outcomes=tuple(
            (label, tuple(ids)) for label, ids in (produces or {}).items()
        ),
    )


def write_content(root: Path, files: Dict[str, str]) -> Path:
    """Write ``relative path -> text`` under ``root``; returns ``root``."""
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


def sample_content(root: Path) -> Path:
    """A small content pack with one file of every kind."""
    return write_content(root, {
        "events/crisis/revolt_of_maniakes.toml": CRISIS_EVENT,
        "events/situation/schism_council.toml": MULTILINE_ANY_EVENT,
        "events/narrative/coronation_1042.toml": NARRATIVE_EVENT,
        "outcomes/military/maniakes_takes_throne.toml": OUTCOME_RECORD,
    })


def edge_tuples(edges: Iterable) -> Tuple[Tuple[str, str, str, str], ...]:
    return tuple(
        (e.from_event_id, e.to_event_id, e.outcome_id, e.kind.value) for e in edges
    )
