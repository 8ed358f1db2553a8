"""
Lane Layout
===========

Deterministic timeline layout: one horizontal lane per event category,
one column per year.

PLACEMENT:
- lanes in fixed order CRISIS, SITUATION, OPPORTUNITY, NARRATIVE, RETIREMENT
- inside a lane, events sorted (stably) by start year
- events sharing a start year in a lane are stacked downwards
- x = column of (start_year - min_year), node centred in the column

No randomness: the same node list always yields the same placements.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..contracts.records import DependencyEdge, EventCategory, EventRecord

LANE_ORDER: Tuple[EventCategory, ...] = (
    EventCategory.CRISIS,
    EventCategory.SITUATION,
    EventCategory.OPPORTUNITY,
    EventCategory.NARRATIVE,
    EventCategory.RETIREMENT,
)


@dataclass(frozen=True)
class LaneConfig:
    """Geometry of the timeline, in canvas units before scaling."""
    node_width: float = 180.0
    node_height: float = 60.0
    year_width: float = 300.0
    lane_height: float = 200.0
    margin_top: float = 70.0
    margin_left: float = 120.0
    spacing_y: float = 10.0
    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def __post_init__(self):
        if self.scale <= 0:
            raise ValueError("scale must be positive")


@dataclass(frozen=True)
class NodePlacement:
    """Top-left corner and size of one event box."""
    event_id: str
    category: EventCategory
    lane_index: int
    start_year: int
    stack_index: int
    x: float
    y: float
    width: float
    height: float

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height


class LaneLayout:
    """Places events on the year/lane grid."""

    def __init__(self, config: Optional[LaneConfig] = None):
        self._config = config or LaneConfig()

    @property
    def config(self) -> LaneConfig:
        return self._config

    def year_column_x(self, year: int, min_year: int) -> float:
        """Left edge of the column for ``year``."""
        cfg = self._config
        return cfg.margin_left + (year - min_year) * cfg.year_width * cfg.scale + cfg.offset_x

    def lane_y(self, lane_index: int) -> float:
        """Top edge of a lane."""
        cfg = self._config
        return cfg.margin_top + lane_index * cfg.lane_height * cfg.scale + cfg.offset_y

    def layout(self, nodes: Sequence[EventRecord], min_year: int) -> Tuple[NodePlacement, ...]:
        cfg = self._config
        width = cfg.node_width * cfg.scale
        height = cfg.node_height * cfg.scale

        by_category: Dict[EventCategory, List[EventRecord]] = {}
        for event in nodes:
            by_category.setdefault(event.category, []).append(event)

        placements: List[NodePlacement] = []
        for lane_index, category in enumerate(LANE_ORDER):
            lane_events = sorted(by_category.get(category, ()), key=lambda e: e.display_year)
            stack_by_year: Dict[int, int] = {}

            for event in lane_events:
                start_year = event.display_year
                stack_index = stack_by_year.get(start_year, 0)
                stack_by_year[start_year] = stack_index + 1

                column_x = self.year_column_x(start_year, min_year)
                placements.append(NodePlacement(
                    event_id=event.id,
                    category=category,
                    lane_index=lane_index,
                    start_year=start_year,
                    stack_index=stack_index,
                    x=column_x + (cfg.year_width * cfg.scale - width) / 2,
                    y=self.lane_y(lane_index) + stack_index * (height + cfg.spacing_y),
                    width=width,
                    height=height
                ))

        return tuple(placements)

    def positions(self, nodes: Sequence[EventRecord], min_year: int) -> Dict[str, Tuple[float, float]]:
        """Map event id -> top-left (x, y)."""
        return {p.event_id: (p.x, p.y) for p in self.layout(nodes, min_year)}

    @staticmethod
    def hit_test(
        placements: Iterable[NodePlacement],
        x: float,
        y: float
    ) -> Optional[str]:
        """Id of the first placement containing the point, if any."""
        for placement in placements:
            if placement.contains(x, y):
                return placement.event_id
        return None


def visible_edges(
    edges: Iterable[DependencyEdge],
    node_ids: Iterable[str],
    selected_event_id: Optional[str] = None
) -> Tuple[DependencyEdge, ...]:
    """
    Edges with both endpoints visible; narrowed to those touching the
    selected event when one is given.
    """
    visible: Set[str] = set(node_ids)
    result = tuple(
        edge for edge in edges
        if edge.from_event_id in visible and edge.to_event_id in visible
    )
    if selected_event_id is None:
        return result
    return tuple(
        edge for edge in result
        if selected_event_id in (edge.from_event_id, edge.to_event_id)
    )
