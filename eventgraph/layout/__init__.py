"""
Layout Layer

RESPONSIBILITY: Node positions for the external renderer
ALLOWED INPUTS: Filtered events and their edges
OUTPUTS: Position mappings and NodePlacement tuples

Two interchangeable strategies:
- ForceDirectedLayout: physics simulation (random start, optional seed)
- LaneLayout: deterministic year/category grid
"""

from .force import ForceConfig, ForceDirectedLayout
from .lanes import LANE_ORDER, LaneConfig, LaneLayout, NodePlacement, visible_edges

__all__ = [
    "ForceConfig",
    "ForceDirectedLayout",
    "LANE_ORDER",
    "LaneConfig",
    "LaneLayout",
    "NodePlacement",
    "visible_edges",
]
