"""
Core Graph Engine

RESPONSIBILITY: Outcome index, dependency edges, filters, topology
ALLOWED INPUTS: Parsed EventRecord / OutcomeRecord collections
OUTPUTS: DependencyEdge tuples, OutcomeView, TopologyMetrics

WHAT THIS LAYER MUST NOT DO:
============================
- Read or write files
- Keep state between calls (every function is pure)
- Rank events by importance
"""

from .filter import ALL_EVENTS, GraphFilter, timeline_preset
from .graph_builder import GraphBuilder, OutcomeView, incoming_edges, outgoing_edges
from .outcome_index import OutcomeIndex, build_outcome_index
from .topology import DependencyTopology, TopologyMetrics

__all__ = [
    "ALL_EVENTS",
    "DependencyTopology",
    "GraphBuilder",
    "GraphFilter",
    "OutcomeIndex",
    "OutcomeView",
    "TopologyMetrics",
    "build_outcome_index",
    "incoming_edges",
    "outgoing_edges",
    "timeline_preset",
]
