"""
Dependency Topology
===================

Structural analysis of the derived dependency graph.

The edge list may contain cycles and parallel edges; nothing here assumes
a DAG. A ``networkx.MultiDiGraph`` keeps every parallel edge together
with its outcome and kind.

ALLOWED:
- Cycle detection
- Weakly connected components (clusters of related events)
- Upstream / downstream closure (what gates an event, what it gates)
- Structural metrics (counts, density)

FORBIDDEN:
- Centrality measures - implies ranking of events
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Set, Tuple
import networkx as nx

from ..contracts.records import DependencyEdge


@dataclass(frozen=True)
class TopologyMetrics:
    """Immutable structural metrics for the dependency graph."""
    node_count: int
    edge_count: int
    density: float
    is_acyclic: bool
    component_count: int
    isolated_count: int


class DependencyTopology:
    """
    Wraps NetworkX for read-only structural queries.

    Build once per snapshot; queries never modify the graph.
    """

    def __init__(self):
        self._graph = nx.MultiDiGraph()

    @classmethod
    def build(
        cls,
        event_ids: Iterable[str],
        edges: Iterable[DependencyEdge]
    ) -> DependencyTopology:
        """Graph with every event as a node, even without edges."""
        topology = cls()
        for event_id in event_ids:
            topology._graph.add_node(event_id)

        for edge in edges:
            topology._graph.add_edge(
                edge.from_event_id,
                edge.to_event_id,
                outcome_id=edge.outcome_id,
                kind=edge.kind.value
            )
        return topology

    @property
    def graph(self) -> nx.MultiDiGraph:
        """Read-only view of the underlying graph."""
        return self._graph.copy(as_view=True)

    def has_cycles(self) -> bool:
        if not self._graph:
            return False
        return not nx.is_directed_acyclic_graph(self._graph)

    def find_cycles(self) -> List[List[str]]:
        """Elementary cycles, each as a list of event ids."""
        return [list(cycle) for cycle in nx.simple_cycles(nx.DiGraph(self._graph))]

    def weakly_connected_components(self) -> List[Set[str]]:
        """Disjoint clusters; returned unordered (no ranking)."""
        if not self._graph:
            return []
        return [set(c) for c in nx.weakly_connected_components(self._graph)]

    def upstream_of(self, event_id: str) -> Set[str]:
        """Every event that transitively gates ``event_id``."""
        if event_id not in self._graph:
            return set()
        return nx.ancestors(self._graph, event_id)

    def downstream_of(self, event_id: str) -> Set[str]:
        """Every event transitively gated by ``event_id``."""
        if event_id not in self._graph:
            return set()
        return nx.descendants(self._graph, event_id)

    def edges_between(self, from_event_id: str, to_event_id: str) -> Tuple[Tuple[str, str], ...]:
        """(outcome_id, kind) of every parallel edge between two events."""
        if not self._graph.has_edge(from_event_id, to_event_id):
            return ()
        data = self._graph.get_edge_data(from_event_id, to_event_id)
        return tuple((attrs["outcome_id"], attrs["kind"]) for attrs in data.values())

    def compute_metrics(self) -> TopologyMetrics:
        if not self._graph:
            return TopologyMetrics(0, 0, 0.0, True, 0, 0)

        return TopologyMetrics(
            node_count=self._graph.number_of_nodes(),
            edge_count=self._graph.number_of_edges(),
            density=nx.density(self._graph),
            is_acyclic=nx.is_directed_acyclic_graph(self._graph),
            component_count=nx.number_weakly_connected_components(self._graph),
            isolated_count=nx.number_of_isolates(self._graph)
        )
