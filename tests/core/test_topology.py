"""
Dependency Topology Tests
=========================

These tests verify that the topology:
1. Keeps every event as a node, even without edges
2. Keeps parallel edges with their outcome and kind
3. Detects cycles without assuming a DAG
4. Does NOT expose any ranking or centrality metrics
"""

import networkx as nx
import pytest

from eventgraph.contracts.records import DependencyEdge, EdgeKind
from eventgraph.core.topology import DependencyTopology


def create_edge(source: str, target: str, outcome: str = "o",
                kind: EdgeKind = EdgeKind.REQUIRED) -> DependencyEdge:
    return DependencyEdge(
        from_event_id=source,
        to_event_id=target,
        outcome_id=outcome,
        kind=kind
    )


class TestDependencyTopology:

    def test_build_graph_correctness(self):
        """Graph should accurately reflect nodes and edges."""
        topology = DependencyTopology.build(
            ("A", "B", "C"),
            (create_edge("A", "B"), create_edge("B", "C"))
        )

        metrics = topology.compute_metrics()
        assert metrics.node_count == 3
        assert metrics.edge_count == 2
        assert metrics.is_acyclic is True
        assert metrics.component_count == 1
        assert metrics.isolated_count == 0

    def test_isolated_events_are_nodes(self):
        topology = DependencyTopology.build(("A", "B", "lonely"), (create_edge("A", "B"),))

        metrics = topology.compute_metrics()
        assert metrics.node_count == 3
        assert metrics.isolated_count == 1

    def test_parallel_edges_preserved(self):
        topology = DependencyTopology.build(("A", "B"), (
            create_edge("A", "B", "x", EdgeKind.REQUIRED),
            create_edge("A", "B", "x", EdgeKind.FORBIDDEN),
            create_edge("A", "B", "y", EdgeKind.REQUIRED_ANY),
        ))

        assert topology.compute_metrics().edge_count == 3
        assert sorted(topology.edges_between("A", "B")) == [
            ("x", "forbidden"), ("x", "required"), ("y", "required_any")
        ]
        assert topology.edges_between("B", "A") == ()

    def test_connected_components(self):
        """Disjoint subgraphs should be identified as separate components."""
        topology = DependencyTopology.build(
            ("A", "B", "X", "Y"),
            (create_edge("A", "B"), create_edge("X", "Y"))
        )

        components = topology.weakly_connected_components()
        assert len(components) == 2
        assert {"A", "B"} in components
        assert {"X", "Y"} in components

    def test_cycles_detected(self):
        topology = DependencyTopology.build(
            ("A", "B", "C"),
            (create_edge("A", "B"), create_edge("B", "A"), create_edge("B", "C"))
        )

        assert topology.has_cycles() is True
        assert topology.compute_metrics().is_acyclic is False
        (cycle,) = topology.find_cycles()
        assert sorted(cycle) == ["A", "B"]

    def test_upstream_and_downstream(self):
        topology = DependencyTopology.build(
            ("A", "B", "C", "D"),
            (create_edge("A", "B"), create_edge("B", "C"))
        )

        assert topology.upstream_of("C") == {"A", "B"}
        assert topology.downstream_of("A") == {"B", "C"}
        assert topology.downstream_of("D") == set()
        assert topology.upstream_of("missing") == set()

    def test_empty_graph(self):
        topology = DependencyTopology.build((), ())

        assert topology.has_cycles() is False
        assert topology.weakly_connected_components() == []
        metrics = topology.compute_metrics()
        assert metrics.node_count == 0
        assert metrics.is_acyclic is True

    def test_graph_view_is_read_only(self):
        topology = DependencyTopology.build(("A",), ())
        with pytest.raises(nx.NetworkXError):
            topology.graph.add_node("B")

        assert topology.compute_metrics().node_count == 1

    def test_no_ranking_methods_exposed(self):
        """Ranking is forbidden."""
        forbidden = ("centrality", "pagerank", "rank", "score", "importance")
        for name in dir(DependencyTopology):
            if name.startswith("_"):
                continue
            for term in forbidden:
                assert term not in name.lower()
