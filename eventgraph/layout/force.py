"""
Force-Directed Layout
=====================

Physics simulation positioning events for the graph view.

SIMULATION (``iterations`` steps, temperature ``t = 1 - i / iterations``):
- Repulsion between every pair closer than ``3 * min_distance``:
  magnitude ``repulsion_strength * t / d**2`` (d floored at 1)
- Attraction along every edge: magnitude ``attraction_strength * d * t``
- velocity += forces; position += velocity; velocity *= damping
- positions clamped into ``[margin, dimension - margin]`` after each step;
  velocity is kept, so the wall is soft

Forces are computed from the positions at the start of a step, so the
pairwise loops are expressed as numpy array operations.

Cost is O(n^2) per step for repulsion and O(e) for attraction; keep
``iterations`` and the node count bounded for interactive use.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union
import numpy as np

from ..contracts.records import DependencyEdge, EventRecord

Position = Tuple[float, float]
Node = Union[EventRecord, str]


@dataclass(frozen=True)
class ForceConfig:
    """Simulation constants."""
    repulsion_strength: float = 5000.0
    attraction_strength: float = 0.01
    damping: float = 0.85
    min_distance: float = 100.0
    margin: float = 50.0


def _node_id(node: Node) -> str:
    return node if isinstance(node, str) else node.id


class ForceDirectedLayout:
    """
    Positions nodes inside a ``width`` x ``height`` canvas.

    Unseeded by default, so successive runs differ; pass ``seed`` for a
    reproducible layout.
    """

    def __init__(
        self,
        width: float = 1200.0,
        height: float = 800.0,
        config: Optional[ForceConfig] = None
    ):
        self._config = config or ForceConfig()
        margin = self._config.margin
        if width < 2 * margin or height < 2 * margin:
            raise ValueError(
                f"Canvas {width}x{height} is smaller than twice the margin ({margin})"
            )
        self._width = float(width)
        self._height = float(height)

    @property
    def config(self) -> ForceConfig:
        return self._config

    def layout(
        self,
        nodes: Sequence[Node],
        edges: Iterable[DependencyEdge],
        iterations: int = 100,
        seed: Optional[int] = None,
        initial: Optional[Mapping[str, Position]] = None
    ) -> Dict[str, Position]:
        """
        Map node id -> (x, y); empty for an empty node set.

        ``initial`` pins the starting position of the nodes it names (for
        example the positions of a previous run); the rest start at random.
        """
        if not nodes:
            return {}
        if iterations < 1:
            raise ValueError("iterations must be at least 1")

        ids = [_node_id(node) for node in nodes]
        index = {node_id: i for i, node_id in enumerate(ids)}

        rng = np.random.default_rng(seed)
        positions = rng.random((len(ids), 2)) * np.array([self._width, self._height])
        for node_id, (x, y) in (initial or {}).items():
            if node_id in index:
                positions[index[node_id]] = (x, y)
        velocities = np.zeros_like(positions)

        sources, targets = self._edge_indices(edges, index)

        cfg = self._config
        low = np.array([cfg.margin, cfg.margin])
        high = np.array([self._width - cfg.margin, self._height - cfg.margin])

        for iteration in range(iterations):
            temperature = 1.0 - iteration / iterations

            velocities += self._repulsion(positions, temperature)
            self._apply_attraction(positions, velocities, sources, targets, temperature)

            positions += velocities
            velocities *= cfg.damping
            np.clip(positions, low, high, out=positions)

        return {
            node_id: (float(positions[i, 0]), float(positions[i, 1]))
            for node_id, i in index.items()
        }

    @staticmethod
    def _edge_indices(
        edges: Iterable[DependencyEdge],
        index: Dict[str, int]
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Endpoint indices of edges whose both ends are laid out."""
        pairs = [
            (index[edge.from_event_id], index[edge.to_event_id])
            for edge in edges
            if edge.from_event_id in index and edge.to_event_id in index
        ]
        if not pairs:
            empty = np.zeros(0, dtype=int)
            return empty, empty
        array = np.array(pairs, dtype=int)
        return array[:, 0], array[:, 1]

    def _repulsion(self, positions: np.ndarray, temperature: float) -> np.ndarray:
        cfg = self._config
        # delta[i, j] = positions[j] - positions[i]
        delta = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
        distance = np.maximum(np.sqrt((delta ** 2).sum(axis=2)), 1.0)

        close = distance < cfg.min_distance * 3
        np.fill_diagonal(close, False)

        magnitude = np.where(close, cfg.repulsion_strength * temperature / distance ** 2, 0.0)
        # Each node is pushed away from every close neighbour.
        return -(delta / distance[:, :, np.newaxis] * magnitude[:, :, np.newaxis]).sum(axis=1)

    def _apply_attraction(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        sources: np.ndarray,
        targets: np.ndarray,
        temperature: float
    ):
        if sources.size == 0:
            return
        delta = positions[targets] - positions[sources]
        distance = np.maximum(np.sqrt((delta ** 2).sum(axis=1)), 1.0)
        magnitude = self._config.attraction_strength * distance * temperature
        force = delta / distance[:, np.newaxis] * magnitude[:, np.newaxis]

        np.add.at(velocities, sources, force)
        np.add.at(velocities, targets, -force)
