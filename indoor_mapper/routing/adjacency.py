"""Adjacency view of a building graph, used by the routing engine.

The view maps every node ID to its list of neighbors. Each connection
contributes two entries (one per direction) with the same weight.

Views are treated as read-only. Edge removal for alternative-route search
builds a new, filtered view that shares every untouched neighbor list
with its parent, so the caller's graph is never mutated.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping

import numpy as np
from scipy.sparse import csr_matrix

from indoor_mapper.model.connection import Connection
from indoor_mapper.model.node import Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Neighbor:
    """One directed adjacency entry.

    Attributes:
        node_id: ID of the neighboring node
        weight: Connection distance in meters
        is_vertical: True if reached over a stairs/lift link
    """

    node_id: str
    weight: float
    is_vertical: bool = False


class AdjacencyView:
    """Mapping of node ID -> neighbors, with helpers for graph search.

    Example:
        view = build_adjacency(nodes=building.nodes.values(), connections=building.connections.values())
        for neighbor in view.neighbors("N2"):
            print(neighbor.node_id, neighbor.weight)
    """

    def __init__(self, entries: dict[str, tuple[Neighbor, ...]]) -> None:
        self._entries = entries

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def node_ids(self) -> list[str]:
        return list(self._entries)

    def neighbors(self, node_id: str) -> tuple[Neighbor, ...]:
        """Neighbors of node_id (empty for unknown or isolated nodes)."""
        return self._entries.get(node_id, ())

    def entry_count(self) -> int:
        """Total number of directed adjacency entries."""
        return sum(len(n) for n in self._entries.values())

    def same_entries(self, other: "AdjacencyView") -> bool:
        """True if both views list the same neighbors and weights per node, in any order."""
        if set(self._entries) != set(other._entries):
            return False

        def key(n: Neighbor) -> tuple[str, float, bool]:
            return (n.node_id, n.weight, n.is_vertical)

        return all(
            sorted(neighbors, key=key) == sorted(other._entries[node_id], key=key)
            for node_id, neighbors in self._entries.items()
        )

    def without_connection(self, a: str, b: str) -> "AdjacencyView":
        """Return a new view with the a<->b connection removed in both directions.

        Only the two affected neighbor lists are rebuilt; all others are shared.
        """
        entries = dict(self._entries)
        if a in entries:
            entries[a] = tuple(n for n in entries[a] if n.node_id != b)
        if b in entries:
            entries[b] = tuple(n for n in entries[b] if n.node_id != a)
        return AdjacencyView(entries)

    def to_csgraph(self) -> tuple[csr_matrix, list[str]]:
        """Convert to a SciPy CSR matrix for csgraph algorithms.

        Explicit zero-weight entries are kept, so csgraph treats them as
        edges. Parallel entries for the same pair keep the lightest weight.

        Returns:
            Tuple of (csgraph, index) where index[i] is the node ID of row i.
        """
        index = list(self._entries)
        position = {node_id: i for i, node_id in enumerate(index)}

        weights: dict[tuple[int, int], float] = {}
        for node_id, neighbors in self._entries.items():
            row = position[node_id]
            for neighbor in neighbors:
                col = position.get(neighbor.node_id)
                if col is None:
                    continue
                key = (row, col)
                if key not in weights or neighbor.weight < weights[key]:
                    weights[key] = neighbor.weight

        n = len(index)
        rows = np.array([r for r, _ in weights], dtype=np.int64)
        cols = np.array([c for _, c in weights], dtype=np.int64)
        csgraph = csr_matrix(
            (np.fromiter(weights.values(), dtype=np.float64, count=len(weights)), (rows, cols)),
            shape=(n, n),
            dtype=np.float64,
        )
        return csgraph, index

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Serialize to the persisted "graph" shape: {id: [{node, weight, vertical}]}."""
        return {
            node_id: [{"node": n.node_id, "weight": n.weight, "vertical": n.is_vertical} for n in neighbors]
            for node_id, neighbors in self._entries.items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Iterable[Mapping[str, Any]]]) -> "AdjacencyView":
        """Create a view from the persisted "graph" shape."""
        entries: dict[str, tuple[Neighbor, ...]] = {}
        for node_id, raw_neighbors in data.items():
            entries[node_id] = tuple(
                Neighbor(
                    node_id=str(raw["node"]),
                    weight=float(raw["weight"]),
                    is_vertical=bool(raw.get("vertical", False)),
                )
                for raw in raw_neighbors
            )
        return cls(entries)

    def __repr__(self) -> str:
        return f"AdjacencyView({len(self._entries)} nodes, {self.entry_count()} entries)"


def build_adjacency(nodes: Iterable[Node], connections: Iterable[Connection]) -> AdjacencyView:
    """Build the adjacency view of a graph.

    Every node gets an entry (possibly empty). Every connection adds one
    entry at each endpoint with identical weight. Connections referencing
    unknown nodes are skipped.

    Args:
        nodes: All nodes of the map
        connections: All connections of the map

    Returns:
        AdjacencyView over the given nodes.
    """
    lists: dict[str, list[Neighbor]] = {node.id: [] for node in nodes}

    for conn in connections:
        if conn.from_id not in lists or conn.to_id not in lists:
            logger.warning(f"Skipping connection {conn.id}: endpoint missing from node set")
            continue
        lists[conn.from_id].append(Neighbor(node_id=conn.to_id, weight=conn.distance, is_vertical=conn.is_vertical))
        lists[conn.to_id].append(Neighbor(node_id=conn.from_id, weight=conn.distance, is_vertical=conn.is_vertical))

    return AdjacencyView({node_id: tuple(neighbors) for node_id, neighbors in lists.items()})
