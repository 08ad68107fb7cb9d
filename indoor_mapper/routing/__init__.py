"""Routing engine over the building graph.

- AdjacencyView / build_adjacency: neighbor lists and filtered views
- shortest_path: Dijkstra between two nodes
- k_shortest_paths: bounded enumeration of distinct alternative routes
"""

from indoor_mapper.routing.adjacency import AdjacencyView, Neighbor, build_adjacency
from indoor_mapper.routing.router import k_shortest_paths, shortest_path

__all__ = [
    "AdjacencyView",
    "Neighbor",
    "build_adjacency",
    "shortest_path",
    "k_shortest_paths",
]
