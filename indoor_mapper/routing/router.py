"""Route search over the building graph.

Provides:
- shortest_path: Dijkstra single-source shortest path between two nodes
- k_shortest_paths: up to k distinct alternative routes

Dijkstra is SciPy's C implementation (scipy.sparse.csgraph.shortest_path)
run on a CSR matrix built from the adjacency view.

Alternative routes use a simplified relative of Yen's algorithm: each round
removes one connection of an already accepted route at a time, re-runs
Dijkstra, and accepts the cheapest result whose node sequence is new. It
never removes combinations of connections, so it can miss true k-th
shortest routes in some topologies and may return fewer than k routes.
That limitation is accepted.
"""

import logging
from typing import Mapping, Optional

import numpy as np
from scipy.sparse.csgraph import shortest_path as csgraph_shortest_path

from indoor_mapper.constants import RoutingConfig
from indoor_mapper.errors import NotFound, SameEndpoints, UnknownNode
from indoor_mapper.model.node import Node
from indoor_mapper.model.route import Route
from indoor_mapper.routing.adjacency import AdjacencyView

logger = logging.getLogger(__name__)

# Predecessor value SciPy uses for "no predecessor"
_NO_PREDECESSOR = -9999


def _check_endpoints(adjacency: AdjacencyView, source_id: str, target_id: str) -> None:
    for node_id in (source_id, target_id):
        if node_id not in adjacency:
            raise UnknownNode(node_id)
    if source_id == target_id:
        raise SameEndpoints(source_id)


def _dijkstra(adjacency: AdjacencyView, source_id: str, target_id: str) -> tuple[list[str], float]:
    """Run Dijkstra from source and reconstruct the node sequence to target.

    Raises:
        NotFound: If target is unreachable.
    """
    csgraph, index = adjacency.to_csgraph()
    position = {node_id: i for i, node_id in enumerate(index)}
    start = position[source_id]
    goal = position[target_id]

    dist, pred = csgraph_shortest_path(
        csgraph=csgraph,
        method="D",
        directed=True,
        indices=start,
        return_predecessors=True,
    )

    if np.isinf(dist[goal]):
        raise NotFound(source_id=source_id, target_id=target_id)

    path_idx: list[int] = []
    current = goal
    while True:
        path_idx.append(current)
        if current == start:
            break
        current = int(pred[current])
        if current == _NO_PREDECESSOR:
            raise NotFound(source_id=source_id, target_id=target_id)

    path_idx.reverse()
    return [index[i] for i in path_idx], float(dist[goal])


def _make_route(node_ids: list[str], distance: float, nodes: Mapping[str, Node]) -> Route:
    resolved = []
    for node_id in node_ids:
        node = nodes.get(node_id)
        if node is None:
            raise UnknownNode(node_id)
        resolved.append(node)
    return Route(node_ids=tuple(node_ids), nodes=tuple(resolved), distance=distance)


def shortest_path(
    adjacency: AdjacencyView,
    nodes: Mapping[str, Node],
    source_id: str,
    target_id: str,
) -> Route:
    """Find the shortest route between two nodes.

    Args:
        adjacency: Adjacency view of the graph (not modified)
        nodes: Node lookup used to resolve the route's nodes
        source_id: Start node ID
        target_id: Destination node ID

    Returns:
        Shortest Route from source to target.

    Raises:
        UnknownNode: If either ID is not in the graph.
        SameEndpoints: If source_id == target_id.
        NotFound: If no route exists.
    """
    _check_endpoints(adjacency=adjacency, source_id=source_id, target_id=target_id)
    node_ids, distance = _dijkstra(adjacency=adjacency, source_id=source_id, target_id=target_id)
    return _make_route(node_ids=node_ids, distance=distance, nodes=nodes)


def k_shortest_paths(
    adjacency: AdjacencyView,
    nodes: Mapping[str, Node],
    source_id: str,
    target_id: str,
    k: int = RoutingConfig.DEFAULT_K,
) -> list[Route]:
    """Find up to k distinct routes, cheapest first.

    The first route is always the true shortest route. Further routes come
    from removing single connections of accepted routes (see module
    docstring). Two routes are distinct iff their node ID sequences differ.

    Args:
        adjacency: Adjacency view of the graph (not modified)
        nodes: Node lookup used to resolve route nodes
        source_id: Start node ID
        target_id: Destination node ID
        k: Maximum number of routes

    Returns:
        Routes sorted by non-decreasing distance, empty if target is unreachable.

    Raises:
        ValueError: If k < 1.
        UnknownNode: If either ID is not in the graph.
        SameEndpoints: If source_id == target_id.
    """
    if k < 1:
        raise ValueError(f"k must be at least 1, got {k}")
    _check_endpoints(adjacency=adjacency, source_id=source_id, target_id=target_id)

    try:
        first = shortest_path(adjacency=adjacency, nodes=nodes, source_id=source_id, target_id=target_id)
    except NotFound:
        return []

    routes = [first]
    while len(routes) < k:
        best: Optional[Route] = None

        for accepted in routes:
            for a, b in accepted.node_pairs:
                filtered = adjacency.without_connection(a=a, b=b)
                try:
                    candidate = shortest_path(adjacency=filtered, nodes=nodes, source_id=source_id, target_id=target_id)
                except NotFound:
                    continue
                if best is not None and candidate.distance >= best.distance:
                    continue
                if any(candidate.same_nodes(r) for r in routes):
                    continue
                best = candidate

        if best is None:
            logger.info(f"Found {len(routes)} of {k} requested routes from {source_id} to {target_id}")
            break
        routes.append(best)

    # Later rounds can in rare topologies find a cheaper route than an earlier round
    routes.sort(key=lambda r: r.distance)
    return routes
