"""BuildingMap - Central manager for one building revision.

Owns all nodes (points of interest) and connections of a building.
Provides operations for:
- Inserting/removing nodes and connections with graph invariants enforced
- Floor-filtered views for rendering collaborators
- Node search by name and aliases
- Route queries (shortest and alternative routes)
- Statistics and serialization

All mutations are all-or-nothing: a rejected insert leaves the map unchanged.
The map is never persisted by itself; storage goes through
indoor_mapper.storage.
"""

import logging
from typing import Any, Optional

from indoor_mapper.constants import FloorConfig, RoutingConfig
from indoor_mapper.core.projector import GeoOrigin
from indoor_mapper.errors import (
    DuplicateConnection,
    DuplicateId,
    SelfLoop,
    UnknownConnection,
    UnknownEndpoint,
    UnknownNode,
)
from indoor_mapper.model.connection import Connection
from indoor_mapper.model.node import Node
from indoor_mapper.model.route import Route
from indoor_mapper.routing.adjacency import AdjacencyView, build_adjacency
from indoor_mapper.routing.router import k_shortest_paths, shortest_path

logger = logging.getLogger(__name__)


class BuildingMap:
    """Graph of points of interest and connections for one building.

    Example:
        building = BuildingMap(name="Engineering Block")
        building.insert_node(node=lobby)
        building.insert_node(node=stairs)
        building.insert_connection(connection=corridor)
        routes = building.find_routes(source_id=lobby.id, target_id=stairs.id)
    """

    def __init__(
        self,
        name: str = "Untitled",
        origin: Optional[GeoOrigin] = None,
        floor: int = FloorConfig.DEFAULT_FLOOR,
    ) -> None:
        """Initialize empty building map."""
        self.name = name
        self.origin = origin
        self.floor = floor
        self.nodes: dict[str, Node] = {}
        self.connections: dict[str, Connection] = {}
        self.metadata: dict[str, Any] = {}

        # Adjacency loaded from persisted data; dropped on the first mutation
        self._precomputed: Optional[AdjacencyView] = None

    # =========================================================================
    # Node Operations
    # =========================================================================

    def insert_node(self, node: Node) -> None:
        """Add a node.

        Raises:
            DuplicateId: If a node with the same ID exists.
        """
        if node.id in self.nodes:
            raise DuplicateId(node.id)
        self.nodes[node.id] = node
        self._precomputed = None
        logger.debug(f"Node added: {node}")

    def remove_node(self, node_id: str) -> list[Connection]:
        """Remove a node and every connection referencing it.

        Returns:
            The connections removed along with the node.

        Raises:
            UnknownNode: If the node does not exist.
        """
        if node_id not in self.nodes:
            raise UnknownNode(node_id)

        removed = [conn for conn in self.connections.values() if conn.touches(node_id)]
        for conn in removed:
            del self.connections[conn.id]
        node = self.nodes.pop(node_id)
        self._precomputed = None

        logger.info(f"Deleted node '{node.name}' and {len(removed)} connection(s)")
        return removed

    def get_node(self, node_id: str) -> Node:
        """Return the node with node_id.

        Raises:
            UnknownNode: If the node does not exist.
        """
        node = self.nodes.get(node_id)
        if node is None:
            raise UnknownNode(node_id)
        return node

    def nodes_on_floor(self, floor: int) -> list[Node]:
        return [node for node in self.nodes.values() if node.floor == floor]

    def floors(self) -> list[int]:
        """Sorted distinct floors that have at least one node."""
        return sorted({node.floor for node in self.nodes.values()})

    def search_nodes(self, query: str, limit: int = RoutingConfig.MAX_SEARCH_RESULTS) -> list[Node]:
        """Find nodes whose name or any alias contains query (case-insensitive).

        Args:
            query: Search text, blank returns no results
            limit: Maximum number of results

        Returns:
            Matching nodes in insertion order.
        """
        if not query.strip():
            return []
        return [node for node in self.nodes.values() if node.matches(query)][:limit]

    def find_node_by_name(self, name: str) -> Optional[Node]:
        """Resolve a name, alias, or ID to a single node.

        Exact ID match wins, then exact (case-insensitive) name, then alias,
        then the first substring match.
        """
        if name in self.nodes:
            return self.nodes[name]
        q = name.strip().lower()
        for node in self.nodes.values():
            if node.name.lower() == q:
                return node
        for node in self.nodes.values():
            if any(alias.lower() == q for alias in node.aliases):
                return node
        matches = self.search_nodes(query=name, limit=1)
        return matches[0] if matches else None

    # =========================================================================
    # Connection Operations
    # =========================================================================

    def find_connection(self, a: str, b: str) -> Optional[Connection]:
        """Return the connection between a and b (either direction), if any."""
        pair = frozenset((a, b))
        for conn in self.connections.values():
            if conn.endpoints == pair:
                return conn
        return None

    def are_connected(self, a: str, b: str) -> bool:
        return self.find_connection(a=a, b=b) is not None

    def insert_connection(self, connection: Connection) -> None:
        """Add a connection.

        Raises:
            DuplicateId: If a connection with the same ID exists.
            UnknownEndpoint: If either endpoint is not a node of this map.
            SelfLoop: If both endpoints are the same node.
            DuplicateConnection: If the endpoints are already connected.
        """
        if connection.id in self.connections:
            raise DuplicateId(connection.id)
        for node_id in (connection.from_id, connection.to_id):
            if node_id not in self.nodes:
                raise UnknownEndpoint(node_id)
        if connection.from_id == connection.to_id:
            raise SelfLoop(connection.from_id)
        existing = self.find_connection(a=connection.from_id, b=connection.to_id)
        if existing is not None:
            raise DuplicateConnection(from_id=connection.from_id, to_id=connection.to_id, existing_id=existing.id)

        self.connections[connection.id] = connection
        self._precomputed = None
        logger.debug(f"Connection added: {connection}")

    def remove_connection(self, connection_id: str) -> Connection:
        """Remove a single connection.

        Raises:
            UnknownConnection: If the connection does not exist.
        """
        conn = self.connections.pop(connection_id, None)
        if conn is None:
            raise UnknownConnection(connection_id)
        self._precomputed = None
        logger.info(f"Deleted connection {connection_id}")
        return conn

    def connections_on_floor(self, floor: int) -> list[Connection]:
        """Connections drawn on floor (vertical links appear on both end floors)."""
        return [conn for conn in self.connections.values() if conn.lies_on_floor(floor)]

    def connections_of(self, node_id: str) -> list[Connection]:
        return [conn for conn in self.connections.values() if conn.touches(node_id)]

    def get_connection_count(self, node_id: str) -> int:
        """Count connections attached to a node."""
        return len(self.connections_of(node_id=node_id))

    # =========================================================================
    # Routing
    # =========================================================================

    def adjacency(self) -> AdjacencyView:
        """Adjacency view for routing.

        Uses the adjacency loaded with the map while it still covers exactly
        the current node set and no mutation happened since; otherwise builds
        it from the connections.
        """
        if self._precomputed is not None and set(self._precomputed) == set(self.nodes):
            return self._precomputed
        return build_adjacency(nodes=self.nodes.values(), connections=self.connections.values())

    def set_precomputed_adjacency(self, adjacency: Optional[AdjacencyView]) -> None:
        self._precomputed = adjacency

    def shortest_route(self, source_id: str, target_id: str) -> Route:
        """Shortest route between two nodes (see routing.router.shortest_path)."""
        return shortest_path(adjacency=self.adjacency(), nodes=self.nodes, source_id=source_id, target_id=target_id)

    def find_routes(self, source_id: str, target_id: str, k: int = RoutingConfig.DEFAULT_K) -> list[Route]:
        """Up to k distinct routes, cheapest first (see routing.router.k_shortest_paths)."""
        routes = k_shortest_paths(
            adjacency=self.adjacency(),
            nodes=self.nodes,
            source_id=source_id,
            target_id=target_id,
            k=k,
        )
        logger.info(f"Route query {source_id} -> {target_id}: {len(routes)} route(s)")
        return routes

    def route_connections(self, route: Route) -> list[Connection]:
        """Connections traversed by a route, in walking order."""
        result = []
        for a, b in route.node_pairs:
            conn = self.find_connection(a=a, b=b)
            if conn is None:
                raise UnknownConnection(f"{a}<->{b}")
            result.append(conn)
        return result

    # =========================================================================
    # Statistics and Serialization
    # =========================================================================

    def get_stats(self) -> dict[str, Any]:
        """Get building statistics."""
        vertical = [c for c in self.connections.values() if c.is_vertical]
        walked = [c for c in self.connections.values() if not c.is_vertical]
        return {
            "nodes": len(self.nodes),
            "edges": len(self.connections),
            "verticalEdges": len(vertical),
            "floors": self.floors(),
            "totalDistance": sum(c.distance for c in walked),
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted map shape."""
        from indoor_mapper.storage.serialization import to_persisted

        return to_persisted(building=self)

    @classmethod
    def from_dict(cls, data: dict[str, Any], name: Optional[str] = None) -> "BuildingMap":
        """Deserialize from any accepted persisted or exported shape."""
        from indoor_mapper.storage.serialization import map_from_data

        return map_from_data(data=data, name=name)

    def __repr__(self) -> str:
        return f"BuildingMap('{self.name}', {len(self.nodes)} nodes, {len(self.connections)} connections)"
