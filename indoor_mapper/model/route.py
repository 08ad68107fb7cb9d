"""Route - Result of a path query (immutable, never persisted)."""

from dataclasses import dataclass

from indoor_mapper.constants import RoutingConfig
from indoor_mapper.model.node import Node


@dataclass(frozen=True)
class Route:
    """An ordered walk from source to destination.

    Attributes:
        node_ids: Node IDs from source to destination
        nodes: Resolved Node objects in the same order
        distance: Total weighted distance in meters
    """

    node_ids: tuple[str, ...]
    nodes: tuple[Node, ...]
    distance: float

    @property
    def source_id(self) -> str:
        return self.node_ids[0]

    @property
    def target_id(self) -> str:
        return self.node_ids[-1]

    @property
    def hops(self) -> int:
        """Number of connections traversed."""
        return len(self.node_ids) - 1

    @property
    def node_pairs(self) -> list[tuple[str, str]]:
        """Consecutive (from, to) node ID pairs along the route."""
        return list(zip(self.node_ids, self.node_ids[1:]))

    @property
    def floors(self) -> list[int]:
        """Distinct floors visited, in visiting order."""
        result: list[int] = []
        for node in self.nodes:
            if node.floor not in result:
                result.append(node.floor)
        return result

    @property
    def duration_s(self) -> float:
        """Estimated walking time in seconds."""
        return self.distance / RoutingConfig.WALKING_SPEED_MPS

    def same_nodes(self, other: "Route") -> bool:
        """Routes are distinct purely by their node ID sequence."""
        return self.node_ids == other.node_ids

    def __repr__(self) -> str:
        return f"Route({' -> '.join(self.node_ids)}, {self.distance:.1f}m)"
