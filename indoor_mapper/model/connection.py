"""Connection - An undirected weighted link between two points of interest.

Two flavors exist:
- Walked connections, synthesized from a recorded trajectory. Distance is
  the length of the walked polyline.
- Vertical links between same-named stairs/lifts on different floors.
  Distance is a synthetic cost of FLOOR_HEIGHT_M per floor of difference.

The polyline is an immutable tuple, so connections produced from the same
recording session share one polyline object.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from indoor_mapper.constants import EntityPrefixes, VerticalConfig
from indoor_mapper.model.ids import generate_id
from indoor_mapper.model.local_point import LocalPoint, polyline_length_m


@dataclass(frozen=True)
class Connection:
    """An undirected connection between two nodes.

    Attributes:
        id: Unique identifier (e.g., "E1", "EV1718000000000-k3j9x0a2b")
        from_id: ID of one endpoint
        to_id: ID of the other endpoint
        distance: Walking cost in meters (non-negative)
        polyline: Physical path, at least 2 points for synthesized connections
        floor: Floor the connection lies on, None for vertical links
        is_vertical: True for stairs/lift links across floors
        from_floor, to_floor: Floors joined by a vertical link

    Example:
        conn = Connection(id="E1", from_id="N1", to_id="N2", distance=15.0,
                          polyline=(LocalPoint(0, 0), LocalPoint(15, 0)), floor=1)
    """

    id: str
    from_id: str
    to_id: str
    distance: float
    polyline: tuple[LocalPoint, ...] = ()
    floor: Optional[int] = None
    is_vertical: bool = False
    from_floor: Optional[int] = None
    to_floor: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if self.distance < 0:
            raise ValueError(f"Connection {self.id} has negative distance {self.distance}")
        if not isinstance(self.polyline, tuple):
            object.__setattr__(self, "polyline", tuple(self.polyline))

    @classmethod
    def walked(
        cls,
        from_id: str,
        to_id: str,
        polyline: tuple[LocalPoint, ...],
        floor: int,
        decimals: Optional[int] = None,
    ) -> "Connection":
        """Create a walked connection whose distance is the polyline length.

        Args:
            from_id, to_id: Endpoint node IDs
            polyline: Walked points (shared, not copied)
            floor: Floor the walk was recorded on
            decimals: Round the distance to this many decimals if given
        """
        distance = polyline_length_m(polyline)
        if decimals is not None:
            distance = round(distance, decimals)
        return cls(
            id=generate_id(prefix=EntityPrefixes.CONNECTION),
            from_id=from_id,
            to_id=to_id,
            distance=distance,
            polyline=polyline,
            floor=floor,
        )

    @classmethod
    def vertical(
        cls,
        from_id: str,
        to_id: str,
        from_floor: int,
        to_floor: int,
        from_position: LocalPoint,
        to_position: LocalPoint,
    ) -> "Connection":
        """Create a vertical link weighted by floor difference × FLOOR_HEIGHT_M."""
        return cls(
            id=generate_id(prefix=EntityPrefixes.VERTICAL),
            from_id=from_id,
            to_id=to_id,
            distance=abs(to_floor - from_floor) * VerticalConfig.FLOOR_HEIGHT_M,
            polyline=(from_position, to_position),
            floor=None,
            is_vertical=True,
            from_floor=from_floor,
            to_floor=to_floor,
        )

    @property
    def endpoints(self) -> frozenset[str]:
        """Unordered endpoint pair (identity of the connection in the graph)."""
        return frozenset((self.from_id, self.to_id))

    def touches(self, node_id: str) -> bool:
        return node_id in (self.from_id, self.to_id)

    def other_end(self, node_id: str) -> str:
        """Return the endpoint opposite to node_id."""
        if node_id == self.from_id:
            return self.to_id
        if node_id == self.to_id:
            return self.from_id
        raise ValueError(f"Node {node_id} is not an endpoint of connection {self.id}")

    def lies_on_floor(self, floor: int) -> bool:
        """True if the connection is drawn on floor (vertical links on either end floor)."""
        if self.is_vertical:
            return floor in (self.from_floor, self.to_floor)
        return self.floor == floor

    @property
    def polyline_length_m(self) -> float:
        return polyline_length_m(self.polyline)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted edge record."""
        data: dict[str, Any] = {
            "id": self.id,
            "from": self.from_id,
            "to": self.to_id,
            "floor": None if self.is_vertical else self.floor,
            "distance": self.distance,
            "isVertical": self.is_vertical,
            "points": [p.to_dict() for p in self.polyline],
        }
        if self.is_vertical:
            data["fromFloor"] = self.from_floor
            data["toFloor"] = self.to_floor
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Connection":
        """Create Connection from a persisted or exported edge record.

        Accepts either "points" or "pathPoints" for the polyline. A missing
        distance is computed from the polyline.
        """
        raw_points: Sequence[dict[str, Any]] = data.get("points") or data.get("pathPoints") or []
        polyline = tuple(LocalPoint.from_dict(p) for p in raw_points)
        is_vertical = bool(data.get("isVertical", False))
        distance = data.get("distance")
        return cls(
            id=str(data["id"]),
            from_id=str(data["from"]),
            to_id=str(data["to"]),
            distance=float(distance) if distance is not None else polyline_length_m(polyline),
            polyline=polyline,
            floor=None if is_vertical else data.get("floor"),
            is_vertical=is_vertical,
            from_floor=data.get("fromFloor"),
            to_floor=data.get("toFloor"),
        )

    def __repr__(self) -> str:
        kind = "vertical" if self.is_vertical else f"floor={self.floor}"
        return f"Connection({self.id}, {self.from_id}<->{self.to_id}, {self.distance:.1f}m, {kind})"
