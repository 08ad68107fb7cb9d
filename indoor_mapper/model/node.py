"""Node - A point of interest in the building graph.

A Node is a named place on one floor (room, junction, stairs, ...).
It wraps a LocalPoint for its position and keeps the geodetic fix
that produced it.

Floor and position are fixed at creation. Moving a node to another
floor means deleting it and creating a new one.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from indoor_mapper.constants import EntityPrefixes, NodeKinds
from indoor_mapper.model.ids import generate_id
from indoor_mapper.model.local_point import LocalPoint


def _clean_aliases(aliases: Iterable[str]) -> tuple[str, ...]:
    seen: list[str] = []
    for alias in aliases:
        alias = alias.strip()
        if alias and alias not in seen:
            seen.append(alias)
    return tuple(seen)


@dataclass(frozen=True)
class Node:
    """A point of interest in the building graph.

    Attributes:
        id: Unique identifier (e.g., "N1", "N1718000000000-k3j9x0a2b")
        name: Display name, not necessarily unique
        kind: One of NodeKinds.ALL
        floor: Floor level index (may be negative)
        position: Local frame position
        aliases: Alternate search strings
        lat, lng: Geodetic fix the position was projected from (if known)

    Example:
        node = Node(id="N3", name="Staircase A", kind="stairs", floor=1,
                    position=LocalPoint(x=15.0, y=10.0, z=0.0))
    """

    id: str
    name: str
    kind: str
    floor: int
    position: LocalPoint
    aliases: tuple[str, ...] = field(default_factory=tuple)
    lat: Optional[float] = None
    lng: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if self.kind not in NodeKinds.ALL:
            raise ValueError(f"Unknown node kind '{self.kind}', expected one of {NodeKinds.ALL}")
        if not self.name.strip():
            raise ValueError("Node name must not be empty")
        object.__setattr__(self, "aliases", _clean_aliases(self.aliases))

    @classmethod
    def create(
        cls,
        name: str,
        kind: str,
        floor: int,
        position: LocalPoint,
        aliases: Iterable[str] = (),
        lat: Optional[float] = None,
        lng: Optional[float] = None,
    ) -> "Node":
        """Create a node with a freshly generated ID."""
        return cls(
            id=generate_id(prefix=EntityPrefixes.NODE),
            name=name.strip(),
            kind=kind,
            floor=floor,
            position=position,
            aliases=tuple(aliases),
            lat=lat,
            lng=lng,
        )

    @property
    def x(self) -> float:
        """X delegated from position."""
        return self.position.x

    @property
    def y(self) -> float:
        """Y delegated from position."""
        return self.position.y

    @property
    def z(self) -> float:
        """Z delegated from position."""
        return self.position.z

    @property
    def is_vertical(self) -> bool:
        """True for stairs and lifts (eligible for cross-floor linking)."""
        return NodeKinds.is_vertical(self.kind)

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against name and aliases."""
        q = query.strip().lower()
        if not q:
            return False
        return q in self.name.lower() or any(q in alias.lower() for alias in self.aliases)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the flat persisted record."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.kind,
            "aliases": list(self.aliases),
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "floor": self.floor,
            "lat": self.lat,
            "lng": self.lng,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Node":
        """Create Node from a flat persisted record (missing fields defaulted)."""
        kind = data.get("type")
        if kind not in NodeKinds.ALL:
            kind = NodeKinds.OTHER
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            kind=kind,
            floor=int(data.get("floor") or 0),
            position=LocalPoint.from_dict(data),
            aliases=tuple(data.get("aliases") or ()),
            lat=data.get("lat"),
            lng=data.get("lng"),
        )

    def __repr__(self) -> str:
        return f"Node({self.id}, '{self.name}', {self.kind}, floor={self.floor})"
