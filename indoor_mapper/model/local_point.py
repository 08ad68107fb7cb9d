"""LocalPoint - The geometry atom of the local building frame.

A LocalPoint is a position in the local Cartesian frame anchored at the
session origin (x east, y north, z up, all in meters).

Used by:
- Node (position of a point of interest)
- Connection (polyline of the walked path)
- RecordingSession (accepted trajectory samples)
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class LocalPoint:
    """A point in the local Cartesian frame.

    Attributes:
        x: Meters east of the origin
        y: Meters north of the origin
        z: Meters above the origin

    Example:
        point = LocalPoint(x=15.0, y=10.0, z=4.0)
    """

    x: float
    y: float
    z: float = 0.0

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if np.isnan(self.x) or np.isnan(self.y) or np.isnan(self.z):
            raise ValueError(f"LocalPoint cannot have NaN coordinates: ({self.x}, {self.y}, {self.z})")

    @property
    def xy(self) -> tuple[float, float]:
        """Return (x, y) tuple - planar position."""
        return (self.x, self.y)

    @property
    def xyz(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def distance_2d(self, other: "LocalPoint") -> float:
        """Planar distance to another point in meters (z ignored)."""
        return float(np.hypot(other.x - self.x, other.y - self.y))

    def distance_3d(self, other: "LocalPoint") -> float:
        """Euclidean distance to another point in meters."""
        return float(np.linalg.norm(np.subtract(other.xyz, self.xyz)))

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "LocalPoint":
        """Create LocalPoint from dictionary, treating missing or null values as 0."""
        data = data or {}
        return cls(
            x=float(data.get("x") or 0.0),
            y=float(data.get("y") or 0.0),
            z=float(data.get("z") or 0.0),
        )

    def __repr__(self) -> str:
        return f"LocalPoint(x={self.x:.2f}, y={self.y:.2f}, z={self.z:.2f})"


def polyline_length_m(points: Sequence[LocalPoint]) -> float:
    """Sum of consecutive 3-D segment lengths along a polyline.

    Args:
        points: Ordered polyline points

    Returns:
        Length in meters (0.0 for fewer than 2 points).
    """
    if len(points) < 2:
        return 0.0
    coords = np.array([p.xyz for p in points], dtype=np.float64)
    return float(np.linalg.norm(np.diff(coords, axis=0), axis=1).sum())
