"""RecordingSession - Ephemeral state of one trajectory recording.

Holds the accepted trajectory points, the points of interest touched so
far (in first-touch order), the last accepted point and the running walked
distance. Created empty on start, converted into connections and cleared
on stop.
"""

from dataclasses import dataclass, field
from typing import Optional

from indoor_mapper.constants import RecordingConfig
from indoor_mapper.model.local_point import LocalPoint


@dataclass
class RecordingSession:
    """Recording session state (model of RecorderStateMachine).

    Note: The 'state' field is managed by python-statemachine when this
    object is passed as the model. It stores the current state value.
    """

    # State managed by python-statemachine (model pattern)
    state: str | None = None

    points: list[LocalPoint] = field(default_factory=list)
    touched_node_ids: list[str] = field(default_factory=list)
    last_point: Optional[LocalPoint] = None
    total_distance: float = 0.0

    def clear(self) -> None:
        self.points = []
        self.touched_node_ids = []
        self.last_point = None
        self.total_distance = 0.0

    def is_jitter(self, point: LocalPoint) -> bool:
        """True if point is closer than MIN_POINT_DIST_M to the last accepted point."""
        if self.last_point is None:
            return False
        return self.last_point.distance_3d(point) < RecordingConfig.MIN_POINT_DIST_M

    def accept(self, point: LocalPoint) -> float:
        """Append point to the trajectory.

        Returns:
            Distance added to the running total (0 for the first point).
        """
        step = self.last_point.distance_3d(point) if self.last_point is not None else 0.0
        self.total_distance += step
        self.points.append(point)
        self.last_point = point
        return step

    def touch(self, node_id: str) -> bool:
        """Record a first touch of node_id. Returns False if already touched."""
        if node_id in self.touched_node_ids:
            return False
        self.touched_node_ids.append(node_id)
        return True

    def has_touched(self, node_id: str) -> bool:
        return node_id in self.touched_node_ids

    def can_synthesize(self) -> bool:
        """True if the session has enough touches and points to produce connections."""
        return (
            len(self.touched_node_ids) >= RecordingConfig.MIN_TOUCHED_NODES
            and len(self.points) >= RecordingConfig.MIN_POINTS
        )

    def touched_pairs(self) -> list[tuple[str, str]]:
        """Consecutive touched node pairs in touch order."""
        return list(zip(self.touched_node_ids, self.touched_node_ids[1:]))

    def polyline(self) -> tuple[LocalPoint, ...]:
        """Immutable snapshot of the trajectory, shared by all connections of one stop."""
        return tuple(self.points)

    def __repr__(self) -> str:
        return (
            f"RecordingSession(state={self.state}, points={len(self.points)}, "
            f"touched={self.touched_node_ids}, distance={self.total_distance:.1f}m)"
        )
