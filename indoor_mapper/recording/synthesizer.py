"""TrajectorySynthesizer - Turns walked trajectories into graph connections.

While recording, each projected sample is:
1. Dropped if closer than MIN_POINT_DIST_M (3-D) to the last accepted point
2. Otherwise accumulated into the session trajectory and running distance
3. Matched against nodes on the active floor: every untouched node within
   NODE_PROXIMITY_M (planar) is appended to the touched list

On stop, each consecutive pair of touched nodes becomes a connection unless
the pair is already connected. Every connection of one stop carries the
full session trajectory as its polyline and the full trajectory length as
its distance: a session is expected to be one corridor walk between
adjacent points of interest.

Independently of recording, inserting a stairs or lift node links it to
every same-kind, same-name (case-insensitive) node on other floors.
"""

import logging

from indoor_mapper.constants import FloorConfig, RecordingConfig
from indoor_mapper.model.building_map import BuildingMap
from indoor_mapper.model.connection import Connection
from indoor_mapper.model.local_point import LocalPoint
from indoor_mapper.model.node import Node
from indoor_mapper.recording.session import RecordingSession
from indoor_mapper.recording.state_machine import RecorderStateMachine

logger = logging.getLogger(__name__)


def link_vertical(building: BuildingMap, node: Node) -> list[Connection]:
    """Connect a stairs/lift node to its same-named counterparts on other floors.

    Matches are nodes with the same kind, a case-insensitive equal name and a
    different floor. Pairs that are already connected are skipped.

    Args:
        building: Map to add the vertical links to (node must already be in it)
        node: Newly inserted node

    Returns:
        The created vertical connections (empty for non-vertical kinds).
    """
    if not node.is_vertical:
        return []

    name = node.name.lower()
    created = []
    for match in list(building.nodes.values()):
        if match.id == node.id or match.kind != node.kind or match.floor == node.floor:
            continue
        if match.name.lower() != name:
            continue
        if building.are_connected(a=match.id, b=node.id):
            continue

        conn = Connection.vertical(
            from_id=match.id,
            to_id=node.id,
            from_floor=match.floor,
            to_floor=node.floor,
            from_position=match.position,
            to_position=node.position,
        )
        building.insert_connection(connection=conn)
        created.append(conn)
        logger.info(f"Vertical link: '{node.name}' L{match.floor} <-> L{node.floor} ({conn.distance:.0f}m)")

    return created


class TrajectorySynthesizer:
    """Records walked trajectories and synthesizes connections from them.

    Example:
        synth = TrajectorySynthesizer(building=building, floor=1)
        synth.start()
        for point in projected_points:
            synth.process_sample(point)
        new_connections = synth.stop()
    """

    def __init__(self, building: BuildingMap, floor: int = FloorConfig.DEFAULT_FLOOR) -> None:
        self.building = building
        self.floor = floor
        self.session = RecordingSession()
        self._machine = RecorderStateMachine(session=self.session)

    @property
    def is_recording(self) -> bool:
        return self._machine.is_recording

    @property
    def state_name(self) -> str:
        return self._machine.current_state.name

    def set_floor(self, floor: int) -> None:
        """Change the active floor used for proximity and new connections."""
        self.floor = floor

    # =========================================================================
    # Recording lifecycle
    # =========================================================================

    def start(self) -> bool:
        """Start a new session. Returns False if already recording."""
        return self._machine.try_transition("start_recording")

    def process_sample(self, point: LocalPoint) -> bool:
        """Feed one projected position.

        Returns:
            True if the sample was accepted into the trajectory, False if it
            was ignored (idle) or filtered as jitter.
        """
        if not self.is_recording:
            return False
        if self.session.is_jitter(point):
            return False

        self.session.accept(point)

        for node in self.building.nodes_on_floor(self.floor):
            if self.session.has_touched(node.id):
                continue
            if node.position.distance_2d(point) <= RecordingConfig.NODE_PROXIMITY_M:
                self.session.touch(node.id)
                logger.info(f"Touched '{node.name}' ({len(self.session.touched_node_ids)} in session)")

        return True

    def stop(self) -> list[Connection]:
        """Stop recording and synthesize connections from the session.

        Returns:
            The created connections. Empty when idle or when the session had
            fewer than 2 touched nodes or fewer than 2 points.
        """
        if not self.is_recording:
            return []

        created = self._synthesize()
        logger.info(
            f"Session saved: {len(self.session.points)} pts, "
            f"{len(self.session.touched_node_ids)} nodes, {len(created)} new connection(s)"
        )
        self._machine.try_transition("stop_recording")
        return created

    def _synthesize(self) -> list[Connection]:
        if not self.session.can_synthesize():
            return []

        polyline = self.session.polyline()
        created = []
        for from_id, to_id in self.session.touched_pairs():
            # Nodes deleted mid-session are skipped
            if from_id not in self.building.nodes or to_id not in self.building.nodes:
                continue
            if self.building.are_connected(a=from_id, b=to_id):
                continue

            conn = Connection.walked(
                from_id=from_id,
                to_id=to_id,
                polyline=polyline,
                floor=self.floor,
                decimals=RecordingConfig.DISTANCE_DECIMALS,
            )
            self.building.insert_connection(connection=conn)
            created.append(conn)

        return created

    # =========================================================================
    # Node placement
    # =========================================================================

    def add_node(self, node: Node) -> list[Connection]:
        """Insert a node, auto-link stairs/lifts, and mark it touched when recording.

        Returns:
            Vertical connections created for the node.
        """
        self.building.insert_node(node=node)
        created = link_vertical(building=self.building, node=node)
        if self.is_recording:
            self.session.touch(node.id)
        logger.info(f"Added '{node.name}' on floor {node.floor}")
        return created

    def __repr__(self) -> str:
        return f"TrajectorySynthesizer(state={self.state_name}, floor={self.floor}, session={self.session!r})"
