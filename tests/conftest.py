"""Shared pytest fixtures for indoor_mapper unit tests.

Provides the sample building and small hand-built maps for all tests.

COORDINATE SYSTEM:
    Maps are built directly in the local frame (x east, y north, z up, meters),
    so expected distances can be read off the fixture coordinates.
"""

import pytest

from indoor_mapper.core.projector import GeoOrigin
from indoor_mapper.model.building_map import BuildingMap
from indoor_mapper.model.connection import Connection
from indoor_mapper.model.local_point import LocalPoint
from indoor_mapper.model.node import Node
from indoor_mapper.recording.synthesizer import TrajectorySynthesizer
from indoor_mapper.storage.sample_data import load_sample_map


def make_node(node_id: str, x: float, y: float, floor: int = 1, kind: str = "room", name: str | None = None) -> Node:
    """Node at (x, y) with z derived from the floor (4 m per floor above 1)."""
    return Node(
        id=node_id,
        name=name or f"Room {node_id}",
        kind=kind,
        floor=floor,
        position=LocalPoint(x=x, y=y, z=(floor - 1) * 4.0),
    )


def make_connection(conn_id: str, a: Node, b: Node, distance: float | None = None) -> Connection:
    """Straight connection between two nodes, weighted by their distance unless given."""
    polyline = (a.position, b.position)
    return Connection(
        id=conn_id,
        from_id=a.id,
        to_id=b.id,
        distance=a.position.distance_3d(b.position) if distance is None else distance,
        polyline=polyline,
        floor=a.floor,
    )


# =============================================================================
# MAP FIXTURES
# =============================================================================


@pytest.fixture
def empty_building() -> BuildingMap:
    """Empty building map with an origin at the sample coordinates."""
    return BuildingMap(name="Test Block", origin=GeoOrigin(lat=1.3521, lng=103.8198))


@pytest.fixture
def sample_building() -> BuildingMap:
    """Two-floor sample building (N1..N8, E1..E7).

    N1 entrance -15- N2 junction -10- N3 stairs =4= N5 stairs -12- N6 room (floor 2)
                     N2 -8- N4 room
                     N2 -10- N7 lift =4= N8 lift (floor 2 dead end)
    """
    return load_sample_map()


@pytest.fixture
def square_building(empty_building: BuildingMap) -> BuildingMap:
    """Four rooms on a 10 m square with one diagonal shortcut.

    A(0,0) -10- B(10,0)
    |            |
    10           10
    |            |
    D(0,10) -10- C(10,10)

    Plus a 15 m diagonal A-C. Shortest A->C is the diagonal (15),
    the two sides (20) are the alternatives.
    """
    a, b, c, d = make_node("A", 0, 0), make_node("B", 10, 0), make_node("C", 10, 10), make_node("D", 0, 10)
    for node in (a, b, c, d):
        empty_building.insert_node(node=node)
    empty_building.insert_connection(connection=make_connection("AB", a, b))
    empty_building.insert_connection(connection=make_connection("BC", b, c))
    empty_building.insert_connection(connection=make_connection("CD", c, d))
    empty_building.insert_connection(connection=make_connection("DA", d, a))
    empty_building.insert_connection(connection=make_connection("AC", a, c, distance=15.0))
    return empty_building


@pytest.fixture
def corridor_building(empty_building: BuildingMap) -> BuildingMap:
    """Three rooms along a corridor on floor 1, no connections yet.

    R1 at x=0, R2 at x=20, R3 at x=40 (all y=0).
    """
    for node in (make_node("R1", 0, 0), make_node("R2", 20, 0), make_node("R3", 40, 0)):
        empty_building.insert_node(node=node)
    return empty_building


@pytest.fixture
def synthesizer(corridor_building: BuildingMap) -> TrajectorySynthesizer:
    """Idle synthesizer on floor 1 of the corridor building."""
    return TrajectorySynthesizer(building=corridor_building, floor=1)
