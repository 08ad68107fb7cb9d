"""Sample building for demos and tests.

Two floors: entrance -> lobby junction -> staircase A -> floor 2 room E2-01,
with a room off the lobby and a lift branch. The floor-2 lift landing is a
dead end (it does not reach the room).
"""

import copy
from typing import Any

from indoor_mapper.model.building_map import BuildingMap
from indoor_mapper.storage.serialization import map_from_data

SAMPLE_MAP_NAME = "Sample Building"


def _node(node_id: str, name: str, kind: str, aliases: list[str], x: float, y: float, z: float,
          floor: int, lat: float, lng: float) -> dict[str, Any]:
    return {
        "id": node_id, "name": name, "type": kind, "aliases": aliases,
        "x": x, "y": y, "z": z, "floor": floor, "lat": lat, "lng": lng,
    }


def _edge(edge_id: str, a: str, b: str, distance: float, points: list[tuple[float, float, float]],
          floor: int | None, vertical: tuple[int, int] | None = None) -> dict[str, Any]:
    edge: dict[str, Any] = {
        "id": edge_id, "from": a, "to": b, "floor": floor, "distance": distance,
        "isVertical": vertical is not None,
        "points": [{"x": x, "y": y, "z": z} for x, y, z in points],
    }
    if vertical is not None:
        edge["fromFloor"], edge["toFloor"] = vertical
    return edge


SAMPLE_MAP: dict[str, Any] = {
    "name": SAMPLE_MAP_NAME,
    "origin": {"lat": 1.3521, "lng": 103.8198, "alt": 0},
    "floor": 1,
    "nodes": [
        _node("N1", "Main Entrance", "entrance", ["Entry"], 0, 0, 0, 1, 1.3521, 103.8198),
        _node("N2", "Lobby Junction", "junction", [], 15, 0, 0, 1, 1.3522, 103.8198),
        _node("N3", "Staircase A", "stairs", ["Stairs A"], 15, 10, 0, 1, 1.3522, 103.8199),
        _node("N4", "Room E1-01", "room", ["101"], 23, 0, 0, 1, 1.3523, 103.8198),
        _node("N5", "Staircase A", "stairs", ["Stairs A"], 15, 10, 4, 2, 1.3522, 103.8199),
        _node("N6", "Room E2-01", "room", ["201"], 27, 10, 4, 2, 1.3523, 103.8199),
        _node("N7", "Lift A", "lift", ["Elevator A"], 15, -10, 0, 1, 1.3522, 103.8197),
        _node("N8", "Lift A", "lift", ["Elevator A"], 15, -10, 4, 2, 1.3522, 103.8197),
    ],
    "edges": [
        _edge("E1", "N1", "N2", 15, [(0, 0, 0), (15, 0, 0)], floor=1),
        _edge("E2", "N2", "N3", 10, [(15, 0, 0), (15, 10, 0)], floor=1),
        _edge("E3", "N2", "N4", 8, [(15, 0, 0), (23, 0, 0)], floor=1),
        _edge("E4", "N3", "N5", 4, [(15, 10, 0), (15, 10, 4)], floor=None, vertical=(1, 2)),
        _edge("E5", "N5", "N6", 12, [(15, 10, 4), (27, 10, 4)], floor=2),
        _edge("E6", "N2", "N7", 10, [(15, 0, 0), (15, -10, 0)], floor=1),
        _edge("E7", "N7", "N8", 4, [(15, -10, 0), (15, -10, 4)], floor=None, vertical=(1, 2)),
    ],
    "metadata": {"stats": {"totalDistance": 59}},
}


def sample_map_data() -> dict[str, Any]:
    """Deep copy of the sample building in the persisted shape."""
    return copy.deepcopy(SAMPLE_MAP)


def load_sample_map() -> BuildingMap:
    """The sample building as a BuildingMap."""
    return map_from_data(data=sample_map_data())
