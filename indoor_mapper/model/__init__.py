"""Data model classes for the indoor building graph.

Follows the separation of Geometry (where things are) vs Topology (how things connect):
- LocalPoint: Geometry atom (x, y, z in the local frame)
- Node: Point of interest (wraps LocalPoint, has ID, name, kind, floor)
- Connection: Undirected weighted link between two nodes
- Route: Result of a route query
- BuildingMap: Central manager owning all nodes and connections
"""

from indoor_mapper.model.connection import Connection
from indoor_mapper.model.local_point import LocalPoint, polyline_length_m
from indoor_mapper.model.node import Node
from indoor_mapper.model.route import Route

# BuildingMap has circular import with routing (routing uses Node/Route)
# Import directly: from indoor_mapper.model.building_map import BuildingMap

__all__ = [
    "LocalPoint",
    "polyline_length_m",
    "Node",
    "Connection",
    "Route",
]
