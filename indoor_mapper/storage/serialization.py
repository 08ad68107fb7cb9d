"""Mapping between BuildingMap and its plain-data shapes.

Two shapes are produced:
- Persisted shape (to_persisted): flat node records in a list, edge list
  with "points", precomputed "graph" adjacency and metadata.
- Export shape (to_export): nodes keyed by ID with nested coordinates, gps
  and a "connections" summary; edge list with "pathPoints"; "graph"
  adjacency; metadata with export stats.

normalize_map_data accepts both shapes (nodes as an array of records or as
an ID-keyed mapping) and returns the persisted shape, defaulting missing
coordinates to 0 and missing aliases to [].
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from indoor_mapper.constants import VerticalConfig
from indoor_mapper.core.projector import GeoOrigin
from indoor_mapper.errors import IndoorMapperError, InvalidMapData
from indoor_mapper.model.connection import Connection
from indoor_mapper.model.node import Node
from indoor_mapper.routing.adjacency import AdjacencyView

if TYPE_CHECKING:
    from indoor_mapper.model.building_map import BuildingMap

logger = logging.getLogger(__name__)


# =============================================================================
# Normalization
# =============================================================================


def _first_present(*values: Any, default: Any = None) -> Any:
    for value in values:
        if value is not None:
            return value
    return default


def _normalize_node(node_id: str, record: dict[str, Any]) -> dict[str, Any]:
    coords = record.get("coordinates") or {}
    gps = record.get("gps") or {}
    return {
        "id": str(node_id),
        "name": record.get("name") or str(node_id),
        "type": record.get("type"),
        "aliases": list(record.get("aliases") or []),
        "floor": record.get("floor"),
        "x": _first_present(coords.get("x"), record.get("x"), default=0),
        "y": _first_present(coords.get("y"), record.get("y"), default=0),
        "z": _first_present(coords.get("z"), record.get("z"), default=0),
        "lat": _first_present(gps.get("lat"), record.get("lat")),
        "lng": _first_present(gps.get("lng"), record.get("lng")),
    }


def _normalize_edge(record: dict[str, Any]) -> dict[str, Any]:
    edge = {key: value for key, value in record.items() if key != "pathPoints"}
    edge["points"] = record.get("pathPoints") or record.get("points") or []
    return edge


def normalize_map_data(data: Any) -> dict[str, Any]:
    """Normalize any accepted map shape into the persisted shape.

    Args:
        data: Persisted map, exported file contents, or legacy map

    Returns:
        Dict with "name", "origin", "floor", "nodes" (list of flat records),
        "edges" (list with "points"), "graph" and "metadata".

    Raises:
        InvalidMapData: If data is not a mapping or has none of
            nodes, edges, metadata.
    """
    if not isinstance(data, dict):
        raise InvalidMapData(f"Map data must be an object, got {type(data).__name__}")
    if not data.get("nodes") and not data.get("edges") and not data.get("metadata"):
        raise InvalidMapData("Invalid map format: missing nodes, edges, or metadata")

    raw_nodes = data.get("nodes") or []
    if isinstance(raw_nodes, dict):
        nodes = [_normalize_node(node_id, record) for node_id, record in raw_nodes.items()]
    elif isinstance(raw_nodes, list):
        nodes = []
        for record in raw_nodes:
            if not isinstance(record, dict) or record.get("id") in (None, ""):
                raise InvalidMapData(f"Node record without id: {record!r}")
            nodes.append(_normalize_node(record["id"], record))
    else:
        raise InvalidMapData(f"'nodes' must be a list or an object, got {type(raw_nodes).__name__}")

    raw_edges = data.get("edges") or []
    if not isinstance(raw_edges, list):
        raise InvalidMapData(f"'edges' must be a list, got {type(raw_edges).__name__}")

    metadata = dict(data.get("metadata") or {})
    return {
        "name": data.get("name") or metadata.get("building"),
        "origin": data.get("origin") or metadata.get("origin"),
        "floor": data.get("floor"),
        "nodes": nodes,
        "edges": [_normalize_edge(record) for record in raw_edges],
        "graph": data.get("graph") or {},
        "metadata": metadata,
    }


def _install_graph(building: "BuildingMap", graph: Any) -> None:
    """Reuse a persisted graph only if it agrees with the loaded connections."""
    try:
        loaded = AdjacencyView.from_dict(graph)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Ignoring malformed graph of '{building.name}': {e}")
        return
    if not loaded.same_entries(building.adjacency()):
        logger.warning(f"Ignoring graph of '{building.name}': it does not match the loaded connections")
        return
    building.set_precomputed_adjacency(loaded)


def map_from_data(data: Any, name: Optional[str] = None) -> "BuildingMap":
    """Build a BuildingMap from any accepted map shape.

    Records violating graph invariants (duplicate IDs, unknown endpoints,
    self-loops, duplicate connections) are skipped with a warning. A stored
    "graph" is kept for routing only when it matches the loaded connections
    entry for entry.

    Args:
        data: Persisted map, exported file contents, or legacy map
        name: Overrides the map name found in data

    Returns:
        The loaded BuildingMap.
    """
    from indoor_mapper.model.building_map import BuildingMap

    normalized = normalize_map_data(data)
    building = BuildingMap(
        name=name or normalized["name"] or "Untitled",
        origin=GeoOrigin.from_dict(normalized["origin"]),
    )
    if normalized["floor"] is not None:
        building.floor = int(normalized["floor"])
    building.metadata = normalized["metadata"]

    for record in normalized["nodes"]:
        try:
            building.insert_node(node=Node.from_dict(record))
        except (IndoorMapperError, ValueError) as e:
            logger.warning(f"Skipping node {record.get('id')}: {e}")

    for record in normalized["edges"]:
        try:
            building.insert_connection(connection=Connection.from_dict(record))
        except (IndoorMapperError, KeyError, ValueError) as e:
            logger.warning(f"Skipping edge {record.get('id')}: {e}")

    if normalized["graph"]:
        _install_graph(building, normalized["graph"])

    logger.info(f"Loaded map '{building.name}': {len(building.nodes)} nodes, {len(building.connections)} edges")
    return building


# =============================================================================
# Output shapes
# =============================================================================


def _stats(building: "BuildingMap") -> dict[str, Any]:
    stats = building.get_stats()
    return {
        "nodes": stats["nodes"],
        "edges": stats["edges"],
        "verticalEdges": stats["verticalEdges"],
        "totalDistance": round(stats["totalDistance"]),
    }


def to_persisted(building: "BuildingMap") -> dict[str, Any]:
    """Serialize a map to the persisted shape (JSON-compatible)."""
    metadata = dict(building.metadata)
    metadata["stats"] = _stats(building)
    return {
        "name": building.name,
        "origin": building.origin.to_dict() if building.origin else None,
        "floor": building.floor,
        "nodes": [node.to_dict() for node in building.nodes.values()],
        "edges": [conn.to_dict() for conn in building.connections.values()],
        "graph": building.adjacency().to_dict(),
        "metadata": metadata,
    }


def to_export(building: "BuildingMap", exported_at: Optional[datetime] = None) -> dict[str, Any]:
    """Serialize a map to the denormalized export shape.

    Nodes are keyed by ID and carry a "connections" summary; edges carry
    "pathPoints"; "graph" is the adjacency map. The result normalizes back
    through normalize_map_data.
    """
    exported_at = exported_at or datetime.now()
    nodes: dict[str, dict[str, Any]] = {}
    for node in building.nodes.values():
        nodes[node.id] = {
            "name": node.name,
            "type": node.kind,
            "aliases": list(node.aliases),
            "floor": node.floor,
            "coordinates": node.position.to_dict(),
            "gps": {"lat": node.lat, "lng": node.lng},
            "connections": [],
        }

    edges = []
    for conn in building.connections.values():
        record = conn.to_dict()
        record["pathPoints"] = record.pop("points")
        record.setdefault("fromFloor", None)
        record.setdefault("toFloor", None)
        edges.append(record)
        for end, other in ((conn.from_id, conn.to_id), (conn.to_id, conn.from_id)):
            if end in nodes:
                nodes[end]["connections"].append(
                    {"to": other, "distance": conn.distance, "isVertical": conn.is_vertical}
                )

    return {
        "metadata": {
            "building": building.name,
            "exportedAt": exported_at.isoformat(),
            "origin": building.origin.to_dict() if building.origin else None,
            "floorHeight": VerticalConfig.FLOOR_HEIGHT_M,
            "stats": _stats(building),
        },
        "nodes": nodes,
        "edges": edges,
        "graph": building.adjacency().to_dict(),
    }
