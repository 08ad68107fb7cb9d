"""Tests for map serialization shapes.

Tests: to_persisted, to_export, normalize_map_data, map_from_data
Focus: Both node shapes load, exports load back, bad data is rejected or skipped

Note: Fixtures are defined in conftest.py (sample building).
"""

from datetime import datetime

import pytest

from indoor_mapper.errors import InvalidMapData
from indoor_mapper.model.building_map import BuildingMap
from indoor_mapper.storage.sample_data import sample_map_data
from indoor_mapper.storage.serialization import map_from_data, normalize_map_data, to_export, to_persisted


class TestPersistedShape:
    def test_persisted_fields(self, sample_building: BuildingMap) -> None:
        data = to_persisted(building=sample_building)

        assert data["name"] == "Sample Building"
        assert data["origin"] == {"lat": 1.3521, "lng": 103.8198, "alt": 0.0}
        assert len(data["nodes"]) == 8
        assert data["nodes"][0]["type"] == "entrance"
        assert {e["id"] for e in data["edges"]} == {f"E{i}" for i in range(1, 8)}
        assert all("points" in e for e in data["edges"])
        assert set(data["graph"]) == set(sample_building.nodes)
        assert data["metadata"]["stats"] == {"nodes": 8, "edges": 7, "verticalEdges": 2, "totalDistance": 55}

    def test_persisted_round_trip(self, sample_building: BuildingMap) -> None:
        restored = map_from_data(data=to_persisted(building=sample_building))

        assert restored.name == sample_building.name
        assert restored.origin == sample_building.origin
        assert restored.nodes == sample_building.nodes
        assert restored.connections == sample_building.connections
        assert restored.shortest_route(source_id="N1", target_id="N6").distance == pytest.approx(41.0)

    def test_loaded_graph_is_used_until_mutation(self, sample_building: BuildingMap) -> None:
        restored = map_from_data(data=to_persisted(building=sample_building))
        loaded = restored.adjacency()
        assert restored.adjacency() is loaded

        restored.remove_connection("E5")
        assert restored.adjacency() is not loaded

    def test_building_map_dict_methods(self, sample_building: BuildingMap) -> None:
        restored = BuildingMap.from_dict(sample_building.to_dict(), name="Copy")
        assert restored.name == "Copy"
        assert restored.get_stats() == sample_building.get_stats()


class TestExportShape:
    def test_export_fields(self, sample_building: BuildingMap) -> None:
        exported_at = datetime(2024, 1, 31, 12, 0, 0)
        data = to_export(building=sample_building, exported_at=exported_at)

        metadata = data["metadata"]
        assert metadata["building"] == "Sample Building"
        assert metadata["exportedAt"] == "2024-01-31T12:00:00"
        assert metadata["floorHeight"] == 4.0
        assert metadata["stats"]["totalDistance"] == 55

        n3 = data["nodes"]["N3"]
        assert n3["coordinates"] == {"x": 15, "y": 10, "z": 0}
        assert n3["gps"] == {"lat": 1.3522, "lng": 103.8199}
        assert {c["to"] for c in n3["connections"]} == {"N2", "N5"}
        assert len(data["nodes"]["N2"]["connections"]) == 4

        e4 = next(e for e in data["edges"] if e["id"] == "E4")
        assert e4["isVertical"] and (e4["fromFloor"], e4["toFloor"]) == (1, 2)
        assert "pathPoints" in e4 and "points" not in e4
        e1 = next(e for e in data["edges"] if e["id"] == "E1")
        assert e1["fromFloor"] is None and e1["toFloor"] is None

    def test_export_loads_back(self, sample_building: BuildingMap) -> None:
        """The denormalized export normalizes back to the same graph."""
        restored = map_from_data(data=to_export(building=sample_building))

        assert restored.name == "Sample Building"
        assert restored.origin == sample_building.origin
        assert restored.nodes == sample_building.nodes
        assert restored.connections == sample_building.connections


class TestNormalization:
    @pytest.mark.parametrize("data", [[], "map", None, {}, {"name": "Only a name"}])
    def test_unusable_data_rejected(self, data: object) -> None:
        with pytest.raises(InvalidMapData):
            normalize_map_data(data)

    def test_nodes_must_be_list_or_mapping(self) -> None:
        with pytest.raises(InvalidMapData):
            normalize_map_data({"nodes": "N1,N2"})

    @pytest.mark.parametrize("record", [{"name": "Hall", "type": "room", "floor": 1}, {"id": "", "name": "Hall"}, "N1"])
    def test_list_node_without_id_rejected(self, record: object) -> None:
        with pytest.raises(InvalidMapData, match="without id"):
            normalize_map_data({"nodes": [record]})

    def test_legacy_records_defaulted(self) -> None:
        """Missing coordinates become 0 and missing aliases become []."""
        normalized = normalize_map_data({"nodes": [{"id": "N1", "name": "Hall", "type": "room", "floor": 1}]})
        node = normalized["nodes"][0]
        assert (node["x"], node["y"], node["z"]) == (0, 0, 0)
        assert node["aliases"] == []
        assert normalized["edges"] == []

    def test_keyed_nodes_with_nested_coordinates(self) -> None:
        data = {
            "metadata": {"building": "Annex"},
            "nodes": {
                "A": {"name": "Hall", "type": "junction", "floor": 2, "coordinates": {"x": 3, "y": 4, "z": 4}},
                "B": {"name": "Lab", "type": "room", "floor": 2, "gps": {"lat": 1.0, "lng": 2.0}},
            },
            "edges": [{"id": "E1", "from": "A", "to": "B", "floor": 2, "pathPoints": [{"x": 3, "y": 4}, {"x": 0, "y": 0}]}],
        }
        building = map_from_data(data=data)

        assert building.name == "Annex"
        assert building.get_node("A").position.xyz == (3.0, 4.0, 4.0)
        assert (building.get_node("B").lat, building.get_node("B").lng) == (1.0, 2.0)
        assert building.connections["E1"].distance == pytest.approx(5.0)

    def test_invalid_records_skipped(self) -> None:
        """Records breaking graph rules are dropped, the rest of the map loads."""
        data = sample_map_data()
        data["nodes"].append(dict(data["nodes"][0]))
        data["edges"].append({"id": "E8", "from": "N1", "to": "N99", "distance": 3})
        data["edges"].append({"id": "E9", "from": "N2", "to": "N1", "distance": 3})
        data["edges"].append({"id": "E10", "from": "N4", "to": "N4", "distance": 0})

        building = map_from_data(data=data)

        assert len(building.nodes) == 8
        assert set(building.connections) == {f"E{i}" for i in range(1, 8)}

    def test_name_override(self) -> None:
        building = map_from_data(data=sample_map_data(), name="Renamed")
        assert building.name == "Renamed"


class TestStoredGraph:
    """A saved "graph" section is only routed over when it matches the connections."""

    def test_graph_with_skipped_duplicate_edge_ignored(self, sample_building: BuildingMap) -> None:
        data = to_persisted(building=sample_building)
        data["edges"].append({"id": "E9", "from": "N2", "to": "N1", "distance": 3, "floor": 1})
        data["graph"]["N1"].append({"node": "N2", "weight": 3.0, "vertical": False})
        data["graph"]["N2"].append({"node": "N1", "weight": 3.0, "vertical": False})

        restored = map_from_data(data=data)
        route = restored.shortest_route(source_id="N1", target_id="N6")

        assert "E9" not in restored.connections
        assert route.distance == pytest.approx(41.0)
        assert sum(c.distance for c in restored.route_connections(route)) == pytest.approx(route.distance)

    def test_graph_with_extra_shortcut_ignored(self, sample_building: BuildingMap) -> None:
        data = to_persisted(building=sample_building)
        data["graph"]["N1"].append({"node": "N6", "weight": 1.0, "vertical": False})
        data["graph"]["N6"].append({"node": "N1", "weight": 1.0, "vertical": False})

        restored = map_from_data(data=data)
        route = restored.shortest_route(source_id="N1", target_id="N6")

        assert route.node_ids == ("N1", "N2", "N3", "N5", "N6")
        assert len(restored.route_connections(route)) == 4

    def test_graph_with_changed_weight_ignored(self, sample_building: BuildingMap) -> None:
        data = to_persisted(building=sample_building)
        for entry in data["graph"]["N1"]:
            entry["weight"] = 0.5

        restored = map_from_data(data=data)
        assert restored.shortest_route(source_id="N1", target_id="N6").distance == pytest.approx(41.0)

    def test_malformed_graph_ignored(self, sample_building: BuildingMap) -> None:
        data = to_persisted(building=sample_building)
        data["graph"] = {"N1": [{"weight": 2.0}]}

        restored = map_from_data(data=data)
        assert restored.shortest_route(source_id="N1", target_id="N6").distance == pytest.approx(41.0)

    def test_reordered_graph_kept(self, sample_building: BuildingMap) -> None:
        """Neighbor order does not matter, only the entries."""
        data = to_persisted(building=sample_building)
        data["graph"]["N2"].reverse()

        restored = map_from_data(data=data)
        assert restored.adjacency().neighbors("N2")[0].node_id == data["graph"]["N2"][0]["node"]
