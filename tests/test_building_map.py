"""Tests for BuildingMap graph operations.

Tests: node/connection insertion and removal, floor views, search, stats
Focus: Graph invariants hold after every mutation, rejected inserts change nothing

Note: Fixtures are defined in conftest.py (sample building, hand-built maps).
"""

import pytest

from conftest import make_connection, make_node
from indoor_mapper.errors import (
    DuplicateConnection,
    DuplicateId,
    SelfLoop,
    UnknownConnection,
    UnknownEndpoint,
    UnknownNode,
)
from indoor_mapper.model.building_map import BuildingMap
from indoor_mapper.model.connection import Connection
from indoor_mapper.routing.adjacency import AdjacencyView


def assert_graph_invariants(building: BuildingMap) -> None:
    """Every connection references existing nodes, no self-loops, no duplicate pairs."""
    pairs = set()
    for conn in building.connections.values():
        assert conn.from_id in building.nodes and conn.to_id in building.nodes
        assert conn.from_id != conn.to_id
        assert conn.endpoints not in pairs
        pairs.add(conn.endpoints)

    adjacency = building.adjacency()
    assert set(adjacency) == set(building.nodes)
    assert adjacency.entry_count() == 2 * len(building.connections)


class TestNodeOperations:
    def test_insert_and_get(self, empty_building: BuildingMap) -> None:
        node = make_node("A", 0, 0)
        empty_building.insert_node(node=node)
        assert empty_building.get_node("A") is node

    def test_duplicate_node_id_rejected(self, corridor_building: BuildingMap) -> None:
        before = dict(corridor_building.nodes)
        with pytest.raises(DuplicateId):
            corridor_building.insert_node(node=make_node("R1", 99, 99))
        assert corridor_building.nodes == before

    def test_get_unknown_node(self, empty_building: BuildingMap) -> None:
        with pytest.raises(UnknownNode):
            empty_building.get_node("missing")

    def test_remove_node_cascades(self, sample_building: BuildingMap) -> None:
        """Removing the lobby junction removes its 4 connections and nothing else."""
        removed = sample_building.remove_node("N2")

        assert {c.id for c in removed} == {"E1", "E2", "E3", "E6"}
        assert "N2" not in sample_building.nodes
        assert set(sample_building.connections) == {"E4", "E5", "E7"}
        assert_graph_invariants(sample_building)

    def test_remove_unknown_node(self, sample_building: BuildingMap) -> None:
        with pytest.raises(UnknownNode):
            sample_building.remove_node("N99")
        assert len(sample_building.nodes) == 8

    def test_floor_views(self, sample_building: BuildingMap) -> None:
        """Vertical links appear on both end floors."""
        assert {n.id for n in sample_building.nodes_on_floor(2)} == {"N5", "N6", "N8"}
        assert {c.id for c in sample_building.connections_on_floor(2)} == {"E4", "E5", "E7"}
        assert {c.id for c in sample_building.connections_on_floor(1)} == {"E1", "E2", "E3", "E4", "E6", "E7"}
        assert sample_building.floors() == [1, 2]

    def test_connection_count(self, sample_building: BuildingMap) -> None:
        assert sample_building.get_connection_count("N2") == 4
        assert sample_building.get_connection_count("N6") == 1


class TestConnectionOperations:
    """insert_connection rejects every invariant violation without changing the map."""

    def test_insert_connection(self, corridor_building: BuildingMap) -> None:
        r1, r2 = corridor_building.get_node("R1"), corridor_building.get_node("R2")
        corridor_building.insert_connection(connection=make_connection("C12", r1, r2))

        assert corridor_building.are_connected("R2", "R1")
        assert corridor_building.find_connection("R1", "R2").distance == pytest.approx(20.0)
        assert_graph_invariants(corridor_building)

    def test_duplicate_connection_id(self, sample_building: BuildingMap) -> None:
        conn = Connection(id="E1", from_id="N4", to_id="N6", distance=1.0)
        with pytest.raises(DuplicateId):
            sample_building.insert_connection(connection=conn)
        assert len(sample_building.connections) == 7

    @pytest.mark.parametrize("from_id,to_id", [("N1", "N99"), ("N99", "N1")])
    def test_unknown_endpoint(self, sample_building: BuildingMap, from_id: str, to_id: str) -> None:
        conn = Connection(id="EX", from_id=from_id, to_id=to_id, distance=1.0)
        with pytest.raises(UnknownEndpoint) as exc_info:
            sample_building.insert_connection(connection=conn)
        assert exc_info.value.node_id == "N99"
        assert len(sample_building.connections) == 7

    def test_unknown_endpoint_is_unknown_node(self) -> None:
        assert issubclass(UnknownEndpoint, UnknownNode)

    def test_self_loop(self, sample_building: BuildingMap) -> None:
        with pytest.raises(SelfLoop):
            sample_building.insert_connection(connection=Connection(id="EX", from_id="N1", to_id="N1", distance=0.0))
        assert len(sample_building.connections) == 7

    @pytest.mark.parametrize("from_id,to_id", [("N1", "N2"), ("N2", "N1")])
    def test_duplicate_pair_either_direction(self, sample_building: BuildingMap, from_id: str, to_id: str) -> None:
        """An unordered pair may be connected only once."""
        conn = Connection(id="EX", from_id=from_id, to_id=to_id, distance=3.0)
        with pytest.raises(DuplicateConnection) as exc_info:
            sample_building.insert_connection(connection=conn)
        assert exc_info.value.existing_id == "E1"
        assert len(sample_building.connections) == 7
        assert sample_building.connections["E1"].distance == 15

    def test_remove_connection(self, sample_building: BuildingMap) -> None:
        removed = sample_building.remove_connection("E3")
        assert removed.id == "E3"
        assert not sample_building.are_connected("N2", "N4")
        assert "N4" in sample_building.nodes
        assert_graph_invariants(sample_building)

    def test_remove_unknown_connection(self, sample_building: BuildingMap) -> None:
        with pytest.raises(UnknownConnection):
            sample_building.remove_connection("E99")

    def test_zero_distance_connection_allowed(self, corridor_building: BuildingMap) -> None:
        r1, r2 = corridor_building.get_node("R1"), corridor_building.get_node("R2")
        corridor_building.insert_connection(connection=make_connection("C0", r1, r2, distance=0.0))
        route = corridor_building.shortest_route(source_id="R1", target_id="R2")
        assert route.distance == 0.0
        assert route.node_ids == ("R1", "R2")


class TestSearch:
    """Name and alias search."""

    def test_search_name_and_alias(self, sample_building: BuildingMap) -> None:
        assert [n.id for n in sample_building.search_nodes("staircase")] == ["N3", "N5"]
        assert [n.id for n in sample_building.search_nodes("201")] == ["N6"]
        assert [n.id for n in sample_building.search_nodes("elevator")] == ["N7", "N8"]

    def test_search_blank_query(self, sample_building: BuildingMap) -> None:
        assert sample_building.search_nodes("  ") == []

    def test_search_limit(self, empty_building: BuildingMap) -> None:
        """At most 8 suggestions by default."""
        for i in range(12):
            empty_building.insert_node(node=make_node(f"R{i}", i, 0))
        assert len(empty_building.search_nodes("room")) == 8
        assert len(empty_building.search_nodes("room", limit=3)) == 3

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("N4", "N4"),
            ("main entrance", "N1"),
            ("Entry", "N1"),
            ("101", "N4"),
            ("E2-01", "N6"),
            ("Cafeteria", None),
        ],
    )
    def test_find_node_by_name(self, sample_building: BuildingMap, name: str, expected: str | None) -> None:
        node = sample_building.find_node_by_name(name)
        assert (node.id if node else None) == expected


class TestStats:
    def test_sample_stats(self, sample_building: BuildingMap) -> None:
        """Walked distance excludes vertical links (15+10+8+12+10)."""
        stats = sample_building.get_stats()
        assert stats["nodes"] == 8
        assert stats["edges"] == 7
        assert stats["verticalEdges"] == 2
        assert stats["floors"] == [1, 2]
        assert stats["totalDistance"] == pytest.approx(55.0)

    def test_empty_stats(self, empty_building: BuildingMap) -> None:
        stats = empty_building.get_stats()
        assert stats == {"nodes": 0, "edges": 0, "verticalEdges": 0, "floors": [], "totalDistance": 0}


class TestPrecomputedAdjacency:
    """Adjacency loaded with a map is used only until the first mutation."""

    def test_mutation_drops_precomputed_view(self, sample_building: BuildingMap) -> None:
        view = sample_building.adjacency()
        sample_building.set_precomputed_adjacency(view)
        assert sample_building.adjacency() is view

        sample_building.remove_connection("E3")
        assert sample_building.adjacency() is not view
        assert "N2" in sample_building.adjacency()
        assert all(n.node_id != "N4" for n in sample_building.adjacency().neighbors("N2"))

    def test_stale_key_set_ignored(self, sample_building: BuildingMap) -> None:
        """A precomputed view that does not cover the node set is rebuilt."""
        partial = sample_building.adjacency().without_connection("N1", "N2")
        sample_building.set_precomputed_adjacency(partial)
        assert sample_building.adjacency() is partial

        sample_building.set_precomputed_adjacency(AdjacencyView({"N1": ()}))
        assert set(sample_building.adjacency()) == set(sample_building.nodes)
