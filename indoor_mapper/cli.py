"""Command line interface for Indoor Mapper.

Commands:
    route        Shortest and alternative routes between two places
    search       Find places by name or alias
    stats        Node/edge counts and walked distance of a map
    list         Saved maps
    import       Import a JSON map file into the store
    export       Export a saved map to a JSON file
    delete       Delete a saved map
    load-sample  Save the sample building into the store

Maps are read from the store (--map NAME) or straight from a file (--file PATH).
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from indoor_mapper.constants import RoutingConfig, StorageConfig
from indoor_mapper.core.formatting import format_distance, format_duration
from indoor_mapper.errors import IndoorMapperError, InvalidMapData, SameEndpoints, UnknownMap
from indoor_mapper.model.building_map import BuildingMap
from indoor_mapper.storage.map_store import MapStore
from indoor_mapper.storage.sample_data import SAMPLE_MAP_NAME, load_sample_map
from indoor_mapper.storage.serialization import map_from_data

logger = logging.getLogger(__name__)


def _load_building(args: argparse.Namespace, store: MapStore) -> BuildingMap:
    if args.file:
        try:
            with open(args.file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidMapData(f"Failed to parse JSON: {e}") from e
        return map_from_data(data=data)
    building = store.load(name=args.map)
    if building is None:
        raise UnknownMap(args.map)
    return building


def _cmd_route(args: argparse.Namespace, store: MapStore) -> int:
    building = _load_building(args, store)
    source = building.find_node_by_name(args.source)
    target = building.find_node_by_name(args.target)
    if source is None or target is None:
        missing = args.source if source is None else args.target
        print(f"Unknown location: {missing}")
        return 1

    try:
        routes = building.find_routes(source_id=source.id, target_id=target.id, k=args.k)
    except SameEndpoints:
        print("Start and end locations are the same")
        return 2

    if not routes:
        print("No path found between these locations")
        return 1

    for i, route in enumerate(routes, start=1):
        names = " -> ".join(f"{n.name} (L{n.floor})" for n in route.nodes)
        print(f"Route {i}: {format_distance(route.distance)}, ~{format_duration(route.distance)}")
        print(f"  {names}")
    return 0


def _cmd_search(args: argparse.Namespace, store: MapStore) -> int:
    building = _load_building(args, store)
    for node in building.search_nodes(query=args.query):
        aliases = f" [{', '.join(node.aliases)}]" if node.aliases else ""
        print(f"{node.id}\t{node.name}{aliases}\t{node.kind}\tL{node.floor}")
    return 0


def _cmd_stats(args: argparse.Namespace, store: MapStore) -> int:
    building = _load_building(args, store)
    stats = building.get_stats()
    print(f"{building.name}")
    print(f"  Nodes: {stats['nodes']}")
    print(f"  Edges: {stats['edges']} ({stats['verticalEdges']} vertical)")
    print(f"  Floors: {', '.join(str(f) for f in stats['floors'])}")
    print(f"  Walked distance: {format_distance(stats['totalDistance'])}")
    return 0


def _cmd_list(args: argparse.Namespace, store: MapStore) -> int:
    for entry in store.list_maps():
        print(f"{entry['name']}\t{entry['savedAt']}")
    print(f"Storage used: {store.storage_size_kb()} KB")
    return 0


def _cmd_import(args: argparse.Namespace, store: MapStore) -> int:
    name, building = store.import_file(path=args.path)
    print(f'Successfully imported "{name}" with {len(building.nodes)} nodes and {len(building.connections)} edges')
    return 0


def _cmd_export(args: argparse.Namespace, store: MapStore) -> int:
    out_path = store.export_file(name=args.name, directory=args.out)
    print(f"Exported to {out_path}")
    return 0


def _cmd_delete(args: argparse.Namespace, store: MapStore) -> int:
    if not store.delete(name=args.name):
        print(f"No saved map named '{args.name}'")
        return 1
    return 0


def _cmd_load_sample(args: argparse.Namespace, store: MapStore) -> int:
    store.save(name=SAMPLE_MAP_NAME, building=load_sample_map())
    print(f"Saved '{SAMPLE_MAP_NAME}'")
    return 0


def _add_map_source(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--map", help="Name of a saved map")
    group.add_argument("--file", help="Path to a map JSON file")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser("indoor-mapper", description="Indoor routing over recorded building maps")
    ap.add_argument("--store", default=str(StorageConfig.STORE_DIR), help="Map store directory")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log engine activity")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("route", help="Find routes between two places")
    _add_map_source(p)
    p.add_argument("source", help="Start place (name, alias, or ID)")
    p.add_argument("target", help="Destination place (name, alias, or ID)")
    p.add_argument("-k", type=int, default=RoutingConfig.DEFAULT_K, help="Maximum number of routes")
    p.set_defaults(func=_cmd_route)

    p = sub.add_parser("search", help="Find places by name or alias")
    _add_map_source(p)
    p.add_argument("query")
    p.set_defaults(func=_cmd_search)

    p = sub.add_parser("stats", help="Show map statistics")
    _add_map_source(p)
    p.set_defaults(func=_cmd_stats)

    p = sub.add_parser("list", help="List saved maps")
    p.set_defaults(func=_cmd_list)

    p = sub.add_parser("import", help="Import a JSON map file")
    p.add_argument("path")
    p.set_defaults(func=_cmd_import)

    p = sub.add_parser("export", help="Export a saved map")
    p.add_argument("name")
    p.add_argument("--out", default=".", help="Output directory")
    p.set_defaults(func=_cmd_export)

    p = sub.add_parser("delete", help="Delete a saved map")
    p.add_argument("name")
    p.set_defaults(func=_cmd_delete)

    p = sub.add_parser("load-sample", help="Save the sample building")
    p.set_defaults(func=_cmd_load_sample)

    return ap


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    store = MapStore(directory=Path(args.store))
    try:
        return args.func(args, store)
    except (IndoorMapperError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
