"""MapStore - Named-map persistence in a directory of JSON files.

Each map is stored as "<name>-<digest>.json" in the persisted shape, plus a
"maps_list.json" index of {name, savedAt} entries. Import/export use the
denormalized export shape and go through the same normalization as loads.
"""

import hashlib
import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from indoor_mapper.constants import StorageConfig
from indoor_mapper.errors import InvalidMapData, UnknownMap
from indoor_mapper.model.building_map import BuildingMap
from indoor_mapper.storage.serialization import map_from_data, normalize_map_data, to_export

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _safe_filename(name: str) -> str:
    """Map name -> file stem safe on common filesystems."""
    return re.sub(r"[^\w\-. ()]+", "_", name).strip() or "map"


def _store_stem(name: str) -> str:
    """Map name -> store file stem: readable prefix plus a digest of the exact name."""
    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:12]
    return f"{_safe_filename(name)}-{digest}"


class MapStore:
    """Key-value store of named building maps.

    Example:
        store = MapStore(directory="output/maps")
        store.save(name="Engineering Block", building=building)
        building = store.load(name="Engineering Block")
    """

    def __init__(self, directory: PathLike = StorageConfig.STORE_DIR) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    # =========================================================================
    # Index
    # =========================================================================

    @property
    def _list_path(self) -> Path:
        return self.directory / StorageConfig.MAPS_LIST_FILE

    def _map_path(self, name: str) -> Path:
        return self.directory / f"{_store_stem(name)}{StorageConfig.MAP_FILE_SUFFIX}"

    def list_maps(self) -> list[dict[str, str]]:
        """Saved maps as [{name, savedAt}], sorted by name."""
        if not self._list_path.exists():
            return []
        with open(self._list_path, "r", encoding="utf-8") as f:
            entries = json.load(f)
        return sorted(entries, key=lambda e: e["name"])

    def map_names(self) -> list[str]:
        return [entry["name"] for entry in self.list_maps()]

    def _write_list(self, entries: list[dict[str, str]]) -> None:
        with open(self._list_path, "w", encoding="utf-8") as f:
            json.dump(entries, f, indent=2)

    def exists(self, name: str) -> bool:
        return name in self.map_names()

    # =========================================================================
    # Save / Load / Delete
    # =========================================================================

    def save(self, name: str, building: BuildingMap) -> str:
        """Persist a map under name, replacing any previous version.

        Returns:
            The savedAt timestamp (ISO format).

        Raises:
            InvalidMapData: If name is blank or its file would collide with
                another saved map.
        """
        saved_at = datetime.now().isoformat()
        data = building.to_dict()
        data["name"] = name
        data["savedAt"] = saved_at
        self._write_data(name=name, data=data)
        return saved_at

    def _write_data(self, name: str, data: dict[str, Any]) -> None:
        if not name.strip():
            raise InvalidMapData("Map name must not be empty")
        stem = _store_stem(name).casefold()
        for other in self.map_names():
            if other != name and _store_stem(other).casefold() == stem:
                raise InvalidMapData(f"Map name '{name}' collides with saved map '{other}'")

        saved_at = data.setdefault("savedAt", datetime.now().isoformat())
        with open(self._map_path(name), "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)

        entries = [e for e in self.list_maps() if e["name"] != name]
        entries.append({"name": name, "savedAt": saved_at})
        self._write_list(entries)
        logger.info(f"Saved map '{name}'")

    def load_data(self, name: str) -> Optional[dict[str, Any]]:
        """Raw persisted data of a map, or None if not saved."""
        path = self._map_path(name)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def load(self, name: str) -> Optional[BuildingMap]:
        """Load a map by name, or None if not saved."""
        data = self.load_data(name=name)
        if data is None:
            return None
        return map_from_data(data=data, name=name)

    def delete(self, name: str) -> bool:
        """Delete a map. Returns False if it was not saved."""
        path = self._map_path(name)
        existed = path.exists()
        if existed:
            path.unlink()
        entries = self.list_maps()
        remaining = [e for e in entries if e["name"] != name]
        if len(remaining) != len(entries):
            self._write_list(remaining)
            existed = True
        if existed:
            logger.info(f"Deleted map '{name}'")
        return existed

    def storage_size_kb(self) -> float:
        """Total size of all store files in KB (one decimal)."""
        total = sum(p.stat().st_size for p in self.directory.glob("*.json"))
        return round(total / 1024, 1)

    # =========================================================================
    # File import / export
    # =========================================================================

    def unique_name(self, name: str) -> str:
        """Return name, or "name (n)" with the first n that is not taken."""
        existing = set(self.map_names())
        final = name
        counter = 1
        while final in existing:
            final = f"{name} ({counter})"
            counter += 1
        return final

    def import_file(self, path: PathLike) -> tuple[str, BuildingMap]:
        """Import a JSON map file (persisted or export shape).

        The map name comes from metadata.building, else from the file stem
        with a trailing "-YYYY-MM-DD" removed, and is made unique.

        Returns:
            Tuple of (stored name, loaded map).

        Raises:
            InvalidMapData: If the file is not JSON or has an unusable shape.
        """
        path = Path(path)
        if path.suffix.lower() != ".json":
            raise InvalidMapData("Please upload a JSON file")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidMapData(f"Failed to parse JSON: {e}") from e

        normalized = normalize_map_data(data)
        base_name = normalized["name"] or re.sub(StorageConfig.EXPORT_DATE_SUFFIX_PATTERN, "", path.stem)
        name = self.unique_name(base_name)

        normalized["name"] = name
        normalized["metadata"] = {
            **normalized["metadata"],
            "importedAt": datetime.now().isoformat(),
            "originalFile": path.name,
        }
        self._write_data(name=name, data=normalized)

        building = map_from_data(data=normalized, name=name)
        logger.info(f"Imported '{name}' with {len(building.nodes)} nodes and {len(building.connections)} edges")
        return name, building

    def export_file(self, name: str, directory: PathLike) -> Path:
        """Export a saved map to "<directory>/<name>-<YYYY-MM-DD>.json".

        Raises:
            UnknownMap: If no map is saved under name.
        """
        building = self.load(name=name)
        if building is None:
            raise UnknownMap(name)

        now = datetime.now()
        out_dir = Path(directory)
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = out_dir / f"{_safe_filename(name)}-{now.strftime(StorageConfig.EXPORT_DATE_FORMAT)}.json"
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(to_export(building=building, exported_at=now), f, indent=2)
        logger.info(f"Exported '{name}' to {out_path}")
        return out_path
