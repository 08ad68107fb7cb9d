"""Serialization boundary and map persistence.

- normalize_map_data / map_from_data: accept every historical map shape
- to_persisted / to_export: persisted and denormalized export shapes
- MapStore: named maps in a directory of JSON files
- load_sample_map: the two-floor sample building
"""

from indoor_mapper.storage.map_store import MapStore
from indoor_mapper.storage.sample_data import SAMPLE_MAP_NAME, load_sample_map, sample_map_data
from indoor_mapper.storage.serialization import (
    map_from_data,
    normalize_map_data,
    to_export,
    to_persisted,
)

__all__ = [
    "MapStore",
    "SAMPLE_MAP_NAME",
    "load_sample_map",
    "sample_map_data",
    "map_from_data",
    "normalize_map_data",
    "to_export",
    "to_persisted",
]
