"""Configuration constants for Indoor Mapper.

All configurable parameters are centralized here for easy tuning.

Classes:
    EntityPrefixes: ID prefixes for generated nodes and connections
    NodeKinds: Point-of-interest kinds and vertical-circulation kinds
    ProjectionConfig: Local tangent-plane projection parameters
    RecordingConfig: Trajectory recording thresholds
    VerticalConfig: Vertical link synthesis parameters
    FloorConfig: Floor levels offered to collaborators
    RoutingConfig: Route search defaults and walking speed
    StorageConfig: Map store file layout and export format
"""

from pathlib import Path

# Package root directory (where indoor_mapper/ lives)
PACKAGE_DIR = Path(__file__).parent

# Project root directory (parent of indoor_mapper/)
PROJECT_ROOT = PACKAGE_DIR.parent

# Default directory for the JSON map store
OUTPUT_DIR = PROJECT_ROOT / "output"


class EntityPrefixes:
    """ID prefixes for graph entities."""

    NODE = "N"
    CONNECTION = "E"
    VERTICAL = "EV"


class NodeKinds:
    """Point-of-interest kinds."""

    ROOM = "room"
    JUNCTION = "junction"
    STAIRS = "stairs"
    LIFT = "lift"
    ENTRANCE = "entrance"
    TOILET = "toilet"
    OTHER = "other"

    ALL = [ROOM, JUNCTION, STAIRS, LIFT, ENTRANCE, TOILET, OTHER]

    # Kinds that get linked across floors by name
    VERTICAL = [STAIRS, LIFT]
    assert set(VERTICAL) <= set(ALL)

    DEFAULT = ROOM

    @staticmethod
    def is_vertical(kind: str) -> bool:
        """Check if kind is a vertical-circulation kind (stairs or lift)."""
        return kind in NodeKinds.VERTICAL


class ProjectionConfig:
    """Local tangent-plane projection parameters.

    The equirectangular approximation is accurate for displacements of a few
    kilometers around the origin, which covers any single building.
    """

    # At equator, 1 degree of latitude or longitude ≈ 111,320 meters
    # (Earth circumference 40,075 km / 360 degrees)
    METERS_PER_DEGREE = 111320.0


class RecordingConfig:
    """Trajectory recording thresholds."""

    # Samples closer than this to the last accepted point are GPS jitter
    MIN_POINT_DIST_M = 1.0

    # Planar radius within which a sample "touches" a point of interest
    NODE_PROXIMITY_M = 5.0

    # Synthesized connection distances are rounded to this many decimals
    DISTANCE_DECIMALS = 1

    # Minimum touched nodes / accepted points for a session to produce edges
    MIN_TOUCHED_NODES = 2
    MIN_POINTS = 2


class VerticalConfig:
    """Vertical link synthesis parameters."""

    # Synthetic cost per floor of difference for stairs/lift links
    FLOOR_HEIGHT_M = 4.0

    # Live z change (vs. z at last floor change) that suggests a floor change
    Z_THRESHOLD_M = 2.0


class FloorConfig:
    """Floor levels offered to collaborators (the engine accepts any int)."""

    FLOORS = [-1, 1, 2, 3, 4, 5, 6]
    DEFAULT_FLOOR = 1
    assert DEFAULT_FLOOR in FLOORS


class RoutingConfig:
    """Route search defaults."""

    DEFAULT_K = 3

    # Walking speed for duration estimates (m/s)
    WALKING_SPEED_MPS = 1.4

    # Search suggestions shown for a query
    MAX_SEARCH_RESULTS = 8


class StorageConfig:
    """Map store file layout and export format."""

    STORE_DIR = OUTPUT_DIR / "indoor_mapper" / "maps"
    MAPS_LIST_FILE = "maps_list.json"
    MAP_FILE_SUFFIX = ".json"
    EXPORT_DATE_FORMAT = "%Y-%m-%d"

    # Pattern stripped from imported file stems ("Building-2024-01-31")
    EXPORT_DATE_SUFFIX_PATTERN = r"-\d{4}-\d{2}-\d{2}$"
