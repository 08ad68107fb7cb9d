"""Core foundation classes for positioning.

- CoordinateProjector / GeoOrigin: geodetic -> local Cartesian frame
- PositionTracker / GeoSample: live position, origin fixing, floor hints
- format_distance / format_duration: display helpers for routes
"""

from indoor_mapper.core.formatting import format_distance, format_duration
from indoor_mapper.core.position_tracker import GeoSample, PositionTracker
from indoor_mapper.core.projector import CoordinateProjector, GeoOrigin

__all__ = [
    "CoordinateProjector",
    "GeoOrigin",
    "GeoSample",
    "PositionTracker",
    "format_distance",
    "format_duration",
]
