"""PositionTracker - Live position in the local frame.

Consumes geodetic samples from an external position source (device sensor
or simulator). The first sample fixes the origin of the session's local
frame; every sample updates the live local position.

Also tracks the active floor and suggests a floor change when the live
altitude has drifted more than Z_THRESHOLD_M since the last change.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from indoor_mapper.constants import FloorConfig, VerticalConfig
from indoor_mapper.core.projector import CoordinateProjector, GeoOrigin
from indoor_mapper.model.local_point import LocalPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoSample:
    """One fix from the position source.

    Attributes:
        lat: Latitude in decimal degrees
        lng: Longitude in decimal degrees
        alt: Altitude in meters, None if the source has no altitude
        accuracy: Horizontal accuracy in meters, None if unknown
    """

    lat: float
    lng: float
    alt: Optional[float] = None
    accuracy: Optional[float] = None


class PositionTracker:
    """Projects incoming samples and keeps the live position and floor.

    Example:
        tracker = PositionTracker()
        point = tracker.update(GeoSample(lat=1.3521, lng=103.8198, alt=12.0))
        assert point.xyz == (0.0, 0.0, 0.0)
    """

    def __init__(self, origin: Optional[GeoOrigin] = None, floor: int = FloorConfig.DEFAULT_FLOOR) -> None:
        self._origin = origin
        self.position: Optional[LocalPoint] = None
        self.last_sample: Optional[GeoSample] = None
        self.floor = floor
        self.last_floor_z = 0.0
        self.is_active = False

    @property
    def origin(self) -> Optional[GeoOrigin]:
        """Origin of the local frame (None until the first sample)."""
        return self._origin

    def start(self) -> None:
        self.is_active = True

    def stop(self) -> None:
        self.is_active = False

    def update(self, sample: GeoSample) -> LocalPoint:
        """Consume one sample and return it projected into the local frame.

        The first sample of a session becomes the origin; the origin is
        never replaced afterwards.
        """
        if self._origin is None:
            self._origin = CoordinateProjector.origin_from_fix(lat=sample.lat, lng=sample.lng, alt=sample.alt)
            logger.info(f"Origin fixed at lat={sample.lat:.6f}, lng={sample.lng:.6f}")

        self.is_active = True
        self.last_sample = sample
        self.position = CoordinateProjector.project(
            lat=sample.lat,
            lng=sample.lng,
            alt=sample.alt,
            origin=self._origin,
        )
        return self.position

    @property
    def floor_change_suggested(self) -> bool:
        """True when live z has drifted more than Z_THRESHOLD_M since the last floor change."""
        if self.position is None:
            return False
        return abs(self.position.z - self.last_floor_z) > VerticalConfig.Z_THRESHOLD_M

    def change_floor(self, floor: int) -> None:
        """Set the active floor and remember the current z as its reference."""
        self.floor = floor
        self.last_floor_z = self.position.z if self.position is not None else 0.0
        logger.info(f"Active floor changed to {floor} (reference z={self.last_floor_z:.1f}m)")
