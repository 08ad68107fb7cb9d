"""Projection of geodetic fixes into the local building frame.

Uses an equirectangular local tangent-plane approximation anchored at a
fixed origin:

    y = (lat - origin.lat) * 111320
    x = (lng - origin.lng) * 111320 * cos(origin.lat)
    z = alt - origin.alt

The approximation is valid for displacements of a few kilometers around
the origin. Buildings are far smaller than that, so the error is accepted.
"""

from dataclasses import dataclass
from math import cos, radians
from typing import Any, Optional

from indoor_mapper.constants import ProjectionConfig
from indoor_mapper.errors import MissingOrigin
from indoor_mapper.model.local_point import LocalPoint


@dataclass(frozen=True)
class GeoOrigin:
    """Anchor of a local frame: the first geodetic fix of a session.

    Attributes:
        lat: Latitude in decimal degrees (WGS84)
        lng: Longitude in decimal degrees (WGS84)
        alt: Altitude in meters (0 when the fix had none)
    """

    lat: float
    lng: float
    alt: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng, "alt": self.alt}

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> Optional["GeoOrigin"]:
        """Create GeoOrigin from dictionary, or None when data is empty."""
        if not data or data.get("lat") is None or data.get("lng") is None:
            return None
        return cls(lat=float(data["lat"]), lng=float(data["lng"]), alt=float(data.get("alt") or 0.0))


class CoordinateProjector:
    """Static methods for geodetic -> local frame conversion."""

    METERS_PER_DEGREE = ProjectionConfig.METERS_PER_DEGREE

    @staticmethod
    def project(
        lat: float,
        lng: float,
        alt: Optional[float],
        origin: Optional[GeoOrigin],
    ) -> LocalPoint:
        """Project a geodetic fix into the local frame of origin.

        Args:
            lat: Latitude of the fix (decimal degrees)
            lng: Longitude of the fix (decimal degrees)
            alt: Altitude of the fix in meters, None treated as 0
            origin: Anchor of the local frame

        Returns:
            LocalPoint with x east, y north, z up in meters.

        Raises:
            MissingOrigin: If no origin has been established.
        """
        if origin is None:
            raise MissingOrigin("Cannot project a fix before an origin has been established")

        m = CoordinateProjector.METERS_PER_DEGREE
        y = (lat - origin.lat) * m
        x = (lng - origin.lng) * m * cos(radians(origin.lat))
        z = (alt or 0.0) - origin.alt
        return LocalPoint(x=x, y=y, z=z)

    @staticmethod
    def origin_from_fix(lat: float, lng: float, alt: Optional[float]) -> GeoOrigin:
        """Create an origin from a geodetic fix (missing altitude becomes 0)."""
        return GeoOrigin(lat=lat, lng=lng, alt=alt or 0.0)
