from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..common.validators import require_float, require_in_range
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Coordinates:
    """A reported position in decimal degrees (WGS84)."""

    latitude: float
    longitude: float

    @classmethod
    def parse(cls, latitude: Any, longitude: Any) -> "Coordinates":
        """Validate raw request values; the geofence math itself never checks ranges."""

        if latitude is None or longitude is None:
            raise ValidationError("Location (latitude, longitude) is required")
        lat = require_in_range(require_float(latitude, "Latitude"), "Latitude", -90.0, 90.0)
        lon = require_in_range(require_float(longitude, "Longitude"), "Longitude", -180.0, 180.0)
        return cls(latitude=lat, longitude=lon)


@dataclass(frozen=True)
class GeofenceResult:
    inside: bool
    distance_m: float
    radius_m: float

    def to_dict(self) -> dict:
        return {
            "inside": self.inside,
            "distance_m": round(self.distance_m, 2),
            "radius_m": self.radius_m,
        }
