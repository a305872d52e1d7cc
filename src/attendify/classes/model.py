from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ClassLocation:
    """A class and its registered geofence (centre + radius in meters).

    ``latitude``/``longitude`` are ``None`` until a location is registered.
    """

    class_id: int
    name: str
    latitude: Optional[float]
    longitude: Optional[float]
    radius_m: float

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> dict:
        return {
            "class_id": self.class_id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radius_m": self.radius_m,
        }
