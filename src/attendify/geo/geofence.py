from __future__ import annotations

import math
from typing import Protocol

from ..core.constants import EARTH_RADIUS_M
from .model import Coordinates, GeofenceResult


class Fence(Protocol):
    """Anything with a centre and an acceptance radius (e.g. ClassLocation)."""

    latitude: float
    longitude: float
    radius_m: float


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters (haversine, spherical earth)."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # rounding can push a a hair outside [0, 1] for (near) antipodal points
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))


def within_geofence(observed: Coordinates, fence: Fence) -> bool:
    """Inside when the distance to the centre is at most the radius (boundary included)."""

    distance = distance_meters(observed.latitude, observed.longitude, fence.latitude, fence.longitude)
    return distance <= float(fence.radius_m)


def evaluate_geofence(observed: Coordinates, fence: Fence) -> GeofenceResult:
    distance = distance_meters(observed.latitude, observed.longitude, fence.latitude, fence.longitude)
    return GeofenceResult(
        inside=within_geofence(observed, fence),
        distance_m=distance,
        radius_m=float(fence.radius_m),
    )
