from __future__ import annotations

import math
from dataclasses import dataclass

import pytest

from src.attendify.core.exceptions import ValidationError
from src.attendify.geo.geofence import distance_meters, evaluate_geofence, within_geofence
from src.attendify.geo.model import Coordinates

# one degree of latitude on the 6,371 km sphere
METERS_PER_DEGREE = 2 * math.pi * 6_371_000.0 / 360


@dataclass(frozen=True)
class Fence:
    latitude: float
    longitude: float
    radius_m: float


def test_distance_to_self_is_zero():
    assert distance_meters(12.9716, 77.5946, 12.9716, 77.5946) == 0.0


def test_distance_is_symmetric():
    a = (12.9716, 77.5946)
    b = (13.0827, 80.2707)
    assert distance_meters(*a, *b) == pytest.approx(distance_meters(*b, *a))


def test_one_degree_of_latitude_at_equator():
    assert distance_meters(0.0, 0.0, 1.0, 0.0) == pytest.approx(METERS_PER_DEGREE, rel=1e-9)


def test_antipodal_points_do_not_blow_up():
    d = distance_meters(0.0, 0.0, 0.0, 180.0)
    assert d == pytest.approx(math.pi * 6_371_000.0, rel=1e-9)


def test_point_about_50m_north_is_inside_50m_fence():
    fence = Fence(latitude=0.0, longitude=0.0, radius_m=50.0)
    observed = Coordinates(latitude=49.5 / METERS_PER_DEGREE, longitude=0.0)

    result = evaluate_geofence(observed, fence)

    assert result.inside is True
    assert result.distance_m == pytest.approx(49.5, abs=1e-6)
    assert result.radius_m == 50.0


def test_point_about_100m_north_is_outside_50m_fence():
    fence = Fence(latitude=0.0, longitude=0.0, radius_m=50.0)
    observed = Coordinates(latitude=0.00090, longitude=0.0)

    result = evaluate_geofence(observed, fence)

    assert result.inside is False
    assert result.distance_m == pytest.approx(100.0, abs=0.2)


def test_0_00045_degrees_north_is_just_outside_50m_fence():
    fence = Fence(latitude=0.0, longitude=0.0, radius_m=50.0)
    observed = Coordinates(latitude=0.00045, longitude=0.0)

    result = evaluate_geofence(observed, fence)

    assert result.inside is False
    assert result.distance_m == pytest.approx(50.04, abs=0.01)
    assert within_geofence(observed, fence) is False

def test_boundary_distance_counts_as_inside():
    observed = Coordinates(latitude=0.0003, longitude=0.0)
    exact = distance_meters(0.0003, 0.0, 0.0, 0.0)

    assert within_geofence(observed, Fence(0.0, 0.0, exact)) is True


def test_result_to_dict_rounds_distance():
    result = evaluate_geofence(Coordinates(0.0, 0.0), Fence(0.0, 0.0003, 50.0))
    data = result.to_dict()

    assert data["inside"] is True
    assert data["radius_m"] == 50.0
    assert data["distance_m"] == round(result.distance_m, 2)


def test_coordinates_parse_accepts_numeric_strings():
    c = Coordinates.parse("12.5", "-77.25")
    assert c == Coordinates(latitude=12.5, longitude=-77.25)


@pytest.mark.parametrize(
    "lat, lon",
    [
        (None, 10.0),
        (10.0, None),
        (91.0, 0.0),
        (-90.5, 0.0),
        (0.0, 180.1),
        ("abc", 0.0),
        (float("nan"), 0.0),
        (True, 0.0),
    ],
)
def test_coordinates_parse_rejects_bad_values(lat, lon):
    with pytest.raises(ValidationError):
        Coordinates.parse(lat, lon)
