import pytest

from tripnav.core.geo import (
    apply_mode_multiplier,
    bounding_box_around,
    effective_distance_km,
    format_distance,
    haversine_km,
    mode_multiplier,
)
from tripnav.models.trip import GeoPoint, TransportMode


def test_haversine_is_symmetric():
    a = GeoPoint(35.68, 139.76)
    b = GeoPoint(35.69, 139.77)
    assert haversine_km(a, b) == pytest.approx(haversine_km(b, a))


def test_haversine_zero_for_same_point():
    p = GeoPoint(48.8566, 2.3522)
    assert haversine_km(p, p) == 0.0


def test_one_degree_of_longitude_on_equator():
    dist = haversine_km(GeoPoint(0, 0), GeoPoint(0, 1))
    assert dist == pytest.approx(111.19, abs=0.01)


def test_foot_mode_inflates_distance():
    origin, target = GeoPoint(0, 0), GeoPoint(0, 1)
    walking = effective_distance_km(origin, target, TransportMode.FOOT)
    assert walking == pytest.approx(111.19 * 1.5, abs=0.02)


@pytest.mark.parametrize("mode,expected", [
    (TransportMode.CAR, 1.0),
    (TransportMode.BIKE, 1.2),
    (TransportMode.FOOT, 1.5),
    ("bike", 1.2),
])
def test_mode_multipliers(mode, expected):
    assert mode_multiplier(mode) == expected


def test_unknown_mode_counts_as_car():
    assert mode_multiplier("hovercraft") == 1.0
    assert mode_multiplier(None) == 1.0
    assert apply_mode_multiplier(2.0, "hovercraft") == 2.0


def test_format_distance_under_a_kilometer_in_meters():
    assert format_distance(0.35) == "350m"
    assert format_distance(0.0) == "0m"


def test_format_distance_in_kilometers():
    assert format_distance(2.345) == "2.3km"
    assert format_distance(1.0) == "1.0km"


def test_bounding_box_contains_center():
    center = GeoPoint(35.68, 139.76)
    box = bounding_box_around(center, 5000)
    assert box.contains(center)
    assert box.south_west.latitude < center.latitude < box.north_east.latitude
    assert not box.crosses_antimeridian


def test_bounding_box_wraps_antimeridian():
    box = bounding_box_around(GeoPoint(0.0, 179.99), 5000)
    assert box.crosses_antimeridian
    assert box.contains(GeoPoint(0.0, -179.99))


def test_bounding_box_clamps_at_pole():
    box = bounding_box_around(GeoPoint(89.99, 0.0), 5000)
    assert box.north_east.latitude == 90.0
