import pytest

from tripnav.core.exceptions import (
    ErrorCode,
    InvalidCoordinateError,
    InvalidSearchRadiusError,
    TripPlannerException,
)
from tripnav.core.validation import (
    sanitize_query,
    validate_latitude,
    validate_longitude,
    validate_radius,
)
from tripnav.models.trip import BoundingBox, GeoPoint


def test_latitude_bounds_are_inclusive():
    assert validate_latitude(90) == 90.0
    assert validate_latitude(-90) == -90.0


def test_latitude_out_of_range():
    with pytest.raises(InvalidCoordinateError) as exc_info:
        validate_latitude(91.0)
    assert exc_info.value.error_code == ErrorCode.INVALID_COORDINATE
    assert exc_info.value.status_code == 422
    assert "between -90 and 90" in exc_info.value.message


def test_longitude_out_of_range():
    with pytest.raises(InvalidCoordinateError):
        validate_longitude(-180.5)


def test_geo_point_rejects_invalid_coordinates():
    with pytest.raises(InvalidCoordinateError):
        GeoPoint(100.0, 0.0)


def test_bounding_box_rejects_inverted_latitudes():
    with pytest.raises(InvalidCoordinateError):
        BoundingBox(GeoPoint(10, 0), GeoPoint(5, 1))


def test_radius_validation():
    assert validate_radius(5000) == 5000
    with pytest.raises(InvalidSearchRadiusError):
        validate_radius(0)
    with pytest.raises(InvalidSearchRadiusError) as exc_info:
        validate_radius(60000)
    assert isinstance(exc_info.value, TripPlannerException)
    assert exc_info.value.error_code == ErrorCode.INVALID_SEARCH_RADIUS
    assert exc_info.value.status_code == 422
    assert exc_info.value.details == {"radius_m": 60000}


def test_sanitize_query_collapses_whitespace():
    assert sanitize_query("  eiffel    tower \n") == "eiffel tower"
    assert sanitize_query(None) == ""
    assert len(sanitize_query("x" * 500)) == 200
