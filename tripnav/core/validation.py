"""
Input validation utilities for coordinates and search parameters
"""
from tripnav.core.exceptions import InvalidCoordinateError, InvalidSearchRadiusError


def validate_latitude(lat: float) -> float:
    """
    Validate latitude coordinate

    Args:
        lat: Latitude value

    Returns:
        Validated latitude

    Raises:
        InvalidCoordinateError: If latitude is out of range
    """
    if lat is None or not -90.0 <= lat <= 90.0:
        raise InvalidCoordinateError(
            f"Latitude {lat} out of range (must be between -90 and 90)",
            details={"latitude": lat},
        )

    return float(lat)


def validate_longitude(lon: float) -> float:
    """
    Validate longitude coordinate

    Args:
        lon: Longitude value

    Returns:
        Validated longitude

    Raises:
        InvalidCoordinateError: If longitude is out of range
    """
    if lon is None or not -180.0 <= lon <= 180.0:
        raise InvalidCoordinateError(
            f"Longitude {lon} out of range (must be between -180 and 180)",
            details={"longitude": lon},
        )

    return float(lon)


def validate_radius(radius_m: int, max_radius_m: int = 50000) -> int:
    """
    Validate search radius in meters

    Raises:
        InvalidSearchRadiusError: If radius is not positive or exceeds the maximum
    """
    if radius_m <= 0:
        raise InvalidSearchRadiusError("Radius must be positive", radius_m)

    if radius_m > max_radius_m:
        raise InvalidSearchRadiusError(f"Radius too large (max {max_radius_m}m)", radius_m)

    return radius_m


def sanitize_query(query: str, max_length: int = 200) -> str:
    """Trim and collapse whitespace in a free-text search query."""
    cleaned = " ".join((query or "").split())
    return cleaned[:max_length]
