"""Geodesic helpers: haversine distance, transport-mode weighting, display formatting."""
from __future__ import annotations

import math
from typing import Union

from tripnav.models.trip import BoundingBox, GeoPoint, TransportMode

EARTH_RADIUS_KM = 6371.0

# Travel-burden inflation per mode, not physical distance
MODE_MULTIPLIERS = {
    TransportMode.CAR: 1.0,
    TransportMode.BIKE: 1.2,
    TransportMode.FOOT: 1.5,
}


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance (Haversine) in kilometers."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlambda = math.radians(b.longitude - a.longitude)

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def mode_multiplier(mode: Union[TransportMode, str, None]) -> float:
    """Multiplier for ``mode``; anything unrecognised counts as 1.0."""
    try:
        return MODE_MULTIPLIERS[TransportMode(mode)]
    except ValueError:
        return 1.0


def apply_mode_multiplier(distance_km: float, mode: Union[TransportMode, str, None]) -> float:
    return distance_km * mode_multiplier(mode)


def effective_distance_km(origin: GeoPoint, target: GeoPoint, mode: Union[TransportMode, str]) -> float:
    return apply_mode_multiplier(haversine_km(origin, target), mode)


def format_distance(km: float) -> str:
    """
    Render a distance for display.

    Under one kilometer the value is shown in whole meters (``"350m"``),
    otherwise in kilometers with one decimal (``"2.3km"``).
    """
    if km < 1:
        return f"{round(km * 1000)}m"
    return f"{km:.1f}km"


def bounding_box_around(center: GeoPoint, radius_m: float) -> BoundingBox:
    """
    Approximate box enclosing a circle of ``radius_m`` around ``center``.

    Latitudes are clamped at the poles; longitudes wrap across the antimeridian.
    """
    radius_km = radius_m / 1000.0
    dlat = math.degrees(radius_km / EARTH_RADIUS_KM)
    cos_lat = math.cos(math.radians(center.latitude))
    if cos_lat < 1e-9:
        dlon = 180.0
    else:
        dlon = min(180.0, math.degrees(radius_km / (EARTH_RADIUS_KM * cos_lat)))

    south = max(-90.0, center.latitude - dlat)
    north = min(90.0, center.latitude + dlat)
    if dlon >= 180.0:
        west, east = -180.0, 180.0
    else:
        west = _wrap_longitude(center.longitude - dlon)
        east = _wrap_longitude(center.longitude + dlon)
    return BoundingBox(
        south_west=GeoPoint(south, west),
        north_east=GeoPoint(north, east),
    )


def _wrap_longitude(lon: float) -> float:
    if lon > 180.0:
        return lon - 360.0
    if lon < -180.0:
        return lon + 360.0
    return lon
