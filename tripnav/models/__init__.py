"""
Domain models for the trip navigator.
"""

from .trip import (
    ActivityType,
    BestTime,
    BoundingBox,
    CrowdLevel,
    GeoPoint,
    ItineraryItem,
    Place,
    Recommendation,
    Route,
    SEVERITY_COLORS,
    Severity,
    TrafficIncident,
    TransportMode,
    TripContext,
)
from .conditions import AmbientConditions, WeatherCondition

__all__ = [
    "ActivityType",
    "AmbientConditions",
    "BestTime",
    "BoundingBox",
    "CrowdLevel",
    "GeoPoint",
    "ItineraryItem",
    "Place",
    "Recommendation",
    "Route",
    "SEVERITY_COLORS",
    "Severity",
    "TrafficIncident",
    "TransportMode",
    "TripContext",
    "WeatherCondition",
]
