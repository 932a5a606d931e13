"""
Domain types for trip orchestration.

These are immutable value objects shared between the services. The HTTP
layer converts them to pydantic schemas in ``tripnav.schemas.trip``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from tripnav.core.exceptions import InvalidCoordinateError
from tripnav.core.validation import validate_latitude, validate_longitude


class TransportMode(str, Enum):
    """How the user travels; drives route profile and distance weighting."""
    CAR = "car"
    BIKE = "bike"
    FOOT = "foot"


class CrowdLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class BestTime(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class ActivityType(str, Enum):
    DINING = "dining"
    SIGHTSEEING = "sightseeing"
    SHOPPING = "shopping"
    TOUR = "tour"


class Severity(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


# Presentation only; never used for ranking
SEVERITY_COLORS = {
    Severity.HIGH: "#ef4444",
    Severity.MODERATE: "#f59e0b",
    Severity.LOW: "#22c55e",
}


@dataclass(frozen=True)
class GeoPoint:
    """WGS84 coordinate; out-of-range values raise InvalidCoordinateError."""
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "latitude", validate_latitude(self.latitude))
        object.__setattr__(self, "longitude", validate_longitude(self.longitude))


@dataclass(frozen=True)
class BoundingBox:
    """Map viewport. ``south_west.longitude > north_east.longitude`` wraps the antimeridian."""
    south_west: GeoPoint
    north_east: GeoPoint

    def __post_init__(self) -> None:
        if self.south_west.latitude > self.north_east.latitude:
            raise InvalidCoordinateError(
                "Bounding box south edge is north of its north edge",
                details={
                    "south": self.south_west.latitude,
                    "north": self.north_east.latitude,
                },
            )

    @property
    def crosses_antimeridian(self) -> bool:
        return self.south_west.longitude > self.north_east.longitude

    def contains(self, point: GeoPoint) -> bool:
        if not self.south_west.latitude <= point.latitude <= self.north_east.latitude:
            return False
        west, east = self.south_west.longitude, self.north_east.longitude
        if self.crosses_antimeridian:
            return point.longitude >= west or point.longitude <= east
        return west <= point.longitude <= east


@dataclass(frozen=True)
class Place:
    """A geocoded place or point of interest returned by the search provider."""
    id: str
    display_name: str
    location: GeoPoint
    category: str
    address: Optional[str] = None
    # Provider-supplied scoring, when the source has it
    rating: Optional[float] = None
    crowd_level: Optional[CrowdLevel] = None
    best_time: Optional[BestTime] = None


@dataclass(frozen=True)
class Route:
    path: tuple[GeoPoint, ...]
    duration_minutes: int
    distance_km: float
    transport_mode: TransportMode


@dataclass(frozen=True)
class Recommendation:
    place: Place
    rating: float
    crowd_level: CrowdLevel
    best_time: BestTime
    effective_distance_km: Optional[float] = None

    @property
    def distance_label(self) -> Optional[str]:
        if self.effective_distance_km is None:
            return None
        from tripnav.core.geo import format_distance
        return format_distance(self.effective_distance_km)


@dataclass(frozen=True)
class ItineraryItem:
    time_label: str
    activity: str
    activity_type: ActivityType
    duration_label: str
    starts_at: datetime
    matched_place: Optional[Place] = None

    def is_past(self, now: datetime) -> bool:
        """Whether the item has already started at ``now``; not stored, tied to wall clock."""
        return self.starts_at < now


@dataclass(frozen=True)
class TrafficIncident:
    id: str
    location: GeoPoint
    severity: Severity
    description: str

    @property
    def color(self) -> str:
        return SEVERITY_COLORS[self.severity]


@dataclass(frozen=True)
class TripContext:
    """Read-only snapshot of a session's trip state."""
    user_location: Optional[GeoPoint] = None
    selected_place: Optional[Place] = None
    active_route: Optional[Route] = None
    transport_mode: TransportMode = TransportMode.CAR
    search_results: tuple[Place, ...] = field(default_factory=tuple)
    generation: int = 0
