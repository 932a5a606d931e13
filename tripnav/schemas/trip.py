"""Request/response schemas for the trip endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from tripnav.models.conditions import AmbientConditions, WeatherCondition
from tripnav.models.trip import (
    ActivityType,
    BestTime,
    BoundingBox,
    CrowdLevel,
    GeoPoint,
    ItineraryItem,
    Place,
    Recommendation,
    Route,
    Severity,
    TrafficIncident,
    TransportMode,
    TripContext,
)


# ============================================================================
# Shared models
# ============================================================================

class GeoPointModel(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    @classmethod
    def from_domain(cls, point: GeoPoint) -> "GeoPointModel":
        return cls(latitude=point.latitude, longitude=point.longitude)

    def to_domain(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)


class PlaceModel(BaseModel):
    id: str
    display_name: str
    location: GeoPointModel
    category: str
    address: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0.0, le=5.0)
    crowd_level: Optional[CrowdLevel] = None
    best_time: Optional[BestTime] = None

    @classmethod
    def from_domain(cls, place: Place) -> "PlaceModel":
        return cls(
            id=place.id,
            display_name=place.display_name,
            location=GeoPointModel.from_domain(place.location),
            category=place.category,
            address=place.address,
            rating=place.rating,
            crowd_level=place.crowd_level,
            best_time=place.best_time,
        )

    def to_domain(self) -> Place:
        return Place(
            id=self.id,
            display_name=self.display_name,
            location=self.location.to_domain(),
            category=self.category,
            address=self.address,
            rating=self.rating,
            crowd_level=self.crowd_level,
            best_time=self.best_time,
        )


class RouteModel(BaseModel):
    path: List[GeoPointModel]
    duration_minutes: int
    distance_km: float
    transport_mode: TransportMode

    @classmethod
    def from_domain(cls, route: Route) -> "RouteModel":
        return cls(
            path=[GeoPointModel.from_domain(p) for p in route.path],
            duration_minutes=route.duration_minutes,
            distance_km=route.distance_km,
            transport_mode=route.transport_mode,
        )


class RecommendationModel(BaseModel):
    place: PlaceModel
    rating: float
    crowd_level: CrowdLevel
    best_time: BestTime
    effective_distance_km: Optional[float] = None
    distance_label: Optional[str] = None

    @classmethod
    def from_domain(cls, rec: Recommendation) -> "RecommendationModel":
        return cls(
            place=PlaceModel.from_domain(rec.place),
            rating=rec.rating,
            crowd_level=rec.crowd_level,
            best_time=rec.best_time,
            effective_distance_km=rec.effective_distance_km,
            distance_label=rec.distance_label,
        )


class ItineraryItemModel(BaseModel):
    time_label: str
    activity: str
    activity_type: ActivityType
    duration_label: str
    starts_at: datetime
    is_past: bool
    matched_place: Optional[PlaceModel] = None

    @classmethod
    def from_domain(cls, item: ItineraryItem, now: datetime) -> "ItineraryItemModel":
        return cls(
            time_label=item.time_label,
            activity=item.activity,
            activity_type=item.activity_type,
            duration_label=item.duration_label,
            starts_at=item.starts_at,
            is_past=item.is_past(now),
            matched_place=PlaceModel.from_domain(item.matched_place) if item.matched_place else None,
        )


class TrafficIncidentModel(BaseModel):
    id: str
    location: GeoPointModel
    severity: Severity
    description: str
    color: str

    @classmethod
    def from_domain(cls, incident: TrafficIncident) -> "TrafficIncidentModel":
        return cls(
            id=incident.id,
            location=GeoPointModel.from_domain(incident.location),
            severity=incident.severity,
            description=incident.description,
            color=incident.color,
        )


class ConditionsModel(BaseModel):
    temperature_c: int
    condition: WeatherCondition
    description: str
    observed_at: datetime
    source: str

    @classmethod
    def from_domain(cls, conditions: AmbientConditions) -> "ConditionsModel":
        return cls(
            temperature_c=conditions.temperature_c,
            condition=conditions.condition,
            description=conditions.description,
            observed_at=conditions.observed_at,
            source=conditions.source,
        )


class TripContextModel(BaseModel):
    session_id: str
    user_location: Optional[GeoPointModel] = None
    selected_place: Optional[PlaceModel] = None
    active_route: Optional[RouteModel] = None
    transport_mode: TransportMode
    search_results: List[PlaceModel] = []
    generation: int
    view_center: Optional[GeoPointModel] = None
    last_failure: Optional[str] = None

    @classmethod
    def from_domain(
        cls,
        session_id: str,
        context: TripContext,
        view_center: Optional[GeoPoint] = None,
        last_failure: Optional[str] = None,
    ) -> "TripContextModel":
        return cls(
            session_id=session_id,
            user_location=GeoPointModel.from_domain(context.user_location) if context.user_location else None,
            selected_place=PlaceModel.from_domain(context.selected_place) if context.selected_place else None,
            active_route=RouteModel.from_domain(context.active_route) if context.active_route else None,
            transport_mode=context.transport_mode,
            search_results=[PlaceModel.from_domain(p) for p in context.search_results],
            generation=context.generation,
            view_center=GeoPointModel.from_domain(view_center) if view_center else None,
            last_failure=last_failure,
        )


# ============================================================================
# Requests
# ============================================================================

class LocationRequest(BaseModel):
    """Device location push; both fields absent means no fix is available."""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_domain(self) -> Optional[GeoPoint]:
        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(self.latitude, self.longitude)


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=200)


class TransportModeRequest(BaseModel):
    mode: TransportMode


class ViewportRequest(BaseModel):
    south_west: GeoPointModel
    north_east: GeoPointModel

    def to_domain(self) -> BoundingBox:
        return BoundingBox(self.south_west.to_domain(), self.north_east.to_domain())


class SessionCreated(BaseModel):
    session_id: str
