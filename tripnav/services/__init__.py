"""
Trip orchestration services.
"""

from .place_search_client import PlaceSearchClient, NominatimPlaceSearchClient
from .route_client import RouteClient, OSRMRouteClient
from .recommendation_ranker import (
    RecommendationRanker,
    RecommendationEstimator,
    RotationEstimator,
    PlaceEstimate,
)
from .itinerary_scheduler import ItineraryScheduler, group_by_activity
from .traffic_overlay import TrafficOverlay, IncidentFeed, SimulatedIncidentFeed
from .conditions_service import ConditionsService
from .location_state import LocationState
from .trip_session import TripSession, SessionRegistry

__all__ = [
    "PlaceSearchClient",
    "NominatimPlaceSearchClient",
    "RouteClient",
    "OSRMRouteClient",
    "RecommendationRanker",
    "RecommendationEstimator",
    "RotationEstimator",
    "PlaceEstimate",
    "ItineraryScheduler",
    "group_by_activity",
    "TrafficOverlay",
    "IncidentFeed",
    "SimulatedIncidentFeed",
    "ConditionsService",
    "LocationState",
    "TripSession",
    "SessionRegistry",
]
