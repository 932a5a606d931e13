"""
Trip session: one user's trip context plus the views derived from it.

A session wires ``LocationState`` to the recommendation, itinerary, traffic
and conditions components and owns the periodic refresh timers, which are
cancelled when the session is closed.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional

from tripnav.config.settings import Settings, get_settings
from tripnav.core.exceptions import SessionNotFoundError
from tripnav.core.periodic import RefreshScheduler, SleepFunction
from tripnav.models.conditions import AmbientConditions
from tripnav.models.trip import (
    BoundingBox,
    GeoPoint,
    ItineraryItem,
    Place,
    Recommendation,
    Route,
    TrafficIncident,
    TransportMode,
    TripContext,
)
from tripnav.services.conditions_service import ConditionsService
from tripnav.services.itinerary_scheduler import ItineraryScheduler, group_by_activity
from tripnav.services.location_state import LocationState
from tripnav.services.place_search_client import PlaceSearchClient
from tripnav.services.recommendation_ranker import RecommendationRanker
from tripnav.services.route_client import RouteClient
from tripnav.services.traffic_overlay import TrafficOverlay

logger = logging.getLogger(__name__)

CONDITIONS_TIMER = "conditions"
INCIDENTS_TIMER = "incidents"


class TripSession:

    def __init__(
        self,
        session_id: str,
        search_client: PlaceSearchClient,
        route_client: RouteClient,
        settings: Optional[Settings] = None,
        *,
        ranker: Optional[RecommendationRanker] = None,
        scheduler: Optional[ItineraryScheduler] = None,
        overlay: Optional[TrafficOverlay] = None,
        conditions: Optional[ConditionsService] = None,
        sleep: SleepFunction = asyncio.sleep,
        clock: Callable[[], datetime] = datetime.now,
    ):
        cfg = settings or get_settings()
        self.id = session_id
        self.created_at = datetime.now()
        self.view_center: Optional[GeoPoint] = None
        self._clock = clock
        self._closed = False
        self._timers_enabled = cfg.scheduler.enabled

        self.state = LocationState(
            search_client,
            route_client,
            ranker or RecommendationRanker(limit=cfg.providers.max_recommendations),
            nearby_radius_m=cfg.providers.nearby_radius_m,
            nearby_kind=cfg.providers.nearby_kind,
            request_timeout_s=cfg.providers.timeout_seconds,
            on_recenter=self._recenter,
        )
        self.scheduler = scheduler or ItineraryScheduler(
            extended_next_day=cfg.scheduler.extended_next_day
        )
        self.overlay = overlay or TrafficOverlay()
        self._owns_conditions = conditions is None
        self.conditions = conditions or ConditionsService(cfg.weather)

        self.timers = RefreshScheduler(sleep=sleep)
        self.timers.register(
            CONDITIONS_TIMER, cfg.scheduler.conditions_interval_seconds, self.conditions.tick
        )
        self.timers.register(
            INCIDENTS_TIMER, cfg.scheduler.incident_interval_seconds, self.overlay.tick
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        if self._timers_enabled:
            self.timers.start_all()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.timers.stop_all()
        if self._owns_conditions:
            await self.conditions.aclose()
        logger.info(f"Closed session {self.id}")

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def context(self) -> TripContext:
        return self.state.context

    @property
    def recommendations(self) -> tuple[Recommendation, ...]:
        return self.state.recommendations

    @property
    def incidents(self) -> tuple[TrafficIncident, ...]:
        return self.overlay.incidents

    @property
    def current_conditions(self) -> Optional[AmbientConditions]:
        return self.conditions.current

    def now(self) -> datetime:
        return self._clock()

    def itinerary(self, now: Optional[datetime] = None) -> List[ItineraryItem]:
        nearby = self.state.nearby_places
        return self.scheduler.generate(
            now or self._clock(),
            group_by_activity(nearby) if nearby else None,
        )

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    async def report_device_location(self, point: Optional[GeoPoint]) -> None:
        """Geolocation push; a missing fix is not an error."""
        if point is None:
            logger.info(f"Session {self.id}: device location unavailable")
            return
        self.state.set_user_location(point)
        self.conditions.track(point)
        if self.conditions.current is None:
            await self.conditions.refresh(point, self._clock())

    async def select_place(self, place: Place) -> tuple[Recommendation, ...]:
        return await self.state.select_place(place)

    async def select_point(self, point: GeoPoint) -> tuple[Recommendation, ...]:
        return await self.state.select_point(point)

    def clear_selection(self) -> None:
        self.state.clear_selection()
        if self.state.context.user_location is not None:
            self.view_center = self.state.context.user_location

    async def search(self, query: str) -> tuple[Place, ...]:
        return await self.state.search(query)

    def set_transport_mode(self, mode: TransportMode) -> None:
        self.state.set_transport_mode(mode)

    async def request_directions(self) -> Route:
        return await self.state.request_directions()

    async def viewport_changed(self, bounds: BoundingBox) -> tuple[TrafficIncident, ...]:
        return await self.overlay.update(bounds)

    async def tick(self, timer: str) -> None:
        """Run one refresh of ``timer`` now, outside its schedule."""
        await self.timers.tick(timer)

    def _recenter(self, point: GeoPoint) -> None:
        self.view_center = point


SessionFactory = Callable[[str], TripSession]


class SessionRegistry:
    """Creates, looks up and tears down trip sessions."""

    def __init__(self, session_factory: SessionFactory, max_sessions: int = 1000):
        self._factory = session_factory
        self._max_sessions = max_sessions
        self._sessions: Dict[str, TripSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    async def create(self) -> TripSession:
        if len(self._sessions) >= self._max_sessions:
            oldest = min(self._sessions.values(), key=lambda s: s.created_at)
            logger.warning(f"Session limit reached, evicting {oldest.id}")
            await self.close(oldest.id)

        session = self._factory(uuid.uuid4().hex)
        session.start()
        self._sessions[session.id] = session
        logger.info(f"Created session {session.id}")
        return session

    def get(self, session_id: str) -> TripSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def close(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        await session.close()

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close(session_id)
