"""
Location state: the single writer of a session's trip context.

Every user intent that touches the user position, the selected destination,
the active route, the transport mode or search results goes through this
class. Other components only see ``TripContext`` snapshots.

All mutation happens on one event loop, so there are no locks. Overlapping
provider calls are tagged with a generation number instead, and a response
whose generation is no longer current is dropped rather than applied.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from tripnav.core.exceptions import (
    PROVIDER_ERRORS,
    ErrorCode,
    NoLocationSelectedError,
    ProviderUnavailableError,
)
from tripnav.core.metrics import record_provider_failure, record_stale_response
from tripnav.models.trip import (
    GeoPoint,
    Place,
    Recommendation,
    Route,
    TransportMode,
    TripContext,
)
from tripnav.services.place_search_client import PlaceSearchClient
from tripnav.services.recommendation_ranker import RecommendationRanker
from tripnav.services.route_client import RouteClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

DROPPED_PIN_CATEGORY = "location"


class LocationState:

    def __init__(
        self,
        search_client: PlaceSearchClient,
        route_client: RouteClient,
        ranker: Optional[RecommendationRanker] = None,
        *,
        nearby_radius_m: int = 5000,
        nearby_kind: str = "tourist attraction",
        request_timeout_s: float = 5.0,
        on_recenter: Optional[Callable[[GeoPoint], None]] = None,
    ):
        self.search_client = search_client
        self.route_client = route_client
        self.ranker = ranker or RecommendationRanker()
        self.nearby_radius_m = nearby_radius_m
        self.nearby_kind = nearby_kind
        self.request_timeout_s = request_timeout_s
        self._on_recenter = on_recenter

        self._user_location: Optional[GeoPoint] = None
        self._selected_place: Optional[Place] = None
        self._active_route: Optional[Route] = None
        self._transport_mode = TransportMode.CAR
        self._search_results: tuple[Place, ...] = ()
        self._nearby_places: tuple[Place, ...] = ()
        self._recommendations: tuple[Recommendation, ...] = ()

        # Bumped by every selection change; tags nearby lookups and directions
        self._generation = 0
        self._search_generation = 0

        self.last_failure: Optional[ErrorCode] = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def context(self) -> TripContext:
        return TripContext(
            user_location=self._user_location,
            selected_place=self._selected_place,
            active_route=self._active_route,
            transport_mode=self._transport_mode,
            search_results=self._search_results,
            generation=self._generation,
        )

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def recommendations(self) -> tuple[Recommendation, ...]:
        return self._recommendations

    @property
    def nearby_places(self) -> tuple[Place, ...]:
        return self._nearby_places

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def set_user_location(self, point: GeoPoint) -> None:
        """
        Update the user position.

        Moving invalidates the active route. Without a selected place the view
        follows the user, which is reported to the recenter listener.
        """
        if point != self._user_location:
            self._active_route = None
        self._user_location = point

        if self._selected_place is None and self._on_recenter is not None:
            self._on_recenter(point)

        self._rerank()

    async def select_place(self, place: Place) -> tuple[Recommendation, ...]:
        """
        Select a destination and refresh recommendations around it.

        Returns the recommendations current once this call finishes. If a newer
        selection superseded this one while the lookup was in flight, the
        lookup result is discarded and the newer state is returned untouched.
        """
        generation = self._begin_selection(place)
        logger.info(f"Selected place {place.id} ({place.display_name}), generation {generation}")

        failure: Optional[ErrorCode] = None
        try:
            places = await self._bounded(
                self.search_client.nearby(place.location, self.nearby_radius_m, self.nearby_kind),
                provider="place_search",
            )
        except PROVIDER_ERRORS as e:
            logger.warning(f"Nearby lookup for {place.id} failed: {e.message}")
            failure = e.error_code
            places = []

        if generation != self._generation:
            record_stale_response("nearby")
            logger.debug(f"Dropping nearby results for generation {generation}, current is {self._generation}")
            return self._recommendations

        self.last_failure = failure
        self._nearby_places = tuple(p for p in places if p.id != place.id)
        self._rerank()
        return self._recommendations

    async def select_point(self, point: GeoPoint) -> tuple[Recommendation, ...]:
        """Select whatever is at a clicked map point; falls back to a dropped pin."""
        self._generation += 1
        generation = self._generation

        place: Optional[Place] = None
        try:
            place = await self._bounded(self.search_client.reverse(point), provider="place_search")
        except PROVIDER_ERRORS as e:
            logger.warning(f"Reverse lookup failed, using dropped pin: {e.message}")

        if generation != self._generation:
            record_stale_response("reverse")
            return self._recommendations

        return await self.select_place(place or dropped_pin(point))

    def clear_selection(self) -> None:
        """Drop the destination; any in-flight lookups for it become stale."""
        self._generation += 1
        self._selected_place = None
        self._active_route = None
        self._nearby_places = ()
        self._recommendations = ()

    def set_transport_mode(self, mode: TransportMode) -> None:
        """Switch mode, invalidate the route and re-derive distances without network calls."""
        mode = TransportMode(mode)
        if mode != self._transport_mode:
            self._active_route = None
        self._transport_mode = mode
        self._rerank()

    async def request_directions(self) -> Route:
        """
        Route from the user location to the selected place.

        Raises:
            NoLocationSelectedError: user location or destination missing;
                the context is left untouched
            NoRouteFoundError, ProviderUnavailableError: provider failure,
                the context is left untouched and nothing is retried
        """
        missing = []
        if self._user_location is None:
            missing.append("user_location")
        if self._selected_place is None:
            missing.append("selected_place")
        if missing:
            raise NoLocationSelectedError(missing)

        key = self._route_key()
        origin, destination, mode = self._user_location, self._selected_place, self._transport_mode

        try:
            route = await self._bounded(
                self.route_client.route(origin, destination.location, mode),
                provider="route",
            )
        except PROVIDER_ERRORS as e:
            logger.warning(f"Directions to {destination.id} failed: {e.message}")
            if key == self._route_key():
                self.last_failure = e.error_code
            raise

        if key != self._route_key():
            record_stale_response("route")
            logger.info(f"Discarding route to {destination.id}, trip context changed while routing")
            return route

        self._active_route = route
        self.last_failure = None
        logger.info(
            f"Route to {destination.id}: {route.distance_km}km, {route.duration_minutes}min by {mode.value}"
        )
        return route

    async def search(self, query: str) -> tuple[Place, ...]:
        """Free-text search; a failed or superseded search never overwrites newer results."""
        self._search_generation += 1
        generation = self._search_generation

        failure: Optional[ErrorCode] = None
        try:
            results = await self._bounded(self.search_client.search(query), provider="place_search")
        except PROVIDER_ERRORS as e:
            logger.warning(f"Search for '{query}' failed: {e.message}")
            failure = e.error_code
            results = []

        if generation != self._search_generation:
            record_stale_response("search")
            return self._search_results

        self._search_results = tuple(results)
        self.last_failure = failure
        return self._search_results

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin_selection(self, place: Place) -> int:
        self._generation += 1
        self._selected_place = place
        self._active_route = None
        self._nearby_places = ()
        self._recommendations = ()
        return self._generation

    def _route_key(self) -> tuple:
        return (self._generation, self._user_location, self._selected_place, self._transport_mode)

    def _rerank(self) -> None:
        self._recommendations = tuple(
            self.ranker.rank(self._nearby_places, self._user_location, self._transport_mode)
        )

    async def _bounded(self, call: Awaitable[T], provider: str) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.request_timeout_s)
        except asyncio.TimeoutError as e:
            record_provider_failure(provider, "timeout")
            raise ProviderUnavailableError(provider, details={"reason": "timeout"}) from e


def dropped_pin(point: GeoPoint) -> Place:
    return Place(
        id=f"pin:{point.latitude:.5f},{point.longitude:.5f}",
        display_name="Dropped pin",
        location=point,
        category=DROPPED_PIN_CATEGORY,
    )
