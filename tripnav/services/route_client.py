"""
Routing provider client.

The service never computes routes itself; it asks an OSRM-compatible
router and converts the answer into a ``Route``.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from tripnav.config.settings import ProviderSettings, get_settings
from tripnav.core.exceptions import (
    InvalidCoordinateError,
    NoRouteFoundError,
    ProviderUnavailableError,
    RateLimitedError,
)
from tripnav.models.trip import GeoPoint, Route, TransportMode
from tripnav.services.provider_http import get_json

logger = logging.getLogger(__name__)

PROVIDER_NAME = "osrm"

# Transport mode -> provider profile
OSRM_PROFILES: Dict[TransportMode, str] = {
    TransportMode.CAR: "car",
    TransportMode.BIKE: "bike",
    TransportMode.FOOT: "foot",
}


class RouteClient(ABC):
    """
    Routing provider.

    Raises ``NoRouteFoundError`` when the provider has no path and
    ``ProviderUnavailableError`` when it cannot be reached.
    """

    @abstractmethod
    async def route(self, origin: GeoPoint, destination: GeoPoint, mode: TransportMode) -> Route:
        ...

    async def aclose(self) -> None:
        return None


class OSRMRouteClient(RouteClient):

    def __init__(
        self,
        config: Optional[ProviderSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or get_settings().providers
        self.base_url = self.config.osrm_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": self.config.user_agent},
            timeout=self.config.timeout_seconds,
        )

    async def route(self, origin: GeoPoint, destination: GeoPoint, mode: TransportMode) -> Route:
        mode = TransportMode(mode)
        profile = OSRM_PROFILES[mode]
        url = (
            f"{self.base_url}/route/v1/{profile}/"
            f"{origin.longitude},{origin.latitude};{destination.longitude},{destination.latitude}"
        )
        params = {"overview": "full", "geometries": "geojson"}

        try:
            data = await get_json(
                self._client, PROVIDER_NAME, url, params,
                # OSRM answers unroutable requests with 400 and a JSON code
                allowed_statuses=(200, 400),
            )
        except RateLimitedError as e:
            # Rate limiting is not part of the routing contract
            raise ProviderUnavailableError(PROVIDER_NAME, details={"reason": "rate_limited"}) from e

        return _route_from_response(data, mode)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _route_from_response(data: Any, mode: TransportMode) -> Route:
    if not isinstance(data, dict):
        raise ProviderUnavailableError(PROVIDER_NAME, details={"reason": "unexpected payload"})

    code = data.get("code")
    routes = data.get("routes") or []
    if code != "Ok" or not routes:
        logger.info(f"No {mode.value} route: provider code {code}")
        raise NoRouteFoundError(mode.value, details={"provider_code": code})

    best = routes[0]
    coordinates = (best.get("geometry") or {}).get("coordinates") or []
    try:
        # GeoJSON order is [lon, lat]
        path = tuple(GeoPoint(float(lat), float(lon)) for lon, lat in coordinates)
    except (TypeError, ValueError, InvalidCoordinateError) as e:
        raise ProviderUnavailableError(PROVIDER_NAME, details={"reason": "malformed geometry"}) from e

    return Route(
        path=path,
        duration_minutes=int(round(float(best.get("duration", 0.0)) / 60)),
        distance_km=round(float(best.get("distance", 0.0)) / 1000, 1),
        transport_mode=mode,
    )
