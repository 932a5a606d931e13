"""
Place search (geocoding / POI) provider client.

``PlaceSearchClient`` is the contract the orchestration depends on;
``NominatimPlaceSearchClient`` implements it against OSM Nominatim.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from tripnav.config.settings import ProviderSettings, get_settings
from tripnav.core.exceptions import InvalidCoordinateError, ProviderUnavailableError
from tripnav.core.geo import bounding_box_around
from tripnav.core.validation import sanitize_query, validate_radius
from tripnav.models.trip import GeoPoint, Place
from tripnav.services.provider_http import get_json

logger = logging.getLogger(__name__)

PROVIDER_NAME = "nominatim"


class PlaceSearchClient(ABC):
    """
    Geocode/POI search provider.

    Implementations raise ``ProviderUnavailableError`` or ``RateLimitedError``
    on failure; callers decide how to degrade.
    """

    @abstractmethod
    async def search(self, query: str) -> List[Place]:
        """Free-text place search."""

    @abstractmethod
    async def nearby(self, center: GeoPoint, radius_m: int, kind: str) -> List[Place]:
        """Places of ``kind`` within ``radius_m`` of ``center``."""

    async def reverse(self, point: GeoPoint) -> Optional[Place]:
        """The place at ``point``, or None when the provider knows nothing there."""
        return None

    async def aclose(self) -> None:
        return None


class NominatimPlaceSearchClient(PlaceSearchClient):
    """Token-free geocoding via OSM Nominatim.

    Notes:
    - Nominatim requires a User-Agent header.
    - Do not spam; results are cached by the session, not here.
    """

    def __init__(
        self,
        config: Optional[ProviderSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or get_settings().providers
        self.base_url = self.config.nominatim_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": self.config.user_agent},
            timeout=self.config.timeout_seconds,
        )

    async def search(self, query: str) -> List[Place]:
        q = sanitize_query(query)
        if not q:
            return []
        params = {"q": q, "format": "json", "addressdetails": 0, "limit": self.config.search_limit}
        data = await get_json(self._client, PROVIDER_NAME, f"{self.base_url}/search", params)
        return _places_from_records(data)

    async def nearby(self, center: GeoPoint, radius_m: int, kind: str) -> List[Place]:
        validate_radius(radius_m)
        box = bounding_box_around(center, radius_m)
        params = {
            "q": sanitize_query(kind) or "tourist attraction",
            "format": "json",
            "limit": self.config.search_limit,
            "bounded": 1,
            # left,top,right,bottom
            "viewbox": (
                f"{box.south_west.longitude},{box.north_east.latitude},"
                f"{box.north_east.longitude},{box.south_west.latitude}"
            ),
        }
        data = await get_json(self._client, PROVIDER_NAME, f"{self.base_url}/search", params)
        return _places_from_records(data)

    async def reverse(self, point: GeoPoint) -> Optional[Place]:
        params = {"lat": point.latitude, "lon": point.longitude, "format": "json"}
        data = await get_json(self._client, PROVIDER_NAME, f"{self.base_url}/reverse", params)
        if not isinstance(data, dict) or "error" in data:
            return None
        # The clicked point wins over the snapped address location
        record = {**data, "lat": point.latitude, "lon": point.longitude}
        return _place_from_record(record)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _places_from_records(data: Any) -> List[Place]:
    if not isinstance(data, list):
        raise ProviderUnavailableError(PROVIDER_NAME, details={"reason": "unexpected payload"})

    places: List[Place] = []
    seen = set()
    for record in data:
        place = _place_from_record(record)
        if place is None or place.id in seen:
            continue
        seen.add(place.id)
        places.append(place)
    return places


def _place_from_record(record: Dict[str, Any]) -> Optional[Place]:
    display_name = record.get("display_name")
    lat, lon = record.get("lat"), record.get("lon")
    if not display_name or lat is None or lon is None:
        return None

    try:
        location = GeoPoint(float(lat), float(lon))
    except (TypeError, ValueError, InvalidCoordinateError):
        logger.debug(f"Skipping record with bad coordinates: {lat},{lon}")
        return None

    place_id = record.get("place_id") or record.get("osm_id")
    if place_id is None:
        place_id = f"{location.latitude:.5f},{location.longitude:.5f}"

    return Place(
        id=str(place_id),
        display_name=str(display_name).split(",")[0].strip(),
        location=location,
        category=str(record.get("type") or record.get("class") or "attraction"),
        address=str(display_name),
    )
