"""
Shared fixtures: in-memory provider fakes and a place factory.
"""
import asyncio
from typing import Dict, List, Optional

import pytest

from tripnav.core.metrics import reset_metrics
from tripnav.models.trip import GeoPoint, Place, Route, TransportMode
from tripnav.services.place_search_client import PlaceSearchClient
from tripnav.services.route_client import RouteClient


class FakeSearchClient(PlaceSearchClient):
    """
    Scripted place search provider.

    ``nearby_results`` is keyed by the center point. An ``asyncio.Event`` in
    ``gates`` under the same key holds that lookup until it is set, which lets
    tests interleave overlapping calls.
    """

    def __init__(self):
        self.nearby_results: Dict[GeoPoint, List[Place]] = {}
        self.search_results: Dict[str, List[Place]] = {}
        self.reverse_result: Optional[Place] = None
        self.gates: Dict[object, asyncio.Event] = {}
        self.error: Optional[Exception] = None
        self.nearby_calls: List[GeoPoint] = []
        self.search_calls: List[str] = []
        self.reverse_calls: List[GeoPoint] = []

    async def _wait(self, key) -> None:
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        if self.error is not None:
            raise self.error

    async def search(self, query: str) -> List[Place]:
        self.search_calls.append(query)
        await self._wait(query)
        return list(self.search_results.get(query, []))

    async def nearby(self, center: GeoPoint, radius_m: int, kind: str) -> List[Place]:
        self.nearby_calls.append(center)
        await self._wait(center)
        return list(self.nearby_results.get(center, []))

    async def reverse(self, point: GeoPoint) -> Optional[Place]:
        self.reverse_calls.append(point)
        await self._wait(point)
        return self.reverse_result


class FakeRouteClient(RouteClient):
    """Returns a two-point route unless ``error`` is set; ``gate`` holds the call."""

    def __init__(self):
        self.error: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[tuple] = []

    async def route(self, origin: GeoPoint, destination: GeoPoint, mode: TransportMode) -> Route:
        self.calls.append((origin, destination, mode))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return Route(
            path=(origin, destination),
            duration_minutes=12,
            distance_km=3.4,
            transport_mode=TransportMode(mode),
        )


def build_place(place_id: str, lat: float, lon: float, category: str = "attraction", **kwargs) -> Place:
    return Place(
        id=place_id,
        display_name=kwargs.pop("display_name", place_id.title()),
        location=GeoPoint(lat, lon),
        category=category,
        **kwargs,
    )


@pytest.fixture(autouse=True)
def clean_metrics():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def search_client():
    return FakeSearchClient()


@pytest.fixture
def route_client():
    return FakeRouteClient()


@pytest.fixture
def make_place():
    return build_place
