"""
Unit tests for the Nominatim place search client
"""
import httpx
import pytest

from tripnav.config.settings import ProviderSettings
from tripnav.core.exceptions import ProviderUnavailableError, RateLimitedError
from tripnav.core.metrics import snapshot_metrics
from tripnav.models.trip import GeoPoint
from tripnav.services.place_search_client import NominatimPlaceSearchClient

CONFIG = ProviderSettings(nominatim_url="https://nominatim.test", search_limit=5)

SEARCH_PAYLOAD = [
    {
        "place_id": 101,
        "display_name": "Tokyo Tower, Shiba Park, Minato, Tokyo, Japan",
        "lat": "35.6586",
        "lon": "139.7454",
        "class": "tourism",
        "type": "attraction",
    },
    {
        "place_id": 101,
        "display_name": "Tokyo Tower, duplicate",
        "lat": "35.6586",
        "lon": "139.7454",
    },
    {
        "osm_id": 202,
        "display_name": "Zojo-ji",
        "lat": "35.6573",
        "lon": "139.7483",
        "class": "amenity",
    },
    {"place_id": 303, "display_name": "Broken", "lat": "123.0", "lon": "0"},
]


def make_client(handler):
    transport = httpx.MockTransport(handler)
    return NominatimPlaceSearchClient(CONFIG, client=httpx.AsyncClient(transport=transport))


@pytest.mark.asyncio
async def test_search_parses_and_dedupes_records():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=SEARCH_PAYLOAD)

    places = await make_client(handler).search("  tokyo   tower ")

    assert seen["path"] == "/search"
    assert seen["params"]["q"] == "tokyo tower"
    assert seen["params"]["limit"] == "5"
    assert [p.id for p in places] == ["101", "202"]
    tower = places[0]
    assert tower.display_name == "Tokyo Tower"
    assert tower.address == "Tokyo Tower, Shiba Park, Minato, Tokyo, Japan"
    assert tower.category == "attraction"
    assert tower.location == GeoPoint(35.6586, 139.7454)
    assert places[1].category == "amenity"


@pytest.mark.asyncio
async def test_blank_query_skips_provider():
    def handler(request):
        raise AssertionError("provider should not be called")

    assert await make_client(handler).search("   ") == []


@pytest.mark.asyncio
async def test_nearby_uses_bounded_viewbox():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json=[])

    await make_client(handler).nearby(GeoPoint(35.68, 139.76), 5000, "tourist attraction")

    assert seen["bounded"] == "1"
    assert seen["q"] == "tourist attraction"
    left, top, right, bottom = (float(v) for v in seen["viewbox"].split(","))
    assert left < 139.76 < right
    assert bottom < 35.68 < top


@pytest.mark.asyncio
async def test_reverse_keeps_clicked_point():
    def handler(request):
        assert request.url.path == "/reverse"
        return httpx.Response(200, json={
            "place_id": 7,
            "display_name": "Shibuya Crossing, Shibuya, Tokyo",
            "lat": "35.6595",
            "lon": "139.7005",
            "type": "crossing",
        })

    clicked = GeoPoint(35.6596, 139.7006)
    place = await make_client(handler).reverse(clicked)

    assert place.id == "7"
    assert place.display_name == "Shibuya Crossing"
    assert place.location == clicked


@pytest.mark.asyncio
async def test_reverse_with_nothing_there():
    def handler(request):
        return httpx.Response(200, json={"error": "Unable to geocode"})

    assert await make_client(handler).reverse(GeoPoint(0, 0)) is None


@pytest.mark.asyncio
async def test_rate_limited():
    def handler(request):
        return httpx.Response(429, headers={"Retry-After": "30"})

    with pytest.raises(RateLimitedError) as exc_info:
        await make_client(handler).search("tokyo")
    assert exc_info.value.retry_after_seconds == 30.0
    assert snapshot_metrics()["failures"]["nominatim"]["rate_limited"] == 1


@pytest.mark.asyncio
async def test_server_error_is_provider_unavailable():
    def handler(request):
        return httpx.Response(502, text="bad gateway")

    with pytest.raises(ProviderUnavailableError) as exc_info:
        await make_client(handler).search("tokyo")
    assert exc_info.value.details["status_code"] == 502


@pytest.mark.asyncio
async def test_transport_error_is_provider_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderUnavailableError):
        await make_client(handler).search("tokyo")


@pytest.mark.asyncio
async def test_unexpected_payload_is_provider_unavailable():
    def handler(request):
        return httpx.Response(200, json={"not": "a list"})

    with pytest.raises(ProviderUnavailableError):
        await make_client(handler).search("tokyo")


@pytest.mark.asyncio
async def test_latency_is_recorded():
    def handler(request):
        return httpx.Response(200, json=[])

    await make_client(handler).search("tokyo")
    assert snapshot_metrics()["providers"]["nominatim"]["count"] == 1
