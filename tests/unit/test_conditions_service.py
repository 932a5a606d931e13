"""
Unit tests for ambient conditions
"""
from datetime import datetime

import httpx
import pytest

from tripnav.config.settings import WeatherSettings
from tripnav.models.conditions import WeatherCondition
from tripnav.models.trip import GeoPoint
from tripnav.services.conditions_service import (
    ConditionsService,
    map_weather_condition,
    simulate_conditions,
)

TOKYO = GeoPoint(35.68, 139.76)
NOW = datetime(2024, 5, 1, 14, 30)


def make_service(handler=None, api_key="secret"):
    config = WeatherSettings(api_key=api_key, api_url="https://weather.test/data/2.5/weather")
    client = None
    if handler is not None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ConditionsService(config, client=client)


def test_simulated_conditions_are_stable():
    first = simulate_conditions(TOKYO, NOW)
    second = simulate_conditions(TOKYO, NOW.replace(minute=59))
    assert first.condition == second.condition
    assert first.temperature_c == second.temperature_c
    assert 10 <= first.temperature_c <= 39
    assert first.is_simulated


def test_map_weather_condition():
    assert map_weather_condition("Rain") == WeatherCondition.RAIN
    assert map_weather_condition("Drizzle") == WeatherCondition.RAIN
    assert map_weather_condition("Clouds") == WeatherCondition.CLOUDY
    assert map_weather_condition("Mist") == WeatherCondition.CLEAR
    assert map_weather_condition(None) == WeatherCondition.CLEAR


@pytest.mark.asyncio
async def test_refresh_from_provider():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, json={
            "weather": [{"main": "Clouds", "description": "broken clouds"}],
            "main": {"temp": 21.6},
        })

    service = make_service(handler)
    conditions = await service.refresh(TOKYO, NOW)

    assert seen["units"] == "metric"
    assert seen["appid"] == "secret"
    assert conditions.temperature_c == 22
    assert conditions.condition == WeatherCondition.CLOUDY
    assert conditions.description == "broken clouds"
    assert not conditions.is_simulated
    assert service.current == conditions


@pytest.mark.asyncio
async def test_provider_failure_falls_back_to_simulation():
    def handler(request):
        return httpx.Response(503)

    service = make_service(handler)
    conditions = await service.refresh(TOKYO, NOW)

    assert conditions == simulate_conditions(TOKYO, NOW)


@pytest.mark.asyncio
async def test_unexpected_payload_falls_back_to_simulation():
    def handler(request):
        return httpx.Response(200, json={"cod": 200})

    conditions = await make_service(handler).refresh(TOKYO, NOW)
    assert conditions.is_simulated


@pytest.mark.asyncio
async def test_without_api_key_never_calls_provider():
    def handler(request):
        raise AssertionError("provider should not be called")

    service = make_service(handler, api_key=None)
    conditions = await service.refresh(TOKYO, NOW)
    assert conditions.is_simulated


@pytest.mark.asyncio
async def test_tick_follows_tracked_point():
    service = make_service(api_key=None)
    await service.tick()
    assert service.current is None

    service.track(TOKYO)
    await service.tick()

    assert service.current is not None
    await service.aclose()
