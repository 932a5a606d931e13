"""
Ambient conditions (weather) for the user's surroundings.

Uses the OpenWeather current-weather endpoint when an API key is configured,
otherwise or on failure falls back to a deterministic simulated reading.
"""

import hashlib
import logging
from datetime import datetime
from typing import Optional

import httpx

from tripnav.config.settings import WeatherSettings, get_settings
from tripnav.core.exceptions import PROVIDER_ERRORS, ProviderUnavailableError
from tripnav.models.conditions import WEATHER_DESCRIPTIONS, AmbientConditions, WeatherCondition
from tripnav.models.trip import GeoPoint
from tripnav.services.provider_http import get_json

logger = logging.getLogger(__name__)

PROVIDER_NAME = "openweather"

# OpenWeather "main" group -> condition
OPENWEATHER_CONDITIONS = {
    "Clear": WeatherCondition.CLEAR,
    "Clouds": WeatherCondition.CLOUDY,
    "Rain": WeatherCondition.RAIN,
    "Drizzle": WeatherCondition.RAIN,
    "Snow": WeatherCondition.SNOW,
    "Thunderstorm": WeatherCondition.STORM,
    "Squall": WeatherCondition.WINDY,
    "Tornado": WeatherCondition.WINDY,
}


def map_weather_condition(main: Optional[str]) -> WeatherCondition:
    return OPENWEATHER_CONDITIONS.get(main or "", WeatherCondition.CLEAR)


def simulate_conditions(point: GeoPoint, now: datetime) -> AmbientConditions:
    """Stable pseudo-reading for a location and hour."""
    key = f"{point.latitude:.2f},{point.longitude:.2f}:{now:%Y%m%d%H}"
    digest = hashlib.sha256(key.encode("utf-8")).digest()
    conditions = list(WeatherCondition)
    condition = conditions[digest[0] % len(conditions)]
    return AmbientConditions(
        temperature_c=10 + digest[1] % 30,
        condition=condition,
        description=WEATHER_DESCRIPTIONS[condition],
        observed_at=now,
        source="simulated",
    )


class ConditionsService:

    def __init__(
        self,
        config: Optional[WeatherSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or get_settings().weather
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.config.timeout_seconds)
        self._point: Optional[GeoPoint] = None
        self._current: Optional[AmbientConditions] = None

        if not self.config.api_key:
            logger.info("Weather API key not configured, using simulated conditions")

    @property
    def current(self) -> Optional[AmbientConditions]:
        return self._current

    def track(self, point: GeoPoint) -> None:
        """Point the next periodic refresh at ``point`` without fetching now."""
        self._point = point

    async def refresh(self, point: GeoPoint, now: Optional[datetime] = None) -> AmbientConditions:
        """Fetch conditions at ``point`` and remember it for later ticks."""
        now = now or datetime.now()
        self._point = point

        if self.config.api_key:
            try:
                self._current = await self._fetch(point, now)
                return self._current
            except PROVIDER_ERRORS as e:
                logger.warning(f"Weather refresh failed, using simulated conditions: {e.message}")

        self._current = simulate_conditions(point, now)
        return self._current

    async def tick(self) -> None:
        if self._point is None:
            return
        await self.refresh(self._point)

    async def _fetch(self, point: GeoPoint, now: datetime) -> AmbientConditions:
        params = {
            "lat": point.latitude,
            "lon": point.longitude,
            "appid": self.config.api_key,
            "units": "metric",
        }
        data = await get_json(self._client, PROVIDER_NAME, self.config.api_url, params)
        try:
            weather = data["weather"][0]
            temperature = round(float(data["main"]["temp"]))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderUnavailableError(PROVIDER_NAME, details={"reason": "unexpected payload"}) from e

        condition = map_weather_condition(weather.get("main"))
        return AmbientConditions(
            temperature_c=temperature,
            condition=condition,
            description=weather.get("description") or WEATHER_DESCRIPTIONS[condition],
            observed_at=now,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
