"""Ambient (weather) conditions shown next to the user's position."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class WeatherCondition(str, Enum):
    CLEAR = "clear"
    CLOUDY = "cloudy"
    RAIN = "rain"
    SNOW = "snow"
    STORM = "storm"
    WINDY = "windy"


WEATHER_DESCRIPTIONS = {
    WeatherCondition.CLEAR: "Sunny day",
    WeatherCondition.CLOUDY: "Partly cloudy",
    WeatherCondition.RAIN: "Light rain",
    WeatherCondition.SNOW: "Light snow",
    WeatherCondition.STORM: "Thunderstorm",
    WeatherCondition.WINDY: "Strong winds",
}


@dataclass(frozen=True)
class AmbientConditions:
    temperature_c: int
    condition: WeatherCondition
    description: str
    observed_at: datetime
    source: str = "provider"  # provider | simulated

    @property
    def is_simulated(self) -> bool:
        return self.source == "simulated"
