"""
Configuration package for the Trip Navigator service.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    ProviderSettings,
    WeatherSettings,
    SchedulerSettings,
    SecuritySettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "ProviderSettings",
    "WeatherSettings",
    "SchedulerSettings",
    "SecuritySettings",
    "settings",
    "get_settings",
    "reload_settings",
]
