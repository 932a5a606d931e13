"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for different deployment environments.
"""

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Dict, Any, List
from enum import Enum


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ProviderSettings(BaseSettings):
    """External geocoding / POI / routing provider configuration"""

    nominatim_url: str = Field(default="https://nominatim.openstreetmap.org")
    osrm_url: str = Field(default="https://router.project-osrm.org")
    user_agent: str = Field(default="trip-navigator/1.0 (+https://openstreetmap.org)")
    timeout_seconds: float = Field(default=5.0, gt=0.0, le=60.0)

    # Nearby recommendation lookup
    nearby_radius_m: int = Field(default=5000, ge=100, le=50000)
    nearby_kind: str = Field(default="tourist attraction")
    max_recommendations: int = Field(default=5, ge=1, le=50)
    search_limit: int = Field(default=10, ge=1, le=50)

    model_config = {"env_prefix": "PROVIDER_", "extra": "ignore"}


class WeatherSettings(BaseSettings):
    """Ambient conditions (OpenWeather) configuration"""

    api_url: str = Field(default="https://api.openweathermap.org/data/2.5/weather")
    api_key: Optional[str] = Field(
        default=None,
        description="OpenWeather API key; simulated conditions are used when unset"
    )
    timeout_seconds: float = Field(default=5.0, gt=0.0, le=60.0)

    model_config = {
        "env_prefix": "WEATHER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class SchedulerSettings(BaseSettings):
    """Periodic refresh configuration"""

    enabled: bool = Field(default=True)
    conditions_interval_seconds: float = Field(default=300.0, gt=0.0)
    incident_interval_seconds: float = Field(default=60.0, gt=0.0)
    extended_next_day: bool = Field(
        default=True,
        description="Emit the full five-item template for the next day; false keeps breakfast only"
    )

    model_config = {"env_prefix": "SCHEDULER_", "extra": "ignore"}


class SecuritySettings(BaseSettings):
    """CORS configuration"""

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE"]
    )
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from environment variable or list"""
        if isinstance(v, str):
            origin_list = v.split(",")
            return [origin.strip() for origin in origin_list if origin.strip()]
        return v or ["*"]

    model_config = {"env_prefix": "SECURITY_", "extra": "ignore"}


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="Trip Navigator")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)
    workers: int = Field(default=1, ge=1, le=16)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Session Configuration
    max_sessions: int = Field(default=1000, ge=1, le=100000)

    # Nested Settings
    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    weather: WeatherSettings = Field(default_factory=WeatherSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def get_cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration for FastAPI"""
        return {
            "allow_origins": self.security.cors_origins,
            "allow_credentials": self.security.cors_allow_credentials,
            "allow_methods": self.security.cors_allow_methods,
            "allow_headers": self.security.cors_allow_headers,
        }

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def build_settings(env_file: Optional[str] = None, **overrides: Any) -> Settings:
    """
    Build settings, reading ``env_file`` for the root and every nested section.

    Nested sections are separate settings sources, so a root-level
    ``_env_file`` alone would leave their prefixed keys unread.
    """
    if not env_file:
        return Settings(**overrides)

    sections: Dict[str, Any] = {
        "providers": ProviderSettings(_env_file=env_file),
        "weather": WeatherSettings(_env_file=env_file),
        "scheduler": SchedulerSettings(_env_file=env_file),
        "security": SecuritySettings(_env_file=env_file),
    }
    sections.update(overrides)
    return Settings(_env_file=env_file, **sections)


# Global settings instance; ENV_FILE selects an environment-specific file
settings = build_settings(os.getenv("ENV_FILE"))


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = build_settings(os.getenv("ENV_FILE"))
    return settings
