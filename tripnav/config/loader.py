"""
Configuration loader utility for environment-specific settings.
"""

import logging
from pathlib import Path
import os
from typing import Optional

from .settings import Settings, Environment, build_settings

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Utility class for loading environment-specific configurations"""

    @staticmethod
    def load_environment_config(environment: Optional[str] = None) -> Settings:
        """
        Load configuration for the specified environment.

        Args:
            environment: Target environment (development, staging, production, testing)
                        If None, uses ENVIRONMENT env var or defaults to development

        Returns:
            Settings instance with environment-specific configuration
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        env = Environment(environment.lower())
        env_file = ConfigLoader.env_file_for(env.value)

        if env_file.exists():
            return build_settings(str(env_file), environment=env)

        logger.warning(f"Environment file {env_file} not found, using default settings")
        return Settings(environment=env)

    @staticmethod
    def env_file_for(environment: str) -> Path:
        """Path of the env file holding overrides for ``environment``"""
        return Path(f".env.{Environment(environment.lower()).value}")

    @staticmethod
    def get_available_environments() -> list[str]:
        """Get list of available environment configurations"""
        env_files = []
        for env_file in Path(".").glob(".env.*"):
            if env_file.name.endswith(".sample"):
                continue
            env_files.append(env_file.name.replace(".env.", ""))
        return sorted(env_files)

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Create a sample .env file for the specified environment.

        Args:
            environment: Target environment
            output_path: Optional custom output path

        Returns:
            Path to the created sample file
        """
        env = Environment(environment.lower())

        if output_path is None:
            output_path = f".env.{env.value}.sample"

        defaults = Settings()

        sample_content = f"""# Sample configuration for {env.value} environment
# Copy this file to .env.{env.value} and modify as needed

# Application Configuration
APP_NAME={defaults.app_name}
ENVIRONMENT={env.value}
DEBUG={'true' if env == Environment.DEVELOPMENT else 'false'}

# Server Configuration
HOST={defaults.host}
PORT={defaults.port}
WORKERS={1 if env == Environment.DEVELOPMENT else 4}

# Logging Configuration
LOG_LEVEL={defaults.log_level.value}
LOG_FORMAT=json

# Provider Configuration
PROVIDER_NOMINATIM_URL={defaults.providers.nominatim_url}
PROVIDER_OSRM_URL={defaults.providers.osrm_url}
PROVIDER_TIMEOUT_SECONDS={defaults.providers.timeout_seconds}
PROVIDER_NEARBY_RADIUS_M={defaults.providers.nearby_radius_m}
PROVIDER_MAX_RECOMMENDATIONS={defaults.providers.max_recommendations}

# Weather Configuration
WEATHER_API_KEY=your-openweather-api-key

# Scheduler Configuration
SCHEDULER_ENABLED=true
SCHEDULER_CONDITIONS_INTERVAL_SECONDS={defaults.scheduler.conditions_interval_seconds}
SCHEDULER_INCIDENT_INTERVAL_SECONDS={defaults.scheduler.incident_interval_seconds}
"""

        with open(output_path, "w") as f:
            f.write(sample_content)

        return output_path


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)
