"""
Unit tests for environment-driven configuration
"""
import importlib

from tripnav.config.loader import ConfigLoader
from tripnav.config.settings import Environment, Settings, get_settings, reload_settings


settings_module = importlib.import_module("tripnav.config.settings")


def test_defaults():
    cfg = Settings()
    assert cfg.providers.timeout_seconds == 5.0
    assert cfg.providers.max_recommendations == 5
    assert cfg.scheduler.conditions_interval_seconds == 300.0
    assert cfg.scheduler.incident_interval_seconds == 60.0
    assert cfg.scheduler.extended_next_day is True


def test_prefixed_environment_variables(monkeypatch):
    monkeypatch.setenv("PROVIDER_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("SCHEDULER_ENABLED", "false")
    monkeypatch.setenv("WEATHER_API_KEY", "abc")
    cfg = Settings()
    assert cfg.providers.timeout_seconds == 2.5
    assert cfg.scheduler.enabled is False
    assert cfg.weather.api_key == "abc"


def test_cors_origins_from_environment(monkeypatch):
    monkeypatch.setenv("SECURITY_CORS_ORIGINS", '["https://a.example", "https://b.example"]')
    cfg = Settings()
    assert cfg.get_cors_config()["allow_origins"] == ["https://a.example", "https://b.example"]


def test_reload_settings_picks_up_environment(monkeypatch):
    monkeypatch.setattr(settings_module, "settings", settings_module.settings)
    monkeypatch.setenv("MAX_SESSIONS", "42")

    reloaded = reload_settings()

    assert reloaded.max_sessions == 42
    assert get_settings() is reloaded


def test_loader_reads_environment_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env.staging").write_text("APP_NAME=Staging Navigator\nPORT=9001\n")

    cfg = ConfigLoader.load_environment_config("staging")

    assert cfg.environment == Environment.STAGING
    assert cfg.app_name == "Staging Navigator"
    assert cfg.port == 9001
    assert ConfigLoader.get_available_environments() == ["staging"]


def test_loader_applies_environment_file_to_nested_sections(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env.staging").write_text(
        "SCHEDULER_ENABLED=false\nPROVIDER_TIMEOUT_SECONDS=2.5\nWEATHER_API_KEY=staging-key\n"
    )

    cfg = ConfigLoader.load_environment_config("staging")

    assert cfg.scheduler.enabled is False
    assert cfg.providers.timeout_seconds == 2.5
    assert cfg.weather.api_key == "staging-key"


def test_reload_settings_reads_env_file_variable(tmp_path, monkeypatch):
    monkeypatch.setattr(settings_module, "settings", settings_module.settings)
    env_file = tmp_path / ".env.production"
    env_file.write_text("APP_NAME=Prod Navigator\nSCHEDULER_INCIDENT_INTERVAL_SECONDS=30\n")
    monkeypatch.setenv("ENV_FILE", str(env_file))

    reloaded = reload_settings()

    assert reloaded.app_name == "Prod Navigator"
    assert reloaded.scheduler.incident_interval_seconds == 30.0
    assert get_settings() is reloaded


def test_loader_without_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = ConfigLoader.load_environment_config("testing")
    assert cfg.environment == Environment.TESTING
    assert cfg.app_name == "Trip Navigator"


def test_sample_env_file(tmp_path):
    target = tmp_path / "sample.env"
    path = ConfigLoader.create_sample_env_file("production", str(target))
    content = target.read_text()
    assert path == str(target)
    assert "ENVIRONMENT=production" in content
    assert "PROVIDER_NOMINATIM_URL=" in content
    assert "SCHEDULER_ENABLED=true" in content
