from fastapi.testclient import TestClient

from tripnav.config.settings import SchedulerSettings, Settings
from tripnav.main import create_app


def make_client(search_client, route_client):
    settings = Settings(scheduler=SchedulerSettings(enabled=False))
    return TestClient(create_app(settings, search_client=search_client, route_client=route_client))


def test_health_reports_sessions(search_client, route_client):
    with make_client(search_client, route_client) as client:
        client.post("/trip/sessions")
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "healthy"
        assert body["active_sessions"] == 1


def test_metrics_snapshot(search_client, route_client):
    with make_client(search_client, route_client) as client:
        client.post("/trip/sessions")
        client.get("/trip/sessions/missing")
        r = client.get("/metrics")
        assert r.status_code == 200
        data = r.json()["data"]
        assert "providers" in data
        assert "stale_responses" in data
        assert data["errors"].get("SESSION_NOT_FOUND", 0) >= 1


def test_root(search_client, route_client):
    with make_client(search_client, route_client) as client:
        r = client.get("/")
        assert r.json()["status"] == "running"
