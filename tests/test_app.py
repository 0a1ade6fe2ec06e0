import itertools
import time
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from datastore.latest_reading import LatestReadingStore
from services.history import HistoricalBuffer
from services.monitor import MonitorService, StoreReadingSource, build_default_monitor
from services.notifications import NotificationLog
from services.simulator import SyntheticReadingGenerator
from settings import get_settings


@pytest.fixture
def store() -> LatestReadingStore:
    return LatestReadingStore()


@pytest.fixture
def monitor(store: LatestReadingStore) -> MonitorService:
    clock = itertools.count(100, 10)
    return MonitorService(
        source=StoreReadingSource(store),
        generator=SyntheticReadingGenerator(seed=3),
        history=HistoricalBuffer(capacity=20),
        sink=NotificationLog(),
        clock=lambda: float(next(clock)),
    )


@pytest.fixture
def api_client(monkeypatch, store: LatestReadingStore, monitor: MonitorService) -> Iterator[TestClient]:
    monkeypatch.setenv("PCB_MONITOR_AUTOSTART", "false")
    get_settings.cache_clear()

    def build_test_monitor() -> MonitorService:
        return monitor

    build_test_monitor.cache_clear = lambda: None  # type: ignore[attr-defined]

    monkeypatch.setattr("app.main.build_default_monitor", build_test_monitor)
    monkeypatch.setattr("app.api.build_default_monitor", build_test_monitor)
    monkeypatch.setattr("app.web.build_default_monitor", build_test_monitor)
    monkeypatch.setattr("app.api.build_default_store", lambda: store)

    app = create_app()
    with TestClient(app) as client:
        yield client

    get_settings.cache_clear()


def test_lifespan_starts_poller_and_clears_monitor_cache(monkeypatch) -> None:
    monkeypatch.setenv("PCB_MONITOR_AUTOSTART", "true")
    get_settings.cache_clear()
    build_default_monitor.cache_clear()
    app = create_app()

    try:
        with TestClient(app):
            monitor_during = build_default_monitor()
            deadline = time.monotonic() + 5.0
            while not len(monitor_during.history) and time.monotonic() < deadline:
                time.sleep(0.01)
            assert len(monitor_during.history) >= 1

        monitor_after = build_default_monitor()
        assert monitor_after is not monitor_during
    finally:
        build_default_monitor.cache_clear()
        get_settings.cache_clear()


def test_latest_is_empty_before_any_reading(api_client: TestClient) -> None:
    response = api_client.get("/api/data/latest")

    assert response.status_code == 200
    assert response.json() == {}


def test_post_and_fetch_latest_reading(api_client: TestClient) -> None:
    response = api_client.post(
        "/api/data", json={"voltage": 3.3, "current": 0.5, "temperature": 25}
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Data received successfully"}

    latest = api_client.get("/api/data/latest").json()
    assert latest["voltage"] == 3.3
    assert latest["current"] == 0.5
    assert latest["temperature"] == 25.0
    assert latest["time"]


@pytest.mark.parametrize(
    "body",
    [
        {"voltage": 3.3},
        {"current": 0.5},
        {"voltage": 0, "current": 0.5},
        {"voltage": 3.3, "current": None},
        {},
    ],
)
def test_missing_fields_are_rejected(
    api_client: TestClient, store: LatestReadingStore, body: dict
) -> None:
    response = api_client.post("/api/data", json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing voltage or current"
    assert store.get() == {}


@pytest.mark.parametrize(
    "raw_body",
    [
        '{"voltage": "high", "current": 0.5}',
        '{"voltage": NaN, "current": 1}',
        '{"voltage": 3.3, "current": Infinity}',
        '{"voltage": 1e999, "current": 1}',
        '{"voltage": 3.3, "current": 1, "temperature": -Infinity}',
    ],
)
def test_non_numeric_fields_fail_validation(
    api_client: TestClient, store: LatestReadingStore, raw_body: str
) -> None:
    response = api_client.post(
        "/api/data", content=raw_body, headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 422
    assert store.get() == {}
    assert api_client.get("/api/data/latest").json() == {}


def test_analyze_endpoint(api_client: TestClient) -> None:
    response = api_client.post("/api/analyze", json={"voltage": 2.4, "temperature": 85})

    assert response.status_code == 200
    body = response.json()
    assert body["fault_status"] == "Broken Trace"
    assert body["severity"] == "high"
    assert body["suggestion"]


def test_chat_refresh_polls_monitor(api_client: TestClient, monitor: MonitorService) -> None:
    response = api_client.post("/api/chat", json={"message": "refresh and update"})

    assert response.status_code == 200
    assert response.json()["intent"] == "refresh_data"
    assert len(monitor.history) == 1


def test_chat_rejects_blank_message(api_client: TestClient) -> None:
    response = api_client.post("/api/chat", json={"message": "   "})

    assert response.status_code == 400


def test_monitor_refresh_uses_posted_reading(api_client: TestClient) -> None:
    api_client.post("/api/data", json={"voltage": 2.4, "current": 0.5, "temperature": 85})

    response = api_client.post("/api/monitor/refresh")

    assert response.status_code == 200
    body = response.json()
    assert body["simulated"] is False
    assert body["data_points"] == 1
    assert body["analysis"]["fault_status"] == "Broken Trace"
    titles = [item["title"] for item in body["notifications"]]
    assert "Critical Fault Detected!" in titles


def test_monitor_falls_back_when_reading_lacks_temperature(api_client: TestClient) -> None:
    api_client.post("/api/data", json={"voltage": 3.3, "current": 0.5})

    body = api_client.post("/api/monitor/refresh").json()

    assert body["simulated"] is True
    titles = [item["title"] for item in body["notifications"]]
    assert titles.count("Hardware Simulation Active") == 1


def test_monitor_controls(api_client: TestClient) -> None:
    scenario = api_client.put("/api/monitor/scenario", json={"scenario": "overheating"})
    assert scenario.status_code == 200
    assert scenario.json()["simulation_scenario"] == "overheating"

    toggled = api_client.post("/api/monitor/toggle").json()
    assert toggled["is_simulation_running"] is False

    refreshed = api_client.post("/api/monitor/refresh").json()
    assert refreshed["data_points"] == 0

    status = api_client.get("/api/monitor").json()
    assert status["stats"]["count"] == 0


def test_dashboard_page_renders(api_client: TestClient) -> None:
    api_client.post("/api/monitor/refresh")

    response = api_client.get("/ui")

    assert response.status_code == 200
    assert "PCB Health Monitor" in response.text
    assert "History (1 points)" in response.text


def test_health_endpoints(api_client: TestClient) -> None:
    assert api_client.get("/health").json() == {"status": "ok"}
    assert api_client.get("/").json()["status"] == "ok"
