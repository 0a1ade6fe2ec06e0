from __future__ import annotations

from typing import Iterable

from models.records import ConnectionMode, Scenario
from services.monitor import build_default_monitor
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


def test_defaults(monkeypatch) -> None:
    for name in (
        "PCB_POLL_INTERVAL_SECONDS",
        "PCB_HISTORY_SIZE",
        "PCB_CHAT_RESPONSE_DELAY",
        "PCB_NOTIFICATION_DEBOUNCE_SECONDS",
        "PCB_SIMULATION_SCENARIO",
        "PCB_CONNECTION_MODE",
        "PCB_NOTIFICATIONS_ENABLED",
        "PCB_SIMULATION_SEED",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()

    try:
        settings = get_settings()
        assert settings.poll_interval == 5.0
        assert settings.history_size == 20
        assert settings.chat_response_delay == 1.0
        assert settings.notification_debounce == 3.0
        assert settings.simulation_scenario == "normal"
        assert settings.notifications_enabled is True
        assert settings.simulation_seed is None
    finally:
        get_settings.cache_clear()


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("PCB_HISTORY_SIZE", "5")
    monkeypatch.setenv("PCB_NOTIFICATION_DEBOUNCE_SECONDS", "1.5")
    monkeypatch.setenv("PCB_SIMULATION_SCENARIO", "voltage_drop")
    monkeypatch.setenv("PCB_CONNECTION_MODE", "BLE")
    monkeypatch.setenv("PCB_NOTIFICATIONS_ENABLED", "off")
    monkeypatch.setenv("PCB_SIMULATION_SEED", "9")

    caches = (get_settings, build_default_monitor)
    _clear_caches(caches)

    try:
        monitor = build_default_monitor()
        assert monitor.history.capacity == 5
        assert monitor.debounce == 1.5
        assert monitor.scenario is Scenario.voltage_drop
        assert monitor.connection_mode is ConnectionMode.ble
        assert monitor.sink.enabled is False
        assert get_settings().simulation_seed == 9
    finally:
        _clear_caches(caches)


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("PCB_HISTORY_SIZE", "-3")
    monkeypatch.setenv("PCB_POLL_INTERVAL_SECONDS", "soon")
    monkeypatch.setenv("PCB_SIMULATION_SCENARIO", "meltdown")
    monkeypatch.setenv("PCB_NOTIFICATIONS_ENABLED", "maybe")

    caches = (get_settings, build_default_monitor)
    _clear_caches(caches)

    try:
        settings = get_settings()
        assert settings.history_size == 20
        assert settings.poll_interval == 5.0
        assert settings.notifications_enabled is True
        assert build_default_monitor().scenario is Scenario.normal
    finally:
        _clear_caches(caches)
