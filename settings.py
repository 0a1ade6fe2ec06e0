from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_LOG_LEVEL_ENV = "LOG_LEVEL"
_POLL_INTERVAL_ENV = "PCB_POLL_INTERVAL_SECONDS"
_HISTORY_SIZE_ENV = "PCB_HISTORY_SIZE"
_CHAT_DELAY_ENV = "PCB_CHAT_RESPONSE_DELAY"
_DEBOUNCE_ENV = "PCB_NOTIFICATION_DEBOUNCE_SECONDS"
_SCENARIO_ENV = "PCB_SIMULATION_SCENARIO"
_CONNECTION_MODE_ENV = "PCB_CONNECTION_MODE"
_NOTIFICATIONS_ENV = "PCB_NOTIFICATIONS_ENABLED"
_AUTOSTART_ENV = "PCB_MONITOR_AUTOSTART"
_SEED_ENV = "PCB_SIMULATION_SEED"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    log_level: str
    poll_interval: float
    history_size: int
    chat_response_delay: float
    notification_debounce: float
    simulation_scenario: str
    connection_mode: str
    notifications_enabled: bool
    monitor_autostart: bool
    simulation_seed: Optional[int]


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_non_negative_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in _TRUTHY:
        return True
    if candidate in _FALSY:
        return False
    return default


def _read_seed() -> Optional[int]:
    value = os.getenv(_SEED_ENV)
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        log_level=_read_log_level("INFO"),
        poll_interval=_read_non_negative_float(_POLL_INTERVAL_ENV, 5.0) or 5.0,
        history_size=_read_positive_int(_HISTORY_SIZE_ENV, 20),
        chat_response_delay=_read_non_negative_float(_CHAT_DELAY_ENV, 1.0),
        notification_debounce=_read_non_negative_float(_DEBOUNCE_ENV, 3.0),
        simulation_scenario=_read_str_env(_SCENARIO_ENV, "normal"),
        connection_mode=_read_str_env(_CONNECTION_MODE_ENV, "WiFi"),
        notifications_enabled=_read_bool(_NOTIFICATIONS_ENV, True),
        monitor_autostart=_read_bool(_AUTOSTART_ENV, True),
        simulation_seed=_read_seed(),
    )
