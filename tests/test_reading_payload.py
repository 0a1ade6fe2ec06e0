from __future__ import annotations

from datetime import datetime, timezone

import pytest

from models.records import ConnectionMode
from services.monitor import ReadingUnavailable, reading_from_payload


def test_payload_with_voltage_and_temperature_parses() -> None:
    reading = reading_from_payload(
        {"voltage": 3.3, "temperature": 25, "current": 0.5, "time": "2024-01-01T00:00:00Z"}
    )

    assert reading.voltage == 3.3
    assert reading.temperature == 25.0
    assert reading.timestamp == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert reading.connection_mode is ConnectionMode.wifi


def test_naive_timestamp_is_treated_as_utc() -> None:
    reading = reading_from_payload(
        {"voltage": 3.3, "temperature": 25, "timestamp": "2024-01-01T12:30:00"}
    )

    assert reading.timestamp == datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc)


def test_missing_or_bad_time_uses_now() -> None:
    before = datetime.now(timezone.utc)

    reading = reading_from_payload({"voltage": 3.3, "temperature": 25, "time": "yesterday"})

    assert reading.timestamp >= before


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"voltage": 3.3, "current": 0.5},
        {"voltage": "3.3", "temperature": 25},
        {"voltage": True, "temperature": 25},
        {"voltage": 3.3, "temperature": float("nan")},
        {"voltage": None, "temperature": 25},
    ],
)
def test_unusable_payloads_raise_reading_unavailable(payload: dict) -> None:
    with pytest.raises(ReadingUnavailable):
        reading_from_payload(payload)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("BLE", ConnectionMode.ble),
        ("ble", ConnectionMode.ble),
        ("Wi-Fi", ConnectionMode.wifi),
        ("carrier-pigeon", ConnectionMode.wifi),
        (None, ConnectionMode.wifi),
        (7, ConnectionMode.wifi),
        (["BLE"], ConnectionMode.wifi),
    ],
)
def test_connection_mode_spellings(raw, expected: ConnectionMode) -> None:
    reading = reading_from_payload({"voltage": 3.3, "temperature": 25, "connection_mode": raw})

    assert reading.connection_mode is expected
