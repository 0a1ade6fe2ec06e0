"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ConnectionMode(str, Enum):
    """Transport the board reports over. Both are simulated."""

    wifi = "WiFi"
    ble = "BLE"

    @classmethod
    def parse(cls, value: object, default: "ConnectionMode | None" = None) -> "ConnectionMode":
        """Accept the spellings the dashboard and devices use (``Wi-Fi``, ``wifi``, ``ble``)."""
        normalized = (value if isinstance(value, str) else "").replace("-", "").strip().lower()
        for mode in cls:
            if mode.value.lower() == normalized:
                return mode
        if default is not None:
            return default
        raise ValueError(f"Unknown connection mode {value!r}")


class FaultStatus(str, Enum):
    normal = "Normal"
    voltage_drop = "Voltage Drop"
    overheated = "Overheated"
    broken_trace = "Broken Trace"


class Severity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Scenario(str, Enum):
    """Simulation scenarios available to the synthetic reading generator."""

    normal = "normal"
    overheating = "overheating"
    voltage_drop = "voltage_drop"
    broken_trace = "broken_trace"
    random = "random"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").upper()


class ChatIntent(str, Enum):
    system_status = "system_status"
    connection_details = "connection_details"
    diagnose_faults = "diagnose_faults"
    voltage_analysis = "voltage_analysis"
    temperature_analysis = "temperature_analysis"
    fix_solutions = "fix_solutions"
    optimization_tips = "optimization_tips"
    refresh_data = "refresh_data"
    simulation_control = "simulation_control"
    general_help = "general_help"


@dataclass(frozen=True, slots=True)
class Reading:
    """A single sampled (voltage, temperature) pair from the board."""

    voltage: float
    temperature: float
    timestamp: datetime
    connection_mode: ConnectionMode = ConnectionMode.wifi


@dataclass(frozen=True, slots=True)
class Classification:
    fault_status: FaultStatus
    severity: Severity


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """A charted point. Derived from a reading and its classification."""

    time: datetime
    voltage: float
    temperature: float
    fault_status: FaultStatus


@dataclass(frozen=True, slots=True)
class HardwareDetails:
    """What the monitor currently knows about the board, as shown to the operator."""

    connection_mode: ConnectionMode
    is_connected: bool
    is_simulation_running: bool
    simulation_scenario: Scenario
    current_voltage: float
    current_temperature: float
    fault_status: FaultStatus
    data_points: int
    last_update: datetime | None
