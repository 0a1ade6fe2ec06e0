"""Threshold-band classification of board readings."""

from __future__ import annotations

from enum import Enum

from models.records import Classification, FaultStatus, Severity

VOLTAGE_NORMAL_MIN = 3.0
VOLTAGE_LOW_MIN = 2.8
VOLTAGE_CRITICAL_BELOW = 2.5

TEMPERATURE_NORMAL_MAX = 45.0
TEMPERATURE_HIGH_MAX = 60.0
TEMPERATURE_CRITICAL_ABOVE = 80.0

VOLTAGE_GAUGE_RANGE = (0.0, 5.0)
TEMPERATURE_GAUGE_RANGE = (0.0, 100.0)


class VoltageBand(str, Enum):
    normal = "normal"
    low = "low"
    very_low = "very_low"
    critical = "critical"
    unknown = "unknown"


class TemperatureBand(str, Enum):
    normal = "normal"
    high = "high"
    very_high = "very_high"
    critical = "critical"
    unknown = "unknown"


def voltage_band(voltage: float) -> VoltageBand:
    # NaN fails every comparison and lands in ``unknown``.
    if voltage >= VOLTAGE_NORMAL_MIN:
        return VoltageBand.normal
    if voltage >= VOLTAGE_LOW_MIN:
        return VoltageBand.low
    if voltage >= VOLTAGE_CRITICAL_BELOW:
        return VoltageBand.very_low
    if voltage < VOLTAGE_CRITICAL_BELOW:
        return VoltageBand.critical
    return VoltageBand.unknown


def temperature_band(temperature: float) -> TemperatureBand:
    if temperature <= TEMPERATURE_NORMAL_MAX:
        return TemperatureBand.normal
    if temperature <= TEMPERATURE_HIGH_MAX:
        return TemperatureBand.high
    if temperature <= TEMPERATURE_CRITICAL_ABOVE:
        return TemperatureBand.very_high
    if temperature > TEMPERATURE_CRITICAL_ABOVE:
        return TemperatureBand.critical
    return TemperatureBand.unknown


def classify(voltage: float, temperature: float) -> Classification:
    """Map a (voltage, temperature) pair to a fault category and severity.

    Rules are evaluated in order and the first match wins:

    1. both critical -> Broken Trace, high
    2. temperature very high or critical -> Overheated
    3. voltage very low or critical -> Voltage Drop
    4. voltage low or temperature high -> Normal, low (near-normal tolerance)
    5. anything else -> Normal, low

    The function is total: NaN puts that input in no band, so a reading made
    only of NaN never triggers a fault rule and resolves to Normal/low.
    """
    v_band = voltage_band(voltage)
    t_band = temperature_band(temperature)

    if v_band is VoltageBand.critical and t_band is TemperatureBand.critical:
        return Classification(FaultStatus.broken_trace, Severity.high)

    if t_band in (TemperatureBand.critical, TemperatureBand.very_high):
        severity = Severity.high if t_band is TemperatureBand.critical else Severity.medium
        return Classification(FaultStatus.overheated, severity)

    if v_band in (VoltageBand.critical, VoltageBand.very_low):
        severity = Severity.high if v_band is VoltageBand.critical else Severity.medium
        return Classification(FaultStatus.voltage_drop, severity)

    # TODO: confirm with product whether low voltage / high temperature should raise a warning.
    if v_band is VoltageBand.low or t_band is TemperatureBand.high:
        return Classification(FaultStatus.normal, Severity.low)

    return Classification(FaultStatus.normal, Severity.low)


def gauge_fraction(value: float, bounds: tuple[float, float]) -> float:
    """Position of ``value`` on a gauge as a 0..1 fraction, clamped for display only."""
    low, high = bounds
    if value != value:
        return 0.0
    fraction = (value - low) / (high - low)
    return min(max(fraction, 0.0), 1.0)
