"""Fault advisories: short remediation text plus severity for a fault category."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from models.records import Classification, FaultStatus, Reading, Severity
from services.classifier import (
    TEMPERATURE_CRITICAL_ABOVE,
    TEMPERATURE_NORMAL_MAX,
    VOLTAGE_CRITICAL_BELOW,
    classify,
)


@dataclass(frozen=True)
class Advisory:
    suggestion: str
    severity: Severity


@dataclass(frozen=True)
class Analysis:
    """Classification and advisory computed for one reading."""

    reading: Reading
    classification: Classification
    advisory: Advisory


_ADVISORIES: Dict[FaultStatus, Advisory] = {
    FaultStatus.voltage_drop: Advisory(
        "Warning: Check solder joints and connections. Inconsistent voltage pattern "
        "detected. Verify power supply stability.",
        Severity.medium,
    ),
    FaultStatus.overheated: Advisory(
        "Warning: Reduce load on the circuit. Possible overheating in power section. "
        "Consider adding cooling or reducing current draw.",
        Severity.medium,
    ),
    FaultStatus.broken_trace: Advisory(
        "Critical: Broken trace detected. Inspect PCB for physical damage. "
        "Use multimeter to verify continuity.",
        Severity.high,
    ),
    FaultStatus.normal: Advisory(
        "System operating normally. All parameters within expected ranges. "
        "Continue monitoring.",
        Severity.low,
    ),
}

_CRITICAL_VOLTAGE_DROP = Advisory(
    "Critical: Supply voltage has collapsed below the safe operating limit. "
    "Disconnect the load and check the regulator and input supply before "
    "powering up again.",
    Severity.high,
)

_CRITICAL_OVERHEAT = Advisory(
    "Critical: Board temperature is beyond the safe operating limit. Power down "
    "immediately and inspect the power section for shorts before resuming.",
    Severity.high,
)

_ELEVATED_TEMPERATURE = Advisory(
    "Notice: Temperature elevated but within safe range. Monitor closely and "
    "ensure adequate ventilation.",
    Severity.low,
)

GENERAL_ADVISORY = Advisory(
    "Unable to determine the fault. Power cycle the hardware, verify all "
    "connections and check the readings with a multimeter.",
    Severity.low,
)


def advise_for(
    fault_status: FaultStatus | str,
    voltage: Optional[float] = None,
    temperature: Optional[float] = None,
) -> Advisory:
    """Look up the advisory for ``fault_status``.

    Voltage-drop and overheating advice switches to the urgent wording when
    the triggering value is past its critical sub-threshold. Unknown
    categories get the general advisory.
    """
    try:
        status = FaultStatus(fault_status)
    except ValueError:
        return GENERAL_ADVISORY

    if status is FaultStatus.voltage_drop:
        if voltage is not None and voltage < VOLTAGE_CRITICAL_BELOW:
            return _CRITICAL_VOLTAGE_DROP
    elif status is FaultStatus.overheated:
        if temperature is not None and temperature > TEMPERATURE_CRITICAL_ABOVE:
            return _CRITICAL_OVERHEAT
    elif status is FaultStatus.normal:
        if temperature is not None and temperature > TEMPERATURE_NORMAL_MAX:
            return _ELEVATED_TEMPERATURE

    return _ADVISORIES[status]


def analyze(reading: Reading) -> Analysis:
    classification = classify(reading.voltage, reading.temperature)
    advisory = advise_for(
        classification.fault_status,
        voltage=reading.voltage,
        temperature=reading.temperature,
    )
    return Analysis(reading=reading, classification=classification, advisory=advisory)
