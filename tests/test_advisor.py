from __future__ import annotations

from datetime import datetime, timezone

from models.records import FaultStatus, Reading, Severity
from services.advisor import GENERAL_ADVISORY, advise_for, analyze
from services.playbooks import GENERAL_TROUBLESHOOTING, solutions_for


def test_voltage_drop_branches_on_critical_voltage() -> None:
    warning = advise_for(FaultStatus.voltage_drop, voltage=2.6)
    critical = advise_for(FaultStatus.voltage_drop, voltage=2.4)

    assert warning.severity is Severity.medium
    assert "solder joints" in warning.suggestion
    assert critical.severity is Severity.high
    assert critical.suggestion != warning.suggestion


def test_overheated_branches_on_critical_temperature() -> None:
    warning = advise_for(FaultStatus.overheated, temperature=70)
    critical = advise_for(FaultStatus.overheated, temperature=85)

    assert warning.severity is Severity.medium
    assert "Reduce load" in warning.suggestion
    assert critical.severity is Severity.high
    assert "Power down" in critical.suggestion


def test_lookup_without_values_uses_base_phrasing() -> None:
    assert advise_for(FaultStatus.voltage_drop) == advise_for(FaultStatus.voltage_drop, voltage=2.7)
    assert advise_for("Overheated").severity is Severity.medium


def test_broken_trace_and_normal_entries() -> None:
    assert advise_for(FaultStatus.broken_trace).severity is Severity.high
    normal = advise_for(FaultStatus.normal, temperature=30)
    assert normal.severity is Severity.low
    assert "operating normally" in normal.suggestion


def test_normal_with_elevated_temperature_gets_notice() -> None:
    advisory = advise_for(FaultStatus.normal, voltage=3.3, temperature=50)

    assert advisory.severity is Severity.low
    assert advisory.suggestion.startswith("Notice: Temperature elevated")


def test_unknown_category_falls_back_to_general_advisory() -> None:
    assert advise_for("Melted") is GENERAL_ADVISORY


def test_analyze_combines_classification_and_advisory() -> None:
    reading = Reading(voltage=2.4, temperature=85, timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc))

    analysis = analyze(reading)

    assert analysis.reading is reading
    assert analysis.classification.fault_status is FaultStatus.broken_trace
    assert analysis.advisory.severity is Severity.high
    assert "Broken trace" in analysis.advisory.suggestion


def test_solutions_for_unknown_fault_returns_general_guide() -> None:
    assert solutions_for(None) == GENERAL_TROUBLESHOOTING
    assert "Jumper wire repair" in solutions_for(FaultStatus.broken_trace)
