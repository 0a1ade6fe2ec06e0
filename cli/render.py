from __future__ import annotations

from typing import Any, Dict, Iterable

import typer

from models.records import Severity
from services.advisor import Analysis
from services.classifier import TEMPERATURE_GAUGE_RANGE, VOLTAGE_GAUGE_RANGE, gauge_fraction
from services.history import HistorySummary
from services.notifications import NotificationIntent, NotificationLevel

_SEVERITY_COLORS = {
    Severity.low: typer.colors.GREEN,
    Severity.medium: typer.colors.YELLOW,
    Severity.high: typer.colors.RED,
}

_LEVEL_COLORS = {
    NotificationLevel.info: typer.colors.BLUE,
    NotificationLevel.success: typer.colors.GREEN,
    NotificationLevel.warning: typer.colors.YELLOW,
    NotificationLevel.error: typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def gauge_bar(value: float, bounds: tuple[float, float], width: int = 20) -> str:
    filled = round(gauge_fraction(value, bounds) * width)
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def render_latest(payload: Dict[str, Any]) -> None:
    echo_heading("Latest Reading")
    if not payload:
        typer.echo("No reading received yet.")
        return
    echo_key_values(sorted(payload.items()))


def render_analysis(analysis: Analysis, simulated: bool = False) -> None:
    reading = analysis.reading
    severity = analysis.advisory.severity
    source = "synthetic" if simulated else "live"
    typer.echo(
        f"{reading.timestamp:%H:%M:%S} [{source}] "
        f"{reading.voltage:5.2f}V {gauge_bar(reading.voltage, VOLTAGE_GAUGE_RANGE)} "
        f"{reading.temperature:5.1f}C {gauge_bar(reading.temperature, TEMPERATURE_GAUGE_RANGE)}"
    )
    typer.secho(
        f"  {analysis.classification.fault_status.value} ({severity.value}): "
        f"{analysis.advisory.suggestion}",
        fg=_SEVERITY_COLORS[severity],
    )


def render_summary(summary: HistorySummary) -> None:
    echo_heading("History")
    if not summary.count:
        typer.echo("No readings recorded.")
        return
    echo_key_values(
        [
            ("readings", summary.count),
            ("voltage min/mean/max", _triple(summary.min_voltage, summary.mean_voltage, summary.max_voltage)),
            (
                "temperature min/mean/max",
                _triple(summary.min_temperature, summary.mean_temperature, summary.max_temperature),
            ),
        ]
    )
    for fault, count in summary.per_fault_count.items():
        typer.echo(f"  - {fault}: {count}")


def _triple(low: float | None, mean: float | None, high: float | None) -> str:
    return " / ".join("-" if value is None else f"{value:.2f}" for value in (low, mean, high))


class ConsoleNotifier:
    """Notification sink that prints to the terminal."""

    def notify(self, intent: NotificationIntent) -> None:
        typer.secho(
            f"{intent.title} {intent.description}",
            fg=_LEVEL_COLORS[intent.level],
            bold=intent.level is NotificationLevel.error,
        )
