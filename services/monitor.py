"""Polling orchestration: fetch, classify, advise, record and notify."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from threading import Event, Lock, Thread
from typing import Any, Callable, List, Mapping, Optional, Protocol, Tuple

from datastore.latest_reading import LatestReadingStore, build_default_store
from models.records import (
    ConnectionMode,
    FaultStatus,
    HardwareDetails,
    HistoryEntry,
    Reading,
    Scenario,
)
from services.advisor import Analysis, analyze
from services.history import HistoricalBuffer, HistorySummary
from services.notifications import (
    NotificationIntent,
    NotificationLevel,
    NotificationLog,
    NotificationRecord,
    NotificationSink,
    NotificationState,
    decide_alert,
    decide_source_notice,
)
from services.simulator import SyntheticReadingGenerator
from settings import get_settings

logger = logging.getLogger(__name__)


class ReadingUnavailable(Exception):
    """Raised by a reading source when no usable reading can be produced."""


class ReadingSource(Protocol):
    def fetch_latest_reading(self) -> Reading:
        ...


def _parse_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        candidate = value.strip()
        if candidate.endswith("Z"):
            candidate = candidate[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError:
            return datetime.now(timezone.utc)
    else:
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _finite_number(payload: Mapping[str, Any], key: str) -> float:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ReadingUnavailable(f"Latest reading has no numeric {key!r}.")
    if not math.isfinite(value):
        raise ReadingUnavailable(f"Latest reading has a non-finite {key!r}.")
    return float(value)


def reading_from_payload(
    payload: Mapping[str, Any],
    default_mode: ConnectionMode = ConnectionMode.wifi,
) -> Reading:
    """Build a ``Reading`` from a stored or fetched JSON payload."""
    if not payload:
        raise ReadingUnavailable("No reading has been received yet.")
    voltage = _finite_number(payload, "voltage")
    temperature = _finite_number(payload, "temperature")
    mode = ConnectionMode.parse(payload.get("connection_mode"), default=default_mode)
    return Reading(
        voltage=voltage,
        temperature=temperature,
        timestamp=_parse_time(payload.get("time") or payload.get("timestamp")),
        connection_mode=mode,
    )


class StoreReadingSource:
    """Reads whatever a device last posted to the in-process store."""

    def __init__(self, store: LatestReadingStore) -> None:
        self.store = store

    def fetch_latest_reading(self) -> Reading:
        return reading_from_payload(self.store.get())


@dataclass(frozen=True)
class MonitorSnapshot:
    details: HardwareDetails
    analysis: Optional[Analysis]
    simulated: bool
    history: List[HistoryEntry]
    summary: HistorySummary
    notifications: List[NotificationRecord]


class MonitorService:
    """Turns polled readings into analyses, history points and notifications."""

    def __init__(
        self,
        source: ReadingSource,
        generator: SyntheticReadingGenerator,
        history: HistoricalBuffer,
        sink: NotificationSink,
        scenario: Scenario = Scenario.normal,
        connection_mode: ConnectionMode = ConnectionMode.wifi,
        debounce: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.source = source
        self.generator = generator
        self.history = history
        self.sink = sink
        self.scenario = scenario
        self.connection_mode = connection_mode
        self.debounce = debounce
        self.is_running = True
        self.is_connected = False
        self._clock = clock
        self._state = NotificationState()
        self._last_analysis: Optional[Analysis] = None
        self._simulated = False
        self._lock = Lock()

    @property
    def notification_state(self) -> NotificationState:
        return self._state

    @property
    def simulated(self) -> bool:
        """Whether the last tick used a synthetic reading."""
        return self._simulated

    def tick(self) -> Optional[Analysis]:
        """Run one poll cycle. Paused monitors do nothing."""
        with self._lock:
            if not self.is_running:
                return None
            reading, simulated = self._fetch()
            analysis = analyze(reading)
            self.history.append(
                HistoryEntry(
                    time=reading.timestamp,
                    voltage=reading.voltage,
                    temperature=reading.temperature,
                    fault_status=analysis.classification.fault_status,
                )
            )
            self._last_analysis = analysis
            self._simulated = simulated
            self.is_connected = True

            pending: List[NotificationIntent] = []
            notice, self._state = decide_source_notice(self._state, simulated)
            if notice is not None:
                pending.append(notice)
            alert, self._state = decide_alert(
                analysis.advisory, self._state, self._clock(), self.debounce
            )
            if alert is not None:
                pending.append(alert)

        logger.debug(
            "Poll tick complete",
            extra={
                "voltage": reading.voltage,
                "temperature": reading.temperature,
                "fault_status": analysis.classification.fault_status.value,
                "severity": analysis.classification.severity.value,
                "source": "synthetic" if simulated else "live",
            },
        )
        for intent in pending:
            self.sink.notify(intent)
        return analysis

    def refresh(self) -> Optional[Analysis]:
        return self.tick()

    def set_scenario(self, scenario: Scenario | str) -> None:
        self.scenario = Scenario(scenario)
        logger.info("Simulation scenario changed", extra={"scenario": self.scenario.value})

    def set_connection_mode(self, mode: ConnectionMode | str) -> None:
        self.connection_mode = (
            mode if isinstance(mode, ConnectionMode) else ConnectionMode.parse(mode)
        )
        logger.info(
            "Connection mode changed", extra={"connection_mode": self.connection_mode.value}
        )

    def toggle_simulation(self) -> bool:
        self.is_running = not self.is_running
        if self.is_running:
            intent = NotificationIntent(
                NotificationLevel.info, "Simulation Started", "Receiving simulated sensor data"
            )
        else:
            intent = NotificationIntent(
                NotificationLevel.info, "Simulation Paused", "Data updates paused"
            )
        self.sink.notify(intent)
        return self.is_running

    def hardware_details(self) -> HardwareDetails:
        analysis = self._last_analysis
        if analysis is None:
            voltage, temperature, fault, updated = 0.0, 0.0, FaultStatus.normal, None
        else:
            voltage = analysis.reading.voltage
            temperature = analysis.reading.temperature
            fault = analysis.classification.fault_status
            updated = analysis.reading.timestamp
        return HardwareDetails(
            connection_mode=self.connection_mode,
            is_connected=self.is_connected,
            is_simulation_running=self.is_running,
            simulation_scenario=self.scenario,
            current_voltage=voltage,
            current_temperature=temperature,
            fault_status=fault,
            data_points=len(self.history),
            last_update=updated,
        )

    def snapshot(self) -> MonitorSnapshot:
        with self._lock:
            details = self.hardware_details()
            analysis = self._last_analysis
            simulated = self._simulated
            entries = self.history.entries()
            summary = self.history.summarize()
        recent = self.sink.recent() if isinstance(self.sink, NotificationLog) else []
        return MonitorSnapshot(
            details=details,
            analysis=analysis,
            simulated=simulated,
            history=entries,
            summary=summary,
            notifications=recent,
        )

    def _fetch(self) -> Tuple[Reading, bool]:
        try:
            return self.source.fetch_latest_reading(), False
        except ReadingUnavailable as exc:
            if not self._state.has_shown_simulation:
                logger.info(
                    "Live reading unavailable, using synthetic data",
                    extra={"reason": str(exc), "scenario": self.scenario.value},
                )
            return self.generator.generate(self.scenario, self.connection_mode), True


class PeriodicPoller:
    """Calls ``callback`` on a worker thread every ``interval`` seconds.

    The first call happens immediately on ``start``. Calls never overlap: the
    next wait only begins after the previous call returned.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], Any],
        name: str = "pcb-monitor-poller",
    ) -> None:
        if interval <= 0:
            raise ValueError("Poll interval must be positive.")
        self.interval = interval
        self._callback = callback
        self._name = name
        self._stop = Event()
        self._thread: Optional[Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None:
            thread.join(timeout)

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self._callback()
            except Exception:  # noqa: BLE001 - keep polling after a failed tick
                logger.exception("Poll tick failed")
            if self._stop.wait(self.interval):
                break


def build_monitor(
    source: ReadingSource,
    sink: Optional[NotificationSink] = None,
    seed: Optional[int] = None,
) -> MonitorService:
    """Wire a monitor from settings around the given reading source."""
    settings = get_settings()
    try:
        scenario = Scenario(settings.simulation_scenario)
    except ValueError:
        scenario = Scenario.normal
    return MonitorService(
        source=source,
        generator=SyntheticReadingGenerator(
            seed=seed if seed is not None else settings.simulation_seed
        ),
        history=HistoricalBuffer(capacity=settings.history_size),
        sink=sink or NotificationLog(enabled=settings.notifications_enabled),
        scenario=scenario,
        connection_mode=ConnectionMode.parse(
            settings.connection_mode, default=ConnectionMode.wifi
        ),
        debounce=settings.notification_debounce,
    )


@lru_cache
def build_default_monitor() -> MonitorService:
    """Factory that wires the server-side monitor to the default store."""
    return build_monitor(StoreReadingSource(build_default_store()))
