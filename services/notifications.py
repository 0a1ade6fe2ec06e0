"""Notification decisions and the in-process notification log.

Deciding *whether* to notify is kept pure: the functions below take the
previous ``NotificationState`` and return the intent (or ``None``) together
with the next state. Sinks only display what they are given.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from threading import Lock
from typing import Deque, List, Optional, Protocol, Tuple

from models.records import Severity
from services.advisor import Advisory

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 3.0


class NotificationLevel(str, Enum):
    info = "info"
    success = "success"
    warning = "warning"
    error = "error"


@dataclass(frozen=True)
class NotificationIntent:
    level: NotificationLevel
    title: str
    description: str
    duration: float = 5.0


@dataclass(frozen=True)
class NotificationState:
    last_severity: Optional[Severity] = None
    last_notified_at: float = 0.0
    has_shown_connection: bool = False
    has_shown_simulation: bool = False


def decide_alert(
    advisory: Advisory,
    state: NotificationState,
    now: float,
    debounce: float = DEFAULT_DEBOUNCE_SECONDS,
) -> Tuple[Optional[NotificationIntent], NotificationState]:
    """Alert on a severity change once the debounce window has elapsed.

    When the gate passes the state records the new severity and time even if
    no notification is produced (a plain ``low`` reading).
    """
    if advisory.severity == state.last_severity:
        return None, state
    if now - state.last_notified_at <= debounce:
        return None, state

    intent: Optional[NotificationIntent] = None
    if advisory.severity is Severity.high:
        intent = NotificationIntent(
            NotificationLevel.error, "Critical Fault Detected!", advisory.suggestion, 10.0
        )
    elif advisory.severity is Severity.medium:
        intent = NotificationIntent(
            NotificationLevel.warning, "System Warning", advisory.suggestion, 7.0
        )
    elif state.last_severity is Severity.high:
        intent = NotificationIntent(
            NotificationLevel.success,
            "System Normal",
            "All parameters returned to safe levels",
            5.0,
        )

    return intent, replace(state, last_severity=advisory.severity, last_notified_at=now)


def decide_source_notice(
    state: NotificationState, simulated: bool
) -> Tuple[Optional[NotificationIntent], NotificationState]:
    """One-time notice about where readings come from."""
    if simulated:
        if state.has_shown_simulation:
            return None, state
        intent = NotificationIntent(
            NotificationLevel.info,
            "Hardware Simulation Active",
            "Using simulated sensor data - Connect real hardware for live monitoring",
        )
        return intent, replace(state, has_shown_simulation=True)

    if state.has_shown_connection:
        return None, state
    intent = NotificationIntent(
        NotificationLevel.success,
        "Connected to PCB Server",
        "Real-time data streaming active",
    )
    return intent, replace(state, has_shown_connection=True)


class NotificationSink(Protocol):
    def notify(self, intent: NotificationIntent) -> None:
        ...


@dataclass(frozen=True)
class NotificationRecord:
    intent: NotificationIntent
    created_at: datetime


class NotificationLog:
    """Keeps the most recent notifications for the dashboard and logs them."""

    def __init__(self, capacity: int = 50, enabled: bool = True) -> None:
        self.enabled = enabled
        self._records: Deque[NotificationRecord] = deque(maxlen=capacity)
        self._lock = Lock()

    def notify(self, intent: NotificationIntent) -> None:
        if not self.enabled:
            return
        level = logging.WARNING if intent.level is NotificationLevel.error else logging.INFO
        logger.log(level, "%s: %s", intent.title, intent.description)
        with self._lock:
            self._records.append(
                NotificationRecord(intent=intent, created_at=datetime.now(timezone.utc))
            )

    def recent(self) -> List[NotificationRecord]:
        with self._lock:
            return list(self._records)
