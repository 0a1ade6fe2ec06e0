"""Scripted diagnostics chat: canned replies picked by keyword intent."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from itertools import count
from typing import Callable, List, Optional, Protocol

from models.records import ChatIntent, FaultStatus, HardwareDetails, Scenario
from services.classifier import (
    TEMPERATURE_HIGH_MAX,
    TEMPERATURE_NORMAL_MAX,
    VOLTAGE_LOW_MIN,
    VOLTAGE_NORMAL_MIN,
)
from services.intents import match_intent
from services.playbooks import GENERAL_HELP, OPTIMIZATION_TIPS, WELCOME_MESSAGE, solutions_for

logger = logging.getLogger(__name__)

REPLY_FAILED_MESSAGE = (
    "Sorry, I couldn't read the hardware state just now. Please try again in a moment."
)


class SimulationControls(Protocol):
    def refresh(self) -> object:
        ...

    def set_scenario(self, scenario: Scenario) -> None:
        ...


@dataclass(frozen=True)
class ChatReply:
    intent: ChatIntent
    text: str


def system_status_line(details: HardwareDetails) -> str:
    status = details.fault_status
    voltage = details.current_voltage
    temperature = details.current_temperature

    if (
        status is FaultStatus.normal
        and voltage >= VOLTAGE_NORMAL_MIN
        and temperature <= TEMPERATURE_NORMAL_MAX
    ):
        return "System is operating normally"
    if status is FaultStatus.voltage_drop or voltage < VOLTAGE_LOW_MIN:
        return "Voltage issues detected"
    if status is FaultStatus.overheated or temperature > TEMPERATURE_HIGH_MAX:
        return "Critical overheating detected"
    if status is FaultStatus.broken_trace:
        return "Hardware fault detected"
    return "System requires attention"


def connection_details(details: HardwareDetails) -> str:
    last_update = details.last_update.isoformat() if details.last_update else "Never"
    return "\n".join(
        [
            "**Hardware Connection Details:**",
            "",
            f"Connection Mode: {details.connection_mode.value}",
            f"Connection Status: {'Connected' if details.is_connected else 'Disconnected'}",
            f"Simulation: {'Running' if details.is_simulation_running else 'Paused'}",
            f"Scenario: {details.simulation_scenario.label}",
            "",
            "**Current Readings:**",
            f"Voltage: {details.current_voltage:.2f}V",
            f"Temperature: {details.current_temperature:.1f}°C",
            f"Status: {details.fault_status.value}",
            f"Data Points: {details.data_points}",
            f"Last Update: {last_update}",
        ]
    )


def _scenario_for(lowered: str) -> Scenario:
    if "overheat" in lowered:
        return Scenario.overheating
    if "voltage" in lowered:
        return Scenario.voltage_drop
    if "broken" in lowered:
        return Scenario.broken_trace
    return Scenario.normal


_SCENARIO_REPLIES = {
    Scenario.overheating: "Switching to overheating scenario...",
    Scenario.voltage_drop: "Switching to voltage drop scenario...",
    Scenario.broken_trace: "Switching to broken trace scenario...",
    Scenario.normal: "Switching to normal operation scenario...",
}


class ChatResponder:
    """Match the message to an intent and fill in the canned reply for it."""

    def __init__(self, controls: SimulationControls) -> None:
        self.controls = controls

    def respond(self, message: str, details: HardwareDetails) -> ChatReply:
        intent = match_intent(message)
        note = f"\n\n*I detected you're asking about {intent.value.replace('_', ' ')}*"
        logger.info("Chat intent resolved", extra={"intent": intent.value})

        if intent is ChatIntent.system_status:
            text = f"{system_status_line(details)}\n\n{connection_details(details)}{note}"
        elif intent is ChatIntent.connection_details:
            text = f"{connection_details(details)}{note}"
        elif intent is ChatIntent.diagnose_faults:
            text = (
                f"**Diagnosis Report:**\n\n{system_status_line(details)}\n\n"
                f"{solutions_for(details.fault_status)}{note}"
            )
        elif intent is ChatIntent.voltage_analysis:
            text = (
                f"**Voltage Analysis:**\n\nCurrent: {details.current_voltage:.2f}V\n\n"
                f"{solutions_for(FaultStatus.voltage_drop)}{note}"
            )
        elif intent is ChatIntent.temperature_analysis:
            text = (
                f"**Temperature Analysis:**\n\nCurrent: {details.current_temperature:.1f}°C\n\n"
                f"{solutions_for(FaultStatus.overheated)}{note}"
            )
        elif intent is ChatIntent.fix_solutions:
            text = f"{solutions_for(details.fault_status)}{note}"
        elif intent is ChatIntent.optimization_tips:
            text = f"{OPTIMIZATION_TIPS}{note}"
        elif intent is ChatIntent.refresh_data:
            self.controls.refresh()
            text = "Refreshing hardware data... Check the updated readings above."
        elif intent is ChatIntent.simulation_control:
            scenario = _scenario_for(message.lower())
            self.controls.set_scenario(scenario)
            text = f"{_SCENARIO_REPLIES[scenario]}{note}"
        else:
            text = GENERAL_HELP

        return ChatReply(intent=intent, text=text)


class ChatState(str, Enum):
    closed = "closed"
    idle = "idle"
    awaiting = "awaiting"


class ChatBusyError(RuntimeError):
    """Raised when a message is submitted while a reply is still pending."""


@dataclass(frozen=True)
class ChatMessage:
    id: int
    text: str
    is_bot: bool
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    intent: Optional[ChatIntent] = None


TimerFactory = Callable[[float, Callable[..., None], tuple], threading.Timer]


def _default_timer(delay: float, function: Callable[..., None], args: tuple) -> threading.Timer:
    timer = threading.Timer(delay, function, args=args)
    timer.daemon = True
    return timer


class ChatSession:
    """One operator's chat window.

    Replies are delivered after a fixed delay. Only one message can be in
    flight; closing the session discards a reply that is still scheduled.
    """

    def __init__(
        self,
        responder: ChatResponder,
        details_provider: Callable[[], HardwareDetails],
        delay: float = 1.0,
        timer_factory: TimerFactory = _default_timer,
    ) -> None:
        self.responder = responder
        self.details_provider = details_provider
        self.delay = delay
        self.state = ChatState.closed
        self.messages: List[ChatMessage] = []
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._ids = count(1)
        self._lock = threading.Lock()
        self._reply_ready = threading.Event()

    def open(self) -> None:
        with self._lock:
            if self.state is not ChatState.closed:
                return
            self.state = ChatState.idle
            if not self.messages:
                self.messages.append(ChatMessage(next(self._ids), WELCOME_MESSAGE, is_bot=True))

    def submit(self, text: str) -> bool:
        """Queue ``text`` for a reply. Blank input is ignored and returns ``False``."""
        if not text.strip():
            return False
        with self._lock:
            if self.state is ChatState.closed:
                raise RuntimeError("Chat session is closed.")
            if self.state is ChatState.awaiting:
                raise ChatBusyError("A reply is still pending.")
            self.messages.append(ChatMessage(next(self._ids), text, is_bot=False))
            self.state = ChatState.awaiting
            self._reply_ready.clear()
            timer = self._timer_factory(self.delay, self._deliver, (self._generation, text))
            self._timer = timer
        timer.start()
        return True

    def wait_for_reply(self, timeout: Optional[float] = None) -> Optional[ChatMessage]:
        """Block until the pending reply lands; return it, or ``None`` on timeout."""
        if not self._reply_ready.wait(timeout):
            return None
        with self._lock:
            for message in reversed(self.messages):
                if message.is_bot:
                    return message
        return None

    def close(self) -> None:
        with self._lock:
            timer, self._timer = self._timer, None
            self._generation += 1
            self.state = ChatState.closed
        if timer is not None:
            timer.cancel()

    def _deliver(self, generation: int, text: str) -> None:
        # Held across respond(): a concurrent close() waits for the reply to be recorded.
        with self._lock:
            if generation != self._generation or self.state is not ChatState.awaiting:
                logger.debug("Dropping reply for a closed chat session")
                return
            try:
                reply = self.responder.respond(text, self.details_provider())
                message = ChatMessage(next(self._ids), reply.text, is_bot=True, intent=reply.intent)
            except Exception:  # noqa: BLE001 - a failed reply must not wedge the session
                logger.exception("Chat reply failed")
                message = ChatMessage(next(self._ids), REPLY_FAILED_MESSAGE, is_bot=True)
            self.messages.append(message)
            self.state = ChatState.idle
            self._timer = None
        self._reply_ready.set()
