"""Keyword scoring that maps free chat text to an intent."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from models.records import ChatIntent

CONFIDENCE_THRESHOLD = 0.3

INTENT_KEYWORDS: Tuple[Tuple[ChatIntent, Tuple[str, ...]], ...] = (
    (
        ChatIntent.system_status,
        ("status", "how is", "current", "what's happening", "system health"),
    ),
    (
        ChatIntent.connection_details,
        ("connection", "hardware", "details", "connect", "wifi", "bluetooth", "ble"),
    ),
    (
        ChatIntent.diagnose_faults,
        ("diagnose", "fault", "problem", "issue", "error", "wrong", "broken"),
    ),
    (
        ChatIntent.voltage_analysis,
        ("voltage", "power", "battery", "vcc", "3.3v", "5v"),
    ),
    (
        ChatIntent.temperature_analysis,
        ("temperature", "heat", "hot", "cool", "thermal", "°c", "celsius"),
    ),
    (
        ChatIntent.fix_solutions,
        ("fix", "solution", "repair", "resolve", "troubleshoot"),
    ),
    (
        ChatIntent.optimization_tips,
        ("optimize", "improve", "better", "enhance", "performance", "efficient"),
    ),
    (
        ChatIntent.refresh_data,
        ("refresh", "update", "reload", "sync"),
    ),
    (
        ChatIntent.simulation_control,
        ("simulation", "scenario", "mode", "test"),
    ),
)


@dataclass(frozen=True)
class IntentScore:
    intent: ChatIntent
    score: int
    confidence: float


def score_intents(
    text: str,
    table: Sequence[Tuple[ChatIntent, Sequence[str]]] = INTENT_KEYWORDS,
) -> List[IntentScore]:
    lowered = text.lower()
    scores: List[IntentScore] = []
    for intent, keywords in table:
        score = sum(1 for keyword in keywords if keyword in lowered)
        scores.append(IntentScore(intent=intent, score=score, confidence=score / len(keywords)))
    return scores


def match_intent(text: str) -> ChatIntent:
    """Pick the intent with the highest keyword score.

    The winner is the first intent reaching the top score in table order, but
    the cut-off is applied to its confidence: a winner whose confidence is at
    or below ``CONFIDENCE_THRESHOLD`` falls back to ``general_help``.
    """
    best: IntentScore | None = None
    for candidate in score_intents(text):
        if candidate.score > (best.score if best else 0):
            best = candidate

    if best is None or best.confidence <= CONFIDENCE_THRESHOLD:
        return ChatIntent.general_help
    return best.intent
