from __future__ import annotations

import pytest

from models.records import ChatIntent
from services.intents import INTENT_KEYWORDS, match_intent, score_intents


def test_single_weak_keyword_falls_back_to_general_help() -> None:
    # "voltage" scores 1 of 6 keywords, confidence 0.17 is under the cut-off.
    assert match_intent("what's my voltage doing") is ChatIntent.general_help


@pytest.mark.parametrize(
    ("text", "intent"),
    [
        ("voltage power battery", ChatIntent.voltage_analysis),
        ("What's the current system status?", ChatIntent.system_status),
        ("Show hardware connection details", ChatIntent.connection_details),
        ("refresh and update", ChatIntent.refresh_data),
        ("switch simulation scenario to overheat", ChatIntent.simulation_control),
        ("How do I FIX and REPAIR this?", ChatIntent.fix_solutions),
    ],
)
def test_match_intent(text: str, intent: ChatIntent) -> None:
    assert match_intent(text) is intent


def test_confidence_at_threshold_boundary_is_rejected() -> None:
    # diagnose + fault = 2/7 ~= 0.29
    assert match_intent("Diagnose current faults") is ChatIntent.general_help


def test_ties_go_to_first_intent_in_table_order() -> None:
    assert match_intent("status current fix repair") is ChatIntent.system_status


def test_argmax_uses_score_but_gate_uses_confidence() -> None:
    # diagnose_faults and simulation_control both score 2; the earlier one wins
    # and its 2/7 confidence fails the gate even though 2/4 would have passed.
    scores = {item.intent: item for item in score_intents("diagnose fault simulation scenario")}
    assert scores[ChatIntent.diagnose_faults].score == 2
    assert scores[ChatIntent.simulation_control].confidence == 0.5

    assert match_intent("diagnose fault simulation scenario") is ChatIntent.general_help


def test_empty_text_is_general_help() -> None:
    assert match_intent("") is ChatIntent.general_help


def test_score_intents_covers_every_table_entry() -> None:
    scores = score_intents("anything")

    assert [item.intent for item in scores] == [intent for intent, _ in INTENT_KEYWORDS]
    assert len(scores) == 9
    assert all(item.score == 0 for item in scores)
