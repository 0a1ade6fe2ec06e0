from __future__ import annotations

import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("services.monitor", logging.INFO, __file__, 1, "Poll tick complete", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_extra_fields() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    line = formatter.format(_record(voltage=3.3, fault_status="Normal", unrelated="x"))

    assert line == "Poll tick complete | voltage=3.30 fault_status=Normal"


def test_formatter_without_context_returns_message() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s %(message)s")

    assert formatter.format(_record()) == "INFO Poll tick complete"
