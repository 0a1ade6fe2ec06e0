from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Iterable, Sequence

from settings import get_settings

_DEFAULT_EXTRA_KEYS = (
    "voltage",
    "temperature",
    "fault_status",
    "severity",
    "intent",
    "scenario",
    "source",
    "connection_mode",
    "reason",
    "data_points",
)

_configured = False


class ContextualFormatter(logging.Formatter):
    """Append whitelisted ``extra`` fields as ``key=value`` pairs."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._extra_keys: Sequence[str] = tuple(extra_keys or _DEFAULT_EXTRA_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context_parts: list[str] = []
        for key in self._extra_keys:
            value = getattr(record, key, None)
            if value is None:
                continue
            if isinstance(value, float):
                value = f"{value:.2f}"
            context_parts.append(f"{key}={value}")
        if not context_parts:
            return message
        return f"{message} | {' '.join(context_parts)}"


def configure_logging(level: str | int | None = None, force: bool = False) -> None:
    """Install the contextual console handler on the root logger once."""
    global _configured
    if _configured and not force:
        return

    log_level = level if level is not None else get_settings().log_level

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": "logging_config.ContextualFormatter",
                    "fmt": "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                    "style": "%",
                    "extra_keys": list(_DEFAULT_EXTRA_KEYS),
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "contextual",
                }
            },
            "loggers": {
                # Request lines from the test client and httpx are noise next to readings.
                "httpx": {"level": "WARNING"},
            },
            "root": {"handlers": ["console"], "level": log_level},
        }
    )

    _configured = True
