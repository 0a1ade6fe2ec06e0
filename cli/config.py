from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class CLIConfig:
    """Where the CLI finds the backend. Poll cadence comes from ``settings``."""

    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT


def _env_timeout() -> float:
    try:
        timeout = float(os.getenv("CLI_REQUEST_TIMEOUT", "").strip())
    except ValueError:
        return DEFAULT_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_TIMEOUT


def load_config(base_url: Optional[str] = None, request_timeout: Optional[float] = None) -> CLIConfig:
    url = base_url or os.getenv("API_BASE_URL") or DEFAULT_BASE_URL
    return CLIConfig(
        base_url=url.rstrip("/"),
        request_timeout=request_timeout if request_timeout is not None else _env_timeout(),
    )
