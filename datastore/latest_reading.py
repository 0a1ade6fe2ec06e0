from __future__ import annotations

import copy
import logging
from functools import lru_cache
from threading import Lock
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class LatestReadingStore:
    """Single-slot store for the most recent reading posted by a device."""

    def __init__(self) -> None:
        self._payload: Optional[Dict[str, Any]] = None
        self._lock = Lock()

    def set(self, payload: Dict[str, Any]) -> None:
        with self._lock:
            self._payload = copy.deepcopy(payload)
        logger.info(
            "Stored latest reading",
            extra={"voltage": payload.get("voltage"), "temperature": payload.get("temperature")},
        )

    def get(self) -> Dict[str, Any]:
        """Return a copy of the stored payload, ``{}`` when nothing was posted yet."""
        with self._lock:
            if self._payload is None:
                return {}
            return copy.deepcopy(self._payload)

    def clear(self) -> None:
        with self._lock:
            self._payload = None


@lru_cache
def build_default_store() -> LatestReadingStore:
    return LatestReadingStore()
