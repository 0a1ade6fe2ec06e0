"""Scenario-based synthetic readings used when no live source answers."""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from models.records import ConnectionMode, Reading, Scenario

# (voltage base, voltage spread, temperature base, temperature spread)
_Band = Tuple[float, float, float, float]

_SCENARIO_BANDS: Dict[Scenario, List[_Band]] = {
    Scenario.normal: [(3.2, 0.2, 25.0, 5.0), (3.1, 0.2, 28.0, 5.0)],
    Scenario.overheating: [(3.1, 0.1, 65.0, 10.0), (3.0, 0.1, 70.0, 8.0)],
    Scenario.voltage_drop: [(2.7, 0.1, 30.0, 5.0), (2.6, 0.1, 32.0, 5.0)],
    Scenario.broken_trace: [(2.5, 0.2, 35.0, 10.0), (2.4, 0.2, 38.0, 10.0)],
    Scenario.random: [(2.5, 1.0, 20.0, 50.0)],
}


class SyntheticReadingGenerator:
    """Draw readings from fixed per-scenario bands.

    Pass ``seed`` (or a ``random.Random``) for a reproducible sequence.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._rng = rng or random.Random(seed)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def generate(
        self,
        scenario: Scenario | str = Scenario.normal,
        connection_mode: ConnectionMode = ConnectionMode.wifi,
    ) -> Reading:
        try:
            key = Scenario(scenario)
        except ValueError:
            key = Scenario.normal
        voltage_base, voltage_spread, temp_base, temp_spread = self._rng.choice(
            _SCENARIO_BANDS[key]
        )
        voltage = voltage_base + self._rng.random() * voltage_spread
        temperature = temp_base + self._rng.random() * temp_spread
        return Reading(
            voltage=round(voltage, 2),
            temperature=round(temperature, 1),
            timestamp=self._clock(),
            connection_mode=connection_mode,
        )
