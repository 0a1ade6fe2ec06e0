"""Capped in-memory history used for charting."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List

from models.records import HistoryEntry


@dataclass
class HistorySummary:
    """Computed statistics over the buffered entries."""

    count: int = 0
    min_voltage: float | None = None
    max_voltage: float | None = None
    mean_voltage: float | None = None
    min_temperature: float | None = None
    max_temperature: float | None = None
    mean_temperature: float | None = None
    per_fault_count: Dict[str, int] = field(default_factory=dict)


class HistoricalBuffer:
    """FIFO buffer holding the most recent ``capacity`` entries in insertion order."""

    def __init__(self, capacity: int = 20) -> None:
        if capacity <= 0:
            raise ValueError("History capacity must be positive.")
        self.capacity = capacity
        self._entries: Deque[HistoryEntry] = deque(maxlen=capacity)

    def append(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)

    def extend(self, entries: Iterable[HistoryEntry]) -> None:
        for entry in entries:
            self.append(entry)

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def summarize(self) -> HistorySummary:
        summary = HistorySummary()
        voltage_total = 0.0
        temperature_total = 0.0

        for entry in self._entries:
            summary.count += 1
            voltage_total += entry.voltage
            temperature_total += entry.temperature

            if summary.min_voltage is None or entry.voltage < summary.min_voltage:
                summary.min_voltage = entry.voltage
            if summary.max_voltage is None or entry.voltage > summary.max_voltage:
                summary.max_voltage = entry.voltage
            if summary.min_temperature is None or entry.temperature < summary.min_temperature:
                summary.min_temperature = entry.temperature
            if summary.max_temperature is None or entry.temperature > summary.max_temperature:
                summary.max_temperature = entry.temperature

            fault = entry.fault_status.value
            summary.per_fault_count[fault] = summary.per_fault_count.get(fault, 0) + 1

        if summary.count:
            summary.mean_voltage = voltage_total / summary.count
            summary.mean_temperature = temperature_total / summary.count

        return summary
