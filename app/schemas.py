"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from models.records import ChatIntent, ConnectionMode, FaultStatus, Scenario, Severity
from services.advisor import Analysis
from services.monitor import MonitorSnapshot


class ReadingIn(BaseModel):
    """Payload a device posts. Presence of voltage and current is checked by the route.

    NaN and infinity literals are rejected here so they never reach the store.
    """

    voltage: Optional[float] = Field(default=None, allow_inf_nan=False)
    current: Optional[float] = Field(default=None, allow_inf_nan=False)
    temperature: Optional[float] = Field(default=None, allow_inf_nan=False)
    connection_mode: Optional[ConnectionMode] = None


class MessageResponse(BaseModel):
    message: str


class AnalyzeRequest(BaseModel):
    voltage: float
    temperature: float
    connection_mode: ConnectionMode = ConnectionMode.wifi


class AnalysisOut(BaseModel):
    voltage: float
    temperature: float
    timestamp: datetime
    connection_mode: ConnectionMode
    fault_status: FaultStatus
    severity: Severity
    suggestion: str

    @classmethod
    def from_analysis(cls, analysis: Analysis) -> "AnalysisOut":
        reading = analysis.reading
        return cls(
            voltage=reading.voltage,
            temperature=reading.temperature,
            timestamp=reading.timestamp,
            connection_mode=reading.connection_mode,
            fault_status=analysis.classification.fault_status,
            severity=analysis.advisory.severity,
            suggestion=analysis.advisory.suggestion,
        )


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    intent: ChatIntent
    reply: str


class HistoryPoint(BaseModel):
    time: datetime
    voltage: float
    temperature: float
    fault_status: FaultStatus


class HistoryStats(BaseModel):
    count: int = Field(..., ge=0)
    min_voltage: Optional[float] = None
    max_voltage: Optional[float] = None
    mean_voltage: Optional[float] = None
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None
    mean_temperature: Optional[float] = None
    per_fault_count: Dict[str, int] = Field(default_factory=dict)


class NotificationOut(BaseModel):
    level: str
    title: str
    description: str
    created_at: datetime


class MonitorStatus(BaseModel):
    """Everything the dashboard shows for the current poll state."""

    connection_mode: ConnectionMode
    is_connected: bool
    is_simulation_running: bool
    simulation_scenario: Scenario
    simulated: bool
    data_points: int
    last_update: Optional[datetime] = None
    analysis: Optional[AnalysisOut] = None
    history: List[HistoryPoint] = Field(default_factory=list)
    stats: HistoryStats
    notifications: List[NotificationOut] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: MonitorSnapshot) -> "MonitorStatus":
        details = snapshot.details
        summary = snapshot.summary
        return cls(
            connection_mode=details.connection_mode,
            is_connected=details.is_connected,
            is_simulation_running=details.is_simulation_running,
            simulation_scenario=details.simulation_scenario,
            simulated=snapshot.simulated,
            data_points=details.data_points,
            last_update=details.last_update,
            analysis=AnalysisOut.from_analysis(snapshot.analysis) if snapshot.analysis else None,
            history=[
                HistoryPoint(
                    time=entry.time,
                    voltage=entry.voltage,
                    temperature=entry.temperature,
                    fault_status=entry.fault_status,
                )
                for entry in snapshot.history
            ],
            stats=HistoryStats(
                count=summary.count,
                min_voltage=summary.min_voltage,
                max_voltage=summary.max_voltage,
                mean_voltage=summary.mean_voltage,
                min_temperature=summary.min_temperature,
                max_temperature=summary.max_temperature,
                mean_temperature=summary.mean_temperature,
                per_fault_count=dict(summary.per_fault_count),
            ),
            notifications=[
                NotificationOut(
                    level=record.intent.level.value,
                    title=record.intent.title,
                    description=record.intent.description,
                    created_at=record.created_at,
                )
                for record in snapshot.notifications
            ],
        )


class ScenarioUpdate(BaseModel):
    scenario: Scenario
