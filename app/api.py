"""HTTP route definitions for the service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas import (
    AnalysisOut,
    AnalyzeRequest,
    ChatRequest,
    ChatResponse,
    MessageResponse,
    MonitorStatus,
    ReadingIn,
    ScenarioUpdate,
)
from datastore.latest_reading import LatestReadingStore, build_default_store
from models.records import Reading
from services.advisor import analyze
from services.chat import ChatResponder
from services.monitor import MonitorService, build_default_monitor

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store() -> LatestReadingStore:
    return build_default_store()


def get_monitor() -> MonitorService:
    return build_default_monitor()


@router.post(
    "/api/data",
    response_model=MessageResponse,
    summary="Receive the latest reading from a device.",
)
async def receive_reading(
    payload: ReadingIn,
    store: LatestReadingStore = Depends(get_store),
) -> MessageResponse:
    if not payload.voltage or not payload.current:
        logger.warning("Rejected reading", extra={"reason": "missing voltage or current"})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing voltage or current",
        )

    stored: Dict[str, Any] = payload.model_dump(mode="json", exclude_none=True)
    stored["time"] = datetime.now(timezone.utc).isoformat()
    store.set(stored)
    return MessageResponse(message="Data received successfully")


@router.get(
    "/api/data/latest",
    summary="Return the last stored reading verbatim.",
)
async def latest_reading(
    store: LatestReadingStore = Depends(get_store),
) -> Dict[str, Any]:
    return store.get()


@router.post(
    "/api/analyze",
    response_model=AnalysisOut,
    summary="Classify a reading and return the matching advisory.",
)
async def analyze_reading(request: AnalyzeRequest) -> AnalysisOut:
    reading = Reading(
        voltage=request.voltage,
        temperature=request.temperature,
        timestamp=datetime.now(timezone.utc),
        connection_mode=request.connection_mode,
    )
    return AnalysisOut.from_analysis(analyze(reading))


@router.post(
    "/api/chat",
    response_model=ChatResponse,
    summary="Ask the diagnostics assistant a question.",
)
async def chat(
    request: ChatRequest,
    monitor: MonitorService = Depends(get_monitor),
) -> ChatResponse:
    if not request.message.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message must not be blank",
        )
    reply = ChatResponder(controls=monitor).respond(request.message, monitor.hardware_details())
    return ChatResponse(intent=reply.intent, reply=reply.text)


@router.get(
    "/api/monitor",
    response_model=MonitorStatus,
    summary="Current monitor state, history and notifications.",
)
async def monitor_status(
    monitor: MonitorService = Depends(get_monitor),
) -> MonitorStatus:
    return MonitorStatus.from_snapshot(monitor.snapshot())


@router.post(
    "/api/monitor/refresh",
    response_model=MonitorStatus,
    summary="Poll the reading source immediately.",
)
async def monitor_refresh(
    monitor: MonitorService = Depends(get_monitor),
) -> MonitorStatus:
    monitor.refresh()
    return MonitorStatus.from_snapshot(monitor.snapshot())


@router.post(
    "/api/monitor/toggle",
    response_model=MonitorStatus,
    summary="Pause or resume polling.",
)
async def monitor_toggle(
    monitor: MonitorService = Depends(get_monitor),
) -> MonitorStatus:
    monitor.toggle_simulation()
    return MonitorStatus.from_snapshot(monitor.snapshot())


@router.put(
    "/api/monitor/scenario",
    response_model=MonitorStatus,
    summary="Select the synthetic data scenario.",
)
async def monitor_scenario(
    update: ScenarioUpdate,
    monitor: MonitorService = Depends(get_monitor),
) -> MonitorStatus:
    monitor.set_scenario(update.scenario)
    return MonitorStatus.from_snapshot(monitor.snapshot())


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "Fault detection backend running. See /ui for the dashboard."}
