from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from services.classifier import TEMPERATURE_GAUGE_RANGE, VOLTAGE_GAUGE_RANGE, gauge_fraction
from services.monitor import MonitorService, build_default_monitor
from services.playbooks import SUGGESTED_QUESTIONS
from settings import get_settings


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


def get_monitor() -> MonitorService:
    return build_default_monitor()


def _gauge_percent(value: float, bounds: tuple[float, float]) -> int:
    return round(gauge_fraction(value, bounds) * 100)


_SEVERITY_CLASSES = {"low": "ok", "medium": "warn", "high": "crit"}


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
async def ui_index(
    request: Request,
    monitor: MonitorService = Depends(get_monitor),
) -> HTMLResponse:
    snapshot = monitor.snapshot()
    details = snapshot.details
    analysis = snapshot.analysis
    severity = analysis.advisory.severity.value if analysis else "low"
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {
            "snapshot": snapshot,
            "details": details,
            "analysis": analysis,
            "severity_class": _SEVERITY_CLASSES[severity],
            "voltage_percent": _gauge_percent(details.current_voltage, VOLTAGE_GAUGE_RANGE),
            "temperature_percent": _gauge_percent(
                details.current_temperature, TEMPERATURE_GAUGE_RANGE
            ),
            "history": list(reversed(snapshot.history)),
            "notifications": list(reversed(snapshot.notifications))[:5],
            "questions": SUGGESTED_QUESTIONS,
            "refresh_seconds": max(1, round(get_settings().poll_interval)),
        },
    )
