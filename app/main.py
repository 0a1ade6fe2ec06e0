from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router
from app.web import router as web_router
from logging_config import configure_logging
from services.monitor import PeriodicPoller, build_default_monitor
from settings import get_settings


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    monitor = build_default_monitor()
    poller = PeriodicPoller(settings.poll_interval, monitor.tick)
    if settings.monitor_autostart:
        poller.start()
    try:
        yield
    finally:
        poller.stop()
        build_default_monitor.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="PCB Health Monitor",
        description="Latest-reading backend with fault classification and a diagnostics assistant.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.include_router(router)
    app.include_router(web_router)
    return app

app = create_app()
