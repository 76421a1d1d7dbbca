"""FastAPI receiver: fire report ingest, event log API, and polling dashboard."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from fire_receiver import handlers
from fire_receiver.event_log import EventLog
from fire_receiver.models import ClearAck, ErrorResponse, FireAck

logger = logging.getLogger(__name__)

_DASHBOARD = Path(__file__).parent / "static" / "index.html"


def _event_log(request: Request) -> EventLog:
    return request.app.state.event_log


def create_app(event_log: Optional[EventLog] = None) -> FastAPI:
    """Build the app around one shared EventLog (a fresh one if none given)."""
    log = event_log if event_log is not None else EventLog()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Event log ready (capacity {app.state.event_log.capacity})")
        yield
        logger.info(f"Shutting down, discarding {len(app.state.event_log)} events")

    app = FastAPI(title="Fire Detection Receiver", lifespan=lifespan)
    app.state.event_log = log
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(handlers.InvalidPayload)
    async def invalid_payload(request: Request, exc: handlers.InvalidPayload):
        client = request.client.host if request.client else "unknown"
        logger.warning(f"Rejected report from {client}: {exc}")
        return JSONResponse(status_code=400, content=ErrorResponse(error="Invalid body").model_dump())

    # ============================================================
    # Dashboard
    # ============================================================

    @app.get("/", response_class=HTMLResponse)
    async def dashboard():
        return HTMLResponse(_DASHBOARD.read_text(encoding="utf-8"))

    # ============================================================
    # Event API
    # ============================================================

    @app.post("/fire")
    async def receive_fire(request: Request):
        event = handlers.ingest(_event_log(request), await request.body())
        return FireAck(event=event).model_dump(mode="json")

    @app.post("/clear-events")
    async def clear_events(request: Request):
        handlers.clear(_event_log(request))
        return ClearAck().model_dump()

    @app.get("/events")
    async def list_events(request: Request):
        return [e.model_dump(mode="json") for e in handlers.query(_event_log(request))]

    return app
