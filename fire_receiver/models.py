"""Pydantic data models for recorded events and API responses."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, JsonValue, field_serializer


# ============================================================
# Event models
# ============================================================

class Event(BaseModel):
    """One recorded sensor report. Immutable once stored."""

    model_config = ConfigDict(frozen=True)

    id: int
    type: str
    payload: dict[str, JsonValue]
    timestamp: datetime

    @field_serializer("timestamp")
    def _serialize_timestamp(self, ts: datetime) -> str:
        # e.g. 2026-10-19T08:15:30.123Z
        utc = ts.astimezone(timezone.utc)
        return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


# ============================================================
# Response models
# ============================================================

class FireAck(BaseModel):
    status: Literal["received"] = "received"
    event: Event


class ClearAck(BaseModel):
    status: Literal["cleared"] = "cleared"


class ErrorResponse(BaseModel):
    error: str
