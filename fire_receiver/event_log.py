"""In-memory event log for sensor reports, exposed via API for dashboard display."""

from __future__ import annotations

import copy
import threading
import time
from collections import deque
from datetime import datetime, timezone
from typing import Any

from fire_receiver.models import Event

MAX_EVENTS = 200


class EventLog:
    """Bounded, newest-first log of events shared by all request handlers.

    append, snapshot and clear each run inside one lock-guarded critical
    section, so concurrent callers always see a state produced by some serial
    order of those calls.
    """

    def __init__(self, capacity: int = MAX_EVENTS):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._events: deque[Event] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._last_id = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def _next_id(self) -> int:
        # Caller holds the lock. Millisecond clock, bumped past the last id on ties.
        self._last_id = max(time.time_ns() // 1_000_000, self._last_id + 1)
        return self._last_id

    def append(self, type: str, payload: dict[str, Any]) -> Event:
        """Record an event at the front, evicting the oldest when full."""
        # Validate outside the lock; only id, timestamp and insertion happen inside.
        draft = Event(
            id=0,
            type=type,
            payload=copy.deepcopy(payload),
            timestamp=datetime.now(timezone.utc),
        )
        with self._lock:
            event = draft.model_copy(
                update={"id": self._next_id(), "timestamp": datetime.now(timezone.utc)}
            )
            self._events.appendleft(event)
        return event.model_copy(deep=True)

    def snapshot(self) -> list[Event]:
        """Return a caller-owned copy of the log, newest first."""
        with self._lock:
            events = list(self._events)
        # Events are frozen; only the payload dicts need detaching.
        return [e.model_copy(deep=True) for e in events]

    def clear(self) -> int:
        """Drop every event. Returns how many were dropped."""
        with self._lock:
            dropped = len(self._events)
            self._events.clear()
        return dropped
