"""Request handlers for ingest, query and admin operations on the event log.

Each handler takes the shared EventLog explicitly; the HTTP layer in app.py
only decodes the request and encodes the result.
"""

from __future__ import annotations

import json
import logging

from pydantic import JsonValue, TypeAdapter, ValidationError

from fire_receiver.event_log import EventLog
from fire_receiver.models import Event

logger = logging.getLogger(__name__)

FIRE_EVENT_TYPE = "FIRE"


class InvalidPayload(ValueError):
    """Inbound report body is not a JSON object."""


_PAYLOAD = TypeAdapter(dict[str, JsonValue])


def _reject_constant(name: str):
    raise InvalidPayload(f"non-standard JSON constant {name}")


def decode_payload(raw: bytes) -> dict:
    """Decode a report body into a JSON object. An empty body counts as {}.

    NaN/Infinity and structures too deep to store are rejected here, so
    everything that reaches the log can be serialised back out.
    """
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidPayload(f"malformed JSON: {e}") from e
    except RecursionError as e:
        raise InvalidPayload("JSON nested too deeply") from e
    if not isinstance(body, dict):
        raise InvalidPayload(f"expected a JSON object, got {type(body).__name__}")
    try:
        return _PAYLOAD.validate_python(body)
    except (ValidationError, RecursionError) as e:
        raise InvalidPayload(f"unsupported JSON structure: {str(e)[:200]}") from e


def ingest(log: EventLog, raw: bytes) -> Event:
    """Validate a sensor report and record it as a FIRE event."""
    payload = decode_payload(raw)
    event = log.append(FIRE_EVENT_TYPE, payload)
    logger.info(f"[{event.model_dump(mode='json')['timestamp']}] {event.type} - {event.payload}")
    return event


def query(log: EventLog) -> list[Event]:
    return log.snapshot()


def clear(log: EventLog) -> None:
    dropped = log.clear()
    logger.info(f"Cleared event log ({dropped} events dropped)")
