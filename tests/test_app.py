from __future__ import annotations

import re

import pytest
from fastapi.testclient import TestClient

from fire_receiver.app import create_app
from fire_receiver.event_log import EventLog

ISO_UTC = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


@pytest.fixture
def client():
    with TestClient(create_app()) as c:
        yield c


def test_post_fire_returns_stored_event(client: TestClient) -> None:
    body = {"fire": True, "room_number": 2}
    resp = client.post("/fire", json=body)

    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "received"
    assert data["event"]["payload"] == body
    assert data["event"]["type"] == "FIRE"

    events = client.get("/events").json()
    assert events[0] == data["event"]


def test_event_json_shape(client: TestClient) -> None:
    event = client.post("/fire", json={"temperature": "25.3"}).json()["event"]

    assert set(event) == {"id", "type", "payload", "timestamp"}
    assert isinstance(event["id"], int)
    assert ISO_UTC.match(event["timestamp"])


def test_post_fire_rejects_json_string(client: TestClient) -> None:
    resp = client.post(
        "/fire",
        content=b'"not an object"',
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid body"}
    assert client.get("/events").json() == []


@pytest.mark.parametrize("raw", [b"[1, 2]", b"12", b"null", b"{broken"])
def test_post_fire_rejects_other_non_objects(client: TestClient, raw: bytes) -> None:
    client.post("/fire", json={"room_number": 1})

    resp = client.post("/fire", content=raw, headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid body"}
    assert len(client.get("/events").json()) == 1


def test_post_fire_without_body_records_empty_payload(client: TestClient) -> None:
    resp = client.post("/fire")

    assert resp.status_code == 200
    assert resp.json()["event"]["payload"] == {}


def test_events_newest_first(client: TestClient) -> None:
    for room in range(1, 4):
        client.post("/fire", json={"room_number": room})

    events = client.get("/events").json()
    assert [e["payload"]["room_number"] for e in events] == [3, 2, 1]
    assert [e["id"] for e in events] == sorted((e["id"] for e in events), reverse=True)


def test_events_empty_initially(client: TestClient) -> None:
    resp = client.get("/events")
    assert resp.status_code == 200
    assert resp.json() == []


def test_clear_events_on_empty_log(client: TestClient) -> None:
    resp = client.post("/clear-events")

    assert resp.status_code == 200
    assert resp.json() == {"status": "cleared"}


def test_clear_events_drops_everything(client: TestClient) -> None:
    for _ in range(3):
        client.post("/fire", json={"fire": False})

    assert client.post("/clear-events").json() == {"status": "cleared"}
    assert client.get("/events").json() == []


def test_events_bounded_by_capacity() -> None:
    with TestClient(create_app(EventLog(capacity=5))) as c:
        for i in range(8):
            c.post("/fire", json={"seq": i})
        events = c.get("/events").json()

    assert [e["payload"]["seq"] for e in events] == [7, 6, 5, 4, 3]


def test_app_uses_injected_log() -> None:
    log = EventLog()
    log.append("FIRE", {"source": "direct"})

    with TestClient(create_app(log)) as c:
        c.post("/fire", json={"source": "http"})
        events = c.get("/events").json()

    assert [e["payload"]["source"] for e in events] == ["http", "direct"]
    assert len(log) == 2


def test_apps_do_not_share_state() -> None:
    with TestClient(create_app()) as a, TestClient(create_app()) as b:
        a.post("/fire", json={"room_number": 1})
        assert b.get("/events").json() == []


def test_dashboard_served(client: TestClient) -> None:
    resp = client.get("/")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "Fire Detection Dashboard" in resp.text
    assert "/events" in resp.text


def test_cors_allows_any_origin(client: TestClient) -> None:
    resp = client.get("/events", headers={"Origin": "http://dashboard.example"})

    assert resp.headers["access-control-allow-origin"] == "*"


@pytest.mark.parametrize("raw", [b'{"t": NaN}', b'{"t": Infinity}', b'{"t": -Infinity}'])
def test_non_finite_numbers_rejected_and_log_stays_readable(client: TestClient, raw: bytes) -> None:
    resp = client.post("/fire", content=raw, headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid body"}
    events = client.get("/events")
    assert events.status_code == 200
    assert events.json() == []


@pytest.mark.parametrize("depth", [300, 1500])
def test_deeply_nested_body_rejected_and_log_stays_readable(client: TestClient, depth: int) -> None:
    raw = b'{"a": ' * depth + b"1" + b"}" * depth
    resp = client.post("/fire", content=raw, headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    events = client.get("/events")
    assert events.status_code == 200
    assert events.json() == []
