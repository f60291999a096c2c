# tests/test_api_integration.py
"""
Integration Tests for the shotstream HTTP API.

Focus
-----
These tests verify the HTTP contract (request/response schemas) and the shot
state machine behind it. Refresh timing is driven by a `ManualTimer` injected
into the application factory.

Scenarios
---------
1. **Publish & Read**: POST /events -> GET /results.
2. **Coalescing**: many events -> one refresh, observed at fire time.
3. **Reset**: POST /results/reset before a pending refresh fires.
4. **Validation**: malformed events are rejected with 422.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from shotstream.api.app import create_app
from shotstream.core.events.timers import ManualTimer
from shotstream.core.settings import Settings


@pytest.fixture  # type: ignore[misc]
def timer() -> ManualTimer:
    return ManualTimer()


@pytest.fixture  # type: ignore[misc]
def client(timer: ManualTimer) -> Generator[TestClient, None, None]:
    """A fresh app (and session) per test, on a manual clock."""
    app = create_app(Settings(environment="test", refresh_delay_ms=50), timer=timer)
    with TestClient(app) as c:
        yield c


def test_publish_then_read_results(client: TestClient) -> None:
    payload = {
        "events": [
            {"type": "Message", "text": "a"},
            {"type": "Message", "text": "b"},
            {"type": "Result", "success": True, "value": "0"},
            {"type": "StateSnapshot", "state": {"|1⟩": [1.0, 0.0]}},
        ]
    }
    resp = client.post("/events", json=payload)
    assert resp.status_code == 202
    receipt = resp.json()
    assert receipt == {
        "accepted": 4,
        "handler_failures": 0,
        "shot_active": True,
        "closed_shots": 1,
    }

    data = client.get("/results").json()
    assert data["closed_shots"] == 1
    assert data["shot_active"] is True
    assert len(data["shots"]) == 2
    first, second = data["shots"]
    assert first["sub_events"] == [
        {"type": "Message", "message": "a"},
        {"type": "Message", "message": "b"},
    ]
    assert (first["success"], first["result"]) == (True, "0")
    assert second["sub_events"][0]["type"] == "StateSnapshot"
    assert (second["success"], second["result"]) == (False, "")


def test_batches_coalesce_into_one_refresh(client: TestClient, timer: ManualTimer) -> None:
    for i in range(5):
        event = {"type": "Result", "success": True, "value": str(i)}
        client.post("/events", json={"events": [event]})

    status = client.get("/refresh").json()
    assert status == {"pending": True, "refresh_count": 0, "last_seen_shots": None}

    timer.advance(0.05)

    status = client.get("/refresh").json()
    assert status == {"pending": False, "refresh_count": 1, "last_seen_shots": 5}
    assert client.get("/results").json()["refresh_count"] == 1


def test_reset_before_refresh_fires(client: TestClient, timer: ManualTimer) -> None:
    client.post("/events", json={"events": [{"type": "Message", "text": "a"}]})

    data = client.post("/results/reset").json()
    assert data["shots"] == []
    assert data["closed_shots"] == 0
    assert data["shot_active"] is False

    timer.advance(0.05)
    status = client.get("/refresh").json()
    assert status["refresh_count"] == 1
    assert status["last_seen_shots"] == 0


def test_empty_batch_is_accepted(client: TestClient) -> None:
    resp = client.post("/events", json={"events": []})
    assert resp.status_code == 202
    assert resp.json()["accepted"] == 0


def test_malformed_event_rejected(client: TestClient) -> None:
    resp = client.post("/events", json={"events": [{"type": "Result", "value": "x"}]})
    assert resp.status_code == 422

    resp = client.post("/events", json={"events": [{"type": "ResultsRefresh"}]})
    assert resp.status_code == 422

    assert client.get("/results").json()["shots"] == []


def test_shutdown_flushes_pending_refresh(timer: ManualTimer) -> None:
    app = create_app(Settings(environment="test"), timer=timer)
    with TestClient(app) as c:
        c.post("/events", json={"events": [{"type": "Message", "text": "a"}]})
        assert c.get("/refresh").json()["pending"] is True

    session = app.state.session
    assert session.refresh_status().pending is False
    assert session.refresh_status().refresh_count == 1
    assert session.last_seen_shots == 1
