"""Contract tests for events and shot records.

Covers the discriminated unions (parsing by ``type``), immutability of events,
`make_event`, and the JSON shape of `ShotRecord`.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shotstream.core.contracts.events import (
    PRODUCER_EVENT_ADAPTER,
    PRODUCER_EVENT_LIST_ADAPTER,
    MessageEvent,
    ResultEvent,
    ResultsRefreshEvent,
    StateSnapshotEvent,
    make_event,
)
from shotstream.core.contracts.shot import MessageEntry, ShotRecord, StateSnapshotEntry


def test_producer_events_parse_by_discriminator() -> None:
    events = PRODUCER_EVENT_LIST_ADAPTER.validate_python(
        [
            {"type": "Message", "text": "hi"},
            {"type": "StateSnapshot", "state": {"|0⟩": [1, 0]}, "rendered_form": None},
            {"type": "Result", "success": True, "value": "Zero"},
        ]
    )
    assert [type(e) for e in events] == [MessageEvent, StateSnapshotEvent, ResultEvent]


def test_unknown_or_refresh_kind_rejected_from_producers() -> None:
    with pytest.raises(ValidationError):
        PRODUCER_EVENT_ADAPTER.validate_python({"type": "Bogus"})
    with pytest.raises(ValidationError):
        PRODUCER_EVENT_ADAPTER.validate_python({"type": "ResultsRefresh"})


def test_result_requires_fields() -> None:
    with pytest.raises(ValidationError):
        PRODUCER_EVENT_ADAPTER.validate_json('{"type": "Result", "value": "x"}')


def test_events_are_frozen() -> None:
    ev = MessageEvent(text="a")
    with pytest.raises(ValidationError):
        ev.text = "b"  # type: ignore[misc]


def test_make_event_builds_typed_models() -> None:
    assert make_event("Message", text="m") == MessageEvent(text="m")
    assert make_event("Result", success=False, value="err").success is False
    assert isinstance(make_event("ResultsRefresh"), ResultsRefreshEvent)
    with pytest.raises(ValueError):
        make_event("Nope", text="x")  # type: ignore[arg-type]


def test_shot_record_defaults_and_dump() -> None:
    shot = ShotRecord()
    assert (shot.sub_events, shot.success, shot.result) == ([], False, "")

    shot.sub_events.append(MessageEntry(message="a"))
    shot.sub_events.append(StateSnapshotEntry(state={"k": 1}, rendered_form="K"))
    dumped = shot.model_dump(mode="json")
    assert dumped["sub_events"][0] == {"type": "Message", "message": "a"}
    assert dumped["sub_events"][1]["type"] == "StateSnapshot"

    restored = ShotRecord.model_validate(dumped)
    assert restored == shot
    assert restored.messages == ["a"]
