"""Typed execution events.

A remote computation emits three kinds of events while it runs shots:

- `MessageEvent`       : free-form diagnostic text emitted during a shot.
- `StateSnapshotEvent` : a point-in-time dump of the computation state, plus an
  optional pre-rendered form (e.g. LaTeX).
- `ResultEvent`        : the terminal outcome of one shot.

A fourth kind, `ResultsRefreshEvent`, never comes from a producer. It is fired
by the notification scheduler to tell observers that the accumulated results
changed and should be re-read.

Design Notes
------------
- **Tagged union**: every model carries a literal ``type`` field, used both as
  the pydantic discriminator and as the router's dispatch key.
- **Immutability**: events are frozen; handlers may share them freely.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

EventKind = Literal["Message", "StateSnapshot", "Result", "ResultsRefresh"]

PRODUCER_KINDS: tuple[EventKind, ...] = ("Message", "StateSnapshot", "Result")
REFRESH_KIND: EventKind = "ResultsRefresh"


class _EventBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class MessageEvent(_EventBase):
    """Diagnostic text emitted during a shot."""

    type: Literal["Message"] = "Message"
    text: str = Field(description="Message text as emitted by the program.")


class StateSnapshotEvent(_EventBase):
    """Dump of the computation state at one point of a shot."""

    type: Literal["StateSnapshot"] = "StateSnapshot"
    state: dict[str, Any] = Field(
        default_factory=dict,
        description="Opaque state dump, e.g. basis-state label -> amplitude.",
    )
    rendered_form: str | None = Field(
        default=None, description="Optional pre-rendered representation (e.g. LaTeX)."
    )


class ResultEvent(_EventBase):
    """Terminal outcome of one shot."""

    type: Literal["Result"] = "Result"
    success: bool = Field(description="False when the shot ended in a runtime failure.")
    value: str = Field(description="Rendered return value, or the failure message.")


class ResultsRefreshEvent(_EventBase):
    """Coalesced signal: results changed, re-read them now."""

    type: Literal["ResultsRefresh"] = "ResultsRefresh"


ProducerEvent = Annotated[
    MessageEvent | StateSnapshotEvent | ResultEvent,
    Field(discriminator="type"),
]

Event = Annotated[
    MessageEvent | StateSnapshotEvent | ResultEvent | ResultsRefreshEvent,
    Field(discriminator="type"),
]

PRODUCER_EVENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(ProducerEvent)
PRODUCER_EVENT_LIST_ADAPTER: TypeAdapter[Any] = TypeAdapter(list[ProducerEvent])

_MODELS: dict[str, type[_EventBase]] = {
    "Message": MessageEvent,
    "StateSnapshot": StateSnapshotEvent,
    "Result": ResultEvent,
    "ResultsRefresh": ResultsRefreshEvent,
}


def make_event(kind: EventKind, **detail: Any) -> Any:
    """Build the typed event model for ``kind`` from keyword fields.

    >>> make_event("Result", success=True, value="0").type
    'Result'

    Raises
    ------
    ValueError
        If ``kind`` is not a known event kind.
    """
    model = _MODELS.get(kind)
    if model is None:
        raise ValueError(f"unknown event kind: {kind!r}")
    return model(**detail)


__all__ = [
    "Event",
    "EventKind",
    "MessageEvent",
    "PRODUCER_EVENT_ADAPTER",
    "PRODUCER_EVENT_LIST_ADAPTER",
    "PRODUCER_KINDS",
    "ProducerEvent",
    "REFRESH_KIND",
    "ResultEvent",
    "ResultsRefreshEvent",
    "StateSnapshotEvent",
    "make_event",
]
