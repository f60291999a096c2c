"""Typed contracts: execution events and reconstructed shot records."""

from .events import (
    PRODUCER_EVENT_ADAPTER,
    PRODUCER_EVENT_LIST_ADAPTER,
    PRODUCER_KINDS,
    REFRESH_KIND,
    Event,
    EventKind,
    MessageEvent,
    ProducerEvent,
    ResultEvent,
    ResultsRefreshEvent,
    StateSnapshotEvent,
    make_event,
)
from .shot import MessageEntry, ShotRecord, StateSnapshotEntry, SubEvent

__all__ = [
    "Event",
    "EventKind",
    "MessageEntry",
    "MessageEvent",
    "PRODUCER_EVENT_ADAPTER",
    "PRODUCER_EVENT_LIST_ADAPTER",
    "PRODUCER_KINDS",
    "ProducerEvent",
    "REFRESH_KIND",
    "ResultEvent",
    "ResultsRefreshEvent",
    "ShotRecord",
    "StateSnapshotEntry",
    "StateSnapshotEvent",
    "SubEvent",
    "make_event",
]
