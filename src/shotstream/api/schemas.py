"""Request/response models for the shotstream HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from shotstream.core.contracts.events import ProducerEvent
from shotstream.core.contracts.shot import ShotRecord


class EventBatch(BaseModel):
    """Ordered batch of producer events, published in list order."""

    events: list[ProducerEvent] = Field(default_factory=list)


class PublishReceipt(BaseModel):
    """Outcome of publishing one batch."""

    accepted: int = Field(ge=0, description="Events published.")
    handler_failures: int = Field(ge=0, description="Observer handlers that raised.")
    shot_active: bool
    closed_shots: int = Field(ge=0)


class ResultsPayload(BaseModel):
    """Snapshot of the reconstructed shots."""

    shots: list[ShotRecord] = Field(default_factory=list)
    closed_shots: int = Field(ge=0)
    shot_active: bool
    refresh_count: int = Field(ge=0)


class RefreshStatus(BaseModel):
    """What the refresh observer saw the last time a refresh fired."""

    pending: bool
    refresh_count: int = Field(ge=0)
    last_seen_shots: int | None = Field(
        default=None, description="Record count read at the last refresh, if any fired."
    )


__all__ = ["EventBatch", "PublishReceipt", "RefreshStatus", "ResultsPayload"]
