"""Shot record contracts.

A `ShotRecord` is the reconstructed data for one execution attempt: the ordered
sub-events observed while the shot ran, plus its terminal outcome. Records are
created and mutated only by the shot aggregator; everything handed out to
callers is a deep copy.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field


class MessageEntry(BaseModel):
    """A message observed during a shot."""

    type: Literal["Message"] = "Message"
    message: str


class StateSnapshotEntry(BaseModel):
    """A state dump observed during a shot."""

    type: Literal["StateSnapshot"] = "StateSnapshot"
    state: dict[str, Any] = Field(default_factory=dict)
    rendered_form: str | None = None


SubEvent = Annotated[MessageEntry | StateSnapshotEntry, Field(discriminator="type")]


class ShotRecord(BaseModel):
    """One execution attempt.

    ``success`` and ``result`` keep their defaults until a Result event closes
    the shot.
    """

    sub_events: list[SubEvent] = Field(default_factory=list)
    success: bool = False
    result: str = ""

    @property
    def messages(self) -> list[str]:
        """Message texts of this shot, in arrival order."""
        return [e.message for e in self.sub_events if isinstance(e, MessageEntry)]


__all__ = ["MessageEntry", "ShotRecord", "StateSnapshotEntry", "SubEvent"]
