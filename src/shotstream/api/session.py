"""
In-process shot session backing the HTTP API.

Responsibilities
----------------
- **Own** one `ShotEventTarget` per application instance.
- **Observe** coalesced refreshes: a refresh observer reads the record count
  at fire time, the way a UI would re-read state when told to redraw.
- **Summarize** state into API payloads.

Note on Persistence
-------------------
Results live in memory only. A restart starts from an empty session.
"""

from __future__ import annotations

from typing import Any

from shotstream.api.schemas import PublishReceipt, RefreshStatus, ResultsPayload
from shotstream.core.contracts.events import REFRESH_KIND, Event
from shotstream.core.events.target import ShotEventTarget
from shotstream.core.events.timers import OneShotTimer
from shotstream.core.settings import Settings, settings_logger


class ShotSession:
    """One event target plus the bookkeeping the endpoints report on."""

    def __init__(self, settings: Settings, timer: OneShotTimer | None = None) -> None:
        self.settings = settings
        self.target = ShotEventTarget.from_settings(settings, timer=timer)
        self._logger = settings_logger(settings, "api")
        self.last_seen_shots: int | None = None
        self.target.subscribe(REFRESH_KIND, self._on_refresh)

    def _on_refresh(self, _event: Event) -> None:
        self.last_seen_shots = len(self.target.results())
        self._logger.debug("Refresh observed: %d shot(s)", self.last_seen_shots)

    def publish_all(self, events: list[Any]) -> PublishReceipt:
        """Publish ``events`` in order and report the resulting state."""
        failures = 0
        for event in events:
            failures += len(self.target.publish(event))
        return PublishReceipt(
            accepted=len(events),
            handler_failures=failures,
            shot_active=self.target.shot_active,
            closed_shots=self.target.result_count(),
        )

    def results(self) -> ResultsPayload:
        return ResultsPayload(
            shots=self.target.results(),
            closed_shots=self.target.result_count(),
            shot_active=self.target.shot_active,
            refresh_count=self.target.scheduler.fired_count,
        )

    def reset(self) -> ResultsPayload:
        self.target.clear_results()
        return self.results()

    def refresh_status(self) -> RefreshStatus:
        return RefreshStatus(
            pending=self.target.scheduler.pending,
            refresh_count=self.target.scheduler.fired_count,
            last_seen_shots=self.last_seen_shots,
        )

    def close(self) -> None:
        """Deliver a pending refresh before shutdown."""
        if self.target.scheduler.flush():
            self._logger.info("Flushed pending refresh on shutdown")


__all__ = ["ShotSession"]
