"""
Event target facade: router + aggregator + scheduler wired together.

This is the object transports and UIs hold on to. Producers call
:meth:`ShotEventTarget.publish`; observers subscribe to ``"ResultsRefresh"``
and re-read :meth:`ShotEventTarget.results` when it fires, or subscribe to raw
kinds (e.g. echo ``"Message"`` events live).

When ``capture_events`` is True the aggregator is attached before any observer
can subscribe, so it always runs first for every producer event and is never
skipped by a failing observer.
"""

from __future__ import annotations

import logging
from shotstream.core.contracts.events import Event
from shotstream.core.contracts.shot import ShotRecord
from shotstream.core.events.aggregator import ShotAggregator
from shotstream.core.events.router import EventRouter, Handler, HandlerFailure, Subscription
from shotstream.core.events.scheduler import DEFAULT_DELAY, NotificationScheduler
from shotstream.core.events.timers import AsyncioTimer, OneShotTimer
from shotstream.core.settings import Settings, settings_logger


class ShotEventTarget:
    """
    Publish/subscribe target that optionally records shots.

    Parameters
    ----------
    capture_events : bool
        Record producer events into shot records and schedule refreshes.
    timer : OneShotTimer | None
        Deferred-callback port for refreshes; defaults to `AsyncioTimer`.
    delay : float
        Coalescing window in seconds.
    logger : logging.Logger | None
        Logger shared by the router, scheduler and aggregator.
    """

    def __init__(
        self,
        capture_events: bool = True,
        *,
        timer: OneShotTimer | None = None,
        delay: float = DEFAULT_DELAY,
        logger: logging.Logger | None = None,
    ) -> None:
        self._logger = logger if logger is not None else logging.getLogger("shotstream")
        self.router = EventRouter(logger=self._logger)
        self.scheduler = NotificationScheduler(
            self.router,
            timer if timer is not None else AsyncioTimer(),
            delay=delay,
            logger=self._logger,
        )
        self.aggregator: ShotAggregator | None = None
        if capture_events:
            self.aggregator = ShotAggregator(self.scheduler, logger=self._logger)
            self.aggregator.attach(self.router)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        timer: OneShotTimer | None = None,
        logger: logging.Logger | None = None,
    ) -> ShotEventTarget:
        """
        Build a target configured from ``settings`` (delay, capture, log level).

        Without an explicit ``logger`` the target logs through
        ``shotstream.target.<level>``, which no other level setting touches.
        """
        return cls(
            settings.capture_events,
            timer=timer,
            delay=settings.refresh_delay,
            logger=logger if logger is not None else settings_logger(settings, "target"),
        )

    @property
    def capturing(self) -> bool:
        return self.aggregator is not None

    # ----------------------------- Pub/Sub ----------------------------------

    def subscribe(self, kind: str, handler: Handler) -> Subscription:
        return self.router.subscribe(kind, handler)

    def unsubscribe(self, kind: str, handler: Handler) -> bool:
        return self.router.unsubscribe(kind, handler)

    def publish(self, event: Event) -> tuple[HandlerFailure, ...]:
        return self.router.publish(event)

    # ----------------------------- Results ----------------------------------

    def results(self) -> list[ShotRecord]:
        """Snapshot of all shot records (empty when not capturing)."""
        return self.aggregator.all_results() if self.aggregator is not None else []

    def result_count(self) -> int:
        """Closed shot count; may be one less than ``len(results())``."""
        return self.aggregator.closed_shot_count() if self.aggregator is not None else 0

    @property
    def shot_active(self) -> bool:
        return self.aggregator is not None and self.aggregator.shot_active

    def clear_results(self) -> None:
        """Start a fresh run. A pending refresh still fires."""
        if self.aggregator is not None:
            self.aggregator.reset()


__all__ = ["ShotEventTarget"]
