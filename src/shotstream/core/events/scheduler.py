"""
Coalescing notification scheduler.

Observers redraw results at a cost that grows with the size of the result set,
not with the number of events. The scheduler turns any number of mutation
notices into at most one `ResultsRefreshEvent` per coalescing window.

Semantics
---------
- ``notify()`` arms one deferred refresh if none is pending; otherwise it does
  nothing. The single refresh reflects every mutation made before it fires.
- When the window elapses the pending flag is cleared first, then the refresh
  is published through the router. A notify issued by a refresh observer
  therefore arms a new window.
- Nothing here cancels a pending refresh except :meth:`flush`, which fires it
  early.
"""

from __future__ import annotations

import logging

from shotstream.core.contracts.events import ResultsRefreshEvent
from shotstream.core.events.router import EventRouter
from shotstream.core.events.timers import OneShotTimer

DEFAULT_DELAY = 0.050


class NotificationScheduler:
    """
    Rate-limits "results changed" signals to one per ``delay`` seconds.

    Parameters
    ----------
    router : EventRouter
        Router the refresh event is published through.
    timer : OneShotTimer
        Deferred-callback port (asyncio in production, manual in tests).
    delay : float
        Coalescing window in seconds.
    logger : logging.Logger | None
        Logger for scheduling traces.
    """

    __slots__ = ("_delay", "_fired", "_logger", "_pending", "_router", "_timer")

    def __init__(
        self,
        router: EventRouter,
        timer: OneShotTimer,
        *,
        delay: float = DEFAULT_DELAY,
        logger: logging.Logger | None = None,
    ) -> None:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self._router = router
        self._timer = timer
        self._delay = delay
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._pending = False
        self._fired = 0

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """True while a refresh is armed but has not fired yet."""
        return self._pending

    @property
    def fired_count(self) -> int:
        """Number of refresh events published so far."""
        return self._fired

    def notify(self) -> bool:
        """
        Request a refresh; returns True if this call armed the timer.

        The pending flag only survives if the timer accepted the callback. A
        timer that refuses (already armed elsewhere) leaves the scheduler idle,
        and one that raises (e.g. no running event loop) propagates its error
        with the flag cleared, so a later notify can arm a fresh window.
        """
        if self._pending:
            return False
        self._pending = True
        try:
            armed = self._timer.schedule(self._delay, self._fire)
        except BaseException:
            self._pending = False
            raise
        if not armed:
            self._pending = False
            self._logger.warning("Timer refused refresh request; none scheduled")
            return False
        self._logger.debug("Refresh scheduled in %.3fs", self._delay)
        return True

    def flush(self) -> bool:
        """Fire a pending refresh immediately; returns False if none was pending."""
        if not self._pending:
            return False
        self._timer.cancel()
        self._fire()
        return True

    def _fire(self) -> None:
        self._pending = False
        self._fired += 1
        self._logger.debug("Refresh #%d firing", self._fired)
        self._router.publish(ResultsRefreshEvent())


__all__ = ["DEFAULT_DELAY", "NotificationScheduler"]
