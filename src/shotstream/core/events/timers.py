"""One-shot timer port used by the notification scheduler.

The scheduler only needs: "run this callback once after D seconds; while one
callback is pending, ignore new requests". Two implementations are provided:

- `AsyncioTimer`: fires on a later tick of an asyncio event loop, i.e. on the
  same thread that publishes events.
- `ManualTimer`: a fake clock advanced explicitly, for deterministic tests and
  offline replays.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol, runtime_checkable

Callback = Callable[[], None]


@runtime_checkable
class OneShotTimer(Protocol):
    """Schedule a callback once; requests made while one is pending are ignored."""

    @property
    def pending(self) -> bool: ...

    def schedule(self, delay: float, callback: Callback) -> bool: ...

    def cancel(self) -> bool: ...


class AsyncioTimer:
    """
    One-shot timer backed by ``loop.call_later``.

    Parameters
    ----------
    loop : asyncio.AbstractEventLoop | None
        Loop to schedule on. When omitted, the running loop at the time of
        :meth:`schedule` is used, so scheduling must happen inside the loop.
    """

    __slots__ = ("_handle", "_loop")

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, delay: float, callback: Callback) -> bool:
        """Arm the timer; returns False (and does nothing) if already armed."""
        if self._handle is not None:
            return False
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()

        def _run() -> None:
            self._handle = None
            callback()

        self._handle = loop.call_later(max(delay, 0.0), _run)
        return True

    def cancel(self) -> bool:
        """Disarm a pending timer; returns False if nothing was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True


class ManualTimer:
    """
    Fake clock for tests: time only moves when :meth:`advance` is called.

    Attributes
    ----------
    now : float
        Current fake time in seconds.
    scheduled : int
        How many times the timer was armed.
    """

    __slots__ = ("_callback", "_deadline", "now", "scheduled")

    def __init__(self) -> None:
        self.now: float = 0.0
        self.scheduled: int = 0
        self._deadline: float | None = None
        self._callback: Callback | None = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    @property
    def deadline(self) -> float | None:
        """Fake time at which the pending callback fires, if any."""
        return self._deadline

    def schedule(self, delay: float, callback: Callback) -> bool:
        if self._callback is not None:
            return False
        self._deadline = self.now + max(delay, 0.0)
        self._callback = callback
        self.scheduled += 1
        return True

    def cancel(self) -> bool:
        if self._callback is None:
            return False
        self._callback = None
        self._deadline = None
        return True

    def advance(self, seconds: float) -> bool:
        """Move the clock forward; fire the callback if its deadline is reached.

        Returns True if a callback fired.
        """
        self.now += seconds
        if self._deadline is not None and self.now >= self._deadline:
            return self.fire()
        return False

    def fire(self) -> bool:
        """Run the pending callback now, regardless of its deadline."""
        callback = self._callback
        if callback is None:
            return False
        self._callback = None
        self._deadline = None
        callback()
        return True


__all__ = ["AsyncioTimer", "Callback", "ManualTimer", "OneShotTimer"]
