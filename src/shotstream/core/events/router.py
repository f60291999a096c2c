"""
Typed publish/subscribe registry.

Every other component dispatches through an `EventRouter`: producers publish
events, the shot aggregator and observers subscribe to event kinds.

Responsibilities
----------------
- **Subscribe**: register a handler for one event kind and hand back a
  `Subscription` token that can cancel it.
- **Unsubscribe**: drop a handler; unknown handlers are ignored.
- **Publish**: call every handler registered for ``event.type``,
  synchronously and in subscription order.

Failure isolation
-----------------
A handler that raises does not stop the handlers after it and cannot damage the
registry. The failure is logged with its traceback and reported back to the
publisher as a `HandlerFailure`. Dispatch walks a snapshot of the handler list,
so handlers may subscribe or unsubscribe while an event is being delivered:
a handler removed mid-dispatch is skipped if it has not run yet, a handler added
mid-dispatch first sees the next event.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from shotstream.core.contracts.events import Event

Handler = Callable[[Event], None]


@dataclass(frozen=True, slots=True)
class HandlerFailure:
    """A handler that raised while an event was being delivered.

    Attributes
    ----------
    kind : str
        Kind of the event being delivered.
    handler : str
        Qualified name of the failing handler.
    error : Exception
        The exception it raised.
    """

    kind: str
    handler: str
    error: Exception


@dataclass(frozen=True, slots=True)
class Subscription:
    """Token returned by :meth:`EventRouter.subscribe`."""

    kind: str
    handler: Handler
    router: EventRouter = field(repr=False, compare=False)

    def cancel(self) -> bool:
        """Unsubscribe the handler; returns False if it was already gone."""
        return self.router.unsubscribe(self.kind, self.handler)


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventRouter:
    """
    Registry mapping event kinds to ordered handler lists.

    Parameters
    ----------
    logger : logging.Logger | None
        Logger used for dispatch tracing and handler failures.
    """

    __slots__ = ("_handlers", "_logger")

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._handlers: dict[str, list[Handler]] = {}
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    # ----------------------------- Registry ---------------------------------

    def subscribe(self, kind: str, handler: Handler) -> Subscription:
        """
        Register ``handler`` for events of ``kind``.

        Registering the same handler twice for one kind keeps a single entry
        (it is still called once per event).

        Returns
        -------
        Subscription
            Token whose ``cancel()`` removes the handler again.
        """
        handlers = self._handlers.setdefault(kind, [])
        if handler not in handlers:
            handlers.append(handler)
        return Subscription(kind=kind, handler=handler, router=self)

    def unsubscribe(self, kind: str, handler: Handler) -> bool:
        """Remove ``handler`` from ``kind``; a no-op returning False if absent."""
        handlers = self._handlers.get(kind)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        if not handlers:
            del self._handlers[kind]
        return True

    def handler_count(self, kind: str | None = None) -> int:
        """Number of handlers for ``kind``, or across all kinds."""
        if kind is not None:
            return len(self._handlers.get(kind, ()))
        return sum(len(hs) for hs in self._handlers.values())

    def kinds(self) -> tuple[str, ...]:
        """Kinds with at least one handler, sorted."""
        return tuple(sorted(self._handlers))

    # ----------------------------- Dispatch ---------------------------------

    def publish(self, event: Event) -> tuple[HandlerFailure, ...]:
        """
        Deliver ``event`` to every handler registered for ``event.type``.

        Parameters
        ----------
        event : Event
            A typed event; its ``type`` field selects the handlers.

        Returns
        -------
        tuple[HandlerFailure, ...]
            One entry per handler that raised; empty when all succeeded or when
            nobody is subscribed.
        """
        kind: str = event.type
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug("Dispatching event: %r", event)

        snapshot = tuple(self._handlers.get(kind, ()))
        failures: list[HandlerFailure] = []
        for handler in snapshot:
            if handler not in self._handlers.get(kind, ()):
                continue
            try:
                handler(event)
            except Exception as exc:
                name = _handler_name(handler)
                self._logger.exception("Handler %s failed on %s event", name, kind)
                failures.append(HandlerFailure(kind=kind, handler=name, error=exc))
        return tuple(failures)


__all__ = ["EventRouter", "Handler", "HandlerFailure", "Subscription"]
