"""
Shot aggregator: rebuilds per-shot records from the event stream.

The stream carries no "shot start" marker. A shot starts implicitly with the
first event seen while no shot is open and ends with its `Result` event:

    NoActiveShot --Message/StateSnapshot--> ShotOpen    (new record + sub-event)
    ShotOpen     --Message/StateSnapshot--> ShotOpen    (sub-event)
    ShotOpen     --Result-------------------> NoActiveShot (record closed)
    NoActiveShot --Result-------------------> NoActiveShot (empty record, closed)

Every transition mutates the record list, then asks the scheduler for a
refresh. Closed records are never touched again; readers only ever get deep
copies.
"""

from __future__ import annotations

import copy
import enum
import logging
from typing import TYPE_CHECKING

from shotstream.core.contracts.events import (
    PRODUCER_KINDS,
    Event,
    MessageEvent,
    ResultEvent,
    StateSnapshotEvent,
)
from shotstream.core.contracts.shot import MessageEntry, ShotRecord, StateSnapshotEntry
from shotstream.core.settings import TRACE

if TYPE_CHECKING:
    from shotstream.core.events.router import EventRouter, Subscription
    from shotstream.core.events.scheduler import NotificationScheduler


class ShotState(enum.Enum):
    NO_ACTIVE_SHOT = "NoActiveShot"
    SHOT_OPEN = "ShotOpen"


class ShotAggregator:
    """
    Owns the ordered list of shot records and the open-shot flag.

    Parameters
    ----------
    scheduler : NotificationScheduler | None
        Receives one ``notify()`` per transition. ``None`` disables refreshes.
    logger : logging.Logger | None
        Logger for transition traces.
    """

    __slots__ = ("_logger", "_results", "_scheduler", "_shot_active", "_subscriptions")

    def __init__(
        self,
        scheduler: NotificationScheduler | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._results: list[ShotRecord] = []
        self._shot_active = False
        self._subscriptions: tuple[Subscription, ...] = ()

    # ----------------------------- Wiring -----------------------------------

    def attach(self, router: EventRouter) -> tuple[Subscription, ...]:
        """Subscribe :meth:`handle` to every producer event kind on ``router``."""
        self.detach()
        self._subscriptions = tuple(router.subscribe(kind, self.handle) for kind in PRODUCER_KINDS)
        return self._subscriptions

    def detach(self) -> None:
        """Remove the subscriptions made by :meth:`attach`."""
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions = ()

    # ----------------------------- Transitions ------------------------------

    def handle(self, event: Event) -> None:
        """Apply one producer event; other kinds are ignored."""
        match event:
            case MessageEvent(text=text):
                self._current().sub_events.append(MessageEntry(message=text))
            case StateSnapshotEvent(state=state, rendered_form=rendered_form):
                self._current().sub_events.append(
                    StateSnapshotEntry(state=copy.deepcopy(state), rendered_form=rendered_form)
                )
            case ResultEvent(success=success, value=value):
                record = self._current()
                record.success = success
                record.result = value
                self._shot_active = False
                self._logger.debug("Shot %d closed (success=%s)", len(self._results), success)
            case _:
                return
        if self._scheduler is not None:
            self._scheduler.notify()

    def _current(self) -> ShotRecord:
        """Return the open record, opening a new one if none is open."""
        if not self._shot_active:
            self._results.append(ShotRecord())
            self._shot_active = True
            self._logger.log(TRACE, "Shot %d opened", len(self._results))
        return self._results[-1]

    # ----------------------------- Read API ---------------------------------

    @property
    def state(self) -> ShotState:
        return ShotState.SHOT_OPEN if self._shot_active else ShotState.NO_ACTIVE_SHOT

    @property
    def shot_active(self) -> bool:
        return self._shot_active

    def closed_shot_count(self) -> int:
        """Number of finished shots; an open shot is not counted."""
        return len(self._results) - 1 if self._shot_active else len(self._results)

    def all_results(self) -> list[ShotRecord]:
        """Deep copy of every record, including an open one."""
        return [record.model_copy(deep=True) for record in self._results]

    def reset(self) -> None:
        """Drop all records and close any open shot. Safe to call repeatedly."""
        self._results = []
        self._shot_active = False

    def __len__(self) -> int:
        return len(self._results)


__all__ = ["ShotAggregator", "ShotState"]
