"""Event routing, shot aggregation and coalesced refresh scheduling."""

from .aggregator import ShotAggregator, ShotState
from .router import EventRouter, Handler, HandlerFailure, Subscription
from .scheduler import DEFAULT_DELAY, NotificationScheduler
from .target import ShotEventTarget
from .timers import AsyncioTimer, ManualTimer, OneShotTimer

__all__ = [
    "AsyncioTimer",
    "DEFAULT_DELAY",
    "EventRouter",
    "Handler",
    "HandlerFailure",
    "ManualTimer",
    "NotificationScheduler",
    "OneShotTimer",
    "ShotAggregator",
    "ShotEventTarget",
    "ShotState",
    "Subscription",
]
