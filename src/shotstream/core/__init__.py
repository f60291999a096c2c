"""Core package initializer for shotstream.

Submodules:
    shotstream.core.settings   -> Settings, load_settings, get_logger
    shotstream.core.contracts  -> typed events and shot records
    shotstream.core.events     -> router, aggregator, scheduler, timers
"""

from __future__ import annotations

__all__ = ["__doc__"]
