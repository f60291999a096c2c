"""Centralized configuration using Pydantic Settings (v2).

This module exposes a cached `load_settings()` factory that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod

Logging
-------
Log levels follow the names used by the host tooling: ``off``, ``error``,
``warn``, ``info``, ``debug`` and ``trace``. The numeric scale 0..5 (0 = off,
5 = trace) is accepted too. Core components never look the level up
themselves; callers build a logger with :func:`get_logger` and hand it over.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["OFF", "ERROR", "WARN", "WARNING", "INFO", "DEBUG", "TRACE", "CRITICAL"]

TRACE = 5
OFF = logging.CRITICAL + 10

logging.addLevelName(TRACE, "TRACE")

# Index in this tuple == numeric level on the 0..5 scale.
_SCALE: tuple[str, ...] = ("OFF", "ERROR", "WARN", "INFO", "DEBUG", "TRACE")

_NUMERIC: dict[str, int] = {
    "OFF": OFF,
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": TRACE,
}


def normalize_log_level(value: Any) -> str:
    """Return the upper-case level name for ``value``.

    Accepts level names in any case and the integers 0..5.

    Raises
    ------
    ValueError
        If ``value`` is neither a known name nor a number on the 0..5 scale.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid log level: {value!r}")
    if isinstance(value, int):
        if 0 <= value < len(_SCALE):
            return _SCALE[value]
        raise ValueError(f"numeric log level must be in 0..5, got {value}")
    text = str(value).strip().upper()
    if text.isdigit():
        return normalize_log_level(int(text))
    if text not in _NUMERIC:
        raise ValueError(f"unknown log level: {value!r}")
    return text


def level_to_numeric(value: str | int) -> int:
    """Map a level name (or 0..5 number) to a :mod:`logging` level number."""
    return _NUMERIC[normalize_log_level(value)]


class Settings(BaseSettings):
    """Typed configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `SHOTSTREAM_ENV`.
    log_level : LogLevelName
        Log level name; maps from `LOG_LEVEL`.
    refresh_delay_ms : int
        Coalescing window for refresh signals in milliseconds; maps from
        `SHOTSTREAM_REFRESH_DELAY_MS`. 50 ms caps refreshes at ~20 per second.
    capture_events : bool
        Whether an event target records shots; maps from
        `SHOTSTREAM_CAPTURE_EVENTS`.
    """

    environment: EnvName = Field(default="dev", alias="SHOTSTREAM_ENV")
    log_level: LogLevelName = Field(default="ERROR", alias="LOG_LEVEL")
    refresh_delay_ms: int = Field(default=50, ge=0, alias="SHOTSTREAM_REFRESH_DELAY_MS")
    capture_events: bool = Field(default=True, alias="SHOTSTREAM_CAPTURE_EVENTS")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, v: Any) -> str:
        return normalize_log_level(v)

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    @property
    def is_prod(self) -> bool:
        """Return True if running in the production environment."""
        return self.environment == "prod"

    @property
    def refresh_delay(self) -> float:
        """Coalescing window in seconds."""
        return self.refresh_delay_ms / 1000.0

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return level_to_numeric(self.log_level)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Kept behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("SHOTSTREAM_ENV", "dev")
    return Settings()


def get_logger(name: str = "shotstream", level: str | int | None = None) -> logging.Logger:
    """Return a logger with a stream handler, configured to ``level``.

    ``level`` may be a level name or a number on the 0..5 scale. When omitted
    the logger keeps its current level (NOTSET for a fresh logger).
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    if level is not None:
        logger.setLevel(level_to_numeric(level))
    logger.propagate = False
    return logger


def settings_logger(settings: Settings, component: str) -> logging.Logger:
    """Return the ``component`` logger configured to ``settings.log_level``.

    The level is part of the logger name (``shotstream.<component>.<level>``),
    so objects built from settings with different levels each get their own
    logger instead of resetting a shared one.
    """
    level = settings.log_level
    return get_logger(f"shotstream.{component}.{level.lower()}", level)


__all__ = [
    "OFF",
    "TRACE",
    "Settings",
    "get_logger",
    "level_to_numeric",
    "load_settings",
    "normalize_log_level",
    "settings_logger",
]
