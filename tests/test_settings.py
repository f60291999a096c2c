"""Tests for settings loading and logger construction."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from shotstream.core.settings import (
    OFF,
    TRACE,
    Settings,
    get_logger,
    level_to_numeric,
    load_settings,
    normalize_log_level,
    settings_logger,
)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("LOG_LEVEL", "SHOTSTREAM_REFRESH_DELAY_MS", "SHOTSTREAM_CAPTURE_EVENTS"):
        monkeypatch.delenv(var, raising=False)
    s = Settings(_env_file=None)
    assert s.refresh_delay_ms == 50
    assert s.refresh_delay == pytest.approx(0.05)
    assert s.capture_events is True
    assert s.log_level == "ERROR"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHOTSTREAM_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("SHOTSTREAM_REFRESH_DELAY_MS", "120")
    monkeypatch.setenv("SHOTSTREAM_CAPTURE_EVENTS", "false")

    load_settings.cache_clear()
    try:
        s = load_settings()
        assert s.is_test and not s.is_dev and not s.is_prod
        assert s.log_level == "DEBUG"
        assert s.log_level_numeric() == logging.DEBUG
        assert s.refresh_delay == pytest.approx(0.12)
        assert s.capture_events is False
    finally:
        load_settings.cache_clear()


def test_negative_delay_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(refresh_delay_ms=-1)


@pytest.mark.parametrize(
    ("raw", "name", "numeric"),
    [
        ("off", "OFF", OFF),
        ("Warn", "WARN", logging.WARNING),
        ("trace", "TRACE", TRACE),
        (0, "OFF", OFF),
        (3, "INFO", logging.INFO),
        ("4", "DEBUG", logging.DEBUG),
    ],
)
def test_level_names_and_scale(raw: str | int, name: str, numeric: int) -> None:
    assert normalize_log_level(raw) == name
    assert level_to_numeric(raw) == numeric


@pytest.mark.parametrize("raw", ["loud", 9, -1, True])
def test_bad_levels_rejected(raw: object) -> None:
    with pytest.raises(ValueError):
        normalize_log_level(raw)


def test_get_logger_applies_injected_level() -> None:
    logger = get_logger("shotstream.test-settings", "trace")
    assert logger.level == TRACE
    assert logger.isEnabledFor(TRACE)
    assert len(logger.handlers) == 1
    assert logger.propagate is False

    # A second call reconfigures the level without stacking handlers.
    same = get_logger("shotstream.test-settings", "off")
    assert same is logger
    assert len(logger.handlers) == 1
    assert not logger.isEnabledFor(logging.CRITICAL)


def test_settings_logger_is_named_by_level() -> None:
    info = settings_logger(Settings(log_level="info"), "unit")
    debug = settings_logger(Settings(log_level="debug"), "unit")

    assert info.name == "shotstream.unit.info"
    assert debug.name == "shotstream.unit.debug"
    assert info.level == logging.INFO
    assert debug.level == logging.DEBUG
