"""Tests for engine configuration validation.

Covers every validation branch in validate_engine_config().
"""

from __future__ import annotations

import pytest

from dept_scheduler.domain.constraints import EngineConfig, validate_engine_config
from dept_scheduler.domain.models import WorkingDayWindow


def valid_config(**overrides) -> EngineConfig:
    """Return a valid baseline EngineConfig, optionally overriding fields."""
    defaults = {
        "window": WorkingDayWindow(start=480, end=1020),
        "buffer_minutes": 15,
        "minimum_slot_minutes": 60,
    }
    defaults.update(overrides)
    return EngineConfig(**defaults)


# --- Baseline pass ---

def test_valid_config_passes() -> None:
    """A fully valid config must not raise."""
    validate_engine_config(valid_config())


# --- window ---

def test_window_starting_before_midnight_raises() -> None:
    with pytest.raises(ValueError):
        validate_engine_config(valid_config(window=WorkingDayWindow(start=-1, end=1020)))


def test_window_ending_after_midnight_raises() -> None:
    with pytest.raises(ValueError):
        validate_engine_config(valid_config(window=WorkingDayWindow(start=480, end=1441)))


def test_empty_window_raises() -> None:
    with pytest.raises(ValueError):
        validate_engine_config(valid_config(window=WorkingDayWindow(start=600, end=600)))


def test_inverted_window_raises() -> None:
    with pytest.raises(ValueError):
        validate_engine_config(valid_config(window=WorkingDayWindow(start=1020, end=480)))


# --- buffer_minutes ---

def test_negative_buffer_raises() -> None:
    with pytest.raises(ValueError):
        validate_engine_config(valid_config(buffer_minutes=-1))


# --- minimum_slot_minutes ---

def test_minimum_slot_zero_raises() -> None:
    with pytest.raises(ValueError):
        validate_engine_config(valid_config(minimum_slot_minutes=0))


def test_minimum_slot_negative_raises() -> None:
    with pytest.raises(ValueError):
        validate_engine_config(valid_config(minimum_slot_minutes=-30))


# --- Boundary values ---

def test_zero_buffer_passes() -> None:
    validate_engine_config(valid_config(buffer_minutes=0))


def test_full_day_window_passes() -> None:
    """Midnight to midnight is the widest valid window."""
    validate_engine_config(valid_config(window=WorkingDayWindow(start=0, end=1440)))


def test_minimum_slot_one_minute_passes() -> None:
    validate_engine_config(valid_config(minimum_slot_minutes=1))
