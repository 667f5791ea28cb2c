"""Domain-level validation rules for availability computation."""

from __future__ import annotations

from dataclasses import dataclass

from dept_scheduler.domain.models import WorkingDayWindow
from dept_scheduler.domain.time_codec import MINUTES_PER_DAY


@dataclass(frozen=True)
class EngineConfig:
    window: WorkingDayWindow
    buffer_minutes: int
    minimum_slot_minutes: int


def validate_window(window: WorkingDayWindow) -> None:
    if window.start < 0:
        raise ValueError("working day window must not start before midnight")
    if window.end > MINUTES_PER_DAY:
        raise ValueError("working day window must end by midnight")
    if window.start >= window.end:
        raise ValueError("working day window start must be before its end")


def validate_engine_config(config: EngineConfig) -> None:
    validate_window(config.window)
    if config.buffer_minutes < 0:
        raise ValueError("buffer_minutes must be >= 0")
    if config.minimum_slot_minutes <= 0:
        raise ValueError("minimum_slot_minutes must be > 0")
