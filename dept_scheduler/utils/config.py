"""Runtime configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Immutable settings snapshot shared by every layer.

    Tests and callers derive variants with ``dataclasses.replace`` rather than
    mutating the cached instance.
    """

    app_name: str = "Departmental Availability Engine"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    working_day_start_minute: int = 8 * 60
    working_day_end_minute: int = 17 * 60

    individual_buffer_minutes: int = 0
    individual_minimum_slot_minutes: int = 30
    group_buffer_minutes: int = 15
    group_meeting_duration_minutes: int = 60

    staff_marker: str = "Staff"
    room_separator: str = ";"
    day_codes: tuple[str, ...] = ("M", "T", "W", "R", "F")
    day_names: dict[str, str] = field(
        default_factory=lambda: {
            "M": "Monday",
            "T": "Tuesday",
            "W": "Wednesday",
            "R": "Thursday",
            "F": "Friday",
        }
    )

    workload_high_hours: float = 12.0
    workload_moderate_hours: float = 6.0

    seed_demo_data: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process-wide settings, reading the environment once."""
    return Settings(
        app_name=os.getenv("APP_NAME", Settings.app_name),
        app_version=os.getenv("APP_VERSION", Settings.app_version),
        log_level=os.getenv("LOG_LEVEL", Settings.log_level),
        working_day_start_minute=_env_int(
            "WORKING_DAY_START_MINUTE", Settings.working_day_start_minute
        ),
        working_day_end_minute=_env_int(
            "WORKING_DAY_END_MINUTE", Settings.working_day_end_minute
        ),
        individual_buffer_minutes=_env_int(
            "INDIVIDUAL_BUFFER_MINUTES", Settings.individual_buffer_minutes
        ),
        individual_minimum_slot_minutes=_env_int(
            "INDIVIDUAL_MINIMUM_SLOT_MINUTES", Settings.individual_minimum_slot_minutes
        ),
        group_buffer_minutes=_env_int("GROUP_BUFFER_MINUTES", Settings.group_buffer_minutes),
        group_meeting_duration_minutes=_env_int(
            "GROUP_MEETING_DURATION_MINUTES", Settings.group_meeting_duration_minutes
        ),
        staff_marker=os.getenv("STAFF_MARKER", Settings.staff_marker),
        seed_demo_data=_env_bool("SEED_DEMO_DATA", Settings.seed_demo_data),
    )
