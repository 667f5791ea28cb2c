"""Conversion between clock-time text and minutes since midnight."""

from __future__ import annotations

import re
from typing import Optional


_WHITESPACE = re.compile(r"\s+")
_NON_DIGITS = re.compile(r"[^\d]")
_HOUR_WITH_MERIDIEM = re.compile(r"(\d+)(am|pm)")
_LEADING_DIGITS = re.compile(r"\d+")

MINUTES_PER_DAY = 24 * 60


def parse_time_to_minutes(text: Optional[str]) -> Optional[int]:
    """Parse ``"9:30 AM"``, ``"2pm"`` or ``"12:00 pm"`` into minutes since midnight.

    Returns ``None`` for anything that cannot be read as a clock time; callers
    treat ``None`` as an unknown time and leave the record out of interval math.
    A colon form without a meridiem is read on the 24-hour clock.
    """
    if not text or not isinstance(text, str):
        return None

    cleaned = _WHITESPACE.sub("", text.lower())
    if ":" in cleaned:
        hour_part, minute_part = cleaned.split(":", 1)
        hour_match = _LEADING_DIGITS.fullmatch(hour_part)
        minute_digits = _NON_DIGITS.sub("", minute_part)
        if hour_match is None or not minute_digits:
            return None
        hour = int(hour_part)
        minute = int(minute_digits)
        if "pm" in cleaned:
            meridiem = "pm"
        elif "am" in cleaned:
            meridiem = "am"
        else:
            meridiem = None
    else:
        match = _HOUR_WITH_MERIDIEM.fullmatch(cleaned)
        if match is None:
            return None
        hour = int(match.group(1))
        minute = 0
        meridiem = match.group(2)

    if not 0 <= minute <= 59:
        return None
    if meridiem is None:
        # 24-hour colon form ("14:00")
        if not 0 <= hour <= 23:
            return None
        return hour * 60 + minute
    if not 1 <= hour <= 12:
        return None

    if meridiem == "pm" and hour != 12:
        hour += 12
    if meridiem == "am" and hour == 12:
        hour = 0
    return hour * 60 + minute


def _split_clock(minutes: int) -> tuple[int, int, str]:
    hour, minute = divmod(minutes, 60)
    meridiem = "PM" if hour >= 12 else "AM"
    display_hour = 12 if hour % 12 == 0 else hour % 12
    return display_hour, minute, meridiem


def format_minutes_to_time(minutes: int) -> str:
    """Format minutes since midnight as ``"H:MM AM"``."""
    display_hour, minute, meridiem = _split_clock(minutes)
    return f"{display_hour}:{minute:02d} {meridiem}"


def format_minutes_to_label(minutes: int) -> str:
    """Short label that drops ``:00`` on the hour (``"9 AM"``, ``"9:30 AM"``)."""
    display_hour, minute, meridiem = _split_clock(minutes)
    if minute == 0:
        return f"{display_hour} {meridiem}"
    return f"{display_hour}:{minute:02d} {meridiem}"


def format_duration(minutes: int) -> str:
    hours, remainder = divmod(minutes, 60)
    return f"{hours}h {remainder}m"
