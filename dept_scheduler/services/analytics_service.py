"""Workload, room utilization and occupancy analytics over a commitment index.

Two counting regimes coexist here. Room-level figures (utilization and the
hourly histogram) count every physical room a commitment occupies, because
they measure rooms. Session-level figures (workload, total sessions, staff
sessions) collapse rows sharing a session identity key so that a class
recorded against two rooms is one class.
"""

from __future__ import annotations

import math
from collections import Counter, defaultdict
from types import MappingProxyType
from typing import Iterable, Optional

import pandas as pd

from dept_scheduler.domain.models import (
    AnalyticsReport,
    BusiestDay,
    HourlyOccupancy,
    ParsedCommitment,
    RoomUtilization,
    SessionKey,
    WorkingDayWindow,
    WorkloadSummary,
)
from dept_scheduler.services.commitment_index import CommitmentIndex
from dept_scheduler.utils.logger import get_logger


logger = get_logger(__name__)

HIGH_LOAD_HOURS = 12.0
MODERATE_LOAD_HOURS = 6.0


def session_identity_key(commitment: ParsedCommitment) -> SessionKey:
    """(entity, course, day, start text, end text) of one logical class meeting."""
    raw = commitment.raw
    return (
        commitment.entity.key,
        raw.course,
        commitment.day,
        raw.start_time,
        raw.end_time,
    )


def classify_load(
    total_hours: float,
    high_hours: float = HIGH_LOAD_HOURS,
    moderate_hours: float = MODERATE_LOAD_HOURS,
) -> str:
    if total_hours >= high_hours:
        return "high"
    if total_hours >= moderate_hours:
        return "moderate"
    return "light"


def compute_room_utilization(
    commitments: Iterable[ParsedCommitment],
    window: WorkingDayWindow,
    day_count: int,
) -> dict[str, RoomUtilization]:
    sessions: Counter[str] = Counter()
    minutes: Counter[str] = Counter()
    staff_sessions: Counter[str] = Counter()
    for item in commitments:
        for room in item.rooms:
            sessions[room] += 1
            minutes[room] += item.end - item.start
            if item.entity.is_staff:
                staff_sessions[room] += 1

    weekly_capacity_hours = window.hours * day_count
    utilization: dict[str, RoomUtilization] = {}
    for room in sorted(sessions):
        hours = minutes[room] / 60.0
        utilization[room] = RoomUtilization(
            session_count=sessions[room],
            total_hours=hours,
            staff_taught_session_count=staff_sessions[room],
            utilization_ratio=hours / weekly_capacity_hours if weekly_capacity_hours else 0.0,
        )
    return utilization


def compute_hourly_occupancy(
    commitments: Iterable[ParsedCommitment],
    window: WorkingDayWindow,
    day: Optional[str] = None,
) -> HourlyOccupancy:
    """Count room occupancy per clock hour; a partial hour still counts.

    Peak ties resolve to the earliest hour.
    """
    spans = [
        (item.start, item.end)
        for item in commitments
        if day is None or item.day == day
        for _ in item.rooms
    ]

    first_hour = window.start // 60
    latest_end = window.end
    for start, end in spans:
        first_hour = min(first_hour, start // 60)
        latest_end = max(latest_end, end)

    counts = {hour: 0 for hour in range(first_hour, math.ceil(latest_end / 60))}
    for start, end in spans:
        for hour in range(start // 60, math.ceil(end / 60)):
            counts[hour] += 1

    peak_hour, peak_count = window.start // 60, 0
    for hour in sorted(counts):
        if counts[hour] > peak_count:
            peak_hour, peak_count = hour, counts[hour]

    return HourlyOccupancy(
        counts=MappingProxyType(counts),
        peak_hour=peak_hour,
        peak_count=peak_count,
        latest_end_minute=latest_end,
    )


def find_busiest_day(
    commitments: Iterable[ParsedCommitment],
    day_codes: tuple[str, ...],
) -> Optional[BusiestDay]:
    counts = Counter(item.day for item in commitments)
    busiest: Optional[BusiestDay] = None
    for day in day_codes:
        if counts[day] and (busiest is None or counts[day] > busiest.count):
            busiest = BusiestDay(day=day, count=counts[day])
    return busiest


def aggregate_analytics(
    index: CommitmentIndex,
    window: WorkingDayWindow,
    *,
    day: Optional[str] = None,
    high_hours: float = HIGH_LOAD_HOURS,
    moderate_hours: float = MODERATE_LOAD_HOURS,
) -> AnalyticsReport:
    """Fold the indexed commitments into one analytics snapshot.

    ``day`` narrows the hourly histogram only; every other figure covers the
    whole week.
    """
    commitments = index.commitments

    seen: set[SessionKey] = set()
    course_sets: dict[str, set[str]] = defaultdict(set)
    workload_minutes: Counter[str] = Counter()
    staff_sessions = 0
    staff_courses: set[str] = set()
    for item in commitments:
        key = session_identity_key(item)
        if key in seen:
            continue
        seen.add(key)
        if item.entity.is_staff:
            staff_sessions += 1
            staff_courses.add(item.raw.course)
            continue
        course_sets[item.entity.key].add(item.raw.course)
        workload_minutes[item.entity.key] += item.end - item.start

    workload: dict[str, WorkloadSummary] = {}
    for name in sorted(course_sets):
        hours = workload_minutes[name] / 60.0
        workload[name] = WorkloadSummary(
            unique_course_count=len(course_sets[name]),
            total_weekly_hours=hours,
            load_status=classify_load(hours, high_hours, moderate_hours),
        )

    room_utilization = compute_room_utilization(commitments, window, len(index.day_codes))
    report = AnalyticsReport(
        workload=MappingProxyType(workload),
        room_utilization=MappingProxyType(room_utilization),
        hourly=compute_hourly_occupancy(commitments, window, day),
        busiest_day=find_busiest_day(commitments, index.day_codes),
        total_sessions=len(seen),
        unique_courses=len({item.raw.course for item in commitments}),
        rooms_in_use=len(room_utilization),
        staff_taught_sessions=staff_sessions,
        staff_taught_courses=tuple(sorted(staff_courses)),
        unique_instructors=index.named_entities,
    )
    logger.debug(
        "Analytics aggregated | sessions=%s | instructors=%s | rooms=%s",
        report.total_sessions,
        len(report.workload),
        report.rooms_in_use,
    )
    return report


def workload_frame(report: AnalyticsReport) -> pd.DataFrame:
    frame = pd.DataFrame(
        [
            {
                "instructor": name,
                "unique_courses": summary.unique_course_count,
                "weekly_hours": round(summary.total_weekly_hours, 2),
                "load_status": summary.load_status,
            }
            for name, summary in report.workload.items()
        ],
        columns=["instructor", "unique_courses", "weekly_hours", "load_status"],
    )
    return frame.sort_values(
        by=["weekly_hours", "instructor"],
        ascending=[False, True],
        kind="mergesort",
    ).reset_index(drop=True)


def room_frame(report: AnalyticsReport) -> pd.DataFrame:
    frame = pd.DataFrame(
        [
            {
                "room": room,
                "sessions": usage.session_count,
                "hours": round(usage.total_hours, 2),
                "staff_taught_sessions": usage.staff_taught_session_count,
                "utilization_pct": round(usage.utilization_ratio * 100.0, 1),
            }
            for room, usage in report.room_utilization.items()
        ],
        columns=["room", "sessions", "hours", "staff_taught_sessions", "utilization_pct"],
    )
    return frame.sort_values(
        by=["hours", "room"],
        ascending=[False, True],
        kind="mergesort",
    ).reset_index(drop=True)


def hourly_frame(report: AnalyticsReport) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"hour": hour, "rooms_in_use": count}
            for hour, count in sorted(report.hourly.counts.items())
        ],
        columns=["hour", "rooms_in_use"],
    )


EXPORT_TABLES = {
    "workload": workload_frame,
    "rooms": room_frame,
    "hourly": hourly_frame,
}
