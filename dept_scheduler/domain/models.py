"""Domain models for weekly commitments, availability, and analytics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Union


@dataclass(frozen=True)
class RawCommitment:
    """One offered class or meeting occurrence as ingested.

    ``room`` may hold several co-located rooms joined with ';'.
    """

    instructor: str
    course: str
    course_title: str
    day: str
    start_time: str
    end_time: str
    room: str = ""
    term: str = ""


@dataclass(frozen=True)
class NamedEntity:
    """A person (or room owner) with an individual weekly calendar."""

    name: str

    @property
    def key(self) -> str:
        return self.name

    @property
    def is_staff(self) -> bool:
        return False


@dataclass(frozen=True)
class AnonymousStaff:
    """Placeholder instructor with no personal calendar."""

    label: str = "Staff"

    @property
    def key(self) -> str:
        return self.label

    @property
    def is_staff(self) -> bool:
        return True


Entity = Union[NamedEntity, AnonymousStaff]


@dataclass(frozen=True)
class Interval:
    """Half-open ``[start, end)`` span in minutes since midnight."""

    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Interval") -> bool:
        return max(self.start, other.start) < min(self.end, other.end)


@dataclass(frozen=True)
class BusyInterval:
    start: int
    end: int
    course: str
    title: str
    rooms: tuple[str, ...] = ()

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def room_label(self) -> str:
        return "; ".join(self.rooms)


@dataclass(frozen=True)
class AvailableSlot:
    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class WorkingDayWindow:
    start: int
    end: int

    @property
    def hours(self) -> float:
        return (self.end - self.start) / 60.0


@dataclass(frozen=True)
class ParsedCommitment:
    """A raw commitment that survived parsing, with its derived fields."""

    raw: RawCommitment
    entity: Entity
    day: str
    start: int
    end: int
    rooms: tuple[str, ...]

    @property
    def hours(self) -> float:
        return (self.end - self.start) / 60.0


SessionKey = tuple[str, str, str, str, str]


@dataclass(frozen=True)
class WorkloadSummary:
    unique_course_count: int
    total_weekly_hours: float
    load_status: str


@dataclass(frozen=True)
class RoomUtilization:
    session_count: int
    total_hours: float
    staff_taught_session_count: int
    utilization_ratio: float


@dataclass(frozen=True)
class HourlyOccupancy:
    counts: Mapping[int, int]
    peak_hour: int
    peak_count: int
    latest_end_minute: int


@dataclass(frozen=True)
class BusiestDay:
    day: str
    count: int


@dataclass(frozen=True)
class AnalyticsReport:
    workload: Mapping[str, WorkloadSummary]
    room_utilization: Mapping[str, RoomUtilization]
    hourly: HourlyOccupancy
    busiest_day: Optional[BusiestDay]
    total_sessions: int
    unique_courses: int
    rooms_in_use: int
    staff_taught_sessions: int
    staff_taught_courses: tuple[str, ...]
    unique_instructors: tuple[str, ...]
