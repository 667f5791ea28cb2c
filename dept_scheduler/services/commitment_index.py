"""Groups raw commitments into sorted per-entity and per-room busy intervals."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from dept_scheduler.domain.locations import split_room_tokens
from dept_scheduler.domain.models import (
    AnonymousStaff,
    BusyInterval,
    Entity,
    Interval,
    NamedEntity,
    ParsedCommitment,
    RawCommitment,
)
from dept_scheduler.domain.time_codec import parse_time_to_minutes
from dept_scheduler.utils.logger import get_logger


logger = get_logger(__name__)

DAY_CODES: tuple[str, ...] = ("M", "T", "W", "R", "F")
STAFF_MARKER = "Staff"

_EMPTY_DAYS: Mapping[str, tuple] = MappingProxyType({})


def resolve_entity(raw_name: Optional[str], staff_marker: str = STAFF_MARKER) -> Optional[Entity]:
    """Map an instructor field onto a named person or the anonymous staff entity.

    Any name that merely contains the marker ("Staff - TBD", but also
    "Staffon") resolves to the staff entity.
    """
    if raw_name is None:
        return None
    name = " ".join(str(raw_name).split())
    if not name:
        return None
    if staff_marker in name:
        return AnonymousStaff(label=staff_marker)
    return NamedEntity(name=name)


def parse_commitment(
    raw: RawCommitment,
    *,
    staff_marker: str = STAFF_MARKER,
    day_codes: tuple[str, ...] = DAY_CODES,
    room_separator: str = ";",
) -> Optional[ParsedCommitment]:
    """Return the parsed commitment, or ``None`` when it cannot enter interval math."""
    entity = resolve_entity(raw.instructor, staff_marker)
    if entity is None:
        logger.debug("Commitment skipped | reason=missing_instructor | course=%s", raw.course)
        return None

    day = (raw.day or "").strip().upper()
    if day not in day_codes:
        logger.debug(
            "Commitment skipped | reason=unknown_day | course=%s | day=%r",
            raw.course,
            raw.day,
        )
        return None

    start = parse_time_to_minutes(raw.start_time)
    end = parse_time_to_minutes(raw.end_time)
    if start is None or end is None:
        logger.debug(
            "Commitment skipped | reason=unparseable_time | course=%s | start=%r | end=%r",
            raw.course,
            raw.start_time,
            raw.end_time,
        )
        return None
    if start >= end:
        logger.debug(
            "Commitment skipped | reason=invalid_interval | course=%s | start=%s | end=%s",
            raw.course,
            start,
            end,
        )
        return None

    return ParsedCommitment(
        raw=raw,
        entity=entity,
        day=day,
        start=start,
        end=end,
        rooms=split_room_tokens(raw.room, room_separator),
    )


def group_busy_intervals(commitments: Iterable[ParsedCommitment]) -> tuple[BusyInterval, ...]:
    """Collapse identical (start, end, course) rows and sort by start, then end."""
    grouped: dict[tuple[int, int, str], dict] = {}
    for item in commitments:
        key = (item.start, item.end, item.raw.course)
        entry = grouped.get(key)
        if entry is None:
            grouped[key] = {"title": item.raw.course_title, "rooms": set(item.rooms)}
        else:
            entry["rooms"].update(item.rooms)

    intervals = [
        BusyInterval(
            start=start,
            end=end,
            course=course,
            title=entry["title"],
            rooms=tuple(sorted(entry["rooms"])),
        )
        for (start, end, course), entry in grouped.items()
    ]
    intervals.sort(key=lambda interval: (interval.start, interval.end, interval.course))
    return tuple(intervals)


@dataclass(frozen=True)
class CommitmentIndex:
    """Read-only view over one commitment collection."""

    commitments: tuple[ParsedCommitment, ...]
    entities: Mapping[str, Entity]
    by_entity: Mapping[str, Mapping[str, tuple[BusyInterval, ...]]]
    by_room: Mapping[str, Mapping[str, tuple[Interval, ...]]]
    room_catalog: tuple[str, ...]
    received_count: int
    day_codes: tuple[str, ...] = DAY_CODES

    @property
    def skipped_count(self) -> int:
        return self.received_count - len(self.commitments)

    @property
    def named_entities(self) -> tuple[str, ...]:
        return tuple(key for key, entity in self.entities.items() if not entity.is_staff)

    def has_entity(self, entity_key: str) -> bool:
        return entity_key in self.entities

    def busy_intervals(self, entity_key: str, day: str) -> tuple[BusyInterval, ...]:
        return self.by_entity.get(entity_key, _EMPTY_DAYS).get(day, ())

    def room_intervals(self, room: str, day: str) -> tuple[Interval, ...]:
        return self.by_room.get(room, _EMPTY_DAYS).get(day, ())


def build_commitment_index(
    records: Iterable[RawCommitment],
    *,
    staff_marker: str = STAFF_MARKER,
    day_codes: tuple[str, ...] = DAY_CODES,
    room_separator: str = ";",
) -> CommitmentIndex:
    """Parse, group and sort a commitment collection.

    Malformed rows are dropped one by one; they never abort the build.
    """
    received = 0
    parsed: list[ParsedCommitment] = []
    for raw in records:
        received += 1
        item = parse_commitment(
            raw,
            staff_marker=staff_marker,
            day_codes=day_codes,
            room_separator=room_separator,
        )
        if item is not None:
            parsed.append(item)

    entities: dict[str, Entity] = {}
    entity_rows: dict[str, dict[str, list[ParsedCommitment]]] = defaultdict(
        lambda: defaultdict(list)
    )
    room_rows: dict[str, dict[str, list[Interval]]] = defaultdict(lambda: defaultdict(list))
    for item in parsed:
        entities.setdefault(item.entity.key, item.entity)
        entity_rows[item.entity.key][item.day].append(item)
        for room in item.rooms:
            room_rows[room][item.day].append(Interval(start=item.start, end=item.end))

    by_entity = {
        key: MappingProxyType(
            {
                day: group_busy_intervals(entity_rows[key][day])
                for day in day_codes
                if day in entity_rows[key]
            }
        )
        for key in sorted(entity_rows)
    }
    by_room = {
        room: MappingProxyType(
            {
                day: tuple(sorted(room_rows[room][day], key=lambda span: (span.start, span.end)))
                for day in day_codes
                if day in room_rows[room]
            }
        )
        for room in sorted(room_rows)
    }

    logger.info(
        "Commitment index built | received=%s | indexed=%s | skipped=%s | entities=%s | rooms=%s",
        received,
        len(parsed),
        received - len(parsed),
        len(entities),
        len(by_room),
    )
    return CommitmentIndex(
        commitments=tuple(parsed),
        entities=MappingProxyType({key: entities[key] for key in sorted(entities)}),
        by_entity=MappingProxyType(by_entity),
        by_room=MappingProxyType(by_room),
        room_catalog=tuple(sorted(by_room)),
        received_count=received,
        day_codes=day_codes,
    )
