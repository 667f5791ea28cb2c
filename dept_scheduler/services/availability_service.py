"""Free-slot computation for one entity and for the intersection of several."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Protocol, Sequence

from dept_scheduler.domain.constraints import EngineConfig, validate_engine_config
from dept_scheduler.domain.models import (
    AvailableSlot,
    BusyInterval,
    Interval,
    WorkingDayWindow,
)
from dept_scheduler.services.commitment_index import CommitmentIndex
from dept_scheduler.utils.logger import get_logger


logger = get_logger(__name__)


class _Span(Protocol):
    start: int
    end: int


@dataclass(frozen=True)
class DayAvailability:
    day: str
    slots: tuple[AvailableSlot, ...]
    busy_periods: tuple[BusyInterval, ...] = ()

    @property
    def total_free_minutes(self) -> int:
        return sum(slot.duration for slot in self.slots)


@dataclass(frozen=True)
class GroupAvailability:
    entities: tuple[str, ...]
    days: Mapping[str, tuple[AvailableSlot, ...]]


def expand_intervals(intervals: Iterable[_Span], buffer_minutes: int) -> list[Interval]:
    """Pad every interval by the buffer on both sides, never below midnight.

    The upper end is not clamped; the sweep bounds free space by the window.
    """
    return [
        Interval(start=max(0, span.start - buffer_minutes), end=span.end + buffer_minutes)
        for span in intervals
    ]


def sweep_free_slots(
    intervals: Sequence[_Span],
    window: WorkingDayWindow,
    minimum_slot_minutes: int,
) -> tuple[AvailableSlot, ...]:
    """Walk sorted busy intervals and emit the gaps that fit inside the window.

    Overlapping and touching intervals merge through the ``max`` cursor
    advance, so ``intervals`` must be sorted by start.
    """
    slots: list[AvailableSlot] = []
    cursor = window.start
    for span in intervals:
        gap_end = min(span.start, window.end)
        if cursor < gap_end and gap_end - cursor >= minimum_slot_minutes:
            slots.append(AvailableSlot(start=cursor, end=gap_end))
        cursor = max(cursor, span.end)
        if cursor >= window.end:
            break

    if cursor < window.end and window.end - cursor >= minimum_slot_minutes:
        slots.append(AvailableSlot(start=cursor, end=window.end))
    return tuple(slots)


def compute_free_slots(busy: Sequence[_Span], config: EngineConfig) -> tuple[AvailableSlot, ...]:
    """Free slots for one entity/day given its sorted busy intervals."""
    expanded = expand_intervals(busy, config.buffer_minutes)
    expanded.sort(key=lambda span: (span.start, span.end))
    return sweep_free_slots(expanded, config.window, config.minimum_slot_minutes)


def compute_entity_availability(
    index: CommitmentIndex,
    entity_key: str,
    config: EngineConfig,
) -> Mapping[str, DayAvailability]:
    """Weekly availability of a single entity, one entry per day code."""
    validate_engine_config(config)
    week: dict[str, DayAvailability] = {}
    for day in index.day_codes:
        busy = index.busy_intervals(entity_key, day)
        week[day] = DayAvailability(
            day=day,
            slots=compute_free_slots(busy, config),
            busy_periods=busy,
        )
    return MappingProxyType(week)


def select_schedulable_entities(index: CommitmentIndex, entity_keys: Iterable[str]) -> tuple[str, ...]:
    """Drop staff, unknown keys and duplicates, keeping the caller's order.

    A key with no commitments in the index has no calendar to intersect, so
    it never makes the group look free.
    """
    selected: list[str] = []
    for key in entity_keys:
        entity = index.entities.get(key)
        if entity is None or entity.is_staff:
            continue
        if key in selected:
            continue
        selected.append(key)
    return tuple(selected)


def compute_common_availability(
    index: CommitmentIndex,
    entity_keys: Iterable[str],
    config: EngineConfig,
) -> GroupAvailability:
    """Slots where every selected entity is free.

    ``config.minimum_slot_minutes`` is the meeting duration. Buffers are applied
    per entity before the union, never again afterwards. An empty selection
    yields no slots on any day.
    """
    validate_engine_config(config)
    selected = select_schedulable_entities(index, entity_keys)
    days: dict[str, tuple[AvailableSlot, ...]] = {}
    for day in index.day_codes:
        if not selected:
            days[day] = ()
            continue
        combined: list[Interval] = []
        for key in selected:
            combined.extend(expand_intervals(index.busy_intervals(key, day), config.buffer_minutes))
        combined.sort(key=lambda span: (span.start, span.end))
        days[day] = sweep_free_slots(combined, config.window, config.minimum_slot_minutes)

    logger.debug(
        "Common availability computed | entities=%s | slots=%s",
        len(selected),
        sum(len(slots) for slots in days.values()),
    )
    return GroupAvailability(entities=selected, days=MappingProxyType(days))
