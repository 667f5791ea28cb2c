"""Room conflict resolution for a candidate meeting window."""

from __future__ import annotations

from dept_scheduler.domain.models import Interval
from dept_scheduler.services.commitment_index import CommitmentIndex


def room_is_free(index: CommitmentIndex, room: str, day: str, candidate: Interval) -> bool:
    # every raw row counts here; multi-room sessions are not collapsed
    return not any(busy.overlaps(candidate) for busy in index.room_intervals(room, day))


def find_available_rooms(
    index: CommitmentIndex,
    day: str,
    candidate: Interval,
) -> tuple[str, ...]:
    """Rooms with no commitment overlapping ``candidate`` on ``day``, in catalog order.

    Online and placeholder labels never reach the catalog, so they are never
    offered. An unknown day code yields no rooms.
    """
    if day not in index.day_codes:
        return ()
    return tuple(
        room
        for room in index.room_catalog
        if room_is_free(index, room, day, candidate)
    )


def find_conflicting_rooms(
    index: CommitmentIndex,
    day: str,
    candidate: Interval,
) -> tuple[str, ...]:
    if day not in index.day_codes:
        return ()
    return tuple(
        room
        for room in index.room_catalog
        if not room_is_free(index, room, day, candidate)
    )
