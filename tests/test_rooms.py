from __future__ import annotations

from dept_scheduler.domain.models import Interval, RawCommitment
from dept_scheduler.services.commitment_index import build_commitment_index
from dept_scheduler.services.room_service import find_available_rooms, find_conflicting_rooms


def _commitment(day: str, start: str, end: str, room: str, instructor: str = "Dr. A") -> RawCommitment:
    return RawCommitment(
        instructor=instructor,
        course="ADM 1300",
        course_title="Intro to Design",
        day=day,
        start_time=start,
        end_time=end,
        room=room,
    )


def _index():
    return build_commitment_index(
        [
            _commitment("M", "1:00 PM", "2:00 PM", "Cashion 101"),
            _commitment("M", "9:00 AM", "10:00 AM", "Goebel 111"),
            _commitment("T", "1:00 PM", "2:00 PM", "Cashion 102"),
            _commitment("M", "1:00 PM", "2:00 PM", "Online"),
        ]
    )


def test_overlapping_room_is_excluded() -> None:
    rooms = find_available_rooms(_index(), "M", Interval(start=810, end=870))
    assert "Cashion 101" not in rooms
    assert rooms == ("Cashion 102", "Goebel 111")


def test_adjacent_room_is_included() -> None:
    rooms = find_available_rooms(_index(), "M", Interval(start=840, end=900))
    assert rooms == ("Cashion 101", "Cashion 102", "Goebel 111")


def test_window_ending_at_commitment_start_does_not_conflict() -> None:
    rooms = find_available_rooms(_index(), "M", Interval(start=720, end=780))
    assert "Cashion 101" in rooms


def test_online_is_never_offered() -> None:
    for day in ("M", "T", "W"):
        rooms = find_available_rooms(_index(), day, Interval(start=480, end=540))
        assert all(room.lower() != "online" for room in rooms)


def test_each_room_of_a_multi_room_session_is_occupied() -> None:
    index = build_commitment_index(
        [_commitment("R", "2:00 PM", "4:30 PM", "Cashion 101; Cashion 102")]
    )
    assert find_available_rooms(index, "R", Interval(start=900, end=930)) == ()
    assert find_conflicting_rooms(index, "R", Interval(start=900, end=930)) == (
        "Cashion 101",
        "Cashion 102",
    )


def test_unknown_day_and_empty_catalog_return_nothing() -> None:
    assert find_available_rooms(_index(), "S", Interval(start=480, end=540)) == ()
    assert find_available_rooms(build_commitment_index([]), "M", Interval(start=480, end=540)) == ()
