from __future__ import annotations

from dept_scheduler.domain.locations import is_physical_room, split_room_tokens
from dept_scheduler.domain.models import AnonymousStaff, NamedEntity, RawCommitment
from dept_scheduler.services.commitment_index import build_commitment_index, resolve_entity


def _commitment(
    instructor: str,
    day: str,
    start: str,
    end: str,
    *,
    course: str = "ADM 1300",
    title: str = "Intro to Design",
    room: str = "Cashion 101",
) -> RawCommitment:
    return RawCommitment(
        instructor=instructor,
        course=course,
        course_title=title,
        day=day,
        start_time=start,
        end_time=end,
        room=room,
        term="Fall 2025",
    )


def test_intervals_sorted_by_start_then_end() -> None:
    index = build_commitment_index(
        [
            _commitment("Dr. A", "M", "1:00 PM", "2:00 PM", course="C"),
            _commitment("Dr. A", "M", "9:00 AM", "11:00 AM", course="B"),
            _commitment("Dr. A", "M", "9:00 AM", "10:00 AM", course="A"),
        ]
    )
    busy = index.busy_intervals("Dr. A", "M")
    assert [(item.start, item.end) for item in busy] == [(540, 600), (540, 660), (780, 840)]


def test_malformed_rows_are_skipped_without_raising() -> None:
    index = build_commitment_index(
        [
            _commitment("Dr. A", "M", "9:00 AM", "10:00 AM"),
            _commitment("Dr. A", "M", "sometime", "10:00 AM"),
            _commitment("Dr. A", "M", "11:00 AM", "10:00 AM"),
            _commitment("Dr. A", "M", "10:00 AM", "10:00 AM"),
            _commitment("Dr. A", "S", "9:00 AM", "10:00 AM"),
            _commitment("", "T", "9:00 AM", "10:00 AM"),
        ]
    )
    assert index.received_count == 6
    assert len(index.commitments) == 1
    assert index.skipped_count == 5
    assert [(item.start, item.end) for item in index.busy_intervals("Dr. A", "M")] == [(540, 600)]


def test_lowercase_day_codes_are_accepted() -> None:
    index = build_commitment_index([_commitment("Dr. A", "r", "9:00 AM", "10:00 AM")])
    assert len(index.busy_intervals("Dr. A", "R")) == 1


def test_multi_room_rows_collapse_into_one_busy_interval() -> None:
    index = build_commitment_index(
        [
            _commitment("Dr. A", "T", "2:00 PM", "4:30 PM", room="Cashion 102"),
            _commitment("Dr. A", "T", "2:00 PM", "4:30 PM", room="Cashion 101"),
        ]
    )
    busy = index.busy_intervals("Dr. A", "T")
    assert len(busy) == 1
    assert busy[0].rooms == ("Cashion 101", "Cashion 102")
    assert busy[0].room_label == "Cashion 101; Cashion 102"


def test_room_index_keeps_every_raw_row() -> None:
    index = build_commitment_index(
        [
            _commitment("Dr. A", "T", "2:00 PM", "4:30 PM", room="Cashion 101; Cashion 102"),
            _commitment("Dr. B", "T", "2:00 PM", "3:00 PM", course="ID 2320", room="Cashion 101"),
        ]
    )
    assert len(index.room_intervals("Cashion 101", "T")) == 2
    assert len(index.room_intervals("Cashion 102", "T")) == 1
    assert index.room_catalog == ("Cashion 101", "Cashion 102")


def test_staff_labels_share_one_anonymous_entity() -> None:
    index = build_commitment_index(
        [
            _commitment("Staff", "M", "8:00 AM", "9:00 AM"),
            _commitment("Staff - TBD", "W", "8:00 AM", "9:00 AM", course="ID 1310"),
            _commitment("Dr. A", "M", "9:00 AM", "10:00 AM"),
        ]
    )
    assert set(index.entities) == {"Staff", "Dr. A"}
    assert index.entities["Staff"].is_staff
    assert index.named_entities == ("Dr. A",)


def test_staff_substring_edge_case_classifies_staffon_as_staff() -> None:
    """Surnames containing the marker are treated as the staff placeholder."""
    assert isinstance(resolve_entity("Dr. Jo Staffon"), AnonymousStaff)
    assert resolve_entity("Dr. Jo Stafford-Smith").is_staff
    assert resolve_entity("Dr. Jo Smith") == NamedEntity(name="Dr. Jo Smith")
    assert resolve_entity("   ") is None


def test_non_physical_rooms_never_enter_catalog() -> None:
    index = build_commitment_index(
        [
            _commitment("Dr. A", "M", "9:00 AM", "10:00 AM", room="Online"),
            _commitment("Dr. A", "T", "9:00 AM", "10:00 AM", room="TBA"),
            _commitment("Dr. A", "W", "9:00 AM", "10:00 AM", room="No Room Needed"),
            _commitment("Dr. A", "R", "9:00 AM", "10:00 AM", room="Cashion 101;  ; ONLINE"),
        ]
    )
    assert index.room_catalog == ("Cashion 101",)
    assert len(index.busy_intervals("Dr. A", "M")) == 1


def test_split_room_tokens() -> None:
    assert split_room_tokens("Cashion 101; Cashion 102") == ("Cashion 101", "Cashion 102")
    assert split_room_tokens("Cashion 101;Cashion 101") == ("Cashion 101",)
    assert split_room_tokens(" ; ") == ()
    assert split_room_tokens(None) == ()
    assert split_room_tokens("Zoom; General Assignment Room") == ()


def test_is_physical_room() -> None:
    assert is_physical_room("Goebel 111")
    assert not is_physical_room("online")
    assert not is_physical_room("Online - Synchronous")
    assert not is_physical_room("To Be Announced")
    assert not is_physical_room("N/A")
    assert not is_physical_room("")
