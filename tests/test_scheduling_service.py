from __future__ import annotations

from dataclasses import replace

import pytest

from dept_scheduler.domain.models import RawCommitment
from dept_scheduler.repository.commitment_repository import CommitmentRepository
from dept_scheduler.services.scheduling_service import (
    EntityNotFoundError,
    SchedulingService,
    SchedulingValidationError,
)
from dept_scheduler.utils.config import get_settings


def _build_test_settings(**overrides):
    get_settings.cache_clear()
    base = get_settings()
    return replace(base, seed_demo_data=False, **overrides)


def _commitment(instructor: str, day: str, start: str, end: str, room: str = "Cashion 101") -> RawCommitment:
    return RawCommitment(
        instructor=instructor,
        course="ADM 1300",
        course_title="Intro to Design",
        day=day,
        start_time=start,
        end_time=end,
        room=room,
    )


@pytest.fixture
def service() -> SchedulingService:
    settings = _build_test_settings()
    repository = CommitmentRepository(settings)
    repository.replace_all(
        [
            _commitment("Dr. A", "M", "9:00 AM", "10:00 AM"),
            _commitment("Dr. B", "M", "10:30 AM", "11:30 AM", room="Goebel 111"),
            _commitment("Staff", "T", "8:00 AM", "9:15 AM", room="Cashion 102"),
        ]
    )
    return SchedulingService(repository=repository, settings=settings)


def test_index_is_memoized_until_collection_changes(service: SchedulingService) -> None:
    first = service.get_index()
    assert service.get_index() is first

    result = service.replace_commitments([_commitment("Dr. C", "W", "9:00 AM", "10:00 AM")])
    rebuilt = service.get_index()
    assert rebuilt is not first
    assert result == {"version": service.version, "received": 1, "indexed": 1, "skipped": 0}
    assert service.list_entities() == ["Dr. C"]


def test_replace_reports_skipped_rows(service: SchedulingService) -> None:
    result = service.replace_commitments(
        [
            _commitment("Dr. A", "M", "9:00 AM", "10:00 AM"),
            _commitment("Dr. A", "M", "later", "10:00 AM"),
        ]
    )
    assert result["received"] == 2
    assert result["indexed"] == 1
    assert result["skipped"] == 1
    assert len(service.list_commitments()) == 2


def test_entities_and_rooms_exclude_staff_and_placeholders(service: SchedulingService) -> None:
    assert service.list_entities() == ["Dr. A", "Dr. B"]
    assert service.list_rooms() == ["Cashion 101", "Cashion 102", "Goebel 111"]


def test_individual_availability_uses_configured_defaults(service: SchedulingService) -> None:
    week = service.individual_availability(entity="  Dr.   A ")
    assert list(week) == ["M", "T", "W", "R", "F"]
    assert [(slot.start, slot.end) for slot in week["M"].slots] == [(480, 540), (600, 1020)]


def test_individual_availability_rejects_unknown_staff_and_blank(service: SchedulingService) -> None:
    with pytest.raises(EntityNotFoundError):
        service.individual_availability(entity="Dr. Nobody")
    with pytest.raises(SchedulingValidationError):
        service.individual_availability(entity="Staff")
    with pytest.raises(SchedulingValidationError):
        service.individual_availability(entity="   ")
    with pytest.raises(SchedulingValidationError):
        service.individual_availability(entity="Dr. A", buffer_minutes=-5)
    with pytest.raises(SchedulingValidationError):
        service.individual_availability(entity="Dr. A", minimum_slot_minutes=0)


def test_group_availability_defaults_to_fifteen_minute_buffer(service: SchedulingService) -> None:
    result = service.group_availability(entities=["Dr. A", "Dr. B", "Staff", "Dr. A"])
    assert result.entities == ("Dr. A", "Dr. B")
    # busy 8:45-10:15 and 10:15-11:45 once buffered
    assert [(slot.start, slot.end) for slot in result.days["M"]] == [(705, 1020)]


def test_group_availability_rejects_negative_buffer(service: SchedulingService) -> None:
    with pytest.raises(SchedulingValidationError):
        service.group_availability(entities=["Dr. A"], buffer_minutes=-1)


def test_available_rooms_validates_inputs(service: SchedulingService) -> None:
    result = service.available_rooms(day="t", start_time="8:30 AM", end_time="9:00 AM")
    assert result == {
        "day": "T",
        "start_minute": 510,
        "end_minute": 540,
        "rooms": ["Cashion 101", "Goebel 111"],
    }
    with pytest.raises(SchedulingValidationError):
        service.available_rooms(day="S", start_time="8:30 AM", end_time="9:00 AM")
    with pytest.raises(SchedulingValidationError):
        service.available_rooms(day="M", start_time="noon", end_time="1:00 PM")
    with pytest.raises(SchedulingValidationError):
        service.available_rooms(day="M", start_time="2:00 PM", end_time="1:00 PM")


def test_analytics_day_filter_is_validated(service: SchedulingService) -> None:
    assert service.analytics(day="m").hourly.counts[9] == 1
    with pytest.raises(SchedulingValidationError):
        service.analytics(day="Sunday")


def test_export_table_renders_csv(service: SchedulingService) -> None:
    body = service.export_table("workload")
    lines = body.splitlines()
    assert lines[0] == "instructor,unique_courses,weekly_hours,load_status"
    assert len(lines) == 3
    assert service.export_table("rooms").splitlines()[0].startswith("room,")
    with pytest.raises(SchedulingValidationError):
        service.export_table("payroll")


def test_invalid_working_window_is_rejected_at_construction() -> None:
    settings = _build_test_settings(working_day_start_minute=1020, working_day_end_minute=480)
    with pytest.raises(ValueError):
        SchedulingService(repository=CommitmentRepository(settings), settings=settings)


def test_demo_seed_only_fills_empty_repository() -> None:
    settings = replace(_build_test_settings(), seed_demo_data=True)
    repository = CommitmentRepository(settings)
    assert repository.seed_demo_data() == 15
    version = repository.version
    assert repository.seed_demo_data() == 0
    assert repository.version == version

    disabled = CommitmentRepository(_build_test_settings())
    assert disabled.seed_demo_data() == 0
    assert disabled.count() == 0


@pytest.fixture
def staffless_service() -> SchedulingService:
    settings = _build_test_settings()
    repository = CommitmentRepository(settings)
    repository.replace_all([_commitment("Dr. A", "M", "9:00 AM", "10:00 AM")])
    return SchedulingService(repository=repository, settings=settings)


@pytest.mark.parametrize("label", ["Staff", "Staff - TBD"])
def test_staff_only_group_has_no_slots_when_staff_never_teaches(
    staffless_service: SchedulingService, label: str
) -> None:
    result = staffless_service.group_availability(entities=[label])
    assert result.entities == ()
    assert all(slots == () for slots in result.days.values())


def test_group_availability_rejects_unknown_names(staffless_service: SchedulingService) -> None:
    with pytest.raises(EntityNotFoundError, match="Dr. Nobody"):
        staffless_service.group_availability(entities=["Dr. Nobody"])
    with pytest.raises(EntityNotFoundError):
        staffless_service.group_availability(entities=["Dr. A", "Dr. Nobody", "Staff"])
