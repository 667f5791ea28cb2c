"""Orchestration of repository, commitment index and the availability engines."""

from __future__ import annotations

from threading import RLock
from typing import Any, Iterable, Optional

from dept_scheduler.domain.constraints import EngineConfig, validate_window
from dept_scheduler.domain.models import (
    AnalyticsReport,
    Interval,
    RawCommitment,
    WorkingDayWindow,
)
from dept_scheduler.domain.time_codec import parse_time_to_minutes
from dept_scheduler.repository.commitment_repository import CommitmentRepository
from dept_scheduler.services.analytics_service import EXPORT_TABLES, aggregate_analytics
from dept_scheduler.services.availability_service import (
    DayAvailability,
    GroupAvailability,
    compute_common_availability,
    compute_entity_availability,
)
from dept_scheduler.services.commitment_index import (
    CommitmentIndex,
    build_commitment_index,
    resolve_entity,
)
from dept_scheduler.services.room_service import find_available_rooms
from dept_scheduler.utils.config import Settings, get_settings
from dept_scheduler.utils.logger import get_logger


logger = get_logger(__name__)


class SchedulingError(Exception):
    """Base exception for scheduling workflow failures."""


class SchedulingValidationError(SchedulingError):
    """Raised when request parameters are invalid."""


class EntityNotFoundError(SchedulingError):
    """Raised when an entity has no commitments in the current collection."""


class SchedulingService:
    """Recomputes derived views from the repository on demand.

    The built index is cached against the repository version; any change to
    the collection produces a fresh index on the next read.
    """

    def __init__(
        self,
        repository: Optional[CommitmentRepository] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._repository = repository or CommitmentRepository(self._settings)
        self._window = WorkingDayWindow(
            start=self._settings.working_day_start_minute,
            end=self._settings.working_day_end_minute,
        )
        validate_window(self._window)
        self._lock = RLock()
        self._cached_version: int | None = None
        self._cached_index: CommitmentIndex | None = None

    @property
    def window(self) -> WorkingDayWindow:
        return self._window

    @property
    def version(self) -> int:
        return self._repository.version

    def get_index(self) -> CommitmentIndex:
        version, records = self._repository.snapshot()
        with self._lock:
            if self._cached_index is not None and self._cached_version == version:
                return self._cached_index
        index = build_commitment_index(
            records,
            staff_marker=self._settings.staff_marker,
            day_codes=self._settings.day_codes,
            room_separator=self._settings.room_separator,
        )
        with self._lock:
            self._cached_version = version
            self._cached_index = index
        return index

    def replace_commitments(self, records: Iterable[RawCommitment]) -> dict[str, int]:
        version = self._repository.replace_all(records)
        index = self.get_index()
        return {
            "version": version,
            "received": index.received_count,
            "indexed": len(index.commitments),
            "skipped": index.skipped_count,
        }

    def list_commitments(self) -> tuple[RawCommitment, ...]:
        return self._repository.list_commitments()

    def list_entities(self) -> list[str]:
        return list(self.get_index().named_entities)

    def list_rooms(self) -> list[str]:
        return list(self.get_index().room_catalog)

    def _validate_day(self, day: str) -> str:
        code = (day or "").strip().upper()
        if code not in self._settings.day_codes:
            raise SchedulingValidationError(
                f"day must be one of {', '.join(self._settings.day_codes)}"
            )
        return code

    def _engine_config(self, buffer_minutes: int, minimum_slot_minutes: int) -> EngineConfig:
        if buffer_minutes < 0:
            raise SchedulingValidationError("buffer_minutes must be >= 0")
        if minimum_slot_minutes <= 0:
            raise SchedulingValidationError("minimum slot duration must be > 0")
        return EngineConfig(
            window=self._window,
            buffer_minutes=buffer_minutes,
            minimum_slot_minutes=minimum_slot_minutes,
        )

    def individual_availability(
        self,
        *,
        entity: str,
        buffer_minutes: int | None = None,
        minimum_slot_minutes: int | None = None,
    ) -> dict[str, DayAvailability]:
        resolved = resolve_entity(entity, self._settings.staff_marker)
        if resolved is None:
            raise SchedulingValidationError("entity must be a non-empty name")
        if resolved.is_staff:
            raise SchedulingValidationError("Staff has no individual calendar")
        index = self.get_index()
        if not index.has_entity(resolved.key):
            raise EntityNotFoundError(f"No commitments recorded for {resolved.key}")
        config = self._engine_config(
            buffer_minutes=(
                buffer_minutes
                if buffer_minutes is not None
                else self._settings.individual_buffer_minutes
            ),
            minimum_slot_minutes=(
                minimum_slot_minutes
                if minimum_slot_minutes is not None
                else self._settings.individual_minimum_slot_minutes
            ),
        )
        return dict(compute_entity_availability(index, resolved.key, config))

    def group_availability(
        self,
        *,
        entities: list[str],
        buffer_minutes: int | None = None,
        meeting_duration_minutes: int | None = None,
    ) -> GroupAvailability:
        config = self._engine_config(
            buffer_minutes=(
                buffer_minutes
                if buffer_minutes is not None
                else self._settings.group_buffer_minutes
            ),
            minimum_slot_minutes=(
                meeting_duration_minutes
                if meeting_duration_minutes is not None
                else self._settings.group_meeting_duration_minutes
            ),
        )
        index = self.get_index()
        keys: list[str] = []
        missing: list[str] = []
        for name in entities:
            resolved = resolve_entity(name, self._settings.staff_marker)
            if resolved is None or resolved.is_staff:
                continue
            if not index.has_entity(resolved.key):
                missing.append(resolved.key)
                continue
            keys.append(resolved.key)
        if missing:
            raise EntityNotFoundError(f"No commitments recorded for {', '.join(missing)}")
        result = compute_common_availability(index, keys, config)
        logger.info(
            "Group availability computed | requested=%s | scheduled=%s | buffer=%s | duration=%s",
            len(entities),
            len(result.entities),
            config.buffer_minutes,
            config.minimum_slot_minutes,
        )
        return result

    def available_rooms(self, *, day: str, start_time: str, end_time: str) -> dict[str, Any]:
        code = self._validate_day(day)
        start = parse_time_to_minutes(start_time)
        end = parse_time_to_minutes(end_time)
        if start is None or end is None:
            raise SchedulingValidationError("start_time and end_time must be clock times like '1:30 PM'")
        if start >= end:
            raise SchedulingValidationError("start_time must be before end_time")
        rooms = find_available_rooms(self.get_index(), code, Interval(start=start, end=end))
        return {
            "day": code,
            "start_minute": start,
            "end_minute": end,
            "rooms": list(rooms),
        }

    def analytics(self, *, day: str | None = None) -> AnalyticsReport:
        code = self._validate_day(day) if day else None
        return aggregate_analytics(
            self.get_index(),
            self._window,
            day=code,
            high_hours=self._settings.workload_high_hours,
            moderate_hours=self._settings.workload_moderate_hours,
        )

    def export_table(self, name: str, *, day: str | None = None) -> str:
        builder = EXPORT_TABLES.get(name)
        if builder is None:
            raise SchedulingValidationError(
                f"table must be one of {', '.join(sorted(EXPORT_TABLES))}"
            )
        frame = builder(self.analytics(day=day))
        return frame.to_csv(index=False)
