"""HTTP controller layer for individual, group and room availability."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from dept_scheduler.controllers.dependencies import get_scheduling_service
from dept_scheduler.domain.models import AvailableSlot, BusyInterval
from dept_scheduler.domain.time_codec import format_duration, format_minutes_to_time
from dept_scheduler.services.scheduling_service import (
    EntityNotFoundError,
    SchedulingService,
    SchedulingValidationError,
)
from dept_scheduler.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["availability"])


class IndividualAvailabilityRequest(BaseModel):
    """Input DTO validated before entering service layer."""

    entity: str = Field(min_length=1)
    buffer_minutes: Optional[int] = Field(default=None, ge=0)
    minimum_slot_minutes: Optional[int] = Field(default=None, gt=0)


class GroupAvailabilityRequest(BaseModel):
    entities: list[str]
    buffer_minutes: Optional[int] = Field(default=None, ge=0)
    meeting_duration_minutes: Optional[int] = Field(default=None, gt=0)

    @field_validator("entities")
    @classmethod
    def validate_entities(cls, value: list[str]) -> list[str]:
        for name in value:
            if not name.strip():
                raise ValueError("entities must not contain blank names")
        return value


class RoomAvailabilityRequest(BaseModel):
    day: str = Field(pattern=r"^[MTWRFmtwrf]$")
    start_time: str = Field(min_length=1)
    end_time: str = Field(min_length=1)


class SlotResponse(BaseModel):
    start_minute: int = Field(ge=0)
    end_minute: int = Field(gt=0)
    duration_minutes: int = Field(gt=0)
    start: str
    end: str
    duration_label: str


class BusyPeriodResponse(BaseModel):
    start_minute: int = Field(ge=0)
    end_minute: int = Field(gt=0)
    start: str
    end: str
    course: str
    title: str
    rooms: list[str]


class DayAvailabilityResponse(BaseModel):
    day: str
    slots: list[SlotResponse]
    busy_periods: list[BusyPeriodResponse] = Field(default_factory=list)


class IndividualAvailabilityResponse(BaseModel):
    entity: str
    days: list[DayAvailabilityResponse]


class GroupAvailabilityResponse(BaseModel):
    entities: list[str]
    days: list[DayAvailabilityResponse]


class RoomAvailabilityResponse(BaseModel):
    day: str
    start_minute: int = Field(ge=0)
    end_minute: int = Field(gt=0)
    rooms: list[str]


def _slot_response(slot: AvailableSlot) -> SlotResponse:
    return SlotResponse(
        start_minute=slot.start,
        end_minute=slot.end,
        duration_minutes=slot.duration,
        start=format_minutes_to_time(slot.start),
        end=format_minutes_to_time(slot.end),
        duration_label=format_duration(slot.duration),
    )


def _busy_response(period: BusyInterval) -> BusyPeriodResponse:
    return BusyPeriodResponse(
        start_minute=period.start,
        end_minute=period.end,
        start=format_minutes_to_time(period.start),
        end=format_minutes_to_time(period.end),
        course=period.course,
        title=period.title,
        rooms=list(period.rooms),
    )


@router.post(
    "/availability/individual",
    response_model=IndividualAvailabilityResponse,
    status_code=status.HTTP_200_OK,
)
async def individual_availability(
    payload: IndividualAvailabilityRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> IndividualAvailabilityResponse:
    """Free slots and busy periods of one person for each weekday."""
    try:
        week = service.individual_availability(
            entity=payload.entity,
            buffer_minutes=payload.buffer_minutes,
            minimum_slot_minutes=payload.minimum_slot_minutes,
        )
        return IndividualAvailabilityResponse(
            entity=" ".join(payload.entity.split()),
            days=[
                DayAvailabilityResponse(
                    day=day,
                    slots=[_slot_response(slot) for slot in result.slots],
                    busy_periods=[_busy_response(period) for period in result.busy_periods],
                )
                for day, result in week.items()
            ],
        )
    except SchedulingValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected individual availability failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute availability",
        ) from exc


@router.post(
    "/availability/group",
    response_model=GroupAvailabilityResponse,
    status_code=status.HTTP_200_OK,
)
async def group_availability(
    payload: GroupAvailabilityRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> GroupAvailabilityResponse:
    """Slots where every selected person is free for the meeting duration."""
    try:
        result = service.group_availability(
            entities=payload.entities,
            buffer_minutes=payload.buffer_minutes,
            meeting_duration_minutes=payload.meeting_duration_minutes,
        )
        return GroupAvailabilityResponse(
            entities=list(result.entities),
            days=[
                DayAvailabilityResponse(
                    day=day,
                    slots=[_slot_response(slot) for slot in slots],
                )
                for day, slots in result.days.items()
            ],
        )
    except SchedulingValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except EntityNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected group availability failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute group availability",
        ) from exc


@router.post(
    "/rooms/available",
    response_model=RoomAvailabilityResponse,
    status_code=status.HTTP_200_OK,
)
async def available_rooms(
    payload: RoomAvailabilityRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> RoomAvailabilityResponse:
    try:
        result = service.available_rooms(
            day=payload.day,
            start_time=payload.start_time,
            end_time=payload.end_time,
        )
        return RoomAvailabilityResponse(**result)
    except SchedulingValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected room availability failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to resolve room availability",
        ) from exc
