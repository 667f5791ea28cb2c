"""Controller layer for the commitment collection and department analytics."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from dept_scheduler.controllers.dependencies import get_scheduling_service
from dept_scheduler.domain.models import AnalyticsReport, RawCommitment
from dept_scheduler.domain.time_codec import format_minutes_to_label
from dept_scheduler.services.scheduling_service import (
    SchedulingService,
    SchedulingValidationError,
)
from dept_scheduler.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["schedule"])


class CommitmentPayload(BaseModel):
    """Record shape produced by the import layer.

    Accepts either snake_case names or the import sheet's column headers.
    Day and time values are kept as text; bad values are dropped later.
    """

    model_config = ConfigDict(populate_by_name=True)

    instructor: str = Field(default="", alias="Instructor")
    course: str = Field(default="", alias="Course")
    course_title: str = Field(default="", alias="Course Title")
    day: str = Field(default="", alias="Day")
    start_time: str = Field(default="", alias="Start Time")
    end_time: str = Field(default="", alias="End Time")
    room: str = Field(default="", alias="Room")
    term: str = Field(default="", alias="Term")

    @field_validator(
        "instructor",
        "course",
        "course_title",
        "day",
        "start_time",
        "end_time",
        "room",
        "term",
        mode="before",
    )
    @classmethod
    def coerce_cell(cls, value):
        # blank and numeric sheet cells arrive as null or numbers
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_domain(self) -> RawCommitment:
        return RawCommitment(
            instructor=self.instructor,
            course=self.course,
            course_title=self.course_title,
            day=self.day,
            start_time=self.start_time,
            end_time=self.end_time,
            room=self.room,
            term=self.term,
        )


class ReplaceCommitmentsRequest(BaseModel):
    commitments: list[CommitmentPayload]


class ReplaceCommitmentsResponse(BaseModel):
    version: int = Field(ge=0)
    received: int = Field(ge=0)
    indexed: int = Field(ge=0)
    skipped: int = Field(ge=0)


class CommitmentListResponse(BaseModel):
    version: int = Field(ge=0)
    commitments: list[CommitmentPayload]


class WorkloadRow(BaseModel):
    instructor: str
    unique_course_count: int = Field(ge=0)
    total_weekly_hours: float = Field(ge=0.0)
    load_status: str


class RoomUtilizationRow(BaseModel):
    room: str
    session_count: int = Field(ge=0)
    total_hours: float = Field(ge=0.0)
    staff_taught_session_count: int = Field(ge=0)
    utilization_ratio: float = Field(ge=0.0)


class HourBucket(BaseModel):
    hour: int = Field(ge=0, le=23)
    label: str
    count: int = Field(ge=0)


class BusiestDayResponse(BaseModel):
    day: str
    count: int = Field(ge=0)


class AnalyticsResponse(BaseModel):
    workload: list[WorkloadRow]
    room_utilization: list[RoomUtilizationRow]
    hourly_occupancy: list[HourBucket]
    peak_hour: HourBucket
    busiest_day: Optional[BusiestDayResponse] = None
    latest_end_minute: int = Field(ge=0)
    total_sessions: int = Field(ge=0)
    unique_courses: int = Field(ge=0)
    rooms_in_use: int = Field(ge=0)
    staff_taught_sessions: int = Field(ge=0)
    staff_taught_courses: list[str]
    unique_instructors: list[str]


def _to_analytics_response(report: AnalyticsReport) -> AnalyticsResponse:
    hourly = report.hourly
    return AnalyticsResponse(
        workload=[
            WorkloadRow(
                instructor=name,
                unique_course_count=summary.unique_course_count,
                total_weekly_hours=round(summary.total_weekly_hours, 4),
                load_status=summary.load_status,
            )
            for name, summary in report.workload.items()
        ],
        room_utilization=[
            RoomUtilizationRow(
                room=room,
                session_count=usage.session_count,
                total_hours=round(usage.total_hours, 4),
                staff_taught_session_count=usage.staff_taught_session_count,
                utilization_ratio=round(usage.utilization_ratio, 4),
            )
            for room, usage in report.room_utilization.items()
        ],
        hourly_occupancy=[
            HourBucket(hour=hour, label=format_minutes_to_label(hour * 60), count=count)
            for hour, count in sorted(hourly.counts.items())
        ],
        peak_hour=HourBucket(
            hour=hourly.peak_hour,
            label=format_minutes_to_label(hourly.peak_hour * 60),
            count=hourly.peak_count,
        ),
        busiest_day=(
            BusiestDayResponse(day=report.busiest_day.day, count=report.busiest_day.count)
            if report.busiest_day is not None
            else None
        ),
        latest_end_minute=hourly.latest_end_minute,
        total_sessions=report.total_sessions,
        unique_courses=report.unique_courses,
        rooms_in_use=report.rooms_in_use,
        staff_taught_sessions=report.staff_taught_sessions,
        staff_taught_courses=list(report.staff_taught_courses),
        unique_instructors=list(report.unique_instructors),
    )


@router.put(
    "/commitments",
    response_model=ReplaceCommitmentsResponse,
    status_code=status.HTTP_200_OK,
)
async def replace_commitments(
    payload: ReplaceCommitmentsRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> ReplaceCommitmentsResponse:
    """Replace the whole collection; every derived view is rebuilt from it."""
    try:
        result = service.replace_commitments(item.to_domain() for item in payload.commitments)
        return ReplaceCommitmentsResponse(**result)
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected commitment replacement failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to replace commitments",
        ) from exc


@router.get(
    "/commitments",
    response_model=CommitmentListResponse,
    response_model_by_alias=False,
    status_code=status.HTTP_200_OK,
)
async def list_commitments(
    service: SchedulingService = Depends(get_scheduling_service),
) -> CommitmentListResponse:
    return CommitmentListResponse(
        version=service.version,
        commitments=[
            CommitmentPayload(
                instructor=item.instructor,
                course=item.course,
                course_title=item.course_title,
                day=item.day,
                start_time=item.start_time,
                end_time=item.end_time,
                room=item.room,
                term=item.term,
            )
            for item in service.list_commitments()
        ],
    )


@router.get("/entities", response_model=list[str], status_code=status.HTTP_200_OK)
async def list_entities(
    service: SchedulingService = Depends(get_scheduling_service),
) -> list[str]:
    return service.list_entities()


@router.get("/rooms", response_model=list[str], status_code=status.HTTP_200_OK)
async def list_rooms(
    service: SchedulingService = Depends(get_scheduling_service),
) -> list[str]:
    return service.list_rooms()


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    status_code=status.HTTP_200_OK,
)
async def analytics(
    day: Optional[str] = Query(default=None, description="Restrict the hourly histogram to one day code"),
    service: SchedulingService = Depends(get_scheduling_service),
) -> AnalyticsResponse:
    try:
        return _to_analytics_response(service.analytics(day=day))
    except SchedulingValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected analytics failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute analytics",
        ) from exc


@router.get(
    "/analytics/export/{table}",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
)
async def export_analytics(
    table: str,
    day: Optional[str] = Query(default=None),
    service: SchedulingService = Depends(get_scheduling_service),
) -> PlainTextResponse:
    """Download one analytics table as CSV."""
    try:
        body = service.export_table(table, day=day)
        return PlainTextResponse(
            content=body,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{table}.csv"'},
        )
    except SchedulingValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected analytics export failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to export analytics",
        ) from exc
