"""Booking endpoints."""

from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from venue_portal.api.deps import get_booking_service, get_current_user
from venue_portal.core.middleware import booking_limiter
from venue_portal.domain.booking_policy import EventType
from venue_portal.models.booking import Booking
from venue_portal.models.user import Profile
from venue_portal.schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingSubmitResponse,
    ConflictCheckResponse,
    QuotaStatusResponse,
)
from venue_portal.services.booking_service import BookingService

router = APIRouter()


@router.post(
    "",
    response_model=BookingSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(booking_limiter)],
)
async def create_booking(
    booking_data: BookingCreate,
    current_user: Annotated[Profile, Depends(get_current_user)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> BookingSubmitResponse:
    """Request one or more venues for an event.

    Rows for auto-approval venues are approved immediately; the rest wait
    for an admin.
    """
    created = await service.submit_booking(booking_data, current_user)
    return BookingSubmitResponse(
        created=[BookingResponse.model_validate(booking) for booking in created]
    )


@router.get("/check-conflict", response_model=ConflictCheckResponse)
async def check_conflict(
    current_user: Annotated[Profile, Depends(get_current_user)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    club_id: UUID,
    start_time: datetime,
    end_time: datetime,
    venue_ids: list[UUID] = Query(..., min_length=1),
) -> ConflictCheckResponse:
    """Check whether the venues are free without booking them."""
    result = await service.check_conflict(club_id, venue_ids, start_time, end_time)
    return ConflictCheckResponse(
        has_conflict=result.has_conflict,
        message=result.message,
        conflicting_venues=result.venue_names,
    )


@router.get("/quota", response_model=QuotaStatusResponse)
async def get_quota(
    current_user: Annotated[Profile, Depends(get_current_user)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    club_id: UUID,
    event_type: EventType = Query(default=EventType.CO_CURRICULAR),
    as_of: date | None = None,
) -> QuotaStatusResponse:
    """Get a club's event count for the current semester."""
    quota = await service.get_quota_status(club_id, event_type, as_of)
    return QuotaStatusResponse(
        club_id=club_id,
        event_type=event_type,
        count=quota.count,
        limit=quota.limit,
        semester_start=quota.semester_start,
        semester_end=quota.semester_end,
    )


@router.get("/mine", response_model=list[BookingResponse])
async def get_my_bookings(
    current_user: Annotated[Profile, Depends(get_current_user)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> list[Booking]:
    """Get bookings of the current user's club."""
    return await service.list_mine(current_user, limit=limit, offset=offset)


@router.get("/public", response_model=list[BookingResponse])
async def get_public_bookings(
    service: Annotated[BookingService, Depends(get_booking_service)],
    limit: int = Query(default=100, ge=1, le=500),
) -> list[Booking]:
    """Get upcoming approved bookings for the public calendar."""
    return await service.list_public(limit=limit)
