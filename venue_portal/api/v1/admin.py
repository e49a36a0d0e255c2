"""Admin panel endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from venue_portal.api.deps import get_booking_service, get_current_admin
from venue_portal.models.booking import Booking
from venue_portal.models.user import Profile
from venue_portal.schemas.booking import (
    AdminBookingCreate,
    BookingResponse,
    BookingStatsResponse,
    BookingStatusUpdate,
    BookingSubmitResponse,
    BookingUpdate,
)
from venue_portal.services.booking_service import BookingService

router = APIRouter()


# ============ BOOKING APPROVALS ============


@router.get("/pending", response_model=list[BookingResponse])
async def get_pending_bookings(
    admin: Annotated[Profile, Depends(get_current_admin)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> list[Booking]:
    """Get bookings pending approval, soonest first."""
    return await service.list_pending(limit=limit, offset=offset)


@router.patch("/bookings/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    status_data: BookingStatusUpdate,
    admin: Annotated[Profile, Depends(get_current_admin)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Approve or reject a pending booking."""
    return await service.update_status(
        booking_id, status_data.status, admin, note=status_data.admin_note
    )


# ============ BOOKING MANAGEMENT ============


@router.get("/bookings", response_model=list[BookingResponse])
async def get_all_bookings(
    admin: Annotated[Profile, Depends(get_current_admin)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    status_filter: str | None = Query(
        default=None, alias="status", pattern="^(pending|approved|rejected)$"
    ),
    club_id: UUID | None = None,
    venue_id: UUID | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> list[Booking]:
    """Get all bookings, latest first."""
    return await service.list_bookings(
        status=status_filter,
        club_id=club_id,
        venue_id=venue_id,
        limit=limit,
        offset=offset,
    )


@router.post(
    "/bookings",
    response_model=BookingSubmitResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_admin_booking(
    booking_data: AdminBookingCreate,
    admin: Annotated[Profile, Depends(get_current_admin)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> BookingSubmitResponse:
    """Book venues directly; rows are approved immediately."""
    created = await service.create_admin_booking(booking_data, admin)
    return BookingSubmitResponse(
        created=[BookingResponse.model_validate(booking) for booking in created]
    )


@router.put("/bookings/{booking_id}", response_model=BookingResponse)
async def edit_booking(
    booking_id: UUID,
    changes: BookingUpdate,
    admin: Annotated[Profile, Depends(get_current_admin)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Edit a booking."""
    return await service.edit_booking(booking_id, changes, admin)


@router.delete("/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: UUID,
    admin: Annotated[Profile, Depends(get_current_admin)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> None:
    """Delete a booking."""
    await service.delete_booking(booking_id, admin)


# ============ STATS ============


@router.get("/stats", response_model=BookingStatsResponse)
async def get_stats(
    admin: Annotated[Profile, Depends(get_current_admin)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> BookingStatsResponse:
    """Get booking counters for the dashboard."""
    return BookingStatsResponse(**await service.get_stats())
