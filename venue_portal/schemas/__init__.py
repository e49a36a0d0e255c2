"""Pydantic schemas for request/response validation."""

from venue_portal.schemas.booking import (
    AdminBookingCreate,
    BookingCreate,
    BookingResponse,
    BookingStatsResponse,
    BookingStatusUpdate,
    BookingSubmitResponse,
    BookingUpdate,
    ConflictCheckResponse,
    QuotaStatusResponse,
)
from venue_portal.schemas.notification import (
    NotificationResponse,
    PendingBookingItem,
    UnreadCountResponse,
)
from venue_portal.schemas.venue import ClubResponse, VenueResponse

__all__ = [
    # Booking
    "AdminBookingCreate",
    "BookingCreate",
    "BookingResponse",
    "BookingStatsResponse",
    "BookingStatusUpdate",
    "BookingSubmitResponse",
    "BookingUpdate",
    "ConflictCheckResponse",
    "QuotaStatusResponse",
    # Notification
    "NotificationResponse",
    "PendingBookingItem",
    "UnreadCountResponse",
    # Reference data
    "ClubResponse",
    "VenueResponse",
]
