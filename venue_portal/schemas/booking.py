"""Booking-related Pydantic schemas."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from venue_portal.config import settings
from venue_portal.domain.booking_policy import EventType, to_utc


class BookingBase(BaseModel):
    """Base booking schema."""

    club_id: UUID
    venue_ids: list[UUID] = Field(..., min_length=1, max_length=20)
    event_type: EventType
    event_name: str = Field(..., min_length=1, max_length=200)
    start_time: datetime
    end_time: datetime
    expected_attendees: int | None = Field(None, ge=0, le=100000)

    @model_validator(mode="before")
    @classmethod
    def accept_single_venue(cls, data: Any) -> Any:
        # Older clients send a single venue_id
        if isinstance(data, dict) and "venue_ids" not in data and data.get("venue_id"):
            data = {**data, "venue_ids": [data["venue_id"]]}
        return data

    @field_validator("event_name")
    @classmethod
    def strip_event_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("event_name must not be blank")
        return v

    @field_validator("end_time")
    @classmethod
    def validate_end_time(cls, v: datetime, info) -> datetime:
        start_time = info.data.get("start_time")
        # Naive values are local time
        if start_time and to_utc(v, settings.tzinfo) <= to_utc(start_time, settings.tzinfo):
            raise ValueError("end_time must be after start_time")
        return v


class BookingCreate(BookingBase):
    """Schema for a club submitting a booking request."""


class AdminBookingCreate(BookingBase):
    """Schema for an admin creating an approved booking directly."""

    event_type: EventType = EventType.OPEN_ALL
    is_public: bool = False


class BookingUpdate(BaseModel):
    """Schema for an explicit admin edit of a booking."""

    event_name: str | None = Field(None, min_length=1, max_length=200)
    venue_id: UUID | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    event_type: EventType | None = None
    expected_attendees: int | None = Field(None, ge=0, le=100000)
    status: Literal["pending", "approved", "rejected"] | None = None
    is_public: bool | None = None


class BookingStatusUpdate(BaseModel):
    """Schema for an admin approving or rejecting a pending booking."""

    status: Literal["approved", "rejected"]
    admin_note: str | None = Field(None, max_length=1000)


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    club_id: UUID
    venue_id: UUID
    club_name: str | None = None
    venue_name: str | None = None

    event_name: str
    event_type: str
    expected_attendees: int | None

    start_time: datetime
    end_time: datetime

    status: str
    batch_id: UUID | None
    is_public: bool
    created_by: UUID | None
    created_at: datetime | None = None


class BookingSubmitResponse(BaseModel):
    """Rows created for one submission, one per venue."""

    created: list[BookingResponse]


class ConflictCheckResponse(BaseModel):
    """Result of a conflict pre-flight."""

    has_conflict: bool
    message: str = ""
    conflicting_venues: list[str] = []


class QuotaStatusResponse(BaseModel):
    """Club's usage of a per-semester event quota."""

    club_id: UUID
    event_type: EventType
    count: int
    limit: int | None
    semester_start: datetime
    semester_end: datetime


class BookingStatsResponse(BaseModel):
    """Admin dashboard counters."""

    pending: int
    approved: int
    rejected: int
    active_clubs: int
