"""Notification Pydantic schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class NotificationResponse(BaseModel):
    """Schema for an admin inbox entry."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    notification_type: str = Field(serialization_alias="type")
    title: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict, serialization_alias="metadata")
    is_read: bool
    created_at: datetime | None = None


class UnreadCountResponse(BaseModel):
    """Unread notification count."""

    count: int


class PendingBookingItem(BaseModel):
    """One booking awaiting approval, as handed to the notifier."""

    venue_name: str
    event_name: str
    start_time: datetime
    end_time: datetime
    club_name: str | None = None
