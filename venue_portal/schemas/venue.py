"""Venue and club Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class VenueResponse(BaseModel):
    """Schema for venue response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    category: str
    capacity: int | None


class ClubResponse(BaseModel):
    """Schema for club response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    group_category: str
