"""Venue and club reference data models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from venue_portal.database import Base

if TYPE_CHECKING:
    from venue_portal.models.booking import Booking
    from venue_portal.models.user import Profile


class Venue(Base):
    """Bookable campus venue."""

    __tablename__ = "venues"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    category: Mapped[str] = mapped_column(
        String(20), nullable=False, default="needs_approval"
    )  # auto_approval, needs_approval
    capacity: Mapped[int | None] = mapped_column(Integer)  # max attendees, NULL = unlimited
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="venue")


class Club(Base):
    """Student club or committee."""

    __tablename__ = "clubs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    group_category: Mapped[str] = mapped_column(
        String(1), nullable=False, index=True
    )  # A (academic/tech), B (cultural), C (sports)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="club")
    members: Mapped[list["Profile"]] = relationship("Profile", back_populates="club")
