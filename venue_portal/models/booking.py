"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from venue_portal.database import Base

if TYPE_CHECKING:
    from venue_portal.models.venue import Club, Venue


class Booking(Base):
    """One venue reserved for one event; multi-venue events share a batch id."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="booking_valid_range"),
        Index("ix_bookings_venue_window", "venue_id", "start_time", "end_time"),
        Index("ix_bookings_club_type_start", "club_id", "event_type", "start_time"),
    )
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    club_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    venue_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Event
    event_name: Mapped[str] = mapped_column(String(200), nullable=False)
    event_type: Mapped[str] = mapped_column(
        String(20), nullable=False
    )  # co_curricular, open_all, closed_club
    expected_attendees: Mapped[int | None] = mapped_column(Integer)

    # Window (stored in UTC)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Status
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True
    )  # pending, approved, rejected

    # Rows created from one submission share this id
    batch_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), index=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL")
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    club: Mapped["Club"] = relationship("Club", back_populates="bookings", lazy="joined")
    venue: Mapped["Venue"] = relationship("Venue", back_populates="bookings", lazy="joined")

    @property
    def club_name(self) -> str | None:
        return self.club.name if self.club else None

    @property
    def venue_name(self) -> str | None:
        return self.venue.name if self.venue else None
