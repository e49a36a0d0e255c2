"""Record store for venues, clubs and bookings backed by an AsyncSession."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from sqlalchemy import Select, func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from venue_portal.core.exceptions import ConflictError, StoreError
from venue_portal.models.admin import AuditLog
from venue_portal.models.booking import Booking
from venue_portal.models.venue import Club, Venue

logger = logging.getLogger(__name__)

# SQLSTATE raised by the bookings exclusion constraint
EXCLUSION_VIOLATION = "23P01"


@dataclass
class BookingFilter:
    """Criteria for querying bookings; unset fields do not filter."""

    venue_ids: Sequence[UUID] | None = None
    overlaps: tuple[datetime, datetime] | None = None
    status: str | None = None
    exclude_status: str | None = None
    club_id: UUID | None = None
    exclude_club_id: UUID | None = None
    group_category: str | None = None
    event_type: str | None = None
    batch_id: UUID | None = None
    start_from: datetime | None = None
    start_to: datetime | None = None
    end_from: datetime | None = None
    exclude_booking_id: UUID | None = None
    created_by: UUID | None = None
    order: Literal["asc", "desc"] = "asc"
    limit: int | None = None
    offset: int = 0


class BookingStore:
    """Queries and writes used by the booking engine."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ==================== REFERENCE DATA ====================

    async def find_venues_by_ids(self, venue_ids: Sequence[UUID]) -> list[Venue]:
        """Fetch venues, ordered like ``venue_ids``; unknown ids are skipped."""
        if not venue_ids:
            return []
        result = await self.db.execute(select(Venue).where(Venue.id.in_(venue_ids)))
        by_id = {venue.id: venue for venue in result.scalars().all()}
        return [by_id[venue_id] for venue_id in venue_ids if venue_id in by_id]

    async def find_club_by_id(self, club_id: UUID) -> Club | None:
        result = await self.db.execute(select(Club).where(Club.id == club_id))
        return result.scalar_one_or_none()

    async def list_venues(self) -> list[Venue]:
        result = await self.db.execute(select(Venue).order_by(Venue.name))
        return list(result.scalars().all())

    async def list_clubs(self) -> list[Club]:
        result = await self.db.execute(select(Club).order_by(Club.name))
        return list(result.scalars().all())

    # ==================== BOOKINGS ====================

    def _apply_filter(self, query: Select, criteria: BookingFilter) -> Select:
        if criteria.venue_ids is not None:
            query = query.where(Booking.venue_id.in_(criteria.venue_ids))
        if criteria.overlaps is not None:
            start, end = criteria.overlaps
            # Half-open overlap, see booking_policy.intervals_overlap
            query = query.where(Booking.start_time < end, Booking.end_time > start)
        if criteria.status is not None:
            query = query.where(Booking.status == criteria.status)
        if criteria.exclude_status is not None:
            query = query.where(Booking.status != criteria.exclude_status)
        if criteria.club_id is not None:
            query = query.where(Booking.club_id == criteria.club_id)
        if criteria.exclude_club_id is not None:
            query = query.where(Booking.club_id != criteria.exclude_club_id)
        if criteria.group_category is not None:
            query = query.where(
                Booking.club_id.in_(
                    select(Club.id).where(Club.group_category == criteria.group_category)
                )
            )
        if criteria.event_type is not None:
            query = query.where(Booking.event_type == criteria.event_type)
        if criteria.batch_id is not None:
            query = query.where(Booking.batch_id == criteria.batch_id)
        if criteria.start_from is not None:
            query = query.where(Booking.start_time >= criteria.start_from)
        if criteria.start_to is not None:
            query = query.where(Booking.start_time <= criteria.start_to)
        if criteria.end_from is not None:
            query = query.where(Booking.end_time >= criteria.end_from)
        if criteria.exclude_booking_id is not None:
            query = query.where(Booking.id != criteria.exclude_booking_id)
        if criteria.created_by is not None:
            query = query.where(Booking.created_by == criteria.created_by)
        return query

    async def query_bookings(self, criteria: BookingFilter) -> list[Booking]:
        """Bookings matching ``criteria`` with club and venue loaded."""
        query = self._apply_filter(select(Booking), criteria)
        ordering = Booking.start_time.asc() if criteria.order == "asc" else Booking.start_time.desc()
        query = query.order_by(ordering, Booking.id).offset(criteria.offset)
        if criteria.limit is not None:
            query = query.limit(criteria.limit)

        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to query bookings: {e}")
        return list(result.scalars().all())

    async def count_bookings(self, criteria: BookingFilter) -> int:
        query = self._apply_filter(select(func.count(Booking.id)), criteria)
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def count_clubs(self) -> int:
        result = await self.db.execute(select(func.count(Club.id)))
        return result.scalar() or 0

    async def _flush(self, booking: Booking, failure: str) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            if getattr(e.orig, "sqlstate", None) == EXCLUSION_VIOLATION:
                name = booking.venue.name if booking.venue is not None else str(booking.venue_id)
                raise ConflictError(
                    f"Conflict: {name} is already booked during this time.",
                    venue_names=[name],
                )
            raise StoreError(f"{failure}: {e.orig}")
        except SQLAlchemyError as e:
            raise StoreError(f"{failure}: {e}")

    async def get_booking(self, booking_id: UUID) -> Booking | None:
        result = await self.db.execute(select(Booking).where(Booking.id == booking_id))
        return result.scalar_one_or_none()

    async def insert_booking(self, **fields: Any) -> Booking:
        """Insert one booking row and flush it.

        Raises:
            ConflictError: If the venue exclusion constraint rejects the row
            StoreError: For any other persistence failure
        """
        booking = Booking(**fields)
        self.db.add(booking)
        await self._flush(booking, "Failed to save booking")
        return booking

    async def update_booking_status(self, booking_id: UUID, status: str) -> Booking:
        booking = await self.get_booking(booking_id)
        if booking is None:
            raise StoreError(f"Booking {booking_id} disappeared during update")
        booking.status = status
        await self.save(booking)
        return booking

    async def save(self, booking: Booking) -> Booking:
        """Flush pending changes to ``booking``.

        Raises:
            ConflictError: If the change moves it onto an occupied slot
            StoreError: For any other persistence failure
        """
        await self._flush(booking, "Failed to update booking")
        return booking

    async def delete_booking(self, booking: Booking) -> None:
        await self.db.delete(booking)
        await self.db.flush()

    # ==================== TRANSACTION ====================

    async def lock_venues(self, venue_ids: Sequence[UUID]) -> None:
        """Serialize bookings per venue until the current transaction ends.

        Locks are taken in sorted order so concurrent multi-venue submissions
        cannot deadlock. Only PostgreSQL has advisory locks.
        """
        await self._advisory_lock([f"venue:{venue_id}" for venue_id in sorted(set(venue_ids), key=str)])

    async def lock_club(self, club_id: UUID) -> None:
        """Serialize quota-counted submissions of one club until the transaction ends.

        Taken before any venue lock.
        """
        await self._advisory_lock([f"club:{club_id}"])

    async def _advisory_lock(self, keys: Sequence[str]) -> None:
        if self.db.get_bind().dialect.name != "postgresql":
            return
        for key in keys:
            await self.db.execute(
                text("SELECT pg_advisory_xact_lock(hashtextextended(:key, 0))"),
                {"key": key},
            )

    async def commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(f"Failed to commit bookings: {e}")

    # ==================== AUDIT ====================

    def log_action(
        self,
        user_id: UUID | None,
        action: str,
        booking_id: UUID,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Record an admin action on a booking."""
        audit = AuditLog(
            user_id=user_id,
            action=action,
            resource_type="booking",
            resource_id=booking_id,
            old_values=old_values,
            new_values=new_values,
        )
        self.db.add(audit)
        logger.info(f"Audit: {action} on booking {booking_id} by {user_id}")
        return audit
