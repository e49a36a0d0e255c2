"""Per-club, per-semester event quota."""

import logging
from datetime import UTC, date, datetime, tzinfo
from typing import NamedTuple
from uuid import UUID

from venue_portal.core.exceptions import QuotaExceeded
from venue_portal.domain.booking_policy import QUOTA_EVENT_TYPE, EventType, count_distinct_events
from venue_portal.domain.semester import semester_window
from venue_portal.services.booking_store import BookingFilter, BookingStore

logger = logging.getLogger(__name__)


class QuotaStatus(NamedTuple):
    """Events a club has booked this semester against its limit."""

    count: int
    limit: int | None
    semester_start: datetime
    semester_end: datetime

    @property
    def exhausted(self) -> bool:
        return self.limit is not None and self.count >= self.limit


class QuotaService:
    """Counts distinct events per club inside a semester window."""

    def __init__(self, store: BookingStore, limit: int = 2, tz: tzinfo = UTC) -> None:
        self.store = store
        self.limit = limit
        self.tz = tz

    def limit_for(self, event_type: str | EventType) -> int | None:
        """Quota for an event type; only co-curricular events are limited."""
        return self.limit if EventType(event_type) is QUOTA_EVENT_TYPE else None

    async def count_events(
        self,
        club_id: UUID,
        event_type: str | EventType,
        window: tuple[datetime, datetime],
        exclude_booking_id: UUID | None = None,
    ) -> int:
        """Count the club's non-rejected events starting inside ``window``.

        Rows sharing a batch id are one event; rows without one count singly.
        """
        semester_start, semester_end = window
        bookings = await self.store.query_bookings(
            BookingFilter(
                club_id=club_id,
                event_type=EventType(event_type).value,
                exclude_status="rejected",
                start_from=semester_start.astimezone(UTC),
                start_to=semester_end.astimezone(UTC),
                exclude_booking_id=exclude_booking_id,
            )
        )
        return count_distinct_events(booking.batch_id for booking in bookings)

    async def status(
        self,
        club_id: UUID,
        event_type: str | EventType,
        as_of: date | datetime,
    ) -> QuotaStatus:
        window = semester_window(as_of, self.tz)
        count = await self.count_events(club_id, event_type, window)
        return QuotaStatus(count, self.limit_for(event_type), *window)

    async def enforce(
        self,
        club_id: UUID,
        event_type: str | EventType,
        start: datetime,
        exclude_booking_id: UUID | None = None,
    ) -> None:
        """Raise once the club has reached its limit for the semester of ``start``.

        Raises:
            QuotaExceeded: If the club has no events left this semester
        """
        limit = self.limit_for(event_type)
        if limit is None:
            return

        window = semester_window(start, self.tz)
        count = await self.count_events(club_id, event_type, window, exclude_booking_id)
        quota = QuotaStatus(count, limit, *window)
        if quota.exhausted:
            logger.info(f"Quota reached for club {club_id}: {quota.count}/{limit} {EventType(event_type).value}")
            raise QuotaExceeded(limit)
