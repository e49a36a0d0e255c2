"""Detection of overlapping venue bookings."""

from collections.abc import Sequence
from datetime import datetime
from typing import NamedTuple
from uuid import UUID

from venue_portal.models.venue import Club
from venue_portal.services.booking_store import BookingFilter, BookingStore


class ConflictResult(NamedTuple):
    """Outcome of a conflict check."""

    has_conflict: bool
    message: str = ""
    venue_names: Sequence[str] = ()


NO_CONFLICT = ConflictResult(False)


class ConflictService:
    """Finds existing non-rejected bookings that overlap a candidate window."""

    def __init__(self, store: BookingStore) -> None:
        self.store = store

    async def check(
        self,
        venue_ids: Sequence[UUID],
        start: datetime,
        end: datetime,
    ) -> ConflictResult:
        """Check the venues are free for ``[start, end)``.

        Args:
            venue_ids: Venues requested by the candidate
            start: Window start (UTC)
            end: Window end (UTC)

        Returns:
            ConflictResult: Names every conflicting venue once, in first-seen order
        """
        clashes = await self.store.query_bookings(
            BookingFilter(
                venue_ids=list(venue_ids),
                overlaps=(start, end),
                exclude_status="rejected",
            )
        )
        if not clashes:
            return NO_CONFLICT

        names: list[str] = []
        for booking in clashes:
            name = booking.venue.name if booking.venue else str(booking.venue_id)
            if name not in names:
                names.append(name)

        verb = "is" if len(names) == 1 else "are"
        return ConflictResult(
            True,
            f"Conflict: {', '.join(names)} {verb} already booked during this time.",
            names,
        )

    async def check_group(self, club: Club, start: datetime, end: datetime) -> ConflictResult:
        """Same-cohort rule: no two clubs of one group may hold overlapping events.

        Superseded by venue-only conflicts; only used when
        ``enforce_group_conflicts`` is enabled.
        """
        clashes = await self.store.query_bookings(
            BookingFilter(
                overlaps=(start, end),
                exclude_status="rejected",
                group_category=club.group_category,
                exclude_club_id=club.id,
                limit=1,
            )
        )
        if not clashes:
            return NO_CONFLICT
        return ConflictResult(
            True,
            f"Conflict: Another club in group '{club.group_category}' "
            "has a booking during this time.",
        )
