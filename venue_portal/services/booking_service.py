"""Booking submission and administration.

A submission passes these gates in order, stopping at the first failure:

1. shape (event name, venue list, time window)
2. advance notice
3. operating hours
4. club and venues exist
5. co-curricular semester quota (club locked until commit)
6. venue conflicts (venues locked until commit)
7. venue capacity
8. approval category of every venue

Then one row per venue is written under a shared batch id in a single
transaction, and approvers are notified about any pending rows.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, date, datetime
from typing import Any, Protocol
from uuid import UUID, uuid4

from fastapi.encoders import jsonable_encoder

from venue_portal.config import Settings, settings as default_settings
from venue_portal.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    PolicyViolation,
    ValidationError,
)
from venue_portal.domain.booking_policy import (
    QUOTA_EVENT_TYPE,
    EventType,
    RuleResult,
    check_advance_notice,
    check_capacity,
    check_operating_hours,
    initial_status,
    to_utc,
)
from venue_portal.domain.booking_state import assert_booking_transition
from venue_portal.models.booking import Booking
from venue_portal.models.user import Profile
from venue_portal.models.venue import Club, Venue
from venue_portal.schemas.booking import (
    AdminBookingCreate,
    BookingBase,
    BookingCreate,
    BookingUpdate,
)
from venue_portal.schemas.notification import PendingBookingItem
from venue_portal.services.booking_store import BookingFilter, BookingStore
from venue_portal.services.conflict_service import ConflictResult, ConflictService
from venue_portal.services.quota_service import QuotaService, QuotaStatus

logger = logging.getLogger(__name__)

STATUS_ACTIONS = {"approved": "approve_booking", "rejected": "reject_booking"}


class Notifier(Protocol):
    async def notify_pending(self, items: Sequence[PendingBookingItem]) -> None: ...


class BookingService:
    """Validates, records and administers venue bookings."""

    def __init__(
        self,
        store: BookingStore,
        notifier: Notifier,
        settings: Settings = default_settings,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.settings = settings
        self.tz = settings.tzinfo
        self.clock = clock or (lambda: datetime.now(UTC))
        self.conflicts = ConflictService(store)
        self.quota = QuotaService(store, limit=settings.co_curricular_limit, tz=self.tz)

    # ==================== GATES ====================

    @staticmethod
    def _enforce(result: RuleResult) -> None:
        if not result.passed:
            raise PolicyViolation(result.reason)

    @staticmethod
    def _authorize(caller: Profile, club_id: UUID) -> None:
        if caller.is_admin:
            return
        if caller.club_id != club_id:
            raise AuthorizationError("You can only book venues for your own club")

    def _validate_shape(self, data: BookingBase) -> tuple[list[UUID], datetime, datetime]:
        """Deduplicated venue ids and the UTC window of a candidate."""
        if not data.event_name or not data.event_name.strip():
            raise ValidationError("event_name is required", errors=[{"field": "event_name"}])

        venue_ids = list(dict.fromkeys(data.venue_ids))
        if not venue_ids:
            raise ValidationError("At least one venue is required", errors=[{"field": "venue_ids"}])

        start = to_utc(data.start_time, self.tz)
        end = to_utc(data.end_time, self.tz)
        if end <= start:
            raise ValidationError("end_time must be after start_time", errors=[{"field": "end_time"}])
        return venue_ids, start, end

    async def _resolve_club(self, club_id: UUID) -> Club:
        club = await self.store.find_club_by_id(club_id)
        if club is None:
            raise NotFoundError("Club", str(club_id))
        return club

    async def _resolve_venues(self, venue_ids: Sequence[UUID]) -> list[Venue]:
        venues = await self.store.find_venues_by_ids(venue_ids)
        found = {venue.id for venue in venues}
        for venue_id in venue_ids:
            if venue_id not in found:
                raise NotFoundError("Venue", str(venue_id))
        return venues

    async def _find_conflict(self, club: Club, venue_ids: Sequence[UUID], start: datetime, end: datetime) -> ConflictResult:
        result = await self.conflicts.check(venue_ids, start, end)
        if not result.has_conflict and self.settings.enforce_group_conflicts:
            result = await self.conflicts.check_group(club, start, end)
        return result

    async def _enforce_no_conflict(self, club: Club, venue_ids: Sequence[UUID], start: datetime, end: datetime) -> None:
        await self.store.lock_venues(venue_ids)
        result = await self._find_conflict(club, venue_ids, start, end)
        if result.has_conflict:
            raise ConflictError(result.message, venue_names=result.venue_names)

    # ==================== WRITES ====================

    async def _persist(
        self,
        data: BookingBase,
        club: Club,
        venues: Sequence[Venue],
        statuses: dict[UUID, str],
        start: datetime,
        end: datetime,
        caller: Profile,
        is_public: bool = False,
    ) -> list[Booking]:
        batch_id = uuid4()
        created = []
        for venue in venues:
            booking = await self.store.insert_booking(
                club=club,
                venue=venue,
                club_id=club.id,
                venue_id=venue.id,
                event_name=data.event_name,
                event_type=EventType(data.event_type).value,
                expected_attendees=data.expected_attendees,
                start_time=start,
                end_time=end,
                status=statuses[venue.id],
                batch_id=batch_id,
                is_public=is_public,
                created_by=caller.id,
            )
            created.append(booking)
        await self.store.commit()
        logger.info(
            f"Created batch {batch_id} for club {club.name}: "
            + ", ".join(f"{b.venue.name}={b.status}" for b in created)
        )
        return created

    async def _notify_pending(self, bookings: Sequence[Booking], club: Club) -> None:
        items = [
            PendingBookingItem(
                venue_name=booking.venue.name,
                event_name=booking.event_name,
                start_time=booking.start_time,
                end_time=booking.end_time,
                club_name=club.name,
            )
            for booking in bookings
        ]
        try:
            await self.notifier.notify_pending(items)
        except Exception:
            # Bookings are already committed at this point
            logger.exception(f"Failed to notify approvers about {len(items)} pending booking(s)")

    # ==================== SUBMISSION ====================

    async def submit_booking(self, candidate: BookingCreate, caller: Profile) -> list[Booking]:
        """Validate a club's request and record one booking per venue.

        Args:
            candidate: Requested event, venues and window
            caller: Authenticated profile submitting the request

        Returns:
            list[Booking]: Created rows, in requested venue order

        Raises:
            ValidationError, PolicyViolation, NotFoundError, QuotaExceeded,
            ConflictError, VenueConfigurationError, StoreError
        """
        self._authorize(caller, candidate.club_id)
        venue_ids, start, end = self._validate_shape(candidate)

        self._enforce(
            check_advance_notice(
                candidate.event_type, start, self.clock(), self.settings.min_days_by_event_type
            )
        )
        self._enforce(
            check_operating_hours(
                start,
                end,
                self.tz,
                weekday_opening=self.settings.weekday_opening_time,
                weekend_opening=self.settings.weekend_opening_time,
            )
        )

        venues = await self._resolve_venues(venue_ids)
        club = await self._resolve_club(candidate.club_id)

        if EventType(candidate.event_type) is QUOTA_EVENT_TYPE:
            await self.store.lock_club(club.id)
            await self.quota.enforce(club.id, candidate.event_type, start)

        await self._enforce_no_conflict(club, venue_ids, start, end)
        self._enforce(check_capacity(venues, candidate.expected_attendees))

        statuses = {venue.id: initial_status(venue.category, venue.name) for venue in venues}
        created = await self._persist(candidate, club, venues, statuses, start, end, caller)

        pending = [booking for booking in created if booking.status == "pending"]
        if pending:
            await self._notify_pending(pending, club)
        return created

    async def create_admin_booking(self, data: AdminBookingCreate, caller: Profile) -> list[Booking]:
        """Create approved bookings directly on behalf of the administration.

        Skips advance notice, operating hours and quota; venue conflicts and
        capacity still apply.
        """
        if not caller.is_admin:
            raise AuthorizationError("Admin access required")
        venue_ids, start, end = self._validate_shape(data)

        venues = await self._resolve_venues(venue_ids)
        club = await self._resolve_club(data.club_id)

        await self._enforce_no_conflict(club, venue_ids, start, end)
        self._enforce(check_capacity(venues, data.expected_attendees))

        statuses = {venue.id: "approved" for venue in venues}
        return await self._persist(
            data, club, venues, statuses, start, end, caller, is_public=data.is_public
        )

    # ==================== READ-ONLY CHECKS ====================

    async def check_conflict(
        self,
        club_id: UUID,
        venue_ids: Sequence[UUID],
        start: datetime,
        end: datetime,
    ) -> ConflictResult:
        """Pre-flight the conflict gate without booking anything."""
        start = to_utc(start, self.tz)
        end = to_utc(end, self.tz)
        if end <= start:
            raise ValidationError("end_time must be after start_time", errors=[{"field": "end_time"}])
        venue_ids = list(dict.fromkeys(venue_ids))
        if not venue_ids:
            raise ValidationError("At least one venue is required", errors=[{"field": "venue_ids"}])

        club = await self._resolve_club(club_id)
        return await self._find_conflict(club, venue_ids, start, end)

    async def get_quota_status(
        self,
        club_id: UUID,
        event_type: str | EventType,
        as_of: date | datetime | None = None,
    ) -> QuotaStatus:
        """Events the club has booked this semester and its limit."""
        club = await self._resolve_club(club_id)
        return await self.quota.status(club.id, event_type, as_of or self.clock())

    # ==================== LISTINGS ====================

    async def list_pending(self, limit: int = 100, offset: int = 0) -> list[Booking]:
        """Pending bookings, soonest first."""
        return await self.store.query_bookings(
            BookingFilter(status="pending", order="asc", limit=limit, offset=offset)
        )

    async def list_bookings(
        self,
        status: str | None = None,
        club_id: UUID | None = None,
        venue_id: UUID | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Booking]:
        """All bookings, latest start first."""
        return await self.store.query_bookings(
            BookingFilter(
                status=status,
                club_id=club_id,
                venue_ids=[venue_id] if venue_id else None,
                order="desc",
                limit=limit,
                offset=offset,
            )
        )

    async def list_mine(self, caller: Profile, limit: int = 100, offset: int = 0) -> list[Booking]:
        """Bookings of the caller's club, or the ones they created without a club."""
        if caller.club_id is not None:
            criteria = BookingFilter(club_id=caller.club_id, order="desc", limit=limit, offset=offset)
        else:
            criteria = BookingFilter(created_by=caller.id, order="desc", limit=limit, offset=offset)
        return await self.store.query_bookings(criteria)

    async def list_public(self, limit: int = 100) -> list[Booking]:
        """Approved bookings that have not ended yet."""
        return await self.store.query_bookings(
            BookingFilter(status="approved", end_from=self.clock(), order="asc", limit=limit)
        )

    async def get_stats(self) -> dict[str, int]:
        return {
            "pending": await self.store.count_bookings(BookingFilter(status="pending")),
            "approved": await self.store.count_bookings(BookingFilter(status="approved")),
            "rejected": await self.store.count_bookings(BookingFilter(status="rejected")),
            "active_clubs": await self.store.count_clubs(),
        }

    # ==================== ADMINISTRATION ====================

    async def _get_booking(self, booking_id: UUID) -> Booking:
        booking = await self.store.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def update_status(
        self,
        booking_id: UUID,
        status: str,
        caller: Profile,
        note: str | None = None,
    ) -> Booking:
        """Approve or reject a pending booking."""
        booking = await self._get_booking(booking_id)
        previous = booking.status
        assert_booking_transition(previous, status)

        booking = await self.store.update_booking_status(booking.id, status)
        self.store.log_action(
            caller.id,
            STATUS_ACTIONS.get(status, "update_booking_status"),
            booking.id,
            old_values={"status": previous},
            new_values={"status": status, "note": note},
        )
        logger.info(f"Booking {booking.id} {previous} -> {status} by {caller.id}")
        return booking

    async def edit_booking(self, booking_id: UUID, changes: BookingUpdate, caller: Profile) -> Booking:
        """Apply an explicit admin edit; scheduling policy is not re-checked."""
        booking = await self._get_booking(booking_id)
        updates: dict[str, Any] = changes.model_dump(exclude_unset=True)

        if updates.get("venue_id") is not None:
            venue = (await self._resolve_venues([updates["venue_id"]]))[0]
            updates["venue"] = venue
        if "event_type" in updates and updates["event_type"] is not None:
            updates["event_type"] = EventType(updates["event_type"]).value
        if updates.get("start_time") is not None:
            updates["start_time"] = to_utc(updates["start_time"], self.tz)
        if updates.get("end_time") is not None:
            updates["end_time"] = to_utc(updates["end_time"], self.tz)

        start = updates.get("start_time") or booking.start_time
        end = updates.get("end_time") or booking.end_time
        if end <= start:
            raise ValidationError("end_time must be after start_time", errors=[{"field": "end_time"}])

        old_values = {
            field: getattr(booking, field)
            for field in updates
            if field != "venue"
        }
        for field, value in updates.items():
            if value is None and field not in ("expected_attendees",):
                continue
            setattr(booking, field, value)

        await self.store.save(booking)
        self.store.log_action(
            caller.id,
            "edit_booking",
            booking.id,
            old_values=jsonable_encoder(old_values),
            new_values=jsonable_encoder({k: v for k, v in updates.items() if k != "venue"}),
        )
        return booking

    async def delete_booking(self, booking_id: UUID, caller: Profile) -> None:
        """Delete a single booking row."""
        booking = await self._get_booking(booking_id)
        snapshot = jsonable_encoder(
            {
                "event_name": booking.event_name,
                "venue_id": booking.venue_id,
                "club_id": booking.club_id,
                "start_time": booking.start_time,
                "end_time": booking.end_time,
                "status": booking.status,
                "batch_id": booking.batch_id,
            }
        )
        await self.store.delete_booking(booking)
        self.store.log_action(caller.id, "delete_booking", booking_id, old_values=snapshot)
        logger.info(f"Booking {booking_id} deleted by {caller.id}")
