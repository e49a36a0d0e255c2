"""Booking policy domain logic.

Rules evaluated against a booking candidate:
- advance notice: minimum whole days between now and the event start,
  per event type (co-curricular 30, open-for-all 20, closed club 1)
- operating hours: weekdays from 4:00 PM, weekends from 8:00 AM, until midnight
- capacity: expected attendees must fit every requested venue
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple
from uuid import UUID

from venue_portal.core.exceptions import VenueConfigurationError

if TYPE_CHECKING:
    from venue_portal.models.venue import Venue


class EventType(str, Enum):
    """Event types a club can book for."""

    CO_CURRICULAR = "co_curricular"
    OPEN_ALL = "open_all"
    CLOSED_CLUB = "closed_club"


class VenueCategory(str, Enum):
    """Venue approval categories."""

    AUTO_APPROVAL = "auto_approval"
    NEEDS_APPROVAL = "needs_approval"


# Only this event type is limited per club per semester
QUOTA_EVENT_TYPE = EventType.CO_CURRICULAR

DEFAULT_MIN_DAYS: dict[EventType, int] = {
    EventType.CO_CURRICULAR: 30,
    EventType.OPEN_ALL: 20,
    EventType.CLOSED_CLUB: 1,
}

EVENT_TYPE_LABELS: dict[EventType, str] = {
    EventType.CO_CURRICULAR: "Co-curricular",
    EventType.OPEN_ALL: "Open-for-All",
    EventType.CLOSED_CLUB: "Closed club",
}

WEEKDAY_OPENING = time(16, 0)
WEEKEND_OPENING = time(8, 0)


class RuleResult(NamedTuple):
    """Outcome of a single policy rule."""

    passed: bool
    reason: str = ""


PASSED = RuleResult(True)


def to_local(value: datetime, tz: tzinfo) -> datetime:
    """Express ``value`` in ``tz``; naive datetimes are taken as local time."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def to_utc(value: datetime, tz: tzinfo = UTC) -> datetime:
    """Normalize to UTC; naive datetimes are interpreted in ``tz``."""
    return to_local(value, tz).astimezone(UTC)


def _format_clock(value: time) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def days_until(start: datetime, now: datetime) -> int:
    """Whole days from ``now`` until ``start``, rounded up."""
    return math.ceil((start - now) / timedelta(days=1))


def check_advance_notice(
    event_type: str | EventType,
    start: datetime,
    now: datetime,
    min_days: Mapping[str, int] | None = None,
) -> RuleResult:
    """Check the booking is made far enough ahead of the event.

    Args:
        event_type: Event type of the candidate
        start: Event start (aware)
        now: Current time (aware)
        min_days: Thresholds keyed by event type value; defaults to the
            portal's standard thresholds

    Returns:
        RuleResult: Failure names the event type and its threshold
    """
    event_type = EventType(event_type)
    thresholds = {k.value: v for k, v in DEFAULT_MIN_DAYS.items()}
    if min_days:
        thresholds.update({EventType(k).value: v for k, v in min_days.items()})
    required = thresholds[event_type.value]

    if days_until(start, now) < required:
        unit = "day" if required == 1 else "days"
        return RuleResult(
            False,
            f"{EVENT_TYPE_LABELS[event_type]} events must be booked at least "
            f"{required} {unit} in advance.",
        )
    return PASSED


def check_operating_hours(
    start: datetime,
    end: datetime,
    tz: tzinfo = UTC,
    weekday_opening: time = WEEKDAY_OPENING,
    weekend_opening: time = WEEKEND_OPENING,
) -> RuleResult:
    """Check the booking falls inside venue operating hours.

    The day of week comes from the local start date. Times of day are compared
    on the wall clock, so bookings are assumed to start and end on the same day.
    """
    local_start = to_local(start, tz)
    local_end = to_local(end, tz)

    if end <= start or local_end.time() <= local_start.time():
        return RuleResult(False, "End time must be after start time.")

    if local_start.weekday() >= 5:
        if local_start.time() < weekend_opening:
            return RuleResult(
                False,
                f"On weekends, bookings are allowed from {_format_clock(weekend_opening)} "
                "to 12:00 AM.",
            )
    elif local_start.time() < weekday_opening:
        return RuleResult(
            False,
            f"On weekdays, bookings are only allowed from {_format_clock(weekday_opening)} "
            "to 12:00 AM.",
        )

    return PASSED


def check_capacity(venues: Iterable[Venue], expected_attendees: int | None) -> RuleResult:
    """Check the expected audience fits every venue that declares a capacity."""
    if expected_attendees is None:
        return PASSED

    for venue in venues:
        if venue.capacity is not None and expected_attendees > venue.capacity:
            return RuleResult(
                False,
                f"Expected attendees exceed the capacity of {venue.name} ({venue.capacity}).",
            )
    return PASSED


def intervals_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Half-open interval overlap; touching endpoints do not overlap."""
    return start_a < end_b and end_a > start_b


def count_distinct_events(batch_ids: Iterable[UUID | str | None]) -> int:
    """Count events, treating rows that share a batch id as one event."""
    batches: set[UUID | str] = set()
    unbatched = 0
    for batch_id in batch_ids:
        if batch_id:
            batches.add(batch_id)
        else:
            unbatched += 1
    return len(batches) + unbatched


def initial_status(category: str, venue_name: str = "venue") -> str:
    """Status a new booking gets from its venue's approval category."""
    try:
        category = VenueCategory(category)
    except ValueError:
        raise VenueConfigurationError(venue_name, str(category))

    if category is VenueCategory.AUTO_APPROVAL:
        return "approved"
    return "pending"
