"""Booking state machine."""

from venue_portal.core.exceptions import InvalidBookingStatus

BOOKING_TRANSITIONS = {
    "pending": {"approved", "rejected"},
    "approved": set(),
    "rejected": set(),
}


def assert_booking_transition(current: str, target: str) -> None:
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidBookingStatus(
            f"Invalid booking transition: {current} → {target}"
        )
