"""Database models."""

from venue_portal.models.admin import AuditLog
from venue_portal.models.booking import Booking
from venue_portal.models.notification import Notification
from venue_portal.models.user import Profile
from venue_portal.models.venue import Club, Venue

__all__ = [
    # Reference data
    "Venue",
    "Club",
    # Accounts
    "Profile",
    # Booking
    "Booking",
    # Admin
    "Notification",
    "AuditLog",
]
