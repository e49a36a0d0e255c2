"""Core utilities: exceptions, security and middleware."""

from venue_portal.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InvalidBookingStatus,
    NotFoundError,
    NotifierError,
    PolicyViolation,
    QuotaExceeded,
    RateLimitExceeded,
    StoreError,
    ValidationError,
    VenueConfigurationError,
)
from venue_portal.core.security import create_access_token, verify_token

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "InvalidBookingStatus",
    "NotFoundError",
    "NotifierError",
    "PolicyViolation",
    "QuotaExceeded",
    "RateLimitExceeded",
    "StoreError",
    "ValidationError",
    "VenueConfigurationError",
    "create_access_token",
    "verify_token",
]
