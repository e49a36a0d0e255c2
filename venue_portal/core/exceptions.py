"""Custom application exceptions."""

from collections.abc import Sequence
from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class PolicyViolation(AppException):
    """A scheduling policy rule rejected the booking."""

    def __init__(self, detail: str = "Booking violates scheduling policy", venue: str | None = None) -> None:
        self.venue = venue
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(AppException):
    """Booking conflicts with the current state of the schedule."""

    def __init__(
        self,
        detail: str = "The selected time slot is not available",
        venue_names: Sequence[str] | None = None,
    ) -> None:
        self.venue_names = list(venue_names or [])
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class QuotaExceeded(ConflictError):
    """Club has used up its per-semester quota."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(
            detail=(
                f"Co-curricular event limit of {limit} per semester "
                "has been reached for this club."
            )
        )


class StoreError(AppException):
    """Persistence failed after validation passed."""

    def __init__(self, detail: str = "Failed to save booking") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class VenueConfigurationError(StoreError):
    """Venue has an approval category the portal does not know."""

    def __init__(self, venue_name: str, category: str) -> None:
        super().__init__(detail=f"Invalid venue category '{category}' for {venue_name}")


class InvalidBookingStatus(AppException):
    """Invalid booking status for operation."""

    def __init__(self, detail: str = "This operation is not allowed for the current booking status") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class RateLimitExceeded(AppException):
    """Rate limit exceeded exception."""

    def __init__(self, detail: str = "Too many requests. Please try again later.") -> None:
        super().__init__(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=detail)


class NotifierError(AppException):
    """Approval notification could not be delivered."""

    def __init__(self, channel: str, detail: str | None = None) -> None:
        message = f"Notification channel '{channel}' failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=message)
