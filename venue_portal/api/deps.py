"""API dependencies for authentication and common operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from venue_portal.config import settings
from venue_portal.core.exceptions import AuthenticationError, AuthorizationError
from venue_portal.core.security import verify_token
from venue_portal.database import get_db
from venue_portal.models.user import Profile
from venue_portal.services.booking_service import BookingService
from venue_portal.services.booking_store import BookingStore
from venue_portal.services.notification_service import notification_service

__all__ = [
    "get_booking_service",
    "get_booking_store",
    "get_current_admin",
    "get_current_user",
    "get_db",
]

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
    x_mock_user_email: Annotated[str | None, Header()] = None,
) -> Profile:
    """Get the current profile from the bearer token.

    Outside production an ``X-Mock-User-Email`` header logs in as the
    profile with that e-mail.
    """
    if credentials is None:
        if x_mock_user_email and settings.environment != "production":
            result = await db.execute(select(Profile).where(Profile.email == x_mock_user_email))
            profile = result.scalar_one_or_none()
            if not profile:
                raise AuthenticationError("Profile not found")
            return profile
        raise AuthenticationError("Not authenticated")

    payload = verify_token(credentials.credentials)
    try:
        profile_id = UUID(str(payload["sub"]))
    except ValueError:
        raise AuthenticationError("Invalid token subject")

    result = await db.execute(select(Profile).where(Profile.id == profile_id))
    profile = result.scalar_one_or_none()
    if not profile:
        raise AuthenticationError("Profile not found")
    return profile


async def get_current_admin(
    current_user: Annotated[Profile, Depends(get_current_user)],
) -> Profile:
    """Get current profile and verify it is an admin."""
    if not current_user.is_admin:
        raise AuthorizationError("Admin access required")
    return current_user


async def get_booking_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingStore:
    return BookingStore(db)


async def get_booking_service(
    store: Annotated[BookingStore, Depends(get_booking_store)],
) -> BookingService:
    return BookingService(store, notification_service, settings=settings)
