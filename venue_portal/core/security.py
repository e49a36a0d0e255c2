"""Verification of identity-provider access tokens."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from venue_portal.config import settings
from venue_portal.core.exceptions import AuthenticationError


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a bearer JWT."""
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {str(e)}")
    if not payload.get("sub"):
        raise AuthenticationError("Invalid token payload")
    return payload


def create_access_token(
    subject: str,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Create a signed access token (used by scripts and tests)."""
    to_encode: dict[str, Any] = dict(extra_claims or {})
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=60))
    to_encode.update({"sub": subject, "exp": expire})
    if settings.jwt_audience:
        to_encode["aud"] = settings.jwt_audience
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
