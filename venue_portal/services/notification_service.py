"""Approval notifications: admin inbox entries and approver e-mail.

Channels:
- In-app notifications (database, shown in the admin panel)
- Email (SendGrid)
"""

import logging
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager
from datetime import UTC, datetime, tzinfo
from html import escape
from typing import Any

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from venue_portal.config import settings
from venue_portal.core.exceptions import NotifierError
from venue_portal.database import get_db_context
from venue_portal.models.notification import Notification
from venue_portal.schemas.notification import PendingBookingItem

logger = logging.getLogger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


class NotificationService:
    """Tells approvers about bookings waiting for them."""

    # Notification types
    BOOKING_PENDING = "booking_pending"
    BOOKING_APPROVED = "booking_approved"
    BOOKING_REJECTED = "booking_rejected"
    BOOKING_DELETED = "booking_deleted"
    GENERAL = "general"

    def __init__(
        self,
        session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]] = get_db_context,
        http_client: httpx.AsyncClient | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        """Initialize notification service."""
        self._session_factory = session_factory
        self._http_client = http_client
        self._tz = tz

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=30.0)
        return self._http_client

    @property
    def tz(self) -> tzinfo:
        return self._tz or settings.tzinfo

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()

    def _format_time(self, value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(self.tz).strftime("%d %b %Y %I:%M %p")

    def _describe(self, item: PendingBookingItem) -> str:
        return (
            f'"{item.event_name}" at {item.venue_name} by {item.club_name or "Unknown"}: '
            f"{self._format_time(item.start_time)} to {self._format_time(item.end_time)}"
        )

    # ==================== IN-APP NOTIFICATIONS ====================

    async def create_notifications(
        self,
        db: AsyncSession,
        items: Sequence[PendingBookingItem],
    ) -> list[Notification]:
        """Create one inbox entry per pending booking.

        Args:
            db: Database session
            items: Bookings awaiting approval

        Returns:
            list[Notification]: Created notifications
        """
        notifications = [
            Notification(
                notification_type=self.BOOKING_PENDING,
                title="New Booking Request",
                message=self._describe(item),
                details={
                    "venue": item.venue_name,
                    "event": item.event_name,
                    "club": item.club_name,
                },
                is_read=False,
            )
            for item in items
        ]
        db.add_all(notifications)
        await db.flush()
        return notifications

    # ==================== EMAIL (SENDGRID) ====================

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
    ) -> bool:
        """Send an email via SendGrid.

        Args:
            to_email: Recipient email
            subject: Email subject
            html_content: HTML body
            text_content: Plain text body

        Returns:
            bool: True if sent successfully
        """
        if not settings.sendgrid_api_key:
            return False

        headers = {
            "Authorization": f"Bearer {settings.sendgrid_api_key}",
            "Content-Type": "application/json",
        }
        content = [{"type": "text/html", "value": html_content}]
        if text_content:
            content.insert(0, {"type": "text/plain", "value": text_content})

        payload: dict[str, Any] = {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {
                "email": settings.email_from_address,
                "name": settings.email_from_name,
            },
            "subject": subject,
            "content": content,
        }

        try:
            response = await self.http_client.post(SENDGRID_URL, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"SendGrid request failed: {e}")
            return False

        if response.status_code not in (200, 202):
            logger.error(f"SendGrid rejected email ({response.status_code}): {response.text}")
            return False
        return True

    def _approval_email(self, items: Sequence[PendingBookingItem]) -> tuple[str, str, str]:
        subject = f"[Venue Portal] {len(items)} venue booking(s) need approval"
        lines = "\n".join(f"- {self._describe(item)}" for item in items)
        text_body = (
            "The following venue booking(s) require your approval:\n\n"
            f"{lines}\n\nPlease review them in the admin dashboard."
        )
        rows = "".join(
            f"<li><strong>{escape(item.venue_name)}</strong>: {escape(self._describe(item))}</li>"
            for item in items
        )
        html_body = (
            "<p>The following venue booking(s) require your approval:</p>"
            f"<ul>{rows}</ul>"
            "<p>Please review them in the admin dashboard.</p>"
        )
        return subject, html_body, text_body

    # ==================== APPROVAL FAN-OUT ====================

    async def notify_pending(self, items: Sequence[PendingBookingItem]) -> None:
        """Post inbox entries and e-mail the approver about pending bookings.

        Raises:
            NotifierError: If a configured channel fails
        """
        if not items:
            return

        try:
            async with self._session_factory() as db:
                await self.create_notifications(db, items)
        except SQLAlchemyError as e:
            raise NotifierError("inbox", str(e))

        if not settings.approval_notify_email or not settings.sendgrid_api_key:
            logger.warning("Approval e-mail not configured; skipping approval notification email")
            return

        subject, html_body, text_body = self._approval_email(items)
        sent = await self.send_email(
            to_email=settings.approval_notify_email,
            subject=subject,
            html_content=html_body,
            text_content=text_body,
        )
        if not sent:
            raise NotifierError("email", f"could not notify {settings.approval_notify_email}")
        logger.info(f"Approval e-mail sent for {len(items)} pending booking(s)")


# Singleton instance
notification_service = NotificationService()
