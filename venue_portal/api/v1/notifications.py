"""Admin notification inbox endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from venue_portal.api.deps import get_current_admin, get_db
from venue_portal.core.exceptions import NotFoundError
from venue_portal.models.notification import Notification
from venue_portal.models.user import Profile
from venue_portal.schemas.notification import NotificationResponse, UnreadCountResponse

router = APIRouter()


@router.get("", response_model=list[NotificationResponse])
async def get_notifications(
    admin: Annotated[Profile, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    unread_only: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=200),
) -> list[Notification]:
    """Get the latest inbox entries."""
    query = select(Notification)
    if unread_only:
        query = query.where(Notification.is_read == False)  # noqa: E712

    query = query.order_by(Notification.created_at.desc()).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    admin: Annotated[Profile, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UnreadCountResponse:
    """Count unread inbox entries."""
    result = await db.execute(
        select(func.count(Notification.id)).where(Notification.is_read == False)  # noqa: E712
    )
    return UnreadCountResponse(count=result.scalar() or 0)


@router.patch("/read-all", status_code=204)
async def mark_all_read(
    admin: Annotated[Profile, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Mark all notifications as read."""
    await db.execute(
        update(Notification)
        .where(Notification.is_read == False)  # noqa: E712
        .values(is_read=True)
    )


@router.patch("/{notification_id}/read", status_code=204)
async def mark_notification_read(
    notification_id: UUID,
    admin: Annotated[Profile, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Mark a notification as read."""
    result = await db.execute(select(Notification).where(Notification.id == notification_id))
    notification = result.scalar_one_or_none()
    if not notification:
        raise NotFoundError("Notification", str(notification_id))

    notification.is_read = True
