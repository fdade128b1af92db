"""In-app notifications: creation, listing and read tracking."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from legalaid.db.enums import NotificationPriority, NotificationType
from legalaid.db.models import Notification


def create_notification(
    db: Session,
    user_id: UUID,
    type: NotificationType,
    title: str,
    body: str | None = None,
    priority: NotificationPriority = NotificationPriority.NORMAL,
    entity_type: str | None = None,
    entity_id: UUID | None = None,
) -> Notification:
    """Add an in-app notification. Caller commits."""
    notification = Notification(
        user_id=user_id,
        type=type.value,
        priority=priority.value,
        title=title,
        body=body,
        entity_type=entity_type,
        entity_id=entity_id,
    )
    db.add(notification)
    return notification


def priority_for(level: str) -> NotificationPriority:
    """Map an appointment/case priority to a notification priority."""
    if level == "URGENT":
        return NotificationPriority.URGENT
    if level == "HIGH":
        return NotificationPriority.HIGH
    return NotificationPriority.NORMAL


def list_notifications(
    db: Session,
    user_id: UUID,
    unread_only: bool = False,
    limit: int = 50,
) -> list[Notification]:
    """List a user's notifications, newest first."""
    query = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        query = query.where(Notification.read_at.is_(None))
    query = query.order_by(Notification.created_at.desc()).limit(limit)
    return list(db.execute(query).scalars().all())


def mark_read(db: Session, user_id: UUID, notification_ids: list[UUID]) -> int:
    """Mark the user's notifications read. Returns how many changed."""
    result = db.execute(
        update(Notification)
        .where(
            Notification.user_id == user_id,
            Notification.id.in_(notification_ids),
            Notification.read_at.is_(None),
        )
        .values(read_at=datetime.now(timezone.utc))
    )
    db.commit()
    return result.rowcount or 0
