"""Direct messages delivered by client polling."""

import logging
from datetime import datetime, timezone
from typing import NamedTuple
from uuid import UUID

from sqlalchemy import and_, or_, select, update
from sqlalchemy.orm import Session

from legalaid.core.config import settings
from legalaid.db.enums import NotificationType
from legalaid.db.models import Message, User
from legalaid.services import notification_service
from legalaid.services.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MAX_BODY_LENGTH = 5000


class PollResult(NamedTuple):
    messages: list[Message]
    server_time: datetime
    since_id: UUID | None = None


def send_message(db: Session, sender_id: UUID, recipient_id: UUID, body: str) -> Message:
    """Store a message and raise an in-app notification for the recipient."""
    body = (body or "").strip()
    if not body:
        raise ValidationError("Message body is required")
    if len(body) > MAX_BODY_LENGTH:
        raise ValidationError(f"Message body must be at most {MAX_BODY_LENGTH} characters")

    recipient = db.get(User, recipient_id)
    if not recipient or not recipient.is_active:
        raise NotFoundError("Recipient not found")
    sender = db.get(User, sender_id)

    message = Message(sender_id=sender_id, recipient_id=recipient.id, body=body)
    db.add(message)
    db.flush()

    preview = body if len(body) <= 100 else f"{body[:97]}..."
    notification_service.create_notification(
        db,
        user_id=recipient.id,
        type=NotificationType.MESSAGE,
        title=f"New message from {sender.full_name if sender else 'a user'}",
        body=preview,
        entity_type="message",
        entity_id=message.id,
    )
    db.commit()
    db.refresh(message)
    return message


def poll_messages(
    db: Session,
    user_id: UUID,
    counterpart_id: UUID | None = None,
    since: datetime | None = None,
    since_id: UUID | None = None,
    limit: int | None = None,
) -> PollResult:
    """
    Messages to or from the user after the `(since, since_id)` cursor,
    oldest first.

    server_time is captured before querying. Passing server_time and
    since_id back never skips a message and never repeats one, including
    messages that share a timestamp across a page boundary.
    """
    server_time = datetime.now(timezone.utc)
    limit = min(limit or settings.MESSAGE_POLL_LIMIT, settings.MESSAGE_POLL_LIMIT)

    if counterpart_id:
        participants = or_(
            and_(Message.sender_id == user_id, Message.recipient_id == counterpart_id),
            and_(Message.sender_id == counterpart_id, Message.recipient_id == user_id),
        )
    else:
        participants = or_(Message.sender_id == user_id, Message.recipient_id == user_id)

    query = select(Message).where(participants, Message.created_at <= server_time)
    if since:
        if since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        if since_id:
            query = query.where(or_(
                Message.created_at > since,
                and_(Message.created_at == since, Message.id > since_id),
            ))
        else:
            query = query.where(Message.created_at > since)
    query = query.order_by(Message.created_at.asc(), Message.id.asc()).limit(limit)

    messages = list(db.execute(query).scalars().all())
    if len(messages) == limit:
        # Page is full; resume from the last delivered message
        return PollResult(messages, messages[-1].created_at, messages[-1].id)
    return PollResult(messages, server_time)


def mark_read(db: Session, user_id: UUID, message_ids: list[UUID]) -> int:
    """Mark messages addressed to the user as read. Returns how many changed."""
    result = db.execute(
        update(Message)
        .where(
            Message.recipient_id == user_id,
            Message.id.in_(message_ids),
            Message.read_at.is_(None),
        )
        .values(read_at=datetime.now(timezone.utc))
    )
    db.commit()
    return result.rowcount or 0
