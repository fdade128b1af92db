"""Messages router - send and poll direct messages."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legalaid.core.config import settings
from legalaid.core.deps import get_current_session, get_db
from legalaid.schemas.auth import UserSession
from legalaid.schemas.envelope import ApiResponse
from legalaid.schemas.message import (
    MarkReadRequest,
    MarkReadResult,
    MessageCreate,
    MessagePollResponse,
    MessageRead,
)
from legalaid.services import message_service

router = APIRouter()


@router.get("", response_model=ApiResponse[MessagePollResponse])
def poll_messages(
    since: datetime | None = Query(None),
    since_id: UUID | None = Query(None),
    with_user: UUID | None = Query(None),
    limit: int | None = Query(None, ge=1, le=200),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Poll for messages newer than `since`.

    Clients call this every poll_interval_seconds, passing the previous
    server_time as `since` and since_id as `since_id`.
    """
    result = message_service.poll_messages(
        db,
        user_id=session.user_id,
        counterpart_id=with_user,
        since=since,
        since_id=since_id,
        limit=limit,
    )
    return ApiResponse(data=MessagePollResponse(
        items=[MessageRead.model_validate(m) for m in result.messages],
        server_time=result.server_time,
        since_id=result.since_id,
        poll_interval_seconds=settings.MESSAGE_POLL_INTERVAL_SECONDS,
    ))


@router.post("", response_model=ApiResponse[MessageRead], status_code=201)
def send_message(
    data: MessageCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    message = message_service.send_message(
        db, sender_id=session.user_id, recipient_id=data.recipient_id, body=data.body
    )
    return ApiResponse(data=MessageRead.model_validate(message), message="Message sent")


@router.post("/read", response_model=ApiResponse[MarkReadResult])
def mark_messages_read(
    data: MarkReadRequest,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    updated = message_service.mark_read(db, session.user_id, data.ids)
    return ApiResponse(data=MarkReadResult(updated=updated))
