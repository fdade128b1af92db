"""Notifications router - in-app notification inbox."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legalaid.core.deps import get_current_session, get_db
from legalaid.schemas.auth import UserSession
from legalaid.schemas.envelope import ApiResponse
from legalaid.schemas.message import MarkReadRequest, MarkReadResult
from legalaid.schemas.notification import NotificationRead
from legalaid.services import notification_service

router = APIRouter()


@router.get("", response_model=ApiResponse[list[NotificationRead]])
def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    notifications = notification_service.list_notifications(
        db, session.user_id, unread_only=unread_only, limit=limit
    )
    return ApiResponse(data=[NotificationRead.model_validate(n) for n in notifications])


@router.post("/read", response_model=ApiResponse[MarkReadResult])
def mark_notifications_read(
    data: MarkReadRequest,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    updated = notification_service.mark_read(db, session.user_id, data.ids)
    return ApiResponse(data=MarkReadResult(updated=updated))
