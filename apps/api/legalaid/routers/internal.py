"""
Internal endpoints for scheduled/cron operations.

Protected by X-Internal-Secret header.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from legalaid.core.deps import get_db, get_notification_sender, verify_internal_secret
from legalaid.schemas.appointment import ReminderRunResult
from legalaid.schemas.envelope import ApiResponse
from legalaid.services import appointment_notification_service
from legalaid.services.notification_sender import NotificationSender

router = APIRouter(
    prefix="/internal",
    tags=["internal"],
    dependencies=[Depends(verify_internal_secret)],
)


@router.post("/reminders", response_model=ApiResponse[ReminderRunResult])
def send_reminders(
    db: Session = Depends(get_db),
    sender: NotificationSender = Depends(get_notification_sender),
):
    """Hourly sweep sending appointment reminders that are due."""
    run = appointment_notification_service.send_due_reminders(db, sender)
    return ApiResponse(data=ReminderRunResult(**run._asdict()))
