"""Appointment notifications - client messages for appointment events.

Provides:
- Human-readable appointment details for SMS and email bodies
- Dispatch to the client over SMS (phone present) and email (address present)
- A delivery log row for every attempt
- The reminder sweep run by cron

Dispatch always happens after the appointment write has committed. A failed
send is logged and recorded as FAILED; it never undoes the write.
"""

import html
import logging
from datetime import datetime, timedelta, timezone
from typing import NamedTuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from legalaid.core.config import settings
from legalaid.db.enums import (
    AppointmentStatus,
    DeliveryStatus,
    NotificationChannel,
    NotificationEvent,
)
from legalaid.db.models import Appointment, AppointmentNotificationLog, User
from legalaid.services.notification_sender import NotificationSender

logger = logging.getLogger(__name__)


class AppointmentDetails(NamedTuple):
    """Snapshot of the fields a notification needs; survives row deletion."""
    appointment_id: UUID
    scheduled_time: datetime
    duration_minutes: int
    purpose: str
    venue: str | None
    status: str
    required_documents: list[str]
    cancellation_reason: str | None


def snapshot(appointment: Appointment) -> AppointmentDetails:
    return AppointmentDetails(
        appointment_id=appointment.id,
        scheduled_time=appointment.scheduled_time,
        duration_minutes=appointment.duration_minutes,
        purpose=appointment.purpose,
        venue=appointment.venue,
        status=appointment.status,
        required_documents=list(appointment.required_documents or []),
        cancellation_reason=appointment.cancellation_reason,
    )


# =============================================================================
# Message bodies
# =============================================================================

def format_when(value: datetime) -> str:
    value = value.astimezone(timezone.utc)
    return value.strftime("%A, %d %B %Y at %H:%M UTC")


def format_details(details: AppointmentDetails) -> str:
    """Plain-text appointment details used in SMS and email bodies."""
    lines = [
        f"Date: {format_when(details.scheduled_time)}",
        f"Duration: {details.duration_minutes} minutes",
        f"Purpose: {details.purpose}",
        f"Venue: {details.venue or 'the office'}",
    ]
    if details.required_documents:
        lines.append(f"Bring: {', '.join(details.required_documents)}")
    return "\n".join(lines)


def build_message(
    event: NotificationEvent,
    details: AppointmentDetails,
    hours_before: int | None = None,
) -> tuple[str, str]:
    """Return (subject, plain-text body) for an event."""
    if event == NotificationEvent.CREATED:
        return (
            "Appointment Scheduled",
            f"Your appointment has been scheduled.\n{format_details(details)}",
        )
    if event == NotificationEvent.STATUS_CHANGED:
        status = details.status.replace("_", " ").lower()
        body = f"Your appointment on {format_when(details.scheduled_time)} is now {status}."
        if details.status == AppointmentStatus.CANCELLED.value and details.cancellation_reason:
            body += f"\nReason: {details.cancellation_reason}"
        return ("Appointment Status Updated", body)
    if event == NotificationEvent.RESCHEDULED:
        return (
            "Appointment Rescheduled",
            f"Your appointment has been moved.\n{format_details(details)}",
        )
    if event == NotificationEvent.DELETED:
        return (
            "Appointment Cancelled",
            f"Your appointment scheduled for {format_when(details.scheduled_time)} "
            "has been cancelled.",
        )
    if event == NotificationEvent.REMINDER:
        unit = "hour" if hours_before == 1 else "hours"
        return (
            "Appointment Reminder",
            f"Reminder: you have an appointment in {hours_before} {unit}.\n"
            f"{format_details(details)}",
        )
    raise ValueError(f"Unsupported notification event: {event}")


def to_html(body: str) -> str:
    paragraphs = "".join(f"<p>{html.escape(line)}</p>" for line in body.splitlines())
    return f"<html><body>{paragraphs}</body></html>"


# =============================================================================
# Dispatch
# =============================================================================

def _record(
    db: Session,
    details: AppointmentDetails,
    event: NotificationEvent,
    channel: NotificationChannel,
    recipient: str,
    error: str | None,
    hours_before: int | None,
) -> AppointmentNotificationLog:
    log = AppointmentNotificationLog(
        appointment_id=details.appointment_id,
        event=event.value,
        channel=channel.value,
        recipient=recipient,
        status=DeliveryStatus.FAILED.value if error else DeliveryStatus.SENT.value,
        error=error,
        reminder_hours=hours_before,
    )
    db.add(log)
    return log


def _send(
    db: Session,
    sender: NotificationSender,
    details: AppointmentDetails,
    event: NotificationEvent,
    channel: NotificationChannel,
    recipient: str,
    subject: str,
    body: str,
    hours_before: int | None,
) -> AppointmentNotificationLog:
    error = None
    try:
        if channel == NotificationChannel.SMS:
            sender.send_sms(recipient, body)
        else:
            sender.send_email(recipient, subject, to_html(body))
    except Exception as exc:
        # Provider failures must not undo the committed appointment write
        logger.exception(
            "Appointment notification failed",
            extra={
                "appointment_id": str(details.appointment_id),
                "event": event.value,
                "channel": channel.value,
            },
        )
        error = str(exc) or exc.__class__.__name__
    return _record(db, details, event, channel, recipient, error, hours_before)


def notify_client(
    db: Session,
    sender: NotificationSender,
    client: User,
    details: AppointmentDetails,
    event: NotificationEvent,
    channels: list[str] | None = None,
    hours_before: int | None = None,
) -> list[AppointmentNotificationLog]:
    """
    Send an appointment event to the client on every available channel.

    SMS goes out when the client has a phone, email when they have an address.
    `channels` narrows this further (reminder preferences).
    """
    subject, body = build_message(event, details, hours_before)
    allowed = set(channels) if channels is not None else None

    logs = []
    if client.phone and (allowed is None or NotificationChannel.SMS.value in allowed):
        logs.append(_send(
            db, sender, details, event, NotificationChannel.SMS,
            client.phone, subject, body, hours_before,
        ))
    if client.email and (allowed is None or NotificationChannel.EMAIL.value in allowed):
        logs.append(_send(
            db, sender, details, event, NotificationChannel.EMAIL,
            client.email, subject, body, hours_before,
        ))
    db.commit()
    return logs


# =============================================================================
# Reminders
# =============================================================================

REMINDABLE_STATUSES = (
    AppointmentStatus.SCHEDULED.value,
    AppointmentStatus.CONFIRMED.value,
    AppointmentStatus.RESCHEDULED.value,
)


class ReminderRun(NamedTuple):
    appointments_checked: int
    reminders_sent: int
    reminders_failed: int


def _already_reminded(db: Session, appointment_id: UUID, hours_before: int) -> bool:
    return db.execute(
        select(AppointmentNotificationLog.id).where(
            AppointmentNotificationLog.appointment_id == appointment_id,
            AppointmentNotificationLog.event == NotificationEvent.REMINDER.value,
            AppointmentNotificationLog.reminder_hours == hours_before,
        ).limit(1)
    ).first() is not None


def send_due_reminders(
    db: Session,
    sender: NotificationSender,
    now: datetime | None = None,
) -> ReminderRun:
    """
    Send reminders for appointments starting within the reminder window.

    A reminder fires when the rounded hours until start equals one of the
    appointment's reminder_hours and has not been sent for that hour before.
    """
    now = now or datetime.now(timezone.utc)
    window_end = now + timedelta(hours=settings.REMINDER_WINDOW_HOURS)

    appointments = db.execute(
        select(Appointment)
        .options(selectinload(Appointment.client))
        .where(
            Appointment.status.in_(REMINDABLE_STATUSES),
            Appointment.scheduled_time >= now,
            Appointment.scheduled_time <= window_end,
        )
        .order_by(Appointment.scheduled_time)
    ).scalars().all()

    sent = failed = 0
    for appointment in appointments:
        hours_until = round((appointment.scheduled_time - now).total_seconds() / 3600)
        if hours_until not in (appointment.reminder_hours or []):
            continue
        if _already_reminded(db, appointment.id, hours_until):
            continue
        logs = notify_client(
            db,
            sender,
            appointment.client,
            snapshot(appointment),
            NotificationEvent.REMINDER,
            channels=appointment.reminder_channels,
            hours_before=hours_until,
        )
        for log in logs:
            if log.status == DeliveryStatus.SENT.value:
                sent += 1
            else:
                failed += 1

    logger.info(
        "Reminder sweep finished checked=%d sent=%d failed=%d",
        len(appointments), sent, failed,
    )
    return ReminderRun(len(appointments), sent, failed)
