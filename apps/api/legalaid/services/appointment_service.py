"""Appointment service - business logic for coordinator scheduling.

Handles:
- Booking with conflict detection over the coordinator's calendar
- Listing and loading with ownership checks
- Status changes through the fixed transition table
- Rescheduling and deletion of upcoming appointments

Every mutation commits first, then notifies the client. Notification
failures are recorded, never raised.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import NamedTuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from legalaid.core.config import settings
from legalaid.core.structured_logging import build_log_context
from legalaid.db.enums import (
    APPOINTMENT_TRANSITIONS,
    TERMINAL_APPOINTMENT_STATUSES,
    AppointmentStatus,
    NotificationEvent,
    NotificationType,
    Role,
)
from legalaid.db.models import Appointment, User
from legalaid.services import appointment_notification_service, notification_service
from legalaid.services.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    PastAppointmentError,
    ValidationError,
)
from legalaid.services.notification_sender import NotificationSender

logger = logging.getLogger(__name__)

RESCHEDULABLE_STATUSES = (
    AppointmentStatus.SCHEDULED.value,
    AppointmentStatus.CONFIRMED.value,
    AppointmentStatus.RESCHEDULED.value,
)


# =============================================================================
# Types
# =============================================================================

class AppointmentRequest(NamedTuple):
    """Booking parameters, already parsed at the API boundary."""
    client_id: UUID | None
    scheduled_time: datetime | None
    duration_minutes: int | None
    purpose: str | None
    case_type: str | None
    case_details: str | None = None
    venue: str | None = None
    priority: str = "MEDIUM"
    required_documents: list[str] | None = None
    notes: str | None = None
    reminder_channels: list[str] | None = None
    reminder_hours: list[int] | None = None


# =============================================================================
# Helpers
# =============================================================================

def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _validate_duration(duration_minutes: int | None, errors: list[str]) -> None:
    if duration_minutes is None:
        return
    minimum = settings.MIN_APPOINTMENT_MINUTES
    if duration_minutes < minimum:
        errors.append(f"Duration must be at least {minimum} minutes")


def _validate_request(request: AppointmentRequest) -> None:
    errors = []
    if request.client_id is None:
        errors.append("client_id is required")
    if request.scheduled_time is None:
        errors.append("scheduled_time is required")
    if request.duration_minutes is None:
        errors.append("duration_minutes is required")
    if not (request.purpose or "").strip():
        errors.append("purpose is required")
    if not (request.case_type or "").strip():
        errors.append("case_type is required")
    _validate_duration(request.duration_minutes, errors)
    if errors:
        raise ValidationError("Invalid appointment", errors)


def find_conflicts(
    db: Session,
    coordinator_id: UUID,
    start: datetime,
    duration_minutes: int,
    exclude_appointment_id: UUID | None = None,
) -> list[Appointment]:
    """
    Non-terminal appointments of the coordinator overlapping [start, end).

    Two intervals overlap when each starts before the other ends, so
    back-to-back bookings do not conflict. The coordinator's longest open
    booking bounds how far back a candidate can start.
    """
    start = as_utc(start)
    end = start + timedelta(minutes=duration_minutes)
    terminal = [status.value for status in TERMINAL_APPOINTMENT_STATUSES]

    criteria = [
        Appointment.coordinator_id == coordinator_id,
        Appointment.status.notin_(terminal),
    ]
    if exclude_appointment_id:
        criteria.append(Appointment.id != exclude_appointment_id)

    longest = db.query(func.max(Appointment.duration_minutes)).filter(*criteria).scalar()
    if not longest:
        return []

    query = db.query(Appointment).filter(
        *criteria,
        Appointment.scheduled_time < end,
        Appointment.scheduled_time > start - timedelta(minutes=longest),
    )
    return [appt for appt in query.all() if appt.end_time > start]


def _ensure_no_conflict(
    db: Session,
    coordinator_id: UUID,
    start: datetime,
    duration_minutes: int,
    exclude_appointment_id: UUID | None = None,
) -> None:
    conflicts = find_conflicts(
        db, coordinator_id, start, duration_minutes, exclude_appointment_id
    )
    if conflicts:
        raise ConflictError(
            "Time slot conflicts with an existing appointment",
            [
                f"Overlaps appointment {appt.id} at {appt.scheduled_time.isoformat()}"
                for appt in conflicts
            ],
        )


def _notify(
    db: Session,
    sender: NotificationSender,
    client: User,
    details: appointment_notification_service.AppointmentDetails,
    event: NotificationEvent,
) -> None:
    appointment_notification_service.notify_client(db, sender, client, details, event)


def _in_app(db: Session, appointment: Appointment, title: str, body: str) -> None:
    notification_service.create_notification(
        db,
        user_id=appointment.client_id,
        type=NotificationType.APPOINTMENT,
        title=title,
        body=body,
        priority=notification_service.priority_for(appointment.priority),
        entity_type="appointment",
        entity_id=appointment.id,
    )


# =============================================================================
# Queries
# =============================================================================

def get_appointment(
    db: Session,
    appointment_id: UUID,
    coordinator_id: UUID,
) -> Appointment:
    """Load an appointment owned by the coordinator."""
    appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    if not appointment:
        raise NotFoundError("Appointment not found")
    if appointment.coordinator_id != coordinator_id:
        raise AuthorizationError("Not authorized to access this appointment")
    return appointment


def list_appointments(
    db: Session,
    coordinator_id: UUID,
    status: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[Appointment]:
    """List the coordinator's appointments by start time, then status.

    Date bounds are inclusive UTC calendar days.
    """
    query = db.query(Appointment).filter(Appointment.coordinator_id == coordinator_id)

    if status:
        query = query.filter(Appointment.status == status)

    if date_from:
        start_dt = datetime.combine(date_from, time.min, tzinfo=timezone.utc)
        query = query.filter(Appointment.scheduled_time >= start_dt)

    if date_to:
        end_dt = datetime.combine(date_to + timedelta(days=1), time.min, tzinfo=timezone.utc)
        query = query.filter(Appointment.scheduled_time < end_dt)

    return query.order_by(Appointment.scheduled_time.asc(), Appointment.status.asc()).all()


# =============================================================================
# Mutations
# =============================================================================

def create_appointment(
    db: Session,
    sender: NotificationSender,
    coordinator_id: UUID,
    request: AppointmentRequest,
) -> Appointment:
    """Book an appointment for a client on the coordinator's calendar."""
    _validate_request(request)

    client = db.query(User).filter(
        User.id == request.client_id,
        User.role == Role.CLIENT.value,
    ).first()
    if not client:
        raise NotFoundError("Client not found")

    start = as_utc(request.scheduled_time)
    _ensure_no_conflict(db, coordinator_id, start, request.duration_minutes)

    appointment = Appointment(
        coordinator_id=coordinator_id,
        client_id=client.id,
        scheduled_time=start,
        duration_minutes=request.duration_minutes,
        purpose=request.purpose.strip(),
        case_type=request.case_type.strip(),
        case_details=request.case_details,
        venue=request.venue,
        priority=request.priority,
        required_documents=list(request.required_documents or []),
        notes=request.notes,
        status=AppointmentStatus.SCHEDULED.value,
    )
    if request.reminder_channels is not None:
        appointment.reminder_channels = list(request.reminder_channels)
    if request.reminder_hours is not None:
        appointment.reminder_hours = list(request.reminder_hours)
    db.add(appointment)
    db.flush()

    details = appointment_notification_service.snapshot(appointment)
    _in_app(
        db,
        appointment,
        "Appointment scheduled",
        appointment_notification_service.format_details(details),
    )
    db.commit()
    db.refresh(appointment)

    logger.info(
        "Appointment created",
        extra=build_log_context(
            appointment_id=str(appointment.id), user_id=str(coordinator_id)
        ),
    )
    _notify(db, sender, client, details, NotificationEvent.CREATED)
    return appointment


def update_status(
    db: Session,
    sender: NotificationSender,
    appointment_id: UUID,
    coordinator_id: UUID,
    new_status: AppointmentStatus,
    cancellation_reason: str | None = None,
    completion_notes: str | None = None,
) -> Appointment:
    """Move an appointment along the status graph."""
    appointment = get_appointment(db, appointment_id, coordinator_id)
    new_status = AppointmentStatus(new_status)
    current = AppointmentStatus(appointment.status)

    if new_status not in APPOINTMENT_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(
            f"Cannot change status from {current.value} to {new_status.value}"
        )

    now = datetime.now(timezone.utc)
    appointment.status = new_status.value
    if new_status == AppointmentStatus.CANCELLED:
        appointment.cancellation_reason = cancellation_reason
        appointment.cancelled_at = now
    elif new_status == AppointmentStatus.COMPLETED:
        appointment.completion_notes = completion_notes
        appointment.completed_at = now

    details = appointment_notification_service.snapshot(appointment)
    _in_app(
        db,
        appointment,
        f"Appointment {new_status.value.replace('_', ' ').lower()}",
        appointment_notification_service.build_message(
            NotificationEvent.STATUS_CHANGED, details
        )[1],
    )
    db.commit()
    db.refresh(appointment)

    logger.info(
        "Appointment status changed %s -> %s",
        current.value,
        new_status.value,
        extra=build_log_context(appointment_id=str(appointment.id)),
    )
    _notify(db, sender, appointment.client, details, NotificationEvent.STATUS_CHANGED)
    return appointment


def reschedule_appointment(
    db: Session,
    sender: NotificationSender,
    appointment_id: UUID,
    coordinator_id: UUID,
    new_start: datetime,
    duration_minutes: int | None = None,
) -> Appointment:
    """Move an upcoming appointment to a new slot. Status is unchanged."""
    appointment = get_appointment(db, appointment_id, coordinator_id)
    if appointment.status not in RESCHEDULABLE_STATUSES:
        raise ValidationError(f"Cannot reschedule appointment with status {appointment.status}")

    errors = []
    _validate_duration(duration_minutes, errors)
    if errors:
        raise ValidationError("Invalid appointment", errors)

    new_start = as_utc(new_start)
    new_duration = duration_minutes or appointment.duration_minutes
    _ensure_no_conflict(
        db, coordinator_id, new_start, new_duration,
        exclude_appointment_id=appointment.id,
    )

    appointment.scheduled_time = new_start
    appointment.duration_minutes = new_duration

    details = appointment_notification_service.snapshot(appointment)
    _in_app(
        db,
        appointment,
        "Appointment rescheduled",
        appointment_notification_service.format_details(details),
    )
    db.commit()
    db.refresh(appointment)

    _notify(db, sender, appointment.client, details, NotificationEvent.RESCHEDULED)
    return appointment


def delete_appointment(
    db: Session,
    sender: NotificationSender,
    appointment_id: UUID,
    coordinator_id: UUID,
    now: datetime | None = None,
) -> None:
    """Delete an appointment that has not started yet."""
    appointment = get_appointment(db, appointment_id, coordinator_id)
    now = now or datetime.now(timezone.utc)
    if appointment.scheduled_time <= now:
        raise PastAppointmentError("Cannot delete past appointments")

    client = appointment.client
    details = appointment_notification_service.snapshot(appointment)
    _, body = appointment_notification_service.build_message(NotificationEvent.DELETED, details)
    notification_service.create_notification(
        db,
        user_id=appointment.client_id,
        type=NotificationType.APPOINTMENT,
        title="Appointment cancelled",
        body=body,
        priority=notification_service.priority_for(appointment.priority),
        entity_type="appointment",
        entity_id=appointment.id,
    )
    db.delete(appointment)
    db.commit()

    logger.info("Appointment deleted", extra=build_log_context(appointment_id=str(appointment_id)))
    _notify(db, sender, client, details, NotificationEvent.DELETED)
