"""Appointments router - coordinator calendar endpoints.

All routes act on the calling coordinator's own appointments:
- GET list with status/date filters, GET one
- POST create, PATCH status, PUT reschedule, DELETE upcoming
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legalaid.core.deps import get_db, get_notification_sender, require_roles
from legalaid.db.enums import AppointmentStatus, Role
from legalaid.schemas.appointment import (
    AppointmentCreate,
    AppointmentRead,
    AppointmentReschedule,
    AppointmentStatusUpdate,
)
from legalaid.schemas.auth import UserSession
from legalaid.schemas.envelope import ApiResponse
from legalaid.services import appointment_service
from legalaid.services.notification_sender import NotificationSender

router = APIRouter()

coordinator_only = require_roles([Role.COORDINATOR])


@router.get("", response_model=ApiResponse[list[AppointmentRead]])
def list_appointments(
    status: AppointmentStatus | None = Query(None),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    session: UserSession = Depends(coordinator_only),
    db: Session = Depends(get_db),
):
    """List the caller's appointments by start time."""
    appointments = appointment_service.list_appointments(
        db,
        coordinator_id=session.user_id,
        status=status.value if status else None,
        date_from=date_from,
        date_to=date_to,
    )
    return ApiResponse(data=[AppointmentRead.model_validate(a) for a in appointments])


@router.post("", response_model=ApiResponse[AppointmentRead], status_code=201)
def create_appointment(
    data: AppointmentCreate,
    session: UserSession = Depends(coordinator_only),
    db: Session = Depends(get_db),
    sender: NotificationSender = Depends(get_notification_sender),
):
    """Book an appointment. 400 on conflict or invalid duration."""
    request = appointment_service.AppointmentRequest(**data.model_dump())
    appointment = appointment_service.create_appointment(
        db, sender, coordinator_id=session.user_id, request=request
    )
    return ApiResponse(
        data=AppointmentRead.model_validate(appointment),
        message="Appointment scheduled",
    )


@router.patch("", response_model=ApiResponse[AppointmentRead])
def update_appointment_status(
    data: AppointmentStatusUpdate,
    session: UserSession = Depends(coordinator_only),
    db: Session = Depends(get_db),
    sender: NotificationSender = Depends(get_notification_sender),
):
    appointment = appointment_service.update_status(
        db,
        sender,
        appointment_id=data.id,
        coordinator_id=session.user_id,
        new_status=data.status,
        cancellation_reason=data.cancellation_reason,
        completion_notes=data.completion_notes,
    )
    return ApiResponse(
        data=AppointmentRead.model_validate(appointment),
        message="Appointment status updated",
    )


@router.put("", response_model=ApiResponse[AppointmentRead])
def reschedule_appointment(
    data: AppointmentReschedule,
    session: UserSession = Depends(coordinator_only),
    db: Session = Depends(get_db),
    sender: NotificationSender = Depends(get_notification_sender),
):
    appointment = appointment_service.reschedule_appointment(
        db,
        sender,
        appointment_id=data.id,
        coordinator_id=session.user_id,
        new_start=data.scheduled_time,
        duration_minutes=data.duration_minutes,
    )
    return ApiResponse(
        data=AppointmentRead.model_validate(appointment),
        message="Appointment rescheduled",
    )


@router.delete("", response_model=ApiResponse[None])
def delete_appointment(
    id: UUID = Query(...),
    session: UserSession = Depends(coordinator_only),
    db: Session = Depends(get_db),
    sender: NotificationSender = Depends(get_notification_sender),
):
    """Delete an appointment that has not started yet."""
    appointment_service.delete_appointment(
        db, sender, appointment_id=id, coordinator_id=session.user_id
    )
    return ApiResponse(message="Appointment deleted")


@router.get("/{appointment_id}", response_model=ApiResponse[AppointmentRead])
def get_appointment(
    appointment_id: UUID,
    session: UserSession = Depends(coordinator_only),
    db: Session = Depends(get_db),
):
    appointment = appointment_service.get_appointment(
        db, appointment_id, coordinator_id=session.user_id
    )
    return ApiResponse(data=AppointmentRead.model_validate(appointment))
