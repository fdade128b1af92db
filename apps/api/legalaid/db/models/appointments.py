"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime, timedelta

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from legalaid.db.base import Base
from legalaid.db.enums import (
    DEFAULT_APPOINTMENT_PRIORITY,
    DEFAULT_APPOINTMENT_STATUS,
    DEFAULT_REMINDER_CHANNELS,
    DEFAULT_REMINDER_HOURS,
)
from legalaid.db.types import utcnow

if TYPE_CHECKING:
    from legalaid.db.models import User


class Appointment(Base):
    """
    A meeting between a coordinator and a client.

    Owned by the coordinator who booked it. Non-terminal appointments of one
    coordinator never overlap on [scheduled_time, scheduled_time + duration).
    """

    __tablename__ = "appointments"
    __table_args__ = (
        Index("idx_appointments_coordinator_time", "coordinator_id", "scheduled_time"),
        Index("idx_appointments_status_time", "status", "scheduled_time"),
        Index("idx_appointments_client", "client_id"),
        CheckConstraint("duration_minutes > 0", name="ck_appointment_duration_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    coordinator_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # Scheduling (UTC)
    scheduled_time: Mapped[datetime] = mapped_column(nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)

    # Details
    purpose: Mapped[str] = mapped_column(String(500), nullable=False)
    case_type: Mapped[str] = mapped_column(String(100), nullable=False)
    case_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    venue: Mapped[str | None] = mapped_column(String(255), nullable=True)
    priority: Mapped[str] = mapped_column(
        String(10), default=DEFAULT_APPOINTMENT_PRIORITY.value, nullable=False
    )
    required_documents: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Reminders
    reminder_channels: Mapped[list[str]] = mapped_column(
        JSON, default=lambda: list(DEFAULT_REMINDER_CHANNELS), nullable=False
    )
    reminder_hours: Mapped[list[int]] = mapped_column(
        JSON, default=lambda: list(DEFAULT_REMINDER_HOURS), nullable=False
    )

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_APPOINTMENT_STATUS.value, nullable=False
    )
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(nullable=True)
    completion_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    coordinator: Mapped["User"] = relationship(foreign_keys=[coordinator_id])
    client: Mapped["User"] = relationship(foreign_keys=[client_id])

    @property
    def end_time(self) -> datetime:
        return self.scheduled_time + timedelta(minutes=self.duration_minutes)


class AppointmentNotificationLog(Base):
    """
    One row per client notification attempt for an appointment.

    appointment_id is deliberately not a foreign key: DELETED notifications
    are logged after the appointment row is gone.
    """

    __tablename__ = "appointment_notification_logs"
    __table_args__ = (
        Index("idx_appt_notif_logs_appt", "appointment_id", "event"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    appointment_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    event: Mapped[str] = mapped_column(String(20), nullable=False)
    channel: Mapped[str] = mapped_column(String(10), nullable=False)
    recipient: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Hours-before marker for REMINDER rows, prevents duplicate reminders
    reminder_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
