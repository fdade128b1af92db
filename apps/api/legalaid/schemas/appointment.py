"""Appointment schemas - Pydantic models for appointments API."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from legalaid.db.enums import AppointmentStatus


Priority = Literal["LOW", "MEDIUM", "HIGH", "URGENT"]
Channel = Literal["EMAIL", "SMS"]


class AppointmentCreate(BaseModel):
    """Schema for creating an appointment. Duration minimum is enforced by the service."""
    client_id: UUID
    scheduled_time: datetime
    duration_minutes: int = Field(..., ge=1)
    purpose: str = Field(..., min_length=1, max_length=500)
    case_type: str = Field(..., min_length=1, max_length=100)
    case_details: str | None = None
    venue: str | None = Field(None, max_length=255)
    priority: Priority = "MEDIUM"
    required_documents: list[str] = Field(default_factory=list)
    notes: str | None = None
    reminder_channels: list[Channel] = Field(default_factory=lambda: ["EMAIL"])
    reminder_hours: list[int] = Field(default_factory=lambda: [24, 1])


class AppointmentStatusUpdate(BaseModel):
    """Schema for PATCH /appointments."""
    id: UUID
    status: AppointmentStatus
    cancellation_reason: str | None = Field(None, max_length=1000)
    completion_notes: str | None = None


class AppointmentReschedule(BaseModel):
    """Schema for PUT /appointments."""
    id: UUID
    scheduled_time: datetime
    duration_minutes: int | None = Field(None, ge=1)


class AppointmentRead(BaseModel):
    """Schema for reading an appointment."""
    model_config = {"from_attributes": True}

    id: UUID
    coordinator_id: UUID
    client_id: UUID
    scheduled_time: datetime
    end_time: datetime
    duration_minutes: int
    purpose: str
    case_type: str
    case_details: str | None
    venue: str | None
    priority: str
    required_documents: list[str]
    notes: str | None
    reminder_channels: list[str]
    reminder_hours: list[int]
    status: str
    cancellation_reason: str | None
    cancelled_at: datetime | None
    completion_notes: str | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime


class ReminderRunResult(BaseModel):
    appointments_checked: int
    reminders_sent: int
    reminders_failed: int
