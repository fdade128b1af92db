"""Appointment and scheduling enums."""

from enum import Enum


class AppointmentStatus(str, Enum):
    """
    Appointment lifecycle status.

    Flow: scheduled → confirmed → completed
              ↘ cancelled     ↘ no_show
                              ↘ cancelled
          rescheduled → confirmed | cancelled
    """

    SCHEDULED = "SCHEDULED"  # Booked by the coordinator
    CONFIRMED = "CONFIRMED"  # Client confirmed attendance
    RESCHEDULED = "RESCHEDULED"  # Moved from an earlier slot
    COMPLETED = "COMPLETED"  # Meeting took place
    CANCELLED = "CANCELLED"  # Cancelled by coordinator or client
    NO_SHOW = "NO_SHOW"  # Client didn't show up


class AppointmentPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class NotificationEvent(str, Enum):
    """Appointment events that trigger a client notification."""

    CREATED = "CREATED"
    STATUS_CHANGED = "STATUS_CHANGED"
    RESCHEDULED = "RESCHEDULED"
    DELETED = "DELETED"
    REMINDER = "REMINDER"


class DeliveryStatus(str, Enum):
    SENT = "SENT"
    FAILED = "FAILED"


# Statuses that no longer occupy calendar time
TERMINAL_APPOINTMENT_STATUSES = frozenset(
    {AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED}
)

# Fixed status graph; any pair not listed here is rejected
APPOINTMENT_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset(
        {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.CONFIRMED: frozenset(
        {AppointmentStatus.COMPLETED, AppointmentStatus.NO_SHOW, AppointmentStatus.CANCELLED}
    ),
    AppointmentStatus.RESCHEDULED: frozenset(
        {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}
    ),
}

DEFAULT_APPOINTMENT_STATUS = AppointmentStatus.SCHEDULED
DEFAULT_APPOINTMENT_PRIORITY = AppointmentPriority.MEDIUM
DEFAULT_REMINDER_CHANNELS = ["EMAIL"]
DEFAULT_REMINDER_HOURS = [24, 1]
