"""Enum definitions for application constants."""

from legalaid.db.enums.appointments import (
    APPOINTMENT_TRANSITIONS,
    DEFAULT_APPOINTMENT_PRIORITY,
    DEFAULT_APPOINTMENT_STATUS,
    DEFAULT_REMINDER_CHANNELS,
    DEFAULT_REMINDER_HOURS,
    TERMINAL_APPOINTMENT_STATUSES,
    AppointmentPriority,
    AppointmentStatus,
    DeliveryStatus,
    NotificationEvent,
)
from legalaid.db.enums.auth import Role
from legalaid.db.enums.backups import BackupStatus
from legalaid.db.enums.cases import OPEN_CASE_STATUSES, CasePriority, CaseStatus
from legalaid.db.enums.notifications import (
    NotificationChannel,
    NotificationPriority,
    NotificationType,
)

__all__ = [
    "APPOINTMENT_TRANSITIONS",
    "DEFAULT_APPOINTMENT_PRIORITY",
    "DEFAULT_APPOINTMENT_STATUS",
    "DEFAULT_REMINDER_CHANNELS",
    "DEFAULT_REMINDER_HOURS",
    "OPEN_CASE_STATUSES",
    "TERMINAL_APPOINTMENT_STATUSES",
    "AppointmentPriority",
    "AppointmentStatus",
    "BackupStatus",
    "CasePriority",
    "CaseStatus",
    "DeliveryStatus",
    "NotificationChannel",
    "NotificationEvent",
    "NotificationPriority",
    "NotificationType",
    "Role",
]
