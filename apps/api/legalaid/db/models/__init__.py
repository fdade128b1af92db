"""SQLAlchemy ORM models, re-exported for `from legalaid.db.models import X`."""

from legalaid.db.models.appointments import Appointment, AppointmentNotificationLog
from legalaid.db.models.auth import User
from legalaid.db.models.backups import Backup
from legalaid.db.models.cases import Case, CaseAssignment
from legalaid.db.models.messages import Message
from legalaid.db.models.notifications import Notification
from legalaid.db.models.offices import (
    LawyerProfile,
    LegalSpecialization,
    Office,
    lawyer_specializations,
)

__all__ = [
    "Appointment",
    "AppointmentNotificationLog",
    "Backup",
    "Case",
    "CaseAssignment",
    "LawyerProfile",
    "LegalSpecialization",
    "Message",
    "Notification",
    "Office",
    "User",
    "lawyer_specializations",
]
