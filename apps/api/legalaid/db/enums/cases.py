"""Case enums."""

from enum import Enum


class CaseStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    RESOLVED = "RESOLVED"
    CANCELLED = "CANCELLED"


class CasePriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


# Statuses that count towards a lawyer's caseload
OPEN_CASE_STATUSES = (CaseStatus.ACTIVE.value, CaseStatus.PENDING.value)
