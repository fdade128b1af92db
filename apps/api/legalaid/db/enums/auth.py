"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    User roles.

    - CLIENT: Legal-aid applicant; receives appointments and notifications
    - COORDINATOR: Office staff who own a calendar and a caseload of clients
    - LAWYER: Takes assigned cases
    - ADMIN: System administration (assignment, backups)
    """

    CLIENT = "CLIENT"
    COORDINATOR = "COORDINATOR"
    LAWYER = "LAWYER"
    ADMIN = "ADMIN"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_
