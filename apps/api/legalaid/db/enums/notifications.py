"""Notification enums."""

from enum import Enum


class NotificationType(str, Enum):
    APPOINTMENT = "APPOINTMENT"
    CASE = "CASE"
    MESSAGE = "MESSAGE"


class NotificationPriority(str, Enum):
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


class NotificationChannel(str, Enum):
    SMS = "SMS"
    EMAIL = "EMAIL"
