"""Notification sender interface + selection helpers.

Delivery through real SMS/email providers is outside this service; the
shipped senders either log the message or keep it in memory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from legalaid.core.config import Settings

logger = logging.getLogger(__name__)


class NotificationSender(Protocol):
    key: str

    def send_sms(self, phone: str, message: str) -> None:
        """Send a text message. Raises on delivery failure."""

    def send_email(self, to: str, subject: str, html: str) -> None:
        """Send an HTML email. Raises on delivery failure."""


class LoggingNotificationSender:
    """Writes outgoing notifications to the log instead of delivering them."""

    key = "log"

    def send_sms(self, phone: str, message: str) -> None:
        logger.info("SMS queued (log backend) length=%d", len(message))

    def send_email(self, to: str, subject: str, html: str) -> None:
        logger.info("Email queued (log backend) subject=%r", subject)


@dataclass
class SentMessage:
    channel: str
    recipient: str
    subject: str | None
    body: str


@dataclass
class InMemoryNotificationSender:
    """Records every send; used by tests and local development."""

    key: str = "memory"
    sent: list[SentMessage] = field(default_factory=list)

    def send_sms(self, phone: str, message: str) -> None:
        self.sent.append(SentMessage("SMS", phone, None, message))

    def send_email(self, to: str, subject: str, html: str) -> None:
        self.sent.append(SentMessage("EMAIL", to, subject, html))


def build_sender(settings: Settings) -> NotificationSender:
    """Select the sender configured by NOTIFICATION_BACKEND."""
    backend = settings.NOTIFICATION_BACKEND.lower()
    if backend == "memory":
        return InMemoryNotificationSender()
    if backend == "log":
        return LoggingNotificationSender()
    raise ValueError(f"Unknown NOTIFICATION_BACKEND: {settings.NOTIFICATION_BACKEND}")
