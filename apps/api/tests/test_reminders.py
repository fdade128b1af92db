"""Tests for the appointment reminder sweep and its internal endpoint."""

from datetime import datetime, timedelta, timezone

import pytest

from legalaid.db.enums import AppointmentStatus, NotificationEvent
from legalaid.db.models import Appointment, AppointmentNotificationLog
from legalaid.services.appointment_notification_service import send_due_reminders


NOW = datetime(2024, 3, 4, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_appointment(db, coordinator, client_user):
    def factory(hours_ahead: float, **fields) -> Appointment:
        appointment = Appointment(
            coordinator_id=coordinator.id,
            client_id=client_user.id,
            scheduled_time=NOW + timedelta(hours=hours_ahead),
            duration_minutes=30,
            purpose="Document review",
            case_type="Housing",
            **fields,
        )
        db.add(appointment)
        db.commit()
        return appointment
    return factory


def _reminder_logs(db, appointment_id):
    return db.query(AppointmentNotificationLog).filter(
        AppointmentNotificationLog.appointment_id == appointment_id,
        AppointmentNotificationLog.event == NotificationEvent.REMINDER.value,
    ).all()


class TestSendDueReminders:
    def test_sends_when_rounded_hours_match(self, db, sender, make_appointment):
        appointment = make_appointment(23.8)

        run = send_due_reminders(db, sender, now=NOW)

        assert run.reminders_sent == 1
        assert [m.channel for m in sender.sent] == ["EMAIL"]
        assert "in 24 hours" in sender.sent[0].body
        logs = _reminder_logs(db, appointment.id)
        assert [log.reminder_hours for log in logs] == [24]

    def test_one_hour_reminder_uses_singular(self, db, sender, make_appointment):
        make_appointment(1)

        send_due_reminders(db, sender, now=NOW)

        assert "in 1 hour." in sender.sent[0].body

    def test_not_sent_twice_for_same_hour(self, db, sender, make_appointment):
        make_appointment(24)

        send_due_reminders(db, sender, now=NOW)
        second = send_due_reminders(db, sender, now=NOW + timedelta(minutes=10))

        assert second.reminders_sent == 0
        assert len(sender.sent) == 1

    def test_hours_not_configured_are_skipped(self, db, sender, make_appointment):
        make_appointment(5)

        run = send_due_reminders(db, sender, now=NOW)

        assert run.appointments_checked == 1
        assert run.reminders_sent == 0
        assert sender.sent == []

    def test_respects_reminder_channels(self, db, sender, make_appointment, client_user):
        make_appointment(1, reminder_channels=["SMS", "EMAIL"])

        send_due_reminders(db, sender, now=NOW)

        assert sorted(m.channel for m in sender.sent) == ["EMAIL", "SMS"]
        sms = next(m for m in sender.sent if m.channel == "SMS")
        assert sms.recipient == client_user.phone

    def test_terminal_and_past_appointments_are_ignored(self, db, sender, make_appointment):
        make_appointment(1, status=AppointmentStatus.CANCELLED.value)
        make_appointment(-1)
        make_appointment(30)

        run = send_due_reminders(db, sender, now=NOW)

        assert run.appointments_checked == 0
        assert sender.sent == []


class TestRemindersEndpoint:
    async def test_requires_internal_secret(self, client):
        response = await client.post(
            "/internal/reminders", headers={"X-Internal-Secret": "wrong"}
        )

        assert response.status_code == 403
        assert response.json()["success"] is False

    async def test_runs_sweep(self, client, db):
        response = await client.post(
            "/internal/reminders", headers={"X-Internal-Secret": "test-internal-secret"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == {
            "appointments_checked": 0,
            "reminders_sent": 0,
            "reminders_failed": 0,
        }
