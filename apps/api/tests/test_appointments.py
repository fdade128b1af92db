"""
Tests for Appointment Service.

Coverage:
- Conflict detection over a coordinator's calendar
- Duration validation
- Status transition table
- Reschedule and delete rules
- Notification dispatch and failure recording
"""

import pytest
from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

from legalaid.db.enums import (
    AppointmentStatus,
    DeliveryStatus,
    NotificationEvent,
    NotificationType,
    Role,
)
from legalaid.db.models import Appointment, AppointmentNotificationLog, Notification
from legalaid.services import appointment_service
from legalaid.services.appointment_service import AppointmentRequest
from legalaid.services.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    PastAppointmentError,
    ValidationError,
)


NINE_AM = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)


def _request(client_id, start=NINE_AM, duration=30, **overrides) -> AppointmentRequest:
    fields = dict(
        client_id=client_id,
        scheduled_time=start,
        duration_minutes=duration,
        purpose="Initial consultation",
        case_type="Family",
        venue="Room 2",
    )
    fields.update(overrides)
    return AppointmentRequest(**fields)


def _book(db, sender, coordinator, client_user, start=NINE_AM, duration=30, **overrides):
    return appointment_service.create_appointment(
        db, sender, coordinator.id, _request(client_user.id, start, duration, **overrides)
    )


class FailingSender:
    key = "failing"

    def send_sms(self, phone: str, message: str) -> None:
        raise RuntimeError("SMS gateway down")

    def send_email(self, to: str, subject: str, html: str) -> None:
        raise RuntimeError("SMTP refused")


# =============================================================================
# Create + conflict detection
# =============================================================================

class TestCreateAppointment:
    def test_creates_scheduled_appointment_with_defaults(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user)

        assert appt.status == AppointmentStatus.SCHEDULED.value
        assert appt.priority == "MEDIUM"
        assert appt.reminder_channels == ["EMAIL"]
        assert appt.reminder_hours == [24, 1]
        assert appt.scheduled_time == NINE_AM
        assert appt.end_time == NINE_AM + timedelta(minutes=30)

    def test_overlapping_booking_conflicts(self, db, sender, coordinator, client_user):
        _book(db, sender, coordinator, client_user, NINE_AM, 30)

        with pytest.raises(ConflictError):
            _book(db, sender, coordinator, client_user, NINE_AM + timedelta(minutes=15), 30)

        assert db.query(Appointment).count() == 1

    def test_booking_that_encloses_existing_conflicts(self, db, sender, coordinator, client_user):
        _book(db, sender, coordinator, client_user, NINE_AM + timedelta(minutes=30), 15)

        with pytest.raises(ConflictError):
            _book(db, sender, coordinator, client_user, NINE_AM, 120)

    def test_earlier_long_booking_conflicts(self, db, sender, coordinator, client_user):
        _book(db, sender, coordinator, client_user, NINE_AM, 180)

        with pytest.raises(ConflictError):
            _book(db, sender, coordinator, client_user, NINE_AM + timedelta(hours=2), 30)

    def test_full_day_booking_blocks_late_afternoon(self, db, sender, coordinator, client_user):
        mediation = _book(
            db, sender, coordinator, client_user, NINE_AM, 540, purpose="Full-day mediation"
        )

        with pytest.raises(ConflictError) as exc_info:
            _book(db, sender, coordinator, client_user, NINE_AM + timedelta(hours=8, minutes=30), 30)

        assert mediation.duration_minutes == 540
        assert str(mediation.id) in exc_info.value.errors[0]
        after = _book(db, sender, coordinator, client_user, NINE_AM + timedelta(hours=9), 30)
        assert after.id is not None

    def test_back_to_back_does_not_conflict(self, db, sender, coordinator, client_user):
        _book(db, sender, coordinator, client_user, NINE_AM, 30)
        second = _book(db, sender, coordinator, client_user, NINE_AM + timedelta(minutes=30), 30)

        assert second.id is not None
        assert db.query(Appointment).count() == 2

    def test_different_coordinators_never_conflict(
        self, db, sender, coordinator, other_coordinator, client_user
    ):
        _book(db, sender, coordinator, client_user, NINE_AM, 30)
        other = _book(db, sender, other_coordinator, client_user, NINE_AM, 30)

        assert other.coordinator_id == other_coordinator.id

    def test_cancelled_slot_can_be_rebooked(self, db, sender, coordinator, client_user):
        first = _book(db, sender, coordinator, client_user, NINE_AM, 30)
        appointment_service.update_status(
            db, sender, first.id, coordinator.id,
            AppointmentStatus.CANCELLED, cancellation_reason="Client unwell",
        )

        again = _book(db, sender, coordinator, client_user, NINE_AM, 30)

        assert again.status == AppointmentStatus.SCHEDULED.value

    def test_completed_appointment_frees_its_slot(self, db, sender, coordinator, client_user):
        first = _book(db, sender, coordinator, client_user, NINE_AM, 30)
        appointment_service.update_status(db, sender, first.id, coordinator.id, AppointmentStatus.CONFIRMED)
        appointment_service.update_status(db, sender, first.id, coordinator.id, AppointmentStatus.COMPLETED)

        assert _book(db, sender, coordinator, client_user, NINE_AM, 30).id != first.id

    def test_no_show_still_blocks_slot(self, db, sender, coordinator, client_user):
        first = _book(db, sender, coordinator, client_user, NINE_AM, 30)
        appointment_service.update_status(db, sender, first.id, coordinator.id, AppointmentStatus.CONFIRMED)
        appointment_service.update_status(db, sender, first.id, coordinator.id, AppointmentStatus.NO_SHOW)

        with pytest.raises(ConflictError):
            _book(db, sender, coordinator, client_user, NINE_AM, 30)

    def test_naive_time_is_treated_as_utc(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user, datetime(2024, 1, 10, 9, 0), 30)

        assert appt.scheduled_time == NINE_AM
        with pytest.raises(ConflictError):
            _book(db, sender, coordinator, client_user, NINE_AM + timedelta(minutes=10), 15)

    @pytest.mark.parametrize("duration", [0, 5, 14])
    def test_duration_under_fifteen_minutes_fails(self, db, sender, coordinator, client_user, duration):
        with pytest.raises(ValidationError) as exc_info:
            _book(db, sender, coordinator, client_user, NINE_AM, duration)

        assert any("15 minutes" in error for error in exc_info.value.errors)
        assert db.query(Appointment).count() == 0

    def test_fifteen_minutes_is_accepted(self, db, sender, coordinator, client_user):
        assert _book(db, sender, coordinator, client_user, NINE_AM, 15).duration_minutes == 15

    def test_missing_required_fields_are_listed(self, db, sender, coordinator, client_user):
        request = AppointmentRequest(
            client_id=client_user.id,
            scheduled_time=None,
            duration_minutes=30,
            purpose="  ",
            case_type=None,
        )

        with pytest.raises(ValidationError) as exc_info:
            appointment_service.create_appointment(db, sender, coordinator.id, request)

        errors = exc_info.value.errors
        assert "scheduled_time is required" in errors
        assert "purpose is required" in errors
        assert "case_type is required" in errors

    def test_unknown_client_is_not_found(self, db, sender, coordinator):
        with pytest.raises(NotFoundError):
            appointment_service.create_appointment(db, sender, coordinator.id, _request(uuid4()))

    def test_non_client_user_is_not_a_client(self, db, sender, coordinator, other_coordinator):
        with pytest.raises(NotFoundError):
            appointment_service.create_appointment(
                db, sender, coordinator.id, _request(other_coordinator.id)
            )


# =============================================================================
# Notifications on create
# =============================================================================

class TestCreateNotifications:
    def test_sms_and_email_sent_with_details(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user)

        channels = sorted(message.channel for message in sender.sent)
        assert channels == ["EMAIL", "SMS"]
        sms = next(m for m in sender.sent if m.channel == "SMS")
        assert sms.recipient == client_user.phone
        assert "Wednesday, 10 January 2024 at 09:00 UTC" in sms.body
        assert "Room 2" in sms.body

        logs = db.query(AppointmentNotificationLog).filter(
            AppointmentNotificationLog.appointment_id == appt.id
        ).all()
        assert {log.status for log in logs} == {DeliveryStatus.SENT.value}
        assert {log.event for log in logs} == {NotificationEvent.CREATED.value}

    def test_email_only_when_client_has_no_phone(self, db, sender, coordinator, user_factory):
        client = user_factory(Role.CLIENT)
        _book(db, sender, coordinator, client)

        assert [m.channel for m in sender.sent] == ["EMAIL"]

    def test_in_app_notification_created_for_client(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user, priority="URGENT")

        notification = db.query(Notification).filter(Notification.user_id == client_user.id).one()
        assert notification.type == NotificationType.APPOINTMENT.value
        assert notification.priority == "URGENT"
        assert notification.entity_id == appt.id

    def test_delivery_failure_does_not_fail_the_write(self, db, coordinator, client_user):
        appt = _book(db, FailingSender(), coordinator, client_user)

        assert db.get(Appointment, appt.id) is not None
        logs = db.query(AppointmentNotificationLog).filter(
            AppointmentNotificationLog.appointment_id == appt.id
        ).all()
        assert len(logs) == 2
        assert {log.status for log in logs} == {DeliveryStatus.FAILED.value}
        assert {log.error for log in logs} == {"SMS gateway down", "SMTP refused"}


# =============================================================================
# Status transitions
# =============================================================================

class TestUpdateStatus:
    def test_scheduled_to_completed_fails(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user)

        with pytest.raises(InvalidTransitionError):
            appointment_service.update_status(
                db, sender, appt.id, coordinator.id, AppointmentStatus.COMPLETED
            )

        db.refresh(appt)
        assert appt.status == AppointmentStatus.SCHEDULED.value

    def test_confirmed_to_completed_persists_notes(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user)
        appointment_service.update_status(db, sender, appt.id, coordinator.id, AppointmentStatus.CONFIRMED)

        updated = appointment_service.update_status(
            db, sender, appt.id, coordinator.id,
            AppointmentStatus.COMPLETED, completion_notes="Advised on custody filing",
        )

        assert updated.status == AppointmentStatus.COMPLETED.value
        assert updated.completion_notes == "Advised on custody filing"
        assert updated.completed_at is not None

    def test_cancel_records_reason_and_time(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user)

        updated = appointment_service.update_status(
            db, sender, appt.id, coordinator.id,
            AppointmentStatus.CANCELLED, cancellation_reason="Client travelling",
        )

        assert updated.cancellation_reason == "Client travelling"
        assert updated.cancelled_at is not None
        assert any("Client travelling" in m.body for m in sender.sent if m.channel == "SMS")

    @pytest.mark.parametrize(
        "source,target",
        [
            (AppointmentStatus.SCHEDULED, AppointmentStatus.NO_SHOW),
            (AppointmentStatus.SCHEDULED, AppointmentStatus.RESCHEDULED),
            (AppointmentStatus.CANCELLED, AppointmentStatus.CONFIRMED),
            (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED),
            (AppointmentStatus.NO_SHOW, AppointmentStatus.CONFIRMED),
            (AppointmentStatus.CONFIRMED, AppointmentStatus.SCHEDULED),
        ],
    )
    def test_transitions_outside_table_fail(self, db, sender, coordinator, client_user, source, target):
        appt = _book(db, sender, coordinator, client_user)
        appt.status = source.value
        db.commit()

        with pytest.raises(InvalidTransitionError):
            appointment_service.update_status(db, sender, appt.id, coordinator.id, target)

    def test_rescheduled_can_be_confirmed(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user)
        appt.status = AppointmentStatus.RESCHEDULED.value
        db.commit()

        updated = appointment_service.update_status(
            db, sender, appt.id, coordinator.id, AppointmentStatus.CONFIRMED
        )

        assert updated.status == AppointmentStatus.CONFIRMED.value

    def test_other_coordinator_cannot_update(self, db, sender, coordinator, other_coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user)

        with pytest.raises(AuthorizationError):
            appointment_service.update_status(
                db, sender, appt.id, other_coordinator.id, AppointmentStatus.CONFIRMED
            )

    def test_status_change_notifies_client(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user)
        sender.sent.clear()

        appointment_service.update_status(db, sender, appt.id, coordinator.id, AppointmentStatus.CONFIRMED)

        assert len(sender.sent) == 2
        assert all("confirmed" in m.body for m in sender.sent)


# =============================================================================
# Reschedule
# =============================================================================

class TestReschedule:
    def test_moves_time_and_keeps_status(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user)
        new_start = NINE_AM + timedelta(hours=3)

        updated = appointment_service.reschedule_appointment(
            db, sender, appt.id, coordinator.id, new_start, duration_minutes=45
        )

        assert updated.scheduled_time == new_start
        assert updated.duration_minutes == 45
        assert updated.status == AppointmentStatus.SCHEDULED.value

    def test_overlap_with_itself_is_allowed(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user, NINE_AM, 60)

        updated = appointment_service.reschedule_appointment(
            db, sender, appt.id, coordinator.id, NINE_AM + timedelta(minutes=15)
        )

        assert updated.scheduled_time == NINE_AM + timedelta(minutes=15)

    def test_conflict_with_other_appointment(self, db, sender, coordinator, client_user):
        _book(db, sender, coordinator, client_user, NINE_AM, 30)
        later = _book(db, sender, coordinator, client_user, NINE_AM + timedelta(hours=2), 30)

        with pytest.raises(ConflictError):
            appointment_service.reschedule_appointment(
                db, sender, later.id, coordinator.id, NINE_AM + timedelta(minutes=10)
            )

    def test_terminal_appointment_cannot_move(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user)
        appointment_service.update_status(db, sender, appt.id, coordinator.id, AppointmentStatus.CANCELLED)

        with pytest.raises(ValidationError):
            appointment_service.reschedule_appointment(
                db, sender, appt.id, coordinator.id, NINE_AM + timedelta(days=1)
            )

    def test_short_duration_rejected(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user)

        with pytest.raises(ValidationError):
            appointment_service.reschedule_appointment(
                db, sender, appt.id, coordinator.id, NINE_AM, duration_minutes=10
            )


# =============================================================================
# Delete
# =============================================================================

class TestDelete:
    def test_past_appointment_cannot_be_deleted(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user, NINE_AM)

        with pytest.raises(PastAppointmentError):
            appointment_service.delete_appointment(db, sender, appt.id, coordinator.id)

        assert db.get(Appointment, appt.id) is not None

    def test_started_appointment_cannot_be_deleted(self, db, sender, coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user, NINE_AM)

        with pytest.raises(PastAppointmentError):
            appointment_service.delete_appointment(
                db, sender, appt.id, coordinator.id, now=NINE_AM
            )

    def test_future_appointment_deleted_and_client_notified(self, db, sender, coordinator, client_user):
        start = datetime.now(timezone.utc) + timedelta(days=3)
        appt = _book(db, sender, coordinator, client_user, start)
        appt_id = appt.id
        sender.sent.clear()

        appointment_service.delete_appointment(db, sender, appt_id, coordinator.id)

        assert db.get(Appointment, appt_id) is None
        assert len(sender.sent) == 2
        assert all("has been cancelled" in m.body for m in sender.sent)
        deleted_logs = db.query(AppointmentNotificationLog).filter(
            AppointmentNotificationLog.appointment_id == appt_id,
            AppointmentNotificationLog.event == NotificationEvent.DELETED.value,
        ).count()
        assert deleted_logs == 2

    def test_other_coordinator_cannot_delete(self, db, sender, coordinator, other_coordinator, client_user):
        appt = _book(db, sender, coordinator, client_user, datetime.now(timezone.utc) + timedelta(days=1))

        with pytest.raises(AuthorizationError):
            appointment_service.delete_appointment(db, sender, appt.id, other_coordinator.id)

    def test_missing_appointment_not_found(self, db, sender, coordinator):
        with pytest.raises(NotFoundError):
            appointment_service.delete_appointment(db, sender, uuid4(), coordinator.id)


# =============================================================================
# List
# =============================================================================

class TestListAppointments:
    def test_ordered_by_time_and_scoped_to_coordinator(
        self, db, sender, coordinator, other_coordinator, client_user
    ):
        late = _book(db, sender, coordinator, client_user, NINE_AM + timedelta(hours=5))
        early = _book(db, sender, coordinator, client_user, NINE_AM)
        _book(db, sender, other_coordinator, client_user, NINE_AM + timedelta(hours=1))

        result = appointment_service.list_appointments(db, coordinator.id)

        assert [a.id for a in result] == [early.id, late.id]

    def test_filters_by_status_and_inclusive_dates(self, db, sender, coordinator, client_user):
        day_one = _book(db, sender, coordinator, client_user, NINE_AM)
        day_two = _book(db, sender, coordinator, client_user, NINE_AM + timedelta(days=1, hours=14))
        _book(db, sender, coordinator, client_user, NINE_AM + timedelta(days=5))
        appointment_service.update_status(
            db, sender, day_one.id, coordinator.id, AppointmentStatus.CONFIRMED
        )

        in_range = appointment_service.list_appointments(
            db, coordinator.id, date_from=date(2024, 1, 10), date_to=date(2024, 1, 11)
        )
        confirmed = appointment_service.list_appointments(
            db, coordinator.id, status=AppointmentStatus.CONFIRMED.value
        )

        assert [a.id for a in in_range] == [day_one.id, day_two.id]
        assert [a.id for a in confirmed] == [day_one.id]
