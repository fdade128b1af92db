"""Baseline migration - users, offices, cases, appointments, messaging, backups

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Creates every table of the legal-aid service. Column types are portable
(UUIDs and JSON) so the same revision runs on PostgreSQL and SQLite.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade() -> None:
    """Create all tables."""

    # ==========================================================================
    # Offices and users
    # ==========================================================================
    op.create_table(
        'offices',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        _timestamp('created_at'),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('phone', sa.String(32), nullable=True),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column(
            'office_id', sa.Uuid(),
            sa.ForeignKey('offices.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('token_version', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('idx_users_role_active', 'users', ['role', 'is_active'])
    op.create_index('idx_users_office', 'users', ['office_id'])

    # ==========================================================================
    # Lawyer profiles and specializations
    # ==========================================================================
    op.create_table(
        'legal_specializations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('category', sa.String(100), nullable=True),
    )

    op.create_table(
        'lawyer_profiles',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'user_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True,
        ),
        sa.Column(
            'office_id', sa.Uuid(),
            sa.ForeignKey('offices.id', ondelete='RESTRICT'), nullable=False,
        ),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.Column('max_caseload', sa.Integer(), nullable=False),
        sa.Column('experience_years', sa.Integer(), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )

    op.create_table(
        'lawyer_specializations',
        sa.Column(
            'lawyer_profile_id', sa.Uuid(),
            sa.ForeignKey('lawyer_profiles.id', ondelete='CASCADE'), primary_key=True,
        ),
        sa.Column(
            'specialization_id', sa.Uuid(),
            sa.ForeignKey('legal_specializations.id', ondelete='CASCADE'), primary_key=True,
        ),
    )

    # ==========================================================================
    # Cases
    # ==========================================================================
    op.create_table(
        'cases',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('priority', sa.String(10), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column(
            'client_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'office_id', sa.Uuid(),
            sa.ForeignKey('offices.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column(
            'lawyer_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True,
        ),
        _timestamp('assigned_at', nullable=True),
        sa.Column('assignment_notes', sa.Text(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
    )
    op.create_index('idx_cases_lawyer_status', 'cases', ['lawyer_id', 'status'])
    op.create_index('idx_cases_office_status', 'cases', ['office_id', 'status'])

    op.create_table(
        'case_assignments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'case_id', sa.Uuid(),
            sa.ForeignKey('cases.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'assigned_by_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'assigned_to_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('notes', sa.Text(), nullable=True),
        _timestamp('created_at'),
    )
    op.create_index(
        'idx_case_assignments_case', 'case_assignments', ['case_id', 'created_at']
    )

    # ==========================================================================
    # Appointments
    # ==========================================================================
    op.create_table(
        'appointments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'coordinator_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'client_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        _timestamp('scheduled_time'),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('purpose', sa.String(500), nullable=False),
        sa.Column('case_type', sa.String(100), nullable=False),
        sa.Column('case_details', sa.Text(), nullable=True),
        sa.Column('venue', sa.String(255), nullable=True),
        sa.Column('priority', sa.String(10), nullable=False),
        sa.Column('required_documents', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('reminder_channels', sa.JSON(), nullable=False),
        sa.Column('reminder_hours', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        _timestamp('cancelled_at', nullable=True),
        sa.Column('completion_notes', sa.Text(), nullable=True),
        _timestamp('completed_at', nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.CheckConstraint('duration_minutes > 0', name='ck_appointment_duration_positive'),
    )
    op.create_index(
        'idx_appointments_coordinator_time', 'appointments',
        ['coordinator_id', 'scheduled_time'],
    )
    op.create_index('idx_appointments_status_time', 'appointments', ['status', 'scheduled_time'])
    op.create_index('idx_appointments_client', 'appointments', ['client_id'])

    # No FK on appointment_id: DELETED notifications outlive the appointment
    op.create_table(
        'appointment_notification_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('appointment_id', sa.Uuid(), nullable=False),
        sa.Column('event', sa.String(20), nullable=False),
        sa.Column('channel', sa.String(10), nullable=False),
        sa.Column('recipient', sa.String(255), nullable=False),
        sa.Column('status', sa.String(10), nullable=False),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('reminder_hours', sa.Integer(), nullable=True),
        _timestamp('created_at'),
    )
    op.create_index(
        'idx_appt_notif_logs_appt', 'appointment_notification_logs',
        ['appointment_id', 'event'],
    )

    # ==========================================================================
    # Notifications and messages
    # ==========================================================================
    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'user_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('priority', sa.String(10), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('body', sa.Text(), nullable=True),
        sa.Column('entity_type', sa.String(50), nullable=True),
        sa.Column('entity_id', sa.Uuid(), nullable=True),
        _timestamp('read_at', nullable=True),
        _timestamp('created_at'),
    )
    op.create_index(
        'idx_notif_user_unread', 'notifications', ['user_id', 'read_at', 'created_at']
    )

    op.create_table(
        'messages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'sender_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'recipient_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('body', sa.Text(), nullable=False),
        _timestamp('read_at', nullable=True),
        _timestamp('created_at'),
    )
    op.create_index(
        'idx_messages_recipient_created', 'messages', ['recipient_id', 'created_at']
    )
    op.create_index('idx_messages_sender_created', 'messages', ['sender_id', 'created_at'])

    # ==========================================================================
    # Backups
    # ==========================================================================
    op.create_table(
        'backups',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('path', sa.String(500), nullable=False),
        sa.Column('size_bytes', sa.BigInteger(), nullable=True),
        sa.Column('checksum_sha256', sa.String(64), nullable=True),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column(
            'created_by_id', sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True,
        ),
        _timestamp('created_at'),
        _timestamp('completed_at', nullable=True),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('backups')
    op.drop_index('idx_messages_sender_created', table_name='messages')
    op.drop_index('idx_messages_recipient_created', table_name='messages')
    op.drop_table('messages')
    op.drop_index('idx_notif_user_unread', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('idx_appt_notif_logs_appt', table_name='appointment_notification_logs')
    op.drop_table('appointment_notification_logs')
    op.drop_index('idx_appointments_client', table_name='appointments')
    op.drop_index('idx_appointments_status_time', table_name='appointments')
    op.drop_index('idx_appointments_coordinator_time', table_name='appointments')
    op.drop_table('appointments')
    op.drop_index('idx_case_assignments_case', table_name='case_assignments')
    op.drop_table('case_assignments')
    op.drop_index('idx_cases_office_status', table_name='cases')
    op.drop_index('idx_cases_lawyer_status', table_name='cases')
    op.drop_table('cases')
    op.drop_table('lawyer_specializations')
    op.drop_table('lawyer_profiles')
    op.drop_table('legal_specializations')
    op.drop_index('idx_users_office', table_name='users')
    op.drop_index('idx_users_role_active', table_name='users')
    op.drop_table('users')
    op.drop_table('offices')
