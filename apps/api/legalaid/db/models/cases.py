"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from legalaid.db.base import Base
from legalaid.db.enums import CasePriority, CaseStatus
from legalaid.db.types import utcnow

if TYPE_CHECKING:
    from legalaid.db.models import Office, User


class Case(Base):
    """
    A registered legal-aid case.

    Cases start PENDING with no lawyer and become ACTIVE once assigned.
    """

    __tablename__ = "cases"
    __table_args__ = (
        Index("idx_cases_lawyer_status", "lawyer_id", "status"),
        Index("idx_cases_office_status", "office_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Matches LegalSpecialization.name for lawyer matching
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    priority: Mapped[str] = mapped_column(
        String(10), default=CasePriority.MEDIUM.value, nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=CaseStatus.PENDING.value, nullable=False
    )

    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    office_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("offices.id", ondelete="SET NULL"), nullable=True
    )
    lawyer_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    assigned_at: Mapped[datetime | None] = mapped_column(nullable=True)
    assignment_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    client: Mapped["User"] = relationship(foreign_keys=[client_id])
    lawyer: Mapped[Optional["User"]] = relationship(foreign_keys=[lawyer_id])
    office: Mapped[Optional["Office"]] = relationship()


class CaseAssignment(Base):
    """Audit trail of case assignments."""

    __tablename__ = "case_assignments"
    __table_args__ = (Index("idx_case_assignments_case", "case_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False
    )
    assigned_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    assigned_to_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
