"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from legalaid.db.base import Base
from legalaid.db.types import utcnow

if TYPE_CHECKING:
    from legalaid.db.models import User


lawyer_specializations = Table(
    "lawyer_specializations",
    Base.metadata,
    Column(
        "lawyer_profile_id",
        Uuid,
        ForeignKey("lawyer_profiles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "specialization_id",
        Uuid,
        ForeignKey("legal_specializations.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Office(Base):
    """A legal-aid office. Lawyers, coordinators and cases belong to one."""

    __tablename__ = "offices"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)


class LegalSpecialization(Base):
    __tablename__ = "legal_specializations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)


class LawyerProfile(Base):
    """
    Lawyer-specific data for a LAWYER user.

    max_caseload caps the number of open (ACTIVE/PENDING) cases the
    assignment service will hand to this lawyer.
    """

    __tablename__ = "lawyer_profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    office_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("offices.id", ondelete="RESTRICT"), nullable=False
    )
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    max_caseload: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    experience_years: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    user: Mapped["User"] = relationship(back_populates="lawyer_profile")
    office: Mapped["Office"] = relationship()
    specializations: Mapped[list["LegalSpecialization"]] = relationship(
        secondary=lawyer_specializations
    )
