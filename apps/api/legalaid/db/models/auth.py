"""SQLAlchemy ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from legalaid.db.base import Base
from legalaid.db.types import utcnow

if TYPE_CHECKING:
    from legalaid.db.models import LawyerProfile, Office


class User(Base):
    """
    Any account in the system: clients, coordinators, lawyers and admins.

    Role is stored as the enum value. Clients are only referenced by the
    scheduler for notification dispatch (phone/email).
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("idx_users_role_active", "role", "is_active"),
        Index("idx_users_office", "office_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    office_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("offices.id", ondelete="SET NULL"), nullable=True
    )

    # Bumped to revoke every outstanding bearer token
    token_version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    office: Mapped[Optional["Office"]] = relationship(foreign_keys=[office_id])
    lawyer_profile: Mapped[Optional["LawyerProfile"]] = relationship(
        back_populates="user", uselist=False
    )
