"""Backup schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class BackupRead(BaseModel):
    model_config = {"from_attributes": True}

    id: UUID
    name: str
    status: str
    path: str
    size_bytes: int | None
    checksum_sha256: str | None
    error: str | None
    created_by_id: UUID | None
    created_at: datetime
    completed_at: datetime | None
    file_exists: bool = False
