"""Backup service - zip archives of application data under BACKUP_DIR."""

import hashlib
import json
import logging
import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import UUID

from sqlalchemy import Table, select
from sqlalchemy.orm import Session

from legalaid.core.config import settings
from legalaid.db.enums import BackupStatus
from legalaid.db.models import (
    Appointment,
    Backup,
    Case,
    CaseAssignment,
    LawyerProfile,
    LegalSpecialization,
    Message,
    Office,
    User,
    lawyer_specializations,
)
from legalaid.services.exceptions import NotFoundError

logger = logging.getLogger(__name__)

# Archive member name -> table
BACKUP_TABLES: dict[str, Table] = {
    "users.json": User.__table__,
    "offices.json": Office.__table__,
    "specializations.json": LegalSpecialization.__table__,
    "lawyer_profiles.json": LawyerProfile.__table__,
    "lawyer_specializations.json": lawyer_specializations,
    "cases.json": Case.__table__,
    "case_assignments.json": CaseAssignment.__table__,
    "appointments.json": Appointment.__table__,
    "messages.json": Message.__table__,
}


def _write_json(data: Any) -> str:
    return json.dumps(data, indent=2, sort_keys=True, default=str)


def _dump_table(db: Session, table: Table) -> list[dict[str, Any]]:
    return [dict(row) for row in db.execute(select(table)).mappings()]


def backup_root() -> Path:
    return Path(settings.BACKUP_DIR)


def _sha256(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _write_archive(db: Session, target: Path) -> dict[str, int]:
    counts = {}
    with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as archive:
        for member, table in BACKUP_TABLES.items():
            rows = _dump_table(db, table)
            counts[member] = len(rows)
            archive.writestr(member, _write_json(rows))
        manifest = {
            "created_at": datetime.now(timezone.utc).isoformat(),
            "version": settings.VERSION,
            "tables": counts,
        }
        archive.writestr("manifest.json", _write_json(manifest))
    return counts


def create_backup(db: Session, created_by_id: UUID | None) -> Backup:
    """
    Write a backup archive and record it.

    On failure the row is marked FAILED with the error, and the exception
    is re-raised.
    """
    now = datetime.now(timezone.utc)
    name = f"backup-{now.strftime('%Y%m%d-%H%M%S-%f')}.zip"
    backup = Backup(
        name=name,
        path=name,
        status=BackupStatus.PENDING.value,
        created_by_id=created_by_id,
    )
    db.add(backup)
    db.commit()

    target = backup_root() / name
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        counts = _write_archive(db, target)
        backup.size_bytes = target.stat().st_size
        backup.checksum_sha256 = _sha256(target)
        backup.status = BackupStatus.COMPLETED.value
        backup.completed_at = datetime.now(timezone.utc)
        db.commit()
    except Exception as exc:
        db.rollback()
        target.unlink(missing_ok=True)
        logger.exception("Backup failed", extra={"backup_id": str(backup.id)})
        backup.status = BackupStatus.FAILED.value
        backup.error = str(exc) or exc.__class__.__name__
        backup.completed_at = datetime.now(timezone.utc)
        db.commit()
        raise

    db.refresh(backup)
    logger.info(
        "Backup completed rows=%d size=%d",
        sum(counts.values()),
        backup.size_bytes,
        extra={"backup_id": str(backup.id)},
    )
    return backup


def file_exists(backup: Backup) -> bool:
    return (backup_root() / backup.path).is_file()


def list_backups(db: Session) -> list[Backup]:
    """All backups, newest first."""
    return list(
        db.execute(select(Backup).order_by(Backup.created_at.desc())).scalars().all()
    )


def get_backup_file(db: Session, backup_id: UUID) -> tuple[Backup, Path]:
    """Return the backup row and archive path; NotFound if either is missing."""
    backup = db.get(Backup, backup_id)
    if not backup:
        raise NotFoundError("Backup not found")
    path = backup_root() / backup.path
    if backup.status != BackupStatus.COMPLETED.value or not path.is_file():
        raise NotFoundError("Backup file not found")
    return backup, path
