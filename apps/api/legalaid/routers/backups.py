"""Admin backup endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from legalaid.core.deps import get_db, require_roles
from legalaid.core.rate_limit import BACKUP_LIMIT, limiter
from legalaid.db.enums import Role
from legalaid.db.models import Backup
from legalaid.schemas.auth import UserSession
from legalaid.schemas.backup import BackupRead
from legalaid.schemas.envelope import ApiResponse
from legalaid.services import backup_service

router = APIRouter(prefix="/admin/backups", tags=["Admin - Backups"])

admin_only = require_roles([Role.ADMIN])


def _to_read(backup: Backup) -> BackupRead:
    read = BackupRead.model_validate(backup)
    read.file_exists = backup_service.file_exists(backup)
    return read


@router.get("", response_model=ApiResponse[list[BackupRead]])
def list_backups(
    session: UserSession = Depends(admin_only),
    db: Session = Depends(get_db),
):
    return ApiResponse(data=[_to_read(b) for b in backup_service.list_backups(db)])


@router.post("", response_model=ApiResponse[BackupRead], status_code=201)
@limiter.limit(BACKUP_LIMIT)
def create_backup(
    request: Request,
    session: UserSession = Depends(admin_only),
    db: Session = Depends(get_db),
):
    """Write a new backup archive. Failures surface as 500 after being recorded."""
    backup = backup_service.create_backup(db, created_by_id=session.user_id)
    return ApiResponse(data=_to_read(backup), message="Backup created")


@router.get("/{backup_id}/download", response_class=FileResponse)
def download_backup(
    backup_id: UUID,
    session: UserSession = Depends(admin_only),
    db: Session = Depends(get_db),
) -> FileResponse:
    backup, path = backup_service.get_backup_file(db, backup_id)
    return FileResponse(
        path,
        media_type="application/zip",
        filename=backup.name,
    )
