"""Case service - client intake and case registration."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from legalaid.core.structured_logging import build_log_context
from legalaid.db.enums import CaseStatus, NotificationType, Role
from legalaid.db.models import Case, Office, User
from legalaid.schemas.case import CaseCreate
from legalaid.services import notification_service
from legalaid.services.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def register_case(db: Session, client_id: UUID, data: CaseCreate) -> Case:
    """
    Register a new case for a client.

    The case starts PENDING with no lawyer. It is filed with the requested
    office, or the client's own office when none is given.
    """
    title = (data.title or "").strip()
    category = (data.category or "").strip()
    errors = []
    if not title:
        errors.append("title is required")
    if not category:
        errors.append("category is required")
    if errors:
        raise ValidationError("Invalid case", errors)

    client = db.get(User, client_id)
    if not client or client.role != Role.CLIENT.value:
        raise NotFoundError("Client not found")

    office_id = data.office_id or client.office_id
    if office_id:
        office = db.get(Office, office_id)
        if not office or not office.is_active:
            raise NotFoundError("Office not found")

    case = Case(
        title=title,
        category=category,
        description=data.description,
        priority=data.priority,
        status=CaseStatus.PENDING.value,
        client_id=client.id,
        office_id=office_id,
    )
    db.add(case)
    db.flush()

    notification_service.create_notification(
        db,
        user_id=client.id,
        type=NotificationType.CASE,
        title="Case registered",
        body=f'Your case "{title}" has been registered and is under review.',
        priority=notification_service.priority_for(case.priority),
        entity_type="case",
        entity_id=case.id,
    )
    db.commit()
    db.refresh(case)

    logger.info(
        "Case registered",
        extra=build_log_context(user_id=str(client.id), case_id=str(case.id)),
    )
    return case
