"""Case assignment service - matching cases to lawyers.

Lawyer selection is filter-then-sort: availability, office and caseload
filter the candidates; category match, caseload and name order them.
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from legalaid.core.structured_logging import build_log_context
from legalaid.db.enums import (
    OPEN_CASE_STATUSES,
    CaseStatus,
    NotificationType,
    Role,
)
from legalaid.db.models import (
    Case,
    CaseAssignment,
    LawyerProfile,
    LegalSpecialization,
    Office,
    User,
)
from legalaid.schemas.case import (
    AssignmentBoard,
    CaseSummary,
    LawyerCandidate,
    OfficeOption,
    SpecializationOption,
)
from legalaid.services import notification_service
from legalaid.services.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def caseloads(db: Session, lawyer_ids: list[UUID]) -> dict[UUID, int]:
    """Open (ACTIVE/PENDING) case counts per lawyer."""
    if not lawyer_ids:
        return {}
    rows = db.execute(
        select(Case.lawyer_id, func.count(Case.id))
        .where(
            Case.lawyer_id.in_(lawyer_ids),
            Case.status.in_(OPEN_CASE_STATUSES),
        )
        .group_by(Case.lawyer_id)
    ).all()
    return {lawyer_id: count for lawyer_id, count in rows}


def _lawyer_query(office_id: UUID | None = None, specialization: str | None = None):
    query = (
        select(User)
        .join(LawyerProfile, LawyerProfile.user_id == User.id)
        .options(
            selectinload(User.lawyer_profile).selectinload(LawyerProfile.specializations),
            selectinload(User.lawyer_profile).selectinload(LawyerProfile.office),
        )
        .where(User.role == Role.LAWYER.value, User.is_active.is_(True))
    )
    if office_id:
        query = query.where(LawyerProfile.office_id == office_id)
    if specialization:
        query = query.where(
            LawyerProfile.specializations.any(LegalSpecialization.name == specialization)
        )
    return query


def _to_candidate(
    lawyer: User,
    caseload: int,
    category: str | None = None,
) -> LawyerCandidate:
    profile = lawyer.lawyer_profile
    names = sorted(spec.name for spec in profile.specializations)
    return LawyerCandidate(
        id=lawyer.id,
        full_name=lawyer.full_name,
        email=lawyer.email,
        office_id=profile.office_id,
        office_name=profile.office.name,
        specializations=names,
        current_caseload=caseload,
        max_caseload=profile.max_caseload,
        is_available=profile.is_available,
        matches_category=bool(category) and category in names,
    )


def list_lawyers(
    db: Session,
    office_id: UUID | None = None,
    specialization: str | None = None,
) -> list[LawyerCandidate]:
    """Active lawyers with profiles, lightest caseload first."""
    lawyers = db.execute(_lawyer_query(office_id, specialization)).scalars().all()
    loads = caseloads(db, [lawyer.id for lawyer in lawyers])
    candidates = [_to_candidate(lawyer, loads.get(lawyer.id, 0)) for lawyer in lawyers]
    candidates.sort(key=lambda c: (c.current_caseload, c.full_name.lower()))
    return candidates


def list_assignable_cases(
    db: Session,
    office_id: UUID | None = None,
    status: CaseStatus | None = None,
) -> list[Case]:
    """Cases without a lawyer or still PENDING, newest first."""
    query = select(Case).where(
        or_(Case.lawyer_id.is_(None), Case.status == CaseStatus.PENDING.value)
    )
    if office_id:
        query = query.where(Case.office_id == office_id)
    if status:
        query = query.where(Case.status == status.value)
    query = query.order_by(Case.created_at.desc())
    return list(db.execute(query).scalars().all())


def get_assignment_board(
    db: Session,
    office_id: UUID | None = None,
    specialization: str | None = None,
    status: CaseStatus | None = None,
) -> AssignmentBoard:
    """Everything the assignment screen needs in one call."""
    cases = list_assignable_cases(db, office_id, status)
    lawyers = list_lawyers(db, office_id, specialization)
    offices = db.execute(
        select(Office).where(Office.is_active.is_(True)).order_by(Office.name)
    ).scalars().all()
    specializations = db.execute(
        select(LegalSpecialization).order_by(LegalSpecialization.name)
    ).scalars().all()

    return AssignmentBoard(
        cases=[CaseSummary.model_validate(case) for case in cases],
        lawyers=lawyers,
        offices=[OfficeOption(id=o.id, name=o.name) for o in offices],
        specializations=[
            SpecializationOption(id=s.id, name=s.name, category=s.category)
            for s in specializations
        ],
    )


def _get_case(db: Session, case_id: UUID) -> Case:
    case = db.get(Case, case_id)
    if not case:
        raise NotFoundError("Case not found")
    return case


def suggest_lawyers(db: Session, case_id: UUID, limit: int = 5) -> list[LawyerCandidate]:
    """
    Rank lawyers for a case.

    Only available lawyers in the case's office with spare capacity qualify.
    Specialists in the case category come first, then lighter caseloads.
    """
    case = _get_case(db, case_id)

    query = _lawyer_query(office_id=case.office_id).where(
        LawyerProfile.is_available.is_(True)
    )
    lawyers = db.execute(query).scalars().all()
    loads = caseloads(db, [lawyer.id for lawyer in lawyers])

    candidates = [
        _to_candidate(lawyer, loads.get(lawyer.id, 0), category=case.category)
        for lawyer in lawyers
    ]
    candidates = [c for c in candidates if c.current_caseload < c.max_caseload]
    candidates.sort(
        key=lambda c: (not c.matches_category, c.current_caseload, c.full_name.lower())
    )
    return candidates[:limit]


def assign_case(
    db: Session,
    case_id: UUID,
    lawyer_id: UUID,
    assigned_by_id: UUID,
    notes: str | None = None,
) -> Case:
    """Assign a case to a lawyer and notify both the lawyer and the client."""
    case = _get_case(db, case_id)

    lawyer = db.execute(
        select(User).where(User.id == lawyer_id, User.role == Role.LAWYER.value)
    ).scalar_one_or_none()
    if not lawyer:
        raise NotFoundError("Lawyer not found")

    profile = lawyer.lawyer_profile
    if not profile:
        raise ValidationError("Lawyer has no profile")
    if not lawyer.is_active or not profile.is_available:
        raise ValidationError("Lawyer is not available")

    current = caseloads(db, [lawyer.id]).get(lawyer.id, 0)
    if case.lawyer_id == lawyer.id and case.status in OPEN_CASE_STATUSES:
        # Re-assigning to the same lawyer does not add to their load
        current -= 1
    if current >= profile.max_caseload:
        raise ValidationError(
            "Lawyer has reached maximum caseload",
            [f"{current} of {profile.max_caseload} open cases"],
        )

    now = datetime.now(timezone.utc)
    case.lawyer_id = lawyer.id
    case.status = CaseStatus.ACTIVE.value
    case.assigned_at = now
    case.assignment_notes = notes

    db.add(CaseAssignment(
        case_id=case.id,
        assigned_by_id=assigned_by_id,
        assigned_to_id=lawyer.id,
        notes=notes,
    ))

    priority = notification_service.priority_for(case.priority)
    notification_service.create_notification(
        db,
        user_id=lawyer.id,
        type=NotificationType.CASE,
        title="New case assigned",
        body=f"You have been assigned to case: {case.title}",
        priority=priority,
        entity_type="case",
        entity_id=case.id,
    )
    notification_service.create_notification(
        db,
        user_id=case.client_id,
        type=NotificationType.CASE,
        title="Lawyer assigned",
        body=f"{lawyer.full_name} has been assigned to your case: {case.title}",
        priority=priority,
        entity_type="case",
        entity_id=case.id,
    )
    db.commit()
    db.refresh(case)

    logger.info(
        "Case assigned",
        extra=build_log_context(case_id=str(case.id), user_id=str(lawyer.id)),
    )
    return case
