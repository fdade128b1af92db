"""Cases router - client case registration and lawyer assignment."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from legalaid.core.deps import get_db, require_roles
from legalaid.db.enums import CaseStatus, Role
from legalaid.schemas.auth import UserSession
from legalaid.schemas.case import (
    AssignmentBoard,
    CaseAssignRequest,
    CaseCreate,
    CaseSummary,
    LawyerCandidate,
)
from legalaid.schemas.envelope import ApiResponse
from legalaid.services import assignment_service, case_service

router = APIRouter()

can_assign = require_roles([Role.ADMIN, Role.COORDINATOR])
client_only = require_roles([Role.CLIENT])


@router.post("", response_model=ApiResponse[CaseSummary], status_code=201)
def register_case(
    data: CaseCreate,
    session: UserSession = Depends(client_only),
    db: Session = Depends(get_db),
):
    """Client intake: register a new PENDING case for the caller."""
    case = case_service.register_case(db, client_id=session.user_id, data=data)
    return ApiResponse(data=CaseSummary.model_validate(case), message="Case registered")


@router.get("/assign", response_model=ApiResponse[AssignmentBoard])
def get_assignment_board(
    office_id: UUID | None = Query(None),
    specialization: str | None = Query(None, max_length=100),
    status: CaseStatus | None = Query(None),
    session: UserSession = Depends(can_assign),
    db: Session = Depends(get_db),
):
    """Unassigned/pending cases plus lawyers ordered by caseload."""
    board = assignment_service.get_assignment_board(
        db, office_id=office_id, specialization=specialization, status=status
    )
    return ApiResponse(data=board)


@router.post("/assign", response_model=ApiResponse[CaseSummary])
def assign_case(
    data: CaseAssignRequest,
    session: UserSession = Depends(can_assign),
    db: Session = Depends(get_db),
):
    case = assignment_service.assign_case(
        db,
        case_id=data.case_id,
        lawyer_id=data.lawyer_id,
        assigned_by_id=session.user_id,
        notes=data.notes,
    )
    return ApiResponse(data=CaseSummary.model_validate(case), message="Case assigned")


@router.get("/{case_id}/suggested-lawyers", response_model=ApiResponse[list[LawyerCandidate]])
def suggested_lawyers(
    case_id: UUID,
    limit: int = Query(5, ge=1, le=50),
    session: UserSession = Depends(can_assign),
    db: Session = Depends(get_db),
):
    return ApiResponse(data=assignment_service.suggest_lawyers(db, case_id, limit=limit))
