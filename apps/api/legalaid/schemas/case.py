"""Case assignment schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field


class CaseSummary(BaseModel):
    """Case row in the assignment board."""
    model_config = {"from_attributes": True}

    id: UUID
    title: str
    category: str
    priority: str
    status: str
    client_id: UUID
    office_id: UUID | None
    lawyer_id: UUID | None
    assigned_at: datetime | None
    created_at: datetime


class LawyerCandidate(BaseModel):
    """A lawyer with the numbers the assignment board sorts on."""
    id: UUID
    full_name: str
    email: str
    office_id: UUID
    office_name: str
    specializations: list[str]
    current_caseload: int
    max_caseload: int
    is_available: bool
    matches_category: bool = False


class OfficeOption(BaseModel):
    id: UUID
    name: str


class SpecializationOption(BaseModel):
    id: UUID
    name: str
    category: str | None


class AssignmentBoard(BaseModel):
    cases: list[CaseSummary]
    lawyers: list[LawyerCandidate]
    offices: list[OfficeOption]
    specializations: list[SpecializationOption]


class CaseCreate(BaseModel):
    """Schema for POST /cases (client intake)."""
    title: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    priority: Literal["LOW", "MEDIUM", "HIGH", "URGENT"] = "MEDIUM"
    office_id: UUID | None = None


class CaseAssignRequest(BaseModel):
    case_id: UUID
    lawyer_id: UUID
    notes: str | None = Field(None, max_length=2000)
