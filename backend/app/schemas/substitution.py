from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.models.substitution import SubstitutionStatus
from app.schemas.teacher import TeacherOut


class SubstitutionOut(BaseModel):
    id: str
    period_id: str
    original_teacher_id: str
    substitute_teacher_id: str
    leave_request_id: str | None = None
    date: datetime
    status: SubstitutionStatus
    reason: str
    auto_assigned: bool
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class SubstitutionOverviewOut(BaseModel):
    substitutions: list[SubstitutionOut]
    active: list[SubstitutionOut]


class ManualSubstitutionCreate(BaseModel):
    period_id: str = Field(min_length=1, max_length=36)
    original_teacher_id: str = Field(min_length=1, max_length=36)
    substitute_teacher_id: str = Field(min_length=1, max_length=36)
    reason: str = Field(min_length=3, max_length=1000)


class SubstitutionStatusUpdate(BaseModel):
    status: Literal["completed", "cancelled"]


class AssignmentValidationRequest(BaseModel):
    teacher_id: str = Field(min_length=1, max_length=36)
    class_grade: int = Field(ge=1, le=12)
    subject_name: str = Field(min_length=1, max_length=200)


class AssignmentValidationOut(BaseModel):
    is_valid: bool
    errors: list[str]

    model_config = {"from_attributes": True}


class CandidateListOut(BaseModel):
    period_id: str
    candidates: list[TeacherOut]
    total: int


class SlotConflictOut(BaseModel):
    teacher_id: str
    day: str
    period_number: int
    has_conflict: bool


class SubstitutionReportOut(BaseModel):
    start_date: date
    end_date: date
    total_substitutions: int
    successful_assignments: int
    failed_assignments: int
    teacher_workload: dict[str, int]
    most_active_substitutes: list[TeacherOut]

    model_config = {"from_attributes": True}
