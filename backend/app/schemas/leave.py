from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.leave_request import LeaveStatus
from app.schemas.substitution import SubstitutionOut
from app.schemas.timetable import PeriodOut


class LeaveRequestCreate(BaseModel):
    teacher_id: str = Field(min_length=1, max_length=36)
    start_date: date
    end_date: date
    reason: str = Field(min_length=3, max_length=1000)
    affected_periods: list[str] = Field(default_factory=list, max_length=200)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, value: str) -> str:
        return value.strip()

    @field_validator("affected_periods")
    @classmethod
    def dedupe_periods(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(item.strip() for item in value if item.strip()))

    @model_validator(mode="after")
    def validate_range(self) -> "LeaveRequestCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class LeaveRequestOut(BaseModel):
    id: str
    teacher_id: str
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    affected_periods: list[str]
    substitutions: list[SubstitutionOut] = Field(default_factory=list)
    reviewed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class LeaveApprovalOut(BaseModel):
    leave_request: LeaveRequestOut
    substitutions: list[SubstitutionOut]
    failed_periods: list[PeriodOut]
    message: str
