from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator

from app.services.policy import get_policy

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def normalize_day(value: str) -> str:
    day = value.strip().lower()
    if not get_policy().is_working_day(day):
        raise ValueError(f"Day must be one of: {', '.join(get_policy().working_days)}")
    return day


class SubjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(min_length=1, max_length=50)
    periods_per_week: int = Field(default=0, ge=0, le=60)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return value.strip().upper()


class SubjectOut(SubjectCreate):
    id: str

    model_config = {"from_attributes": True}


class SchoolClassCreate(BaseModel):
    grade: int = Field(ge=1, le=12)
    section: str = Field(default="A", min_length=1, max_length=10)
    subjects: list[str] = Field(default_factory=list, max_length=50)
    strength: int = Field(default=0, ge=0, le=200)
    class_teacher_id: str | None = Field(default=None, max_length=36)


class SchoolClassOut(SchoolClassCreate):
    id: str

    model_config = {"from_attributes": True}


class PeriodCreate(BaseModel):
    day: str
    period_number: int = Field(ge=1, le=20)
    start_time: str | None = None
    end_time: str | None = None
    class_id: str = Field(min_length=1, max_length=36)
    subject_id: str = Field(min_length=1, max_length=36)
    teacher_id: str = Field(min_length=1, max_length=36)

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        return normalize_day(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str | None) -> str | None:
        if value is not None and not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_order(self) -> "PeriodCreate":
        if self.start_time and self.end_time:
            if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
                raise ValueError("end_time must be after start_time")
        return self


class PeriodOut(BaseModel):
    id: str
    day: str
    period_number: int
    start_time: str | None = None
    end_time: str | None = None
    class_id: str
    subject_id: str
    teacher_id: str
    is_substitution: bool
    original_teacher_id: str | None = None

    model_config = {"from_attributes": True}


class ClassConflictsOut(BaseModel):
    class_id: str
    conflicts: list[str]


class DailyWorkloadOut(BaseModel):
    teacher_id: str
    day: str
    regular_periods: int
    substitution_periods: int
    total_periods: int
    can_take_more: bool
    schedule: list[PeriodOut] = Field(default_factory=list)
