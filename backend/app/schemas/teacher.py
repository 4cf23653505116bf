from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.teacher import TeacherPost


def _normalize_subjects(value: list[str]) -> list[str]:
    seen: set[str] = set()
    subjects: list[str] = []
    for item in value:
        name = item.strip()
        if not name or name in seen:
            continue
        if len(name) > 200:
            raise ValueError("Subject name length cannot exceed 200 characters")
        seen.add(name)
        subjects.append(name)
    return subjects


class TeacherBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    phone: str = Field(min_length=3, max_length=50)
    email: EmailStr | None = None
    post: TeacherPost
    subjects: list[str] = Field(min_length=1, max_length=50)

    @field_validator("subjects")
    @classmethod
    def normalize_subjects(cls, value: list[str]) -> list[str]:
        subjects = _normalize_subjects(value)
        if not subjects:
            raise ValueError("At least one subject is required")
        return subjects


class TeacherCreate(TeacherBase):
    pass


class TeacherUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = Field(default=None, min_length=3, max_length=50)
    email: EmailStr | None = None
    post: TeacherPost | None = None
    subjects: list[str] | None = Field(default=None, min_length=1, max_length=50)
    is_available: bool | None = None

    @field_validator("subjects")
    @classmethod
    def normalize_subjects(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        return _normalize_subjects(value)


class TeacherOut(TeacherBase):
    id: str
    eligible_grades: list[int]
    current_periods: int
    max_periods: int
    is_available: bool
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
