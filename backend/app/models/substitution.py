import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class SubstitutionStatus(str, Enum):
    assigned = "assigned"
    completed = "completed"
    cancelled = "cancelled"


class Substitution(Base):
    __tablename__ = "substitutions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    period_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    original_teacher_id: Mapped[str] = mapped_column(String(36), nullable=False)
    substitute_teacher_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    leave_request_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[SubstitutionStatus] = mapped_column(
        SAEnum(SubstitutionStatus, name="substitution_status"),
        nullable=False,
        default=SubstitutionStatus.assigned,
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    auto_assigned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
