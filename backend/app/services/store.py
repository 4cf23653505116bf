from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import StoreError
from app.models.leave_request import LeaveRequest
from app.models.period import Period
from app.models.school_class import SchoolClass
from app.models.subject import Subject
from app.models.substitution import Substitution, SubstitutionStatus
from app.models.teacher import Teacher

logger = logging.getLogger(__name__)


class SchoolStore(Protocol):
    """Record store the substitution engine reads from and writes through.

    Queries must reflect the latest committed state at call time. Writes made
    inside ``transaction()`` are committed together or not at all.
    """

    def get_teachers(self) -> list[Teacher]: ...

    def get_teacher(self, teacher_id: str) -> Teacher | None: ...

    def update_teacher(self, teacher_id: str, **fields: Any) -> Teacher | None: ...

    def get_periods(self) -> list[Period]: ...

    def get_period(self, period_id: str) -> Period | None: ...

    def get_class(self, class_id: str) -> SchoolClass | None: ...

    def get_subject(self, subject_id: str) -> Subject | None: ...

    def get_substitutions(self, status: SubstitutionStatus | None = None) -> list[Substitution]: ...

    def get_substitution(self, substitution_id: str) -> Substitution | None: ...

    def add_substitution(self, **fields: Any) -> Substitution: ...

    def get_leave_requests(self) -> list[LeaveRequest]: ...

    def get_leave_request(self, leave_id: str) -> LeaveRequest | None: ...

    def add_leave_request(self, **fields: Any) -> LeaveRequest: ...

    def transaction(self) -> Any: ...


class SqlAlchemySchoolStore:
    """SchoolStore backed by an SQLAlchemy session.

    Teachers iterate in name order (id breaks ties); this is the store's
    natural order wherever a stable tie-break is needed. Periods iterate by
    day, period number and class.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_teachers(self) -> list[Teacher]:
        query = select(Teacher).order_by(Teacher.name, Teacher.id).execution_options(populate_existing=True)
        return list(self.db.execute(query).scalars())

    def get_teacher(self, teacher_id: str) -> Teacher | None:
        return self.db.get(Teacher, teacher_id, populate_existing=True)

    def update_teacher(self, teacher_id: str, **fields: Any) -> Teacher | None:
        teacher = self.db.get(Teacher, teacher_id)
        if teacher is None:
            return None
        for key, value in fields.items():
            setattr(teacher, key, value)
        self.db.flush()
        return teacher

    def get_periods(self) -> list[Period]:
        query = select(Period).order_by(Period.day, Period.period_number, Period.class_id, Period.id)
        return list(self.db.execute(query).scalars())

    def get_period(self, period_id: str) -> Period | None:
        return self.db.get(Period, period_id)

    def get_class(self, class_id: str) -> SchoolClass | None:
        return self.db.get(SchoolClass, class_id)

    def get_subject(self, subject_id: str) -> Subject | None:
        return self.db.get(Subject, subject_id)

    def get_substitutions(self, status: SubstitutionStatus | None = None) -> list[Substitution]:
        query = select(Substitution)
        if status is not None:
            query = query.where(Substitution.status == status)
        query = query.order_by(Substitution.date, Substitution.id)
        return list(self.db.execute(query).scalars())

    def get_substitution(self, substitution_id: str) -> Substitution | None:
        return self.db.get(Substitution, substitution_id)

    def add_substitution(self, **fields: Any) -> Substitution:
        substitution = Substitution(**fields)
        self.db.add(substitution)
        self.db.flush()
        return substitution

    def get_leave_requests(self) -> list[LeaveRequest]:
        query = select(LeaveRequest).order_by(LeaveRequest.start_date.desc(), LeaveRequest.created_at.desc())
        return list(self.db.execute(query).scalars())

    def get_leave_request(self, leave_id: str) -> LeaveRequest | None:
        return self.db.get(LeaveRequest, leave_id)

    def add_leave_request(self, **fields: Any) -> LeaveRequest:
        request = LeaveRequest(**fields)
        self.db.add(request)
        self.db.flush()
        return request

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Store transaction rolled back")
            raise StoreError("The record store could not complete the write", details={"error": str(exc)}) from exc
        except Exception:
            self.db.rollback()
            raise
