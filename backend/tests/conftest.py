import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.db.base import Base
from app.main import app
from app.models.period import Period
from app.models.school_class import SchoolClass
from app.models.subject import Subject
from app.models.teacher import Teacher, TeacherPost
from app.services.policy import SubstitutionPolicy
from app.services.store import SqlAlchemySchoolStore
from app.services.substitution_engine import SubstitutionEngine


def _memory_engine():
    return create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture()
def client():
    engine = _memory_engine()
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def db_session():
    engine = _memory_engine()
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture()
def policy():
    return SubstitutionPolicy(
        tier_grades={
            TeacherPost.PGT: (9, 10, 11, 12),
            TeacherPost.TGT: (6, 7, 8, 9, 10),
        },
        max_periods_per_day=6,
    )


@pytest.fixture()
def store(db_session):
    return SqlAlchemySchoolStore(db_session)


@pytest.fixture()
def engine(store, policy):
    return SubstitutionEngine(store, policy)


class SchoolFactory:
    """Creates committed records so engine reads see them."""

    def __init__(self, db, policy):
        self.db = db
        self.policy = policy

    def _save(self, record):
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def teacher(self, name, post=TeacherPost.PGT, subjects=("Mathematics",), **fields):
        phone = fields.pop("phone", "+91 98765 43210")
        fields.setdefault("current_periods", 0)
        fields.setdefault("is_available", True)
        return self._save(
            Teacher(
                name=name,
                phone=phone,
                post=post,
                subjects=list(subjects),
                eligible_grades=list(self.policy.eligible_grades(post)),
                max_periods=self.policy.max_periods_per_day,
                **fields,
            )
        )

    def school_class(self, grade, section="A", subjects=("Mathematics",)):
        return self._save(SchoolClass(grade=grade, section=section, subjects=list(subjects), strength=40))

    def subject(self, name="Mathematics", code=None):
        return self._save(Subject(name=name, code=code or name[:4].upper(), periods_per_week=6))

    def period(self, school_class, subject, teacher, day="monday", period_number=1):
        return self._save(
            Period(
                day=day,
                period_number=period_number,
                class_id=school_class.id,
                subject_id=subject.id,
                teacher_id=teacher.id,
                is_substitution=False,
            )
        )


@pytest.fixture()
def factory(db_session, policy):
    return SchoolFactory(db_session, policy)
