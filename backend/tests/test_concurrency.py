from threading import Barrier, Thread

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker

from app.db.base import Base
from app.models.period import Period
from app.models.school_class import SchoolClass
from app.models.subject import Subject
from app.models.substitution import Substitution
from app.models.teacher import Teacher, TeacherPost
from app.services.store import SqlAlchemySchoolStore
from app.services.substitution_engine import SubstitutionEngine


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'concurrency.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def _seed(session_factory, policy, *, candidate_load, slots):
    """One candidate and one absent teacher per slot, each absent teacher teaching a grade 11 class."""
    with session_factory() as db:
        maths = Subject(name="Mathematics", code="MATH", periods_per_week=6)
        candidate = Teacher(
            name="Anita Desai",
            phone="000",
            post=TeacherPost.PGT,
            subjects=["Mathematics"],
            eligible_grades=list(policy.eligible_grades(TeacherPost.PGT)),
            current_periods=candidate_load,
            is_available=True,
        )
        db.add_all([maths, candidate])
        db.flush()
        pairs = []
        for index, (day, period_number) in enumerate(slots):
            absent = Teacher(
                name=f"Absent {index}",
                phone="000",
                post=TeacherPost.PGT,
                subjects=["Physics"],
                eligible_grades=list(policy.eligible_grades(TeacherPost.PGT)),
                current_periods=0,
                is_available=True,
            )
            school_class = SchoolClass(grade=11, section=chr(ord("A") + index), subjects=["Mathematics"])
            db.add_all([absent, school_class])
            db.flush()
            period = Period(
                day=day,
                period_number=period_number,
                class_id=school_class.id,
                subject_id=maths.id,
                teacher_id=absent.id,
                is_substitution=False,
            )
            db.add(period)
            db.flush()
            pairs.append((period.id, absent.id))
        db.commit()
        return candidate.id, pairs


def _run_concurrently(session_factory, policy, pairs):
    barrier = Barrier(len(pairs))
    results = []
    errors = []

    def worker(period_id, absent_id):
        db = session_factory()
        try:
            engine = SubstitutionEngine(SqlAlchemySchoolStore(db), policy)
            period = engine.store.get_period(period_id)
            barrier.wait()
            substitution = engine.assign_substitute(period, absent_id, "Leave: Medical")
            results.append(substitution.substitute_teacher_id if substitution is not None else None)
        except Exception as exc:  # surfaced through the assertion below
            errors.append(exc)
        finally:
            db.close()

    threads = [Thread(target=worker, args=pair) for pair in pairs]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    assert errors == []
    return results


def _state(session_factory, candidate_id):
    with session_factory() as db:
        count = db.execute(select(func.count()).select_from(Substitution)).scalar_one()
        return count, db.get(Teacher, candidate_id).current_periods


def test_same_slot_is_never_double_booked(session_factory, policy):
    candidate_id, pairs = _seed(session_factory, policy, candidate_load=0, slots=[("monday", 3), ("monday", 3)])

    results = _run_concurrently(session_factory, policy, pairs)

    assert sorted(results, key=lambda item: item is None) == [candidate_id, None]
    assert _state(session_factory, candidate_id) == (1, 1)


def test_daily_cap_holds_under_concurrent_assignment(session_factory, policy):
    candidate_id, pairs = _seed(session_factory, policy, candidate_load=5, slots=[("monday", 3), ("monday", 4)])

    results = _run_concurrently(session_factory, policy, pairs)

    assert results.count(candidate_id) == 1
    assert results.count(None) == 1
    assert _state(session_factory, candidate_id) == (1, 6)
