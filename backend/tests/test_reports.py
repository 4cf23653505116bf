from datetime import datetime, timezone

import pytest

from app.core.exceptions import ResourceNotFoundError
from app.models.substitution import SubstitutionStatus


def _record(store, period, original, substitute, when, status=SubstitutionStatus.assigned):
    return store.add_substitution(
        period_id=period.id,
        original_teacher_id=original.id,
        substitute_teacher_id=substitute.id,
        date=when,
        status=status,
        reason="Leave: Conference",
        auto_assigned=True,
    )


@pytest.fixture
def history(factory, store, db_session):
    maths = factory.subject("Mathematics", "MATH")
    class_11a = factory.school_class(11, "A")
    absent = factory.teacher("Dr. Rajesh Kumar")
    teachers = [factory.teacher(name) for name in ("Farah Khan", "Gita Iyer", "Hari Das", "Isha Roy", "Jai Sen", "Kiran Bose")]
    period = factory.period(class_11a, maths, absent, day="wednesday", period_number=2)

    in_range = datetime(2026, 10, 14, 9, 0, tzinfo=timezone.utc)
    _record(store, period, absent, teachers[2], in_range)
    _record(store, period, absent, teachers[2], in_range, status=SubstitutionStatus.completed)
    _record(store, period, absent, teachers[2], in_range, status=SubstitutionStatus.cancelled)
    _record(store, period, absent, teachers[1], in_range)
    _record(store, period, absent, teachers[1], in_range)
    _record(store, period, absent, teachers[0], in_range)
    for teacher in teachers[3:]:
        _record(store, period, absent, teacher, in_range)
    _record(store, period, absent, teachers[5], datetime(2026, 9, 1, 9, 0, tzinfo=timezone.utc))
    db_session.commit()
    return {"absent": absent, "teachers": teachers, "period": period}


def test_report_counts_and_most_active(engine, history):
    teachers = history["teachers"]
    report = engine.generate_substitution_report(
        datetime(2026, 10, 1, tzinfo=timezone.utc),
        datetime(2026, 10, 31, 23, 59, tzinfo=timezone.utc),
    )

    assert report.total_substitutions == 9
    assert report.successful_assignments == 8
    assert report.failed_assignments == 1
    assert report.teacher_workload[teachers[2].id] == 3
    assert report.teacher_workload[teachers[1].id] == 2
    assert teachers[5].id in report.teacher_workload
    # Equal counts keep name order; only five are returned.
    assert [teacher.name for teacher in report.most_active_substitutes] == [
        "Hari Das",
        "Gita Iyer",
        "Farah Khan",
        "Isha Roy",
        "Jai Sen",
    ]


def test_report_range_is_inclusive(engine, history):
    moment = datetime(2026, 9, 1, 9, 0, tzinfo=timezone.utc)

    report = engine.generate_substitution_report(moment, moment)

    assert report.total_substitutions == 1
    assert report.teacher_workload == {history["teachers"][5].id: 1}


def test_report_on_empty_range(engine, history):
    report = engine.generate_substitution_report(
        datetime(2025, 1, 1, tzinfo=timezone.utc),
        datetime(2025, 1, 31, tzinfo=timezone.utc),
    )

    assert report.total_substitutions == 0
    assert report.most_active_substitutes == []


def test_daily_workload(engine, factory):
    maths = factory.subject("Mathematics", "MATH")
    class_9a = factory.school_class(9, "A")
    class_9b = factory.school_class(9, "B")
    teacher = factory.teacher("Mrs. Neha Verma")
    for period_number in (4, 1, 2):
        factory.period(class_9a, maths, teacher, day="thursday", period_number=period_number)
    covered = factory.period(class_9b, maths, teacher, day="thursday", period_number=5)
    covered.is_substitution = True
    factory.db.commit()

    workload = engine.calculate_daily_workload(teacher.id, "thursday")
    schedule = engine.get_teacher_day_schedule(teacher.id, "thursday")

    assert workload.regular_periods == 3
    assert workload.substitution_periods == 1
    assert workload.total_periods == 4
    assert workload.can_take_more is True
    assert [period.period_number for period in schedule] == [1, 2, 4, 5]


def test_daily_workload_unknown_teacher(engine):
    with pytest.raises(ResourceNotFoundError):
        engine.calculate_daily_workload("missing", "monday")
