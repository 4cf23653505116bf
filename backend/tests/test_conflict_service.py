from datetime import datetime

import pytest

from app.core.exceptions import ResourceNotFoundError
from app.models.substitution import SubstitutionStatus
from app.services.conflict_service import ConflictService


@pytest.fixture
def timetable(factory):
    maths = factory.subject("Mathematics", "MATH")
    class_10a = factory.school_class(10, "A")
    class_10b = factory.school_class(10, "B")
    kumar = factory.teacher("Dr. Rajesh Kumar")
    sharma = factory.teacher("Mrs. Priya Sharma")
    first = factory.period(class_10a, maths, kumar, day="monday", period_number=1)
    return {
        "maths": maths,
        "class_10a": class_10a,
        "class_10b": class_10b,
        "kumar": kumar,
        "sharma": sharma,
        "first": first,
    }


def test_slot_conflict_ignores_excluded_period(store, policy, timetable):
    service = ConflictService(store, policy)
    kumar = timetable["kumar"]

    assert service.has_slot_conflict(kumar.id, "monday", 1)
    assert not service.has_slot_conflict(kumar.id, "monday", 1, exclude_period_id=timetable["first"].id)
    assert not service.has_slot_conflict(kumar.id, "monday", 2)
    assert not service.has_slot_conflict(timetable["sharma"].id, "monday", 1)


def test_active_substitution_counts_as_slot_commitment(store, policy, factory, timetable, db_session):
    service = ConflictService(store, policy)
    sharma = timetable["sharma"]
    other = factory.period(timetable["class_10b"], timetable["maths"], timetable["kumar"], day="tuesday", period_number=4)

    substitution = store.add_substitution(
        period_id=other.id,
        original_teacher_id=timetable["kumar"].id,
        substitute_teacher_id=sharma.id,
        date=datetime(2026, 10, 19),
        status=SubstitutionStatus.assigned,
        reason="Leave: Medical",
        auto_assigned=True,
    )
    db_session.commit()
    assert service.has_slot_conflict(sharma.id, "tuesday", 4)

    substitution.status = SubstitutionStatus.cancelled
    db_session.commit()
    assert not service.has_slot_conflict(sharma.id, "tuesday", 4)


def test_daily_cap(store, policy, factory):
    service = ConflictService(store, policy)

    assert service.is_under_daily_cap(factory.teacher("Mr. Amit Patel", current_periods=5))
    assert not service.is_under_daily_cap(factory.teacher("Ms. Sunita Reddy", current_periods=6))
    assert not service.is_under_daily_cap(factory.teacher("Mr. Vikram Singh", current_periods=7))


def test_check_schedule_conflicts_does_not_exclude(store, policy, timetable):
    service = ConflictService(store, policy)

    assert service.check_schedule_conflicts(timetable["kumar"].id, "monday", 1)
    assert not service.check_schedule_conflicts(timetable["kumar"].id, "friday", 1)


def test_weekly_scan_reports_double_booking(store, policy, factory, timetable):
    service = ConflictService(store, policy)
    factory.period(timetable["class_10b"], timetable["maths"], timetable["kumar"], day="monday", period_number=1)

    conflicts = service.check_for_conflicts(timetable["class_10a"].id)

    assert conflicts == ["Teacher Dr. Rajesh Kumar has conflict on monday, Period 1"]
    assert service.check_for_conflicts(timetable["class_10a"].id) == conflicts


def test_weekly_scan_reports_daily_overload_once(store, policy, factory, timetable):
    service = ConflictService(store, policy)
    for period_number in range(2, 8):
        factory.period(timetable["class_10a"], timetable["maths"], timetable["kumar"], day="monday", period_number=period_number)

    conflicts = service.check_for_conflicts(timetable["class_10a"].id)

    assert conflicts == ["Teacher Dr. Rajesh Kumar exceeds 6 periods limit on monday"]


def test_weekly_scan_unknown_class(store, policy):
    with pytest.raises(ResourceNotFoundError):
        ConflictService(store, policy).check_for_conflicts("missing")
