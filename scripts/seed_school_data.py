"""Seed sample school data for the substitution desk.

Run:
  PYTHONPATH=backend python scripts/seed_school_data.py
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.db.bootstrap import ensure_runtime_schema_compatibility
from app.db.session import SessionLocal
from app.models.period import Period
from app.models.school_class import SchoolClass
from app.models.subject import Subject
from app.models.teacher import Teacher, TeacherPost
from app.services.policy import get_policy

logger = logging.getLogger("seed_school_data")

SUBJECTS = [
    ("Mathematics", "MATH", 6),
    ("Physics", "PHY", 5),
    ("Chemistry", "CHEM", 5),
    ("Biology", "BIO", 5),
    ("English", "ENG", 4),
    ("Hindi", "HIN", 4),
    ("Social Science", "SST", 4),
    ("Computer Science", "CS", 3),
]

TEACHERS = [
    {
        "name": "Dr. Rajesh Kumar",
        "phone": "+91-9876543210",
        "email": "rajesh.kumar@school.edu",
        "post": TeacherPost.PGT,
        "subjects": ["Mathematics", "Physics"],
    },
    {
        "name": "Mrs. Priya Sharma",
        "phone": "+91-9876543211",
        "email": "priya.sharma@school.edu",
        "post": TeacherPost.TGT,
        "subjects": ["English", "Hindi"],
    },
    {
        "name": "Mr. Amit Singh",
        "phone": "+91-9876543212",
        "email": "amit.singh@school.edu",
        "post": TeacherPost.PGT,
        "subjects": ["Chemistry", "Biology"],
    },
    {
        "name": "Ms. Sunita Gupta",
        "phone": "+91-9876543213",
        "email": "sunita.gupta@school.edu",
        "post": TeacherPost.TGT,
        "subjects": ["Social Science", "English"],
    },
]

CLASSES = [
    (9, "A", ["Mathematics", "Physics", "Chemistry", "Biology", "English", "Hindi"], 35),
    (9, "B", ["Mathematics", "Physics", "Chemistry", "Biology", "English", "Hindi"], 32),
    (10, "A", ["Mathematics", "Physics", "Chemistry", "Biology", "English", "Hindi", "Computer Science"], 30),
    (8, "A", ["Mathematics", "English", "Hindi", "Social Science"], 38),
]

TIME_SLOTS = [
    (1, "09:00", "09:40"),
    (2, "09:40", "10:20"),
    (3, "10:35", "11:15"),
    (4, "11:15", "11:55"),
    (5, "12:40", "13:20"),
    (6, "13:20", "14:00"),
    (7, "14:00", "14:40"),
    (8, "14:40", "15:20"),
]


def upsert_subjects(session) -> dict[str, Subject]:
    subjects: dict[str, Subject] = {}
    for name, code, periods_per_week in SUBJECTS:
        subject = session.execute(select(Subject).where(Subject.code == code)).scalar_one_or_none()
        if subject is None:
            subject = Subject(name=name, code=code, periods_per_week=periods_per_week)
            session.add(subject)
        else:
            subject.name = name
            subject.periods_per_week = periods_per_week
        subjects[name] = subject
    session.flush()
    return subjects


def upsert_teachers(session) -> list[Teacher]:
    policy = get_policy()
    teachers: list[Teacher] = []
    for profile in TEACHERS:
        teacher = session.execute(
            select(Teacher).where(func.lower(Teacher.email) == profile["email"].lower())
        ).scalar_one_or_none()
        if teacher is None:
            teacher = Teacher(current_periods=0, is_available=True, **profile)
            session.add(teacher)
        else:
            for key, value in profile.items():
                setattr(teacher, key, value)
        teacher.eligible_grades = list(policy.eligible_grades(profile["post"]))
        teacher.max_periods = policy.max_periods_per_day
        teachers.append(teacher)
    session.flush()
    return teachers


def upsert_classes(session) -> list[SchoolClass]:
    classes: list[SchoolClass] = []
    for grade, section, subjects, strength in CLASSES:
        school_class = session.execute(
            select(SchoolClass).where(SchoolClass.grade == grade, SchoolClass.section == section)
        ).scalar_one_or_none()
        if school_class is None:
            school_class = SchoolClass(grade=grade, section=section)
            session.add(school_class)
        school_class.subjects = subjects
        school_class.strength = strength
        classes.append(school_class)
    session.flush()
    return classes


def seed_periods(session, classes, subjects, teachers) -> int:
    """Lay out a rotating weekly timetable, skipping slots no teacher can take."""
    if session.execute(select(func.count(Period.id))).scalar_one():
        logger.info("Periods already present; timetable left unchanged")
        return 0

    policy = get_policy()
    booked: set[tuple[str, str, int]] = set()
    daily_load: dict[tuple[str, str], int] = {}
    created = 0
    for school_class in classes:
        for day_index, day in enumerate(policy.working_days):
            for slot_index, (period_number, start_time, end_time) in enumerate(TIME_SLOTS):
                subject_name = school_class.subjects[(day_index * 6 + slot_index) % len(school_class.subjects)]
                teacher = next(
                    (
                        item
                        for item in teachers
                        if subject_name in item.subjects
                        and school_class.grade in policy.eligible_grades(item.post)
                        and (item.id, day, period_number) not in booked
                        and daily_load.get((item.id, day), 0) < policy.max_periods_per_day
                    ),
                    None,
                )
                if teacher is None:
                    continue
                session.add(
                    Period(
                        day=day,
                        period_number=period_number,
                        start_time=start_time,
                        end_time=end_time,
                        class_id=school_class.id,
                        subject_id=subjects[subject_name].id,
                        teacher_id=teacher.id,
                        is_substitution=False,
                    )
                )
                booked.add((teacher.id, day, period_number))
                daily_load[(teacher.id, day)] = daily_load.get((teacher.id, day), 0) + 1
                created += 1
    session.flush()
    return created


def main() -> None:
    configure_logging(get_settings().log_level)
    ensure_runtime_schema_compatibility()
    with SessionLocal() as session:
        subjects = upsert_subjects(session)
        teachers = upsert_teachers(session)
        classes = upsert_classes(session)
        period_count = seed_periods(session, classes, subjects, teachers)
        session.commit()

        teacher_count = session.execute(select(func.count(Teacher.id))).scalar_one()
        class_count = session.execute(select(func.count(SchoolClass.id))).scalar_one()

    print("School data seeded successfully.")
    print("")
    print(f"Teachers: {teacher_count}")
    print(f"Classes: {class_count}")
    print(f"Subjects: {len(subjects)}")
    print(f"Periods created: {period_count}")


if __name__ == "__main__":
    main()
