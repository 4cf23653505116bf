from __future__ import annotations

from app.models.teacher import Teacher
from app.services.policy import SubstitutionPolicy


def is_post_eligible(policy: SubstitutionPolicy, teacher: Teacher, class_grade: int) -> bool:
    return class_grade in policy.eligible_grades(teacher.post)


def teaches_subject(teacher: Teacher, subject_name: str) -> bool:
    return subject_name in (teacher.subjects or [])


def is_eligible(policy: SubstitutionPolicy, teacher: Teacher, class_grade: int, subject_name: str) -> bool:
    """Post/grade mapping, exact subject match and availability must all hold."""
    if not is_post_eligible(policy, teacher, class_grade):
        return False
    if not teaches_subject(teacher, subject_name):
        return False
    return bool(teacher.is_available)
