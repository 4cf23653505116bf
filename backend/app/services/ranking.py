from __future__ import annotations

from collections.abc import Iterable

from app.models.teacher import Teacher


def candidate_sort_key(teacher: Teacher, subject_name: str) -> tuple:
    # Subject match first, then lightest load, then display name. The exact
    # name and id make the order total so equal keys never depend on input order.
    subject_match = subject_name in (teacher.subjects or [])
    name = teacher.name or ""
    return (
        0 if subject_match else 1,
        teacher.current_periods,
        name.casefold(),
        name,
        teacher.id,
    )


def rank_candidates(teachers: Iterable[Teacher], subject_name: str) -> list[Teacher]:
    return sorted(teachers, key=lambda teacher: candidate_sort_key(teacher, subject_name))
