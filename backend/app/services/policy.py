from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from app.core.config import Settings, get_settings
from app.core.exceptions import ConfigurationError
from app.models.teacher import TeacherPost


@dataclass(frozen=True)
class SubstitutionPolicy:
    """Policy constants shared by eligibility, conflict and reporting checks."""

    tier_grades: dict[TeacherPost, tuple[int, ...]]
    max_periods_per_day: int = 6
    working_days: tuple[str, ...] = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday")

    @classmethod
    def from_settings(cls, settings: Settings) -> "SubstitutionPolicy":
        if not settings.working_days:
            raise ConfigurationError("At least one working day must be configured")
        return cls(
            tier_grades={
                TeacherPost.PGT: tuple(sorted(set(settings.pgt_eligible_grades))),
                TeacherPost.TGT: tuple(sorted(set(settings.tgt_eligible_grades))),
            },
            max_periods_per_day=settings.max_periods_per_day,
            working_days=tuple(settings.working_days),
        )

    def eligible_grades(self, post: TeacherPost | str) -> tuple[int, ...]:
        try:
            return self.tier_grades[TeacherPost(post)]
        except (KeyError, ValueError):
            return ()

    def is_working_day(self, day: str) -> bool:
        return (day or "").strip().lower() in self.working_days


def describe_grades(grades: tuple[int, ...]) -> str:
    return ", ".join(str(grade) for grade in grades)


@lru_cache
def get_policy() -> SubstitutionPolicy:
    return SubstitutionPolicy.from_settings(get_settings())
