from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone

from app.core.exceptions import ResourceNotFoundError
from app.models.period import Period
from app.models.substitution import SubstitutionStatus
from app.models.teacher import Teacher
from app.services.policy import SubstitutionPolicy
from app.services.store import SchoolStore

MOST_ACTIVE_LIMIT = 5
SUCCESSFUL_STATUSES = {SubstitutionStatus.assigned, SubstitutionStatus.completed}


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class SubstitutionReport:
    total_substitutions: int = 0
    successful_assignments: int = 0
    failed_assignments: int = 0
    teacher_workload: dict[str, int] = field(default_factory=dict)
    most_active_substitutes: list[Teacher] = field(default_factory=list)


@dataclass
class DailyWorkload:
    regular_periods: int
    substitution_periods: int
    total_periods: int
    can_take_more: bool


class SubstitutionReporter:
    def __init__(self, store: SchoolStore, policy: SubstitutionPolicy) -> None:
        self.store = store
        self.policy = policy

    def generate_substitution_report(self, start: datetime, end: datetime) -> SubstitutionReport:
        """Summarise substitutions dated within [start, end].

        Substitutes with equal counts keep the store's teacher order.
        """
        start_utc, end_utc = _as_utc(start), _as_utc(end)
        in_range = [
            item for item in self.store.get_substitutions() if start_utc <= _as_utc(item.date) <= end_utc
        ]

        successful = sum(1 for item in in_range if item.status in SUCCESSFUL_STATUSES)
        workload = Counter(item.substitute_teacher_id for item in in_range)

        active = [teacher for teacher in self.store.get_teachers() if workload.get(teacher.id, 0) > 0]
        active.sort(key=lambda teacher: -workload[teacher.id])

        return SubstitutionReport(
            total_substitutions=len(in_range),
            successful_assignments=successful,
            failed_assignments=len(in_range) - successful,
            teacher_workload=dict(workload),
            most_active_substitutes=active[:MOST_ACTIVE_LIMIT],
        )

    def get_teacher_day_schedule(self, teacher_id: str, day: str) -> list[Period]:
        return sorted(
            (period for period in self.store.get_periods() if period.teacher_id == teacher_id and period.day == day),
            key=lambda period: period.period_number,
        )

    def calculate_daily_workload(self, teacher_id: str, day: str) -> DailyWorkload:
        if self.store.get_teacher(teacher_id) is None:
            raise ResourceNotFoundError("Teacher", teacher_id)
        schedule = self.get_teacher_day_schedule(teacher_id, day)
        substitution_periods = sum(1 for period in schedule if period.is_substitution)
        return DailyWorkload(
            regular_periods=len(schedule) - substitution_periods,
            substitution_periods=substitution_periods,
            total_periods=len(schedule),
            can_take_more=len(schedule) < self.policy.max_periods_per_day,
        )
