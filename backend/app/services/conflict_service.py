from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from app.core.exceptions import ResourceNotFoundError
from app.models.period import Period
from app.models.substitution import SubstitutionStatus
from app.models.teacher import Teacher
from app.services.policy import SubstitutionPolicy
from app.services.store import SchoolStore


class ConflictService:
    """Slot and daily-cap checks against the store's current timetable."""

    def __init__(self, store: SchoolStore, policy: SubstitutionPolicy):
        self.store = store
        self.policy = policy

    def has_slot_conflict(
        self,
        teacher_id: str,
        day: str,
        period_number: int,
        exclude_period_id: Optional[str] = None,
    ) -> bool:
        """True if the teacher is committed to another period at (day, period_number).

        A commitment is either a regular period assignment or an active
        substitution covering some other period at that slot.
        """
        periods = self.store.get_periods()
        for period in periods:
            if period.id == exclude_period_id:
                continue
            if period.teacher_id == teacher_id and period.day == day and period.period_number == period_number:
                return True

        periods_by_id = {period.id: period for period in periods}
        for substitution in self.store.get_substitutions(status=SubstitutionStatus.assigned):
            if substitution.substitute_teacher_id != teacher_id:
                continue
            if substitution.period_id == exclude_period_id:
                continue
            covered = periods_by_id.get(substitution.period_id)
            if covered is not None and covered.day == day and covered.period_number == period_number:
                return True
        return False

    def is_under_daily_cap(self, teacher: Teacher) -> bool:
        return teacher.current_periods < self.policy.max_periods_per_day

    def check_schedule_conflicts(self, teacher_id: str, day: str, period_number: int) -> bool:
        return any(
            period.teacher_id == teacher_id and period.day == day and period.period_number == period_number
            for period in self.store.get_periods()
        )

    def check_for_conflicts(self, class_id: str) -> List[str]:
        if self.store.get_class(class_id) is None:
            raise ResourceNotFoundError("Class", class_id)

        periods = self.store.get_periods()
        teacher_names: Dict[str, str] = {teacher.id: teacher.name for teacher in self.store.get_teachers()}

        # Bucket once by slot and by (teacher, day) instead of rescanning per period.
        by_slot: Dict[Tuple[str, str, int], List[Period]] = defaultdict(list)
        by_teacher_day: Dict[Tuple[str, str], int] = defaultdict(int)
        for period in periods:
            by_slot[(period.teacher_id, period.day, period.period_number)].append(period)
            by_teacher_day[(period.teacher_id, period.day)] += 1

        class_periods = sorted(
            (period for period in periods if period.class_id == class_id),
            key=lambda item: (self._day_index(item.day), item.period_number),
        )

        conflicts: List[str] = []
        seen: set[str] = set()
        cap = self.policy.max_periods_per_day
        for period in class_periods:
            name = teacher_names.get(period.teacher_id, period.teacher_id)
            messages = []
            if len(by_slot[(period.teacher_id, period.day, period.period_number)]) > 1:
                messages.append(f"Teacher {name} has conflict on {period.day}, Period {period.period_number}")
            if by_teacher_day[(period.teacher_id, period.day)] > cap:
                messages.append(f"Teacher {name} exceeds {cap} periods limit on {period.day}")
            for message in messages:
                if message not in seen:
                    seen.add(message)
                    conflicts.append(message)
        return conflicts

    def _day_index(self, day: str) -> int:
        if day in self.policy.working_days:
            return self.policy.working_days.index(day)
        return len(self.policy.working_days)
