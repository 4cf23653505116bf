"""Substitute assignment for periods left vacant by teacher leave.

Assignment is greedy and per period: filter the teacher pool by eligibility,
slot conflicts and the daily cap, rank the survivors, and commit the best one.
A leave request is swept period by period with no rollback across periods.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from threading import Lock
from typing import Callable

from app.core.exceptions import AssignmentValidationError, ResourceNotFoundError
from app.models.leave_request import LeaveRequest
from app.models.period import Period
from app.models.school_class import SchoolClass
from app.models.subject import Subject
from app.models.substitution import Substitution, SubstitutionStatus
from app.models.teacher import Teacher, TeacherPost
from app.services.conflict_service import ConflictService
from app.services.eligibility import is_eligible, is_post_eligible, teaches_subject
from app.services.policy import SubstitutionPolicy, describe_grades
from app.services.ranking import rank_candidates
from app.services.reporting import DailyWorkload, SubstitutionReport, SubstitutionReporter
from app.services.store import SchoolStore

logger = logging.getLogger(__name__)

# Shared by every engine instance in the process: candidate scan and commit
# for one assignment run while no other assignment does.
_ASSIGNMENT_LOCK = Lock()

DEFAULT_LEAVE_REASON_PREFIX = "Leave: "


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AssignmentValidation:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class LeaveBatchResult:
    successful: list[Substitution] = field(default_factory=list)
    failed: list[Period] = field(default_factory=list)


class SubstitutionEngine:
    def __init__(
        self,
        store: SchoolStore,
        policy: SubstitutionPolicy,
        *,
        lock: Lock | None = None,
        clock: Callable[[], datetime] | None = None,
        leave_reason_prefix: str = DEFAULT_LEAVE_REASON_PREFIX,
    ) -> None:
        self.store = store
        self.policy = policy
        self.conflicts = ConflictService(store, policy)
        self.reporter = SubstitutionReporter(store, policy)
        self.leave_reason_prefix = leave_reason_prefix
        self._lock = lock if lock is not None else _ASSIGNMENT_LOCK
        self._clock = clock or _utc_now

    def _period_context(self, period: Period) -> tuple[SchoolClass, Subject]:
        school_class = self.store.get_class(period.class_id)
        if school_class is None:
            raise ResourceNotFoundError("Class", period.class_id)
        subject = self.store.get_subject(period.subject_id)
        if subject is None:
            raise ResourceNotFoundError("Subject", period.subject_id)
        return school_class, subject

    def find_available_substitutes(self, period: Period, leave_teacher_id: str) -> list[Teacher]:
        if self.store.get_teacher(leave_teacher_id) is None:
            raise ResourceNotFoundError("Teacher", leave_teacher_id)
        school_class, subject = self._period_context(period)

        available: list[Teacher] = []
        for teacher in self.store.get_teachers():
            if teacher.id == leave_teacher_id:
                continue
            if not is_eligible(self.policy, teacher, school_class.grade, subject.name):
                continue
            if self.conflicts.has_slot_conflict(
                teacher.id,
                period.day,
                period.period_number,
                exclude_period_id=period.id,
            ):
                continue
            if not self.conflicts.is_under_daily_cap(teacher):
                continue
            available.append(teacher)
        return rank_candidates(available, subject.name)

    def assign_substitute(
        self,
        period: Period,
        leave_teacher_id: str,
        reason: str,
        *,
        leave_request_id: str | None = None,
    ) -> Substitution | None:
        """Commit the best-ranked substitute for ``period``.

        Returns None when nobody qualifies or the period already has an active
        substitution; nothing is written in either case.
        """
        with self._lock:
            existing = self.active_substitution(period.id)
            if existing is not None:
                logger.warning("Period %s is already covered by substitution %s", period.id, existing.id)
                return None
            return self._assign_best(period, leave_teacher_id, reason, leave_request_id=leave_request_id)

    def _assign_best(
        self,
        period: Period,
        leave_teacher_id: str,
        reason: str,
        *,
        leave_request_id: str | None = None,
    ) -> Substitution | None:
        # Caller holds the lock.
        candidates = self.find_available_substitutes(period, leave_teacher_id)
        if not candidates:
            logger.warning(
                "No eligible substitute for period %s (%s, period %s)",
                period.id,
                period.day,
                period.period_number,
            )
            return None
        chosen = candidates[0]
        substitution = self._commit(
            period,
            original_teacher_id=leave_teacher_id,
            substitute=chosen,
            reason=reason,
            auto_assigned=True,
            leave_request_id=leave_request_id,
        )
        logger.info(
            "Assigned substitute %s to period %s (%s, period %s)",
            chosen.id,
            period.id,
            period.day,
            period.period_number,
        )
        return substitution

    def active_substitution(self, period_id: str) -> Substitution | None:
        for substitution in self.store.get_substitutions(status=SubstitutionStatus.assigned):
            if substitution.period_id == period_id:
                return substitution
        return None

    def assign_manual_substitute(
        self,
        period: Period,
        original_teacher_id: str,
        substitute_teacher_id: str,
        reason: str,
    ) -> Substitution:
        with self._lock:
            school_class, subject = self._period_context(period)
            substitute = self.store.get_teacher(substitute_teacher_id)
            if substitute is None:
                raise ResourceNotFoundError("Teacher", substitute_teacher_id)

            errors = list(self.validate_teacher_assignment(substitute_teacher_id, school_class.grade, subject.name).errors)
            if substitute_teacher_id == original_teacher_id:
                errors.append("Substitute teacher must be different from the original teacher")
            if self.active_substitution(period.id) is not None:
                errors.append(f"Period {period.period_number} on {period.day} already has an active substitution")
            if self.conflicts.has_slot_conflict(
                substitute_teacher_id,
                period.day,
                period.period_number,
                exclude_period_id=period.id,
            ):
                errors.append(f"Teacher already has a class on {period.day}, Period {period.period_number}")
            if errors:
                raise AssignmentValidationError(errors)

            substitution = self._commit(
                period,
                original_teacher_id=original_teacher_id,
                substitute=substitute,
                reason=reason,
                auto_assigned=False,
            )
        logger.info("Manually assigned substitute %s to period %s", substitute_teacher_id, period.id)
        return substitution

    def _commit(
        self,
        period: Period,
        *,
        original_teacher_id: str,
        substitute: Teacher,
        reason: str,
        auto_assigned: bool,
        leave_request_id: str | None = None,
    ) -> Substitution:
        # Record and counter share one transaction; callers hold the lock.
        with self.store.transaction():
            substitution = self.store.add_substitution(
                period_id=period.id,
                original_teacher_id=original_teacher_id,
                substitute_teacher_id=substitute.id,
                leave_request_id=leave_request_id,
                date=self._clock(),
                status=SubstitutionStatus.assigned,
                reason=reason,
                auto_assigned=auto_assigned,
            )
            self.store.update_teacher(substitute.id, current_periods=substitute.current_periods + 1)
        return substitution

    def validate_teacher_assignment(self, teacher_id: str, class_grade: int, subject_name: str) -> AssignmentValidation:
        """Run every assignment rule and report all failures, not just the first."""
        teacher = self.store.get_teacher(teacher_id)
        if teacher is None:
            return AssignmentValidation(is_valid=False, errors=["Teacher not found"])

        errors: list[str] = []
        if not is_post_eligible(self.policy, teacher, class_grade):
            post = TeacherPost(teacher.post).value
            grades = describe_grades(self.policy.eligible_grades(teacher.post))
            errors.append(f"{post} teachers can only teach classes {grades}")
        if not teaches_subject(teacher, subject_name):
            errors.append(f"Teacher is not qualified to teach {subject_name}")
        if not teacher.is_available:
            errors.append("Teacher is currently not available")
        if not self.conflicts.is_under_daily_cap(teacher):
            errors.append(
                f"Teacher has already reached the maximum limit of {self.policy.max_periods_per_day} periods per day"
            )
        return AssignmentValidation(is_valid=not errors, errors=errors)

    def process_leave_request(self, leave_request: LeaveRequest) -> LeaveBatchResult:
        # Resolve everything first so a bad reference fails before any commit.
        periods: list[Period] = []
        for period_id in dict.fromkeys(leave_request.affected_periods or []):
            period = self.store.get_period(period_id)
            if period is None:
                raise ResourceNotFoundError("Period", period_id)
            periods.append(period)

        reason = f"{self.leave_reason_prefix}{leave_request.reason}"
        result = LeaveBatchResult()
        for period in periods:
            with self._lock:
                existing = self.active_substitution(period.id)
                if existing is None:
                    substitution = self._assign_best(
                        period,
                        leave_request.teacher_id,
                        reason,
                        leave_request_id=leave_request.id,
                    )
                elif existing.leave_request_id == leave_request.id:
                    # Covered by an earlier run of this request.
                    substitution = existing
                else:
                    substitution = None
            if substitution is not None:
                result.successful.append(substitution)
            else:
                result.failed.append(period)

        logger.info(
            "Processed leave request %s: %d substitution(s) assigned, %d period(s) need manual cover",
            leave_request.id,
            len(result.successful),
            len(result.failed),
        )
        return result

    def generate_substitution_report(self, start: datetime, end: datetime) -> SubstitutionReport:
        return self.reporter.generate_substitution_report(start, end)

    def check_schedule_conflicts(self, teacher_id: str, day: str, period_number: int) -> bool:
        return self.conflicts.check_schedule_conflicts(teacher_id, day, period_number)

    def check_for_conflicts(self, class_id: str) -> list[str]:
        return self.conflicts.check_for_conflicts(class_id)

    def get_teacher_day_schedule(self, teacher_id: str, day: str) -> list[Period]:
        return self.reporter.get_teacher_day_schedule(teacher_id, day)

    def calculate_daily_workload(self, teacher_id: str, day: str) -> DailyWorkload:
        return self.reporter.calculate_daily_workload(teacher_id, day)
