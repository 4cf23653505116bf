from datetime import date, datetime, time, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_actor, get_db, get_engine
from app.core.exceptions import InvalidStateError, ResourceNotFoundError
from app.models.substitution import SubstitutionStatus
from app.schemas.substitution import (
    AssignmentValidationOut,
    AssignmentValidationRequest,
    CandidateListOut,
    ManualSubstitutionCreate,
    SlotConflictOut,
    SubstitutionOut,
    SubstitutionOverviewOut,
    SubstitutionReportOut,
    SubstitutionStatusUpdate,
)
from app.schemas.teacher import TeacherOut
from app.schemas.timetable import normalize_day
from app.services.audit import log_activity
from app.services.substitution_engine import SubstitutionEngine

router = APIRouter()


@router.get("/substitutions", response_model=SubstitutionOverviewOut)
def list_substitutions(engine: SubstitutionEngine = Depends(get_engine)) -> SubstitutionOverviewOut:
    substitutions = engine.store.get_substitutions()
    return SubstitutionOverviewOut(
        substitutions=[SubstitutionOut.model_validate(item) for item in substitutions],
        active=[
            SubstitutionOut.model_validate(item)
            for item in substitutions
            if item.status == SubstitutionStatus.assigned
        ],
    )


@router.get("/substitutions/candidates", response_model=CandidateListOut)
def list_candidates(
    period_id: str = Query(min_length=1, max_length=36),
    leave_teacher_id: str = Query(min_length=1, max_length=36),
    engine: SubstitutionEngine = Depends(get_engine),
) -> CandidateListOut:
    period = engine.store.get_period(period_id)
    if period is None:
        raise ResourceNotFoundError("Period", period_id)
    candidates = engine.find_available_substitutes(period, leave_teacher_id)
    return CandidateListOut(
        period_id=period.id,
        candidates=[TeacherOut.model_validate(item) for item in candidates],
        total=len(candidates),
    )


@router.post("/substitutions/validate", response_model=AssignmentValidationOut)
def validate_assignment(
    payload: AssignmentValidationRequest,
    engine: SubstitutionEngine = Depends(get_engine),
) -> AssignmentValidationOut:
    result = engine.validate_teacher_assignment(payload.teacher_id, payload.class_grade, payload.subject_name)
    return AssignmentValidationOut.model_validate(result)


@router.post(
    "/substitutions/manual",
    response_model=SubstitutionOut,
    status_code=status.HTTP_201_CREATED,
)
def create_manual_substitution(
    payload: ManualSubstitutionCreate,
    actor: str | None = Depends(get_actor),
    engine: SubstitutionEngine = Depends(get_engine),
    db: Session = Depends(get_db),
) -> SubstitutionOut:
    period = engine.store.get_period(payload.period_id)
    if period is None:
        raise ResourceNotFoundError("Period", payload.period_id)
    if engine.store.get_teacher(payload.original_teacher_id) is None:
        raise ResourceNotFoundError("Teacher", payload.original_teacher_id)

    substitution = engine.assign_manual_substitute(
        period,
        payload.original_teacher_id,
        payload.substitute_teacher_id,
        payload.reason.strip(),
    )
    log_activity(
        db,
        actor=actor,
        action="substitution.manual",
        entity_type="substitution",
        entity_id=substitution.id,
        details={"period_id": period.id, "substitute_teacher_id": payload.substitute_teacher_id},
    )
    db.commit()
    db.refresh(substitution)
    return substitution


@router.get("/substitutions/report", response_model=SubstitutionReportOut)
def substitution_report(
    start_date: date = Query(),
    end_date: date = Query(),
    engine: SubstitutionEngine = Depends(get_engine),
) -> SubstitutionReportOut:
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date cannot be before start_date",
        )
    start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
    end = datetime.combine(end_date, time.max, tzinfo=timezone.utc)
    report = engine.generate_substitution_report(start, end)
    return SubstitutionReportOut(
        start_date=start_date,
        end_date=end_date,
        total_substitutions=report.total_substitutions,
        successful_assignments=report.successful_assignments,
        failed_assignments=report.failed_assignments,
        teacher_workload=report.teacher_workload,
        most_active_substitutes=[TeacherOut.model_validate(item) for item in report.most_active_substitutes],
    )


@router.get("/substitutions/slot-conflicts", response_model=SlotConflictOut)
def slot_conflicts(
    teacher_id: str = Query(min_length=1, max_length=36),
    day: str = Query(min_length=1, max_length=20),
    period_number: int = Query(ge=1, le=20),
    engine: SubstitutionEngine = Depends(get_engine),
) -> SlotConflictOut:
    try:
        normalized_day = normalize_day(day)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return SlotConflictOut(
        teacher_id=teacher_id,
        day=normalized_day,
        period_number=period_number,
        has_conflict=engine.check_schedule_conflicts(teacher_id, normalized_day, period_number),
    )


@router.put("/substitutions/{substitution_id}/status", response_model=SubstitutionOut)
def update_substitution_status(
    substitution_id: str,
    payload: SubstitutionStatusUpdate,
    actor: str | None = Depends(get_actor),
    engine: SubstitutionEngine = Depends(get_engine),
    db: Session = Depends(get_db),
) -> SubstitutionOut:
    substitution = engine.store.get_substitution(substitution_id)
    if substitution is None:
        raise ResourceNotFoundError("Substitution", substitution_id)
    if substitution.status != SubstitutionStatus.assigned:
        raise InvalidStateError(
            f"Substitution is already {substitution.status.value}",
            details={"status": substitution.status.value},
        )

    # The substitute's period counter is left as is.
    substitution.status = SubstitutionStatus(payload.status)
    log_activity(
        db,
        actor=actor,
        action=f"substitution.{payload.status}",
        entity_type="substitution",
        entity_id=substitution.id,
    )
    db.commit()
    db.refresh(substitution)
    return substitution
