from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_actor, get_db, get_engine
from app.core.exceptions import InvalidStateError, ResourceNotFoundError, StoreError
from app.models.leave_request import LeaveRequest, LeaveStatus
from app.models.substitution import Substitution
from app.schemas.leave import LeaveApprovalOut, LeaveRequestCreate, LeaveRequestOut
from app.schemas.substitution import SubstitutionOut
from app.schemas.timetable import PeriodOut
from app.services.audit import log_activity
from app.services.substitution_engine import SubstitutionEngine

router = APIRouter()


def _hydrate_leave_requests(db: Session, requests: list[LeaveRequest]) -> list[LeaveRequestOut]:
    if not requests:
        return []
    request_ids = [item.id for item in requests]
    by_request: dict[str, list[Substitution]] = {request_id: [] for request_id in request_ids}
    query = (
        select(Substitution)
        .where(Substitution.leave_request_id.in_(request_ids))
        .order_by(Substitution.date, Substitution.id)
    )
    for substitution in db.execute(query).scalars():
        by_request[substitution.leave_request_id].append(substitution)

    output: list[LeaveRequestOut] = []
    for request in requests:
        item = LeaveRequestOut.model_validate(request)
        item.substitutions = [SubstitutionOut.model_validate(sub) for sub in by_request[request.id]]
        output.append(item)
    return output


def _get_pending_request(engine: SubstitutionEngine, leave_id: str) -> LeaveRequest:
    request = engine.store.get_leave_request(leave_id)
    if request is None:
        raise ResourceNotFoundError("Leave request", leave_id)
    if request.status != LeaveStatus.pending:
        raise InvalidStateError(
            f"Leave request is already {request.status.value}",
            details={"status": request.status.value},
        )
    return request


@router.get("/leaves", response_model=list[LeaveRequestOut])
def list_leave_requests(
    leave_status: LeaveStatus | None = Query(default=None, alias="status"),
    teacher_id: str | None = Query(default=None, max_length=36),
    db: Session = Depends(get_db),
) -> list[LeaveRequestOut]:
    query = select(LeaveRequest)
    if leave_status is not None:
        query = query.where(LeaveRequest.status == leave_status)
    if teacher_id is not None:
        query = query.where(LeaveRequest.teacher_id == teacher_id)
    query = query.order_by(LeaveRequest.start_date.desc(), LeaveRequest.created_at.desc())
    return _hydrate_leave_requests(db, list(db.execute(query).scalars()))


@router.get("/leaves/{leave_id}", response_model=LeaveRequestOut)
def get_leave_request(leave_id: str, db: Session = Depends(get_db)) -> LeaveRequestOut:
    request = db.get(LeaveRequest, leave_id)
    if request is None:
        raise ResourceNotFoundError("Leave request", leave_id)
    return _hydrate_leave_requests(db, [request])[0]


@router.post(
    "/leaves",
    response_model=LeaveRequestOut,
    status_code=status.HTTP_201_CREATED,
)
def create_leave_request(
    payload: LeaveRequestCreate,
    actor: str | None = Depends(get_actor),
    engine: SubstitutionEngine = Depends(get_engine),
    db: Session = Depends(get_db),
) -> LeaveRequestOut:
    store = engine.store
    if store.get_teacher(payload.teacher_id) is None:
        raise ResourceNotFoundError("Teacher", payload.teacher_id)
    for period_id in payload.affected_periods:
        if store.get_period(period_id) is None:
            raise ResourceNotFoundError("Period", period_id)

    request = store.add_leave_request(
        teacher_id=payload.teacher_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
        status=LeaveStatus.pending,
        affected_periods=payload.affected_periods,
    )
    log_activity(
        db,
        actor=actor,
        action="leave.create",
        entity_type="leave_request",
        entity_id=request.id,
        details={"teacher_id": payload.teacher_id, "affected_periods": len(payload.affected_periods)},
    )
    db.commit()
    db.refresh(request)
    return _hydrate_leave_requests(db, [request])[0]


@router.post("/leaves/{leave_id}/approve", response_model=LeaveApprovalOut)
def approve_leave_request(
    leave_id: str,
    actor: str | None = Depends(get_actor),
    engine: SubstitutionEngine = Depends(get_engine),
    db: Session = Depends(get_db),
) -> LeaveApprovalOut:
    request = _get_pending_request(engine, leave_id)

    try:
        result = engine.process_leave_request(request)
    except StoreError:
        # Periods committed before the failure stay covered; record them and leave the request pending.
        covered = [item.id for item in engine.store.get_substitutions() if item.leave_request_id == leave_id]
        log_activity(
            db,
            actor=actor,
            action="leave.approve_failed",
            entity_type="leave_request",
            entity_id=leave_id,
            details={"substitutions": covered},
        )
        db.commit()
        raise

    # Each substitution is already committed; approval is recorded afterwards.
    request.status = LeaveStatus.approved
    request.reviewed_at = datetime.now(timezone.utc)
    engine.store.update_teacher(request.teacher_id, is_available=False)
    log_activity(
        db,
        actor=actor,
        action="leave.approve",
        entity_type="leave_request",
        entity_id=request.id,
        details={
            "substitutions": [item.id for item in result.successful],
            "failed_periods": [item.id for item in result.failed],
        },
    )
    db.commit()
    db.refresh(request)

    message = (
        f"Leave approved. {len(result.successful)} substitutions assigned, "
        f"{len(result.failed)} periods need manual assignment."
    )
    return LeaveApprovalOut(
        leave_request=_hydrate_leave_requests(db, [request])[0],
        substitutions=[SubstitutionOut.model_validate(item) for item in result.successful],
        failed_periods=[PeriodOut.model_validate(item) for item in result.failed],
        message=message,
    )


@router.post("/leaves/{leave_id}/reject", response_model=LeaveRequestOut)
def reject_leave_request(
    leave_id: str,
    actor: str | None = Depends(get_actor),
    engine: SubstitutionEngine = Depends(get_engine),
    db: Session = Depends(get_db),
) -> LeaveRequestOut:
    request = _get_pending_request(engine, leave_id)
    request.status = LeaveStatus.rejected
    request.reviewed_at = datetime.now(timezone.utc)
    log_activity(db, actor=actor, action="leave.reject", entity_type="leave_request", entity_id=request.id)
    db.commit()
    db.refresh(request)
    return _hydrate_leave_requests(db, [request])[0]
