from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_actor, get_db, get_engine
from app.models.teacher import Teacher
from app.schemas.teacher import TeacherCreate, TeacherOut, TeacherUpdate
from app.schemas.timetable import DailyWorkloadOut, PeriodOut, normalize_day
from app.services.audit import log_activity
from app.services.policy import SubstitutionPolicy, get_policy
from app.services.substitution_engine import SubstitutionEngine

router = APIRouter()


@router.get("/", response_model=list[TeacherOut])
def list_teachers(db: Session = Depends(get_db)) -> list[TeacherOut]:
    return list(db.execute(select(Teacher).order_by(Teacher.name, Teacher.id)).scalars())


@router.get("/{teacher_id}", response_model=TeacherOut)
def get_teacher(teacher_id: str, db: Session = Depends(get_db)) -> TeacherOut:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")
    return teacher


@router.post("/", response_model=TeacherOut, status_code=status.HTTP_201_CREATED)
def create_teacher(
    payload: TeacherCreate,
    actor: str | None = Depends(get_actor),
    policy: SubstitutionPolicy = Depends(get_policy),
    db: Session = Depends(get_db),
) -> TeacherOut:
    if payload.email is not None:
        existing = db.execute(select(Teacher).where(Teacher.email == payload.email)).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Teacher email already exists")

    teacher = Teacher(
        **payload.model_dump(),
        eligible_grades=list(policy.eligible_grades(payload.post)),
        current_periods=0,
        max_periods=policy.max_periods_per_day,
        is_available=True,
    )
    db.add(teacher)
    db.flush()
    log_activity(
        db,
        actor=actor,
        action="teacher.create",
        entity_type="teacher",
        entity_id=teacher.id,
        details={"post": payload.post.value, "subjects": payload.subjects},
    )
    db.commit()
    db.refresh(teacher)
    return teacher


@router.put("/{teacher_id}", response_model=TeacherOut)
def update_teacher(
    teacher_id: str,
    payload: TeacherUpdate,
    actor: str | None = Depends(get_actor),
    policy: SubstitutionPolicy = Depends(get_policy),
    db: Session = Depends(get_db),
) -> TeacherOut:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")

    data = payload.model_dump(exclude_unset=True)
    if data.get("email") is not None:
        existing = db.execute(
            select(Teacher).where(Teacher.email == data["email"], Teacher.id != teacher_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Teacher email already exists")

    for key, value in data.items():
        setattr(teacher, key, value)
    if "post" in data:
        teacher.eligible_grades = list(policy.eligible_grades(teacher.post))
    if data:
        log_activity(
            db,
            actor=actor,
            action="teacher.update",
            entity_type="teacher",
            entity_id=teacher.id,
            details={"fields": sorted(data)},
        )
    db.commit()
    db.refresh(teacher)
    return teacher


@router.delete("/{teacher_id}")
def delete_teacher(
    teacher_id: str,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> dict:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")
    db.delete(teacher)
    log_activity(db, actor=actor, action="teacher.delete", entity_type="teacher", entity_id=teacher_id)
    db.commit()
    return {"message": "Teacher deleted successfully"}


@router.get("/{teacher_id}/workload", response_model=DailyWorkloadOut)
def get_daily_workload(
    teacher_id: str,
    day: str = Query(min_length=3, max_length=20),
    engine: SubstitutionEngine = Depends(get_engine),
) -> DailyWorkloadOut:
    try:
        day = normalize_day(day)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    workload = engine.calculate_daily_workload(teacher_id, day)
    schedule = engine.get_teacher_day_schedule(teacher_id, day)
    return DailyWorkloadOut(
        teacher_id=teacher_id,
        day=day,
        regular_periods=workload.regular_periods,
        substitution_periods=workload.substitution_periods,
        total_periods=workload.total_periods,
        can_take_more=workload.can_take_more,
        schedule=[PeriodOut.model_validate(period) for period in schedule],
    )
