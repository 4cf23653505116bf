from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_actor, get_db, get_engine
from app.models.period import Period
from app.models.school_class import SchoolClass
from app.models.subject import Subject
from app.models.teacher import Teacher
from app.schemas.timetable import (
    ClassConflictsOut,
    PeriodCreate,
    PeriodOut,
    SchoolClassCreate,
    SchoolClassOut,
    SubjectCreate,
    SubjectOut,
)
from app.services.audit import log_activity
from app.services.substitution_engine import SubstitutionEngine

router = APIRouter()


@router.get("/subjects", response_model=list[SubjectOut])
def list_subjects(db: Session = Depends(get_db)) -> list[SubjectOut]:
    return list(db.execute(select(Subject).order_by(Subject.name)).scalars())


@router.post("/subjects", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def create_subject(payload: SubjectCreate, db: Session = Depends(get_db)) -> SubjectOut:
    existing = db.execute(
        select(Subject).where((Subject.name == payload.name) | (Subject.code == payload.code))
    ).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject name or code already exists")
    subject = Subject(**payload.model_dump())
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


@router.get("/classes", response_model=list[SchoolClassOut])
def list_classes(db: Session = Depends(get_db)) -> list[SchoolClassOut]:
    return list(db.execute(select(SchoolClass).order_by(SchoolClass.grade, SchoolClass.section)).scalars())


@router.post("/classes", response_model=SchoolClassOut, status_code=status.HTTP_201_CREATED)
def create_class(payload: SchoolClassCreate, db: Session = Depends(get_db)) -> SchoolClassOut:
    existing = db.execute(
        select(SchoolClass).where(SchoolClass.grade == payload.grade, SchoolClass.section == payload.section)
    ).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Class already exists")
    school_class = SchoolClass(**payload.model_dump())
    db.add(school_class)
    db.commit()
    db.refresh(school_class)
    return school_class


@router.get("/classes/{class_id}/conflicts", response_model=ClassConflictsOut)
def check_class_conflicts(class_id: str, engine: SubstitutionEngine = Depends(get_engine)) -> ClassConflictsOut:
    return ClassConflictsOut(class_id=class_id, conflicts=engine.check_for_conflicts(class_id))


@router.get("/periods", response_model=list[PeriodOut])
def list_periods(
    class_id: str | None = Query(default=None, max_length=36),
    teacher_id: str | None = Query(default=None, max_length=36),
    db: Session = Depends(get_db),
) -> list[PeriodOut]:
    query = select(Period)
    if class_id is not None:
        query = query.where(Period.class_id == class_id)
    if teacher_id is not None:
        query = query.where(Period.teacher_id == teacher_id)
    query = query.order_by(Period.day, Period.period_number, Period.class_id)
    return list(db.execute(query).scalars())


@router.post("/periods", response_model=PeriodOut, status_code=status.HTTP_201_CREATED)
def create_period(
    payload: PeriodCreate,
    actor: str | None = Depends(get_actor),
    db: Session = Depends(get_db),
) -> PeriodOut:
    if db.get(SchoolClass, payload.class_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    if db.get(Subject, payload.subject_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    if db.get(Teacher, payload.teacher_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")

    existing = db.execute(
        select(Period).where(
            Period.class_id == payload.class_id,
            Period.day == payload.day,
            Period.period_number == payload.period_number,
        )
    ).scalar_one_or_none()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Class already has a period on {payload.day}, Period {payload.period_number}",
        )

    period = Period(**payload.model_dump(), is_substitution=False)
    db.add(period)
    db.flush()
    log_activity(
        db,
        actor=actor,
        action="period.create",
        entity_type="period",
        entity_id=period.id,
        details={"day": period.day, "period_number": period.period_number, "class_id": period.class_id},
    )
    db.commit()
    db.refresh(period)
    return period
