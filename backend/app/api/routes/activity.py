from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.models.activity_log import ActivityLog
from app.schemas.activity import ActivityLogOut

router = APIRouter()


@router.get("/activity/logs", response_model=list[ActivityLogOut])
def list_activity_logs(
    entity_type: str | None = Query(default=None, max_length=100),
    db: Session = Depends(get_db),
) -> list[ActivityLogOut]:
    query = select(ActivityLog)
    if entity_type is not None:
        query = query.where(ActivityLog.entity_type == entity_type)
    query = query.order_by(ActivityLog.created_at.desc()).limit(500)
    return list(db.execute(query).scalars())
