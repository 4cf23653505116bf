from collections.abc import Generator

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.db.session import SessionLocal
from app.services.policy import SubstitutionPolicy, get_policy
from app.services.store import SqlAlchemySchoolStore
from app.services.substitution_engine import SubstitutionEngine


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> SqlAlchemySchoolStore:
    return SqlAlchemySchoolStore(db)


def get_engine(
    store: SqlAlchemySchoolStore = Depends(get_store),
    policy: SubstitutionPolicy = Depends(get_policy),
) -> SubstitutionEngine:
    return SubstitutionEngine(store, policy, leave_reason_prefix=get_settings().leave_reason_prefix)


def get_actor(x_actor: str | None = Header(default=None, max_length=200)) -> str | None:
    if x_actor is None:
        return None
    return x_actor.strip() or None
