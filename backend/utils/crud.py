# backend/utils/crud.py
from contextlib import contextmanager
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session


def find_active_by_name(db: Session, model, name: str, exclude_id: Optional[UUID] = None):
    """Case-insensitive lookup among active rows."""
    query = db.query(model).filter(
        func.lower(model.name) == name.strip().lower(),
        model.is_active.is_(True),
    )
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    return query.first()


def ensure_unique_name(db: Session, model, name: str, message: str, exclude_id: Optional[UUID] = None) -> None:
    # Fast path only; the unique index on lower(name) is authoritative
    if find_active_by_name(db, model, name, exclude_id) is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


@contextmanager
def conflict_as_400(db: Session, message: str):
    """Turn a constraint violation raised while flushing or committing into a 400."""
    try:
        yield
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def get_or_404(db: Session, model, record_id: UUID, message: str, active_only: bool = False):
    query = db.query(model).filter(model.id == record_id)
    if active_only:
        query = query.filter(model.is_active.is_(True))
    record = query.first()
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)
    return record
