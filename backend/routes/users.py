# backend/routes/users.py
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from models.users import Role, User
from schemas.user import SessionUser, UserCreate, UserResponse, UserUpdate
from utils.audit import snapshot, write_log
from utils.crud import conflict_as_400, get_or_404
from utils.hashing import get_password_hash
from utils.tokenJWT import permission_required

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])

DUPLICATE_USERNAME = "Username already exists"
NOT_FOUND = "User not found"

# password_hash never goes into the audit trail
AUDIT_EXCLUDE = ("password_hash",)


def _audit_snapshot(user: User) -> dict:
    values = snapshot(user)
    for key in AUDIT_EXCLUDE:
        values.pop(key, None)
    return values


# Retrieve accounts, optionally filtered by name/username and role (super user only)
@router.get("", response_model=List[UserResponse])
def list_users(
    q: Optional[str] = Query(None, description="Search by name or username"),
    role: Optional[Role] = Query(None),
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("view_users")),
):
    query = db.query(User)
    if q:
        like = f"%{q.lower()}%"
        query = query.filter(func.lower(User.username).like(like) | func.lower(User.name).like(like))
    if role is not None:
        query = query.filter(User.role == role)
    return query.order_by(User.created_at.desc()).all()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("create_user")),
):
    username = payload.username.strip()
    if db.query(User.id).filter(User.username == username).first() is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_USERNAME)

    user = User(
        name=payload.name,
        username=username,
        password_hash=get_password_hash(payload.password),
        role=payload.role,
    )
    with conflict_as_400(db, DUPLICATE_USERNAME):
        db.add(user)
        db.flush()
        write_log(db, table_name="users", record_id=user.id, action="CREATE",
                  changed_by=current_user.id, new_values=_audit_snapshot(user))
        db.commit()
    db.refresh(user)
    logger.info("User %s (%s) created by %s", user.username, user.role.value, current_user.username)
    return user


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("view_users")),
):
    return get_or_404(db, User, user_id, NOT_FOUND)


# Update role, name, password or active flag
@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: UUID,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("update_user")),
):
    user = get_or_404(db, User, user_id, NOT_FOUND)
    before = _audit_snapshot(user)

    if user.id == current_user.id and payload.is_active is False:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot deactivate your own account")

    if payload.name is not None:
        user.name = payload.name
    if payload.role is not None:
        user.role = payload.role
    if payload.is_active is not None:
        user.is_active = payload.is_active
    if payload.password:
        user.password_hash = get_password_hash(payload.password)

    db.flush()
    write_log(db, table_name="users", record_id=user.id, action="UPDATE",
              changed_by=current_user.id, old_values=before, new_values=_audit_snapshot(user))
    db.commit()
    db.refresh(user)
    return user


# Deactivates the account; ledger rows keep pointing at it
@router.delete("/{user_id}")
def delete_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("delete_user")),
):
    user = get_or_404(db, User, user_id, NOT_FOUND)
    if user.id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete your own account")

    before = _audit_snapshot(user)
    user.is_active = False
    db.flush()
    write_log(db, table_name="users", record_id=user.id, action="DELETE",
              changed_by=current_user.id, old_values=before, new_values=_audit_snapshot(user))
    db.commit()
    logger.info("User %s deactivated by %s", user.username, current_user.username)
    return {"message": "User deleted successfully"}
