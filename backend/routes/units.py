# backend/routes/units.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from models.catalog import Unit
from models.material import MaterialUnit
from schemas import catalog as schemas
from schemas.user import SessionUser
from utils.audit import snapshot, write_log
from utils.crud import conflict_as_400, ensure_unique_name, get_or_404
from utils.tokenJWT import get_current_user, permission_required

router = APIRouter(prefix="/api/units", tags=["Units"])

DUPLICATE_NAME = "A unit with this name already exists"
NOT_FOUND = "Unit not found"


@router.get("", response_model=List[schemas.UnitResponse])
def list_units(
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    return db.query(Unit).filter(Unit.is_active.is_(True)).order_by(Unit.name).all()


@router.post("", response_model=schemas.UnitResponse, status_code=status.HTTP_201_CREATED)
def create_unit(
    payload: schemas.UnitCreate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("create_unit")),
):
    name = payload.name
    ensure_unique_name(db, Unit, name, DUPLICATE_NAME)

    unit = Unit(name=name, abbreviation=payload.abbreviation, description=payload.description)
    with conflict_as_400(db, DUPLICATE_NAME):
        db.add(unit)
        db.flush()
        write_log(db, table_name="units", record_id=unit.id, action="CREATE",
                  changed_by=current_user.id, new_values=snapshot(unit))
        db.commit()
    db.refresh(unit)
    return unit


@router.get("/{unit_id}", response_model=schemas.UnitResponse)
def get_unit(
    unit_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    return get_or_404(db, Unit, unit_id, NOT_FOUND)


@router.put("/{unit_id}", response_model=schemas.UnitResponse)
def update_unit(
    unit_id: UUID,
    payload: schemas.UnitUpdate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("update_unit")),
):
    unit = get_or_404(db, Unit, unit_id, NOT_FOUND)
    before = snapshot(unit)

    if payload.name is not None and payload.name != unit.name:
        ensure_unique_name(db, Unit, payload.name, DUPLICATE_NAME, exclude_id=unit.id)
        unit.name = payload.name
    for field in ("abbreviation", "description"):
        value = getattr(payload, field)
        if value is not None:
            setattr(unit, field, value)

    with conflict_as_400(db, DUPLICATE_NAME):
        db.flush()
        write_log(db, table_name="units", record_id=unit.id, action="UPDATE",
                  changed_by=current_user.id, old_values=before, new_values=snapshot(unit))
        db.commit()
    db.refresh(unit)
    return unit


# Soft delete, refused while any material can still be booked in this unit
@router.delete("/{unit_id}")
def delete_unit(
    unit_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("delete_unit")),
):
    unit = get_or_404(db, Unit, unit_id, NOT_FOUND, active_only=True)

    if db.query(MaterialUnit.id).filter(MaterialUnit.unit_id == unit.id).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete unit that is being used by materials. Please remove unit from materials first.",
        )

    before = snapshot(unit)
    unit.is_active = False
    db.flush()
    write_log(db, table_name="units", record_id=unit.id, action="DELETE",
              changed_by=current_user.id, old_values=before, new_values=snapshot(unit))
    db.commit()
    return {"message": "Unit deleted successfully"}
