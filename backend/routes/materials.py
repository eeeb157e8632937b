# backend/routes/materials.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload

from database import get_db
from models.catalog import Category, Unit
from models.material import Material, MaterialUnit
from models.stock import Inflow, Outflow
from schemas import material as schemas
from schemas.user import SessionUser
from utils.audit import snapshot, write_log
from utils.crud import conflict_as_400, ensure_unique_name, get_or_404
from utils.inventory_queries import get_materials_with_units
from utils.tokenJWT import get_current_user, permission_required

router = APIRouter(prefix="/api/materials", tags=["Materials"])

DUPLICATE_NAME = "A material with this name already exists"
NOT_FOUND = "Material not found"


# ---- HELPERS ----
def _check_category(db: Session, category_id: UUID) -> None:
    exists = db.query(Category.id).filter(Category.id == category_id, Category.is_active.is_(True)).first()
    if exists is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category not found")


def _check_units(db: Session, unit_ids: List[UUID]) -> List[UUID]:
    # Keep the caller's order (first is primary) and drop repeats
    unique_ids = list(dict.fromkeys(unit_ids))
    found = {row.id for row in db.query(Unit.id).filter(Unit.id.in_(unique_ids), Unit.is_active.is_(True))}
    missing = [str(uid) for uid in unique_ids if uid not in found]
    if missing:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown units: {', '.join(missing)}")
    return unique_ids


def _link_units(material: Material, unit_ids: List[UUID]) -> None:
    material.material_units = [
        MaterialUnit(unit_id=unit_id, is_primary=(index == 0))
        for index, unit_id in enumerate(unit_ids)
    ]


def _material_query(db: Session):
    return db.query(Material).options(selectinload(Material.material_units))


# List active materials with their unit ids
@router.get("", response_model=List[schemas.MaterialResponse])
def list_materials(
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    return _material_query(db).filter(Material.is_active.is_(True)).order_by(Material.name).all()


# Materials with the units they can be booked in (form dropdowns)
@router.get("/with-units", response_model=List[schemas.MaterialWithUnits])
def list_materials_with_units(
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    return get_materials_with_units(db)


@router.post("", response_model=schemas.MaterialResponse, status_code=status.HTTP_201_CREATED)
def create_material(
    payload: schemas.MaterialCreate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("create_material")),
):
    name = payload.name
    ensure_unique_name(db, Material, name, DUPLICATE_NAME)
    _check_category(db, payload.category_id)
    unit_ids = _check_units(db, payload.unit_ids)

    material = Material(
        name=name,
        description=payload.description,
        category_id=payload.category_id,
        min_stock_level=payload.min_stock_level if payload.min_stock_level is not None else 0,
    )
    _link_units(material, unit_ids)

    with conflict_as_400(db, DUPLICATE_NAME):
        db.add(material)
        db.flush()
        write_log(db, table_name="materials", record_id=material.id, action="CREATE",
                  changed_by=current_user.id, new_values=snapshot(material))
        db.commit()
    db.refresh(material)
    return material


@router.get("/{material_id}", response_model=schemas.MaterialResponse)
def get_material(
    material_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    material = _material_query(db).filter(Material.id == material_id).first()
    if material is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return material


@router.put("/{material_id}", response_model=schemas.MaterialResponse)
def update_material(
    material_id: UUID,
    payload: schemas.MaterialUpdate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("update_material")),
):
    material = get_or_404(db, Material, material_id, NOT_FOUND)
    before = snapshot(material)

    if payload.name is not None and payload.name != material.name:
        ensure_unique_name(db, Material, payload.name, DUPLICATE_NAME, exclude_id=material.id)
        material.name = payload.name
    if payload.category_id is not None:
        _check_category(db, payload.category_id)
        material.category_id = payload.category_id
    if payload.description is not None:
        material.description = payload.description
    if payload.min_stock_level is not None:
        material.min_stock_level = payload.min_stock_level
    if payload.unit_ids is not None:
        _link_units(material, _check_units(db, payload.unit_ids))

    with conflict_as_400(db, DUPLICATE_NAME):
        db.flush()
        write_log(db, table_name="materials", record_id=material.id, action="UPDATE",
                  changed_by=current_user.id, old_values=before, new_values=snapshot(material))
        db.commit()
    db.refresh(material)
    return material


# Soft delete; materials referenced by the ledger are kept
@router.delete("/{material_id}")
def delete_material(
    material_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("delete_material")),
):
    material = get_or_404(db, Material, material_id, NOT_FOUND, active_only=True)

    has_inflows = db.query(Inflow.id).filter(Inflow.material_id == material.id).first() is not None
    has_outflows = db.query(Outflow.id).filter(Outflow.material_id == material.id).first() is not None
    if has_inflows or has_outflows:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete material with existing inflow/outflow records",
        )

    before = snapshot(material)
    material.material_units = []
    material.is_active = False
    db.flush()
    write_log(db, table_name="materials", record_id=material.id, action="DELETE",
              changed_by=current_user.id, old_values=before, new_values=snapshot(material))
    db.commit()
    return {"message": "Material deleted successfully"}
