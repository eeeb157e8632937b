# backend/routes/categories.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from models.catalog import Category
from models.material import Material
from schemas import catalog as schemas
from schemas.user import SessionUser
from utils.audit import snapshot, write_log
from utils.crud import conflict_as_400, ensure_unique_name, get_or_404
from utils.tokenJWT import get_current_user, permission_required

router = APIRouter(prefix="/api/categories", tags=["Categories"])

DUPLICATE_NAME = "A category with this name already exists"
NOT_FOUND = "Category not found"


@router.get("", response_model=List[schemas.CategoryResponse])
def list_categories(
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    return db.query(Category).filter(Category.is_active.is_(True)).order_by(Category.name).all()


@router.post("", response_model=schemas.CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("create_category")),
):
    name = payload.name
    ensure_unique_name(db, Category, name, DUPLICATE_NAME)

    category = Category(name=name, description=payload.description)
    with conflict_as_400(db, DUPLICATE_NAME):
        db.add(category)
        db.flush()
        write_log(db, table_name="categories", record_id=category.id, action="CREATE",
                  changed_by=current_user.id, new_values=snapshot(category))
        db.commit()
    db.refresh(category)
    return category


@router.get("/{category_id}", response_model=schemas.CategoryResponse)
def get_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    return get_or_404(db, Category, category_id, NOT_FOUND)


@router.put("/{category_id}", response_model=schemas.CategoryResponse)
def update_category(
    category_id: UUID,
    payload: schemas.CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("update_category")),
):
    category = get_or_404(db, Category, category_id, NOT_FOUND)
    before = snapshot(category)

    if payload.name is not None and payload.name != category.name:
        ensure_unique_name(db, Category, payload.name, DUPLICATE_NAME, exclude_id=category.id)
        category.name = payload.name
    if payload.description is not None:
        category.description = payload.description

    with conflict_as_400(db, DUPLICATE_NAME):
        db.flush()
        write_log(db, table_name="categories", record_id=category.id, action="UPDATE",
                  changed_by=current_user.id, old_values=before, new_values=snapshot(category))
        db.commit()
    db.refresh(category)
    return category


@router.delete("/{category_id}")
def delete_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("delete_category")),
):
    category = get_or_404(db, Category, category_id, NOT_FOUND, active_only=True)

    in_use = (
        db.query(Material.id)
        .filter(Material.category_id == category.id, Material.is_active.is_(True))
        .first()
    )
    if in_use is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete category with existing materials. Please move or delete materials first.",
        )

    before = snapshot(category)
    category.is_active = False
    db.flush()
    write_log(db, table_name="categories", record_id=category.id, action="DELETE",
              changed_by=current_user.id, old_values=before, new_values=snapshot(category))
    db.commit()
    return {"message": "Category deleted successfully"}
