# backend/routes/inventory.py
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_db
from schemas import inventory as schemas
from schemas.user import SessionUser
from utils.inventory_queries import build_dashboard, get_inventory_movements, get_material_stock
from utils.time_utils import to_utc_naive, utcnow
from utils.tokenJWT import permission_required

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])

# Default reporting window when no dates are given
DEFAULT_MOVEMENT_DAYS = 30


@router.get("/dashboard", response_model=schemas.DashboardResponse)
def dashboard(
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("view_dashboard")),
):
    return schemas.DashboardResponse.model_validate(build_dashboard(db))


@router.get("/stock/{material_id}", response_model=schemas.StockLevelOut)
def material_stock(
    material_id: UUID,
    unit_id: Optional[UUID] = Query(None, alias="unitId"),
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("view_inventory")),
):
    level = get_material_stock(db, material_id, unit_id)
    if level is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Material not found")
    return schemas.StockLevelOut.model_validate(level)


# Report of inflows and outflows inside a date window
@router.get("/movements", response_model=List[schemas.MovementOut])
def movements(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    material_id: Optional[UUID] = Query(None, alias="materialId"),
    project_id: Optional[UUID] = Query(None, alias="projectId"),
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("view_reports")),
):
    end = to_utc_naive(end_date) if end_date else utcnow()
    start = to_utc_naive(start_date) if start_date else end - timedelta(days=DEFAULT_MOVEMENT_DAYS)
    if start > end:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="startDate must be before endDate")

    rows = get_inventory_movements(db, start, end, material_id=material_id, project_id=project_id)
    return [schemas.MovementOut.model_validate(row) for row in rows]
