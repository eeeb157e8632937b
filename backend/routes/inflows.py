# backend/routes/inflows.py
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.stock import Inflow
from schemas import stock as schemas
from schemas.user import SessionUser
from utils.audit import snapshot, write_log
from utils.crud import get_or_404
from utils.ledger import apply_movement_fields, check_references, line_value
from utils.tokenJWT import get_current_user, permission_required

router = APIRouter(prefix="/api/inflows", tags=["Inflows"])

NOT_FOUND = "Inflow not found"

DATE_FIELDS = ("delivery_date", "expiry_date")


# Newest first, paginated
@router.get("", response_model=schemas.InflowPage)
def list_inflows(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    items = (
        db.query(Inflow)
        .options(joinedload(Inflow.material))
        .order_by(Inflow.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"items": items, "page": page, "limit": limit}


@router.post("", response_model=schemas.InflowResponse, status_code=status.HTTP_201_CREATED)
def create_inflow(
    payload: schemas.InflowCreate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("create_inflow")),
):
    check_references(db, payload.material_id, payload.unit_id, payload.project_id)

    inflow = Inflow(created_by=current_user.id)
    apply_movement_fields(inflow, payload.model_dump(), DATE_FIELDS)
    inflow.total_value = line_value(inflow.quantity, inflow.unit_price)

    db.add(inflow)
    db.flush()
    write_log(db, table_name="inflows", record_id=inflow.id, action="CREATE",
              changed_by=current_user.id, new_values=snapshot(inflow))
    db.commit()
    db.refresh(inflow)
    return inflow


@router.get("/{inflow_id}", response_model=schemas.InflowResponse)
def get_inflow(
    inflow_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    return get_or_404(db, Inflow, inflow_id, NOT_FOUND)


@router.put("/{inflow_id}", response_model=schemas.InflowResponse)
def update_inflow(
    inflow_id: UUID,
    payload: schemas.InflowUpdate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("update_inflow")),
):
    inflow = get_or_404(db, Inflow, inflow_id, NOT_FOUND)
    before = snapshot(inflow)

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    check_references(db, changes.get("material_id"), changes.get("unit_id"), changes.get("project_id"))
    apply_movement_fields(inflow, changes, DATE_FIELDS)
    inflow.total_value = line_value(inflow.quantity, inflow.unit_price)

    db.flush()
    write_log(db, table_name="inflows", record_id=inflow.id, action="UPDATE",
              changed_by=current_user.id, old_values=before, new_values=snapshot(inflow))
    db.commit()
    db.refresh(inflow)
    return inflow


# Ledger rows are removed outright; stock is recomputed from what remains
@router.delete("/{inflow_id}")
def delete_inflow(
    inflow_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("delete_inflow")),
):
    inflow = get_or_404(db, Inflow, inflow_id, NOT_FOUND)
    write_log(db, table_name="inflows", record_id=inflow.id, action="DELETE",
              changed_by=current_user.id, old_values=snapshot(inflow))
    db.delete(inflow)
    db.commit()
    return {"message": "Inflow deleted successfully"}
