# backend/routes/outflows.py
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.stock import Outflow
from schemas import stock as schemas
from schemas.user import SessionUser
from utils.audit import snapshot, write_log
from utils.crud import get_or_404
from utils.errors import ApiError
from utils.inventory_queries import get_material_stock
from utils.ledger import apply_movement_fields, check_references, line_value
from utils.tokenJWT import get_current_user, permission_required

router = APIRouter(prefix="/api/outflows", tags=["Outflows"])

NOT_FOUND = "Outflow not found"

DATE_FIELDS = ("release_date", "return_date")


# Stock is counted in the unit the release is booked in
def _check_available(db: Session, payload: schemas.OutflowCreate) -> None:
    stock = get_material_stock(db, payload.material_id, payload.unit_id)
    if stock is None:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Material not found or no stock data available")
    if stock.current_stock < payload.quantity:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "Insufficient stock",
            details={
                "available": float(stock.current_stock),
                "requested": float(payload.quantity),
                "materialName": stock.material_name,
            },
        )


# Newest first, paginated
@router.get("", response_model=schemas.OutflowPage)
def list_outflows(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    items = (
        db.query(Outflow)
        .options(joinedload(Outflow.material))
        .order_by(Outflow.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"items": items, "page": page, "limit": limit}


@router.post("", response_model=schemas.OutflowResponse, status_code=status.HTTP_201_CREATED)
def create_outflow(
    payload: schemas.OutflowCreate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("create_outflow")),
):
    check_references(db, payload.material_id, payload.unit_id, payload.project_id)
    _check_available(db, payload)

    outflow = Outflow(created_by=current_user.id)
    apply_movement_fields(outflow, payload.model_dump(), DATE_FIELDS)
    outflow.total_value = line_value(outflow.quantity, outflow.unit_price)

    db.add(outflow)
    db.flush()
    write_log(db, table_name="outflows", record_id=outflow.id, action="CREATE",
              changed_by=current_user.id, new_values=snapshot(outflow))
    db.commit()
    db.refresh(outflow)
    return outflow


@router.get("/{outflow_id}", response_model=schemas.OutflowResponse)
def get_outflow(
    outflow_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(get_current_user),
):
    return get_or_404(db, Outflow, outflow_id, NOT_FOUND)


@router.put("/{outflow_id}", response_model=schemas.OutflowResponse)
def update_outflow(
    outflow_id: UUID,
    payload: schemas.OutflowUpdate,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("update_outflow")),
):
    outflow = get_or_404(db, Outflow, outflow_id, NOT_FOUND)
    before = snapshot(outflow)

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    check_references(db, changes.get("material_id"), changes.get("unit_id"), changes.get("project_id"))
    apply_movement_fields(outflow, changes, DATE_FIELDS)
    outflow.total_value = line_value(outflow.quantity, outflow.unit_price)

    db.flush()
    write_log(db, table_name="outflows", record_id=outflow.id, action="UPDATE",
              changed_by=current_user.id, old_values=before, new_values=snapshot(outflow))
    db.commit()
    db.refresh(outflow)
    return outflow


# Ledger rows are removed outright; stock is recomputed from what remains
@router.delete("/{outflow_id}")
def delete_outflow(
    outflow_id: UUID,
    db: Session = Depends(get_db),
    current_user: SessionUser = Depends(permission_required("delete_outflow")),
):
    outflow = get_or_404(db, Outflow, outflow_id, NOT_FOUND)
    write_log(db, table_name="outflows", record_id=outflow.id, action="DELETE",
              changed_by=current_user.id, old_values=snapshot(outflow))
    db.delete(outflow)
    db.commit()
    return {"message": "Outflow deleted successfully"}
