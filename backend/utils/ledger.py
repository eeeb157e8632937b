# backend/utils/ledger.py
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from models.catalog import Project, Unit
from models.material import Material
from utils.time_utils import to_utc_naive


def line_value(quantity, unit_price) -> Optional[Decimal]:
    """quantity * unit_price, or None when no price was given."""
    if quantity is None or unit_price is None:
        return None
    return Decimal(str(quantity)) * Decimal(str(unit_price))


def check_references(
    db: Session,
    material_id: Optional[UUID],
    unit_id: Optional[UUID],
    project_id: Optional[UUID],
) -> None:
    # None means "not being changed"
    checks = (
        (Material, material_id, "Material not found"),
        (Unit, unit_id, "Unit not found"),
        (Project, project_id, "Project not found"),
    )
    for model, record_id, message in checks:
        if record_id is None:
            continue
        exists = db.query(model.id).filter(model.id == record_id, model.is_active.is_(True)).first()
        if exists is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def apply_movement_fields(record, values: dict, date_fields: Iterable[str]) -> None:
    date_fields = set(date_fields)
    for field, value in values.items():
        if field in date_fields and value is not None:
            value = to_utc_naive(value)
        setattr(record, field, value)
