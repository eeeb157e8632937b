# backend/utils/inventory_queries.py
"""Read-side inventory queries.

Stock levels are derived from the inflow/outflow ledgers on every call:
nothing is cached and there is no stored running balance, so a dashboard
read always reflects every committed ledger row.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from models.catalog import Category, Project, Unit
from models.material import Material, MaterialUnit
from models.stock import Inflow, Outflow

DASHBOARD_STOCK_LIMIT = 20
LOW_STOCK_ALERT_LIMIT = 5
RECENT_ACTIVITY_LIMIT = 10

ZERO = Decimal("0")


def _to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def is_low_stock(current_stock: Decimal, min_stock_level: Optional[Decimal]) -> bool:
    """A threshold must be set and positive for the low-stock alert to fire."""
    if min_stock_level is None:
        return False
    threshold = _to_decimal(min_stock_level)
    return threshold > 0 and current_stock <= threshold


def is_out_of_stock(current_stock: Decimal) -> bool:
    return current_stock <= 0


@dataclass
class StockLevel:
    material_id: UUID
    material_name: str
    category_name: Optional[str]
    total_inflow: Decimal
    total_outflow: Decimal
    min_stock_level: Optional[Decimal] = None

    @property
    def current_stock(self) -> Decimal:
        return self.total_inflow - self.total_outflow

    # The two flags are independent; a material can be both
    @property
    def low_stock(self) -> bool:
        return is_low_stock(self.current_stock, self.min_stock_level)

    @property
    def out_of_stock(self) -> bool:
        return is_out_of_stock(self.current_stock)


@dataclass
class Activity:
    id: UUID
    type: str  # "inflow" | "outflow"
    material_id: UUID
    material_name: Optional[str]
    category_name: Optional[str]
    quantity: Decimal
    unit_name: Optional[str]
    project_name: Optional[str]
    date: datetime
    person: Optional[str]
    purpose: Optional[str]
    created_at: datetime


def _ledger_totals(db: Session, model, unit_id: Optional[UUID] = None):
    """Per-material quantity sums of one ledger, as a subquery."""
    query = db.query(
        model.material_id.label("material_id"),
        func.sum(model.quantity).label("total"),
    )
    if unit_id is not None:
        query = query.filter(model.unit_id == unit_id)
    return query.group_by(model.material_id).subquery()


def _stock_query(db: Session, unit_id: Optional[UUID] = None):
    # Each ledger is summed separately before joining so that inflow and
    # outflow rows never multiply each other
    inflow_totals = _ledger_totals(db, Inflow, unit_id)
    outflow_totals = _ledger_totals(db, Outflow, unit_id)
    return (
        db.query(
            Material.id.label("material_id"),
            Material.name.label("material_name"),
            Category.name.label("category_name"),
            Material.min_stock_level.label("min_stock_level"),
            func.coalesce(inflow_totals.c.total, 0).label("total_inflow"),
            func.coalesce(outflow_totals.c.total, 0).label("total_outflow"),
        )
        .outerjoin(Category, Category.id == Material.category_id)
        .outerjoin(inflow_totals, inflow_totals.c.material_id == Material.id)
        .outerjoin(outflow_totals, outflow_totals.c.material_id == Material.id)
    )


def _row_to_stock_level(row) -> StockLevel:
    return StockLevel(
        material_id=row.material_id,
        material_name=row.material_name,
        category_name=row.category_name,
        total_inflow=_to_decimal(row.total_inflow),
        total_outflow=_to_decimal(row.total_outflow),
        min_stock_level=None if row.min_stock_level is None else _to_decimal(row.min_stock_level),
    )


def compute_stock_levels(db: Session) -> List[StockLevel]:
    """Current stock of every active material; materials without ledger rows report zero."""
    rows = (
        _stock_query(db)
        .filter(Material.is_active.is_(True))
        .order_by(Material.name)
        .all()
    )
    return [_row_to_stock_level(row) for row in rows]


def get_material_stock(db: Session, material_id: UUID, unit_id: Optional[UUID] = None) -> Optional[StockLevel]:
    """Stock of a single material, optionally counting only movements booked in one unit."""
    row = _stock_query(db, unit_id).filter(Material.id == material_id).first()
    return _row_to_stock_level(row) if row else None


def _activity_query(db: Session, model, date_col, person_col):
    return (
        db.query(
            model.id,
            model.material_id,
            Material.name.label("material_name"),
            Category.name.label("category_name"),
            model.quantity,
            Unit.name.label("unit_name"),
            Project.name.label("project_name"),
            date_col.label("date"),
            person_col.label("person"),
            model.purpose,
            model.created_at,
        )
        .outerjoin(Material, Material.id == model.material_id)
        .outerjoin(Category, Category.id == Material.category_id)
        .outerjoin(Unit, Unit.id == model.unit_id)
        .outerjoin(Project, Project.id == model.project_id)
    )


def _to_activity(row, direction: str) -> Activity:
    return Activity(
        id=row.id,
        type=direction,
        material_id=row.material_id,
        material_name=row.material_name,
        category_name=row.category_name,
        quantity=_to_decimal(row.quantity),
        unit_name=row.unit_name,
        project_name=row.project_name,
        date=row.date,
        person=row.person,
        purpose=row.purpose,
        created_at=row.created_at,
    )


def _inflow_activities(db: Session):
    return _activity_query(db, Inflow, Inflow.delivery_date, Inflow.received_by)


def _outflow_activities(db: Session):
    return _activity_query(db, Outflow, Outflow.release_date, Outflow.authorized_by)


def merge_activities(activities: List[Activity], limit: Optional[int] = None) -> List[Activity]:
    """Newest event date first; rows booked on the same date fall back to creation time."""
    ordered = sorted(activities, key=lambda a: (a.date, a.created_at), reverse=True)
    return ordered if limit is None else ordered[:limit]


def get_recent_activities(db: Session, limit: int = RECENT_ACTIVITY_LIMIT) -> List[Activity]:
    inflows = (
        _inflow_activities(db)
        .order_by(Inflow.delivery_date.desc(), Inflow.created_at.desc())
        .limit(limit)
        .all()
    )
    outflows = (
        _outflow_activities(db)
        .order_by(Outflow.release_date.desc(), Outflow.created_at.desc())
        .limit(limit)
        .all()
    )
    activities = [_to_activity(r, "inflow") for r in inflows] + [_to_activity(r, "outflow") for r in outflows]
    return merge_activities(activities, limit)


def get_inventory_movements(
    db: Session,
    start_date: datetime,
    end_date: datetime,
    material_id: Optional[UUID] = None,
    project_id: Optional[UUID] = None,
) -> List[Activity]:
    """All ledger movements with an event date inside [start_date, end_date]."""
    inflow_q = _inflow_activities(db).filter(
        Inflow.delivery_date >= start_date, Inflow.delivery_date <= end_date
    )
    outflow_q = _outflow_activities(db).filter(
        Outflow.release_date >= start_date, Outflow.release_date <= end_date
    )
    if material_id is not None:
        inflow_q = inflow_q.filter(Inflow.material_id == material_id)
        outflow_q = outflow_q.filter(Outflow.material_id == material_id)
    if project_id is not None:
        inflow_q = inflow_q.filter(Inflow.project_id == project_id)
        outflow_q = outflow_q.filter(Outflow.project_id == project_id)

    activities = [_to_activity(r, "inflow") for r in inflow_q.all()]
    activities += [_to_activity(r, "outflow") for r in outflow_q.all()]
    return merge_activities(activities)


def summarize_dashboard(stock_levels: List[StockLevel], recent_activities: List[Activity]) -> dict:
    low_stock = [level for level in stock_levels if level.low_stock]
    out_of_stock = [level for level in stock_levels if level.out_of_stock]
    return {
        "summary": {
            "total_materials": len(stock_levels),
            "low_stock_materials": len(low_stock),
            "out_of_stock_materials": len(out_of_stock),
            # Materials carry no price yet, so the valuation is a fixed zero
            "total_stock_value": ZERO,
        },
        "stock_levels": stock_levels[:DASHBOARD_STOCK_LIMIT],
        "recent_activities": recent_activities,
        "low_stock_alerts": low_stock[:LOW_STOCK_ALERT_LIMIT],
    }


def build_dashboard(db: Session) -> dict:
    stock_levels = compute_stock_levels(db)
    recent_activities = get_recent_activities(db, RECENT_ACTIVITY_LIMIT)
    return summarize_dashboard(stock_levels, recent_activities)


def get_materials_with_units(db: Session) -> List[dict]:
    """Active materials that have at least one unit, primary unit first."""
    materials = (
        db.query(Material)
        .options(
            joinedload(Material.category),
            selectinload(Material.material_units).joinedload(MaterialUnit.unit),
        )
        .filter(Material.is_active.is_(True))
        .order_by(Material.name)
        .all()
    )
    result = []
    for material in materials:
        if not material.material_units:
            continue
        result.append({
            "id": material.id,
            "name": material.name,
            "category_id": material.category_id,
            "category_name": material.category.name if material.category else None,
            "units": [
                {
                    "id": mu.unit.id,
                    "name": mu.unit.name,
                    "abbreviation": mu.unit.abbreviation,
                    "is_primary": mu.is_primary,
                }
                for mu in material.material_units
            ],
        })
    return result
