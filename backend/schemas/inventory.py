# backend/schemas/inventory.py
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from schemas.common import ORMBase


# Derived per-material stock figures
class StockLevelOut(ORMBase):
    material_id: UUID
    material_name: str
    category_name: Optional[str] = None
    current_stock: float
    min_stock_level: Optional[float] = None
    total_inflow: float
    total_outflow: float
    low_stock: bool
    out_of_stock: bool

class DashboardSummary(ORMBase):
    total_materials: int
    low_stock_materials: int
    out_of_stock_materials: int
    # Placeholder until materials are priced; always 0
    total_stock_value: float

# Single ledger event tagged with its direction
class ActivityOut(ORMBase):
    id: UUID
    type: Literal["inflow", "outflow"]
    material_id: UUID
    material_name: Optional[str] = None
    quantity: float
    unit_name: Optional[str] = None
    project_name: Optional[str] = None
    date: datetime
    person: Optional[str] = None
    created_at: datetime

class MovementOut(ActivityOut):
    category_name: Optional[str] = None
    purpose: Optional[str] = None

class DashboardResponse(ORMBase):
    summary: DashboardSummary
    stock_levels: List[StockLevelOut]
    recent_activities: List[ActivityOut]
    low_stock_alerts: List[StockLevelOut]
