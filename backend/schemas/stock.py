# backend/schemas/stock.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from schemas.common import ORMBase

MIN_QUANTITY = Decimal("0.01")


# Fields shared by both ledger directions
class MovementBase(ORMBase):
    material_id: UUID
    unit_id: UUID
    project_id: UUID
    quantity: Decimal = Field(ge=MIN_QUANTITY, description="Quantity must be greater than 0")
    unit_price: Optional[Decimal] = Field(None, ge=0)
    received_by: str = Field(min_length=1, max_length=255)
    purpose: str = Field(min_length=1)
    support_document: Optional[str] = Field(None, max_length=500)


# ---- Inflows ----
class InflowCreate(MovementBase):
    delivery_date: datetime
    supplier_name: str = Field(min_length=1, max_length=255)
    batch_number: Optional[str] = Field(None, max_length=100)
    expiry_date: Optional[datetime] = None

class InflowUpdate(ORMBase):
    """Schema for PUT requests - all fields optional."""
    material_id: Optional[UUID] = None
    unit_id: Optional[UUID] = None
    project_id: Optional[UUID] = None
    quantity: Optional[Decimal] = Field(None, ge=MIN_QUANTITY)
    unit_price: Optional[Decimal] = Field(None, ge=0)
    delivery_date: Optional[datetime] = None
    received_by: Optional[str] = Field(None, min_length=1, max_length=255)
    supplier_name: Optional[str] = Field(None, min_length=1, max_length=255)
    purpose: Optional[str] = Field(None, min_length=1)
    batch_number: Optional[str] = Field(None, max_length=100)
    expiry_date: Optional[datetime] = None
    support_document: Optional[str] = Field(None, max_length=500)

class InflowResponse(ORMBase):
    id: UUID
    material_id: UUID
    material_name: Optional[str] = None
    unit_id: UUID
    project_id: UUID
    quantity: float
    unit_price: Optional[float] = None
    total_value: Optional[float] = None
    delivery_date: datetime
    received_by: str
    supplier_name: str
    purpose: str
    support_document: Optional[str] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[datetime] = None
    created_by: UUID
    created_at: datetime
    updated_at: datetime


# ---- Outflows ----
class OutflowCreate(MovementBase):
    release_date: datetime
    authorized_by: str = Field(min_length=1, max_length=255)
    return_date: Optional[datetime] = None

class OutflowUpdate(ORMBase):
    """Schema for PUT requests - all fields optional."""
    material_id: Optional[UUID] = None
    unit_id: Optional[UUID] = None
    project_id: Optional[UUID] = None
    quantity: Optional[Decimal] = Field(None, ge=MIN_QUANTITY)
    unit_price: Optional[Decimal] = Field(None, ge=0)
    release_date: Optional[datetime] = None
    authorized_by: Optional[str] = Field(None, min_length=1, max_length=255)
    received_by: Optional[str] = Field(None, min_length=1, max_length=255)
    purpose: Optional[str] = Field(None, min_length=1)
    return_date: Optional[datetime] = None
    is_returned: Optional[bool] = None
    support_document: Optional[str] = Field(None, max_length=500)

class OutflowResponse(ORMBase):
    id: UUID
    material_id: UUID
    material_name: Optional[str] = None
    unit_id: UUID
    project_id: UUID
    quantity: float
    unit_price: Optional[float] = None
    total_value: Optional[float] = None
    release_date: datetime
    authorized_by: str
    received_by: str
    purpose: str
    support_document: Optional[str] = None
    return_date: Optional[datetime] = None
    is_returned: bool
    created_by: UUID
    created_at: datetime
    updated_at: datetime


# Paginated ledger listing
class InflowPage(ORMBase):
    items: List[InflowResponse]
    page: int
    limit: int

class OutflowPage(ORMBase):
    items: List[OutflowResponse]
    page: int
    limit: int
