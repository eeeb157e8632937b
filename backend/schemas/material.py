# backend/schemas/material.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from schemas.common import Name, ORMBase


class MaterialCreate(ORMBase):
    name: Name = Field(description="Material name")
    description: Optional[str] = None
    category_id: UUID
    min_stock_level: Optional[Decimal] = Field(None, ge=0)
    # First unit becomes the primary unit
    unit_ids: List[UUID] = Field(min_length=1)

class MaterialUpdate(ORMBase):
    """Schema for PUT requests - all fields optional."""
    name: Optional[Name] = None
    description: Optional[str] = None
    category_id: Optional[UUID] = None
    min_stock_level: Optional[Decimal] = Field(None, ge=0)
    unit_ids: Optional[List[UUID]] = Field(None, min_length=1)

class MaterialResponse(ORMBase):
    id: UUID
    name: str
    description: Optional[str] = None
    category_id: UUID
    min_stock_level: Optional[float] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    unit_ids: List[UUID] = []


# Material as offered in form dropdowns, with the units it can be booked in
class MaterialUnitOut(ORMBase):
    id: UUID
    name: str
    abbreviation: Optional[str] = None
    is_primary: bool

class MaterialWithUnits(ORMBase):
    id: UUID
    name: str
    category_id: UUID
    category_name: Optional[str] = None
    units: List[MaterialUnitOut]
