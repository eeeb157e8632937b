# backend/schemas/catalog.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from schemas.common import Name, ORMBase, UnitName


# ---- Projects ----
class ProjectCreate(ORMBase):
    name: Name = Field(description="Project name")
    description: Optional[str] = None

class ProjectUpdate(ORMBase):
    """All fields optional."""
    name: Optional[Name] = None
    description: Optional[str] = None

class ProjectResponse(ORMBase):
    id: UUID
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ---- Categories ----
class CategoryCreate(ORMBase):
    name: Name = Field(description="Category name")
    description: Optional[str] = None

class CategoryUpdate(ORMBase):
    name: Optional[Name] = None
    description: Optional[str] = None

class CategoryResponse(ProjectResponse):
    pass


# ---- Units ----
class UnitCreate(ORMBase):
    name: UnitName = Field(description="Unit name")
    abbreviation: Optional[str] = Field(None, max_length=20)
    description: Optional[str] = None

class UnitUpdate(ORMBase):
    name: Optional[UnitName] = None
    abbreviation: Optional[str] = Field(None, max_length=20)
    description: Optional[str] = None

class UnitResponse(ORMBase):
    id: UUID
    name: str
    abbreviation: Optional[str] = None
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
