# backend/models/catalog.py
import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, Index, Uuid, func, true
from database import Base
from utils.time_utils import utcnow


def active_name_index(model, name: str) -> Index:
    # Case-insensitive uniqueness of names among active rows
    return Index(
        name,
        func.lower(model.name),
        unique=True,
        sqlite_where=model.is_active == true(),
        postgresql_where=model.is_active == true(),
    )


# A construction project that inflows and outflows are booked against
class Project(Base):
    __tablename__ = "projects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


# Material grouping, e.g. "Cement & Concrete"
class Category(Base):
    __tablename__ = "categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


# Unit of measure (bags, tons, pieces...)
class Unit(Base):
    __tablename__ = "units"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    abbreviation = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


active_name_index(Project, "uq_projects_active_name")
active_name_index(Category, "uq_categories_active_name")
active_name_index(Unit, "uq_units_active_name")
