# backend/models/material.py
import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import relationship
from database import Base
from models.catalog import active_name_index
from utils.time_utils import utcnow

# Stock-keeping item. Never hard-deleted while ledger rows reference it.
class Material(Base):
    __tablename__ = "materials"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=False, index=True)

    # Threshold at or below which the material is reported as low stock
    min_stock_level = Column(Numeric(12, 2), nullable=True, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    category = relationship("Category")
    material_units = relationship(
        "MaterialUnit",
        back_populates="material",
        cascade="all, delete-orphan",
        order_by="MaterialUnit.is_primary.desc()",
    )

    @property
    def unit_ids(self):
        return [mu.unit_id for mu in self.material_units]


# Units a material may be booked in; exactly one is primary
class MaterialUnit(Base):
    __tablename__ = "material_units"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    material_id = Column(Uuid, ForeignKey("materials.id", ondelete="CASCADE"), nullable=False, index=True)
    unit_id = Column(Uuid, ForeignKey("units.id", ondelete="CASCADE"), nullable=False, index=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    conversion_factor = Column(Numeric(12, 4), nullable=True, default=1)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    material = relationship("Material", back_populates="material_units")
    unit = relationship("Unit")


active_name_index(Material, "uq_materials_active_name")
