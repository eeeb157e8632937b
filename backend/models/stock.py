# backend/models/stock.py
import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Numeric, Uuid
from sqlalchemy.orm import relationship
from database import Base
from utils.time_utils import utcnow

# Ledger rows. Stock on hand is always sum(inflows) - sum(outflows),
# there is no running counter to keep in sync.

# Goods received into the warehouse
class Inflow(Base):
    __tablename__ = "inflows"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    material_id = Column(Uuid, ForeignKey("materials.id"), nullable=False, index=True)
    unit_id = Column(Uuid, ForeignKey("units.id"), nullable=False, index=True)
    project_id = Column(Uuid, ForeignKey("projects.id"), nullable=False, index=True)

    quantity = Column(Numeric(12, 2), nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=True)
    total_value = Column(Numeric(12, 2), nullable=True)

    delivery_date = Column(DateTime, nullable=False, index=True)
    received_by = Column(String(255), nullable=False)
    supplier_name = Column(String(255), nullable=False)
    purpose = Column(Text, nullable=False)
    support_document = Column(String(500), nullable=True)  # File path/URL
    batch_number = Column(String(100), nullable=True)
    expiry_date = Column(DateTime, nullable=True)

    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    material = relationship("Material")
    unit = relationship("Unit")
    project = relationship("Project")

    @property
    def material_name(self):
        return self.material.name if self.material else None


# Goods released from the warehouse to a project
class Outflow(Base):
    __tablename__ = "outflows"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    material_id = Column(Uuid, ForeignKey("materials.id"), nullable=False, index=True)
    unit_id = Column(Uuid, ForeignKey("units.id"), nullable=False, index=True)
    project_id = Column(Uuid, ForeignKey("projects.id"), nullable=False, index=True)

    quantity = Column(Numeric(12, 2), nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=True)
    total_value = Column(Numeric(12, 2), nullable=True)

    release_date = Column(DateTime, nullable=False, index=True)
    authorized_by = Column(String(255), nullable=False)
    received_by = Column(String(255), nullable=False)
    purpose = Column(Text, nullable=False)
    support_document = Column(String(500), nullable=True)  # File path/URL

    # Returnable items
    return_date = Column(DateTime, nullable=True)
    is_returned = Column(Boolean, nullable=False, default=False)

    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    material = relationship("Material")
    unit = relationship("Unit")
    project = relationship("Project")

    @property
    def material_name(self):
        return self.material.name if self.material else None
