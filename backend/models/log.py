import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship
from database import Base
from utils.time_utils import utcnow

# Audit trail of create/update/delete operations on inventory records
class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    table_name = Column(String(100), nullable=False, index=True)
    record_id = Column(Uuid, nullable=False, index=True)
    action = Column(String(20), nullable=False, index=True)  # CREATE, UPDATE, DELETE

    # JSON snapshots of the record before and after the change
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)

    changed_by = Column(Uuid, ForeignKey("users.id"), nullable=False)
    changed_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    # Relationship to the acting user
    changed_by_user = relationship("User", lazy="joined", uselist=False)
