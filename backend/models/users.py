# backend/models/users.py
import enum
import uuid
from typing import Optional

from sqlalchemy import Column, String, Boolean, DateTime, Enum, Uuid
from database import Base
from utils.time_utils import utcnow

# Closed set of roles a session may carry
class Role(str, enum.Enum):
    SUPER_USER = "SUPER_USER"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"

    @classmethod
    def parse(cls, value) -> Optional["Role"]:
        """Map a raw claim to a Role; anything unrecognized becomes None."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None

# Represents a user account with authentication details and system role
class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(Role, name="user_role"), nullable=False, default=Role.VIEWER)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
