from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from models.users import Role
from schemas.common import ORMBase

# Schema for user authentication credentials
class UserLogin(ORMBase):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

# Schema for account creation by a super user
class UserCreate(ORMBase):
    name: str = Field(min_length=1, max_length=255)
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=6, max_length=72)
    role: Role = Role.VIEWER

# Partial account update
class UserUpdate(ORMBase):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    role: Optional[Role] = None
    is_active: Optional[bool] = None

# Output schema for user profile details
class UserResponse(ORMBase):
    id: UUID
    name: str
    username: str
    role: Role
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

# Identity carried by a signed session token. role is None when the
# token holds a role outside the known set.
class SessionUser(ORMBase):
    id: UUID
    username: str
    name: Optional[str] = None
    role: Optional[Role] = None

# Schema for JWT authentication token response
class Token(ORMBase):
    access_token: str
    token_type: str = "bearer"
    user: SessionUser
