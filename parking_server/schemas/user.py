"""
User schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from parking_server.models.user import UserRole


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    role: Optional[UserRole] = None


class UserOut(BaseModel):
    id: int
    username: str
    role: UserRole
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class UserSummary(BaseModel):
    """The trimmed user returned alongside a login token"""
    id: int
    username: str
    role: UserRole

    class Config:
        from_attributes = True
