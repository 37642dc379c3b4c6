"""
Parking schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ParkingCreate(BaseModel):
    # Optional so missing fields come back as 400, not a schema 422
    name: Optional[str] = None
    location: Optional[str] = None
    capacity: Optional[int] = None


class ParkingUpdate(BaseModel):
    """All fields optional for partial updates."""
    name: Optional[str] = None
    location: Optional[str] = None
    capacity: Optional[int] = None


class ParkingOut(BaseModel):
    id: int
    name: str
    location: str
    capacity: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class ParkingSummary(BaseModel):
    name: str
    location: str

    class Config:
        from_attributes = True


class DeleteResponse(BaseModel):
    success: bool
