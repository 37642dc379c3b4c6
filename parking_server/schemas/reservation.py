from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional

from parking_server.models.reservation import PaymentMethod, ReservationStatus

from .parking import ParkingSummary
from .user import UserSummary


class ReservationCreate(BaseModel):
    # Presence and timestamp format are checked by the handler so both are a 400
    parking_id: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ReservationOut(BaseModel):
    id: int
    user_id: int
    parking_id: int
    start_time: datetime
    end_time: datetime
    status: ReservationStatus
    payment_method: PaymentMethod
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True  # For SQLAlchemy ORM compatibility
        alias_generator = to_camel
        populate_by_name = True


class ReservationWithParking(ReservationOut):
    """Listing shape for the owner: carries the lot's name and location"""
    parking: ParkingSummary


class ReservationDetail(ReservationOut):
    parking: ParkingSummary
    user: UserSummary
