# parking_server/models/reservation.py
"""
Reservation model: a user's claim on one parking lot for [start_time, end_time).
"""
from sqlalchemy import CheckConstraint, Column, Integer, ForeignKey, Enum, DateTime, Index
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from ..db import Base


class ReservationStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELED = "CANCELED"
    # Never written by the API; clients may still display it
    COMPLETED = "COMPLETED"


class PaymentMethod(str, enum.Enum):
    CASH = "CASH"
    CARD = "CARD"


# Statuses that hold the slot
ACTIVE_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("start_time < end_time",
                        name="ck_reservations_interval"),
        Index("ix_reservations_parking_window",
              "parking_id", "start_time", "end_time"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    parking_id = Column(Integer, ForeignKey("parkings.id"), nullable=False)

    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)

    status = Column(Enum(ReservationStatus, name="reservationstatus"),
                    default=ReservationStatus.PENDING, nullable=False)
    payment_method = Column(Enum(PaymentMethod, name="paymentmethod"),
                            default=PaymentMethod.CASH, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow,
                        onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="reservations", lazy="select")
    parking = relationship(
        "Parking", back_populates="reservations", lazy="select")
