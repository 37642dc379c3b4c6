"""
Parking model: a reservable lot. Every lot is a single reservable slot,
whatever its capacity says.
"""
from datetime import datetime
from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from ..db import Base


class Parking(Base):
    __tablename__ = "parkings"
    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_parkings_capacity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    capacity = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow,
                        onupdate=datetime.utcnow, nullable=False)

    reservations = relationship(
        "Reservation", back_populates="parking", lazy="select")
