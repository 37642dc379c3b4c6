"""
User model: officers manage parking lots and confirm payments, users reserve.
"""
from datetime import datetime
from sqlalchemy import Column, DateTime, Integer, String, Enum
from sqlalchemy.orm import relationship
import enum

from ..db import Base


class UserRole(str, enum.Enum):
    OFFICER = "OFFICER"
    USER = "USER"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(UserRole, name="userrole"),
                  default=UserRole.USER, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow,
                        onupdate=datetime.utcnow, nullable=False)

    # Relationships
    reservations = relationship(
        "Reservation", back_populates="user", lazy="select")

    def is_officer(self):
        return self.role == UserRole.OFFICER
