# Import models in dependency order to avoid relationship resolution issues

from .user import User, UserRole
from .parking import Parking
from .reservation import (
    ACTIVE_STATUSES,
    PaymentMethod,
    Reservation,
    ReservationStatus,
)

# Export all models
__all__ = [
    "User",
    "UserRole",
    "Parking",
    "Reservation",
    "ReservationStatus",
    "PaymentMethod",
    "ACTIVE_STATUSES",
]
