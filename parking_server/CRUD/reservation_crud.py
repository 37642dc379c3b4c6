from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from parking_server.models.reservation import Reservation, ReservationStatus


def get_with_details(db: Session, reservation_id: int) -> Optional[Reservation]:
    """Reservation with its parking lot and owner loaded"""
    return db.query(Reservation).options(
        joinedload(Reservation.parking),
        joinedload(Reservation.user),
    ).filter(Reservation.id == reservation_id).first()


def list_for_user(db: Session, user_id: int,
                  status: Optional[ReservationStatus] = None,
                  past: Optional[bool] = None,
                  now: Optional[datetime] = None) -> List[Reservation]:
    """
    A user's own reservations, newest start first.

    past=True keeps reservations that already ended, past=False the ones
    still running or ahead, None keeps both.
    """
    query = db.query(Reservation).options(
        joinedload(Reservation.parking)
    ).filter(Reservation.user_id == user_id)

    if status is not None:
        query = query.filter(Reservation.status == status)

    now = now or datetime.utcnow()
    if past is True:
        query = query.filter(Reservation.end_time < now)
    elif past is False:
        query = query.filter(Reservation.end_time >= now)

    return query.order_by(Reservation.start_time.desc()).all()
