"""
Cash payment routes for officers.
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth_utils import officer_required
from ..db import get_db
from ..schemas.reservation import ReservationOut
from ..utils import reservation_rules

router = APIRouter(
    prefix="/payments",
    tags=["payments"],
    dependencies=[Depends(officer_required)],
)


@router.get("", response_model=List[ReservationOut])
def list_pending_payments(db: Session = Depends(get_db)):
    """All reservations waiting for a cash payment"""
    return reservation_rules.list_pending_cash_payments(db)


@router.patch("/{reservation_id}/confirm", response_model=ReservationOut)
def confirm_payment(reservation_id: int, db: Session = Depends(get_db)):
    return reservation_rules.confirm_cash_payment(db, reservation_id)
