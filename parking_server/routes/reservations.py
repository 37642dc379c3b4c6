# parking_server/routes/reservations.py
"""
Reservation routes for users (create, list own, cancel) and officers (lookup).
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth_utils import get_current_user, officer_required
from ..CRUD import reservation_crud
from ..db import get_db
from ..exceptions import BadRequestException, NotFoundException
from ..models.reservation import ReservationStatus
from ..models.user import User
from ..schemas.reservation import (
    ReservationCreate,
    ReservationDetail,
    ReservationOut,
    ReservationWithParking,
)
from ..utils import reservation_rules

router = APIRouter(
    prefix="/reservations",
    tags=["reservations"]
)


def _parse_status(raw: Optional[str]) -> Optional[ReservationStatus]:
    if not raw:
        return None
    try:
        return ReservationStatus(raw.upper())
    except ValueError:
        raise BadRequestException(f"Unknown reservation status: {raw}")


def _parse_past(raw: Optional[str]) -> Optional[bool]:
    # Only the literal strings filter; anything else lists everything
    if raw == "true":
        return True
    if raw == "false":
        return False
    return None


@router.post("", response_model=ReservationOut, status_code=status.HTTP_201_CREATED)
def create_reservation(resv_in: ReservationCreate, db: Session = Depends(get_db),
                       current: User = Depends(get_current_user)):
    try:
        start = reservation_rules.parse_timestamp(resv_in.start_time) if resv_in.start_time else None
        end = reservation_rules.parse_timestamp(resv_in.end_time) if resv_in.end_time else None
    except ValueError:
        raise BadRequestException("Invalid startTime or endTime")

    return reservation_rules.create_reservation(
        db,
        current,
        resv_in.parking_id,
        start,
        end,
        resv_in.payment_method,
    )


@router.get("", response_model=List[ReservationWithParking])
def list_my_reservations(
    status_filter: Optional[str] = Query(None, alias="status"),
    past: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    return reservation_crud.list_for_user(
        db,
        current.id,
        status=_parse_status(status_filter),
        past=_parse_past(past),
    )


@router.get("/{reservation_id}", response_model=ReservationDetail, dependencies=[Depends(officer_required)])
def get_reservation(reservation_id: int, db: Session = Depends(get_db)):
    reservation = reservation_crud.get_with_details(db, reservation_id)
    if not reservation:
        raise NotFoundException("Reservation not found")
    return reservation


@router.patch("/{reservation_id}/cancel", response_model=ReservationOut)
def cancel_reservation(reservation_id: int, db: Session = Depends(get_db),
                       current: User = Depends(get_current_user)):
    return reservation_rules.cancel_reservation(db, reservation_id, current)
