"""
Parking lot routes: listing and availability for everyone signed in,
create/update/delete for officers.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth_utils import get_current_user, officer_required
from ..CRUD import parking_crud
from ..db import get_db
from ..exceptions import BadRequestException, NotFoundException
from ..schemas.parking import DeleteResponse, ParkingCreate, ParkingOut, ParkingUpdate
from ..utils.reservation_rules import find_available_parkings, parse_timestamp

router = APIRouter(
    prefix="/parking",
    tags=["parking"]
)


def _check_capacity(capacity: Optional[int]) -> None:
    if capacity is not None and capacity <= 0:
        raise BadRequestException("capacity must be a positive integer")


@router.get("", response_model=List[ParkingOut], dependencies=[Depends(get_current_user)])
def list_parkings(db: Session = Depends(get_db)):
    return parking_crud.get_all(db)


# Declared before /{parking_id} so "available" is not read as an id
@router.get("/available", response_model=List[ParkingOut], dependencies=[Depends(get_current_user)])
def list_available_parkings(
    start_time: Optional[str] = Query(None, alias="startTime"),
    end_time: Optional[str] = Query(None, alias="endTime"),
    db: Session = Depends(get_db),
):
    """
    Parking lots with no PENDING/CONFIRMED reservation overlapping
    [startTime, endTime). The bounds are not required to be ordered.
    """
    if not start_time or not end_time:
        raise BadRequestException("startTime and endTime are required")

    try:
        start = parse_timestamp(start_time)
        end = parse_timestamp(end_time)
    except ValueError:
        raise BadRequestException("Invalid date format")

    return find_available_parkings(db, start, end)


@router.get("/{parking_id}", response_model=ParkingOut, dependencies=[Depends(get_current_user)])
def get_parking(parking_id: int, db: Session = Depends(get_db)):
    parking = parking_crud.get_by_id(db, parking_id)
    if not parking:
        raise NotFoundException("Parking lot not found")
    return parking


@router.post("", response_model=ParkingOut, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(officer_required)])
def create_parking(parking_in: ParkingCreate, db: Session = Depends(get_db)):
    if not parking_in.name or not parking_in.location or parking_in.capacity is None:
        raise BadRequestException("name, location, and capacity are required")
    _check_capacity(parking_in.capacity)

    return parking_crud.create(db, parking_in)


@router.put("/{parking_id}", response_model=ParkingOut, dependencies=[Depends(officer_required)])
def update_parking(parking_id: int, parking_in: ParkingUpdate, db: Session = Depends(get_db)):
    _check_capacity(parking_in.capacity)

    parking = parking_crud.update(db, parking_id, parking_in)
    if not parking:
        raise NotFoundException("Parking lot not found")
    return parking


@router.delete("/{parking_id}", response_model=DeleteResponse, dependencies=[Depends(officer_required)])
def delete_parking(parking_id: int, db: Session = Depends(get_db)):
    if not parking_crud.get_by_id(db, parking_id):
        raise NotFoundException("Parking lot not found")

    # Reservations are never deleted, so a referenced lot stays
    if parking_crud.has_reservations(db, parking_id):
        raise BadRequestException(
            "Parking lot has reservations and cannot be deleted")

    parking_crud.delete(db, parking_id)
    return {"success": True}
