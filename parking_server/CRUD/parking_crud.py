from sqlalchemy.orm import Session
from typing import List, Optional

from parking_server.models.parking import Parking
from parking_server.models.reservation import Reservation
from parking_server.schemas.parking import ParkingCreate, ParkingUpdate


def get_by_id(db: Session, parking_id: int) -> Optional[Parking]:
    """Get parking lot by ID"""
    return db.query(Parking).filter(Parking.id == parking_id).first()


def get_all(db: Session) -> List[Parking]:
    return db.query(Parking).order_by(Parking.id).all()


def create(db: Session, parking_data: ParkingCreate) -> Parking:
    """Create new parking lot"""
    db_parking = Parking(
        name=parking_data.name,
        location=parking_data.location,
        capacity=parking_data.capacity,
    )
    db.add(db_parking)
    db.commit()
    db.refresh(db_parking)
    return db_parking


def update(db: Session, parking_id: int, parking_data: ParkingUpdate) -> Optional[Parking]:
    """Update parking lot with the fields that were sent"""
    db_obj = get_by_id(db, parking_id)
    if not db_obj:
        return None

    update_data = parking_data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(db_obj, field, value)

    db.commit()
    db.refresh(db_obj)
    return db_obj


def has_reservations(db: Session, parking_id: int) -> bool:
    return db.query(Reservation.id).filter(
        Reservation.parking_id == parking_id).first() is not None


def delete(db: Session, parking_id: int) -> bool:
    """Delete parking lot"""
    db_obj = get_by_id(db, parking_id)
    if not db_obj:
        return False

    db.delete(db_obj)
    db.commit()
    return True
