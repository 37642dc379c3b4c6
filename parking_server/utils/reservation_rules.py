# parking_server/utils/reservation_rules.py
"""
Conflict detection, availability search and status transitions for reservations.

Intervals are half-open, [start, end): a reservation ending at 10:00 and one
starting at 10:00 do not overlap. Only PENDING and CONFIRMED reservations
hold a parking lot; CANCELED ones are ignored everywhere below.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import (
    BadRequestException,
    ErrorCode,
    NotFoundException,
    UnauthorizedException,
)
from ..models.parking import Parking
from ..models.reservation import (
    ACTIVE_STATUSES,
    PaymentMethod,
    Reservation,
    ReservationStatus,
)
from ..models.user import User

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for exclusion_violation
EXCLUSION_VIOLATION = "23P01"


def to_utc_naive(value: datetime) -> datetime:
    """Timestamps are stored as naive UTC."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_timestamp(raw: str) -> datetime:
    """
    Parse an ISO-8601 timestamp ("2025-06-01T10:00:00Z" included).

    Raises:
        ValueError: the string is not a timestamp
    """
    raw = raw.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    return to_utc_naive(datetime.fromisoformat(raw))


def intervals_overlap(a_start: datetime, a_end: datetime,
                      b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and b_start < a_end


def overlapping(start: datetime, end: datetime):
    """SQL form of intervals_overlap against the reservations table."""
    return and_(
        Reservation.status.in_(ACTIVE_STATUSES),
        Reservation.start_time < end,
        Reservation.end_time > start,
    )


def find_conflicting_reservation(db: Session, parking_id: int,
                                 start: datetime, end: datetime) -> Optional[Reservation]:
    return db.query(Reservation).filter(
        Reservation.parking_id == parking_id,
        overlapping(start, end),
    ).first()


def find_available_parkings(db: Session, start: datetime, end: datetime) -> List[Parking]:
    """
    Every parking lot with no active reservation overlapping [start, end).

    A lot with any overlapping reservation is excluded whatever its capacity.
    start >= end is accepted and matches no reservation.
    """
    reserved_ids = select(Reservation.parking_id).where(
        overlapping(start, end)
    ).distinct()

    return db.query(Parking).filter(
        Parking.id.notin_(reserved_ids)
    ).order_by(Parking.id).all()


def _conflict_error() -> BadRequestException:
    return BadRequestException(
        "The selected parking spot is already reserved for the chosen time range.",
        ErrorCode.RESERVATION_CONFLICT,
    )


def _commit(db: Session, parking_id: int):
    """Commit, turning an exclusion constraint violation into a conflict."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if getattr(e.orig, "pgcode", None) == EXCLUSION_VIOLATION:
            logger.warning(f"Exclusion constraint rejected overlap on parking {parking_id}")
            raise _conflict_error()
        raise


def create_reservation(db: Session, user: User, parking_id: Optional[int],
                       start: Optional[datetime], end: Optional[datetime],
                       payment_method: Optional[PaymentMethod] = None) -> Reservation:
    """
    Validate, check for conflicts and persist a PENDING reservation.

    The check and the insert share one transaction that holds the write lock:
    the parking row is locked with SELECT ... FOR UPDATE, and on SQLite the
    transaction itself was opened with BEGIN IMMEDIATE. On PostgreSQL the
    exclusion constraint on reservations backs this up.

    Raises:
        BadRequestException: missing fields, bad interval, or conflict
        NotFoundException: unknown parking lot
    """
    if parking_id is None or start is None or end is None:
        raise BadRequestException("parkingId, startTime, and endTime are required")

    start = to_utc_naive(start)
    end = to_utc_naive(end)
    if start >= end:
        raise BadRequestException(
            "Invalid startTime or endTime. Start time must be before end time.")

    parking = db.query(Parking).filter(
        Parking.id == parking_id
    ).with_for_update().first()
    if not parking:
        raise NotFoundException("Parking lot not found")

    conflict = find_conflicting_reservation(db, parking.id, start, end)
    if conflict:
        logger.warning(
            f"Reservation conflict on parking {parking.id} with reservation {conflict.id}")
        db.rollback()
        raise _conflict_error()

    reservation = Reservation(
        user_id=user.id,
        parking_id=parking.id,
        start_time=start,
        end_time=end,
        payment_method=payment_method or PaymentMethod.CASH,
        status=ReservationStatus.PENDING,
    )
    db.add(reservation)
    _commit(db, parking.id)
    db.refresh(reservation)

    logger.info(
        f"Reservation {reservation.id} created by user {user.id} on parking {parking.id}")
    return reservation


def get_reservation_or_404(db: Session, reservation_id: int) -> Reservation:
    reservation = db.query(Reservation).filter(
        Reservation.id == reservation_id).first()
    if not reservation:
        raise NotFoundException("Reservation not found")
    return reservation


def _transition(db: Session, reservation: Reservation, new_status: ReservationStatus,
                *conditions) -> bool:
    """
    UPDATE the status only while the row still matches conditions.

    Returns False, with the session rolled back, when no row matched.
    """
    updated = db.query(Reservation).filter(
        Reservation.id == reservation.id,
        *conditions,
    ).update({Reservation.status: new_status}, synchronize_session=False)
    if not updated:
        db.rollback()
        return False
    _commit(db, reservation.parking_id)
    db.refresh(reservation)
    return True


def _check_cancelable(reservation: Reservation):
    if reservation.status == ReservationStatus.CANCELED:
        raise BadRequestException(
            "Reservation is already canceled.", ErrorCode.ALREADY_CANCELED)

    if reservation.status not in ACTIVE_STATUSES:
        raise BadRequestException(
            f"Cannot cancel reservation with status: {reservation.status.value}.",
            ErrorCode.INVALID_STATUS_FOR_ACTION,
        )


def cancel_reservation(db: Session, reservation_id: int, user: User) -> Reservation:
    """
    Owner-only cancellation from PENDING or CONFIRMED.

    Canceling twice is an error (ALREADY_CANCELED), never a silent success.
    """
    reservation = get_reservation_or_404(db, reservation_id)

    if reservation.user_id != user.id:
        raise UnauthorizedException(
            "You are not authorized to cancel this reservation.")

    _check_cancelable(reservation)

    if not _transition(db, reservation, ReservationStatus.CANCELED,
                       Reservation.status.in_(ACTIVE_STATUSES)):
        # Status changed under us; report what it is now
        _check_cancelable(reservation)

    logger.info(f"Reservation {reservation.id} canceled by user {user.id}")
    return reservation


def is_confirmable(reservation: Reservation) -> bool:
    return (reservation.payment_method == PaymentMethod.CASH
            and reservation.status == ReservationStatus.PENDING)


def confirm_cash_payment(db: Session, reservation_id: int) -> Reservation:
    """PENDING + CASH -> CONFIRMED. Anything else is not eligible."""
    reservation = get_reservation_or_404(db, reservation_id)

    if not is_confirmable(reservation) or not _transition(
            db, reservation, ReservationStatus.CONFIRMED,
            Reservation.status == ReservationStatus.PENDING,
            Reservation.payment_method == PaymentMethod.CASH):
        raise BadRequestException(
            "Reservation not eligible for confirmation",
            ErrorCode.PAYMENT_NOT_ELIGIBLE,
        )

    logger.info(f"Cash payment confirmed for reservation {reservation.id}")
    return reservation


def list_pending_cash_payments(db: Session) -> List[Reservation]:
    return db.query(Reservation).filter(
        Reservation.payment_method == PaymentMethod.CASH,
        Reservation.status == ReservationStatus.PENDING,
    ).order_by(Reservation.start_time).all()
