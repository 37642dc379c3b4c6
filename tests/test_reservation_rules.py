"""
Unit tests for the overlap predicate, conflict detection, availability and
status transition guards, run directly against a session.
"""
from datetime import datetime, timedelta, timezone
from itertools import combinations

import pytest

from conftest import TestingSessionLocal, at, make_parking, make_reservation, make_user
from parking_server.exceptions import (
    BadRequestException,
    ErrorCode,
    NotFoundException,
    UnauthorizedException,
)
from parking_server.models import PaymentMethod, Reservation, ReservationStatus
from parking_server.utils import reservation_rules as rules


class TestIntervalsOverlap:

    @pytest.mark.parametrize("a, b, expected", [
        ((10, 12), (11, 13), True),
        ((10, 12), (9, 11), True),
        ((10, 12), (10, 12), True),
        ((10, 12), (10, 11), True),
        ((10, 14), (11, 12), True),
        ((10, 12), (12, 13), False),
        ((10, 12), (8, 10), False),
        ((10, 12), (13, 14), False),
    ])
    def test_half_open_law(self, a, b, expected):
        a_start, a_end = at(a[0]), at(a[1])
        b_start, b_end = at(b[0]), at(b[1])

        assert rules.intervals_overlap(a_start, a_end, b_start, b_end) is expected
        assert rules.intervals_overlap(a_start, a_end, b_start, b_end) == (
            a_start < b_end and b_start < a_end)

    def test_symmetric(self):
        intervals = [(at(9), at(10)), (at(10), at(12)), (at(11), at(13)), (at(12), at(14))]
        for a, b in combinations(intervals, 2):
            assert rules.intervals_overlap(*a, *b) == rules.intervals_overlap(*b, *a)

    def test_touching_endpoints_do_not_overlap(self):
        assert not rules.intervals_overlap(at(10), at(12), at(12), at(14))
        assert not rules.intervals_overlap(at(12), at(14), at(10), at(12))


class TestParseTimestamp:

    def test_zulu_suffix(self):
        assert rules.parse_timestamp("2025-06-01T10:00:00Z") == at(10)

    def test_offset_converted_to_utc(self):
        assert rules.parse_timestamp("2025-06-01T12:30:00+02:00") == at(10, 30)

    def test_naive_kept(self):
        assert rules.parse_timestamp("2025-06-01T10:00:00") == at(10)

    @pytest.mark.parametrize("raw", ["not-a-date", "2025-13-01T10:00:00Z", ""])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            rules.parse_timestamp(raw)

    def test_to_utc_naive(self):
        aware = datetime(2025, 6, 1, 17, 0, tzinfo=timezone(timedelta(hours=7)))
        assert rules.to_utc_naive(aware) == at(10)
        assert rules.to_utc_naive(at(10)) == at(10)


class TestConflictCheck:

    def test_finds_overlapping_active_reservation(self, db, user, p1):
        existing = make_reservation(db, user, p1, at(10), at(12),
                                    status=ReservationStatus.CONFIRMED)

        conflict = rules.find_conflicting_reservation(db, p1.id, at(11), at(13))

        assert conflict.id == existing.id

    def test_ignores_canceled(self, db, user, p1):
        make_reservation(db, user, p1, at(10), at(12), status=ReservationStatus.CANCELED)

        assert rules.find_conflicting_reservation(db, p1.id, at(10), at(12)) is None

    def test_ignores_other_parking(self, db, user, p1, p2):
        make_reservation(db, user, p2, at(10), at(12))

        assert rules.find_conflicting_reservation(db, p1.id, at(10), at(12)) is None

    def test_back_to_back_is_free(self, db, user, p1):
        make_reservation(db, user, p1, at(10), at(12))

        assert rules.find_conflicting_reservation(db, p1.id, at(9), at(10)) is None
        assert rules.find_conflicting_reservation(db, p1.id, at(12), at(13)) is None


class TestCreateReservation:

    def test_creates_pending_cash(self, db, user, p1):
        reservation = rules.create_reservation(db, user, p1.id, at(10), at(12))

        assert reservation.id is not None
        assert reservation.status == ReservationStatus.PENDING
        assert reservation.payment_method == PaymentMethod.CASH
        assert reservation.user_id == user.id

    def test_keeps_requested_payment_method(self, db, user, p1):
        reservation = rules.create_reservation(db, user, p1.id, at(10), at(12),
                                               PaymentMethod.CARD)

        assert reservation.payment_method == PaymentMethod.CARD

    def test_aware_times_stored_as_utc(self, db, user, p1):
        tz = timezone(timedelta(hours=2))
        reservation = rules.create_reservation(
            db, user, p1.id,
            datetime(2025, 6, 1, 12, 0, tzinfo=tz),
            datetime(2025, 6, 1, 14, 0, tzinfo=tz),
        )

        assert reservation.start_time == at(10)
        assert reservation.end_time == at(12)

    @pytest.mark.parametrize("start, end", [(at(10), at(10)), (at(12), at(10))])
    def test_rejects_empty_or_inverted_interval(self, db, user, p1, start, end):
        with pytest.raises(BadRequestException) as exc:
            rules.create_reservation(db, user, p1.id, start, end)

        assert exc.value.error_code == ErrorCode.BAD_REQUEST
        assert db.query(Reservation).count() == 0

    def test_rejects_missing_fields(self, db, user, p1):
        with pytest.raises(BadRequestException):
            rules.create_reservation(db, user, None, at(10), at(12))
        with pytest.raises(BadRequestException):
            rules.create_reservation(db, user, p1.id, None, at(12))

    def test_unknown_parking(self, db, user):
        with pytest.raises(NotFoundException):
            rules.create_reservation(db, user, 999, at(10), at(12))

    def test_conflict_not_persisted(self, db, user, other_user, p1):
        make_reservation(db, user, p1, at(10), at(12), status=ReservationStatus.CONFIRMED)

        with pytest.raises(BadRequestException) as exc:
            rules.create_reservation(db, other_user, p1.id, at(11), at(13))

        assert exc.value.error_code == ErrorCode.RESERVATION_CONFLICT
        assert db.query(Reservation).count() == 1

    def test_canceled_slot_can_be_rebooked(self, db, user, other_user, p1):
        make_reservation(db, user, p1, at(10), at(12), status=ReservationStatus.CANCELED)

        reservation = rules.create_reservation(db, other_user, p1.id, at(10), at(12))

        assert reservation.status == ReservationStatus.PENDING

    def test_no_double_booking_across_attempts(self, db, user, p1):
        attempts = [
            (8, 10), (9, 11), (10, 12), (11, 12), (12, 14),
            (13, 15), (14, 16), (7, 17), (16, 18), (15, 17),
        ]
        for start, end in attempts:
            try:
                rules.create_reservation(db, user, p1.id, at(start), at(end))
            except BadRequestException as e:
                assert e.error_code == ErrorCode.RESERVATION_CONFLICT

        active = db.query(Reservation).filter(
            Reservation.parking_id == p1.id,
            Reservation.status.in_(rules.ACTIVE_STATUSES),
        ).order_by(Reservation.start_time).all()
        assert [(r.start_time.hour, r.end_time.hour) for r in active] == [
            (8, 10), (10, 12), (12, 14), (14, 16), (16, 18)]
        for a, b in combinations(active, 2):
            assert not rules.intervals_overlap(
                a.start_time, a.end_time, b.start_time, b.end_time)


class TestAvailability:

    def test_scenario_only_free_lot_returned(self, db, user, p1, p2):
        make_reservation(db, user, p1, at(10), at(12), status=ReservationStatus.CONFIRMED)

        available = rules.find_available_parkings(db, at(10), at(12))

        assert [p.id for p in available] == [p2.id]

    def test_touching_window_keeps_lot(self, db, user, p1, p2):
        make_reservation(db, user, p1, at(10), at(12))

        available = rules.find_available_parkings(db, at(12), at(14))

        assert {p.id for p in available} == {p1.id, p2.id}

    def test_canceled_does_not_block(self, db, user, p1):
        make_reservation(db, user, p1, at(10), at(12), status=ReservationStatus.CANCELED)

        assert [p.id for p in rules.find_available_parkings(db, at(10), at(12))] == [p1.id]

    def test_capacity_does_not_allow_sharing(self, db, user):
        big = make_parking(db, name="Big", capacity=500)
        make_reservation(db, user, big, at(10), at(12))

        assert rules.find_available_parkings(db, at(11), at(12)) == []

    def test_inverted_window_returns_everything(self, db, user, p1, p2):
        make_reservation(db, user, p1, at(10), at(12))

        available = rules.find_available_parkings(db, at(12), at(10))

        assert {p.id for p in available} == {p1.id, p2.id}


class TestCancelReservation:

    @pytest.mark.parametrize("status", [ReservationStatus.PENDING, ReservationStatus.CONFIRMED])
    def test_owner_cancels(self, db, user, p1, status):
        reservation = make_reservation(db, user, p1, at(10), at(12), status=status)

        canceled = rules.cancel_reservation(db, reservation.id, user)

        assert canceled.status == ReservationStatus.CANCELED

    def test_second_cancel_fails(self, db, user, p1):
        reservation = make_reservation(db, user, p1, at(10), at(12))
        rules.cancel_reservation(db, reservation.id, user)

        with pytest.raises(BadRequestException) as exc:
            rules.cancel_reservation(db, reservation.id, user)

        assert exc.value.error_code == ErrorCode.ALREADY_CANCELED

    def test_status_outside_allow_list(self, db, user, p1):
        reservation = make_reservation(db, user, p1, at(10), at(12),
                                       status=ReservationStatus.COMPLETED)

        with pytest.raises(BadRequestException) as exc:
            rules.cancel_reservation(db, reservation.id, user)

        assert exc.value.error_code == ErrorCode.INVALID_STATUS_FOR_ACTION

    def test_not_owner(self, db, user, other_user, p1):
        reservation = make_reservation(db, other_user, p1, at(10), at(12))

        with pytest.raises(UnauthorizedException):
            rules.cancel_reservation(db, reservation.id, user)

        db.refresh(reservation)
        assert reservation.status == ReservationStatus.PENDING

    def test_unknown(self, db, user):
        with pytest.raises(NotFoundException):
            rules.cancel_reservation(db, 404, user)

    def test_canceled_by_another_session_reports_already_canceled(self, db, user, p1):
        reservation = make_reservation(db, user, p1, at(10), at(12))
        other = TestingSessionLocal()
        other.query(Reservation).filter(Reservation.id == reservation.id).update(
            {Reservation.status: ReservationStatus.CANCELED}, synchronize_session=False)
        other.commit()
        other.close()

        # db still holds the PENDING row it loaded before the cancel
        with pytest.raises(BadRequestException) as exc:
            rules.cancel_reservation(db, reservation.id, user)

        assert exc.value.error_code == ErrorCode.ALREADY_CANCELED


class TestConfirmCashPayment:

    def test_cash_pending_confirmed(self, db, user, p1):
        reservation = make_reservation(db, user, p1, at(10), at(12))

        confirmed = rules.confirm_cash_payment(db, reservation.id)

        assert confirmed.status == ReservationStatus.CONFIRMED
        assert confirmed.payment_method == PaymentMethod.CASH

    @pytest.mark.parametrize("method, status", [
        (PaymentMethod.CARD, ReservationStatus.PENDING),
        (PaymentMethod.CASH, ReservationStatus.CONFIRMED),
        (PaymentMethod.CASH, ReservationStatus.CANCELED),
        (PaymentMethod.CARD, ReservationStatus.CONFIRMED),
    ])
    def test_ineligible(self, db, user, p1, method, status):
        reservation = make_reservation(db, user, p1, at(10), at(12),
                                       status=status, payment_method=method)

        with pytest.raises(BadRequestException) as exc:
            rules.confirm_cash_payment(db, reservation.id)

        assert exc.value.error_code == ErrorCode.PAYMENT_NOT_ELIGIBLE
        db.refresh(reservation)
        assert reservation.status == status

    def test_unknown(self, db):
        with pytest.raises(NotFoundException):
            rules.confirm_cash_payment(db, 404)

    def test_canceled_between_read_and_write_stays_canceled(self, db, user, other_user, p1):
        reservation = make_reservation(db, user, p1, at(10), at(12))
        assert reservation.status == ReservationStatus.PENDING

        # Another session cancels, then rebooks the freed slot
        other = TestingSessionLocal()
        rules.cancel_reservation(other, reservation.id, user)
        rebooked = rules.create_reservation(other, other_user, p1.id, at(10), at(12))
        rebooked_id = rebooked.id
        other.close()

        with pytest.raises(BadRequestException) as exc:
            rules.confirm_cash_payment(db, reservation.id)

        assert exc.value.error_code == ErrorCode.PAYMENT_NOT_ELIGIBLE
        assert reservation.status == ReservationStatus.CANCELED
        active = db.query(Reservation).filter(
            Reservation.parking_id == p1.id,
            Reservation.status.in_(rules.ACTIVE_STATUSES),
        ).all()
        assert [r.id for r in active] == [rebooked_id]

    def test_pending_cash_listing(self, db, p1):
        owner = make_user(db, "citra")
        pending = make_reservation(db, owner, p1, at(8), at(9))
        make_reservation(db, owner, p1, at(10), at(11), payment_method=PaymentMethod.CARD)
        make_reservation(db, owner, p1, at(12), at(13), status=ReservationStatus.CONFIRMED)

        assert [r.id for r in rules.list_pending_cash_payments(db)] == [pending.id]
