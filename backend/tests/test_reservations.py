"""
Tests for the reservation lifecycle and its effect on table status.
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from ronda_api.models import Reservation, Ronda, Table
from ronda_api.services.domain import ReservationService, RondaService, TableGroupService

EVENING = datetime(2026, 3, 14, 19, 0)


@pytest.fixture
def table_five(db_session, seed_zone):
    table = Table(number=5, capacity=4, zone_id=seed_zone.id, status="LIBRE")
    db_session.add(table)
    db_session.commit()
    db_session.refresh(table)
    return table


@pytest.fixture
def book(db_session, seed_admin, table_five):
    def _book(when=EVENING, party_size=4, table_id=None, **extra):
        payload = {
            "table_id": table_id or table_five.id,
            "customer_name": "Familia Pérez",
            "customer_phone": "+54 11 5555-0000",
            "party_size": party_size,
            "reservation_time": when,
            "created_by_id": seed_admin.id,
            **extra,
        }
        return ReservationService(db_session).create_reservation(payload)

    return _book


def test_reserve_seat_and_close_scenario(db_session, table_five, book):
    created = book(duration_minutes=90)
    assert created.ok, created.error
    assert created.data.status == "PENDING"
    assert created.data.duration_minutes == 90
    db_session.refresh(table_five)
    assert table_five.status == "RESERVADA"

    seated = ReservationService(db_session).seat_customer(created.data.id)
    assert seated.ok, seated.error
    assert seated.data.table_status == "OCUPADA"
    assert db_session.get(Reservation, created.data.id).status == "SEATED"
    assert db_session.get(Ronda, seated.data.ronda_id).is_active

    closed = RondaService(db_session).close_table(table_five.id, {"payment_method": "EFECTIVO"})
    assert closed.ok, closed.error
    assert closed.data.total_cents == 0
    assert not db_session.get(Ronda, seated.data.ronda_id).is_active
    db_session.refresh(table_five)
    assert table_five.status == "LIBRE"


class TestCreateReservation:

    def test_party_larger_than_capacity_creates_nothing(self, db_session, book):
        result = book(party_size=6)

        assert result.code == "VALIDATION_ERROR"
        assert db_session.scalar(select(func.count(Reservation.id))) == 0

    @pytest.mark.parametrize("second", [EVENING + timedelta(hours=1), EVENING - timedelta(hours=1)])
    def test_overlapping_window_conflicts(self, db_session, book, second):
        book().unwrap()

        result = book(when=second)

        assert result.code == "CONFLICT"
        assert db_session.scalar(select(func.count(Reservation.id))) == 1

    def test_far_apart_reservations_coexist(self, db_session, book):
        book().unwrap()

        later = book(when=EVENING + timedelta(hours=4))

        assert later.ok, later.error

    def test_cancelled_reservation_does_not_block(self, db_session, book):
        first = book().unwrap()
        ReservationService(db_session).change_status(first.id, {"status": "CANCELLED"}).unwrap()

        assert book().ok

    def test_aware_time_is_stored_as_wall_clock(self, db_session, book):
        aware = datetime(2026, 3, 14, 21, 30, tzinfo=timezone(timedelta(hours=-3)))

        result = book(when=aware).unwrap()

        assert result.reservation_time == datetime(2026, 3, 14, 21, 30)

    def test_reservation_does_not_override_busy_table(
        self, db_session, table_five, book, place_order
    ):
        place_order(table_five.id).unwrap()

        book().unwrap()

        db_session.refresh(table_five)
        assert table_five.status == "ESPERANDO"

    def test_unknown_table_or_creator(self, db_session, book):
        assert book(table_id=999).code == "NOT_FOUND"
        assert book(created_by_id=999).code == "NOT_FOUND"


class TestStatusChanges:

    def test_confirm_then_no_show_frees_table(self, db_session, table_five, book):
        reservation = book().unwrap()
        service = ReservationService(db_session)

        service.change_status(reservation.id, {"status": "CONFIRMED"}).unwrap()
        db_session.refresh(table_five)
        assert table_five.status == "RESERVADA"

        service.change_status(reservation.id, {"status": "NO_SHOW"}).unwrap()
        db_session.refresh(table_five)
        assert table_five.status == "LIBRE"

    def test_cancel_keeps_table_reserved_while_others_remain(self, db_session, table_five, book):
        first = book().unwrap()
        book(when=EVENING + timedelta(days=1)).unwrap()

        ReservationService(db_session).change_status(first.id, {"status": "CANCELLED"}).unwrap()

        db_session.refresh(table_five)
        assert table_five.status == "RESERVADA"

    def test_terminal_reservations_cannot_change(self, db_session, book):
        reservation = book().unwrap()
        service = ReservationService(db_session)
        service.change_status(reservation.id, {"status": "CANCELLED"}).unwrap()

        result = service.change_status(reservation.id, {"status": "CONFIRMED"})

        assert result.code == "CONFLICT"

    def test_seated_only_reachable_through_seating(self, db_session, book):
        reservation = book().unwrap()

        result = ReservationService(db_session).change_status(reservation.id, {"status": "SEATED"})

        assert result.code == "INVALID_TRANSITION"

    def test_confirmed_cannot_go_back_to_pending(self, db_session, book):
        reservation = book().unwrap()
        service = ReservationService(db_session)
        service.change_status(reservation.id, {"status": "CONFIRMED"}).unwrap()

        assert service.change_status(reservation.id, {"status": "PENDING"}).code == "INVALID_TRANSITION"


class TestSeatCustomer:

    def test_seat_twice_conflicts(self, db_session, book):
        reservation = book().unwrap()
        service = ReservationService(db_session)
        service.seat_customer(reservation.id).unwrap()

        result = service.seat_customer(reservation.id)

        assert result.code == "CONFLICT"
        assert db_session.scalar(select(func.count(Ronda.id))) == 1

    def test_seat_blocked_by_active_ronda(self, db_session, table_five, book, place_order):
        reservation = book().unwrap()
        place_order(table_five.id).unwrap()

        result = ReservationService(db_session).seat_customer(reservation.id)

        assert result.code == "CONFLICT"
        assert db_session.get(Reservation, reservation.id).status == "PENDING"

    def test_seat_blocked_by_group_ronda_opened_from_another_member(
        self, db_session, seed_tables, table_five, book, place_order
    ):
        reservation = book().unwrap()
        TableGroupService(db_session).group_tables(
            {"table_ids": [seed_tables[0].id, table_five.id]}
        ).unwrap()
        placed = place_order(seed_tables[0].id).unwrap()

        result = ReservationService(db_session).seat_customer(reservation.id)

        assert result.code == "CONFLICT"
        active = db_session.scalars(select(Ronda).where(Ronda.is_active.is_(True))).all()
        assert [r.id for r in active] == [placed.ronda_id]

    def test_seat_unknown_reservation(self, db_session):
        assert ReservationService(db_session).seat_customer(42).code == "NOT_FOUND"


class TestDeleteAndList:

    def test_delete_pending_frees_table(self, db_session, table_five, book):
        reservation = book().unwrap()

        result = ReservationService(db_session).delete_reservation(reservation.id)

        assert result.ok, result.error
        assert db_session.get(Reservation, reservation.id) is None
        db_session.refresh(table_five)
        assert table_five.status == "LIBRE"

    def test_delete_seated_conflicts(self, db_session, book):
        reservation = book().unwrap()
        service = ReservationService(db_session)
        service.seat_customer(reservation.id).unwrap()

        assert service.delete_reservation(reservation.id).code == "CONFLICT"

    def test_list_filters(self, db_session, book):
        first = book().unwrap()
        second = book(when=EVENING + timedelta(days=1)).unwrap()
        service = ReservationService(db_session)
        service.change_status(second.id, {"status": "CONFIRMED"}).unwrap()

        on_day = service.list_reservations({"day": date(2026, 3, 14)}).unwrap()
        confirmed = service.list_reservations({"status": "CONFIRMED"}).unwrap()
        everything = service.list_reservations().unwrap()

        assert [r.id for r in on_day] == [first.id]
        assert [r.id for r in confirmed] == [second.id]
        assert [r.id for r in everything] == [first.id, second.id]
        assert everything[0].table_number == 5
