"""
Reservation Service - booking lifecycle and its effect on table status.

Statuses:
    PENDING -> CONFIRMED -> SEATED
    PENDING | CONFIRMED -> CANCELLED | NO_SHOW

A reservation conflicts with any active (PENDING/CONFIRMED/SEATED) booking of
the same table whose start falls in [time - buffer, time + duration).
"""

from __future__ import annotations

from datetime import datetime, time, timedelta

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ronda_api.models import Reservation, User
from ronda_api.services.builders import reservation_output
from ronda_api.services.domain.ronda_service import (
    acquire_active_ronda,
    billing_unit,
    load_table,
)
from ronda_api.services.domain.table_state import TableTrigger, get_state_machine
from shared.config.constants import ReservationStatus
from shared.config.logging import reservations_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import transaction
from shared.utils.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from shared.utils.result import as_result
from shared.utils.schemas import (
    CreateReservationRequest,
    ReservationFilter,
    ReservationOutput,
    ReservationStatusRequest,
    SeatCustomerResult,
    validate_payload,
)

# Transitions reachable through change_status; SEATED only through seat_customer
STATUS_TRANSITIONS: dict[str, frozenset[str]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW}
    ),
    ReservationStatus.CONFIRMED: frozenset(
        {ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW}
    ),
}


def wall_clock(value: datetime) -> datetime:
    """Reservation times are restaurant wall-clock; drop any offset."""
    return value.replace(tzinfo=None, microsecond=0)


class ReservationService:
    """Create, transition, seat and delete reservations."""

    def __init__(self, db: Session):
        self._db = db
        self._states = get_state_machine()
        self._buffer = timedelta(minutes=settings.reservation_conflict_buffer_minutes)

    @as_result
    def create_reservation(self, payload: CreateReservationRequest | dict) -> ReservationOutput:
        """
        Book a table.

        Raises (as failures):
            NotFoundError: unknown table or creator
            ValidationError: party larger than table capacity
            ConflictError: overlapping active reservation
        """
        request = validate_payload(CreateReservationRequest, payload)
        start = wall_clock(request.reservation_time)
        duration = request.duration_minutes or settings.reservation_default_duration_minutes

        with transaction(self._db):
            table = load_table(self._db, request.table_id, lock=True)

            if not self._db.scalar(select(User.id).where(User.id == request.created_by_id)):
                raise NotFoundError("Usuario", request.created_by_id)

            if request.party_size > table.capacity:
                raise ValidationError(
                    f"La mesa {table.number} tiene capacidad para {table.capacity} personas",
                    table_id=table.id,
                    party_size=request.party_size,
                )

            conflict = self._db.scalar(
                select(Reservation).where(
                    Reservation.table_id == table.id,
                    Reservation.status.in_(ReservationStatus.ACTIVE),
                    Reservation.reservation_time >= start - self._buffer,
                    Reservation.reservation_time < start + timedelta(minutes=duration),
                )
            )
            if conflict:
                raise ConflictError(
                    "Ya existe una reserva para esta mesa en ese horario",
                    table_id=table.id,
                    conflicting_reservation_id=conflict.id,
                )

            reservation = Reservation(
                table_id=table.id,
                customer_name=request.customer_name,
                customer_phone=request.customer_phone,
                party_size=request.party_size,
                reservation_time=start,
                duration_minutes=duration,
                notes=request.notes,
                status=ReservationStatus.PENDING,
                created_by_id=request.created_by_id,
            )
            self._db.add(reservation)
            self._states.fire(table, TableTrigger.RESERVATION_CREATED)
            self._db.flush()

        logger.info(
            "Reservation created",
            reservation_id=reservation.id,
            table_id=reservation.table_id,
            party_size=reservation.party_size,
            reservation_time=start.isoformat(),
        )
        return reservation_output(reservation)

    @as_result
    def change_status(
        self, reservation_id: int, payload: ReservationStatusRequest | dict
    ) -> ReservationOutput:
        """Confirm, cancel or mark no-show; releases the table when nothing else holds it."""
        request = validate_payload(ReservationStatusRequest, payload)

        with transaction(self._db):
            reservation = self._get_for_update(reservation_id)
            current = reservation.status

            if current in ReservationStatus.TERMINAL:
                raise ConflictError(
                    f"La reserva ya está en estado {current}",
                    reservation_id=reservation_id,
                )
            if request.status not in STATUS_TRANSITIONS.get(current, frozenset()):
                raise InvalidTransitionError(
                    "reserva", current, request.status, reservation_id=reservation_id
                )

            reservation.status = request.status
            self._db.flush()
            if request.status in ReservationStatus.RELEASED:
                self._release_table(reservation.table_id)

        logger.info(
            "Reservation status changed",
            reservation_id=reservation_id,
            from_status=current,
            to_status=request.status,
        )
        return reservation_output(reservation)

    @as_result
    def seat_customer(self, reservation_id: int) -> SeatCustomerResult:
        """Open a ronda for the reserved table and mark the reservation SEATED."""
        with transaction(self._db):
            reservation = self._get_for_update(reservation_id)
            if reservation.status in ReservationStatus.TERMINAL:
                raise ConflictError(
                    f"La reserva ya está en estado {reservation.status}",
                    reservation_id=reservation_id,
                )

            table = load_table(self._db, reservation.table_id, lock=True)
            try:
                ronda, created = acquire_active_ronda(self._db, table)
            except IntegrityError as exc:
                raise ConflictError(
                    "La mesa ya tiene una ronda activa", table_id=table.id
                ) from exc
            if not created:
                raise ConflictError(
                    "La mesa ya tiene una ronda activa", table_id=table.id, ronda_id=ronda.id
                )

            reservation.status = ReservationStatus.SEATED
            for member in billing_unit(self._db, table):
                self._states.fire(member, TableTrigger.CUSTOMER_SEATED)
            self._db.flush()

            result = SeatCustomerResult(
                reservation_id=reservation.id,
                ronda_id=ronda.id,
                table_id=table.id,
                table_status=table.status,
            )

        logger.info(
            "Customer seated",
            reservation_id=result.reservation_id,
            ronda_id=result.ronda_id,
            table_id=result.table_id,
        )
        return result

    @as_result
    def delete_reservation(self, reservation_id: int) -> ReservationOutput:
        """Remove a reservation that was never seated."""
        with transaction(self._db):
            reservation = self._get_for_update(reservation_id)
            if reservation.status == ReservationStatus.SEATED:
                raise ConflictError(
                    "No se puede eliminar una reserva ya sentada; cierre la mesa primero",
                    reservation_id=reservation_id,
                )
            output = reservation_output(reservation)
            table_id = reservation.table_id
            self._db.delete(reservation)
            self._db.flush()
            self._release_table(table_id)

        logger.info("Reservation deleted", reservation_id=reservation_id, table_id=table_id)
        return output

    @as_result
    def list_reservations(self, filters: ReservationFilter | dict | None = None) -> list[ReservationOutput]:
        """Reservations ordered by time, optionally filtered by day, status and table."""
        query = validate_payload(ReservationFilter, filters or {})
        stmt = select(Reservation).options(selectinload(Reservation.table))
        if query.day is not None:
            day_start = datetime.combine(query.day, time.min)
            stmt = stmt.where(
                Reservation.reservation_time >= day_start,
                Reservation.reservation_time < day_start + timedelta(days=1),
            )
        if query.status is not None:
            stmt = stmt.where(Reservation.status == query.status)
        if query.table_id is not None:
            stmt = stmt.where(Reservation.table_id == query.table_id)
        stmt = stmt.order_by(Reservation.reservation_time, Reservation.id)
        return [reservation_output(r) for r in self._db.scalars(stmt).all()]

    @as_result
    def get_reservation(self, reservation_id: int) -> ReservationOutput:
        reservation = self._db.get(Reservation, reservation_id)
        if not reservation:
            raise NotFoundError("Reserva", reservation_id)
        return reservation_output(reservation)

    def _get_for_update(self, reservation_id: int) -> Reservation:
        reservation = self._db.scalar(
            select(Reservation).where(Reservation.id == reservation_id).with_for_update()
        )
        if not reservation:
            raise NotFoundError("Reserva", reservation_id)
        return reservation

    def _release_table(self, table_id: int) -> None:
        """Fire RESERVATIONS_CLEARED when no active reservation holds the table any more."""
        remaining = self._db.scalar(
            select(func.count(Reservation.id)).where(
                Reservation.table_id == table_id,
                Reservation.status.in_(ReservationStatus.ACTIVE),
            )
        )
        if remaining:
            return
        table = load_table(self._db, table_id, lock=True)
        self._states.fire(table, TableTrigger.RESERVATIONS_CLEARED)
