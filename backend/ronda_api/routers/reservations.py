"""
Reservations router.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ronda_api.routers._common import respond
from ronda_api.services.domain import ReservationService
from shared.infrastructure.db import get_db
from shared.utils.schemas import (
    CreateReservationRequest,
    ReservationFilter,
    ReservationStatusRequest,
    ReservationStatusValue,
)


router = APIRouter(prefix="/api/reservations", tags=["reservations"])


@router.get("")
def list_reservations(
    day: date | None = Query(None, alias="date", description="Only reservations on this day"),
    reservation_status: ReservationStatusValue | None = Query(None, alias="status"),
    table_id: int | None = None,
    db: Session = Depends(get_db),
):
    filters = ReservationFilter(day=day, status=reservation_status, table_id=table_id)
    return respond(ReservationService(db).list_reservations(filters))


@router.post("")
def create_reservation(body: CreateReservationRequest, db: Session = Depends(get_db)):
    return respond(ReservationService(db).create_reservation(body), status.HTTP_201_CREATED)


@router.get("/{reservation_id}")
def get_reservation(reservation_id: int, db: Session = Depends(get_db)):
    return respond(ReservationService(db).get_reservation(reservation_id))


@router.patch("/{reservation_id}/status")
def change_reservation_status(
    reservation_id: int, body: ReservationStatusRequest, db: Session = Depends(get_db)
):
    return respond(ReservationService(db).change_status(reservation_id, body))


@router.post("/{reservation_id}/seat")
def seat_customer(reservation_id: int, db: Session = Depends(get_db)):
    """Open a ronda for the reserved table."""
    return respond(ReservationService(db).seat_customer(reservation_id))


@router.delete("/{reservation_id}")
def delete_reservation(reservation_id: int, db: Session = Depends(get_db)):
    return respond(ReservationService(db).delete_reservation(reservation_id))
