"""
Tables router.
Floor-plan tables, their active ronda and table closing.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ronda_api.routers._common import respond
from ronda_api.services.domain import RondaService, TableService
from shared.infrastructure.db import get_db
from shared.utils.schemas import (
    CloseTableRequest,
    TableCreate,
    TablePositionUpdate,
    TableStatusUpdate,
    TableUpdate,
)


router = APIRouter(prefix="/api/tables", tags=["tables"])


@router.get("")
def list_tables(db: Session = Depends(get_db)):
    """All tables ordered by number, with zone and group."""
    return respond(TableService(db).list_all())


@router.post("")
def create_table(body: TableCreate, db: Session = Depends(get_db)):
    return respond(TableService(db).create(body), status.HTTP_201_CREATED)


@router.get("/{table_id}")
def get_table(table_id: int, db: Session = Depends(get_db)):
    return respond(TableService(db).get_by_id(table_id))


@router.put("/{table_id}")
def update_table(table_id: int, body: TableUpdate, db: Session = Depends(get_db)):
    return respond(TableService(db).update(table_id, body))


@router.patch("/{table_id}/position")
def move_table(table_id: int, body: TablePositionUpdate, db: Session = Depends(get_db)):
    return respond(TableService(db).update_position(table_id, body))


@router.patch("/{table_id}/status")
def set_table_status(table_id: int, body: TableStatusUpdate, db: Session = Depends(get_db)):
    """Manual status flag set by staff (e.g. PAGANDO)."""
    return respond(TableService(db).set_status(table_id, body))


@router.delete("/{table_id}")
def delete_table(table_id: int, db: Session = Depends(get_db)):
    return respond(TableService(db).delete(table_id))


@router.get("/{table_id}/active-ronda")
def get_active_ronda(table_id: int, db: Session = Depends(get_db)):
    """Active ronda with orders and total; data is null when the table is idle."""
    return respond(RondaService(db).get_active_ronda(table_id))


@router.post("/{table_id}/ronda")
def open_ronda(table_id: int, db: Session = Depends(get_db)):
    """Find or open the table's active ronda."""
    return respond(RondaService(db).find_or_create_active_ronda(table_id))


@router.post("/{table_id}/close")
def close_table(table_id: int, body: CloseTableRequest, db: Session = Depends(get_db)):
    """Settle the active ronda and free the table."""
    return respond(RondaService(db).close_table(table_id, body))
