"""
Table Service - floor-plan table management.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ronda_api.models import Reservation, Ronda, Table, Zone
from ronda_api.services.base_service import BaseCRUDService
from ronda_api.services.builders import table_output
from ronda_api.services.domain.ronda_service import find_active_ronda, has_active_ronda
from ronda_api.services.domain.table_state import TableTrigger, get_state_machine
from shared.config.constants import TableStatus
from shared.infrastructure.db import transaction
from shared.utils.exceptions import ConflictError, DuplicateEntityError, NotFoundError
from shared.utils.result import as_result
from shared.utils.schemas import (
    TableCreate,
    TableOutput,
    TablePositionUpdate,
    TableStatusUpdate,
    TableUpdate,
    validate_payload,
)


class TableService(BaseCRUDService[Table, TableOutput]):
    """Service for table management."""

    nullable_fields = frozenset({"zone_id"})
    unique_field = "number"

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Table,
            output_schema=TableOutput,
            create_schema=TableCreate,
            update_schema=TableUpdate,
            entity_name="Mesa",
        )
        self._states = get_state_machine()

    def to_output(self, entity: Table) -> TableOutput:
        return table_output(entity)

    def _list_query(self):
        return (
            select(Table)
            .options(selectinload(Table.zone), selectinload(Table.group))
            .order_by(Table.number)
        )

    @as_result
    def update_position(self, table_id: int, payload: TablePositionUpdate | dict) -> TableOutput:
        """Move a table on the floor plan."""
        request = validate_payload(TablePositionUpdate, payload)
        with transaction(self._db):
            table = self._get_entity(table_id, lock=True)
            table.x = request.x
            table.y = request.y
        return self.to_output(table)

    @as_result
    def set_status(self, table_id: int, payload: TableStatusUpdate | dict) -> TableOutput:
        """Staff override of the table status, validated against the table's ronda."""
        request = validate_payload(TableStatusUpdate, payload)
        with transaction(self._db):
            table = self._get_entity(table_id, lock=True)
            self._states.fire(
                table,
                TableTrigger.MANUAL,
                requested=request.status,
                has_active_ronda=find_active_ronda(self._db, table) is not None,
            )
        return self.to_output(table)

    def _validate_create(self, data: dict[str, Any]) -> None:
        self._check_unique_number(data["number"])
        self._check_zone(data.get("zone_id"))
        data["status"] = TableStatus.LIBRE

    def _validate_update(self, entity: Table, data: dict[str, Any]) -> None:
        if data.get("number") is not None and data["number"] != entity.number:
            self._check_unique_number(data["number"], exclude_id=entity.id)
        self._check_zone(data.get("zone_id"))

    def _validate_delete(self, entity: Table) -> None:
        if has_active_ronda(self._db, [entity.id]):
            raise ConflictError(
                f"No se puede eliminar la mesa {entity.number}: tiene una ronda activa",
                table_id=entity.id,
            )
        # Closed rondas and reservations keep their foreign key to the table
        history = self._db.scalar(
            select(func.count(Ronda.id)).where(Ronda.table_id == entity.id)
        ) or self._db.scalar(
            select(func.count(Reservation.id)).where(Reservation.table_id == entity.id)
        )
        if history:
            raise ConflictError(
                f"No se puede eliminar la mesa {entity.number}: tiene rondas o reservas registradas",
                table_id=entity.id,
            )

    def _check_unique_number(self, number: int, exclude_id: int | None = None) -> None:
        stmt = select(Table.id).where(Table.number == number)
        if exclude_id is not None:
            stmt = stmt.where(Table.id != exclude_id)
        if self._db.scalar(stmt):
            raise DuplicateEntityError("Mesa", number)

    def _check_zone(self, zone_id: int | None) -> None:
        if zone_id is not None and not self._db.get(Zone, zone_id):
            raise NotFoundError("Zona", zone_id)
