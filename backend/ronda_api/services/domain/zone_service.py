"""
Zone Service - floor areas.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ronda_api.models import Table, Zone
from ronda_api.services.base_service import BaseCRUDService
from ronda_api.services.builders import build_output
from shared.utils.exceptions import ConflictError, DuplicateEntityError
from shared.utils.schemas import ZoneCreate, ZoneOutput, ZoneUpdate


class ZoneService(BaseCRUDService[Zone, ZoneOutput]):
    """Service for zone management. Names are unique and stored upper-case."""

    unique_field = "name"

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Zone,
            output_schema=ZoneOutput,
            create_schema=ZoneCreate,
            update_schema=ZoneUpdate,
            entity_name="Zona",
        )

    def to_output(self, entity: Zone) -> ZoneOutput:
        count = self._db.scalar(select(func.count(Table.id)).where(Table.zone_id == entity.id))
        return build_output(entity, ZoneOutput, table_count=count or 0)

    def _list_query(self):
        return select(Zone).order_by(Zone.name)

    def _validate_create(self, data: dict[str, Any]) -> None:
        self._check_unique_name(data["name"])

    def _validate_update(self, entity: Zone, data: dict[str, Any]) -> None:
        if data.get("name") and data["name"] != entity.name:
            self._check_unique_name(data["name"], exclude_id=entity.id)

    def _validate_delete(self, entity: Zone) -> None:
        count = self._db.scalar(select(func.count(Table.id)).where(Table.zone_id == entity.id))
        if count:
            raise ConflictError(
                f"No se puede eliminar la zona {entity.name}: tiene {count} mesas asignadas",
                zone_id=entity.id,
            )

    def _check_unique_name(self, name: str, exclude_id: int | None = None) -> None:
        stmt = select(Zone.id).where(Zone.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Zone.id != exclude_id)
        if self._db.scalar(stmt):
            raise DuplicateEntityError("Zona", name)
