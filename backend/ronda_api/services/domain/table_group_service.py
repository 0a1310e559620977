"""
Table Group Service - merging tables into one billing unit.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ronda_api.models import Table, TableGroup
from ronda_api.services.builders import build_output, group_output, table_output
from ronda_api.services.domain.ronda_service import has_active_ronda
from ronda_api.services.domain.table_state import TableTrigger, get_state_machine
from shared.config.logging import floor_logger as logger
from shared.infrastructure.db import transaction
from shared.utils.exceptions import ConflictError, NotFoundError
from shared.utils.result import as_result
from shared.utils.schemas import GroupTablesRequest, TableGroupOutput, validate_payload


class TableGroupService:
    """Group and ungroup tables."""

    def __init__(self, db: Session):
        self._db = db
        self._states = get_state_machine()

    @as_result
    def group_tables(self, payload: GroupTablesRequest | dict) -> TableGroupOutput:
        """
        Merge two or more free tables.

        Validation order: all tables exist, none already grouped, none with
        an active ronda.
        """
        request = validate_payload(GroupTablesRequest, payload)

        with transaction(self._db):
            tables = list(
                self._db.scalars(
                    select(Table)
                    .where(Table.id.in_(request.table_ids))
                    .order_by(Table.number)
                    .with_for_update()
                ).all()
            )
            found = {t.id for t in tables}
            missing = [tid for tid in request.table_ids if tid not in found]
            if missing:
                raise NotFoundError("Mesa", missing[0], table_ids=missing)

            grouped = [t.number for t in tables if t.table_group_id is not None]
            if grouped:
                raise ConflictError(
                    f"Las mesas {', '.join(map(str, grouped))} ya pertenecen a un grupo",
                    table_numbers=grouped,
                )

            if has_active_ronda(self._db, [t.id for t in tables]):
                raise ConflictError(
                    "No se pueden agrupar mesas con una ronda activa",
                    table_ids=request.table_ids,
                )

            name = request.name or "Mesa " + "+".join(str(t.number) for t in tables)
            group = TableGroup(name=name, is_active=True)
            self._db.add(group)
            self._db.flush()

            for table in tables:
                table.group = group
                self._states.fire(table, TableTrigger.TABLES_GROUPED)
            self._db.flush()
            self._db.refresh(group)
            output = group_output(group)

        logger.info("Tables grouped", group_id=output.id, name=output.name, table_ids=sorted(found))
        return output

    @as_result
    def ungroup(self, group_id: int) -> TableGroupOutput:
        """Dissolve a group; blocked while the group or any member has an active ronda."""
        with transaction(self._db):
            group = self._db.scalar(
                select(TableGroup)
                .where(TableGroup.id == group_id, TableGroup.is_active.is_(True))
                .with_for_update()
            )
            if not group:
                raise NotFoundError("Grupo de mesas", group_id)

            members = list(group.tables)
            if has_active_ronda(self._db, [t.id for t in members], group_id=group.id):
                raise ConflictError(
                    "No se puede separar el grupo mientras tenga una ronda activa",
                    group_id=group_id,
                )

            for table in members:
                table.group = None
                self._states.fire(table, TableTrigger.GROUP_DISSOLVED)
            group.is_active = False
            self._db.flush()

            # Members are detached now; report the tables that were released
            output = build_output(
                group, TableGroupOutput, tables=[table_output(t) for t in members]
            )

        logger.info("Group dissolved", group_id=group_id, table_ids=[t.id for t in members])
        return output

    @as_result
    def list_active_groups(self) -> list[TableGroupOutput]:
        groups = self._db.scalars(
            select(TableGroup)
            .where(TableGroup.is_active.is_(True))
            .options(selectinload(TableGroup.tables).selectinload(Table.zone))
            .order_by(TableGroup.id)
        ).all()
        return [group_output(g) for g in groups]
