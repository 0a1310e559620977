"""
Table status state machine.

Every change to `Table.status` goes through `TableStateMachine.fire` with an
explicit trigger, so the allowed transitions live in one table instead of
being patched per handler.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from shared.config.constants import TableStatus
from shared.config.logging import floor_logger as logger
from shared.config.settings import settings
from shared.utils.exceptions import ConflictError, ValidationError

from ronda_api.models import Table


class TableTrigger(str, Enum):
    """Lifecycle events that move a table between statuses."""

    RESERVATION_CREATED = "RESERVATION_CREATED"
    ORDER_PLACED = "ORDER_PLACED"
    TABLES_GROUPED = "TABLES_GROUPED"
    RESERVATIONS_CLEARED = "RESERVATIONS_CLEARED"
    CUSTOMER_SEATED = "CUSTOMER_SEATED"
    TABLE_CLOSED = "TABLE_CLOSED"
    GROUP_DISSOLVED = "GROUP_DISSOLVED"
    MANUAL = "MANUAL"


def _only_from(source: str, target: str) -> Callable[[str], str]:
    return lambda current: target if current == source else current


def _always(target: str) -> Callable[[str], str]:
    return lambda current: target


class TableStateMachine:
    """
    Pure transition table for table statuses.

    `next_status` computes the target without touching the database;
    `fire` applies it to a Table instance and logs the change.
    """

    def __init__(self, order_placed_status: str | None = None):
        placed = order_placed_status or settings.order_placed_table_status
        if placed not in (TableStatus.ESPERANDO, TableStatus.PIDIENDO):
            raise ValueError(f"Unsupported order-placed status: {placed}")
        self.order_placed_status = placed
        self._transitions: dict[TableTrigger, Callable[[str], str]] = {
            TableTrigger.RESERVATION_CREATED: _only_from(TableStatus.LIBRE, TableStatus.RESERVADA),
            TableTrigger.ORDER_PLACED: _always(placed),
            TableTrigger.TABLES_GROUPED: _always(TableStatus.OCUPADA),
            TableTrigger.RESERVATIONS_CLEARED: _only_from(TableStatus.RESERVADA, TableStatus.LIBRE),
            TableTrigger.CUSTOMER_SEATED: _always(TableStatus.OCUPADA),
            TableTrigger.TABLE_CLOSED: _always(TableStatus.LIBRE),
            TableTrigger.GROUP_DISSOLVED: _always(TableStatus.LIBRE),
        }

    def next_status(
        self,
        current: str,
        trigger: TableTrigger,
        *,
        requested: str | None = None,
        has_active_ronda: bool = False,
    ) -> str:
        """
        Compute the status a table moves to when `trigger` fires.

        MANUAL is the staff override: the requested status must be a known
        status and consistent with whether the table has an open ronda.
        """
        if trigger is TableTrigger.MANUAL:
            return self._validate_manual(current, requested, has_active_ronda)
        return self._transitions[trigger](current)

    def fire(
        self,
        table: Table,
        trigger: TableTrigger,
        *,
        requested: str | None = None,
        has_active_ronda: bool = False,
    ) -> str:
        """Apply `trigger` to `table` in place and return the new status."""
        previous = table.status
        table.status = self.next_status(
            previous, trigger, requested=requested, has_active_ronda=has_active_ronda
        )
        if table.status != previous:
            logger.info(
                "Table status changed",
                table_id=table.id,
                table_number=table.number,
                trigger=trigger.value,
                from_status=previous,
                to_status=table.status,
            )
        return table.status

    def _validate_manual(self, current: str, requested: str | None, has_active_ronda: bool) -> str:
        if requested not in TableStatus.ALL:
            raise ValidationError(
                f"Estado de mesa inválido: {requested}", field="status", value=requested
            )
        if has_active_ronda and requested in TableStatus.IDLE:
            raise ConflictError(
                f"La mesa tiene una ronda activa; no puede pasar a {requested}",
                from_status=current,
                to_status=requested,
            )
        if not has_active_ronda and requested in TableStatus.SERVING:
            raise ConflictError(
                f"La mesa no tiene una ronda activa; no puede pasar a {requested}",
                from_status=current,
                to_status=requested,
            )
        return requested


def get_state_machine() -> TableStateMachine:
    """State machine configured from settings."""
    return TableStateMachine(settings.order_placed_table_status)
