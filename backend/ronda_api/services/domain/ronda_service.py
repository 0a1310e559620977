"""
Ronda Service - open tabs and table closing.

Owns the "at most one active ronda per table" invariant:
- `acquire_active_ronda` is the only code path that opens a ronda for orders.
- Grouped tables share the group's ronda (one billing unit).
- Closing computes the total from price snapshots, records the Payment,
  deactivates the ronda and frees every table it billed, in one transaction.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ronda_api.models import Order, OrderItem, Payment, Ronda, Table, TableGroup
from ronda_api.services.builders import ronda_output
from ronda_api.services.domain.table_state import TableTrigger, get_state_machine
from shared.config.constants import SplitType
from shared.config.logging import billing_logger, floor_logger
from shared.infrastructure.db import transaction
from shared.utils.exceptions import ActiveRondaNotFoundError, NotFoundError
from shared.utils.result import as_result
from shared.utils.schemas import CloseTableRequest, CloseTableResult, RondaOutput, validate_payload


# =============================================================================
# Session-level helpers (shared by order, group and reservation services)
# =============================================================================


def load_table(db: Session, table_id: int, *, lock: bool = False) -> Table:
    """Fetch a table or raise NotFoundError; `lock` takes a row lock (SELECT ... FOR UPDATE)."""
    stmt = select(Table).where(Table.id == table_id)
    if lock:
        stmt = stmt.with_for_update()
    table = db.scalar(stmt)
    if not table:
        raise NotFoundError("Mesa", table_id)
    return table


def billing_unit(db: Session, table: Table) -> list[Table]:
    """Tables billed together with `table`: its group's members, or just itself."""
    if table.table_group_id is None:
        return [table]
    return list(
        db.scalars(
            select(Table).where(Table.table_group_id == table.table_group_id).order_by(Table.number)
        ).all()
    )


def find_active_ronda(db: Session, table: Table) -> Ronda | None:
    """Active ronda billing `table`, resolving the group ronda for grouped tables."""
    if table.table_group_id is not None:
        condition = Ronda.table_group_id == table.table_group_id
    else:
        condition = Ronda.table_id == table.id
    return db.scalar(select(Ronda).where(Ronda.is_active.is_(True), condition))


def has_active_ronda(db: Session, table_ids: list[int], group_id: int | None = None) -> bool:
    """True when any of `table_ids` (or the group's ronda) has an active ronda."""
    conditions = [Ronda.table_id.in_(table_ids)]
    if group_id is not None:
        conditions.append(Ronda.table_group_id == group_id)
    stmt = select(func.count(Ronda.id)).where(Ronda.is_active.is_(True), or_(*conditions))
    return (db.scalar(stmt) or 0) > 0


def acquire_active_ronda(db: Session, table: Table) -> tuple[Ronda, bool]:
    """
    Find-or-create the active ronda for `table`. Returns (ronda, created).

    The caller must hold the row lock on `table` (see `load_table(lock=True)`).
    Grouped tables additionally lock the group row so two members cannot
    open competing group rondas. The insert runs in a SAVEPOINT; if the
    partial unique index rejects it, the concurrent winner is returned.
    """
    if table.table_group_id is not None:
        db.scalar(
            select(TableGroup).where(TableGroup.id == table.table_group_id).with_for_update()
        )

    ronda = find_active_ronda(db, table)
    if ronda:
        return ronda, False

    ronda = Ronda(table_id=table.id, table_group_id=table.table_group_id, is_active=True)
    try:
        with db.begin_nested():
            db.add(ronda)
    except IntegrityError:
        # Lost the race: another transaction opened the ronda first
        floor_logger.warning("Concurrent ronda creation detected", table_id=table.id)
        winner = find_active_ronda(db, table)
        if winner is None:
            raise
        return winner, False

    floor_logger.info(
        "Ronda opened",
        ronda_id=ronda.id,
        table_id=table.id,
        table_group_id=table.table_group_id,
    )
    return ronda, True


def ronda_total_cents(db: Session, ronda_id: int) -> int:
    """Sum of quantity x price snapshot across every order of the ronda."""
    total = db.scalar(
        select(func.coalesce(func.sum(OrderItem.quantity * OrderItem.price_cents_snapshot), 0))
        .join(Order, OrderItem.order_id == Order.id)
        .where(Order.ronda_id == ronda_id)
    )
    return int(total or 0)


def ronda_tables(db: Session, ronda: Ronda) -> list[Table]:
    """Tables billed by `ronda`."""
    if ronda.table_group_id is None:
        return [ronda.table]
    members = db.scalars(
        select(Table).where(Table.table_group_id == ronda.table_group_id).order_by(Table.number)
    ).all()
    return list(members) or [ronda.table]


# =============================================================================
# Service
# =============================================================================


class RondaService:
    """Public ronda operations. Every method returns a `Result`."""

    def __init__(self, db: Session):
        self._db = db
        self._states = get_state_machine()

    @as_result
    def find_or_create_active_ronda(self, table_id: int) -> RondaOutput:
        """Return the table's active ronda, opening one (and seating its tables) if none exists."""
        with transaction(self._db):
            table = load_table(self._db, table_id, lock=True)
            ronda, created = acquire_active_ronda(self._db, table)
            if created:
                for member in billing_unit(self._db, table):
                    self._states.fire(member, TableTrigger.CUSTOMER_SEATED)
                self._db.flush()
        return ronda_output(ronda)

    @as_result
    def get_active_ronda(self, table_id: int) -> RondaOutput | None:
        """Active ronda with orders, items and total; None when the table is idle."""
        table = load_table(self._db, table_id)
        ronda = find_active_ronda(self._db, table)
        return ronda_output(ronda) if ronda else None

    @as_result
    def close_table(
        self,
        table_id: int,
        payment: CloseTableRequest | dict,
    ) -> CloseTableResult:
        """
        Settle the table's active ronda.

        Raises (as failures):
            NotFoundError: unknown table or no active ronda
        """
        request = validate_payload(CloseTableRequest, payment)
        with transaction(self._db):
            table = load_table(self._db, table_id, lock=True)
            ronda = find_active_ronda(self._db, table)
            if not ronda:
                raise ActiveRondaNotFoundError(table_id=table_id)
            result = self._settle(ronda, request)
        return result

    @as_result
    def close_ronda(self, ronda_id: int, payment: CloseTableRequest | dict) -> CloseTableResult:
        """Settle a ronda addressed by id."""
        request = validate_payload(CloseTableRequest, payment)
        with transaction(self._db):
            ronda = self._db.scalar(select(Ronda).where(Ronda.id == ronda_id).with_for_update())
            if not ronda:
                raise NotFoundError("Ronda", ronda_id)
            if not ronda.is_active:
                raise ActiveRondaNotFoundError(ronda_id=ronda_id)
            result = self._settle(ronda, request)
        return result

    def _settle(self, ronda: Ronda, request: CloseTableRequest) -> CloseTableResult:
        total = ronda_total_cents(self._db, ronda.id)
        payment = Payment(
            ronda_id=ronda.id,
            amount_cents=total,
            method=request.payment_method,
            split_type=request.split_type or SplitType.SINGLE,
        )
        self._db.add(payment)

        ronda.is_active = False
        ronda.closed_at = datetime.now(timezone.utc)

        tables = ronda_tables(self._db, ronda)
        for table in tables:
            self._states.fire(table, TableTrigger.TABLE_CLOSED)

        self._db.flush()
        billing_logger.info(
            "Ronda closed",
            ronda_id=ronda.id,
            payment_id=payment.id,
            total_cents=total,
            method=payment.method,
            table_ids=[t.id for t in tables],
        )
        return CloseTableResult(
            payment_id=payment.id,
            ronda_id=ronda.id,
            total_cents=total,
            method=payment.method,
            split_type=payment.split_type,
            table_ids=[t.id for t in tables],
        )
