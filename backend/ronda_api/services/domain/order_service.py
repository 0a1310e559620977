"""
Order Service - order submission and kitchen/bar progression.

Submission is one transaction: validate references, find-or-create the
ronda, snapshot current prices into the items, create the order and move
the billed tables to the order-placed status.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ronda_api.models import Order, OrderItem, Product, Ronda, Table, User
from ronda_api.services.builders import order_output
from ronda_api.services.domain.ronda_service import (
    acquire_active_ronda,
    billing_unit,
    load_table,
    ronda_total_cents,
)
from ronda_api.services.domain.table_state import TableTrigger, get_state_machine
from shared.config.constants import OrderStatus
from shared.config.logging import get_logger
from shared.infrastructure.db import transaction
from shared.utils.exceptions import (
    InvalidReferenceError,
    InvalidTransitionError,
    NotFoundError,
)
from shared.utils.result import as_result
from shared.utils.schemas import (
    OrderOutput,
    ProcessOrderRequest,
    ProcessOrderResult,
    UpdateOrderStatusRequest,
    validate_payload,
)

logger = get_logger(__name__)


class OrderService:
    """Order submission and status updates."""

    def __init__(self, db: Session):
        self._db = db
        self._states = get_state_machine()

    @as_result
    def process_order(self, payload: ProcessOrderRequest | dict) -> ProcessOrderResult:
        """
        Submit an order for a table.

        Raises (as failures):
            ValidationError: empty items or quantity out of range
            NotFoundError: unknown table or mozo
            InvalidReferenceError: unknown or inactive product
        """
        request = validate_payload(ProcessOrderRequest, payload)

        with transaction(self._db):
            table = load_table(self._db, request.table_id, lock=True)

            mozo = self._db.scalar(select(User).where(User.id == request.mozo_id))
            if not mozo:
                raise NotFoundError("Mozo", request.mozo_id)

            prices = self._resolve_prices({item.product_id for item in request.items})

            ronda, created = acquire_active_ronda(self._db, table)

            order = Order(ronda_id=ronda.id, mozo_id=mozo.id, status=OrderStatus.PENDIENTE)
            self._db.add(order)
            self._db.flush()

            order_total = 0
            for item in request.items:
                snapshot = prices[item.product_id]
                self._db.add(
                    OrderItem(
                        order_id=order.id,
                        product_id=item.product_id,
                        quantity=item.quantity,
                        notes=item.notes,
                        price_cents_snapshot=snapshot,
                    )
                )
                order_total += snapshot * item.quantity

            for member in billing_unit(self._db, table):
                self._states.fire(member, TableTrigger.ORDER_PLACED)

            self._db.flush()
            ronda_total = ronda_total_cents(self._db, ronda.id)
            result = ProcessOrderResult(
                order_id=order.id,
                ronda_id=ronda.id,
                table_id=table.id,
                table_status=table.status,
                order_total_cents=order_total,
                ronda_total_cents=ronda_total,
            )

        logger.info(
            "Order processed",
            order_id=result.order_id,
            ronda_id=result.ronda_id,
            ronda_created=created,
            table_id=result.table_id,
            mozo_id=request.mozo_id,
            item_count=len(request.items),
            order_total_cents=result.order_total_cents,
        )
        return result

    def _resolve_prices(self, product_ids: set[int]) -> dict[int, int]:
        """Current price of every referenced product; all must exist and be active."""
        rows = self._db.execute(
            select(Product.id, Product.price_cents).where(
                Product.id.in_(product_ids),
                Product.is_active.is_(True),
            )
        ).all()
        prices = {row.id: row.price_cents for row in rows}
        missing = sorted(product_ids - prices.keys())
        if missing:
            raise InvalidReferenceError("Producto", missing)
        return prices

    @as_result
    def update_order_status(
        self, order_id: int, payload: UpdateOrderStatusRequest | dict
    ) -> OrderOutput:
        """Advance an order exactly one step: PENDIENTE -> PREPARANDO -> LISTO -> ENTREGADO."""
        request = validate_payload(UpdateOrderStatusRequest, payload)

        with transaction(self._db):
            order = self._db.scalar(select(Order).where(Order.id == order_id).with_for_update())
            if not order:
                raise NotFoundError("Pedido", order_id)

            current = OrderStatus.ALL.index(order.status)
            target = OrderStatus.ALL.index(request.status)
            if target != current + 1:
                raise InvalidTransitionError(
                    "pedido", order.status, request.status, order_id=order_id
                )
            order.status = request.status

        logger.info("Order status updated", order_id=order_id, status=request.status)
        return order_output(order)

    @as_result
    def list_active_orders(self, status: str | None = None) -> list[OrderOutput]:
        """Orders of active rondas, newest first (kitchen/bar feed)."""
        stmt = (
            select(Order)
            .join(Ronda, Order.ronda_id == Ronda.id)
            .where(Ronda.is_active.is_(True))
            .options(
                selectinload(Order.items).selectinload(OrderItem.product),
                selectinload(Order.mozo),
                selectinload(Order.ronda).selectinload(Ronda.table).selectinload(Table.zone),
            )
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        if status:
            stmt = stmt.where(Order.status == status)
        return [order_output(o) for o in self._db.scalars(stmt).all()]
