"""
Ronda Models: Ronda, Order, OrderItem.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BigIntPK, Base, TimestampMixin, utcnow

if TYPE_CHECKING:
    from .table import Table, TableGroup
    from .catalog import Product
    from .user import User
    from .payment import Payment


class Ronda(Base):
    """
    An open tab for a table, from the first order until payment.

    For grouped tables the ronda is anchored on one member table and carries
    `table_group_id`; every member bills against it.
    """

    __tablename__ = "ronda"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    table_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant_table.id"), nullable=False, index=True
    )
    table_group_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("table_group.id"), nullable=True, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    opened_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        # At most one active ronda per table
        Index(
            "uq_ronda_active_table",
            "table_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
        # Grouped tables bill against a single active group ronda
        Index(
            "uq_ronda_active_group",
            "table_group_id",
            unique=True,
            postgresql_where=text("is_active AND table_group_id IS NOT NULL"),
            sqlite_where=text("is_active AND table_group_id IS NOT NULL"),
        ),
    )

    # Relationships
    table: Mapped["Table"] = relationship(back_populates="rondas")
    table_group: Mapped[Optional["TableGroup"]] = relationship(back_populates="rondas")
    orders: Mapped[list["Order"]] = relationship(
        back_populates="ronda", order_by="Order.id"
    )
    payments: Mapped[list["Payment"]] = relationship(back_populates="ronda")

    def __repr__(self) -> str:
        return f"<Ronda(id={self.id}, table_id={self.table_id}, is_active={self.is_active})>"


class Order(TimestampMixin, Base):
    """
    A batch of items sent to the kitchen/bar by a mozo within a ronda.
    Status: PENDIENTE -> PREPARANDO -> LISTO -> ENTREGADO.
    """

    # "order" is a reserved SQL keyword
    __tablename__ = "ronda_order"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    ronda_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("ronda.id"), nullable=False, index=True
    )
    mozo_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("app_user.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(Text, default="PENDIENTE", nullable=False, index=True)

    # Relationships
    ronda: Mapped["Ronda"] = relationship(back_populates="orders")
    mozo: Mapped["User"] = relationship(back_populates="orders")
    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order", order_by="OrderItem.id"
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, ronda_id={self.ronda_id}, status='{self.status}')>"


class OrderItem(Base):
    """
    One product line of an order.
    `price_cents_snapshot` is the product price at creation time and is the only
    price used for billing.
    """

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("ronda_order.id"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("product.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    price_cents_snapshot: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_order_item_qty_positive"),
        CheckConstraint("price_cents_snapshot >= 0", name="chk_order_item_price_non_negative"),
    )

    # Relationships
    order: Mapped["Order"] = relationship(back_populates="items")
    product: Mapped["Product"] = relationship()

    @property
    def subtotal_cents(self) -> int:
        return self.quantity * self.price_cents_snapshot

    def __repr__(self) -> str:
        return f"<OrderItem(id={self.id}, product_id={self.product_id}, qty={self.quantity})>"
