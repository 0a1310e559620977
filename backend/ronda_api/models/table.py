"""
Table Models: Table, TableGroup.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BigIntPK, Base, TimestampMixin, utcnow

if TYPE_CHECKING:
    from .zone import Zone
    from .ronda import Ronda
    from .reservation import Reservation


class Table(TimestampMixin, Base):
    """
    Physical table on the floor plan.
    Status is only changed through TableStateMachine triggers.
    """

    # "table" is a reserved SQL keyword
    __tablename__ = "restaurant_table"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    number: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    capacity: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    status: Mapped[str] = mapped_column(
        Text, default="LIBRE", nullable=False, index=True
    )  # LIBRE, RESERVADA, PIDIENDO, ESPERANDO, OCUPADA, PAGANDO
    x: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    y: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    zone_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("zone.id"), nullable=True, index=True
    )
    table_group_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("table_group.id"), nullable=True, index=True
    )

    __table_args__ = (
        CheckConstraint("number > 0", name="chk_table_number_positive"),
        CheckConstraint("capacity > 0", name="chk_table_capacity_positive"),
        Index("ix_table_zone_status", "zone_id", "status"),
    )

    # Relationships
    zone: Mapped[Optional["Zone"]] = relationship(back_populates="tables")
    group: Mapped[Optional["TableGroup"]] = relationship(back_populates="tables")
    rondas: Mapped[list["Ronda"]] = relationship(back_populates="table")
    reservations: Mapped[list["Reservation"]] = relationship(back_populates="table")

    def __repr__(self) -> str:
        return f"<Table(id={self.id}, number={self.number}, status={self.status})>"


class TableGroup(Base):
    """
    Several physical tables merged into one billing unit.
    Members share the group's single active ronda until the group is dissolved.
    """

    __tablename__ = "table_group"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)  # "Mesa 3+4"
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    tables: Mapped[list["Table"]] = relationship(
        back_populates="group", order_by="Table.number"
    )
    rondas: Mapped[list["Ronda"]] = relationship(back_populates="table_group")

    def __repr__(self) -> str:
        return f"<TableGroup(id={self.id}, name='{self.name}', is_active={self.is_active})>"
