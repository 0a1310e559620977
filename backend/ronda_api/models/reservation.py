"""
Reservation Model.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BigIntPK, Base, TimestampMixin

if TYPE_CHECKING:
    from .table import Table
    from .user import User


class Reservation(TimestampMixin, Base):
    """
    A booking of one table for a party at a given wall-clock time.

    `reservation_time` is stored naive (local restaurant time).
    Status: PENDING -> CONFIRMED -> SEATED, or PENDING/CONFIRMED -> CANCELLED | NO_SHOW.
    """

    __tablename__ = "reservation"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    table_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant_table.id"), nullable=False, index=True
    )
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    customer_phone: Mapped[Optional[str]] = mapped_column(Text)
    party_size: Mapped[int] = mapped_column(Integer, nullable=False)
    reservation_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=120, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(Text, default="PENDING", nullable=False)
    created_by_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("app_user.id"), nullable=False, index=True
    )

    __table_args__ = (
        CheckConstraint("party_size > 0", name="chk_reservation_party_positive"),
        CheckConstraint("duration_minutes > 0", name="chk_reservation_duration_positive"),
        # Conflict-window lookups filter by table, status and time
        Index("ix_reservation_table_status_time", "table_id", "status", "reservation_time"),
    )

    # Relationships
    table: Mapped["Table"] = relationship(back_populates="reservations")
    created_by: Mapped["User"] = relationship(back_populates="reservations")

    def __repr__(self) -> str:
        return f"<Reservation(id={self.id}, table_id={self.table_id}, status={self.status})>"
