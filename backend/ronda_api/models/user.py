"""
Staff Model: User.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BigIntPK, Base, TimestampMixin

if TYPE_CHECKING:
    from .ronda import Order
    from .reservation import Reservation


class User(TimestampMixin, Base):
    """
    Staff member: MOZO (floor), BARMAN / COCINERO (stations) or ADMIN.
    Referenced for attribution only; authentication lives outside this service.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    role: Mapped[str] = mapped_column(Text, nullable=False, index=True)  # ADMIN, MOZO, BARMAN, COCINERO
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationships
    orders: Mapped[list["Order"]] = relationship(back_populates="mozo")
    reservations: Mapped[list["Reservation"]] = relationship(back_populates="created_by")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"
