"""
Zone Model: floor areas that group tables on the floor plan.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BigIntPK, Base, TimestampMixin

if TYPE_CHECKING:
    from .table import Table


class Zone(TimestampMixin, Base):
    """
    Area of the floor ("PRINCIPAL", "TERRAZA", "VIP").
    Width and height size the zone's canvas in the floor plan.
    Cannot be deleted while any table references it.
    """

    __tablename__ = "zone"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    color: Mapped[str] = mapped_column(Text, nullable=False)  # "#3b82f6"
    capacity: Mapped[int] = mapped_column(Integer, default=20, nullable=False)
    width: Mapped[int] = mapped_column(Integer, default=600, nullable=False)
    height: Mapped[int] = mapped_column(Integer, default=400, nullable=False)

    # Relationships
    tables: Mapped[list["Table"]] = relationship(back_populates="zone")

    def __repr__(self) -> str:
        return f"<Zone(id={self.id}, name='{self.name}')>"
