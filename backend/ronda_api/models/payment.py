"""
Billing Model: Payment.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BigIntPK, Base, utcnow

if TYPE_CHECKING:
    from .ronda import Ronda


class Payment(Base):
    """
    Settlement of a ronda. Written once when the ronda closes and never updated.
    """

    __tablename__ = "payment"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    ronda_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("ronda.id"), nullable=False, index=True
    )
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    method: Mapped[str] = mapped_column(Text, nullable=False)  # EFECTIVO, TARJETA, TRANSFERENCIA, QR
    split_type: Mapped[str] = mapped_column(Text, default="SINGLE", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        CheckConstraint("amount_cents >= 0", name="chk_payment_amount_non_negative"),
    )

    # Relationships
    ronda: Mapped["Ronda"] = relationship(back_populates="payments")

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, ronda_id={self.ronda_id}, amount_cents={self.amount_cents})>"
