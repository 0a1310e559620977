"""
User Service - staff reference data.

Users are referenced for attribution (orders, reservations); credentials are
handled outside this service.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ronda_api.models import Order, Reservation, User
from ronda_api.services.base_service import BaseCRUDService
from ronda_api.services.builders import build_output
from shared.config.logging import get_logger, mask_email
from shared.utils.exceptions import ConflictError, DuplicateEntityError
from shared.utils.schemas import UserCreate, UserOutput, UserUpdate

logger = get_logger(__name__)


class UserService(BaseCRUDService[User, UserOutput]):
    """Service for staff management."""

    unique_field = "email"

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=User,
            output_schema=UserOutput,
            create_schema=UserCreate,
            update_schema=UserUpdate,
            entity_name="Usuario",
        )

    def to_output(self, entity: User) -> UserOutput:
        return build_output(entity, UserOutput, order_count=self._order_count(entity.id))

    def _list_query(self):
        return select(User).order_by(User.name)

    def _validate_create(self, data: dict[str, Any]) -> None:
        data["email"] = data["email"].lower()
        self._check_unique_email(data["email"])

    def _validate_update(self, entity: User, data: dict[str, Any]) -> None:
        if data.get("email"):
            data["email"] = data["email"].lower()
            if data["email"] != entity.email:
                self._check_unique_email(data["email"], exclude_id=entity.id)

    def _validate_delete(self, entity: User) -> None:
        if self._order_count(entity.id):
            raise ConflictError(
                "No se puede eliminar un usuario con pedidos registrados; desactívelo",
                user_id=entity.id,
            )
        reservations = self._db.scalar(
            select(func.count(Reservation.id)).where(Reservation.created_by_id == entity.id)
        )
        if reservations:
            raise ConflictError(
                "No se puede eliminar un usuario con reservas registradas; desactívelo",
                user_id=entity.id,
            )

    def _check_unique_email(self, email: str, exclude_id: int | None = None) -> None:
        stmt = select(User.id).where(func.lower(User.email) == email)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        if self._db.scalar(stmt):
            logger.warning("Duplicate user email", email=mask_email(email))
            raise DuplicateEntityError("Usuario", email)

    def _order_count(self, user_id: int) -> int:
        return self._db.scalar(select(func.count(Order.id)).where(Order.mozo_id == user_id)) or 0
