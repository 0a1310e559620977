"""
Product Service - menu catalog.

Price changes only affect future orders; placed orders keep their snapshots.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ronda_api.models import OrderItem, Product
from ronda_api.services.base_service import BaseCRUDService
from shared.utils.exceptions import ConflictError
from shared.utils.result import as_result
from shared.utils.schemas import ProductCreate, ProductOutput, ProductUpdate


class ProductService(BaseCRUDService[Product, ProductOutput]):
    """Service for product management."""

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Product,
            output_schema=ProductOutput,
            create_schema=ProductCreate,
            update_schema=ProductUpdate,
            entity_name="Producto",
        )

    def _list_query(self):
        return select(Product).order_by(Product.category, Product.name)

    @as_result
    def list_active(self, product_type: str | None = None) -> list[ProductOutput]:
        """Orderable products, optionally only one station's (COCINA / BARRA)."""
        stmt = self._list_query().where(Product.is_active.is_(True))
        if product_type:
            stmt = stmt.where(Product.type == product_type)
        return [self.to_output(p) for p in self._db.scalars(stmt).all()]

    def _validate_delete(self, entity: Product) -> None:
        used = self._db.scalar(select(OrderItem.id).where(OrderItem.product_id == entity.id).limit(1))
        if used:
            raise ConflictError(
                f"No se puede eliminar {entity.name}: figura en pedidos; desactívelo",
                product_id=entity.id,
            )
