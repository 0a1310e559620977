"""
Product catalog endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ronda_api.routers._common import respond
from ronda_api.services.domain import ProductService
from shared.infrastructure.db import get_db
from shared.utils.schemas import ProductCreate, ProductTypeValue, ProductUpdate


router = APIRouter(tags=["admin-products"])


@router.get("/products")
def list_products(
    active_only: bool = False,
    product_type: ProductTypeValue | None = None,
    db: Session = Depends(get_db),
):
    service = ProductService(db)
    if active_only or product_type:
        return respond(service.list_active(product_type))
    return respond(service.list_all())


@router.post("/products")
def create_product(body: ProductCreate, db: Session = Depends(get_db)):
    return respond(ProductService(db).create(body), status.HTTP_201_CREATED)


@router.put("/products/{product_id}")
def update_product(product_id: int, body: ProductUpdate, db: Session = Depends(get_db)):
    """Price changes apply to future orders only."""
    return respond(ProductService(db).update(product_id, body))


@router.delete("/products/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    return respond(ProductService(db).delete(product_id))
