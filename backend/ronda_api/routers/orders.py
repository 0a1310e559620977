"""
Orders router.
Order submission by mozos and the kitchen/bar feed.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ronda_api.routers._common import respond
from ronda_api.services.domain import OrderService
from shared.infrastructure.db import get_db
from shared.utils.schemas import OrderStatusValue, ProcessOrderRequest, UpdateOrderStatusRequest


router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("")
def list_active_orders(
    order_status: OrderStatusValue | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    """Orders of open rondas, newest first."""
    return respond(OrderService(db).list_active_orders(order_status))


@router.post("")
def submit_order(body: ProcessOrderRequest, db: Session = Depends(get_db)):
    return respond(OrderService(db).process_order(body), status.HTTP_201_CREATED)


@router.patch("/{order_id}/status")
def update_order_status(
    order_id: int, body: UpdateOrderStatusRequest, db: Session = Depends(get_db)
):
    return respond(OrderService(db).update_order_status(order_id, body))
