"""
Entity output builders.

Converts ORM entities into the Pydantic output schemas carried by `Result`.
Fields with matching names are copied automatically; computed or joined
fields are passed as overrides.

Usage:
    from ronda_api.services.builders import build_output, table_output

    output = build_output(zone, ZoneOutput, table_count=4)
    output = table_output(table)
"""

from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel

from ronda_api.models import Order, Reservation, Ronda, Table, TableGroup
from shared.utils.schemas import (
    OrderItemOutput,
    OrderOutput,
    ReservationOutput,
    RondaOutput,
    TableGroupOutput,
    TableOutput,
)

T = TypeVar("T", bound=BaseModel)


def build_output(entity: Any, output_class: Type[T], **overrides: Any) -> T:
    """
    Build `output_class` from `entity`, auto-mapping fields with matching names.

    Example:
        output = build_output(user, UserOutput, order_count=3)
    """
    data = {}
    for field_name in output_class.model_fields:
        if field_name in overrides:
            data[field_name] = overrides[field_name]
        elif hasattr(entity, field_name):
            data[field_name] = getattr(entity, field_name)
    return output_class(**data)


def table_output(table: Table) -> TableOutput:
    return build_output(
        table,
        TableOutput,
        zone_name=table.zone.name if table.zone else None,
        zone_color=table.zone.color if table.zone else None,
        group_name=table.group.name if table.group else None,
    )


def group_output(group: TableGroup) -> TableGroupOutput:
    return build_output(group, TableGroupOutput, tables=[table_output(t) for t in group.tables])


def order_output(order: Order) -> OrderOutput:
    """Order with items priced from their snapshots."""
    items = [
        build_output(
            item,
            OrderItemOutput,
            product_name=item.product.name,
            subtotal_cents=item.subtotal_cents,
        )
        for item in order.items
    ]
    table = order.ronda.table
    return build_output(
        order,
        OrderOutput,
        table_id=table.id,
        table_number=table.number,
        zone_name=table.zone.name if table.zone else None,
        mozo_name=order.mozo.name,
        items=items,
        total_cents=sum(i.subtotal_cents for i in items),
    )


def ronda_output(ronda: Ronda) -> RondaOutput:
    orders = [order_output(o) for o in ronda.orders]
    return build_output(
        ronda,
        RondaOutput,
        orders=orders,
        total_cents=sum(o.total_cents for o in orders),
    )


def reservation_output(reservation: Reservation) -> ReservationOutput:
    return build_output(reservation, ReservationOutput, table_number=reservation.table.number)
