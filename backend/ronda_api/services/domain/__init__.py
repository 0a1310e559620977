"""
Domain Services.

Lifecycle rules (rondas, orders, groups, reservations) and reference-data
services. Every public operation returns a `shared.utils.result.Result`.

Usage:
    from ronda_api.services.domain import OrderService

    result = OrderService(db).process_order(payload)
"""

from ronda_api.services.domain.table_state import TableStateMachine, TableTrigger
from ronda_api.services.domain.ronda_service import RondaService
from ronda_api.services.domain.order_service import OrderService
from ronda_api.services.domain.table_group_service import TableGroupService
from ronda_api.services.domain.reservation_service import ReservationService
from ronda_api.services.domain.table_service import TableService
from ronda_api.services.domain.zone_service import ZoneService
from ronda_api.services.domain.user_service import UserService
from ronda_api.services.domain.product_service import ProductService
from ronda_api.services.domain.stats_service import StatsService

__all__ = [
    "TableStateMachine",
    "TableTrigger",
    "RondaService",
    "OrderService",
    "TableGroupService",
    "ReservationService",
    "TableService",
    "ZoneService",
    "UserService",
    "ProductService",
    "StatsService",
]
