"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class and TimestampMixin
- user: User
- catalog: Product
- zone: Zone
- table: Table, TableGroup
- ronda: Ronda, Order, OrderItem
- reservation: Reservation
- payment: Payment
"""

# Base classes
from .base import Base, TimestampMixin

# Staff and catalog
from .user import User
from .catalog import Product

# Floor layout
from .zone import Zone
from .table import Table, TableGroup

# Tabs and orders
from .ronda import Ronda, Order, OrderItem

# Reservations and billing
from .reservation import Reservation
from .payment import Payment

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "Product",
    "Zone",
    "Table",
    "TableGroup",
    "Ronda",
    "Order",
    "OrderItem",
    "Reservation",
    "Payment",
]
