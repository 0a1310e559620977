"""
Centralized constants for the backend application.
Avoid magic strings for statuses, roles and limits.

Usage:
    from shared.config.constants import TableStatus, ReservationStatus

    if table.status == TableStatus.LIBRE:
        ...
"""

from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Roles:
    """User role constants."""

    ADMIN: Final[str] = "ADMIN"
    MOZO: Final[str] = "MOZO"
    BARMAN: Final[str] = "BARMAN"
    COCINERO: Final[str] = "COCINERO"

    ALL: Final[list[str]] = [ADMIN, MOZO, BARMAN, COCINERO]


# =============================================================================
# Entity Status Constants
# =============================================================================


class TableStatus:
    """Table status constants."""

    LIBRE: Final[str] = "LIBRE"
    RESERVADA: Final[str] = "RESERVADA"
    PIDIENDO: Final[str] = "PIDIENDO"
    ESPERANDO: Final[str] = "ESPERANDO"
    OCUPADA: Final[str] = "OCUPADA"
    PAGANDO: Final[str] = "PAGANDO"

    ALL: Final[list[str]] = [LIBRE, RESERVADA, PIDIENDO, ESPERANDO, OCUPADA, PAGANDO]
    # Statuses that only make sense while the table has an open ronda
    SERVING: Final[list[str]] = [PIDIENDO, ESPERANDO, PAGANDO]
    # Statuses a table with an open ronda can never have
    IDLE: Final[list[str]] = [LIBRE, RESERVADA]


class OrderStatus:
    """Order status constants, in kitchen/bar progression order."""

    PENDIENTE: Final[str] = "PENDIENTE"
    PREPARANDO: Final[str] = "PREPARANDO"
    LISTO: Final[str] = "LISTO"
    ENTREGADO: Final[str] = "ENTREGADO"

    ALL: Final[list[str]] = [PENDIENTE, PREPARANDO, LISTO, ENTREGADO]


class ReservationStatus:
    """Reservation status constants."""

    PENDING: Final[str] = "PENDING"
    CONFIRMED: Final[str] = "CONFIRMED"
    SEATED: Final[str] = "SEATED"
    CANCELLED: Final[str] = "CANCELLED"
    NO_SHOW: Final[str] = "NO_SHOW"

    ALL: Final[list[str]] = [PENDING, CONFIRMED, SEATED, CANCELLED, NO_SHOW]
    # Reservations that still hold the table
    ACTIVE: Final[list[str]] = [PENDING, CONFIRMED, SEATED]
    RELEASED: Final[list[str]] = [CANCELLED, NO_SHOW]
    TERMINAL: Final[list[str]] = [SEATED, CANCELLED, NO_SHOW]


class PaymentMethod:
    """Payment method constants."""

    EFECTIVO: Final[str] = "EFECTIVO"
    TARJETA: Final[str] = "TARJETA"
    TRANSFERENCIA: Final[str] = "TRANSFERENCIA"
    QR: Final[str] = "QR"

    ALL: Final[list[str]] = [EFECTIVO, TARJETA, TRANSFERENCIA, QR]


class SplitType:
    """How a bill was split among diners."""

    SINGLE: Final[str] = "SINGLE"
    EQUAL: Final[str] = "EQUAL"
    BY_ITEM: Final[str] = "BY_ITEM"

    ALL: Final[list[str]] = [SINGLE, EQUAL, BY_ITEM]


class ProductType:
    """Preparation station for a product."""

    COCINA: Final[str] = "COCINA"
    BARRA: Final[str] = "BARRA"

    ALL: Final[list[str]] = [COCINA, BARRA]


# =============================================================================
# Validation Limits
# =============================================================================


class Limits:
    """Validation limits."""

    # Quantity limits
    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 99

    # Price limits (in cents)
    MIN_PRICE_CENTS: Final[int] = 0
    MAX_PRICE_CENTS: Final[int] = 100_000_00

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 200
    MAX_NOTES_LENGTH: Final[int] = 500
    MAX_PHONE_LENGTH: Final[int] = 40

    # Grouping
    MIN_GROUP_SIZE: Final[int] = 2

    # Zones (floor plan canvas)
    MIN_ZONE_CAPACITY: Final[int] = 1
    MAX_ZONE_CAPACITY: Final[int] = 100
    DEFAULT_ZONE_CAPACITY: Final[int] = 20
    MIN_ZONE_WIDTH: Final[int] = 400
    MAX_ZONE_WIDTH: Final[int] = 1200
    DEFAULT_ZONE_WIDTH: Final[int] = 600
    MIN_ZONE_HEIGHT: Final[int] = 300
    MAX_ZONE_HEIGHT: Final[int] = 800
    DEFAULT_ZONE_HEIGHT: Final[int] = 400

    # Dashboard
    RECENT_ORDERS: Final[int] = 10
    TOP_TABLES: Final[int] = 5
    SALES_DAYS: Final[int] = 7
