"""
Shared Pydantic schemas used across the application.

Request models validate raw payloads at the boundary; output models are the
typed values carried inside a successful `Result`.
"""

from datetime import date, datetime
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from shared.config.constants import Limits


# =============================================================================
# Common Types
# =============================================================================

Role = Literal["ADMIN", "MOZO", "BARMAN", "COCINERO"]
TableStatusValue = Literal["LIBRE", "RESERVADA", "PIDIENDO", "ESPERANDO", "OCUPADA", "PAGANDO"]
OrderStatusValue = Literal["PENDIENTE", "PREPARANDO", "LISTO", "ENTREGADO"]
ReservationStatusValue = Literal["PENDING", "CONFIRMED", "SEATED", "CANCELLED", "NO_SHOW"]
PaymentMethodValue = Literal["EFECTIVO", "TARJETA", "TRANSFERENCIA", "QR"]
SplitTypeValue = Literal["SINGLE", "EQUAL", "BY_ITEM"]
ProductTypeValue = Literal["COCINA", "BARRA"]

HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_payload(schema: type[SchemaT], payload: SchemaT | dict[str, Any]) -> SchemaT:
    """
    Accept either an already-validated model or a raw dict.

    Raises pydantic.ValidationError for malformed dicts; `as_result` turns it
    into a VALIDATION_ERROR failure.
    """
    if isinstance(payload, schema):
        return payload
    return schema.model_validate(payload)


# =============================================================================
# Order Schemas
# =============================================================================


class OrderItemInput(BaseModel):
    """Item in an order submission."""

    product_id: int
    quantity: int = Field(ge=Limits.MIN_QUANTITY, le=Limits.MAX_QUANTITY)
    notes: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)


class ProcessOrderRequest(BaseModel):
    """Order submitted by a mozo for a table."""

    table_id: int
    mozo_id: int
    items: list[OrderItemInput] = Field(min_length=1)


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatusValue


class OrderItemOutput(BaseModel):
    id: int
    product_id: int
    product_name: str
    quantity: int
    notes: str | None = None
    price_cents_snapshot: int
    subtotal_cents: int


class OrderOutput(BaseModel):
    """Order with its items, as shown in the kitchen/bar feed."""

    id: int
    ronda_id: int
    table_id: int
    table_number: int
    zone_name: str | None = None
    mozo_id: int
    mozo_name: str
    status: OrderStatusValue
    created_at: datetime
    items: list[OrderItemOutput] = Field(default_factory=list)
    total_cents: int = 0


class ProcessOrderResult(BaseModel):
    """Result of a successful order submission."""

    order_id: int
    ronda_id: int
    table_id: int
    table_status: TableStatusValue
    order_total_cents: int
    ronda_total_cents: int


# =============================================================================
# Ronda and Billing Schemas
# =============================================================================


class CloseTableRequest(BaseModel):
    payment_method: PaymentMethodValue
    split_type: SplitTypeValue = "SINGLE"


class RondaOutput(BaseModel):
    """Ronda with its orders and computed total."""

    id: int
    table_id: int
    table_group_id: int | None = None
    is_active: bool
    opened_at: datetime
    closed_at: datetime | None = None
    orders: list[OrderOutput] = Field(default_factory=list)
    total_cents: int = 0


class CloseTableResult(BaseModel):
    """Payment recorded when a ronda closes."""

    payment_id: int
    ronda_id: int
    total_cents: int
    method: PaymentMethodValue
    split_type: SplitTypeValue
    table_ids: list[int]


# =============================================================================
# Zone Schemas
# =============================================================================


class ZoneCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    color: str = Field(pattern=HEX_COLOR_PATTERN)
    capacity: int = Field(
        default=Limits.DEFAULT_ZONE_CAPACITY,
        ge=Limits.MIN_ZONE_CAPACITY,
        le=Limits.MAX_ZONE_CAPACITY,
    )
    width: int = Field(
        default=Limits.DEFAULT_ZONE_WIDTH, ge=Limits.MIN_ZONE_WIDTH, le=Limits.MAX_ZONE_WIDTH
    )
    height: int = Field(
        default=Limits.DEFAULT_ZONE_HEIGHT, ge=Limits.MIN_ZONE_HEIGHT, le=Limits.MAX_ZONE_HEIGHT
    )

    @field_validator("name")
    @classmethod
    def upper_name(cls, v: str) -> str:
        name = v.strip().upper()
        if not name:
            raise ValueError("El nombre no puede estar vacío")
        return name


class ZoneUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    capacity: int | None = Field(
        default=None, ge=Limits.MIN_ZONE_CAPACITY, le=Limits.MAX_ZONE_CAPACITY
    )
    width: int | None = Field(default=None, ge=Limits.MIN_ZONE_WIDTH, le=Limits.MAX_ZONE_WIDTH)
    height: int | None = Field(default=None, ge=Limits.MIN_ZONE_HEIGHT, le=Limits.MAX_ZONE_HEIGHT)

    @field_validator("name")
    @classmethod
    def upper_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        name = v.strip().upper()
        if not name:
            raise ValueError("El nombre no puede estar vacío")
        return name


class ZoneOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str
    capacity: int
    width: int
    height: int
    table_count: int = 0


# =============================================================================
# Table Schemas
# =============================================================================


class TableCreate(BaseModel):
    number: int = Field(gt=0)
    capacity: int = Field(default=4, gt=0)
    x: int = 0
    y: int = 0
    zone_id: int | None = None


class TableUpdate(BaseModel):
    number: int | None = Field(default=None, gt=0)
    capacity: int | None = Field(default=None, gt=0)
    x: int | None = None
    y: int | None = None
    zone_id: int | None = None


class TablePositionUpdate(BaseModel):
    x: int
    y: int


class TableStatusUpdate(BaseModel):
    status: TableStatusValue


class TableOutput(BaseModel):
    """Table as drawn on the floor plan."""

    id: int
    number: int
    capacity: int
    status: TableStatusValue
    x: int
    y: int
    zone_id: int | None = None
    zone_name: str | None = None
    zone_color: str | None = None
    table_group_id: int | None = None
    group_name: str | None = None


# =============================================================================
# Table Group Schemas
# =============================================================================


class GroupTablesRequest(BaseModel):
    table_ids: list[int] = Field(min_length=Limits.MIN_GROUP_SIZE)
    name: str | None = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)

    @field_validator("table_ids")
    @classmethod
    def distinct_ids(cls, v: list[int]) -> list[int]:
        if len(set(v)) != len(v):
            raise ValueError("Las mesas no pueden repetirse")
        return v


class TableGroupOutput(BaseModel):
    id: int
    name: str
    is_active: bool
    created_at: datetime
    tables: list[TableOutput] = Field(default_factory=list)


# =============================================================================
# Reservation Schemas
# =============================================================================


class CreateReservationRequest(BaseModel):
    table_id: int
    customer_name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    customer_phone: str | None = Field(default=None, max_length=Limits.MAX_PHONE_LENGTH)
    party_size: int = Field(gt=0)
    reservation_time: datetime
    # None uses the configured default duration
    duration_minutes: int | None = Field(default=None, gt=0)
    notes: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)
    created_by_id: int


class ReservationStatusRequest(BaseModel):
    status: ReservationStatusValue


class ReservationFilter(BaseModel):
    day: date | None = None
    status: ReservationStatusValue | None = None
    table_id: int | None = None


class ReservationOutput(BaseModel):
    id: int
    table_id: int
    table_number: int
    customer_name: str
    customer_phone: str | None = None
    party_size: int
    reservation_time: datetime
    duration_minutes: int
    notes: str | None = None
    status: ReservationStatusValue
    created_by_id: int
    created_at: datetime


class SeatCustomerResult(BaseModel):
    reservation_id: int
    ronda_id: int
    table_id: int
    table_status: TableStatusValue


# =============================================================================
# Staff and Catalog Schemas
# =============================================================================


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    email: EmailStr
    role: Role


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    email: EmailStr | None = None
    role: Role | None = None
    is_active: bool | None = None


class UserOutput(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    is_active: bool
    created_at: datetime
    order_count: int = 0


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    category: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    price_cents: int = Field(ge=Limits.MIN_PRICE_CENTS, le=Limits.MAX_PRICE_CENTS)
    type: ProductTypeValue
    is_active: bool = True


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    category: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    price_cents: int | None = Field(
        default=None, ge=Limits.MIN_PRICE_CENTS, le=Limits.MAX_PRICE_CENTS
    )
    type: ProductTypeValue | None = None
    is_active: bool | None = None


class ProductOutput(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str
    price_cents: int
    type: ProductTypeValue
    is_active: bool


# =============================================================================
# Dashboard Schemas
# =============================================================================


class DailySales(BaseModel):
    day: date
    revenue_cents: int
    orders: int


class TopTable(BaseModel):
    table_id: int
    number: int
    revenue_cents: int


class DashboardStats(BaseModel):
    total_tables: int
    occupied_tables: int
    active_rondas: int
    today_orders: int
    today_revenue_cents: int
    recent_orders: list[OrderOutput] = Field(default_factory=list)
    sales_last_days: list[DailySales] = Field(default_factory=list)
    status_distribution: dict[str, int] = Field(default_factory=dict)
    top_tables: list[TopTable] = Field(default_factory=list)
