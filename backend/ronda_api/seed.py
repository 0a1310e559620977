"""
Seed data for development and testing.
Creates staff, zones, a 20-table floor plan and the bar/kitchen menu.
Optionally opens a few demo rondas through the order service.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ronda_api.models import Product, Table, User, Zone
from ronda_api.services.domain import OrderService
from shared.config.constants import ProductType, Roles, TableStatus
from shared.config.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Constants for seed data
# =============================================================================

TABLE_COUNT = 20
TABLES_PER_ROW = 5
# Capacity cycles by table number modulo 5
TABLE_CAPACITIES = [2, 4, 6, 4, 2]
TABLE_SPACING_X = 120
TABLE_SPACING_Y = 150
TABLE_MARGIN = 50

STAFF = [
    ("Admin Ronda", "admin@ronda.com", Roles.ADMIN),
    ("Mozo Juan", "juan@ronda.com", Roles.MOZO),
    ("Mozo Ana", "ana@ronda.com", Roles.MOZO),
    ("Mozo Carlos", "carlos@ronda.com", Roles.MOZO),
    ("Barman Pedro", "pedro@ronda.com", Roles.BARMAN),
    ("Cocinero Luis", "luis@ronda.com", Roles.COCINERO),
]

# name, color, capacity, width, height
ZONES = [
    ("PRINCIPAL", "#3b82f6", 40, 800, 500),
    ("TERRAZA", "#10b981", 30, 700, 450),
    ("VIP", "#a855f7", 20, 600, 400),
    ("BARRA", "#f59e0b", 15, 500, 350),
]

# name, category, price (pesos), station
PRODUCTS = [
    ("IPA - Pinta", "Cervezas", 4500, ProductType.BARRA),
    ("Honey - Pinta", "Cervezas", 4200, ProductType.BARRA),
    ("Stout - Pinta", "Cervezas", 4800, ProductType.BARRA),
    ("Lager - Pinta", "Cervezas", 4000, ProductType.BARRA),
    ("Fernet con Pepsi", "Tragos", 3800, ProductType.BARRA),
    ("Gin Tonic Classic", "Tragos", 4000, ProductType.BARRA),
    ("Negroni", "Tragos", 4200, ProductType.BARRA),
    ("Mojito", "Tragos", 4500, ProductType.BARRA),
    ("Aperol Spritz", "Tragos", 4300, ProductType.BARRA),
    ("Papas con Cheddar", "Tapeo", 5500, ProductType.COCINA),
    ("Nachos Ronda", "Tapeo", 6000, ProductType.COCINA),
    ("Empanada de Carne", "Tapeo", 1200, ProductType.COCINA),
    ("Empanada de Pollo", "Tapeo", 1200, ProductType.COCINA),
    ("Tabla de Fiambres", "Tapeo", 8500, ProductType.COCINA),
    ("Rabas", "Tapeo", 7000, ProductType.COCINA),
    ("Burger XL", "Platos", 8500, ProductType.COCINA),
    ("Pizza Muzza", "Platos", 7000, ProductType.COCINA),
    ("Pizza Especial", "Platos", 8500, ProductType.COCINA),
    ("Milanesa Napolitana", "Platos", 9000, ProductType.COCINA),
    ("Bife de Chorizo", "Platos", 12000, ProductType.COCINA),
]

# table number, mozo email, [(product index, quantity)]
DEMO_ORDERS = [
    (1, "juan@ronda.com", [(0, 2), (9, 1)]),
    (2, "ana@ronda.com", [(15, 2), (1, 2)]),
    (3, "carlos@ronda.com", [(10, 1), (4, 3), (11, 4)]),
    (5, "juan@ronda.com", [(18, 1), (0, 1), (16, 1), (6, 2)]),
    (7, "ana@ronda.com", [(4, 2), (9, 1), (17, 1)]),
    (10, "carlos@ronda.com", [(13, 1), (19, 2), (7, 4), (1, 4)]),
]


def table_layout(number: int) -> dict[str, int]:
    """Grid position, capacity and zone index for table `number` (1-based)."""
    index = number - 1
    return {
        "capacity": TABLE_CAPACITIES[number % len(TABLE_CAPACITIES)],
        "x": (index % TABLES_PER_ROW) * TABLE_SPACING_X + TABLE_MARGIN,
        "y": (index // TABLES_PER_ROW) * TABLE_SPACING_Y + TABLE_MARGIN,
        "zone_index": (index // TABLES_PER_ROW) % len(ZONES),
    }


def seed_staff(db: Session) -> None:
    for name, email, role in STAFF:
        if db.scalar(select(User.id).where(User.email == email)):
            continue
        db.add(User(name=name, email=email, role=role))
    db.flush()


def seed_floor(db: Session) -> None:
    """Zones and tables. Idempotent by zone name and table number."""
    zones = []
    for name, color, capacity, width, height in ZONES:
        zone = db.scalar(select(Zone).where(Zone.name == name))
        if not zone:
            zone = Zone(name=name, color=color, capacity=capacity, width=width, height=height)
            db.add(zone)
        zones.append(zone)
    db.flush()

    for number in range(1, TABLE_COUNT + 1):
        if db.scalar(select(Table.id).where(Table.number == number)):
            continue
        layout = table_layout(number)
        db.add(
            Table(
                number=number,
                capacity=layout["capacity"],
                x=layout["x"],
                y=layout["y"],
                zone_id=zones[layout["zone_index"]].id,
                status=TableStatus.LIBRE,
            )
        )
    db.flush()


def seed_menu(db: Session) -> None:
    for name, category, price, station in PRODUCTS:
        if db.scalar(select(Product.id).where(Product.name == name)):
            continue
        db.add(Product(name=name, category=category, price_cents=price * 100, type=station))
    db.flush()


def seed_demo_rondas(db: Session) -> int:
    """Place demo orders on idle tables. Returns the number of orders placed."""
    products = db.scalars(select(Product).order_by(Product.id)).all()
    by_name = {p.name: p for p in products}
    catalog = [by_name[name] for name, *_ in PRODUCTS if name in by_name]

    service = OrderService(db)
    placed = 0
    for number, mozo_email, lines in DEMO_ORDERS:
        table = db.scalar(select(Table).where(Table.number == number))
        mozo = db.scalar(select(User).where(User.email == mozo_email))
        if not table or not mozo or table.status != TableStatus.LIBRE:
            continue
        result = service.process_order(
            {
                "table_id": table.id,
                "mozo_id": mozo.id,
                "items": [
                    {"product_id": catalog[idx].id, "quantity": qty} for idx, qty in lines
                ],
            }
        )
        if not result.ok:
            logger.warning("Demo order skipped", table_number=number, error=result.error)
            continue
        placed += 1
    return placed


def seed(db: Session, *, demo: bool = False) -> None:
    """
    Seed reference data. Idempotent: existing rows are left untouched.
    With `demo`, also opens rondas on a handful of tables.
    """
    logger.info("Seeding reference data")
    seed_staff(db)
    seed_floor(db)
    seed_menu(db)
    db.commit()
    logger.info("Reference data ready", users=len(STAFF), zones=len(ZONES), tables=TABLE_COUNT)

    if demo:
        placed = seed_demo_rondas(db)
        logger.info("Demo rondas opened", orders=placed)
