"""
Stats Service - admin dashboard figures.

Revenue is always derived from order item price snapshots.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ronda_api.models import Order, OrderItem, Ronda, Table
from ronda_api.services.builders import order_output
from shared.config.constants import Limits, TableStatus
from shared.utils.result import as_result
from shared.utils.schemas import DailySales, DashboardStats, TopTable

_LINE_TOTAL = OrderItem.quantity * OrderItem.price_cents_snapshot


def _utc_date(value: datetime) -> date:
    # SQLite hands back naive UTC values
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


class StatsService:
    def __init__(self, db: Session):
        self._db = db

    @as_result
    def dashboard(self, today: date | None = None) -> DashboardStats:
        today = today or datetime.now(timezone.utc).date()
        day_start = datetime.combine(today, time.min, tzinfo=timezone.utc)
        window_start = day_start - timedelta(days=Limits.SALES_DAYS - 1)
        window_end = day_start + timedelta(days=1)

        total_tables = self._db.scalar(select(func.count(Table.id))) or 0
        occupied = self._db.scalar(
            select(func.count(Table.id)).where(Table.status != TableStatus.LIBRE)
        ) or 0
        active_rondas = self._db.scalar(
            select(func.count(Ronda.id)).where(Ronda.is_active.is_(True))
        ) or 0

        sales = self._sales_by_day(window_start, window_end)
        series = []
        for offset in range(Limits.SALES_DAYS - 1, -1, -1):
            day = today - timedelta(days=offset)
            revenue_cents, orders = sales.get(day, (0, 0))
            series.append(DailySales(day=day, revenue_cents=revenue_cents, orders=orders))

        return DashboardStats(
            total_tables=total_tables,
            occupied_tables=occupied,
            active_rondas=active_rondas,
            today_orders=series[-1].orders,
            today_revenue_cents=series[-1].revenue_cents,
            recent_orders=self._recent_orders(),
            sales_last_days=series,
            status_distribution=self._status_distribution(),
            top_tables=self._top_tables(),
        )

    def _sales_by_day(self, start: datetime, end: datetime) -> dict[date, tuple[int, int]]:
        """(revenue_cents, order_count) per UTC day for orders created in [start, end)."""
        rows = self._db.execute(
            select(
                Order.id,
                Order.created_at,
                func.coalesce(func.sum(_LINE_TOTAL), 0).label("total"),
            )
            .outerjoin(OrderItem, OrderItem.order_id == Order.id)
            .where(Order.created_at >= start, Order.created_at < end)
            .group_by(Order.id, Order.created_at)
        ).all()

        revenue: dict[date, int] = defaultdict(int)
        counts: dict[date, int] = defaultdict(int)
        for row in rows:
            day = _utc_date(row.created_at)
            revenue[day] += int(row.total)
            counts[day] += 1
        return {day: (revenue[day], counts[day]) for day in counts}

    def _recent_orders(self):
        orders = self._db.scalars(
            select(Order)
            .options(
                selectinload(Order.items).selectinload(OrderItem.product),
                selectinload(Order.mozo),
                selectinload(Order.ronda).selectinload(Ronda.table).selectinload(Table.zone),
            )
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(Limits.RECENT_ORDERS)
        ).all()
        return [order_output(o) for o in orders]

    def _status_distribution(self) -> dict[str, int]:
        distribution = {status: 0 for status in TableStatus.ALL}
        rows = self._db.execute(
            select(Table.status, func.count(Table.id)).group_by(Table.status)
        ).all()
        for status, count in rows:
            distribution[status] = count
        return distribution

    def _top_tables(self) -> list[TopTable]:
        revenue = func.sum(_LINE_TOTAL).label("revenue")
        rows = self._db.execute(
            select(Table.id, Table.number, revenue)
            .join(Ronda, Ronda.table_id == Table.id)
            .join(Order, Order.ronda_id == Ronda.id)
            .join(OrderItem, OrderItem.order_id == Order.id)
            .group_by(Table.id, Table.number)
            .order_by(revenue.desc(), Table.number)
            .limit(Limits.TOP_TABLES)
        ).all()
        return [
            TopTable(table_id=row.id, number=row.number, revenue_cents=int(row.revenue))
            for row in rows
        ]
