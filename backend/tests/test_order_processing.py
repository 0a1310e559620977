"""
Tests for order submission and kitchen/bar progression.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from ronda_api.models import Order, OrderItem, Product, Ronda, Table
from ronda_api.services.domain import OrderService, RondaService, TableGroupService, ronda_service


class TestProcessOrder:
    """process_order: one transaction from validation to table status."""

    def test_first_order_opens_ronda_and_snapshots_prices(
        self, db_session, seed_table, place_order
    ):
        result = place_order(seed_table.id)

        assert result.ok, result.error
        assert result.data.order_total_cents == 250
        assert result.data.ronda_total_cents == 250
        assert result.data.table_status == "ESPERANDO"

        ronda = db_session.get(Ronda, result.data.ronda_id)
        assert ronda.is_active
        assert ronda.table_id == seed_table.id

        snapshots = sorted(
            db_session.scalars(select(OrderItem.price_cents_snapshot)).all()
        )
        assert snapshots == [50, 100]

        db_session.refresh(seed_table)
        assert seed_table.status == "ESPERANDO"

    def test_second_order_reuses_active_ronda(self, db_session, seed_table, place_order):
        first = place_order(seed_table.id).unwrap()
        second = place_order(seed_table.id).unwrap()

        assert second.ronda_id == first.ronda_id
        assert second.ronda_total_cents == 500
        assert db_session.scalar(select(func.count(Ronda.id))) == 1

    def test_price_change_does_not_alter_placed_orders(
        self, db_session, seed_table, seed_products, place_order
    ):
        beer, _ = seed_products
        placed = place_order(seed_table.id).unwrap()

        db_session.get(Product, beer.id).price_cents = 999
        db_session.commit()

        ronda = RondaService(db_session).get_active_ronda(seed_table.id).unwrap()
        assert ronda.id == placed.ronda_id
        assert ronda.total_cents == 250

    def test_unknown_product_rolls_back_everything(
        self, db_session, seed_table, seed_products, place_order
    ):
        beer, _ = seed_products

        result = place_order(
            seed_table.id,
            items=[{"product_id": beer.id, "quantity": 1}, {"product_id": 9999, "quantity": 1}],
        )

        assert not result.ok
        assert result.code == "INVALID_REFERENCE"
        assert "9999" in result.error
        assert db_session.scalar(select(func.count(Order.id))) == 0
        assert db_session.scalar(select(func.count(Ronda.id))) == 0
        db_session.refresh(seed_table)
        assert seed_table.status == "LIBRE"

    def test_inactive_product_rejected(self, db_session, seed_table, seed_products, place_order):
        _, empanada = seed_products
        db_session.get(Product, empanada.id).is_active = False
        db_session.commit()

        result = place_order(seed_table.id)

        assert result.code == "INVALID_REFERENCE"

    def test_empty_items_is_validation_error(self, db_session, seed_table, seed_mozo):
        result = OrderService(db_session).process_order(
            {"table_id": seed_table.id, "mozo_id": seed_mozo.id, "items": []}
        )

        assert result.code == "VALIDATION_ERROR"
        assert result.status_code == 400

    def test_quantity_must_be_positive(self, db_session, seed_table, seed_mozo, seed_products):
        beer, _ = seed_products
        result = OrderService(db_session).process_order(
            {
                "table_id": seed_table.id,
                "mozo_id": seed_mozo.id,
                "items": [{"product_id": beer.id, "quantity": 0}],
            }
        )

        assert result.code == "VALIDATION_ERROR"

    def test_unknown_table_and_mozo(self, db_session, seed_table, seed_mozo, seed_products):
        beer, _ = seed_products
        service = OrderService(db_session)
        items = [{"product_id": beer.id, "quantity": 1}]

        no_table = service.process_order({"table_id": 404, "mozo_id": seed_mozo.id, "items": items})
        no_mozo = service.process_order({"table_id": seed_table.id, "mozo_id": 404, "items": items})

        assert no_table.code == "NOT_FOUND"
        assert no_table.status_code == 404
        assert no_mozo.code == "NOT_FOUND"
        assert "Mozo" in no_mozo.error

    def test_grouped_table_orders_share_group_ronda(self, db_session, seed_tables, place_order):
        t1, t2 = seed_tables[0], seed_tables[1]
        group = TableGroupService(db_session).group_tables({"table_ids": [t1.id, t2.id]}).unwrap()

        first = place_order(t1.id).unwrap()
        second = place_order(t2.id).unwrap()

        assert first.ronda_id == second.ronda_id
        assert second.ronda_total_cents == 500
        ronda = db_session.get(Ronda, first.ronda_id)
        assert ronda.table_group_id == group.id
        statuses = {t.status for t in db_session.scalars(select(Table).where(Table.id.in_([t1.id, t2.id])))}
        assert statuses == {"ESPERANDO"}


class TestOrderStatus:
    """Orders advance one step at a time."""

    def test_forward_progression(self, db_session, seed_table, place_order):
        order_id = place_order(seed_table.id).unwrap().order_id
        service = OrderService(db_session)

        for status in ["PREPARANDO", "LISTO", "ENTREGADO"]:
            result = service.update_order_status(order_id, {"status": status})
            assert result.ok, result.error
            assert result.data.status == status

    def test_skipping_or_going_back_is_rejected(self, db_session, seed_table, place_order):
        order_id = place_order(seed_table.id).unwrap().order_id
        service = OrderService(db_session)

        skipped = service.update_order_status(order_id, {"status": "LISTO"})
        assert skipped.code == "INVALID_TRANSITION"

        service.update_order_status(order_id, {"status": "PREPARANDO"}).unwrap()
        backwards = service.update_order_status(order_id, {"status": "PENDIENTE"})
        assert backwards.code == "INVALID_TRANSITION"

    def test_unknown_order(self, db_session):
        result = OrderService(db_session).update_order_status(1, {"status": "PREPARANDO"})

        assert result.code == "NOT_FOUND"

    def test_active_orders_feed_filters_by_status(self, db_session, seed_tables, place_order):
        first = place_order(seed_tables[0].id).unwrap()
        place_order(seed_tables[1].id).unwrap()
        service = OrderService(db_session)
        service.update_order_status(first.order_id, {"status": "PREPARANDO"}).unwrap()

        everything = service.list_active_orders().unwrap()
        preparing = service.list_active_orders("PREPARANDO").unwrap()

        assert len(everything) == 2
        assert [o.id for o in preparing] == [first.order_id]
        assert preparing[0].total_cents == 250
        assert preparing[0].mozo_name == "Mozo Juan"


class TestSingleActiveRonda:
    """At most one active ronda per table (and per group), even when writers race."""

    def test_store_rejects_second_active_ronda_for_a_table(self, db_session, seed_table):
        db_session.add(Ronda(table_id=seed_table.id, is_active=False))
        db_session.add(Ronda(table_id=seed_table.id, is_active=True))
        db_session.commit()

        db_session.add(Ronda(table_id=seed_table.id, is_active=True))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

        assert db_session.scalar(select(func.count(Ronda.id))) == 2

    def test_store_rejects_second_active_ronda_for_a_group(self, db_session, seed_tables):
        t1, t2 = seed_tables[0], seed_tables[1]
        group = TableGroupService(db_session).group_tables({"table_ids": [t1.id, t2.id]}).unwrap()

        db_session.add(Ronda(table_id=t1.id, table_group_id=group.id, is_active=True))
        db_session.commit()

        db_session.add(Ronda(table_id=t2.id, table_group_id=group.id, is_active=True))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_order_that_loses_the_race_joins_the_winning_ronda(
        self, db_session, seed_table, place_order, monkeypatch
    ):
        original_find = ronda_service.find_active_ronda
        winners = []

        def find_while_another_writer_commits(db, table):
            # First lookup misses; a concurrent order opens the ronda right after
            if not winners:
                winner = Ronda(table_id=table.id, is_active=True)
                db.add(winner)
                db.flush()
                winners.append(winner.id)
                return None
            return original_find(db, table)

        monkeypatch.setattr(ronda_service, "find_active_ronda", find_while_another_writer_commits)

        placed = place_order(seed_table.id)

        assert placed.ok, placed.error
        assert placed.data.ronda_id == winners[0]
        active = db_session.scalars(
            select(Ronda).where(Ronda.table_id == seed_table.id, Ronda.is_active.is_(True))
        ).all()
        assert [r.id for r in active] == winners
        assert placed.data.ronda_total_cents == 250
