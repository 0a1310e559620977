"""
Tests for the table status state machine.
"""

import pytest

from ronda_api.models import Table
from ronda_api.services.domain.table_state import TableStateMachine, TableTrigger
from shared.utils.exceptions import ConflictError, ValidationError


@pytest.fixture
def machine():
    return TableStateMachine("ESPERANDO")


class TestAutomaticTransitions:
    """Triggers fired by lifecycle operations."""

    def test_reservation_only_reserves_free_tables(self, machine):
        assert machine.next_status("LIBRE", TableTrigger.RESERVATION_CREATED) == "RESERVADA"
        assert machine.next_status("OCUPADA", TableTrigger.RESERVATION_CREATED) == "OCUPADA"

    def test_order_placed_uses_configured_status(self, machine):
        for current in ["LIBRE", "RESERVADA", "OCUPADA", "PAGANDO"]:
            assert machine.next_status(current, TableTrigger.ORDER_PLACED) == "ESPERANDO"

    def test_order_placed_can_be_configured_to_pidiendo(self):
        machine = TableStateMachine("PIDIENDO")
        assert machine.next_status("LIBRE", TableTrigger.ORDER_PLACED) == "PIDIENDO"

    def test_unsupported_order_placed_status_rejected(self):
        with pytest.raises(ValueError):
            TableStateMachine("OCUPADA")

    def test_clearing_reservations_frees_only_reserved_tables(self, machine):
        assert machine.next_status("RESERVADA", TableTrigger.RESERVATIONS_CLEARED) == "LIBRE"
        assert machine.next_status("ESPERANDO", TableTrigger.RESERVATIONS_CLEARED) == "ESPERANDO"

    def test_seating_grouping_and_closing(self, machine):
        assert machine.next_status("RESERVADA", TableTrigger.CUSTOMER_SEATED) == "OCUPADA"
        assert machine.next_status("LIBRE", TableTrigger.TABLES_GROUPED) == "OCUPADA"
        assert machine.next_status("PAGANDO", TableTrigger.TABLE_CLOSED) == "LIBRE"
        assert machine.next_status("OCUPADA", TableTrigger.GROUP_DISSOLVED) == "LIBRE"


class TestManualOverride:
    """MANUAL trigger must stay consistent with the table's ronda."""

    def test_serving_status_with_active_ronda(self, machine):
        assert (
            machine.next_status(
                "ESPERANDO", TableTrigger.MANUAL, requested="PAGANDO", has_active_ronda=True
            )
            == "PAGANDO"
        )

    def test_unknown_status_rejected(self, machine):
        with pytest.raises(ValidationError):
            machine.next_status("LIBRE", TableTrigger.MANUAL, requested="CERRADA")

    def test_idle_status_rejected_while_ronda_open(self, machine):
        with pytest.raises(ConflictError):
            machine.next_status(
                "ESPERANDO", TableTrigger.MANUAL, requested="LIBRE", has_active_ronda=True
            )

    def test_serving_status_rejected_without_ronda(self, machine):
        with pytest.raises(ConflictError):
            machine.next_status("LIBRE", TableTrigger.MANUAL, requested="PAGANDO")

    def test_ocupada_allowed_either_way(self, machine):
        assert machine.next_status("LIBRE", TableTrigger.MANUAL, requested="OCUPADA") == "OCUPADA"
        assert (
            machine.next_status(
                "ESPERANDO", TableTrigger.MANUAL, requested="OCUPADA", has_active_ronda=True
            )
            == "OCUPADA"
        )


def test_fire_updates_table_in_place(machine):
    table = Table(id=1, number=7, capacity=4, status="LIBRE")

    new_status = machine.fire(table, TableTrigger.ORDER_PLACED)

    assert new_status == "ESPERANDO"
    assert table.status == "ESPERANDO"
