"""
Tests for grouping tables into a single billing unit.
"""

from ronda_api.models import Table, TableGroup
from ronda_api.services.domain import RondaService, TableGroupService


class TestGroupTables:

    def test_group_marks_tables_occupied_with_default_name(self, db_session, seed_tables):
        t3, t4 = seed_tables[2], seed_tables[3]

        result = TableGroupService(db_session).group_tables({"table_ids": [t4.id, t3.id]})

        assert result.ok, result.error
        assert result.data.name == "Mesa 3+4"
        assert result.data.is_active
        assert [t.number for t in result.data.tables] == [3, 4]
        for table in result.data.tables:
            assert table.status == "OCUPADA"
            assert table.table_group_id == result.data.id
            assert table.group_name == "Mesa 3+4"

    def test_custom_name(self, db_session, seed_tables):
        result = TableGroupService(db_session).group_tables(
            {"table_ids": [seed_tables[0].id, seed_tables[1].id], "name": "Terraza larga"}
        )

        assert result.data.name == "Terraza larga"

    def test_needs_two_distinct_tables(self, db_session, seed_tables):
        service = TableGroupService(db_session)

        single = service.group_tables({"table_ids": [seed_tables[0].id]})
        repeated = service.group_tables({"table_ids": [seed_tables[0].id, seed_tables[0].id]})

        assert single.code == "VALIDATION_ERROR"
        assert repeated.code == "VALIDATION_ERROR"

    def test_missing_table(self, db_session, seed_tables):
        result = TableGroupService(db_session).group_tables(
            {"table_ids": [seed_tables[0].id, 999]}
        )

        assert result.code == "NOT_FOUND"

    def test_table_already_grouped(self, db_session, seed_tables):
        service = TableGroupService(db_session)
        service.group_tables({"table_ids": [seed_tables[0].id, seed_tables[1].id]}).unwrap()

        result = service.group_tables({"table_ids": [seed_tables[1].id, seed_tables[2].id]})

        assert result.code == "CONFLICT"
        assert db_session.get(Table, seed_tables[2].id).table_group_id is None

    def test_table_with_active_ronda(self, db_session, seed_tables, place_order):
        place_order(seed_tables[0].id).unwrap()

        result = TableGroupService(db_session).group_tables(
            {"table_ids": [seed_tables[0].id, seed_tables[1].id]}
        )

        assert result.code == "CONFLICT"
        assert result.status_code == 409


class TestUngroup:

    def test_ungroup_frees_members(self, db_session, seed_tables):
        service = TableGroupService(db_session)
        group = service.group_tables(
            {"table_ids": [seed_tables[0].id, seed_tables[1].id]}
        ).unwrap()

        result = service.ungroup(group.id)

        assert result.ok, result.error
        assert not result.data.is_active
        assert {t.status for t in result.data.tables} == {"LIBRE"}
        assert all(t.table_group_id is None for t in result.data.tables)
        assert not db_session.get(TableGroup, group.id).is_active
        assert service.list_active_groups().unwrap() == []

    def test_ungroup_blocked_by_group_ronda(self, db_session, seed_tables, place_order):
        service = TableGroupService(db_session)
        group = service.group_tables(
            {"table_ids": [seed_tables[0].id, seed_tables[1].id]}
        ).unwrap()
        place_order(seed_tables[1].id).unwrap()

        blocked = service.ungroup(group.id)

        assert blocked.code == "CONFLICT"

        RondaService(db_session).close_table(seed_tables[0].id, {"payment_method": "EFECTIVO"}).unwrap()
        assert service.ungroup(group.id).ok

    def test_ungroup_twice_is_not_found(self, db_session, seed_tables):
        service = TableGroupService(db_session)
        group = service.group_tables(
            {"table_ids": [seed_tables[0].id, seed_tables[1].id]}
        ).unwrap()
        service.ungroup(group.id).unwrap()

        assert service.ungroup(group.id).code == "NOT_FOUND"
        assert service.ungroup(12345).code == "NOT_FOUND"

    def test_list_active_groups(self, db_session, seed_tables):
        service = TableGroupService(db_session)
        service.group_tables({"table_ids": [seed_tables[0].id, seed_tables[1].id]}).unwrap()
        service.group_tables({"table_ids": [seed_tables[2].id, seed_tables[3].id]}).unwrap()

        groups = service.list_active_groups().unwrap()

        assert [g.name for g in groups] == ["Mesa 1+2", "Mesa 3+4"]
