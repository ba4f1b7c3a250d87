"""Tests for the Database gateway (warehouse_kernel/db/engine.py)."""

import pytest
from sqlalchemy import inspect, text

from warehouse_kernel.db.engine import Database
from warehouse_kernel.exceptions import (
    DatabaseConnectionError,
    TransactionError,
    ValidationError,
)


class TestSchema:
    def test_tables_created(self, db):
        assert {"inventory", "orders", "shipments"} <= set(inspect(db.engine).get_table_names())

    def test_column_names(self, db):
        columns = {c["name"] for c in inspect(db.engine).get_columns("inventory")}
        assert columns >= {"item_id", "item_name", "item_quantity", "item_location"}

    def test_indexes_created(self, db):
        names = {i["name"] for i in inspect(db.engine).get_indexes("orders")}
        assert {"idx_orders_customer", "idx_orders_status", "idx_orders_date"} <= names

    def test_ensure_schema_is_idempotent(self, db):
        db.ensure_schema()
        db.ensure_schema()
        assert db.get_stats().total_records == 0

    def test_unopenable_path(self, tmp_path):
        database = Database(str(tmp_path / "missing" / "dir" / "warehouse.db"))
        with pytest.raises(DatabaseConnectionError, match="Cannot open database"):
            database.ensure_schema()
        assert not database.test_connection()
        database.dispose()


class TestPragmas:
    def test_foreign_keys_and_wal(self, db):
        with db.engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar_one() == 1
            assert conn.execute(text("PRAGMA journal_mode")).scalar_one().lower() == "wal"
            assert conn.execute(text("PRAGMA busy_timeout")).scalar_one() == 5000


class TestTransactions:
    def test_commit(self, db):
        db.run_transaction(
            lambda s: s.execute(text(
                "INSERT INTO inventory (item_name, item_quantity, item_location) "
                "VALUES ('Bolt', 1, 'Bin')"
            ))
        )
        assert db.get_stats().inventory_count == 1

    def test_rollback_wraps_unexpected_errors(self, db):
        def work(session):
            session.execute(text(
                "INSERT INTO inventory (item_name, item_quantity, item_location) "
                "VALUES ('Bolt', 1, 'Bin')"
            ))
            raise RuntimeError("disk on fire")

        with pytest.raises(TransactionError, match="Insert bolt failed and was rolled back") as exc_info:
            db.run_transaction(work, operation="insert bolt")
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert db.get_stats().inventory_count == 0

    def test_domain_errors_pass_through(self, db):
        def work(session):
            raise ValidationError("name", "Name cannot be empty")

        with pytest.raises(ValidationError):
            db.run_transaction(work)

    def test_check_constraint_enforced(self, db):
        with pytest.raises(TransactionError):
            db.run_transaction(
                lambda s: s.execute(text(
                    "INSERT INTO inventory (item_name, item_quantity, item_location) "
                    "VALUES ('Bolt', -1, 'Bin')"
                ))
            )


class TestDiagnostics:
    def test_connection_ok(self, db):
        assert db.test_connection()

    def test_memory_database(self):
        database = Database(":memory:")
        assert database.is_memory
        database.ensure_schema()
        assert database.test_connection()
        database.dispose()
