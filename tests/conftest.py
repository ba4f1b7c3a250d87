"""
Pytest fixtures for the warehouse kernel test suite.

Provides:
- A fresh SQLite database file per test (``tmp_path``)
- DAOs, services and a coordinator wired to that database
- A DeterministicClock fixed at 2024-06-15 12:00 UTC
- Structured-log capture
"""

import json
import logging
from datetime import UTC, date, datetime
from io import StringIO

import pytest

from warehouse_config import WarehouseSettings
from warehouse_kernel.dao import InventoryDAO, OrderDAO, ShipmentDAO
from warehouse_kernel.db.engine import Database
from warehouse_kernel.domain.clock import DeterministicClock
from warehouse_kernel.domain.entities import InventoryItem, Order, Shipment
from warehouse_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from warehouse_kernel.services import (
    InventoryService,
    OrderService,
    ShipmentService,
    WarehouseCoordinator,
)

TODAY = date(2024, 6, 15)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture warehouse_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, order_service):
            order_service.create_order(...)
            logs = captured_logs()
            assert any(r["message"] == "order_created" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("warehouse_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow_locks: mark test as potentially waiting for DB locks"
    )


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(datetime(2024, 6, 15, 12, 0, tzinfo=UTC))


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "warehouse.db")


@pytest.fixture
def db(db_path):
    """A migrated database file, disposed after the test."""
    database = Database(db_path)
    database.ensure_schema()
    yield database
    database.dispose()


@pytest.fixture
def inventory_dao(db) -> InventoryDAO:
    return InventoryDAO(db)


@pytest.fixture
def order_dao(db) -> OrderDAO:
    return OrderDAO(db)


@pytest.fixture
def shipment_dao(db) -> ShipmentDAO:
    return ShipmentDAO(db)


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def inventory_service(inventory_dao, deterministic_clock):
    service = InventoryService(inventory_dao, clock=deterministic_clock, worker_count=4)
    yield service
    service.shutdown()


@pytest.fixture
def order_service(order_dao, deterministic_clock):
    service = OrderService(order_dao, clock=deterministic_clock, worker_count=4)
    yield service
    service.shutdown()


@pytest.fixture
def shipment_service(shipment_dao, deterministic_clock):
    service = ShipmentService(shipment_dao, clock=deterministic_clock, worker_count=4)
    yield service
    service.shutdown()


@pytest.fixture
def settings(db_path) -> WarehouseSettings:
    return WarehouseSettings(database_path=db_path, worker_count=3)


@pytest.fixture
def coordinator(db, settings, deterministic_clock):
    coord = WarehouseCoordinator.from_database(db, settings, clock=deterministic_clock)
    yield coord
    coord.shutdown()


# =============================================================================
# Record factories
# =============================================================================


@pytest.fixture
def make_item(inventory_service):
    def _make(name="Widget", quantity=50, location="Aisle 1") -> InventoryItem:
        return inventory_service.create_item(InventoryItem(name, quantity, location))

    return _make


@pytest.fixture
def make_order(order_service):
    def _make(customer="Acme Corp", order_date=TODAY) -> Order:
        return order_service.create_order(Order(customer, order_date))

    return _make


@pytest.fixture
def make_shipment(shipment_service):
    def _make(destination="Berlin", shipment_date=TODAY) -> Shipment:
        return shipment_service.create_shipment(Shipment(destination, shipment_date))

    return _make
