"""Tests for InventoryService."""

import pytest

from warehouse_kernel.domain.entities import InventoryItem
from warehouse_kernel.domain.validation import MAX_QUANTITY
from warehouse_kernel.exceptions import (
    DuplicateError,
    EntityNotFoundError,
    InsufficientStockError,
    ServiceError,
    TransactionError,
    ValidationError,
)


class TestCreate:
    def test_create(self, inventory_service):
        item = inventory_service.create_item(InventoryItem(" Bolt ", 5, "Bin 1"))
        assert item.id is not None
        assert item.name == "Bolt"

    def test_invalid_rejected_before_storage(self, inventory_service):
        with pytest.raises(ValidationError):
            inventory_service.create_item(InventoryItem("", 5, "Bin 1"))
        assert inventory_service.list_items() == []

    def test_none_rejected(self, inventory_service):
        with pytest.raises(ValidationError):
            inventory_service.create_item(None)

    def test_duplicate(self, inventory_service, make_item):
        make_item("Bolt")
        with pytest.raises(DuplicateError):
            inventory_service.create_item(InventoryItem("Bolt", 1, "Bin 2"))

    def test_logged(self, inventory_service, captured_logs):
        inventory_service.create_item(InventoryItem("Bolt", 5, "Bin 1"))
        created = [r for r in captured_logs() if r["message"] == "inventory_item_created"]
        assert created and created[0]["item_name"] == "Bolt"


class TestUpdateDelete:
    def test_update(self, inventory_service, make_item):
        item = make_item()
        item.location = "Dock 3"
        assert inventory_service.update_item(item)
        assert inventory_service.find_item(item.id).location == "Dock 3"

    def test_unchanged_update_round_trips(self, inventory_service, make_item):
        item = make_item("Bolt", 5, "Bin 1")
        assert inventory_service.update_item(item)
        stored = inventory_service.find_item(item.id)
        assert (stored.id, stored.name, stored.quantity, stored.location) == (
            item.id, "Bolt", 5, "Bin 1",
        )
        assert stored.created_at == item.created_at

    def test_update_missing_returns_false(self, inventory_service):
        assert not inventory_service.update_item(InventoryItem("Ghost", 1, "Bin", id=404))

    def test_update_without_id(self, inventory_service):
        with pytest.raises(ValidationError):
            inventory_service.update_item(InventoryItem("Bolt", 1, "Bin"))

    def test_delete(self, inventory_service, make_item):
        item = make_item()
        assert inventory_service.delete_item(item.id)
        assert not inventory_service.delete_item(item.id)

    def test_find_missing_is_none(self, inventory_service):
        assert inventory_service.find_item(12345) is None

    @pytest.mark.parametrize("bad_id", [0, -3])
    def test_invalid_id(self, inventory_service, bad_id):
        with pytest.raises(ValidationError):
            inventory_service.find_item(bad_id)

    def test_batch_update(self, inventory_service, make_item):
        a, b = make_item("A", 1), make_item("B", 2)
        a.quantity, b.quantity = 10, 20
        assert inventory_service.batch_update([a, b])
        assert [i.quantity for i in inventory_service.list_items()] == [10, 20]

    def test_batch_update_validates_everything_first(self, inventory_service, make_item):
        a = make_item("A", 1)
        a.quantity = 10
        with pytest.raises(ValidationError):
            inventory_service.batch_update([a, InventoryItem("", 1, "Bin", id=a.id)])
        assert inventory_service.find_item(a.id).quantity == 1


class TestSearch:
    def test_blank_search_lists_all(self, inventory_service, make_item):
        make_item("A")
        make_item("B")
        assert len(inventory_service.search_by_name("   ")) == 2
        assert len(inventory_service.search_by_location("")) == 2

    def test_search_folds_accented_case(self, inventory_service, make_item):
        make_item("Émile Crate")
        make_item("ÖL Drum")
        assert [i.name for i in inventory_service.search_by_name("émile")] == ["Émile Crate"]
        assert [i.name for i in inventory_service.search_by_name("öl")] == ["ÖL Drum"]

    def test_search_by_name(self, inventory_service, make_item):
        make_item("Red Paint")
        make_item("Blue Paint")
        make_item("Brush")
        assert len(inventory_service.search_by_name("paint")) == 2

    def test_low_stock_default_threshold(self, inventory_service, make_item):
        make_item("A", 10)
        make_item("B", 11)
        assert [i.name for i in inventory_service.low_stock_items()] == ["A"]

    def test_low_stock_custom_threshold(self, inventory_service, make_item):
        make_item("A", 10)
        make_item("B", 11)
        assert len(inventory_service.low_stock_items(20)) == 2

    def test_low_stock_negative_threshold(self, inventory_service):
        with pytest.raises(ValidationError):
            inventory_service.low_stock_items(-1)


class TestStock:
    def test_widget_scenario(self, inventory_service):
        widget = inventory_service.create_item(InventoryItem("Widget", 5, "A1"))
        with pytest.raises(InsufficientStockError):
            inventory_service.remove_stock(widget.id, 10)
        assert inventory_service.find_item(widget.id).quantity == 5
        assert inventory_service.add_stock(widget.id, 3).quantity == 8

    def test_add_beyond_ceiling_rejected(self, inventory_service, make_item):
        item = make_item(quantity=MAX_QUANTITY)
        with pytest.raises(ValidationError, match=f"cannot exceed {MAX_QUANTITY}"):
            inventory_service.add_stock(item.id, 1)
        stored = inventory_service.find_item(item.id)
        assert stored.quantity == MAX_QUANTITY
        assert type(stored.quantity) is int

    def test_ceiling_is_reachable(self, inventory_service, make_item):
        item = make_item(quantity=MAX_QUANTITY - 2)
        assert inventory_service.add_stock(item.id, 2).quantity == MAX_QUANTITY

    @pytest.mark.parametrize("quantity", [MAX_QUANTITY + 1, 2**63 - 1])
    def test_quantity_above_ceiling_rejected(self, inventory_service, make_item, quantity):
        with pytest.raises(ValidationError, match="Quantity cannot exceed"):
            inventory_service.create_item(InventoryItem("Big", quantity, "A1"))
        item = make_item()
        with pytest.raises(ValidationError):
            inventory_service.set_quantity(item.id, quantity)
        with pytest.raises(ValidationError):
            inventory_service.add_stock(item.id, quantity)
        assert inventory_service.find_item(item.id).quantity == 50

    def test_huge_removal_is_insufficient_stock(self, inventory_service, make_item):
        item = make_item(quantity=4)
        with pytest.raises(InsufficientStockError):
            inventory_service.remove_stock(item.id, 2**63)
        assert inventory_service.find_item(item.id).quantity == 4

    def test_add_and_remove(self, inventory_service, make_item):
        item = make_item(quantity=10)
        assert inventory_service.add_stock(item.id, 5).quantity == 15
        assert inventory_service.remove_stock(item.id, 15).quantity == 0

    def test_set_quantity(self, inventory_service, make_item):
        item = make_item(quantity=10)
        assert inventory_service.set_quantity(item.id, 0).quantity == 0

    def test_remove_too_much(self, inventory_service, make_item):
        item = make_item(quantity=3)
        with pytest.raises(InsufficientStockError) as exc_info:
            inventory_service.remove_stock(item.id, 5)
        assert exc_info.value.available == 3
        assert exc_info.value.requested == 5
        assert inventory_service.find_item(item.id).quantity == 3

    @pytest.mark.parametrize("op", ["add_stock", "remove_stock", "set_quantity"])
    def test_missing_item(self, inventory_service, op):
        with pytest.raises(EntityNotFoundError, match="Inventory item not found with ID: 77"):
            getattr(inventory_service, op)(77, 1)

    @pytest.mark.parametrize("amount", [0, -1])
    def test_non_positive_movement(self, inventory_service, make_item, amount):
        item = make_item()
        with pytest.raises(ValidationError):
            inventory_service.add_stock(item.id, amount)

    def test_negative_set_quantity(self, inventory_service, make_item):
        item = make_item()
        with pytest.raises(ValidationError):
            inventory_service.set_quantity(item.id, -1)


class TestStats:
    def test_stats(self, inventory_service, make_item):
        make_item("A", 2)
        make_item("B", 40)
        stats = inventory_service.get_stats()
        assert stats.total_items == 2
        assert stats.total_quantity == 42
        assert [i.name for i in stats.low_stock_items] == ["A"]


class TestStorageFailures:
    def test_storage_error_wrapped(self, inventory_service, inventory_dao, monkeypatch):
        def broken():
            raise TransactionError("list inventory_item")

        monkeypatch.setattr(inventory_dao, "find_all", broken)
        with pytest.raises(ServiceError, match="Failed to list inventory items") as exc_info:
            inventory_service.list_items()
        assert isinstance(exc_info.value.__cause__, TransactionError)


class TestAsync:
    def test_async_matches_sync(self, inventory_service):
        created = inventory_service.create_item_async(InventoryItem("Bolt", 5, "Bin")).result(timeout=5)
        assert inventory_service.find_item_async(created.id).result(timeout=5) == created

    def test_async_failure_rejects_future(self, inventory_service, make_item):
        item = make_item(quantity=1)
        future = inventory_service.remove_stock_async(item.id, 2)
        with pytest.raises(InsufficientStockError):
            future.result(timeout=5)

    def test_async_runs_on_service_pool(self, inventory_service):
        import threading

        name = inventory_service.submit(lambda: threading.current_thread().name).result(timeout=5)
        assert name.startswith("inventory_item-service")

    def test_context_propagates(self, inventory_service):
        from warehouse_kernel.logging_config import LogContext

        with LogContext.bind(correlation_id="req-1"):
            ctx = inventory_service.submit(LogContext.get_all).result(timeout=5)
        assert ctx["correlation_id"] == "req-1"

    def test_worker_count_must_be_positive(self, inventory_dao):
        from warehouse_kernel.services import InventoryService

        with pytest.raises(ValueError):
            InventoryService(inventory_dao, worker_count=0)
