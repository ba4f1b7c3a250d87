"""
Injection resistance tests.

Hostile text must be stored and searched literally: every statement is a
bound-parameter SQLAlchemy construct, and LIKE wildcards in search input
are escaped.
"""

import pytest
from sqlalchemy import inspect

from warehouse_kernel.domain.entities import InventoryItem, Order

PAYLOADS = [
    "Robert'); DROP TABLE inventory;--",
    "x' OR '1'='1",
    "1; DELETE FROM orders",
    "%",
    "_",
    "\\",
]


class TestStoredLiterally:
    @pytest.mark.parametrize("payload", PAYLOADS)
    def test_item_name_round_trips(self, inventory_service, payload):
        item = inventory_service.create_item(InventoryItem(payload, 1, "Bin"))
        assert inventory_service.find_item(item.id).name == payload

    def test_tables_survive(self, db, order_service):
        order_service.create_order(Order("Robert'); DROP TABLE orders;--"))
        assert {"inventory", "orders", "shipments"} <= set(inspect(db.engine).get_table_names())
        assert len(order_service.list_orders()) == 1


class TestSearchIsLiteral:
    def test_quote_in_search(self, inventory_service, make_item):
        make_item("Bolt")
        assert inventory_service.search_by_name("' OR '1'='1") == []

    def test_percent_matches_only_percent(self, inventory_service, make_item):
        make_item("Bolt")
        make_item("100% cotton rag")
        assert [i.name for i in inventory_service.search_by_name("%")] == ["100% cotton rag"]

    def test_underscore_matches_only_underscore(self, order_service):
        order_service.create_order(Order("ab"))
        order_service.create_order(Order("a_b"))
        assert [o.customer_name for o in order_service.search_by_customer("a_b")] == ["a_b"]
