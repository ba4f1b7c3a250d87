"""Tests for OrderDAO."""

from datetime import date, timedelta

import pytest

from warehouse_kernel.domain.entities import Order
from warehouse_kernel.domain.status import OrderStatus

TODAY = date(2024, 6, 15)


@pytest.fixture
def orders(order_dao):
    return [
        order_dao.create(Order("Acme", TODAY - timedelta(days=10))),
        order_dao.create(Order("Globex", TODAY - timedelta(days=2), OrderStatus.CONFIRMED)),
        order_dao.create(Order("acme west", TODAY, OrderStatus.CONFIRMED)),
        order_dao.create(Order("Initech", TODAY)),
    ]


class TestOrdering:
    def test_newest_first_then_highest_id(self, order_dao, orders):
        found = order_dao.find_all()
        assert [o.id for o in found] == [orders[3].id, orders[2].id, orders[1].id, orders[0].id]


class TestQueries:
    def test_status_round_trips_as_enum(self, order_dao, orders):
        assert order_dao.find_by_id(orders[1].id).status is OrderStatus.CONFIRMED

    def test_find_by_status(self, order_dao, orders):
        assert {o.customer_name for o in order_dao.find_by_status(OrderStatus.CONFIRMED)} == {
            "Globex", "acme west",
        }

    def test_find_by_customer(self, order_dao, orders):
        assert len(order_dao.find_by_customer("ACME")) == 2

    def test_date_range_inclusive(self, order_dao, orders):
        found = order_dao.find_by_date_range(TODAY - timedelta(days=10), TODAY - timedelta(days=2))
        assert {o.customer_name for o in found} == {"Acme", "Globex"}

    def test_recent_is_limited(self, order_dao, orders):
        found = order_dao.find_recent(TODAY - timedelta(days=7), limit=2)
        assert [o.id for o in found] == [orders[3].id, orders[2].id]

    def test_status_counts_zero_filled(self, order_dao, orders):
        counts = order_dao.status_counts()
        assert set(counts) == set(OrderStatus)
        assert counts[OrderStatus.PENDING] == 2
        assert counts[OrderStatus.CONFIRMED] == 2
        assert counts[OrderStatus.DELIVERED] == 0


class TestConditionalWrites:
    def test_update_status_when_expected_matches(self, order_dao, orders):
        assert order_dao.update_status(
            orders[0].id, OrderStatus.CONFIRMED, expected=OrderStatus.PENDING,
        )
        assert order_dao.find_by_id(orders[0].id).status is OrderStatus.CONFIRMED

    def test_update_status_when_expected_stale(self, order_dao, orders):
        assert not order_dao.update_status(
            orders[1].id, OrderStatus.PROCESSING, expected=OrderStatus.PENDING,
        )
        assert order_dao.find_by_id(orders[1].id).status is OrderStatus.CONFIRMED

    def test_conditional_delete(self, order_dao, orders):
        assert not order_dao.delete(orders[1].id, expected=OrderStatus.PENDING)
        assert order_dao.delete(orders[1].id, expected=OrderStatus.CONFIRMED)

    def test_conditional_update(self, order_dao, orders):
        order = orders[0]
        order.customer_name = "Acme Ltd"
        assert not order_dao.update(order, expected=OrderStatus.SHIPPED)
        assert order_dao.update(order, expected=OrderStatus.PENDING)
        assert order_dao.find_by_id(order.id).customer_name == "Acme Ltd"
