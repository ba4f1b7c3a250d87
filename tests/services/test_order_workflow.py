"""Tests for OrderService: CRUD, queries and the order workflow."""

from datetime import date, timedelta

import pytest

from warehouse_kernel.domain.entities import Order
from warehouse_kernel.domain.status import OrderStatus
from warehouse_kernel.exceptions import (
    DeleteNotAllowedError,
    EntityNotFoundError,
    InvalidStatusTransitionError,
    ValidationError,
)

TODAY = date(2024, 6, 15)


def _deliver(order_service, order_id):
    for step in ("confirm_order", "process_order", "ship_order", "deliver_order"):
        getattr(order_service, step)(order_id)


class TestCreate:
    def test_defaults_to_pending_today(self, order_service):
        order = order_service.create_order(Order("Acme"))
        assert order.status is OrderStatus.PENDING
        assert order.order_date == TODAY

    def test_future_date_rejected(self, order_service):
        with pytest.raises(ValidationError, match="Order date cannot be in the future"):
            order_service.create_order(Order("Acme", TODAY + timedelta(days=1)))

    def test_clock_decides_today(self, order_service, deterministic_clock):
        deterministic_clock.advance_days(1)
        order = order_service.create_order(Order("Acme", TODAY + timedelta(days=1)))
        assert order.order_date == TODAY + timedelta(days=1)

    def test_null_rejected(self, order_service):
        with pytest.raises(ValidationError, match="Order cannot be null"):
            order_service.create_order(None)


class TestWorkflow:
    def test_happy_path(self, order_service, make_order):
        order = make_order()
        assert order_service.confirm_order(order.id).status is OrderStatus.CONFIRMED
        assert order_service.process_order(order.id).status is OrderStatus.PROCESSING
        assert order_service.ship_order(order.id).status is OrderStatus.SHIPPED
        assert order_service.deliver_order(order.id).status is OrderStatus.DELIVERED

    def test_skip_is_rejected(self, order_service, make_order):
        order = make_order()
        with pytest.raises(InvalidStatusTransitionError, match="from Pending to Shipped"):
            order_service.ship_order(order.id)
        assert order_service.find_order(order.id).status is OrderStatus.PENDING

    def test_confirmed_order_cannot_ship(self, order_service, make_order):
        order = make_order()
        assert order.status is OrderStatus.PENDING
        assert order_service.confirm_order(order.id).status is OrderStatus.CONFIRMED
        with pytest.raises(InvalidStatusTransitionError, match="from Confirmed to Shipped"):
            order_service.ship_order(order.id)
        assert order_service.find_order(order.id).status is OrderStatus.CONFIRMED

    def test_cancel_after_processing_rejected(self, order_service, make_order):
        order = make_order()
        order_service.confirm_order(order.id)
        order_service.process_order(order.id)
        with pytest.raises(InvalidStatusTransitionError):
            order_service.cancel_order(order.id)

    def test_terminal_is_final(self, order_service, make_order):
        order = make_order()
        order_service.cancel_order(order.id)
        for target in OrderStatus:
            with pytest.raises(InvalidStatusTransitionError):
                order_service.update_status(order.id, target)

    def test_update_status_accepts_display_string(self, order_service, make_order):
        order = make_order()
        assert order_service.update_status(order.id, "confirmed").status is OrderStatus.CONFIRMED

    def test_update_status_unknown_string(self, order_service, make_order):
        order = make_order()
        with pytest.raises(ValidationError):
            order_service.update_status(order.id, "Teleported")

    def test_missing_order(self, order_service):
        with pytest.raises(EntityNotFoundError, match="Order not found with ID: 999"):
            order_service.confirm_order(999)

    def test_status_change_logged_with_context(self, order_service, make_order, captured_logs):
        order = make_order()
        order_service.confirm_order(order.id)
        changed = [r for r in captured_logs() if r["message"] == "order_status_changed"]
        assert changed[0]["from_status"] == "Pending"
        assert changed[0]["to_status"] == "Confirmed"
        assert changed[0]["entity_id"] == str(order.id)


class TestUpdate:
    def test_fields_replaced(self, order_service, make_order):
        order = make_order()
        order.customer_name = "Acme Ltd"
        order.order_date = TODAY - timedelta(days=3)
        assert order_service.update_order(order)
        stored = order_service.find_order(order.id)
        assert stored.customer_name == "Acme Ltd"
        assert stored.order_date == TODAY - timedelta(days=3)

    def test_unchanged_update_round_trips(self, order_service, make_order):
        order = make_order("Acme", TODAY - timedelta(days=2))
        assert order_service.update_order(order)
        stored = order_service.find_order(order.id)
        assert (stored.id, stored.customer_name, stored.order_date, stored.status) == (
            order.id, "Acme", TODAY - timedelta(days=2), OrderStatus.PENDING,
        )
        assert stored.created_at == order.created_at

    def test_legal_status_change(self, order_service, make_order):
        order = make_order()
        order.status = OrderStatus.CONFIRMED
        assert order_service.update_order(order)

    def test_illegal_status_change(self, order_service, make_order):
        order = make_order()
        order.status = OrderStatus.DELIVERED
        with pytest.raises(InvalidStatusTransitionError):
            order_service.update_order(order)
        assert order_service.find_order(order.id).status is OrderStatus.PENDING

    def test_missing(self, order_service):
        assert not order_service.update_order(Order("Ghost", TODAY, id=404))


class TestDelete:
    def test_delete_pending(self, order_service, make_order):
        order = make_order()
        assert order_service.delete_order(order.id)
        assert order_service.find_order(order.id) is None

    def test_delete_missing(self, order_service):
        assert not order_service.delete_order(404)

    def test_delivered_cannot_be_deleted(self, order_service, make_order):
        order = make_order()
        _deliver(order_service, order.id)
        with pytest.raises(DeleteNotAllowedError, match="Cannot delete delivered orders"):
            order_service.delete_order(order.id)

    def test_cancelled_can_be_deleted(self, order_service, make_order):
        order = make_order()
        order_service.cancel_order(order.id)
        assert order_service.delete_order(order.id)


class TestQueries:
    @pytest.fixture
    def seeded(self, make_order, order_service):
        a = make_order("Acme", TODAY - timedelta(days=20))
        b = make_order("Globex", TODAY - timedelta(days=3))
        c = make_order("acme retail", TODAY)
        order_service.confirm_order(b.id)
        return a, b, c

    def test_list_newest_first(self, order_service, seeded):
        a, b, c = seeded
        assert [o.id for o in order_service.list_orders()] == [c.id, b.id, a.id]

    def test_search_by_customer(self, order_service, seeded):
        assert len(order_service.search_by_customer("acme")) == 2
        assert len(order_service.search_by_customer("")) == 3

    def test_by_status(self, order_service, seeded):
        assert [o.customer_name for o in order_service.orders_by_status("Confirmed")] == ["Globex"]
        assert len(order_service.pending_orders()) == 2

    def test_date_range(self, order_service, seeded):
        found = order_service.orders_by_date_range(TODAY - timedelta(days=5), TODAY)
        assert {o.customer_name for o in found} == {"Globex", "acme retail"}

    def test_inverted_date_range(self, order_service):
        with pytest.raises(ValidationError, match="Start date cannot be after end date"):
            order_service.orders_by_date_range(TODAY, TODAY - timedelta(days=1))

    def test_recent(self, order_service, seeded):
        assert len(order_service.recent_orders()) == 2
        assert len(order_service.recent_orders(days=30)) == 3
        assert len(order_service.recent_orders(days=30, limit=1)) == 1

    def test_recent_rejects_bad_arguments(self, order_service):
        with pytest.raises(ValidationError):
            order_service.recent_orders(days=-1)
        with pytest.raises(ValidationError):
            order_service.recent_orders(limit=0)

    @pytest.mark.parametrize("days", [10**6, 10**9, 10**12])
    def test_recent_window_beyond_calendar(self, order_service, days):
        with pytest.raises(ValidationError, match="Days is out of range"):
            order_service.recent_orders(days=days)

    def test_stats(self, order_service, seeded):
        stats = order_service.get_stats()
        assert stats.total_orders == 3
        assert stats.status_counts[OrderStatus.PENDING] == 2
        assert stats.status_counts[OrderStatus.CONFIRMED] == 1
        assert stats.status_counts[OrderStatus.SHIPPED] == 0
        assert len(stats.recent_orders) == 2


class TestBatch:
    def test_batch_update(self, order_service, make_order):
        a, b = make_order("A"), make_order("B")
        a.status = OrderStatus.CONFIRMED
        b.customer_name = "B2"
        assert order_service.batch_update([a, b])
        assert order_service.find_order(a.id).status is OrderStatus.CONFIRMED

    def test_batch_illegal_transition_writes_nothing(self, order_service, make_order):
        a, b = make_order("A"), make_order("B")
        a.customer_name = "A2"
        b.status = OrderStatus.SHIPPED
        with pytest.raises(InvalidStatusTransitionError):
            order_service.batch_update([a, b])
        assert order_service.find_order(a.id).customer_name == "A"


class TestAsync:
    def test_workflow_async(self, order_service, make_order):
        order = make_order()
        confirmed = order_service.confirm_order_async(order.id).result(timeout=5)
        assert confirmed.status is OrderStatus.CONFIRMED

    def test_rejection_async(self, order_service, make_order):
        order = make_order()
        with pytest.raises(InvalidStatusTransitionError):
            order_service.deliver_order_async(order.id).result(timeout=5)

    def test_stats_async(self, order_service, make_order):
        make_order()
        assert order_service.get_stats_async().result(timeout=5).total_orders == 1
