"""
Module: warehouse_kernel.domain.entities
Responsibility: The three warehouse records (inventory items, customer
    orders, outbound shipments) with field-level validation and the small set
    of in-memory business predicates, plus the frozen statistics DTOs the
    services return.
Architecture position: Kernel > Domain.  Pure, zero I/O.  Services and DAOs
    exchange these records; ORM models never leave the DAO layer.

Invariants enforced:
    - Text fields are trimmed on construction.
    - Quantity is an int in [0, MAX_QUANTITY] (bools rejected) and stays in
      that range through add_stock / remove_stock.
    - Order dates are not in the future; shipment dates are at most
      ``max_lead_days`` ahead of today.

Failure modes:
    - ValidationError(field, message) from ``validate()`` and the mutators.
    - InsufficientStockError from ``remove_stock``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from warehouse_kernel.domain import status as transitions
from warehouse_kernel.domain.status import OrderStatus, ShipmentStatus
from warehouse_kernel.domain.validation import (
    clean_text,
    require_date,
    require_positive_int,
    require_quantity,
    require_text,
)
from warehouse_kernel.exceptions import InsufficientStockError, ValidationError

DEFAULT_LOW_STOCK_THRESHOLD = 10
DEFAULT_MAX_LEAD_DAYS = 7
DEFAULT_DELAYED_DAYS = 7


@dataclass
class InventoryItem:
    """A stocked item at a warehouse location."""

    name: str
    quantity: int
    location: str
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.name = clean_text(self.name)
        self.location = clean_text(self.location)

    def validate(self) -> None:
        """Raise ValidationError on the first invalid field."""
        require_text(self.name, "name")
        require_quantity(self.quantity)
        require_text(self.location, "location")

    def set_quantity(self, quantity: int) -> None:
        self.quantity = require_quantity(quantity)

    def add_stock(self, quantity: int) -> None:
        require_positive_int(quantity, "quantity")
        self.quantity = require_quantity(self.quantity + quantity)

    def remove_stock(self, quantity: int) -> None:
        require_positive_int(quantity, "quantity")
        if quantity > self.quantity:
            raise InsufficientStockError(self.id, self.quantity, quantity)
        self.quantity -= quantity

    def is_low_stock(self, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> bool:
        return self.quantity <= threshold


@dataclass
class Order:
    """A customer order moving through the order workflow."""

    customer_name: str
    order_date: date | None = None
    status: OrderStatus = OrderStatus.PENDING
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.customer_name = clean_text(self.customer_name)
        if isinstance(self.status, str) and not isinstance(self.status, OrderStatus):
            self.status = OrderStatus.from_string(self.status)

    def validate(self, today: date) -> None:
        """Raise ValidationError on the first invalid field.

        Args:
            today: The business date used for the "not in the future" check.
        """
        require_date(self.order_date, "order_date")
        if self.order_date > today:
            raise ValidationError("order_date", "Order date cannot be in the future")
        require_text(self.customer_name, "customer_name")
        if not isinstance(self.status, OrderStatus):
            raise ValidationError("status", f"Invalid order status: {self.status!r}")

    def can_be_cancelled(self) -> bool:
        return transitions.can_be_cancelled(self.status)

    def can_be_shipped(self) -> bool:
        return transitions.can_transition(self.status, OrderStatus.SHIPPED)

    def is_completed(self) -> bool:
        return transitions.is_terminal(self.status)

    def days_since_order(self, today: date) -> int:
        return (today - self.order_date).days


@dataclass
class Shipment:
    """An outbound shipment moving through the delivery workflow."""

    destination: str
    shipment_date: date | None = None
    status: ShipmentStatus = ShipmentStatus.PREPARING
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.destination = clean_text(self.destination)
        if isinstance(self.status, str) and not isinstance(self.status, ShipmentStatus):
            self.status = ShipmentStatus.from_string(self.status)

    def validate(self, today: date, max_lead_days: int = DEFAULT_MAX_LEAD_DAYS) -> None:
        """Raise ValidationError on the first invalid field."""
        require_text(self.destination, "destination")
        require_date(self.shipment_date, "shipment_date")
        if (self.shipment_date - today).days > max_lead_days:
            raise ValidationError(
                "shipment_date",
                f"Shipment date cannot be more than {max_lead_days} days in the future",
            )
        if not isinstance(self.status, ShipmentStatus):
            raise ValidationError("status", f"Invalid shipment status: {self.status!r}")

    def can_be_cancelled(self) -> bool:
        return transitions.can_be_cancelled(self.status)

    def can_be_tracked(self) -> bool:
        return transitions.can_be_tracked(self.status)

    def is_completed(self) -> bool:
        return transitions.is_terminal(self.status)

    def days_in_transit(self, today: date) -> int:
        return max((today - self.shipment_date).days, 0)

    def is_delayed(self, today: date, expected_days: int = DEFAULT_DELAYED_DAYS) -> bool:
        """True when still open more than ``expected_days`` after the ship date."""
        if self.is_completed():
            return False
        return (today - self.shipment_date).days > expected_days


# ---------------------------------------------------------------------------
# Statistics DTOs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InventoryStats:
    total_items: int
    total_quantity: int
    low_stock_items: tuple[InventoryItem, ...] = ()


@dataclass(frozen=True)
class OrderStats:
    total_orders: int
    status_counts: dict[OrderStatus, int] = field(default_factory=dict)
    recent_orders: tuple[Order, ...] = ()


@dataclass(frozen=True)
class ShipmentStats:
    total_shipments: int
    status_counts: dict[ShipmentStatus, int] = field(default_factory=dict)
    delayed_shipments: tuple[Shipment, ...] = ()
