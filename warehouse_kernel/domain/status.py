"""
Module: warehouse_kernel.domain.status
Responsibility: Order and shipment status enums, their constant transition
    tables, and the pure predicates every layer uses to ask "may this record
    move from A to B?".
Architecture position: Kernel > Domain.  Pure, zero I/O.  The services
    consult these tables before any conditional write; nothing else encodes
    transition rules.

Invariants enforced:
    - Terminal statuses have an empty successor set.
    - A status change is legal iff the target is in the current status's
      successor set.  Self-transitions are never in the table.

Failure modes:
    - ValidationError from ``from_string`` on an unknown status string.
    - InvalidStatusTransitionError from ``require_transition``.
"""

from __future__ import annotations

from enum import Enum

from warehouse_kernel.exceptions import InvalidStatusTransitionError, ValidationError


class _DisplayEnum(str, Enum):
    """String enum whose values are the display strings stored in the database."""

    @classmethod
    def from_string(cls, text: str):
        """Parse a display string or member name, case-insensitively."""
        if isinstance(text, cls):
            return text
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("status", f"Invalid {cls.__name__}: {text!r}")
        key = text.strip().upper().replace(" ", "_")
        for member in cls:
            if member.name == key:
                return member
        raise ValidationError("status", f"Invalid {cls.__name__}: {text!r}")

    def __str__(self) -> str:
        return self.value


class OrderStatus(_DisplayEnum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class ShipmentStatus(_DisplayEnum):
    PREPARING = "Preparing"
    IN_TRANSIT = "In Transit"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    RETURNED = "Returned"
    CANCELLED = "Cancelled"


ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),   # terminal
    OrderStatus.CANCELLED: frozenset(),   # terminal
}

SHIPMENT_TRANSITIONS: dict[ShipmentStatus, frozenset[ShipmentStatus]] = {
    ShipmentStatus.PREPARING: frozenset({
        ShipmentStatus.IN_TRANSIT, ShipmentStatus.CANCELLED,
    }),
    ShipmentStatus.IN_TRANSIT: frozenset({
        ShipmentStatus.OUT_FOR_DELIVERY, ShipmentStatus.RETURNED,
        ShipmentStatus.CANCELLED,
    }),
    ShipmentStatus.OUT_FOR_DELIVERY: frozenset({
        ShipmentStatus.DELIVERED, ShipmentStatus.RETURNED,
    }),
    ShipmentStatus.DELIVERED: frozenset(),   # terminal
    ShipmentStatus.RETURNED: frozenset(),    # terminal
    ShipmentStatus.CANCELLED: frozenset(),   # terminal
}

TRACKABLE_SHIPMENT_STATUSES: frozenset[ShipmentStatus] = frozenset({
    ShipmentStatus.IN_TRANSIT, ShipmentStatus.OUT_FOR_DELIVERY,
})

_TABLES = {
    OrderStatus: ORDER_TRANSITIONS,
    ShipmentStatus: SHIPMENT_TRANSITIONS,
}


def allowed_transitions(status: OrderStatus | ShipmentStatus) -> frozenset:
    """Return the set of statuses reachable in one step from ``status``."""
    return _TABLES[type(status)][status]


def can_transition(
    current: OrderStatus | ShipmentStatus,
    target: OrderStatus | ShipmentStatus,
) -> bool:
    if type(current) is not type(target):
        return False
    return target in allowed_transitions(current)


def is_terminal(status: OrderStatus | ShipmentStatus) -> bool:
    return not allowed_transitions(status)


def can_be_cancelled(status: OrderStatus | ShipmentStatus) -> bool:
    return can_transition(status, type(status).CANCELLED)


def can_be_tracked(status: ShipmentStatus) -> bool:
    return status in TRACKABLE_SHIPMENT_STATUSES


def terminal_statuses(status_type: type) -> frozenset:
    """All terminal members of an order or shipment status enum."""
    return frozenset(s for s in status_type if is_terminal(s))


def require_transition(
    current: OrderStatus | ShipmentStatus,
    target: OrderStatus | ShipmentStatus,
    entity_type: str,
    entity_id: int | None = None,
) -> None:
    """Raise InvalidStatusTransitionError unless ``current -> target`` is legal.

    Raises:
        InvalidStatusTransitionError: Naming both statuses.
    """
    if not can_transition(current, target):
        raise InvalidStatusTransitionError(
            entity_type, entity_id, str(current), str(target),
        )
