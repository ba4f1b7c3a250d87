"""
Service layer for outbound shipments.

Shipment workflow:

    Preparing -> In Transit -> Out for Delivery -> Delivered
        |            |    \\            |
        |            |     +-----------+----> Returned
        +------------+----> Cancelled

Delivered shipments cannot be deleted.  A shipment is delayed when it is
still open more than ``delayed_days`` after its ship date.
"""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import Future
from datetime import date
from typing import Any

from warehouse_kernel.dao.shipment_dao import ShipmentDAO
from warehouse_kernel.domain.clock import Clock
from warehouse_kernel.domain.entities import (
    DEFAULT_DELAYED_DAYS,
    DEFAULT_MAX_LEAD_DAYS,
    Shipment,
    ShipmentStats,
)
from warehouse_kernel.domain.status import TRACKABLE_SHIPMENT_STATUSES, ShipmentStatus
from warehouse_kernel.domain.validation import days_before
from warehouse_kernel.exceptions import ValidationError
from warehouse_kernel.services.base import DEFAULT_WORKER_COUNT, DatedStatusService


class ShipmentService(DatedStatusService[Shipment]):
    """Service for managing outbound shipments."""

    entity_name = "shipment"
    status_type = ShipmentStatus

    def __init__(
        self,
        dao: ShipmentDAO,
        *,
        clock: Clock | None = None,
        worker_count: int = DEFAULT_WORKER_COUNT,
        delayed_days: int = DEFAULT_DELAYED_DAYS,
        max_lead_days: int = DEFAULT_MAX_LEAD_DAYS,
        recent_window_days: int = 7,
        recent_limit: int = 10,
    ):
        super().__init__(
            dao,
            clock=clock,
            worker_count=worker_count,
            recent_window_days=recent_window_days,
            recent_limit=recent_limit,
        )
        self.delayed_days = delayed_days
        self.max_lead_days = max_lead_days

    def _validate(self, shipment: Shipment) -> None:
        if shipment is None:
            raise ValidationError("shipment", "Shipment cannot be null")
        shipment.validate(self._today(), self.max_lead_days)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create_shipment(self, shipment: Shipment) -> Shipment:
        """
        Create a new shipment.

        A missing ``shipment_date`` defaults to today.

        Raises:
            ValidationError: If the destination is blank or too long, or the
                date is more than ``max_lead_days`` ahead.
        """
        if shipment is not None and shipment.shipment_date is None:
            shipment.shipment_date = self._today()
        self._validate(shipment)
        return self._create(shipment)

    def update_shipment(self, shipment: Shipment) -> bool:
        self._validate(shipment)
        return self._update(shipment)

    def delete_shipment(self, shipment_id: int) -> bool:
        """
        Delete a shipment.

        Raises:
            DeleteNotAllowedError: If the shipment is Delivered.
        """
        return self._delete(shipment_id, protected=ShipmentStatus.DELIVERED)

    def find_shipment(self, shipment_id: int) -> Shipment | None:
        return self._find(shipment_id)

    def list_shipments(self) -> list[Shipment]:
        return self._list()

    def batch_update(self, shipments: Iterable[Shipment]) -> bool:
        return self._batch_update(shipments, self._validate)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search_by_destination(self, text: str) -> list[Shipment]:
        if text is None or not text.strip():
            return self.list_shipments()
        with self._storage_guard("search shipments by destination"):
            return self._dao.find_by_destination(text.strip())

    def shipments_by_status(self, status: ShipmentStatus | str) -> list[Shipment]:
        return self._by_status(status)

    def shipments_by_date_range(self, start: date, end: date) -> list[Shipment]:
        return self._by_date_range(start, end)

    def recent_shipments(
        self, days: int | None = None, limit: int | None = None
    ) -> list[Shipment]:
        return self._recent(days, limit)

    def delayed_shipments(self, threshold_days: int | None = None) -> list[Shipment]:
        """
        Open shipments whose ship date is more than ``threshold_days`` ago.

        Args:
            threshold_days: Defaults to the configured ``delayed_days``.

        Returns:
            Shipments ordered oldest first.
        """
        if threshold_days is None:
            threshold_days = self.delayed_days
        cutoff = days_before(self._today(), threshold_days, "threshold_days")
        with self._storage_guard("find delayed shipments"):
            return self._dao.find_delayed(cutoff)

    def trackable_shipments(self) -> list[Shipment]:
        """Shipments In Transit or Out for Delivery, newest first."""
        found: list[Shipment] = []
        for status in TRACKABLE_SHIPMENT_STATUSES:
            found.extend(self._by_status(status))
        return sorted(found, key=lambda s: (s.shipment_date, s.id), reverse=True)

    def get_stats(self) -> ShipmentStats:
        return ShipmentStats(
            total_shipments=self._count(),
            status_counts=self._status_counts(),
            delayed_shipments=tuple(self.delayed_shipments()),
        )

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    def update_status(self, shipment_id: int, status: ShipmentStatus | str) -> Shipment:
        """
        Move a shipment to ``status``.

        Raises:
            EntityNotFoundError: If the shipment does not exist.
            InvalidStatusTransitionError: If the move is not allowed.
            ConcurrentModificationError: If the status changed concurrently.
        """
        return self._change_status(shipment_id, status)

    def dispatch_shipment(self, shipment_id: int) -> Shipment:
        return self._change_status(shipment_id, ShipmentStatus.IN_TRANSIT)

    def mark_out_for_delivery(self, shipment_id: int) -> Shipment:
        return self._change_status(shipment_id, ShipmentStatus.OUT_FOR_DELIVERY)

    def deliver_shipment(self, shipment_id: int) -> Shipment:
        return self._change_status(shipment_id, ShipmentStatus.DELIVERED)

    def return_shipment(self, shipment_id: int) -> Shipment:
        return self._change_status(shipment_id, ShipmentStatus.RETURNED)

    def cancel_shipment(self, shipment_id: int) -> Shipment:
        return self._change_status(shipment_id, ShipmentStatus.CANCELLED)

    # ------------------------------------------------------------------
    # Asynchronous calling convention
    # ------------------------------------------------------------------

    def create_shipment_async(self, shipment: Shipment) -> Future[Shipment]:
        return self.submit(self.create_shipment, shipment)

    def update_shipment_async(self, shipment: Shipment) -> Future[bool]:
        return self.submit(self.update_shipment, shipment)

    def delete_shipment_async(self, shipment_id: int) -> Future[bool]:
        return self.submit(self.delete_shipment, shipment_id)

    def find_shipment_async(self, shipment_id: int) -> Future[Shipment | None]:
        return self.submit(self.find_shipment, shipment_id)

    def list_shipments_async(self) -> Future[list[Shipment]]:
        return self.submit(self.list_shipments)

    def batch_update_async(self, shipments: Iterable[Shipment]) -> Future[bool]:
        return self.submit(self.batch_update, list(shipments))

    def search_by_destination_async(self, text: str) -> Future[list[Shipment]]:
        return self.submit(self.search_by_destination, text)

    def shipments_by_status_async(self, status: Any) -> Future[list[Shipment]]:
        return self.submit(self.shipments_by_status, status)

    def shipments_by_date_range_async(
        self, start: date, end: date
    ) -> Future[list[Shipment]]:
        return self.submit(self.shipments_by_date_range, start, end)

    def recent_shipments_async(
        self, days: int | None = None, limit: int | None = None
    ) -> Future[list[Shipment]]:
        return self.submit(self.recent_shipments, days, limit)

    def delayed_shipments_async(
        self, threshold_days: int | None = None
    ) -> Future[list[Shipment]]:
        return self.submit(self.delayed_shipments, threshold_days)

    def trackable_shipments_async(self) -> Future[list[Shipment]]:
        return self.submit(self.trackable_shipments)

    def get_stats_async(self) -> Future[ShipmentStats]:
        return self.submit(self.get_stats)

    def update_status_async(self, shipment_id: int, status: Any) -> Future[Shipment]:
        return self.submit(self.update_status, shipment_id, status)

    def dispatch_shipment_async(self, shipment_id: int) -> Future[Shipment]:
        return self.submit(self.dispatch_shipment, shipment_id)

    def mark_out_for_delivery_async(self, shipment_id: int) -> Future[Shipment]:
        return self.submit(self.mark_out_for_delivery, shipment_id)

    def deliver_shipment_async(self, shipment_id: int) -> Future[Shipment]:
        return self.submit(self.deliver_shipment, shipment_id)

    def return_shipment_async(self, shipment_id: int) -> Future[Shipment]:
        return self.submit(self.return_shipment, shipment_id)

    def cancel_shipment_async(self, shipment_id: int) -> Future[Shipment]:
        return self.submit(self.cancel_shipment, shipment_id)
