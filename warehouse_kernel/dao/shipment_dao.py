"""Data access for outbound shipments."""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import select

from warehouse_kernel.dao.base import DatedStatusDAO
from warehouse_kernel.domain.entities import Shipment
from warehouse_kernel.domain.status import ShipmentStatus, terminal_statuses
from warehouse_kernel.models.shipment import ShipmentModel


class ShipmentDAO(DatedStatusDAO[ShipmentModel, Shipment]):
    """Data-access component for the ``shipments`` table."""

    model = ShipmentModel
    entity_name = "shipment"
    status_type = ShipmentStatus

    @property
    def _date_column(self):
        return ShipmentModel.shipment_date

    def _to_entity(self, row: ShipmentModel) -> Shipment:
        return Shipment(
            id=row.id,
            destination=row.destination,
            shipment_date=row.shipment_date,
            status=ShipmentStatus(row.status),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _values(self, entity: Shipment) -> dict[str, Any]:
        return {
            "destination": entity.destination,
            "shipment_date": entity.shipment_date,
            "status": entity.status.value,
        }

    def find_by_destination(self, pattern: str) -> list[Shipment]:
        return self._matching(ShipmentModel.destination, pattern)

    def find_delayed(self, cutoff: date) -> list[Shipment]:
        """Open shipments dated before ``cutoff``, oldest first."""
        closed = [s.value for s in terminal_statuses(ShipmentStatus)]
        stmt = (
            select(ShipmentModel)
            .where(
                ShipmentModel.shipment_date < cutoff,
                ShipmentModel.status.not_in(closed),
            )
            .order_by(ShipmentModel.shipment_date, ShipmentModel.id)
        )
        return self._select(stmt)
