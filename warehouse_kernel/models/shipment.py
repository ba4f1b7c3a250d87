"""ORM persistence for outbound shipments (``shipments`` table)."""

from datetime import date

from sqlalchemy import CheckConstraint, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from warehouse_kernel.db.base import TrackedBase
from warehouse_kernel.domain.status import ShipmentStatus

_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in ShipmentStatus)


class ShipmentModel(TrackedBase):
    """A row of the ``shipments`` table.  Status holds the display string."""

    __tablename__ = "shipments"

    __table_args__ = (
        CheckConstraint(
            f"shipment_status IN ({_STATUS_VALUES})", name="ck_shipments_status"
        ),
        Index("idx_shipments_destination", "destination"),
        Index("idx_shipments_status", "shipment_status"),
        Index("idx_shipments_date", "shipment_date"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column("shipment_id", Integer, primary_key=True)

    destination: Mapped[str] = mapped_column(nullable=False)

    shipment_date: Mapped[date] = mapped_column(nullable=False)

    status: Mapped[str] = mapped_column(
        "shipment_status",
        String(20),
        nullable=False,
        default=ShipmentStatus.PREPARING.value,
    )

    def __repr__(self) -> str:
        return f"<Shipment {self.id}: {self.destination} {self.shipment_date} ({self.status})>"
