"""
WarehouseSettings schema.

The typed, frozen result of merging packaged defaults, an optional user
YAML file and ``WAREHOUSE_*`` environment variables.
"""

from __future__ import annotations

from dataclasses import dataclass

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True)
class WarehouseSettings:
    """Runtime settings for the warehouse kernel and its front end."""

    database_path: str = "warehouse.db"
    busy_timeout_ms: int = 5000
    worker_count: int = 5
    low_stock_threshold: int = 10
    delayed_shipment_days: int = 7
    max_shipment_lead_days: int = 7
    recent_window_days: int = 7
    recent_limit: int = 10
    log_level: str = "INFO"
    log_file: str | None = None

    def __post_init__(self) -> None:
        if not self.database_path or not str(self.database_path).strip():
            raise ValueError("database_path cannot be empty")
        for name in ("busy_timeout_ms", "low_stock_threshold",
                     "delayed_shipment_days", "max_shipment_lead_days",
                     "recent_window_days"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative, got {getattr(self, name)}")
        for name in ("worker_count", "recent_limit"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Unknown log_level: {self.log_level!r}")

