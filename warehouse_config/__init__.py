"""
warehouse_config -- single public entrypoint for runtime settings.

Responsibility:
    ``get_settings()`` merges, in increasing precedence, the packaged
    ``defaults.yaml``, an optional user YAML file and ``WAREHOUSE_*``
    environment variables into a frozen ``WarehouseSettings``.

Architecture position:
    Configuration -- sits beside ``warehouse_kernel``.  The kernel never
    reads files or environment variables itself; callers pass settings in.

Failure modes:
    - ``FileNotFoundError`` -- the user file does not exist.
    - ``ValueError`` -- unknown keys or invalid values.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from warehouse_config.loader import env_overrides, load_yaml_file, parse_settings
from warehouse_config.schema import WarehouseSettings

_logger = logging.getLogger("warehouse_kernel.config")

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


def get_settings(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> WarehouseSettings:
    """Load settings: defaults <- user file <- environment."""
    data = load_yaml_file(DEFAULTS_PATH)
    if config_path is not None:
        data.update(load_yaml_file(Path(config_path)))
    data.update(env_overrides(os.environ if environ is None else environ))

    settings = parse_settings(data)
    _logger.debug(
        "settings_loaded",
        extra={
            "config_path": str(config_path) if config_path else None,
            "database_path": settings.database_path,
            "worker_count": settings.worker_count,
        },
    )
    return settings


__all__ = ["WarehouseSettings", "get_settings"]
