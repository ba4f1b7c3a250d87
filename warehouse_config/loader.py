"""
Configuration Loader (``warehouse_config.loader``).

Responsibility
--------------
Loads YAML settings files, applies environment overrides and parses the
merged mapping into a ``WarehouseSettings`` instance.  The public entry
point is ``warehouse_config.get_settings()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown key or uncoercible value  -> ``ValueError``.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from warehouse_config.schema import WarehouseSettings

ENV_PREFIX = "WAREHOUSE_"

_INT_KEYS = frozenset({
    "busy_timeout_ms",
    "worker_count",
    "low_stock_threshold",
    "delayed_shipment_days",
    "max_shipment_lead_days",
    "recent_window_days",
    "recent_limit",
})
_STR_KEYS = frozenset({"database_path", "log_level"})
_OPTIONAL_STR_KEYS = frozenset({"log_file"})
KNOWN_KEYS = _INT_KEYS | _STR_KEYS | _OPTIONAL_STR_KEYS


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")
    return data


def env_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    """Collect ``WAREHOUSE_<KEY>`` variables for known keys."""
    overrides: dict[str, str] = {}
    for key in KNOWN_KEYS:
        value = environ.get(ENV_PREFIX + key.upper())
        if value is not None:
            overrides[key] = value
    return overrides


def _coerce(key: str, value: Any) -> Any:
    if key in _INT_KEYS:
        if isinstance(value, bool):
            raise ValueError(f"{key} must be an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValueError(f"{key} must be an integer, got {value!r}") from None
    if key in _OPTIONAL_STR_KEYS:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return str(value)
    if value is None:
        raise ValueError(f"{key} cannot be null")
    return str(value)


def parse_settings(data: Mapping[str, Any]) -> WarehouseSettings:
    """
    Parse a merged settings mapping.

    Raises:
        ValueError: on unknown keys or invalid values.
    """
    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        raise ValueError(f"Unknown setting(s): {', '.join(unknown)}")
    values = {key: _coerce(key, value) for key, value in data.items()}
    if "log_level" in values:
        values["log_level"] = values["log_level"].upper()
    return WarehouseSettings(**values)
