"""
Lightweight domain validation helpers.

Pure checks with no I/O.  Every helper raises ``ValidationError(field, message)``
so that services can reject bad input before a session is ever opened.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Any

from warehouse_kernel.exceptions import ValidationError

MAX_TEXT_LENGTH = 255

#: Largest stock quantity a single item may hold (32-bit signed range).
MAX_QUANTITY = 2**31 - 1

_UNSAFE_CHARS = re.compile(r"[';\"\\]")


def sanitize_input(value: str | None) -> str:
    """Trim and drop quote, semicolon and backslash characters from free text."""
    if value is None:
        return ""
    return _UNSAFE_CHARS.sub("", value).strip()


def clean_text(value: Any) -> Any:
    """Trim strings; leave anything else untouched for the validator to reject."""
    if isinstance(value, str):
        return value.strip()
    return value


def require_text(value: Any, field: str, max_length: int = MAX_TEXT_LENGTH) -> str:
    """Require a non-blank string of at most ``max_length`` characters."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, f"{_label(field)} cannot be empty")
    if len(value.strip()) > max_length:
        raise ValidationError(
            field, f"{_label(field)} cannot exceed {max_length} characters"
        )
    return value.strip()


def require_non_negative_int(value: Any, field: str) -> int:
    if not _is_int(value):
        raise ValidationError(field, f"{_label(field)} must be an integer")
    if value < 0:
        raise ValidationError(field, f"{_label(field)} cannot be negative")
    return value


def require_positive_int(value: Any, field: str) -> int:
    if not _is_int(value):
        raise ValidationError(field, f"{_label(field)} must be an integer")
    if value <= 0:
        raise ValidationError(field, f"{_label(field)} must be positive")
    return value


def require_quantity(value: Any, field: str = "quantity") -> int:
    """Require a stock quantity: an int in ``[0, MAX_QUANTITY]``."""
    require_non_negative_int(value, field)
    if value > MAX_QUANTITY:
        raise ValidationError(field, f"{_label(field)} cannot exceed {MAX_QUANTITY}")
    return value


def days_before(today: date, days: Any, field: str = "days") -> date:
    """
    The date ``days`` calendar days before ``today``.

    Raises:
        ValidationError: If ``days`` is negative, not an int, or reaches
            past the first representable date.
    """
    require_non_negative_int(days, field)
    try:
        return today - timedelta(days=days)
    except OverflowError:
        raise ValidationError(field, f"{_label(field)} is out of range: {days}") from None


def require_id(value: Any, field: str = "id") -> int:
    """Require a persisted identity: a positive int."""
    if not _is_int(value) or value <= 0:
        raise ValidationError(field, f"Invalid {_label(field).lower()}: {value!r}")
    return value


def require_date(value: Any, field: str) -> date:
    # datetime is a date subclass; only plain calendar dates are stored.
    if not isinstance(value, date) or hasattr(value, "hour"):
        raise ValidationError(field, f"{_label(field)} must be a date")
    return value


def require_date_range(start: Any, end: Any) -> tuple[date, date]:
    """Require two dates with ``start <= end``."""
    require_date(start, "start_date")
    require_date(end, "end_date")
    if start > end:
        raise ValidationError("start_date", "Start date cannot be after end date")
    return start, end


def parse_int(text: str) -> int | None:
    """Parse user-entered integer text, returning None on failure."""
    try:
        return int(text.strip())
    except (AttributeError, ValueError):
        return None


def parse_iso_date(text: str) -> date | None:
    """Parse ``YYYY-MM-DD`` text, returning None on failure."""
    try:
        return date.fromisoformat(text.strip())
    except (AttributeError, ValueError):
        return None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _label(field: str) -> str:
    return field.replace("_", " ").capitalize()
