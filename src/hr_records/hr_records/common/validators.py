from __future__ import annotations

import re
from datetime import date
from typing import Any, Optional

from ..core.exceptions import ValidationError


def _require_text_type(value: Any, field_name: str) -> None:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")


def require_non_empty(value: str, field_name: str) -> str:
    _require_text_type(value, field_name)
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value: Any, field_name: str) -> Optional[str]:
    """Strip a free-text field; blank becomes None."""
    _require_text_type(value, field_name)
    return (value or "").strip() or None


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    _require_text_type(value, field_name)
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must not exceed {max_len} characters")
    return value


def require_length_between(value: str, field_name: str, min_len: int, max_len: int) -> str:
    value = require_non_empty(value, field_name)
    if not min_len <= len(value) <= max_len:
        raise ValidationError(f"{field_name} must be between {min_len} and {max_len} characters")
    return value


def require_int(value: Any, field_name: str) -> int:
    """Coerce JSON/form input to int. Booleans and fractional numbers are rejected."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def optional_int(value: Any, field_name: str) -> Optional[int]:
    return None if value is None else require_int(value, field_name)


def require_int_between(value: Optional[int], field_name: str, low: int, high: int) -> Optional[int]:
    if value is None:
        return None
    value = require_int(value, field_name)
    if not low <= value <= high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return value


def require_date_range(start: date, end: date) -> None:
    if start is None or end is None:
        raise ValidationError("Start date and end date are required")
    if end < start:
        raise ValidationError("End date must not be before start date")


def require_pattern(value: Optional[str], field_name: str, pattern: str) -> Optional[str]:
    _require_text_type(value, field_name)
    if value is None:
        return None
    if not re.match(pattern, value):
        raise ValidationError(f"{field_name} is not valid")
    return value


def require_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    local, sep, domain = value.strip().partition("@")
    if not sep or not local or "." not in domain:
        raise ValidationError("Email is not valid")
    return value.strip()
