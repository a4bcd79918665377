"""Shared validation utilities"""

import math
import re
import uuid
from datetime import date, datetime
from typing import Any, Optional

from ..exceptions import InvalidFilter, InvalidId

_NON_NUMERIC = re.compile(r"[,\s₩원]")

# Amount columns are INTEGER; keep values inside the signed 32-bit range
MAX_AMOUNT = 2**31 - 1


def validate_uuid(value: str) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def require_valid_id(value: str) -> str:
    """Return the id unchanged, or raise InvalidId if it is not a well-formed UUID"""
    if not validate_uuid(value):
        raise InvalidId(f"Invalid ID: {value}")
    return value


def coerce_amount(value: Any, default: int = 0) -> int:
    """
    Coerce a loosely-typed amount to an integer.

    Accepts ints, floats and strings with thousands separators or a currency
    suffix ("15,000", "15000원"). Anything unparseable becomes `default`.
    Raises InvalidFilter when the value does not fit an amount column.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        if abs(value) > MAX_AMOUNT:
            raise InvalidFilter(f"Amount out of range: {value}")
        return value
    if isinstance(value, float):
        number = value
    else:
        cleaned = _NON_NUMERIC.sub("", str(value))
        if not cleaned:
            return default
        try:
            number = float(cleaned)
        except ValueError:
            return default

    if math.isnan(number):
        return default
    if math.isinf(number) or abs(number) > MAX_AMOUNT:
        raise InvalidFilter(f"Amount out of range: {value}")
    return int(round(number))


def coerce_quantity(value: Any) -> int:
    """Quantities fall back to 1, like the intake form does"""
    quantity = coerce_amount(value, default=0)
    return quantity if quantity > 0 else 1


def parse_date(value: Optional[str], field: str) -> Optional[date]:
    """Parse a YYYY-MM-DD query value"""
    if not value:
        return None
    try:
        return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidFilter(f"Invalid {field}: {value}") from e
