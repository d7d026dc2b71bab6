"""Input coercion helpers.

Calculators never raise on bad numbers or dates. Values that can't be read
as finite numbers become 0 and unreadable dates become None.
"""

import math
from datetime import date, datetime
from typing import Any, Optional


def to_amount(value: Any) -> float:
    """Coerce a value to a finite float, 0.0 on failure.

    Accepts numbers and numeric strings (commas and surrounding
    whitespace are ignored, so "1,20,000" and " 5000 " both parse).
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_non_negative(value: Any) -> float:
    """Coerce like to_amount, then clamp negatives to 0."""
    return max(0.0, to_amount(value))


def round_half_up(amount: float) -> int:
    """Round to the nearest whole number, .5 rounding up."""
    return int(math.floor(amount + 0.5))


def parse_date(value: Any) -> Optional[date]:
    """Parse a calendar date.

    Accepts date/datetime objects and ISO strings (YYYY-MM-DD). Returns None
    for anything else.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None
