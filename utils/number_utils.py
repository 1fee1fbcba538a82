import math
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Optional

import numpy as np


def to_float(value) -> Optional[float]:
    """Coerce a raw column value to float, or None when it is not a usable number.

    Booleans, NaN and infinities are rejected. Strings are stripped and may
    carry a trailing percent sign ("85%").
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().rstrip("%").strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def round_half_up(value: float, digits: int = 0):
    """Round like a report card does (2.5 -> 3), not banker's rounding.

    Returns an int when digits == 0, a float otherwise. NaN becomes 0;
    infinities are returned unchanged.
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        value = 0
    if isinstance(value, float) and math.isinf(value):
        return value
    number = Decimal(str(value))
    with localcontext() as ctx:
        # room for every integer digit of very large scores plus the kept decimals
        ctx.prec = max(ctx.prec, number.adjusted() + digits + 2)
        rounded = number.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    if digits == 0:
        return int(rounded)
    return float(rounded)


def safe_mean(values) -> float:
    """Arithmetic mean that returns 0.0 for an empty sequence instead of NaN."""
    values = list(values)
    if not values:
        return 0.0
    result = float(np.mean(values))
    return 0.0 if math.isnan(result) else result


def parse_timestamp(value) -> Optional[datetime]:
    """Parse DB/JSON timestamps into naive UTC datetimes.

    Accepts datetime, date and ISO-8601 strings (a trailing "Z" is allowed).
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def chronological_key(field: str):
    """Sort key for stable chronological ordering; undated records sort first."""

    def _key(record):
        stamp = record.get(field)
        return (stamp is not None, stamp or datetime.min)

    return _key
