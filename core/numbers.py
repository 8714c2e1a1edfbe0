# core/numbers.py
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Union

Number = Union[int, float]


def round_half_up(value: Number, digits: int = 0) -> Number:
    """Round ties away from zero.

    Works on the exact binary value of the float, so 0.25 -> 0.3 while
    1.005 (really 1.00499...) -> 1.0, same as toFixed/Math.round on
    non-negative numbers. Returns an int when digits == 0.
    """
    if not math.isfinite(value):
        return 0 if digits == 0 else 0.0
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


def as_minutes(value: Any) -> float:
    """Coerce a stored duration to minutes; anything non-numeric is 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        out = float(value)
    except (TypeError, ValueError):
        return 0.0
    return out if math.isfinite(out) else 0.0


def tidy(value: Number) -> Number:
    """90.0 -> 90, 12.5 stays 12.5."""
    value = float(value)
    return int(value) if value.is_integer() else value
