"""Decimal coercion and rounding helpers shared by the aggregators."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

TWO_PLACES = Decimal("0.01")
ONE_PLACE = Decimal("0.1")


def to_decimal(value: object) -> Optional[Decimal]:
    """Convert int/float/str/Decimal to Decimal via its string form; None stays None.

    Floats go through str() so 4.99 becomes Decimal("4.99"), not its binary expansion.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("boolean is not a grade value")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            result = Decimal(value.strip().replace(",", "."))
        except InvalidOperation as exc:
            raise ValueError(f"not a number: {value!r}") from exc
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        raise ValueError(f"unsupported grade value type: {type(value).__name__}")
    if not result.is_finite():
        raise ValueError(f"grade value must be finite, got {value!r}")
    return result


def round2(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round1(value: Decimal) -> Decimal:
    return value.quantize(ONE_PLACE, rounding=ROUND_HALF_UP)
