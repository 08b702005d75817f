"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout. Razorpay expects
amounts in the currency's minor unit (paise for INR).
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Number = Union[str, int, float, Decimal]

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

# Minor units per major unit
MINOR_UNIT_FACTOR = Decimal(100)


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Returns:
        Decimal representation of the value, or Decimal("0") if None, invalid
        or not finite
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # Go through str so 0.1 stays 0.1
            result = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        except (InvalidOperation, ValueError, TypeError):
            return Decimal("0")

    if not result.is_finite():
        return Decimal("0")
    return result


def round_money(value: Number) -> Decimal:
    """Round a monetary value to two decimal places (half up)."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def to_minor_units(value: Number) -> int:
    """
    Convert a major-unit amount to integer minor units.

    Example:
        to_minor_units("100.50") -> 10050
    """
    decimal_value = to_decimal(value)
    return int((decimal_value * MINOR_UNIT_FACTOR).to_integral_value(rounding=ROUND_HALF_UP))


def to_float(value: Number) -> float:
    """
    Convert Decimal to float for JSON responses.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))
