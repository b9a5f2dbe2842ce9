# PATH: core/math.py
"""
Math utilities for DEXARB.

Safe conversions between on-chain integer amounts and Decimal (no float money).
"""

from decimal import Decimal, InvalidOperation, ROUND_DOWN, localcontext
from typing import Union

from core.constants import RATE_PRECISION


def safe_decimal(value: Union[str, int, float, Decimal, None], default: Decimal = Decimal("0")) -> Decimal:
    """
    Safely convert value to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary expansion.

    Args:
        value: Value to convert
        default: Default if conversion fails

    Returns:
        Decimal value
    """
    if value is None:
        return default

    try:
        if isinstance(value, Decimal):
            return value
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return default


def _shift(value: Decimal, places: int) -> Decimal:
    """Multiply by 10**places without touching the digits (no context rounding)."""
    if not value.is_finite():
        return value
    sign, digits, exponent = value.as_tuple()
    return Decimal((sign, digits, exponent + places))


def normalize_to_decimals(amount: Union[str, int, Decimal], decimals: int) -> Decimal:
    """
    Normalize amount to token decimals (wei to token units).

    Exact: scaling by a power of ten only moves the exponent.
    """
    return _shift(safe_decimal(amount), -decimals)


def denormalize_from_decimals(amount: Union[str, float, Decimal], decimals: int) -> int:
    """
    Denormalize amount from token units to wei.

    Digits beyond the token's precision are truncated.
    """
    scaled = _shift(safe_decimal(amount), decimals)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def divide_round_down(numerator: int, denominator: int, precision: int = RATE_PRECISION) -> Decimal:
    """
    Divide two integers into a Decimal, rounding toward zero.

    Args:
        numerator: Exact integer numerator
        denominator: Exact non-zero integer denominator
        precision: Significant digits kept in the result

    Returns:
        numerator / denominator, never larger in magnitude than the true quotient
    """
    if denominator == 0:
        raise ZeroDivisionError("denominator must be non-zero")

    with localcontext() as ctx:
        ctx.prec = precision
        ctx.rounding = ROUND_DOWN
        return Decimal(numerator) / Decimal(denominator)
