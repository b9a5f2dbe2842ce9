# PATH: core/format_money.py
"""
Safe money formatting utilities for DEXARB.

All money values are Decimal. This module turns them into display strings
without ever going through float.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union


def format_money(value: Union[str, Decimal, int, float, None], decimals: int = 4) -> str:
    """
    Safely format a money value to string with specified decimal places.

    Handles str, Decimal, int and float (legacy) input; None formats as zero.
    Uses ROUND_HALF_UP for display rounding (0.00005 -> 0.0001 with 4 decimals).
    Never raises on valid numeric input.

    Example:
        >>> format_money("18")
        '18.0000'
        >>> format_money(Decimal("-1.00005"))
        '-1.0001'
        >>> format_money(None)
        '0.0000'
    """
    zero = f"0.{'0' * decimals}" if decimals > 0 else "0"
    if value is None:
        return zero

    try:
        if isinstance(value, Decimal):
            dec_value = value
        elif isinstance(value, str):
            if not value.strip():
                return zero
            dec_value = Decimal(value)
        else:
            dec_value = Decimal(str(value))

        with localcontext() as ctx:
            ctx.prec = 50
            quantize_str = "0." + "0" * decimals if decimals > 0 else "0"
            rounded = dec_value.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)

        return f"{rounded:.{decimals}f}"

    except (InvalidOperation, ValueError, TypeError):
        return zero


def format_rate(value: Union[str, Decimal, None]) -> str:
    """Format an exchange rate for display (6 decimals)."""
    return format_money(value, decimals=6)
