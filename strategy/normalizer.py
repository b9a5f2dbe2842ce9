"""
strategy/normalizer.py - Price Normalizer.

PRICE CONTRACT:
- Rate is ALWAYS "token_out per 1 token_in", decimals removed
- For WETH/USDC: rate ~ 3500 (USDC per 1 WETH)
- Rounded toward zero, never overstates
- amount_out == 0 gives exactly Decimal(0), which callers treat as no liquidity
"""

from decimal import Decimal

from core.math import divide_round_down
from core.models import NormalizedRate, Quote, TokenPair


def normalize(quote: Quote, pair: TokenPair) -> NormalizedRate:
    """
    Convert a raw quote into a NormalizedRate.

    rate = (amount_out / 10**decimals_out) / (amount_in / 10**decimals_in)
         = (amount_out * 10**decimals_in) / (amount_in * 10**decimals_out)

    Both sides of the second form are exact integers, so the only rounding is
    the single final division.
    """
    if quote.amount_in <= 0:
        raise ValueError(f"Quote amount_in must be positive, got {quote.amount_in}")

    if quote.amount_out == 0:
        return NormalizedRate(value=Decimal(0), endpoint=quote.endpoint)

    numerator = quote.amount_out * 10 ** pair.decimals_in
    denominator = quote.amount_in * 10 ** pair.decimals_out

    return NormalizedRate(
        value=divide_round_down(numerator, denominator),
        endpoint=quote.endpoint,
    )
