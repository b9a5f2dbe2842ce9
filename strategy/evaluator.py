"""
strategy/evaluator.py - Opportunity Evaluator.

A direction qualifies when:
- both of its rates are usable (non-zero)
- net_profit > 0
- net_profit > threshold (strict)

Both qualify -> higher net_profit wins, exact tie -> direction_a wins.
Neither qualifies -> None, the normal outcome of most cycles.
"""

from decimal import Decimal
from typing import Optional

from core.models import Opportunity, Profit


def qualifies(profit: Profit, threshold: Decimal) -> bool:
    """True when a direction is usable and strictly exceeds the threshold."""
    if not profit.is_usable:
        return False
    return profit.net_profit > 0 and profit.net_profit > threshold


def evaluate(
    direction_a: Profit,
    direction_b: Profit,
    threshold: Decimal,
) -> Optional[Opportunity]:
    """
    Pick the profitable direction, if any.

    Args:
        direction_a: First-declared direction (wins ties)
        direction_b: Second direction
        threshold: Net profit must exceed this, in token_out units

    Returns:
        Opportunity for the selected direction, or None
    """
    candidates = [p for p in (direction_a, direction_b) if qualifies(p, threshold)]
    if not candidates:
        return None

    # max() keeps the first maximal element, so direction_a wins exact ties
    best = max(candidates, key=lambda p: p.net_profit)
    return Opportunity.from_profit(best, profitable=True)
