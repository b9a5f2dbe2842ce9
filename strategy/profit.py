"""
strategy/profit.py - Profit Calculator.

Model (all amounts in token_out units):
    cost_basis     = trade_size * buy_rate    (what trade_size is worth on the cheap venue)
    gross_proceeds = trade_size * sell_rate   (what the expensive venue pays for it)
    net_profit     = gross_proceeds - cost_basis - gas_cost_estimate

Example: rates 1.00 / 1.02, size 1000, gas 2.0 -> gross 1020, net 18.0.
"""

from decimal import localcontext

from core.constants import RATE_PRECISION
from core.math import safe_decimal
from core.models import NormalizedRate, Profit, TradeParameters


def compute_profit(
    buy_rate: NormalizedRate,
    sell_rate: NormalizedRate,
    params: TradeParameters,
) -> Profit:
    """
    Simulated net profit of buying on buy_rate's venue and selling on sell_rate's.

    Pure function of its inputs; venue identity only travels along for reporting.
    """
    trade_size = params.trade_size
    gas_cost = safe_decimal(params.gas_cost_estimate)

    with localcontext() as ctx:
        ctx.prec = RATE_PRECISION
        cost_basis = trade_size * buy_rate.value
        gross_proceeds = trade_size * sell_rate.value
        net_profit = gross_proceeds - cost_basis - gas_cost

    return Profit(
        buy_rate=buy_rate,
        sell_rate=sell_rate,
        trade_size=trade_size,
        gross_proceeds=gross_proceeds,
        cost_basis=cost_basis,
        gas_cost=gas_cost,
        net_profit=net_profit,
    )


def compute_directional_profits(
    rate_a: NormalizedRate,
    rate_b: NormalizedRate,
    params: TradeParameters,
) -> tuple[Profit, Profit]:
    """
    Evaluate both directions, since which venue is cheaper is not known up front.

    Returns:
        (buy on A / sell on B, buy on B / sell on A)
    """
    return (
        compute_profit(rate_a, rate_b, params),
        compute_profit(rate_b, rate_a, params),
    )
