"""
dex/adapters/ - Router calling conventions.

Adapters:
- uniswap_v2: getAmountsOut on constant-product routers
- uniswap_v3: quoteExactInputSingle on QuoterV2

Each module exposes build_call(endpoint, pair, amount_in) -> call data and
parse_amount_out(hex_result, pair) -> int.
"""

from dex.adapters import uniswap_v2, uniswap_v3

__all__ = [
    "uniswap_v2",
    "uniswap_v3",
]
