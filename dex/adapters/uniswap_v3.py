"""
dex/adapters/uniswap_v3.py - Uniswap V3 quoting via QuoterV2.

Single-hop quotes only (quoteExactInputSingle) at the endpoint's fee tier.
"""

from core.models import ExchangeEndpoint, TokenPair
from dex.adapters.abi import decode_words, encode_address, encode_uint

# keccak256("quoteExactInputSingle((address,address,uint256,uint24,uint160))")[:4]
SELECTOR_QUOTE_EXACT_INPUT_SINGLE = "0xc6a5026a"


def encode_quote_exact_input_single(
    token_in: str,
    token_out: str,
    amount_in: int,
    fee: int,
    sqrt_price_limit_x96: int = 0,
) -> str:
    """
    Encode quoteExactInputSingle call data for QuoterV2.

    QuoterV2 uses a struct parameter:
    struct QuoteExactInputSingleParams {
        address tokenIn;
        address tokenOut;
        uint256 amountIn;
        uint24 fee;
        uint160 sqrtPriceLimitX96;
    }

    For a tuple of static types, encoding is simply: selector + fields (no offset).
    """
    return (
        f"{SELECTOR_QUOTE_EXACT_INPUT_SINGLE}"
        f"{encode_address(token_in)}"
        f"{encode_address(token_out)}"
        f"{encode_uint(amount_in)}"
        f"{encode_uint(fee)}"
        f"{encode_uint(sqrt_price_limit_x96)}"
    )


def decode_quote_response(hex_result: str) -> tuple[int, int, int, int]:
    """
    Decode quoteExactInputSingle response.

    Returns:
        (amountOut, sqrtPriceX96After, initializedTicksCrossed, gasEstimate)
    """
    words = decode_words(hex_result, min_words=4)
    return words[0], words[1], words[2], words[3]


def build_call(endpoint: ExchangeEndpoint, pair: TokenPair, amount_in: int) -> str:
    return encode_quote_exact_input_single(
        token_in=pair.token_in.address,
        token_out=pair.token_out.address,
        amount_in=amount_in,
        fee=endpoint.fee_tier,
    )


def parse_amount_out(hex_result: str, pair: TokenPair) -> int:
    amount_out, _, _, _ = decode_quote_response(hex_result)
    return amount_out
