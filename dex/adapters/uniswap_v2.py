"""
dex/adapters/uniswap_v2.py - Uniswap V2 router quoting.

Constant-product routers (QuickSwap, SushiSwap, ...) expose
getAmountsOut(uint256 amountIn, address[] path) returns (uint256[] amounts).
amounts[-1] is what the router would pay out for amountIn.
"""

from core.exceptions import DecodeError
from core.models import ExchangeEndpoint, TokenPair
from dex.adapters.abi import decode_words, encode_address, encode_uint

# keccak256("getAmountsOut(uint256,address[])")[:4]
SELECTOR_GET_AMOUNTS_OUT = "0xd06ca61f"

# Head is two words (amountIn, offset to path), so the array starts at 0x40
PATH_OFFSET = 0x40


def encode_get_amounts_out(amount_in: int, path: list[str]) -> str:
    """
    Encode getAmountsOut call data.

    Layout:
        selector
        amountIn
        offset of path (0x40)
        path length
        path[0] .. path[n-1]
    """
    if len(path) < 2:
        raise ValueError(f"Path needs at least two tokens, got {len(path)}")

    return (
        f"{SELECTOR_GET_AMOUNTS_OUT}"
        f"{encode_uint(amount_in)}"
        f"{encode_uint(PATH_OFFSET)}"
        f"{encode_uint(len(path))}"
        + "".join(encode_address(token) for token in path)
    )


def decode_amounts_out(hex_result: str, path_length: int) -> list[int]:
    """
    Decode the uint256[] returned by getAmountsOut.

    Returns:
        amounts, one per path hop (amounts[0] == amountIn)
    """
    words = decode_words(hex_result, min_words=2)

    offset = words[0]
    length_index = offset // 32
    if offset % 32 != 0 or length_index >= len(words):
        raise DecodeError(
            f"Invalid amounts array offset: {offset}",
            details={"offset": offset, "words": len(words)},
        )

    length = words[length_index]
    if length != path_length:
        raise DecodeError(
            f"Amounts array has {length} entries, expected {path_length}",
            details={"length": length, "path_length": path_length},
        )

    amounts = words[length_index + 1:length_index + 1 + length]
    if len(amounts) != length:
        raise DecodeError(
            f"Amounts array truncated: {len(amounts)} of {length} entries",
            details={"length": length, "available": len(amounts)},
        )

    return amounts


def build_call(endpoint: ExchangeEndpoint, pair: TokenPair, amount_in: int) -> str:
    return encode_get_amounts_out(amount_in, pair.path)


def parse_amount_out(hex_result: str, pair: TokenPair) -> int:
    return decode_amounts_out(hex_result, len(pair.path))[-1]
