"""
dex/adapters/abi.py - Minimal ABI word encoding/decoding.

Only what the quoting calls need: 32-byte words for uint and address,
and splitting return data back into words.
"""

import re

from core.exceptions import ContractRevertedError, DecodeError

WORD_HEX_CHARS = 64
UINT256_MAX = 2**256 - 1

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def is_address(value: str) -> bool:
    """True for a 0x-prefixed 20-byte hex address (checksum not enforced)."""
    return bool(_ADDRESS_RE.match(value or ""))


def encode_address(address: str) -> str:
    """Left-pad an address to one word."""
    if not is_address(address):
        raise ValueError(f"Invalid address: {address!r}")
    return address[2:].lower().zfill(WORD_HEX_CHARS)


def encode_uint(value: int) -> str:
    """Encode an unsigned integer as one word."""
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"uint256 out of range: {value}")
    return hex(value)[2:].zfill(WORD_HEX_CHARS)


def decode_words(hex_result: str | None, min_words: int = 1) -> list[int]:
    """
    Split eth_call return data into 32-byte words.

    Raises:
        ContractRevertedError: Empty return data (the call produced nothing)
        DecodeError: Not hex, not word-aligned, or fewer than min_words words
    """
    if hex_result is None or hex_result in ("", "0x"):
        raise ContractRevertedError("Empty call result")

    if not isinstance(hex_result, str):
        raise DecodeError(
            f"Call result is not a hex string: {type(hex_result).__name__}",
        )

    data = hex_result[2:] if hex_result.startswith("0x") else hex_result

    if not _HEX_RE.match(data):
        raise DecodeError(
            "Call result is not hex",
            details={"raw": hex_result[:100]},
        )

    if len(data) % WORD_HEX_CHARS != 0:
        raise DecodeError(
            f"Call result not word-aligned: {len(data)} chars",
            details={"data_length": len(data), "raw": hex_result[:100]},
        )

    words = [
        int(data[i:i + WORD_HEX_CHARS], 16)
        for i in range(0, len(data), WORD_HEX_CHARS)
    ]

    if len(words) < min_words:
        raise DecodeError(
            f"Call result too short: {len(words)} words, expected >= {min_words}",
            details={"data_length": len(data), "raw": hex_result[:100]},
        )

    return words
