# PATH: core/exceptions.py
"""
Typed exceptions for DEXARB.

Two families:
- FetchError: per-cycle, recoverable. The cycle is skipped, the loop continues.
- ConfigError: fatal, raised at startup before the engine runs.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Error codes carried by every DexArbError."""
    # Quote fetching
    FETCH_NETWORK = "FETCH_NETWORK"
    FETCH_CONTRACT_REVERTED = "FETCH_CONTRACT_REVERTED"
    FETCH_DECODE_ERROR = "FETCH_DECODE_ERROR"

    # Configuration
    CONFIG_MISSING = "CONFIG_MISSING"
    CONFIG_INVALID = "CONFIG_INVALID"

    UNKNOWN = "UNKNOWN"


class DexArbError(Exception):
    """Base exception for DEXARB."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class FetchError(DexArbError):
    """A quote could not be obtained from an exchange endpoint."""


class NetworkError(FetchError):
    """Transport failure, HTTP error or timeout."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, ErrorCode.FETCH_NETWORK, details)


class ContractRevertedError(FetchError):
    """The router's view call reverted (no liquidity, invalid path, ...)."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, ErrorCode.FETCH_CONTRACT_REVERTED, details)


class DecodeError(FetchError):
    """Return data did not have the expected numeric shape."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, ErrorCode.FETCH_DECODE_ERROR, details)


class ConfigError(DexArbError):
    """Missing or malformed settings. Fatal at startup."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
