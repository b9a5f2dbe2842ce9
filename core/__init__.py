"""
core - Core utilities and models for DEXARB.

This package contains:
- models.py: Data models (TokenPair, ExchangeEndpoint, Quote, Opportunity, ...)
- constants.py: Enums and defaults
- exceptions.py: Typed exceptions with error codes
- math.py: Safe Decimal conversions (no float)
- format_money.py: Display formatting for Decimal amounts
- time.py: Clock helpers
- logging.py: Structured JSON logging
"""

from core.constants import (
    CycleStatus,
    ProtocolVariant,
    SchedulerState,
)
from core.exceptions import (
    ConfigError,
    ContractRevertedError,
    DecodeError,
    DexArbError,
    ErrorCode,
    FetchError,
    NetworkError,
)
from core.logging import get_logger, setup_logging
from core.models import (
    CycleReport,
    ExchangeEndpoint,
    NormalizedRate,
    Opportunity,
    Profit,
    Quote,
    Token,
    TokenPair,
    TradeParameters,
)

__all__ = [
    # Constants
    "CycleStatus",
    "ProtocolVariant",
    "SchedulerState",
    # Exceptions
    "ConfigError",
    "ContractRevertedError",
    "DecodeError",
    "DexArbError",
    "ErrorCode",
    "FetchError",
    "NetworkError",
    # Models
    "CycleReport",
    "ExchangeEndpoint",
    "NormalizedRate",
    "Opportunity",
    "Profit",
    "Quote",
    "Token",
    "TokenPair",
    "TradeParameters",
    # Logging
    "get_logger",
    "setup_logging",
]
