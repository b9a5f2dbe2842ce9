# PATH: core/constants.py
"""
Constants for DEXARB.

Contains enums, defaults, and configuration constants.
"""

from enum import Enum
from typing import Final


# =============================================================================
# DEFAULTS
# =============================================================================

# Polygon PoS mainnet
DEFAULT_CHAIN_ID: Final[int] = 137

# Scheduler
DEFAULT_POLL_INTERVAL_SECONDS: Final[float] = 30.0

# Per quote call; split evenly across the failover endpoints (Settings.rpc_timeout_seconds)
DEFAULT_QUOTE_TIMEOUT_SECONDS: Final[float] = 10.0

# Per HTTP request when RPCProvider is built without settings
DEFAULT_RPC_TIMEOUT_SECONDS: Final[float] = 10.0

# Uniswap V3 fee tiers (in hundredths of a bip)
V3_FEE_TIERS: Final[tuple[int, ...]] = (100, 500, 3000, 10000)
DEFAULT_V3_FEE_TIER: Final[int] = 3000

# Significant digits used when dividing raw amounts into a rate
RATE_PRECISION: Final[int] = 50

# ERC-20 decimals outside this range are rejected by the config loader
MAX_TOKEN_DECIMALS: Final[int] = 36


class ProtocolVariant(str, Enum):
    """
    Router calling conventions understood by the quote source.

    Each member maps to one (encode, decode) pair in dex/quote_source.py.
    """
    UNISWAP_V2_ROUTER = "uniswap_v2_router"
    UNISWAP_V3_QUOTER = "uniswap_v3_quoter"


class CycleStatus(str, Enum):
    """Outcome of one polling cycle."""
    OPPORTUNITY = "OPPORTUNITY"
    NO_OPPORTUNITY = "NO_OPPORTUNITY"
    FAILED = "FAILED"


class SchedulerState(str, Enum):
    """Scheduler state machine: IDLE -> FETCHING -> EVALUATING -> REPORTING -> IDLE."""
    IDLE = "IDLE"
    FETCHING = "FETCHING"
    EVALUATING = "EVALUATING"
    REPORTING = "REPORTING"
    STOPPED = "STOPPED"
