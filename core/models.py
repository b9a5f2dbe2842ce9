# PATH: core/models.py
"""
Core data models for DEXARB.

Configuration-derived values (Token, TokenPair, ExchangeEndpoint,
TradeParameters) are built once at startup and shared read-only.
Per-cycle values (Quote, NormalizedRate, Profit, Opportunity, CycleReport)
are created fresh every cycle and never mutated after construction.

MONEY CONTRACT:
  - On-chain amounts are int in the token's smallest unit.
  - Rates and profits are Decimal, denominated in token_out.
  - Nothing here goes through float.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from core.constants import CycleStatus, DEFAULT_V3_FEE_TIER, ProtocolVariant
from core.math import normalize_to_decimals
from core.time import now_ms


# ============================================================================
# CONFIGURATION-DERIVED MODELS
# ============================================================================

@dataclass(frozen=True)
class Token:
    """ERC-20 token on the configured chain."""
    address: str
    decimals: int
    symbol: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "decimals": self.decimals,
            "symbol": self.symbol,
        }


@dataclass(frozen=True)
class TokenPair:
    """
    Directed token pair: quotes always swap token_in for token_out.

    Rates are expressed as token_out per 1 token_in.
    """
    token_in: Token
    token_out: Token

    @property
    def decimals_in(self) -> int:
        return self.token_in.decimals

    @property
    def decimals_out(self) -> int:
        return self.token_out.decimals

    @property
    def path(self) -> List[str]:
        return [self.token_in.address, self.token_out.address]

    @property
    def label(self) -> str:
        sym_in = self.token_in.symbol or self.token_in.address[:10]
        sym_out = self.token_out.symbol or self.token_out.address[:10]
        return f"{sym_in}/{sym_out}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token_in": self.token_in.to_dict(),
            "token_out": self.token_out.to_dict(),
        }


@dataclass(frozen=True)
class ExchangeEndpoint:
    """A pricing venue: router (or quoter) contract plus its calling convention."""
    name: str
    router_address: str
    protocol: ProtocolVariant = ProtocolVariant.UNISWAP_V2_ROUTER
    fee_tier: int = DEFAULT_V3_FEE_TIER  # UNISWAP_V3_QUOTER only

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "router_address": self.router_address,
            "protocol": self.protocol.value,
            "fee_tier": self.fee_tier,
        }


@dataclass(frozen=True)
class TradeParameters:
    """Fixed trade size and flat gas estimate, constant across cycles."""
    amount_in: int  # smallest unit of token_in
    decimals_in: int
    gas_cost_estimate: Decimal  # token_out units

    def __post_init__(self):
        if isinstance(self.amount_in, bool) or not isinstance(self.amount_in, int):
            raise TypeError(f"amount_in must be int, got {type(self.amount_in).__name__}")
        if self.amount_in <= 0:
            raise ValueError(f"amount_in must be positive, got {self.amount_in}")

    @property
    def trade_size(self) -> Decimal:
        """amount_in in human units of token_in (exact)."""
        return normalize_to_decimals(self.amount_in, self.decimals_in)


# ============================================================================
# PER-CYCLE MODELS
# ============================================================================

@dataclass(frozen=True)
class Quote:
    """Raw router answer for one endpoint in one cycle."""
    endpoint: ExchangeEndpoint
    amount_in: int
    amount_out: int
    latency_ms: int = 0
    timestamp_ms: int = field(default_factory=now_ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dex": self.endpoint.name,
            "amount_in": str(self.amount_in),
            "amount_out": str(self.amount_out),
            "latency_ms": self.latency_ms,
            "timestamp_ms": self.timestamp_ms,
        }


@dataclass(frozen=True)
class NormalizedRate:
    """
    token_out per 1 token_in on one endpoint, decimals removed.

    A value of exactly zero means the pool is empty and the rate is unusable.
    """
    value: Decimal
    endpoint: ExchangeEndpoint

    def __post_init__(self):
        if self.value < 0:
            raise ValueError(f"Rate must be non-negative, got {self.value}")

    @property
    def is_usable(self) -> bool:
        return self.value > 0


@dataclass(frozen=True)
class Profit:
    """Simulated round trip: buy on buy_rate's venue, sell on sell_rate's venue."""
    buy_rate: NormalizedRate
    sell_rate: NormalizedRate
    trade_size: Decimal
    gross_proceeds: Decimal
    cost_basis: Decimal
    gas_cost: Decimal
    net_profit: Decimal

    @property
    def buy_endpoint(self) -> ExchangeEndpoint:
        return self.buy_rate.endpoint

    @property
    def sell_endpoint(self) -> ExchangeEndpoint:
        return self.sell_rate.endpoint

    @property
    def is_usable(self) -> bool:
        return self.buy_rate.is_usable and self.sell_rate.is_usable

    @property
    def direction(self) -> str:
        return f"{self.buy_endpoint.name}->{self.sell_endpoint.name}"


@dataclass(frozen=True)
class Opportunity:
    """A direction whose simulated net profit cleared the threshold."""
    buy_endpoint: ExchangeEndpoint
    sell_endpoint: ExchangeEndpoint
    buy_rate: Decimal
    sell_rate: Decimal
    trade_size: Decimal
    gross_revenue: Decimal
    gas_cost: Decimal
    net_profit: Decimal
    profitable: bool
    detected_at_ms: int = field(default_factory=now_ms)

    @classmethod
    def from_profit(cls, profit: Profit, profitable: bool) -> "Opportunity":
        return cls(
            buy_endpoint=profit.buy_endpoint,
            sell_endpoint=profit.sell_endpoint,
            buy_rate=profit.buy_rate.value,
            sell_rate=profit.sell_rate.value,
            trade_size=profit.trade_size,
            gross_revenue=profit.gross_proceeds,
            gas_cost=profit.gas_cost,
            net_profit=profit.net_profit,
            profitable=profitable,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "buy_dex": self.buy_endpoint.name,
            "sell_dex": self.sell_endpoint.name,
            "buy_rate": str(self.buy_rate),
            "sell_rate": str(self.sell_rate),
            "trade_size": str(self.trade_size),
            "gross_revenue": str(self.gross_revenue),
            "gas_cost": str(self.gas_cost),
            "net_profit": str(self.net_profit),
            "profitable": self.profitable,
            "detected_at_ms": self.detected_at_ms,
        }


@dataclass(frozen=True)
class CycleReport:
    """What the reporting sink receives once per completed cycle."""
    cycle: int
    status: CycleStatus
    opportunity: Optional[Opportunity] = None
    rates: tuple[NormalizedRate, ...] = ()
    error: Optional[Exception] = None  # FetchError, or an unexpected failure
    duration_ms: int = 0

    @property
    def error_code(self) -> Optional[str]:
        if self.error is None:
            return None
        code = getattr(self.error, "code", None)
        return code.value if code is not None else type(self.error).__name__

    @property
    def reason(self) -> str:
        if self.status == CycleStatus.OPPORTUNITY:
            return "net profit above threshold"
        if self.status == CycleStatus.FAILED:
            return str(self.error) if self.error else "cycle failed"
        unusable = [r.endpoint.name for r in self.rates if not r.is_usable]
        if unusable:
            return f"no liquidity on {', '.join(unusable)}"
        return "no direction above threshold"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cycle": self.cycle,
            "status": self.status.value,
            "reason": self.reason,
            "rates": {r.endpoint.name: str(r.value) for r in self.rates},
            "opportunity": self.opportunity.to_dict() if self.opportunity else None,
            "error_code": self.error_code,
            "duration_ms": self.duration_ms,
        }
