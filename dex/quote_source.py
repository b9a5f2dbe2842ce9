"""
dex/quote_source.py - Quote Source Adapter.

One adapter per exchange endpoint. The endpoint's ProtocolVariant selects the
calling convention from a fixed table; new venues are added by adding a
variant and its adapter module, never by branching in the engine.

Usage:
    adapter = QuoteSourceAdapter(endpoint, provider)
    quote = await adapter.get_quote(pair, amount_in)
"""

import time
from typing import Callable, NamedTuple

from chains.providers import RPCProvider
from core.constants import ProtocolVariant
from core.exceptions import FetchError
from core.logging import get_logger
from core.models import ExchangeEndpoint, Quote, TokenPair
from dex.adapters import uniswap_v2, uniswap_v3

logger = get_logger(__name__)


class CallingConvention(NamedTuple):
    """How to ask one router ABI shape for an output amount."""
    build_call: Callable[[ExchangeEndpoint, TokenPair, int], str]
    parse_amount_out: Callable[[str, TokenPair], int]


CALLING_CONVENTIONS: dict[ProtocolVariant, CallingConvention] = {
    ProtocolVariant.UNISWAP_V2_ROUTER: CallingConvention(
        uniswap_v2.build_call, uniswap_v2.parse_amount_out,
    ),
    ProtocolVariant.UNISWAP_V3_QUOTER: CallingConvention(
        uniswap_v3.build_call, uniswap_v3.parse_amount_out,
    ),
}


class QuoteSourceAdapter:
    """
    Read-only quote source for a single exchange endpoint.

    Holds no state between calls beyond its constructor arguments.
    """

    def __init__(self, endpoint: ExchangeEndpoint, provider: RPCProvider):
        if endpoint.protocol not in CALLING_CONVENTIONS:
            raise ValueError(f"Unsupported protocol variant: {endpoint.protocol}")

        self.endpoint = endpoint
        self.provider = provider
        self._convention = CALLING_CONVENTIONS[endpoint.protocol]

    @property
    def name(self) -> str:
        return self.endpoint.name

    async def get_quote(self, pair: TokenPair, amount_in: int) -> Quote:
        """
        Ask the endpoint how much token_out it pays for amount_in of token_in.

        Args:
            pair: Token pair (token_in -> token_out)
            amount_in: Input amount in token_in's smallest unit, > 0

        Returns:
            Quote with the exact on-chain output amount

        Raises:
            ValueError: amount_in is not a positive int (caller error)
            NetworkError: Transport failure or timeout
            ContractRevertedError: The router call reverted
            DecodeError: Return data could not be parsed
        """
        if isinstance(amount_in, bool) or not isinstance(amount_in, int):
            raise ValueError(f"amount_in must be int, got {type(amount_in).__name__}")
        if amount_in <= 0:
            raise ValueError(f"amount_in must be positive, got {amount_in}")

        call_data = self._convention.build_call(self.endpoint, pair, amount_in)

        start = time.monotonic()
        try:
            response = await self.provider.eth_call(
                to=self.endpoint.router_address,
                data=call_data,
            )
            amount_out = self._convention.parse_amount_out(response.result, pair)
        except FetchError as e:
            e.details.setdefault("dex", self.endpoint.name)
            e.details.setdefault("router", self.endpoint.router_address)
            e.details.setdefault("call_data_prefix", call_data[:10])
            raise
        latency_ms = int((time.monotonic() - start) * 1000)

        logger.debug(
            f"Quote {self.endpoint.name}: {pair.label} {amount_in} -> {amount_out}",
            extra={"context": {
                "dex": self.endpoint.name,
                "amount_in": amount_in,
                "amount_out": amount_out,
                "latency_ms": latency_ms,
            }},
        )

        return Quote(
            endpoint=self.endpoint,
            amount_in=amount_in,
            amount_out=amount_out,
            latency_ms=latency_ms,
        )
