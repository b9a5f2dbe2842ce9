"""
strategy/engine.py - Arbitrage detection pipeline for one cycle.

Pipeline:
1. Fetch quotes from both endpoints concurrently (join before evaluating)
2. Normalize both quotes into rates
3. Compute A->B and B->A profits
4. Evaluate against the threshold

Any FetchError from either side fails the whole cycle; there is no partial
evaluation with only one quote.
"""

import asyncio
import time
from dataclasses import dataclass
from decimal import Decimal

from core.constants import CycleStatus, DEFAULT_QUOTE_TIMEOUT_SECONDS
from core.exceptions import FetchError, NetworkError
from core.logging import get_logger
from core.models import CycleReport, Quote, TokenPair, TradeParameters
from core.time import elapsed_ms
from dex.quote_source import QuoteSourceAdapter
from strategy.evaluator import evaluate
from strategy.normalizer import normalize
from strategy.profit import compute_directional_profits

logger = get_logger("dexarb.engine")


@dataclass(frozen=True)
class EngineConfig:
    """Immutable inputs shared by every cycle."""
    pair: TokenPair
    params: TradeParameters
    threshold: Decimal
    quote_timeout_seconds: float = DEFAULT_QUOTE_TIMEOUT_SECONDS


class ArbitrageEngine:
    """
    Runs the fetch -> normalize -> compute -> evaluate pipeline.

    Usage:
        engine = ArbitrageEngine(config, adapter_a, adapter_b)
        report = await engine.run_cycle(cycle=1)
    """

    def __init__(
        self,
        config: EngineConfig,
        adapter_a: QuoteSourceAdapter,
        adapter_b: QuoteSourceAdapter,
    ):
        self.config = config
        self.adapter_a = adapter_a
        self.adapter_b = adapter_b

    async def _fetch_one(self, adapter: QuoteSourceAdapter) -> Quote:
        """Fetch one quote, bounded by the per-call timeout."""
        try:
            return await asyncio.wait_for(
                adapter.get_quote(self.config.pair, self.config.params.amount_in),
                timeout=self.config.quote_timeout_seconds,
            )
        except asyncio.TimeoutError:
            raise NetworkError(
                f"Quote from {adapter.name} timed out after {self.config.quote_timeout_seconds}s",
                details={"dex": adapter.name, "timeout_seconds": self.config.quote_timeout_seconds},
            ) from None

    async def fetch_quotes(self) -> tuple[Quote, Quote]:
        """
        Fan out to both endpoints and wait for both to finish.

        Raises:
            FetchError: The first failure in declaration order
        """
        results = await asyncio.gather(
            self._fetch_one(self.adapter_a),
            self._fetch_one(self.adapter_b),
            return_exceptions=True,
        )

        for result in results:
            if isinstance(result, BaseException):
                raise result

        quote_a, quote_b = results
        return quote_a, quote_b

    def evaluate_quotes(self, cycle: int, quote_a: Quote, quote_b: Quote, duration_ms: int = 0) -> CycleReport:
        """Normalize, compute both directions and evaluate. Pure."""
        pair = self.config.pair
        rate_a = normalize(quote_a, pair)
        rate_b = normalize(quote_b, pair)

        a_to_b, b_to_a = compute_directional_profits(rate_a, rate_b, self.config.params)
        opportunity = evaluate(a_to_b, b_to_a, self.config.threshold)

        return CycleReport(
            cycle=cycle,
            status=CycleStatus.OPPORTUNITY if opportunity else CycleStatus.NO_OPPORTUNITY,
            opportunity=opportunity,
            rates=(rate_a, rate_b),
            duration_ms=duration_ms,
        )

    def failed_report(self, cycle: int, error: Exception, started: float) -> CycleReport:
        """
        FAILED report for a cycle that raised.

        FetchError is routine and logged at debug; anything else is
        unexpected and logged with its traceback.
        """
        if isinstance(error, FetchError):
            logger.debug(
                f"Cycle {cycle} fetch failed: {error}",
                extra={"context": {"cycle": cycle, "error_code": error.code.value}},
            )
        else:
            logger.error(
                f"Cycle {cycle} failed unexpectedly: {error}",
                extra={"context": {"cycle": cycle, "error_type": type(error).__name__}},
                exc_info=error,
            )
        return CycleReport(
            cycle=cycle,
            status=CycleStatus.FAILED,
            error=error,
            duration_ms=elapsed_ms(started),
        )

    async def run_cycle(self, cycle: int) -> CycleReport:
        """
        Run one full cycle without a scheduler (no shutdown race).

        Exceptions never escape: they become a FAILED report.
        """
        start = time.monotonic()

        try:
            quote_a, quote_b = await self.fetch_quotes()
            return self.evaluate_quotes(cycle, quote_a, quote_b, duration_ms=elapsed_ms(start))
        except Exception as e:
            return self.failed_report(cycle, e, start)

