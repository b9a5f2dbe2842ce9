"""
strategy/scheduler.py - Fixed-interval polling loop.

State machine (repeats until stop()):
    IDLE -> FETCHING -> EVALUATING -> REPORTING -> IDLE
    any  -> STOPPED

Guarantees:
- Tick n is due at start + n * interval; ticks missed by a slow cycle are
  skipped, never run back to back.
- A failed cycle (FetchError or anything unexpected) is reported and the loop
  carries on.
- stop() takes effect at the next suspension point: the inter-tick sleep wakes
  immediately, an in-flight fetch is cancelled and its cycle is dropped
  unreported. A cycle is either reported once in full or not at all.
"""

import asyncio
import math
import time
from collections import Counter
from dataclasses import dataclass, field

from core.constants import CycleStatus, DEFAULT_POLL_INTERVAL_SECONDS, SchedulerState
from core.logging import get_logger
from core.models import CycleReport, Quote
from core.time import elapsed_ms
from strategy.engine import ArbitrageEngine
from strategy.reporting import ReportSink

logger = get_logger("dexarb.scheduler")


@dataclass
class SchedulerStats:
    """Counters for one scheduler run."""
    cycles_run: int = 0
    cycles_failed: int = 0
    cycles_abandoned: int = 0
    opportunities: int = 0
    ticks_skipped: int = 0
    failures_by_code: Counter = field(default_factory=Counter)

    def record(self, report: CycleReport) -> None:
        self.cycles_run += 1
        if report.status == CycleStatus.FAILED:
            self.cycles_failed += 1
            self.failures_by_code[report.error_code or "UNKNOWN"] += 1
        elif report.status == CycleStatus.OPPORTUNITY:
            self.opportunities += 1

    def get_summary(self) -> dict:
        return {
            "cycles_run": self.cycles_run,
            "cycles_failed": self.cycles_failed,
            "cycles_abandoned": self.cycles_abandoned,
            "opportunities": self.opportunities,
            "ticks_skipped": self.ticks_skipped,
            "failures_by_code": dict(self.failures_by_code),
        }


class Scheduler:
    """
    Drives ArbitrageEngine once per tick and hands results to a ReportSink.

    Usage:
        scheduler = Scheduler(engine, reporter, interval_seconds=30)
        loop.add_signal_handler(signal.SIGTERM, scheduler.stop)
        await scheduler.run()
    """

    def __init__(
        self,
        engine: ArbitrageEngine,
        reporter: ReportSink,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_cycles: int | None = None,
    ):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")

        self.engine = engine
        self.reporter = reporter
        self.interval_seconds = interval_seconds
        self.max_cycles = max_cycles
        self.state = SchedulerState.IDLE
        self.stats = SchedulerStats()
        self._stop_event = asyncio.Event()

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Request cooperative shutdown. Safe to call more than once."""
        if not self._stop_event.is_set():
            logger.info("Shutdown requested", extra={"context": {"state": self.state.value}})
        self._stop_event.set()

    def _limit_reached(self) -> bool:
        return self.max_cycles is not None and self.stats.cycles_run >= self.max_cycles

    async def run(self) -> SchedulerStats:
        """Run until stop() or max_cycles. Returns the run's counters."""
        loop = asyncio.get_running_loop()
        started_at = loop.time()
        cycle = 0

        logger.info(
            "Scheduler started",
            extra={"context": {"interval_seconds": self.interval_seconds, "max_cycles": self.max_cycles}},
        )

        tick = 0
        try:
            while not self.stop_requested and not self._limit_reached():
                cycle += 1
                await self.run_cycle(cycle)

                if self.stop_requested or self._limit_reached():
                    break

                tick = await self._sleep_until_next_tick(loop, started_at, tick)
        finally:
            self.state = SchedulerState.STOPPED

        logger.info("Scheduler stopped", extra={"context": self.stats.get_summary()})
        return self.stats

    async def _sleep_until_next_tick(
        self,
        loop: asyncio.AbstractEventLoop,
        started_at: float,
        tick: int,
    ) -> int:
        """Sleep until the next tick boundary (or stop). Returns that tick's index."""
        now = loop.time()
        next_tick = max(tick + 1, math.floor((now - started_at) / self.interval_seconds) + 1)

        skipped = next_tick - tick - 1
        if skipped:
            self.stats.ticks_skipped += skipped
            logger.warning(
                f"Cycle overran interval, skipping {skipped} tick(s)",
                extra={"context": {"interval_seconds": self.interval_seconds, "skipped": skipped}},
            )

        delay = started_at + next_tick * self.interval_seconds - now
        if delay > 0:
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass  # tick is due

        return next_tick

    async def _fetch_or_stop(self) -> tuple[Quote, Quote] | None:
        """
        Race the quote fetch against stop().

        Returns None when shutdown won; the fetch is cancelled and awaited.
        Raises whatever fetch_quotes raises.
        """
        fetch = asyncio.ensure_future(self.engine.fetch_quotes())
        stop_wait = asyncio.ensure_future(self._stop_event.wait())

        try:
            await asyncio.wait({fetch, stop_wait}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            fetch.cancel()
            stop_wait.cancel()
            raise

        stop_wait.cancel()
        if not fetch.done():
            fetch.cancel()
            await asyncio.gather(fetch, return_exceptions=True)
            return None

        return fetch.result()

    async def run_cycle(self, cycle: int) -> CycleReport | None:
        """
        One pass through the state machine.

        Returns the report handed to the sink, or None if the cycle was
        abandoned because of shutdown.
        """
        start = time.monotonic()
        self.state = SchedulerState.FETCHING

        try:
            quotes = await self._fetch_or_stop()
        except Exception as e:
            report = self.engine.failed_report(cycle, e, start)
        else:
            if quotes is None or self.stop_requested:
                self.stats.cycles_abandoned += 1
                self.state = SchedulerState.IDLE
                logger.info(f"Cycle {cycle} abandoned on shutdown")
                return None

            self.state = SchedulerState.EVALUATING
            try:
                report = self.engine.evaluate_quotes(cycle, *quotes, duration_ms=elapsed_ms(start))
            except Exception as e:
                report = self.engine.failed_report(cycle, e, start)

        self.state = SchedulerState.REPORTING
        self.stats.record(report)
        try:
            self.reporter.report(report)
        except Exception as e:
            logger.error(
                f"Reporter failed for cycle {cycle}: {e}",
                extra={"context": {"cycle": cycle}},
                exc_info=True,
            )

        self.state = SchedulerState.IDLE
        return report
