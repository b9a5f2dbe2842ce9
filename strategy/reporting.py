"""
strategy/reporting.py - Reporting sinks for cycle results.

The engine only produces CycleReport values; where they go is decided here.

Sinks:
- LogReporter: structured log records (INFO for results, WARNING for failures)
- ConsoleReporter: LogReporter plus an alert banner on opportunities
- CompositeReporter: fan out to several sinks
"""

from typing import Protocol

import click

from core.constants import CycleStatus
from core.format_money import format_money, format_rate
from core.logging import ContextAdapter, get_logger, log_opportunity
from core.models import CycleReport, Opportunity, TokenPair

logger = get_logger("dexarb.report")


class ReportSink(Protocol):
    """Anything that can consume a finished cycle."""

    def report(self, report: CycleReport) -> None:
        ...


class LogReporter:
    """Report every cycle through structured logging."""

    def __init__(self, pair: TokenPair, log: ContextAdapter | None = None):
        self.pair = pair
        self.log = log or logger

    def report(self, report: CycleReport) -> None:
        context = {
            "cycle": report.cycle,
            "status": report.status.value,
            "duration_ms": report.duration_ms,
        }

        if report.status == CycleStatus.FAILED:
            self.log.warning(
                f"Cycle {report.cycle} skipped: {report.reason}",
                extra={"context": {
                    **context,
                    "error_code": report.error_code,
                    "details": getattr(report.error, "details", {}),
                }},
            )
            return

        sym_out = self.pair.token_out.symbol
        for rate in report.rates:
            self.log.info(
                f"Price on {rate.endpoint.name}: 1 {self.pair.token_in.symbol} -> "
                f"{format_rate(rate.value)} {sym_out}",
                extra={"context": {"cycle": report.cycle, "dex": rate.endpoint.name, "rate": str(rate.value)}},
            )

        if report.opportunity is not None:
            opp = report.opportunity
            log_opportunity(
                self.log,
                buy_dex=opp.buy_endpoint.name,
                sell_dex=opp.sell_endpoint.name,
                net_profit=f"{format_money(opp.net_profit)} {sym_out}",
                **context,
                opportunity=opp.to_dict(),
            )
            return

        self.log.info(
            f"Cycle {report.cycle}: no opportunity ({report.reason})",
            extra={"context": context},
        )


class ConsoleReporter(LogReporter):
    """LogReporter that also prints an alert banner for opportunities."""

    def __init__(
        self,
        pair: TokenPair,
        log: ContextAdapter | None = None,
        echo=click.echo,
    ):
        super().__init__(pair, log)
        self.echo = echo

    def report(self, report: CycleReport) -> None:
        super().report(report)
        if report.opportunity is not None:
            self.echo(format_opportunity_banner(report.opportunity, self.pair))


class CompositeReporter:
    """Send each report to every sink in order."""

    def __init__(self, *sinks: ReportSink):
        self.sinks = sinks

    def report(self, report: CycleReport) -> None:
        for sink in self.sinks:
            sink.report(report)


def format_opportunity_banner(opportunity: Opportunity, pair: TokenPair) -> str:
    """Human-readable alert block for one opportunity."""
    sym_in = pair.token_in.symbol or "token_in"
    sym_out = pair.token_out.symbol or "token_out"
    size = opportunity.trade_size.normalize()
    rule = "!" * 60

    lines = [
        "",
        rule,
        "!!! Arbitrage Opportunity Detected",
        rule,
        f"  - Action: BUY {size} {sym_in} on {opportunity.buy_endpoint.name} "
        f"@ {format_rate(opportunity.buy_rate)} {sym_out}",
        f"  - Action: SELL {size} {sym_in} on {opportunity.sell_endpoint.name} "
        f"@ {format_rate(opportunity.sell_rate)} {sym_out}",
        f"  - Gross Revenue: {format_money(opportunity.gross_revenue)} {sym_out}",
        f"  - Est. Gross Profit: {format_money(opportunity.net_profit + opportunity.gas_cost)} {sym_out}",
        f"  - Simplified Gas Cost: -{format_money(opportunity.gas_cost)} {sym_out}",
        f"  - SIMULATED NET PROFIT: {format_money(opportunity.net_profit)} {sym_out}",
        rule,
        "",
    ]
    return "\n".join(lines)
