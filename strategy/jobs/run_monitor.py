#!/usr/bin/env python3
"""
strategy/jobs/run_monitor.py - CLI entrypoint for the arbitrage monitor.

Polls two routers for the configured pair every interval and reports the
best profitable direction, if any. Detection only: nothing is signed or sent.

Usage:
    dexarb-monitor --config config/settings.yaml
    dexarb-monitor --once --log-level DEBUG --no-json-logs
    python -m strategy.jobs.run_monitor --interval 10
"""

import asyncio
import signal
import sys
from typing import Optional

import click
import httpx

from chains.providers import RPCProvider
from config.settings import Settings, load_settings
from core.exceptions import ConfigError
from core.logging import get_logger, log_error, set_global_context, setup_logging
from dex.quote_source import QuoteSourceAdapter
from strategy.engine import ArbitrageEngine, EngineConfig
from strategy.reporting import ConsoleReporter, ReportSink
from strategy.scheduler import Scheduler

__version__ = "0.1.0"

logger = get_logger("dexarb.monitor")

EXIT_CONFIG_ERROR = 2


def build_scheduler(
    settings: Settings,
    provider: RPCProvider,
    reporter: Optional[ReportSink] = None,
    max_cycles: Optional[int] = None,
    interval_seconds: Optional[float] = None,
) -> Scheduler:
    """Wire adapters, engine and reporter from validated settings."""
    pair = settings.token_pair()
    endpoint_a, endpoint_b = settings.endpoints()

    engine = ArbitrageEngine(
        EngineConfig(
            pair=pair,
            params=settings.trade_parameters(),
            threshold=settings.profit_threshold,
            quote_timeout_seconds=settings.quote_timeout_seconds,
        ),
        QuoteSourceAdapter(endpoint_a, provider),
        QuoteSourceAdapter(endpoint_b, provider),
    )

    return Scheduler(
        engine,
        reporter or ConsoleReporter(pair),
        interval_seconds=interval_seconds or settings.poll_interval_seconds,
        max_cycles=max_cycles,
    )


async def run_monitor(
    settings: Settings,
    once: bool = False,
    interval_seconds: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> dict:
    """Run the scheduler until stopped. Returns the session summary."""
    provider = RPCProvider(
        chain_id=settings.chain_id,
        rpc_urls=list(settings.rpc_urls),
        timeout_seconds=settings.rpc_timeout_seconds(),
        transport=transport,
    )
    scheduler = build_scheduler(
        settings,
        provider,
        max_cycles=1 if once else None,
        interval_seconds=interval_seconds,
    )

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, scheduler.stop)
        except (NotImplementedError, RuntimeError):
            pass  # not supported on this platform / thread

    try:
        stats = await scheduler.run()
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.remove_signal_handler(sig)
            except (NotImplementedError, RuntimeError):
                pass
        await provider.close()

    summary = {
        "scheduler": stats.get_summary(),
        "rpc": provider.get_stats_summary(),
    }
    logger.info("Session summary", extra={"context": summary})
    return summary


@click.command()
@click.option("--config", "-c", "config_path", default=None, type=click.Path(), help="Settings YAML (default config/settings.yaml)")
@click.option("--once", is_flag=True, help="Run a single cycle and exit")
@click.option("--interval", "-i", default=None, type=float, help="Poll interval in seconds (overrides settings)")
@click.option("--log-level", "-l", default="INFO", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]))
@click.option("--json-logs/--no-json-logs", default=True)
@click.option("--log-file", default=None, type=click.Path(), help="Also write JSON logs to this file")
def main(
    config_path: Optional[str],
    once: bool,
    interval: Optional[float],
    log_level: str,
    json_logs: bool,
    log_file: Optional[str],
) -> None:
    """DEXARB Monitor - Cross-DEX price discrepancy detection."""
    setup_logging(level=log_level, json_output=json_logs, log_file=log_file)
    set_global_context(service="dexarb-monitor", version=__version__)

    if interval is not None and interval <= 0:
        raise click.BadParameter("must be positive", param_hint="--interval")

    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        log_error(logger, e)
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    set_global_context(chain_id=settings.chain_id)
    logger.info(
        "Starting DEXARB Monitor",
        extra={"context": {**settings.to_log_dict(), "once": once}},
    )

    try:
        asyncio.run(run_monitor(settings, once=once, interval_seconds=interval))
    except KeyboardInterrupt:
        logger.info("Monitor interrupted")
    except Exception as e:
        logger.error(f"Monitor error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
