# PATH: core/logging.py
"""
core/logging.py - Structured logging.

All contextual fields are passed only via extra={"context": {...}}.

JSON records carry:
- timestamp (ISO 8601, UTC, milliseconds)
- level, logger, message
- error_code (lifted out of context when present, for easy filtering)
- context (global context + adapter context + call context)
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from core.exceptions import DexArbError

# Merged into every JSON record (service, version, chain_id)
_global_context: dict[str, Any] = {}

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")

CONSOLE_CONTEXT_FIELDS = 4


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    return dict(getattr(record, "context", None) or {})


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    {"timestamp": "2026-01-04T12:00:00.000+00:00", "level": "WARNING",
     "logger": "dexarb.report", "message": "Cycle 7 skipped: ...",
     "error_code": "FETCH_NETWORK", "context": {"cycle": 7, ...}}
    """

    def format(self, record: logging.LogRecord) -> str:
        context = {**_global_context, **_record_context(record)}
        if record.exc_info:
            context["exception"] = self.formatException(record.exc_info)

        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if "error_code" in context:
            entry["error_code"] = context["error_code"]
        if context:
            entry["context"] = context

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Single human-readable line; only the first few context fields are shown."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{timestamp} | {record.levelname:<8} | {record.name} | {record.getMessage()}"

        context = _record_context(record)
        if context:
            shown = list(context.items())[:CONSOLE_CONTEXT_FIELDS]
            line += " | " + ", ".join(f"{k}={v}" for k, v in shown)
            hidden = len(context) - len(shown)
            if hidden:
                line += f", ... (+{hidden} more)"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


class ContextAdapter(logging.LoggerAdapter):
    """Merges the adapter's fixed context under each call's context."""

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        call_context = kwargs.get("extra", {}).get("context", {})
        kwargs["extra"] = {"context": {**self.extra, **call_context}}
        return msg, kwargs


def set_global_context(**kwargs: Any) -> None:
    """
    Add fields to every JSON record from now on.

    Example:
        set_global_context(service="dexarb-monitor", chain_id=137)
    """
    _global_context.update(kwargs)


def clear_global_context() -> None:
    _global_context.clear()


def get_logger(name: str, **context: Any) -> ContextAdapter:
    """
    Get a logger with optional default context.

    Example:
        logger = get_logger("dexarb.quote_source", dex="QuickSwap")
        logger.info("Quote fetched", extra={"context": {"latency_ms": 50}})
    """
    return ContextAdapter(logging.getLogger(name), context)


def setup_logging(
    level: str = "INFO",
    json_output: bool = True,
    log_file: str | None = None,
) -> None:
    """
    Configure the root logger. Replaces any existing handlers.

    Args:
        level: DEBUG, INFO, WARNING or ERROR
        json_output: JSON lines on stdout (default) or ConsoleFormatter
        log_file: Optional file path; always written as JSON
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JSONFormatter() if json_output else ConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def log_opportunity(
    logger: ContextAdapter,
    buy_dex: str,
    sell_dex: str,
    net_profit: str,
    **extra: Any,
) -> None:
    """INFO record for a detected opportunity."""
    logger.info(
        f"Opportunity: BUY {buy_dex} -> SELL {sell_dex} | net {net_profit}",
        extra={"context": {
            "buy_dex": buy_dex,
            "sell_dex": sell_dex,
            "net_profit": net_profit,
            **extra,
        }},
    )


def log_error(logger: ContextAdapter, error: DexArbError, **extra: Any) -> None:
    """ERROR record for a typed error: code, message and details as context."""
    logger.error(
        str(error),
        extra={"context": {
            "error_code": error.code.value,
            **error.details,
            **extra,
        }},
    )
