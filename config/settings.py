# PATH: config/settings.py
"""
config/settings.py - Load and validate the monitor's settings.

Sources, lowest to highest precedence:
1. YAML file (flat keys, see config/settings.yaml)
2. DEXARB_<KEY> environment variables (scalar keys only)

String values may contain ${VAR} placeholders, resolved from the environment
after .env has been loaded. Everything is validated up front; any problem is
a ConfigError before a single RPC call is made.
"""

import os
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import load_dotenv

from core.constants import (
    DEFAULT_CHAIN_ID,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_QUOTE_TIMEOUT_SECONDS,
    DEFAULT_V3_FEE_TIER,
    MAX_TOKEN_DECIMALS,
    V3_FEE_TIERS,
    ProtocolVariant,
)
from core.exceptions import ConfigError, ErrorCode
from core.math import denormalize_from_decimals
from core.models import ExchangeEndpoint, Token, TokenPair, TradeParameters
from dex.adapters.abi import is_address

CONFIG_DIR = Path(__file__).parent
DEFAULT_SETTINGS_PATH = CONFIG_DIR / "settings.yaml"

ENV_PREFIX = "DEXARB_"

_PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

REQUIRED_KEYS = (
    "router_a",
    "router_b",
    "token_in",
    "token_out",
    "decimals_in",
    "decimals_out",
    "trade_amount",
    "gas_cost_estimate",
    "profit_threshold",
    "rpc_urls",
)

SCALAR_KEYS = REQUIRED_KEYS[:-1] + (
    "name_a",
    "name_b",
    "protocol_a",
    "protocol_b",
    "fee_tier_a",
    "fee_tier_b",
    "symbol_in",
    "symbol_out",
    "poll_interval_seconds",
    "quote_timeout_seconds",
    "chain_id",
)


@dataclass(frozen=True)
class Settings:
    """Validated configuration. Built once at startup."""
    router_a: str
    router_b: str
    token_in: str
    token_out: str
    decimals_in: int
    decimals_out: int
    trade_amount: Decimal
    gas_cost_estimate: Decimal
    profit_threshold: Decimal
    rpc_urls: tuple[str, ...]
    name_a: str = "DEX-A"
    name_b: str = "DEX-B"
    protocol_a: ProtocolVariant = ProtocolVariant.UNISWAP_V2_ROUTER
    protocol_b: ProtocolVariant = ProtocolVariant.UNISWAP_V2_ROUTER
    fee_tier_a: int = DEFAULT_V3_FEE_TIER
    fee_tier_b: int = DEFAULT_V3_FEE_TIER
    symbol_in: str = "TOKEN_IN"
    symbol_out: str = "TOKEN_OUT"
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    quote_timeout_seconds: float = DEFAULT_QUOTE_TIMEOUT_SECONDS
    chain_id: int = DEFAULT_CHAIN_ID

    def token_pair(self) -> TokenPair:
        return TokenPair(
            token_in=Token(self.token_in, self.decimals_in, self.symbol_in),
            token_out=Token(self.token_out, self.decimals_out, self.symbol_out),
        )

    def endpoints(self) -> tuple[ExchangeEndpoint, ExchangeEndpoint]:
        return (
            ExchangeEndpoint(self.name_a, self.router_a, self.protocol_a, self.fee_tier_a),
            ExchangeEndpoint(self.name_b, self.router_b, self.protocol_b, self.fee_tier_b),
        )

    def trade_parameters(self) -> TradeParameters:
        return TradeParameters(
            amount_in=denormalize_from_decimals(self.trade_amount, self.decimals_in),
            decimals_in=self.decimals_in,
            gas_cost_estimate=self.gas_cost_estimate,
        )

    def rpc_timeout_seconds(self) -> float:
        """Per-request timeout: each failover endpoint gets an equal share of the quote budget."""
        return self.quote_timeout_seconds / max(len(self.rpc_urls), 1)

    def to_log_dict(self) -> dict[str, Any]:
        """Settings safe to log (RPC URLs reduced to a count)."""
        return {
            "pair": f"{self.symbol_in}/{self.symbol_out}",
            "dex_a": self.name_a,
            "dex_b": self.name_b,
            "trade_amount": str(self.trade_amount),
            "gas_cost_estimate": str(self.gas_cost_estimate),
            "profit_threshold": str(self.profit_threshold),
            "poll_interval_seconds": self.poll_interval_seconds,
            "chain_id": self.chain_id,
            "rpc_endpoints": len(self.rpc_urls),
        }


# =============================================================================
# LOADING
# =============================================================================

def substitute_env(value: str, environ: Mapping[str, str]) -> str:
    """Replace ${VAR} with environ[VAR]; unset variables become ''."""
    return _PLACEHOLDER_RE.sub(lambda m: environ.get(m.group(1), ""), value)


def read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(
            f"Config file not found: {path}",
            code=ErrorCode.CONFIG_MISSING,
            details={"path": str(path)},
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {e}", details={"path": str(path)}) from e

    if not isinstance(raw, dict):
        raise ConfigError(
            f"Config file must be a mapping, got {type(raw).__name__}",
            details={"path": str(path)},
        )
    return raw


def merge_env_overrides(raw: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    merged = dict(raw)
    for key in SCALAR_KEYS:
        env_key = ENV_PREFIX + key.upper()
        if env_key in environ and environ[env_key] != "":
            merged[key] = environ[env_key]
    return merged


def load_settings(
    path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[str | Path] = None,
) -> Settings:
    """
    Load settings from YAML + environment.

    Args:
        path: YAML file (default config/settings.yaml)
        environ: Environment mapping; defaults to os.environ after loading .env
        dotenv_path: Explicit .env file; default is python-dotenv's search

    Raises:
        ConfigError: Missing file, missing key or invalid value
    """
    if environ is None:
        load_dotenv(dotenv_path)
        environ = os.environ

    config_path = Path(path) if path else DEFAULT_SETTINGS_PATH
    raw = merge_env_overrides(read_yaml(config_path), environ)
    return parse_settings(raw, environ)


# =============================================================================
# VALIDATION
# =============================================================================

def _require(raw: Mapping[str, Any], key: str) -> Any:
    value = raw.get(key)
    if value is None or (isinstance(value, str) and value.strip() == ""):
        raise ConfigError(
            f"Missing required setting: {key}",
            code=ErrorCode.CONFIG_MISSING,
            details={"key": key},
        )
    return value


def _invalid(key: str, value: Any, reason: str) -> ConfigError:
    return ConfigError(
        f"Invalid setting {key}={value!r}: {reason}",
        details={"key": key, "value": str(value)},
    )


def _address(raw: Mapping[str, Any], key: str, environ: Mapping[str, str]) -> str:
    value = _require(raw, key)
    if isinstance(value, int):
        # YAML reads an unquoted 0x... literal as a hex integer
        raise _invalid(key, value, "addresses must be quoted strings")
    value = substitute_env(str(value), environ).strip()
    if not is_address(value):
        raise _invalid(key, value, "expected 0x-prefixed 20-byte hex address")
    return value


def _int(raw: Mapping[str, Any], key: str, default: Optional[int] = None) -> int:
    if default is None:
        value = _require(raw, key)
    else:
        value = default if raw.get(key) is None else raw[key]
    if isinstance(value, bool):
        raise _invalid(key, value, "expected integer")
    try:
        return int(str(value).strip())
    except ValueError:
        raise _invalid(key, value, "expected integer") from None


def _decimal(raw: Mapping[str, Any], key: str) -> Decimal:
    value = _require(raw, key)
    if isinstance(value, bool):
        raise _invalid(key, value, "expected number")
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        raise _invalid(key, value, "expected number") from None
    if not result.is_finite():
        raise _invalid(key, value, "expected finite number")
    return result


def _positive_float(raw: Mapping[str, Any], key: str, default: float) -> float:
    value = default if raw.get(key) is None else raw[key]
    if isinstance(value, bool):
        raise _invalid(key, value, "expected number")
    try:
        result = float(str(value).strip())
    except ValueError:
        raise _invalid(key, value, "expected number") from None
    if not result > 0 or result == float("inf"):
        raise _invalid(key, value, "must be a positive number")
    return result


def _decimals(raw: Mapping[str, Any], key: str) -> int:
    value = _int(raw, key)
    if not 0 <= value <= MAX_TOKEN_DECIMALS:
        raise _invalid(key, value, f"must be between 0 and {MAX_TOKEN_DECIMALS}")
    return value


def _protocol(raw: Mapping[str, Any], key: str) -> ProtocolVariant:
    value = str(raw.get(key) or ProtocolVariant.UNISWAP_V2_ROUTER.value).strip().lower()
    try:
        return ProtocolVariant(value)
    except ValueError:
        allowed = ", ".join(p.value for p in ProtocolVariant)
        raise _invalid(key, value, f"expected one of {allowed}") from None


def _fee_tier(raw: Mapping[str, Any], key: str) -> int:
    value = _int(raw, key, DEFAULT_V3_FEE_TIER)
    if value not in V3_FEE_TIERS:
        raise _invalid(key, value, f"expected one of {V3_FEE_TIERS}")
    return value


def _rpc_urls(raw: Mapping[str, Any], environ: Mapping[str, str]) -> tuple[str, ...]:
    value = _require(raw, "rpc_urls")
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise _invalid("rpc_urls", value, "expected a URL or a list of URLs")

    urls = []
    for entry in value:
        url = substitute_env(str(entry), environ).strip()
        if not url:
            continue  # placeholder for an unset variable
        if not url.startswith(("http://", "https://")):
            raise _invalid("rpc_urls", url.split("://")[0], "expected http(s) URL")
        urls.append(url)

    if not urls:
        raise ConfigError(
            "No RPC URL configured (check POLYGON_RPC_URL or rpc_urls)",
            code=ErrorCode.CONFIG_MISSING,
            details={"key": "rpc_urls"},
        )
    return tuple(urls)


def parse_settings(raw: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Validate a flat mapping into Settings. Raises ConfigError."""
    environ = os.environ if environ is None else environ

    for key in REQUIRED_KEYS:
        _require(raw, key)

    decimals_in = _decimals(raw, "decimals_in")
    trade_amount = _decimal(raw, "trade_amount")
    if trade_amount <= 0:
        raise _invalid("trade_amount", trade_amount, "must be positive")
    if denormalize_from_decimals(trade_amount, decimals_in) <= 0:
        raise _invalid("trade_amount", trade_amount, f"rounds to zero at {decimals_in} decimals")

    gas_cost_estimate = _decimal(raw, "gas_cost_estimate")
    if gas_cost_estimate < 0:
        raise _invalid("gas_cost_estimate", gas_cost_estimate, "must not be negative")

    profit_threshold = _decimal(raw, "profit_threshold")
    if profit_threshold < 0:
        raise _invalid("profit_threshold", profit_threshold, "must not be negative")

    chain_id = _int(raw, "chain_id", DEFAULT_CHAIN_ID)
    if chain_id <= 0:
        raise _invalid("chain_id", chain_id, "must be positive")

    return Settings(
        router_a=_address(raw, "router_a", environ),
        router_b=_address(raw, "router_b", environ),
        token_in=_address(raw, "token_in", environ),
        token_out=_address(raw, "token_out", environ),
        decimals_in=decimals_in,
        decimals_out=_decimals(raw, "decimals_out"),
        trade_amount=trade_amount,
        gas_cost_estimate=gas_cost_estimate,
        profit_threshold=profit_threshold,
        rpc_urls=_rpc_urls(raw, environ),
        name_a=str(raw.get("name_a") or "DEX-A"),
        name_b=str(raw.get("name_b") or "DEX-B"),
        protocol_a=_protocol(raw, "protocol_a"),
        protocol_b=_protocol(raw, "protocol_b"),
        fee_tier_a=_fee_tier(raw, "fee_tier_a"),
        fee_tier_b=_fee_tier(raw, "fee_tier_b"),
        symbol_in=str(raw.get("symbol_in") or "TOKEN_IN"),
        symbol_out=str(raw.get("symbol_out") or "TOKEN_OUT"),
        poll_interval_seconds=_positive_float(raw, "poll_interval_seconds", DEFAULT_POLL_INTERVAL_SECONDS),
        quote_timeout_seconds=_positive_float(raw, "quote_timeout_seconds", DEFAULT_QUOTE_TIMEOUT_SECONDS),
        chain_id=chain_id,
    )
