# PATH: tests/unit/test_core_models.py
"""
Unit tests for core/models.py.
"""

from decimal import Decimal

import pytest

from core.constants import CycleStatus, ProtocolVariant
from core.exceptions import ContractRevertedError
from core.models import (
    CycleReport,
    ExchangeEndpoint,
    NormalizedRate,
    Opportunity,
    Profit,
    Token,
    TokenPair,
    TradeParameters,
)

WETH = Token("0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619", 18, "WETH")
USDC = Token("0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174", 6, "USDC")
DEX_A = ExchangeEndpoint("QuickSwap", "0x" + "a" * 40)
DEX_B = ExchangeEndpoint("SushiSwap", "0x" + "b" * 40)


class TestTokenPair:

    def test_decimals_and_path(self):
        pair = TokenPair(WETH, USDC)
        assert pair.decimals_in == 18
        assert pair.decimals_out == 6
        assert pair.path == [WETH.address, USDC.address]

    def test_label_uses_symbols(self):
        assert TokenPair(WETH, USDC).label == "WETH/USDC"

    def test_label_falls_back_to_address(self):
        pair = TokenPair(Token("0x" + "1" * 40, 18), USDC)
        assert pair.label == "0x11111111/USDC"

    def test_frozen(self):
        pair = TokenPair(WETH, USDC)
        with pytest.raises(AttributeError):
            pair.token_in = USDC


class TestExchangeEndpoint:

    def test_defaults_to_v2_router(self):
        assert DEX_A.protocol == ProtocolVariant.UNISWAP_V2_ROUTER
        assert DEX_A.fee_tier == 3000

    def test_to_dict(self):
        assert DEX_A.to_dict()["protocol"] == "uniswap_v2_router"


class TestTradeParameters:

    def test_trade_size_human_units(self):
        params = TradeParameters(amount_in=1000 * 10**6, decimals_in=6, gas_cost_estimate=Decimal("2"))
        assert params.trade_size == Decimal("1000")

    def test_rejects_zero(self):
        with pytest.raises(ValueError):
            TradeParameters(amount_in=0, decimals_in=6, gas_cost_estimate=Decimal("0"))

    def test_rejects_negative(self):
        with pytest.raises(ValueError):
            TradeParameters(amount_in=-5, decimals_in=6, gas_cost_estimate=Decimal("0"))

    def test_rejects_non_int(self):
        with pytest.raises(TypeError):
            TradeParameters(amount_in=Decimal("1"), decimals_in=6, gas_cost_estimate=Decimal("0"))
        with pytest.raises(TypeError):
            TradeParameters(amount_in=True, decimals_in=6, gas_cost_estimate=Decimal("0"))


class TestNormalizedRate:

    def test_zero_is_unusable(self):
        assert not NormalizedRate(Decimal(0), DEX_A).is_usable
        assert NormalizedRate(Decimal("0.000001"), DEX_A).is_usable

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            NormalizedRate(Decimal("-1"), DEX_A)


def _profit(buy: str, sell: str, net: str) -> Profit:
    return Profit(
        buy_rate=NormalizedRate(Decimal(buy), DEX_A),
        sell_rate=NormalizedRate(Decimal(sell), DEX_B),
        trade_size=Decimal("1000"),
        gross_proceeds=Decimal(sell) * 1000,
        cost_basis=Decimal(buy) * 1000,
        gas_cost=Decimal("2"),
        net_profit=Decimal(net),
    )


class TestOpportunity:

    def test_from_profit(self):
        opp = Opportunity.from_profit(_profit("1.00", "1.02", "18.0"), profitable=True)
        assert opp.buy_endpoint == DEX_A
        assert opp.sell_endpoint == DEX_B
        assert opp.buy_rate == Decimal("1.00")
        assert opp.sell_rate == Decimal("1.02")
        assert opp.gross_revenue == Decimal("1020")
        assert opp.net_profit == Decimal("18.0")
        assert opp.profitable is True

    def test_to_dict_has_no_float(self):
        opp = Opportunity.from_profit(_profit("1.00", "1.02", "18.0"), profitable=True)
        data = opp.to_dict()
        assert data["buy_dex"] == "QuickSwap"
        assert data["sell_dex"] == "SushiSwap"
        assert data["net_profit"] == "18.0"
        for key, value in data.items():
            assert not isinstance(value, float), key

    def test_direction_label(self):
        assert _profit("1", "1", "0").direction == "QuickSwap->SushiSwap"


class TestCycleReport:

    def test_failed_report(self):
        error = ContractRevertedError("Call reverted: INSUFFICIENT_LIQUIDITY")
        report = CycleReport(cycle=3, status=CycleStatus.FAILED, error=error)
        assert report.error_code == "FETCH_CONTRACT_REVERTED"
        assert "INSUFFICIENT_LIQUIDITY" in report.reason
        assert report.to_dict()["status"] == "FAILED"

    def test_unexpected_error_code_is_type_name(self):
        report = CycleReport(cycle=1, status=CycleStatus.FAILED, error=KeyError("x"))
        assert report.error_code == "KeyError"

    def test_no_liquidity_reason(self):
        rates = (NormalizedRate(Decimal(0), DEX_A), NormalizedRate(Decimal("1.01"), DEX_B))
        report = CycleReport(cycle=1, status=CycleStatus.NO_OPPORTUNITY, rates=rates)
        assert report.reason == "no liquidity on QuickSwap"
        assert report.error_code is None

    def test_below_threshold_reason(self):
        rates = (NormalizedRate(Decimal("1"), DEX_A), NormalizedRate(Decimal("1"), DEX_B))
        report = CycleReport(cycle=1, status=CycleStatus.NO_OPPORTUNITY, rates=rates)
        assert report.reason == "no direction above threshold"
        assert report.to_dict()["rates"] == {"QuickSwap": "1", "SushiSwap": "1"}
