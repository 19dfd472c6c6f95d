"""
Tests for snapshot ingestion and wallet holdings preparation.
"""

import json

import pytest

from bag_rebalancer.core.exceptions import InvalidSnapshot
from bag_rebalancer.data.holdings import (
    build_holdings,
    holdings_to_usd,
    resolve_investment_amount,
    scale_holdings,
)
from bag_rebalancer.data.loader import MarketSnapshotLoader
from bag_rebalancer.data.models import MarketToken, clean_symbol


class TestMarketToken:

    def test_nested_record(self):
        token = MarketToken.from_record({
            "symbol": "ETH",
            "address": "0x1",
            "market": {"currentPrice": 3000, "marketCap": 4e11, "starknetTvl": 1e8},
            "linePriceFeedInUsd": [{"date": "a", "value": 2900}, {"date": "b", "value": 3000}],
        })
        assert token.symbol == "ETH"
        assert token.current_price == 3000.0
        assert token.effective_market_cap == 4e11
        assert token.price_history == (2900.0, 3000.0)
        assert token.address == "0x1"

    def test_flat_record_with_tvl_fallback(self):
        token = MarketToken.from_record({
            "symbol": "LORDS", "currentPrice": 0.1, "marketCap": 0, "tvl": 5e6, "priceHistory": [0.09, 0.1],
        })
        assert token.market_cap == 0.0
        assert token.effective_market_cap == 5e6
        assert token.price_history == (0.09, 0.1)

    def test_missing_history_points_skipped(self):
        token = MarketToken.from_record({"symbol": "X", "linePriceFeedInUsd": [{"value": None}, {"value": 2}]})
        assert token.price_history == (2.0,)

    def test_clean_symbol(self):
        assert clean_symbol("\b8") == "8"
        assert clean_symbol("SCHIZODIO ") == "SCHIZODIO"
        assert clean_symbol(None) == ""


class TestMarketSnapshotLoader:

    def test_load_list(self, config, snapshot_records):
        tokens = MarketSnapshotLoader(config).load(snapshot_records)
        assert [t.symbol for t in tokens] == ["ETH", "WBTC", "STRK", "USDC", "LORDS", "xSTRK", "EKUBO"]
        assert len(tokens[0].price_history) == 168

    def test_load_symbol_keyed_mapping(self, config):
        tokens = MarketSnapshotLoader(config).load({
            "BTC": {"market": {"currentPrice": 60000, "marketCap": 1.2e12}},
            "ETH": {"symbol": "ETH", "market": {"currentPrice": 3000, "marketCap": 4e11}},
        })
        assert [t.symbol for t in tokens] == ["BTC", "ETH"]

    def test_market_cap_override(self, config, snapshot_records):
        config.universe.market_cap_overrides = {"WBTC": 1.3e12}
        tokens = {t.symbol: t for t in MarketSnapshotLoader(config).load(snapshot_records)}
        assert tokens["WBTC"].market_cap == 1.3e12
        assert tokens["ETH"].market_cap == 400e9

    def test_bad_records_skipped(self, config):
        tokens = MarketSnapshotLoader(config).load([
            "garbage",
            {"market": {"currentPrice": 1.0}},
            {"symbol": "BAD", "market": {"currentPrice": "n/a"}},
            {"symbol": "OK", "market": {"currentPrice": 2.0, "marketCap": 10.0}},
        ])
        assert [t.symbol for t in tokens] == ["OK"]

    def test_wrong_snapshot_type(self, config):
        with pytest.raises(InvalidSnapshot):
            MarketSnapshotLoader(config).load("ETH,BTC")

    def test_load_file(self, config, snapshot_records, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(snapshot_records))
        assert len(MarketSnapshotLoader(config).load_file(str(path))) == 7

    def test_load_file_invalid_json(self, config, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text("{not json")
        with pytest.raises(InvalidSnapshot):
            MarketSnapshotLoader(config).load_file(str(path))


class TestHoldings:

    def test_gas_reserve_withheld(self):
        holdings = build_holdings({"ETH": 1.0, "USDC": 500.0}, {"ETH": 3000.0, "USDC": 1.0})
        usd = holdings_to_usd(holdings)
        assert usd == {"ETH": pytest.approx(2998.0), "USDC": pytest.approx(500.0)}
        assert holdings[0].quantity == pytest.approx(1.0 - 2.0 / 3000.0)

    def test_reserve_never_exceeds_gas_balance(self):
        holdings = build_holdings({"ETH": 0.0005}, {"ETH": 3000.0})
        assert holdings[0].total_usd == pytest.approx(0.0)

    def test_zero_balances_dropped(self):
        holdings = build_holdings({"STRK": 0, "EKUBO": 3}, {"STRK": 0.5, "EKUBO": 4.0}, gas_reserve_usd=0)
        assert [h.symbol for h in holdings] == ["EKUBO"]

    def test_missing_price(self):
        with pytest.raises(ValueError):
            build_holdings({"MYSTERY": 1.0}, {})


class TestInvestmentAmount:

    def test_percentage(self):
        assert resolve_investment_amount("50%", 800.0) == pytest.approx(400.0)
        assert resolve_investment_amount(" 100% ", 800.0) == pytest.approx(800.0)

    def test_percentage_capped_at_wallet(self):
        assert resolve_investment_amount("150%", 800.0) == pytest.approx(800.0)
        assert resolve_investment_amount("200%", 1000.0) == pytest.approx(1000.0)

    def test_amount_capped_at_wallet(self):
        assert resolve_investment_amount(1000, 800.0) == 800.0
        assert resolve_investment_amount("250", 800.0) == 250.0

    @pytest.mark.parametrize("value", [-5, "-10%", "abc", "x%", "nan", "inf", "nan%", "inf%", float("nan"), float("inf")])
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            resolve_investment_amount(value, 800.0)

    def test_scale_holdings(self):
        scaled = scale_holdings({"ETH": 600.0, "USDC": 200.0}, 800.0, 400.0)
        assert scaled == {"ETH": pytest.approx(300.0), "USDC": pytest.approx(100.0)}
        assert scale_holdings({"ETH": 0.0}, 0.0, 0.0) == {"ETH": 0.0}
