"""
Pytest configuration and fixtures for the rebalancing engine tests

Provides token factories, price-series helpers and a clean configuration.
"""

import logging

import numpy as np
import pytest

from bag_rebalancer.core.config import Config
from bag_rebalancer.data.models import MarketToken


def ramp(start: float, end: float, n: int = 168) -> list:
    """Hourly price series moving linearly from start to end (oldest to newest)."""
    return [float(x) for x in np.linspace(start, end, n)]


def make_token(symbol: str, market_cap: float, price: float = 10.0, history=None, tvl: float = 0.0) -> MarketToken:
    """Volatile token by default: a 30% ramp ending at price."""
    if history is None:
        history = ramp(price * 0.7, price)
    return MarketToken(
        symbol=symbol,
        current_price=price,
        market_cap=market_cap,
        tvl=tvl,
        price_history=tuple(history),
    )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate tests from BAG_* variables and CLI logging setup."""
    for var in ("BAG_LOG_LEVEL", "BAG_LOG_FORMAT", "BAG_NOISE_FLOOR_USD", "BAG_GAS_RESERVE_USD"):
        monkeypatch.delenv(var, raising=False)
    yield
    pkg_logger = logging.getLogger("bag_rebalancer")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    pkg_logger.propagate = True
    pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def snapshot_records():
    """Raw market records in the nested API shape."""
    def record(symbol, cap, price, history, tvl=0.0):
        return {
            "symbol": symbol,
            "address": f"0x{abs(hash(symbol)) % (16 ** 8):08x}",
            "market": {"currentPrice": price, "marketCap": cap, "starknetTvl": tvl},
            "linePriceFeedInUsd": [{"date": f"t{i}", "value": v} for i, v in enumerate(history)],
        }

    return [
        record("ETH", 400e9, 3000.0, ramp(2500.0, 3000.0)),
        record("WBTC", 1.2e12, 60000.0, ramp(55000.0, 60000.0)),
        record("STRK", 2e9, 0.5, ramp(0.6, 0.5)),
        record("USDC", 30e9, 1.0, [1.0] * 168),
        record("LORDS", 0, 0.1, ramp(0.08, 0.1), tvl=5e6),
        record("xSTRK", 1e8, 0.52, ramp(0.6, 0.52)),
        record("EKUBO", 5e7, 4.0, ramp(3.0, 4.0)),
    ]
