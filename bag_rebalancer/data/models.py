"""
Market and wallet value objects (MarketToken, Holding).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


def clean_symbol(raw: Any) -> str:
    """Strip whitespace and control characters from a ticker ("\\b8" -> "8")."""
    if raw is None:
        return ""
    return "".join(ch for ch in str(raw) if ch.isprintable()).strip()


def _as_float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


def _parse_history(feed: Any) -> Tuple[float, ...]:
    # Feed entries are either {date, value} points or bare numbers
    if not feed:
        return ()
    out = []
    for point in feed:
        if isinstance(point, dict):
            val = point.get("value")
            if val is None:
                continue
            out.append(float(val))
        else:
            out.append(float(point))
    return tuple(out)


@dataclass(frozen=True)
class MarketToken:
    """
    One tradable asset as known to the engine.

    market_cap may be reported as zero by the data source; tvl is then
    used as the ranking/weighting capitalization (see effective_market_cap).
    """

    symbol: str
    current_price: float
    market_cap: float = 0.0
    tvl: float = 0.0
    price_history: Tuple[float, ...] = field(default_factory=tuple)  # oldest -> newest
    address: Optional[str] = None

    @property
    def effective_market_cap(self) -> float:
        """Market cap, or TVL when market cap is zero."""
        return self.market_cap if self.market_cap != 0 else self.tvl

    @classmethod
    def from_record(cls, record: Dict[str, Any], symbol: Optional[str] = None) -> "MarketToken":
        """
        Build a token from a raw market-data record.

        Accepts the nested shape
            {symbol, address, market: {currentPrice, marketCap, starknetTvl|tvl},
             linePriceFeedInUsd: [{date, value}, ...]}
        and the flat shape
            {symbol, currentPrice, marketCap, tvl, linePriceFeedInUsd|priceHistory}.

        Args:
            record: Raw record
            symbol: Symbol to use when the record has none (symbol-keyed snapshots)
        """
        market = record.get("market")
        if not isinstance(market, dict):
            market = record

        tvl = market.get("starknetTvl")
        if tvl is None:
            tvl = market.get("tvl")

        feed = record.get("linePriceFeedInUsd")
        if feed is None:
            feed = record.get("priceHistory")

        return cls(
            symbol=clean_symbol(record.get("symbol") or symbol),
            current_price=_as_float(market.get("currentPrice")),
            market_cap=_as_float(market.get("marketCap")),
            tvl=_as_float(tvl),
            price_history=_parse_history(feed),
            address=record.get("address"),
        )

    def with_market_cap(self, market_cap: float) -> "MarketToken":
        """Copy with an overridden market cap."""
        return MarketToken(
            symbol=self.symbol,
            current_price=self.current_price,
            market_cap=float(market_cap),
            tvl=self.tvl,
            price_history=self.price_history,
            address=self.address,
        )


@dataclass(frozen=True)
class Holding:
    """One currently-held, nonzero-balance token."""

    symbol: str
    quantity: float
    price: float
    total_usd: float
