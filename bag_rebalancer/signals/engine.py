"""
Signal Engine

Computes the latest-anchored EMA (momentum-adjusted price) and the
max-deviation volatility proxy per candidate token, and flags
stablecoins from the pair (volatility, price).
"""

from typing import Dict, List, Optional, Sequence
import logging
import numpy as np

from bag_rebalancer.core.config import Config
from bag_rebalancer.core.exceptions import InsufficientHistory
from bag_rebalancer.data.models import MarketToken
from bag_rebalancer.utils.math_helpers import latest_anchored_ema, max_deviation_pct


class TokenSignal:
    """Signal data for one token."""

    def __init__(self, symbol: str, ema: float, max_std_dev_pct: float):
        self.symbol = symbol
        self.ema = ema  # Momentum-adjusted price estimate
        self.max_std_dev_pct = max_std_dev_pct  # Max deviation from window mean (%)

    def __repr__(self) -> str:
        return f"TokenSignal({self.symbol!r}, ema={self.ema:.6g}, max_std_dev_pct={self.max_std_dev_pct:.4g})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, TokenSignal):
            return NotImplemented
        return (self.symbol, self.ema, self.max_std_dev_pct) == (other.symbol, other.ema, other.max_std_dev_pct)


def estimate_momentum(prices: Sequence[float], window: int = 168, symbol: str = "") -> TokenSignal:
    """
    Momentum and volatility for one price series.

    1. k = 2 / (n + 1), n = number of samples
    2. EMA seeded on the newest price, walked back to the oldest
    3. Keep the `window` most recently computed EMA values
    4. max_std_dev_pct = sqrt(max((ema_j - mean)^2)) / mean * 100

    Args:
        prices: Prices, oldest to newest
        window: EMA window size
        symbol: Token symbol (for the result and error messages)

    Returns:
        TokenSignal with the final EMA value

    Raises:
        InsufficientHistory: empty series
    """
    if len(prices) < 1:
        raise InsufficientHistory(symbol, len(prices))

    emas = latest_anchored_ema(np.asarray(prices, dtype=float))
    # Values computed last sit at the front of the aligned array
    recent = emas[:window]
    return TokenSignal(symbol=symbol, ema=float(emas[0]), max_std_dev_pct=max_deviation_pct(recent))


class SignalEngine:
    """
    Momentum signal generation and stablecoin detection.

    A token is treated as a stablecoin when BOTH hold:
    - max_std_dev_pct < stable_max_std_pct (2%)
    - stable_price_low < price < stable_price_high (0.93, 1.07)
    """

    def __init__(self, config: Config, logger: Optional[logging.Logger] = None):
        """
        Initialize signal engine.

        Args:
            config: Engine configuration
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def compute_signals(self, universe: Sequence[MarketToken]) -> Dict[str, TokenSignal]:
        """
        Compute signals for all tokens in universe.

        Any token without history aborts the whole computation.

        Args:
            universe: Curated candidate tokens

        Returns:
            Dict mapping symbol -> TokenSignal, in universe order
        """
        signals: Dict[str, TokenSignal] = {}
        window = self.config.signal.window

        for token in universe:
            try:
                signals[token.symbol] = estimate_momentum(token.price_history, window, token.symbol)
            except InsufficientHistory:
                self.logger.error(f"Cannot compute EMA for {token.symbol}: no price history")
                raise
            self.logger.debug(f"{signals[token.symbol]}")

        return signals

    def is_stablecoin(self, signal: TokenSignal, price: float) -> bool:
        """Low volatility AND priced near $1."""
        cfg = self.config.signal
        return signal.max_std_dev_pct < cfg.stable_max_std_pct and cfg.stable_price_low < price < cfg.stable_price_high

    def exclude_stablecoins(
        self,
        universe: Sequence[MarketToken],
        signals: Dict[str, TokenSignal],
    ) -> List[MarketToken]:
        """
        Drop detected stablecoins, preserving order.

        Args:
            universe: Candidate tokens
            signals: Signals for every candidate

        Returns:
            Non-stable tokens
        """
        kept: List[MarketToken] = []
        for token in universe:
            sig = signals[token.symbol]
            if self.is_stablecoin(sig, token.current_price):
                self.logger.info(
                    f"Excluding {token.symbol} as stablecoin "
                    f"(max dev {sig.max_std_dev_pct:.2f}%, price ${token.current_price:.4f})"
                )
                continue
            kept.append(token)
        return kept
