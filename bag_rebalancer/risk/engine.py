"""
Distribution Engine

Calibrates a power-law exponent from the market-cap spread of the
selected tokens and turns momentum-adjusted market caps into a
normalized USD allocation for a risk profile.
"""

from typing import Dict, Iterator, List, Optional, Sequence, Union
import logging
import math
import pandas as pd

from bag_rebalancer.core.config import Config
from bag_rebalancer.core.exceptions import DegenerateUniverse
from bag_rebalancer.data.models import MarketToken
from bag_rebalancer.risk.profiles import RiskProfile, get_parameters, resolve_profile
from bag_rebalancer.signals.engine import TokenSignal


class TargetWeight:
    """Target allocation for one token."""

    def __init__(self, symbol: str, weight: float, amount_usd: float):
        self.symbol = symbol
        self.weight = weight  # Fraction of total (0-1)
        self.amount_usd = amount_usd  # weight × total amount
        self.percentage = weight * 100.0

    def __repr__(self) -> str:
        return f"TargetWeight({self.symbol!r}, {self.percentage:.2f}%, ${self.amount_usd:,.2f})"


class AllocationTarget:
    """
    Ordered symbol -> TargetWeight mapping for one profile and amount.

    Iteration follows market-cap order of the selected tokens.
    """

    def __init__(
        self,
        weights: Dict[str, TargetWeight],
        profile: RiskProfile,
        total_amount: float,
        degenerate: bool = False,
        warnings: Optional[List[str]] = None,
    ):
        self.weights = weights
        self.profile = profile
        self.total_amount = total_amount
        self.degenerate = degenerate  # Equal-weight fallback was used
        self.warnings = warnings or []

    def __getitem__(self, symbol: str) -> TargetWeight:
        return self.weights[symbol]

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.weights

    def __iter__(self) -> Iterator[str]:
        return iter(self.weights)

    def __len__(self) -> int:
        return len(self.weights)

    def items(self):
        return self.weights.items()

    def symbols(self) -> List[str]:
        return list(self.weights)

    def amounts(self) -> Dict[str, float]:
        """symbol -> target USD, the planner's input."""
        return {s: tw.amount_usd for s, tw in self.weights.items()}

    def weight_sum(self) -> float:
        return math.fsum(tw.weight for tw in self.weights.values())

    def to_frame(self) -> pd.DataFrame:
        """Breakdown table (symbol, percentage, amount_usd)."""
        rows = [
            {"symbol": s, "percentage": tw.percentage, "amount_usd": tw.amount_usd}
            for s, tw in self.weights.items()
        ]
        return pd.DataFrame(rows, columns=["symbol", "percentage", "amount_usd"])


class DistributionEngine:
    """
    Weight distribution per risk profile.

    1. Keep the profile's token_count largest tokens (order preserved)
    2. alpha = alpha_k × ln(min_share_k) / ln(cap_smallest / cap_largest)
    3. raw_i = (cap_i × ema_i / price_i) ^ alpha
    4. w_i = raw_i / Σ raw
    5. amount_i = w_i × total
    """

    def __init__(self, config: Config, logger: Optional[logging.Logger] = None):
        """
        Initialize distribution engine.

        Args:
            config: Engine configuration
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def compute_allocation(
        self,
        universe: Sequence[MarketToken],
        signals: Dict[str, TokenSignal],
        profile: Union[RiskProfile, str],
        total_amount: float,
    ) -> AllocationTarget:
        """
        Compute the target allocation.

        Args:
            universe: Non-stable candidates, market-cap descending
            signals: TokenSignal for every token in universe
            profile: Risk profile (enum or name)
            total_amount: USD to allocate

        Returns:
            AllocationTarget (empty when universe is empty)
        """
        if not math.isfinite(total_amount) or total_amount < 0:
            raise ValueError(f"total_amount must be a finite value >= 0, got {total_amount}")

        profile = resolve_profile(profile)
        params = get_parameters(profile)
        selected = list(universe[: params.token_count])
        self.logger.info(f"{profile.value}: allocating ${total_amount:,.2f} across {[t.symbol for t in selected]}")

        if not selected:
            self.logger.warning("No tokens left to allocate")
            return AllocationTarget({}, profile, total_amount)

        alpha = self.calibrate_alpha(selected, params.alpha_k, params.min_share_k)
        fractions = None
        if alpha is not None:
            fractions = self._power_law_fractions(selected, signals, alpha)

        warnings: List[str] = []
        degenerate = fractions is None
        if degenerate:
            msg = (
                f"Degenerate universe ({len(selected)} token(s), "
                f"caps {[t.effective_market_cap for t in selected]}): using equal weights"
            )
            if self.config.distribution.degenerate_policy == "raise":
                raise DegenerateUniverse(msg)
            self.logger.warning(msg)
            warnings.append(msg)
            fractions = {t.symbol: 1.0 / len(selected) for t in selected}

        weights = {
            s: TargetWeight(symbol=s, weight=w, amount_usd=w * total_amount)
            for s, w in fractions.items()
        }
        target = AllocationTarget(weights, profile, total_amount, degenerate=degenerate, warnings=warnings)

        err = abs(target.weight_sum() - 1.0)
        if err > self.config.distribution.weight_tolerance:
            msg = f"Sum of weights is {target.weight_sum():.6f} (off by {err:.2e})"
            self.logger.warning(msg)
            target.warnings.append(msg)

        for s, tw in weights.items():
            self.logger.debug(f"  {s}: {tw.percentage:.2f}% (${tw.amount_usd:,.2f})")
        return target

    def calibrate_alpha(self, selected: Sequence[MarketToken], alpha_k: float, min_share_k: float) -> Optional[float]:
        """
        Power-law exponent giving the smallest cap ~min_share_k of the largest.

        Returns:
            alpha, or None when the cap spread cannot calibrate it
        """
        if len(selected) < 2:
            return None
        cap_largest = selected[0].effective_market_cap
        cap_smallest = selected[-1].effective_market_cap
        if cap_largest <= 0 or cap_smallest <= 0:
            return None
        denom = math.log(cap_smallest / cap_largest)
        if denom == 0:
            return None
        alpha = alpha_k * math.log(min_share_k) / denom
        self.logger.debug(f"alpha={alpha:.4f} (cap ratio {cap_smallest / cap_largest:.3e})")
        return alpha

    def _power_law_fractions(
        self,
        selected: Sequence[MarketToken],
        signals: Dict[str, TokenSignal],
        alpha: float,
    ) -> Optional[Dict[str, float]]:
        raw: Dict[str, float] = {}
        for token in selected:
            price = token.current_price
            if price <= 0:
                self.logger.warning(f"Non-positive price for {token.symbol}: {price}")
                return None
            # EMA(cap) ~ cap × EMA(price) / price
            momentum_cap = token.effective_market_cap * signals[token.symbol].ema / price
            if momentum_cap < 0:
                return None
            raw[token.symbol] = momentum_cap ** alpha

        total = math.fsum(raw.values())
        if not math.isfinite(total) or total <= 0:
            return None
        return {s: v / total for s, v in raw.items()}
