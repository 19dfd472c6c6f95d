"""
Swap Planner

Greedy delta reduction: repeatedly pair the largest over-weight token
(sell) with the largest under-weight token (buy) until every delta is
inside the noise floor. Bounded by an explicit iteration cap.
"""

from typing import Dict, List, Mapping, Optional, Tuple
import logging

from bag_rebalancer.core.config import Config
from bag_rebalancer.execution.orders import SwapOrder, SwapPlan


def compute_deltas(current: Mapping[str, float], target: Mapping[str, float]) -> Dict[str, float]:
    """
    target - current over the union of tokens (missing side counts as 0).

    Order: current holdings first, then tokens only in the target.
    """
    tokens = list(current)
    tokens.extend(t for t in target if t not in current)
    return {t: float(target.get(t, 0.0)) - float(current.get(t, 0.0)) for t in tokens}


class SwapPlanner:
    """
    Delta-to-swap reduction.

    Each step:
    1. sell = most negative delta, buy = most positive delta
    2. swap = min(|sell delta|, buy delta)
    3. emit SwapOrder(sell, buy, max(0, swap - safety_margin))
    4. move both deltas toward zero by swap
    """

    def __init__(self, config: Config, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def plan(self, current: Mapping[str, float], target: Mapping[str, float]) -> SwapPlan:
        """
        Plan swaps from current to target holdings.

        Args:
            current: symbol -> current USD value
            target: symbol -> target USD value

        Returns:
            SwapPlan; never raises for unbalanced input, warnings are recorded instead
        """
        floor = self.config.planner.noise_floor_usd
        margin = self.config.planner.safety_margin_usd

        deltas = compute_deltas(current, target)
        work = dict(deltas)
        max_iterations = max(1, self.config.planner.iteration_factor * len(work))

        swaps: List[SwapOrder] = []
        warnings: List[str] = []
        iterations = 0

        while any(abs(d) > floor for d in work.values()):
            if iterations >= max_iterations:
                warnings.append(self._stalled(f"iteration cap {max_iterations} reached", work))
                break

            sell, buy = self._pick_pair(work)
            if sell is None or buy is None:
                warnings.append(self._stalled("no sell/buy pairing left", work))
                break

            swap = min(-work[sell], work[buy])
            swaps.append(SwapOrder(sell=sell, buy=buy, amount_usd=max(0.0, swap - margin)))
            work[sell] += swap
            work[buy] -= swap
            iterations += 1
            self.logger.debug(f"Swap {sell} -> {buy}: ${swap:,.2f}")

        self.logger.info(f"Planned {len(swaps)} swap(s) over {len(work)} token(s)")
        return SwapPlan(swaps=swaps, deltas=deltas, residual=work, iterations=iterations, warnings=warnings)

    def plan_swaps(self, current: Mapping[str, float], target: Mapping[str, float]) -> List[SwapOrder]:
        """Plan and return only the ordered swap list."""
        return self.plan(current, target).swaps

    @staticmethod
    def _pick_pair(work: Dict[str, float]) -> Tuple[Optional[str], Optional[str]]:
        # Strict comparisons keep the first token on ties
        sell: Optional[str] = None
        buy: Optional[str] = None
        for token, d in work.items():
            if d < 0 and (sell is None or d < work[sell]):
                sell = token
            elif d > 0 and (buy is None or d > work[buy]):
                buy = token
        return sell, buy

    def _stalled(self, reason: str, work: Dict[str, float]) -> str:
        floor = self.config.planner.noise_floor_usd
        open_deltas = {t: round(d, 2) for t, d in work.items() if abs(d) > floor}
        msg = f"Swap planning stopped: {reason}; unsettled deltas {open_deltas}"
        self.logger.warning(msg)
        return msg
