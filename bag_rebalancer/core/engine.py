"""
Rebalance Engine

Wires the pipeline: Curator → Signals → Distribution (allocation),
then Planner (swaps). Holds configuration only; every call works on
the snapshot and holdings it is given.
"""

from typing import Mapping, Optional, Sequence, Tuple, Union
import logging

from bag_rebalancer.core.config import Config
from bag_rebalancer.core.exceptions import InsufficientHistory
from bag_rebalancer.data.models import MarketToken
from bag_rebalancer.data.universe import TokenCurator
from bag_rebalancer.execution.orders import SwapOrder, SwapPlan
from bag_rebalancer.execution.planner import SwapPlanner
from bag_rebalancer.monitoring.metrics import MetricsCollector
from bag_rebalancer.risk.engine import AllocationTarget, DistributionEngine
from bag_rebalancer.risk.profiles import RiskProfile
from bag_rebalancer.signals.engine import SignalEngine


class RebalanceEngine:
    """
    Entry point for callers.

    - compute_allocation(universe, reduced_list, profile, total_amount)
    - plan_swaps(current_holdings, target_allocation)
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        metrics: Optional[MetricsCollector] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize engine.

        Args:
            config: Engine configuration (defaults if omitted)
            metrics: Metrics sink (a fresh collector if omitted). Counters from
                separate compute_allocation/plan calls span the engine lifetime;
                rebalance() starts each run from an empty collector.
        """
        self.config = config or Config()
        self.logger = logger or logging.getLogger(__name__)
        self.metrics = metrics or MetricsCollector(self.config)

        self.curator = TokenCurator(self.config)
        self.signal_engine = SignalEngine(self.config)
        self.distribution_engine = DistributionEngine(self.config)
        self.planner = SwapPlanner(self.config)

    def compute_allocation(
        self,
        universe: Sequence[MarketToken],
        reduced_list: Optional[Sequence[str]],
        profile: Union[RiskProfile, str],
        total_amount: float,
    ) -> AllocationTarget:
        """
        Target allocation for a snapshot and risk profile.

        Flow:
        1. Curate candidates (reduced list filter, cap sort, top 15)
        2. Compute EMA / max deviation per candidate
        3. Exclude stablecoins
        4. Distribute weights for the profile

        Raises:
            InsufficientHistory: any candidate lacks price history (no partial result)
        """
        candidates = self.curator.curate(universe, reduced_list)
        self.metrics.gauge("candidates", len(candidates))

        try:
            signals = self.signal_engine.compute_signals(candidates)
        except InsufficientHistory:
            self.metrics.incr("insufficient_history")
            raise

        eligible = self.signal_engine.exclude_stablecoins(candidates, signals)
        self.metrics.gauge("stablecoins_excluded", len(candidates) - len(eligible))

        target = self.distribution_engine.compute_allocation(eligible, signals, profile, total_amount)
        if target:
            self.metrics.record_weight_sum_error(abs(target.weight_sum() - 1.0))
        if target.degenerate:
            self.metrics.incr("degenerate_universe")
        return target

    def plan(
        self,
        current_holdings: Mapping[str, float],
        target_allocation: Union[AllocationTarget, Mapping[str, float]],
    ) -> SwapPlan:
        """Full planner result (swaps, deltas, residual, warnings)."""
        target = target_allocation.amounts() if isinstance(target_allocation, AllocationTarget) else target_allocation
        result = self.planner.plan(current_holdings, target)
        self.metrics.gauge("n_swaps", len(result.swaps))
        if result.stalled:
            self.metrics.incr("planner_stalled")
        return result

    def plan_swaps(
        self,
        current_holdings: Mapping[str, float],
        target_allocation: Union[AllocationTarget, Mapping[str, float]],
    ) -> list[SwapOrder]:
        """Ordered swaps converging current holdings to the target."""
        return self.plan(current_holdings, target_allocation).swaps

    def rebalance(
        self,
        universe: Sequence[MarketToken],
        reduced_list: Optional[Sequence[str]],
        profile: Union[RiskProfile, str],
        current_holdings: Mapping[str, float],
        total_amount: Optional[float] = None,
    ) -> Tuple[AllocationTarget, SwapPlan]:
        """
        Allocation and swap plan in one call.

        Metrics are reset first, so the collector describes this run only.

        Args:
            total_amount: USD to allocate; defaults to the holdings' total value
        """
        self.metrics.reset()
        if total_amount is None:
            total_amount = sum(current_holdings.values())
        target = self.compute_allocation(universe, reduced_list, profile, total_amount)
        return target, self.plan(current_holdings, target)
