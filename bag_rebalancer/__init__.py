"""
Balanced Bag Rebalancer

Risk-profiled crypto portfolio allocation and swap planning from a
static market snapshot and a single holdings snapshot.

Components:
- Token Curator: Reduced-list filtering, variant removal, market-cap ranking
- Signal Engine: Latest-anchored EMA and max-deviation volatility, stablecoin detection
- Distribution Engine: Power-law weights calibrated per risk profile
- Swap Planner: Greedy sell→buy pairing of target/current deltas
- Rebalance Engine: Pipeline facade (compute_allocation, plan_swaps)
- Monitoring: Logging setup and run metrics
"""

__version__ = "0.1.0"

from bag_rebalancer.core.config import Config
from bag_rebalancer.core.engine import RebalanceEngine
from bag_rebalancer.risk.profiles import RiskProfile

__all__ = [
    "Config",
    "RebalanceEngine",
    "RiskProfile",
]
