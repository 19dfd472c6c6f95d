"""
Swap data structures (SwapOrder, SwapPlan).
"""

from dataclasses import dataclass, field
from typing import Dict, List

from bag_rebalancer.core.exceptions import SwapPlanningStalled


@dataclass
class SwapOrder:
    """
    Instruction to convert a USD amount of one token into another.
    """

    sell: str
    buy: str
    amount_usd: float  # Always >= 0

    def to_dict(self) -> dict:
        return {"sell": self.sell, "buy": self.buy, "amount": self.amount_usd}


@dataclass
class SwapPlan:
    """
    Planner output.
    """

    swaps: List[SwapOrder] = field(default_factory=list)
    deltas: Dict[str, float] = field(default_factory=dict)  # target - current, before planning
    residual: Dict[str, float] = field(default_factory=dict)  # deltas left after planning
    iterations: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def stalled(self) -> bool:
        return bool(self.warnings)

    def raise_if_stalled(self):
        """Escalate a stalled plan for callers that treat it as fatal."""
        if self.warnings:
            raise SwapPlanningStalled("; ".join(self.warnings))
