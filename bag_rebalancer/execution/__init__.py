"""Swap Planner: delta computation and sell→buy pairing."""

from bag_rebalancer.execution.planner import SwapPlanner, compute_deltas
from bag_rebalancer.execution.orders import SwapOrder, SwapPlan

__all__ = ["SwapPlanner", "compute_deltas", "SwapOrder", "SwapPlan"]
