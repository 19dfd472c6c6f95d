"""Utilities: EMA and deviation math."""

from bag_rebalancer.utils.math_helpers import latest_anchored_ema, max_deviation_pct

__all__ = [
    "latest_anchored_ema",
    "max_deviation_pct",
]
