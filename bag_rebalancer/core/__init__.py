"""Core system components: config, errors, engine facade."""

from bag_rebalancer.core.config import Config
from bag_rebalancer.core.engine import RebalanceEngine

__all__ = [
    "Config",
    "RebalanceEngine",
]
