"""Risk profiles and weight distribution."""

from bag_rebalancer.risk.profiles import RiskProfile, PROFILE_PARAMETERS
from bag_rebalancer.risk.engine import DistributionEngine, AllocationTarget, TargetWeight

__all__ = ["RiskProfile", "PROFILE_PARAMETERS", "DistributionEngine", "AllocationTarget", "TargetWeight"]
