"""
Risk profiles: concentration (alpha_k), minimum share and breadth.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from bag_rebalancer.core.exceptions import UnknownProfile


class RiskProfile(str, Enum):
    SECURE = "Secure"
    BALANCED = "Balanced"
    OFFENSIVE = "Offensive"


@dataclass(frozen=True)
class ProfileParameters:
    alpha_k: float  # Scales the calibrated power-law exponent
    min_share_k: float  # Target share of the smallest-cap token vs the largest
    token_count: int  # Tokens kept in the allocation


PROFILE_PARAMETERS = {
    RiskProfile.SECURE: ProfileParameters(alpha_k=0.80, min_share_k=0.03, token_count=5),
    RiskProfile.BALANCED: ProfileParameters(alpha_k=0.75, min_share_k=0.03, token_count=10),
    RiskProfile.OFFENSIVE: ProfileParameters(alpha_k=0.50, min_share_k=0.03, token_count=10),
}


def resolve_profile(profile: Union[RiskProfile, str]) -> RiskProfile:
    """Accept the enum or its name, case-insensitively."""
    if isinstance(profile, RiskProfile):
        return profile
    name = str(profile).strip().lower()
    for p in RiskProfile:
        if p.value.lower() == name:
            return p
    valid = ", ".join(p.value for p in RiskProfile)
    raise UnknownProfile(f"Unknown risk profile {profile!r} (expected one of: {valid})")


def get_parameters(profile: Union[RiskProfile, str]) -> ProfileParameters:
    return PROFILE_PARAMETERS[resolve_profile(profile)]
