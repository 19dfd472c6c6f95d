"""
Configuration management for the rebalancing engine.

Every tunable threshold of the pipeline lives here: curator bounds,
momentum window and stablecoin heuristic, weight tolerance, planner
noise floor and safety margin, wallet gas reserve, logging.
Supports loading from YAML/dict and environment variable overrides.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Literal


@dataclass
class UniverseConfig:
    """Token universe curation parameters."""

    candidate_size: int = 15  # Top N by market cap before signal computation
    drop_suffix: str = "STRK"  # Reduced-list entries ending with this (but not equal) are dropped
    stable_denylist_fallback: bool = False  # Apply static stablecoin list when no reduced list
    market_cap_overrides: Dict[str, float] = field(default_factory=dict)  # symbol -> USD cap


@dataclass
class SignalConfig:
    """Momentum & volatility estimation parameters."""

    window: int = 168  # EMA window (7 days of hourly samples)
    stable_max_std_pct: float = 2.0  # Below this max deviation (%) a token may be a stablecoin
    stable_price_low: float = 0.93  # ...if also priced inside (low, high)
    stable_price_high: float = 1.07


@dataclass
class DistributionConfig:
    """Weight distribution parameters."""

    weight_tolerance: float = 1e-3  # |sum(weights) - 1| above this is flagged
    degenerate_policy: Literal["equal_weight", "raise"] = "equal_weight"


@dataclass
class PlannerConfig:
    """Swap planner parameters."""

    noise_floor_usd: float = 1.0  # Deltas within ±$1 are considered settled
    safety_margin_usd: float = 0.1  # Subtracted from every swap amount
    iteration_factor: int = 2  # Max iterations = factor × distinct tokens


@dataclass
class WalletConfig:
    """Holdings preparation parameters."""

    gas_token: str = "ETH"
    gas_reserve_usd: float = 2.0  # USD of gas token kept out of the rebalance


@dataclass
class MonitoringConfig:
    """Logging and metrics."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["text", "json"] = "text"
    log_dir: str = ""  # Empty = console only
    metrics_enabled: bool = True


def _build(dc_type, data):
    from dataclasses import is_dataclass, fields

    if not is_dataclass(dc_type):
        return data
    kwargs = {}
    for f in fields(dc_type):
        if f.name in data:
            val = data[f.name]
            if hasattr(f.type, "__dataclass_fields__") and isinstance(val, dict):
                kwargs[f.name] = _build(f.type, val)
            else:
                kwargs[f.name] = val
    return dc_type(**kwargs)


@dataclass
class Config:
    """
    Complete engine configuration.

    Load from YAML/environment variables.

    Environment variables (override config file):
    - BAG_LOG_LEVEL: DEBUG/INFO/WARNING/ERROR
    - BAG_LOG_FORMAT: "text" or "json"
    - BAG_NOISE_FLOOR_USD: planner noise floor
    - BAG_GAS_RESERVE_USD: USD of gas token withheld from rebalancing
    """

    universe: UniverseConfig = field(default_factory=UniverseConfig)
    signal: SignalConfig = field(default_factory=SignalConfig)
    distribution: DistributionConfig = field(default_factory=DistributionConfig)
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    wallet: WalletConfig = field(default_factory=WalletConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def __post_init__(self):
        """Load environment variable overrides."""
        if os.getenv("BAG_LOG_LEVEL"):
            self.monitoring.log_level = os.getenv("BAG_LOG_LEVEL", "INFO").upper()

        if os.getenv("BAG_LOG_FORMAT"):
            self.monitoring.log_format = os.getenv("BAG_LOG_FORMAT", "text").lower()

        if os.getenv("BAG_NOISE_FLOOR_USD"):
            self.planner.noise_floor_usd = float(os.getenv("BAG_NOISE_FLOOR_USD", "1.0"))

        if os.getenv("BAG_GAS_RESERVE_USD"):
            self.wallet.gas_reserve_usd = float(os.getenv("BAG_GAS_RESERVE_USD", "2.0"))

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load config from YAML file."""
        import yaml

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return _build(cls, data)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Load config from dictionary."""
        return _build(cls, data)

    def validate(self) -> list[str]:
        """
        Validate configuration parameters.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.universe.candidate_size < 1:
            errors.append("universe.candidate_size must be >= 1")

        if self.signal.window < 1:
            errors.append("signal.window must be >= 1")

        if not (self.signal.stable_price_low < 1.0 < self.signal.stable_price_high):
            errors.append("signal stablecoin price band must bracket 1.0")

        if not (0 < self.distribution.weight_tolerance < 0.1):
            errors.append("distribution.weight_tolerance should be in (0, 0.1)")

        if self.distribution.degenerate_policy not in ("equal_weight", "raise"):
            errors.append("distribution.degenerate_policy must be 'equal_weight' or 'raise'")

        if self.planner.noise_floor_usd < 0:
            errors.append("planner.noise_floor_usd must be >= 0")

        if self.planner.safety_margin_usd < 0:
            errors.append("planner.safety_margin_usd must be >= 0")

        if self.planner.iteration_factor < 1:
            errors.append("planner.iteration_factor must be >= 1")

        if self.wallet.gas_reserve_usd < 0:
            errors.append("wallet.gas_reserve_usd must be >= 0")

        if self.monitoring.log_format not in ("text", "json"):
            errors.append("monitoring.log_format must be 'text' or 'json'")

        return errors
