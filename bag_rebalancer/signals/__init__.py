"""Momentum & volatility signals."""

from bag_rebalancer.signals.engine import SignalEngine, TokenSignal, estimate_momentum

__all__ = ["SignalEngine", "TokenSignal", "estimate_momentum"]
