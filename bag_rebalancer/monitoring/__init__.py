"""Monitoring: logging setup and run metrics."""

from bag_rebalancer.monitoring.metrics import MetricsCollector
from bag_rebalancer.monitoring.logger import setup_logging

__all__ = ["MetricsCollector", "setup_logging"]
