"""
Metrics Collector

Tracks per-run figures of the pipeline: universe sizes, stablecoins
excluded, weight-sum error, degenerate fallbacks, swap counts, stalls.
"""

from bag_rebalancer.core.config import Config


class MetricsCollector:
    """
    Collects run metrics.

    Counters accumulate across runs of one engine; gauges hold the last value.
    """

    def __init__(self, config: Config):
        self.config = config
        self.metrics = {}

    def incr(self, name: str, value: int = 1):
        if not self.config.monitoring.metrics_enabled:
            return
        self.metrics[name] = self.metrics.get(name, 0) + value

    def gauge(self, name: str, value):
        if not self.config.monitoring.metrics_enabled:
            return
        self.metrics[name] = value

    def record_weight_sum_error(self, error: float):
        self.gauge("weight_sum_error", error)
        if error > self.config.distribution.weight_tolerance:
            self.incr("weight_sum_violations")

    def snapshot(self) -> dict:
        return dict(self.metrics)

    def reset(self):
        self.metrics = {}
