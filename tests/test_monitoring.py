"""
Tests for logging setup and the metrics collector.
"""

import json
import logging

from bag_rebalancer.monitoring.logger import StructuredFormatter, setup_logging
from bag_rebalancer.monitoring.metrics import MetricsCollector


def make_record(msg, **extra):
    record = logging.LogRecord("bag_rebalancer.test", logging.WARNING, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:

    def test_json_line_with_extra_fields(self):
        line = StructuredFormatter("json").format(make_record("stalled", n_swaps=3))
        data = json.loads(line)
        assert data["level"] == "WARNING"
        assert data["logger"] == "bag_rebalancer.test"
        assert data["message"] == "stalled"
        assert data["n_swaps"] == 3

    def test_text_line(self):
        line = StructuredFormatter("text").format(make_record("hello"))
        assert line.endswith(" - bag_rebalancer.test - WARNING - hello")


class TestSetupLogging:

    def test_idempotent_handlers(self, config, tmp_path):
        config.monitoring.log_dir = str(tmp_path / "logs")
        setup_logging(config)
        logger = setup_logging(config)
        assert len(logger.handlers) == 2
        assert (tmp_path / "logs" / "bag_rebalancer.log").exists()
        assert logger.level == logging.INFO
        assert not logger.propagate


class TestMetricsCollector:

    def test_counters_and_gauges(self, config):
        metrics = MetricsCollector(config)
        metrics.incr("planner_stalled")
        metrics.incr("planner_stalled")
        metrics.gauge("n_swaps", 4)
        metrics.gauge("n_swaps", 2)
        assert metrics.snapshot() == {"planner_stalled": 2, "n_swaps": 2}
        metrics.reset()
        assert metrics.snapshot() == {}

    def test_weight_sum_violation_counted(self, config):
        metrics = MetricsCollector(config)
        metrics.record_weight_sum_error(1e-9)
        metrics.record_weight_sum_error(0.01)
        snap = metrics.snapshot()
        assert snap["weight_sum_error"] == 0.01
        assert snap["weight_sum_violations"] == 1

    def test_disabled(self, config):
        config.monitoring.metrics_enabled = False
        metrics = MetricsCollector(config)
        metrics.incr("x")
        metrics.record_weight_sum_error(1.0)
        assert metrics.snapshot() == {}
