"""
Tests for configuration loading, validation and environment overrides.
"""

from bag_rebalancer.core.config import Config, PlannerConfig


class TestConfig:

    def test_defaults(self, config):
        assert config.universe.candidate_size == 15
        assert config.signal.window == 168
        assert config.planner.noise_floor_usd == 1.0
        assert config.planner.safety_margin_usd == 0.1
        assert config.wallet.gas_reserve_usd == 2.0
        assert config.validate() == []

    def test_from_dict_nested(self):
        config = Config.from_dict({
            "planner": {"noise_floor_usd": 5.0},
            "universe": {"market_cap_overrides": {"WBTC": 1.2e12}},
        })
        assert isinstance(config.planner, PlannerConfig)
        assert config.planner.noise_floor_usd == 5.0
        assert config.planner.safety_margin_usd == 0.1
        assert config.universe.market_cap_overrides == {"WBTC": 1.2e12}

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "signal:\n"
            "  window: 24\n"
            "distribution:\n"
            "  degenerate_policy: raise\n"
        )
        config = Config.from_yaml(str(path))
        assert config.signal.window == 24
        assert config.distribution.degenerate_policy == "raise"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert Config.from_yaml(str(path)).validate() == []

    def test_validate_reports_every_error(self):
        config = Config.from_dict({
            "universe": {"candidate_size": 0},
            "signal": {"stable_price_low": 1.01},
            "planner": {"noise_floor_usd": -1.0, "iteration_factor": 0},
            "monitoring": {"log_format": "xml"},
        })
        errors = config.validate()
        assert len(errors) == 5
        assert any("candidate_size" in e for e in errors)
        assert any("iteration_factor" in e for e in errors)

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("BAG_LOG_LEVEL", "debug")
        monkeypatch.setenv("BAG_NOISE_FLOOR_USD", "0.5")
        monkeypatch.setenv("BAG_GAS_RESERVE_USD", "0")
        config = Config.from_dict({"planner": {"noise_floor_usd": 3.0}})
        assert config.monitoring.log_level == "DEBUG"
        assert config.planner.noise_floor_usd == 0.5
        assert config.wallet.gas_reserve_usd == 0.0
