"""
Tests for harness_config.py
"""

import pytest

from solver_gauge_core.domain.entities import BenchmarkConfig
from solver_gauge_core.harness_config import (
    BenchmarkSettings,
    HarnessConfig,
    SolverServiceConfig,
    load_config,
)

ENV_KEYS = [
    "SOLVER_BASE_URL", "SOLVER_TIMEOUT_SECONDS", "SOLVER_MAX_RETRIES",
    "SOLVER_RETRY_DELAY_SECONDS", "BENCH_ITERATIONS", "BENCH_DEMO_DATA",
    "BENCH_POLL_INTERVAL_SECONDS", "BENCH_PAUSE_SECONDS", "BENCH_DISTANCE_FACTOR",
]


class TestSolverServiceConfig:
    """Tests for the SolverServiceConfig dataclass"""

    def test_defaults(self):
        config = SolverServiceConfig()
        assert config.base_url == "http://localhost:8080"
        assert config.timeout_seconds == 120
        assert config.max_retries == 3
        assert config.retry_delay_seconds == 1.0


class TestBenchmarkSettings:
    """Tests for the BenchmarkSettings dataclass"""

    def test_defaults(self):
        settings = BenchmarkSettings()
        assert settings.iteration_count == 5
        assert settings.demo_data_id == "SINGAPORE_WIDE"
        assert settings.poll_interval_seconds == 2.0
        assert settings.iteration_pause_seconds == 1.0
        assert settings.distance_per_driving_second == 0.02

    @pytest.mark.parametrize("count", [1, 4, 12])
    def test_rejects_count_outside_choices(self, count):
        with pytest.raises(ValueError, match="iteration_count must be one of"):
            BenchmarkSettings(iteration_count=count)

    def test_rejects_negative_poll_interval(self):
        with pytest.raises(ValueError, match="poll_interval_seconds"):
            BenchmarkSettings(poll_interval_seconds=-1)

    def test_rejects_negative_pause(self):
        with pytest.raises(ValueError, match="iteration_pause_seconds"):
            BenchmarkSettings(iteration_pause_seconds=-0.5)

    def test_rejects_zero_distance_factor(self):
        with pytest.raises(ValueError, match="distance_per_driving_second"):
            BenchmarkSettings(distance_per_driving_second=0)

    def test_zero_cadence_allowed(self):
        settings = BenchmarkSettings(poll_interval_seconds=0, iteration_pause_seconds=0)
        assert settings.poll_interval_seconds == 0

    def test_to_benchmark_config(self):
        config = BenchmarkSettings(iteration_count=7, demo_data_id="SINGAPORE_WEST").to_benchmark_config()
        assert config == BenchmarkConfig(iteration_count=7, demo_data_id="SINGAPORE_WEST")

    def test_to_benchmark_config_validates(self):
        with pytest.raises(ValueError, match="Unknown demo data"):
            BenchmarkSettings(demo_data_id="NOWHERE").to_benchmark_config()


class TestHarnessConfig:
    """Tests for the HarnessConfig dataclass"""

    def test_defaults(self):
        config = HarnessConfig()
        assert isinstance(config.service, SolverServiceConfig)
        assert isinstance(config.benchmark, BenchmarkSettings)

    def test_to_dict(self):
        d = HarnessConfig().to_dict()
        assert "harness_config" in d
        assert d["harness_config"]["service"]["base_url"] == "http://localhost:8080"
        assert d["harness_config"]["benchmark"]["iteration_count"] == 5

    def test_from_dict_with_key(self):
        data = {
            "harness_config": {
                "service": {"base_url": "http://solver:9090"},
                "benchmark": {"iteration_count": 10},
            }
        }
        config = HarnessConfig.from_dict(data)
        assert config.service.base_url == "http://solver:9090"
        assert config.benchmark.iteration_count == 10
        # Defaults are kept
        assert config.service.max_retries == 3
        assert config.benchmark.poll_interval_seconds == 2.0

    def test_from_dict_without_key(self):
        config = HarnessConfig.from_dict({"benchmark": {"demo_data_id": "SINGAPORE_EAST"}})
        assert config.benchmark.demo_data_id == "SINGAPORE_EAST"

    def test_from_dict_empty(self):
        config = HarnessConfig.from_dict({})
        assert config.service.timeout_seconds == 120
        assert config.benchmark.iteration_count == 5

    def test_roundtrip(self):
        original = HarnessConfig(benchmark=BenchmarkSettings(iteration_count=3, iteration_pause_seconds=0))
        restored = HarnessConfig.from_dict(original.to_dict())
        assert restored == original


class TestLoadConfig:
    """Tests for load_config (environment based)"""

    def test_defaults_without_env(self, monkeypatch):
        for key in ENV_KEYS:
            monkeypatch.delenv(key, raising=False)

        config = load_config()
        assert config == HarnessConfig()

    def test_custom_env_values(self, monkeypatch):
        monkeypatch.setenv("SOLVER_BASE_URL", "http://solver:8081")
        monkeypatch.setenv("SOLVER_TIMEOUT_SECONDS", "30")
        monkeypatch.setenv("SOLVER_MAX_RETRIES", "5")
        monkeypatch.setenv("SOLVER_RETRY_DELAY_SECONDS", "0.5")
        monkeypatch.setenv("BENCH_ITERATIONS", "10")
        monkeypatch.setenv("BENCH_DEMO_DATA", "SINGAPORE_CENTRAL")
        monkeypatch.setenv("BENCH_POLL_INTERVAL_SECONDS", "0.25")
        monkeypatch.setenv("BENCH_PAUSE_SECONDS", "0")
        monkeypatch.setenv("BENCH_DISTANCE_FACTOR", "0.015")

        config = load_config()
        assert config.service.base_url == "http://solver:8081"
        assert config.service.timeout_seconds == 30.0
        assert config.service.max_retries == 5
        assert config.service.retry_delay_seconds == 0.5
        assert config.benchmark.iteration_count == 10
        assert config.benchmark.demo_data_id == "SINGAPORE_CENTRAL"
        assert config.benchmark.poll_interval_seconds == 0.25
        assert config.benchmark.iteration_pause_seconds == 0.0
        assert config.benchmark.distance_per_driving_second == 0.015

    def test_invalid_int_env(self, monkeypatch):
        monkeypatch.setenv("BENCH_ITERATIONS", "five")
        with pytest.raises(ValueError, match="BENCH_ITERATIONS"):
            load_config()

    def test_iterations_env_outside_choices(self, monkeypatch):
        monkeypatch.setenv("BENCH_ITERATIONS", "4")
        with pytest.raises(ValueError, match="iteration_count must be one of"):
            load_config()

    def test_invalid_float_env(self, monkeypatch):
        monkeypatch.setenv("BENCH_DISTANCE_FACTOR", "fast")
        with pytest.raises(ValueError, match="BENCH_DISTANCE_FACTOR"):
            load_config()
