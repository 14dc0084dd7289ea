"""
Benchmark Harness Configuration

Manages loading from environment variables and default values.
"""

import os
from dataclasses import dataclass, field, asdict

from solver_gauge_core.domain.constants import (
    DEFAULT_DEMO_DATASET,
    DEFAULT_DISTANCE_PER_DRIVING_SECOND,
    DEFAULT_ITERATION_PAUSE_SECONDS,
    DEFAULT_ITERATIONS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    ITERATION_CHOICES,
)
from solver_gauge_core.domain.entities import BenchmarkConfig


def _env_int(key: str, default: int) -> int:
    """Convert an environment variable to int"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to an integer.")


def _env_float(key: str, default: float) -> float:
    """Convert an environment variable to float"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to a number.")


def _env_str(key: str, default: str) -> str:
    """Get an environment variable as a string"""
    return os.environ.get(key, default)


@dataclass
class SolverServiceConfig:
    """Connection settings for the remote solver service"""
    base_url: str = "http://localhost:8080"
    timeout_seconds: float = 120.0
    max_retries: int = 3
    retry_delay_seconds: float = 1.0


@dataclass
class BenchmarkSettings:
    """Iterative benchmark settings"""
    iteration_count: int = DEFAULT_ITERATIONS
    demo_data_id: str = DEFAULT_DEMO_DATASET
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    iteration_pause_seconds: float = DEFAULT_ITERATION_PAUSE_SECONDS
    distance_per_driving_second: float = DEFAULT_DISTANCE_PER_DRIVING_SECOND

    def __post_init__(self):
        if self.iteration_count not in ITERATION_CHOICES:
            raise ValueError(
                f"iteration_count must be one of {ITERATION_CHOICES}, got {self.iteration_count}"
            )
        if self.poll_interval_seconds < 0:
            raise ValueError("poll_interval_seconds must be non-negative")
        if self.iteration_pause_seconds < 0:
            raise ValueError("iteration_pause_seconds must be non-negative")
        if self.distance_per_driving_second <= 0:
            raise ValueError("distance_per_driving_second must be positive")

    def to_benchmark_config(self) -> BenchmarkConfig:
        """Build the per-run config from these settings"""
        return BenchmarkConfig(
            iteration_count=self.iteration_count,
            demo_data_id=self.demo_data_id,
        )


@dataclass
class HarnessConfig:
    """Overall benchmark harness configuration"""
    service: SolverServiceConfig = field(default_factory=SolverServiceConfig)
    benchmark: BenchmarkSettings = field(default_factory=BenchmarkSettings)

    def to_dict(self) -> dict:
        """Convert to dictionary format"""
        return {"harness_config": asdict(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "HarnessConfig":
        """Create from dictionary (handles presence/absence of harness_config key)"""
        config_data = data.get("harness_config", data)
        service = SolverServiceConfig(**config_data.get("service", {}))
        benchmark = BenchmarkSettings(**config_data.get("benchmark", {}))
        return cls(service=service, benchmark=benchmark)


def load_config() -> HarnessConfig:
    """
    Load configuration from environment variables

    Uses default values when environment variables are not set.

    Returns:
        HarnessConfig
    """
    service = SolverServiceConfig(
        base_url=_env_str("SOLVER_BASE_URL", "http://localhost:8080"),
        timeout_seconds=_env_float("SOLVER_TIMEOUT_SECONDS", 120.0),
        max_retries=_env_int("SOLVER_MAX_RETRIES", 3),
        retry_delay_seconds=_env_float("SOLVER_RETRY_DELAY_SECONDS", 1.0),
    )
    benchmark = BenchmarkSettings(
        iteration_count=_env_int("BENCH_ITERATIONS", DEFAULT_ITERATIONS),
        demo_data_id=_env_str("BENCH_DEMO_DATA", DEFAULT_DEMO_DATASET),
        poll_interval_seconds=_env_float("BENCH_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS),
        iteration_pause_seconds=_env_float("BENCH_PAUSE_SECONDS", DEFAULT_ITERATION_PAUSE_SECONDS),
        distance_per_driving_second=_env_float("BENCH_DISTANCE_FACTOR", DEFAULT_DISTANCE_PER_DRIVING_SECOND),
    )
    return HarnessConfig(service=service, benchmark=benchmark)
