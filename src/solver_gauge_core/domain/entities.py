"""
Domain Entities

Defines the primary data structures used in a benchmark run.
"""

from dataclasses import dataclass, field
from enum import Enum

from solver_gauge_core.domain.constants import DEMO_DATASETS


class RunStatus(str, Enum):
    """Lifecycle of a benchmark run"""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    STOPPED = "stopped"
    FAILED = "failed"


@dataclass(frozen=True)
class BenchmarkConfig:
    """Parameters of one benchmark run, fixed once the run starts"""
    iteration_count: int
    demo_data_id: str

    def __post_init__(self):
        if isinstance(self.iteration_count, bool) or not isinstance(self.iteration_count, int):
            raise ValueError("iteration_count must be an integer")
        if self.iteration_count < 1:
            raise ValueError("iteration_count must be positive")
        if self.demo_data_id not in DEMO_DATASETS:
            raise ValueError(f"Unknown demo data: {self.demo_data_id}. Valid values: {DEMO_DATASETS}")


@dataclass(frozen=True)
class VehicleDetail:
    """Per-vehicle breakdown of a solution"""
    vehicle_id: str
    driving_time_seconds: float
    total_demand: float
    capacity: float
    visit_count: int


@dataclass(frozen=True)
class IterationResult:
    """Result of a single benchmark iteration"""
    index: int
    primary_metric: float        # Distance (km) derived from raw_metric
    raw_metric: float            # totalDrivingTimeSeconds reported by the solver
    elapsed_seconds: float
    score_label: str
    completed_at_epoch_millis: int
    vehicle_details: tuple[VehicleDetail, ...] = field(default_factory=tuple)
    vehicle_count: int = 0
    visit_count: int = 0
    enrichment_available: bool = False
    resolution: str = "direct"   # direct / polled

    def __post_init__(self):
        if self.index < 1:
            raise ValueError("index must be at least 1")
        if self.primary_metric < 0:
            raise ValueError("primary_metric must be non-negative")
        if self.elapsed_seconds < 0:
            raise ValueError("elapsed_seconds must be non-negative")
