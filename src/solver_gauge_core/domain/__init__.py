"""
Domain Layer

Defines constants, entities, value objects and exceptions that form the core of
the benchmark logic. Has no dependencies on external libraries.
"""

from solver_gauge_core.domain.constants import (
    DEMO_DATASETS,
    IDLE_SOLVER_STATUS,
    ITERATION_CHOICES,
)
from solver_gauge_core.domain.entities import (
    BenchmarkConfig,
    IterationResult,
    RunStatus,
    VehicleDetail,
)
from solver_gauge_core.domain.exceptions import (
    AlreadyRunning,
    DispatchFailed,
    EnrichmentUnavailable,
    PollFailed,
    SetupFailed,
    SolverGaugeError,
    UnexpectedResponseShape,
)
from solver_gauge_core.domain.value_objects import (
    ConsistencyAssessment,
    ConsistencyTier,
    DirectSolution,
    FullSolution,
    IterationDelta,
    ResolvedSolution,
    RunningStatistics,
    SolveHandle,
    SolveOutcome,
)

__all__ = [
    # constants
    "DEMO_DATASETS",
    "IDLE_SOLVER_STATUS",
    "ITERATION_CHOICES",
    # entities
    "BenchmarkConfig",
    "IterationResult",
    "RunStatus",
    "VehicleDetail",
    # exceptions
    "AlreadyRunning",
    "DispatchFailed",
    "EnrichmentUnavailable",
    "PollFailed",
    "SetupFailed",
    "SolverGaugeError",
    "UnexpectedResponseShape",
    # value objects
    "ConsistencyAssessment",
    "ConsistencyTier",
    "DirectSolution",
    "FullSolution",
    "IterationDelta",
    "ResolvedSolution",
    "RunningStatistics",
    "SolveHandle",
    "SolveOutcome",
]
