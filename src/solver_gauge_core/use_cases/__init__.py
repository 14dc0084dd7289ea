"""
Use Cases Layer

Aggregates business logic and provides use cases called from the runner.
"""

from solver_gauge_core.use_cases.benchmark import (
    BenchmarkOrchestrator,
    BenchmarkRunState,
    RunSnapshot,
    build_iteration_result,
)
from solver_gauge_core.use_cases.polling import (
    CancellationToken,
    ResultPoller,
    is_still_solving,
)
from solver_gauge_core.use_cases.single_solve import (
    SingleSolveResult,
    cancel_solve,
    solve_once,
)

__all__ = [
    # benchmark
    "BenchmarkOrchestrator",
    "BenchmarkRunState",
    "RunSnapshot",
    "build_iteration_result",
    # polling
    "CancellationToken",
    "ResultPoller",
    "is_still_solving",
    # single solve
    "SingleSolveResult",
    "cancel_solve",
    "solve_once",
]
