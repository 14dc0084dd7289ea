"""
Presenter

Callback interface through which the orchestrator reports progress and
results. The base class ignores every notification, so the orchestrator can
run headless; ConsolePresenter prints a report to stdout.
"""

from __future__ import annotations

from solver_gauge_core.consistency_calc import delta_vs_previous, format_driving_time
from solver_gauge_core.domain.entities import IterationResult
from solver_gauge_core.domain.value_objects import (
    ConsistencyAssessment,
    FullSolution,
    RunningStatistics,
)


class Presenter:
    """No-op presenter. Subclasses override the notifications they render."""

    def on_progress(self, iteration: int, total: int, message: str, percent: float) -> None:
        pass

    def on_iteration_complete(
        self,
        result: IterationResult,
        solution: FullSolution,
        statistics: RunningStatistics,
    ) -> None:
        pass

    def on_run_complete(
        self,
        statistics: RunningStatistics,
        assessment: ConsistencyAssessment,
    ) -> None:
        pass

    def on_run_failed(self, reason: str) -> None:
        pass


class ConsolePresenter(Presenter):
    """Prints benchmark progress in the style of the CLI runner"""

    def __init__(self) -> None:
        self._metrics: list[float] = []

    def on_progress(self, iteration: int, total: int, message: str, percent: float) -> None:
        print(f"[{iteration}/{total}] {percent:5.1f}% | {message}")

    def on_iteration_complete(self, result, solution, statistics) -> None:
        if result.index == 1:
            self._metrics = []
        self._metrics.append(result.primary_metric)
        vs_prev = delta_vs_previous(self._metrics, len(self._metrics))
        vs_prev_text = "First" if vs_prev is None else f"{vs_prev:+.1f}%"
        routes = "road routes" if result.enrichment_available else "straight lines"
        print(
            f"  Distance: {result.primary_metric:.1f}km | "
            f"Driving: {format_driving_time(result.raw_metric)} | "
            f"Score: {result.score_label} | "
            f"vs prev: {vs_prev_text} | "
            f"{result.elapsed_seconds:.1f}s ({result.resolution}, {routes})"
        )
        print(
            f"  Best: {statistics.best:.1f}km | Average: {statistics.mean:.1f}km | "
            f"Variance: {statistics.std_dev_percent:.1f}%"
        )

    def on_run_complete(self, statistics, assessment) -> None:
        print(f"\n=== {assessment.title} ===\n")
        print(f"  Best Result: {statistics.best:.1f}km")
        print(f"  Average:     {statistics.mean:.1f}km")
        print(f"  Worst:       {statistics.worst:.1f}km")
        print(f"  Variance:    {statistics.std_dev_percent:.1f}%")
        print(f"\n  {assessment.message}")
        print(f"  {'PRODUCTION READY' if assessment.production_ready else 'NEEDS CONFIGURATION'}")
        print()

    def on_run_failed(self, reason: str) -> None:
        print(f"ERROR: {reason}")
