"""
Iterative Benchmark

Runs repeated solves against the solver service, feeding each solution back in
as the next problem, and tracks how consistent the results are.
"""

import asyncio
import copy
import logging
import time
from dataclasses import dataclass, field

from solver_gauge_core.archive import ArchiveEntry, ResultArchive
from solver_gauge_core.consistency_calc import classify_consistency, compute_statistics
from solver_gauge_core.domain.constants import (
    DEFAULT_DISTANCE_PER_DRIVING_SECOND,
    DEFAULT_ITERATION_PAUSE_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
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
    PollFailed,
    SetupFailed,
)
from solver_gauge_core.domain.value_objects import (
    ConsistencyAssessment,
    DirectSolution,
    FullSolution,
    ResolvedSolution,
    RunningStatistics,
)
from solver_gauge_core.harness_config import BenchmarkSettings
from solver_gauge_core.infrastructure.solver_clients.base import SolverClient
from solver_gauge_core.presenter import Presenter
from solver_gauge_core.use_cases.polling import CancellationToken, ResultPoller

logger = logging.getLogger(__name__)


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def build_iteration_result(
    index: int,
    resolved: ResolvedSolution,
    elapsed_seconds: float,
    distance_per_driving_second: float = DEFAULT_DISTANCE_PER_DRIVING_SECOND,
    completed_at_epoch_millis: int | None = None,
) -> IterationResult:
    """
    Build the IterationResult of a finished solve.

    Args:
        index: 1-based iteration index
        resolved: Finished solution
        elapsed_seconds: Time from dispatch to resolution
        distance_per_driving_second: Conversion from driving seconds to km
        completed_at_epoch_millis: Completion timestamp (default: now)

    Returns:
        IterationResult
    """
    solution = resolved.solution
    vehicles = solution.get("vehicles") or []
    visits = solution.get("visits") or []
    raw_metric = solution.get("totalDrivingTimeSeconds") or 0

    vehicle_details = tuple(
        VehicleDetail(
            vehicle_id=str(v.get("id", "")),
            driving_time_seconds=v.get("totalDrivingTimeSeconds") or 0,
            total_demand=v.get("totalDemand") or 0,
            capacity=v.get("capacity") or 0,
            visit_count=len(v.get("visits") or []),
        )
        for v in vehicles
    )

    return IterationResult(
        index=index,
        primary_metric=raw_metric * distance_per_driving_second,
        raw_metric=raw_metric,
        elapsed_seconds=elapsed_seconds,
        score_label=str(solution.get("score", "")),
        completed_at_epoch_millis=(
            completed_at_epoch_millis if completed_at_epoch_millis is not None else _epoch_millis()
        ),
        vehicle_details=vehicle_details,
        vehicle_count=len(vehicles),
        visit_count=len(visits),
        enrichment_available=resolved.enrichment_available,
        resolution=resolved.resolution,
    )


@dataclass
class BenchmarkRunState:
    """Mutable state of the current (or last) run, owned by the orchestrator"""
    status: RunStatus = RunStatus.IDLE
    running: bool = False
    current_iteration: int = 0
    config: BenchmarkConfig | None = None
    archive: ResultArchive = field(default_factory=ResultArchive)
    statistics: RunningStatistics | None = None
    assessment: ConsistencyAssessment | None = None
    started_at_epoch_millis: int | None = None
    finished_at_epoch_millis: int | None = None
    failure: str | None = None
    failed_iteration: int | None = None


@dataclass(frozen=True)
class RunSnapshot:
    """Read-only view of a run for presenters and callers"""
    status: RunStatus
    running: bool
    current_iteration: int
    config: BenchmarkConfig | None
    entries: tuple[ArchiveEntry, ...]
    statistics: RunningStatistics | None
    assessment: ConsistencyAssessment | None
    started_at_epoch_millis: int | None
    finished_at_epoch_millis: int | None
    failure: str | None
    failed_iteration: int | None

    @property
    def results(self) -> tuple[IterationResult, ...]:
        return tuple(e.result for e in self.entries)

    @property
    def total_seconds(self) -> float | None:
        if self.started_at_epoch_millis is None or self.finished_at_epoch_millis is None:
            return None
        return (self.finished_at_epoch_millis - self.started_at_epoch_millis) / 1000


class BenchmarkOrchestrator:
    """
    Drives a multi-iteration benchmark run.

    Each iteration submits the current problem, resolves it either directly or
    by polling, archives the result and recomputes statistics. The solution of
    iteration i is the problem of iteration i + 1.
    """

    def __init__(
        self,
        client: SolverClient,
        presenter: Presenter | None = None,
        settings: BenchmarkSettings | None = None,
    ):
        """
        Args:
            client: Solver client
            presenter: Receives progress notifications (default: no-op)
            settings: Cadence and unit conversion (default: BenchmarkSettings())
        """
        self.client = client
        self.presenter = presenter or Presenter()
        self.settings = settings or BenchmarkSettings()
        self._state = BenchmarkRunState()
        self._token = CancellationToken()

    @property
    def status(self) -> RunStatus:
        return self._state.status

    @property
    def running(self) -> bool:
        return self._state.running

    def snapshot(self) -> RunSnapshot:
        s = self._state
        return RunSnapshot(
            status=s.status,
            running=s.running,
            current_iteration=s.current_iteration,
            config=s.config,
            entries=copy.deepcopy(s.archive.entries),
            statistics=s.statistics,
            assessment=s.assessment,
            started_at_epoch_millis=s.started_at_epoch_millis,
            finished_at_epoch_millis=s.finished_at_epoch_millis,
            failure=s.failure,
            failed_iteration=s.failed_iteration,
        )

    def stop(self) -> None:
        """Request the active run to stop. No effect when nothing is running."""
        if not self._state.running:
            return
        self._state.running = False
        self._token.cancel()
        logger.info("Benchmark stop requested at iteration %d", self._state.current_iteration)

    async def start(self, config: BenchmarkConfig) -> RunSnapshot:
        """
        Run a benchmark to completion, stop or failure.

        Args:
            config: Iteration count and demo data

        Returns:
            RunSnapshot of the finished run

        Raises:
            AlreadyRunning: If a run is still in progress
        """
        if self._state.status is RunStatus.RUNNING:
            raise AlreadyRunning("A benchmark run is already in progress")

        self._token = CancellationToken()
        self._state = BenchmarkRunState(
            status=RunStatus.RUNNING,
            running=True,
            config=config,
            started_at_epoch_millis=_epoch_millis(),
        )
        total = config.iteration_count
        logger.info(
            "Starting benchmark: %d iterations with %s", total, config.demo_data_id
        )
        self._notify("on_progress", 0, total, "Starting iterative test with fresh random seeds...", 0.0)

        try:
            try:
                problem = await self.client.load_demo_data(config.demo_data_id)
            except SetupFailed as e:
                self._fail(str(e), None)
                return self.snapshot()

            for index in range(1, total + 1):
                if not self._state.running:
                    break
                self._state.current_iteration = index
                self._notify(
                    "on_progress", index, total,
                    f"Running iteration {index}/{total} with fresh random seed...",
                    (index - 1) / total * 100,
                )

                started = time.monotonic()
                try:
                    resolved = await self._resolve(index, total, problem, started)
                except (DispatchFailed, PollFailed) as e:
                    self._fail(f"Iteration {index} failed: {e}", index)
                    return self.snapshot()

                if resolved is None or not self._state.running:
                    logger.info("Iteration %d cancelled; no result archived", index)
                    break

                archived = self._archive(index, resolved, time.monotonic() - started)
                problem = copy.deepcopy(archived.solution)
                self._notify(
                    "on_progress", index, total,
                    f"Completed iteration {index}/{total}",
                    index / total * 100,
                )

                if index < total and await self._token.wait(self.settings.iteration_pause_seconds):
                    break
        except asyncio.CancelledError:
            self._abort(RunStatus.STOPPED, None)
            raise
        except Exception as e:
            self._abort(RunStatus.FAILED, f"Benchmark aborted by an unexpected error: {e}")
            raise

        return self._finish(total)

    def _abort(self, status: RunStatus, reason: str | None) -> None:
        state = self._state
        state.running = False
        state.status = status
        state.failure = reason
        state.finished_at_epoch_millis = _epoch_millis()

    async def _resolve(
        self,
        index: int,
        total: int,
        problem: FullSolution,
        started: float,
    ) -> ResolvedSolution | None:
        outcome = await self.client.submit(problem)
        if isinstance(outcome, DirectSolution):
            logger.info("Iteration %d solved directly", index)
            return ResolvedSolution(solution=outcome.solution, resolution="direct")

        logger.info("Iteration %d solving asynchronously as job %s", index, outcome.job_id)

        def on_tick(elapsed: float) -> None:
            self._notify(
                "on_progress", index, total,
                f"Iteration {index} solving... ({elapsed:.0f}s)",
                ((index - 1) + 0.5) / total * 100,
            )

        poller = ResultPoller(self.client, self._token, self.settings.poll_interval_seconds)
        return await poller.poll(outcome.job_id, on_tick=on_tick, started_at=started)

    def _archive(self, index: int, resolved: ResolvedSolution, elapsed_seconds: float) -> ArchiveEntry:
        result = build_iteration_result(
            index,
            resolved,
            elapsed_seconds,
            distance_per_driving_second=self.settings.distance_per_driving_second,
        )
        state = self._state
        # The archive owns its payloads; callers only ever see copies
        entry = state.archive.append(
            result,
            copy.deepcopy(resolved.solution),
            copy.deepcopy(resolved.enrichment),
        )
        state.statistics = compute_statistics(state.archive.primary_metrics())
        logger.info(
            "Iteration %d completed: %.1fkm in %.1fs", index, result.primary_metric, elapsed_seconds
        )
        self._notify("on_iteration_complete", result, copy.deepcopy(entry.solution), state.statistics)
        return entry

    def _fail(self, reason: str, iteration: int | None) -> None:
        state = self._state
        state.running = False
        state.status = RunStatus.FAILED
        state.failure = reason
        state.failed_iteration = iteration
        state.finished_at_epoch_millis = _epoch_millis()
        logger.error("Benchmark failed: %s", reason)
        self._notify("on_run_failed", reason)

    def _finish(self, total: int) -> RunSnapshot:
        state = self._state
        state.finished_at_epoch_millis = _epoch_millis()

        if not state.running:
            state.status = RunStatus.STOPPED
            logger.info("Benchmark stopped after %d archived iterations", len(state.archive))
            self._notify(
                "on_progress", state.current_iteration, total,
                f"Benchmark stopped after {len(state.archive)} iterations",
                len(state.archive) / total * 100,
            )
            return self.snapshot()

        state.running = False
        state.status = RunStatus.COMPLETED
        state.assessment = classify_consistency(state.statistics.std_dev_percent)
        logger.info(
            "Benchmark completed: variance %.1f%% (%s)",
            state.statistics.std_dev_percent, state.assessment.tier.value,
        )
        self._notify("on_run_complete", state.statistics, state.assessment)
        self._notify(
            "on_progress", total, total,
            f"Test completed! Variance: {state.statistics.std_dev_percent:.1f}%",
            100.0,
        )
        return self.snapshot()

    def _notify(self, event: str, *args) -> None:
        try:
            getattr(self.presenter, event)(*args)
        except Exception:
            logger.exception("Presenter notification %s failed", event)
