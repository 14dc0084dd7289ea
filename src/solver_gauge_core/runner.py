"""
solver-gauge-core CLI Runner

Minimal CLI for running a consistency benchmark against a solver service.

Usage:
    python -m solver_gauge_core.runner --demo SINGAPORE_WIDE --iterations 5
    python -m solver_gauge_core.runner --base-url http://solver:8080 --iterations 10

Solve once without benchmarking:
    python -m solver_gauge_core.runner --demo SINGAPORE_EAST --single
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from datetime import datetime
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

from solver_gauge_core.archive import ResultArchive
from solver_gauge_core.consistency_calc import format_driving_time
from solver_gauge_core.domain.constants import DEMO_DATASETS, ITERATION_CHOICES
from solver_gauge_core.domain.entities import BenchmarkConfig, RunStatus
from solver_gauge_core.domain.exceptions import SolverGaugeError
from solver_gauge_core.harness_config import HarnessConfig, load_config
from solver_gauge_core.infrastructure.solver_clients import create_client
from solver_gauge_core.presenter import ConsolePresenter
from solver_gauge_core.use_cases.benchmark import BenchmarkOrchestrator, RunSnapshot
from solver_gauge_core.use_cases.polling import CancellationToken
from solver_gauge_core.use_cases.single_solve import solve_once


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="solver-gauge-core: Measure run-to-run consistency of a vehicle-routing solver",
    )
    parser.add_argument(
        "--demo",
        choices=DEMO_DATASETS,
        default=None,
        help="Demo data to solve (default: BENCH_DEMO_DATA from .env)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        choices=ITERATION_CHOICES,
        default=None,
        help="Number of iterations (default: BENCH_ITERATIONS from .env)",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Solver service URL (default: SOLVER_BASE_URL from .env)",
    )
    parser.add_argument(
        "--single",
        action="store_true",
        help="Solve the demo data once instead of running the benchmark",
    )
    parser.add_argument(
        "--output-dir",
        default="results",
        help="Directory for output CSV files (default: results)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    return parser.parse_args(argv)


def build_summary(snapshot: RunSnapshot, run_id: str) -> pd.DataFrame:
    """One-row summary of a finished run."""
    stats = snapshot.statistics
    assessment = snapshot.assessment
    config = snapshot.config
    row = {
        "run_id": run_id,
        "demo_data_id": config.demo_data_id if config else None,
        "iteration_count": config.iteration_count if config else None,
        "completed_iterations": len(snapshot.entries),
        "status": snapshot.status.value,
        "best_km": stats.best if stats else None,
        "worst_km": stats.worst if stats else None,
        "mean_km": stats.mean if stats else None,
        "std_dev_km": stats.std_dev if stats else None,
        "std_dev_percent": stats.std_dev_percent if stats else None,
        "consistency_tier": assessment.tier.value if assessment else None,
        "production_ready": assessment.production_ready if assessment else None,
        "total_seconds": snapshot.total_seconds,
        "failure": snapshot.failure,
    }
    return pd.DataFrame([row])


def save_results(snapshot: RunSnapshot, run_id: str, output_dir: Path) -> tuple[Path, Path]:
    """Save per-iteration and summary CSVs."""
    output_dir.mkdir(parents=True, exist_ok=True)
    iterations_path = output_dir / f"iterations_{run_id}.csv"
    summary_path = output_dir / f"summary_{run_id}.csv"

    archive = ResultArchive()
    for entry in snapshot.entries:
        archive.append(entry.result, entry.solution, entry.enrichment)
    archive.to_dataframe().to_csv(iterations_path, index=False)
    build_summary(snapshot, run_id).to_csv(summary_path, index=False)
    return iterations_path, summary_path


def _install_stop_handler(stop) -> None:
    loop = asyncio.get_running_loop()
    # add_signal_handler is unavailable on Windows event loops
    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGINT, stop)


async def run_benchmark(config: HarnessConfig, benchmark: BenchmarkConfig, base_url: str | None) -> RunSnapshot:
    async with create_client(config, base_url=base_url) as client:
        orchestrator = BenchmarkOrchestrator(
            client,
            presenter=ConsolePresenter(),
            settings=config.benchmark,
        )
        _install_stop_handler(orchestrator.stop)
        return await orchestrator.start(benchmark)


async def run_single(config: HarnessConfig, demo_data_id: str, base_url: str | None) -> int:
    async with create_client(config, base_url=base_url) as client:
        token = CancellationToken()
        _install_stop_handler(token.cancel)
        try:
            problem = await client.load_demo_data(demo_data_id)
            result = await solve_once(
                client,
                problem,
                token=token,
                poll_interval_seconds=config.benchmark.poll_interval_seconds,
                on_tick=lambda elapsed: print(f"  Solving... ({elapsed:.0f}s)"),
            )
        except SolverGaugeError as e:
            print(f"ERROR: {e}")
            return 1

    if result.cancelled:
        print(f"Solve {result.job_id} stopped by user")
        return 0

    solution = result.resolved.solution
    driving = solution.get("totalDrivingTimeSeconds") or 0
    print(f"\n=== Solve {result.job_id} ===\n")
    print(f"  Score:         {solution.get('score')}")
    print(f"  Driving time:  {format_driving_time(driving)}")
    print(f"  Distance:      {driving * config.benchmark.distance_per_driving_second:.1f}km")
    print(f"  Vehicles:      {len(solution.get('vehicles') or [])}")
    print(f"  Visits:        {len(solution.get('visits') or [])}")
    print(f"  Road routes:   {'yes' if result.resolved.enrichment_available else 'no'}")
    print(f"  Elapsed:       {result.elapsed_seconds:.1f}s")
    print()
    return 0


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Load config
    try:
        config = load_config()
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(2)
    if args.demo:
        config.benchmark.demo_data_id = args.demo
    if args.iterations:
        config.benchmark.iteration_count = args.iterations

    if args.single:
        print(f"\n=== Single solve: {config.benchmark.demo_data_id} ===\n")
        sys.exit(asyncio.run(run_single(config, config.benchmark.demo_data_id, args.base_url)))

    try:
        benchmark = config.benchmark.to_benchmark_config()
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(2)

    run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    print("\n=== Consistency benchmark ===\n")
    print(f"  Solver:     {args.base_url or config.service.base_url}")
    print(f"  Demo data:  {benchmark.demo_data_id}")
    print(f"  Iterations: {benchmark.iteration_count}")
    print(f"  Run ID:     {run_id}")
    print()

    snapshot = asyncio.run(run_benchmark(config, benchmark, args.base_url))

    if snapshot.status is RunStatus.STOPPED:
        print(f"\n=== Stopped after {len(snapshot.entries)} iterations ===\n")

    iterations_path, summary_path = save_results(snapshot, run_id, Path(args.output_dir))
    print("=== Output ===\n")
    print(f"  Iterations: {iterations_path}")
    print(f"  Summary:    {summary_path}")
    print()

    if snapshot.status is RunStatus.FAILED:
        sys.exit(1)


if __name__ == "__main__":
    main()
