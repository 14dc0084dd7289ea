"""
Single Solve

Runs one regular solve outside the benchmark: start, poll until the solver
stops, and terminate the remote job when cancelled.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from solver_gauge_core.domain.constants import DEFAULT_POLL_INTERVAL_SECONDS
from solver_gauge_core.domain.value_objects import FullSolution, ResolvedSolution
from solver_gauge_core.infrastructure.solver_clients.base import SolverClient
from solver_gauge_core.use_cases.polling import CancellationToken, ResultPoller

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SingleSolveResult:
    """Outcome of a single solve"""
    job_id: str
    resolved: ResolvedSolution | None
    elapsed_seconds: float

    @property
    def cancelled(self) -> bool:
        return self.resolved is None


async def solve_once(
    client: SolverClient,
    problem: FullSolution,
    token: CancellationToken | None = None,
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    on_tick: Callable[[float], None] | None = None,
) -> SingleSolveResult:
    """
    Solve a problem once and wait for the result.

    If the token is cancelled while polling, the remote job is terminated.

    Args:
        client: Solver client
        problem: Route plan to solve
        token: Cancellation token (default: never cancelled)
        poll_interval_seconds: Polling cadence
        on_tick: Progress callback receiving elapsed seconds

    Returns:
        SingleSolveResult (resolved is None when cancelled)

    Raises:
        DispatchFailed: If the solve cannot be started or cancelled
        PollFailed: If a status query fails
    """
    token = token or CancellationToken()
    started = time.monotonic()

    job_id = await client.start_solve(problem)
    logger.info("Solve started with job id %s", job_id)

    poller = ResultPoller(client, token, poll_interval_seconds)
    resolved = await poller.poll(job_id, on_tick=on_tick, started_at=started)
    if resolved is None:
        await cancel_solve(client, job_id)

    return SingleSolveResult(
        job_id=job_id,
        resolved=resolved,
        elapsed_seconds=time.monotonic() - started,
    )


async def cancel_solve(client: SolverClient, job_id: str) -> None:
    """Terminate a remote solve job"""
    logger.info("Stopping solve job %s", job_id)
    await client.cancel(job_id)
