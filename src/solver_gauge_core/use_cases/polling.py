"""
Result Polling

Polls an asynchronous solve job until the solver stops, honouring a
cancellation token at every wait.
"""

import asyncio
import logging
import time
from typing import Callable

from solver_gauge_core.domain.constants import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    IDLE_SOLVER_STATUS,
)
from solver_gauge_core.domain.exceptions import EnrichmentUnavailable
from solver_gauge_core.domain.value_objects import FullSolution, ResolvedSolution
from solver_gauge_core.infrastructure.solver_clients.base import SolverClient

logger = logging.getLogger(__name__)


class CancellationToken:
    """Single cancellation signal shared by every wait of a run"""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self, timeout: float) -> bool:
        """
        Sleep for up to timeout seconds, waking early on cancellation.

        Returns:
            True if cancellation was requested, False if the timeout elapsed
        """
        if self._event.is_set():
            return True
        if timeout <= 0:
            await asyncio.sleep(0)
            return self._event.is_set()
        try:
            await asyncio.wait_for(self._event.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True


def is_still_solving(route_plan: FullSolution) -> bool:
    """A job is active while solverStatus is present and not the idle sentinel"""
    status = route_plan.get("solverStatus")
    return status is not None and status != IDLE_SOLVER_STATUS


class ResultPoller:
    """Polls a solve job on a fixed cadence until it finishes"""

    def __init__(
        self,
        client: SolverClient,
        token: CancellationToken,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ):
        self.client = client
        self.token = token
        self.interval_seconds = interval_seconds

    async def poll(
        self,
        job_id: str,
        on_tick: Callable[[float], None] | None = None,
        started_at: float | None = None,
    ) -> ResolvedSolution | None:
        """
        Wait for a job to finish

        Args:
            job_id: Job id returned by the solve request
            on_tick: Called with the elapsed seconds after each still-solving tick
            started_at: time.monotonic() reference for elapsed time (default: now)

        Returns:
            ResolvedSolution, or None if cancellation was requested

        Raises:
            PollFailed: If a status query fails
        """
        if started_at is None:
            started_at = time.monotonic()

        while True:
            if await self.token.wait(self.interval_seconds):
                logger.info("Polling of job %s cancelled", job_id)
                return None

            route_plan = await self.client.fetch_route_plan(job_id)
            if is_still_solving(route_plan):
                if on_tick is not None:
                    on_tick(time.monotonic() - started_at)
                continue

            enrichment = None
            try:
                enrichment = await self.client.fetch_enrichment(job_id)
            except EnrichmentUnavailable as e:
                logger.warning("Storing job %s without route visualization: %s", job_id, e)

            return ResolvedSolution(
                solution=route_plan,
                enrichment=enrichment,
                enrichment_available=enrichment is not None,
                resolution="polled",
            )
