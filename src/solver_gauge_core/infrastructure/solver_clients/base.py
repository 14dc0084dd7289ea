"""
Solver client base class and retry mixin

Defines the abstract base class inherited by all solver clients, the
classification of solve responses, and the RetryMixin used for idempotent reads.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any

from solver_gauge_core.domain.exceptions import UnexpectedResponseShape
from solver_gauge_core.domain.value_objects import (
    DirectSolution,
    FullSolution,
    SolveHandle,
    SolveOutcome,
)

# Keys under which solver services return the job id of an asynchronous solve
JOB_ID_KEYS = ("schedule_id", "scheduleId", "jobId", "job_id")


def classify_solve_response(data: Any) -> SolveOutcome:
    """
    Resolve a solve response into a direct solution or a job handle.

    Args:
        data: Decoded JSON body of the solve request

    Returns:
        DirectSolution if the body carries a solution, SolveHandle if it carries a job id

    Raises:
        UnexpectedResponseShape: If the body carries neither
    """
    if isinstance(data, dict):
        solution = data.get("solution")
        if isinstance(solution, dict):
            return DirectSolution(solution=solution)
        for key in JOB_ID_KEYS:
            job_id = data.get(key)
            if job_id:
                return SolveHandle(job_id=str(job_id))
    raise UnexpectedResponseShape("Unexpected response format from solve request")


class RetryMixin:
    """Exponential backoff retry. Subclasses set self.max_retries."""

    max_retries: int = 3
    retry_delay_seconds: float = 1.0

    async def _with_retry(self, fn, retryable_exceptions=(Exception,)):
        """
        Await fn() with exponential backoff retry.

        Args:
            fn: Coroutine function to retry (a callable with no arguments)
            retryable_exceptions: Tuple of exception types eligible for retry

        Returns:
            The return value of await fn()

        Raises:
            ValueError: If max_retries is less than 1
            Exception: The last exception if max retries are exceeded
        """
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1.")

        last_exception: Exception | None = None
        for attempt in range(self.max_retries):
            try:
                return await fn()
            except retryable_exceptions as e:
                last_exception = e
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(self.retry_delay_seconds * 2 ** attempt)

        assert last_exception is not None
        raise last_exception


class SolverClient(ABC):
    """Abstract base class for vehicle-routing solver clients"""

    @abstractmethod
    async def load_demo_data(self, demo_data_id: str) -> FullSolution:
        """Fetch a named demo problem instance"""
        pass

    @abstractmethod
    async def submit(self, problem: FullSolution) -> SolveOutcome:
        """Submit a fresh-seed solve and classify the response"""
        pass

    @abstractmethod
    async def fetch_route_plan(self, job_id: str) -> FullSolution:
        """Query the current state of a solve job"""
        pass

    @abstractmethod
    async def fetch_enrichment(self, job_id: str) -> dict[str, Any]:
        """Fetch the road-network visualization payload of a finished job"""
        pass

    @abstractmethod
    async def start_solve(self, problem: FullSolution) -> str:
        """Start a regular (non-benchmark) solve and return its job id"""
        pass

    @abstractmethod
    async def cancel(self, job_id: str) -> None:
        """Terminate a running solve job"""
        pass

    async def aclose(self) -> None:
        """Release transport resources"""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
